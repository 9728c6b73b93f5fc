# configure a very basic logger for the module
def _configLogging():
    import logging
    logger = logging.getLogger('spatialbnb')
    logger.setLevel(logging.WARNING)
    formatter = logging.Formatter(
        '%(levelname)s(%(name)s): %(message)s')
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
_configLogging()
del _configLogging

from spatialbnb.__about__ import __version__
from spatialbnb.configuration import (Configuration,
                                      ConfigurationError)
from spatialbnb.common import (minimize,
                               maximize,
                               inf,
                               nan,
                               QueueStrategy,
                               Feasibility,
                               EndState,
                               SolutionStatus)
from spatialbnb.box import Box
from spatialbnb.node import Node
from spatialbnb.priority_queue import (INodeStore,
                                       NodeStoreFactory,
                                       register_store_type)
from spatialbnb.problem import (Problem,
                                QCQPProblem)
from spatialbnb.relaxations import (BoundResult,
                                    QuadraticForm)
from spatialbnb.extensions import (ExtensionPoints,
                                   LocalSearchExtensions,
                                   AlphaBBExtensions)
from spatialbnb.bisection import QuasiconvexBisection
from spatialbnb.state import (IncumbentTracker,
                              SearchState)
from spatialbnb.solver_results import SolverResults
from spatialbnb.solver import (GlobalOptimizer,
                               solve)
