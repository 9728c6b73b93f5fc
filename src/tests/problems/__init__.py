from .double_well import DoubleWell
from .infeasible import (InfeasibleMin,
                         InfeasibleMax)
from .trig import Trig
from .qcqp import (create_qcqp,
                   qcqp_optimal_points)
from .ratio import Ratio
