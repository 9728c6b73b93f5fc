"""
Bookkeeping shared between the optimizer and the
extension points.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import time

import numpy

from spatialbnb.common import (minimize,
                               inf,
                               EndState)
from spatialbnb.convergence_checker import ConvergenceChecker

class IncumbentTracker(object):
    """Holds the best known feasible solution.

    The value is in minimization form and never increases.
    It changes only through :func:`update`, which sets the
    value and the point together.

    Attributes
    ----------
    value : float
        The incumbent objective (+inf until a feasible point
        is found).
    point : numpy.ndarray or None
        The incumbent point.
    node_id : int or None
        The id of the node that produced the incumbent.
    update_count : int
        The number of times the incumbent improved.
    """
    __slots__ = ("value",
                 "point",
                 "node_id",
                 "update_count",
                 "_checker")

    def __init__(self, convergence_checker=None):
        if convergence_checker is None:
            convergence_checker = ConvergenceChecker()
        self._checker = convergence_checker
        self.value = inf
        self.point = None
        self.node_id = None
        self.update_count = 0

    @property
    def is_finite(self):
        return self.value < inf

    def update(self, value, point, node_id=None):
        """Replaces the incumbent when `value` improves on
        it. Returns True when the incumbent changed."""
        if not self._checker.objective_improved(value, self.value):
            return False
        self.value = value
        self.point = None if (point is None) else \
            numpy.array(point, dtype=float)
        self.node_id = node_id
        self.update_count += 1
        return True

class SearchState(object):
    """The optimizer state handed to every extension point.

    Extension points may read everything here, but only the
    optimizer mutates it.

    Attributes
    ----------
    config : :class:`Configuration <spatialbnb.configuration.Configuration>`
        The options used for the search.
    convergence_checker : :class:`ConvergenceChecker <spatialbnb.convergence_checker.ConvergenceChecker>`
        Used for all gap and pruning comparisons.
    incumbent : :class:`IncumbentTracker`
        The best known feasible solution.
    sense : int
        The objective sense of the problem. Values on nodes
        and in this object are in minimization form, so
        multiplying by the sense gives the problem's own
        value.
    root_box : :class:`Box <spatialbnb.box.Box>`
        The box of the root node.
    auxiliary_count : int
        The number of trailing auxiliary coordinates.
    global_lower_bound : float
        A lower bound on the optimal value over the root
        box. Non-decreasing across iterations.
    worst_terminal_bound : float
        The smallest lower bound of any node that left the
        search without proving infeasibility (+inf if none).
    iteration_count : int
        The number of nodes popped from the node store.
    node_count : int
        The number of nodes created, including the root.
    store_size : int
        The number of nodes in the node store.
    end_state : :class:`EndState <spatialbnb.common.EndState>`
        The search state.
    start_time : float
        The time the search started.
    interrupted : bool
        Set when a signal requested that the search stop.
    """

    def __init__(self,
                 config,
                 root_box,
                 sense=minimize,
                 auxiliary_count=0,
                 clock=time.time):
        self.config = config
        self.convergence_checker = ConvergenceChecker(
            absolute_tolerance=config.absolute_tolerance,
            relative_tolerance=config.relative_tolerance)
        self.incumbent = IncumbentTracker(self.convergence_checker)
        self.sense = sense
        self.root_box = root_box
        self.auxiliary_count = auxiliary_count
        self.global_lower_bound = -inf
        self.worst_terminal_bound = inf
        self.iteration_count = 0
        self.node_count = 0
        self.store_size = 0
        self.end_state = EndState.running
        self.clock = clock
        self.start_time = clock()
        self.interrupted = False

    @property
    def user_dimension(self):
        """The number of user decision variables (the root
        box dimension minus the auxiliary coordinates)."""
        return len(self.root_box) - self.auxiliary_count

    @property
    def incumbent_value(self):
        return self.incumbent.value

    @property
    def incumbent_point(self):
        return self.incumbent.point

    @property
    def absolute_tolerance(self):
        return self.convergence_checker.absolute_tolerance

    @property
    def relative_tolerance(self):
        return self.convergence_checker.relative_tolerance

    def elapsed_time(self):
        return self.clock() - self.start_time

    def absolute_gap(self):
        return self.convergence_checker.compute_absolute_gap(
            self.global_lower_bound,
            self.incumbent.value)

    def relative_gap(self):
        return self.convergence_checker.compute_relative_gap(
            self.global_lower_bound,
            self.incumbent.value)

    def to_user_objective(self, value):
        """Converts a minimization-form value to the
        problem's own sense."""
        if value is None:
            return None
        return self.sense * value

    def user_solution(self, point):
        """Returns the user coordinates of a full point."""
        if point is None:
            return None
        return numpy.array(point[:self.user_dimension], dtype=float)
