"""
Bisection search for quasiconvex programs expressed through
the extension points.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import logging

import numpy

from spatialbnb.common import (minimize,
                               Feasibility)
from spatialbnb.box import Box
from spatialbnb.extensions import ExtensionPoints
from spatialbnb.local_solver import (LocalSolver,
                                     optimal,
                                     feasible_point)
from spatialbnb.relaxations import BoundResult

logger = logging.getLogger("spatialbnb")

class QuasiconvexBisection(ExtensionPoints):
    """Minimizes a quasiconvex objective by bisection on a
    threshold `t`, reusing the optimizer loop through the
    repeat mechanism.

    The root box holds the user variables followed by one
    auxiliary coordinate whose bounds bracket the optimal
    value. For each pass over the node, the threshold is
    fixed at the midpoint `t_mid` of its interval and the
    sublevel problem `min_x g(x, t_mid)` is solved locally,
    where `g(x, t) <= 0` if and only if `f(x) <= t` (see
    :func:`Problem.sublevel_function
    <spatialbnb.problem.Problem.sublevel_function>`). A
    feasible outcome keeps the lower half of the threshold
    interval and offers the witness point as an incumbent;
    an infeasible outcome keeps the upper half. The node is
    repeated until the threshold interval is narrower than
    the tolerance.

    When the local solve is inconclusive, the node is split
    on the threshold coordinate so that both halves stay in
    the search.

    Parameters
    ----------
    problem : :class:`Problem <spatialbnb.problem.Problem>`
        A minimization problem implementing
        `sublevel_function`.
    threshold_tolerance : float, optional
        The threshold interval width below which the node
        is no longer repeated. Defaults to the
        `absolute_tolerance` option.
    method : str, optional
        The scipy method used for the sublevel
        problems. (default: "SLSQP")
    """
    auxiliary_count = 1

    def __init__(self, problem, threshold_tolerance=None, method="SLSQP"):
        super(QuasiconvexBisection, self).__init__(problem)
        if problem.sense() != minimize:
            raise ValueError("Bisection search requires a "
                             "minimization problem")
        self.threshold_tolerance = threshold_tolerance
        self.method = method

    def _tolerance(self, state):
        if self.threshold_tolerance is not None:
            return self.threshold_tolerance
        return state.config.absolute_tolerance

    def _user_box(self, box):
        return Box(box.lower[:-1], box.upper[:-1])

    def preprocess(self, node, state):
        return True

    def lower_bound(self, node, state):
        # the threshold interval always brackets the optimal
        # value over the user box
        return BoundResult(Feasibility.feasible,
                           objective=node.box.lower[-1],
                           solution=node.box.midpoint())

    def upper_bound(self, node, state):
        box = node.box
        index = len(box) - 1
        t_mid = float(box.lower[index] + 0.5*box.width(index))
        user_box = self._user_box(box)
        problem = self.problem
        feasibility_tolerance = state.config.feasibility_tolerance
        solver = LocalSolver(
            method=self.method,
            maxiter=state.config.local_solver_maxiter,
            feasibility_tolerance=feasibility_tolerance)
        if problem.constraint_count() > 0:
            constraints = problem.constraints
        else:
            constraints = None
        result = solver.solve(
            lambda x: problem.sublevel_function(x, t_mid),
            user_box,
            constraints=constraints)
        if (result.x is not None) and \
           (result.primal_status == feasible_point) and \
           (result.objective <= feasibility_tolerance):
            node.state = Feasibility.feasible
            x = result.x
            value = float(problem.objective(x))
            point = numpy.append(x, min(max(value, box.lower[index]),
                                        box.upper[index]))
            return BoundResult(Feasibility.feasible,
                               objective=value,
                               solution=point)
        if (result.termination_status == optimal) and \
           (result.x is not None) and \
           (result.objective > feasibility_tolerance):
            node.state = Feasibility.infeasible
            return BoundResult.infeasible()
        logger.debug("Sublevel solve at t=%s was inconclusive "
                     "on node %s (%s)"
                     % (t_mid, node.id, result.termination_status))
        node.state = Feasibility.solver_failure
        return BoundResult.solver_failure()

    def postprocess(self, node, state):
        box = node.box
        index = len(box) - 1
        t_mid = float(box.lower[index] + 0.5*box.width(index))
        if node.state == Feasibility.feasible:
            node.box = box.with_bounds(index, upper=t_mid)
        elif node.state == Feasibility.infeasible:
            node.box = box.with_bounds(index, lower=t_mid)
        return True

    def repeat_check(self, node, state):
        if node.state == Feasibility.solver_failure:
            return False
        return node.box.width(len(node.box) - 1) > \
            self._tolerance(state)

    def branch_select(self, node, state):
        if node.state == Feasibility.solver_failure:
            index = len(node.box) - 1
            if node.box.width(index) > self._tolerance(state):
                return index
        return None
