"""
The extension points called by the optimizer for each
node, along with implementations built on the default
bounding procedures.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import logging

import numpy

from spatialbnb.common import (minimize,
                               Feasibility,
                               EndState)
from spatialbnb.local_solver import (LocalSolver,
                                     classify_result)
from spatialbnb.relaxations import (BoundResult,
                                    alpha_shift,
                                    interval_feasible,
                                    interval_lower_bound,
                                    interval_objective_bounds,
                                    midpoint_upper_bound,
                                    local_upper_bound)

logger = logging.getLogger("spatialbnb")

__all__ = ("BoundResult",
           "ExtensionPoints",
           "LocalSearchExtensions",
           "AlphaBBExtensions")

class ExtensionPoints(object):
    """The set of hooks called by the optimizer while
    processing a node. Every hook has a default, so a
    subclass may override any subset of them.

    All hooks receive the node being processed and the
    :class:`SearchState <spatialbnb.state.SearchState>`.
    Objective values exchanged with the optimizer are in
    minimization form. Hooks may modify the node they are
    given, but no other node.

    Parameters
    ----------
    problem : :class:`Problem <spatialbnb.problem.Problem>`, optional
        The problem evaluated by the default bounding
        procedures. Subclasses that override all bounding
        hooks do not need one.

    Attributes
    ----------
    auxiliary_count : int
        The number of trailing box coordinates that are
        auxiliary (e.g., epigraph) variables rather than
        user decision variables. They are excluded from the
        default branch mask and from reported solutions.
    """
    auxiliary_count = 0

    def __init__(self, problem=None):
        self.problem = problem

    def _require_problem(self):
        if self.problem is None:
            raise NotImplementedError(
                "%s does not define a problem; the default "
                "bounding procedures require one"
                % (type(self).__name__))
        return self.problem

    def sense(self):
        """Returns the objective sense. Uses the problem
        sense when a problem is available."""
        if self.problem is not None:
            return self.problem.sense()
        return minimize

    #
    # Per-node pipeline
    #

    def preprocess(self, node, state):
        """Returns False when the node can be discarded as
        infeasible. The default checks the interval
        extension of each constraint."""
        problem = self._require_problem()
        return interval_feasible(problem,
                                 node.box,
                                 state.config.feasibility_tolerance)

    def lower_bound(self, node, state):
        """Returns a :class:`BoundResult
        <spatialbnb.relaxations.BoundResult>` whose
        objective never exceeds the optimal value over the
        node box. The default uses the natural interval
        extension of the objective."""
        return interval_lower_bound(self._require_problem(),
                                    node.box)

    def upper_bound(self, node, state):
        """Returns a :class:`BoundResult
        <spatialbnb.relaxations.BoundResult>` holding a
        feasible point of the original problem and its true
        objective. The default evaluates the box
        midpoint."""
        return midpoint_upper_bound(self._require_problem(),
                                    node.box,
                                    state.config.feasibility_tolerance)

    def postprocess(self, node, state):
        """Called after upper bounding. May tighten the node
        box. Returns False when the node can be discarded as
        infeasible."""
        return True

    def convergence_check(self, node, state):
        """Returns True when the node needs no further
        processing. The default checks the node's own gap
        against the optimality tolerances."""
        return state.convergence_checker.objective_is_optimal(
            node.upper_objective,
            node.lower_objective)

    def repeat_check(self, node, state):
        """Returns True to re-enqueue the node instead of
        branching on it."""
        return False

    def branch_select(self, node, state):
        """Returns the index of the coordinate to split, or
        None to accept the node as a leaf.

        The default selects the coordinate of largest width
        relative to the root box among the coordinates
        enabled by the node's branch mask whose width is at
        least the `minimum_box_width` option. Ties go to the
        smallest index."""
        widths = node.box.width()
        scaled = node.box.scaled_width(state.root_box.width())
        eligible = numpy.array(node.branch_mask, dtype=bool) & \
            (widths >= state.config.minimum_box_width) & \
            (widths > 0)
        if not eligible.any():
            return None
        scaled = numpy.where(eligible, scaled, -numpy.inf)
        return int(numpy.argmax(scaled))

    def branch_fraction(self, node, index, state):
        """Returns the fraction of the width of coordinate
        `index` at which the node box is split."""
        return state.config.branch_fraction

    def termination_check(self, state):
        """Returns an :class:`EndState
        <spatialbnb.common.EndState>` when the search should
        stop, or None to continue. The default checks the
        global gap, then the iteration, node, and time
        limits, then whether a signal interrupted the
        search."""
        result = state.convergence_checker.check_termination_criteria(
            state.global_lower_bound,
            state.incumbent.value)
        if result is not None:
            return result
        config = state.config
        if (config.iteration_limit is not None) and \
           (state.iteration_count >= config.iteration_limit):
            return EndState.iteration_limit
        if (config.node_limit is not None) and \
           (state.node_count >= config.node_limit):
            return EndState.node_limit
        if (config.time_limit is not None) and \
           (state.elapsed_time() >= config.time_limit):
            return EndState.time_limit
        if state.interrupted:
            return EndState.interrupted
        return None

    #
    # Notifications
    #

    def notify_solve_begins(self, state):
        """Called once the root node has been created and
        before the first iteration."""
        pass

    def notify_new_incumbent(self, node, state):
        """Called when the node in hand improves the
        incumbent."""
        pass

    def notify_iteration_finished(self, state):
        """Called at the end of every iteration, after the
        global bound has been updated."""
        pass

    def notify_solve_finished(self, state, results):
        """Called with the fully populated :class:`SolverResults
        <spatialbnb.solver_results.SolverResults>` before
        they are returned."""
        pass

class LocalSearchExtensions(ExtensionPoints):
    """Extension points that upper bound each node with a
    local solve of the original problem, started from the
    node's relaxation point. The box midpoint is used when
    the local solve fails to produce a feasible point."""

    def __init__(self, problem, method="SLSQP"):
        super(LocalSearchExtensions, self).__init__(problem)
        self.method = method

    def local_solver(self, state):
        return LocalSolver(
            method=self.method,
            maxiter=state.config.local_solver_maxiter,
            feasibility_tolerance=state.config.feasibility_tolerance)

    def upper_bound(self, node, state):
        result = local_upper_bound(self.problem,
                                   node.box,
                                   self.local_solver(state),
                                   x0=node.lower_solution)
        if result.feasibility != Feasibility.feasible:
            midpoint = midpoint_upper_bound(
                self.problem,
                node.box,
                state.config.feasibility_tolerance)
            if midpoint.is_feasible:
                return midpoint
        return result

class AlphaBBExtensions(LocalSearchExtensions):
    """Extension points for a :class:`QCQPProblem
    <spatialbnb.problem.QCQPProblem>` that lower bound each
    node by minimizing the alpha-shifted convex
    underestimator of the objective subject to the
    alpha-shifted constraints. The result is combined with
    the interval bound, which is also used when the convex
    solve fails."""

    def lower_bound(self, node, state):
        problem = self.problem
        box = node.box
        interval_bound = interval_objective_bounds(problem, box).lo
        objective, _ = alpha_shift(
            problem.objective_form.scaled(problem.sense()),
            box)
        constraints = [alpha_shift(form, box)[0]
                       for form in problem.constraint_forms]
        if len(constraints):
            g = lambda x: numpy.array([form(x) for form in constraints])
            g_jac = lambda x: numpy.array([form.gradient(x)
                                           for form in constraints])
        else:
            g = None
            g_jac = None
        result = self.local_solver(state).solve(
            objective,
            box,
            jac=objective.gradient,
            constraints=g,
            constraints_jac=g_jac)
        feasibility = classify_result(result, require_optimal=True)
        if feasibility == Feasibility.infeasible:
            return BoundResult.infeasible()
        if feasibility == Feasibility.solver_failure:
            logger.debug("Convex relaxation solve failed on node "
                         "%s (%s). Using the interval bound."
                         % (node.id, result.termination_status))
            return BoundResult(Feasibility.feasible,
                               objective=interval_bound,
                               solution=box.midpoint())
        return BoundResult(Feasibility.feasible,
                           objective=max(result.objective,
                                         interval_bound),
                           solution=result.x)
