import itertools

import pytest
import numpy

from spatialbnb.common import (minimize,
                               maximize,
                               inf,
                               Feasibility,
                               EndState)
from spatialbnb.box import Box
from spatialbnb.node import Node
from spatialbnb.configuration import Configuration
from spatialbnb.state import SearchState
from spatialbnb.problem import (Problem,
                                QCQPProblem)
from spatialbnb.relaxations import QuadraticForm
from spatialbnb.local_solver import (LocalSolveResult,
                                     numerical_error)
from spatialbnb.extensions import (ExtensionPoints,
                                   LocalSearchExtensions,
                                   AlphaBBExtensions)

class _Ring(Problem):
    """min x + y s.t. 1 <= x^2 + y^2 <= 4"""
    def sense(self):
        return minimize
    def objective(self, x):
        return x[0] + x[1]
    def constraint_count(self):
        return 2
    def constraints(self, x):
        r = x[0]*x[0] + x[1]*x[1]
        return [1 - r, r - 4]

def _state(root_box, **kwds):
    config = Configuration(use_environment=False, **kwds)
    return SearchState(config, root_box)

def _qcqp():
    return QCQPProblem(QuadraticForm([[1, -2], [-2, 1]]),
                       [QuadraticForm(numpy.eye(2), d=-8)])

class TestExtensionPoints(object):

    def test_no_problem(self):
        ext = ExtensionPoints()
        box = Box([0], [1])
        node = Node(box)
        state = _state(box)
        assert ext.sense() == minimize
        with pytest.raises(NotImplementedError):
            ext.preprocess(node, state)
        with pytest.raises(NotImplementedError):
            ext.lower_bound(node, state)
        with pytest.raises(NotImplementedError):
            ext.upper_bound(node, state)
        assert ext.postprocess(node, state)
        assert not ext.repeat_check(node, state)
        ext.notify_solve_begins(state)
        ext.notify_new_incumbent(node, state)
        ext.notify_iteration_finished(state)
        ext.notify_solve_finished(state, None)

    def test_defaults(self):
        problem = _Ring()
        ext = ExtensionPoints(problem)
        assert ext.auxiliary_count == 0
        box = Box([-2, -2], [2, 2])
        state = _state(box)
        node = Node(box)
        assert ext.preprocess(node, state)
        # strictly inside the inner disk
        assert not ext.preprocess(Node(Box([-0.5, -0.5], [0.5, 0.5])),
                                  state)
        r = ext.lower_bound(node, state)
        assert r.is_feasible
        assert r.objective <= -4
        # the midpoint (0, 0) violates the first constraint
        r = ext.upper_bound(node, state)
        assert r.feasibility == Feasibility.infeasible
        r = ext.upper_bound(Node(Box([0.5, 0.5], [1.5, 1.5])), state)
        assert r.is_feasible
        assert r.objective == 2

    def test_sense(self):
        ext = ExtensionPoints(_qcqp())
        assert ext.sense() == minimize
        problem = QCQPProblem(QuadraticForm(numpy.eye(1)),
                              sense=maximize)
        assert ExtensionPoints(problem).sense() == maximize

    def test_convergence_check(self):
        box = Box([0], [1])
        ext = ExtensionPoints()
        state = _state(box, absolute_tolerance=0.1,
                       relative_tolerance=None)
        node = Node(box)
        assert not ext.convergence_check(node, state)
        node.lower_objective = 0.0
        node.upper_objective = 0.2
        assert not ext.convergence_check(node, state)
        node.upper_objective = 0.05
        assert ext.convergence_check(node, state)

    def test_branch_select(self):
        ext = ExtensionPoints()
        root = Box([0, 0, 0], [2, 4, 4])
        state = _state(root)
        # widths relative to the root are equal, so the
        # tie goes to the smallest index
        assert ext.branch_select(Node(root), state) == 0
        box = Box([0, 0, 0], [1, 4, 3])
        assert ext.branch_select(Node(box), state) == 1
        node = Node(box, branch_mask=[True, False, True])
        assert ext.branch_select(node, state) == 2
        node = Node(box, branch_mask=[False, False, False])
        assert ext.branch_select(node, state) is None
        box = Box([0, 0, 1], [1e-10, 0, 1])
        assert ext.branch_select(Node(box), state) is None
        state = _state(root, minimum_box_width=1.5)
        box = Box([0, 0, 0], [1, 1, 2])
        assert ext.branch_select(Node(box), state) == 2
        assert ext.branch_select(Node(Box([0, 0, 0], [1, 1, 1])),
                                 state) is None

    def test_branch_fraction(self):
        ext = ExtensionPoints()
        box = Box([0], [1])
        state = _state(box, branch_fraction=0.25)
        assert ext.branch_fraction(Node(box), 0, state) == 0.25

    def test_termination_check(self):
        ext = ExtensionPoints()
        box = Box([0], [1])
        state = _state(box,
                       absolute_tolerance=0.1,
                       relative_tolerance=None,
                       iteration_limit=5,
                       node_limit=10,
                       time_limit=100)
        assert ext.termination_check(state) is None
        state.interrupted = True
        assert ext.termination_check(state) == EndState.interrupted
        state.start_time -= 200
        assert ext.termination_check(state) == EndState.time_limit
        state.node_count = 10
        assert ext.termination_check(state) == EndState.node_limit
        state.iteration_count = 5
        assert ext.termination_check(state) == EndState.iteration_limit
        state.global_lower_bound = 1.0
        state.incumbent.update(1.05, [0.5])
        assert ext.termination_check(state) == EndState.optimal

    def test_time_limit_zero(self):
        ext = ExtensionPoints()
        box = Box([0], [1])
        state = _state(box, time_limit=0)
        assert ext.termination_check(state) == EndState.time_limit

class TestLocalSearchExtensions(object):

    def test_upper_bound(self):
        ext = LocalSearchExtensions(_Ring())
        box = Box([-2, -2], [2, 2])
        state = _state(box)
        node = Node(box)
        node.lower_solution = numpy.array([-1.0, -0.5])
        r = ext.upper_bound(node, state)
        assert r.is_feasible
        assert r.objective == pytest.approx(-2*numpy.sqrt(2), abs=1e-4)
        assert _Ring().constraints(r.solution)[1] <= 1e-6

    def test_upper_bound_midpoint_fallback(self):
        class _FailingSolver(object):
            def solve(self, *args, **kwds):
                return LocalSolveResult(numerical_error)
        class _Fails(LocalSearchExtensions):
            def local_solver(self, state):
                return _FailingSolver()
        ext = _Fails(_Ring())
        box = Box([0.5, 0.5], [1.5, 1.5])
        state = _state(box)
        r = ext.upper_bound(Node(box), state)
        assert r.is_feasible
        assert r.objective == 2
        assert list(r.solution) == [1, 1]
        # no feasible point from either procedure
        box = Box([-0.5, -0.5], [0.5, 0.5])
        r = ext.upper_bound(Node(box), state)
        assert r.feasibility == Feasibility.solver_failure

class TestAlphaBBExtensions(object):

    def test_lower_bound(self):
        problem = _qcqp()
        ext = AlphaBBExtensions(problem)
        for lower, upper in [([-3, -3], [3, 3]),
                             ([0, 0], [3, 3]),
                             ([1.5, 1.5], [2.5, 2.5]),
                             ([-3, 0], [0, 3])]:
            box = Box(lower, upper)
            state = _state(box)
            r = ext.lower_bound(Node(box), state)
            assert r.is_feasible
            best = inf
            for x in itertools.product(numpy.linspace(lower[0], upper[0], 31),
                                       numpy.linspace(lower[1], upper[1], 31)):
                if problem.constraints(x)[0] <= 0:
                    best = min(best, problem.objective(x))
            if best < inf:
                assert r.objective <= best + 1e-6
        box = Box([-3, -3], [3, 3])
        r = ext.lower_bound(Node(box), _state(box))
        assert r.objective <= -8 + 1e-6

    def test_lower_bound_tight_on_small_box(self):
        problem = _qcqp()
        ext = AlphaBBExtensions(problem)
        box = Box([1.99, 1.99], [2.0, 2.0])
        r = ext.lower_bound(Node(box), _state(box))
        assert r.is_feasible
        assert r.objective == pytest.approx(-8, abs=1e-2)
        assert r.objective <= problem.objective([2.0, 2.0]) + 1e-6

    def test_lower_bound_infeasible(self):
        problem = _qcqp()
        ext = AlphaBBExtensions(problem)
        box = Box([2.5, 2.5], [3, 3])
        r = ext.lower_bound(Node(box), _state(box))
        assert r.feasibility in (Feasibility.infeasible,
                                 Feasibility.feasible)
        if r.is_feasible:
            assert r.objective <= problem.objective([2.5, 2.5])
        # the interval check discards the box outright
        assert not ext.preprocess(Node(box), _state(box))

    def test_maximize(self):
        problem = QCQPProblem(QuadraticForm(-numpy.eye(2)),
                              sense=maximize)
        ext = AlphaBBExtensions(problem)
        box = Box([-1, -1], [1, 1])
        r = ext.lower_bound(Node(box), _state(box))
        # max of -|x|^2 is 0, so the bound on the negation is <= 0
        assert r.is_feasible
        assert r.objective <= 1e-9
