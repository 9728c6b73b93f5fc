import os
import sys
import itertools

import pytest
import numpy

import spatialbnb
from spatialbnb.common import inf
from spatialbnb.solver import GlobalOptimizer

thisdir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, thisdir)
try:
    from problems import (DoubleWell,
                          InfeasibleMin,
                          InfeasibleMax,
                          Trig,
                          Ratio,
                          create_qcqp,
                          qcqp_optimal_points)
finally:
    sys.path.remove(thisdir)

def _grid_min(problem, box, n=41):
    axes = [numpy.linspace(l, u, n)
            for l, u in zip(box.lower, box.upper)]
    best = inf
    for point in itertools.product(*axes):
        x = numpy.array(point)
        if problem.constraint_count() and \
           max(problem.constraints(x)) > 0:
            continue
        best = min(best, problem.sense()*problem.objective(x))
    return problem.sense()*best

class TestProblems(object):

    def _solve(self, root_box, extensions, **kwds):
        kwds.setdefault("log", None)
        kwds.setdefault("disable_signal_handlers", True)
        opt = GlobalOptimizer()
        results = opt.solve(root_box, extensions, **kwds)
        assert len(vars(results)) == 10
        return results

    def test_trig(self):
        problem = Trig()
        results = self._solve(problem.root_box,
                              spatialbnb.ExtensionPoints(problem),
                              absolute_tolerance=1e-3,
                              relative_tolerance=None)
        assert results.end_state == "optimal"
        assert results.solution_status == "optimal"
        assert results.objective == pytest.approx(-1.5, abs=1e-3)
        assert results.bound <= -1.5 + 1e-9
        assert results.objective - results.bound <= 1e-3
        x = results.solution
        assert problem.root_box.contains(x)
        assert problem.objective(x) == pytest.approx(results.objective)
        # sin(x1) = -1, |x2| = 1, cos(x3) = 1, x4 = 2
        assert numpy.sin(x[0]) == pytest.approx(-1, abs=1e-2)
        assert abs(x[1]) == pytest.approx(1, abs=1e-2)
        assert numpy.cos(x[2]) == pytest.approx(1, abs=1e-2)
        assert x[3] == pytest.approx(2, abs=1e-2)

    def test_qcqp_alpha_bb(self):
        """Two-variable nonconvex QCQP solved with the
        alpha-shifted relaxation and local upper bounds.

        The data of the commonly cited instance with optimum
        near -55.19 is not available, so this uses a
        closed-form instance whose global minimum (-8 at
        (2, 2) and (-2, -2)) can be verified by hand."""
        problem = create_qcqp()
        box = spatialbnb.Box([-3, -3], [3, 3])
        results = self._solve(box,
                              spatialbnb.AlphaBBExtensions(problem),
                              absolute_tolerance=1e-4,
                              relative_tolerance=None)
        assert results.end_state == "optimal"
        assert results.solution_status == "optimal"
        assert results.objective == pytest.approx(-8, abs=1e-4)
        assert results.bound <= -8 + 1e-6
        assert results.absolute_gap <= 1e-4
        assert any(numpy.allclose(results.solution, point, atol=1e-2)
                   for point in qcqp_optimal_points)
        assert max(problem.constraints(results.solution)) <= 1e-6
        assert results.nodes < 5000

    def test_qcqp_maximize(self):
        # the maximum of x1^2 - 4*x1*x2 + x2^2 over the disk
        # is 24, attained at (2, -2) and (-2, 2)
        problem = create_qcqp(sense=spatialbnb.maximize)
        box = spatialbnb.Box([-3, -3], [3, 3])
        results = self._solve(box,
                              spatialbnb.AlphaBBExtensions(problem),
                              absolute_tolerance=1e-4,
                              relative_tolerance=None)
        assert results.solution_status == "optimal"
        assert results.objective == pytest.approx(24, abs=1e-4)
        assert results.bound >= 24 - 1e-6

    def test_quasiconvex_bisection(self):
        box = spatialbnb.Box([-1, 1, 0], [1, 3, 2])
        results = self._solve(box,
                              spatialbnb.QuasiconvexBisection(Ratio()),
                              absolute_tolerance=1e-5,
                              relative_tolerance=None)
        assert results.end_state == "optimal"
        assert results.solution_status == "optimal"
        assert results.objective == pytest.approx(1.0/3, abs=1e-5)
        assert results.bound <= 1.0/3 + 1e-9
        # the threshold coordinate is not reported
        assert len(results.solution) == 2
        assert results.solution == pytest.approx([0, 3], abs=1e-3)
        # no branching takes place
        assert results.nodes == 1
        assert results.iterations > 10

    @pytest.mark.parametrize("sense", [spatialbnb.minimize,
                                       spatialbnb.maximize])
    def test_double_well(self, sense):
        problem = DoubleWell(sense=sense)
        box = spatialbnb.Box([-2, -2], [2, 2])
        results = self._solve(box,
                              spatialbnb.ExtensionPoints(problem),
                              absolute_tolerance=1e-2,
                              relative_tolerance=None)
        assert results.solution_status == "optimal"
        best = _grid_min(problem, box)
        if sense == spatialbnb.minimize:
            assert results.bound <= best
            assert results.objective <= best + 1e-2
            assert results.objective == pytest.approx(0, abs=1e-2)
        else:
            assert results.bound >= best
            assert results.objective >= best - 1e-2
            assert results.objective == pytest.approx(0, abs=1e-2)

    def test_double_well_limited(self):
        problem = DoubleWell()
        # no box midpoint attains the minimum
        box = spatialbnb.Box([-2, -2], [2, 2.2])
        results = self._solve(box,
                              spatialbnb.ExtensionPoints(problem),
                              absolute_tolerance=1e-8,
                              relative_tolerance=None,
                              node_limit=101)
        assert results.end_state == "node_limit"
        assert results.solution_status == "feasible"
        assert results.nodes in (101, 102)
        assert results.bound <= 0
        assert results.objective >= 0

    def test_infeasible_min(self):
        box = spatialbnb.Box([0, 0], [2, 2])
        results = self._solve(box,
                              spatialbnb.ExtensionPoints(InfeasibleMin()))
        assert results.end_state == "infeasible"
        assert results.solution_status == "infeasible"
        assert results.objective == inf
        assert results.bound == inf
        assert results.solution is None
        assert results.iterations > 1

    def test_infeasible_max(self):
        box = spatialbnb.Box([0, 0], [2, 2])
        results = self._solve(box,
                              spatialbnb.ExtensionPoints(InfeasibleMax()))
        assert results.end_state == "infeasible"
        assert results.solution_status == "infeasible"
        assert results.objective == -inf
        assert results.bound == -inf

    def test_infeasible_local_search(self):
        box = spatialbnb.Box([0, 0], [2, 2])
        ext = spatialbnb.LocalSearchExtensions(InfeasibleMin())
        results = self._solve(box, ext)
        assert results.solution_status == "infeasible"
