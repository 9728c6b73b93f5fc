import pytest
import numpy

from spatialbnb.common import (minimize,
                               maximize,
                               inf,
                               EndState)
from spatialbnb.box import Box
from spatialbnb.configuration import Configuration
from spatialbnb.convergence_checker import ConvergenceChecker
from spatialbnb.state import (IncumbentTracker,
                              SearchState)

class TestIncumbentTracker(object):

    def test_init(self):
        inc = IncumbentTracker()
        assert inc.value == inf
        assert inc.point is None
        assert inc.node_id is None
        assert inc.update_count == 0
        assert not inc.is_finite

    def test_update(self):
        inc = IncumbentTracker()
        assert inc.update(1.0, [1, 2], node_id=3)
        assert inc.is_finite
        assert inc.value == 1.0
        assert isinstance(inc.point, numpy.ndarray)
        assert list(inc.point) == [1.0, 2.0]
        assert inc.node_id == 3
        assert inc.update_count == 1
        # not an improvement
        assert not inc.update(1.0, [0, 0], node_id=4)
        assert not inc.update(2.0, [0, 0], node_id=4)
        assert inc.value == 1.0
        assert list(inc.point) == [1.0, 2.0]
        assert inc.node_id == 3
        assert inc.update_count == 1
        assert inc.update(-inf, [0, 0])
        assert inc.value == -inf
        assert inc.update_count == 2

    def test_point_copied(self):
        inc = IncumbentTracker()
        point = numpy.array([1.0])
        inc.update(0.0, point)
        point[0] = 5.0
        assert inc.point[0] == 1.0

    def test_comparison_tolerance(self):
        inc = IncumbentTracker(ConvergenceChecker(comparison_tolerance=0.1))
        assert inc.update(1.0, [0])
        assert not inc.update(0.95, [0])
        assert inc.update(0.85, [0])
        assert inc.value == 0.85

class TestSearchState(object):

    def _state(self, sense=minimize, **kwds):
        config = Configuration(use_environment=False, **kwds)
        box = Box([0, 0, -1], [1, 2, 1])
        return SearchState(config, box,
                           sense=sense,
                           auxiliary_count=1,
                           clock=lambda: 10.0)

    def test_init(self):
        state = self._state(absolute_tolerance=0.5,
                            relative_tolerance=None)
        assert state.absolute_tolerance == 0.5
        assert state.relative_tolerance is None
        assert state.global_lower_bound == -inf
        assert state.worst_terminal_bound == inf
        assert state.iteration_count == 0
        assert state.node_count == 0
        assert state.store_size == 0
        assert state.end_state == EndState.running
        assert state.start_time == 10.0
        assert state.elapsed_time() == 0
        assert not state.interrupted
        assert state.user_dimension == 2
        assert state.incumbent_value == inf
        assert state.incumbent_point is None

    def test_gaps(self):
        state = self._state()
        assert state.absolute_gap() == inf
        assert state.relative_gap() == inf
        state.global_lower_bound = 1.0
        state.incumbent.update(3.0, [0, 0, 0])
        assert state.absolute_gap() == 2.0
        assert state.relative_gap() == pytest.approx(2.0/3)
        assert state.incumbent_value == 3.0

    def test_user_values(self):
        state = self._state()
        assert state.to_user_objective(None) is None
        assert state.to_user_objective(2.0) == 2.0
        state = self._state(sense=maximize)
        assert state.to_user_objective(2.0) == -2.0
        assert state.to_user_objective(-inf) == inf
        assert state.user_solution(None) is None
        x = state.user_solution([0.5, 1.5, 0.25])
        assert isinstance(x, numpy.ndarray)
        assert list(x) == [0.5, 1.5]
