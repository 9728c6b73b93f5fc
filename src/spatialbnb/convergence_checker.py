"""
Convergence checking implementation.

All values handled here are in minimization form.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import math

from spatialbnb.common import (inf,
                               EndState)

_relative_gap_epsilon = 1e-10

def compute_absolute_gap(bound, objective):
    """Returns the absolute gap between the bound and the
    objective, `max(0, objective - bound)`. The gap is
    infinite when either value is infinite and the two are
    not equal.

    Example
    -------

    >>> compute_absolute_gap(-1.5, -1.0)
    0.5
    >>> compute_absolute_gap(-1.0, -1.5)
    0.0

    """
    if bound == objective:
        return 0.0
    elif math.isinf(bound) or math.isinf(objective):
        if (bound == -inf) or (objective == inf):
            return inf
        return 0.0
    return max(0.0, objective - bound)

def _default_scale(bound, objective):
    """`max{|objective|, eps}`"""
    return max(abs(objective), _relative_gap_epsilon)

def compute_relative_gap(bound,
                         objective,
                         scale=_default_scale):
    """Returns the relative gap between the bound and the
    objective. The absolute gap is divided by
    `max{|objective|, eps}` unless a different scale
    function is given."""
    gap = compute_absolute_gap(bound, objective)
    if math.isinf(gap):
        return gap
    if math.isinf(objective):
        return inf
    scale_ = scale(bound, objective)
    assert scale_ > 0
    return gap / scale_

class ConvergenceChecker(object):
    """A class used to check convergence and pruning
    conditions.

    Parameters
    ----------
    absolute_tolerance : float, optional
        The absolute difference between the objective and
        bound that determines optimality. Also used as the
        margin when deciding whether a node can be
        pruned. (default: 1e-3)
    relative_tolerance : float, optional
        The relative difference between the objective and
        bound that determines optimality. Can be set to None
        to disable the check. (default: 1e-3)
    comparison_tolerance : float, optional
        The absolute tolerance used when deciding if two
        objective or bound values are sufficiently different
        to be considered improved or worsened.
        (default: 0)
    scale_function : function, optional
        A function with signature `f(bound, objective) ->
        float` that returns the positive scale used to
        convert the absolute gap into a relative gap.
    """
    __slots__ = ("absolute_tolerance",
                 "relative_tolerance",
                 "comparison_tolerance",
                 "scale_function")

    def __init__(self,
                 absolute_tolerance=1e-3,
                 relative_tolerance=1e-3,
                 comparison_tolerance=0,
                 scale_function=_default_scale):
        self.absolute_tolerance = float(absolute_tolerance)
        assert (self.absolute_tolerance >= 0) and \
            (not math.isinf(self.absolute_tolerance))
        self.relative_tolerance = None
        if relative_tolerance is not None:
            self.relative_tolerance = float(relative_tolerance)
            assert (self.relative_tolerance >= 0) and \
                (not math.isinf(self.relative_tolerance))
        self.comparison_tolerance = float(comparison_tolerance)
        assert (self.comparison_tolerance >= 0) and \
            (not math.isinf(self.comparison_tolerance))
        self.scale_function = scale_function

    def check_termination_criteria(self,
                                   global_bound,
                                   incumbent):
        """Returns :attr:`EndState.optimal
        <spatialbnb.common.EndState.optimal>` when the
        global gap satisfies the tolerances; otherwise,
        `None` is returned."""
        if self.objective_is_optimal(incumbent, global_bound):
            return EndState.optimal
        return None

    def objective_is_optimal(self, objective, bound):
        """Determines if the objective is optimal by
        checking if the gap is small enough relative to the
        absolute or relative tolerance."""
        if math.isinf(objective):
            return False
        gap = compute_absolute_gap(bound, objective)
        if gap <= self.absolute_tolerance:
            return True
        if self.relative_tolerance is not None:
            rgap = compute_relative_gap(bound,
                                        objective,
                                        scale=self.scale_function)
            if rgap <= self.relative_tolerance:
                return True
        return False

    def can_prune(self, bound, incumbent):
        """Returns True when a node with the given lower
        bound can not improve on the incumbent by more than
        the absolute tolerance."""
        if bound == inf:
            return True
        if incumbent == inf:
            return False
        assert not math.isnan(bound)
        return bound >= incumbent - self.absolute_tolerance

    def compute_absolute_gap(self, bound, objective):
        return compute_absolute_gap(bound, objective)

    def compute_relative_gap(self, bound, objective):
        return compute_relative_gap(bound,
                                    objective,
                                    scale=self.scale_function)

    def objective_improved(self, new, old):
        """Returns True when the new objective is smaller
        than the old objective by more than the comparison
        tolerance."""
        # handles the both equal and infinite case
        if old == new:
            return False
        delta = old - new
        assert not math.isnan(delta)
        return delta > self.comparison_tolerance

    def bound_worsened(self, new, old):
        """Returns True when the new bound is smaller than
        the old bound by more than the comparison
        tolerance."""
        if old == new:
            return False
        delta = old - new
        assert not math.isnan(delta)
        return delta > self.comparison_tolerance
