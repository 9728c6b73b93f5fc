"""
Problem definitions consumed by the default bounding
procedures.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import numpy

from spatialbnb.common import (minimize,
                               maximize)
from spatialbnb.relaxations import QuadraticForm

class Problem(object):
    """The abstract base class used for describing a
    box-constrained global optimization problem

        min (or max) f(x)  s.t.  g_j(x) <= 0,  x in box.

    The default extension points evaluate these methods at
    points (numpy arrays) and, for the interval versions,
    over lists of :class:`Interval
    <spatialbnb.interval.Interval>` objects. Objective
    values are reported in the problem's own sense.
    """
    __slots__ = ()

    #
    # Abstract Methods
    #

    def sense(self):                              #pragma:nocover
        """Returns the objective sense for this problem.

        Note
        ----
        This method is abstract and must be defined by the
        user.
        """
        raise NotImplementedError()

    def objective(self, x):                       #pragma:nocover
        """Returns the objective value at the point `x`.

        Note
        ----
        This method is abstract and must be defined by the
        user.
        """
        raise NotImplementedError()

    #
    # Optional Abstract Methods
    #

    def interval_objective(self, X):
        """Returns an :class:`Interval
        <spatialbnb.interval.Interval>` enclosing the
        objective over the list of coordinate intervals
        `X`. The :class:`Problem <spatialbnb.problem.Problem>`
        base class evaluates :func:`objective` with the
        interval list, which yields the natural interval
        extension when the objective is written with
        arithmetic operators and the functions in
        :mod:`spatialbnb.interval`."""
        return self.objective(X)

    def constraint_count(self):
        """Returns the number of inequality constraints. The
        :class:`Problem <spatialbnb.problem.Problem>` base
        class returns 0."""
        return 0

    def constraints(self, x):
        """Returns the vector of constraint values `g(x)`
        at the point `x`. A point is feasible when every
        entry is non-positive."""
        return numpy.zeros(0)

    def interval_constraints(self, X):
        """Returns a list of intervals enclosing each
        constraint over the list of coordinate intervals
        `X`. Evaluates :func:`constraints` with the interval
        list by default."""
        return list(self.constraints(X))

    def has_gradients(self):
        """Indicates if :func:`objective_gradient` and
        :func:`constraints_jacobian` are implemented. When
        False, local solvers use finite differences."""
        return False

    def objective_gradient(self, x):              #pragma:nocover
        raise NotImplementedError()

    def constraints_jacobian(self, x):            #pragma:nocover
        raise NotImplementedError()

    def sublevel_function(self, x, t):            #pragma:nocover
        """Returns a function value that is non-positive if
        and only if `objective(x) <= t`. Required by
        :class:`QuasiconvexBisection
        <spatialbnb.bisection.QuasiconvexBisection>`, which
        expects it to be convex in `x` for fixed `t`."""
        raise NotImplementedError()

class QCQPProblem(Problem):
    """A quadratically constrained quadratic program

        min (or max) x'Q0x + c0'x + d0
        s.t. x'Qjx + cj'x + dj <= 0,  j = 1..m

    Parameters
    ----------
    objective : :class:`QuadraticForm <spatialbnb.relaxations.QuadraticForm>`
        The objective.
    constraints : list of :class:`QuadraticForm <spatialbnb.relaxations.QuadraticForm>`, optional
        The constraint functions.
    sense : {:obj:`minimize <spatialbnb.common.minimize>`, :obj:`maximize <spatialbnb.common.maximize>`}
        The objective sense. (default: minimize)
    """
    __slots__ = ("objective_form",
                 "constraint_forms",
                 "_sense")

    def __init__(self, objective, constraints=(), sense=minimize):
        if not isinstance(objective, QuadraticForm):
            objective = QuadraticForm(*objective)
        self.objective_form = objective
        self.constraint_forms = []
        for form in constraints:
            if not isinstance(form, QuadraticForm):
                form = QuadraticForm(*form)
            if form.dimension != objective.dimension:
                raise ValueError("Constraint dimension (%d) does "
                                 "not match the objective "
                                 "dimension (%d)"
                                 % (form.dimension,
                                    objective.dimension))
            self.constraint_forms.append(form)
        if sense not in (minimize, maximize):
            raise ValueError("Invalid objective sense: %r"
                             % (sense,))
        self._sense = sense

    @property
    def dimension(self):
        return self.objective_form.dimension

    def sense(self):
        return self._sense

    def objective(self, x):
        return self.objective_form(x)

    def interval_objective(self, X):
        return self.objective_form.interval(X)

    def constraint_count(self):
        return len(self.constraint_forms)

    def constraints(self, x):
        return numpy.array([form(x) for form in self.constraint_forms])

    def interval_constraints(self, X):
        return [form.interval(X) for form in self.constraint_forms]

    def has_gradients(self):
        return True

    def objective_gradient(self, x):
        return self.objective_form.gradient(x)

    def constraints_jacobian(self, x):
        return numpy.array([form.gradient(x)
                            for form in self.constraint_forms])
