"""
Default bounding procedures and the containers they
return.

Every objective value produced here is in minimization
form (the problem objective multiplied by its sense).

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import math

import numpy

from spatialbnb.common import (minimize,
                               inf,
                               Feasibility)
from spatialbnb.interval import (Interval,
                                 box_intervals,
                                 sqr)
from spatialbnb.local_solver import classify_result

class BoundResult(object):
    """The outcome of a bounding procedure applied to a
    single node.

    Parameters
    ----------
    feasibility : :class:`Feasibility <spatialbnb.common.Feasibility>`
        The tri-state outcome of the procedure.
    objective : float, optional
        The bound (lower bounding) or the true objective of
        a feasible point (upper bounding), in minimization
        form. Ignored unless the outcome is feasible.
    solution : array-like, optional
        The point associated with the objective.

    Raises
    ------
    ValueError
        If the objective is nan.
    """
    __slots__ = ("feasibility",
                 "objective",
                 "solution")

    def __init__(self, feasibility, objective=None, solution=None):
        self.feasibility = Feasibility(feasibility)
        if objective is not None:
            objective = float(objective)
            if math.isnan(objective):
                raise ValueError("A bounding procedure returned "
                                 "a nan objective")
        self.objective = objective
        if solution is not None:
            solution = numpy.array(solution, dtype=float)
        self.solution = solution

    @classmethod
    def infeasible(cls):
        return cls(Feasibility.infeasible)

    @classmethod
    def solver_failure(cls):
        return cls(Feasibility.solver_failure)

    @property
    def is_feasible(self):
        return self.feasibility == Feasibility.feasible

    def __str__(self):
        return ("BoundResult(feasibility=%s, objective=%s)"
                % (self.feasibility.value, self.objective))

class QuadraticForm(object):
    """The function `x'Qx + c'x + d`.

    Parameters
    ----------
    Q : array-like
        A square matrix (need not be symmetric).
    c : array-like, optional
        The linear coefficients. Defaults to zero.
    d : float, optional
        The constant term. (default: 0.0)
    """
    __slots__ = ("Q", "c", "d")

    def __init__(self, Q, c=None, d=0.0):
        Q = numpy.array(Q, dtype=float)
        if (Q.ndim != 2) or (Q.shape[0] != Q.shape[1]):
            raise ValueError("Q must be a square matrix")
        n = Q.shape[0]
        if c is None:
            c = numpy.zeros(n)
        c = numpy.array(c, dtype=float)
        if c.shape != (n,):
            raise ValueError("c must be a vector of length %d"
                             % (n))
        self.Q = Q
        self.c = c
        self.d = float(d)

    @property
    def dimension(self):
        return len(self.c)

    def __call__(self, x):
        x = numpy.asarray(x, dtype=float)
        return float(x.dot(self.Q).dot(x) + self.c.dot(x) + self.d)

    def gradient(self, x):
        x = numpy.asarray(x, dtype=float)
        return (self.Q + self.Q.T).dot(x) + self.c

    def hessian(self):
        return self.Q + self.Q.T

    def scaled(self, factor):
        """Returns the form multiplied by a scalar."""
        return QuadraticForm(factor*self.Q,
                             factor*self.c,
                             factor*self.d)

    def interval(self, X):
        """Returns an enclosure of the form over the list
        of coordinate intervals `X`. Diagonal terms are
        evaluated as squares."""
        n = self.dimension
        assert len(X) == n
        result = Interval(self.d)
        for i in range(n):
            if self.Q[i, i] != 0:
                result = result + self.Q[i, i]*sqr(X[i])
            if self.c[i] != 0:
                result = result + self.c[i]*X[i]
            for j in range(i+1, n):
                q = self.Q[i, j] + self.Q[j, i]
                if q != 0:
                    result = result + q*(X[i]*X[j])
        return result

def alpha_shift(form, box):
    """Returns the convex underestimator of a quadratic form
    over a box obtained by the eigenvalue shift

        f(x) + alpha * sum_i (x_i - l_i)(x_i - u_i)

    with `alpha = max(0, -lambda_min(H)/2)` and `H` the
    Hessian of `f`. The added term is non-positive on the
    box, so the result never overestimates `f` there.

    Returns
    -------
    tuple
        The pair (underestimator, alpha), where the
        underestimator is a :class:`QuadraticForm`.
    """
    assert form.dimension == len(box)
    lambda_min = float(numpy.linalg.eigvalsh(form.hessian()).min())
    alpha = max(0.0, -0.5*lambda_min)
    if alpha == 0:
        return form, alpha
    lower = numpy.asarray(box.lower)
    upper = numpy.asarray(box.upper)
    Q = form.Q + alpha*numpy.eye(form.dimension)
    c = form.c - alpha*(lower + upper)
    d = form.d + alpha*float(lower.dot(upper))
    return QuadraticForm(Q, c, d), alpha

def interval_objective_bounds(problem, box):
    """Returns the natural interval extension of the
    minimization-form objective over the box."""
    F = problem.interval_objective(box_intervals(box))
    if not isinstance(F, Interval):
        F = Interval(F)
    if problem.sense() == minimize:
        return F
    return -F

def interval_feasible(problem, box, feasibility_tolerance):
    """Returns False when the interval extension of some
    constraint `g_j(x) <= 0` proves that no point of the
    box satisfies it."""
    if problem.constraint_count() == 0:
        return True
    G = problem.interval_constraints(box_intervals(box))
    for g in G:
        if not isinstance(g, Interval):
            g = Interval(g)
        if g.lo > feasibility_tolerance:
            return False
    return True

def interval_lower_bound(problem, box):
    """Lower bounds the objective over the box using the
    natural interval extension. The box midpoint is
    returned as the relaxation point."""
    F = interval_objective_bounds(problem, box)
    return BoundResult(Feasibility.feasible,
                       objective=F.lo,
                       solution=box.midpoint())

def max_violation(problem, x):
    """Returns the largest constraint value at `x` (zero
    when the problem has no constraints)."""
    if problem.constraint_count() == 0:
        return 0.0
    g = numpy.asarray(problem.constraints(x), dtype=float)
    if len(g) == 0:
        return 0.0
    return float(g.max())

def evaluate_point(problem, x, feasibility_tolerance):
    """Evaluates the minimization-form objective at a point
    of the box and classifies it."""
    x = numpy.asarray(x, dtype=float)
    with numpy.errstate(all="ignore"):
        value = problem.sense()*float(problem.objective(x))
        violation = max_violation(problem, x)
    if math.isnan(value) or math.isnan(violation) or \
       (value == inf):
        return BoundResult.solver_failure()
    if violation > feasibility_tolerance:
        return BoundResult.infeasible()
    return BoundResult(Feasibility.feasible,
                       objective=value,
                       solution=x)

def midpoint_upper_bound(problem, box, feasibility_tolerance):
    """Evaluates the objective at the box midpoint. The
    point is feasible when every constraint is satisfied
    within the tolerance."""
    return evaluate_point(problem,
                          box.midpoint(),
                          feasibility_tolerance)

def local_upper_bound(problem, box, solver, x0=None):
    """Searches for a feasible point by solving the
    original problem locally over the box, starting from
    `x0` (the box midpoint by default)."""
    sense = problem.sense()
    jac = None
    constraints = None
    constraints_jac = None
    if problem.has_gradients():
        jac = lambda x: sense*numpy.asarray(problem.objective_gradient(x),
                                            dtype=float)
    if problem.constraint_count() > 0:
        constraints = problem.constraints
        if problem.has_gradients():
            constraints_jac = problem.constraints_jacobian
    result = solver.solve(lambda x: sense*problem.objective(x),
                          box,
                          x0=x0,
                          jac=jac,
                          constraints=constraints,
                          constraints_jac=constraints_jac)
    feasibility = classify_result(result)
    if feasibility == Feasibility.feasible:
        return BoundResult(feasibility,
                           objective=result.objective,
                           solution=result.x)
    return BoundResult(feasibility)
