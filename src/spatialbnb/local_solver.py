"""
A thin wrapper around the local nonlinear solvers in
scipy, used by the bounding procedures.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
import logging
import math

import numpy
from scipy.optimize import minimize

from spatialbnb.common import (inf,
                               Feasibility)

logger = logging.getLogger("spatialbnb")

# termination statuses
optimal = "optimal"
locally_infeasible = "locally_infeasible"
iteration_limit = "iteration_limit"
numerical_error = "numerical_error"

# primal statuses
feasible_point = "feasible_point"
infeasible_point = "infeasible_point"
no_solution = "no_solution"

_slsqp_status = {0: optimal,
                 4: locally_infeasible,
                 9: iteration_limit}

class LocalSolveResult(object):
    """The outcome of a local solve.

    Attributes
    ----------
    termination_status : str
        One of "optimal", "locally_infeasible",
        "iteration_limit", or "numerical_error".
    primal_status : str
        One of "feasible_point", "infeasible_point", or
        "no_solution".
    objective : float
        The objective at the returned point (+inf when no
        point is available).
    x : numpy.ndarray or None
        The returned point, projected onto the box.
    max_violation : float
        The largest constraint value at the returned point.
    message : str
        The message reported by the solver.
    """
    __slots__ = ("termination_status",
                 "primal_status",
                 "objective",
                 "x",
                 "max_violation",
                 "message")

    def __init__(self,
                 termination_status,
                 primal_status=no_solution,
                 objective=inf,
                 x=None,
                 max_violation=inf,
                 message=""):
        self.termination_status = termination_status
        self.primal_status = primal_status
        self.objective = objective
        self.x = x
        self.max_violation = max_violation
        self.message = message

    def __str__(self):
        return ("LocalSolveResult(termination_status=%s, "
                "primal_status=%s, objective=%s)"
                % (self.termination_status,
                   self.primal_status,
                   self.objective))

def classify_result(result, require_optimal=False):
    """Maps the (termination, primal) status pair of a local
    solve to a :class:`Feasibility
    <spatialbnb.common.Feasibility>` value.

    Parameters
    ----------
    result : :class:`LocalSolveResult`
        The local solve result.
    require_optimal : bool, optional
        When True, a feasible point only counts if the
        solver also reported optimal termination. Use this
        when the objective value is needed as a bound (e.g.,
        a convex relaxation). When False, any feasible point
        is accepted, which suits upper bounding.
        (default: False)
    """
    if result.primal_status == feasible_point:
        if (not require_optimal) or \
           (result.termination_status == optimal):
            return Feasibility.feasible
    elif (result.termination_status == locally_infeasible) and \
         (result.primal_status == infeasible_point):
        return Feasibility.infeasible
    return Feasibility.solver_failure

class LocalSolver(object):
    """Solves `min f(x) s.t. g(x) <= 0, x in box` locally
    using :func:`scipy.optimize.minimize`.

    Parameters
    ----------
    method : str, optional
        The scipy method. Must support bounds and, when
        constraints are given, inequality constraints.
        (default: "SLSQP")
    maxiter : int, optional
        The iteration limit. (default: 200)
    ftol : float, optional
        The function tolerance. (default: 1e-10)
    feasibility_tolerance : float, optional
        The largest constraint value accepted at a feasible
        point. (default: 1e-6)
    """

    def __init__(self,
                 method="SLSQP",
                 maxiter=200,
                 ftol=1e-10,
                 feasibility_tolerance=1e-6):
        self.method = method
        self.maxiter = maxiter
        self.ftol = ftol
        self.feasibility_tolerance = feasibility_tolerance

    def _termination_status(self, res):
        if self.method == "SLSQP":
            return _slsqp_status.get(int(res.status), numerical_error)
        if res.success:
            return optimal
        return numerical_error

    def solve(self,
              fun,
              box,
              x0=None,
              jac=None,
              constraints=None,
              constraints_jac=None):
        """Runs the local solver.

        Parameters
        ----------
        fun : callable
            The objective `f(x) -> float`.
        box : :class:`Box <spatialbnb.box.Box>`
            The variable bounds.
        x0 : array-like, optional
            The starting point (projected onto the box).
            Defaults to the box midpoint.
        jac : callable, optional
            The gradient of the objective. Finite
            differences are used when omitted.
        constraints : callable, optional
            A function `g(x) -> array` whose entries must be
            non-positive at a feasible point.
        constraints_jac : callable, optional
            The Jacobian of `g`.

        Returns
        -------
        :class:`LocalSolveResult`
        """
        if x0 is None:
            x0 = box.midpoint()
        x0 = box.project(x0)
        bounds = list(zip(box.lower, box.upper))
        cons = []
        if constraints is not None:
            con = {"type": "ineq",
                   "fun": lambda x: -numpy.atleast_1d(
                       numpy.asarray(constraints(x), dtype=float))}
            if constraints_jac is not None:
                con["jac"] = lambda x: -numpy.atleast_2d(
                    numpy.asarray(constraints_jac(x), dtype=float))
            cons.append(con)
        kwds = {"method": self.method,
                "bounds": bounds,
                "options": {"maxiter": self.maxiter}}
        if self.method == "SLSQP":
            kwds["options"]["ftol"] = self.ftol
        if jac is not None:
            kwds["jac"] = jac
        if len(cons):
            kwds["constraints"] = cons
        try:
            with numpy.errstate(all="ignore"):
                res = minimize(fun, x0, **kwds)
        except (ValueError,
                ArithmeticError,
                numpy.linalg.LinAlgError) as e:
            logger.warning("Local solver failed with an "
                           "exception: %s" % (e))
            return LocalSolveResult(numerical_error,
                                    message=str(e))
        termination_status = self._termination_status(res)
        x = box.project(res.x)
        with numpy.errstate(all="ignore"):
            objective = float(fun(x))
            violation = 0.0
            if constraints is not None:
                g = numpy.atleast_1d(
                    numpy.asarray(constraints(x), dtype=float))
                if len(g):
                    violation = float(g.max())
        if math.isnan(objective) or math.isnan(violation) or \
           (objective == inf):
            logger.warning("Local solver returned a point with "
                           "a non-finite objective or "
                           "constraint value")
            return LocalSolveResult(numerical_error,
                                    message=str(res.message))
        if violation <= self.feasibility_tolerance:
            primal_status = feasible_point
        else:
            primal_status = infeasible_point
        return LocalSolveResult(termination_status,
                                primal_status=primal_status,
                                objective=objective,
                                x=x,
                                max_violation=violation,
                                message=str(res.message))
