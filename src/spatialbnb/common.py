"""
Basic definitions and utilities.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""

import enum

minimize = 1
"""The objective sense defining a minimization problem."""

maximize = -1
"""The objective sense defining a maximization problem."""

inf = float("inf")
"""A floating point constant set to ``float('inf')``."""

nan = float("nan")
"""A floating point constant set to ``float('nan')``."""

@enum.unique
class QueueStrategy(str, enum.Enum):
    """Strategies for ordering live nodes in the node
    store. For all strategies, ties are broken by node id
    (i.e., creation order)."""

    bound = "bound"
    """The node with the lowest lower bound is always
    selected next (best-first search)."""
    breadth = "breadth"
    """The node with the smallest tree depth is always
    selected next (i.e., breadth-first search)."""
    depth = "depth"
    """The node with the largest tree depth is always
    selected next (i.e., depth-first search)."""
    fifo = "fifo"
    """Nodes are served in first-in, first-out order."""
    lifo = "lifo"
    """Nodes are served in last-in, first-out order."""

@enum.unique
class Feasibility(str, enum.Enum):
    """The tri-state outcome reported by a bounding
    procedure for a single node."""

    feasible = "feasible"
    """The phase produced a usable value (and point)."""
    infeasible = "infeasible"
    """The phase proved that no point in the box satisfies
    the constraints of the problem it solved."""
    solver_failure = "solver_failure"
    """The phase could not produce a usable value for
    reasons other than infeasibility (numerical trouble,
    iteration limit, etc.). Treated conservatively."""

@enum.unique
class EndState(str, enum.Enum):
    """Possible values assigned to the
    :attr:`end_state` attribute of a
    :class:`SolverResults <spatialbnb.solver_results.SolverResults>`
    object returned from a solve."""

    running = "running"
    """The search has not terminated."""
    optimal = "optimal"
    """The global gap satisfied the optimality tolerances,
    or the node store was exhausted with a finite
    incumbent. In the second case the gap can remain open
    (e.g., when nodes were accepted as leaves or as
    converged before their own gap closed), so callers
    should check :attr:`solution_status`, which is
    "optimal" only when the tolerances are satisfied."""
    infeasible = "infeasible"
    """The node store was exhausted without finding a
    feasible point."""
    unbounded = "unbounded"
    """An extension reported an unbounded (-inf) feasible
    objective."""
    iteration_limit = "iteration_limit"
    """The user-supplied iteration limit was reached."""
    node_limit = "node_limit"
    """The user-supplied limit on created nodes was
    reached."""
    time_limit = "time_limit"
    """The user-supplied wall-clock limit was reached."""
    interrupted = "interrupted"
    """Search termination was initiated by a SIGINT or
    SIGUSR1 signal event."""

@enum.unique
class SolutionStatus(str, enum.Enum):
    """Possible values assigned to the
    :attr:`solution_status` attribute of a
    :class:`SolverResults <spatialbnb.solver_results.SolverResults>`
    object returned from a solve."""

    optimal = "optimal"
    """Indicates that the incumbent is finite and close
    enough to the global bound to satisfy the optimality
    tolerances used for the solve."""
    feasible = "feasible"
    """Indicates that the incumbent is finite but not close
    enough to the global bound to satisfy the optimality
    tolerances used for the solve."""
    infeasible = "infeasible"
    """Indicates that no feasible point exists in the root
    box."""
    unbounded = "unbounded"
    """Indicates that the incumbent is the unbounded
    objective value."""
    unknown = "unknown"
    """Indicates that the search stopped before a feasible
    point was found and before infeasibility was proven."""
