"""
Branch-and-bound node implementation.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
from spatialbnb.common import inf
from spatialbnb.box import (Box,
                            default_branch_mask)

class Node(object):
    """A vertex of the spatial branch-and-bound search tree.

    All objective values stored on a node are in
    minimization form (see :class:`SearchState
    <spatialbnb.state.SearchState>`).

    Attributes
    ----------
    box : :class:`Box <spatialbnb.box.Box>`
        The region of the decision space covered by the
        node.
    lower_objective : float
        A valid lower bound on the objective over the box
        (-inf until computed).
    upper_objective : float
        The objective of the best feasible point found in
        the box (+inf until a feasible point is found).
    lower_solution : numpy.ndarray or None
        The point produced by the lower bounding
        procedure. Not necessarily feasible.
    upper_solution : numpy.ndarray or None
        The feasible point that produced `upper_objective`.
    depth : int
        The tree depth of the node (0-based).
    id : int
        A counter assigned by the optimizer when the node is
        created. Used to break ties in the node store.
    branch_mask : tuple of bool
        Coordinates eligible for splitting.
    repeat_count : int
        The number of times the node has been re-enqueued
        through the repeat mechanism.
    queue_priority
        The priority assigned by the node store.
    state
        Storage for extension-specific data. Children do
        not inherit it.
    """
    __slots__ = ("box",
                 "lower_objective",
                 "upper_objective",
                 "lower_solution",
                 "upper_solution",
                 "depth",
                 "id",
                 "branch_mask",
                 "repeat_count",
                 "queue_priority",
                 "state")

    def __init__(self, box, branch_mask=None, depth=0, id=None):
        assert isinstance(box, Box)
        self.box = box
        self.lower_objective = -inf
        self.upper_objective = inf
        self.lower_solution = None
        self.upper_solution = None
        self.depth = depth
        self.id = id
        if branch_mask is None:
            branch_mask = default_branch_mask(len(box))
        branch_mask = tuple(bool(v) for v in branch_mask)
        if len(branch_mask) != len(box):
            raise ValueError("The branch mask length (%d) does "
                             "not match the box dimension (%d)."
                             % (len(branch_mask), len(box)))
        self.branch_mask = branch_mask
        self.repeat_count = 0
        self.queue_priority = None
        self.state = None

    def __str__(self):
        out = \
            ("Node(id=%s,\n"
             "     lower_objective=%s,\n"
             "     upper_objective=%s,\n"
             "     depth=%s)"
             % (self.id,
                self.lower_objective,
                self.upper_objective,
                self.depth))
        return out

    def new_child(self, box):
        """Returns a child node covering the given box. The
        child inherits the parent's lower bound and branch
        mask, and starts without a feasible point."""
        child = Node(box,
                     branch_mask=self.branch_mask,
                     depth=self.depth + 1)
        child.lower_objective = self.lower_objective
        assert child.queue_priority is None
        assert child.state is None
        return child
