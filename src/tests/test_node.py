import pytest

from spatialbnb.common import inf
from spatialbnb.box import Box
from spatialbnb.node import Node

class TestNode(object):

    def test_init(self):
        box = Box([0, 0], [1, 1])
        node = Node(box)
        assert node.box is box
        assert node.lower_objective == -inf
        assert node.upper_objective == inf
        assert node.lower_solution is None
        assert node.upper_solution is None
        assert node.depth == 0
        assert node.id is None
        assert node.branch_mask == (True, True)
        assert node.repeat_count == 0
        assert node.queue_priority is None
        assert node.state is None

    def test_branch_mask(self):
        box = Box([0, 0], [1, 1])
        node = Node(box, branch_mask=[1, 0])
        assert node.branch_mask == (True, False)
        with pytest.raises(ValueError):
            Node(box, branch_mask=[True])

    def test_bad_box(self):
        with pytest.raises(AssertionError):
            Node(([0], [1]))

    def test_new_child(self):
        node = Node(Box([0, 0], [1, 1]),
                    branch_mask=(True, False),
                    id=3)
        node.lower_objective = -2.0
        node.upper_objective = 1.0
        node.upper_solution = [0.5, 0.5]
        node.queue_priority = (1, 2)
        node.state = "data"
        left, right = node.box.split(0)
        child = node.new_child(left)
        assert child.box is left
        assert child.depth == 1
        assert child.lower_objective == -2.0
        assert child.upper_objective == inf
        assert child.upper_solution is None
        assert child.branch_mask == (True, False)
        assert child.id is None
        assert child.queue_priority is None
        assert child.state is None
        assert child.repeat_count == 0
        grandchild = child.new_child(child.box.split(1)[0])
        assert grandchild.depth == 2

    def test_str(self):
        node = Node(Box([0], [1]), id=1)
        assert str(node) == \
            ("Node(id=1,\n"
             "     lower_objective=-inf,\n"
             "     upper_objective=inf,\n"
             "     depth=0)")
