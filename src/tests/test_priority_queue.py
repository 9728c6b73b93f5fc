import random

import pytest

from spatialbnb.common import (inf,
                               nan,
                               QueueStrategy)
from spatialbnb.box import Box
from spatialbnb.node import Node
from spatialbnb.priority_queue import \
    (_MaxPriorityFirstQueue,
     _FIFOQueue,
     _LIFOQueue,
     INodeStore,
     LowestBoundFirstNodeStore,
     DepthFirstNodeStore,
     BreadthFirstNodeStore,
     FIFONodeStore,
     LIFONodeStore,
     NodeStoreFactory,
     register_store_type)

def _new_node(bound, id_, depth=0):
    node = Node(Box([0], [1]), depth=depth, id=id_)
    node.lower_objective = bound
    return node

def assert_isheap(x):
    for k in range(len(x)):
        if ((2*k) + 1) < len(x):
            assert x[k] <= x[2*k+1]
        if ((2*k) + 2) < len(x):
            assert x[k] <= x[2*k+2]

class TestFactory(object):

    def test_factory(self):
        assert type(NodeStoreFactory('bound')) is \
            LowestBoundFirstNodeStore
        assert type(NodeStoreFactory('depth')) is \
            DepthFirstNodeStore
        assert type(NodeStoreFactory('breadth')) is \
            BreadthFirstNodeStore
        assert type(NodeStoreFactory('fifo')) is \
            FIFONodeStore
        assert type(NodeStoreFactory('lifo')) is \
            LIFONodeStore
        for strategy in QueueStrategy:
            assert type(NodeStoreFactory(strategy)) is \
                type(NodeStoreFactory(strategy.value))
        with pytest.raises(ValueError):
            NodeStoreFactory('_not_a_type_')

    def test_register_store_type(self):
        with pytest.raises(ValueError):
            NodeStoreFactory('_not_a_type_')
        class _Store(LowestBoundFirstNodeStore):
            pass
        register_store_type('_not_a_type_', _Store)
        try:
            assert type(NodeStoreFactory('_not_a_type_')) is _Store
            # registering the same class again is allowed
            register_store_type('_not_a_type_', _Store)
            with pytest.raises(ValueError):
                register_store_type('_not_a_type_',
                                    LowestBoundFirstNodeStore)
            with pytest.raises(ValueError):
                register_store_type('bound', _Store)
        finally:
            from spatialbnb import priority_queue
            priority_queue._registered_store_types.pop('_not_a_type_')
        with pytest.raises(ValueError):
            NodeStoreFactory('_not_a_type_')

class Test_MaxPriorityFirstQueue(object):

    def test_size(self):
        q = _MaxPriorityFirstQueue()
        assert_isheap(q._heap)
        assert q.size() == 0
        with pytest.raises(IndexError):
            q.next()
        cnt = q.put('a', 0)
        assert q.size() == 1
        assert_isheap(q._heap)
        assert q.next() == (cnt, 'a')
        assert q.get() == (cnt, 'a')
        assert q.size() == 0
        assert q.get() is None
        with pytest.raises(ValueError):
            q.put(None, 0)

    def test_ordering(self):
        q = _MaxPriorityFirstQueue()
        items = list(range(20))
        random.seed(0)
        random.shuffle(items)
        for i in items:
            q.put(i, i)
            assert_isheap(q._heap)
        out = []
        while q.size():
            out.append(q.get()[1])
        assert out == list(reversed(range(20)))

    def test_ties(self):
        q = _MaxPriorityFirstQueue()
        q.put('a', (1, 2))
        q.put('b', (1, 2))
        q.put('c', (1, 3))
        assert q.get()[1] == 'c'
        assert q.get()[1] == 'a'
        assert q.get()[1] == 'b'

    def test_filter(self):
        q = _MaxPriorityFirstQueue()
        for i in range(10):
            q.put(i, i)
        removed = q.filter(lambda item: item % 2 == 0)
        assert sorted(item for _, item in removed) == [1, 3, 5, 7, 9]
        assert_isheap(q._heap)
        assert sorted(q.items()) == [0, 2, 4, 6, 8]
        assert q.get()[1] == 8

class Test_FIFOQueue(object):

    def test_order(self):
        q = _FIFOQueue()
        assert q.get() is None
        for i in range(5):
            assert q.put(i) == i
        removed = q.filter(lambda item: item != 2)
        assert removed == [(2, 2)]
        assert list(q.items()) == [0, 1, 3, 4]
        assert [q.get()[1] for _ in range(4)] == [0, 1, 3, 4]
        assert q.size() == 0
        with pytest.raises(ValueError):
            q.put(None)

class Test_LIFOQueue(object):

    def test_order(self):
        q = _LIFOQueue()
        assert q.get() is None
        for i in range(5):
            assert q.put(i) == i
        removed = q.filter(lambda item: item != 2)
        assert removed == [(2, 2)]
        assert list(q.items()) == [0, 1, 3, 4]
        assert [q.get()[1] for _ in range(4)] == [4, 3, 1, 0]
        assert q.size() == 0
        with pytest.raises(ValueError):
            q.put(None)

class _NodeStoreTests(object):
    store_type = None

    def test_abstract(self):
        with pytest.raises(NotImplementedError):
            INodeStore()

    def test_empty(self):
        store = self.store_type()
        assert store.size() == 0
        assert store.bound() is None
        assert store.get() is None
        assert list(store.items()) == []

    def test_bound(self):
        store = self.store_type()
        random.seed(1)
        bounds = [random.uniform(-10, 10) for _ in range(25)]
        for i, b in enumerate(bounds):
            store.put(_new_node(b, i, depth=i % 4))
            assert store.bound() == min(bounds[:i+1])
            assert store.size() == i+1
        remaining = list(bounds)
        while store.size():
            node = store.get()
            remaining.remove(node.lower_objective)
            if remaining:
                assert store.bound() == min(remaining)
            else:
                assert store.bound() is None

    def test_infinite_bounds(self):
        store = self.store_type()
        store.put(_new_node(-inf, 0))
        store.put(_new_node(inf, 1))
        assert store.bound() == -inf
        store.get()
        store.get()
        assert store.size() == 0

    def test_nan_bound(self):
        store = self.store_type()
        with pytest.raises(ValueError):
            store.put(_new_node(nan, 0))

    def test_filter(self):
        store = self.store_type()
        for i in range(10):
            store.put(_new_node(float(i), i))
        removed = store.filter(lambda n: n.lower_objective < 5)
        assert sorted(n.id for n in removed) == [5, 6, 7, 8, 9]
        assert store.size() == 5
        assert sorted(n.id for n in store.items()) == [0, 1, 2, 3, 4]
        assert store.bound() == 0
        removed = store.filter(lambda n: n.lower_objective > 0)
        assert [n.id for n in removed] == [0]
        assert store.bound() == 1

    def test_repeated_put(self):
        store = self.store_type()
        node = _new_node(1.0, 0)
        store.put(node)
        assert store.get() is node
        node.lower_objective = 2.0
        store.put(node)
        assert store.bound() == 2.0
        assert store.get() is node
        assert store.size() == 0

class TestLowestBoundFirstNodeStore(_NodeStoreTests):
    store_type = LowestBoundFirstNodeStore

    def test_order(self):
        store = LowestBoundFirstNodeStore()
        store.put(_new_node(1.0, 0))
        store.put(_new_node(-1.0, 1))
        store.put(_new_node(0.0, 2))
        store.put(_new_node(-1.0, 3))
        store.put(_new_node(-1.0, 4))
        # lowest bound first, ties broken by the smallest id
        assert [store.get().id for _ in range(5)] == [1, 3, 4, 2, 0]

    def test_priority(self):
        node = _new_node(2.0, 7)
        assert LowestBoundFirstNodeStore.generate_priority(node) == \
            (-2.0, -7)
        store = LowestBoundFirstNodeStore()
        store.put(node)
        assert node.queue_priority == (-2.0, -7)

class TestDepthFirstNodeStore(_NodeStoreTests):
    store_type = DepthFirstNodeStore

    def test_order(self):
        store = DepthFirstNodeStore()
        store.put(_new_node(0.0, 0, depth=0))
        store.put(_new_node(0.0, 1, depth=2))
        store.put(_new_node(5.0, 2, depth=1))
        store.put(_new_node(-5.0, 3, depth=2))
        assert [store.get().id for _ in range(4)] == [1, 3, 2, 0]

class TestBreadthFirstNodeStore(_NodeStoreTests):
    store_type = BreadthFirstNodeStore

    def test_order(self):
        store = BreadthFirstNodeStore()
        store.put(_new_node(0.0, 0, depth=2))
        store.put(_new_node(0.0, 1, depth=1))
        store.put(_new_node(5.0, 2, depth=1))
        store.put(_new_node(-5.0, 3, depth=0))
        assert [store.get().id for _ in range(4)] == [3, 1, 2, 0]

class TestFIFONodeStore(_NodeStoreTests):
    store_type = FIFONodeStore

    def test_order(self):
        store = FIFONodeStore()
        for i, b in enumerate([3.0, 1.0, 2.0]):
            store.put(_new_node(b, i))
        assert [store.get().id for _ in range(3)] == [0, 1, 2]

class TestLIFONodeStore(_NodeStoreTests):
    store_type = LIFONodeStore

    def test_order(self):
        store = LIFONodeStore()
        for i, b in enumerate([3.0, 1.0, 2.0]):
            store.put(_new_node(b, i))
        assert [store.get().id for _ in range(3)] == [2, 1, 0]
