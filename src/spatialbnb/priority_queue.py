"""
A collection of node store implementations that can be
used by the optimizer.

Copyright by Gabriel A. Hackebeil (gabe.hackebeil@gmail.com).
"""
from typing import (Type,
                    Dict,
                    Any,
                    Optional,
                    Tuple,
                    Callable,
                    List,
                    Iterator,
                    Union,
                    TypeVar,
                    Generic)
import collections
import heapq
import math

from sortedcontainers import SortedList

from spatialbnb.node import Node

T = TypeVar("T")
PriorityType = Union[int, float, Tuple[Union[int, float], ...]]

class _MaxPriorityFirstQueue(Generic[T]):
    """A simple priority queue implementation. When the
    queue is not empty, the item with the highest priority
    is next. Ties are broken by the order items were placed
    in the queue.

    This queue implementation is not allowed to store None.
    """
    requires_priority = True                      # type: bool

    def __init__(self):
        # type: () -> None
        self._count = 0                           # type: int
        self._heap = []                           # type: List[Tuple[Any, int, T]]

    def _negate(self, priority):
        # type: (PriorityType) -> Any
        if not hasattr(priority, "__iter__"):
            return -priority                      # type: ignore
        else:
            return tuple(-v for v in priority)    # type: ignore

    def size(self):
        # type: () -> int
        """Returns the size of the queue."""
        return len(self._heap)

    def put(self, item, priority, _push_=heapq.heappush):
        # type: (T, PriorityType, Any) -> int
        """Puts an item into the queue with the given
        priority. This method returns a unique counter
        associated with each put."""
        if item is None:
            raise ValueError("queue item can not be None")
        cnt = self._count
        self._count += 1
        _push_(self._heap, (self._negate(priority), cnt, item))
        return cnt

    def get(self, _pop_=heapq.heappop):
        # type: (Any) -> Optional[Tuple[int, T]]
        """Removes and returns a tuple of the form (cnt,
        item) for the highest priority item in the queue. If
        the queue is empty, returns None."""
        if len(self._heap) > 0:
            return _pop_(self._heap)[1:]
        else:
            return None

    def next(self):
        # type: () -> Tuple[int, T]
        """Returns, without modifying the queue, a tuple of
        the form (cnt, item) for the highest priority item.

        Raises
        ------
        IndexError
            If the queue is empty.
        """
        try:
            return self._heap[0][1:]
        except IndexError:
            raise IndexError("The queue is empty")

    def filter(self, func):
        # type: (Callable[[T], bool]) -> List[Tuple[int, T]]
        """Removes items from the queue for which
        `func(item)` returns False. The list of removed
        (cnt, item) tuples is returned."""
        heap_new = []
        removed = []
        for priority, cnt, item in self._heap:
            if func(item):
                heap_new.append((priority, cnt, item))
            else:
                removed.append((cnt, item))
        heapq.heapify(heap_new)
        self._heap = heap_new
        return removed

    def items(self):
        # type: () -> Iterator[T]
        """Iterates over the queued items in arbitrary order
        without modifying the queue."""
        for _, _, item in self._heap:
            yield item

class _FIFOQueue(Generic[T]):
    """A simple first-in, first-out queue implementation.

    This queue implementation is not allowed to store None.
    """
    requires_priority = False                     # type: bool

    def __init__(self):
        # type: () -> None
        self._count = 0                           # type: int
        self._deque = collections.deque()         # type: collections.deque

    def size(self):
        # type: () -> int
        """Returns the size of the queue."""
        return len(self._deque)

    def put(self, item):
        # type: (T) -> int
        """Puts an item into the queue. This method returns
        a unique counter associated with each put."""
        if item is None:
            raise ValueError("queue item can not be None")
        cnt = self._count
        self._count += 1
        self._deque.append((cnt, item))
        return cnt

    def get(self):
        # type: () -> Optional[Tuple[int, T]]
        """Removes and returns the (cnt, item) tuple for
        the next item in the queue. If the queue is empty,
        returns None."""
        if len(self._deque) > 0:
            return self._deque.popleft()
        else:
            return None

    def filter(self, func):
        # type: (Callable[[T], bool]) -> List[Tuple[int, T]]
        """Removes items from the queue for which
        `func(item)` returns False. The list of removed
        (cnt, item) tuples is returned."""
        deque_new = collections.deque()           # type: collections.deque
        removed = []
        for cnt, item in self._deque:
            if func(item):
                deque_new.append((cnt, item))
            else:
                removed.append((cnt, item))
        self._deque = deque_new
        return removed

    def items(self):
        # type: () -> Iterator[T]
        for _, item in self._deque:
            yield item

class _LIFOQueue(Generic[T]):
    """A simple last-in, first-out queue implementation.

    This queue implementation is not allowed to store None.
    """
    requires_priority = False                     # type: bool

    def __init__(self):
        # type: () -> None
        self._count = 0                           # type: int
        self._items = []                          # type: List[Tuple[int, T]]

    def size(self):
        # type: () -> int
        """Returns the size of the queue."""
        return len(self._items)

    def put(self, item):
        # type: (T) -> int
        if item is None:
            raise ValueError("queue item can not be None")
        cnt = self._count
        self._count += 1
        self._items.append((cnt, item))
        return cnt

    def get(self):
        # type: () -> Optional[Tuple[int, T]]
        if len(self._items) > 0:
            return self._items.pop()
        else:
            return None

    def filter(self, func):
        # type: (Callable[[T], bool]) -> List[Tuple[int, T]]
        items_new = []
        removed = []
        for cnt, item in self._items:
            if func(item):
                items_new.append((cnt, item))
            else:
                removed.append((cnt, item))
        self._items = items_new
        return removed

    def items(self):
        # type: () -> Iterator[T]
        for _, item in self._items:
            yield item

class INodeStore(object):
    """The abstract interface for the collection of live
    nodes owned by the optimizer. A node is either in the
    store or held by the optimizer, never both."""

    def __init__(self, *args, **kwds):
        raise NotImplementedError                 #pragma:nocover

    @staticmethod
    def generate_priority(node):
        # type: (Node) -> PriorityType
        raise NotImplementedError()               #pragma:nocover

    def size(self):
        # type: () -> int
        """Returns the number of nodes in the store."""
        raise NotImplementedError()               #pragma:nocover

    def put(self, node):
        # type: (Node) -> int
        """Puts a node in the store, updating the value of
        :attr:`queue_priority <spatialbnb.node.Node.queue_priority>`.
        This method returns a unique counter associated with
        each put."""
        raise NotImplementedError()               #pragma:nocover

    def get(self):
        # type: () -> Optional[Node]
        """Removes and returns the next node in the store. If
        the store is empty, returns None."""
        raise NotImplementedError()               #pragma:nocover

    def bound(self):
        # type: () -> Optional[float]
        """Returns the smallest lower bound of all nodes in
        the store. If the store is empty, returns None."""
        raise NotImplementedError()               #pragma:nocover

    def filter(self, func):
        # type: (Callable[[Node], bool]) -> List[Node]
        """Removes nodes from the store for which
        `func(node)` returns False. The list of nodes
        removed is returned."""
        raise NotImplementedError()               #pragma:nocover

    def items(self):
        # type: () -> Iterator[Node]
        """Iterates over the stored nodes in arbitrary order
        without modifying the store."""
        raise NotImplementedError()               #pragma:nocover

def _check_bound(node):
    # type: (Node) -> float
    bound = node.lower_objective
    assert bound is not None
    if math.isnan(bound):
        raise ValueError("A node with a nan lower bound can "
                         "not be placed in the node store")
    return bound

class LowestBoundFirstNodeStore(INodeStore):
    """A node store that serves the node with the lowest
    lower bound first (best-first search). Ties are broken
    by node id, smallest first."""

    def __init__(self):
        # type: () -> None
        self._queue = _MaxPriorityFirstQueue[Node]()

    @staticmethod
    def generate_priority(node):
        # type: (Node) -> PriorityType
        bound = _check_bound(node)
        node_id = node.id if (node.id is not None) else 0
        return (-bound, -node_id)

    def size(self):
        # type: () -> int
        return self._queue.size()

    def put(self, node):
        # type: (Node) -> int
        node.queue_priority = self.generate_priority(node)
        return self._queue.put(node, node.queue_priority)

    def get(self):
        # type: () -> Optional[Node]
        entry = self._queue.get()
        if entry is None:
            return None
        return entry[1]

    def bound(self):
        # type: () -> Optional[float]
        try:
            return self._queue.next()[1].lower_objective
        except IndexError:
            return None

    def filter(self, func):
        # type: (Callable[[Node], bool]) -> List[Node]
        return [node for _, node in self._queue.filter(func)]

    def items(self):
        # type: () -> Iterator[Node]
        return self._queue.items()

class _BoundTrackingNodeStore(INodeStore):
    """A base class for node stores whose serving order is
    unrelated to the node bound. A sorted list of node
    bounds is maintained alongside the queue so that the
    store bound can be reported quickly."""

    def __init__(self, _queue_type_=_MaxPriorityFirstQueue[Node]):
        self._queue = _queue_type_()
        self._sorted_by_bound = SortedList()

    def size(self):
        # type: () -> int
        return self._queue.size()

    def put(self, node):
        # type: (Node) -> int
        bound = _check_bound(node)
        if self._queue.requires_priority:
            node.queue_priority = self.generate_priority(node)
            cnt = self._queue.put(node, node.queue_priority)  # type: ignore
        else:
            cnt = self._queue.put(node)                        # type: ignore
            node.queue_priority = cnt
        self._sorted_by_bound.add((bound, cnt))
        return cnt

    def get(self):
        # type: () -> Optional[Node]
        entry = self._queue.get()
        if entry is None:
            return None
        cnt, node = entry
        self._sorted_by_bound.remove((node.lower_objective, cnt))
        return node

    def bound(self):
        # type: () -> Optional[float]
        try:
            return self._sorted_by_bound[0][0]
        except IndexError:
            return None

    def filter(self, func):
        # type: (Callable[[Node], bool]) -> List[Node]
        removed = []
        for cnt, node in self._queue.filter(func):
            self._sorted_by_bound.remove((node.lower_objective, cnt))
            removed.append(node)
        return removed

    def items(self):
        # type: () -> Iterator[Node]
        return self._queue.items()

class DepthFirstNodeStore(_BoundTrackingNodeStore):
    """A node store that serves the deepest node first.
    Ties are broken by node id, smallest first."""

    @staticmethod
    def generate_priority(node):
        # type: (Node) -> PriorityType
        assert node.depth >= 0
        node_id = node.id if (node.id is not None) else 0
        return (node.depth, -node_id)

class BreadthFirstNodeStore(_BoundTrackingNodeStore):
    """A node store that serves the shallowest node first.
    Ties are broken by node id, smallest first."""

    @staticmethod
    def generate_priority(node):
        # type: (Node) -> PriorityType
        assert node.depth >= 0
        node_id = node.id if (node.id is not None) else 0
        return (-node.depth, -node_id)

class FIFONodeStore(_BoundTrackingNodeStore):
    """A node store that serves nodes in first-in,
    first-out order."""

    def __init__(self):
        # type: () -> None
        super(FIFONodeStore, self).__init__(
            _queue_type_=_FIFOQueue[Node])

class LIFONodeStore(_BoundTrackingNodeStore):
    """A node store that serves nodes in last-in,
    first-out order."""

    def __init__(self):
        # type: () -> None
        super(LIFONodeStore, self).__init__(
            _queue_type_=_LIFOQueue[Node])

_registered_store_types = {}                      # type: Dict[str, Type[INodeStore]]

def NodeStoreFactory(name, *args, **kwds):
    # type: (str, Any, Any) -> INodeStore
    """Returns a new instance of the node store type
    registered under the given name."""
    if hasattr(name, "value"):
        name = name.value
    if name not in _registered_store_types:
        raise ValueError("invalid node store type: %s" % (name))
    return _registered_store_types[name](*args, **kwds)

def register_store_type(name, cls):
    # type: (str, Type[INodeStore]) -> None
    """Registers a new node store class with the
    NodeStoreFactory."""
    if (name in _registered_store_types) and \
       (_registered_store_types[name] is not cls):
        raise ValueError("The name '%s' has already been "
                         "registered for node store type '%s'"
                         % (name, _registered_store_types[name]))
    _registered_store_types[name] = cls

register_store_type("bound", LowestBoundFirstNodeStore)
register_store_type("depth", DepthFirstNodeStore)
register_store_type("breadth", BreadthFirstNodeStore)
register_store_type("fifo", FIFONodeStore)
register_store_type("lifo", LIFONodeStore)
