# Copyright (c) 2025, huffpack developers; All Rights Reserved
# huffpack is published under the PSF license.
"""
Array-backed binary min-heap used to order nodes while building Huffman
trees.

The heap is an implicit binary tree stored in a Python list.  The root
(the entry with the lowest priority) lives at index 0, and the entry at
index `i` has its children at `2*i + 1` and `2*i + 2`.  Only priorities
are ever compared, so the stored items do not need to be orderable.
"""

from huffpack.errors import QueueEmpty

__all__ = ['PriorityQueue', 'QueueEmpty']


def _parent(i):
    return (i - 1) // 2


class PriorityQueue(object):
    """PriorityQueue(entries=(), /) -> PriorityQueue

Return a new min-priority queue.  The optional `entries` is an iterable of
`(priority, item)` pairs, which are enqueued in order.  Entries with lower
priority are dequeued first.  The relative order of entries with equal
priority is unspecified.
"""
    __slots__ = ('_heap',)

    def __init__(self, __entries=()):
        self._heap = []
        for priority, item in __entries:
            self.enqueue(priority, item)

    def __len__(self):
        return len(self._heap)

    def __bool__(self):
        return bool(self._heap)

    def __repr__(self):
        return '%s(<%d entries>)' % (type(self).__name__, len(self._heap))

    def isEmpty(self):
        "Return True if the queue holds no entries."
        return not self._heap

    is_empty = isEmpty

    def length(self):
        "Return the number of entries in the queue."
        return len(self._heap)

    def enqueue(self, priority, item):
        """enqueue(priority, item)

Add `item` with the given `priority` to the queue.
"""
        heap = self._heap
        heap.append((priority, item))
        self._sift_up(len(heap) - 1)

    def dequeue(self):
        """dequeue() -> item

Remove the entry with the lowest priority and return its item.
Raises `QueueEmpty` when the queue is empty.
"""
        heap = self._heap
        if not heap:
            raise QueueEmpty("dequeue from empty priority queue")
        root = heap[0]
        last = heap.pop()
        if heap:
            heap[0] = last
            self._sift_down(0)
        return root[1]

    def front(self):
        """front() -> item

Return the item with the lowest priority without removing it.
Raises `QueueEmpty` when the queue is empty.
"""
        if not self._heap:
            raise QueueEmpty("front of empty priority queue")
        return self._heap[0][1]

    def priorities(self):
        "Return list of all priorities, in heap (array) order."
        return [entry[0] for entry in self._heap]

    def check(self):
        """
        Verify the heap invariant, i.e. that no entry has a lower priority
        than its parent.  Raises AssertionError otherwise.
        """
        heap = self._heap
        for i in range(1, len(heap)):
            p = _parent(i)
            if heap[i][0] < heap[p][0]:
                raise AssertionError("heap invariant violated at index %d: "
                                     "%r < %r (parent at %d)" %
                                     (i, heap[i][0], heap[p][0], p))

    def _sift_up(self, i):
        heap = self._heap
        entry = heap[i]
        # move the new entry up while its parent has strictly greater priority
        while i > 0:
            p = _parent(i)
            if not entry[0] < heap[p][0]:
                break
            heap[i] = heap[p]
            i = p
        heap[i] = entry

    def _sift_down(self, i):
        heap = self._heap
        n = len(heap)
        entry = heap[i]
        while True:
            child = 2 * i + 1
            if child >= n:
                break
            right = child + 1
            # pick the right child only when it is strictly lower
            if right < n and heap[right][0] < heap[child][0]:
                child = right
            if not heap[child][0] < entry[0]:
                break
            heap[i] = heap[child]
            i = child
        heap[i] = entry
