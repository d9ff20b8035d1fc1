"""
Lazy, re-traversable sequences.

A ``Seq`` holds a single *producer*: a zero-argument callable that returns a
fresh iterator every time it is called. Combinators wrap the parent's
producer in a new generator function, so chaining never iterates anything.
Only terminal operations (and plain ``for`` loops) call the producer.
"""

import copy
import logging
from functools import reduce as builtin_reduce

logger = logging.getLogger(__name__)

_MISSING = object()


class Seq:
    """
    A chainable, lazy sequence. Each element is pulled from the source and
    threaded through every stage before the next one is pulled, so bounded
    views (``take``) over unbounded sources (``Seq.range(0, math.inf)``) are safe.
    """
    def __init__(self, factory):
        if not callable(factory):
            raise TypeError("Seq expects a zero-argument callable returning an iterator")
        self._factory = factory

    def __repr__(self):
        return f"Seq({getattr(self._factory, '__name__', 'producer')})"

    # --------- construction ----------
    @classmethod
    def from_array(cls, items):
        """Yield each element of ``items`` in index order."""
        def from_array_factory():
            i = 0
            while i < len(items):
                yield items[i]
                i += 1
        return cls(from_array_factory)

    @classmethod
    def from_iterable(cls, source):
        """
        Delegate to ``iter(source)`` on every traversal. Only as re-traversable
        as ``source`` itself: wrapping a one-shot iterator and traversing twice
        gives undefined results.
        """
        def from_iterable_factory():
            yield from source
        return cls(from_iterable_factory)

    @classmethod
    def from_generator(cls, factory):
        """Wrap a caller-supplied producer (e.g. a generator function) as is."""
        return cls(factory)

    @classmethod
    def range(cls, start, end):
        """
        Integers from ``start`` toward ``end`` (exclusive), stepping +1 when
        ``start < end`` and -1 otherwise. ``end`` may be ``math.inf``.
        """
        def range_factory():
            i = start
            if start < end:
                while i < end:
                    yield i
                    i += 1
            else:
                while i > end:
                    yield i
                    i -= 1
        return cls(range_factory)

    @classmethod
    def repeat(cls, item, n):
        """Yield ``item`` ``n`` times."""
        def repeat_factory():
            for _ in range(n):
                yield item
        return cls(repeat_factory)

    # --------- chainable operators (lazy) ----------
    def map(self, fn):
        parent = self._factory

        def map_factory():
            for item in parent():
                yield fn(item)
        return Seq(map_factory)

    def filter(self, pred):
        parent = self._factory

        def filter_factory():
            for item in parent():
                if pred(item):
                    yield item
        return Seq(filter_factory)

    def reject(self, pred):
        """Inverse of filter(): keep elements where ``pred`` is falsy."""
        parent = self._factory

        def reject_factory():
            for item in parent():
                if not pred(item):
                    yield item
        return Seq(reject_factory)

    def take(self, n):
        """
        Yield at most ``n`` elements. The parent is not pulled again once the
        n-th element has been handed out.
        """
        parent = self._factory

        def take_factory():
            if n <= 0:
                return
            taken = 0
            for item in parent():
                yield item
                taken += 1
                if taken >= n:
                    return
        return Seq(take_factory)

    def skip(self, n):
        parent = self._factory

        def skip_factory():
            skipped = 0
            for item in parent():
                if skipped < n:
                    skipped += 1
                    continue
                yield item
        return Seq(skip_factory)

    def pairwise(self):
        """Overlapping pairs ``[e0, e1], [e1, e2], ...``; each pair is a deep-copied snapshot."""
        parent = self._factory

        def pairwise_factory():
            has_prev = False
            prev = None
            for item in parent():
                if has_prev:
                    yield copy.deepcopy([prev, item])
                prev = item
                has_prev = True
        return Seq(pairwise_factory)

    def enumerate(self):
        parent = self._factory

        def enumerate_factory():
            index = 0
            for item in parent():
                yield [index, item]
                index += 1
        return Seq(enumerate_factory)

    def scan(self, fn, initial):
        """Running fold: yields ``fn(acc, e)`` after every element, never ``initial`` alone."""
        parent = self._factory

        def scan_factory():
            acc = initial
            for item in parent():
                acc = fn(acc, item)
                yield acc
        return Seq(scan_factory)

    def inspect(self, fn):
        """Call ``fn(e)`` for its side effect as each element is pulled."""
        parent = self._factory

        def inspect_factory():
            for item in parent():
                fn(item)
                yield item
        return Seq(inspect_factory)

    def batch(self, size):
        """Group elements into tuples of ``size``; the last tuple may be shorter."""
        size = int(size)
        if size < 1:
            raise ValueError("Batch size must be >= 1")
        parent = self._factory

        def batch_factory():
            bucket = []
            for item in parent():
                bucket.append(item)
                if len(bucket) == size:
                    yield tuple(bucket)
                    bucket = []
            if bucket:
                yield tuple(bucket)
        return Seq(batch_factory)

    def chunk(self, size):
        """Alias for batch()"""
        return self.batch(size)

    def page(self, page_number, page_size):
        """Get a specific page of results (1-indexed)"""
        if page_number < 1:
            raise ValueError("Page number must be >= 1")
        offset = (page_number - 1) * page_size
        return self.skip(offset).take(page_size)

    def partition(self, pred):
        """
        Split into ``(matching, rest)``. Both halves re-run this sequence from
        scratch, so upstream side effects (an earlier ``inspect``) happen once
        per half and the source has to survive two traversals.
        """
        logger.debug("partitioning %r into two independent traversals", self)
        return self.filter(pred), self.reject(pred)

    # --------- forcing evaluation ----------
    def __iter__(self):
        return iter(self._factory())

    def collect(self):
        return list(self._factory())

    def to_list(self):
        """Alias for collect()"""
        return self.collect()

    def paginate(self, page_size):
        """Yield materialized pages of up to ``page_size`` elements until one comes back empty."""
        page_num = 1
        while True:
            page_data = self.page(page_num, page_size).collect()
            if not page_data:
                break
            yield page_data
            page_num += 1

    # --------- reducing operations (force evaluation) ----------
    def reduce(self, fn, initial):
        """Left fold starting from ``initial``."""
        return builtin_reduce(fn, self._factory(), initial)

    def fold(self, initial, fn):
        """Same as reduce() with the arguments swapped."""
        return self.reduce(fn, initial)

    def for_each(self, fn):
        for item in self._factory():
            fn(item)

    def all(self, pred):
        for item in self._factory():
            if not pred(item):
                return False
        return True

    def any(self, pred):
        for item in self._factory():
            if pred(item):
                return True
        return False

    every = all
    some = any

    def count(self):
        """Return the count of elements"""
        count = 0
        for _ in self._factory():
            count += 1
        return count

    def sum(self, start=0):
        """Return the sum of all elements"""
        total = start
        for item in self._factory():
            total += item
        return total

    def min(self, default=_MISSING):
        """Return the minimum element; ValueError on empty input without a default"""
        if default is _MISSING:
            return min(self._factory())
        return min(self._factory(), default=default)

    def max(self, default=_MISSING):
        """Return the maximum element; ValueError on empty input without a default"""
        if default is _MISSING:
            return max(self._factory())
        return max(self._factory(), default=default)

    def first(self, default=None):
        """Return the first element, or default if empty"""
        for item in self._factory():
            return item
        return default

    def last(self, default=None):
        """Return the last element, or default if empty"""
        last_item = default
        for item in self._factory():
            last_item = item
        return last_item

    def find(self, pred, default=None):
        """Return the first element that satisfies the predicate, or default"""
        for item in self._factory():
            if pred(item):
                return item
        return default

    def group_by(self, key_fn):
        """Group elements by the result of key_fn"""
        groups = {}
        for item in self._factory():
            groups.setdefault(key_fn(item), []).append(item)
        return groups


from_array = Seq.from_array
from_iterable = Seq.from_iterable
from_generator = Seq.from_generator
seq_range = Seq.range
repeat = Seq.repeat
