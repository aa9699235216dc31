import operator

from typing import Any, List, Optional, Sequence

from segment_tree_errors import InvalidArgumentError, InvalidRangeError, OutOfRangeError
from aggregate_policies import (
    AggregatePolicy,
    AndPolicy,
    InRangeCountPolicy,
    MaxPolicy,
    MaxSubarraySumPolicy,
    MinPolicy,
    OrPolicy,
    QueryArgs,
    SumPolicy,
    ValueRange,
    XorPolicy,
)


class SegmentTree:
    """
    Class representing a static-size SegmentTree over a sequence of elements.

    The tree is stored as a list of levels: `levels[0]` is the root-most level
    and `levels[-1]` holds one leaf datum per element. A node whose level
    below has no right sibling for it is a verbatim copy of its only child.
    How values combine is delegated entirely to an AggregatePolicy.
    """

    def __init__(self, values: Sequence, policy: AggregatePolicy):
        """
        Instantiates a SegmentTree.

        :param values: the elements, in order. Must report its length.
        :param policy: the aggregate maintained by the tree.
        """
        self.policy = policy
        self.size = self._measure(values)
        self.height = self._calculate_height(self.size)

        leaves = self._build_leaves(values)
        self.levels: List[List[Any]] = [leaves]

        # Build each level from the one below it.
        while len(self.levels) < self.height:
            below = self.levels[0]
            level = [
                policy.combine(below[j], below[j + 1])
                for j in range(0, len(below) - 1, 2)
            ]
            if len(below) % 2 == 1:
                level.append(below[-1])
            self.levels.insert(0, level)

    @staticmethod
    def _measure(values: Sequence) -> int:
        try:
            return len(values)
        except TypeError as err:
            raise InvalidArgumentError(
                "values must be a sized sequence, got %s" % type(values).__name__
            ) from err

    @staticmethod
    def _calculate_height(size: int) -> int:
        """
        Returns ceil(log2(size)) + 1, or 1 for trees with at most one element.
        """
        if size <= 1:
            return 1
        return (size - 1).bit_length() + 1

    def _build_leaves(self, values: Sequence) -> List[Any]:
        """
        Reads every element and builds its leaf datum. Only failures while
        reading `values` are reported as InvalidArgumentError; errors raised by
        the policy propagate unchanged.
        """
        try:
            elements = list(values)
        except Exception as err:
            raise InvalidArgumentError("could not read values: %s" % err) from err

        if len(elements) != self.size:
            raise InvalidArgumentError(
                "values reported %d elements but yielded %d" % (self.size, len(elements))
            )

        args = QueryArgs()
        return [self.policy.leaf(value, args) for value in elements]

    def update(self, index: int, value: Any, args: Optional[QueryArgs] = None):
        """
        Sets the element at `index` and recomputes every node above it.

        :param index: the position of the element.
        :param value: the new element.
        :param args: extra parameters for building the leaf.
        """
        index = operator.index(index)
        if not 0 <= index < self.size:
            raise OutOfRangeError("index %d out of range [0, %d)" % (index, self.size))
        if args is None:
            args = QueryArgs()

        # Compute the whole path before writing so a failing policy leaves
        # the tree untouched.
        current = self.policy.leaf(value, args)
        path = [current]
        i = index
        for h in range(self.height - 1, 0, -1):
            level = self.levels[h]
            if i % 2 == 0:
                if i + 1 < len(level):
                    current = self.policy.combine(current, level[i + 1])
            else:
                current = self.policy.combine(level[i - 1], current)
            path.append(current)
            i //= 2

        i = index
        for h, datum in zip(range(self.height - 1, -1, -1), path):
            self.levels[h][i] = datum
            i //= 2

    def query(self, li: int, ri: int, args: Optional[QueryArgs] = None) -> Any:
        """
        Returns the aggregate of the elements at positions li, ..., ri.

        :param li: the first position of the range.
        :param ri: the last position of the range (inclusive).
        :param args: extra query parameters, e.g. a ValueRange.
        """
        li, ri = operator.index(li), operator.index(ri)
        if not 0 <= li <= ri < self.size:
            raise InvalidRangeError(
                "range [%d, %d] invalid for a tree of size %d" % (li, ri, self.size)
            )
        if args is None:
            args = self.policy.default_args()
        args = self.policy.check_args(args)

        policy = self.policy
        leaves = self.levels[-1]
        if li == ri:
            return policy.finalize(policy.extract(leaves[li], args))

        lval = policy.extract(leaves[li], args)
        rval = policy.extract(leaves[ri], args)

        h = self.height - 1
        while li // 2 < ri // 2:
            level = self.levels[h]
            # Left pointer is a left child: absorb its right sibling.
            if li % 2 == 0:
                lval = policy.merge(lval, policy.extract(level[li + 1], args), args)
            # Right pointer is a right child: absorb its left sibling.
            if ri % 2 == 1:
                rval = policy.merge(policy.extract(level[ri - 1], args), rval, args)
            li //= 2
            ri //= 2
            h -= 1

        return policy.finalize(policy.merge(lval, rval, args))

    def __len__(self) -> int:
        return self.size

    def __setitem__(self, idx: int, val: Any):
        """
        Sets a value in tree.
        """
        self.update(idx, val)

    def __getitem__(self, idx: int) -> Any:
        """
        Gets the datum stored in the corresponding leaf node of tree.
        """
        idx = operator.index(idx)
        if not 0 <= idx < self.size:
            raise OutOfRangeError("index %d out of range [0, %d)" % (idx, self.size))
        return self.levels[-1][idx]

    def _resolve_range(self, start: int, end: Optional[int]):
        """
        Returns the inclusive range [start, end], `end` defaulting to the last position.
        """
        if end is None:
            end = self.size - 1
        return start, end


class SumSegmentTree(SegmentTree):
    """
    Class representing a segment tree of sums.
    """

    def __init__(self, values: Sequence):
        """
        Instantiates a SumSegmentTree.

        :param values: the elements, in order.
        """
        super().__init__(values, SumPolicy())

    def sum(self, start: int = 0, end: Optional[int] = None) -> Any:
        """
        Returns arr[start] + ... + arr[end].
        """
        return self.query(*self._resolve_range(start, end))


class XorSegmentTree(SegmentTree):
    """
    Class representing a segment tree of bitwise exclusive ors.
    """

    def __init__(self, values: Sequence):
        """
        Instantiates an XorSegmentTree.

        :param values: the elements, in order.
        """
        super().__init__(values, XorPolicy())

    def xor(self, start: int = 0, end: Optional[int] = None) -> Any:
        """
        Returns arr[start] ^ ... ^ arr[end].
        """
        return self.query(*self._resolve_range(start, end))


class AndSegmentTree(SegmentTree):
    """
    Class representing a segment tree of bitwise ands.
    """

    def __init__(self, values: Sequence):
        """
        Instantiates an AndSegmentTree.

        :param values: the elements, in order.
        """
        super().__init__(values, AndPolicy())

    def bitwise_and(self, start: int = 0, end: Optional[int] = None) -> Any:
        """
        Returns arr[start] & ... & arr[end].
        """
        return self.query(*self._resolve_range(start, end))


class OrSegmentTree(SegmentTree):
    """
    Class representing a segment tree of bitwise ors.
    """

    def __init__(self, values: Sequence):
        """
        Instantiates an OrSegmentTree.

        :param values: the elements, in order.
        """
        super().__init__(values, OrPolicy())

    def bitwise_or(self, start: int = 0, end: Optional[int] = None) -> Any:
        """
        Returns arr[start] | ... | arr[end].
        """
        return self.query(*self._resolve_range(start, end))


class MinSegmentTree(SegmentTree):
    """
    Class representing a segment tree of minimums.
    """

    def __init__(self, values: Sequence):
        """
        Instantiates a MinSegmentTree.

        :param values: the elements, in order.
        """
        super().__init__(values, MinPolicy())

    def min(self, start: int = 0, end: Optional[int] = None) -> Any:
        """
        Returns min(arr[start], ..., arr[end])
        """
        return self.query(*self._resolve_range(start, end))


class MaxSegmentTree(SegmentTree):
    """
    Class representing a segment tree of maximums.
    """

    def __init__(self, values: Sequence):
        """
        Instantiates a MaxSegmentTree.

        :param values: the elements, in order.
        """
        super().__init__(values, MaxPolicy())

    def max(self, start: int = 0, end: Optional[int] = None) -> Any:
        """
        Returns max(arr[start], ..., arr[end])
        """
        return self.query(*self._resolve_range(start, end))


class MaxSubarraySumSegmentTree(SegmentTree):
    """
    Class representing a segment tree answering maximum subarray sum queries.
    """

    def __init__(self, values: Sequence):
        """
        Instantiates a MaxSubarraySumSegmentTree.

        :param values: the elements, in order.
        """
        super().__init__(values, MaxSubarraySumPolicy())

    def max_subarray_sum(self, start: int = 0, end: Optional[int] = None) -> Any:
        """
        Returns the largest sum of a non-empty contiguous run of
        arr[start], ..., arr[end].
        """
        return self.query(*self._resolve_range(start, end))


class InRangeCountSegmentTree(SegmentTree):
    """
    Class representing a merge sort tree counting values in a range.
    """

    def __init__(self, values: Sequence):
        """
        Instantiates an InRangeCountSegmentTree.

        :param values: the elements, in order.
        """
        super().__init__(values, InRangeCountPolicy())

    def count(self, start: int, end: int, low: Any, high: Any) -> int:
        """
        Returns the number of positions k in [start, end] with
        low <= arr[k] <= high. An empty filter (low > high) counts nothing.
        """
        return self.query(start, end, ValueRange(low, high))
