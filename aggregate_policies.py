import heapq
import operator
import numpy as np

from abc import abstractmethod, ABC
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple

from segment_tree_errors import InvalidArgumentError


@dataclass(frozen=True)
class QueryArgs:
    """
    Extra query-time parameters passed to a policy. Empty by default.
    """


@dataclass(frozen=True)
class ValueRange(QueryArgs):
    """
    Inclusive value filter [low, high] used by the in-range count policy.
    """
    low: Any
    high: Any

    @property
    def is_empty(self) -> bool:
        return self.low > self.high


class AggregatePolicy(ABC):
    """
    Abstract Base Class for the aggregates a SegmentTree can maintain.

    A policy owns no state. It defines three kinds of values: the element
    stored at a leaf position (V), the datum stored at every node (D) and the
    transitional value accumulated while walking a query (T).
    """

    def default_args(self) -> QueryArgs:
        """
        Returns the arguments used when a caller does not pass any.
        """
        return QueryArgs()

    def check_args(self, args: QueryArgs) -> QueryArgs:
        """
        Validates the arguments of a query before the tree is walked.
        """
        return args

    @abstractmethod
    def leaf(self, value: Any, args: QueryArgs) -> Any:
        """
        Builds the datum of a leaf from one element.
        """
        raise NotImplementedError()

    @abstractmethod
    def combine(self, left: Any, right: Any) -> Any:
        """
        Merges two sibling data into their parent datum.

        Must be associative. It need not be commutative, so `left` always
        covers the positions before `right`.
        """
        raise NotImplementedError()

    @abstractmethod
    def extract(self, datum: Any, args: QueryArgs) -> Any:
        """
        Turns a stored datum into a transitional value.
        """
        raise NotImplementedError()

    @abstractmethod
    def merge(self, left: Any, right: Any, args: QueryArgs) -> Any:
        """
        Merges two transitional values, `left` covering the earlier positions.
        """
        raise NotImplementedError()

    @abstractmethod
    def finalize(self, value: Any) -> Any:
        """
        Produces the answer of a query from its final transitional value.
        """
        raise NotImplementedError()


class ReductionPolicy(AggregatePolicy):
    """
    Policy for plain reductions where D, T and V are the same type and both
    combining and merging apply a single binary `operation`.
    """

    def __init__(self, operation: Callable[[Any, Any], Any]):
        """
        Instantiates a ReductionPolicy.

        :param operation: an associative binary operation.
        """
        self.operation = operation

    def leaf(self, value: Any, args: QueryArgs) -> Any:
        return value

    def combine(self, left: Any, right: Any) -> Any:
        return self.operation(left, right)

    def extract(self, datum: Any, args: QueryArgs) -> Any:
        return datum

    def merge(self, left: Any, right: Any, args: QueryArgs) -> Any:
        return self.operation(left, right)

    def finalize(self, value: Any) -> Any:
        return value


class SumPolicy(ReductionPolicy):

    def __init__(self):
        super().__init__(operator.add)


class XorPolicy(ReductionPolicy):

    def __init__(self):
        super().__init__(operator.xor)


class AndPolicy(ReductionPolicy):

    def __init__(self):
        super().__init__(operator.and_)


class OrPolicy(ReductionPolicy):

    def __init__(self):
        super().__init__(operator.or_)


class MinPolicy(ReductionPolicy):

    def __init__(self):
        super().__init__(min)


class MaxPolicy(ReductionPolicy):

    def __init__(self):
        super().__init__(max)


class SubarrayStats(NamedTuple):
    """
    Summary of a contiguous span used by the max-subarray-sum policy.
    """
    best: Any
    prefix: Any
    suffix: Any
    total: Any


class MaxSubarraySumPolicy(AggregatePolicy):
    """
    Maximum sum over all non-empty contiguous subarrays of a range.

    Every node keeps its best subarray sum, its best prefix and suffix sums
    and its total, so two adjacent spans can be merged in constant time.
    The merge is not commutative.
    """

    def leaf(self, value: Any, args: QueryArgs) -> SubarrayStats:
        return SubarrayStats(value, value, value, value)

    def combine(self, left: SubarrayStats, right: SubarrayStats) -> SubarrayStats:
        return SubarrayStats(
            best=max(left.best, right.best, left.suffix + right.prefix),
            prefix=max(left.prefix, left.total + right.prefix),
            suffix=max(right.suffix, right.total + left.suffix),
            total=left.total + right.total,
        )

    def extract(self, datum: SubarrayStats, args: QueryArgs) -> SubarrayStats:
        return datum

    def merge(self, left: SubarrayStats, right: SubarrayStats, args: QueryArgs) -> SubarrayStats:
        return self.combine(left, right)

    def finalize(self, value: SubarrayStats) -> Any:
        return value.best


class InRangeCountPolicy(AggregatePolicy):
    """
    Counts the elements of an index range whose value lies in [low, high].

    Every node stores the sorted values of its span (a merge sort tree), so a
    boundary node is counted with two binary searches.
    """

    def default_args(self) -> QueryArgs:
        raise InvalidArgumentError("InRangeCountPolicy requires a ValueRange")

    def check_args(self, args: QueryArgs) -> ValueRange:
        if not isinstance(args, ValueRange):
            raise InvalidArgumentError(
                "InRangeCountPolicy requires a ValueRange, got %s" % type(args).__name__
            )
        return args

    def leaf(self, value: Any, args: QueryArgs) -> np.ndarray:
        return np.array([value])

    def combine(self, left: np.ndarray, right: np.ndarray) -> np.ndarray:
        # Linear merge of two sorted arrays.
        return np.fromiter(
            heapq.merge(left, right),
            dtype=np.result_type(left, right),
            count=len(left) + len(right),
        )

    def extract(self, datum: np.ndarray, args: ValueRange) -> int:
        if args.is_empty:
            return 0
        lo = np.searchsorted(datum, args.low, side="left")
        hi = np.searchsorted(datum, args.high, side="right")
        return int(hi - lo)

    def merge(self, left: int, right: int, args: ValueRange) -> int:
        # An empty filter leaves the left count as is.
        if args.is_empty:
            return left
        return left + right

    def finalize(self, value: int) -> int:
        return value
