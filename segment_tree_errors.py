class SegmentTreeError(Exception):
    """
    Base class for errors raised by a SegmentTree.
    """


class InvalidArgumentError(SegmentTreeError, ValueError):
    """
    Raised when the input sequence cannot be used to build a tree, or when a
    policy is queried without the arguments it requires.
    """


class OutOfRangeError(SegmentTreeError, IndexError):
    """
    Raised when an element index lies outside [0, size).
    """


class InvalidRangeError(SegmentTreeError, IndexError):
    """
    Raised when a query range is reversed or reaches outside [0, size).
    """
