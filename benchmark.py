import random
import time
import matplotlib.pyplot as plt
import numpy as np

from typing import Callable, Dict, List, Tuple

from aggregate_policies import ValueRange
from segment_tree import (
    SegmentTree,
    SumSegmentTree,
    XorSegmentTree,
    AndSegmentTree,
    OrSegmentTree,
    MinSegmentTree,
    MaxSegmentTree,
    MaxSubarraySumSegmentTree,
    InRangeCountSegmentTree,
)


def max_subarray_sum(values: List[int]) -> int:
    """Kadane's algorithm over a non-empty list."""
    best = current = values[0]
    for value in values[1:]:
        current = max(value, current + value)
        best = max(best, current)
    return best


def reduce_with(operation: Callable) -> Callable:
    def reduction(values: List[int]) -> int:
        result = values[0]
        for value in values[1:]:
            result = operation(result, value)
        return result
    return reduction


# tree class, brute force answer of values[li..ri]
TREES: Dict[str, Tuple[type, Callable]] = {
    "sum": (SumSegmentTree, sum),
    "xor": (XorSegmentTree, reduce_with(lambda a, b: a ^ b)),
    "and": (AndSegmentTree, reduce_with(lambda a, b: a & b)),
    "or": (OrSegmentTree, reduce_with(lambda a, b: a | b)),
    "min": (MinSegmentTree, min),
    "max": (MaxSegmentTree, max),
    "max_subarray_sum": (MaxSubarraySumSegmentTree, max_subarray_sum),
}


def run(tree_cls: type, brute_force: Callable, size: int, num_operations: int) -> Tuple[float, float, float]:
    """
    Builds a tree over random values, then interleaves random updates and
    queries, checking every answer against `brute_force`.

    :return: a tuple of timings in seconds (build, updates, queries)
    """
    values = [int(v) for v in np.random.randint(-1000, 1000, size=size)]

    start = time.perf_counter()
    tree: SegmentTree = tree_cls(values)
    build_time = time.perf_counter() - start

    update_time = query_time = 0.0
    for _ in range(num_operations):
        idx = random.randrange(size)
        value = random.randint(-1000, 1000)
        start = time.perf_counter()
        tree.update(idx, value)
        update_time += time.perf_counter() - start
        values[idx] = value

        li = random.randrange(size)
        ri = random.randrange(li, size)
        start = time.perf_counter()
        answer = tree.query(li, ri)
        query_time += time.perf_counter() - start

        expected = brute_force(values[li:ri + 1])
        assert answer == expected, "%s: query(%d, %d) = %s, expected %s" % (
            tree_cls.__name__, li, ri, answer, expected)

    return build_time, update_time, query_time


def run_in_range_count(size: int, num_operations: int) -> Tuple[float, float, float]:
    """
    Same as `run` for the in-range count tree, with a random value filter.
    """
    values = [int(v) for v in np.random.randint(0, 100, size=size)]

    start = time.perf_counter()
    tree = InRangeCountSegmentTree(values)
    build_time = time.perf_counter() - start

    update_time = query_time = 0.0
    for _ in range(num_operations):
        idx = random.randrange(size)
        value = random.randint(0, 99)
        start = time.perf_counter()
        tree.update(idx, value)
        update_time += time.perf_counter() - start
        values[idx] = value

        li = random.randrange(size)
        ri = random.randrange(li, size)
        low, high = random.randint(0, 99), random.randint(0, 99)
        start = time.perf_counter()
        answer = tree.query(li, ri, ValueRange(low, high))
        query_time += time.perf_counter() - start

        expected = sum(1 for v in values[li:ri + 1] if low <= v <= high)
        assert answer == expected, "in_range_count: query(%d, %d, %d, %d) = %d, expected %d" % (
            li, ri, low, high, answer, expected)

    return build_time, update_time, query_time


def plot(sizes: List[int], timings: Dict[str, List[Tuple[float, float, float]]]):
    """Plots build, update and query timings per tree against size."""
    plt.figure(figsize=(20, 5))
    for i, title in enumerate(["build", "updates", "queries"]):
        plt.subplot(131 + i)
        plt.title(title)
        for name, results in timings.items():
            plt.plot(sizes, [result[i] for result in results], label=name)
        plt.xscale("log")
        plt.xlabel("size")
        plt.ylabel("seconds")
    plt.legend()
    plt.show()


seed = 777
sizes = [1, 2, 5, 64, 1000, 10_000]
num_operations = 200

random.seed(seed)
np.random.seed(seed)

timings = {name: [] for name in list(TREES) + ["in_range_count"]}
for size in sizes:
    for name, (tree_cls, brute_force) in TREES.items():
        timings[name].append(run(tree_cls, brute_force, size, num_operations))
    timings["in_range_count"].append(run_in_range_count(size, num_operations))
    print("size " + str(size) + " ok")

for name, results in timings.items():
    build_time, update_time, query_time = results[-1]
    print("%s: build %.4fs, %d updates %.4fs, %d queries %.4fs" % (
        name, build_time, num_operations, update_time, num_operations, query_time))

plot(sizes, timings)
