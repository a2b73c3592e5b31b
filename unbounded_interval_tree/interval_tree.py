"""
Interval tree over ranges with inclusive, exclusive or unbounded endpoints.

A plain (non-balancing) binary search tree ordered by range, where every node
also keeps the maximum upper bound found in its subtree. That augmentation is
what lets overlap queries skip whole subtrees. Inserting sorted data degrades
the tree into a list; no rotation scheme is applied.
"""

import random
import sys
from datetime import datetime
from typing import Any, Generic, Iterable, Iterator, Optional

from .bounds import (
    K, Bound, Range, Included, Unbounded,
    to_range, flip, spans, max_upper, cmp_ranges, cmp_upper,
    lower_key, upper_key, range_key,
)
from .config import TreeConfig, is_debug_enabled
from .node import Node


def _debug_print(msg: str) -> None:
    if not is_debug_enabled():
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] TREE: {msg}", file=sys.stderr)


class IntervalTree(Generic[K]):
    def __init__(
        self,
        ranges: Optional[Iterable[Any]] = None,
        rng: Optional[random.Random] = None,
        check_invariants: bool = False,
    ):
        self.root: Optional[Node[K]] = None
        self.size: int = 0
        self._rng = rng if rng is not None else random.Random()
        self._check_invariants = check_invariants

        if ranges is not None:
            for r in ranges:
                self.insert(r)

    @classmethod
    def from_config(cls, config: TreeConfig, ranges: Optional[Iterable[Any]] = None) -> 'IntervalTree[K]':
        return cls(ranges, rng=config.make_rng(), check_invariants=config.check_invariants)

    # --- Internal Utilities ---

    def _after_mutation(self):
        if self._check_invariants:
            self.verify_integrity()

    # --- Public API ---

    def insert(self, range_like: Any):
        """Store a range. Inserting a range that is already present is a no-op."""
        key = to_range(range_like)

        if self.root is None:
            self.root = Node(key)
            self.size += 1
            self._after_mutation()
            return

        # Walk down to a leaf position, growing the augmentation on the way.
        curr = self.root
        while True:
            curr.maybe_update_value(key[1])

            order = cmp_ranges(key, curr.key)
            if order == 0:
                _debug_print(f"Ignoring duplicate range {key!r}")
                return
            if order < 0:
                if curr.left is None:
                    curr.left = Node(key)
                    break
                curr = curr.left
            else:
                if curr.right is None:
                    curr.right = Node(key)
                    break
                curr = curr.right

        self.size += 1
        self._after_mutation()

    def remove_random_leaf(self) -> Optional[Range]:
        """
        Detach a randomly chosen leaf and return its range.

        Returns None when the tree is empty. Ancestors of the removed leaf get
        their augmented value shrunk to the new maximum of their subtree.
        """
        if self.root is None:
            return None

        if self.root.is_leaf():
            deleted = self.root.key
            self.root = None
            self.size = 0
            _debug_print(f"Removed root leaf {deleted!r}")
            return deleted

        # Each entry: (ancestor, max upper bound of everything in it except
        # the child we descended into).
        path: list[tuple[Node[K], Bound]] = []

        curr = self.root
        while True:
            # `curr` is always an internal node here.
            if curr.left is None:
                go_left = False
            elif curr.right is None:
                go_left = True
            else:
                go_left = self._rng.random() < 0.5

            other = curr.right if go_left else curr.left
            if other is None:
                max_other = curr.key[1]
            else:
                max_other = max_upper(curr.key[1], other.value)

            child = curr.left if go_left else curr.right
            if child.is_leaf():
                if go_left:
                    curr.left = None
                else:
                    curr.right = None
                curr.value = max_other
                deleted = child.key
                new_max = max_other
                break

            path.append((curr, max_other))
            curr = child

        # Bubble the new subtree maximum up as long as it changes anything.
        while path:
            node, max_other = path.pop()
            if cmp_upper(node.value, max_other) == 0:
                break

            new_max = max_upper(max_other, new_max)
            order = cmp_upper(node.value, new_max)
            if order == 0:
                break
            if order < 0:
                raise RuntimeError(
                    f"Augmentation violation at {node.key!r}: "
                    f"{node.value!r} is below its subtree maximum {new_max!r}"
                )
            node.value = new_max

        self.size -= 1
        _debug_print(f"Removed leaf {deleted!r}, {self.size} ranges left")
        self._after_mutation()
        return deleted

    def clear(self):
        self.root = None
        self.size = 0

    def __len__(self) -> int:
        return self.size

    def is_empty(self) -> bool:
        return len(self) == 0

    def __iter__(self) -> 'IntervalTreeIter[K]':
        return IntervalTreeIter(self.root)

    def __eq__(self, other):
        if not isinstance(other, IntervalTree):
            return NotImplemented
        return self.size == other.size and self.root == other.root

    __hash__ = None

    def __repr__(self):
        return f"IntervalTree({list(self)!r})"

    def __str__(self):
        if self.root is None:
            return "Empty tree"
        return str(self.root)

    # --- Search Methods ---

    def get_interval_overlaps(self, range_like: Any) -> list[Range]:
        """Stored ranges intersecting the query, in ascending range order."""
        query = to_range(range_like)
        q_min = lower_key(query[0])
        q_max = upper_key(query[1])
        acc: list[Range] = []

        # Inorder walk with an explicit stack; degenerate trees are too deep
        # for recursion.
        stack: list[Node[K]] = []
        node = self.root
        while True:
            # A subtree whose max upper bound falls short of the query is skipped whole.
            while node is not None and upper_key(node.value) >= q_min:
                stack.append(node)
                node = node.left
            if not stack:
                break

            node = stack.pop()
            # This node and everything after it in order start past the query.
            if lower_key(node.key[0]) > q_max:
                break
            if upper_key(node.key[1]) >= q_min:
                acc.append(node.key)
            node = node.right

        return acc

    def get_interval_difference(self, range_like: Any) -> list[Range]:
        """
        Parts of the query not covered by any stored range.

        Returns maximal, disjoint (lower, upper) pairs in ascending order. A
        gap bordering stored coverage takes the complement inclusivity of the
        stored endpoint, e.g. coverage ending at Excluded(10) and resuming at
        Excluded(10) leaves the one-point gap (Included(10), Included(10)).
        """
        query = to_range(range_like)
        overlaps = self.get_interval_overlaps(query)

        if not overlaps:
            return [query]

        acc: list[Range] = []
        first = overlaps[0]

        if first[0] is not Unbounded:
            gap_max = flip(first[0])
            if spans(query[0], gap_max):
                acc.append((query[0], gap_max))

        # Coverage reaches infinity: nothing left to find.
        if first[1] is Unbounded:
            return acc

        contiguous = first[1]  # Upper end of the current contiguous run
        for overlap in overlaps[1:]:
            if overlap[0] is not Unbounded:
                gap_min, gap_max = flip(contiguous), flip(overlap[0])
                if spans(gap_min, gap_max):
                    acc.append((gap_min, gap_max))
                    contiguous = overlap[1]

            if overlap[1] is Unbounded:
                return acc
            contiguous = max_upper(contiguous, overlap[1])

        gap_min = flip(contiguous)
        if spans(gap_min, query[1]):
            acc.append((gap_min, query[1]))

        return acc

    def contains_interval(self, range_like: Any) -> bool:
        """True if every point of the query lies in some stored range."""
        return not self.get_interval_difference(range_like)

    def contains_point(self, point: Any) -> bool:
        """Stabbing query: is `point` inside any stored range?"""
        return self.contains_interval((Included(point), Included(point)))

    # --- Debug Tool ---

    def height(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        best = 0
        pending = [(self.root, 1)]
        while pending:
            node, depth = pending.pop()
            if node is None:
                continue
            best = max(best, depth)
            pending.append((node.left, depth + 1))
            pending.append((node.right, depth + 1))
        return best

    def verify_integrity(self):
        """Raises RuntimeError if BST order, augmentation or size are violated."""
        count = 0
        # Post-order walk; the flag marks nodes whose children were already checked
        pending = [(self.root, None, None, False)]
        while pending:
            node, low, high, children_done = pending.pop()
            if node is None:
                continue

            if not children_done:
                key = range_key(node.key)
                if low is not None and not key > low:
                    raise RuntimeError(f"Order Violation at {node.key!r}")
                if high is not None and not key < high:
                    raise RuntimeError(f"Order Violation at {node.key!r}")
                pending.append((node, low, high, True))
                pending.append((node.right, key, high, False))
                pending.append((node.left, low, key, False))
                continue

            count += 1
            expected_max = node.key[1]
            for child in (node.left, node.right):
                if child is not None:
                    expected_max = max_upper(expected_max, child.value)
            if cmp_upper(node.value, expected_max) != 0:
                raise RuntimeError(
                    f"MaxEnd Violation at {node.key!r}: "
                    f"stored {node.value!r}, expected {expected_max!r}"
                )

        if count != self.size:
            raise RuntimeError(f"Size Violation: {count} nodes, size {self.size}")


class IntervalTreeIter(Generic[K]):
    """Inorder walk over the stored ranges, driven by an explicit stack."""

    def __init__(self, root: Optional[Node[K]]):
        self._to_visit: list[Node[K]] = []
        self._curr: Optional[Node[K]] = root

    def __iter__(self) -> Iterator[Range]:
        return self

    def __next__(self) -> Range:
        if self._curr is None and not self._to_visit:
            raise StopIteration

        while self._curr is not None:
            self._to_visit.append(self._curr)
            self._curr = self._curr.left

        visited = self._to_visit.pop()
        self._curr = visited.right
        return visited.key
