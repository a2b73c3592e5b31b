from typing import Generic, Optional

from .bounds import (
    K, Bound, Range, Unbounded, upper_key,
    format_range, format_upper,
)


class Node(Generic[K]):
    """Tree node holding one range and the max upper bound of its subtree."""
    __slots__ = ['key', 'value', 'left', 'right']

    def __init__(self, key: Range):
        self.key: Range = key
        self.value: Bound = key[1]  # Max upper bound over this subtree
        self.left: Optional['Node[K]'] = None
        self.right: Optional['Node[K]'] = None

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def maybe_update_value(self, inserted_max: Bound):
        """Grow the augmented value if `inserted_max` exceeds it."""
        if self.value is Unbounded:
            return
        if inserted_max is Unbounded:
            self.value = Unbounded
        elif upper_key(self.value) < upper_key(inserted_max):
            self.value = inserted_max

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        # Iterative: a degenerate tree is as deep as it is long.
        pending = [(self, other)]
        while pending:
            a, b = pending.pop()
            if a is None or b is None:
                if a is not b:
                    return False
                continue
            if a.key != b.key or a.value != b.value:
                return False
            pending.append((a.left, b.left))
            pending.append((a.right, b.right))
        return True

    __hash__ = None

    def __repr__(self):
        return f"Node({self.key!r}, value={self.value!r})"

    def __str__(self):
        value = "∞" if self.value is Unbounded else format_upper(self.value)
        text = f" {{ {format_range(self.key)} ({value})"
        if self.left is not None:
            text += f" left:{self.left}"
        if self.right is not None:
            text += f" right:{self.right}"
        return text + "} "
