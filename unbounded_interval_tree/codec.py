"""
Record encoding of interval trees.

A tree becomes {"root": node-or-None, "size": int}; a node becomes
{"key": [lower, upper], "value": bound, "left": ..., "right": ...}; a bound
becomes None (Unbounded), {"Included": v} or {"Excluded": v}. The augmented
values are written out as well, so decoding rebuilds the exact same tree.

Endpoint values pass through `encode_key` / `decode_key`, identity by
default, for key types JSON cannot carry as-is (see timezone_utils).
"""

import json
from typing import Any, Callable, Optional

from .bounds import Bound, Range, Included, Excluded, Unbounded
from .interval_tree import IntervalTree, IntervalTreeIter
from .node import Node


KeyEncoder = Callable[[Any], Any]
KeyDecoder = Callable[[Any], Any]


def identity(value: Any) -> Any:
    return value


def encode_bound(bound: Bound, encode_key: KeyEncoder = identity) -> Optional[dict]:
    if bound is Unbounded:
        return None
    if isinstance(bound, Included):
        return {"Included": encode_key(bound.value)}
    if isinstance(bound, Excluded):
        return {"Excluded": encode_key(bound.value)}
    raise TypeError(f"Not a bound: {bound!r}")


def decode_bound(record: Any, decode_key: KeyDecoder = identity) -> Bound:
    if record is None:
        return Unbounded
    if not isinstance(record, dict) or len(record) != 1:
        raise ValueError(f"Malformed bound record: {record!r}")

    (tag, value), = record.items()
    if tag == "Included":
        return Included(decode_key(value))
    if tag == "Excluded":
        return Excluded(decode_key(value))
    raise ValueError(f"Unknown bound tag: {tag!r}")


def encode_node(node: Optional[Node], encode_key: KeyEncoder = identity) -> Optional[dict]:
    if node is None:
        return None
    return {
        "key": [encode_bound(node.key[0], encode_key), encode_bound(node.key[1], encode_key)],
        "value": encode_bound(node.value, encode_key),
        "left": encode_node(node.left, encode_key),
        "right": encode_node(node.right, encode_key),
    }


def _decode_key(record: Any, decode_key: KeyDecoder) -> Range:
    if not isinstance(record, (list, tuple)) or len(record) != 2:
        raise ValueError(f"Malformed range record: {record!r}")
    return (decode_bound(record[0], decode_key), decode_bound(record[1], decode_key))


def decode_node(record: Any, decode_key: KeyDecoder = identity) -> Optional[Node]:
    if record is None:
        return None
    if not isinstance(record, dict):
        raise ValueError(f"Malformed node record: {record!r}")

    missing = {"key", "value", "left", "right"} - record.keys()
    if missing:
        raise ValueError(f"Node record lacks fields: {sorted(missing)}")

    node = Node(_decode_key(record["key"], decode_key))
    node.value = decode_bound(record["value"], decode_key)
    node.left = decode_node(record["left"], decode_key)
    node.right = decode_node(record["right"], decode_key)
    return node


def encode_tree(tree: IntervalTree, encode_key: KeyEncoder = identity) -> dict:
    return {
        "root": encode_node(tree.root, encode_key),
        "size": tree.size,
    }


def decode_tree(record: Any, decode_key: KeyDecoder = identity, **tree_kwargs) -> IntervalTree:
    """
    Rebuild a tree from its record.

    Extra keyword arguments (rng, check_invariants) go to the IntervalTree
    constructor. The size must match the number of nodes; augmented values
    are restored as written, not recomputed.
    """
    if not isinstance(record, dict) or "root" not in record or "size" not in record:
        raise ValueError(f"Malformed tree record: {record!r}")

    size = record["size"]
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise ValueError(f"Invalid tree size: {size!r}")

    root = decode_node(record["root"], decode_key)
    count = sum(1 for _ in IntervalTreeIter(root))
    if count != size:
        raise ValueError(f"Tree record holds {count} nodes but claims size {size}")

    tree = IntervalTree(**tree_kwargs)
    tree.root = root
    tree.size = size
    return tree


def dumps(tree: IntervalTree, encode_key: KeyEncoder = identity, **json_kwargs) -> str:
    """Serialize a tree to JSON text."""
    return json.dumps(encode_tree(tree, encode_key), **json_kwargs)


def loads(text: str, decode_key: KeyDecoder = identity, **tree_kwargs) -> IntervalTree:
    """Deserialize a tree from JSON text."""
    try:
        record = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid tree JSON: {e}") from e
    return decode_tree(record, decode_key, **tree_kwargs)
