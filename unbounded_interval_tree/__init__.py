"""
Unbounded Interval Tree

An interval tree over any totally ordered key type, with inclusive, exclusive
and unbounded endpoints:
- Endpoint model and ordering (bounds.py)
- Augmented tree node (node.py)
- Tree with overlap, containment and difference queries (interval_tree.py)
- Record / JSON encoding (codec.py)
- Datetime endpoints in UTC (timezone_utils.py)
- On-disk storage of named trees (storage.py)
- TOML configuration (config.py)
"""

from .bounds import (
    Included, Excluded, Unbounded, Bound, Range,
    to_range, closed, at_most, format_range,
)
from .interval_tree import IntervalTree, IntervalTreeIter
from .config import Config, TreeConfig, StorageConfig, set_debug
from .storage import (
    TreeStorageBackend, JsonTreeStorage, KeyCodec, PLAIN_KEYS, DATETIME_KEYS,
    create_storage_backend, create_storage_from_config,
)

__all__ = [
    'Included',
    'Excluded',
    'Unbounded',
    'Bound',
    'Range',
    'to_range',
    'closed',
    'at_most',
    'format_range',
    'IntervalTree',
    'IntervalTreeIter',
    'Config',
    'TreeConfig',
    'StorageConfig',
    'set_debug',
    'TreeStorageBackend',
    'JsonTreeStorage',
    'KeyCodec',
    'PLAIN_KEYS',
    'DATETIME_KEYS',
    'create_storage_backend',
    'create_storage_from_config',
]
