"""
Persistent tree storage.

Abstract base class and a JSON implementation for keeping named interval
trees on disk in the record format of the codec module.
"""

import json
import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from . import codec
from .config import StorageConfig, is_debug_enabled
from .interval_tree import IntervalTree
from .timezone_utils import encode_datetime_key, decode_datetime_key


def _debug_print(msg: str) -> None:
    if not is_debug_enabled():
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] STORAGE: {msg}", file=sys.stderr)


@dataclass(frozen=True)
class KeyCodec:
    """Pair of functions mapping endpoint values to JSON values and back."""
    encode: codec.KeyEncoder = codec.identity
    decode: codec.KeyDecoder = codec.identity


PLAIN_KEYS = KeyCodec()
DATETIME_KEYS = KeyCodec(encode=encode_datetime_key, decode=decode_datetime_key)

_KEY_CODECS = {
    "plain": PLAIN_KEYS,
    "datetime": DATETIME_KEYS,
}


class TreeStorageBackend(ABC):
    """
    Abstract base class for tree storage backends.

    Implementations must handle persistence (JSON, SQLite, etc).
    """

    @abstractmethod
    def load_tree(self, name: str) -> Optional[IntervalTree]:
        """Load a tree by name, None if there is none."""
        pass

    @abstractmethod
    def save_tree(self, name: str, tree: IntervalTree) -> None:
        """Save or replace a tree."""
        pass

    @abstractmethod
    def delete_tree(self, name: str) -> bool:
        """Delete a tree. Returns False if it did not exist."""
        pass

    @abstractmethod
    def list_trees(self) -> list[str]:
        """List the names of all stored trees."""
        pass


class JsonTreeStorage(TreeStorageBackend):
    """
    JSON file-based tree storage.

    Structure:
    - {storage_dir}/{name}.json - {"name": ..., "updated": ..., "tree": record}
    """

    def __init__(self, storage_dir: Path, indent: Optional[int] = 2, key_codec: KeyCodec = PLAIN_KEYS):
        self.storage_dir = Path(storage_dir)
        self.indent = indent
        self.key_codec = key_codec

        self.storage_dir.mkdir(parents=True, exist_ok=True)

        _debug_print(f"Initialized JSON storage at {self.storage_dir}")

    def _name_to_filename(self, name: str) -> str:
        """Convert a tree name to a safe filename, one file per distinct name."""
        return quote(name, safe="") + ".json"

    def _tree_file(self, name: str) -> Path:
        return self.storage_dir / self._name_to_filename(name)

    def load_tree(self, name: str, **tree_kwargs) -> Optional[IntervalTree]:
        """Load a tree by name; extra keyword arguments go to IntervalTree."""
        file_path = self._tree_file(name)
        if not file_path.exists():
            return None

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            tree = codec.decode_tree(data["tree"], self.key_codec.decode, **tree_kwargs)
        except (OSError, KeyError, TypeError, ValueError) as e:
            _debug_print(f"Error loading tree {name}: {e}")
            raise ValueError(f"Cannot load tree '{name}' from {file_path}: {e}") from e

        _debug_print(f"Loaded tree {name} with {len(tree)} ranges")
        return tree

    def save_tree(self, name: str, tree: IntervalTree) -> None:
        """Save or replace a tree."""
        file_path = self._tree_file(name)
        data = {
            "name": name,
            "updated": datetime.now().isoformat(),
            "tree": codec.encode_tree(tree, self.key_codec.encode),
        }

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=self.indent, ensure_ascii=False)
        _debug_print(f"Saved tree {name} with {len(tree)} ranges")

    def delete_tree(self, name: str) -> bool:
        """Delete a tree. Returns False if it did not exist."""
        file_path = self._tree_file(name)
        if not file_path.exists():
            return False
        file_path.unlink()
        _debug_print(f"Deleted tree {name}")
        return True

    def list_trees(self) -> list[str]:
        """List the names of all stored trees."""
        names = set()
        for f in self.storage_dir.glob("*.json"):
            try:
                with open(f, 'r', encoding='utf-8') as file:
                    data = json.load(file)
            except (OSError, ValueError) as e:
                _debug_print(f"Skipping unreadable file {f.name}: {e}")
                continue
            if isinstance(data, dict) and "name" in data:
                names.add(data["name"])
        return sorted(names)


def get_default_storage_dir() -> Path:
    """Get the default storage directory respecting XDG."""
    xdg_data = os.environ.get('XDG_DATA_HOME', os.path.expanduser('~/.local/share'))
    return Path(xdg_data) / 'unbounded-interval-tree' / 'trees'


def get_key_codec(key_type: str) -> KeyCodec:
    try:
        return _KEY_CODECS[key_type]
    except KeyError:
        raise ValueError(f"Unknown key type: {key_type!r}") from None


def create_storage_backend(
    storage_dir: Optional[Path] = None,
    key_codec: Optional[KeyCodec] = None,
    indent: Optional[int] = 2,
) -> TreeStorageBackend:
    """Factory function to create a storage backend."""
    if storage_dir is None:
        storage_dir = get_default_storage_dir()
    if key_codec is None:
        key_codec = PLAIN_KEYS

    return JsonTreeStorage(storage_dir, indent=indent, key_codec=key_codec)


def create_storage_from_config(config: StorageConfig) -> TreeStorageBackend:
    """Build the storage backend described by a [Storage] config section."""
    return create_storage_backend(
        storage_dir=config.storage_dir,
        key_codec=get_key_codec(config.key_type),
        indent=config.indent,
    )
