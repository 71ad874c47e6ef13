"""Lookup helpers for HashTable."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .types import KeyView, keys_equal

if TYPE_CHECKING:
    from .table import HashTable


def _probe_index(keys: Sequence[Optional[KeyView]], key: KeyView, mask: int) -> int:
    """
    Walk forward from the home slot until an empty slot or an equal key.

    Terminates because a table never fills all of its slots.
    """
    index = key.hash & mask
    while True:
        stored = keys[index]
        if stored is None or keys_equal(stored, key):
            return index
        index = (index + 1) & mask


def _hashtable_lookup(table: "HashTable", key: KeyView) -> tuple[int, bool]:
    index = _probe_index(table.keys, key, table.capacity - 1)
    return index, table.keys[index] is not None


def _hashtable_get(table: "HashTable", key: KeyView) -> Optional[int]:
    index, found = _hashtable_lookup(table, key)
    if not found:
        return None
    return int(table.values[index])
