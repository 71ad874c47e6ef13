"""Insert and growth helpers for HashTable."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from .constants import EMPTY_VALUE, VALIDATE_ON_GROW, VALUE_DTYPE
from .hash_utils import fnv1a_64_batch
from .lookup import _probe_index
from .types import KeyView, ValueSlot, check_word

if TYPE_CHECKING:
    from .table import HashTable


def _allocate_slots(capacity: int) -> tuple[list[Optional[KeyView]], np.ndarray]:
    keys: list[Optional[KeyView]] = [None] * capacity
    values = np.full((capacity,), EMPTY_VALUE, dtype=VALUE_DTYPE)
    return keys, values


def _needs_growth(length: int, capacity: int) -> bool:
    # length + 1 > capacity / 2, kept in integers.
    return 2 * (length + 1) > capacity


def _grow(table: "HashTable") -> None:
    """
    Double the capacity and rehash every occupied slot.

    The new arrays are fully built before the table is touched, so an
    allocation failure leaves the table unchanged.
    """
    new_capacity = table.capacity * 2
    new_keys, new_values = _allocate_slots(new_capacity)
    mask = new_capacity - 1

    old_indices = []
    new_indices = []
    for old_index, key in enumerate(table.keys):
        if key is None:
            continue
        # Keys are distinct, so the probe always stops on an empty slot.
        index = _probe_index(new_keys, key, mask)
        new_keys[index] = key
        old_indices.append(old_index)
        new_indices.append(index)
    new_values[np.asarray(new_indices, dtype=np.intp)] = table.values[
        np.asarray(old_indices, dtype=np.intp)
    ]

    table.keys = new_keys
    table.values = new_values
    table.capacity = new_capacity
    table.generation += 1

    if VALIDATE_ON_GROW:
        table.check_invariants()


def _hashtable_put_index(table: "HashTable", key: KeyView) -> tuple[int, bool]:
    if _needs_growth(table.length, table.capacity):
        _grow(table)

    index = _probe_index(table.keys, key, table.capacity - 1)
    if table.keys[index] is not None:
        return index, False

    table.keys[index] = key
    table.values[index] = EMPTY_VALUE
    table.length += 1
    return index, True


def _hashtable_put(table: "HashTable", key: KeyView) -> ValueSlot:
    index, _ = _hashtable_put_index(table, key)
    return ValueSlot(table=table, index=index, generation=table.generation)


def _hashtable_put_many(
    table: "HashTable", datas: Sequence[bytes], values: Sequence[int]
) -> np.ndarray:
    if len(datas) != len(values):
        raise ValueError("values must match the number of keys.")

    # Validate the whole batch first so a bad entry leaves the table untouched.
    owned = [memoryview(data).tobytes() for data in datas]
    words = [check_word(value) for value in values]
    hashes = fnv1a_64_batch(owned)
    inserted = np.zeros((len(owned),), dtype=np.bool_)
    for i, (data, hash_value, word) in enumerate(zip(owned, hashes, words)):
        index, is_new = _hashtable_put_index(table, KeyView(hash=hash_value, data=data))
        table.values[index] = word
        inserted[i] = is_new
    return inserted
