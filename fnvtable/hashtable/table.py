"""HashTable data container and public API."""
from __future__ import annotations

from typing import Iterator, Optional, Sequence

import numpy as np
from tabulate import tabulate

from .constants import DEFAULT_CAPACITY, is_power_of_two
from .hash_utils import fnv1a_64_batch
from .insert import _allocate_slots, _hashtable_put, _hashtable_put_many
from .lookup import _hashtable_get, _hashtable_lookup
from .types import KeyView, ValueSlot, make_key


class HashTable:
    """
    Open Addressing Hash Table Implementation

    Maps byte-string keys to unsigned 64-bit words. Collisions are resolved
    by linear probing over a power-of-two array, and the table doubles
    before an insert would push the load factor past one half.
    """

    length: int
    capacity: int
    generation: int
    keys: list[Optional[KeyView]]
    values: np.ndarray

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if not is_power_of_two(capacity):
            raise ValueError("capacity must be a positive power of two.")
        self.length = 0
        self.capacity = capacity
        self.generation = 0
        self.keys, self.values = _allocate_slots(capacity)

    @staticmethod
    def build(capacity: int | None = None) -> "HashTable":
        """
        Initialize a new, empty hash table.
        """
        return HashTable(DEFAULT_CAPACITY if capacity is None else capacity)

    def put(self, key: KeyView) -> ValueSlot:
        """Return the value slot for `key`, claiming an empty slot if it is absent."""
        return _hashtable_put(self, key)

    def get(self, key: KeyView) -> Optional[int]:
        return _hashtable_get(self, key)

    def lookup(self, key: KeyView) -> tuple[int, bool]:
        return _hashtable_lookup(self, key)

    def put_many(self, datas: Sequence[bytes], values: Sequence[int]) -> np.ndarray:
        """
        Insert a batch of raw keys and assign their values.

        Keys are hashed together with the batch hasher, then inserted in
        order. Returns a bool mask marking the keys that were newly added.
        """
        return _hashtable_put_many(self, datas, values)

    def get_many(self, datas: Sequence[bytes]) -> list[Optional[int]]:
        owned = [memoryview(data).tobytes() for data in datas]
        hashes = fnv1a_64_batch(owned)
        return [self.get(KeyView(hash=h, data=data)) for data, h in zip(owned, hashes)]

    @property
    def load_factor(self) -> float:
        return self.length / self.capacity

    def items(self) -> Iterator[tuple[bytes, int]]:
        for key, value in zip(self.keys, self.values):
            if key is not None:
                yield key.data, int(value)

    def probe_distances(self) -> np.ndarray:
        """Distance of every occupied slot from its home slot, in slot order."""
        mask = self.capacity - 1
        distances = [
            (index - key.hash) & mask for index, key in enumerate(self.keys) if key is not None
        ]
        return np.asarray(distances, dtype=np.int64)

    def check_invariants(self) -> None:
        """Raise AssertionError describing the first broken structural invariant."""
        if not is_power_of_two(self.capacity):
            raise AssertionError(f"capacity {self.capacity} is not a power of two")
        if len(self.keys) != self.capacity:
            raise AssertionError("key array does not match capacity")
        if self.values.shape != (self.capacity,):
            raise AssertionError("value array does not match capacity")
        occupied = sum(key is not None for key in self.keys)
        if occupied != self.length:
            raise AssertionError(f"length {self.length} != occupied slots {occupied}")
        if 2 * self.length > self.capacity:
            raise AssertionError("load factor exceeds one half")

        mask = self.capacity - 1
        for index, key in enumerate(self.keys):
            if key is None:
                continue
            probe = key.hash & mask
            while probe != index:
                if self.keys[probe] is None:
                    raise AssertionError(f"empty slot {probe} breaks chain to {index}")
                probe = (probe + 1) & mask
            if self.lookup(key) != (index, True):
                raise AssertionError(f"key at slot {index} is unreachable")

    def __len__(self) -> int:
        return self.length

    def __contains__(self, key) -> bool:
        if not isinstance(key, KeyView):
            key = make_key(key)
        return self.lookup(key)[1]

    def __str__(self) -> str:
        distances = self.probe_distances()
        max_distance = int(distances.max()) if distances.size else 0
        rows = [
            ["capacity", self.capacity],
            ["length", self.length],
            ["load factor", f"{self.load_factor:.3f}"],
            ["generation", self.generation],
            ["max probe distance", max_distance],
        ]
        return tabulate(rows, tablefmt="plain")

    def __repr__(self) -> str:
        return f"HashTable(length={self.length}, capacity={self.capacity})"
