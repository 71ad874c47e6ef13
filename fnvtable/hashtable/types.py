from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from .constants import VALUE_MAX
from .hash_utils import fnv1a_64

if TYPE_CHECKING:
    from .table import HashTable


@dataclass(frozen=True)
class KeyView:
    """
    Hashed byte-string key.

    The key owns an immutable copy of its bytes, so a key stored in a table
    stays valid whatever the caller later does with its own buffer.
    """

    hash: int
    data: bytes

    @property
    def length(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)


def make_key(data, length: int | None = None) -> KeyView:
    """
    Build a KeyView over the first `length` bytes of a bytes-like object.

    `bytes` input is shared rather than copied; mutable buffers are copied.
    """
    view = memoryview(data).cast("B")
    if length is None:
        length = view.nbytes
    elif length < 0 or length > view.nbytes:
        raise ValueError(f"key length {length} is outside the {view.nbytes}-byte buffer.")
    if isinstance(data, bytes) and length == len(data):
        owned = data
    else:
        owned = view[:length].tobytes()
    return KeyView(hash=fnv1a_64(owned), data=owned)


def keys_equal(a: KeyView, b: KeyView) -> bool:
    # Hash equality alone is not enough; distinct keys may collide.
    if a.hash != b.hash or len(a.data) != len(b.data):
        return False
    return a.data == b.data


def check_word(value) -> int:
    """Validate a slot value as an unsigned 64-bit word and return it as an int."""
    if not isinstance(value, (int, np.integer)):
        raise TypeError(f"slot value must be an integer, got {type(value).__name__}.")
    value = int(value)
    if value < 0 or value > VALUE_MAX:
        raise ValueError("slot value must fit in an unsigned 64-bit word.")
    return value


@dataclass
class ValueSlot:
    """
    Handle to the value word of one occupied table slot.

    Valid until the owning table grows; after that every access raises.
    """

    table: "HashTable" = field(repr=False)
    index: int
    generation: int

    def _check_live(self) -> None:
        if self.generation != self.table.generation:
            raise RuntimeError("value slot was invalidated by a table resize.")

    @property
    def key(self) -> KeyView:
        self._check_live()
        return self.table.keys[self.index]

    @property
    def value(self) -> int:
        self._check_live()
        return int(self.table.values[self.index])

    @value.setter
    def value(self, value: int) -> None:
        self._check_live()
        self.table.values[self.index] = check_word(value)


__all__ = ["KeyView", "ValueSlot", "check_word", "keys_equal", "make_key"]
