from .hash_utils import fnv1a_64, fnv1a_64_batch
from .table import HashTable
from .types import KeyView, ValueSlot, keys_equal, make_key

__all__ = [
    "HashTable",
    "KeyView",
    "ValueSlot",
    "fnv1a_64",
    "fnv1a_64_batch",
    "keys_equal",
    "make_key",
]
