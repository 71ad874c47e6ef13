from .hashtable import (
    HashTable,
    KeyView,
    ValueSlot,
    fnv1a_64,
    fnv1a_64_batch,
    keys_equal,
    make_key,
)

__all__ = [
    # hashtable.table
    "HashTable",
    # hashtable.types
    "KeyView",
    "ValueSlot",
    "keys_equal",
    "make_key",
    # hashtable.hash_utils
    "fnv1a_64",
    "fnv1a_64_batch",
]
