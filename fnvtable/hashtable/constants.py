"""Constants and environment-driven configuration for HashTable."""
from __future__ import annotations

import os

import numpy as np

FNV_OFFSET_BASIS = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3
HASH_MASK = (1 << 64) - 1

# JAX runs in 32-bit mode by default, so the batched hasher carries the
# accumulator as two uint32 halves. FNV_PRIME == 2**40 + FNV_PRIME_LOW.
FNV_OFFSET_HIGH = FNV_OFFSET_BASIS >> 32
FNV_OFFSET_LOW = FNV_OFFSET_BASIS & 0xFFFFFFFF
FNV_PRIME_LOW = FNV_PRIME & 0xFFFFFFFF
FNV_PRIME_SHIFT = 40 - 32

VALUE_DTYPE = np.uint64
VALUE_MAX = HASH_MASK
EMPTY_VALUE = 0

# Padded key matrices are rounded up to this width to limit JIT retracing.
KEY_PAD_MULTIPLE = 8


def _parse_bool_env(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean-like value.")


def _parse_int_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"", "none", "auto"}:
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be positive.")
    return parsed


def is_power_of_two(value: int) -> bool:
    return value >= 1 and (value & (value - 1)) == 0


DEFAULT_CAPACITY = _parse_int_env("FNVTABLE_DEFAULT_CAPACITY", 1024)
if not is_power_of_two(DEFAULT_CAPACITY):
    raise ValueError("FNVTABLE_DEFAULT_CAPACITY must be a power of two.")

BATCH_HASH_BACKEND = os.environ.get("FNVTABLE_BATCH_HASH_BACKEND", "jax").strip().lower()
if BATCH_HASH_BACKEND not in {"jax", "python"}:
    raise ValueError("Invalid FNVTABLE_BATCH_HASH_BACKEND. Expected one of: jax, python.")

# Debug aid: verify every structural invariant after each growth.
VALIDATE_ON_GROW = _parse_bool_env("FNVTABLE_VALIDATE_ON_GROW", False)
