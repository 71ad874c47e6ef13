"""FNV-1a style hashing over byte strings, scalar and batched."""
from __future__ import annotations

from typing import Sequence

import chex
import jax
import jax.numpy as jnp
import numpy as np

from .constants import (
    BATCH_HASH_BACKEND,
    FNV_OFFSET_BASIS,
    FNV_OFFSET_HIGH,
    FNV_OFFSET_LOW,
    FNV_PRIME,
    FNV_PRIME_LOW,
    FNV_PRIME_SHIFT,
    HASH_MASK,
    KEY_PAD_MULTIPLE,
)


def fnv1a_64(data: bytes) -> int:
    """
    Hash a byte string into an unsigned 64-bit integer.

    Each byte multiplies the accumulator by the FNV prime (modulo 2**64)
    and is then XORed in.
    """
    h = FNV_OFFSET_BASIS
    for byte in data:
        h = ((h * FNV_PRIME) & HASH_MASK) ^ byte
    return h


def pad_keys(keys: Sequence[bytes]) -> tuple[np.ndarray, np.ndarray]:
    """
    Pack variable-length keys into a zero-padded uint8 matrix.

    Returns:
        (padded, lengths) where padded has shape (batch, width) and width is
        the longest key rounded up to KEY_PAD_MULTIPLE.
    """
    lengths = np.fromiter((len(k) for k in keys), dtype=np.uint32, count=len(keys))
    longest = int(lengths.max()) if len(keys) else 0
    width = -(-longest // KEY_PAD_MULTIPLE) * KEY_PAD_MULTIPLE
    padded = np.zeros((len(keys), width), dtype=np.uint8)
    for row, key in enumerate(keys):
        padded[row, : len(key)] = np.frombuffer(key, dtype=np.uint8)
    return padded, lengths


def _fnv1a_step(hi: chex.Array, lo: chex.Array, byte: chex.Array) -> tuple[chex.Array, chex.Array]:
    """One multiply-then-xor round on a 64-bit accumulator split into uint32 halves."""
    prime_low = jnp.uint32(FNV_PRIME_LOW)

    # lo * prime_low can exceed 32 bits; split lo so each partial product fits.
    lo_lo = lo & jnp.uint32(0xFFFF)
    lo_hi = lo >> jnp.uint32(16)
    partial_low = lo_lo * prime_low
    partial_high = lo_hi * prime_low
    new_lo = partial_low + (partial_high << jnp.uint32(16))
    carry = (new_lo < partial_low).astype(jnp.uint32)

    new_hi = (
        hi * prime_low
        + (partial_high >> jnp.uint32(16))
        + carry
        + (lo << jnp.uint32(FNV_PRIME_SHIFT))
    )
    return new_hi, new_lo ^ byte


@jax.jit
def _fnv1a_64_split_jit(padded: chex.Array, lengths: chex.Array) -> tuple[chex.Array, chex.Array]:
    batch = padded.shape[0]
    columns = jnp.asarray(padded, dtype=jnp.uint32).T
    positions = jnp.arange(padded.shape[1], dtype=jnp.uint32)
    lengths = jnp.asarray(lengths, dtype=jnp.uint32)

    hi = jnp.full((batch,), jnp.uint32(FNV_OFFSET_HIGH), dtype=jnp.uint32)
    lo = jnp.full((batch,), jnp.uint32(FNV_OFFSET_LOW), dtype=jnp.uint32)

    def _body(carry, xs):
        hi, lo = carry
        column, position = xs
        new_hi, new_lo = _fnv1a_step(hi, lo, column)
        active = position < lengths
        return (jnp.where(active, new_hi, hi), jnp.where(active, new_lo, lo)), None

    (hi, lo), _ = jax.lax.scan(_body, (hi, lo), (columns, positions))
    return hi, lo


def fnv1a_64_jax(keys: Sequence[bytes]) -> list[int]:
    """Hash a batch of keys with the JIT-compiled scan, padding bytes masked out."""
    if len(keys) == 0:
        return []
    padded, lengths = pad_keys(keys)
    hi, lo = _fnv1a_64_split_jit(padded, lengths)
    hi = np.asarray(jax.device_get(hi)).astype(np.uint64)
    lo = np.asarray(jax.device_get(lo)).astype(np.uint64)
    chex.assert_equal_shape([hi, lo])
    return ((hi << np.uint64(32)) | lo).tolist()


def fnv1a_64_batch(keys: Sequence[bytes], backend: str | None = None) -> list[int]:
    """
    Hash many keys at once.

    Args:
        keys: Byte strings to hash.
        backend: "jax" or "python"; defaults to FNVTABLE_BATCH_HASH_BACKEND.
    Returns:
        One unsigned 64-bit hash per key, identical to fnv1a_64.
    """
    backend = BATCH_HASH_BACKEND if backend is None else backend
    if backend == "jax":
        return fnv1a_64_jax(keys)
    if backend == "python":
        return [fnv1a_64(k) for k in keys]
    raise ValueError(f"Unknown hash backend: {backend}. Expected one of: jax, python.")
