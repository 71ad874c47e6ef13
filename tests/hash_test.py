import chex
import numpy as np
import pytest

from fnvtable import fnv1a_64, fnv1a_64_batch, make_key
from fnvtable.hashtable.hash_utils import fnv1a_64_jax, pad_keys

MIXED_KEYS = [
    b"",
    b"a",
    b"b",
    b"ab",
    b"0       ",
    b"hello world",
    bytes(range(256)),
    b"\x00",
    b"\x00\x00",
    b"\xff" * 17,
]


def test_empty_input_hashes_to_offset_basis():
    assert fnv1a_64(b"") == 0xCBF29CE484222325


def test_known_vector():
    assert fnv1a_64(b"a") == 0xAF63BD4C8601B7BE


def test_hash_is_deterministic():
    for key in MIXED_KEYS:
        assert fnv1a_64(key) == fnv1a_64(key)


def test_hash_fits_in_64_bits():
    for key in MIXED_KEYS:
        assert 0 <= fnv1a_64(key) < 2**64


def test_trailing_zero_bytes_change_hash():
    # Padding must never be confused with real zero bytes.
    assert fnv1a_64(b"\x00") != fnv1a_64(b"")
    assert fnv1a_64(b"\x00\x00") != fnv1a_64(b"\x00")


def test_pad_keys_shapes():
    padded, lengths = pad_keys([b"abc", b"", b"0123456789"])
    chex.assert_shape(padded, (3, 16))
    chex.assert_shape(lengths, (3,))
    assert padded.dtype == np.uint8
    assert lengths.tolist() == [3, 0, 10]
    assert bytes(padded[0, :3]) == b"abc"
    assert not padded[1].any()
    assert bytes(padded[2, :10]) == b"0123456789"


def test_pad_keys_empty_batch():
    padded, lengths = pad_keys([])
    chex.assert_shape(padded, (0, 0))
    chex.assert_shape(lengths, (0,))


def test_jax_batch_matches_scalar_hash():
    expected = [fnv1a_64(k) for k in MIXED_KEYS]
    assert fnv1a_64_jax(MIXED_KEYS) == expected


def test_jax_batch_only_empty_keys():
    assert fnv1a_64_jax([b"", b""]) == [0xCBF29CE484222325] * 2


def test_jax_batch_many_keys():
    keys = [f"{i:<8d}".encode() for i in range(1000)]
    assert fnv1a_64_jax(keys) == [fnv1a_64(k) for k in keys]


@pytest.mark.parametrize("backend", ["jax", "python"])
def test_batch_backends_agree(backend):
    assert fnv1a_64_batch(MIXED_KEYS, backend=backend) == [fnv1a_64(k) for k in MIXED_KEYS]


@pytest.mark.parametrize("backend", ["jax", "python"])
def test_batch_empty(backend):
    assert fnv1a_64_batch([], backend=backend) == []


def test_batch_unknown_backend():
    with pytest.raises(ValueError):
        fnv1a_64_batch([b"a"], backend="cuda")


def test_make_key_records_hash_and_length():
    key = make_key(b"hello")
    assert key.data == b"hello"
    assert key.length == 5
    assert len(key) == 5
    assert key.hash == fnv1a_64(b"hello")


def test_make_key_prefix_length():
    key = make_key(b"hello world", 5)
    assert key.data == b"hello"
    assert key.hash == fnv1a_64(b"hello")


def test_make_key_empty():
    key = make_key(b"")
    assert key.length == 0
    assert key.hash == 0xCBF29CE484222325


def test_make_key_copies_mutable_buffers():
    buffer = bytearray(b"abc")
    key = make_key(buffer)
    buffer[0] = ord("z")
    assert key.data == b"abc"
    assert key.hash == fnv1a_64(b"abc")


def test_make_key_accepts_memoryview():
    key = make_key(memoryview(b"abcdef")[2:], 3)
    assert key.data == b"cde"


def test_make_key_rejects_bad_length():
    with pytest.raises(ValueError):
        make_key(b"abc", 4)
    with pytest.raises(ValueError):
        make_key(b"abc", -1)


def test_make_key_rejects_str():
    with pytest.raises(TypeError):
        make_key("abc")
