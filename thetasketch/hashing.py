"""MurmurHash3 (x64, 128-bit) and a byte encoding for hashable Python values."""

from __future__ import annotations

import struct

__all__ = ["murmurhash3_x64_128", "encode_value", "hash_value"]

_MASK64 = (1 << 64) - 1
_C1 = 0x87C37B91114253D5
_C2 = 0x4CF5AD432745937F

_STR_TERMINATOR = b"\xff"
_INT64_MIN = -(1 << 63)
_INT64_LIMIT = 1 << 63
_UINT64_LIMIT = 1 << 64


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (64 - shift))) & _MASK64


def _fmix(k: int) -> int:
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & _MASK64
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & _MASK64
    k ^= k >> 33
    return k


def _mix_k1(k1: int) -> int:
    k1 = (k1 * _C1) & _MASK64
    k1 = _rotl(k1, 31)
    return (k1 * _C2) & _MASK64


def _mix_k2(k2: int) -> int:
    k2 = (k2 * _C2) & _MASK64
    k2 = _rotl(k2, 33)
    return (k2 * _C1) & _MASK64


def murmurhash3_x64_128(data: bytes, seed: int = 0) -> tuple[int, int]:
    """Return the two 64-bit halves of the MurmurHash3 x64 128-bit hash of ``data``."""
    data = bytes(data)
    length = len(data)
    h1 = h2 = seed & _MASK64

    body_len = length - length % 16
    for k1, k2 in struct.iter_unpack("<QQ", data[:body_len]):
        h1 ^= _mix_k1(k1)
        h1 = _rotl(h1, 27)
        h1 = (h1 + h2) & _MASK64
        h1 = (h1 * 5 + 0x52DCE729) & _MASK64

        h2 ^= _mix_k2(k2)
        h2 = _rotl(h2, 31)
        h2 = (h2 + h1) & _MASK64
        h2 = (h2 * 5 + 0x38495AB5) & _MASK64

    tail = data[body_len:]
    if len(tail) > 8:
        h2 ^= _mix_k2(int.from_bytes(tail[8:], "little"))
    if tail:
        h1 ^= _mix_k1(int.from_bytes(tail[:8], "little"))

    h1 ^= length
    h2 ^= length
    h1 = (h1 + h2) & _MASK64
    h2 = (h2 + h1) & _MASK64
    h1 = _fmix(h1)
    h2 = _fmix(h2)
    h1 = (h1 + h2) & _MASK64
    h2 = (h2 + h1) & _MASK64
    return h1, h2


def _encode_into(value: object, out: bytearray) -> None:
    if isinstance(value, bool):
        out += b"\x01" if value else b"\x00"
    elif isinstance(value, int):
        if _INT64_MIN <= value < _INT64_LIMIT:
            out += struct.pack("<q", value)
        elif _INT64_LIMIT <= value < _UINT64_LIMIT:
            out += struct.pack("<Q", value)
        else:
            raise ValueError(f"integer {value} does not fit in 64 bits")
    elif isinstance(value, float):
        out += struct.pack("<d", value)
    elif isinstance(value, str):
        out += value.encode("utf-8")
        out += _STR_TERMINATOR
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        out += struct.pack("<Q", len(raw))
        out += raw
    elif isinstance(value, (list, tuple)):
        out += struct.pack("<Q", len(value))
        for item in value:
            _encode_into(item, out)
    else:
        raise TypeError(f"cannot hash value of type {type(value).__name__}")


def encode_value(value: object) -> bytes:
    """Encode a value into the bytes that are fed to the hash function.

    Integers are 8 little-endian bytes, floats their IEEE-754 bits, strings
    UTF-8 followed by 0xFF, byte strings and sequences a length prefix
    followed by their contents.
    """
    out = bytearray()
    _encode_into(value, out)
    return bytes(out)


def hash_value(value: object, seed: int) -> tuple[int, int]:
    """Hash an encoded value with the given seed."""
    return murmurhash3_x64_128(encode_value(value), seed)