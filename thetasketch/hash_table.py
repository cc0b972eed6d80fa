"""Open-addressing hash table holding the retained hashes of a theta sketch."""

from __future__ import annotations

import struct
from enum import Enum
from typing import Iterator

from .hashing import hash_value

__all__ = [
    "MAX_THETA",
    "MIN_LG_K",
    "MAX_LG_K",
    "DEFAULT_LG_K",
    "ResizeFactor",
    "ThetaHashTable",
    "starting_sub_multiple",
    "starting_theta_from_sampling_probability",
]

MAX_THETA = (1 << 63) - 1
"""Maximum theta value (signed 64-bit max, for cross-implementation compatibility)."""

MIN_LG_K = 5
MAX_LG_K = 26
DEFAULT_LG_K = 12

_RESIZE_THRESHOLD = 0.5
_REBUILD_THRESHOLD = 15.0 / 16.0
_STRIDE_HASH_BITS = 7
_STRIDE_MASK = (1 << _STRIDE_HASH_BITS) - 1


class ResizeFactor(Enum):
    """Growth factor applied when the hash table resizes."""

    X1 = 0
    X2 = 1
    X4 = 2
    X8 = 3

    def lg_value(self) -> int:
        """Return log2 of the growth factor."""
        return self.value


def _to_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def starting_sub_multiple(lg_target: int, lg_min: int, lg_resize_factor: int) -> int:
    """Initial lg size so that ``lg_target = lg_init + n * lg_resize_factor`` and ``lg_init >= lg_min``."""
    if lg_target <= lg_min:
        return lg_min
    if lg_resize_factor == 0:
        return lg_target
    return (lg_target - lg_min) % lg_resize_factor + lg_min


def starting_theta_from_sampling_probability(sampling_probability: float) -> int:
    """Initial theta for the given sampling probability."""
    probability = _to_f32(sampling_probability)
    if probability < 1.0:
        return int(float(MAX_THETA) * probability)
    return MAX_THETA


def _stride(key: int, lg_size: int) -> int:
    return 2 * ((key >> lg_size) & _STRIDE_MASK) + 1


def _find_in_entries(entries: list[int], key: int, lg_size: int) -> int | None:
    """Return the slot holding ``key`` or the empty slot where it belongs, or None if full."""
    if not entries:
        return None
    mask = len(entries) - 1
    stride = _stride(key, lg_size)
    index = key & mask
    start = index
    while True:
        probe = entries[index]
        if probe == 0 or probe == key:
            return index
        index = (index + stride) & mask
        if index == start:
            return None


class ThetaHashTable:
    """Hash table that grows up to ``2^(lg_nom_size + 1)`` slots, then rebuilds.

    Once at full size, whenever the load exceeds the rebuild threshold only the
    ``2^lg_nom_size`` smallest hashes are kept and theta drops to the next one.
    """

    def __init__(
        self,
        lg_nom_size: int,
        resize_factor: ResizeFactor,
        sampling_probability: float,
        hash_seed: int,
    ) -> None:
        self._lg_nom_size = lg_nom_size
        self._lg_max_size = lg_nom_size + 1
        self._resize_factor = resize_factor
        self._sampling_probability = _to_f32(sampling_probability)
        self._hash_seed = hash_seed
        self._lg_cur_size = starting_sub_multiple(
            self._lg_max_size, MIN_LG_K, resize_factor.lg_value()
        )
        self._entries = [0] * (1 << self._lg_cur_size)
        self._num_entries = 0
        self._theta = starting_theta_from_sampling_probability(self._sampling_probability)

    def __repr__(self) -> str:
        return (
            f"ThetaHashTable(lg_nom_size={self._lg_nom_size}, "
            f"lg_cur_size={self._lg_cur_size}, num_entries={self._num_entries}, "
            f"theta={self._theta})"
        )

    def hash_and_screen(self, value: object) -> int:
        """Hash a value; return the hash if it is below theta, else 0."""
        h1, _ = hash_value(value, self._hash_seed)
        hashed = h1 >> 1
        if hashed >= self._theta:
            return 0
        return hashed

    def try_insert(self, hash_value: int) -> bool:
        """Insert a hash; return True if it was new."""
        if hash_value == 0:
            return False
        index = _find_in_entries(self._entries, hash_value, self._lg_cur_size)
        if index is None:
            raise RuntimeError("hash table is full; resize or rebuild did not run")
        if self._entries[index] == hash_value:
            return False
        self._entries[index] = hash_value
        self._num_entries += 1

        if self._num_entries > self._capacity():
            if self._lg_cur_size <= self._lg_nom_size:
                self._resize()
            else:
                self._rebuild()
        return True

    def _capacity(self) -> int:
        if self._lg_cur_size <= self._lg_nom_size:
            fraction = _RESIZE_THRESHOLD
        else:
            fraction = _REBUILD_THRESHOLD
        return int(fraction * len(self._entries))

    def _resize(self) -> None:
        new_lg_size = min(
            self._lg_cur_size + self._resize_factor.lg_value(), self._lg_max_size
        )
        new_entries = [0] * (1 << new_lg_size)
        for entry in filter(None, self._entries):
            index = _find_in_entries(new_entries, entry, new_lg_size)
            if index is None:
                raise RuntimeError("no free slot while resizing")
            new_entries[index] = entry
        self._entries = new_entries
        self._lg_cur_size = new_lg_size

    def _rebuild(self) -> None:
        k = 1 << self._lg_nom_size
        retained = sorted(e for e in self._entries if e)
        self._theta = retained[k]
        new_entries = [0] * (1 << self._lg_cur_size)
        for entry in retained[:k]:
            index = _find_in_entries(new_entries, entry, self._lg_cur_size)
            if index is None:
                raise RuntimeError("no free slot while rebuilding")
            new_entries[index] = entry
        self._entries = new_entries
        self._num_entries = k

    def trim(self) -> None:
        """Reduce the retained hashes to the nominal size k if there are more."""
        if self._num_entries > (1 << self._lg_nom_size):
            self._rebuild()

    def reset(self) -> None:
        """Return the table to its initial empty state."""
        self._lg_cur_size = starting_sub_multiple(
            self._lg_nom_size + 1, MIN_LG_K, self._resize_factor.lg_value()
        )
        self._entries = [0] * (1 << self._lg_cur_size)
        self._num_entries = 0
        self._theta = starting_theta_from_sampling_probability(self._sampling_probability)

    def num_entries(self) -> int:
        """Number of retained hashes."""
        return self._num_entries

    def theta(self) -> int:
        """Current theta as an integer."""
        return self._theta

    def is_empty(self) -> bool:
        """True if no hash is retained."""
        return self._num_entries == 0

    def lg_nom_size(self) -> int:
        """log2 of the nominal size k."""
        return self._lg_nom_size

    def __iter__(self) -> Iterator[int]:
        return (entry for entry in self._entries if entry != 0)