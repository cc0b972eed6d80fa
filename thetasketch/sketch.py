"""Mutable theta sketch for approximate distinct counting."""

from __future__ import annotations

import math
import struct
from typing import Iterator

from .hash_table import (
    DEFAULT_LG_K,
    MAX_LG_K,
    MAX_THETA,
    MIN_LG_K,
    ResizeFactor,
    ThetaHashTable,
)

__all__ = [
    "DEFAULT_UPDATE_SEED",
    "ThetaSketch",
    "ThetaSketchBuilder",
    "canonical_double",
]

DEFAULT_UPDATE_SEED = 9001
"""Hash seed used unless the builder is given another one."""

_CANONICAL_NAN_BITS = 0x7FF8000000000000


def canonical_double(value: float) -> int:
    """Return the signed 64-bit pattern of a double with NaN and -0.0 canonicalised."""
    value = float(value)
    if math.isnan(value):
        return _CANONICAL_NAN_BITS
    # Adding +0.0 turns -0.0 into +0.0 and leaves every other value unchanged.
    return struct.unpack("<q", struct.pack("<d", value + 0.0))[0]


def _to_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", float(value)))[0]


class ThetaSketch:
    """Theta sketch built from a stream of hashable values."""

    def __init__(self, table: ThetaHashTable) -> None:
        self._table = table

    def __repr__(self) -> str:
        return (
            f"ThetaSketch(lg_k={self.lg_k()}, num_retained={self.num_retained()}, "
            f"theta={self.theta():.6f})"
        )

    @staticmethod
    def builder() -> "ThetaSketchBuilder":
        """Return a builder with default settings."""
        return ThetaSketchBuilder()

    def update(self, value: object) -> None:
        """Add a hashable value to the sketch."""
        hashed = self._table.hash_and_screen(value)
        if hashed != 0:
            self._table.try_insert(hashed)

    def update_f64(self, value: float) -> None:
        """Add a double, canonicalising NaN and signed zero first."""
        self.update(canonical_double(value))

    def update_f32(self, value: float) -> None:
        """Add a single-precision float, widened to a double."""
        self.update_f64(_to_f32(value))

    def estimate(self) -> float:
        """Estimated number of distinct values seen."""
        if self.is_empty():
            return 0.0
        return float(self._table.num_entries()) / self.theta()

    def theta(self) -> float:
        """Theta as a fraction between 0.0 and 1.0."""
        return float(self._table.theta()) / float(MAX_THETA)

    def theta64(self) -> int:
        """Theta as a 64-bit integer."""
        return self._table.theta()

    def is_empty(self) -> bool:
        """True if no value is retained."""
        return self._table.is_empty()

    def is_estimation_mode(self) -> bool:
        """True once theta has dropped below its maximum."""
        return self._table.theta() < MAX_THETA

    def num_retained(self) -> int:
        """Number of retained hash values."""
        return self._table.num_entries()

    def lg_k(self) -> int:
        """log2 of the nominal size k."""
        return self._table.lg_nom_size()

    def trim(self) -> None:
        """Reduce the retained entries to the nominal size k."""
        self._table.trim()

    def reset(self) -> None:
        """Return the sketch to its empty state."""
        self._table.reset()

    def __iter__(self) -> Iterator[int]:
        return iter(self._table)


class ThetaSketchBuilder:
    """Configures and creates a :class:`ThetaSketch`."""

    def __init__(self) -> None:
        self._lg_k = DEFAULT_LG_K
        self._resize_factor = ResizeFactor.X8
        self._sampling_probability = 1.0
        self._seed = DEFAULT_UPDATE_SEED

    def __repr__(self) -> str:
        return (
            f"ThetaSketchBuilder(lg_k={self._lg_k}, resize_factor={self._resize_factor}, "
            f"sampling_probability={self._sampling_probability}, seed={self._seed})"
        )

    def lg_k(self, lg_k: int) -> "ThetaSketchBuilder":
        """Set log2 of the nominal size k; it must lie in [5, 26]."""
        if not MIN_LG_K <= lg_k <= MAX_LG_K:
            raise ValueError(f"lg_k must be in [{MIN_LG_K}, {MAX_LG_K}], got {lg_k}")
        self._lg_k = lg_k
        return self

    def resize_factor(self, factor: ResizeFactor) -> "ThetaSketchBuilder":
        """Set the growth factor of the hash table."""
        self._resize_factor = factor
        return self

    def sampling_probability(self, probability: float) -> "ThetaSketchBuilder":
        """Set the sampling probability p; it must lie in [0.0, 1.0]."""
        probability = _to_f32(probability)
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"p must be in [0.0, 1.0], got {probability}")
        self._sampling_probability = probability
        return self

    def seed(self, seed: int) -> "ThetaSketchBuilder":
        """Set the hash seed."""
        self._seed = seed
        return self

    def build(self) -> ThetaSketch:
        """Create the sketch."""
        table = ThetaHashTable(
            self._lg_k,
            self._resize_factor,
            self._sampling_probability,
            self._seed,
        )
        return ThetaSketch(table)