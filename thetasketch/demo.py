"""Command that walks through basic theta sketch usage."""

from __future__ import annotations

import argparse
from typing import Sequence

from .sketch import ThetaSketch

__all__ = ["main"]


def _report(sketch: ThetaSketch) -> None:
    print(f"   Estimate: {sketch.estimate():.2f}")
    print(f"   Theta: {sketch.theta():.6f}")
    print(f"   Num retained: {sketch.num_retained()}")
    print()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the theta sketch example and print its results."""
    parser = argparse.ArgumentParser(description="Theta sketch example.")
    parser.parse_args(argv)

    print("=== Theta Sketch Example ===\n")

    print("1. Basic Theta Sketch Usage:")
    sketch = ThetaSketch.builder().lg_k(10).build()
    for i in range(100):
        sketch.update(f"item_{i}")
    sketch.update("duplicatee_item")
    sketch.update("duplicatee_item")
    _report(sketch)

    print("2. Add more data to enter estimation mode:")
    for i in range(5000):
        sketch.update(f"item_{i}")
    _report(sketch)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())