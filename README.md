# thetasketch

Theta sketches for estimating the number of distinct items in a stream using
a small, bounded amount of memory. Pure Python, no runtime dependencies.

A theta sketch keeps the hashes of the items it has seen in an
open-addressing hash table. While the number of distinct items stays small,
the count is exact. Once the table outgrows its nominal size `k = 2**lg_k`,
the sketch keeps only the `k` smallest hashes, lowers its sampling
threshold (theta) to the next one, and estimates the count as
`retained / theta`.

## Installation

```
pip install .
```

## Usage

```python
from thetasketch.sketch import ThetaSketch

sketch = ThetaSketch.builder().lg_k(10).build()

for i in range(5000):
    sketch.update(f"item_{i}")

print(sketch.estimate())            # close to 5000
print(sketch.theta())               # below 1.0 once in estimation mode
print(sketch.theta64())             # theta as a 64-bit integer
print(sketch.num_retained())        # number of hashes kept
print(sketch.is_estimation_mode())  # True
print(sketch.lg_k())                # 10
```

Duplicates do not change the estimate:

```python
sketch = ThetaSketch.builder().build()
for _ in range(100):
    sketch.update("same_value")
assert sketch.estimate() == 1.0
```

### What can be hashed

`update` accepts `bool`, `int` (anything that fits in 64 bits, signed or
unsigned), `float`, `str`, `bytes`/`bytearray`/`memoryview`, and lists or
tuples of these. Other types raise `TypeError`; integers that do not fit in
64 bits raise `ValueError`. The byte encoding and the MurmurHash3 x64
128-bit hash are available in `thetasketch.hashing` as `encode_value`,
`murmurhash3_x64_128` and `hash_value`.

Floating-point values can also be fed through `update_f64` and
`update_f32`. `update_f64` maps every NaN to one bit pattern and `-0.0` to
`+0.0` (see `canonical_double`), so equal numbers hash equally;
`update_f32` first rounds the value to single precision.

### Builder options

`ThetaSketch.builder()` returns a `ThetaSketchBuilder`; its setters return
the builder so they can be chained, and `build()` creates the sketch.

| Method                       | Default           | Meaning                                      |
|------------------------------|-------------------|----------------------------------------------|
| `lg_k(n)`                    | 12                | log2 of the nominal size, in [5, 26]         |
| `resize_factor(f)`           | `ResizeFactor.X8` | growth step of the hash table                |
| `sampling_probability(p)`    | 1.0               | initial sampling probability, in [0.0, 1.0]  |
| `seed(s)`                    | 9001              | hash seed                                    |

Out-of-range values for `lg_k` and `sampling_probability` raise
`ValueError`. `ResizeFactor` (`X1`, `X2`, `X4`, `X8`) lives in
`thetasketch.hash_table`:

```python
from thetasketch.hash_table import ResizeFactor
from thetasketch.sketch import ThetaSketch

sketch = ThetaSketch.builder().resize_factor(ResizeFactor.X2).seed(42).build()
```

### Other operations

- `trim()` shrinks the retained set to at most `k` entries.
- `reset()` returns the sketch to its empty state.
- Iterating over a sketch yields the retained hash values.

## Demo

A short demonstration that fills a sketch and prints its estimate, theta
and retained count, first in exact mode and then in estimation mode:

```
thetasketch-demo
```

## What this package does not do

It provides only the updatable sketch. There is no serialization to or from
bytes, no compact (read-only) sketch form, no set operations (union,
intersection, difference) between sketches, and no confidence bounds on the
estimate.

## Running the tests

```
pip install .[test]
pytest
```