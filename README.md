# gemmsim

`gemmsim` models the numeric behaviour and the host-side driver logic of a
quantized (int8 elements, int32 accumulators) systolic-array matrix
accelerator. Use it to compute reference results that match the
accelerator's rounding and saturation rules, and to reason about how the
AlexNet and MobileNet image-classification runs are scheduled, checked and
reported. It has no runtime dependencies.

## Modules

### `gemmsim.params`

- `AcceleratorConfig`: a frozen dataclass describing the array and its
  scratchpad (`dim`, `addr_len`, `bank_num`, `bank_rows`, `acc_rows`,
  `max_bytes`, ...). `max_block_len()` and `max_block_len_acc()` give the
  number of DIM-wide blocks moved per transfer; `row_alignment(blocks)` and
  `acc_row_alignment(blocks)` give byte alignments and raise `ValueError`
  for a non-positive block count.
- Ready-made configurations: `DEFAULT_CONFIG` (16x16 array),
  `EE290_CONFIG` and `EE290_SMALLSP_CONFIG` (32x32 arrays with smaller
  scratchpads), also available by name in the `CONFIGS` dict.
- Fixed-point helpers:
  - `rounding_right_shift(x, shift)`: right shift rounding half to even; a
    non-positive shift shifts left instead.
  - `round_near_even(x)`: round to nearest, ties to even.
  - `saturate_elem(x)`: clamp into `[-128, 127]`.
  - `acc_scale(x, scale)` / `mvin_scale(x, scale)`: multiply in single
    precision, round half to even and saturate to int8 (infinite products
    saturate; a NaN product raises `ValueError`).
  - `mvin_scale_acc(x, scale)`: returns `x` unchanged.

### `gemmsim.testutils`

Reference kernels on matrices given as sequences of rows:

- `matmul(a, b, d, transpose_a=False, transpose_b=False)`: full-precision
  `op(a) @ op(b) + d`; `matmul_short` does the same and wraps each result
  to a signed 8-bit value. Mismatched shapes raise `ValueError`.
- `matadd`, `matshift(full, shift)` (rounding shift then saturate),
  `matscale(full, scale)`, `matrelu`, `matrelu6(m, scale)` (clamp into
  `[0, 6 * scale]`), `transpose`.
- Comparisons: `is_equal`, `is_equal_transposed`, and
  `mat_is_equal(x, y, rows, cols)` for the leading block only.
- `format_matrix(m)`: rows of space-separated values, one per line.
- `Lcg(seed=777)`: a 32-bit linear congruential generator; `next()`
  returns the top 8 bits of the new state. It is also an iterator.

### `gemmsim.options`

`parse_options(argv, network)` parses a full argument vector (program name
first) into a `RunOptions` (`matmul_type`, `check`, `conv`):

- `Network.ALEXNET`: `prog [ws|os|cpu] [check] [conv|matmul]`, native
  convolution off by default.
- `Network.MOBILENET`: `prog [ws|os|cpu] [conv|matmul] [check]`, native
  convolution on by default.

The dataflow defaults to `MatmulType.WS`; arguments past the third are
ignored. `-h` raises `UsageError` with `exit_code` 0 and anything not
understood raises it with `exit_code` 1; its `message` holds the text to
show. `usage(prog, with_conv=False)` returns the usage text, and
`MatmulType.resadd_type()` gives the dataflow used for residual additions
(CPU stays CPU, anything else is WS).

### `gemmsim.layers`

- `schedule(network, conv)`: the list of `Layer`s in execution order. Each
  `Layer` has a `name`, `kind` (`LayerKind`), `activation` (`Activation`),
  the `source` and `output` buffer names, whether it is `pooled`, and the
  `im2col` lowering used when convolutions run as plain matrix
  multiplications. `Layer.cycle_category(conv)` names the cycle counters
  the layer is charged to.
- `residual_additions(network)`: `(layer, residual)` pairs; empty for
  AlexNet.

### `gemmsim.postprocess`

- `CycleCounters`: per-category cycle counts with `total()` and
  `percentages()` (whole percent, rounded down; raises
  `ZeroDivisionError` when nothing was counted).
- `flatten_channels(feature_map)`: lay a `[batch][row][col][channel]` map
  out as `[feature][batch]`.
- `global_average(rows, batch_size, out_dim, channels)`: per-channel
  spatial average as `[channel][batch]`, adding half the count before an
  integer division and storing the result as an 8-bit value.
- `predictions(scores)`: arg-max `(class, score)` per batch entry from
  `[class][batch]` scores; ties go to the lowest class.
- `first_mismatch(scores, preds, correct)`: position of the first wrong
  prediction, or `None`; a prediction whose score equals the expected
  class's score counts as correct.
- `expected_classes(network)`: the expected classes of the four reference
  images.

### `gemmsim.report`

`format_stage(network, name, cycles)`, `format_prediction(index, score)`,
`format_summary(counters)`, `format_failure(network, position,
actual_score=None)` and `PASS_MESSAGE` produce the lines a run prints.

## Examples

```python
from gemmsim.params import acc_scale, round_near_even, rounding_right_shift

rounding_right_shift(5, 1)   # 2  (2.5 rounds to even)
round_near_even(3.5)         # 4
acc_scale(300, 0.5)          # 127 (150 saturates)
```

```python
from gemmsim.options import Network, parse_options

opts = parse_options(["alexnet", "os", "check"], Network.ALEXNET)
# RunOptions(matmul_type=MatmulType.OS, check=True, conv=False)
```

```python
from gemmsim.testutils import Lcg

rng = Lcg()
values = [rng.next() for _ in range(4)]  # same sequence for the same seed
```

## What it does not do

`gemmsim` does not run a network. It carries no weights, images or layer
dimensions, does not drive or time an accelerator, and installs no
command: the option parsing, schedules, post-processing and report
formatting are building blocks for a driver you write yourself.