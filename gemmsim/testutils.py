"""Reference matrix routines used to check accelerator results."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from .params import acc_scale, rounding_right_shift, saturate_elem

Matrix = Sequence[Sequence[int]]


def _shape(m: Matrix) -> tuple[int, int]:
    rows = len(m)
    cols = len(m[0]) if rows else 0
    if any(len(row) != cols for row in m):
        raise ValueError("matrix rows have different lengths")
    return rows, cols


def _wrap_elem(value: int) -> int:
    return ((value + 128) & 0xFF) - 128


def transpose(m: Matrix) -> list[list[int]]:
    """Return the transpose of ``m``."""
    _shape(m)
    return [list(col) for col in zip(*m)]


def matmul(a: Matrix, b: Matrix, d: Matrix,
           transpose_a: bool = False, transpose_b: bool = False) -> list[list[int]]:
    """Compute ``op(a) @ op(b) + d`` at full precision."""
    lhs = transpose(a) if transpose_a else [list(row) for row in a]
    rhs_cols = [list(row) for row in b] if transpose_b else transpose(b)
    n, k = _shape(lhs)
    m, k_rhs = _shape(rhs_cols)
    if n and m and k != k_rhs:
        raise ValueError(f"inner dimensions differ: {k} and {k_rhs}")
    if _shape(d) != (n, m):
        raise ValueError(f"bias shape {_shape(d)} does not match result {(n, m)}")
    return [
        [bias + sum(x * y for x, y in zip(row, col)) for col, bias in zip(rhs_cols, d_row)]
        for row, d_row in zip(lhs, d)
    ]


def matmul_short(a: Matrix, b: Matrix, d: Matrix,
                 transpose_a: bool = False, transpose_b: bool = False) -> list[list[int]]:
    """Compute ``op(a) @ op(b) + d`` wrapping to 8-bit elements."""
    return [[_wrap_elem(v) for v in row] for row in matmul(a, b, d, transpose_a, transpose_b)]


def matadd(m1: Matrix, m2: Matrix) -> list[list[int]]:
    """Elementwise sum of two matrices of the same shape."""
    if _shape(m1) != _shape(m2):
        raise ValueError("matrices have different shapes")
    return [[x + y for x, y in zip(r1, r2)] for r1, r2 in zip(m1, m2)]


def matshift(full: Matrix, shift: int) -> list[list[int]]:
    """Rounding right shift of every element, saturated to 8 bits."""
    _shape(full)
    return [[saturate_elem(rounding_right_shift(v, shift)) for v in row] for row in full]


def matscale(full: Matrix, scale: float) -> list[list[int]]:
    """Scale every element, rounding and saturating to 8 bits."""
    _shape(full)
    return [[saturate_elem(acc_scale(v, scale)) for v in row] for row in full]


def matrelu(m: Matrix) -> list[list[int]]:
    """Replace negative elements with zero."""
    _shape(m)
    return [[v if v > 0 else 0 for v in row] for row in m]


def matrelu6(m: Matrix, scale: int) -> list[list[int]]:
    """Clamp elements into ``[0, 6 * scale]``."""
    _shape(m)
    ceiling = 6 * scale
    return [[_wrap_elem(min(max(v, 0), ceiling)) for v in row] for row in m]


def is_equal(x: Matrix, y: Matrix) -> bool:
    """True when both matrices have the same shape and elements."""
    return _shape(x) == _shape(y) and all(
        a == b for rx, ry in zip(x, y) for a, b in zip(rx, ry)
    )


def is_equal_transposed(x: Matrix, y: Matrix) -> bool:
    """True when ``x`` equals the transpose of ``y``."""
    return is_equal(x, transpose(y))


def mat_is_equal(x: Matrix, y: Matrix, rows: int, cols: int) -> bool:
    """Compare the leading ``rows`` by ``cols`` block of two matrices."""
    return all(x[i][j] == y[i][j] for i in range(rows) for j in range(cols))


def format_matrix(m: Matrix) -> str:
    """Render a matrix as space-separated rows, one per line."""
    _shape(m)
    return "".join("".join(f"{v} " for v in row) + "\n" for row in m)


class Lcg:
    """Linear congruential generator yielding bytes from its top bits."""

    MULTIPLIER = 1664525
    INCREMENT = 1013904223

    def __init__(self, seed: int = 777) -> None:
        self.state = seed & 0xFFFFFFFF

    def next(self) -> int:
        """Advance the generator and return a value in ``[0, 255]``."""
        self.state = (self.state * self.MULTIPLIER + self.INCREMENT) & 0xFFFFFFFF
        return self.state >> 24

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        return self.next()