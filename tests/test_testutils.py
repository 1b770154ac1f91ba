import itertools
import random

import pytest

from gemmsim.params import DEFAULT_CONFIG, ELEM_MAX, ELEM_MIN, saturate_elem
from gemmsim.testutils import (
    Lcg,
    format_matrix,
    is_equal,
    is_equal_transposed,
    mat_is_equal,
    matadd,
    matmul,
    matmul_short,
    matrelu,
    matrelu6,
    matscale,
    matshift,
    transpose,
)

DIM = DEFAULT_CONFIG.dim


def _matrix(rows, cols, seed, low=ELEM_MIN, high=ELEM_MAX):
    rng = random.Random(seed)
    return [[rng.randint(low, high) for _ in range(cols)] for _ in range(rows)]


def _identity(n):
    return [[1 if r == c else 0 for c in range(n)] for r in range(n)]


def _zeros(rows, cols):
    return [[0] * cols for _ in range(rows)]


def test_identity_product_returns_other_factor():
    b = _matrix(DIM, DIM, 1)
    assert matmul(_identity(DIM), b, _zeros(DIM, DIM)) == b
    assert matmul(b, _identity(DIM), _zeros(DIM, DIM)) == b


def test_bias_is_added():
    d = _matrix(DIM, DIM, 2)
    zero = _zeros(DIM, DIM)
    assert matmul(zero, zero, d) == d


@pytest.mark.parametrize("ta,tb", [(True, False), (False, True), (True, True)])
def test_transposed_variants_match_explicit_transpose(ta, tb):
    a = _matrix(DIM, DIM, 3)
    b = _matrix(DIM, DIM, 4)
    d = _matrix(DIM, DIM, 5)
    expected = matmul(transpose(a) if ta else a, transpose(b) if tb else b, d)
    assert matmul(a, b, d, ta, tb) == expected


def test_matmul_short_wraps_full_result():
    a, b, d = _matrix(DIM, DIM, 6), _matrix(DIM, DIM, 7), _matrix(DIM, DIM, 8)
    full = matmul(a, b, d)
    short = matmul_short(a, b, d)
    for frow, srow in zip(full, short):
        for f, s in zip(frow, srow):
            assert ELEM_MIN <= s <= ELEM_MAX
            assert (f - s) % 256 == 0


def test_matmul_shape_mismatch_raises():
    with pytest.raises(ValueError):
        matmul(_matrix(2, 3, 0), _matrix(2, 2, 0), _zeros(2, 2))
    with pytest.raises(ValueError):
        matmul(_matrix(2, 2, 0), _matrix(2, 2, 0), _zeros(3, 2))


def test_matadd_commutes_and_has_zero():
    m1, m2 = _matrix(DIM, DIM, 9), _matrix(DIM, DIM, 10)
    assert matadd(m1, m2) == matadd(m2, m1)
    assert matadd(m1, _zeros(DIM, DIM)) == m1


def test_matadd_shape_mismatch_raises():
    with pytest.raises(ValueError):
        matadd(_zeros(2, 2), _zeros(2, 3))


def test_ragged_matrix_rejected():
    with pytest.raises(ValueError):
        transpose([[1, 2], [3]])


def test_matshift_zero_keeps_in_range_values():
    m = _matrix(DIM, DIM, 11)
    assert matshift(m, 0) == m


@pytest.mark.parametrize("shift", [1, 3, 7])
def test_matshift_divides_exact_multiples(shift):
    m = _matrix(DIM, DIM, 12, -1000, 1000)
    scaled = [[v * 2**shift for v in row] for row in m]
    assert matshift(scaled, shift) == [[saturate_elem(v) for v in row] for row in m]


def test_matscale_identity_matches_unshifted():
    full = _matrix(DIM, DIM, 13, -100000, 100000)
    assert matscale(full, 1.0) == matshift(full, 0)


def test_matrelu_clears_negatives_only():
    m = _matrix(DIM, DIM, 14)
    out = matrelu(m)
    for row, orow in zip(m, out):
        for v, o in zip(row, orow):
            assert o >= 0
            assert o == max(v, 0)


def test_matrelu6_bounds():
    m = _matrix(DIM, DIM, 15)
    assert all(0 <= v <= 6 for row in matrelu6(m, 1) for v in row)
    assert matrelu6(m, 30) == matrelu(m)


def test_transpose_is_involution():
    m = _matrix(3, 5, 16)
    assert transpose(transpose(m)) == m
    assert len(transpose(m)) == 5


def test_is_equal_and_transposed():
    m = _matrix(DIM, DIM, 17)
    assert is_equal(m, [list(r) for r in m])
    assert is_equal_transposed(m, transpose(m))
    changed = [list(r) for r in m]
    changed[0][1] = changed[0][1] + 1
    assert not is_equal(m, changed)


def test_mat_is_equal_compares_leading_block():
    x = _matrix(DIM, DIM, 18)
    y = [list(r) for r in x]
    y[3][3] += 1
    assert mat_is_equal(x, y, 3, 3)
    assert not mat_is_equal(x, y, 4, 4)


def test_format_matrix():
    assert format_matrix([[1, -2], [3, 4]]) == "1 -2 \n3 4 \n"
    assert len(format_matrix(_matrix(DIM, DIM, 19)).splitlines()) == DIM


def test_lcg_default_seed_and_determinism():
    assert Lcg().state == 777
    first = [Lcg().next() for _ in range(1)]
    a, b = Lcg(), Lcg(777)
    seq_a = [a.next() for _ in range(50)]
    assert seq_a == [b.next() for _ in range(50)]
    assert seq_a[:1] == first


def test_lcg_values_are_bytes_and_vary():
    values = list(itertools.islice(Lcg(), 200))
    assert all(0 <= v <= 255 for v in values)
    assert len(set(values)) > 1


def test_lcg_iteration_matches_next():
    gen = Lcg(42)
    manual = Lcg(42)
    assert list(itertools.islice(gen, 20)) == [manual.next() for _ in range(20)]