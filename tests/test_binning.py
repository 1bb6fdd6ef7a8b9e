"""Tests for bin-scheme selection."""

import numpy as np
import pytest

from chanhist.engine.binning import BinScheme, select_bin_scheme


def test_selection_is_deterministic():
    a = select_bin_scheme(-3.5, 17.25, False)
    b = select_bin_scheme(-3.5, 17.25, False)
    assert a == b


def test_integer_small_range_exact():
    """Integer 0..5 → one bin per value."""
    scheme = select_bin_scheme(0, 5, True)
    assert scheme.bin_count == 6
    assert scheme.bin_width == 1.0


def test_integer_full_byte_range():
    scheme = select_bin_scheme(0, 255, True)
    assert scheme.bin_count == 256
    assert scheme.bin_width == 1.0


def test_continuous_fallback():
    scheme = select_bin_scheme(0.0, 100.0, False)
    assert scheme.bin_count == 256
    assert scheme.bin_width == pytest.approx(100.0 / 256)


def test_integer_wide_range_fallback():
    scheme = select_bin_scheme(0, 1000, True)
    assert scheme.bin_count == 256
    assert scheme.bin_width == pytest.approx(1001 / 256)


def test_custom_max_bins():
    scheme = select_bin_scheme(0.0, 1.0, False, max_bins=10)
    assert scheme.bin_count == 10
    assert scheme.bin_width == pytest.approx(0.1)


def test_degenerate_range_has_positive_width():
    """All samples equal (or none) → safe width of 1, everything in bin 0."""
    cont = select_bin_scheme(0.0, 0.0, False)
    assert cont.bin_width == 1.0
    assert cont.bin_count == 256
    integer = select_bin_scheme(7, 7, True)
    assert integer.bin_count == 1
    assert integer.bin_width == 1.0


def test_invalid_inputs():
    with pytest.raises(ValueError):
        select_bin_scheme(5.0, 1.0, False)
    with pytest.raises(ValueError):
        select_bin_scheme(0.0, float("inf"), False)
    with pytest.raises(ValueError):
        select_bin_scheme(0.0, 1.0, False, max_bins=0)


def test_bin_index_clamps_upper_boundary():
    """A value equal to data_max lands in the last bin."""
    scheme = select_bin_scheme(0.0, 100.0, False)
    idx = scheme.bin_index(np.array([0.0, 50.0, 100.0]))
    assert idx[0] == 0
    assert idx[1] == 128
    assert idx[2] == scheme.bin_count - 1


def test_bin_index_never_out_of_bounds():
    scheme = BinScheme(bin_count=4, bin_width=1.0, data_min=0.0, data_max=3.0)
    idx = scheme.bin_index(np.array([-10.0, np.nan, np.inf, -np.inf, 99.0]))
    assert idx.min() >= 0
    assert idx.max() <= 3
    assert idx[1] == 0


def test_bin_edges():
    scheme = select_bin_scheme(1, 5, True)
    edges = scheme.bin_edges()
    np.testing.assert_allclose(edges, [1, 2, 3, 4, 5, 6])
