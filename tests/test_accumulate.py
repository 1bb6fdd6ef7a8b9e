"""Tests for the per-channel and composite accumulation passes."""

import math

import numpy as np
import pytest

from chanhist.engine.accumulate import (
    ChannelAccumulator,
    accumulate_channels,
    accumulate_composite,
)
from chanhist.engine.binning import select_bin_scheme
from chanhist.source import ArraySource


def _scheme_for(src: ArraySource, data: np.ndarray):
    return select_bin_scheme(
        float(np.nanmin(data)), float(np.nanmax(data)), src.is_integer
    )


# -- ChannelAccumulator --

def test_accumulator_add():
    scheme = select_bin_scheme(1, 5, True)
    acc = ChannelAccumulator(scheme.bin_count)
    acc.add(np.array([1.0, 2.0, 2.0, 5.0]), scheme)
    np.testing.assert_array_equal(acc.counts, [1, 2, 0, 0, 1])
    assert acc.n == 4
    assert acc.sum1 == 10.0
    assert acc.sum2 == 34.0
    assert acc.min == 1.0
    assert acc.max == 5.0


def test_accumulator_empty_add_is_noop():
    scheme = select_bin_scheme(0.0, 1.0, False)
    acc = ChannelAccumulator(scheme.bin_count)
    acc.add(np.array([], dtype=np.float64), scheme)
    assert acc.n == 0
    assert acc.min == math.inf


def test_merge_is_additive():
    scheme = select_bin_scheme(0, 9, True)
    values = np.arange(10, dtype=np.float64)
    whole = ChannelAccumulator(scheme.bin_count)
    whole.add(values, scheme)

    left = ChannelAccumulator(scheme.bin_count)
    left.add(values[:4], scheme)
    right = ChannelAccumulator(scheme.bin_count)
    right.add(values[4:], scheme)
    merged = left.merge(right)

    assert merged is left
    np.testing.assert_array_equal(merged.counts, whole.counts)
    assert merged.n == whole.n
    assert merged.sum1 == whole.sum1
    assert merged.sum2 == whole.sum2
    assert (merged.min, merged.max) == (whole.min, whole.max)


def test_merge_rejects_mismatched_bins():
    with pytest.raises(ValueError):
        ChannelAccumulator(4).merge(ChannelAccumulator(5))


# -- Per-channel pass --

def test_channel_counts_conserved(rgb_image):
    src = ArraySource(rgb_image, axes=("y", "x", "c"))
    scheme = _scheme_for(src, rgb_image)
    accs, sample_count, skipped = accumulate_channels(src, scheme, chunk_size=5)

    ny, nx, nc = rgb_image.shape
    assert len(accs) == nc
    assert sample_count == rgb_image.size
    assert skipped == 0
    for c, acc in enumerate(accs):
        assert acc.counts.sum() == ny * nx == acc.n
        assert acc.sum1 == pytest.approx(rgb_image[..., c].sum(dtype=np.float64))
        assert acc.min == rgb_image[..., c].min()
        assert acc.max == rgb_image[..., c].max()


def test_channel_pass_without_channel_axis(one_to_five):
    src = ArraySource(one_to_five)
    scheme = _scheme_for(src, one_to_five)
    accs, sample_count, _ = accumulate_channels(src, scheme)
    assert len(accs) == 1
    assert sample_count == 5
    np.testing.assert_array_equal(accs[0].counts, [1, 1, 1, 1, 1])


def test_channel_pass_skips_non_finite():
    data = np.array([[1.0, 2.0], [np.nan, 4.0], [5.0, np.inf]])
    src = ArraySource(data, axes=("y", "c"))
    scheme = select_bin_scheme(1.0, 5.0, False)
    accs, sample_count, skipped = accumulate_channels(src, scheme)
    assert skipped == 2
    assert sample_count == 4
    assert accs[0].n == 2
    assert accs[1].n == 2
    assert sum(a.counts.sum() for a in accs) == sample_count


# -- Composite pass --

def test_composite_count_equals_spatial_positions(rgb_image):
    src = ArraySource(rgb_image, axes=("y", "x", "c"))
    scheme = _scheme_for(src, rgb_image)
    acc, skipped = accumulate_composite(src, scheme, chunk_size=7)
    assert skipped == 0
    assert acc.n == src.n_spatial_positions
    assert acc.counts.sum() == src.n_spatial_positions
    expected = rgb_image.astype(np.float64).mean(axis=2)
    assert acc.sum1 == pytest.approx(expected.sum())
    assert acc.min == pytest.approx(expected.min())


def test_composite_averages_channels(two_channel_constant):
    src = ArraySource(two_channel_constant, channel_axis=2)
    scheme = select_bin_scheme(2, 4, True)
    acc, _ = accumulate_composite(src, scheme)
    assert acc.min == acc.max == 3.0
    np.testing.assert_array_equal(acc.counts, [0, src.n_spatial_positions, 0])


def test_composite_skips_positions_with_nan():
    data = np.array([[1.0, 3.0], [np.nan, 4.0]])
    src = ArraySource(data, axes=("y", "c"))
    scheme = select_bin_scheme(1.0, 4.0, False)
    acc, skipped = accumulate_composite(src, scheme)
    assert skipped == 1
    assert acc.n == 1
    assert acc.sum1 == 2.0
