"""Tests for the text summary panel and channel cycling."""

import numpy as np
import pytest

from chanhist.engine.compute import compute_histograms
from chanhist.reporting.summary import format_bin_listing, format_summary, next_channel


def test_next_channel_wraps_through_composite():
    seq = [0]
    for _ in range(4):
        seq.append(next_channel(seq[-1], 3))
    assert seq == [0, 1, 2, 3, 0]


def test_next_channel_single_channel():
    assert next_channel(0, 1) == 1
    assert next_channel(1, 1) == 0


def test_next_channel_invalid():
    with pytest.raises(ValueError):
        next_channel(0, 0)


def test_summary_panel(one_to_five):
    result = compute_histograms(one_to_five)
    text = format_summary(result)
    lines = text.splitlines()
    assert lines[0] == "Composite"
    assert lines[1] == "    Pixels:       5"
    assert "Min:    1.00" in lines[2]
    assert "Max:    5.00" in lines[2]
    assert "Mean:    3.00" in lines[3]
    assert "StdDev:    1.58" in lines[3]
    assert "Bins:       5" in lines[4]
    assert "Bin Width:    1.00" in lines[4]


def test_summary_selects_channel(two_channel_constant):
    result = compute_histograms(two_channel_constant, channel_axis=2)
    text = format_summary(result, channel=1)
    assert text.startswith("Channel 1\n")
    assert "Mean:    4.00" in text
    with pytest.raises(IndexError):
        format_summary(result, channel=3)


def test_summary_of_empty_source():
    result = compute_histograms(np.zeros((0, 3)))
    text = format_summary(result)
    assert "Mean:     n/a" in text
    assert "StdDev:     n/a" in text


def test_bin_listing_integer(one_to_five):
    result = compute_histograms(one_to_five)
    lines = format_bin_listing(result, 0).splitlines()
    assert lines[0] == "bin_start\tcount"
    assert lines[1:] == ["1\t1", "2\t1", "3\t1", "4\t1", "5\t1"]


def test_bin_listing_continuous():
    result = compute_histograms(np.array([0.0, 1.0]))
    lines = format_bin_listing(result).splitlines()
    assert len(lines) == 257
    assert lines[1] == "0.0000\t1"
    assert lines[-1].endswith("\t1")
