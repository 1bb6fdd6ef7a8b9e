"""
Text summaries of histogram results.

Provides the fixed-width values panel shown beneath a histogram chart, the
per-bin listing, and channel cycling (real channels, then the composite,
then back to channel 0).
"""

from __future__ import annotations

from typing import List, Optional

from ..engine.compute import HistogramResult


def next_channel(current: int, channel_count: int) -> int:
    """Index after *current* when cycling over ``0..channel_count``.

    Index ``channel_count`` is the composite channel; the cycle wraps back
    to 0 after it.
    """
    if channel_count < 1:
        raise ValueError(f"channel_count must be >= 1, got {channel_count}")
    return (current + 1) % (channel_count + 1)


def _int_field(label: str, value: int) -> str:
    return f"{label:>10}:{value:8d}"


def _real_field(label: str, value: Optional[float]) -> str:
    if value is None:
        return f"{label:>10}:{'n/a':>8}"
    return f"{label:>10}:{value:8.2f}"


def format_summary(result: HistogramResult, channel: Optional[int] = None) -> str:
    """Fixed-width values panel for one channel (composite by default)."""
    if channel is None:
        channel = result.composite_index
    if not 0 <= channel <= result.channel_count:
        raise IndexError(f"Channel {channel} out of range 0..{result.channel_count}")

    stat = result.stats[channel]
    scheme = result.bin_scheme
    lines = [
        stat.label,
        _int_field("Pixels", stat.count),
        _real_field("Min", stat.min) + "   " + _real_field("Max", stat.max),
        _real_field("Mean", stat.mean) + "   " + _real_field("StdDev", stat.stddev),
        _int_field("Bins", scheme.bin_count) + "   " + _real_field("Bin Width", scheme.bin_width),
    ]
    return "\n".join(lines) + "\n"


def format_bin_listing(result: HistogramResult, channel: Optional[int] = None) -> str:
    """Tab-separated ``bin_start``/``count`` listing for one channel."""
    if channel is None:
        channel = result.composite_index
    counts = result.histogram(channel)
    edges = result.bin_scheme.bin_edges()
    whole = result.is_integer and result.bin_scheme.bin_width == 1.0

    lines: List[str] = ["bin_start\tcount"]
    for start, count in zip(edges[:-1], counts):
        start_str = f"{int(round(start))}" if whole else f"{start:.4f}"
        lines.append(f"{start_str}\t{int(count)}")
    return "\n".join(lines) + "\n"
