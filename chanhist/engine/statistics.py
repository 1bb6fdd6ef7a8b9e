"""
Statistics derivation from accumulated sums.

Every channel, composite included, is assumed to hold the same number of
pixels: ``sample_count // channel_count``. This only holds when no sample
was masked or skipped. A channel whose own count differs is derived from
its own count instead and flagged ``StatStatus.NONUNIFORM_COUNT``.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .accumulate import ChannelAccumulator

logger = logging.getLogger(__name__)


class StatStatus(str, enum.Enum):
    OK = "ok"
    NONUNIFORM_COUNT = "nonuniform_count"
    INSUFFICIENT_SAMPLES = "insufficient_samples"
    EMPTY = "empty"


@dataclass(frozen=True)
class ChannelStatistics:
    """Finalised statistics for one channel (real or composite)."""

    index: int
    label: str
    count: int
    """Samples actually accumulated into this channel."""
    pixels: int
    """Uniform per-channel pixel count, ``sample_count // channel_count``."""
    sum1: float
    sum2: float
    min: Optional[float]
    max: Optional[float]
    mean: Optional[float]
    stddev: Optional[float]
    """Sample (n - 1) standard deviation; None below two samples."""
    status: StatStatus


def channel_label(index: int, channel_count: int) -> str:
    """Display label: ``"Composite"`` for the extra channel, else ``"Channel i"``."""
    if index == channel_count:
        return "Composite"
    return f"Channel {index}"


def derive_statistics(
    accumulators: Sequence[ChannelAccumulator],
    sample_count: int,
    channel_count: int,
) -> Tuple[ChannelStatistics, ...]:
    """Turn running sums into mean and sample standard deviation.

    Channels holding exactly ``sample_count // channel_count`` samples use
    that uniform count. Any other channel uses its own sample count and is
    marked ``NONUNIFORM_COUNT``; fewer than two samples in a channel gives
    ``INSUFFICIENT_SAMPLES`` (one) or ``EMPTY`` (none).

    Parameters
    ----------
    accumulators : sequence of ChannelAccumulator
        Real channels followed by the composite channel.
    sample_count : int
        Total samples over all real channels.
    channel_count : int
        Number of real channels.

    Returns
    -------
    tuple of ChannelStatistics
    """
    if channel_count < 1:
        raise ValueError(f"channel_count must be >= 1, got {channel_count}")

    pixels = sample_count // channel_count
    stats = []

    for i, acc in enumerate(accumulators):
        uniform = acc.n == pixels
        if not uniform:
            logger.warning(
                "%s holds %d samples but %d per channel were expected",
                channel_label(i, channel_count), acc.n, pixels,
            )
        n = acc.n

        mean: Optional[float] = None
        stddev: Optional[float] = None
        if n == 0:
            status = StatStatus.EMPTY
        else:
            mean = acc.sum1 / n
            if n == 1:
                status = StatStatus.INSUFFICIENT_SAMPLES
            else:
                variance = (acc.sum2 - acc.sum1 * acc.sum1 / n) / (n - 1)
                # Rounding can leave a tiny negative residue for constant data
                stddev = math.sqrt(max(variance, 0.0))
                status = StatStatus.OK if uniform else StatStatus.NONUNIFORM_COUNT

        stats.append(
            ChannelStatistics(
                index=i,
                label=channel_label(i, channel_count),
                count=acc.n,
                pixels=pixels,
                sum1=acc.sum1,
                sum2=acc.sum2,
                min=acc.min if acc.n else None,
                max=acc.max if acc.n else None,
                mean=mean,
                stddev=stddev,
                status=status,
            )
        )

    return tuple(stats)
