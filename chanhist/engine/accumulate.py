"""
Histogram accumulation passes.

The per-channel pass bins every sample into the histogram of its channel.
The composite pass walks the spatial coordinate space (channel axis
collapsed) and bins the channel-averaged value at each position into a
synthetic extra channel.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from ..source import ArraySource
from .binning import BinScheme

logger = logging.getLogger(__name__)


@dataclass
class ChannelAccumulator:
    """Running histogram and moments for one channel.

    Counts and sums are additive, so partial accumulators built over
    disjoint chunks can be folded together with :meth:`merge`.
    """

    bin_count: int
    counts: np.ndarray = field(init=False, repr=False)
    n: int = 0
    sum1: float = 0.0
    sum2: float = 0.0
    min: float = math.inf
    max: float = -math.inf

    def __post_init__(self) -> None:
        self.counts = np.zeros(self.bin_count, dtype=np.int64)

    def add(self, values: np.ndarray, scheme: BinScheme) -> None:
        """Accumulate finite float64 *values*."""
        if values.size == 0:
            return
        self.counts += np.bincount(
            scheme.bin_index(values), minlength=scheme.bin_count
        )
        self.n += int(values.size)
        self.sum1 += float(np.sum(values))
        self.sum2 += float(np.dot(values, values))
        self.min = min(self.min, float(values.min()))
        self.max = max(self.max, float(values.max()))

    def merge(self, other: "ChannelAccumulator") -> "ChannelAccumulator":
        """Fold *other* into this accumulator in place and return self."""
        if other.bin_count != self.bin_count:
            raise ValueError(
                f"Cannot merge accumulators with {other.bin_count} and "
                f"{self.bin_count} bins"
            )
        self.counts += other.counts
        self.n += other.n
        self.sum1 += other.sum1
        self.sum2 += other.sum2
        self.min = min(self.min, other.min)
        self.max = max(self.max, other.max)
        return self


def _split_finite(values: np.ndarray) -> Tuple[np.ndarray, int]:
    """Drop NaN/inf entries; return ``(finite_values, n_dropped)``."""
    ok = np.isfinite(values)
    if ok.all():
        return values, 0
    return values[ok], int(values.size - np.count_nonzero(ok))


def accumulate_channels(
    source: ArraySource,
    scheme: BinScheme,
    chunk_size: int = 64,
) -> Tuple[List[ChannelAccumulator], int, int]:
    """Second pass: per-channel histograms and moments.

    Returns
    -------
    accumulators : list of ChannelAccumulator
        One per real channel, indexed by channel coordinate.
    sample_count : int
        Total samples accumulated across all channels.
    skipped : int
        Non-finite samples excluded from accumulation.
    """
    n_channels = source.channel_count
    totals = [ChannelAccumulator(scheme.bin_count) for _ in range(n_channels)]
    sample_count = 0
    skipped = 0

    for chunk in source.iter_chunks(chunk_size):
        rows = source.channel_rows(chunk)
        for chan in range(n_channels):
            values, dropped = _split_finite(rows[chan])
            partial = ChannelAccumulator(scheme.bin_count)
            partial.add(values, scheme)
            totals[chan].merge(partial)
            sample_count += partial.n
            skipped += dropped

    logger.debug(
        "Channel pass: %d samples over %d channel(s), %d skipped",
        sample_count, n_channels, skipped,
    )
    return totals, sample_count, skipped


def accumulate_composite(
    source: ArraySource,
    scheme: BinScheme,
    chunk_size: int = 64,
) -> Tuple[ChannelAccumulator, int]:
    """Third pass: histogram of the channel-averaged image.

    Returns
    -------
    accumulator : ChannelAccumulator
        Composite channel; ``n`` equals the number of spatial positions
        when no position is skipped.
    skipped : int
        Spatial positions whose average was not finite.
    """
    total = ChannelAccumulator(scheme.bin_count)
    skipped = 0

    for chunk in source.iter_chunks(chunk_size):
        values, dropped = _split_finite(source.composite_values(chunk))
        partial = ChannelAccumulator(scheme.bin_count)
        partial.add(values, scheme)
        total.merge(partial)
        skipped += dropped

    logger.debug(
        "Composite pass: %d positions, %d skipped", total.n, skipped
    )
    return total, skipped
