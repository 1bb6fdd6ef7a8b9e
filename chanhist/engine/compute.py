"""
Histogram computation entry point.

Runs the four stages in strict sequence over one source:

1. range scan (full pass),
2. bin-scheme selection,
3. per-channel accumulation (full pass),
4. composite accumulation (full pass over the spatial positions),

then derives per-channel statistics. The range scan and the per-channel
pass could be fused with Welford-style online moments and streaming
min/max; they are kept separate so the bin scheme is fixed before any
sample is binned.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from ..errors import ComputationCancelled
from ..source import ArraySource, AxisSpec
from .accumulate import accumulate_channels, accumulate_composite
from .binning import DEFAULT_MAX_BINS, BinScheme, select_bin_scheme
from .range_scan import scan_range
from .statistics import ChannelStatistics, derive_statistics

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64


class CancelToken:
    """Cooperative cancellation flag, checked between traversal passes."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, stage: str) -> None:
        if self._event.is_set():
            raise ComputationCancelled(stage)


@dataclass(frozen=True)
class HistogramResult:
    """Immutable output of :func:`compute_histograms`.

    ``histograms`` and ``stats`` are indexed ``0..channel_count - 1`` for
    real channels and ``channel_count`` for the composite channel.
    """

    bin_scheme: BinScheme
    histograms: np.ndarray = field(repr=False)
    stats: Tuple[ChannelStatistics, ...] = field(repr=False)
    sample_count: int
    skipped_samples: int
    skipped_composite: int
    channel_count: int
    channel_axis: Optional[int]
    axes: Tuple[str, ...]
    shape: Tuple[int, ...]
    is_integer: bool

    @property
    def composite_index(self) -> int:
        return self.channel_count

    @property
    def composite(self) -> ChannelStatistics:
        return self.stats[self.composite_index]

    @property
    def is_empty(self) -> bool:
        return self.sample_count == 0

    def histogram(self, channel: int) -> np.ndarray:
        """Bin counts for *channel* (``composite_index`` for the composite)."""
        if not 0 <= channel <= self.channel_count:
            raise IndexError(
                f"Channel {channel} out of range 0..{self.channel_count}"
            )
        return self.histograms[channel]

    def to_dict(self) -> Dict[str, Any]:
        """Plain-Python representation for serialisation."""
        channels = []
        for stat in self.stats:
            entry = asdict(stat)
            entry["status"] = stat.status.value
            entry["histogram"] = self.histograms[stat.index].tolist()
            channels.append(entry)
        return {
            "shape": list(self.shape),
            "axes": list(self.axes),
            "channel_axis": self.channel_axis,
            "channel_count": self.channel_count,
            "is_integer": self.is_integer,
            "is_empty": self.is_empty,
            "sample_count": self.sample_count,
            "skipped_samples": self.skipped_samples,
            "skipped_composite": self.skipped_composite,
            "bin_scheme": asdict(self.bin_scheme),
            "channels": channels,
        }


def compute_histograms(
    source,
    channel_axis: AxisSpec = None,
    is_integer: Optional[bool] = None,
    *,
    axes: Optional[Sequence[str]] = None,
    max_bins: int = DEFAULT_MAX_BINS,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    cancel: Optional[CancelToken] = None,
) -> HistogramResult:
    """Compute per-channel and composite histograms and statistics.

    Parameters
    ----------
    source : ArraySource or array-like
        Sample source. Raw arrays are wrapped with *axes*, *channel_axis*
        and *is_integer*; those arguments must be omitted when an
        ``ArraySource`` is passed.
    channel_axis : int or str, optional
        Channel axis index or name.
    is_integer : bool, optional
        Integer-valued data flag (inferred from dtype if omitted).
    axes : sequence of str, optional
        Axis names.
    max_bins : int
        Bin count for continuous or wide-range integer data.
    chunk_size : int
        Slab thickness along the chunk axis for each traversal.
    cancel : CancelToken, optional
        Checked before each pass.

    Returns
    -------
    HistogramResult

    Raises
    ------
    InvalidChannelAxisError
        Before any pass, if the channel axis is unknown or empty.
    ComputationCancelled
        If *cancel* was set.
    """
    if isinstance(source, ArraySource):
        if channel_axis is not None or is_integer is not None or axes is not None:
            raise ValueError(
                "channel_axis, is_integer and axes are taken from the "
                "ArraySource and cannot be overridden"
            )
    else:
        source = ArraySource(
            source, axes=axes, channel_axis=channel_axis, is_integer=is_integer
        )
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    if cancel is None:
        cancel = CancelToken()

    logger.debug("Computing histograms for %r", source)

    cancel.raise_if_cancelled("range scan")
    data_min, data_max = scan_range(source, chunk_size)
    scheme = select_bin_scheme(data_min, data_max, source.is_integer, max_bins)
    logger.debug(
        "Bin scheme: %d bins of width %g", scheme.bin_count, scheme.bin_width
    )

    cancel.raise_if_cancelled("channel accumulation")
    channel_accs, sample_count, skipped = accumulate_channels(
        source, scheme, chunk_size
    )

    cancel.raise_if_cancelled("composite accumulation")
    composite_acc, skipped_composite = accumulate_composite(
        source, scheme, chunk_size
    )

    cancel.raise_if_cancelled("statistics derivation")
    accumulators = channel_accs + [composite_acc]
    stats = derive_statistics(accumulators, sample_count, source.channel_count)

    if skipped:
        logger.warning(
            "Skipped %d non-finite sample(s) and %d composite position(s)",
            skipped, skipped_composite,
        )

    histograms = np.vstack([acc.counts for acc in accumulators])
    histograms.setflags(write=False)

    return HistogramResult(
        bin_scheme=scheme,
        histograms=histograms,
        stats=stats,
        sample_count=sample_count,
        skipped_samples=skipped,
        skipped_composite=skipped_composite,
        channel_count=source.channel_count,
        channel_axis=source.channel_axis,
        axes=source.axes,
        shape=source.shape,
        is_integer=source.is_integer,
    )
