"""
Bin-scheme selection.

Integer data with a small dynamic range gets one bin per distinct value;
everything else is bucketed into a fixed number of equal-width bins.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

DEFAULT_MAX_BINS = 256


@dataclass(frozen=True)
class BinScheme:
    """Mapping from sample values to histogram bin indices."""

    bin_count: int
    bin_width: float
    data_min: float
    data_max: float

    def bin_index(self, values: np.ndarray) -> np.ndarray:
        """Bin indices for *values*, clamped into ``[0, bin_count - 1]``.

        Values at ``data_max`` would otherwise land one past the last bin.
        NaN maps to bin 0; accumulators drop non-finite samples before
        binning.
        """
        scaled = (np.asarray(values, dtype=np.float64) - self.data_min) / self.bin_width
        idx = np.floor(np.nan_to_num(scaled, nan=0.0))
        return np.clip(idx, 0, self.bin_count - 1).astype(np.intp)

    def bin_edges(self) -> np.ndarray:
        """``bin_count + 1`` monotonically increasing bin edges."""
        return self.data_min + np.arange(self.bin_count + 1) * self.bin_width


def select_bin_scheme(
    data_min: float,
    data_max: float,
    is_integer: bool,
    max_bins: int = DEFAULT_MAX_BINS,
) -> BinScheme:
    """Choose ``(bin_count, bin_width)`` for data spanning ``[data_min, data_max]``.

    Parameters
    ----------
    data_min, data_max : float
        Range reported by the range scan.
    is_integer : bool
        Whether the samples are integer-valued. Integer ranges are counted
        inclusively (0..5 spans 6 values).
    max_bins : int
        Bin count used for continuous or wide integer data.

    Returns
    -------
    BinScheme
    """
    if max_bins < 1:
        raise ValueError(f"max_bins must be >= 1, got {max_bins}")
    if not (math.isfinite(data_min) and math.isfinite(data_max)):
        raise ValueError(f"Non-finite data range [{data_min}, {data_max}]")
    if data_min > data_max:
        raise ValueError(f"data_min {data_min} exceeds data_max {data_max}")

    data_range = data_max - data_min
    if is_integer:
        data_range += 1

    if is_integer and data_range <= max_bins:
        bin_count = max(1, int(round(data_range)))
        bin_width = 1.0
    else:
        bin_count = max_bins
        bin_width = data_range / max_bins

    # All samples equal (or none at all): everything goes to bin 0.
    if bin_width <= 0:
        bin_width = 1.0

    return BinScheme(
        bin_count=bin_count,
        bin_width=float(bin_width),
        data_min=float(data_min),
        data_max=float(data_max),
    )
