"""
First pass: global numeric range of a sample source.
"""

from __future__ import annotations

import logging
import math
from typing import Tuple

import numpy as np

from ..source import ArraySource

logger = logging.getLogger(__name__)


def scan_range(source: ArraySource, chunk_size: int = 64) -> Tuple[float, float]:
    """Return ``(data_min, data_max)`` over every finite sample.

    NaN and infinite samples are ignored. A source with no finite samples
    yields ``(0.0, 0.0)`` rather than infinities.
    """
    data_min = math.inf
    data_max = -math.inf

    for chunk in source.iter_chunks(chunk_size):
        values = np.asarray(chunk, dtype=np.float64)
        finite = values[np.isfinite(values)]
        if finite.size == 0:
            continue
        data_min = min(data_min, float(finite.min()))
        data_max = max(data_max, float(finite.max()))

    if data_min > data_max:
        logger.debug("Range scan found no finite samples in %r", source)
        return 0.0, 0.0

    logger.debug("Range scan: [%g, %g]", data_min, data_max)
    return data_min, data_max
