"""
Exception types raised by the histogram engine.

Empty sources and channels with too few samples are *not* errors: they are
reported through ``HistogramResult.is_empty`` and ``StatStatus`` instead.
"""

from __future__ import annotations


class HistogramError(Exception):
    """Base class for all chanhist errors."""


class InvalidChannelAxisError(HistogramError, ValueError):
    """The declared channel axis does not exist or has length 0."""


class ComputationCancelled(HistogramError):
    """A computation was cancelled between traversal passes."""

    def __init__(self, stage: str):
        super().__init__(f"Histogram computation cancelled before {stage}.")
        self.stage = stage
