"""
chanhist — Channel-aware histograms for multidimensional images.

Computes per-channel and composite intensity histograms together with
summary statistics (mean, standard deviation, min, max, sample count)
over N-dimensional scalar arrays, and renders them as text, JSON, and
HTML reports.
"""

__version__ = "1.0.0"
