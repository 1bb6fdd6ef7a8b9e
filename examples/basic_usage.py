"""
Example: Using the histogram engine on your own data
====================================================

This script shows how to use each stage independently as well as the
one-call entry point. You can copy any section into your own analysis script.
"""

import numpy as np

# ─────────────────────────────────────────────────────────
# 1. LOAD YOUR DATA  (replace with your own array)
# ─────────────────────────────────────────────────────────

# image = np.load("path/to/your/stack.npy", mmap_mode="r")   # e.g. (C, Z, Y, X)

# For this example, we create a synthetic channel-first stack:
rng = np.random.default_rng(42)
image = np.stack([
    rng.normal(100.0, 10.0, size=(8, 64, 64)),
    rng.normal(400.0, 25.0, size=(8, 64, 64)),
])
axes = ("c", "z", "y", "x")


# ─────────────────────────────────────────────────────────
# 2. ONE CALL
# ─────────────────────────────────────────────────────────

from chanhist.engine.compute import compute_histograms

result = compute_histograms(image, axes=axes)
for stat in result.stats:
    print(f"{stat.label:>10}: mean={stat.mean:.2f} sd={stat.stddev:.2f} "
          f"min={stat.min:.2f} max={stat.max:.2f}")


# ─────────────────────────────────────────────────────────
# 3. STAGE BY STAGE
# ─────────────────────────────────────────────────────────

from chanhist.engine.accumulate import accumulate_channels, accumulate_composite
from chanhist.engine.binning import select_bin_scheme
from chanhist.engine.range_scan import scan_range
from chanhist.engine.statistics import derive_statistics
from chanhist.source import ArraySource

source = ArraySource(image, axes=axes)
lo, hi = scan_range(source)
scheme = select_bin_scheme(lo, hi, source.is_integer)
channel_accs, n_samples, _ = accumulate_channels(source, scheme)
composite_acc, _ = accumulate_composite(source, scheme)
stats = derive_statistics(channel_accs + [composite_acc], n_samples, source.channel_count)
print(f"\nComposite mean (stage by stage): {stats[-1].mean:.2f}")


# ─────────────────────────────────────────────────────────
# 4. TEXT OUTPUT
# ─────────────────────────────────────────────────────────

from chanhist.reporting.summary import format_bin_listing, format_summary

print()
print(format_summary(result, channel=0))
print(format_bin_listing(result, channel=0)[:200], "...")
