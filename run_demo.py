#!/usr/bin/env python3
"""
chanhist — Quick Start Demo
===========================

Run this script to see the histogram engine in action with synthetic data.
No real microscopy data needed!

Usage:
    python run_demo.py
"""

import numpy as np

# ── Step 1: Generate a synthetic 3-channel image ───────────────────
print("chanhist — Demo\n")
print("Step 1: Generating a synthetic (Y, X, C) image...")

rng = np.random.default_rng(42)
ny, nx = 128, 96

# Three fluorescence-like channels with different backgrounds and a bright blob
yy, xx = np.mgrid[0:ny, 0:nx]
blob = np.exp(-(((yy - 64) / 20.0) ** 2 + ((xx - 48) / 15.0) ** 2))

image = np.empty((ny, nx, 3), dtype=np.uint16)
image[..., 0] = np.clip(200 + 3000 * blob + rng.normal(0, 40, (ny, nx)), 0, None)
image[..., 1] = np.clip(500 + 1500 * blob + rng.normal(0, 60, (ny, nx)), 0, None)
image[..., 2] = np.clip(100 + rng.normal(0, 20, (ny, nx)), 0, None)

print(f"   Shape: {image.shape}, dtype: {image.dtype}")

# ── Step 2: Compute histograms ─────────────────────────────────────
print("\nStep 2: Computing per-channel and composite histograms...\n")

from chanhist.engine.compute import compute_histograms

result = compute_histograms(image, axes=("y", "x", "c"))
scheme = result.bin_scheme
print(f"   Range:      [{scheme.data_min:.0f}, {scheme.data_max:.0f}]")
print(f"   Bins:       {scheme.bin_count} of width {scheme.bin_width:.3f}")
print(f"   Samples:    {result.sample_count}")

# ── Step 3: Cycle through channels ─────────────────────────────────
print("\nStep 3: Values panel for every channel (composite first)...\n")

from chanhist.reporting.summary import format_summary, next_channel

channel = result.composite_index
for _ in range(result.channel_count + 1):
    print(format_summary(result, channel))
    channel = next_channel(channel, result.channel_count)

# ── Step 4: Reports ────────────────────────────────────────────────
from datetime import datetime
import os

from chanhist.reporting.html_report import generate_html_report
from chanhist.reporting.json_report import generate_json_report

json_path = generate_json_report(
    result, input_files={"image": "synthetic"}, output_path="demo_histogram.json"
)
html_path = generate_html_report(
    result,
    title="synthetic",
    timestamp=datetime.now().isoformat(),
    input_files={"image": "synthetic"},
    log_scale=True,
    output_path="demo_histogram.html",
)
print(f"Step 4: Reports written to {json_path} and file://{os.path.abspath(html_path)}")
