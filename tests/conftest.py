"""
Shared test fixtures for chanhist.

Generates synthetic multi-channel images: an 8-bit RGB-like image, a
channel-first floating-point stack, and small hand-checkable datasets.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

# Spatial dimensions for all synthetic images
NY, NX = 24, 16
NC = 3


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

@pytest.fixture
def rgb_image() -> np.ndarray:
    """(Y, X, C) uint8 image with channel-dependent intensity ranges."""
    rng = np.random.default_rng(42)
    img = np.empty((NY, NX, NC), dtype=np.uint8)
    img[..., 0] = rng.integers(0, 100, size=(NY, NX))
    img[..., 1] = rng.integers(50, 150, size=(NY, NX))
    img[..., 2] = rng.integers(100, 200, size=(NY, NX))
    return img


@pytest.fixture
def float_stack() -> np.ndarray:
    """(C, Y, X) float64 stack, channel-first."""
    rng = np.random.default_rng(123)
    means = np.array([10.0, 50.0, 90.0])[:, None, None]
    return means + rng.normal(0, 5, size=(NC, NY, NX))


@pytest.fixture
def two_channel_constant() -> np.ndarray:
    """(Y, X, 2) int16 image: channel 0 is 2 everywhere, channel 1 is 4."""
    img = np.empty((NY, NX, 2), dtype=np.int16)
    img[..., 0] = 2
    img[..., 1] = 4
    return img


@pytest.fixture
def one_to_five() -> np.ndarray:
    """Single-channel integer samples 1..5."""
    return np.array([1, 2, 3, 4, 5], dtype=np.int32)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

@pytest.fixture
def rgb_npy(tmp_path: Path, rgb_image: np.ndarray) -> Path:
    """``rgb_image`` saved as a .npy file."""
    p = tmp_path / "rgb.npy"
    np.save(p, rgb_image)
    return p


@pytest.fixture
def user_config(tmp_path: Path) -> Path:
    """User YAML overriding a couple of defaults."""
    p = tmp_path / "custom.yaml"
    p.write_text(
        "pipeline:\n"
        "  verbose: false\n"
        "histogram:\n"
        "  max_bins: 64\n"
        "reporting:\n"
        "  html: false\n"
        "  log_scale: true\n"
    )
    return p
