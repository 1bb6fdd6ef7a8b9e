"""Tests for YAML configuration loading."""

import pytest

from chanhist.config import HistogramConfig, PipelineConfig, load_config


def test_defaults():
    cfg = load_config()
    assert isinstance(cfg, PipelineConfig)
    assert cfg.name == "chanhist"
    assert cfg.verbose is True
    assert cfg.histogram.max_bins == 256
    assert cfg.histogram.chunk_size == 64
    assert cfg.reporting.json and cfg.reporting.html and cfg.reporting.text
    assert cfg.reporting.log_scale is False


def test_user_overrides_are_merged(user_config):
    cfg = load_config(str(user_config))
    assert cfg.verbose is False
    assert cfg.histogram.max_bins == 64
    # untouched keys keep their defaults
    assert cfg.histogram.chunk_size == 64
    assert cfg.reporting.html is False
    assert cfg.reporting.json is True
    assert cfg.reporting.log_scale is True
    assert isinstance(cfg.histogram, HistogramConfig)


def test_unknown_key_rejected(tmp_path):
    p = tmp_path / "typo.yaml"
    p.write_text("histogram:\n  max_bin: 32\n")
    with pytest.raises(ValueError, match="max_bin"):
        load_config(str(p))


def test_invalid_max_bins_rejected(tmp_path):
    p = tmp_path / "zero.yaml"
    p.write_text("histogram:\n  max_bins: 0\n")
    with pytest.raises(ValueError, match="max_bins"):
        load_config(str(p))


def test_invalid_chunk_size_rejected(tmp_path):
    p = tmp_path / "chunk.yaml"
    p.write_text("histogram:\n  chunk_size: -4\n")
    with pytest.raises(ValueError, match="chunk_size"):
        load_config(str(p))
