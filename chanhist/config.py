"""
YAML-based pipeline configuration loader.

Loads the packaged default config, merges user overrides, and exposes a
``PipelineConfig`` dataclass for type-safe access throughout the toolbox.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional, get_type_hints

import yaml

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default_config.yaml"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass
class HistogramConfig:
    max_bins: int = 256
    chunk_size: int = 64


@dataclass
class ReportingConfig:
    json: bool = True
    html: bool = True
    text: bool = True
    log_scale: bool = False
    chart_width: int = 512
    chart_height: int = 160


@dataclass
class PipelineConfig:
    """Top-level configuration for the histogram pipeline."""

    name: str = "chanhist"
    version: str = "1.0.0"
    verbose: bool = True
    histogram: HistogramConfig = field(default_factory=HistogramConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge *override* into *base* (mutates *base*)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_dataclass(cls, data: Dict[str, Any], section: str = "config"):
    """Build *cls* from a nested dict, recursing into dataclass-typed fields.

    Unknown keys are rejected so a misspelt option does not silently fall
    back to its default.
    """
    hints = get_type_hints(cls)
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - names)
    if unknown:
        raise ValueError(f"Unknown key(s) in {section}: {', '.join(unknown)}")

    kwargs = {}
    for key, value in data.items():
        ftype = hints[key]
        if is_dataclass(ftype) and isinstance(value, dict):
            kwargs[key] = _dict_to_dataclass(ftype, value, section=key)
        else:
            kwargs[key] = value
    return cls(**kwargs)


def _validate(cfg: PipelineConfig) -> None:
    hist = cfg.histogram
    if hist.max_bins < 1:
        raise ValueError(f"histogram.max_bins must be >= 1, got {hist.max_bins}")
    if hist.chunk_size < 1:
        raise ValueError(f"histogram.chunk_size must be >= 1, got {hist.chunk_size}")
    rep = cfg.reporting
    if rep.chart_width < 1 or rep.chart_height < 1:
        raise ValueError(
            f"reporting chart size must be positive, got {rep.chart_width}x{rep.chart_height}"
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_config(user_config_path: Optional[str] = None) -> PipelineConfig:
    """Load the pipeline configuration.

    Parameters
    ----------
    user_config_path : str, optional
        Path to a user-provided YAML file whose values override the defaults.

    Returns
    -------
    PipelineConfig
        Fully merged configuration dataclass.

    Raises
    ------
    ValueError
        On an unknown key or an out-of-range histogram or chart setting.
    """
    with open(_DEFAULT_CONFIG_PATH, "r") as fh:
        base: Dict[str, Any] = yaml.safe_load(fh) or {}

    if user_config_path is not None:
        with open(user_config_path, "r") as fh:
            overrides: Dict[str, Any] = yaml.safe_load(fh) or {}
        _deep_merge(base, overrides)

    # Flatten 'pipeline' key into top-level
    pipeline_section = base.pop("pipeline", {})
    base.update(pipeline_section)

    cfg = _dict_to_dataclass(PipelineConfig, base)
    _validate(cfg)
    return cfg
