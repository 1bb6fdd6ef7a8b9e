"""
JSON report generator for histogram results.

Serialises the bin scheme, per-channel histograms and statistics, and
provenance metadata into a structured JSON file suitable for machine
consumption and downstream plotting.
"""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from .. import __version__
from ..engine.compute import HistogramResult

logger = logging.getLogger(__name__)


class _ResultEncoder(json.JSONEncoder):
    """JSON encoder for histogram results and the numpy scalars inside them."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, HistogramResult):
            return obj.to_dict()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.bool_):
            return bool(obj)
        return super().default(obj)


def generate_json_report(
    result: HistogramResult,
    input_files: Dict[str, str],
    config_path: Optional[str] = None,
    output_path: str | Path = "histogram_report.json",
) -> Path:
    """Generate a structured JSON histogram report.

    Parameters
    ----------
    result : HistogramResult
        Output of :func:`chanhist.engine.compute.compute_histograms`.
    input_files : dict
        Mapping of input type → file path for provenance.
    config_path : str, optional
        Path to the configuration YAML used.
    output_path : path-like
        Where to write the JSON report.

    Returns
    -------
    Path
        Absolute path to the generated report.
    """
    output_path = Path(output_path)

    # Provenance
    config_hash = ""
    if config_path:
        with open(config_path, "rb") as f:
            config_hash = hashlib.sha256(f.read()).hexdigest()[:12]

    report = {
        "provenance": {
            "toolbox": "chanhist",
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "config_hash": config_hash,
            "input_files": input_files,
        },
        "result": result,
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as fh:
        json.dump(report, fh, indent=2, cls=_ResultEncoder)

    logger.info("Wrote JSON report: %s", output_path)
    return output_path.resolve()
