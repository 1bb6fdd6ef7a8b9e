"""
CLI entry point for chanhist.

Orchestrates the full pipeline: array loading → histogram computation →
text summary → report generation.

Usage::

    chanhist --input image.npy --axes y,x,c --output-dir ./histograms
    chanhist --input stack.npy --channel-axis 0 --float --channel 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="chanhist",
        description="Per-channel and composite histograms for N-D images",
    )
    p.add_argument(
        "--input", "-i",
        required=True,
        help="Path to an N-D sample array saved with numpy (.npy).",
    )
    p.add_argument(
        "--output-dir", "-o",
        default="./histogram_output",
        help="Directory for reports (default: ./histogram_output).",
    )
    p.add_argument(
        "--config", "-c",
        default=None,
        help="Path to custom YAML configuration file.",
    )
    p.add_argument(
        "--axes",
        default=None,
        help="Comma-separated axis names, one per dimension (e.g. y,x,c). "
             "An axis named 'c' or 'channel' is used as the channel axis.",
    )
    p.add_argument(
        "--channel-axis",
        default=None,
        help="Channel axis, as an index or an axis name.",
    )
    kind = p.add_mutually_exclusive_group()
    kind.add_argument(
        "--integer",
        dest="is_integer",
        action="store_const",
        const=True,
        default=None,
        help="Treat samples as integer-valued (default: inferred from dtype).",
    )
    kind.add_argument(
        "--float",
        dest="is_integer",
        action="store_const",
        const=False,
        help="Treat samples as continuous.",
    )
    p.add_argument(
        "--channel",
        type=int,
        default=None,
        help="Channel to summarise on stdout (default: composite).",
    )
    p.add_argument(
        "--name",
        default=None,
        help="Image name used in reports (default: input file stem).",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output.",
    )
    return p


def _log(msg: str, verbose: bool = True) -> None:
    if verbose:
        print(f"[chanhist] {msg}", flush=True)


def _parse_channel_axis(value: Optional[str]) -> Union[int, str, None]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return value


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%H:%M:%S",
    )


def run_pipeline(
    input_path: str,
    output_dir: str,
    config_path: Optional[str] = None,
    axes: Optional[Sequence[str]] = None,
    channel_axis: Union[int, str, None] = None,
    is_integer: Optional[bool] = None,
    channel: Optional[int] = None,
    name: Optional[str] = None,
    verbose: bool = True,
) -> Dict[str, Any]:
    """Execute the histogram pipeline.

    Parameters
    ----------
    input_path : str
        ``.npy`` file holding the sample array.
    output_dir : str
        Output directory for reports.
    config_path : str, optional
        Custom YAML config.
    axes : sequence of str, optional
        Axis names, one per dimension.
    channel_axis : int or str, optional
        Channel axis index or name.
    is_integer : bool, optional
        Integer-valued data flag (inferred from dtype if omitted).
    channel : int, optional
        Channel whose summary is printed (composite by default).
    name : str, optional
        Image name for the reports.
    verbose : bool
        Print progress messages.

    Returns
    -------
    dict
        ``result`` (HistogramResult), ``summary`` (str) and ``reports``
        (mapping of report kind → path).
    """
    from .config import load_config
    from .engine.compute import compute_histograms
    from .reporting.html_report import generate_html_report
    from .reporting.json_report import generate_json_report
    from .reporting.summary import format_summary

    # ---- Setup ----
    cfg = load_config(config_path)
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    inp = Path(input_path)

    if name is None:
        name = inp.stem

    _log(f"chanhist v{cfg.version}", verbose)
    _log(f"Input:  {inp}", verbose)
    _log(f"Output: {out}", verbose)

    # ---- Load samples ----
    data = np.load(inp, mmap_mode="r", allow_pickle=False)
    _log(f"Loaded array {data.shape} {data.dtype}", verbose)
    input_files: Dict[str, str] = {"image": str(inp)}

    # ---- Compute ----
    _log("Computing histograms...", verbose)
    result = compute_histograms(
        data,
        channel_axis=channel_axis,
        is_integer=is_integer,
        axes=axes,
        max_bins=cfg.histogram.max_bins,
        chunk_size=cfg.histogram.chunk_size,
    )
    scheme = result.bin_scheme
    _log(
        f"  {result.channel_count} channel(s), {result.sample_count} samples, "
        f"{scheme.bin_count} bins of width {scheme.bin_width:.4g}",
        verbose,
    )
    if result.skipped_samples:
        _log(f"  Skipped {result.skipped_samples} non-finite samples", verbose)

    summary = format_summary(result, channel)
    if cfg.reporting.text:
        print(summary, end="")

    # ---- Reports ----
    reports: Dict[str, Path] = {}
    timestamp = datetime.now(timezone.utc).isoformat()

    if cfg.reporting.json:
        reports["json"] = generate_json_report(
            result,
            input_files=input_files,
            config_path=config_path,
            output_path=out / f"{name}_histogram.json",
        )
        _log(f"JSON report: {reports['json']}", verbose)

    if cfg.reporting.html:
        reports["html"] = generate_html_report(
            result,
            title=name,
            timestamp=timestamp,
            input_files=input_files,
            log_scale=cfg.reporting.log_scale,
            chart_width=cfg.reporting.chart_width,
            chart_height=cfg.reporting.chart_height,
            output_path=out / f"{name}_histogram.html",
        )
        _log(f"HTML report: {reports['html']}", verbose)

    _log("Pipeline complete.", verbose)
    return {"result": result, "summary": summary, "reports": reports}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        run_pipeline(
            input_path=args.input,
            output_dir=args.output_dir,
            config_path=args.config,
            axes=args.axes.split(",") if args.axes else None,
            channel_axis=_parse_channel_axis(args.channel_axis),
            is_integer=args.is_integer,
            channel=args.channel,
            name=args.name,
            verbose=args.verbose,
        )
    except Exception as exc:
        print(f"[chanhist] ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
