"""
HTML report generator for histogram results.

Produces a self-contained HTML document with one inline SVG bar chart and
values table per channel, composite first, followed by the real channels in
cycling order. Uses Jinja2 for templating.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
from jinja2 import Template

from .. import __version__
from ..engine.compute import HistogramResult
from .summary import next_channel

logger = logging.getLogger(__name__)

_HTML_TEMPLATE = Template("""\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Histogram — {{ title }}</title>
  <style>
    :root {
      --bg: #0f172a; --surface: #1e293b; --border: #334155;
      --text: #e2e8f0; --text-muted: #94a3b8;
      --plot-bg: #ebebeb; --bar: #475569; --warn: #f59e0b;
      --accent: #6366f1;
    }
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: 'Inter', system-ui, -apple-system, sans-serif;
      background: var(--bg); color: var(--text); padding: 2rem;
      line-height: 1.6;
    }
    h1 { font-size: 1.75rem; font-weight: 700; margin-bottom: .25rem; color: var(--accent); }
    .subtitle { color: var(--text-muted); font-size: .875rem; margin-bottom: 2rem; }
    .card {
      background: var(--surface); border: 1px solid var(--border);
      border-radius: 12px; padding: 1.5rem; margin-bottom: 1.5rem;
    }
    .card h2 { font-size: 1.1rem; margin-bottom: 1rem; color: var(--text); }
    svg.chart { background: var(--plot-bg); border-radius: 6px; margin-bottom: 1rem; }
    svg.chart rect { fill: var(--bar); }
    table { width: 100%; border-collapse: collapse; }
    th, td {
      padding: .6rem 1rem; text-align: left; border-bottom: 1px solid var(--border);
      font-size: .875rem; font-family: monospace;
    }
    th { color: var(--text-muted); font-weight: 600; text-transform: uppercase; letter-spacing: .05em; font-size: .75rem; }
    .notice {
      color: var(--warn); border: 1px solid var(--warn); border-radius: 8px;
      padding: .75rem 1rem; margin-bottom: 1.5rem;
    }
    .meta { color: var(--text-muted); font-size: .75rem; }
  </style>
</head>
<body>
  <h1>Histogram of {{ title }}</h1>
  <p class="subtitle">
    Shape {{ shape }} &middot; axes {{ axes }} &middot;
    {{ n_channels }} channel(s) &middot; Generated: {{ timestamp }}
  </p>

  {% if is_empty %}
  <div class="notice">No finite samples: all histograms are empty.</div>
  {% elif skipped %}
  <div class="notice">{{ skipped }} non-finite sample(s) excluded from accumulation.</div>
  {% endif %}

  {% for chart in charts %}
  <div class="card">
    <h2>{{ chart.label }}</h2>
    <svg class="chart" width="{{ width }}" height="{{ height }}"
         viewBox="0 0 {{ width }} {{ height }}" xmlns="http://www.w3.org/2000/svg">
      {% for bar in chart.bars %}
      <rect x="{{ '%.2f'|format(bar.x) }}" y="{{ '%.2f'|format(bar.y) }}"
            width="{{ '%.2f'|format(bar.w) }}" height="{{ '%.2f'|format(bar.h) }}">
        <title>{{ bar.start }}: {{ bar.count }}</title>
      </rect>
      {% endfor %}
    </svg>
    <table>
      <tbody>
        <tr><th>Pixels</th><td>{{ chart.stat.count }}</td><th>Bins</th><td>{{ bin_count }}</td></tr>
        <tr><th>Min</th><td>{{ chart.fmt.min }}</td><th>Max</th><td>{{ chart.fmt.max }}</td></tr>
        <tr><th>Mean</th><td>{{ chart.fmt.mean }}</td><th>StdDev</th><td>{{ chart.fmt.stddev }}</td></tr>
        <tr><th>Bin Width</th><td>{{ '%.4g'|format(bin_width) }}</td><th>Status</th><td>{{ chart.stat.status.value }}</td></tr>
      </tbody>
    </table>
  </div>
  {% endfor %}

  <div class="card">
    <h2>Provenance</h2>
    <p class="meta">Toolbox: chanhist v{{ version }}</p>
    {% for key, path in input_files.items() %}
    <p class="meta">{{ key }}: {{ path }}</p>
    {% endfor %}
  </div>
</body>
</html>
""")


def _fmt(value) -> str:
    return "n/a" if value is None else f"{value:.4f}"


def chart_bars(
    counts: np.ndarray,
    width: int,
    height: int,
    log_scale: bool = False,
) -> List[Dict[str, float]]:
    """Lay out one SVG bar per bin.

    Bar heights are proportional to the count (or ``log1p`` of it when
    *log_scale* is set), the tallest bar filling *height*.
    """
    counts = np.asarray(counts, dtype=np.int64)
    n_bins = len(counts)
    if n_bins == 0:
        return []

    scaled = np.log1p(counts) if log_scale else counts.astype(np.float64)
    peak = float(scaled.max())
    bar_w = width / n_bins

    bars = []
    for i, (count, value) in enumerate(zip(counts, scaled)):
        h = (float(value) / peak) * height if peak > 0 else 0.0
        bars.append({
            "x": i * bar_w,
            "y": height - h,
            "w": bar_w,
            "h": h,
            "count": int(count),
        })
    return bars


def generate_html_report(
    result: HistogramResult,
    title: str,
    timestamp: str,
    input_files: Dict[str, str],
    log_scale: bool = False,
    chart_width: int = 512,
    chart_height: int = 160,
    output_path: str | Path = "histogram_report.html",
) -> Path:
    """Generate a self-contained HTML histogram report.

    Parameters
    ----------
    result : HistogramResult
        Computed histograms and statistics.
    title : str
        Image name shown in the heading.
    timestamp : str
        ISO timestamp string.
    input_files : dict
        Input file provenance.
    log_scale : bool
        Draw bar heights on a logarithmic scale.
    chart_width, chart_height : int
        SVG chart size in pixels.
    output_path : path-like
        Where to write the HTML.

    Returns
    -------
    Path
        Absolute path to the generated report.
    """
    output_path = Path(output_path)
    edges = result.bin_scheme.bin_edges()

    charts: List[Dict[str, Any]] = []
    channel = result.composite_index
    for _ in range(result.channel_count + 1):
        stat = result.stats[channel]
        bars = chart_bars(result.histogram(channel), chart_width, chart_height, log_scale)
        for bar, start in zip(bars, edges[:-1]):
            bar["start"] = f"{start:.4g}"
        charts.append({
            "label": stat.label,
            "stat": stat,
            "fmt": {
                "min": _fmt(stat.min),
                "max": _fmt(stat.max),
                "mean": _fmt(stat.mean),
                "stddev": _fmt(stat.stddev),
            },
            "bars": bars,
        })
        channel = next_channel(channel, result.channel_count)

    html = _HTML_TEMPLATE.render(
        title=title,
        timestamp=timestamp,
        shape=" × ".join(str(s) for s in result.shape),
        axes=", ".join(result.axes),
        n_channels=result.channel_count,
        is_empty=result.is_empty,
        skipped=result.skipped_samples,
        charts=charts,
        width=chart_width,
        height=chart_height,
        bin_count=result.bin_scheme.bin_count,
        bin_width=result.bin_scheme.bin_width,
        input_files=input_files,
        version=__version__,
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as fh:
        fh.write(html)

    logger.info("Wrote HTML report: %s", output_path)
    return output_path.resolve()
