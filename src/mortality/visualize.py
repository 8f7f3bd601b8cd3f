"""Line-chart rendering for scenario comparisons.

Requirements:
- Matplotlib only, imported lazily so the numerics never pull in a GUI backend
- One line per scenario, in the scenario's own color, one marker per sample
- Headless rendering: render_comparison(result, out_path) writes a PNG via Agg
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from .simulate import ComparisonResult

_RGB_RE = re.compile(r"^\s*rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([0-9.]+)\s*)?\)\s*$")


@dataclass(frozen=True)
class PlotConfig:
    title: str = "Pneumonia Mortality Rate Prediction in Kenya"
    xlabel: str = "Years from Start"
    ylabel: str = "Mortality Rate (per 1000 children)"
    y_min: float | None = 0.0
    figsize: Tuple[float, float] = (8.0, 4.5)
    dpi: int = 150
    line_width: float = 2.0
    marker_size: float = 4.0
    # Above this many samples the x axis gets automatic ticks instead of one per sample.
    max_xticks: int = 25


def parse_rgb(color: str):
    """Convert a CSS `rgb(r, g, b)` string to a matplotlib RGB tuple in [0, 1].

    Anything else (hex, named colors) is returned unchanged for matplotlib to handle.
    """
    m = _RGB_RE.match(color)
    if m is None:
        return color
    r, g, b = (int(m.group(k)) for k in (1, 2, 3))
    if max(r, g, b) > 255:
        raise ValueError(f"RGB components must be in [0, 255], got {color!r}")
    return (r / 255.0, g / 255.0, b / 255.0)


def plot_comparison(result: ComparisonResult, *, ax=None, config: PlotConfig | None = None):
    """Draw every scenario trajectory of `result` onto `ax` (new figure if None)."""
    import matplotlib.pyplot as plt

    if config is None:
        config = PlotConfig()

    if ax is None:
        _fig, ax = plt.subplots(figsize=config.figsize, constrained_layout=True)

    for run in result.runs:
        ax.plot(
            run.trajectory.t,
            run.trajectory.y,
            color=parse_rgb(run.color),
            label=run.label,
            linewidth=config.line_width,
            marker="o",
            markersize=config.marker_size,
        )

    ax.set_title(config.title)
    ax.set_xlabel(config.xlabel)
    ax.set_ylabel(config.ylabel)
    if config.y_min is not None:
        ax.set_ylim(bottom=config.y_min)

    t = result.t
    if 0 < t.size <= config.max_xticks:
        ax.set_xticks(t)
        ax.set_xticklabels(result.time_labels(), rotation=45, ha="right")
    elif t.size:
        from matplotlib.ticker import FuncFormatter, MaxNLocator

        ax.xaxis.set_major_locator(MaxNLocator(nbins=config.max_xticks))
        ax.xaxis.set_major_formatter(FuncFormatter(lambda x, _pos: f"Year {x:g}"))
        ax.tick_params(axis="x", labelrotation=45)
    ax.grid(True, alpha=0.3)
    if result.runs:
        ax.legend(loc="upper right")
    return ax


def render_comparison(result: ComparisonResult, out_path: Path | str, *, config: PlotConfig | None = None) -> Path:
    """Render the comparison chart to an image file without opening a window."""
    import matplotlib

    if matplotlib.get_backend().lower() != "agg":
        try:
            matplotlib.use("Agg", force=True)
        except Exception:
            # If pyplot is already imported in the process, backend switching may fail.
            pass

    import matplotlib.pyplot as plt

    if config is None:
        config = PlotConfig()

    fig, ax = plt.subplots(figsize=config.figsize, constrained_layout=True)
    try:
        plot_comparison(result, ax=ax, config=config)
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_path, dpi=config.dpi)
    finally:
        plt.close(fig)
    return out_path


def show_comparison(result: ComparisonResult, *, config: PlotConfig | None = None) -> None:
    """Open an interactive window with the comparison chart."""
    import matplotlib.pyplot as plt

    plot_comparison(result, config=config)
    plt.show()
