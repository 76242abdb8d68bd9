"""
Chart rendering with matplotlib.

Sizes in ChartStyle are pixels; matplotlib wants inches and points, so
everything is converted through style.dpi.
"""

from __future__ import annotations

import logging
import math
import os
from typing import BinaryIO, List, Union

import matplotlib
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from .errors import RenderError
from .models import DEFAULT_STYLE, AlignedSeries, ChartStyle

logger = logging.getLogger(__name__)

# legend sample segment, pixels
_LEGEND_SEGMENT = 20
_TITLE_AREA = 60

Output = Union[str, os.PathLike, BinaryIO]


def _points(pixels: float, dpi: int) -> float:
    return pixels * 72.0 / dpi


def tick_positions(n: int, max_labels: int) -> List[int]:
    """Evenly spaced row indices to label, all inside 0..n-1."""
    if n <= 0:
        return []
    step = max(1, math.ceil(n / max_labels))
    return list(range(0, n, step))


def _layout(fig: Figure, style: ChartStyle) -> None:
    w, h = style.width, style.height
    fig.subplots_adjust(
        left=(style.margin + style.y_label_area) / w,
        right=1.0 - (style.margin + style.legend_area) / w,
        bottom=(style.margin + style.x_label_area) / h,
        top=1.0 - (style.margin + _TITLE_AREA) / h,
    )


def _draw(series: AlignedSeries, style: ChartStyle) -> Figure:
    fg = style.foreground_color
    font = {"family": style.font_family, "color": fg}
    label_size = _points(style.font_size, style.dpi)
    title_size = _points(style.title_font_size, style.dpi)

    fig = Figure(figsize=(style.width / style.dpi, style.height / style.dpi), dpi=style.dpi)
    fig.set_facecolor(style.background_color)
    _layout(fig, style)

    ax = fig.add_subplot(1, 1, 1)
    ax.set_facecolor(style.background_color)
    ax.set_title(style.title, fontdict=font, fontsize=title_size)

    n = len(series)
    ax.set_xlim(0, max(n - 1, 1))
    ax.set_ylim(*style.y_range)

    # mesh
    for spine in ax.spines.values():
        spine.set_color(fg)
        spine.set_alpha(0.8)
    ax.grid(True, color=fg, alpha=0.1, linewidth=0.8)
    ax.set_axisbelow(True)
    ax.tick_params(colors=fg, labelsize=label_size)

    ax.set_ylabel(style.y_caption, fontdict=font, fontsize=label_size)
    ax.yaxis.set_major_locator(MaxNLocator(nbins=style.y_label_count))

    ax.set_xlabel(style.x_caption, fontdict=font, fontsize=label_size)
    ticks = tick_positions(n, style.x_label_count)
    ax.set_xticks(ticks, labels=[series.x_label[i] for i in ticks])

    for values, label, color in (
        (series.ram, "RAM", style.ram_color),
        (series.cpu, "CPU", style.cpu_color),
        (series.gpu, "GPU", style.gpu_color),
    ):
        ax.plot(series.x_index, values, color=color, label=label, linewidth=1.5)

    ax.legend(
        loc="upper left",
        bbox_to_anchor=(1.02, 1.0),
        borderaxespad=0.0,
        prop={"family": style.font_family, "size": label_size},
        labelcolor=fg,
        facecolor=fg,
        edgecolor=fg,
        framealpha=0.1,
        handlelength=_LEGEND_SEGMENT / style.font_size,
    )
    return fig


def create_chart(series: AlignedSeries, output: Output, style: ChartStyle = DEFAULT_STYLE) -> None:
    """Render the three usage series and save the chart as PNG to `output`."""
    try:
        with matplotlib.rc_context({"font.family": style.font_family}):
            fig = _draw(series, style)
            fig.savefig(output, format="png", dpi=style.dpi, facecolor=style.background_color)
    except (OSError, ValueError, RuntimeError) as exc:
        raise RenderError(f"cannot render chart: {exc}") from exc

    if isinstance(output, (str, os.PathLike)):
        logger.info("chart with %d points written to %s", len(series), os.fspath(output))
