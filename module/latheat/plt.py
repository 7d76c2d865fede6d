"""Public API: datapoints in, heatmap scene or SVG out."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

import pandas as pd

from latheat.core.axes import build_axes
from latheat.core.config import HeatmapConfig
from latheat.core.dataset import prepare_dataset
from latheat.core.figure import render_svg
from latheat.core.grid import aggregate
from latheat.core.scene import Scene
from latheat.core.theme import viridis
from latheat.plots.heatmap import compose

logger = logging.getLogger(__name__)


def heatmap(
    points: Iterable[Any] | pd.DataFrame,
    config: HeatmapConfig | None = None,
    colormap: Callable[[float], str] = viridis,
    chunk_size: int | None = None,
) -> Scene:
    """Run the whole pipeline and return the composed ``Scene``.

    Every validation, axis and binning error is raised before the scene
    is built, so a failed call never yields a partial image.
    """
    cfg = config or HeatmapConfig()
    df = prepare_dataset(points)
    time_axis, latency_axis = build_axes(df, cfg.time_buckets, cfg.latency_buckets)
    grid = aggregate(df, time_axis, latency_axis, chunk_size=chunk_size)
    logger.debug(
        "Heatmap: %d points, time width %s x %d, latency width %s x %d, max count %d",
        len(df),
        time_axis.bucket_width,
        time_axis.bucket_count,
        latency_axis.bucket_width,
        latency_axis.bucket_count,
        grid.max_count,
    )
    return compose(grid, time_axis, latency_axis, cfg, colormap=colormap)


def render(
    points: Iterable[Any] | pd.DataFrame,
    config: HeatmapConfig | None = None,
    colormap: Callable[[float], str] = viridis,
) -> str:
    """Return the heatmap for *points* as an SVG document string."""
    cfg = config or HeatmapConfig()
    return render_svg(heatmap(points, cfg, colormap=colormap), xml_header=cfg.xml_header)


# Expose so callers can do: from latheat.plt import plt; plt.render(points)
plt = type("plt", (), {"heatmap": staticmethod(heatmap), "render": staticmethod(render)})()
