"""HeatmapArtist: lay out a latency-over-time grid as an SVG scene.

Columns are time buckets (left to right), rows are latency buckets
(lowest latency at the bottom). Only occupied cells get a rectangle; the
fill is ``colormap(count / max_count)``. Each cell carries hover
metadata that the single embedded script writes into a status line, and
a ``<title>`` so viewers without scripting still show a tooltip.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List

from latheat.core.axes import Axis
from latheat.core.config import HeatmapConfig
from latheat.core.errors import EmptyInputError, InternalInvariantError
from latheat.core.grid import Grid
from latheat.core.intervals import format_duration, round_for_display
from latheat.core.scene import CellInfo, Element, Line, Rect, Scene, Script, Text
from latheat.core.theme import BORDER_WIDTH, GRID_WIDTH, THEME, viridis

logger = logging.getLogger(__name__)

STATUS_ID = "latheat-status"
STATUS_PLACEHOLDER = "Hover over a cell for details"

HOVER_SCRIPT = f"""\
var LATHEAT_PLACEHOLDER = "{STATUS_PLACEHOLDER}";
function latheatShow(evt, start, low, high, count) {{
  var status = document.getElementById("{STATUS_ID}");
  status.textContent = "time +" + start + ", latency " + low + " to " + high
    + ": " + count + (count === 1 ? " point" : " points");
}}
function latheatHide(evt) {{
  document.getElementById("{STATUS_ID}").textContent = LATHEAT_PLACEHOLDER;
}}"""


def _label(duration) -> str:
    return format_duration(round_for_display(duration))


@dataclass
class HeatmapArtist:
    """Turns a ``Grid`` plus its two axes into a ``Scene``.

    ``colormap`` maps a normalized count in [0, 1] to a fill color and
    defaults to viridis.
    """

    grid: Grid
    time_axis: Axis
    latency_axis: Axis
    config: HeatmapConfig = field(default_factory=HeatmapConfig)
    colormap: Callable[[float], str] = viridis

    # Plot rectangle ---------------------------------------------------
    @property
    def left(self) -> float:
        return self.config.margin_left

    @property
    def top(self) -> float:
        return self.config.margin_top

    @property
    def right(self) -> float:
        return self.config.width - self.config.margin_right

    @property
    def bottom(self) -> float:
        return self.config.height - self.config.margin_bottom

    @property
    def cell_width(self) -> float:
        return self.config.plot_width / self.time_axis.bucket_count

    @property
    def cell_height(self) -> float:
        return self.config.plot_height / self.latency_axis.bucket_count

    def row_y(self, latency_index: int) -> float:
        """Top edge of latency row ``latency_index`` (row 0 sits on the bottom border)."""
        return self.top + (self.latency_axis.bucket_count - 1 - latency_index) * self.cell_height

    # Public API -------------------------------------------------------
    def compose(self) -> Scene:
        """Return the complete scene; nothing is built if the inputs are inconsistent."""
        expected = (self.time_axis.bucket_count, self.latency_axis.bucket_count)
        if self.grid.shape != expected:
            raise InternalInvariantError(f"grid shape {self.grid.shape} does not match axes {expected}")
        if self.grid.max_count < 1:
            raise EmptyInputError("cannot render a grid without datapoints")

        cfg = self.config
        elements: List[Element] = [
            Rect(0, 0, cfg.width, cfg.height, fill=THEME["background"], css_class="latheat-background"),
            Script(HOVER_SCRIPT),
            self._status(),
        ]
        cells = self._cells()
        elements.extend(cells)
        elements.extend(self._borders())
        elements.extend(self._gridlines())
        elements.extend(self._labels())
        logger.debug("Composed scene: %d cells, %d elements", len(cells), len(elements))
        return Scene(
            width=cfg.width,
            height=cfg.height,
            elements=tuple(elements),
            font_family=str(THEME["font_family"]),
        )

    # Internal helpers -------------------------------------------------
    def _cells(self) -> List[Rect]:
        cw, ch = self.cell_width, self.cell_height
        max_count = self.grid.max_count
        out: List[Rect] = []
        for i, j, count in self.grid.nonzero_cells():
            info = CellInfo(
                start=format_duration(self.time_axis.bucket_start(i)),
                low=format_duration(self.latency_axis.bucket_start(j)),
                high=format_duration(self.latency_axis.bucket_end(j)),
                count=count,
            )
            noun = "point" if count == 1 else "points"
            out.append(
                Rect(
                    x=self.left + i * cw,
                    y=self.row_y(j),
                    width=cw,
                    height=ch,
                    fill=self.colormap(count / max_count),
                    css_class="latheat-cell",
                    title=f"time +{info.start}, latency {info.low} to {info.high}: {count} {noun}",
                    cell=info,
                )
            )
        return out

    def _borders(self) -> List[Line]:
        color = str(THEME["border"])
        l, t, r, b = self.left, self.top, self.right, self.bottom
        return [
            Line(l, t, r, t, color, BORDER_WIDTH, "latheat-border"),
            Line(r, t, r, b, color, BORDER_WIDTH, "latheat-border"),
            Line(l, b, r, b, color, BORDER_WIDTH, "latheat-border"),
            Line(l, t, l, b, color, BORDER_WIDTH, "latheat-border"),
        ]

    def _gridlines(self) -> List[Line]:
        color = str(THEME["grid"])
        out: List[Line] = []
        for i in range(1, self.time_axis.bucket_count):
            x = self.left + i * self.cell_width
            out.append(Line(x, self.top, x, self.bottom, color, GRID_WIDTH, "latheat-grid"))
        for j in range(1, self.latency_axis.bucket_count):
            y = self.bottom - j * self.cell_height
            out.append(Line(self.left, y, self.right, y, color, GRID_WIDTH, "latheat-grid"))
        return out

    def _status(self) -> Text:
        return Text(
            self.right,
            self.top - 12,
            STATUS_PLACEHOLDER,
            str(THEME["muted"]),
            float(THEME["small_font_size"]),
            anchor="end",
            element_id=STATUS_ID,
            css_class="latheat-status",
        )

    def _labels(self) -> List[Text]:
        cfg = self.config
        fg = str(THEME["foreground"])
        size = float(THEME["font_size"])
        small = float(THEME["small_font_size"])
        mid_x = self.left + cfg.plot_width / 2
        mid_y = self.top + cfg.plot_height / 2
        tick_y = self.bottom + small + 6
        out: List[Text] = [
            Text(18, mid_y, "Latency", fg, size, anchor="middle", rotate=-90, css_class="latheat-axis-title"),
            Text(mid_x, cfg.height - 18, "Relative time", fg, size, anchor="middle", css_class="latheat-axis-title"),
            Text(self.left, tick_y, _label(0), fg, small, anchor="start", css_class="latheat-tick"),
            Text(self.right, tick_y, _label(self.time_axis.extent), fg, small, anchor="end", css_class="latheat-tick"),
            Text(self.left - 6, self.bottom, _label(0), fg, small, anchor="end", css_class="latheat-tick"),
            Text(self.left - 6, self.top + small, _label(self.latency_axis.extent), fg, small, anchor="end", css_class="latheat-tick"),
        ]
        if cfg.title:
            out.append(Text(self.left, self.top - 12, cfg.title, fg, size, anchor="start", css_class="latheat-title"))
        return out


def compose(
    grid: Grid,
    time_axis: Axis,
    latency_axis: Axis,
    config: HeatmapConfig | None = None,
    colormap: Callable[[float], str] = viridis,
) -> Scene:
    """Functional form of ``HeatmapArtist(...).compose()``."""
    return HeatmapArtist(
        grid=grid,
        time_axis=time_axis,
        latency_axis=latency_axis,
        config=config or HeatmapConfig(),
        colormap=colormap,
    ).compose()
