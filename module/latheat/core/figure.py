"""Figure: serializes a composed Scene into a self-contained SVG document.

The document optionally starts with an XML prologue and the SVG 1.1
doctype; ``xml_header=False`` emits just the ``<svg>`` element so it can
be embedded in another document. All text and attribute values pass
through ``esc()``. Write errors propagate to the caller unchanged.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, TextIO, Union

from .scene import Line, Rect, Scene, Script, Text
from .utils import esc, fmt_num

logger = logging.getLogger(__name__)

XML_PROLOGUE = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>'
SVG_DOCTYPE = (
    '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" '
    '"http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">'
)
SVG_NS = "http://www.w3.org/2000/svg"


def _class_attr(css_class: str | None) -> str:
    return f' class="{esc(css_class)}"' if css_class else ""


def _render_rect(rect: Rect) -> str:
    attrs = (
        f'x="{fmt_num(rect.x)}" y="{fmt_num(rect.y)}" '
        f'width="{fmt_num(rect.width)}" height="{fmt_num(rect.height)}" '
        f'fill="{esc(rect.fill)}"{_class_attr(rect.css_class)}'
    )
    if rect.cell is not None:
        c = rect.cell
        args = f"evt, '{c.start}', '{c.low}', '{c.high}', {c.count}"
        attrs += (
            f' onmouseover="{esc("latheatShow(" + args + ")")}"'
            f' onmouseout="{esc("latheatHide(evt)")}"'
        )
    if rect.title:
        return f"<rect {attrs}><title>{esc(rect.title)}</title></rect>"
    return f"<rect {attrs}/>"


def _render_line(line: Line) -> str:
    return (
        f'<line x1="{fmt_num(line.x1)}" y1="{fmt_num(line.y1)}" '
        f'x2="{fmt_num(line.x2)}" y2="{fmt_num(line.y2)}" '
        f'stroke="{esc(line.stroke)}" stroke-width="{fmt_num(line.stroke_width)}"'
        f"{_class_attr(line.css_class)}/>"
    )


def _render_text(text: Text) -> str:
    attrs = (
        f'x="{fmt_num(text.x)}" y="{fmt_num(text.y)}" '
        f'fill="{esc(text.fill)}" font-size="{fmt_num(text.font_size)}" '
        f'text-anchor="{esc(text.anchor)}"'
    )
    if text.rotate is not None:
        attrs += (
            f' transform="rotate({fmt_num(text.rotate)} '
            f'{fmt_num(text.x)} {fmt_num(text.y)})"'
        )
    if text.element_id:
        attrs += f' id="{esc(text.element_id)}"'
    attrs += _class_attr(text.css_class)
    return f"<text {attrs}>{esc(text.content)}</text>"


def _render_script(script: Script) -> str:
    # CDATA keeps "<" and "&" in the script literal; "]]>" must not appear in it.
    if "]]>" in script.source:
        raise ValueError("script source must not contain ']]>'")
    return f'<script type="text/ecmascript"><![CDATA[\n{script.source}\n]]></script>'


def render_svg(scene: Scene, xml_header: bool = True) -> str:
    """Return the SVG document for *scene* as a string."""
    lines: List[str] = []
    if xml_header:
        lines.append(XML_PROLOGUE)
        lines.append(SVG_DOCTYPE)
    w = fmt_num(scene.width)
    h = fmt_num(scene.height)
    lines.append(
        f'<svg version="1.1" xmlns="{SVG_NS}" width="{w}" height="{h}" '
        f'viewBox="0 0 {w} {h}" font-family="{esc(scene.font_family)}">'
    )
    for element in scene.elements:
        if isinstance(element, Rect):
            lines.append(_render_rect(element))
        elif isinstance(element, Line):
            lines.append(_render_line(element))
        elif isinstance(element, Text):
            lines.append(_render_text(element))
        elif isinstance(element, Script):
            lines.append(_render_script(element))
        else:
            raise TypeError(f"unsupported scene element: {type(element).__name__}")
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def write_svg(
    scene: Scene,
    destination: Union[str, Path, TextIO],
    xml_header: bool = True,
) -> None:
    """Write the SVG for *scene* to a path or an open text stream."""
    svg = render_svg(scene, xml_header=xml_header)
    if isinstance(destination, (str, Path)):
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(svg)
        logger.debug("Wrote %d bytes of SVG to %s", len(svg), path)
    else:
        destination.write(svg)
