"""Render configuration: canvas layout, bucket targets, output options.

``HeatmapConfig`` holds the defaults. ``read_config`` loads overrides
from a sectioned CSV (``section,key,value`` rows), e.g.::

    section,key,value
    layout,width,1280
    axes,time_buckets,150
    output,xml_header,false
    meta,title,API latency

Unknown sections are skipped; unknown keys inside a known section are an
error so typos do not go unnoticed.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import pandas as pd

from .axes import DEFAULT_TARGET_BUCKETS

# section -> key -> converter
_SECTIONS: Dict[str, Dict[str, Any]] = {
    "layout": {
        "width": float,
        "height": float,
        "margin_left": float,
        "margin_right": float,
        "margin_top": float,
        "margin_bottom": float,
    },
    "axes": {
        "time_buckets": lambda v: int(float(v)),
        "latency_buckets": lambda v: int(float(v)),
    },
    "output": {
        "xml_header": lambda v: _parse_bool(v),
    },
    "meta": {
        "title": str,
    },
}


def _parse_bool(value: Any) -> bool:
    s = str(value).strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


@dataclass(frozen=True)
class HeatmapConfig:
    """Layout and output parameters for one render."""

    width: float = 1024.0
    height: float = 768.0
    margin_left: float = 90.0
    margin_right: float = 20.0
    margin_top: float = 40.0
    margin_bottom: float = 70.0
    time_buckets: int = DEFAULT_TARGET_BUCKETS
    latency_buckets: int = DEFAULT_TARGET_BUCKETS
    xml_header: bool = True
    title: str | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("canvas width/height must be > 0")
        margins = (self.margin_left, self.margin_right, self.margin_top, self.margin_bottom)
        if any(m < 0 for m in margins):
            raise ValueError("margins must be >= 0")
        if self.plot_width <= 0 or self.plot_height <= 0:
            raise ValueError("margins leave no room for the plot area")
        if self.time_buckets < 1 or self.latency_buckets < 1:
            raise ValueError("bucket targets must be >= 1")

    @property
    def plot_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def plot_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom

    def replace(self, **overrides: Any) -> "HeatmapConfig":
        """Return a copy with the non-None *overrides* applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)


def read_config(path: str | Path, base: HeatmapConfig | None = None) -> HeatmapConfig:
    """Load a sectioned config CSV on top of *base* (defaults if omitted)."""
    df = pd.read_csv(path, dtype=str).fillna("")
    for col in ("section", "key", "value"):
        if col not in df.columns:
            raise ValueError(f"{path}: config CSV missing '{col}' column")

    overrides: Dict[str, Any] = {}
    for _, r in df.iterrows():
        section = str(r.get("section", "")).strip().lower()
        if section not in _SECTIONS:
            continue
        key = str(r.get("key", "")).strip()
        if not key:
            continue
        convert = _SECTIONS[section].get(key)
        if convert is None:
            raise ValueError(f"{path}: unknown key '{key}' in section '{section}'")
        try:
            overrides[key] = convert(str(r.get("value", "")).strip())
        except ValueError as e:
            raise ValueError(f"{path}: bad value for {section}.{key}: {e}") from e

    return (base or HeatmapConfig()).replace(**overrides)
