"""Shared utilities.

``esc()`` escapes any string before it is placed in SVG text nodes or
attribute values; every label, tooltip and hover argument goes through
it. The nanosecond helpers keep bucket arithmetic in exact integers.
"""

from __future__ import annotations

import html
from typing import Any

import pandas as pd


def esc(value: Any) -> str:
    """Return an XML-escaped string representation of *value*.

    Escapes ``&``, ``<``, ``>``, and both single and double quotes so the
    result is safe for use in element text or attribute values.
    """
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def to_nanos(duration: Any) -> int:
    """Return *duration* as integer nanoseconds.

    Accepts ``pd.Timedelta``, ``datetime.timedelta``, numpy timedeltas and
    plain ints (already nanoseconds).
    """
    if isinstance(duration, int):
        return duration
    td = pd.Timedelta(duration)
    if td is pd.NaT:
        raise ValueError("duration must not be NaT")
    return int(td.value)


def from_nanos(nanos: int) -> pd.Timedelta:
    return pd.Timedelta(int(nanos), unit="ns")


def fmt_num(value: float) -> str:
    """Format a coordinate for SVG output: at most 3 decimals, no trailing zeros."""
    out = f"{value:.3f}".rstrip("0").rstrip(".")
    if out in ("-0", ""):
        out = "0"
    return out
