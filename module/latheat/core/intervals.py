"""Friendly bucket widths and duration labels.

``choose_friendly_interval`` snaps a raw bucket width (e.g. 4m53.2s) to a
multiple of 1.5x a round duration so that axis boundaries are legible
while bucket counts stay close to the requested target.
``round_for_display`` and ``format_duration`` produce the short strings
used for the boundary labels and hover text.

All arithmetic runs on integer nanoseconds.
"""

from __future__ import annotations

from typing import Any, List

import pandas as pd

from .errors import DegenerateAxisError, InternalInvariantError
from .utils import from_nanos, to_nanos

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

# Canonical "nice" durations, largest first.
FRIENDLY_INTERVALS: List[int] = [
    HOUR,
    10 * MINUTE,
    5 * MINUTE,
    MINUTE,
    30 * SECOND,
    10 * SECOND,
    SECOND,
    500 * MILLISECOND,
    200 * MILLISECOND,
    100 * MILLISECOND,
    50 * MILLISECOND,
    10 * MILLISECOND,
    MILLISECOND,
]

# (threshold, unit): values strictly above threshold are rounded to unit.
_DISPLAY_ROUNDING = [
    (HOUR, MINUTE),
    (MINUTE, SECOND),
    (SECOND, 10 * MILLISECOND),
    (MILLISECOND, 10 * MICROSECOND),
    (MICROSECOND, 10 * NANOSECOND),
]


def _round_half_up(value: int, unit: int) -> int:
    """Round non-negative *value* to the nearest multiple of *unit*, ties up."""
    return (value + unit // 2) // unit * unit


def friendly_interval_ns(ideal: int) -> int:
    """Integer-nanosecond form of :func:`choose_friendly_interval`."""
    if ideal <= 0:
        raise DegenerateAxisError("unknown", f"ideal interval must be positive, got {ideal}ns")
    for d in FRIENDLY_INTERVALS:
        if ideal > d:
            # 1.5 * d is exact for every table entry.
            result = _round_half_up(ideal, d * 3 // 2)
            break
    else:
        # Sub-millisecond widths are not snapped.
        result = ideal
    if result <= 0:
        raise InternalInvariantError(f"friendly interval for {ideal}ns came out as {result}ns")
    return result


def choose_friendly_interval(ideal: Any) -> pd.Timedelta:
    """Round *ideal* to a human-friendly bucket width.

    The first canonical duration ``d`` with ``ideal > d`` picks the step
    ``1.5 * d``; the result is ``ideal`` rounded half up to a multiple of
    that step. Widths of 1ms or less come back unchanged. The mapping is
    monotonic: a larger ideal never gives a smaller width.
    """
    return from_nanos(friendly_interval_ns(to_nanos(ideal)))


def round_for_display(duration: Any) -> pd.Timedelta:
    """Round *duration* so its label keeps at most two sub-unit digits."""
    ns = to_nanos(duration)
    magnitude = abs(ns)
    for threshold, unit in _DISPLAY_ROUNDING:
        if magnitude > threshold:
            rounded = _round_half_up(magnitude, unit)
            return from_nanos(rounded if ns >= 0 else -rounded)
    return from_nanos(ns)


def _trim(value: float, decimals: int) -> str:
    out = f"{value:.{decimals}f}"
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    return out


def format_duration(duration: Any) -> str:
    """Return a compact label such as ``1h30m``, ``4.25s``, ``15ms`` or ``0s``."""
    ns = to_nanos(duration)
    if ns == 0:
        return "0s"
    if ns < 0:
        return "-" + format_duration(-ns)
    if ns < MICROSECOND:
        return f"{ns}ns"
    if ns < MILLISECOND:
        return _trim(ns / MICROSECOND, 3) + "us"
    if ns < SECOND:
        return _trim(ns / MILLISECOND, 6) + "ms"
    if ns < MINUTE:
        return _trim(ns / SECOND, 9) + "s"

    hours, rest = divmod(ns, HOUR)
    minutes, rest = divmod(rest, MINUTE)
    parts: List[str] = []
    if hours:
        parts.append(f"{hours}h")
    if minutes or (hours and rest):
        parts.append(f"{minutes}m")
    if rest:
        parts.append(_trim(rest / SECOND, 9) + "s")
    return "".join(parts)
