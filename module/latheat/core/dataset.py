"""Datapoints and the validated, time-sorted dataset frame.

The rest of the pipeline works on a pandas DataFrame with two columns:

- ``time``: datetime64[ns] (timezone-aware input is converted to naive UTC)
- ``latency``: timedelta64[ns]

``prepare_dataset`` is the single entry point that builds that frame,
rejects bad rows and sorts by time. It always returns a new frame; the
caller's data is left untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

import pandas as pd

from .errors import EmptyInputError, InvalidDatapointError

logger = logging.getLogger(__name__)

TIME_COL = "time"
LATENCY_COL = "latency"


@dataclass(frozen=True)
class Datapoint:
    """One (timestamp, latency) observation."""

    time: pd.Timestamp
    latency: pd.Timedelta


def _frame_from_points(points: Iterable[Any]) -> pd.DataFrame:
    times = []
    latencies = []
    for p in points:
        if isinstance(p, Datapoint):
            times.append(p.time)
            latencies.append(p.latency)
        else:
            t, lat = p
            times.append(t)
            latencies.append(lat)
    return pd.DataFrame({TIME_COL: times, LATENCY_COL: latencies})


def _normalize_times(col: pd.Series) -> pd.Series:
    times = pd.to_datetime(col)
    if getattr(times.dt, "tz", None) is not None:
        times = times.dt.tz_convert("UTC").dt.tz_localize(None)
    return times.astype("datetime64[ns]")


def prepare_dataset(points: Iterable[Any] | pd.DataFrame) -> pd.DataFrame:
    """Validate *points* and return them as a time-sorted DataFrame.

    *points* may be a DataFrame with ``time`` and ``latency`` columns, or
    any iterable of ``Datapoint`` / ``(time, latency)`` pairs.

    Raises ``EmptyInputError`` for no rows and ``InvalidDatapointError``
    (index = position in the input) for a missing value or a negative
    latency. Negative latencies are rejected, never clamped.
    """
    if isinstance(points, pd.DataFrame):
        missing = sorted({TIME_COL, LATENCY_COL} - set(points.columns))
        if missing:
            raise ValueError(f"DataFrame must contain {missing} columns")
        df = points[[TIME_COL, LATENCY_COL]].reset_index(drop=True)
    else:
        df = _frame_from_points(points)

    if df.empty:
        raise EmptyInputError()

    df = pd.DataFrame(
        {
            TIME_COL: _normalize_times(df[TIME_COL]),
            LATENCY_COL: pd.to_timedelta(df[LATENCY_COL]).astype("timedelta64[ns]"),
        }
    )

    for col in (TIME_COL, LATENCY_COL):
        bad = df.index[df[col].isna()]
        if len(bad):
            raise InvalidDatapointError(int(bad[0]), f"missing {col}")

    negative = df.index[df[LATENCY_COL] < pd.Timedelta(0)]
    if len(negative):
        idx = int(negative[0])
        raise InvalidDatapointError(idx, f"negative latency {df[LATENCY_COL].iloc[idx]}")

    # Stable sort so equal timestamps keep their input order.
    df = df.sort_values(TIME_COL, kind="mergesort").reset_index(drop=True)
    logger.debug(
        "Prepared dataset: %d points from %s to %s",
        len(df),
        df[TIME_COL].iloc[0],
        df[TIME_COL].iloc[-1],
    )
    return df


def iter_datapoints(df: pd.DataFrame) -> Iterator[Datapoint]:
    """Yield the rows of a dataset frame as ``Datapoint`` objects."""
    for t, lat in zip(df[TIME_COL], df[LATENCY_COL]):
        yield Datapoint(time=pd.Timestamp(t), latency=pd.Timedelta(lat))
