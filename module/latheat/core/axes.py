"""Axis: a partition of a value range into equal-width buckets.

Two axes exist per render: the time axis (origin = earliest timestamp)
and the latency axis (origin = zero). Bucket widths come from
``choose_friendly_interval`` and bucket counts are derived so that the
largest observed value always has a bucket.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
import pandas as pd

from .dataset import LATENCY_COL, TIME_COL
from .errors import DegenerateAxisError, EmptyInputError, InternalInvariantError
from .intervals import friendly_interval_ns
from .utils import from_nanos, to_nanos

logger = logging.getLogger(__name__)

DEFAULT_TARGET_BUCKETS = 100


@dataclass(frozen=True)
class Axis:
    """Equal-width buckets starting at ``origin``.

    ``origin`` is a ``pd.Timestamp`` for the time axis and
    ``pd.Timedelta(0)`` for the latency axis. Widths and offsets are
    ``pd.Timedelta``.
    """

    name: str
    origin: Any
    bucket_width: pd.Timedelta
    bucket_count: int

    def __post_init__(self) -> None:
        if to_nanos(self.bucket_width) <= 0:
            raise DegenerateAxisError(self.name, f"{self.name} axis bucket width must be > 0")
        if self.bucket_count < 1:
            raise InternalInvariantError(f"{self.name} axis has {self.bucket_count} buckets")

    @property
    def width_ns(self) -> int:
        return to_nanos(self.bucket_width)

    @property
    def extent(self) -> pd.Timedelta:
        """Offset of the upper edge of the last bucket."""
        return from_nanos(self.width_ns * self.bucket_count)

    def bucket_start(self, index: int) -> pd.Timedelta:
        return from_nanos(self.width_ns * index)

    def bucket_end(self, index: int) -> pd.Timedelta:
        return from_nanos(self.width_ns * (index + 1))

    def bucket_indices(self, offsets_ns: np.ndarray) -> np.ndarray:
        """Vectorized bucket lookup for integer-nanosecond offsets.

        Closed-open buckets, except that a value exactly on the upper edge
        of the last bucket belongs to the last bucket. Range checks are
        left to the caller.
        """
        indices = np.asarray(offsets_ns, dtype=np.int64) // self.width_ns
        indices[indices == self.bucket_count] = self.bucket_count - 1
        return indices

    def index_of(self, offset: Any) -> int:
        """Bucket index for a single offset from the origin.

        Raises ``ValueError`` for offsets outside the axis.
        """
        ns = to_nanos(offset)
        if ns < 0:
            raise ValueError(f"offset {ns}ns lies before the {self.name} axis origin")
        index = int(self.bucket_indices(np.array([ns], dtype=np.int64))[0])
        if index >= self.bucket_count:
            raise ValueError(f"offset {ns}ns lies past the end of the {self.name} axis")
        return index


def build_axis(
    span: Any,
    target_bucket_count: int = DEFAULT_TARGET_BUCKETS,
    *,
    origin: Any = None,
    name: str = "value",
) -> Axis:
    """Build an axis covering ``[origin, origin + span]``.

    ``ideal = ceil(span / target)`` is snapped to a friendly width and
    ``bucket_count = span // width + 1``; the extra bucket guarantees the
    maximum value has a bucket even when the span divides evenly.
    Raises ``DegenerateAxisError`` when ``span <= 0``.
    """
    if target_bucket_count < 1:
        raise ValueError("target_bucket_count must be >= 1")
    span_ns = to_nanos(span)
    if span_ns <= 0:
        raise DegenerateAxisError(name)
    # Ceiling keeps ideal >= 1ns for spans shorter than the target.
    ideal = -(-span_ns // target_bucket_count)
    width = friendly_interval_ns(ideal)
    count = span_ns // width + 1
    axis = Axis(
        name=name,
        origin=pd.Timedelta(0) if origin is None else origin,
        bucket_width=from_nanos(width),
        bucket_count=int(count),
    )
    logger.debug(
        "Built %s axis: span=%dns ideal=%dns width=%dns buckets=%d",
        name,
        span_ns,
        ideal,
        width,
        axis.bucket_count,
    )
    return axis


def build_axes(
    df: pd.DataFrame,
    time_buckets: int = DEFAULT_TARGET_BUCKETS,
    latency_buckets: int = DEFAULT_TARGET_BUCKETS,
) -> Tuple[Axis, Axis]:
    """Return ``(time_axis, latency_axis)`` for a prepared (time-sorted) dataset.

    The time axis is built first, so a dataset that is degenerate on both
    dimensions reports the time axis.
    """
    if df.empty:
        raise EmptyInputError()
    first = pd.Timestamp(df[TIME_COL].iloc[0])
    last = pd.Timestamp(df[TIME_COL].iloc[-1])
    time_axis = build_axis(last - first, time_buckets, origin=first, name="time")

    max_latency = pd.Timedelta(df[LATENCY_COL].max())
    latency_axis = build_axis(max_latency, latency_buckets, origin=pd.Timedelta(0), name="latency")
    return time_axis, latency_axis
