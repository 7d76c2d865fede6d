"""Grid: 2-D count matrix indexed by (time bucket, latency bucket).

Built once per render by a single vectorized pass over the dataset, then
frozen (the numpy array is made read-only). Binning is order-independent,
so the dataset can also be aggregated in chunks whose partial grids are
summed with ``merge_grids``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

import numpy as np
import pandas as pd

from .axes import Axis
from .dataset import LATENCY_COL, TIME_COL
from .errors import EmptyInputError, InternalInvariantError, InvalidDatapointError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Grid:
    """Counts of shape ``(time_axis.bucket_count, latency_axis.bucket_count)``."""

    counts: np.ndarray
    max_count: int

    @property
    def shape(self) -> Tuple[int, int]:
        return self.counts.shape  # type: ignore[return-value]

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    def nonzero_cells(self) -> Iterator[Tuple[int, int, int]]:
        """Yield ``(time_index, latency_index, count)`` for occupied cells, row-major."""
        ti, li = np.nonzero(self.counts)
        for i, j in zip(ti.tolist(), li.tolist()):
            yield i, j, int(self.counts[i, j])


def _freeze(counts: np.ndarray) -> Grid:
    counts.setflags(write=False)
    max_count = int(counts.max()) if counts.size else 0
    return Grid(counts=counts, max_count=max_count)


def _bin_indices(offsets: np.ndarray, axis: Axis, row_offset: int) -> np.ndarray:
    """Bucket indices for one frame slice; negative offsets name their row."""
    negative = np.flatnonzero(offsets < 0)
    if negative.size:
        pos = int(negative[0])
        raise InvalidDatapointError(
            row_offset + pos,
            f"{axis.name} offset {int(offsets[pos])}ns is before the axis origin",
        )
    indices = axis.bucket_indices(offsets)
    if indices.size and int(indices.max()) >= axis.bucket_count:
        raise InternalInvariantError(
            f"{axis.name} bucket index {int(indices.max())} out of range "
            f"for {axis.bucket_count} buckets"
        )
    return indices


def _aggregate_frame(
    df: pd.DataFrame, time_axis: Axis, latency_axis: Axis, row_offset: int = 0
) -> np.ndarray:
    counts = np.zeros((time_axis.bucket_count, latency_axis.bucket_count), dtype=np.int64)
    origin_ns = pd.Timestamp(time_axis.origin).value
    time_offsets = df[TIME_COL].to_numpy(dtype="datetime64[ns]").astype(np.int64) - origin_ns
    latency_offsets = df[LATENCY_COL].to_numpy(dtype="timedelta64[ns]").astype(np.int64)

    ti = _bin_indices(time_offsets, time_axis, row_offset)
    li = _bin_indices(latency_offsets, latency_axis, row_offset)
    np.add.at(counts, (ti, li), 1)
    return counts


def aggregate(
    df: pd.DataFrame,
    time_axis: Axis,
    latency_axis: Axis,
    chunk_size: int | None = None,
) -> Grid:
    """Bin every datapoint of *df* into a new ``Grid``.

    With ``chunk_size`` the frame is binned in slices whose partial grids
    are merged; the result is identical to a single pass.
    """
    if df.empty:
        raise EmptyInputError()
    if chunk_size is not None and chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    if chunk_size is None or chunk_size >= len(df):
        grid = _freeze(_aggregate_frame(df, time_axis, latency_axis))
    else:
        partials = [
            _freeze(_aggregate_frame(df.iloc[start:start + chunk_size], time_axis, latency_axis, start))
            for start in range(0, len(df), chunk_size)
        ]
        grid = merge_grids(partials)

    if grid.total != len(df):
        raise InternalInvariantError(f"grid holds {grid.total} points, dataset has {len(df)}")
    logger.debug("Aggregated %d points into %s grid, max count %d", len(df), grid.shape, grid.max_count)
    return grid


def merge_grids(grids: Iterable[Grid]) -> Grid:
    """Sum partial grids of identical shape cell-wise."""
    total: np.ndarray | None = None
    for g in grids:
        if total is None:
            total = np.array(g.counts, dtype=np.int64, copy=True)
        elif g.counts.shape != total.shape:
            raise ValueError(f"cannot merge grids of shape {g.counts.shape} and {total.shape}")
        else:
            total += g.counts
    if total is None:
        raise ValueError("merge_grids needs at least one grid")
    return _freeze(total)
