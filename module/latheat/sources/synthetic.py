"""Seeded synthetic latency data.

Times are uniform over ``span`` after ``base_time``; latencies are
normally distributed around ``mean`` and clamped at zero. The generator
is seeded per call so repeated runs give identical data.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from latheat.core.dataset import LATENCY_COL, TIME_COL
from latheat.core.utils import to_nanos

DEFAULT_POINTS = 100_000


def random_datapoints(
    n: int = DEFAULT_POINTS,
    seed: int | None = None,
    base_time: Any = None,
    span: Any = pd.Timedelta(hours=1),
    mean: Any = pd.Timedelta(seconds=2),
    stddev: Any = pd.Timedelta(seconds=1),
) -> pd.DataFrame:
    if n < 0:
        raise ValueError("n must be >= 0")
    rng = np.random.default_rng(seed)
    base = pd.Timestamp.now().floor("s") if base_time is None else pd.Timestamp(base_time)

    offsets = (rng.random(n) * to_nanos(span)).astype(np.int64)
    latency = to_nanos(mean) + rng.standard_normal(n) * to_nanos(stddev)
    latency = np.clip(latency, 0, None).astype(np.int64)

    return pd.DataFrame(
        {
            TIME_COL: base + pd.to_timedelta(offsets, unit="ns"),
            LATENCY_COL: pd.to_timedelta(latency, unit="ns"),
        }
    )
