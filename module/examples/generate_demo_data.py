#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Generate a small dummy dataset for latheat demo heatmaps.

Writes one file per supported input format under examples/data/, all
holding the same seeded synthetic measurements:

- demo_rfc3339.csv: <RFC3339 with nanos>,<latency ms>
- demo_epoch.csv:   <epoch seconds>,<latency ms>
- demo_epoch.txt:   <epoch seconds> <latency ms>
- demo.json:        [{"time": <epoch seconds>, "latency": <ms>}, ...]

Epoch formats carry whole seconds, so points within the same second
collapse onto one timestamp there.

Run from repo root with PYTHONPATH including module/:
  PYTHONPATH=module python module/examples/generate_demo_data.py
"""

import json
from pathlib import Path

import pandas as pd

from latheat.sources.synthetic import random_datapoints

# Default seed for reproducible dummy data
DEFAULT_SEED = 42
DEMO_POINTS = 5000
BASE_TIME = pd.Timestamp("2024-01-01T00:00:00Z")


def _data_dir() -> Path:
    return Path(__file__).resolve().parent / "data"


def make_demo_df(seed: int = DEFAULT_SEED, n: int = DEMO_POINTS) -> pd.DataFrame:
    """Demo points: one hour of traffic, latency around 2s."""
    return random_datapoints(n=n, seed=seed, base_time=BASE_TIME).sort_values("time")


def _latency_ms(df: pd.DataFrame) -> pd.Series:
    return (df["latency"].dt.total_seconds() * 1000).round(3)


def _epoch_seconds(df: pd.DataFrame) -> pd.Series:
    return (df["time"] - BASE_TIME).dt.total_seconds().astype(int) + int(BASE_TIME.timestamp())


def main() -> None:
    out_dir = _data_dir()
    out_dir.mkdir(parents=True, exist_ok=True)
    df = make_demo_df()
    ms = _latency_ms(df)
    epoch = _epoch_seconds(df)
    iso = df["time"].dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")

    outputs = {
        "demo_rfc3339.csv": "\n".join(f"{t},{v}" for t, v in zip(iso, ms)),
        "demo_epoch.csv": "\n".join(f"{t},{v}" for t, v in zip(epoch, ms)),
        "demo_epoch.txt": "\n".join(f"{t} {v}" for t, v in zip(epoch, ms)),
        "demo.json": json.dumps(
            [{"time": int(t), "latency": float(v)} for t, v in zip(epoch, ms)]
        ),
    }
    for name, text in outputs.items():
        path = out_dir / name
        path.write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {path} ({len(df)} rows)")


if __name__ == "__main__":
    main()
