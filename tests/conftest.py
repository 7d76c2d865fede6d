import os
import sys

import pandas as pd
import pytest

# Source root (module/) so tests run without installing the package
SRC_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "module"))
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

BASE_TIME = pd.Timestamp("2024-01-01T00:00:00")


@pytest.fixture
def base_time():
    return BASE_TIME


def make_points(pairs):
    """[(seconds after BASE_TIME, latency ms), ...] -> list of Datapoint."""
    from latheat.core.dataset import Datapoint

    return [
        Datapoint(
            time=BASE_TIME + pd.Timedelta(seconds=s),
            latency=pd.Timedelta(milliseconds=ms),
        )
        for s, ms in pairs
    ]
