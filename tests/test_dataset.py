#!/usr/bin/env python3

"""Tests for dataset preparation."""

import unittest

import pandas as pd
import pytest

from conftest import BASE_TIME, make_points
from latheat.core.dataset import Datapoint, iter_datapoints, prepare_dataset
from latheat.core.errors import EmptyInputError, InvalidDatapointError


class TestPrepareDataset(unittest.TestCase):
    """Validation and sorting of input datapoints."""

    def test_sorts_by_time(self):
        df = prepare_dataset(make_points([(30, 5), (10, 7), (20, 9)]))
        self.assertEqual(
            list(df["time"]),
            [BASE_TIME + pd.Timedelta(seconds=s) for s in (10, 20, 30)],
        )
        self.assertEqual(
            list(df["latency"]),
            [pd.Timedelta(milliseconds=ms) for ms in (7, 9, 5)],
        )

    def test_column_dtypes(self):
        df = prepare_dataset(make_points([(0, 1)]))
        self.assertEqual(str(df["time"].dtype), "datetime64[ns]")
        self.assertEqual(str(df["latency"].dtype), "timedelta64[ns]")

    def test_accepts_pairs(self):
        df = prepare_dataset([(BASE_TIME, pd.Timedelta(seconds=1))])
        self.assertEqual(len(df), 1)

    def test_dataframe_input_not_mutated(self):
        src = pd.DataFrame(
            {
                "time": [BASE_TIME + pd.Timedelta(seconds=2), BASE_TIME],
                "latency": [pd.Timedelta(seconds=1), pd.Timedelta(seconds=2)],
                "extra": ["a", "b"],
            }
        )
        before = src.copy()
        df = prepare_dataset(src)
        pd.testing.assert_frame_equal(src, before)
        self.assertEqual(list(df.columns), ["time", "latency"])
        self.assertEqual(df["time"].iloc[0], BASE_TIME)

    def test_timezone_aware_converted_to_utc(self):
        t = pd.Timestamp("2024-01-01T01:00:00+01:00")
        df = prepare_dataset([Datapoint(time=t, latency=pd.Timedelta(seconds=1))])
        self.assertEqual(df["time"].iloc[0], pd.Timestamp("2024-01-01T00:00:00"))

    def test_stable_for_equal_times(self):
        df = prepare_dataset(make_points([(0, 3), (0, 1), (0, 2)]))
        self.assertEqual(
            list(df["latency"]),
            [pd.Timedelta(milliseconds=ms) for ms in (3, 1, 2)],
        )

    def test_empty_rejected(self):
        with pytest.raises(EmptyInputError):
            prepare_dataset([])
        with pytest.raises(EmptyInputError):
            prepare_dataset(pd.DataFrame({"time": [], "latency": []}))

    def test_negative_latency_rejected(self):
        points = make_points([(0, 5), (1, -2), (2, 3)])
        with pytest.raises(InvalidDatapointError) as info:
            prepare_dataset(points)
        self.assertEqual(info.value.index, 1)
        self.assertIn("negative latency", str(info.value))

    def test_missing_values_rejected(self):
        with pytest.raises(InvalidDatapointError) as info:
            prepare_dataset([(BASE_TIME, pd.Timedelta(seconds=1)), (None, pd.Timedelta(seconds=1))])
        self.assertEqual(info.value.index, 1)
        with pytest.raises(InvalidDatapointError):
            prepare_dataset([(BASE_TIME, None)])

    def test_missing_columns(self):
        with pytest.raises(ValueError):
            prepare_dataset(pd.DataFrame({"time": [BASE_TIME]}))

    def test_iter_datapoints(self):
        points = make_points([(5, 2), (1, 4)])
        back = list(iter_datapoints(prepare_dataset(points)))
        self.assertEqual(back, [points[1], points[0]])
