#!/usr/bin/env python3

"""Tests for axis construction."""

import unittest

import numpy as np
import pandas as pd
import pytest

from conftest import BASE_TIME, make_points
from latheat.core.axes import Axis, build_axes, build_axis
from latheat.core.dataset import prepare_dataset
from latheat.core.errors import DegenerateAxisError


class TestBuildAxis(unittest.TestCase):
    """Bucket width and count derivation."""

    def test_one_hour_span(self):
        axis = build_axis(pd.Timedelta(hours=1), 100, name="time")
        self.assertEqual(axis.bucket_width, pd.Timedelta(seconds=45))
        # 3600 // 45 + 1
        self.assertEqual(axis.bucket_count, 81)
        self.assertEqual(axis.origin, pd.Timedelta(0))

    def test_two_second_span(self):
        axis = build_axis(pd.Timedelta(seconds=2), 100, name="latency")
        self.assertEqual(axis.bucket_width, pd.Timedelta(milliseconds=15))
        self.assertEqual(axis.bucket_count, 134)

    def test_covers_span(self):
        for seconds in (0.003, 1.7, 59, 61, 3599, 86400):
            span = pd.Timedelta(seconds=seconds)
            axis = build_axis(span, 100)
            self.assertGreater(axis.extent, span)

    def test_custom_target(self):
        axis = build_axis(pd.Timedelta(hours=1), 10)
        # ideal 6m -> 5m entry -> step 7.5m -> 0.8 steps -> 7.5m
        self.assertEqual(axis.bucket_width, pd.Timedelta(minutes=7.5))
        self.assertEqual(axis.bucket_count, 9)

    def test_zero_span_is_degenerate(self):
        with pytest.raises(DegenerateAxisError) as info:
            build_axis(pd.Timedelta(0), 100, name="time")
        self.assertEqual(info.value.axis, "time")
        self.assertIn("insufficient value range", str(info.value))

    def test_negative_span_is_degenerate(self):
        with pytest.raises(DegenerateAxisError):
            build_axis(pd.Timedelta(seconds=-1), 100)

    def test_span_smaller_than_target(self):
        # ceil(50ns / 100) = 1ns, below every table entry so it stays 1ns
        axis = build_axis(pd.Timedelta(nanoseconds=50), 100, name="latency")
        self.assertEqual(axis.bucket_width, pd.Timedelta(nanoseconds=1))
        self.assertEqual(axis.bucket_count, 51)

    def test_uneven_span_rounds_ideal_up(self):
        # ceil(150ns / 100) = 2ns
        axis = build_axis(pd.Timedelta(nanoseconds=150), 100)
        self.assertEqual(axis.bucket_width, pd.Timedelta(nanoseconds=2))
        self.assertEqual(axis.bucket_count, 76)

    def test_bad_target(self):
        with pytest.raises(ValueError):
            build_axis(pd.Timedelta(seconds=1), 0)


class TestAxis(unittest.TestCase):
    """Bucket lookup on a built axis."""

    def setUp(self):
        self.axis = build_axis(pd.Timedelta(hours=1), 100, name="time")

    def test_index_of(self):
        self.assertEqual(self.axis.index_of(pd.Timedelta(0)), 0)
        self.assertEqual(self.axis.index_of(pd.Timedelta(seconds=44)), 0)
        self.assertEqual(self.axis.index_of(pd.Timedelta(seconds=45)), 1)
        self.assertEqual(self.axis.index_of(pd.Timedelta(hours=1)), 80)

    def test_upper_edge_lands_in_last_bucket(self):
        self.assertEqual(self.axis.index_of(self.axis.extent), self.axis.bucket_count - 1)

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            self.axis.index_of(pd.Timedelta(seconds=-1))
        with pytest.raises(ValueError):
            self.axis.index_of(self.axis.extent + self.axis.bucket_width)

    def test_bucket_indices_match_index_of(self):
        offsets = np.array([0, 44, 45, 90, 3600, 3645], dtype=np.int64) * 10**9
        indices = self.axis.bucket_indices(offsets)
        self.assertEqual(indices.tolist(), [0, 0, 1, 2, 80, 80])
        self.assertEqual(
            indices.tolist(),
            [self.axis.index_of(pd.Timedelta(int(ns), unit="ns")) for ns in offsets],
        )

    def test_bucket_bounds(self):
        self.assertEqual(self.axis.bucket_start(2), pd.Timedelta(seconds=90))
        self.assertEqual(self.axis.bucket_end(2), pd.Timedelta(seconds=135))

    def test_zero_width_rejected(self):
        with pytest.raises(DegenerateAxisError):
            Axis(name="x", origin=pd.Timedelta(0), bucket_width=pd.Timedelta(0), bucket_count=3)


class TestBuildAxes(unittest.TestCase):
    """Axes derived from a prepared dataset."""

    def test_origins(self):
        df = prepare_dataset(make_points([(100, 50), (40, 2000), (3640, 10)]))
        time_axis, latency_axis = build_axes(df)
        self.assertEqual(time_axis.origin, BASE_TIME + pd.Timedelta(seconds=40))
        self.assertEqual(time_axis.bucket_width, pd.Timedelta(seconds=45))
        self.assertEqual(latency_axis.origin, pd.Timedelta(0))
        self.assertEqual(latency_axis.bucket_width, pd.Timedelta(milliseconds=15))

    def test_identical_timestamps(self):
        df = prepare_dataset(make_points([(0, 1000), (0, 3600000)]))
        with pytest.raises(DegenerateAxisError) as info:
            build_axes(df)
        self.assertEqual(info.value.axis, "time")

    def test_all_zero_latency(self):
        df = prepare_dataset(make_points([(0, 0), (60, 0), (120, 0)]))
        with pytest.raises(DegenerateAxisError) as info:
            build_axes(df)
        self.assertEqual(info.value.axis, "latency")

    def test_identical_nonzero_latency_is_fine(self):
        df = prepare_dataset(make_points([(0, 2000), (60, 2000)]))
        _, latency_axis = build_axes(df)
        self.assertEqual(latency_axis.bucket_count, 134)

    def test_nanosecond_latencies(self):
        df = prepare_dataset([
            (BASE_TIME, pd.Timedelta(nanoseconds=50)),
            (BASE_TIME + pd.Timedelta(seconds=10), pd.Timedelta(nanoseconds=80)),
        ])
        _, latency_axis = build_axes(df)
        self.assertEqual(latency_axis.bucket_width, pd.Timedelta(nanoseconds=1))
        self.assertEqual(latency_axis.bucket_count, 81)

    def test_time_reported_first(self):
        df = prepare_dataset(make_points([(0, 0), (0, 0)]))
        with pytest.raises(DegenerateAxisError) as info:
            build_axes(df)
        self.assertEqual(info.value.axis, "time")
