#!/usr/bin/env python3

"""Tests for grid aggregation."""

import unittest

import numpy as np
import pandas as pd
import pytest

from conftest import BASE_TIME, make_points
from latheat.core.axes import build_axes
from latheat.core.dataset import prepare_dataset
from latheat.core.errors import EmptyInputError, InvalidDatapointError
from latheat.core.grid import aggregate, merge_grids
from latheat.sources.synthetic import random_datapoints


def _pipeline(points):
    df = prepare_dataset(points)
    time_axis, latency_axis = build_axes(df)
    return df, time_axis, latency_axis


class TestAggregate(unittest.TestCase):
    """Binning datapoints into the count matrix."""

    def setUp(self):
        self.df, self.time_axis, self.latency_axis = _pipeline(
            random_datapoints(n=2000, seed=1, base_time=BASE_TIME)
        )
        self.grid = aggregate(self.df, self.time_axis, self.latency_axis)

    def test_shape(self):
        self.assertEqual(
            self.grid.shape,
            (self.time_axis.bucket_count, self.latency_axis.bucket_count),
        )

    def test_conservation(self):
        self.assertEqual(int(self.grid.counts.sum()), 2000)
        self.assertEqual(self.grid.total, 2000)

    def test_max_count(self):
        self.assertEqual(self.grid.max_count, int(self.grid.counts.max()))
        self.assertGreaterEqual(self.grid.max_count, 1)

    def test_extremes_land_in_last_buckets(self):
        # The latest point and the largest latency sit on the upper edge.
        self.assertGreater(int(self.grid.counts[-1, :].sum()), 0)
        self.assertGreater(int(self.grid.counts[:, -1].sum()), 0)
        self.assertGreater(int(self.grid.counts[0, :].sum()), 0)

    def test_order_independent(self):
        shuffled = self.df.sample(frac=1.0, random_state=3).reset_index(drop=True)
        other = aggregate(shuffled, self.time_axis, self.latency_axis)
        np.testing.assert_array_equal(other.counts, self.grid.counts)
        self.assertEqual(other.max_count, self.grid.max_count)

    def test_chunked_matches_single_pass(self):
        for chunk in (1, 7, 500, 1999, 5000):
            chunked = aggregate(self.df, self.time_axis, self.latency_axis, chunk_size=chunk)
            np.testing.assert_array_equal(chunked.counts, self.grid.counts)
            self.assertEqual(chunked.max_count, self.grid.max_count)

    def test_read_only(self):
        self.assertFalse(self.grid.counts.flags.writeable)
        with pytest.raises(ValueError):
            self.grid.counts[0, 0] = 99

    def test_nonzero_cells(self):
        cells = list(self.grid.nonzero_cells())
        self.assertEqual(sum(c for _, _, c in cells), 2000)
        self.assertTrue(all(c > 0 for _, _, c in cells))
        self.assertEqual(cells, sorted(cells))

    def test_bad_chunk_size(self):
        with pytest.raises(ValueError):
            aggregate(self.df, self.time_axis, self.latency_axis, chunk_size=0)


class TestAggregateRejects(unittest.TestCase):
    """Points that cannot be placed on the grid."""

    def setUp(self):
        self.df, self.time_axis, self.latency_axis = _pipeline(
            make_points([(0, 10), (60, 20), (120, 30)])
        )

    def test_empty(self):
        with pytest.raises(EmptyInputError):
            aggregate(self.df.iloc[0:0], self.time_axis, self.latency_axis)

    def test_point_before_origin(self):
        early = pd.DataFrame(
            {
                "time": [BASE_TIME, BASE_TIME - pd.Timedelta(seconds=5)],
                "latency": [pd.Timedelta(milliseconds=10)] * 2,
            }
        )
        with pytest.raises(InvalidDatapointError) as info:
            aggregate(early, self.time_axis, self.latency_axis)
        self.assertEqual(info.value.index, 1)

    def test_negative_latency(self):
        bad = pd.DataFrame(
            {
                "time": [BASE_TIME, BASE_TIME, BASE_TIME],
                "latency": [pd.Timedelta(milliseconds=ms) for ms in (1, 2, -3)],
            }
        )
        with pytest.raises(InvalidDatapointError) as info:
            aggregate(bad, self.time_axis, self.latency_axis, chunk_size=2)
        self.assertEqual(info.value.index, 2)


class TestMergeGrids(unittest.TestCase):
    """Cell-wise reduction of partial grids."""

    def test_shape_mismatch(self):
        df, t, lat = _pipeline(make_points([(0, 10), (60, 20)]))
        a = aggregate(df, t, lat)
        df2, t2, lat2 = _pipeline(make_points([(0, 10), (6000, 20000)]))
        b = aggregate(df2, t2, lat2)
        with pytest.raises(ValueError):
            merge_grids([a, b])

    def test_empty(self):
        with pytest.raises(ValueError):
            merge_grids([])

    def test_sum(self):
        df, t, lat = _pipeline(make_points([(0, 10), (60, 20), (60, 20)]))
        a = aggregate(df, t, lat)
        merged = merge_grids([a, a])
        self.assertEqual(merged.total, 6)
        self.assertEqual(merged.max_count, 2 * a.max_count)
