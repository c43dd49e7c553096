"""Unit tests for DailySeries."""

from __future__ import annotations

import logging

import numpy as np

from pyhydrots.core.daily import DailySeries
from pyhydrots.core.date_time import DateTime, Precision
from pyhydrots.core.interval import IntervalBase
from pyhydrots.core.timeseries import DEFAULT_MISSING


class TestCalculateDataSize:
    def test_leap_year_period(self, day_date) -> None:
        size = DailySeries.calculate_data_size(day_date(2000, 1, 15), day_date(2000, 3, 10))
        assert size == (31 - 15 + 1) + 29 + 10

    def test_single_day(self, day_date) -> None:
        assert DailySeries.calculate_data_size(day_date(2001, 2, 28), day_date(2001, 2, 28)) == 1

    def test_across_years(self, day_date) -> None:
        size = DailySeries.calculate_data_size(day_date(1999, 12, 31), day_date(2001, 1, 1))
        assert size == 1 + 366 + 1

    def test_unset_dates(self, day_date, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            assert DailySeries.calculate_data_size(None, day_date(2000, 1, 1)) == 0
        assert "not set" in caplog.text

    def test_multiplier_not_supported(self, day_date, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            size = DailySeries.calculate_data_size(day_date(2000, 1, 1), day_date(2000, 1, 31), 2)
        assert size == 0
        assert "not supported" in caplog.text


class TestAllocate:
    def test_sizes(self, daily_series: DailySeries) -> None:
        assert daily_series.is_allocated
        assert daily_series.data_size == 56
        assert daily_series.data_interval_base == IntervalBase.DAY
        assert daily_series.data_interval_mult == 1

    def test_month_buckets(self, daily_series: DailySeries) -> None:
        assert [len(bucket) for bucket in daily_series._data] == [31, 29, 31]

    def test_default_fill_is_missing(self, daily_series: DailySeries, day_date) -> None:
        assert daily_series.get_data_value(day_date(2000, 2, 29)) == DEFAULT_MISSING

    def test_zero_fill(self, day_date) -> None:
        ts = DailySeries()
        ts.date1 = day_date(2000, 1, 1)
        ts.date2 = day_date(2000, 1, 31)
        assert ts.allocate_data_space(0.0) == 0
        assert ts.get_data_value(day_date(2000, 1, 10)) == 0.0
        assert np.all(ts._data[0] == 0.0)

    def test_dates_not_set(self, caplog) -> None:
        ts = DailySeries()
        with caplog.at_level(logging.WARNING):
            assert ts.allocate_data_space() == 1
        assert not ts.is_allocated
        assert "Dates have not been set" in caplog.text

    def test_end_before_start(self, day_date, caplog) -> None:
        ts = DailySeries()
        ts.date1 = day_date(2000, 3, 1)
        ts.date2 = day_date(2000, 1, 1)
        with caplog.at_level(logging.WARNING):
            assert ts.allocate_data_space() == 1
        assert "before start date" in caplog.text

    def test_multiplier_not_supported(self, day_date, caplog) -> None:
        ts = DailySeries()
        ts.set_data_interval(IntervalBase.DAY, 7)
        ts.date1 = day_date(2000, 1, 1)
        ts.date2 = day_date(2000, 3, 1)
        with caplog.at_level(logging.WARNING):
            assert ts.allocate_data_space() == 1
        assert "Only 1Day" in caplog.text


class TestPositions:
    def test_positions(self, daily_series: DailySeries, day_date) -> None:
        assert daily_series.get_data_position(day_date(2000, 1, 15)) == (0, 14)
        assert daily_series.get_data_position(day_date(2000, 2, 29)) == (1, 28)
        assert daily_series.get_data_position(day_date(2000, 3, 10)) == (2, 9)

    def test_none_date(self, daily_series: DailySeries) -> None:
        assert daily_series.get_data_position(None) is None

    def test_values_at_period_edges(self, daily_series: DailySeries, day_date) -> None:
        daily_series.set_data_value(day_date(2000, 1, 15), 1.0)
        daily_series.set_data_value(day_date(2000, 3, 10), 2.0)
        assert daily_series.get_data_value(day_date(2000, 1, 15)) == 1.0
        assert daily_series.get_data_value(day_date(2000, 3, 10)) == 2.0


class TestOutOfPeriod:
    def test_write_before_start_is_noop(self, daily_series: DailySeries, day_date) -> None:
        before = [bucket.copy() for bucket in daily_series._data]
        daily_series.set_data_value(day_date(2000, 1, 14), 5.0)
        daily_series.set_data_value(day_date(2000, 3, 11), 5.0)
        daily_series.set_data_value(day_date(1999, 6, 1), 5.0)
        assert not daily_series.dirty
        for old, new in zip(before, daily_series._data):
            np.testing.assert_array_equal(old, new)

    def test_read_outside_period_is_missing(self, daily_series: DailySeries, day_date) -> None:
        assert daily_series.get_data_value(day_date(2000, 1, 1)) == DEFAULT_MISSING
        assert daily_series.get_data_value(day_date(2000, 4, 1)) == DEFAULT_MISSING

    def test_last_day_with_hour_precision(self, daily_series: DailySeries) -> None:
        late = DateTime.from_parts(2000, 3, 10, 23, precision=Precision.HOUR)
        daily_series.set_data_value(late, 8.0)
        assert daily_series.dirty
        assert daily_series.get_data_value(late) == 8.0


class TestAllocatedPeriod:
    def test_allocated_bounds(self, daily_series: DailySeries) -> None:
        assert str(daily_series.allocated_date1) == "2000-01-15"
        assert str(daily_series.allocated_date2) == "2000-03-10"

    def test_allocated_bounds_are_copies(self, daily_series: DailySeries) -> None:
        daily_series.allocated_date1.add_day(5)
        assert str(daily_series.allocated_date1) == "2000-01-15"

    def test_extended_end_write_is_noop(self, daily_series: DailySeries, day_date) -> None:
        daily_series.date2 = day_date(2000, 5, 31)
        daily_series.set_data_value(day_date(2000, 5, 1), 5.0)
        assert not daily_series.dirty
        assert daily_series.get_data_value(day_date(2000, 5, 1)) == DEFAULT_MISSING
        assert str(daily_series.allocated_date2) == "2000-03-10"

    def test_shifted_start_keeps_positions(self, daily_series: DailySeries, day_date) -> None:
        daily_series.set_data_value(day_date(2000, 2, 10), 4.0)
        daily_series.date1 = day_date(2000, 2, 1)
        assert daily_series.get_data_value(day_date(2000, 2, 10)) == 4.0
        assert daily_series.get_data_value(day_date(2000, 1, 20)) == DEFAULT_MISSING

    def test_reallocate_follows_new_period(self, daily_series: DailySeries, day_date) -> None:
        daily_series.date2 = day_date(2000, 5, 31)
        daily_series.allocate_data_space()
        daily_series.set_data_value(day_date(2000, 5, 1), 5.0)
        assert daily_series.get_data_value(day_date(2000, 5, 1)) == 5.0
        assert str(daily_series.allocated_date2) == "2000-05-31"
