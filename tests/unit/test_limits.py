"""Unit tests for time series limits and array extraction."""

from __future__ import annotations

import math

import numpy as np
import pytest

from pyhydrots.core.calendar import absolute_day, absolute_month
from pyhydrots.core.daily import DailySeries
from pyhydrots.core.exceptions import DataLimitsError, TimeSeriesError
from pyhydrots.core.interval import IntervalBase
from pyhydrots.core.limits import ArrayReturnType, LimitsFlag, TimeSeriesLimits, to_array
from pyhydrots.core.monthly import MonthlySeries
from pyhydrots.core.timeseries import DEFAULT_MISSING


@pytest.fixture
def tied_series(daily_series: DailySeries, day_date) -> DailySeries:
    """Daily series holding 5, 5, 3 on the first three days."""
    daily_series.set_data_value(day_date(2000, 1, 15), 5.0)
    daily_series.set_data_value(day_date(2000, 1, 16), 5.0)
    daily_series.set_data_value(day_date(2000, 1, 17), 3.0)
    return daily_series


class TestCompute:
    def test_max_tie_uses_first_occurrence(self, tied_series: DailySeries) -> None:
        limits = TimeSeriesLimits.compute(tied_series)
        assert limits.max_value == 5.0
        assert str(limits.max_value_date) == "2000-01-15"
        assert limits.min_value == 3.0
        assert str(limits.min_value_date) == "2000-01-17"

    def test_min_tie_uses_first_occurrence(self, daily_series: DailySeries, day_date) -> None:
        daily_series.set_data_value(day_date(2000, 2, 1), 1.0)
        daily_series.set_data_value(day_date(2000, 2, 5), 1.0)
        daily_series.set_data_value(day_date(2000, 2, 9), 4.0)
        limits = TimeSeriesLimits.compute(daily_series)
        assert str(limits.min_value_date) == "2000-02-01"

    def test_counts_and_totals(self, tied_series: DailySeries) -> None:
        limits = TimeSeriesLimits.compute(tied_series)
        assert limits.non_missing_data_count == 3
        assert limits.missing_data_count == 53
        assert limits.sum == pytest.approx(13.0)
        assert limits.mean == pytest.approx(13.0 / 3.0)
        assert limits.has_non_missing_data

    def test_detail_statistics(self, tied_series: DailySeries) -> None:
        limits = TimeSeriesLimits.compute(tied_series)
        assert limits.median == pytest.approx(5.0)
        assert limits.std_dev == pytest.approx(np.std([5.0, 5.0, 3.0], ddof=1))
        assert limits.skew == pytest.approx(-math.sqrt(3.0))

    def test_non_missing_period(self, daily_series: DailySeries, day_date) -> None:
        daily_series.set_data_value(day_date(2000, 1, 20), 1.0)
        daily_series.set_data_value(day_date(2000, 2, 10), 2.0)
        daily_series.set_data_value(day_date(2000, 3, 1), 3.0)
        limits = TimeSeriesLimits.compute(daily_series)
        assert str(limits.non_missing_data_date1) == "2000-01-20"
        assert str(limits.non_missing_data_date2) == "2000-03-01"
        assert str(limits.date1) == "2000-01-15"
        assert str(limits.date2) == "2000-03-10"
        assert limits.found

    def test_returned_dates_are_strict(self, tied_series: DailySeries) -> None:
        limits = TimeSeriesLimits.compute(tied_series)
        assert not limits.max_value_date.is_fast
        assert limits.max_value_date.year_day == 15

    def test_single_value(self, daily_series: DailySeries, day_date) -> None:
        daily_series.set_data_value(day_date(2000, 2, 2), 9.0)
        limits = TimeSeriesLimits.compute(daily_series)
        assert limits.median == 9.0
        assert math.isnan(limits.std_dev)
        assert math.isnan(limits.skew)

    def test_constant_values_have_no_skew(self, daily_series: DailySeries, day_date) -> None:
        for day in (1, 2, 3, 4):
            daily_series.set_data_value(day_date(2000, 2, day), 2.0)
        limits = TimeSeriesLimits.compute(daily_series)
        assert limits.std_dev == 0.0
        assert math.isnan(limits.skew)

    def test_subperiod(self, tied_series: DailySeries, day_date) -> None:
        limits = TimeSeriesLimits.compute(tied_series, day_date(2000, 1, 16), day_date(2000, 1, 31))
        assert limits.non_missing_data_count == 2
        assert limits.missing_data_count == 14
        assert str(limits.max_value_date) == "2000-01-16"

    def test_units_copied(self, tied_series: DailySeries) -> None:
        assert TimeSeriesLimits.compute(tied_series).data_units == "CFS"

    def test_monthly_series(self, monthly_series: MonthlySeries, month_date) -> None:
        monthly_series.set_data_value(month_date(1991, 4), 100.0)
        monthly_series.set_data_value(month_date(1994, 8), 300.0)
        limits = TimeSeriesLimits.compute(monthly_series)
        assert str(limits.min_value_date) == "1991-04"
        assert str(limits.max_value_date) == "1994-08"
        assert limits.missing_data_count == 70


class TestFlags:
    def test_no_compute_totals(self, tied_series: DailySeries) -> None:
        limits = TimeSeriesLimits.compute(tied_series, flags=LimitsFlag.NO_COMPUTE_TOTALS)
        assert limits.sum == DEFAULT_MISSING
        assert limits.mean == DEFAULT_MISSING
        assert limits.max_value == 5.0

    def test_no_compute_detail(self, tied_series: DailySeries) -> None:
        limits = TimeSeriesLimits.compute(tied_series, flags=LimitsFlag.NO_COMPUTE_DETAIL)
        assert math.isnan(limits.median)
        assert math.isnan(limits.std_dev)
        assert limits.mean == pytest.approx(13.0 / 3.0)

    def test_ignore_less_than_or_equal_zero(self, daily_series: DailySeries, day_date) -> None:
        daily_series.set_data_value(day_date(2000, 1, 15), 0.0)
        daily_series.set_data_value(day_date(2000, 1, 16), -2.0)
        daily_series.set_data_value(day_date(2000, 1, 17), 6.0)
        daily_series.set_data_value(day_date(2000, 1, 18), 2.0)
        limits = TimeSeriesLimits.compute(
            daily_series, flags=LimitsFlag.IGNORE_LESS_THAN_OR_EQUAL_ZERO
        )
        assert limits.min_value == 2.0
        assert limits.non_missing_data_count == 2
        assert limits.missing_data_count == 54
        assert str(limits.non_missing_data_date1) == "2000-01-17"
        assert limits.median == pytest.approx(4.0)

    def test_refresh_ts(self, tied_series: DailySeries) -> None:
        assert tied_series.dirty
        limits = TimeSeriesLimits.compute(tied_series, flags=LimitsFlag.REFRESH_TS)
        assert not tied_series.dirty
        assert tied_series.data_limits is not None
        assert limits.max_value == tied_series.data_limits.max_value


class TestErrors:
    def test_null_series(self) -> None:
        with pytest.raises(DataLimitsError, match="Null time series"):
            TimeSeriesLimits.compute(None)

    def test_unallocated(self) -> None:
        ts = DailySeries("A.B.C.Day")
        with pytest.raises(DataLimitsError, match="Null data") as exc_info:
            TimeSeriesLimits.compute(ts)
        assert exc_info.value.identifier == "A.B.C.Day"

    def test_all_missing(self, daily_series: DailySeries) -> None:
        with pytest.raises(DataLimitsError, match="whole POR missing"):
            TimeSeriesLimits.compute(daily_series)

    def test_irregular(self, daily_series: DailySeries) -> None:
        daily_series.set_data_interval(IntervalBase.IRREGULAR, 1)
        with pytest.raises(DataLimitsError, match="irregular"):
            TimeSeriesLimits.compute(daily_series)

    def test_is_time_series_error(self, daily_series: DailySeries) -> None:
        with pytest.raises(TimeSeriesError):
            TimeSeriesLimits.compute(daily_series)


class TestOutput:
    def test_to_dict(self, tied_series: DailySeries) -> None:
        result = TimeSeriesLimits.compute(tied_series).to_dict()
        assert result["max_value"] == 5.0
        assert result["max_value_date"] == "2000-01-15"
        assert result["non_missing_data_date2"] == "2000-01-17"
        assert result["data_units"] == "CFS"
        assert result["found"] is True

    def test_summary(self, tied_series: DailySeries) -> None:
        text = TimeSeriesLimits.compute(tied_series).summary()
        assert "Max:" in text
        assert "on 2000-01-15" in text
        assert "Number Not Missing: 3" in text
        assert "Total period: 2000-01-15 to 2000-03-10" in text
        assert str(TimeSeriesLimits.compute(tied_series)) == text

    def test_empty_limits(self) -> None:
        limits = TimeSeriesLimits()
        assert not limits.found
        assert not limits.has_non_missing_data
        limits.check_dates()
        assert not limits.found


class TestToArray:
    def test_values(self, tied_series: DailySeries, day_date) -> None:
        values = to_array(tied_series, day_date(2000, 1, 15), day_date(2000, 1, 18))
        np.testing.assert_array_equal(values, [5.0, 5.0, 3.0, DEFAULT_MISSING])

    def test_exclude_missing(self, tied_series: DailySeries) -> None:
        values = to_array(tied_series, include_missing=False)
        np.testing.assert_array_equal(values, [5.0, 5.0, 3.0])

    def test_months(self, monthly_series: MonthlySeries, month_date) -> None:
        for year in range(1990, 1996):
            monthly_series.set_data_value(month_date(year, 6), float(year))
        values = to_array(monthly_series, months=[6])
        np.testing.assert_array_equal(values, [1990.0, 1991.0, 1992.0, 1993.0, 1994.0, 1995.0])

    def test_date_keys_monthly(self, monthly_series: MonthlySeries, month_date) -> None:
        monthly_series.set_data_value(month_date(1991, 2), 1.0)
        keys = to_array(
            monthly_series,
            include_missing=False,
            return_type=ArrayReturnType.DATE_TIME,
        )
        assert keys.dtype == np.int64
        assert list(keys) == [absolute_month(2, 1991)]

    def test_date_keys_daily(self, tied_series: DailySeries) -> None:
        keys = to_array(tied_series, include_missing=False, return_type=ArrayReturnType.DATE_TIME)
        assert list(keys) == [absolute_day(2000, 1, d) for d in (15, 16, 17)]

    def test_paired_non_missing(self, daily_series: DailySeries, day_date) -> None:
        other = DailySeries("08236000.USGS.Stage.Day")
        other.date1 = daily_series.date1
        other.date2 = daily_series.date2
        other.allocate_data_space()
        for day, value in ((15, 1.0), (16, 2.0), (17, 3.0)):
            daily_series.set_data_value(day_date(2000, 1, day), value)
        other.set_data_value(day_date(2000, 1, 16), 10.0)

        matched = to_array(daily_series, paired_ts=other)
        np.testing.assert_array_equal(matched, [2.0])
        unmatched = to_array(daily_series, paired_ts=other, match_other_nonmissing=False)
        np.testing.assert_array_equal(unmatched, [1.0, 3.0])

    def test_paired_interval_mismatch(self, daily_series: DailySeries, monthly_series) -> None:
        with pytest.raises(ValueError, match="different interval"):
            to_array(daily_series, paired_ts=monthly_series)

    def test_irregular(self, daily_series: DailySeries) -> None:
        daily_series.set_data_interval(IntervalBase.IRREGULAR, 1)
        with pytest.raises(ValueError, match="Irregular"):
            to_array(daily_series)

    def test_date_keys_need_unit_multiplier(self, daily_series: DailySeries) -> None:
        daily_series.set_data_interval(IntervalBase.DAY, 2)
        with pytest.raises(ValueError, match="no multiplier"):
            to_array(daily_series, return_type=ArrayReturnType.DATE_TIME)

    def test_no_period(self) -> None:
        with pytest.raises(TimeSeriesError, match="Period is not set"):
            to_array(DailySeries("A.B.C.Day"))
