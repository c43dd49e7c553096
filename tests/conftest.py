"""Pytest configuration and fixtures for pyhydrots tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from pyhydrots.core.daily import DailySeries
from pyhydrots.core.date_time import DateTime, Precision
from pyhydrots.core.monthly import MonthlySeries


@pytest.fixture
def day_date():
    """Factory for DAY precision dates."""

    def make(year: int, month: int, day: int) -> DateTime:
        return DateTime.from_parts(year, month, day, precision=Precision.DAY)

    return make


@pytest.fixture
def month_date():
    """Factory for MONTH precision dates."""

    def make(year: int, month: int) -> DateTime:
        return DateTime.from_parts(year, month, precision=Precision.MONTH)

    return make


@pytest.fixture
def daily_series(day_date) -> DailySeries:
    """Allocated daily series from 2000-01-15 to 2000-03-10."""
    ts = DailySeries("08236000.USGS.Streamflow.Day")
    ts.data_units = "CFS"
    ts.date1 = day_date(2000, 1, 15)
    ts.date2 = day_date(2000, 3, 10)
    assert ts.allocate_data_space() == 0
    return ts


@pytest.fixture
def monthly_series(month_date) -> MonthlySeries:
    """Allocated monthly series from 1990-01 to 1995-12."""
    ts = MonthlySeries("RIOGRANDE.StateMod.Diversion.Month")
    ts.data_units = "ACFT"
    ts.date1 = month_date(1990, 1)
    ts.date2 = month_date(1995, 12)
    assert ts.allocate_data_space() == 0
    return ts


@pytest.fixture
def sample_property_file(tmp_path: Path) -> Path:
    """Property file exercising comments, sections, quotes and continuations."""
    path = tmp_path / "app.cfg"
    path.write_text(
        "# Application settings\n"
        "ProgramName = StateView\n"
        "ProgramVersion = \"1.2.3\"\n"
        "/* block comment\n"
        "   Ignored = yes\n"
        "*/\n"
        "WorkingDir = /data/run\n"
        "\n"
        "[Plot]\n"
        "Title = 'Flow at gage'\n"
        "Legend = first part \\\n"
        "second part\n"
        "this line has no separator\n"
    )
    return path
