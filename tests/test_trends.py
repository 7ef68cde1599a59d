"""
Tests for the BMI trend series and the measurement summary.
"""
from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from app.core.errors import StorageFailure
from app.core.repository import DailyBmi
from app.core.summary import summarize
from app.core.trends import TrendPoint, build_trend

TODAY = date(2026, 10, 19)


class TestBuildTrend:
    def test_shapes_rows(self):
        repo = MagicMock()
        repo.aggregate_daily_average.return_value = [
            DailyBmi(day=TODAY - timedelta(days=1), avg_bmi=22.95),
            DailyBmi(day=TODAY, avg_bmi=23.333333333),
        ]

        series = build_trend(repo, today=TODAY)

        repo.aggregate_daily_average.assert_called_once_with(window_days=30, today=TODAY)
        assert series.window_days == 30
        assert series.has_data
        assert series.rows == [
            TrendPoint(day="2026-10-18", avg_bmi=22.95),
            TrendPoint(day="2026-10-19", avg_bmi=23.33),
        ]

    def test_empty_window_is_not_an_error(self):
        repo = MagicMock()
        repo.aggregate_daily_average.return_value = []

        series = build_trend(repo, today=TODAY)

        assert series.rows == []
        assert series.has_data is False

    def test_custom_window(self):
        repo = MagicMock()
        repo.aggregate_daily_average.return_value = []

        assert build_trend(repo, window_days=7, today=TODAY).window_days == 7
        repo.aggregate_daily_average.assert_called_once_with(window_days=7, today=TODAY)

    def test_storage_failure_propagates(self):
        repo = MagicMock()
        repo.aggregate_daily_average.side_effect = StorageFailure("aggregate")

        with pytest.raises(StorageFailure):
            build_trend(repo, today=TODAY)

    def test_against_database(self, repo, store):
        store(measurement_date=TODAY - timedelta(days=3), weight_kg=70.0)
        store(measurement_date=TODAY - timedelta(days=3), weight_kg=71.0)
        store(measurement_date=TODAY - timedelta(days=40), weight_kg=90.0)

        series = build_trend(repo, today=TODAY)

        # 22.9 and 23.2 averaged
        assert series.rows == [TrendPoint(day="2026-10-16", avg_bmi=23.05)]


class TestSummary:
    def test_empty_store(self, repo):
        summary = summarize(repo)
        assert summary.latest is None
        assert summary.total == 0

    def test_latest_and_total(self, repo, store):
        store(measurement_date=TODAY - timedelta(days=2))
        newest = store(measurement_date=TODAY, weight_kg=68.0)

        summary = summarize(repo)
        assert summary.total == 2
        assert summary.latest.id == newest.id
        assert summary.latest.weight_kg == 68.0
