from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from app.core.metrics import round_half_ceiling
from app.core.repository import MeasurementRepository

DEFAULT_WINDOW_DAYS = 30


@dataclass(frozen=True)
class TrendPoint:
    day: str
    avg_bmi: float


@dataclass(frozen=True)
class TrendSeries:
    window_days: int
    rows: List[TrendPoint] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.rows)


def build_trend(
    repository: MeasurementRepository,
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> TrendSeries:
    """
    Daily average BMI over the trailing window, oldest day first.

    An empty series means there is no data in the window yet; storage
    problems raise StorageFailure instead.
    """
    daily = repository.aggregate_daily_average(window_days=window_days, today=today)
    points = [
        TrendPoint(day=row.day.isoformat(), avg_bmi=float(round_half_ceiling(row.avg_bmi, 2)))
        for row in daily
    ]
    return TrendSeries(window_days=window_days, rows=points)
