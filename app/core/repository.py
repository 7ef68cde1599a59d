"""
SQLAlchemy-backed storage for measurements.

The repository never opens its own session; callers hand one in, and the
session lifecycle stays with whoever created it (request dependency, script,
test fixture).
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from app.core.errors import StorageFailure
from app.core.metrics import HealthMetrics
from app.core.validation import MeasurementInput, utc_today
from app.models.measurement import Measurement

logger = logging.getLogger(__name__)

_RETRYABLE_ERRORS = (OperationalError, DisconnectionError, PoolTimeoutError)


@dataclass(frozen=True)
class DailyBmi:
    day: date
    avg_bmi: float


def _storage_failure(operation: str, exc: SQLAlchemyError) -> StorageFailure:
    logger.exception("Measurement storage failed during %s", operation)
    return StorageFailure(operation, retryable=isinstance(exc, _RETRYABLE_ERRORS))


class MeasurementRepository:
    def __init__(self, db: Session):
        self.db = db

    def insert(self, data: MeasurementInput, metrics: HealthMetrics) -> Measurement:
        entry = Measurement(
            weight_kg=data.weight_kg,
            height_cm=data.height_cm,
            age=data.age,
            sex=data.sex,
            activity_level=data.activity_level,
            measurement_date=data.measurement_date,
            bmi=metrics.bmi,
            bmi_category=metrics.bmi_category,
            bmr=metrics.bmr,
            daily_calories=metrics.daily_calories,
        )
        try:
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise _storage_failure("insert", exc) from exc

        logger.info(
            "Stored measurement id=%s date=%s bmi=%s",
            entry.id,
            entry.measurement_date.isoformat(),
            entry.bmi,
        )
        return entry

    def _ordered(self):
        return self.db.query(Measurement).order_by(
            Measurement.measurement_date.desc(),
            Measurement.created_at.desc(),
            Measurement.id.desc(),
        )

    def list_all(self) -> List[Measurement]:
        """All measurements, most recent day first, newest insert first within a day."""
        try:
            return self._ordered().all()
        except SQLAlchemyError as exc:
            raise _storage_failure("list", exc) from exc

    def latest(self) -> Optional[Measurement]:
        try:
            return self._ordered().first()
        except SQLAlchemyError as exc:
            raise _storage_failure("latest", exc) from exc

    def count(self) -> int:
        try:
            return self.db.query(func.count(Measurement.id)).scalar() or 0
        except SQLAlchemyError as exc:
            raise _storage_failure("count", exc) from exc

    def aggregate_daily_average(self, window_days: int = 30, today: Optional[date] = None) -> List[DailyBmi]:
        """
        Average BMI per measurement day over the last `window_days` days
        (inclusive of the cutoff day), oldest day first.

        Days without measurements produce no row.
        """
        cutoff = (today or utc_today()) - timedelta(days=window_days)
        try:
            rows = (
                self.db.query(
                    Measurement.measurement_date.label("day"),
                    func.avg(Measurement.bmi).label("avg_bmi"),
                )
                .filter(Measurement.measurement_date >= cutoff)
                .group_by(Measurement.measurement_date)
                .order_by(Measurement.measurement_date)
                .all()
            )
        except SQLAlchemyError as exc:
            raise _storage_failure("aggregate", exc) from exc

        return [DailyBmi(day=row.day, avg_bmi=float(row.avg_bmi)) for row in rows]
