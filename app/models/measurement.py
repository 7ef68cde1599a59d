# app/models/measurement.py

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, Integer, String

from app.core.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Measurement(Base):
    """
    One submitted body measurement plus the metrics derived from it.
    Written once at submission time, never updated.
    """

    __tablename__ = "measurements"

    id = Column(Integer, primary_key=True, index=True)

    # Inputs
    weight_kg = Column(Float, nullable=False)
    height_cm = Column(Float, nullable=False)
    age = Column(Integer, nullable=False)
    sex = Column(String(8), nullable=False)            # male / female
    activity_level = Column(String(32))                # as submitted, may be unknown

    # Calendar day of the measurement (timezone-naive)
    measurement_date = Column(Date, nullable=False, index=True)

    # Derived
    bmi = Column(Float, nullable=False)
    bmi_category = Column(String(16), nullable=False)
    bmr = Column(Integer, nullable=False)
    daily_calories = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
