# app/api/v1/measurements.py

from datetime import date, datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.core.errors import StorageFailure
from app.core.metrics import calculate_metrics
from app.core.repository import MeasurementRepository
from app.core.summary import summarize
from app.core.trends import build_trend
from app.core.validation import validate_submission

router = APIRouter(prefix="/measurements", tags=["measurements"])


def get_repository(db: Session = Depends(get_db)) -> MeasurementRepository:
    return MeasurementRepository(db)


# ---------- Pydantic schemas ----------

class MeasurementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    weight_kg: float
    height_cm: float
    age: int
    sex: str
    activity_level: str | None
    measurement_date: date
    bmi: float
    bmi_category: str
    bmr: int
    daily_calories: int
    created_at: datetime


class MeasurementCreatedOut(BaseModel):
    measurement: MeasurementOut


class MeasurementListOut(BaseModel):
    rows: list[MeasurementOut]


class TrendPointOut(BaseModel):
    day: str
    avg_bmi: float


class TrendOut(BaseModel):
    rows: list[TrendPointOut]
    window_days: int


class SummaryOut(BaseModel):
    latest: MeasurementOut | None
    total: int


# ---------- Endpoints ----------

@router.post("", status_code=201, response_model=MeasurementCreatedOut)
def create_measurement(
    payload: dict[str, Any] = Body(...),
    repo: MeasurementRepository = Depends(get_repository),
):
    """
    Validate a submission, derive its metrics and store it.
    MissingFieldError / InvalidValueError propagate to the 400 handlers.
    """
    data = validate_submission(payload)
    metrics = calculate_metrics(
        weight_kg=data.weight_kg,
        height_cm=data.height_cm,
        age=data.age,
        sex=data.sex,
        activity_level=data.activity_level,
    )

    try:
        entry = repo.insert(data, metrics)
    except StorageFailure:
        raise HTTPException(status_code=500, detail="Failed to create measurement")

    return {"measurement": MeasurementOut.model_validate(entry)}


@router.get("", response_model=MeasurementListOut)
def list_measurements(repo: MeasurementRepository = Depends(get_repository)):
    """
    Return every measurement, latest measurement day first.
    """
    try:
        rows = repo.list_all()
    except StorageFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch measurements")
    return {"rows": [MeasurementOut.model_validate(r) for r in rows]}


@router.get("/trends", response_model=TrendOut)
def get_trends(repo: MeasurementRepository = Depends(get_repository)):
    """
    Average BMI per day over the trend window. An empty `rows` list means
    there is nothing recorded in the window yet.
    """
    try:
        series = build_trend(repo, window_days=settings.TREND_WINDOW_DAYS)
    except StorageFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch trends")
    return {
        "rows": [{"day": p.day, "avg_bmi": p.avg_bmi} for p in series.rows],
        "window_days": series.window_days,
    }


@router.get("/summary", response_model=SummaryOut)
def get_summary(repo: MeasurementRepository = Depends(get_repository)):
    try:
        summary = summarize(repo)
    except StorageFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch summary")
    latest = MeasurementOut.model_validate(summary.latest) if summary.latest else None
    return {"latest": latest, "total": summary.total}
