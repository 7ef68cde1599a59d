"""
Validation and normalization of raw measurement submissions.

The payload is the decoded JSON body as sent by clients (camelCase keys).
Presence is checked by hand so a missing field can be told apart from a bad
one; every other rule lives on the MeasurementInput model.
"""
from datetime import date, datetime, timezone
from typing import Any, Literal, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from app.core.errors import InvalidValueError, MissingFieldError

REQUIRED_FIELDS = ("weightKg", "heightCm", "age", "sex")

# Plausibility range for a human; also keeps BMI/BMR finite
MIN_WEIGHT_KG = 1
MAX_WEIGHT_KG = 500
MIN_HEIGHT_CM = 30
MAX_HEIGHT_CM = 300
MIN_AGE = 1
MAX_AGE = 150

_BOUND_ERRORS = ("greater_than", "greater_than_equal", "less_than", "less_than_equal")

_DATE = TypeAdapter(date)
_DATETIME = TypeAdapter(datetime)


class MeasurementInput(BaseModel):
    """Normalized submission, ready for the metrics calculator."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    weight_kg: float = Field(
        validation_alias="weightKg",
        strict=True,
        allow_inf_nan=False,
        ge=MIN_WEIGHT_KG,
        le=MAX_WEIGHT_KG,
    )
    height_cm: float = Field(
        validation_alias="heightCm",
        strict=True,
        allow_inf_nan=False,
        ge=MIN_HEIGHT_CM,
        le=MAX_HEIGHT_CM,
    )
    age: int = Field(strict=True, ge=MIN_AGE, le=MAX_AGE)
    sex: Literal["male", "female"]
    # stored as submitted; unknown levels get the default multiplier
    activity_level: Optional[str] = Field(default=None, validation_alias="activityLevel")
    measurement_date: date = Field(validation_alias="measurementDate")

    @field_validator("weight_kg", "height_cm", "age", mode="before")
    @classmethod
    def reject_booleans(cls, value):
        if isinstance(value, bool):
            raise ValueError("Input should be a number")
        return value

    @field_validator("weight_kg", "height_cm")
    @classmethod
    def as_float(cls, value):
        return float(value)

    @field_validator("sex", mode="before")
    @classmethod
    def normalize_sex(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_invalid_value(error: dict) -> InvalidValueError:
    field = str(error["loc"][0]) if error["loc"] else None
    value = error.get("input")

    if error["type"] in _BOUND_ERRORS and isinstance(value, (int, float)) and not value > 0:
        return InvalidValueError(field=field)
    if field == "sex":
        return InvalidValueError("Invalid values: sex must be 'male' or 'female'", field=field)
    return InvalidValueError(f"Invalid values: {field}: {error['msg']}", field=field)


def _normalize_activity(payload: Mapping[str, Any]) -> Optional[str]:
    activity = payload.get("activity")
    if activity is None:
        activity = payload.get("activityLevel")
    if activity is None or activity == "":
        return None
    return str(activity)


def _parse_date(value: Any) -> date:
    """Accept YYYY-MM-DD, or a full ISO datetime reduced to its date."""
    if isinstance(value, str):
        try:
            return _DATE.validate_python(value)
        except ValidationError:
            pass
        if "T" in value or " " in value:
            try:
                return _DATETIME.validate_python(value).date()
            except ValidationError:
                pass
    raise InvalidValueError(
        "Invalid values: measurementDate must be a date in YYYY-MM-DD format",
        field="measurementDate",
    )


def validate_submission(payload: Mapping[str, Any], today: Optional[date] = None) -> MeasurementInput:
    """
    Validate a raw submission and return the normalized input.

    Raises MissingFieldError when a required field is absent, null or an empty
    string, and InvalidValueError when a field is present but outside its
    legal domain (a numeric zero is invalid, not missing).
    `today` is the default measurement date; the current UTC date if omitted.
    """
    missing = [field for field in REQUIRED_FIELDS if _is_blank(payload.get(field))]
    if missing:
        raise MissingFieldError(missing)

    raw_date = payload.get("measurementDate")
    data = {field: payload[field] for field in REQUIRED_FIELDS}
    data["activityLevel"] = _normalize_activity(payload)
    data["measurementDate"] = _parse_date(raw_date) if raw_date else (today or utc_today())

    try:
        return MeasurementInput.model_validate(data)
    except ValidationError as exc:
        raise _to_invalid_value(exc.errors()[0]) from exc
