"""
Derived health metrics from raw body measurements.

- BMI = weight_kg / height_m², one decimal place
- BMR via Mifflin-St Jeor
- daily calories = BMR × activity multiplier

All rounding sends halves towards +infinity. Daily calories are computed
from the unrounded BMR and rounded once at the end.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_DOWN, ROUND_HALF_UP
from typing import Optional

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = ACTIVITY_MULTIPLIERS["sedentary"]


@dataclass(frozen=True)
class HealthMetrics:
    bmi: float
    bmi_category: str
    bmr: int
    daily_calories: int


def round_half_ceiling(value: float, digits: int = 0) -> Decimal:
    # Rounds the exact binary value of the float: 18.45 is stored as
    # 18.4499... and rounds to 18.4. -588.5 rounds to -588.
    quantum = Decimal(1).scaleb(-digits)
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return Decimal(value).quantize(quantum, rounding=rounding)


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def activity_multiplier(activity_level: Optional[str]) -> float:
    """Unknown or missing levels fall back to the sedentary multiplier."""
    if not isinstance(activity_level, str):
        return DEFAULT_ACTIVITY_MULTIPLIER
    return ACTIVITY_MULTIPLIERS.get(activity_level, DEFAULT_ACTIVITY_MULTIPLIER)


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    height_m = height_cm / 100
    return float(round_half_ceiling(weight_kg / (height_m ** 2), 1))


def calculate_bmr(weight_kg: float, height_cm: float, age: int, sex: str) -> float:
    """Unrounded Mifflin-St Jeor BMR in kcal/day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex == "male":
        return base + 5
    return base - 161


def calculate_metrics(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: str,
    activity_level: Optional[str] = None,
) -> HealthMetrics:
    bmi = calculate_bmi(weight_kg, height_cm)
    bmr = calculate_bmr(weight_kg, height_cm, age, sex)
    daily = bmr * activity_multiplier(activity_level)

    return HealthMetrics(
        bmi=bmi,
        bmi_category=bmi_category(bmi),
        bmr=int(round_half_ceiling(bmr)),
        daily_calories=int(round_half_ceiling(daily)),
    )
