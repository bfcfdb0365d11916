import math
from typing import Optional

from data.models import UserPayload, VitalsInput


def compute_bmi(weight_kg: float, height_cm: float) -> Optional[float]:
    """BMI rounded to one decimal, or None when it is not a finite number (e.g. zero height)."""
    height_m = float(height_cm) / 100
    try:
        bmi = float(weight_kg) / (height_m * height_m)
    except ZeroDivisionError:
        return None
    if not math.isfinite(bmi):
        return None
    return round(bmi, 1)


def build_user_payload(vitals: VitalsInput) -> UserPayload:
    fields = vitals.model_dump(include=set(VitalsInput.model_fields))
    return UserPayload(**fields, bmi=compute_bmi(vitals.weight_kg, vitals.height_cm))
