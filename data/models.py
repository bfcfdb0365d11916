from enum import Enum
from typing import List, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


REQUIRED_FIELDS = ("age", "weightKg", "heightCm", "hba1cPercent", "glucoseMgDl")

RISK_LEVELS = ("low", "moderate", "high", "very_high")


class Mode(Enum):
    MOCK = "mock"
    ASSISTED = "assisted"

    @property
    def label(self) -> str:
        """Label used in the response envelope."""
        return "mock" if self is Mode.MOCK else "ai"


def risk_level_for(risk_percent: int) -> str:
    if risk_percent < 20:
        return "low"
    if risk_percent < 50:
        return "moderate"
    if risk_percent < 80:
        return "high"
    return "very_high"


class VitalsInput(BaseModel):
    """
    Vitals sent by the form UI (camelCase on the wire).
    Numbers may arrive as JSON numbers or numeric strings.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        allow_inf_nan=False,
        str_strip_whitespace=True,
        frozen=True,
        extra="ignore",
    )

    age: float = Field(..., ge=0, description="Age in years")
    weight_kg: float = Field(..., alias="weightKg", gt=0, description="Weight in kg, e.g. 82.0")
    # zero is allowed so the request reaches the null-bmi path
    height_cm: float = Field(..., alias="heightCm", ge=0, description="Height in cm, e.g. 170")
    hba1c_percent: float = Field(..., alias="hba1cPercent", description="HbA1c in %")
    glucose_mg_dl: float = Field(..., alias="glucoseMgDl", description="Blood glucose in mg/dL")
    blood_pressure: Optional[str] = Field(None, alias="bloodPressure", description="Free text, e.g. 130/85")
    cholesterol: Optional[str] = Field(None, description="Free text, e.g. 5.2 mmol/L")
    gender: Optional[Literal["male", "female", "other"]] = None

    @field_validator("age", "weight_kg", "height_cm", "hba1c_percent", "glucose_mg_dl", mode="before")
    @classmethod
    def _plain_number(cls, value):
        if isinstance(value, bool):
            raise ValueError("Input should be a valid number")
        if isinstance(value, int):
            try:
                return float(value)
            except OverflowError:
                raise ValueError("number is too large") from None
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("blood_pressure", "cholesterol", mode="before")
    @classmethod
    def _blank_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("gender", mode="before")
    @classmethod
    def _normalise_gender(cls, value):
        if isinstance(value, str):
            return value.strip().lower() or None
        return value


class PredictionRequest(VitalsInput):
    mock: Optional[StrictBool] = Field(None, description="Per-request override: true forces mock, false forces AI")


class UserPayload(VitalsInput):
    bmi: Optional[float] = None


class ActivityItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    frequency_per_week: int = Field(..., ge=1, le=7)
    duration_minutes: int = Field(..., ge=10, le=120)


class PredictionResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    risk_percent: int = Field(..., ge=0, le=100)
    risk_level: Literal["low", "moderate", "high", "very_high"]
    key_factors: List[str] = Field(..., min_length=1, max_length=6)
    diet_recommendations: List[str] = Field(..., min_length=1)
    activity_plan: List[ActivityItem] = Field(..., min_length=1)
    disclaimer: str


class PredictionResponse(BaseModel):
    """
    /predict result returned to the frontend
    """

    input: UserPayload
    mode: Literal["mock", "ai"]
    result: PredictionResult
