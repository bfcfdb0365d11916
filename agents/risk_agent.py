from __future__ import annotations

import json
import logging
from typing import Any, Dict

import jsonschema
from jsonschema.exceptions import best_match

from .base_agent import BaseAgent
from backend.config import Settings
from backend.errors import ProviderError
from data.models import RISK_LEVELS, PredictionResult, UserPayload, risk_level_for


logger = logging.getLogger(__name__)


SCHEMA_VERSION = "1"

PREDICTION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": [
        "risk_percent",
        "risk_level",
        "key_factors",
        "diet_recommendations",
        "activity_plan",
        "disclaimer",
    ],
    "properties": {
        "risk_percent": {"type": "integer", "minimum": 0, "maximum": 100},
        "risk_level": {"type": "string", "enum": list(RISK_LEVELS)},
        "key_factors": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
            "maxItems": 6,
        },
        "diet_recommendations": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
        },
        "activity_plan": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "additionalProperties": False,
                "required": ["name", "frequency_per_week", "duration_minutes"],
                "properties": {
                    "name": {"type": "string"},
                    "frequency_per_week": {"type": "integer", "minimum": 1, "maximum": 7},
                    "duration_minutes": {"type": "integer", "minimum": 10, "maximum": 120},
                },
            },
        },
        "disclaimer": {"type": "string"},
    },
}

SYSTEM_PROMPT = """
You are a careful clinical-screening assistant that estimates type 2 diabetes risk.

Given a person's vitals (BMI, fasting glucose in mg/dL, HbA1c %, blood pressure, cholesterol, age, sex):
- Estimate the risk probabilistically as an integer percentage 0-100 and bucket it:
  below 20 -> "low", below 50 -> "moderate", below 80 -> "high", otherwise "very_high".
- Explain the 3-6 most important key factors in short phrases.
- Give safe, actionable diet recommendations.
- Give a weekly activity plan: each entry has a name, 1-7 sessions per week and 10-120 minutes per session.
- Always include a disclaimer that this is not a medical diagnosis.
- If the input looks inconsistent or implausible, lower your confidence, say so in the key factors and keep the estimate moderate.

Return JSON only, matching the provided schema exactly. No extra fields.
"""


class RiskAssessmentAgent(BaseAgent):
    """Delegates the assessment to the external provider under a strict output schema."""

    def __init__(self, settings: Settings):
        super().__init__(
            name=f"diabetes_risk_prediction_v{SCHEMA_VERSION}",
            role="Risk assessor",
            system_prompt=SYSTEM_PROMPT,
            settings=settings,
            schema=PREDICTION_SCHEMA,
        )
        self.validator = jsonschema.Draft202012Validator(PREDICTION_SCHEMA)

    def build_user_message(self, payload: UserPayload) -> str:
        return f"Estimate diabetes risk for: {json.dumps(payload.model_dump(by_alias=True))}"

    def parse_reply(self, raw: str) -> PredictionResult:
        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError) as exc:
            raise ProviderError(f"provider reply is not valid JSON: {exc}") from exc

        error = best_match(self.validator.iter_errors(data))
        if error is not None:
            where = "/".join(str(p) for p in error.path) or "<root>"
            raise ProviderError(f"provider reply failed schema validation at {where}: {error.message}")

        expected = risk_level_for(data["risk_percent"])
        if data["risk_level"] != expected:
            raise ProviderError(
                f"provider reply risk_level {data['risk_level']!r} does not match risk_percent "
                f"{data['risk_percent']} (expected {expected!r})"
            )
        return PredictionResult.model_validate(data)

    def assess(self, payload: UserPayload) -> PredictionResult:
        messages = self.build_messages(self.build_user_message(payload))
        raw = self.call_openrouter(messages)
        result = self.parse_reply(raw)
        logger.debug("assess: risk_percent=%d risk_level=%s", result.risk_percent, result.risk_level)
        return result
