"""Boundary checks for the raw prediction request body.

``validate_vitals`` only checks presence of the required vitals, so that absent,
null and empty-string values share one message. ``parse_vitals`` runs it and then
lets pydantic build the typed ``PredictionRequest``.
"""

from __future__ import annotations

from typing import Any, Dict

import pydantic

from backend.errors import ValidationError
from data.models import REQUIRED_FIELDS, PredictionRequest


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def validate_vitals(raw: Dict[str, Any]) -> None:
    if any(_is_missing(raw.get(name)) for name in REQUIRED_FIELDS):
        raise ValidationError("missing required field")


def describe_error(error: Dict[str, Any]) -> str:
    where = ".".join(str(p) for p in error.get("loc", ())) or "body"
    return f"invalid field {where}: {error.get('msg', 'invalid value')}"


def parse_vitals(raw: Any) -> PredictionRequest:
    if not isinstance(raw, dict):
        raise ValidationError("request body must be a JSON object")
    validate_vitals(raw)
    try:
        return PredictionRequest.model_validate(raw)
    except pydantic.ValidationError as exc:
        raise ValidationError(describe_error(exc.errors()[0])) from None
