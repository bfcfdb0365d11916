"""Prediction request pipeline.

validate -> compute metrics -> resolve mode -> (mock | assisted) -> compose response.
Every object built here lives for a single request; only ``Settings`` is shared.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from agents.mock_generator import MockResultGenerator
from agents.mode_resolver import read_override, resolve_mode
from agents.risk_agent import RiskAssessmentAgent
from backend.config import Settings
from data.metrics import build_user_payload
from data.models import Mode, PredictionResponse, PredictionResult, UserPayload
from data.validation import parse_vitals
from monitoring.observability import track_prediction


logger = logging.getLogger(__name__)


def compose_response(payload: UserPayload, mode: Mode, result: PredictionResult) -> PredictionResponse:
    return PredictionResponse(input=payload, mode=mode.label, result=result)


class PredictionPipeline:
    def __init__(
        self,
        settings: Settings,
        mock_generator: Optional[MockResultGenerator] = None,
        risk_agent: Optional[RiskAssessmentAgent] = None,
    ):
        self.settings = settings
        self.mock_generator = mock_generator or MockResultGenerator()
        self.risk_agent = risk_agent or RiskAssessmentAgent(settings)

    def run(self, body: Any, headers: Optional[Mapping[str, str]] = None) -> PredictionResponse:
        request = parse_vitals(body)
        payload = build_user_payload(request)
        mode = resolve_mode(read_override(request.mock, headers), self.settings.default_mode)
        logger.debug("pipeline: mode=%s bmi=%s", mode.value, payload.bmi)

        if mode is Mode.MOCK:
            result = self.mock_generator.generate(payload)
        else:
            result = self.risk_agent.assess(payload)

        response = compose_response(payload, mode, result)
        if self.settings.tracing_enabled:
            track_prediction(response.mode, payload.model_dump(by_alias=True), result.model_dump())
        return response
