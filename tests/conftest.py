import json
import random

import pytest
from fastapi.testclient import TestClient

from agents.mock_generator import MockResultGenerator
from agents.risk_agent import RiskAssessmentAgent
from backend.config import load_settings
from backend.main import create_app
from backend.pipeline import PredictionPipeline


SAMPLE_VITALS = {
    "age": 45,
    "weightKg": 82,
    "heightCm": 170,
    "bloodPressure": "130/85",
    "cholesterol": "5.2 mmol/L",
    "gender": "male",
    "hba1cPercent": 6.1,
    "glucoseMgDl": 140,
}

PROVIDER_REPLY = {
    "risk_percent": 42,
    "risk_level": "moderate",
    "key_factors": ["Elevated fasting glucose", "HbA1c in prediabetic range", "BMI in overweight range"],
    "diet_recommendations": ["Replace sugary drinks with water", "Add fibre-rich vegetables to each meal"],
    "activity_plan": [
        {"name": "Brisk walking", "frequency_per_week": 5, "duration_minutes": 30},
        {"name": "Resistance training", "frequency_per_week": 2, "duration_minutes": 40},
    ],
    "disclaimer": "This estimate is informational and not a medical diagnosis.",
}


@pytest.fixture
def vitals():
    return dict(SAMPLE_VITALS)


@pytest.fixture
def provider_reply():
    return json.loads(json.dumps(PROVIDER_REPLY))


@pytest.fixture
def mock_settings():
    return load_settings(environ={})


@pytest.fixture
def ai_settings():
    return load_settings(environ={"OPENROUTER_API_KEY": "test-key"})


def build_client(settings, seed=7):
    pipeline = PredictionPipeline(
        settings,
        mock_generator=MockResultGenerator(random.Random(seed)),
        risk_agent=RiskAssessmentAgent(settings),
    )
    return TestClient(create_app(settings, pipeline))


@pytest.fixture
def mock_client(mock_settings):
    return build_client(mock_settings)


@pytest.fixture
def ai_client(ai_settings):
    return build_client(ai_settings)


def fake_provider(monkeypatch, client, reply):
    """Make the client's risk agent answer with ``reply`` (a dict is JSON-encoded) and record the calls."""
    calls = []
    raw = reply if isinstance(reply, str) else json.dumps(reply)

    def fake_call(messages, model=None):
        calls.append(messages)
        return raw

    monkeypatch.setattr(client.app.state.pipeline.risk_agent, "call_openrouter", fake_call)
    return calls
