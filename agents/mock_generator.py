import random
from typing import Optional

from data.models import ActivityItem, PredictionResult, UserPayload, risk_level_for


KEY_FACTORS = [
    "MOCK MODE: Risk estimated without AI",
    "Glucose level used as main factor",
    "BMI and age considered lightly",
]

DIET_RECOMMENDATIONS = [
    "Increase fresh vegetables",
    "Limit sugary foods & drinks",
    "Choose whole grains (brown rice, oats, barley)",
]

ACTIVITY_PLAN = [
    ActivityItem(name="Walking", frequency_per_week=3, duration_minutes=30),
    ActivityItem(name="Cycling", frequency_per_week=2, duration_minutes=40),
    ActivityItem(name="Stretching", frequency_per_week=3, duration_minutes=10),
]

DISCLAIMER = "Mock prediction only, not a medical diagnosis. Real AI mode activates when a provider key is configured."


class MockResultGenerator:
    """Fabricates a plausible-shaped assessment.

    The vitals are deliberately not used: the risk is a uniform draw from [0, 99].
    Pass a seeded ``random.Random`` to make the draw reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate(self, payload: UserPayload) -> PredictionResult:
        risk = self.rng.randrange(100)
        return PredictionResult(
            risk_percent=risk,
            risk_level=risk_level_for(risk),
            key_factors=list(KEY_FACTORS),
            diet_recommendations=list(DIET_RECOMMENDATIONS),
            activity_plan=list(ACTIVITY_PLAN),
            disclaimer=DISCLAIMER,
        )
