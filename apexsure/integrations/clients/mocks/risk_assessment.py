"""
Risk Assessment Service: MOCK client.

⚠️  This is a mock implementation for development and testing.
    Known national IDs return fixed scores so demos are repeatable; any other
    ID gets a random score between 500 and 899.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass
class RiskAssessment:
    score: int
    risk_level: RiskLevel

    def to_dict(self) -> Dict[str, object]:
        return {"score": self.score, "riskLevel": self.risk_level.value}


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_KNOWN_APPLICANTS: Dict[str, RiskAssessment] = {
    "1111": RiskAssessment(score=850, risk_level=RiskLevel.LOW),
    "2222": RiskAssessment(score=500, risk_level=RiskLevel.HIGH),
}


def risk_level_for_score(score: int) -> RiskLevel:
    if score > 700:
        return RiskLevel.LOW
    if score > 550:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


class MockRiskAssessmentClient:
    """Scores applicants by national ID."""

    def __init__(self, latency_seconds: float = 0.3, rng: Optional[random.Random] = None) -> None:
        self.latency_seconds = latency_seconds
        self._rng = rng or random.Random()

    async def assess(self, national_id: str) -> RiskAssessment:
        logger.info("[RISK SERVICE] Checking risk for ID: %s", national_id)
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)

        assessment = _KNOWN_APPLICANTS.get(str(national_id).strip())
        if assessment is None:
            score = self._rng.randint(500, 899)
            assessment = RiskAssessment(score=score, risk_level=risk_level_for_score(score))

        logger.info("[RISK SERVICE] Response: %s", assessment.to_dict())
        return assessment
