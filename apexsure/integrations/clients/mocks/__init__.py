"""
Mock backend services.

These stand in for the systems behind the integrator while they are not
available:
- the risk assessment service (REST, JSON)
- the legacy policy core (SOAP-like, XML)

They do NOT call any external API. Randomised scores for unknown national IDs
are a fixture behaviour of these mocks only; the portal workflow never relies
on them.
"""

from .policy_core import MockPolicyCoreClient, build_policy_xml, parse_policy_xml
from .risk_assessment import MockRiskAssessmentClient, RiskAssessment, RiskLevel

__all__ = [
    "MockPolicyCoreClient",
    "MockRiskAssessmentClient",
    "RiskAssessment",
    "RiskLevel",
    "build_policy_xml",
    "parse_policy_xml",
]
