from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class IntegrationModeKind(str, Enum):
    DIRECT_INTEGRATOR = "INTEGRATOR"
    GATEWAY_FRONTED = "API_MANAGER"


class PolicyStatus(str, Enum):
    ACTIVE = "Active"
    REFERRED = "Referred"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

MINIMUM_COVERAGE_AMOUNT = 1000


class ApplicationInput(BaseModel):
    """Applicant details collected by the wizard. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    full_name: str
    national_id: str
    coverage_amount: int = Field(ge=MINIMUM_COVERAGE_AMOUNT)

    @field_validator("full_name", "national_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Wire shape expected by the policy submission endpoints."""
        return {
            "name": self.full_name,
            "nationalId": self.national_id,
            "coverageAmount": int(self.coverage_amount),
        }


class IntegrationEndpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: IntegrationModeKind
    base_url: str
    token: Optional[SecretStr] = None    # only honoured for GATEWAY_FRONTED


class IntegrationModes(BaseModel):
    """The two configured backends a submission can be routed to."""

    model_config = ConfigDict(frozen=True)

    direct: IntegrationEndpoint
    gateway: IntegrationEndpoint

    def endpoint_for(self, kind: IntegrationModeKind) -> IntegrationEndpoint:
        if kind is IntegrationModeKind.DIRECT_INTEGRATOR:
            return self.direct
        if kind is IntegrationModeKind.GATEWAY_FRONTED:
            return self.gateway
        raise ValueError(f"Unsupported integration mode: {kind!r}")
