"""
Integrations layer.
This package contains all code used to communicate with the policy backends:
- the WSO2-style direct integrator (no credential)
- the API-manager gateway in front of it (bearer token)
- mock risk / policy core services used during development

Key rule:
- The portal workflow MUST NOT call external APIs directly.
- It goes through the submission client under apexsure/integrations/clients/real_http.
"""

from .contracts.interfaces import (
    MINIMUM_COVERAGE_AMOUNT,
    ApplicationInput,
    IntegrationEndpoint,
    IntegrationModeKind,
    IntegrationModes,
    PolicyStatus,
)
from .contracts.submission import (
    ClassifiedError,
    ErrorKind,
    PolicyIssued,
    PolicyReferred,
    SubmissionFailed,
    SubmissionOutcome,
    SubmissionRequest,
)

__all__ = [
    # interfaces
    "MINIMUM_COVERAGE_AMOUNT", "ApplicationInput", "IntegrationEndpoint",
    "IntegrationModeKind", "IntegrationModes", "PolicyStatus",
    # submission
    "ClassifiedError", "ErrorKind", "PolicyIssued", "PolicyReferred",
    "SubmissionFailed", "SubmissionOutcome", "SubmissionRequest",
]
