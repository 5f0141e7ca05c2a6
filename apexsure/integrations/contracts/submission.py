"""
Submission contracts.

Defines the request/response structures for one policy submission attempt:
- the outbound request (method, url, headers, body)
- the classified outcome (issued, referred or failed)

Both the real HTTP client and the workflow use these contracts so the
presentation layer never has to look at raw response dictionaries.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .interfaces import PolicyStatus


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    CONNECTION = "CONNECTION"
    AUTH = "AUTH"
    PERMISSION = "PERMISSION"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMIT = "RATE_LIMIT"
    SERVER = "SERVER"
    UNAVAILABLE = "UNAVAILABLE"
    RESPONSE_FORMAT = "RESPONSE_FORMAT"
    REQUEST = "REQUEST"


class ClassifiedError(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    title: str
    detail: str

    @property
    def message(self) -> str:
        return f"{self.title}: {self.detail}"


class SubmissionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: str = "POST"
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Dict[str, Any] = Field(default_factory=dict)


class PolicyIssued(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    policy_id: Optional[str] = None
    status: str = PolicyStatus.ACTIVE.value
    premium: Optional[Union[int, float]] = None    # as decoded from the response


class PolicyReferred(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["referred"] = "referred"
    status: str = PolicyStatus.REFERRED.value
    reason: Optional[str] = None


class SubmissionFailed(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    error: ClassifiedError
    raw_status: Optional[int] = None

    @property
    def classified_message(self) -> str:
        return self.error.message


SubmissionOutcome = Union[PolicyIssued, PolicyReferred, SubmissionFailed]


__all__ = [
    "ClassifiedError",
    "ErrorKind",
    "PolicyIssued",
    "PolicyReferred",
    "SubmissionFailed",
    "SubmissionOutcome",
    "SubmissionRequest",
]
