"""
Traffic recorder for the "Under the Hood" panel.

Keeps the last outbound request and the response (or transport error) that
answered it. A new request overwrites the previous pair; there is no history.
Authorization credentials are truncated before they are stored.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_MASK_PREFIX_LENGTH = 20
MASK_MARKER = "..."


class TrafficDirection(str, Enum):
    REQUEST = "REQUEST"
    RESPONSE = "RESPONSE"
    ERROR = "ERROR"


class RequestSnapshot(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    method: str
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = None


class ResponseSnapshot(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: int
    status_text: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = None
    error: bool = False


class TrafficLogEntry(BaseModel):
    request: Optional[RequestSnapshot] = None
    response: Optional[ResponseSnapshot] = None


def mask_credential(value: str, prefix_length: int = DEFAULT_MASK_PREFIX_LENGTH) -> str:
    """Truncate an Authorization header value, keeping the auth scheme.

    At most half of the token is kept, so even short tokens are never stored
    whole.
    """
    scheme, sep, token = value.partition(" ")
    if not sep:
        scheme, token = "", value
    visible = token[: min(prefix_length, len(token) // 2)]
    masked = f"{visible}{MASK_MARKER}"
    return f"{scheme} {masked}" if scheme else masked


class TrafficRecorder:
    def __init__(self, mask_prefix_length: int = DEFAULT_MASK_PREFIX_LENGTH) -> None:
        self.mask_prefix_length = mask_prefix_length
        self._entry: Optional[TrafficLogEntry] = None

    def record(self, direction: TrafficDirection, payload: Mapping[str, Any]) -> None:
        direction = TrafficDirection(direction)
        if direction is TrafficDirection.REQUEST:
            data = dict(payload)
            data["headers"] = self._mask_headers(data.get("headers") or {})
            self._entry = TrafficLogEntry(request=RequestSnapshot(**data))
            return

        snapshot = ResponseSnapshot(**{**payload, "error": direction is TrafficDirection.ERROR or payload.get("error", False)})
        if self._entry is None:
            logger.warning("Recording %s without a preceding request", direction.value.lower())
            self._entry = TrafficLogEntry()
        self._entry = self._entry.model_copy(update={"response": snapshot})

    def last_request(self) -> Optional[RequestSnapshot]:
        return self._entry.request if self._entry else None

    def last_response(self) -> Optional[ResponseSnapshot]:
        return self._entry.response if self._entry else None

    def last_entry(self) -> Optional[TrafficLogEntry]:
        return self._entry

    def clear(self) -> None:
        self._entry = None

    def _mask_headers(self, headers: Mapping[str, str]) -> Dict[str, str]:
        masked: Dict[str, str] = {}
        for name, value in headers.items():
            if name.lower() == "authorization":
                masked[name] = mask_credential(str(value), self.mask_prefix_length)
            else:
                masked[name] = str(value)
        return masked
