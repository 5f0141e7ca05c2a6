"""
Maps the result of a failed submission attempt to a user-facing error.

The mapping is deterministic: it only looks at the transport status, the
decoded error body (if any) and the raw error message. No network access.
"""

from __future__ import annotations

from typing import Any, Optional

from apexsure.integrations.contracts.interfaces import IntegrationModeKind
from apexsure.integrations.contracts.submission import ClassifiedError, ErrorKind

_BODY_DETAIL_KEYS = ("message", "error", "description")

_GENERIC_FORBIDDEN = "You do not have permission to access this API."
_GENERIC_RATE_LIMIT = "Too many requests. Please wait a moment and try again."
_GENERIC_SERVER = "The server encountered an internal error. Check backend logs."
_GENERIC_UNAVAILABLE = "The backend service is temporarily unavailable. Please try again later."


def classify(
    status: Optional[int],
    body: Any = None,
    raw_error_message: Optional[str] = None,
    *,
    mode: IntegrationModeKind = IntegrationModeKind.DIRECT_INTEGRATOR,
    url: str = "",
    status_text: str = "",
) -> ClassifiedError:
    """Classify one failed attempt.

    ``status`` is ``None`` when no response was received at all (unreachable
    host, TLS failure, timeout). A 2xx ``status`` only reaches this function
    when the success body could not be decoded.
    """
    if status is None:
        return ClassifiedError(
            kind=ErrorKind.CONNECTION,
            title="Connection Failed",
            detail=_connection_hint(mode, url),
        )

    if 200 <= status < 300:
        detail = "Invalid response format from server. Expected JSON."
        if raw_error_message:
            detail = f"{detail} ({raw_error_message})"
        return ClassifiedError(kind=ErrorKind.RESPONSE_FORMAT, title="Invalid Response", detail=detail)

    body_detail = extract_body_detail(body)

    if status == 401:
        return ClassifiedError(
            kind=ErrorKind.AUTH,
            title="Authentication Failed",
            detail=(
                "Your access token is invalid or expired. "
                "Please update API_MANAGER_TOKEN in the portal configuration."
            ),
        )
    if status == 403:
        return ClassifiedError(
            kind=ErrorKind.PERMISSION,
            title="Access Forbidden",
            detail=body_detail or _GENERIC_FORBIDDEN,
        )
    if status == 404:
        return ClassifiedError(
            kind=ErrorKind.NOT_FOUND,
            title="Not Found",
            detail=f"The endpoint {url} was not found. Check your configuration.",
        )
    if status == 429:
        return ClassifiedError(
            kind=ErrorKind.RATE_LIMIT,
            title="Rate Limited",
            detail=body_detail or _GENERIC_RATE_LIMIT,
        )
    if status == 500:
        return ClassifiedError(
            kind=ErrorKind.SERVER,
            title="Server Error",
            detail=body_detail or _GENERIC_SERVER,
        )
    if status in (502, 503, 504):
        return ClassifiedError(
            kind=ErrorKind.UNAVAILABLE,
            title="Service Unavailable",
            detail=body_detail or _GENERIC_UNAVAILABLE,
        )

    return ClassifiedError(
        kind=ErrorKind.REQUEST,
        title=f"Request Failed ({status})",
        detail=body_detail or status_text or "Unknown error",
    )


def extract_body_detail(body: Any) -> Optional[str]:
    """Return the first non-empty message/error/description field of an error body."""
    if not isinstance(body, dict):
        return None
    for key in _BODY_DETAIL_KEYS:
        value = body.get(key)
        if value is None:
            continue
        text = value if isinstance(value, str) else str(value)
        if text.strip():
            return text
    return None


def _connection_hint(mode: IntegrationModeKind, url: str) -> str:
    hint = "Unable to reach the API. Please ensure the service is running"
    if mode is IntegrationModeKind.GATEWAY_FRONTED:
        return f"{hint} and that the HTTPS certificate is trusted."
    return f"{hint} on {url}"
