"""
Real Policy Submission HTTP Client.

Purpose:
- Sends the collected application to the configured policy endpoint, either the
  direct integrator or the API-manager gateway in front of it
- Normalizes the answer into an issued / referred / failed outcome

Implementation notes:
- Uses httpx for async requests, one attempt, no retry
- Every attempt is written to the traffic recorder: the request before the call
  resolves, the response or transport error after
- Failures are classified, never raised, so the workflow always gets an outcome

Important:
- Keep this client as the ONLY place where policy submission HTTP calls are made.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from apexsure.integrations.contracts.interfaces import (
    ApplicationInput,
    IntegrationEndpoint,
    IntegrationModeKind,
)
from apexsure.integrations.contracts.submission import (
    SubmissionFailed,
    SubmissionOutcome,
    SubmissionRequest,
)
from apexsure.integrations.policy.error_classifier import classify
from apexsure.integrations.policy.response_wrappers import (
    IntegrationResponseError,
    normalize_policy_response,
)
from apexsure.portal.traffic import TrafficDirection, TrafficRecorder

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 20.0


def build_headers(endpoint: IntegrationEndpoint) -> Dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if endpoint.kind is IntegrationModeKind.GATEWAY_FRONTED:
        token = endpoint.token.get_secret_value() if endpoint.token else ""
        if token:
            headers["Authorization"] = f"Bearer {token}"
    elif endpoint.kind is not IntegrationModeKind.DIRECT_INTEGRATOR:
        raise ValueError(f"Unsupported integration mode: {endpoint.kind!r}")
    return headers


def build_submission_request(application: ApplicationInput, endpoint: IntegrationEndpoint) -> SubmissionRequest:
    return SubmissionRequest(
        method="POST",
        url=endpoint.base_url,
        headers=build_headers(endpoint),
        body=application.to_payload(),
    )


class PolicySubmissionClient:
    def __init__(
        self,
        recorder: Optional[TrafficRecorder] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.recorder = recorder or TrafficRecorder()
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def submit(self, application: ApplicationInput, endpoint: IntegrationEndpoint) -> SubmissionOutcome:
        request = build_submission_request(application, endpoint)
        self.recorder.record(TrafficDirection.REQUEST, request.model_dump())
        pending = self.recorder.last_request()
        logger.info("Submitting policy application via %s to %s", endpoint.kind.name, request.url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    json=request.body,
                )
        except httpx.RequestError as e:
            # Covers timeouts, refused connections and TLS failures alike.
            return self._network_failure(pending, request, endpoint, e)
        except Exception as e:
            # Malformed URLs and transport errors outside the RequestError family.
            logger.exception("Unexpected error sending policy request to %s", request.url)
            return self._network_failure(pending, request, endpoint, e)

        logger.info("Response status: %s %s", response.status_code, response.reason_phrase)
        body, parse_error = _decode_json(response)

        if not response.is_success:
            self._record_result(pending, TrafficDirection.ERROR, _response_payload(response, body))
            error = classify(
                response.status_code,
                body,
                parse_error,
                mode=endpoint.kind,
                url=request.url,
                status_text=response.reason_phrase,
            )
            logger.warning("Policy submission failed: %s", error.message)
            return SubmissionFailed(error=error, raw_status=response.status_code)

        self._record_result(pending, TrafficDirection.RESPONSE, _response_payload(response, body))

        try:
            if parse_error is not None:
                raise IntegrationResponseError(parse_error)
            outcome = normalize_policy_response(body)
        except IntegrationResponseError as e:
            logger.error("Unusable policy response from %s: %s", request.url, e)
            error = classify(response.status_code, body, str(e), mode=endpoint.kind, url=request.url)
            return SubmissionFailed(error=error, raw_status=response.status_code)

        logger.info("Policy submission completed with status=%s", outcome.status)
        return outcome

    def _network_failure(
        self,
        pending,
        request: SubmissionRequest,
        endpoint: IntegrationEndpoint,
        exc: Exception,
    ) -> SubmissionFailed:
        raw_message = str(exc) or type(exc).__name__
        logger.error("Request error connecting to %s: %s", request.url, raw_message)
        self._record_result(
            pending,
            TrafficDirection.ERROR,
            {"status": 0, "status_text": "Network Error", "body": {"error": raw_message}},
        )
        error = classify(None, None, raw_message, mode=endpoint.kind, url=request.url)
        return SubmissionFailed(error=error, raw_status=None)

    def _record_result(self, pending, direction: TrafficDirection, payload: Dict[str, Any]) -> None:
        # The log was cleared or taken over by a newer attempt while this one was in flight.
        if pending is None or self.recorder.last_request() is not pending:
            logger.debug("Dropping %s for a superseded request", direction.value.lower())
            return
        self.recorder.record(direction, payload)


def _decode_json(response: httpx.Response) -> tuple[Any, Optional[str]]:
    if not response.content:
        return None, "Empty response body"
    try:
        return response.json(), None
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return None, str(e)


def _response_payload(response: httpx.Response, body: Any) -> Dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc),
        "status": response.status_code,
        "status_text": response.reason_phrase,
        "headers": dict(response.headers),
        "body": body,
        "error": not response.is_success,
    }
