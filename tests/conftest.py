"""Pytest fixtures for the portal workflow and its integrations."""

import httpx
import pytest

from apexsure.api.mock_backend import create_mock_backend
from apexsure.integrations.clients.real_http.policy_submission import PolicySubmissionClient
from apexsure.integrations.contracts.interfaces import (
    IntegrationEndpoint,
    IntegrationModeKind,
    IntegrationModes,
)
from apexsure.portal.progress import ProgressSimulator
from apexsure.portal.traffic import TrafficRecorder
from apexsure.portal.workflow import PortalWorkflow

DIRECT_URL = "http://integrator.test/policy"
GATEWAY_URL = "https://gateway.test/policy/1.0.0/policy"
GATEWAY_TOKEN = "eyJhbGciOiJSUzI1NiJ9.gateway-access-token-value"
NO_DELAYS = (0, 0, 0, 0)


@pytest.fixture
def modes():
    return IntegrationModes(
        direct=IntegrationEndpoint(kind=IntegrationModeKind.DIRECT_INTEGRATOR, base_url=DIRECT_URL),
        gateway=IntegrationEndpoint(
            kind=IntegrationModeKind.GATEWAY_FRONTED,
            base_url=GATEWAY_URL,
            token=GATEWAY_TOKEN,
        ),
    )


@pytest.fixture
def make_workflow(modes):
    """Build a workflow whose HTTP calls go to ``handler`` (an httpx.MockTransport handler)."""

    def _make(handler, mode=IntegrationModeKind.DIRECT_INTEGRATOR, delays=NO_DELAYS, **kwargs):
        client = PolicySubmissionClient(recorder=TrafficRecorder(), transport=httpx.MockTransport(handler))
        kwargs.setdefault("settle_delay", 0)
        return PortalWorkflow(
            modes=modes,
            mode=mode,
            client=client,
            progress=ProgressSimulator(delays=delays),
            **kwargs,
        )

    return _make


@pytest.fixture
def mock_backend_transport():
    """Route requests in-process to the mock backend, with latency disabled."""
    app = create_mock_backend(latency_scale=0, gateway_token=GATEWAY_TOKEN)
    return httpx.ASGITransport(app=app)


@pytest.fixture
def application_form():
    return {"name": "John Doe", "nationalId": "1111", "coverageAmount": 100000}
