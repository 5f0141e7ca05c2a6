"""
Mock backend for local development and tests.

Serves the risk assessment and legacy policy core mocks, plus the integrator
policy endpoint that composes them into the JSON contract the portal expects.
``/gateway/policy`` imitates the API manager in front of the integrator and
requires a bearer token.

Run with: uvicorn apexsure.api.mock_backend:app --port 9090
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field, ValidationError

from apexsure.integrations.clients.mocks.policy_core import MockPolicyCoreClient, parse_policy_xml
from apexsure.integrations.clients.mocks.risk_assessment import MockRiskAssessmentClient, RiskLevel
from apexsure.portal.validation import ESTIMATED_MONTHLY_RATE

logger = logging.getLogger(__name__)

SERVICE_NAME = "ApexSure Backend Mocks"


class PolicySubmissionBody(BaseModel):
    name: str = Field(min_length=1)
    nationalId: str = Field(min_length=1)
    coverageAmount: int = Field(ge=1)


def create_mock_backend(latency_scale: float = 1.0, gateway_token: Optional[str] = None) -> FastAPI:
    """Build the mock backend app.

    ``latency_scale`` multiplies the simulated service delays (0 disables them).
    ``gateway_token`` is the bearer token ``/gateway/policy`` accepts; when unset
    any non-empty bearer token is accepted.
    """
    risk_client = MockRiskAssessmentClient(latency_seconds=0.3 * latency_scale)
    policy_core = MockPolicyCoreClient(latency_seconds=0.5 * latency_scale)
    router = APIRouter()

    @router.get("/risk/{national_id}")
    async def check_risk(national_id: str):
        assessment = await risk_client.assess(national_id)
        return assessment.to_dict()

    @router.post("/soap/policy")
    async def create_policy(request: Request):
        body = (await request.body()).decode("utf-8", errors="replace")
        xml = await policy_core.create_policy(body)
        return Response(content=xml, media_type="application/xml")

    async def _underwrite(request: Request) -> JSONResponse:
        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse(status_code=400, content={"message": "Request body must be JSON"})
        try:
            submission = PolicySubmissionBody(**payload) if isinstance(payload, dict) else None
        except ValidationError as e:
            return JSONResponse(status_code=400, content={"message": f"Invalid policy request: {e.errors()[0]['msg']}"})
        if submission is None:
            return JSONResponse(status_code=400, content={"message": "Request body must be a JSON object"})

        assessment = await risk_client.assess(submission.nationalId)
        if assessment.risk_level is RiskLevel.HIGH:
            return JSONResponse(content={
                "status": "Referred",
                "reason": "High risk score",
                "riskScore": assessment.score,
            })

        policy = parse_policy_xml(await policy_core.create_policy(submission.model_dump_json()))
        return JSONResponse(content={
            "policyId": policy["policyId"],
            "status": policy["status"],
            "premium": round(submission.coverageAmount * ESTIMATED_MONTHLY_RATE, 2),
            "riskScore": assessment.score,
        })

    @router.post("/policy")
    async def submit_policy(request: Request):
        return await _underwrite(request)

    @router.post("/gateway/policy")
    async def submit_policy_via_gateway(request: Request, authorization: Optional[str] = Header(default=None)):
        scheme, _, token = (authorization or "").partition(" ")
        if scheme.lower() != "bearer" or not token or (gateway_token and token != gateway_token):
            logger.warning("[GATEWAY] Rejected request with missing or invalid bearer token")
            return JSONResponse(status_code=401, content={"message": "Invalid Credentials"})
        return await _underwrite(request)

    @router.get("/health")
    async def health() -> Dict[str, Any]:
        return {"status": "healthy", "service": SERVICE_NAME}

    app = FastAPI(title=SERVICE_NAME, description="Risk assessment and policy core mocks", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_mock_backend(
    latency_scale=float(os.getenv("MOCK_LATENCY_SCALE", "1.0")),
    gateway_token=os.getenv("API_MANAGER_TOKEN") or None,
)
