import random

import pytest
from fastapi.testclient import TestClient

from apexsure.api.mock_backend import create_mock_backend
from apexsure.integrations.clients.mocks.policy_core import build_policy_xml, parse_policy_xml
from apexsure.integrations.clients.mocks.risk_assessment import MockRiskAssessmentClient, RiskLevel, risk_level_for_score


@pytest.fixture
def client():
    return TestClient(create_mock_backend(latency_scale=0, gateway_token="secret-token"))


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


def test_known_ids_have_fixed_scores(client):
    assert client.get("/risk/1111").json() == {"score": 850, "riskLevel": "Low"}
    assert client.get("/risk/2222").json() == {"score": 500, "riskLevel": "High"}


def test_unknown_id_gets_score_in_range(client):
    body = client.get("/risk/9999").json()
    assert 500 <= body["score"] <= 899
    assert body["riskLevel"] == risk_level_for_score(body["score"]).value


@pytest.mark.parametrize("score, level", [(899, RiskLevel.LOW), (701, RiskLevel.LOW), (700, RiskLevel.MEDIUM), (551, RiskLevel.MEDIUM), (550, RiskLevel.HIGH)])
def test_risk_level_thresholds(score, level):
    assert risk_level_for_score(score) is level


@pytest.mark.asyncio
async def test_seeded_rng_makes_unknown_scores_repeatable():
    first = await MockRiskAssessmentClient(latency_seconds=0, rng=random.Random(7)).assess("5555")
    second = await MockRiskAssessmentClient(latency_seconds=0, rng=random.Random(7)).assess("5555")
    assert first == second


def test_soap_policy_returns_xml(client):
    res = client.post("/soap/policy", content="<Policy/>", headers={"Content-Type": "application/xml"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/xml")
    policy = parse_policy_xml(res.text)
    assert policy["policyId"].startswith("POL-")
    assert policy["status"] == "Active"


def test_policy_xml_round_trip_fields():
    policy = parse_policy_xml(build_policy_xml("POL-1-2"))
    assert policy["policyId"] == "POL-1-2"
    assert policy["createdAt"]


def test_policy_endpoint_issues_low_risk(client):
    res = client.post("/policy", json={"name": "John Doe", "nationalId": "1111", "coverageAmount": 100000})
    body = res.json()
    assert res.status_code == 200
    assert body["status"] == "Active"
    assert body["premium"] == 250.0
    assert body["policyId"].startswith("POL-")


def test_policy_endpoint_refers_high_risk(client):
    res = client.post("/policy", json={"name": "Jane Roe", "nationalId": "2222", "coverageAmount": 100000})
    assert res.json() == {"status": "Referred", "reason": "High risk score", "riskScore": 500}


@pytest.mark.parametrize("payload", [{"name": "x"}, ["not", "an", "object"]])
def test_policy_endpoint_rejects_bad_body(client, payload):
    res = client.post("/policy", json=payload)
    assert res.status_code == 400
    assert "message" in res.json()


def test_gateway_requires_bearer_token(client):
    payload = {"name": "John Doe", "nationalId": "1111", "coverageAmount": 100000}

    assert client.post("/gateway/policy", json=payload).status_code == 401
    wrong = client.post("/gateway/policy", json=payload, headers={"Authorization": "Bearer nope"})
    assert wrong.status_code == 401
    assert wrong.json() == {"message": "Invalid Credentials"}

    ok = client.post("/gateway/policy", json=payload, headers={"Authorization": "Bearer secret-token"})
    assert ok.status_code == 200
    assert ok.json()["status"] == "Active"
