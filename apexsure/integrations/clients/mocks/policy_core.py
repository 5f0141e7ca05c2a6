"""Mock legacy policy core (SOAP-like XML)."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from datetime import datetime, timezone
from typing import Dict, Optional
from xml.etree import ElementTree

logger = logging.getLogger(__name__)

_POLICY_XML_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<PolicyResponse>
    <Policy>
        <Id>{policy_id}</Id>
        <Status>{status}</Status>
        <CreatedAt>{created_at}</CreatedAt>
    </Policy>
</PolicyResponse>"""


def build_policy_xml(policy_id: str, status: str = "Active", created_at: Optional[datetime] = None) -> str:
    created_at = created_at or datetime.now(timezone.utc)
    return _POLICY_XML_TEMPLATE.format(
        policy_id=policy_id,
        status=status,
        created_at=created_at.isoformat(),
    )


def parse_policy_xml(document: str) -> Dict[str, str]:
    """Extract ``Id``, ``Status`` and ``CreatedAt`` from a policy core reply."""
    root = ElementTree.fromstring(document.encode("utf-8"))
    policy = root.find("Policy")
    if policy is None:
        raise ValueError("PolicyResponse is missing the Policy element")
    return {
        "policyId": policy.findtext("Id", default=""),
        "status": policy.findtext("Status", default=""),
        "createdAt": policy.findtext("CreatedAt", default=""),
    }


class MockPolicyCoreClient:
    def __init__(self, latency_seconds: float = 0.5, rng: Optional[random.Random] = None) -> None:
        self.latency_seconds = latency_seconds
        self._rng = rng or random.Random()

    def generate_policy_id(self) -> str:
        return f"POL-{int(time.time() * 1000)}-{self._rng.randint(0, 999)}"

    async def create_policy(self, request_body: str = "") -> str:
        logger.info("[SOAP SERVICE] Received policy request")
        logger.debug("[SOAP SERVICE] Body: %s", request_body)
        policy_id = self.generate_policy_id()
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)
        logger.info("[SOAP SERVICE] Returning policy ID: %s", policy_id)
        return build_policy_xml(policy_id)
