#!/usr/bin/env python3
"""
Run one application through the portal workflow and print each stage to the
terminal: the request sent, the response (or error) received, the progress
steps and the final state.

By default the workflow talks to the in-process mock backend, so nothing needs
to be running. Use --live to submit to the URLs from config/portal_config.yml
(or the environment) instead.

Usage (from repo root):
  python scripts/run_portal_demo.py
  python scripts/run_portal_demo.py --national-id 2222
  python scripts/run_portal_demo.py --mode API_MANAGER --live
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx

from apexsure.api.mock_backend import create_mock_backend
from apexsure.portal.validation import DEFAULT_FORM_VALUES
from apexsure.portal.workflow import DEFAULT_POLICY_ID, WorkflowState
from apexsure.utils.config_loader import build_workflow, load_portal_config, parse_mode

MOCK_BASE_URL = "http://mock-backend"
MOCK_TOKEN = "demo-gateway-token-0123456789abcdef"


def setup_logging(verbose: bool = False):
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Submit one application through the policy portal workflow")
    parser.add_argument("--name", default=DEFAULT_FORM_VALUES["name"])
    parser.add_argument("--national-id", default=DEFAULT_FORM_VALUES["nationalId"])
    parser.add_argument("--coverage", default=DEFAULT_FORM_VALUES["coverageAmount"])
    parser.add_argument("--mode", help="INTEGRATOR or API_MANAGER (defaults to config)")
    parser.add_argument("--live", action="store_true", help="Submit to the configured URLs instead of the in-process mock")
    parser.add_argument("--config", type=Path, help="Path to portal_config.yml")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    config = load_portal_config(args.config)
    transport = None
    if not args.live:
        config = config.model_copy(update={
            "integrator": config.integrator.model_copy(update={"url": f"{MOCK_BASE_URL}/policy"}),
            "api_manager": config.api_manager.model_copy(update={"url": f"{MOCK_BASE_URL}/gateway/policy", "token": MOCK_TOKEN}),
        })
        transport = httpx.ASGITransport(app=create_mock_backend(gateway_token=MOCK_TOKEN))

    workflow = build_workflow(config, transport=transport)
    if args.mode:
        workflow.select_mode(parse_mode(args.mode))

    workflow.start()
    print_stage(f"SUBMITTING via {workflow.mode.name}", {
        "name": args.name,
        "nationalId": args.national_id,
        "coverageAmount": args.coverage,
    })
    await workflow.submit({"name": args.name, "nationalId": args.national_id, "coverageAmount": args.coverage})

    traffic = workflow.last_traffic
    if traffic is not None:
        print_stage("REQUEST", traffic.request.model_dump(mode="json") if traffic.request else {})
        print_stage("RESPONSE", traffic.response.model_dump(mode="json") if traffic.response else {})
    print_stage("PROGRESS", [f"[{'x' if s.completed else ' '}] {s.label}" for s in workflow.progress])

    if workflow.state is WorkflowState.SUCCESS:
        print_stage("POLICY ISSUED", {
            "policyId": workflow.outcome.policy_id or DEFAULT_POLICY_ID,
            "status": workflow.outcome.status,
            "premium": workflow.outcome.premium,
        })
        return 0
    if workflow.state is WorkflowState.REFERRED:
        print_stage("APPLICATION REFERRED", {"status": workflow.outcome.status, "reason": workflow.referral_reason})
        return 0

    print_stage("SUBMISSION FAILED", workflow.error.message if workflow.error else "unknown error")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
