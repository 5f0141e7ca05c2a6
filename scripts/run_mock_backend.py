#!/usr/bin/env python3
"""
Start the mock backend services (risk assessment, legacy policy core and the
integrator / gateway policy endpoints).

Usage (from repo root):
  python scripts/run_mock_backend.py --port 9090
  python scripts/run_mock_backend.py --latency-scale 0 --gateway-token secret
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import uvicorn
from dotenv import load_dotenv

from apexsure.api.mock_backend import create_mock_backend

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the ApexSure backend mocks")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=9090)
    parser.add_argument("--latency-scale", type=float, default=1.0, help="0 disables simulated latency")
    parser.add_argument("--gateway-token", default=None, help="Bearer token accepted by /gateway/policy")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    logger.info("=" * 50)
    logger.info("ApexSure Backend Mock Services on http://%s:%s", args.host, args.port)
    logger.info("  GET  /risk/{id}        - Risk Assessment Service")
    logger.info("  POST /soap/policy      - Legacy Policy Core (XML)")
    logger.info("  POST /policy           - Integrator policy endpoint")
    logger.info("  POST /gateway/policy   - Gateway policy endpoint (bearer token)")
    logger.info("  GET  /health           - Health Check")
    logger.info("Test IDs: 1111 -> Low Risk (850), 2222 -> High Risk (500)")
    logger.info("=" * 50)

    app = create_mock_backend(latency_scale=args.latency_scale, gateway_token=args.gateway_token)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
