"""
Real HTTP integration clients.

These clients talk to the configured policy endpoints over HTTP:
- the direct integrator (no credential)
- the API-manager gateway (bearer token)

Important:
- Must return outcomes shaped according to apexsure/integrations/contracts/*
"""

from .policy_submission import PolicySubmissionClient, build_headers, build_submission_request

__all__ = ["PolicySubmissionClient", "build_headers", "build_submission_request"]
