"""
Contracts (data models).

This folder defines the request/response shapes for the policy submission
integrations:
- applicant input and its wire payload
- the configured integration endpoints (direct integrator / API gateway)
- the classified outcome of one submission attempt

Both the real HTTP client and the mock backend rely on these shapes, so flows
never have to guess payload formats in multiple places.
"""
