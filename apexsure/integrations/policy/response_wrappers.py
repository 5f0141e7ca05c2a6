from __future__ import annotations

import math
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ValidationError

from apexsure.integrations.contracts.interfaces import PolicyStatus
from apexsure.integrations.contracts.submission import PolicyIssued, PolicyReferred


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.payload = payload if payload is not None else {}


def normalize_policy_response(raw: Any) -> Union[PolicyIssued, PolicyReferred]:
    """Turn a decoded 2xx body into an issued or referred outcome.

    Only ``status == "Referred"`` counts as a referral; any other status is
    treated as an issued policy and passed through unchanged.
    """
    if not isinstance(raw, dict):
        raise IntegrationResponseError(
            f"Expected a JSON object, got {type(raw).__name__}.",
            payload=raw,
        )

    status = _first_non_empty(raw, "status", default=PolicyStatus.ACTIVE.value)

    if str(status) == PolicyStatus.REFERRED.value:
        return _build_model(
            PolicyReferred,
            {"status": str(status), "reason": _optional_str(raw, "reason")},
            raw,
        )

    return _build_model(
        PolicyIssued,
        {
            "policy_id": _optional_str(raw, "policyId", "policy_id", "id"),
            "status": str(status),
            "premium": _coerce_optional_amount(raw.get("premium"), "premium"),
        },
        raw,
    )


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _optional_str(data: Dict[str, Any], *keys: str) -> Optional[str]:
    value = _first_non_empty(data, *keys, default="")
    return str(value) if value != "" else None


def _coerce_optional_amount(value: Any, label: str) -> Optional[Union[int, float]]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise IntegrationResponseError(f"Invalid {label}: {value!r}")
    if isinstance(value, (int, float)):
        amount = value
    else:
        try:
            amount = float(value)
        except (TypeError, ValueError) as exc:
            raise IntegrationResponseError(f"Invalid {label}: {value!r}") from exc
    if isinstance(amount, float) and not math.isfinite(amount):
        raise IntegrationResponseError(f"Invalid {label}: {value!r}")
    return amount


def _build_model(model_type: type[BaseModel], payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
