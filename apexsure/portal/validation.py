"""Validation for the application form before it is submitted.

The wizard hands over a dictionary (or an already built ``ApplicationInput``).
On failure raise ``ApplicationValidationError`` with per-field messages; the
workflow turns it into a VALIDATION error and never dispatches the request.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from apexsure.integrations.contracts.interfaces import MINIMUM_COVERAGE_AMOUNT, ApplicationInput

DEFAULT_FORM_VALUES = {"name": "John Doe", "nationalId": "1111", "coverageAmount": "100000"}

COVERAGE_PRESETS = (
    {"value": 50_000, "label": "$50K", "description": "Basic Protection"},
    {"value": 100_000, "label": "$100K", "description": "Standard Coverage"},
    {"value": 250_000, "label": "$250K", "description": "Premium Plan"},
    {"value": 500_000, "label": "$500K", "description": "Elite Coverage"},
)

ESTIMATED_MONTHLY_RATE = 0.0025


@dataclass
class ApplicationValidationError(Exception):
    """Exception raised for form validation failures.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: optional top-level message.
    """

    field_errors: Dict[str, str]
    message: str = "Validation failed"

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    @property
    def detail(self) -> str:
        return "; ".join(f"{field}: {msg}" for field, msg in self.field_errors.items())


def _strip(v: Any) -> str:
    return "" if v is None else str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def _to_whole_amount(raw: Any) -> Optional[int]:
    """Truncate a numeric string or number to an int; ``None`` if not a finite number."""
    if isinstance(raw, bool):
        return None
    try:
        amount = float(_strip(raw))
    except ValueError:
        return None
    if not math.isfinite(amount):
        return None
    return int(amount)


def _parse_coverage(raw: Any, errors: Dict[str, str]) -> int:
    text = _strip(raw)
    if not text:
        add_error(errors, "coverageAmount", "Coverage amount is required")
        return 0
    amount = _to_whole_amount(raw)
    if amount is None:
        add_error(errors, "coverageAmount", "Coverage amount must be a number")
        return 0
    if amount < MINIMUM_COVERAGE_AMOUNT:
        add_error(errors, "coverageAmount", f"Coverage amount must be at least {MINIMUM_COVERAGE_AMOUNT:,}")
    return amount


def validate_application(form_data: Union[ApplicationInput, Mapping[str, Any]]) -> ApplicationInput:
    """Return a validated ``ApplicationInput`` or raise ``ApplicationValidationError``.

    Accepts both the wire keys (``name``, ``nationalId``, ``coverageAmount``)
    and the model field names.
    """
    if isinstance(form_data, ApplicationInput):
        return form_data

    errors: Dict[str, str] = {}
    name = _strip(form_data.get("name", form_data.get("full_name")))
    national_id = _strip(form_data.get("nationalId", form_data.get("national_id")))
    if not name:
        add_error(errors, "name", "Full name is required")
    if not national_id:
        add_error(errors, "nationalId", "National ID is required")
    coverage = _parse_coverage(form_data.get("coverageAmount", form_data.get("coverage_amount")), errors)

    if errors:
        raise ApplicationValidationError(errors, message="Please correct the highlighted fields")

    return ApplicationInput(full_name=name, national_id=national_id, coverage_amount=coverage)


def estimate_monthly_premium(coverage_amount: Any) -> float:
    """Premium preview shown on the review step; the backend quote is authoritative."""
    amount = _to_whole_amount(coverage_amount) or 0
    return round(amount * ESTIMATED_MONTHLY_RATE, 2)
