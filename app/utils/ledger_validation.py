"""Ledger input validation shared by the API services and the ledger client."""
from typing import Optional

from bson import ObjectId

from app.core.exceptions import ValidationError
from app.models.ledger import ANONYMOUS_COUNTERPARTY, is_self_note


def validate_name(name: Optional[str], field: str = "name") -> str:
    """Return the trimmed name, rejecting blanks."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError(f"Please enter a {field}")
    if len(trimmed) > 100:
        raise ValidationError(f"{field.capitalize()} must be at most 100 characters")
    return trimmed


def validate_amount(amount) -> int:
    """
    Validate an amount in minor units.

    Rules:
    - must be an integer (bools are rejected)
    - must be strictly positive
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("Amount must be an integer number of minor units")
    if amount <= 0:
        raise ValidationError(f"Amount must be positive, got {amount}")
    return amount


def validate_currency(currency: Optional[str], default: str) -> str:
    code = (currency or "").strip().upper()
    if not code:
        return default.upper()
    if not code.isalpha() or not 2 <= len(code) <= 5:
        raise ValidationError(f"Invalid currency code: {currency!r}")
    return code


def is_valid_identity(value: str) -> bool:
    return ObjectId.is_valid(value)


def normalize_counterparty(counterparty: Optional[str]) -> str:
    """Blank input collapses to the anonymous placeholder."""
    if is_self_note(counterparty):
        return ANONYMOUS_COUNTERPARTY
    return counterparty.strip()


def validate_counterparty(counterparty: Optional[str]) -> str:
    """Client-side check: a non-blank counterparty must be a well-formed identity."""
    normalized = normalize_counterparty(counterparty)
    if normalized != ANONYMOUS_COUNTERPARTY and not is_valid_identity(normalized):
        raise ValidationError("Invalid counterparty identity format")
    return normalized
