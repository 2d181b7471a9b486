from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# Maximum price: 9,999,999.99 (999,999,999 minor units)
MAX_PRICE_CENTS = 999_999_999

TEXT = "text"
OPTIONAL_TEXT = "optional_text"
INTEGER = "integer"
CENTS = "cents"


class ValidationError(ValueError):
    """400-level input problem."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - field_types: what clients are allowed to set and how each value is coerced
      (TEXT, OPTIONAL_TEXT, INTEGER, CENTS or an Enum class)
    - required_on_create: fields required for create
    """
    field_types: dict[str, Any]
    required_on_create: frozenset[str] = field(default_factory=frozenset)

    @property
    def writable_fields(self) -> set[str]:
        return set(self.field_types)


def coerce_int(key: str, value: Any) -> int:
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{key} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if '.' in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    # Reject floats explicitly
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    raise ValidationError(f"{key} must be an integer")


def coerce_cents(key: str, value: Any) -> int:
    cents = coerce_int(key, value)
    if cents < 0:
        raise ValidationError(f"{key} must be >= 0")
    if cents > MAX_PRICE_CENTS:
        raise ValidationError(f"{key} cannot exceed {MAX_PRICE_CENTS}")
    return cents


def require_text(key: str, value: Any) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValidationError(f"{key} is required")
    return text


def _coerce_value(key: str, kind: Any, value: Any) -> Any:
    if isinstance(kind, type) and issubclass(kind, Enum):
        if isinstance(value, kind):
            return value
        try:
            return kind(value)
        except ValueError:
            allowed = ", ".join(m.value for m in kind)
            raise ValidationError(f"{key} must be one of: {allowed}")

    if kind == TEXT:
        return require_text(key, value)

    if kind == OPTIONAL_TEXT:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    if kind == INTEGER:
        if value is None:
            raise ValidationError(f"{key} cannot be null")
        return coerce_int(key, value)

    if kind == CENTS:
        if value is None:
            raise ValidationError(f"{key} cannot be null")
        return coerce_cents(key, value)

    # Default: leave as-is
    return value


def validate_payload(*, payload: dict | None, policy: ModelValidationPolicy, partial: bool) -> dict:
    """
    Validates + normalizes an incoming field dict against the policy.
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(f for f in policy.required_on_create if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.field_types:
            raise ValidationError(f"Field not allowed: {k}")

    return {k: _coerce_value(k, policy.field_types[k], raw) for k, raw in payload.items()}
