from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Boolean, Integer, JSON, Numeric, String, Text
from sqlalchemy.orm import DeclarativeMeta


# Maximum price: 99,999,999.99 (fits Numeric(10, 2))
MAX_PRICE = Decimal("99999999.99")

# Largest signed 64-bit INTEGER
MAX_ID = 2**63 - 1


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate username)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Per-model rules for client payloads:
    - writable_fields: column keys a client may set
    - required_on_create: keys a POST must include
    - aliases: alternate client spellings (camelCase) mapped to column keys
    - ignored_fields: accepted but dropped (legacy clients send these)
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)
    aliases: dict[str, str] = field(default_factory=dict)
    ignored_fields: set[str] = field(default_factory=set)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _numeric_limit(coltype: Numeric) -> Decimal:
    """Largest value a Numeric(precision, scale) column holds; MAX_PRICE when unsized."""
    if coltype.precision is None:
        return MAX_PRICE
    scale = coltype.scale or 0
    return Decimal(10) ** (coltype.precision - scale) - Decimal(1).scaleb(-scale)


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Decimals before Integer: money travels as "12.34" strings or numbers
    if isinstance(coltype, Numeric):
        if isinstance(value, bool):
            raise ValidationError(f"{col.key} must be a number")
        if isinstance(value, (int, float, str, Decimal)):
            try:
                dec = Decimal(str(value).strip())
            except InvalidOperation:
                raise ValidationError(f"{col.key} must be a number")
            if not dec.is_finite():
                raise ValidationError(f"{col.key} must be a finite number")
            if dec.as_tuple().exponent < -2:
                raise ValidationError(f"{col.key} must have at most 2 decimal places")
            # Bound before quantize: huge magnitudes overflow the decimal context
            limit = _numeric_limit(coltype)
            if dec > limit:
                raise ValidationError(f"{col.key} cannot exceed {limit}")
            if dec < -limit:
                raise ValidationError(f"{col.key} cannot be below -{limit}")
            return dec.quantize(Decimal("0.01"))
        raise ValidationError(f"{col.key} must be a number")

    if isinstance(coltype, Integer):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lstrip("-").isdigit():
            return int(value.strip())
        raise ValidationError(f"{col.key} must be an integer")

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in {"true", "false", "1", "0"}:
            return value.strip().lower() in {"true", "1"}
        raise ValidationError(f"{col.key} must be a boolean")

    if isinstance(coltype, JSON):
        return value

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{col.key} must be a string")
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Turn a client JSON body into a patch dict for `model`.

    Aliased keys are renamed and ignored keys dropped first. Every remaining
    key must be writable under `policy` and map to a column; values are
    coerced to the column type and checked for nullability, blankness and
    String length. With partial=False the policy's required_on_create
    fields must all be present (POST); partial=True checks only what was
    sent (PUT).
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    normalized = {}
    for k, v in payload.items():
        if k in policy.ignored_fields:
            continue
        normalized[policy.aliases.get(k, k)] = v

    if not partial:
        missing = sorted(f for f in policy.required_on_create if f not in normalized)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in normalized.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in normalized.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def enforce_rules_product(patch: dict) -> None:
    """Price bounds and tag cleanup. Mutates `patch` in place."""
    for key in ("price", "old_price"):
        price = patch.get(key)
        if price is None:
            continue
        if price < 0:
            raise ValidationError(f"{key} must be >= 0")
        if price > MAX_PRICE:
            raise ValidationError(f"{key} cannot exceed {MAX_PRICE}")

    if "tags" in patch:
        tags = patch["tags"]
        if tags is None:
            patch["tags"] = []
        elif not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ValidationError("tags must be a list of strings")
        else:
            patch["tags"] = [t.strip() for t in tags if t.strip()]


def json_object(payload: Any) -> dict:
    """A request body as a dict; no body is {}. Arrays and scalars are rejected."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload


def parse_id(value: Any, name: str) -> int:
    """Positive integer id that fits a 64-bit INTEGER column."""
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer")
    if value < 1 or value > MAX_ID:
        raise ValidationError(f"{name} is out of range")
    return value


def pick(data: dict, *keys: str, default=None):
    """First key present in data (accepts snake_case and legacy camelCase spellings)."""
    for k in keys:
        if k in data:
            return data[k]
    return default
