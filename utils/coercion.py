"""Conversion between stored record values and declared field types.

Write path: ``coerce_input`` turns form input into the JSON primitive that is
stored. Read path: ``read_value`` / ``display_value`` interpret whatever is
stored (possibly written under an older schema) against the declared type.
"""
import math
import re
from typing import Any

from models.category import FieldDefinition
from models.field_value import BooleanValue, FieldValue, NumberValue, TextValue
from utils.constants import FIELD_DEFAULTS, FIELD_TYPES, NOT_SET
from utils.errors import ValidationError

_TRUE_STRINGS = ("true", "yes", "1", "on")
_FALSE_STRINGS = ("false", "no", "0", "off", "")
# plain ASCII decimals only; int() and float() also take "1_000" and non-ASCII digits
_NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def default_for(field_type: str):
    """Value given to a field added to existing records by a migration."""
    return FIELD_DEFAULTS.get(field_type, "")


def infer_type(value: Any) -> str:
    """Best guess for a stored key that has no field definition."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "text"


# ── Write path ───────────────────────────────────────────────────────────────

def coerce_input(field: FieldDefinition, raw: Any):
    if field.type not in FIELD_TYPES:
        raise ValidationError(
            f"Field '{field.label}' has unknown type '{field.type}'.", field=field.name
        )
    if field.type == "boolean":
        return _coerce_boolean(field, raw)
    if field.type == "number":
        return _coerce_number(field, raw)
    return "" if raw is None else raw if isinstance(raw, str) else str(raw)


def _coerce_boolean(field: FieldDefinition, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    if isinstance(raw, (int, float)):
        return bool(raw)
    text = str(raw).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValidationError(f"{field.label} must be Yes or No.", field=field.name)


def _coerce_number(field: FieldDefinition, raw: Any) -> int | float | None:
    if isinstance(raw, bool):
        raise ValidationError(f"{field.label} must be a number.", field=field.name)
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        if not _NUMBER.fullmatch(text):
            raise ValidationError(
                f"{field.label} must be a number (got '{text}').", field=field.name
            )
        try:
            value = int(text)
        except ValueError:
            value = float(text)
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{field.label} must be a finite number.", field=field.name)
    return value


# ── Read path ────────────────────────────────────────────────────────────────

def read_value(field_type: str, stored: Any) -> FieldValue | None:
    """Interpret a stored value as the declared type; None means not set."""
    if stored is None or stored == "":
        return None
    if isinstance(stored, bool):
        return BooleanValue(stored)
    if field_type == "boolean":
        if isinstance(stored, (int, float)):
            return BooleanValue(bool(stored))
        text = str(stored).strip().lower()
        if text in _TRUE_STRINGS:
            return BooleanValue(True)
        if text in _FALSE_STRINGS:
            return BooleanValue(False)
        return TextValue(str(stored))
    if field_type == "number":
        if isinstance(stored, (int, float)):
            return NumberValue(stored)
        try:
            return NumberValue(float(str(stored).strip()))
        except ValueError:
            return TextValue(str(stored))
    if isinstance(stored, (int, float)):
        return NumberValue(stored)
    return TextValue(str(stored))


def display_value(field_type: str, stored: Any) -> str:
    value = read_value(field_type, stored)
    return value.display() if value is not None else NOT_SET


def edit_text(field_type: str, stored: Any) -> str:
    """Text shown in an entry box when editing; blank for unset values."""
    value = read_value(field_type, stored)
    if value is None or isinstance(value, BooleanValue):
        return ""
    return value.display()
