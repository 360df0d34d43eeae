# booking_engine/services/customer/required_fields.py
"""
Per-establishment required customer fields.

Each establishment lists which customer fields its booking page requires.
The rules below pair a field name with the check applied when that field is
required; evaluation is a loop over the list, not a chain of conditionals.
"""
import re
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from booking_engine.core.errors import ValidationError

# Always required: phone is the customer identity and name is shown to staff
ALWAYS_REQUIRED = ("name", "phone")

PHONE_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str) -> str:
    """Digits only, so '(51) 98065-1119' and '51980651119' are the same customer"""
    return PHONE_DIGITS.sub("", phone or "")


def _text(max_length: int) -> Callable[[Any, date], Optional[str]]:
    def check(value, today):
        if not isinstance(value, str) or not value.strip():
            return "is required"
        if len(value) > max_length:
            return f"must be at most {max_length} characters"
        return None
    return check


def _phone(value, today):
    digits = normalize_phone(value) if isinstance(value, str) else ""
    if not 8 <= len(digits) <= 20:
        return "must contain between 8 and 20 digits"
    return None


def _email(value, today):
    if not value:
        return "is required"
    return None  # format already enforced by the request schema


def _birth_date(value, today):
    if not isinstance(value, date):
        return "is required"
    if value >= today:
        return "must be before today"
    return None


class FieldRule(NamedTuple):
    field: str
    check: Callable[[Any, date], Optional[str]]


REQUIRED_FIELD_RULES: List[FieldRule] = [
    FieldRule("name", _text(255)),
    FieldRule("phone", _phone),
    FieldRule("email", _email),
    FieldRule("last_name", _text(255)),
    FieldRule("birth_date", _birth_date),
]

KNOWN_FIELDS = tuple(rule.field for rule in REQUIRED_FIELD_RULES)


def validate_required_field_names(fields: Iterable[str]) -> List[str]:
    """Validate an establishment's configured list before saving it"""
    fields = list(fields)
    unknown = [f for f in fields if f not in KNOWN_FIELDS]
    if unknown:
        raise ValidationError(
            f"Unknown required fields: {unknown}",
            field="required_fields",
            allowed=list(KNOWN_FIELDS),
        )
    return [f for f in KNOWN_FIELDS if f in fields or f in ALWAYS_REQUIRED]


def validate_customer_fields(required_fields: Optional[Iterable[str]], data: Dict[str, Any], today: date) -> None:
    """
    Check customer data against the establishment's required fields.

    Optional fields that were sent anyway still have to be valid.

    Raises:
        ValidationError: with a per-field ``errors`` map
    """
    required = set(required_fields or ()) | set(ALWAYS_REQUIRED)
    errors = {}

    for rule in REQUIRED_FIELD_RULES:
        value = data.get(rule.field)
        if rule.field not in required and value in (None, ""):
            continue
        problem = rule.check(value, today)
        if problem:
            errors[rule.field] = f"{rule.field} {problem}"

    if errors:
        raise ValidationError("Invalid customer data", errors=errors)
