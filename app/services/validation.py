"""
app/services/validation.py — Form rules for client and interaction input.

Each validate_* function returns a {field: message} dict (empty when valid);
the ensure_* variants raise ValidationError instead.
"""

import re

from app.errors import ValidationError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100

PHONE_PATTERN = re.compile(r"^\+?[0-9\s\-()]+$")
PHONE_MIN_DIGITS = 10
PHONE_MAX_LENGTH = 20

DESCRIPTION_MIN_LENGTH = 5
DESCRIPTION_MAX_LENGTH = 500


def _name_error(name: str) -> str | None:
    name = (name or "").strip()
    if not name:
        return "Name is required"
    if len(name) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters"
    if len(name) > NAME_MAX_LENGTH:
        return f"Name cannot be longer than {NAME_MAX_LENGTH} characters"
    return None


def _phone_error(phone: str) -> str | None:
    phone = (phone or "").strip()
    if not phone:
        return "Phone is required"
    if not PHONE_PATTERN.match(phone):
        return "Phone has an invalid format"
    if len(re.sub(r"\D", "", phone)) < PHONE_MIN_DIGITS:
        return f"Phone must have at least {PHONE_MIN_DIGITS} digits"
    if len(phone) > PHONE_MAX_LENGTH:
        return f"Phone cannot be longer than {PHONE_MAX_LENGTH} characters"
    return None


def validate_client_form(name: str | None = None, phone: str | None = None, partial: bool = False) -> dict[str, str]:
    """
    Check client fields. With partial=True (updates), fields left as None are skipped.
    """
    checks = {}
    if not (partial and name is None):
        checks["name"] = _name_error(name)
    if not (partial and phone is None):
        checks["phone"] = _phone_error(phone)
    return {field: message for field, message in checks.items() if message}


def validate_interaction_form(description: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    description = (description or "").strip()
    if not description:
        errors["description"] = "Description is required"
    elif len(description) < DESCRIPTION_MIN_LENGTH:
        errors["description"] = f"Description must be at least {DESCRIPTION_MIN_LENGTH} characters"
    elif len(description) > DESCRIPTION_MAX_LENGTH:
        errors["description"] = f"Description cannot be longer than {DESCRIPTION_MAX_LENGTH} characters"
    return errors


def ensure_valid_client(name: str | None = None, phone: str | None = None, partial: bool = False) -> None:
    errors = validate_client_form(name, phone, partial=partial)
    if errors:
        raise ValidationError(errors)


def ensure_valid_interaction(description: str) -> None:
    errors = validate_interaction_form(description)
    if errors:
        raise ValidationError(errors)
