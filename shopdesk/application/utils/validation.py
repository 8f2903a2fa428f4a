from __future__ import annotations

import math
import re

from shopdesk.application.exceptions import ValidationError

CUSTOMER_PHONE_PATTERN = re.compile(r"^09\d{8}$")
ACCOUNT_PHONE_PATTERN = re.compile(r"^0\d{9}$")
STRONG_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[\d\W_]).{6,}$")


def is_customer_phone(phone: str) -> bool:
    return bool(CUSTOMER_PHONE_PATTERN.match(phone or ""))


def is_account_phone(phone: str) -> bool:
    return bool(ACCOUNT_PHONE_PATTERN.match(phone or ""))


def require_customer_phone(phone: str) -> str:
    cleaned = (phone or "").strip()
    if not is_customer_phone(cleaned):
        raise ValidationError("Phone must be 10 digits starting with 09.")
    return cleaned


def require_account_phone(phone: str) -> str:
    cleaned = (phone or "").strip()
    if not is_account_phone(cleaned):
        raise ValidationError("Phone must be 10 digits starting with 0.")
    return cleaned


def password_rules(password: str) -> dict[str, bool]:
    """Per-rule breakdown shown next to the password field."""
    password = password or ""
    return {
        "length": len(password) >= 6,
        "upper": bool(re.search(r"[A-Z]", password)),
        "lower": bool(re.search(r"[a-z]", password)),
        "digit_or_symbol": bool(re.search(r"[\d\W_]", password)),
    }


def require_strong_password(password: str) -> str:
    if not STRONG_PASSWORD_PATTERN.match(password or ""):
        raise ValidationError("Password needs 6+ characters with upper, lower and a digit or symbol.")
    return password


def parse_amount(value: object, field_name: str = "amount") -> float:
    """Parse a required numeric form value. Empty or non-numeric input is rejected."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required.")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError(f"{field_name} is required.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number.")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field_name} must be a number.")
    return number


def parse_optional_amount(value: object, field_name: str = "amount") -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    return parse_amount(value, field_name)
