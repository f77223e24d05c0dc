"""
Input validation for account operations.

Plain functions returning an Error (or None), called by use cases before
anything touches the store.
"""

import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from tenant_iam.domain.entities import Language, Locale
from tenant_iam.libs.result import Error

PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,128}$"
)
PASSWORD_RULES = (
    "Password must be 8-128 characters and contain an uppercase letter, "
    "a lowercase letter, a digit and one of @$!%*?&"
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_password(password: str) -> Optional[Error]:
    if not PASSWORD_PATTERN.match(password or ""):
        return Error("INVALID_PASSWORD", PASSWORD_RULES, {"field": "password"})
    return None


def validate_email_address(email: str) -> Optional[Error]:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return Error("VALIDATION_ERROR", "Invalid email address", {"field": "email"})
    return None


def _validate_length(value: str, field: str, minimum: int, maximum: int) -> Optional[Error]:
    length = len((value or "").strip())
    if length < minimum or length > maximum:
        return Error(
            "VALIDATION_ERROR",
            f"{field} must be between {minimum} and {maximum} characters",
            {"field": field},
        )
    return None


def validate_full_name(full_name: str) -> Optional[Error]:
    return _validate_length(full_name, "full_name", 2, 100)


def validate_company_name(company_name: str) -> Optional[Error]:
    return _validate_length(company_name, "company_name", 2, 200)


def validate_language(language: str) -> Optional[Error]:
    if language not in Language.__members__:
        return Error(
            "VALIDATION_ERROR",
            f"language must be one of {', '.join(Language.__members__)}",
            {"field": "language"},
        )
    return None


def validate_locale(locale: str) -> Optional[Error]:
    if locale not in Locale.__members__:
        return Error(
            "VALIDATION_ERROR",
            f"locale must be one of {', '.join(Locale.__members__)}",
            {"field": "locale"},
        )
    return None


def first_error(*errors: Optional[Error]) -> Optional[Error]:
    for error in errors:
        if error is not None:
            return error
    return None
