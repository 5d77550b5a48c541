"""Custom validation utilities."""

import re

from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import InvalidInput


def normalize_email(email: str) -> str:
    """Validate an email address and return it trimmed and lowercased.

    Args:
        email: Raw email as typed by the customer

    Returns:
        str: Normalized email used for storage and comparisons

    Raises:
        InvalidInput: If the address is not syntactically valid
    """
    cleaned = (email or "").strip()
    try:
        validate_email(cleaned, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        raise InvalidInput("Invalid email address")
    return cleaned.lower()


def normalize_slug(slug: str) -> str:
    """Normalize a studio slug to lowercase, dash-separated form.

    Raises:
        InvalidInput: If nothing usable is left after normalizing
    """
    cleaned = slug.strip().lower()
    cleaned = re.sub(r"[^a-z0-9-]+", "-", cleaned)
    cleaned = "-".join(part for part in cleaned.split("-") if part)
    if not cleaned:
        raise InvalidInput("Slug must contain letters or digits")
    return cleaned


def normalize_phone(phone: str | None) -> str | None:
    """Strip formatting from an optional phone number.

    Returns:
        str | None: Digits with an optional leading '+', or None when blank
    """
    if phone is None:
        return None
    cleaned = re.sub(r"[^\d+]", "", phone)
    return cleaned or None
