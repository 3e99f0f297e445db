# File: src/auxtrack/core/validators.py
"""Reusable validation utilities for input sanitization."""

import re

NOTES_MAX_LENGTH = 1000
DEPARTMENT_MAX_LENGTH = 100


def sanitize_html(value: str | None) -> str | None:
    """
    Strip/escape HTML tags to prevent XSS.

    Args:
        value: Text that may contain HTML

    Returns:
        Sanitized text or None if empty
    """
    if not value:
        return None

    # Remove all HTML tags
    cleaned = re.sub(r"<[^>]+>", "", value)

    # Escape remaining special chars
    cleaned = (
        cleaned.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )

    return cleaned.strip() if cleaned.strip() else None


def sanitize_text(value: str | None, max_length: int, label: str = "Text") -> str | None:
    """Sanitize free text; the length limit applies to the stored, escaped text."""
    cleaned = sanitize_html(value)
    if cleaned is not None and len(cleaned) > max_length:
        raise ValueError(f"{label} cannot exceed {max_length} characters once escaped")
    return cleaned


def validate_email(value: str) -> str:
    """
    Basic email format validation.

    Returns:
        Lowercase email

    Raises:
        ValueError: If format is invalid
    """
    cleaned = value.strip().lower()

    pattern = r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$"
    if not re.match(pattern, cleaned):
        raise ValueError("Invalid email format")

    return cleaned


def validate_full_name(value: str) -> str:
    """Letters (any script), spaces, dots, hyphens and apostrophes only."""
    cleaned = " ".join(value.split())
    if not cleaned:
        raise ValueError("Full name cannot be empty")
    if len(cleaned) > 200:
        raise ValueError("Full name cannot exceed 200 characters")
    if not all(ch.isalpha() or ch in " .'-" for ch in cleaned):
        raise ValueError("Full name can only contain letters, spaces, dots, hyphens, and apostrophes")
    return cleaned
