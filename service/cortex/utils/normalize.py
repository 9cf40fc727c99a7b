"""
Normalization utilities.

Ensures consistent format for names and identifiers coming out of the extractor
before they are matched against or written to the contacts table.
"""

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_name(value: Optional[str]) -> str:
    """
    Normalize a name part.

    - None -> ""
    - "  Sarah  " -> "Sarah"
    - "Mary   Ann" -> "Mary Ann"

    Case is preserved; matching is case-insensitive at query time.
    """
    if not value or not isinstance(value, str):
        return ""
    return _WHITESPACE.sub(" ", value).strip()


def normalize_email(value: Optional[str]) -> Optional[str]:
    """Lowercase and validate an email. Returns None if it doesn't look like one."""
    if not value or not isinstance(value, str):
        return None

    value = value.strip().lower()
    if value.startswith("mailto:"):
        value = value[len("mailto:"):]

    if not _EMAIL.match(value):
        return None
    return value


def normalize_phone(value: Optional[str]) -> Optional[str]:
    """
    Keep digits and a leading plus.

    "+1 (555) 012-3456" -> "+15550123456"
    Returns None when fewer than 3 digits remain.
    """
    if not value or not isinstance(value, str):
        return None

    value = value.strip()
    digits = ''.join(c for c in value if c.isdigit())
    if len(digits) < 3:
        return None
    return ("+" if value.startswith("+") else "") + digits


def normalize_tags(values: Optional[list]) -> list[str]:
    """Lowercase, strip, drop empties and duplicates, keep first-seen order."""
    tags: list[str] = []
    for value in values or []:
        if not isinstance(value, str):
            continue
        tag = normalize_name(value).lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def escape_like(value: str) -> str:
    """
    Escape LIKE/ILIKE wildcards so the value is matched literally.
    PostgREST reads `*` in a like pattern as `%`, so it is escaped too.

    "100%_real" -> "100\\%\\_real"
    """
    return (
        value.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
        .replace("*", "\\*")
    )


def full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    """Display name from name parts: ("Sarah", "") -> "Sarah"."""
    return " ".join(p for p in (normalize_name(first_name), normalize_name(last_name)) if p)
