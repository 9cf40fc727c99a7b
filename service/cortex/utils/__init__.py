from .normalize import (
    normalize_name,
    normalize_email,
    normalize_phone,
    normalize_tags,
    escape_like,
    full_name,
)

__all__ = [
    "normalize_name",
    "normalize_email",
    "normalize_phone",
    "normalize_tags",
    "escape_like",
    "full_name",
]
