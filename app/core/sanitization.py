"""
Free-text cleanup for everything a salesperson types in: HTML/JS is
stripped with bleach and lengths are capped before values reach the store.
"""
from typing import Iterable, Optional

import bleach

SHORT_MAX = 256
LONG_MAX = 4096


def sanitize_text(value: Optional[str], max_length: int = 1024) -> Optional[str]:
    """Tag-free, trimmed and capped copy of `value`; None for None or blank input."""
    if value is None:
        return None
    cleaned = bleach.clean(value, tags=[], strip=True)
    return cleaned.strip()[:max_length] or None


def sanitize_short(value: Optional[str]) -> Optional[str]:
    """Names, subjects, industry labels."""
    return sanitize_text(value, max_length=SHORT_MAX)


def sanitize_long(value: Optional[str]) -> Optional[str]:
    """Notes and activity bodies."""
    return sanitize_text(value, max_length=LONG_MAX)


def sanitize_labels(values: Iterable) -> list[str]:
    """Clean a list of short labels, dropping blanks and repeats, keeping order."""
    seen: list[str] = []
    for value in values:
        label = sanitize_short(str(value))
        if label and label not in seen:
            seen.append(label)
    return seen
