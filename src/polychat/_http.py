"""Small HTTP-related constants shared across Polychat.

This module is intentionally tiny to avoid circular imports and drift.
"""

from __future__ import annotations

# Upstream bodies and response dumps are cut to this many characters before
# they are embedded in error messages or diagnostic text.
DIAGNOSTIC_TRUNCATE_CHARS = 200

API_KEY_PLACEHOLDER = "{{API_KEY}}"
MODEL_ID_PLACEHOLDER = "{{MODEL_ID}}"

DEFAULT_HEADERS: dict[str, str] = {"Content-Type": "application/json"}


def truncate(text: str, limit: int = DIAGNOSTIC_TRUNCATE_CHARS) -> str:
    """Return the first *limit* characters of *text*."""
    return text[:limit]
