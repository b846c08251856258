"""CORS allow-list parsing and response header values."""

from __future__ import annotations

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, X-App-ID, Accept, Origin, X-Requested-With"


def parse_allowed_origins(raw: str | None) -> tuple[str, ...]:
    """Split ``raw`` on commas into an ordered tuple of origin patterns.

    Whitespace around each entry is trimmed and empty entries are dropped.
    Order and duplicates are preserved.
    """

    if not raw:
        return ()
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())
