"""Origin allow-list matching.

The allow-list is an ordered tuple of patterns. A pattern is either an exact
origin such as ``https://example.com`` or a wildcard of the form
``*.example.com``. Wildcards are reduced to their base by removing ``*.`` and
compared as a plain string suffix, so ``*.example.com`` also admits
``example.com`` and ``notexample.com``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence, Union

from .config.cors import ALLOW_HEADERS, ALLOW_METHODS, parse_allowed_origins


@dataclass(frozen=True)
class Allowed:
    """The origin may receive cross-origin headers."""

    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Blocked:
    """The origin matched no pattern."""

    origin: str


Decision = Union[Allowed, Blocked]


def cors_headers(origin: str) -> dict[str, str]:
    """Return the response headers granted to ``origin``."""
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Credentials": "true",
    }


def matches(origin: str, pattern: str) -> bool:
    """Return ``True`` when ``origin`` satisfies a single allow-list ``pattern``."""
    if "*" in pattern:
        return origin.endswith(pattern.replace("*.", "", 1))
    return origin == pattern


def is_allowed(origin: str | None, patterns: Iterable[str]) -> bool:
    """Return ``True`` when ``origin`` is absent or matches any pattern."""

    if not origin:
        return True
    for pattern in patterns:
        if not pattern:
            continue
        if matches(origin, pattern):
            return True
    return False


class OriginPolicy:
    """Immutable allow-list producing a :data:`Decision` per origin."""

    def __init__(self, patterns: Sequence[str] = ()) -> None:
        self._patterns = tuple(patterns)

    @classmethod
    def from_string(cls, raw: str | None) -> "OriginPolicy":
        return cls(parse_allowed_origins(raw))

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    def decide(self, origin: str | None) -> Decision:
        if not is_allowed(origin, self._patterns):
            return Blocked(origin or "")
        # No Origin header: nothing to echo back, so no headers are granted.
        if not origin:
            return Allowed()
        return Allowed(cors_headers(origin))

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"OriginPolicy({list(self._patterns)!r})"
