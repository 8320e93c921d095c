"""Label matcher codec.

A matcher is a ``key=value`` token; a comma-joined token (``team=a,team=b``)
selects on any of its parts. The control plane interprets the grouping and the
order of matchers; here we only check syntax and keep the order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import LabelMatcherError

if TYPE_CHECKING:
    from collections.abc import Iterable


def parse_label_matcher(matcher: str) -> tuple[tuple[str, str], ...]:
    """Split one matcher into its ``(key, value)`` parts or raise ``LabelMatcherError``."""

    parts: list[tuple[str, str]] = []
    for part in matcher.split(","):
        count = part.count("=")
        if count == 0:
            raise LabelMatcherError(matcher, "expected key=value")
        if count > 1:
            raise LabelMatcherError(matcher, "expected a single '=' per label")
        key, value = part.split("=", 1)
        if not key.strip():
            raise LabelMatcherError(matcher, "key must not be empty")
        if not value.strip():
            raise LabelMatcherError(matcher, "value must not be empty")
        parts.append((key, value))
    return tuple(parts)


def validate_label_matchers(matchers: Iterable[str] | None) -> tuple[str, ...]:
    """Return the matchers unchanged and in order, failing on the first bad entry."""

    if matchers is None:
        return ()
    validated: list[str] = []
    for matcher in matchers:
        parse_label_matcher(matcher)
        validated.append(matcher)
    return tuple(validated)


def format_label_matchers(matchers: Iterable[str]) -> str:
    return " ".join(matchers) or "<none>"
