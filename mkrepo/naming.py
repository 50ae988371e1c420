"""Project name normalization."""

import re

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9_-]")
FLAG_LIKE = re.compile(r"^--?[\w-]+$")


def sanitize(raw: str) -> str:
    """Normalize a free-form string into a filesystem- and tool-safe name.

    Trims, lowercases, turns whitespace runs into a single hyphen, drops
    anything outside ``[a-z0-9-_]`` and strips hyphens from both ends.
    Idempotent. An empty result is for the caller to reject.

    Examples:
        >>> sanitize("  My Cool App! ")
        'my-cool-app'
        >>> sanitize("///!!!")
        ''
    """
    name = raw.strip().lower()
    name = _WHITESPACE.sub("-", name)
    name = _DISALLOWED.sub("", name)
    return name.strip("-")


def looks_like_flag(token: str) -> bool:
    return FLAG_LIKE.match(token) is not None
