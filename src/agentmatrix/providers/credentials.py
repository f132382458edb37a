"""Credential sanitation.

An absent credential is not an error: it routes the adapter to the mock
path without any network attempt.
"""

from __future__ import annotations

import re

_DISALLOWED = re.compile(r"[^A-Za-z0-9-]")
_PLACEHOLDER_MARKER = "placeholder"


def sanitize_credential(raw: str | None, *, prefix: str = "sk-") -> str | None:
    """Return a usable credential, or None when it should count as absent.

    Every character outside ``[A-Za-z0-9-]`` is stripped (stray quotes,
    whitespace and newlines from copy-pasted keys). The credential is absent
    when nothing is left, when the raw value mentions ``placeholder``, or
    when it lacks the required ``prefix`` (an empty prefix disables that
    check).

    Example::

        sanitize_credential(' "sk-abc123"\\n')   # "sk-abc123"
        sanitize_credential("sk-placeholder")    # None
        sanitize_credential("not-a-key")         # None
    """
    if raw is None:
        return None
    if _PLACEHOLDER_MARKER in raw.lower():
        return None
    key = _DISALLOWED.sub("", raw.strip())
    if not key:
        return None
    if prefix and not key.startswith(prefix):
        return None
    return key
