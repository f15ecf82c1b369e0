"""HTML escaping for free-text fields accepted from clients."""

from __future__ import annotations

import re

_HTML_ENTITIES = {
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "&": "&amp;",
}
_HTML_SPECIAL_RE = re.compile(r"[<>\"'&]")


def sanitize_input(text: str) -> str:
    """Trim text and escape HTML-significant characters in a single pass.

    Not idempotent: escaping already-escaped text escapes ``&`` again, so
    sanitize exactly once where the value enters the system.
    """
    return _HTML_SPECIAL_RE.sub(lambda match: _HTML_ENTITIES[match.group(0)], text.strip())
