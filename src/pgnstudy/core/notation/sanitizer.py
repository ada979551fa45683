"""Input scrubbing applied before any PGN parsing."""

from __future__ import annotations

import logging
import re

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_COMMENT_LENGTH = 2000

# Tags never span comment braces or lines.
_HTML_TAG_RE = re.compile(r"</?[A-Za-z!][^<>{}\n]*>")
# C0 controls except \t \n \r, DEL, C1 controls and the byte-order mark.
_CONTROL_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufeff]")
_COMMENT_RE = re.compile(r"\{([^}]*)(\}|\Z)")


def sanitize_pgn(
    text: str,
    *,
    max_comment_length: int = DEFAULT_MAX_COMMENT_LENGTH,
) -> str:
    """Return *text* with markup, control characters and oversized comments elided.

    Everything else is preserved unchanged, including UTF-8 header values.
    """
    cleaned, tag_count = _HTML_TAG_RE.subn("", text)
    cleaned, control_count = _CONTROL_RE.subn("", cleaned)

    truncated = 0

    def _clip(match: re.Match[str]) -> str:
        nonlocal truncated
        body = match.group(1)
        if len(body) <= max_comment_length:
            return match.group(0)
        truncated += 1
        return "{" + body[:max_comment_length] + match.group(2)

    cleaned = _COMMENT_RE.sub(_clip, cleaned)

    if tag_count or control_count or truncated:
        _LOGGER.debug(
            "Sanitized PGN input: %d tag(s), %d control char(s), %d comment(s) truncated",
            tag_count,
            control_count,
            truncated,
        )
    return cleaned
