"""Split concatenated PGN text into per-game fragments."""

from __future__ import annotations

import re

_EVENT_LINE_RE = re.compile(r'^\[Event[\s"]')


def _is_tag_line(stripped: str) -> bool:
    return stripped.startswith("[") and stripped.endswith("]")


def _ends_inside_comment(line: str, in_comment: bool) -> bool:
    """Track ``{...}`` state across one line of movetext."""
    for ch in line:
        if in_comment:
            if ch == "}":
                in_comment = False
        elif ch == "{":
            in_comment = True
        elif ch == ";":
            # Rest-of-line comment: braces after it do not count.
            break
    return in_comment


def split_games(text: str) -> list[str]:
    """Partition *text* into game fragments, preserving order.

    A ``[Event`` tag line opens a new fragment unless the current fragment is
    still empty or the scanner sits inside an unterminated ``{`` comment, so
    comment bodies quoting ``[Event ...]`` never cause a false split. Text
    without any tag lines comes back as a single fragment.
    """
    fragments: list[str] = []
    current: list[str] = []
    in_comment = False

    for line in text.splitlines():
        stripped = line.strip()
        if (
            not in_comment
            and _EVENT_LINE_RE.match(stripped)
            and any(part.strip() for part in current)
        ):
            fragments.append("\n".join(current).strip())
            current = []

        current.append(line)
        if not in_comment and _is_tag_line(stripped):
            continue
        in_comment = _ends_inside_comment(line, in_comment)

    tail = "\n".join(current).strip()
    if tail:
        fragments.append(tail)
    return [fragment for fragment in fragments if fragment]
