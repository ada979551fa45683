"""Best-effort flat recovery for fragments the tree builder rejects."""

from __future__ import annotations

import logging
import re

from pgnstudy.core.enums import Color
from pgnstudy.core.notation.headers import (
    resolve_result,
    starting_ply,
    unescape_tag_value,
)
from pgnstudy.core.notation.lexer import normalize_comment
from pgnstudy.core.notation.models import RESULT_TOKENS, GameRecord, MoveNode

_LOGGER = logging.getLogger(__name__)

_LENIENT_TAG_RE = re.compile(r'\[(\w+)\s+"((?:[^"\\]|\\.)*)"\s*\]')
_BRACE_COMMENT_RE = re.compile(r"\{([^}]*)(?:\}|\Z)")
_LINE_COMMENT_RE = re.compile(r";[^\n]*")
_INNER_VARIATION_RE = re.compile(r"\([^()]*\)")
_NAG_RE = re.compile(r"\$\d+")
_MOVE_NUMBER_RE = re.compile(r"\d+\.+")
_LENIENT_SAN_RE = re.compile(
    r"(?:O-O(?:-O)?|0-0(?:-0)?"
    r"|[KQRBN][a-h]?[1-8]?x?[a-h][1-8]"
    r"|[a-h](?:x[a-h])?[1-8](?:=?[QRBN])?)[+#]?"
)


def _strip_variations(text: str) -> str:
    while True:
        text, count = _INNER_VARIATION_RE.subn(" ", text)
        if count == 0:
            break
    stray_open = text.find("(")
    if stray_open >= 0:
        text = text[:stray_open]
    return text.replace(")", " ")


def _split_tags(fragment: str) -> tuple[dict[str, str], str]:
    headers: dict[str, str] = {}
    body: list[str] = []
    for line in fragment.splitlines():
        stripped = line.strip()
        tags = list(_LENIENT_TAG_RE.finditer(stripped)) if stripped.startswith("[") else []
        if not tags:
            body.append(line)
            continue
        for match in tags:
            key, raw_value = match.groups()
            headers[key] = unescape_tag_value(raw_value)
    return headers, "\n".join(body)


def recover_game(fragment: str) -> GameRecord | None:
    """Extract a flat mainline from *fragment*, dropping NAGs and variations.

    Brace comments are paired with moves by position: the Nth comment in the
    movetext (variations included) becomes ``comment_after`` of the Nth
    recovered move. Returns ``None`` when no move can be found. Never raises
    for ``str`` input.
    """
    _LOGGER.warning("Using fallback parser for malformed PGN fragment")
    headers, movetext = _split_tags(fragment)

    comments = [normalize_comment(m.group(1)) for m in _BRACE_COMMENT_RE.finditer(movetext)]
    movetext = _BRACE_COMMENT_RE.sub(" ", movetext)
    movetext = _LINE_COMMENT_RE.sub(" ", movetext)
    movetext = _strip_variations(movetext)
    movetext = _NAG_RE.sub(" ", movetext)

    sans: list[str] = []
    trailing_result: str | None = None
    for word in movetext.split():
        if word in RESULT_TOKENS:
            trailing_result = word
            continue
        word = _MOVE_NUMBER_RE.sub("", word, count=1).rstrip("!?")
        if not word or _LENIENT_SAN_RE.fullmatch(word) is None:
            continue
        if word.startswith("0-0"):
            word = word.replace("0", "O")
        sans.append(word)

    if not sans:
        return None

    first_ply = starting_ply(headers)
    moves = [
        MoveNode(ply=ply, side=Color.for_ply(ply), san=san)
        for ply, san in enumerate(sans, start=first_ply)
    ]
    for node, comment in zip(moves, comments):
        node.comment_after = comment or None
    return GameRecord(
        headers=headers,
        moves=moves,
        result=resolve_result(headers, trailing_result),
        fallback=True,
    )
