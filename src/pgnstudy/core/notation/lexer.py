"""Movetext tokenizer producing a closed set of token kinds."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias

from pgnstudy.core.notation.models import RESULT_TOKENS

GLYPH_NAGS: dict[str, str] = {
    "!": "$1",
    "?": "$2",
    "!!": "$3",
    "??": "$4",
    "!?": "$5",
    "?!": "$6",
}

# Evaluation symbols only recognised as standalone tokens.
_SYMBOL_NAGS: dict[str, str] = {
    "=": "$10",
    "∞": "$13",
    "+=": "$14",
    "=+": "$15",
    "+/-": "$16",
    "-/+": "$17",
    "+-": "$18",
    "-+": "$19",
}

_DELIMITERS = frozenset("{}();$")
_MOVE_NUMBER_RE = re.compile(r"^(\d+)(\.+)(.*)$")
_GLYPH_SUFFIX_RE = re.compile(r"^(.*?)([!?]+)$")
_NAG_RE = re.compile(r"^\$\d+$")
_ZERO_CASTLE_RE = re.compile(r"^0-0(-0)?([+#]?)$")
_IGNORED_TOKENS = frozenset({"e.p.", "..."})


@dataclass(slots=True, frozen=True)
class MoveToken:
    san: str
    line: int


@dataclass(slots=True, frozen=True)
class MoveNumberToken:
    number: int
    line: int


@dataclass(slots=True, frozen=True)
class NagToken:
    code: str
    line: int


@dataclass(slots=True, frozen=True)
class CommentToken:
    text: str
    line: int


@dataclass(slots=True, frozen=True)
class VariationStart:
    line: int


@dataclass(slots=True, frozen=True)
class VariationEnd:
    line: int


@dataclass(slots=True, frozen=True)
class ResultToken:
    result: str
    line: int


Token: TypeAlias = (
    MoveToken
    | MoveNumberToken
    | NagToken
    | CommentToken
    | VariationStart
    | VariationEnd
    | ResultToken
)


def split_glyphs(suffix: str) -> list[str]:
    """Map a run of ``!``/``?`` characters to NAG codes, longest glyph first."""
    codes: list[str] = []
    idx = 0
    while idx < len(suffix):
        pair = suffix[idx : idx + 2]
        if len(pair) == 2 and pair in GLYPH_NAGS:
            codes.append(GLYPH_NAGS[pair])
            idx += 2
        else:
            codes.append(GLYPH_NAGS[suffix[idx]])
            idx += 1
    return codes


def normalize_comment(text: str) -> str:
    return " ".join(text.split())


def _classify_word(word: str, line: int, out: list[Token]) -> None:
    if word in RESULT_TOKENS:
        out.append(ResultToken(word, line))
        return
    if word in _IGNORED_TOKENS:
        return

    number_match = _MOVE_NUMBER_RE.match(word)
    if number_match is not None:
        out.append(MoveNumberToken(int(number_match.group(1)), line))
        rest = number_match.group(3)
        if rest:
            _classify_word(rest, line, out)
        return

    if word.startswith("..."):
        _classify_word(word[3:], line, out)
        return

    if word in _SYMBOL_NAGS:
        out.append(NagToken(_SYMBOL_NAGS[word], line))
        return

    glyph_match = _GLYPH_SUFFIX_RE.match(word)
    san = word
    glyphs: list[str] = []
    if glyph_match is not None:
        san, suffix = glyph_match.groups()
        glyphs = split_glyphs(suffix)
    if san:
        castle = _ZERO_CASTLE_RE.match(san)
        if castle is not None:
            san = ("O-O-O" if castle.group(1) else "O-O") + castle.group(2)
        out.append(MoveToken(san, line))
    out.extend(NagToken(code, line) for code in glyphs)


def tokenize(movetext: str, *, first_line: int = 1) -> list[Token]:
    """Tokenize PGN movetext.

    ``{`` comments end at the first ``}`` (PGN comments do not nest); an
    unterminated comment runs to the end of the text. Line numbers are
    1-based and offset by *first_line*.
    """
    tokens: list[Token] = []
    line = first_line
    idx = 0
    total = len(movetext)

    while idx < total:
        ch = movetext[idx]

        if ch == "\n":
            line += 1
            idx += 1
            continue

        if ch.isspace():
            idx += 1
            continue

        if ch == "{":
            end = movetext.find("}", idx + 1)
            if end < 0:
                end = total
            body = movetext[idx + 1 : end]
            tokens.append(CommentToken(normalize_comment(body), line))
            line += body.count("\n")
            idx = end + 1
            continue

        if ch == ";":
            end = movetext.find("\n", idx + 1)
            if end < 0:
                end = total
            tokens.append(CommentToken(normalize_comment(movetext[idx + 1 : end]), line))
            idx = end
            continue

        if ch == "(":
            tokens.append(VariationStart(line))
            idx += 1
            continue

        if ch == ")":
            tokens.append(VariationEnd(line))
            idx += 1
            continue

        if ch == "}":
            # Stray closing brace outside any comment.
            idx += 1
            continue

        token_end = idx + 1
        while (
            token_end < total
            and not movetext[token_end].isspace()
            and movetext[token_end] not in _DELIMITERS
        ):
            token_end += 1
        word = movetext[idx:token_end]
        idx = token_end

        if _NAG_RE.match(word):
            tokens.append(NagToken(word, line))
            continue
        if word == "$":
            continue
        _classify_word(word, line, tokens)

    return tokens
