"""Build a move tree from PGN movetext."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from pgnstudy.core.enums import Color
from pgnstudy.core.errors import MoveGrammarError
from pgnstudy.core.notation.lexer import (
    CommentToken,
    MoveNumberToken,
    MoveToken,
    NagToken,
    ResultToken,
    VariationEnd,
    VariationStart,
    tokenize,
)
from pgnstudy.core.notation.models import MoveNode, Variation

_LOGGER = logging.getLogger(__name__)

SAN_RE = re.compile(
    r"^(?:"
    r"O-O(?:-O)?"
    r"|[KQRBN][a-h]?[1-8]?x?[a-h][1-8]"
    r"|[a-h](?:x[a-h])?[1-8](?:=?[QRBN])?"
    r"|--"
    r")[+#]?$"
)


def is_san_shaped(token: str) -> bool:
    """Cheap syntactic check; legality is the rules engine's business."""
    return SAN_RE.match(token) is not None


@dataclass(slots=True)
class MoveTreeResult:
    """Mainline moves plus what the scan learned about the movetext tail."""

    moves: list[MoveNode]
    trailing_result: str | None = None
    halted_at: str | None = None


@dataclass(slots=True)
class _LineContext:
    nodes: list[MoveNode]
    next_ply: int
    opened_at: int
    branch_point: MoveNode | None = None
    pending_comments: list[str] = field(default_factory=list)
    after_move: bool = False

    def take_pending(self) -> str | None:
        if not self.pending_comments:
            return None
        text = " ".join(self.pending_comments)
        self.pending_comments.clear()
        return text

    def flush_pending(self) -> None:
        """Attach comments with no following move to the last move of the line."""
        text = self.take_pending()
        if text is None:
            return
        if not self.nodes:
            _LOGGER.debug("Dropping comment with no move to attach to: %r", text)
            return
        _append_after(self.nodes[-1], text)


def _append_after(node: MoveNode, text: str) -> None:
    if node.comment_after:
        node.comment_after = f"{node.comment_after} {text}"
    else:
        node.comment_after = text


def build_move_tree(
    movetext: str,
    *,
    start_ply: int = 1,
    first_line: int = 1,
) -> MoveTreeResult:
    """Parse *movetext* into a mainline with nested variations.

    A malformed move at the top level stops move building and keeps the
    moves read so far; the rest of the text is still checked for an
    unclosed variation. Unbalanced parentheses and malformed moves inside a
    variation raise :class:`MoveGrammarError`.
    """
    root = _LineContext(nodes=[], next_ply=start_ply, opened_at=first_line)
    stack: list[_LineContext] = [root]
    trailing_result: str | None = None
    halted_at: str | None = None
    # Lines of "(" seen after a halt, still checked for balance.
    skipped_opens: list[int] = []

    for token in tokenize(movetext, first_line=first_line):
        if halted_at is not None:
            if isinstance(token, VariationStart):
                skipped_opens.append(token.line)
            elif isinstance(token, VariationEnd) and skipped_opens:
                skipped_opens.pop()
            elif isinstance(token, ResultToken) and not skipped_opens:
                trailing_result = token.result
                break
            continue

        ctx = stack[-1]

        if isinstance(token, MoveToken):
            if not is_san_shaped(token.san):
                if len(stack) > 1:
                    raise MoveGrammarError(
                        f"Malformed move {token.san!r} inside variation", token.line
                    )
                halted_at = f"{token.san!r} at line {token.line}"
                _LOGGER.info("Stopped mainline at malformed move %s", halted_at)
                continue
            node = MoveNode(
                ply=ctx.next_ply,
                side=Color.for_ply(ctx.next_ply),
                san=token.san,
                comment_before=ctx.take_pending(),
            )
            ctx.nodes.append(node)
            ctx.next_ply += 1
            ctx.after_move = True

        elif isinstance(token, CommentToken):
            if not token.text:
                continue
            if ctx.after_move and ctx.nodes:
                _append_after(ctx.nodes[-1], token.text)
            else:
                ctx.pending_comments.append(token.text)

        elif isinstance(token, NagToken):
            if ctx.nodes:
                ctx.nodes[-1].nags.append(token.code)
            else:
                _LOGGER.debug("Ignoring %s before any move (line %d)", token.code, token.line)

        elif isinstance(token, MoveNumberToken):
            ctx.after_move = False

        elif isinstance(token, VariationStart):
            if not ctx.nodes:
                raise MoveGrammarError("Variation opened before any move", token.line)
            branch = ctx.nodes[-1]
            ctx.after_move = False
            stack.append(
                _LineContext(
                    nodes=[],
                    next_ply=branch.ply,
                    opened_at=token.line,
                    branch_point=branch,
                )
            )

        elif isinstance(token, VariationEnd):
            if len(stack) == 1:
                raise MoveGrammarError("Unmatched ')'", token.line)
            child = stack.pop()
            child.flush_pending()
            branch = child.branch_point
            if branch is None:
                raise MoveGrammarError("Variation has no branch point", token.line)
            if child.nodes:
                branch.variations.append(Variation.branching_from(branch, child.nodes))
            else:
                _LOGGER.debug("Dropping empty variation at line %d", token.line)

        elif isinstance(token, ResultToken):
            if len(stack) == 1:
                trailing_result = token.result
                break
            _LOGGER.debug("Ignoring result token inside variation (line %d)", token.line)

    if len(stack) > 1:
        raise MoveGrammarError("Unclosed variation", stack[-1].opened_at)
    if skipped_opens:
        raise MoveGrammarError("Unclosed variation", skipped_opens[-1])

    root.flush_pending()
    return MoveTreeResult(
        moves=root.nodes,
        trailing_result=trailing_result,
        halted_at=halted_at,
    )
