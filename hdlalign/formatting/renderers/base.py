"""Helpers shared by the construct renderer mixins."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from hdlalign.config import AlignConfig
from hdlalign.syntax.kinds import WRAPPER_KINDS, node_kind
from hdlalign.syntax.nodes import CommentInfo, SyntaxNode

from ..comments import CommentLedger, iter_comments
from ..layout import indent_for
from ..reconstruct import Reconstructor

_WORD_END = re.compile(r"\w$")


def unwrap(node: SyntaxNode) -> Tuple[SyntaxNode, Optional[SyntaxNode], List[SyntaxNode]]:
    """Strip transparent wrappers.

    Returns the innermost node, the ``;`` token a wrapper contributed (if
    any) and the wrappers that were removed, outermost first. A wrapper is
    only removed when it holds exactly one non-terminal and at most a
    trailing ``;``.
    """
    terminator: Optional[SyntaxNode] = None
    wrappers: List[SyntaxNode] = []
    while node_kind(node.name) in WRAPPER_KINDS:
        inner = [child for child in node.children if not child.is_terminal]
        tokens = [child for child in node.children if child.is_terminal]
        if len(inner) != 1 or len(tokens) > 1:
            break
        if tokens and (tokens[0].text != ";" or node.children[-1] is not tokens[0]):
            break
        wrappers.append(node)
        if tokens and terminator is None:
            terminator = tokens[0]
        node = inner[0]
    return node, terminator, wrappers


def split_on(nodes: Iterable[SyntaxNode], lexeme: str = ",") -> List[Tuple[List[SyntaxNode], Optional[SyntaxNode]]]:
    """Group ``nodes`` between separator tokens, keeping each group's separator."""
    groups: List[Tuple[List[SyntaxNode], Optional[SyntaxNode]]] = []
    current: List[SyntaxNode] = []
    for node in nodes:
        if node.is_terminal and node.text == lexeme:
            groups.append((current, node))
            current = []
        else:
            current.append(node)
    if current:
        groups.append((current, None))
    return groups


def index_of(nodes: Sequence[SyntaxNode], lexeme: str, start: int = 0) -> int:
    for index in range(start, len(nodes)):
        if nodes[index].is_terminal and nodes[index].text == lexeme:
            return index
    return -1


def token_comments(*nodes: Optional[SyntaxNode]) -> List[CommentInfo]:
    """Every comment attached to ``nodes`` and their descendants, in order."""
    result: List[CommentInfo] = []
    for node in nodes:
        if node is not None:
            result.extend(iter_comments(node))
    return result


class RendererBase:
    """State and utilities every renderer mixin relies on."""

    config: AlignConfig
    ledger: CommentLedger
    raw: Reconstructor
    woven: Reconstructor

    def format_node(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        raise NotImplementedError

    def text(self, node: Optional[SyntaxNode]) -> str:
        return self.raw.text(node)

    def join_text(self, nodes: Iterable[SyntaxNode]) -> str:
        return self.raw.join(nodes)

    def spaced_text(self, nodes: Iterable[SyntaxNode]) -> str:
        """Keyword-style text: pieces separated by one space except around punctuation."""
        result = ""
        for node in nodes:
            piece = self.text(node)
            if not piece:
                continue
            if result and not (
                piece[0] in ";,)"
                or result.endswith(("(", "#", "@"))
                or (piece[0] == "(" and _WORD_END.search(result))
            ):
                result += " "
            result += piece
        return result

    def end_of_line(self, level: int, *nodes: Optional[SyntaxNode]) -> str:
        """Unwritten comments of ``nodes`` rendered after the code on a line."""
        return self.ledger.inline(token_comments(*nodes), indent_for(level))

    def strip_indent(self, text: str, level: int) -> str:
        prefix = indent_for(level)
        if prefix and text.startswith(prefix):
            return text[len(prefix):]
        return text

    def format_items(self, nodes: Iterable[SyntaxNode], level: int) -> str:
        return "".join(self.format_node(node, level) for node in nodes)

    def closing_line(
        self,
        token: Optional[SyntaxNode],
        text: str,
        level: int,
        extra: Iterable[CommentInfo] = (),
    ) -> str:
        """A closing keyword line such as ``end`` or ``endcase``.

        Comments in front of the keyword stay inside the block, one level
        deeper; comments after it stay on its line.
        """
        before = ""
        trailing: List[CommentInfo] = []
        if token is not None:
            before = self.ledger.emit(token.leading_comments, indent_for(level + 1))
            trailing = list(token.trailing_comments)
        after = self.ledger.inline(trailing + list(extra), indent_for(level))
        return f"{before}{indent_for(level)}{text}{after}\n"


__all__ = ["RendererBase", "index_of", "split_on", "token_comments", "unwrap"]
