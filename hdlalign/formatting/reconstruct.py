"""
Raw text reconstruction.

Turns any subtree back into source text with minimal, deterministic spacing:
operators get a fixed amount of surrounding whitespace and everything else is
joined by one adjacency rule (:func:`join_pieces`). No indentation and no
newlines are added, apart from the newline a woven-in line comment needs.
"""

from __future__ import annotations

import re
from typing import FrozenSet, Iterable, List, Optional

from hdlalign.syntax.kinds import RANGE_CONTEXT_KINDS, NodeKind, node_kind
from hdlalign.syntax.nodes import SyntaxNode

from .comments import CommentLedger

_WORD_CHAR = re.compile(r"\w")

# Characters that never get a space in front of / after them.
_NO_SPACE_BEFORE = frozenset("([{.,;:~!")
_NO_SPACE_AFTER = frozenset("([{.,")

EOF_LEXEME = "<EOF>"

BINARY_OPERATORS: FrozenSet[str] = frozenset({
    "+", "-", "*", "/", "%", "**",
    "==", "!=", "===", "!==",
    "&&", "||",
    "<", ">", ">=",
    "<<", ">>", "<<<", ">>>",
    "&", "|", "^", "^~", "~^",
})
UNARY_ONLY_OPERATORS: FrozenSet[str] = frozenset({"!", "~", "~&", "~|"})
BARE_LEXEMES: FrozenSet[str] = frozenset({",", ";", ".", "#", "@", "(", ")", "[", "]", "{", "}", "'"})

# Token kinds spaced the same way whatever their lexeme.
_KIND_SPACING = {
    "EOF": "",
    "COMMA": ",",
    "SEMI": ";",
    "DOT": ".",
    "HASH": "#",
    "AT": "@",
    "LPAREN": "(",
    "RPAREN": ")",
    "LBRACK": "[",
    "RBRACK": "]",
    "LBRACE": "{",
    "RBRACE": "}",
}


def join_pieces(pieces: Iterable[str]) -> str:
    """Concatenate reconstructed pieces, adding one space only between two words.

    A space goes in when the previous piece is non-blank and ends with a word
    character that is not an opener or separator, and the next piece starts
    (after any whitespace) with a word character that is not punctuation.
    """
    result = ""
    for piece in pieces:
        if not piece:
            continue
        if result and _needs_space(result, piece):
            result += " "
        result += piece
    return result


def _needs_space(previous: str, following: str) -> bool:
    if not previous.strip():
        return False
    stripped = following.lstrip()
    if not stripped or not _WORD_CHAR.match(stripped[0]):
        return False
    last = previous[-1]
    if not _WORD_CHAR.match(last):
        return False
    if following[0] in _NO_SPACE_BEFORE or last in _NO_SPACE_AFTER:
        return False
    return True


def terminal_text(token: SyntaxNode, parent: Optional[str] = None, position: int = 0, in_range: bool = False) -> str:
    """Spaced text of a single terminal."""
    lexeme = token.text
    if token.name == "EOF" or lexeme == EOF_LEXEME:
        return ""
    if token.name in _KIND_SPACING:
        return _KIND_SPACING[token.name]
    if lexeme in BARE_LEXEMES or lexeme in UNARY_ONLY_OPERATORS:
        return lexeme
    if lexeme == "?":
        return " ? "
    if lexeme == ":":
        return ":" if in_range else " : "
    if lexeme in ("=", "<="):
        return f" {lexeme} "
    if lexeme == "*" and parent == NodeKind.EVENT_CONTROL.value:
        return lexeme
    if lexeme in BINARY_OPERATORS:
        if parent == NodeKind.UNARY_OPERATOR.value:
            return lexeme
        if parent == NodeKind.BINARY_OPERATOR.value:
            return f" {lexeme} "
        return lexeme if position == 0 else f" {lexeme} "
    return lexeme


class Reconstructor:
    """Rebuilds source text for any node.

    With a ledger, comments attached to tokens are woven in around their
    lexemes and recorded as written; without one comments are ignored and
    left for the caller to place.
    """

    def __init__(self, ledger: Optional[CommentLedger] = None):
        self.ledger = ledger

    def text(self, node: Optional[SyntaxNode]) -> str:
        if node is None:
            return ""
        kind = node_kind(node.name)
        return self._render(node, None, 0, kind in RANGE_CONTEXT_KINDS).strip(" ")

    def join(self, nodes: Iterable[SyntaxNode]) -> str:
        return join_pieces(self.text(node) for node in nodes)

    def _render(self, node: SyntaxNode, parent: Optional[str], position: int, in_range: bool) -> str:
        if node.is_terminal or not node.children:
            return self._terminal(node, parent, position, in_range)

        pieces: List[str] = [self._comments_before(node)]
        depth = 0
        for index, child in enumerate(node.children):
            if child.is_terminal and child.text == "]":
                depth -= 1
            child_in_range = in_range or depth > 0 or node_kind(child.name) in RANGE_CONTEXT_KINDS
            pieces.append(self._render(child, node.name, index, child_in_range))
            if child.is_terminal and child.text == "[":
                depth += 1
        pieces.append(self._comments_after(node))
        return join_pieces(pieces)

    def _terminal(self, token: SyntaxNode, parent: Optional[str], position: int, in_range: bool) -> str:
        return (
            self._comments_before(token)
            + terminal_text(token, parent, position, in_range)
            + self._comments_after(token)
        )

    def _comments_before(self, node: SyntaxNode) -> str:
        if self.ledger is None or not node.leading_comments:
            return ""
        return "".join(
            item.text + ("\n" if item.is_line else " ")
            for item in self.ledger.take(node.leading_comments)
        )

    def _comments_after(self, node: SyntaxNode) -> str:
        if self.ledger is None or not node.trailing_comments:
            return ""
        return "".join(
            " " + item.text + ("\n" if item.is_line else "")
            for item in self.ledger.take(node.trailing_comments)
        )


def reconstruct(node: Optional[SyntaxNode], ledger: Optional[CommentLedger] = None) -> str:
    return Reconstructor(ledger).text(node)


__all__ = [
    "BINARY_OPERATORS",
    "Reconstructor",
    "join_pieces",
    "reconstruct",
    "terminal_text",
]
