"""Exactly-once comment emission for one formatting pass."""

from __future__ import annotations

from typing import AbstractSet, Iterable, Iterator, List

from hdlalign.syntax.nodes import CommentInfo, SyntaxNode


class CommentLedger:
    """
    Records which comments have already been written.

    Comments are identified by ``original_token_index`` alone: the parser may
    attach one comment both as the trailing comment of a token and as the
    leading comment of the next, and only the first emission counts.

    A ledger belongs to exactly one formatting call. Reusing it for a second
    call would silently drop every comment the first call already wrote.
    """

    def __init__(self) -> None:
        self._seen: set[int] = set()

    def is_consumed(self, index: int) -> bool:
        return index in self._seen

    @property
    def consumed(self) -> AbstractSet[int]:
        return frozenset(self._seen)

    def seen(self, comment: CommentInfo) -> bool:
        """Mark ``comment`` as written; return ``False`` if it already was."""
        if comment.original_token_index in self._seen:
            return False
        self._seen.add(comment.original_token_index)
        return True

    def take(self, comments: Iterable[CommentInfo]) -> List[CommentInfo]:
        """Consume and return the comments not written yet, in order."""
        return [item for item in comments if self.seen(item)]

    def emit(self, comments: Iterable[CommentInfo], indent_prefix: str = "") -> str:
        """Render unseen comments one per line, each ended by a newline."""
        return "".join(f"{indent_prefix}{item.text}\n" for item in self.take(comments))

    def inline(self, comments: Iterable[CommentInfo], indent_prefix: str = "") -> str:
        """Render unseen comments on the current line.

        A line comment swallows the rest of its line, so when another comment
        follows one the output breaks to a new line at ``indent_prefix``.
        """
        text = ""
        pending = self.take(comments)
        for position, item in enumerate(pending):
            text += (indent_prefix if text.endswith("\n") else " ") + item.text
            if item.is_line and position + 1 < len(pending):
                text += "\n"
        return text

    def unseen(self, node: SyntaxNode) -> List[CommentInfo]:
        """Comments below ``node`` that have not been written, deduplicated."""
        result: List[CommentInfo] = []
        indexes: set[int] = set()
        for item in iter_comments(node):
            index = item.original_token_index
            if index in self._seen or index in indexes:
                continue
            indexes.add(index)
            result.append(item)
        return result


def iter_comments(node: SyntaxNode) -> Iterator[CommentInfo]:
    """All comments of ``node`` and its descendants in document order."""
    yield from node.leading_comments
    for child in node.children:
        yield from iter_comments(child)
    yield from node.trailing_comments


__all__ = ["CommentLedger", "iter_comments"]
