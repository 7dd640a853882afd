"""Procedural code: blocks, if/else, case, loops, always and initial."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from hdlalign.syntax.kinds import SIMPLE_ASSIGNMENT_KINDS, NodeKind, node_kind
from hdlalign.syntax.nodes import CommentInfo, SyntaxNode

from ..layout import indent_for
from .base import RendererBase, index_of, split_on, token_comments, unwrap

K = NodeKind

_BLOCK_KINDS = frozenset({K.SEQ_BLOCK, K.GENERATE_BLOCK})
_CONDITIONAL_KINDS = frozenset({K.CONDITIONAL_STATEMENT, K.IF_GENERATE_CONSTRUCT})


def opens_block(node: SyntaxNode) -> bool:
    return (
        node_kind(node.name) in _BLOCK_KINDS
        and bool(node.children)
        and node.children[0].is_terminal
        and node.children[0].text == "begin"
    )


def is_collapsible_block(node: SyntaxNode) -> bool:
    """True for ``begin x = y; end``: a block whose ``begin``/``end`` can be dropped.

    The block must be an unlabeled ``seq_block`` without declarations whose
    only statement is a blocking or non-blocking assignment, and no comment
    may be attached to the block, its ``begin`` or its ``end``.
    """
    if node_kind(node.name) is not K.SEQ_BLOCK or not opens_block(node):
        return False
    children = node.children
    begin, end = children[0], children[-1]
    if not (end.is_terminal and end.text == "end") or len(children) != 3:
        return False
    if any((node.leading_comments, node.trailing_comments,
            begin.leading_comments, begin.trailing_comments,
            end.leading_comments, end.trailing_comments)):
        return False
    statement = children[1]
    if statement.is_terminal:
        return False
    inner, _, _ = unwrap(statement)
    return node_kind(inner.name) in SIMPLE_ASSIGNMENT_KINDS


def _is_simple(node: SyntaxNode) -> bool:
    inner, _, _ = unwrap(node)
    if node_kind(inner.name) in SIMPLE_ASSIGNMENT_KINDS or is_collapsible_block(inner):
        return True
    # null statement
    return [token.text for token in inner.tokens()] == [";"]


class StatementRenderers(RendererBase):
    """Renderers for statements and the body placement rule they share."""

    def render_body(
        self,
        statement: SyntaxNode,
        level: int,
        header_comments: Iterable[CommentInfo] = (),
        timing_inline: bool = False,
    ) -> Tuple[str, bool]:
        """Text following a header such as ``if (...)`` and whether it ended with ``end``.

        A block that is kept keeps ``begin`` on the header line; any other
        body goes on the next line one level deeper. With ``timing_inline``
        an ``@(...)`` or ``#delay`` control is written on the header line.
        """
        inner, _, wrappers = unwrap(statement)
        kind = node_kind(inner.name)
        outer_leading = [item for wrapper in wrappers for item in wrapper.leading_comments]

        if timing_inline and kind is K.PROCEDURAL_TIMING_CONTROL_STATEMENT and len(inner.children) >= 2:
            control = inner.children[0]
            comments = list(header_comments) + outer_leading + list(inner.leading_comments) + token_comments(control)
            text, is_block = self.render_body(inner.children[-1], level, comments)
            return " " + self.text(control) + text, is_block

        if opens_block(inner) and not is_collapsible_block(inner):
            lead = list(header_comments) + outer_leading + list(inner.leading_comments)
            trail = list(inner.trailing_comments) + [
                item for wrapper in reversed(wrappers) for item in wrapper.trailing_comments
            ]
            return " " + self.render_block(inner, level, lead, trail), True

        comments = self.ledger.inline(header_comments, indent_for(level))
        return comments + "\n" + self.format_node(statement, level + 1), False

    def render_block(
        self,
        node: SyntaxNode,
        level: int,
        lead: Iterable[CommentInfo] = (),
        trail: Iterable[CommentInfo] = (),
    ) -> str:
        children = list(node.children)
        begin = children[0]
        end = children[-1] if len(children) > 1 and children[-1].is_terminal and children[-1].text == "end" else None
        items = children[1:-1] if end is not None else children[1:]
        label: List[SyntaxNode] = []
        if items and items[0].is_terminal and items[0].text == ":":
            label, items = items[:2], items[2:]

        text = "begin"
        if len(label) == 2:
            text += " : " + self.text(label[1])
        text += self.ledger.inline(
            list(lead) + token_comments(begin, *label), indent_for(level + 1)
        ) + "\n"
        text += self.format_items(items, level + 1)
        text += self.closing_line(end, "end", level, trail)
        return text

    def render_seq_block(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        if is_collapsible_block(node):
            return self.strip_indent(self.format_node(node.children[1], level), level)
        return self.render_block(node, level)

    def render_generate_block(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        if opens_block(node):
            return self.render_block(node, level)
        return self.strip_indent(self.format_items(node.children, level), level)

    def render_assignment(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        text = self.text(node) + (terminator.text if terminator is not None else "")
        return text + self.end_of_line(level, node, terminator)

    def render_conditional(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        return self._render_if(node, level, [])

    def _render_if(self, node: SyntaxNode, level: int, extra: List[CommentInfo]) -> str:
        children = list(node.children)
        open_paren = index_of(children, "(")
        close_paren = self._matching_paren(children, open_paren)
        if open_paren < 0 or close_paren < 0 or close_paren + 1 >= len(children):
            return self.woven.text(node)
        head = children[:close_paren + 1]
        text = f"{self.text(children[0])} ({self.join_text(children[open_paren + 1:close_paren])})"
        body, is_block = self.render_body(children[close_paren + 1], level, extra + token_comments(*head))
        text += body

        else_index = index_of(children, "else", close_paren + 2)
        if else_index < 0 or else_index + 1 >= len(children):
            return text
        if is_block and text[:-1].rsplit("\n", 1)[-1].strip() == "end":
            text = text[:-1] + " else"
        else:
            text += indent_for(level) + "else"
        else_comments = token_comments(children[else_index])
        else_body = children[else_index + 1]
        nested, _, wrappers = unwrap(else_body)
        if node_kind(nested.name) in _CONDITIONAL_KINDS and not any(
            wrapper.leading_comments or wrapper.trailing_comments for wrapper in wrappers
        ):
            return text + " " + self._render_if(nested, level, else_comments + list(nested.leading_comments))
        body, _ = self.render_body(else_body, level, else_comments)
        return text + body

    @staticmethod
    def _matching_paren(children: List[SyntaxNode], open_paren: int) -> int:
        if open_paren < 0:
            return -1
        depth = 0
        for index in range(open_paren, len(children)):
            child = children[index]
            if child.is_terminal and child.text == "(":
                depth += 1
            elif child.is_terminal and child.text == ")":
                depth -= 1
                if depth == 0:
                    return index
        return -1

    def render_case(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        children = list(node.children)
        open_paren = index_of(children, "(")
        close_paren = self._matching_paren(children, open_paren)
        if close_paren < 0:
            return self.woven.text(node)
        end = children[-1] if children[-1].is_terminal and children[-1].text.startswith("endcase") else None
        items = children[close_paren + 1:-1] if end is not None else children[close_paren + 1:]
        head = children[:close_paren + 1]
        text = f"{self.text(children[0])} ({self.join_text(children[open_paren + 1:close_paren])})"
        text += self.end_of_line(level, *head) + "\n"
        text += self.format_items(items, level + 1)
        text += self.closing_line(end, end.text if end is not None else "endcase", level)
        return text

    def render_case_item(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        children = list(node.children)
        if not children:
            return ""
        body = children[-1]
        colon = index_of(children, ":")
        labels = children[:colon] if colon >= 0 else children[:-1]
        head = children[:-1]
        label_text = ", ".join(self.join_text(group) for group, _ in split_on(labels))
        header_comments = token_comments(*head)
        pending = [item for item in header_comments if not self.ledger.is_consumed(item.original_token_index)]

        if _is_simple(body) and not pending:
            statement = self.strip_indent(self.format_node(body, level), level).rstrip("\n")
            return f"{label_text}: {statement}"
        text, _ = self.render_body(body, level, header_comments)
        return f"{label_text}:{text}"

    def render_loop(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        children = list(node.children)
        if len(children) < 2:
            return self.woven.text(node)
        body = children[-1]
        head = children[:-1]
        text = self.text(children[0])
        open_paren = index_of(head, "(")
        close_paren = self._matching_paren(head, open_paren)
        if open_paren >= 0 and close_paren >= 0:
            clauses = [self.join_text(group) for group, _ in split_on(head[open_paren + 1:close_paren], ";")]
            text += " (" + "; ".join(clauses) + ")"
        elif len(head) > 1:
            text = self.spaced_text(head)
        body_text, _ = self.render_body(body, level, token_comments(*head))
        return text + body_text

    def render_timing_control(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        children = list(node.children)
        if len(children) < 2:
            return self.woven.text(node)
        control, body = children[0], children[-1]
        if _is_simple(body) and not control.trailing_comments:
            statement = self.strip_indent(self.format_node(body, level), level).rstrip("\n")
            return f"{self.text(control)} {statement}"
        body_text, _ = self.render_body(body, level, token_comments(control))
        return self.text(control) + body_text

    def render_procedural_block(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        """``always`` / ``initial`` with the timing control kept on the keyword line."""
        keyword, body = node.children[0], node.children[-1]
        text, _ = self.render_body(body, level, token_comments(keyword), timing_inline=True)
        return self.text(keyword) + text


__all__ = ["StatementRenderers", "is_collapsible_block", "opens_block"]
