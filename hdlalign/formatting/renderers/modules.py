"""Module declarations and other keyword-delimited regions."""

from __future__ import annotations

from typing import List, Optional, Tuple

from hdlalign.syntax.kinds import NodeKind, node_kind
from hdlalign.syntax.nodes import SyntaxNode

from ..layout import indent_for
from .base import RendererBase, index_of, split_on, unwrap

K = NodeKind

_MODULE_KEYWORDS = frozenset({"module", "macromodule"})


class ModuleRenderers(RendererBase):
    """Renderers for ``source_text``, ``module_declaration`` and keyword blocks."""

    def render_source_text(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        parts: List[str] = []
        for child in node.children:
            block = self.format_node(child, level)
            if not block:
                continue
            inner, _, _ = unwrap(child)
            if parts and node_kind(inner.name) is K.MODULE_DECLARATION:
                parts.append("\n")
            parts.append(block)
        return "".join(parts)

    def render_module_declaration(
        self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None
    ) -> str:
        """
        Layout::

            module name #(
                parameter ...
            ) (
                input ...,
                output ...
            );
                <items>
            endmodule

        The declaration writes its own indentation, including the first line.
        """
        indent = indent_for(level)
        attributes: List[SyntaxNode] = []
        keyword: Optional[SyntaxNode] = None
        name: Optional[SyntaxNode] = None
        parameters: Optional[SyntaxNode] = None
        ports: Optional[SyntaxNode] = None
        header_end: Optional[SyntaxNode] = None
        endmodule: Optional[SyntaxNode] = None
        items: List[SyntaxNode] = []

        for child in node.children:
            kind = node_kind(child.name)
            if keyword is None:
                if kind is K.MODULE_KEYWORD or (child.is_terminal and child.text in _MODULE_KEYWORDS):
                    keyword = child
                else:
                    attributes.append(child)
            elif header_end is None:
                if kind is K.MODULE_PARAMETER_PORT_LIST:
                    parameters = child
                elif kind in (K.LIST_OF_PORT_DECLARATIONS, K.LIST_OF_PORTS):
                    ports = child
                elif child.is_terminal and child.text == ";":
                    header_end = child
                elif name is None:
                    name = child
                else:
                    items.append(child)
            elif child.is_terminal and child.text == "endmodule":
                endmodule = child
            else:
                items.append(child)

        line = indent
        if attributes:
            line += self.spaced_text(attributes) + " "
        line += f"{self.text(keyword)} {self.text(name)}".rstrip()
        pending: List[Optional[SyntaxNode]] = [*attributes, keyword, name]
        text = ""

        if parameters is not None:
            open_paren = index_of(parameters.children, "(")
            close_paren = len(parameters.children) - 1
            text += line + " #(" + self.end_of_line(level, *pending, *parameters.children[:open_paren + 1]) + "\n"
            for group, comma in split_on(parameters.children[open_paren + 1:close_paren]):
                for declaration in group:
                    text += self.format_node(declaration, level + 1, comma)
            line = indent + ")"
            pending = [parameters.children[close_paren]]

        if ports is not None:
            line, pending, text = self._port_list(ports, level, line, pending, text)

        text += line + ";" + self.end_of_line(level, *pending, header_end) + "\n"
        text += self.format_items(items, level + 1)
        text += self._endmodule(endmodule, level)
        return text

    def _port_list(
        self, ports: SyntaxNode, level: int, line: str, pending: List[Optional[SyntaxNode]], text: str
    ) -> Tuple[str, List[Optional[SyntaxNode]], str]:
        """Writes the opened port list into ``text``; returns the pending closing line."""
        children = list(ports.children)
        open_paren = index_of(children, "(")
        close_paren = len(children) - 1
        entries = split_on(children[open_paren + 1:close_paren])
        if not entries:
            return line + " ()", pending + children, text

        text += line + " (" + self.end_of_line(level, *pending, *children[:open_paren + 1]) + "\n"
        item_indent = indent_for(level + 1)
        for group, comma in entries:
            for entry in group:
                if node_kind(ports.name) is K.LIST_OF_PORT_DECLARATIONS:
                    text += self.format_node(entry, level + 1, comma)
                else:
                    separator = "," if comma is not None else ""
                    text += item_indent + self.text(entry) + separator + self.end_of_line(level + 1, entry, comma) + "\n"
        return indent_for(level) + ")", [children[close_paren]], text

    def _endmodule(self, token: Optional[SyntaxNode], level: int) -> str:
        """``endmodule``: line comments after it stay inline, block comments move below it."""
        indent = indent_for(level)
        if token is None:
            return ""
        text = self.ledger.emit(token.leading_comments, indent_for(level + 1))
        line = indent + "endmodule"
        below: List[str] = []
        inline_used = False
        for item in self.ledger.take(token.trailing_comments):
            if item.is_line and not inline_used and not below:
                line += " " + item.text
                inline_used = True
            else:
                below.append(indent + item.text + "\n")
        return text + line + "\n" + "".join(below)

    def render_keyword_block(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        """``generate``/``function``/``task``: header line, items one level deeper, closing keyword."""
        children = list(node.children)
        end: Optional[SyntaxNode] = None
        if children and children[-1].is_terminal and children[-1].text.startswith("end"):
            end = children.pop()
        semi = index_of(children, ";")
        if node_kind(node.name) is K.GENERATE_REGION or semi < 0:
            head, items = children[:1], children[1:]
        else:
            head, items = children[:semi + 1], children[semi + 1:]
        text = self.spaced_text(head) + self.end_of_line(level, *head) + "\n"
        text += self.format_items(items, level + 1)
        if end is not None:
            text += self.closing_line(end, end.text, level)
        return text


__all__ = ["ModuleRenderers"]
