"""Module instantiations with one aligned connection per line."""

from __future__ import annotations

from typing import List, Optional, Tuple

from hdlalign.syntax.kinds import NodeKind, node_kind
from hdlalign.syntax.nodes import SyntaxNode

from ..layout import column_shift, indent_for, layout_connection
from .base import RendererBase, index_of, split_on

K = NodeKind

_NAMED_KINDS = frozenset({K.NAMED_PORT_CONNECTION, K.NAMED_PARAMETER_ASSIGNMENT})


class InstanceRenderers(RendererBase):
    """
    Renders ``module_instantiation`` as::

        fifo #(
            .DEPTH                                              (16)
        ) u_fifo (
            .clk                                                (sys_clk),
            .rst_n                                              (rst_n)
        );

    Connections belong to indent level 2; the ``(value)`` column moves right
    by one indent unit for every level deeper than that.
    """

    def connection_lines(self, items: List[SyntaxNode], level: int, column: int) -> str:
        """One line per named or ordered connection, commas attached."""
        lines: List[str] = []
        for group, comma in split_on(items):
            if not group:
                continue
            item = group[0]
            terminator = "," if comma is not None else ""
            if len(group) == 1 and node_kind(item.name) in _NAMED_KINDS:
                name, value = self._named_parts(item)
                body = layout_connection(
                    name,
                    value,
                    column + column_shift(level, 2),
                    terminator=terminator,
                    start_column=level * 4,
                )
            else:
                body = self.join_text(group) + terminator
            lines.append(indent_for(level) + body + self.end_of_line(level, *group, comma) + "\n")
        return "".join(lines)

    def _named_parts(self, node: SyntaxNode) -> Tuple[str, Optional[str]]:
        children = list(node.children)
        dot = index_of(children, ".")
        open_paren = index_of(children, "(")
        if open_paren < 0:
            return self.join_text(children[dot + 1:]), None
        close_paren = len(children) - 1
        if not (children[close_paren].is_terminal and children[close_paren].text == ")"):
            close_paren = len(children)
        name = self.join_text(children[dot + 1:open_paren])
        return name, self.join_text(children[open_paren + 1:close_paren])

    def _parameter_block(self, node: SyntaxNode, level: int, pending: List[SyntaxNode]) -> Tuple[str, List[SyntaxNode]]:
        """``#(`` ... ``)``; returns the text and the nodes whose comments end the ``)`` line."""
        children = list(node.children)
        open_paren = index_of(children, "(")
        if open_paren < 0:
            return "#" + self.join_text(children[1:]), pending + [node]
        close_paren = len(children) - 1
        inner: List[SyntaxNode] = []
        for child in children[open_paren + 1:close_paren]:
            if node_kind(child.name) is K.LIST_OF_PARAMETER_ASSIGNMENTS:
                inner.extend(child.children)
            else:
                inner.append(child)
        text = "#(" + self.end_of_line(level, *pending, *children[:open_paren + 1]) + "\n"
        text += self.connection_lines(inner, level + 1, self.config.inst_param_value_col)
        text += indent_for(level) + ")"
        return text, [children[close_paren]]

    def _instance(self, node: SyntaxNode, level: int, pending: List[SyntaxNode]) -> Tuple[str, List[SyntaxNode]]:
        children = list(node.children)
        open_paren = index_of(children, "(")
        if open_paren < 0:
            return self.join_text(children), pending + [node]
        name = self.join_text(children[:open_paren])
        close_paren = len(children) - 1
        connections: List[SyntaxNode] = []
        for child in children[open_paren + 1:close_paren]:
            if node_kind(child.name) is K.LIST_OF_PORT_CONNECTIONS:
                connections.extend(child.children)
            else:
                connections.append(child)
        if not connections:
            return f"{name} ()", pending + children
        text = f"{name} (" + self.end_of_line(level, *pending, *children[:open_paren + 1]) + "\n"
        text += self.connection_lines(connections, level + 1, self.config.inst_port_value_col)
        text += indent_for(level) + ")"
        return text, [children[close_paren]]

    def render_module_instantiation(
        self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None
    ) -> str:
        children = list(node.children)
        if children and children[-1].is_terminal and children[-1].text == ";":
            terminator = children.pop()
        if not children:
            return self.woven.text(node)

        module_name = children[0]
        text = self.text(module_name)
        pending: List[SyntaxNode] = [module_name]
        instances: List[Tuple[SyntaxNode, Optional[SyntaxNode]]] = []
        for child in children[1:]:
            kind = node_kind(child.name)
            if kind is K.PARAMETER_VALUE_ASSIGNMENT:
                block, pending = self._parameter_block(child, level, pending)
                text += " " + block
            elif kind is K.MODULE_INSTANCE:
                instances.append((child, None))
            elif child.is_terminal and child.text == "," and instances:
                instances[-1] = (instances[-1][0], child)
            else:
                # Strengths and delays stay next to the module name.
                text += " " + self.text(child)
                pending.append(child)

        for position, (instance, comma) in enumerate(instances):
            if position:
                text += indent_for(level)
            else:
                text += " "
            body, pending = self._instance(instance, level, pending)
            text += body
            if comma is not None:
                text += "," + self.end_of_line(level, *pending, comma) + "\n"
                pending = []
        text += (terminator.text if terminator is not None else "")
        return text + self.end_of_line(level, *pending, terminator)


__all__ = ["InstanceRenderers"]
