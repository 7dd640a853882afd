"""Column-aligned declaration lines: ports, signals, parameters and assigns."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from hdlalign.syntax.kinds import (
    NET_TYPE_KEYWORDS,
    SIGNING_KEYWORDS,
    VARIABLE_TYPE_KEYWORDS,
    NodeKind,
    node_kind,
)
from hdlalign.syntax.nodes import SyntaxNode

from ..layout import (
    DeclarationFields,
    column_shift,
    indent_for,
    layout_assign,
    layout_parameter,
    layout_port,
    layout_signal,
    normalise_range,
)
from .base import RendererBase, index_of, split_on

K = NodeKind

_IDENTIFIER_LIST_KINDS = frozenset({
    K.LIST_OF_PORT_IDENTIFIERS,
    K.LIST_OF_VARIABLE_PORT_IDENTIFIERS,
    K.LIST_OF_NET_IDENTIFIERS,
    K.LIST_OF_NET_DECL_ASSIGNMENTS,
    K.LIST_OF_VARIABLE_IDENTIFIERS,
    K.LIST_OF_GENVAR_IDENTIFIERS,
})
_MODIFIER_KINDS = frozenset({K.NET_TYPE, K.OUTPUT_VARIABLE_TYPE, K.PARAMETER_TYPE})
_DIMENSION_KINDS = frozenset({K.DIMENSION, K.RANGE})
_MODIFIER_KEYWORDS = NET_TYPE_KEYWORDS | VARIABLE_TYPE_KEYWORDS | {"vectored", "scalared"}


def _is_modifier_node(node: SyntaxNode) -> bool:
    if node_kind(node.name) in _MODIFIER_KINDS:
        return True
    # drive_strength, charge_strength, delay3 ...
    return "strength" in node.name or "delay" in node.name


class DeclarationRenderers(RendererBase):
    """Renderers for the five-field declaration lines."""

    def declaration_fields(
        self, node: SyntaxNode, terminator: Optional[SyntaxNode]
    ) -> Tuple[DeclarationFields, Optional[SyntaxNode]]:
        """Split a port or signal declaration into its aligned fields.

        The keyword is the first child (a direction token or a ``net_type``
        node). Modifiers, signing and the packed range are only recognised
        before the first identifier; everything from the identifiers on
        belongs to the identifier field.
        """
        children = list(node.children)
        if children and children[-1].is_terminal and children[-1].text == ";":
            terminator = children.pop()
        fields = DeclarationFields(keyword=self.text(children[0]) if children else "")
        modifiers: List[str] = []
        identifiers: List[SyntaxNode] = []
        for child in children[1:]:
            kind = node_kind(child.name)
            if identifiers:
                identifiers.append(child)
            elif child.is_terminal and child.text in SIGNING_KEYWORDS:
                fields.signing = child.text
            elif child.is_terminal and child.text in _MODIFIER_KEYWORDS:
                modifiers.append(child.text)
            elif kind is K.RANGE and not fields.range_text:
                fields.range_text = normalise_range(self.text(child), self.config)
            elif not child.is_terminal and _is_modifier_node(child):
                modifiers.append(self.text(child))
            else:
                identifiers.append(child)
        fields.modifiers = " ".join(modifiers)
        fields.identifiers, fields.unpacked = self.identifier_fields(identifiers)
        fields.terminator = terminator.text if terminator is not None else ""
        return fields, terminator

    def identifier_fields(self, nodes: Sequence[SyntaxNode]) -> Tuple[str, str]:
        """Identifier text and, for a single array identifier, its unpacked dimensions."""
        items: List[SyntaxNode] = []
        for node in nodes:
            if node_kind(node.name) in _IDENTIFIER_LIST_KINDS:
                items.extend(node.children)
            else:
                items.append(node)
        groups = [group for group, _ in split_on(items)]
        if len(groups) == 1:
            group = groups[0]
            if len(group) == 1 and not group[0].is_terminal:
                if any(node_kind(child.name) in _DIMENSION_KINDS for child in group[0].children):
                    group = list(group[0].children)
            names = [item for item in group if node_kind(item.name) not in _DIMENSION_KINDS]
            dimensions = [item for item in group if node_kind(item.name) in _DIMENSION_KINDS]
            if names and dimensions and group.index(dimensions[0]) > group.index(names[-1]):
                unpacked = "".join(normalise_range(self.text(item), self.config) for item in dimensions)
                return self.join_text(names), unpacked
        return ", ".join(self.join_text(group) for group in groups), ""

    def render_port_declaration(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        fields, terminator = self.declaration_fields(node, terminator)
        line = layout_port(fields, self.config, start_column=level * 4, shift=column_shift(level))
        return line + self.end_of_line(level, node, terminator)

    def render_signal_declaration(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        fields, terminator = self.declaration_fields(node, terminator)
        line = layout_signal(fields, self.config, start_column=level * 4, shift=column_shift(level))
        return line + self.end_of_line(level, node, terminator)

    def _parameter_parts(self, group: Sequence[SyntaxNode]) -> Tuple[str, str]:
        nodes: List[SyntaxNode] = list(group)
        if len(nodes) == 1 and not nodes[0].is_terminal:
            nodes = list(nodes[0].children)
        equals = index_of(nodes, "=")
        if equals < 0:
            return self.join_text(nodes), ""
        return self.join_text(nodes[:equals]), self.join_text(nodes[equals + 1:])

    def render_parameter_declaration(
        self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None
    ) -> str:
        children = list(node.children)
        if children and children[-1].is_terminal and children[-1].text == ";":
            terminator = children.pop()
        keyword = children[0] if children else None
        modifiers: List[str] = []
        head: List[SyntaxNode] = [] if keyword is None else [keyword]
        assignments: List[Tuple[List[SyntaxNode], Optional[SyntaxNode]]] = []
        for child in children[1:]:
            kind = node_kind(child.name)
            if kind is K.LIST_OF_PARAM_ASSIGNMENTS:
                assignments.extend(split_on(child.children))
            elif kind is K.PARAM_ASSIGNMENT:
                assignments.append(([child], None))
            elif kind is K.RANGE:
                modifiers.append(normalise_range(self.text(child), self.config))
                head.append(child)
            else:
                modifiers.append(self.text(child))
                head.append(child)

        shift = column_shift(level)
        end = terminator.text if terminator is not None else ""
        lines: List[str] = []
        for position, (group, comma) in enumerate(assignments):
            last = position == len(assignments) - 1
            identifier, value = self._parameter_parts(group)
            if position == 0:
                line = layout_parameter(
                    self.text(keyword),
                    identifier,
                    value,
                    self.config,
                    modifiers=" ".join(modifiers),
                    terminator=end if last else ",",
                    start_column=level * 4,
                    shift=shift,
                )
                line += self.end_of_line(level, *head, *group, comma, terminator if last else None)
            else:
                line = indent_for(level + 1) + layout_parameter(
                    "",
                    identifier,
                    value,
                    self.config,
                    terminator=end if last else ",",
                    start_column=(level + 1) * 4,
                    shift=shift,
                )
                line += self.end_of_line(level + 1, *group, comma, terminator if last else None)
            lines.append(line)
        if not lines:
            return self.woven.text(node)
        return "\n".join(lines)

    def render_continuous_assign(self, node: SyntaxNode, level: int, terminator: Optional[SyntaxNode] = None) -> str:
        children = list(node.children)
        if children and children[-1].is_terminal and children[-1].text == ";":
            terminator = children.pop()
        assignments = [child for child in children[1:] if node_kind(child.name) is K.LIST_OF_NET_ASSIGNMENTS]
        if len(assignments) != 1 or len(children) != 2:
            # Drive strengths and delays have no column; keep the text as written.
            return self._verbatim_assign(children, level, terminator)

        pairs: List[Tuple[str, str]] = []
        for group, _ in split_on(assignments[0].children):
            nodes = list(group[0].children) if len(group) == 1 and not group[0].is_terminal else group
            equals = index_of(nodes, "=")
            if equals < 0:
                return self._verbatim_assign(children, level, terminator)
            pairs.append((self.join_text(nodes[:equals]), self.join_text(nodes[equals + 1:])))

        line = layout_assign(
            pairs,
            self.config,
            terminator=terminator.text if terminator is not None else "",
            start_column=level * 4,
            shift=column_shift(level),
        )
        return line + self.end_of_line(level, node, terminator)

    def _verbatim_assign(self, children: List[SyntaxNode], level: int, terminator: Optional[SyntaxNode]) -> str:
        """``assign`` text without columns; ``children`` excludes the terminator."""
        text = " ".join(part for part in (self.text(children[0]), self.spaced_text(children[1:])) if part)
        if terminator is not None:
            text += terminator.text
        return text + self.end_of_line(level, *children, terminator)


__all__ = ["DeclarationRenderers"]
