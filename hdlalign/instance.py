"""Instantiation templates derived from a module header."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from hdlalign.config import AlignConfig
from hdlalign.errors import InstanceTemplateError
from hdlalign.formatting.layout import indent_for, layout_connection

logger = logging.getLogger(__name__)

_MODULE_RE = re.compile(r"\b(?:module|macromodule)\s+([A-Za-z_][\w$]*)")
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_IDENT_RE = re.compile(r"[A-Za-z_][\w$]*")
_PARAM_RE = re.compile(r"([A-Za-z_][\w$]*)\s*=\s*(.+)$", re.DOTALL)


def _strip_comments(text: str) -> str:
    return _LINE_COMMENT_RE.sub("", _BLOCK_COMMENT_RE.sub(" ", text))


def _group(text: str, start: int) -> Tuple[str, int]:
    """Contents of the parenthesised group opening at ``start`` and the index after it."""
    depth = 0
    for index in range(start, len(text)):
        if text[index] == "(":
            depth += 1
        elif text[index] == ")":
            depth -= 1
            if depth == 0:
                return text[start + 1:index], index + 1
    raise InstanceTemplateError("Unbalanced parentheses in module header")


def _split_top_level(text: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current = ""
    for char in text:
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    parts.append(current)
    return [part.strip() for part in parts if part.strip()]


def parse_module_header(module_source: str) -> Tuple[str, List[Tuple[str, str]], List[str]]:
    """Module name, ``(name, default)`` parameters and port names of the first module."""
    text = _strip_comments(module_source)
    match = _MODULE_RE.search(text)
    if match is None:
        raise InstanceTemplateError(
            "No module declaration found",
            hint="The text must contain 'module <name> (...);'.",
        )
    name = match.group(1)
    position = match.end()

    parameters: List[Tuple[str, str]] = []
    rest = text[position:].lstrip()
    position = len(text) - len(rest)
    if rest.startswith("#"):
        open_paren = text.find("(", position)
        if open_paren < 0:
            raise InstanceTemplateError(f"Malformed parameter list of module '{name}'")
        body, position = _group(text, open_paren)
        for entry in _split_top_level(body):
            entry = re.sub(r"^(?:parameter|localparam)\b", "", entry).strip()
            found = _PARAM_RE.search(entry)
            if found:
                parameters.append((found.group(1), " ".join(found.group(2).split())))

    rest = text[position:].lstrip()
    if not rest.startswith("("):
        raise InstanceTemplateError(
            f"No port list found for module '{name}'",
            hint="Only modules with a parenthesised port list can be instantiated.",
        )
    body, _ = _group(text, len(text) - len(rest))
    ports: List[str] = []
    for entry in _split_top_level(body):
        entry = re.sub(r"(\s*\[[^\]]*\])+$", "", entry)
        identifiers = _IDENT_RE.findall(entry)
        if identifiers:
            ports.append(identifiers[-1])
    return name, parameters, ports


def generate_instance_code(
    module_source: str,
    config: Optional[AlignConfig] = None,
    *,
    instance_name: Optional[str] = None,
    commented: bool = False,
) -> str:
    """
    Build an instantiation of the first module in ``module_source``.

    Each port is connected to a signal of the same name and each parameter
    to its default value, laid out with the formatter's connection columns.
    The instance is named ``UUT_<module>`` unless ``instance_name`` is given;
    ``commented`` wraps the template in a block comment.
    """
    config = config or AlignConfig()
    name, parameters, ports = parse_module_header(module_source)
    instance = instance_name or f"UUT_{name}"
    logger.debug("Instance template for %s: %d parameters, %d ports", name, len(parameters), len(ports))

    lines: List[str] = []
    if parameters:
        lines.append(f"{name} #(")
        for index, (parameter, value) in enumerate(parameters):
            terminator = "," if index < len(parameters) - 1 else ""
            lines.append(indent_for(1) + layout_connection(
                parameter, value, config.inst_param_value_col, terminator=terminator, start_column=4
            ))
        header = f") {instance} ("
    else:
        header = f"{name} {instance} ("
    if not ports:
        lines.append(header + ");")
    else:
        lines.append(header)
        for index, port in enumerate(ports):
            terminator = "," if index < len(ports) - 1 else ""
            lines.append(indent_for(1) + layout_connection(
                port, port, config.inst_port_value_col, terminator=terminator, start_column=4
            ))
        lines.append(");")
    if commented:
        lines = ["/*", *lines, "*/"]
    return "\n".join(lines) + "\n"


__all__ = ["generate_instance_code", "parse_module_header"]
