"""
Line-oriented alignment used when no syntax tree is available.

Each line is classified by its leading keyword and, when a single-line
pattern recognises it, laid out with the same functions and columns as the
tree renderer. Anything else, including lines the patterns do not fully
match, is returned unchanged.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from hdlalign.config import AlignConfig
from hdlalign.syntax.kinds import NET_TYPE_KEYWORDS, VARIABLE_TYPE_KEYWORDS

from .layout import (
    INDENT_WIDTH,
    DeclarationFields,
    layout_assign,
    layout_connection,
    layout_parameter,
    layout_port,
    layout_signal,
    normalise_range,
)

logger = logging.getLogger(__name__)

CONTROL_KEYWORDS = frozenset({
    "module", "macromodule", "endmodule", "function", "endfunction", "task", "endtask",
    "always", "initial", "begin", "end", "if", "else", "case", "casex", "casez",
    "endcase", "default", "for", "while", "repeat", "forever", "generate",
    "endgenerate", "fork", "join", "`define", "`include", "`ifdef", "`ifndef",
    "`else", "`endif", "`timescale",
})

_IDENT = r"[A-Za-z_][\w$]*"
_IDENT_LIST = rf"{_IDENT}(?:\s*,\s*{_IDENT})*"
_RANGE = r"\[[^\[\]]*\]"
_NET_TYPES = "|".join(sorted(NET_TYPE_KEYWORDS, key=len, reverse=True))
_SIGNAL_KEYWORDS = "|".join(sorted(NET_TYPE_KEYWORDS | VARIABLE_TYPE_KEYWORDS, key=len, reverse=True))

PORT_RE = re.compile(
    rf"^(?P<keyword>input|output|inout)\b\s*"
    rf"(?:(?P<net>{_NET_TYPES})\b\s*)?"
    rf"(?:(?P<signing>signed|unsigned)\b\s*)?"
    rf"(?P<range>{_RANGE})?\s*"
    rf"(?P<idents>{_IDENT_LIST})\s*"
    rf"(?P<term>[,;])?$"
)
SIGNAL_RE = re.compile(
    rf"^(?P<keyword>{_SIGNAL_KEYWORDS})\b\s*"
    rf"(?:(?P<signing>signed|unsigned)\b\s*)?"
    rf"(?P<range>{_RANGE})?\s*"
    rf"(?P<idents>{_IDENT_LIST})\s*"
    rf"(?P<unpacked>(?:{_RANGE}\s*)*)"
    rf"(?:=\s*(?P<value>[^;]+?))?\s*;$"
)
PARAM_RE = re.compile(
    rf"^(?P<keyword>parameter|localparam)\b\s*"
    rf"(?P<modifiers>(?:(?:signed|integer|real|realtime|time)\b\s*|{_RANGE}\s*)*)"
    rf"(?P<ident>{_IDENT})\s*=\s*(?P<value>[^;]+?)\s*(?P<term>[,;])?$"
)
ASSIGN_RE = re.compile(r"^assign\b\s*(?P<lvalue>[^=#;]+?)\s*=\s*(?P<expr>[^;]+?)\s*;$")
CONNECTION_RE = re.compile(rf"^\.(?P<name>{_IDENT})\s*\((?P<value>.*)\)\s*(?P<term>,?)$")
_RANGE_FIND = re.compile(_RANGE)
_COMMENT_RE = re.compile(r"^(?P<code>.*?)(?P<comment>//.*)?$")

CONNECTION_INDENT = 2 * INDENT_WIDTH


def _balanced(text: str) -> bool:
    depth = 0
    for char in text:
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def _shift_for(indent: int, base_column: int) -> int:
    """Whole indent units by which a line sits deeper than ``base_column``."""
    if indent <= base_column:
        return 0
    return (indent - base_column) // INDENT_WIDTH * INDENT_WIDTH


class RegexAligner:
    """Align declaration, assign and connection lines one at a time."""

    def __init__(self, config: Optional[AlignConfig] = None):
        self.config = config or AlignConfig()

    def align(self, text: str) -> str:
        lines = text.split("\n")
        in_parameters = False
        in_comment = False
        result: List[str] = []
        for line in lines:
            code = line.split("//", 1)[0]
            if in_comment or "/*" in code:
                result.append(line)
                in_comment = code.rfind("/*") > code.rfind("*/") if "/*" in code else "*/" not in code
                continue
            result.append(self.align_line(line, in_parameters=in_parameters))
            if "#(" in code and not _balanced(code[code.index("#("):]):
                in_parameters = True
            elif in_parameters and code.strip().startswith(")"):
                in_parameters = False
        logger.debug("Regex alignment of %d lines", len(lines))
        return "\n".join(result)

    def align_line(self, line: str, *, in_parameters: bool = False) -> str:
        """Aligned form of ``line``, or ``line`` itself when it is not recognised."""
        expanded = line.expandtabs(INDENT_WIDTH)
        stripped = expanded.strip()
        if not stripped or stripped.startswith(("//", "/*", "*")) or "/*" in stripped:
            return line
        first_word = re.split(r"[\s(;]", stripped, 1)[0]
        if first_word in CONTROL_KEYWORDS:
            return line

        match = _COMMENT_RE.match(stripped)
        code = match.group("code").rstrip()
        comment = match.group("comment") or ""
        indent = len(expanded) - len(expanded.lstrip(" "))

        aligned = self._align_code(code, indent, in_parameters)
        if aligned is None:
            return line
        if comment:
            aligned += " " + comment.rstrip()
        return aligned

    def _align_code(self, code: str, indent: int, in_parameters: bool) -> Optional[str]:
        config = self.config
        match = PORT_RE.match(code)
        if match:
            fields = self._fields(match, modifiers=match.group("net") or "")
            return layout_port(fields, config, shift=_shift_for(indent, config.port_num1))

        match = SIGNAL_RE.match(code)
        if match:
            fields = self._fields(match, terminator=";")
            if fields.unpacked and "," in fields.identifiers:
                return None
            if match.group("value"):
                if fields.unpacked:
                    return None
                fields.identifiers += " = " + match.group("value").strip()
            return layout_signal(fields, config, shift=_shift_for(indent, config.signal_num1))

        match = PARAM_RE.match(code)
        if match:
            value = match.group("value").strip()
            if re.search(rf",\s*{_IDENT}\s*=", value) or not _balanced(value):
                return None
            modifiers = " ".join(
                normalise_range(part, config) if part.startswith("[") else part
                for part in re.findall(rf"{_RANGE}|\w+", match.group("modifiers") or "")
            )
            return layout_parameter(
                match.group("keyword"),
                match.group("ident"),
                value,
                config,
                modifiers=modifiers,
                terminator=match.group("term") or "",
                shift=_shift_for(indent, config.param_num1),
            )

        match = ASSIGN_RE.match(code)
        if match:
            expression = match.group("expr")
            if not _balanced(expression):
                return None
            pairs: List[Tuple[str, str]] = [(match.group("lvalue").strip(), expression.strip())]
            return layout_assign(pairs, config, shift=_shift_for(indent, config.assign_num1))

        match = CONNECTION_RE.match(code)
        if match:
            value = match.group("value").strip()
            if not _balanced(value):
                return None
            column = config.inst_param_value_col if in_parameters else config.inst_port_value_col
            shift = _shift_for(indent, CONNECTION_INDENT)
            start = CONNECTION_INDENT + shift
            return " " * start + layout_connection(
                match.group("name"),
                value,
                column + shift,
                terminator=match.group("term") or "",
                start_column=start,
            )
        return None

    def _fields(self, match: re.Match, *, modifiers: str = "", terminator: Optional[str] = None) -> DeclarationFields:
        groups = match.groupdict()
        range_text = groups.get("range") or ""
        unpacked = groups.get("unpacked") or ""
        identifiers = [name.strip() for name in groups["idents"].split(",")]
        return DeclarationFields(
            keyword=groups["keyword"],
            modifiers=modifiers,
            signing=groups.get("signing") or "",
            range_text=normalise_range(range_text, self.config) if range_text else "",
            identifiers=", ".join(identifiers),
            unpacked="".join(normalise_range(part, self.config) for part in _RANGE_FIND.findall(unpacked)),
            terminator=terminator if terminator is not None else (groups.get("term") or ""),
        )


def align_text(text: str, config: Optional[AlignConfig] = None) -> str:
    return RegexAligner(config).align(text)


__all__ = ["CONTROL_KEYWORDS", "RegexAligner", "align_text"]
