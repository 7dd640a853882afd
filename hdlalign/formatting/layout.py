"""
Column layout engine.

Every aligned construct is laid out here, for both the syntax-tree renderer
and the regex fallback, so the two modes share one table of columns.

Columns are 0-indexed from the start of the line. Padding never removes
text: when a field already reaches past its target column the next field
follows after the minimum gap and every later field drifts right by the
same amount.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from hdlalign.config import AlignConfig

INDENT_WIDTH = 4
INDENT = " " * INDENT_WIDTH


def pad(current_column: int, target_column: int) -> int:
    """Number of spaces needed to move from ``current_column`` to ``target_column``."""
    return max(0, target_column - current_column)


def indent_for(level: int) -> str:
    return INDENT * max(0, level)


def column_shift(level: int, natural_level: int = 1) -> int:
    """Extra columns for a construct nested deeper than its natural level."""
    return max(0, level - natural_level) * INDENT_WIDTH


class ColumnLine:
    """Accumulates one output line while tracking the current column."""

    def __init__(self, start_column: int = 0):
        self.start_column = start_column
        self.column = start_column
        self._parts: List[str] = []

    @property
    def empty(self) -> bool:
        return not self._parts

    def append(self, text: str) -> "ColumnLine":
        if text:
            self._parts.append(text)
            self.column += len(text)
        return self

    def place(self, text: str, target: int, min_gap: int = 1) -> "ColumnLine":
        """Append ``text`` starting at ``target`` (or ``min_gap`` after the current end)."""
        if not text:
            return self
        gap = 0 if self.empty else min_gap
        spaces = max(gap, pad(self.column, target))
        return self.append(" " * spaces + text)

    def text(self) -> str:
        return "".join(self._parts)


def format_range(msb: str, lsb: str, upbound: int, lowbound: int) -> str:
    """``[msb:lsb]`` with the MSB right-justified and the LSB left-justified."""
    return f"[{msb.strip().rjust(upbound)}:{lsb.strip().ljust(lowbound)}]"


def split_range(range_text: str) -> Optional[Tuple[str, str]]:
    """Split ``[a:b]`` into its bounds; ``None`` unless there is exactly one top-level ':'."""
    text = range_text.strip()
    if not (text.startswith("[") and text.endswith("]")):
        return None
    inner = text[1:-1]
    depth = 0
    split_at = -1
    for index, char in enumerate(inner):
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        elif char == ":" and depth == 0:
            if split_at >= 0:
                return None
            split_at = index
    if split_at < 0:
        return None
    msb, lsb = inner[:split_at].strip(), inner[split_at + 1:].strip()
    if not msb or not lsb or msb.endswith(("+", "-")):
        # Indexed part-selects ([base+:width]) are not bit ranges.
        return None
    return msb, lsb


def normalise_range(range_text: str, config: AlignConfig) -> str:
    bounds = split_range(range_text)
    if bounds is None:
        return range_text.strip()
    return format_range(bounds[0], bounds[1], config.upbound, config.lowbound)


@dataclass
class DeclarationFields:
    """The aligned fields of one declaration line."""

    keyword: str
    modifiers: str = ""
    signing: str = ""
    range_text: str = ""
    identifiers: str = ""
    unpacked: str = ""
    terminator: str = ""


def _place_terminator(line: ColumnLine, terminator: str, column: int) -> None:
    if terminator == ";":
        line.place(terminator, column, min_gap=0)
    else:
        line.append(terminator)


def layout_port(fields: DeclarationFields, config: AlignConfig, start_column: int = 0, shift: int = 0) -> str:
    """Direction, net type, signing, range, identifiers and terminator of a port.

    A ``;`` terminator (non-ANSI declaration) is moved to ``port_num5``; a
    ``,`` (ANSI port list) follows the identifier directly.
    """
    line = ColumnLine(start_column)
    line.place(fields.keyword, config.port_num1 + shift)
    if fields.modifiers:
        line.append(" " + fields.modifiers)
    line.place(fields.signing, config.port_num2 + shift)
    line.place(fields.range_text, config.port_num3 + shift)
    line.place(fields.identifiers, config.port_num4 + shift)
    _place_terminator(line, fields.terminator, config.port_num5 + shift)
    return line.text()


def layout_signal(fields: DeclarationFields, config: AlignConfig, start_column: int = 0, shift: int = 0) -> str:
    """reg/wire/integer declarations; arrays use the ``array_num*`` columns."""
    line = ColumnLine(start_column)
    if fields.unpacked:
        columns = (config.array_num1, config.array_num2, config.array_num3,
                   config.array_num4, config.array_num6)
    else:
        columns = (config.signal_num1, config.signal_num2, config.signal_num3,
                   config.signal_num4, config.signal_num5)
    keyword_col, signing_col, range_col, ident_col, end_col = (col + shift for col in columns)
    line.place(fields.keyword, keyword_col)
    if fields.modifiers:
        line.append(" " + fields.modifiers)
    line.place(fields.signing, signing_col)
    line.place(fields.range_text, range_col)
    line.place(fields.identifiers, ident_col)
    if fields.unpacked:
        line.place(fields.unpacked, config.array_num5 + shift)
    _place_terminator(line, fields.terminator, end_col)
    return line.text()


def layout_parameter(
    keyword: str,
    identifier: str,
    value: str,
    config: AlignConfig,
    *,
    modifiers: str = "",
    terminator: str = "",
    start_column: int = 0,
    shift: int = 0,
) -> str:
    """One parameter assignment; an empty ``keyword`` gives a continuation line.

    ``;`` goes to ``param_num4``; a ``,`` follows the value directly.
    """
    line = ColumnLine(start_column)
    line.place(keyword, config.param_num1 + shift)
    if modifiers:
        line.append(" " + modifiers)
    line.place(identifier, config.param_num2 + shift)
    if value:
        line.place("=", config.param_num3 + shift)
        line.append(" " + value)
    _place_terminator(line, terminator, config.param_num4 + shift)
    return line.text()


def layout_assign(
    pairs: Sequence[Tuple[str, str]],
    config: AlignConfig,
    *,
    terminator: str = ";",
    start_column: int = 0,
    shift: int = 0,
) -> str:
    """``assign`` followed by ``lvalue = expression`` pairs joined by ``, ``."""
    line = ColumnLine(start_column)
    line.place("assign", config.assign_num1 + shift)
    for index, (lvalue, expression) in enumerate(pairs):
        if index == 0:
            line.place(lvalue, config.assign_num2 + shift)
            line.place("=", config.assign_num3 + shift if config.assign_num3 else 0)
        else:
            line.append(", " + lvalue)
            line.append(" =")
        line.append(" " + expression)
    line.append(terminator)
    return line.text()


def layout_connection(
    name: str,
    value: Optional[str],
    column: int,
    *,
    terminator: str = "",
    start_column: int = 0,
) -> str:
    """``.name`` then ``(value)`` starting at ``column``."""
    line = ColumnLine(start_column)
    line.append("." + name)
    line.place(f"({value or ''})", column)
    line.append(terminator)
    return line.text()


__all__ = [
    "INDENT",
    "INDENT_WIDTH",
    "ColumnLine",
    "DeclarationFields",
    "column_shift",
    "format_range",
    "indent_for",
    "layout_assign",
    "layout_connection",
    "layout_parameter",
    "layout_port",
    "layout_signal",
    "normalise_range",
    "pad",
    "split_range",
]
