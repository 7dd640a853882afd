"""
Syntax-tree driven alignment for Verilog sources.

This module renders a parsed syntax tree with column-aligned declarations,
parameter lists and instantiations while keeping every comment exactly once,
and falls back to line-oriented regex alignment when no tree is available.
"""

from .comments import CommentLedger
from .core import ASTFormatter, FormattedResult, TreeRenderer
from .fallback import RegexAligner
from .layout import ColumnLine, format_range, pad
from .reconstruct import Reconstructor, join_pieces
from .renderers import is_collapsible_block
from .rules import DefaultAlignRules

__all__ = [
    "ASTFormatter",
    "ColumnLine",
    "CommentLedger",
    "DefaultAlignRules",
    "FormattedResult",
    "Reconstructor",
    "RegexAligner",
    "TreeRenderer",
    "format_range",
    "is_collapsible_block",
    "join_pieces",
    "pad",
]
