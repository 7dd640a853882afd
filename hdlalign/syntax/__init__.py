"""Syntax tree model, node vocabulary and loaders."""

from .kinds import NodeKind, node_kind
from .loader import TreeGenerator, describe_tree, load_syntax_tree, parse_syntax_tree
from .nodes import CommentInfo, CommentKind, SyntaxNode, comment

__all__ = [
    "CommentInfo",
    "CommentKind",
    "NodeKind",
    "SyntaxNode",
    "TreeGenerator",
    "comment",
    "describe_tree",
    "load_syntax_tree",
    "node_kind",
    "parse_syntax_tree",
]
