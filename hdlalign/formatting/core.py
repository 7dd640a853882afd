"""Core formatting infrastructure for syntax-tree driven Verilog alignment."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from hdlalign.config import AlignConfig
from hdlalign.errors import TreeLoadError
from hdlalign.observability.logging import log_fallback_event
from hdlalign.syntax.kinds import (
    INLINE_KINDS,
    MAJOR_KINDS,
    PARAMETER_DECLARATION_KINDS,
    PORT_DECLARATION_KINDS,
    SELF_INDENTED_KINDS,
    SIGNAL_DECLARATION_KINDS,
    NodeKind,
    node_kind,
)
from hdlalign.syntax.loader import TreeGenerator, load_syntax_tree
from hdlalign.syntax.nodes import SyntaxNode

from .comments import CommentLedger
from .fallback import RegexAligner
from .layout import indent_for
from .reconstruct import EOF_LEXEME, Reconstructor, terminal_text
from .renderers import (
    DeclarationRenderers,
    InstanceRenderers,
    ModuleRenderers,
    StatementRenderers,
    unwrap,
)
from .renderers.base import token_comments

logger = logging.getLogger(__name__)

K = NodeKind
Renderer = Callable[[SyntaxNode, int, Optional[SyntaxNode]], str]

# Renderers that write the terminator they are given themselves.
TERMINATING_KINDS = frozenset({
    *PORT_DECLARATION_KINDS,
    *SIGNAL_DECLARATION_KINDS,
    *PARAMETER_DECLARATION_KINDS,
    K.CONTINUOUS_ASSIGN,
    K.MODULE_INSTANTIATION,
    K.BLOCKING_ASSIGNMENT,
    K.NONBLOCKING_ASSIGNMENT,
})


class TreeRenderer(ModuleRenderers, DeclarationRenderers, InstanceRenderers, StatementRenderers):
    """
    Walks one syntax tree and renders it.

    A renderer owns the comment ledger of a single formatting call; build a
    new one for every tree.
    """

    def __init__(self, config: Optional[AlignConfig] = None, ledger: Optional[CommentLedger] = None):
        self.config = config or AlignConfig()
        self.ledger = ledger if ledger is not None else CommentLedger()
        self.raw = Reconstructor()
        self.woven = Reconstructor(self.ledger)
        self._renderers: Dict[NodeKind, Renderer] = {
            K.SOURCE_TEXT: self.render_source_text,
            K.MODULE_DECLARATION: self.render_module_declaration,
            K.CONTINUOUS_ASSIGN: self.render_continuous_assign,
            K.MODULE_INSTANTIATION: self.render_module_instantiation,
            K.ALWAYS_CONSTRUCT: self.render_procedural_block,
            K.INITIAL_CONSTRUCT: self.render_procedural_block,
            K.SEQ_BLOCK: self.render_seq_block,
            K.CONDITIONAL_STATEMENT: self.render_conditional,
            K.IF_GENERATE_CONSTRUCT: self.render_conditional,
            K.CASE_STATEMENT: self.render_case,
            K.CASE_ITEM: self.render_case_item,
            K.LOOP_STATEMENT: self.render_loop,
            K.LOOP_GENERATE_CONSTRUCT: self.render_loop,
            K.PROCEDURAL_TIMING_CONTROL_STATEMENT: self.render_timing_control,
            K.BLOCKING_ASSIGNMENT: self.render_assignment,
            K.NONBLOCKING_ASSIGNMENT: self.render_assignment,
            K.GENERATE_REGION: self.render_keyword_block,
            K.GENERATE_BLOCK: self.render_generate_block,
            K.FUNCTION_DECLARATION: self.render_keyword_block,
            K.TASK_DECLARATION: self.render_keyword_block,
        }
        for kind in PORT_DECLARATION_KINDS:
            self._renderers[kind] = self.render_port_declaration
        for kind in SIGNAL_DECLARATION_KINDS:
            self._renderers[kind] = self.render_signal_declaration
        for kind in PARAMETER_DECLARATION_KINDS:
            self._renderers[kind] = self.render_parameter_declaration

    def format_tree(self, root: SyntaxNode) -> str:
        """Render a whole tree; every comment in it appears exactly once."""
        text = self.format_node(root, 0, root=True)
        leftovers = self.ledger.unseen(root)
        if leftovers:
            logger.debug("Appending %d comments not placed by any renderer", len(leftovers))
            if text and not text.endswith("\n"):
                text += "\n"
            text += self.ledger.emit(leftovers)
        return _strip_eof(text)

    def format_node(
        self,
        node: SyntaxNode,
        level: int,
        terminator: Optional[SyntaxNode] = None,
        *,
        root: bool = False,
    ) -> str:
        inner, wrapped_terminator, wrappers = unwrap(node)
        if terminator is None:
            terminator = wrapped_terminator
        kind = node_kind(inner.name)
        outer_kinds = {node_kind(wrapper.name) for wrapper in wrappers} | {kind}
        major = root or any(item in MAJOR_KINDS for item in outer_kinds)
        inline_only = not major and kind in INLINE_KINDS
        indent = indent_for(level)

        head = ""
        if not inline_only:
            for holder in (*wrappers, inner):
                head += self.ledger.emit(holder.leading_comments, indent)
            first = inner.first_token()
            if first is not None:
                head += self.ledger.emit(first.leading_comments, indent)

        renderer = self._renderers.get(kind) if kind is not None else None
        if renderer is None:
            body = self.woven.text(inner)
        else:
            body = renderer(inner, level, terminator)
        if terminator is not None and (renderer is None or kind not in TERMINATING_KINDS):
            body = _attach(body, terminal_text(terminator), indent)
            body += self.ledger.inline(token_comments(terminator), indent)

        if body and not root and kind not in SELF_INDENTED_KINDS and not body.startswith("\n"):
            body = indent + body

        trailing = list(inner.trailing_comments)
        for wrapper in reversed(wrappers):
            trailing.extend(wrapper.trailing_comments)
        if trailing:
            if body.endswith("\n"):
                body += self.ledger.emit(trailing, indent)
            else:
                pending = [item for item in trailing if not self.ledger.is_consumed(item.original_token_index)]
                body += self.ledger.inline(trailing, indent)
                if pending and pending[-1].is_line:
                    body += "\n"

        text = head + body
        if major and text and not text.endswith("\n"):
            text += "\n"
        return text


def _attach(body: str, text: str, indent: str) -> str:
    """Append ``text`` to the last line of ``body`` unless a line comment ends it."""
    if not body.endswith("\n"):
        return body + text
    last_line = body[:-1].rsplit("\n", 1)[-1]
    if "//" in last_line:
        return body + indent + text
    return body[:-1] + text + "\n"


def _strip_eof(text: str) -> str:
    stripped = text.rstrip()
    while stripped.endswith(EOF_LEXEME):
        stripped = stripped[: -len(EOF_LEXEME)].rstrip()
    return stripped + "\n" if stripped else ""


@dataclass
class FormattedResult:
    """Result of a formatting operation."""

    formatted_text: str
    is_changed: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    mode: str = "ast"

    def success(self) -> bool:
        """Check if formatting was successful."""
        return len(self.errors) == 0


class ASTFormatter:
    """
    Verilog alignment formatter.

    This formatter:
    1. Takes a syntax tree (given, loaded from a file or produced by an
       external parser)
    2. Renders it with column-aligned declarations and connections
    3. Keeps every comment, exactly once
    4. Falls back to line-by-line regex alignment when no tree is available
    """

    def __init__(
        self,
        config: Optional[AlignConfig] = None,
        *,
        generator: Optional[TreeGenerator] = None,
        tree_suffix: str = ".ast.json",
    ):
        self.config = config or AlignConfig()
        self.generator = generator
        self.tree_suffix = tree_suffix
        self.fallback = RegexAligner(self.config)

    def format_tree(self, tree: SyntaxNode) -> str:
        """Render ``tree`` with a fresh comment ledger."""
        return TreeRenderer(self.config, CommentLedger()).format_tree(tree)

    def format_document(
        self,
        source_text: str,
        *,
        tree: Optional[SyntaxNode] = None,
        tree_path: Optional[Union[str, Path]] = None,
        file_path: Optional[Union[str, Path]] = None,
    ) -> FormattedResult:
        """
        Format a complete Verilog document.

        Args:
            source_text: The source code to format
            tree: Syntax tree of ``source_text`` (optional)
            tree_path: JSON file holding the syntax tree (optional)
            file_path: Source file, used for tree generation and messages

        Returns:
            FormattedResult with formatted text and status
        """
        errors: List[str] = []
        warnings: List[str] = []
        path_text = str(file_path) if file_path is not None else None

        try:
            syntax_tree = self._resolve_tree(tree, tree_path, file_path)
        except TreeLoadError as exc:
            warnings.append(exc.format())
            log_fallback_event(reason=exc.code or "tree-load", path=path_text, detail=exc.message)
            syntax_tree = None
        else:
            if syntax_tree is None:
                log_fallback_event(reason="no-tree", path=path_text)

        if syntax_tree is None:
            formatted_text = self.fallback.align(source_text)
            if not warnings:
                warnings.append("No syntax tree available; aligned with regular expressions")
            return FormattedResult(
                formatted_text=formatted_text,
                is_changed=formatted_text != source_text,
                errors=errors,
                warnings=warnings,
                mode="fallback",
            )

        try:
            formatted_text = self.format_tree(syntax_tree)
        except Exception as exc:
            logger.exception("Formatting failed for %s", path_text or "<text>")
            errors.append(f"Formatting error: {exc}")
            return FormattedResult(
                formatted_text=source_text,  # Return original on unexpected error
                is_changed=False,
                errors=errors,
                warnings=warnings,
            )

        return FormattedResult(
            formatted_text=formatted_text,
            is_changed=formatted_text != source_text,
            errors=errors,
            warnings=warnings,
        )

    def _resolve_tree(
        self,
        tree: Optional[SyntaxNode],
        tree_path: Optional[Union[str, Path]],
        file_path: Optional[Union[str, Path]],
    ) -> Optional[SyntaxNode]:
        if tree is not None:
            return tree
        if tree_path is not None:
            return load_syntax_tree(tree_path)
        if self.generator is not None and file_path is not None:
            return self.generator.generate_temporary(file_path, self.tree_suffix)
        return None


__all__ = ["ASTFormatter", "FormattedResult", "TERMINATING_KINDS", "TreeRenderer"]
