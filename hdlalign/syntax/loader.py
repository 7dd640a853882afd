"""Loading syntax trees from JSON and producing them with an external parser."""

from __future__ import annotations

import json
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from hdlalign.errors import TreeGenerationError, TreeLoadError
from .nodes import SyntaxNode

logger = logging.getLogger(__name__)


def parse_syntax_tree(data: Union[str, bytes, dict], *, path: Optional[str] = None) -> SyntaxNode:
    """Validate a JSON document (text or already decoded) into a tree."""
    try:
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        return SyntaxNode.model_validate(data)
    except ValueError as exc:
        # json.JSONDecodeError and pydantic's ValidationError are both ValueErrors.
        summary = _summarise_error(exc)
        raise TreeLoadError(
            f"Malformed syntax tree: {summary}",
            path=path,
            hint="The tree must be a JSON object with 'name' and 'value' or 'children'.",
        ) from exc


def load_syntax_tree(path: Union[str, Path]) -> SyntaxNode:
    """Read and validate a syntax tree JSON file."""
    tree_path = Path(path)
    try:
        content = tree_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise TreeLoadError(f"Syntax tree not found: {tree_path}", path=str(tree_path)) from exc
    except OSError as exc:
        raise TreeLoadError(f"Cannot read syntax tree: {exc}", path=str(tree_path)) from exc
    tree = parse_syntax_tree(content, path=str(tree_path))
    logger.debug("Loaded syntax tree %s (root %s)", tree_path, tree.name)
    return tree


def _summarise_error(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", str(exc))
        return f"{location}: {message}" if location else message
    return str(exc)


class TreeGenerator:
    """
    Run an external parser that writes a syntax tree JSON file.

    The command is an argument list where ``{source}`` and ``{output}`` are
    replaced by the Verilog file and the tree file to produce, e.g.::

        ["java", "-jar", "verilog-parser.jar", "{source}", "{output}"]

    Any failure (missing executable, non-zero exit, timeout, no output)
    raises :class:`TreeGenerationError`; callers degrade to regex alignment.
    """

    def __init__(self, command: Sequence[str], *, timeout: float = 30.0):
        if not command:
            raise ValueError("TreeGenerator requires a non-empty command")
        self.command = list(command)
        self.timeout = timeout

    def build_command(self, source: Path, output: Path) -> List[str]:
        return [
            part.replace("{source}", str(source)).replace("{output}", str(output))
            for part in self.command
        ]

    def generate(self, source: Union[str, Path], output: Union[str, Path]) -> SyntaxNode:
        source_path = Path(source)
        output_path = Path(output)
        if output_path.exists():
            # A stale tree from an earlier run must never be picked up.
            output_path.unlink()

        argv = self.build_command(source_path, output_path)
        logger.info("Generating syntax tree: %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise TreeGenerationError(
                f"Parser executable not found: {argv[0]}",
                path=str(source_path),
                hint="Install the parser or remove [parser].command from the configuration.",
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise TreeGenerationError(
                f"Parser timed out after {self.timeout:g}s",
                path=str(source_path),
            ) from exc
        except OSError as exc:
            raise TreeGenerationError(f"Parser could not be started: {exc}", path=str(source_path)) from exc

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip().splitlines()
            raise TreeGenerationError(
                f"Parser exited with status {result.returncode}"
                + (f": {detail[-1]}" if detail else ""),
                path=str(source_path),
                hint="The source may contain a syntax error.",
            )
        if not output_path.is_file():
            raise TreeGenerationError(
                f"Parser did not write {output_path}",
                path=str(source_path),
            )
        return load_syntax_tree(output_path)

    def generate_temporary(self, source: Union[str, Path], suffix: str = ".ast.json") -> SyntaxNode:
        """Generate the tree of ``source`` into a scratch directory that is removed afterwards."""
        source_path = Path(source)
        with tempfile.TemporaryDirectory(prefix="hdlalign-") as workdir:
            return self.generate(source_path, Path(workdir) / (source_path.name + suffix))


def describe_tree(tree: SyntaxNode) -> Dict[str, Any]:
    """Small summary used in verbose CLI output."""
    tokens = list(tree.tokens())
    comments = sum(len(tok.leading_comments) + len(tok.trailing_comments) for tok in tokens)
    return {"root": tree.name, "tokens": len(tokens), "comments": comments}


__all__ = ["parse_syntax_tree", "load_syntax_tree", "TreeGenerator", "describe_tree"]
