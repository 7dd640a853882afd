"""The ``format`` subcommand."""

import argparse
import difflib
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from hdlalign.config import AlignConfig, WorkspaceConfig, load_workspace_config
from hdlalign.errors import AlignConfigError, HdlAlignError, TreeLoadError
from hdlalign.formatting import ASTFormatter, DefaultAlignRules
from hdlalign.syntax import TreeGenerator, describe_tree

from ..errors import (
    CLIConfigError,
    CLIError,
    CLIFileNotFoundError,
    CLIValidationError,
    handle_cli_exception,
)

logger = logging.getLogger(__name__)

VERILOG_SUFFIXES = ('.v', '.vh', '.sv')


def collect_sources(paths: Sequence[str]) -> List[Path]:
    """Verilog files named by ``paths``; directories are searched recursively."""
    sources: List[Path] = []
    for item in paths:
        path = Path(item)
        if path.is_file():
            if path.suffix in VERILOG_SUFFIXES:
                sources.append(path)
            else:
                print(f"Warning: Skipping {item} (not a .v/.vh/.sv file)", file=sys.stderr)
        elif path.is_dir():
            for suffix in VERILOG_SUFFIXES:
                sources.extend(sorted(path.rglob(f'*{suffix}')))
        else:
            raise CLIFileNotFoundError(f"No such file or directory: {item}")
    return sources


def load_workspace(args: argparse.Namespace) -> WorkspaceConfig:
    config_path = Path(args.config) if getattr(args, 'config', None) else None
    try:
        return load_workspace_config(Path.cwd(), config_path)
    except AlignConfigError as exc:
        raise CLIConfigError(exc.format(), hint="Fix the configuration file or pass another with --config") from exc


def resolve_align_config(args: argparse.Namespace, workspace: WorkspaceConfig) -> AlignConfig:
    """A ``--style`` preset replaces the column table of the configuration file."""
    style = getattr(args, 'style', None)
    if not style:
        return workspace.align
    try:
        return DefaultAlignRules.by_name(style)
    except ValueError as exc:
        raise CLIConfigError(str(exc), hint=f"Choose one of: {', '.join(DefaultAlignRules.styles())}") from exc


def _tree_arguments(
    source: Path,
    explicit_tree: Optional[Path],
    generator: Optional[TreeGenerator],
    suffix: str,
) -> Dict[str, Any]:
    """Where the syntax tree of ``source`` comes from, as ``format_document`` keywords."""
    if explicit_tree is not None:
        return {'tree_path': explicit_tree}
    if generator is not None:
        try:
            tree = generator.generate_temporary(source, suffix)
        except TreeLoadError as exc:
            logger.warning("%s", exc.format())
        else:
            logger.debug("Generated tree for %s: %s", source, describe_tree(tree))
            return {'tree': tree}
    sibling = source.with_name(source.name + suffix)
    if sibling.is_file():
        return {'tree_path': sibling}
    return {}


def _unified_diff(path: Path, before: str, after: str) -> str:
    return ''.join(difflib.unified_diff(
        before.splitlines(keepends=True),
        after.splitlines(keepends=True),
        fromfile=f"{path} (original)",
        tofile=f"{path} (formatted)",
    ))


def cmd_format(args: argparse.Namespace) -> None:
    """
    Handle the 'format' subcommand to align Verilog source files.

    Args:
        args: Parsed command-line arguments containing:
            - files: Files or directories to format
            - tree: Syntax tree JSON for a single file (optional)
            - style: Alignment preset name (optional)
            - check: Only report files that would change
            - diff: Print a unified diff instead of writing
            - stdout: Print the formatted text instead of writing

    Raises:
        SystemExit: With status 1 when ``--check`` finds changes or a file fails
    """
    try:
        workspace = load_workspace(args)
        config = resolve_align_config(args, workspace)
        sources = collect_sources(args.files)
        if not sources:
            print("No files to format")
            return

        explicit_tree = Path(args.tree) if getattr(args, 'tree', None) else None
        if explicit_tree is not None and len(sources) != 1:
            raise CLIValidationError(
                "--tree can only be used with a single source file",
                hint="Run the command once per file or store trees next to the sources",
            )

        generator = None
        if workspace.parser.enabled:
            generator = TreeGenerator(workspace.parser.command, timeout=workspace.parser.timeout)
        formatter = ASTFormatter(config)
        suffix = workspace.parser.tree_suffix

        changed_count = 0
        error_count = 0

        for source in sources:
            try:
                content = source.read_text(encoding='utf-8')
            except (OSError, UnicodeDecodeError) as exc:
                print(f"Error reading {source}: {exc}", file=sys.stderr)
                error_count += 1
                continue

            tree_arguments = _tree_arguments(source, explicit_tree, generator, suffix)
            result = formatter.format_document(content, file_path=source, **tree_arguments)

            if result.errors:
                print(f"Error formatting {source}:", file=sys.stderr)
                for error in result.errors:
                    print(f"  {error}", file=sys.stderr)
                error_count += 1
                continue

            for warning in result.warnings:
                logger.info("%s: %s", source, warning)

            if args.stdout:
                sys.stdout.write(result.formatted_text)
                continue
            if not result.is_changed:
                continue

            changed_count += 1
            if args.check:
                print(f"Would reformat {source} ({result.mode})")
            elif args.diff:
                sys.stdout.write(_unified_diff(source, content, result.formatted_text))
            else:
                source.write_text(result.formatted_text, encoding='utf-8')
                print(f"Formatted {source} ({result.mode})")

        if args.check:
            if changed_count > 0:
                print(f"{changed_count} file(s) would be reformatted")
            if error_count > 0:
                print(f"Encountered {error_count} error(s)", file=sys.stderr)
            if changed_count > 0 or error_count > 0:
                raise SystemExit(1)
            print("All files are already aligned")
        elif error_count > 0:
            print(f"Encountered {error_count} error(s)", file=sys.stderr)
            raise SystemExit(1)
        elif changed_count > 0 and not args.diff and not args.stdout:
            print(f"Formatted {changed_count} file(s) successfully")

    except (HdlAlignError, CLIError) as exc:
        handle_cli_exception(exc, verbose=getattr(args, 'verbose', False))


__all__ = ["VERILOG_SUFFIXES", "cmd_format", "collect_sources", "load_workspace", "resolve_align_config"]
