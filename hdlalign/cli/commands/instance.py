"""The ``instance`` subcommand."""

import argparse
import sys
from pathlib import Path

from hdlalign.errors import HdlAlignError
from hdlalign.instance import generate_instance_code

from ..errors import CLIFileNotFoundError, CLIError, handle_cli_exception
from .format import load_workspace, resolve_align_config


def cmd_instance(args: argparse.Namespace) -> None:
    """Print an instantiation template for the first module in ``args.file``."""
    try:
        path = Path(args.file)
        if not path.is_file():
            raise CLIFileNotFoundError(f"No such file: {args.file}")
        workspace = load_workspace(args)
        config = resolve_align_config(args, workspace)
        text = generate_instance_code(
            path.read_text(encoding='utf-8'),
            config,
            instance_name=args.name,
            commented=args.commented,
        )
        sys.stdout.write(text)
    except (HdlAlignError, CLIError, OSError, UnicodeDecodeError) as exc:
        handle_cli_exception(exc, verbose=getattr(args, 'verbose', False))
