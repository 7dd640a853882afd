"""
hdlalign CLI entry point.

Dispatches the ``format`` and ``instance`` subcommands to the command
modules in :mod:`hdlalign.cli.commands`.
"""

import argparse
import sys
from typing import Optional

from hdlalign import __version__
from hdlalign.formatting import DefaultAlignRules

from .commands import cmd_format, cmd_instance


def _configure_runtime_logging(args) -> None:
    """Configure the level of the ``hdlalign`` loggers."""
    import logging
    import os

    # Determine log level from CLI arg, environment, or default
    log_level = (
        getattr(args, 'log_level', None) or
        os.getenv('HDLALIGN_LOG_LEVEL', 'warn')
    ).lower()

    level_map = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warn': logging.WARNING,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }

    numeric_level = level_map.get(log_level, logging.WARNING)

    package_logger = logging.getLogger('hdlalign')
    package_logger.setLevel(numeric_level)

    # Add console handler if not already present
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
        # Prevent propagation to root logger to avoid duplicate messages
        package_logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    # Options shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '--config',
        default=None,
        help='Path to an hdlalign.toml or .hdlalign.json configuration file'
    )
    common.add_argument(
        '--style',
        choices=sorted(DefaultAlignRules.styles()),
        default=None,
        help='Use a preset column table instead of the configured one'
    )
    common.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Print full tracebacks and detailed CLI errors (or set HDLALIGN_VERBOSE=1)'
    )
    common.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help='Set logging level (or set HDLALIGN_LOG_LEVEL)'
    )

    parser = argparse.ArgumentParser(
        description="Column-alignment formatter for Verilog sources",
        prog="hdlalign"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    format_parser = subparsers.add_parser(
        'format',
        parents=[common],
        help='Align Verilog source files'
    )
    format_parser.add_argument(
        'files',
        nargs='*',
        default=['.'],
        help='Files or directories to format (default: current directory)'
    )
    format_parser.add_argument(
        '--tree',
        default=None,
        help='Syntax tree JSON of the (single) source file'
    )
    format_parser.add_argument(
        '--check',
        action='store_true',
        help='Report files that need alignment without changing them'
    )
    format_parser.add_argument(
        '--diff',
        action='store_true',
        help='Show a unified diff of the changes instead of writing them'
    )
    format_parser.add_argument(
        '--stdout',
        action='store_true',
        help='Print the formatted text instead of writing files'
    )
    format_parser.set_defaults(func=cmd_format)

    instance_parser = subparsers.add_parser(
        'instance',
        parents=[common],
        help='Print an instantiation template for the first module in a file'
    )
    instance_parser.add_argument('file', help='Verilog file holding the module')
    instance_parser.add_argument(
        '--name',
        default=None,
        help='Instance name (default: UUT_<module>)'
    )
    instance_parser.add_argument(
        '--commented',
        action='store_true',
        help='Wrap the template in a block comment'
    )
    instance_parser.set_defaults(func=cmd_instance)

    return parser


def main(argv: Optional[list] = None) -> None:
    """
    Main CLI entrypoint with subcommand support.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Examples:
        Align every Verilog file below ``rtl``:
        >>> main(['format', 'rtl'])  # doctest: +SKIP

        Check formatting in CI:
        >>> main(['format', '--check', 'rtl'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_runtime_logging(args)

    if not getattr(args, 'func', None):
        parser.print_help()
        sys.exit(2)

    args.func(args)


__all__ = ["build_parser", "main"]
