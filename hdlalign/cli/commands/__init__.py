"""
CLI command modules.

Each module implements one ``hdlalign`` subcommand.
"""

from .format import cmd_format, collect_sources
from .instance import cmd_instance

__all__ = ["cmd_format", "cmd_instance", "collect_sources"]
