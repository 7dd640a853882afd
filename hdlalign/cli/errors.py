"""
Error handling for the hdlalign CLI.

Command failures are raised as :class:`CLIError` subclasses carrying an
error code and an optional hint, and turned into a short message and an
exit status by :func:`handle_cli_exception`.
"""

import os
import sys
import traceback
from typing import Any, Dict, Optional


# Maximum length for traceback output in CLI
_CLI_TRACE_LIMIT = 4000


class CLIError(Exception):
    """
    Base exception for all CLI operations.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code
        hint: Optional suggestion for resolving the error
        context: Additional metadata about the error
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        hint: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class CLIConfigError(CLIError):
    """Invalid workspace configuration or alignment style."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_CONFIG_ERROR')
        super().__init__(message, **kwargs)


class CLIValidationError(CLIError):
    """
    Invalid command arguments or options.

    Raised when:
    - No Verilog file was found among the given paths
    - ``--tree`` is combined with more than one source file
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_VALIDATION_ERROR')
        super().__init__(message, **kwargs)


class CLIFileNotFoundError(CLIError):
    """A source file, tree file or directory given on the command line does not exist."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_FILE_NOT_FOUND')
        super().__init__(message, **kwargs)


def format_cli_error(
    exc: BaseException,
    *,
    verbose: bool = False,
    include_traceback: bool = False
) -> str:
    """
    Format exception for CLI display with context and hints.

    Examples:
        >>> print(format_cli_error(CLIValidationError("No files", hint="Pass a .v file")))
        Error [CLI_VALIDATION_ERROR]: No files
        Hint: Pass a .v file
    """
    lines = []

    if isinstance(exc, CLIError):
        lines.append(f"Error [{exc.code}]: {exc.message}")
        if exc.hint:
            lines.append(f"Hint: {exc.hint}")
        if verbose and exc.context:
            lines.append("\nContext:")
            for key, value in exc.context.items():
                lines.append(f"  {key}: {value}")
    else:
        # Library errors know how to describe themselves
        formatter = getattr(exc, "format", None)
        if callable(formatter):
            lines.append(f"Error: {formatter()}")
        else:
            lines.append(f"Error: {exc.__class__.__name__}: {exc}")

    if include_traceback:
        lines.append("\nTraceback:")
        lines.append(format_traceback_excerpt())

    return "\n".join(lines)


def format_traceback_excerpt() -> str:
    """
    Format current exception traceback with size limit.

    Note:
        Should only be called within an exception handler context.
    """
    trace = traceback.format_exc().strip()
    if len(trace) <= _CLI_TRACE_LIMIT:
        return trace
    return f"{trace[:_CLI_TRACE_LIMIT - 3]}..."


def _env_flag(name: str) -> bool:
    val = os.getenv(name)
    if val is None:
        return False
    return val.strip().lower() in {"1", "true", "yes", "on"}


def cli_verbose_enabled(verbose_flag: bool = False) -> bool:
    """
    Determine whether verbose error output is enabled.

    Respects an explicit flag and the HDLALIGN_VERBOSE/HDLALIGN_DEBUG
    environment variables.
    """
    return verbose_flag or _env_flag("HDLALIGN_VERBOSE") or _env_flag("HDLALIGN_DEBUG")


def cli_reraise_enabled() -> bool:
    """Whether exceptions are re-raised instead of exiting (HDLALIGN_RERAISE or HDLALIGN_DEBUG)."""
    return _env_flag("HDLALIGN_RERAISE") or _env_flag("HDLALIGN_DEBUG")


def handle_cli_exception(
    exc: BaseException,
    *,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """
    Print ``exc`` for the user and exit with ``exit_code``.

    Note:
        This function calls sys.exit() and does not return.
    """
    verbose_effective = cli_verbose_enabled(verbose)
    if cli_reraise_enabled():
        raise exc

    error_message = format_cli_error(
        exc,
        verbose=verbose_effective,
        include_traceback=verbose_effective
    )
    print(error_message, file=sys.stderr)
    sys.exit(exit_code)


__all__ = [
    "CLIConfigError",
    "CLIError",
    "CLIFileNotFoundError",
    "CLIValidationError",
    "cli_reraise_enabled",
    "cli_verbose_enabled",
    "format_cli_error",
    "handle_cli_exception",
]
