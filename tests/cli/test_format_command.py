"""Tests for the hdlalign command line interface."""

import json
import logging

import pytest

from hdlalign.cli import main
from hdlalign.cli.errors import CLIValidationError, format_cli_error
from tests.tree_builders import module, net

UNALIGNED = "module top;\nwire ready;\nendmodule\n"


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch):
    """Keep environment flags and log handlers from leaking between tests."""
    for name in ("HDLALIGN_RERAISE", "HDLALIGN_DEBUG", "HDLALIGN_VERBOSE", "HDLALIGN_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
    package_logger = logging.getLogger("hdlalign")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


def _write(workspace, name="top.v", text=UNALIGNED):
    path = workspace / "rtl" / name
    path.write_text(text, encoding="utf-8")
    return path


class TestFormatCommand:
    """Test `hdlalign format`."""

    def test_rewrites_files_in_directory(self, verilog_workspace, capsys):
        """Files below a directory are aligned in place."""
        path = _write(verilog_workspace)
        main(["format", "rtl"])
        lines = path.read_text(encoding="utf-8").split("\n")
        assert lines[1].index("ready") == 50
        assert "Formatted rtl/top.v (fallback)" in capsys.readouterr().out

    def test_check_reports_changes(self, verilog_workspace, capsys):
        """--check exits with status 1 and leaves the file alone."""
        path = _write(verilog_workspace)
        with pytest.raises(SystemExit) as exc_info:
            main(["format", "--check", "rtl/top.v"])
        assert exc_info.value.code == 1
        assert path.read_text(encoding="utf-8") == UNALIGNED
        assert "Would reformat rtl/top.v" in capsys.readouterr().out

    def test_check_passes_on_aligned_file(self, verilog_workspace, capsys):
        """Aligned files pass --check."""
        _write(verilog_workspace)
        main(["format", "rtl"])
        main(["format", "--check", "rtl"])
        assert "All files are already aligned" in capsys.readouterr().out

    def test_check_reports_unreadable_files(self, verilog_workspace, capsys):
        """--check fails when a file cannot be read, even if nothing would change."""
        (verilog_workspace / "rtl" / "latin.v").write_bytes(b"module top;\n\xff\nendmodule\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["format", "--check", "rtl"])
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Error reading rtl/latin.v" in captured.err
        assert "All files are already aligned" not in captured.out

    def test_diff(self, verilog_workspace, capsys):
        """--diff prints a unified diff without writing."""
        path = _write(verilog_workspace)
        main(["format", "--diff", "rtl/top.v"])
        out = capsys.readouterr().out
        assert "--- rtl/top.v (original)" in out
        assert "-wire ready;" in out
        assert path.read_text(encoding="utf-8") == UNALIGNED

    def test_stdout(self, verilog_workspace, capsys):
        """--stdout prints the formatted text."""
        _write(verilog_workspace)
        main(["format", "--stdout", "rtl/top.v"])
        assert capsys.readouterr().out.split("\n")[1].index("ready") == 50

    def test_sibling_tree_file_is_used(self, verilog_workspace, capsys):
        """A <file>.ast.json next to the source selects AST mode."""
        path = _write(verilog_workspace)
        tree = module("top", net("wire", "ready"))
        (verilog_workspace / "rtl" / "top.v.ast.json").write_text(
            json.dumps(tree.model_dump(by_alias=True)), encoding="utf-8"
        )
        main(["format", "rtl/top.v"])
        assert "(ast)" in capsys.readouterr().out
        assert path.read_text(encoding="utf-8").startswith("module top;\n    wire")

    def test_style_option(self, verilog_workspace):
        """--style selects a preset column table."""
        path = _write(verilog_workspace)
        main(["format", "--style", "compact", "rtl/top.v"])
        assert path.read_text(encoding="utf-8").split("\n")[1].index("ready") == 32

    def test_workspace_config_file(self, verilog_workspace):
        """hdlalign.toml in the working directory sets the columns."""
        (verilog_workspace / "hdlalign.toml").write_text("[align]\nsignal_num4 = 20\n", encoding="utf-8")
        path = _write(verilog_workspace)
        main(["format", "rtl/top.v"])
        assert path.read_text(encoding="utf-8").split("\n")[1].index("ready") == 20

    def test_tree_needs_single_file(self, verilog_workspace, capsys):
        """--tree with several sources is a validation error."""
        _write(verilog_workspace)
        _write(verilog_workspace, "other.v")
        with pytest.raises(SystemExit) as exc_info:
            main(["format", "--tree", "top.json", "rtl"])
        assert exc_info.value.code == 1
        assert "CLI_VALIDATION_ERROR" in capsys.readouterr().err

    def test_missing_path(self, verilog_workspace, capsys):
        """Unknown paths are reported."""
        with pytest.raises(SystemExit):
            main(["format", "rtl/missing.v"])
        assert "CLI_FILE_NOT_FOUND" in capsys.readouterr().err

    def test_bad_config(self, verilog_workspace, capsys):
        """Invalid configuration files stop the command."""
        (verilog_workspace / "hdlalign.toml").write_text("[align]\nport_num1 = -4\n", encoding="utf-8")
        _write(verilog_workspace)
        with pytest.raises(SystemExit):
            main(["format", "rtl"])
        assert "CLI_CONFIG_ERROR" in capsys.readouterr().err

    def test_reraise_flag(self, verilog_workspace, monkeypatch):
        """HDLALIGN_RERAISE surfaces the original exception."""
        monkeypatch.setenv("HDLALIGN_RERAISE", "1")
        with pytest.raises(Exception) as exc_info:
            main(["format", "rtl/missing.v"])
        assert getattr(exc_info.value, "code", None) == "CLI_FILE_NOT_FOUND"


class TestInstanceCommand:
    """Test `hdlalign instance`."""

    def test_prints_template(self, verilog_workspace, capsys):
        """The template of the first module is printed."""
        _write(verilog_workspace, "adder.v", "module adder (input a, input b, output s);\nendmodule\n")
        main(["instance", "rtl/adder.v", "--name", "u_add"])
        out = capsys.readouterr().out
        assert out.startswith("adder u_add (\n")
        assert out.split("\n")[1].index("(a),") == 60

    def test_no_module(self, verilog_workspace, capsys):
        """Files without a module report an error."""
        _write(verilog_workspace, "empty.v", "wire a;\n")
        with pytest.raises(SystemExit):
            main(["instance", "rtl/empty.v"])
        assert "INSTANCE_TEMPLATE" in capsys.readouterr().err

    def test_undecodable_file(self, verilog_workspace, capsys):
        """A file that is not UTF-8 is reported without a traceback."""
        (verilog_workspace / "rtl" / "latin.v").write_bytes(b"module top (input a);\n\xff\nendmodule\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["instance", "rtl/latin.v"])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: UnicodeDecodeError")
        assert "Traceback" not in err


class TestCLIErrors:
    """Test error formatting."""

    def test_format_cli_error_with_hint(self):
        """Code, message and hint are shown."""
        text = format_cli_error(CLIValidationError("No files", hint="Pass a .v file"))
        assert text == "Error [CLI_VALIDATION_ERROR]: No files\nHint: Pass a .v file"

    def test_no_subcommand_prints_help(self, capsys):
        """Running without a subcommand exits with status 2."""
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2
        assert "usage: hdlalign" in capsys.readouterr().out


class TestRuntimeLogging:
    """Test logger configuration done by the CLI."""

    def test_log_level_option(self, verilog_workspace):
        """--log-level sets the package logger level."""
        _write(verilog_workspace)
        main(["format", "--log-level", "debug", "rtl"])
        package_logger = logging.getLogger("hdlalign")
        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1

    def test_environment_level(self, verilog_workspace, monkeypatch):
        """HDLALIGN_LOG_LEVEL applies when no option is given."""
        monkeypatch.setenv("HDLALIGN_LOG_LEVEL", "error")
        _write(verilog_workspace)
        main(["format", "rtl"])
        assert logging.getLogger("hdlalign").level == logging.ERROR
