"""Shared pytest fixtures and configuration for all tests."""

import pytest

from hdlalign.config import AlignConfig


@pytest.fixture
def config():
    """The default column table."""
    return AlignConfig()


@pytest.fixture
def verilog_workspace(tmp_path, monkeypatch):
    """A temporary working directory holding an ``rtl`` folder."""
    (tmp_path / "rtl").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path
