"""Test configuration and fixtures for formatting tests."""

import pytest

from hdlalign.formatting import CommentLedger, TreeRenderer


@pytest.fixture
def renderer(config):
    """A tree renderer with a fresh comment ledger."""
    return TreeRenderer(config, CommentLedger())

