"""Tests for the logging helpers."""

import logging

from hdlalign.observability.logging import get_logger, log_fallback_event


class TestGetLogger:
    """Test logger lookup."""

    def test_cached_instance(self):
        """The same logger object is returned for a name."""
        assert get_logger("hdlalign.test") is get_logger("hdlalign.test")

    def test_default_name(self):
        """The package logger is the default."""
        assert get_logger().name == "hdlalign"


class TestFallbackEvent:
    """Test the structured fallback record."""

    def test_record_payload(self, caplog):
        """The reason, path and detail travel with the record."""
        with caplog.at_level(logging.WARNING, logger="hdlalign.formatting.fallback"):
            log_fallback_event(reason="TREE_LOAD", path="rtl/top.v", detail="missing file")
        record = caplog.records[-1]
        assert "regex alignment (TREE_LOAD)" in record.getMessage()
        assert record.hdlalign_event == "fallback"
        assert record.hdlalign_data == {"reason": "TREE_LOAD", "path": "rtl/top.v", "detail": "missing file"}

    def test_defaults_and_extras(self, caplog):
        """Text without a path is reported as in-memory and extras are merged."""
        target = logging.getLogger("hdlalign.custom")
        with caplog.at_level(logging.WARNING, logger="hdlalign.custom"):
            log_fallback_event(reason="no-tree", logger=target, extras={"lines": 3})
        record = caplog.records[-1]
        assert record.name == "hdlalign.custom"
        assert record.hdlalign_data == {"reason": "no-tree", "path": "<memory>", "lines": 3}
