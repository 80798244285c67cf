"""Tests for correlation ID logging."""

import logging

from localfinance.core.logging import (
    CorrelationIDFilter,
    bind_correlation_id,
    configure_logging,
    get_correlation_id,
    reset_correlation_id,
)


def make_record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)


class TestCorrelationId:
    """Test binding and resetting correlation IDs."""

    def test_uses_incoming_header(self):
        token = bind_correlation_id("abc-123")
        try:
            assert get_correlation_id() == "abc-123"
        finally:
            reset_correlation_id(token)

    def test_generates_id_when_missing(self):
        token = bind_correlation_id(None)
        try:
            assert len(get_correlation_id()) == 36
        finally:
            reset_correlation_id(token)

    def test_generates_id_when_blank(self):
        token = bind_correlation_id("   ")
        try:
            assert get_correlation_id().strip()
        finally:
            reset_correlation_id(token)

    def test_reset_restores_previous(self):
        outer = bind_correlation_id("outer")
        inner = bind_correlation_id("inner")
        reset_correlation_id(inner)
        try:
            assert get_correlation_id() == "outer"
        finally:
            reset_correlation_id(outer)


class TestCorrelationIDFilter:
    def test_stamps_active_id(self):
        token = bind_correlation_id("req-1")
        try:
            record = make_record()
            assert CorrelationIDFilter().filter(record) is True
            assert record.correlation_id == "req-1"
        finally:
            reset_correlation_id(token)

    def test_stamps_dash_outside_requests(self):
        record = make_record()

        CorrelationIDFilter().filter(record)

        assert record.correlation_id == "-"


class TestConfigureLogging:
    def test_writes_rotating_log_file(self, tmp_path):
        root = logging.getLogger()
        previous = root.handlers[:]
        try:
            configure_logging(tmp_path / "logs", debug=True)
            logging.getLogger("localfinance.test").info("hello")
            for handler in root.handlers:
                handler.flush()

            content = (tmp_path / "logs" / "localfinance.log").read_text()
            assert "hello" in content
            assert "[-]" in content
            assert root.level == logging.DEBUG
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers = previous
