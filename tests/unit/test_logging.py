"""Tests for logging setup and request-id propagation."""

from __future__ import annotations

import logging
import sys

import pytest

from mcp_toolhost.logging_config import (
    RequestIdFilter,
    create_logger,
    get_request_id,
    request_id_ctx,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_logs_to_stderr(self) -> None:
        root = setup_logging("debug")
        (handler,) = root.handlers
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr
        assert root.level == logging.DEBUG

    def test_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOGGING_LEVEL", "WARNING")
        assert setup_logging().level == logging.WARNING

    def test_quiets_protocol_chatter(self) -> None:
        setup_logging("DEBUG")
        assert logging.getLogger("mcp.server.lowlevel.server").level == logging.WARNING


class TestRequestId:
    def test_filter_fills_placeholder(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "-"

    def test_filter_uses_context(self) -> None:
        token = request_id_ctx.set("42")
        try:
            record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
            RequestIdFilter().filter(record)
            assert record.request_id == "42"
        finally:
            request_id_ctx.reset(token)

    def test_adapter_adds_request_id(self) -> None:
        token = request_id_ctx.set("7")
        try:
            assert get_request_id() == "7"
            _, kwargs = create_logger("mcp_toolhost.test").process("hi", {})
            assert kwargs["extra"] == {"request_id": "7"}
        finally:
            request_id_ctx.reset(token)
        assert get_request_id() is None
