"""Tests for command-line parsing and the entry point."""

from __future__ import annotations

from typing import Any

import pytest

from mcp_toolhost import server
from mcp_toolhost.server import parse_args


class TestParseArgs:
    def test_unset_flags_are_none(self) -> None:
        args = parse_args([])
        assert args.transport is None
        assert args.dynamic_tool_discovery is None
        assert args.default_enabled_toolsets is None

    def test_all_flags(self) -> None:
        args = parse_args(
            [
                "--transport", "sse",
                "--host", "0.0.0.0",
                "--port", "9000",
                "--mode", "readWrite",
                "--dynamic",
                "--default-toolset", "echo",
                "--default-toolset", "add_note",
                "--log-level", "DEBUG",
            ]
        )
        assert args.transport == "sse"
        assert args.port == 9000
        assert args.toolset_mode == "readWrite"
        assert args.dynamic_tool_discovery is True
        assert args.default_enabled_toolsets == ["echo", "add_note"]

    def test_rejects_unknown_mode(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--mode", "admin"])


class TestMain:
    def test_flags_override_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        captured: dict[str, Any] = {}

        async def fake_run_stdio(host: server.ToolHostServer) -> None:
            captured["host"] = host

        monkeypatch.setattr(server, "run_stdio", fake_run_stdio)
        monkeypatch.setattr(server, "setup_logging", lambda level: None)
        server.main(["--mode", "readWrite", "--dynamic", "--default-toolset", "echo"])

        host = captured["host"]
        assert host.tools.dynamic_tool_discovery_enabled()
        assert host.tools.enabled_tool_names() == [
            "echo",
            "dynamic_tool_list",
            "dynamic_tool_trigger",
        ]

    def test_sse_transport_selected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        captured: dict[str, Any] = {}

        async def fake_run_sse(host: server.ToolHostServer, bind: str, port: int, level: str) -> None:
            captured.update(bind=bind, port=port)

        monkeypatch.setattr(server, "run_sse", fake_run_sse)
        monkeypatch.setattr(server, "setup_logging", lambda level: None)
        server.main(["--transport", "sse", "--host", "0.0.0.0", "--port", "9001"])
        assert captured == {"bind": "0.0.0.0", "port": 9001}
