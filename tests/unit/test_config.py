"""Tests for configuration objects and environment settings."""

from __future__ import annotations

import pytest

from mcp_toolhost.config import DynamicToolDiscoveryOptions, Settings, ToolsetConfig


class TestToolsetConfig:
    def test_default_is_read_write(self) -> None:
        assert ToolsetConfig().read_only is False

    def test_read_only(self) -> None:
        assert ToolsetConfig(mode="readOnly").read_only is True


class TestDynamicToolDiscoveryOptions:
    def test_default_meta_tool_names(self) -> None:
        options = DynamicToolDiscoveryOptions(enabled=True)
        assert options.list_tool_name == "dynamic_tool_list"
        assert options.trigger_tool_name == "dynamic_tool_trigger"

    def test_named_meta_tools(self) -> None:
        options = DynamicToolDiscoveryOptions(enabled=True, name="My Server")
        assert options.list_tool_name == "my_server_dynamic_tool_list"
        assert options.trigger_tool_name == "my_server_dynamic_tool_trigger"

    def test_defaults_stored_as_tuple(self) -> None:
        options = DynamicToolDiscoveryOptions(default_enabled_toolsets=["a", "b"])
        assert options.default_enabled_toolsets == ("a", "b")


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("TOOLHOST_TOOLSET_MODE", "TOOLHOST_DYNAMIC_TOOL_DISCOVERY", "TOOLHOST_TRANSPORT"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None)
        assert settings.toolset_mode == "readOnly"
        assert settings.transport == "stdio"
        assert settings.namespace is None
        assert settings.dynamic_discovery_options().enabled is False

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOOLHOST_TOOLSET_MODE", "readWrite")
        monkeypatch.setenv("TOOLHOST_DYNAMIC_TOOL_DISCOVERY", "true")
        monkeypatch.setenv("TOOLHOST_DEFAULT_ENABLED_TOOLSETS", "echo, hello_world,")
        monkeypatch.setenv("TOOLHOST_PORT", "8123")
        settings = Settings(_env_file=None)
        assert settings.toolset_config().mode == "readWrite"
        options = settings.dynamic_discovery_options()
        assert options.enabled is True
        assert options.default_enabled_toolsets == ("echo", "hello_world")
        assert settings.port == 8123

    def test_namespace_follows_server_name(self) -> None:
        settings = Settings(_env_file=None, server_name="notes", namespace_tools=True)
        assert settings.namespace == "notes"

    def test_invalid_mode_rejected(self) -> None:
        with pytest.raises(ValueError):
            Settings(_env_file=None, toolset_mode="everything")
