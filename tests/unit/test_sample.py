"""Tests for the sample note store and its tools."""

from __future__ import annotations

import pytest

from mcp_toolhost.config import ToolsetConfig
from mcp_toolhost.sample import NoteStore, sample_tools
from mcp_toolhost.tools import ToolRegistry


class TestNoteStore:
    def test_add_overwrites(self) -> None:
        store = NoteStore()
        store.add("a", "one")
        store.add("a", "two")
        assert store.all() == {"a": "two"}

    def test_delete(self) -> None:
        store = NoteStore()
        store.add("a", "one")
        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.all() == {}

    def test_all_returns_copy(self) -> None:
        store = NoteStore()
        store.all()["x"] = "y"
        assert store.all() == {}


class TestSampleTools:
    @pytest.mark.asyncio
    async def test_add_then_delete_note(self) -> None:
        store = NoteStore()
        registry = ToolRegistry(sample_tools(store), ToolsetConfig(mode="readWrite"))
        await registry.call_tool("add_note", {"title": "todo", "body": "ship it"})
        assert store.all() == {"todo": "ship it"}
        result = await registry.call_tool("delete_note", {"title": "todo"})
        assert result == {"title": "todo", "deleted": True}

    def test_read_only_mode_hides_writers(self) -> None:
        registry = ToolRegistry(sample_tools(NoteStore()), ToolsetConfig(mode="readOnly"))
        assert registry.enabled_tool_names() == ["hello_world", "echo"]
