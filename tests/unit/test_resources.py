"""Tests for the resource registry."""

from __future__ import annotations

import pytest

from mcp_toolhost.exceptions import ResourceNotEnabledError, UnknownResourceError
from mcp_toolhost.resources import ResourceCapability, ResourceRegistry, resource


def _make(uri: str, body: str) -> ResourceCapability:
    @resource(uri, name=uri.rsplit("/", 1)[-1])
    def read(_: str) -> str:
        return body

    return read


@pytest.fixture
def registry() -> ResourceRegistry:
    return ResourceRegistry([_make("memo://notes", "[]"), _make("memo://tags", "{}")])


class TestResourceRegistry:
    def test_all_start_enabled(self, registry: ResourceRegistry) -> None:
        assert [str(r.uri) for r in registry.list_resources()] == ["memo://notes", "memo://tags"]

    def test_decorator_fills_definition(self) -> None:
        @resource("memo://readme", mime_type="text/markdown")
        def readme(_: str) -> str:
            """Project readme."""
            return "# hi"

        assert readme.key == "memo://readme"
        assert readme.definition.name == "readme"
        assert readme.definition.description == "Project readme."
        assert readme.definition.mimeType == "text/markdown"

    @pytest.mark.asyncio
    async def test_read(self, registry: ResourceRegistry) -> None:
        (contents,) = await registry.read_resource("memo://notes")
        assert contents.content == "[]"
        assert contents.mime_type == "text/plain"

    @pytest.mark.asyncio
    async def test_async_handler(self) -> None:
        @resource("memo://async")
        async def slow(uri: str) -> bytes:
            return uri.encode()

        registry = ResourceRegistry([slow])
        (contents,) = await registry.read_resource("memo://async")
        assert contents.content == b"memo://async"

    @pytest.mark.asyncio
    async def test_unknown(self, registry: ResourceRegistry) -> None:
        with pytest.raises(UnknownResourceError):
            await registry.read_resource("memo://missing")

    @pytest.mark.asyncio
    async def test_disabled(self, registry: ResourceRegistry) -> None:
        assert registry.disable("memo://tags") is True
        assert [str(r.uri) for r in registry.list_resources()] == ["memo://notes"]
        with pytest.raises(ResourceNotEnabledError):
            await registry.read_resource("memo://tags")
        assert registry.enable("memo://tags") is True
        assert registry.enable("memo://tags") is False

    @pytest.mark.asyncio
    async def test_http_uri_matches_as_registered(self) -> None:
        registry = ResourceRegistry([_make("https://example.com", "home")])
        assert registry.keys() == ["https://example.com/"]
        assert "https://example.com" in registry
        (contents,) = await registry.read_resource("https://example.com")
        assert contents.content == "home"
        assert registry.disable("https://example.com") is True
        assert registry.is_enabled("https://example.com/") is False
        assert registry.enable("https://example.com") is True
        registry.remove("https://example.com")
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_malformed_uri_is_unknown(self, registry: ResourceRegistry) -> None:
        with pytest.raises(UnknownResourceError):
            await registry.read_resource("not a uri")

    def test_remove(self, registry: ResourceRegistry) -> None:
        registry.remove("memo://tags")
        assert "memo://tags" not in registry
        assert registry.enabled_keys() == ["memo://notes"]
        with pytest.raises(UnknownResourceError):
            registry.remove("memo://tags")

    def test_on_change_hook(self) -> None:
        changes: list[tuple[str, object]] = []
        registry = ResourceRegistry(on_change=lambda key, d: changes.append((key, d)))
        capability = _make("memo://new", "x")
        registry.add(capability)
        registry.disable("memo://new")
        assert changes == [("memo://new", capability.definition), ("memo://new", None)]

    def test_list_changed_subscribers(self, registry: ResourceRegistry) -> None:
        seen: list[int] = []
        registry.on_list_changed(lambda defs: seen.append(len(defs)))
        registry.disable("memo://notes")
        registry.add(_make("memo://extra", ""))
        assert seen == [1, 2]
