"""MCP tool host: protocol handlers over the tool, resource and prompt registries."""

from __future__ import annotations

import argparse
import asyncio
import json
from collections.abc import AsyncIterator, Iterable, Iterator
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from typing import Any

import anyio
from anyio.abc import TaskGroup
from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions
from mcp.server.session import ServerSession
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl, BaseModel

from .catalog import ChangeHook
from .config import DynamicToolDiscoveryOptions, Settings, ToolsetConfig, get_settings
from .constants import DEFAULT_SERVER_VERSION
from .exceptions import ToolHostError
from .logging_config import create_logger, request_id_ctx, setup_logging
from .prompts import PromptCapability, PromptRegistry
from .resources import ResourceCapability, ResourceRegistry
from .tools import ToolCapability, ToolRegistry
from .transports import run_sse, run_stdio

logger = create_logger(__name__)

_CONTENT_TYPES = (types.TextContent, types.ImageContent, types.EmbeddedResource)


def to_call_tool_result(result: Any) -> types.CallToolResult:
    """Coerce a handler's return value into a ``CallToolResult``."""
    if isinstance(result, types.CallToolResult):
        return result
    if result is None:
        return types.CallToolResult(content=[])
    if isinstance(result, _CONTENT_TYPES):
        return types.CallToolResult(content=[result])
    if isinstance(result, list) and result and all(isinstance(r, _CONTENT_TYPES) for r in result):
        return types.CallToolResult(content=result)
    if isinstance(result, str):
        text = result
    elif isinstance(result, BaseModel):
        text = result.model_dump_json(indent=2)
    else:
        text = json.dumps(result, indent=2, default=str)
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)])


@dataclass
class _Connection:
    """Per-connection state yielded by the server lifespan."""

    task_group: TaskGroup


class ToolHostServer:
    """An MCP server exposing registry-managed tools, resources and prompts.

    Resource and prompt support is advertised only when the corresponding
    capabilities are given (an empty list still counts). Registry changes are
    pushed as ``list_changed`` notifications to every connected session that
    has sent at least one request.
    """

    def __init__(
        self,
        name: str,
        version: str = DEFAULT_SERVER_VERSION,
        *,
        tools: Iterable[ToolCapability] = (),
        toolset_config: ToolsetConfig | None = None,
        dynamic_tool_discovery: DynamicToolDiscoveryOptions | None = None,
        resources: Iterable[ResourceCapability] | None = None,
        prompts: Iterable[PromptCapability] | None = None,
        namespace: str | None = None,
        instructions: str | None = None,
        resource_on_change: ChangeHook | None = None,
        prompt_on_change: ChangeHook | None = None,
    ):
        self.name = name
        self.version = version
        self.tools = ToolRegistry(tools, toolset_config, dynamic_tool_discovery, namespace)
        self.resources = (
            ResourceRegistry(resources, resource_on_change) if resources is not None else None
        )
        self.prompts = PromptRegistry(prompts, prompt_on_change) if prompts is not None else None
        self.server = Server(
            name, version=version, instructions=instructions, lifespan=self._connection_lifespan
        )

        # Live sessions, each with the task group of its connection
        self._sessions: dict[ServerSession, TaskGroup] = {}

        if self.tools.has_tools():
            self._register_tool_handlers()
            self.tools.on_enabled_tools_changed(lambda _tools: self._broadcast("tools"))
        if self.resources is not None:
            self._register_resource_handlers(self.resources)
            self.resources.on_list_changed(lambda _defs: self._broadcast("resources"))
        if self.prompts is not None:
            self._register_prompt_handlers(self.prompts)
            self.prompts.on_list_changed(lambda _defs: self._broadcast("prompts"))

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def initialization_options(self) -> InitializationOptions:
        return self.server.create_initialization_options(
            notification_options=NotificationOptions(
                prompts_changed=True, resources_changed=True, tools_changed=True
            )
        )

    async def run(self, read_stream: Any, write_stream: Any) -> None:
        """Serve one client connection over an already-open stream pair."""
        await self.server.run(read_stream, write_stream, self.initialization_options())

    # -- connections and notifications -------------------------------------

    @asynccontextmanager
    async def _connection_lifespan(self, _server: Server) -> AsyncIterator[_Connection]:
        async with anyio.create_task_group() as task_group:
            try:
                yield _Connection(task_group)
            finally:
                for session in [s for s, tg in self._sessions.items() if tg is task_group]:
                    del self._sessions[session]
                    logger.debug("Session disconnected")
                task_group.cancel_scope.cancel()

    @contextmanager
    def _request_scope(self) -> Iterator[None]:
        try:
            ctx = self.server.request_context
        except LookupError:
            request_id: str | None = None
        else:
            request_id = str(ctx.request_id)
            if ctx.session not in self._sessions and isinstance(ctx.lifespan_context, _Connection):
                self._sessions[ctx.session] = ctx.lifespan_context.task_group
                logger.debug(f"Session registered ({len(self._sessions)} live)")
        token = request_id_ctx.set(request_id)
        try:
            yield
        finally:
            request_id_ctx.reset(token)

    def _broadcast(self, kind: str) -> None:
        for session, task_group in list(self._sessions.items()):
            task_group.start_soon(self._send_list_changed, session, kind)

    async def _send_list_changed(self, session: ServerSession, kind: str) -> None:
        try:
            if kind == "tools":
                await session.send_tool_list_changed()
            elif kind == "resources":
                await session.send_resource_list_changed()
            else:
                await session.send_prompt_list_changed()
        except (anyio.BrokenResourceError, anyio.ClosedResourceError):
            self._sessions.pop(session, None)
            logger.debug(f"Dropped closed session while sending {kind} list_changed")
            return
        logger.debug(f"Sent {kind} list_changed")

    # -- tools -------------------------------------------------------------

    def _register_tool_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            with self._request_scope():
                return self.tools.list_tools()

        async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
            with self._request_scope():
                name = req.params.name
                try:
                    result = await self.tools.call_tool(name, req.params.arguments)
                except ToolHostError as exc:
                    logger.info(f"Tool call rejected: {exc.message}")
                    raise exc.to_mcp_error() from exc
                except McpError:
                    raise
                except Exception as exc:
                    logger.exception(f"Tool {name!r} failed")
                    raise McpError(
                        types.ErrorData(
                            code=types.INTERNAL_ERROR, message=f"Tool {name} failed: {exc}"
                        )
                    ) from exc
                return types.ServerResult(to_call_tool_result(result))

        # Registered directly so registry errors reach the caller as JSON-RPC errors
        self.server.request_handlers[types.CallToolRequest] = call_tool

    # -- resources ---------------------------------------------------------

    def _register_resource_handlers(self, registry: ResourceRegistry) -> None:
        @self.server.list_resources()
        async def list_resources() -> list[types.Resource]:
            with self._request_scope():
                return registry.list_resources()

        @self.server.read_resource()
        async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
            with self._request_scope():
                try:
                    return await registry.read_resource(str(uri))
                except ToolHostError as exc:
                    raise exc.to_mcp_error() from exc

    # -- prompts -----------------------------------------------------------

    def _register_prompt_handlers(self, registry: PromptRegistry) -> None:
        @self.server.list_prompts()
        async def list_prompts() -> list[types.Prompt]:
            with self._request_scope():
                return registry.list_prompts()

        @self.server.get_prompt()
        async def get_prompt(
            name: str, arguments: dict[str, str] | None
        ) -> types.GetPromptResult:
            with self._request_scope():
                try:
                    return await registry.get_prompt(name, arguments)
                except ToolHostError as exc:
                    raise exc.to_mcp_error() from exc


def create_server(settings: Settings | None = None) -> ToolHostServer:
    """Create the sample tool host configured from settings."""
    from .sample import NoteStore, sample_prompts, sample_resources, sample_tools

    settings = settings or get_settings()
    store = NoteStore()
    return ToolHostServer(
        settings.server_name,
        settings.server_version,
        tools=sample_tools(store),
        toolset_config=settings.toolset_config(),
        dynamic_tool_discovery=settings.dynamic_discovery_options(),
        resources=sample_resources(store),
        prompts=sample_prompts(store),
        namespace=settings.namespace,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Command-line flags; anything left unset falls back to TOOLHOST_* settings."""
    parser = argparse.ArgumentParser(prog="mcp-toolhost", description=__doc__)
    parser.add_argument("--name", dest="server_name", help="Server name advertised to clients")
    parser.add_argument("--transport", choices=["stdio", "sse"])
    parser.add_argument("--host", help="Bind address for the SSE transport")
    parser.add_argument("--port", type=int, help="Port for the SSE transport")
    parser.add_argument("--mode", dest="toolset_mode", choices=["readOnly", "readWrite"])
    parser.add_argument(
        "--dynamic",
        dest="dynamic_tool_discovery",
        action="store_true",
        default=None,
        help="Expose the dynamic tool list/trigger meta-tools",
    )
    parser.add_argument(
        "--default-toolset",
        dest="default_enabled_toolsets",
        action="append",
        help="Tool enabled at startup with --dynamic (repeatable)",
    )
    parser.add_argument(
        "--namespace-tools",
        dest="namespace_tools",
        action="store_true",
        default=None,
        help="Qualify tool names as <name>::<tool>",
    )
    parser.add_argument("--log-level", dest="log_level")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)
    overrides: dict[str, Any] = {k: v for k, v in vars(args).items() if v is not None}
    if "default_enabled_toolsets" in overrides:
        overrides["default_enabled_toolsets"] = ",".join(overrides["default_enabled_toolsets"])
    settings = Settings(**overrides)

    setup_logging(settings.log_level)
    host = create_server(settings)
    try:
        if settings.transport == "sse":
            asyncio.run(run_sse(host, settings.host, settings.port, settings.log_level))
        else:
            asyncio.run(run_stdio(host))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
