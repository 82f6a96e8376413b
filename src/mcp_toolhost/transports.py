"""Transport runners: stdio, and HTTP server-sent events."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uvicorn
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route

from .logging_config import create_logger

if TYPE_CHECKING:
    from .server import ToolHostServer

logger = create_logger(__name__)

SSE_PATH = "/sse"
MESSAGES_PATH = "/messages/"


async def run_stdio(host: ToolHostServer) -> None:
    """Serve a single client over stdin/stdout until it disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info(f"{host.name} running on stdio")
        await host.run(read_stream, write_stream)


def create_sse_app(host: ToolHostServer) -> Starlette:
    """Starlette app: ``GET /sse`` opens the event stream, ``POST /messages/`` feeds it."""
    sse = SseServerTransport(MESSAGES_PATH)

    async def handle_sse(request: Request) -> Response:
        async with sse.connect_sse(request.scope, request.receive, request._send) as streams:
            await host.run(streams[0], streams[1])
        return Response()

    return Starlette(
        routes=[
            Route(SSE_PATH, endpoint=handle_sse, methods=["GET"]),
            Mount(MESSAGES_PATH, app=sse.handle_post_message),
        ]
    )


async def run_sse(host: ToolHostServer, bind: str, port: int, log_level: str = "info") -> None:
    """Serve clients over HTTP server-sent events until interrupted."""
    config = uvicorn.Config(create_sse_app(host), host=bind, port=port, log_level=log_level.lower())
    logger.info(f"{host.name} running on SSE at http://{bind}:{port}{SSE_PATH}")
    await uvicorn.Server(config).serve()
