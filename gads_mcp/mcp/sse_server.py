"""SSE (Server-Sent Events) transport for the Google Ads MCP server.

This module exposes the same tools, resources and prompts over HTTP using
SSE, which is useful for web-based MCP clients, testing, and scenarios
where stdio transport is not available.

Run with:
    python -m gads_mcp.mcp.sse_server

The server starts on http://0.0.0.0:8000 by default.
SSE endpoint: GET  /sse
Message post: POST /messages
Health check: GET  /health
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND
from sse_starlette.sse import EventSourceResponse

from gads_mcp.config import settings
from gads_mcp.context import ToolContext
from gads_mcp.mcp import server as mcp_server

logger = logging.getLogger("mcp.sse")

PROTOCOL_VERSION = "2024-11-05"
KEEPALIVE_SECONDS = 30.0


def _result(rpc_id: Any, result: dict) -> dict:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _error(rpc_id: Any, code: int, message: str) -> dict:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


async def dispatch(context: ToolContext, body: dict) -> dict:
    """Route one JSON-RPC request to the shared MCP handlers."""
    method = body.get("method", "")
    params = body.get("params") or {}
    rpc_id = body.get("id")

    if method == "initialize":
        return _result(
            rpc_id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {
                    "tools": {"listChanged": False},
                    "resources": {"listChanged": False},
                    "prompts": {"listChanged": False},
                },
                "serverInfo": {
                    "name": context.settings.mcp_server_name,
                    "version": context.settings.mcp_server_version,
                },
            },
        )

    try:
        if method == "tools/list":
            tools = await mcp_server.list_tools()
            return _result(rpc_id, {"tools": [t.model_dump(exclude_none=True) for t in tools]})

        if method == "tools/call":
            content = await mcp_server.call_tool(
                context, params.get("name", ""), params.get("arguments") or {}
            )
            return _result(rpc_id, {"content": [c.model_dump(exclude_none=True) for c in content]})

        if method == "resources/list":
            items = await mcp_server.list_resources()
            return _result(
                rpc_id,
                {"resources": [r.model_dump(mode="json", exclude_none=True) for r in items]},
            )

        if method == "resources/read":
            uri = params.get("uri", "")
            text = await mcp_server.read_resource(uri)
            return _result(
                rpc_id, {"contents": [{"uri": uri, "mimeType": "text/markdown", "text": text}]}
            )

        if method == "prompts/list":
            items = await mcp_server.list_prompts()
            return _result(rpc_id, {"prompts": [p.model_dump(exclude_none=True) for p in items]})

        if method == "prompts/get":
            prompt = await mcp_server.get_prompt(params.get("name", ""), params.get("arguments"))
            return _result(rpc_id, prompt.model_dump(exclude_none=True))
    except ValueError as exc:
        return _error(rpc_id, INVALID_PARAMS, str(exc))

    return _error(rpc_id, METHOD_NOT_FOUND, f"Method '{method}' not found")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_sse_app(context: ToolContext) -> FastAPI:
    """Build the FastAPI app serving *context* over SSE."""
    # In-memory message queues keyed by session_id
    sessions: dict[str, asyncio.Queue] = {}
    counter = itertools.count(1)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "MCP SSE transport starting on %s:%s",
            context.settings.fastapi_host,
            context.settings.fastapi_port,
        )
        yield
        logger.info("MCP SSE transport shutting down")
        sessions.clear()

    app = FastAPI(
        title="Google Ads MCP Server – SSE Transport",
        version=context.settings.mcp_server_version,
        lifespan=lifespan,
    )
    app.state.sessions = sessions

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "transport": "sse",
            "version": context.settings.mcp_server_version,
        }

    @app.get("/sse")
    async def sse_endpoint(request: Request):
        """Server-Sent Events stream for MCP protocol messages.

        The client opens this endpoint to receive messages from the MCP
        server.  The client posts requests to ``/messages?session_id=<id>``
        and reads the server responses from this stream.
        """
        session_id = f"session-{next(counter)}"
        queue: asyncio.Queue = asyncio.Queue()
        sessions[session_id] = queue

        async def event_generator():
            yield {"event": "endpoint", "data": f"/messages?session_id={session_id}"}
            try:
                while True:
                    if await request.is_disconnected():
                        break
                    try:
                        message = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                    except asyncio.TimeoutError:
                        yield {"comment": "keepalive"}
                        continue
                    yield {"event": "message", "data": json.dumps(message, default=str)}
            finally:
                sessions.pop(session_id, None)

        return EventSourceResponse(event_generator())

    @app.post("/messages")
    async def messages_endpoint(request: Request, session_id: str):
        """Receive a JSON-RPC request, process it, and push the response
        onto the SSE stream for the matching session.
        """
        queue = sessions.get(session_id)
        if queue is None:
            return JSONResponse(
                status_code=404,
                content={"error": f"Session '{session_id}' not found. Connect to /sse first."},
            )

        body = await request.json()
        logger.debug("SSE recv session=%s body=%s", session_id, body)

        if "id" not in body:
            # notifications get no response
            return Response(status_code=202, content="Accepted")

        await queue.put(await dispatch(context, body))
        return Response(status_code=202, content="Accepted")

    return app


app = create_sse_app(ToolContext.from_settings(settings))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------


def main() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    mcp_server.check_credentials()
    uvicorn.run(
        "gads_mcp.mcp.sse_server:app",
        host=settings.fastapi_host,
        port=settings.fastapi_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
