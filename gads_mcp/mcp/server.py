"""MCP server bootstrap – registers tools, resources, prompts and runs transports."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import GetPromptResult, Prompt, Resource, TextContent, Tool

from gads_mcp.config import settings
from gads_mcp.context import ToolContext
from gads_mcp.errors import ToolCallError
from gads_mcp.mcp import prompts, resources
from gads_mcp.mcp.tools import handle_list_accounts, handle_mutate, handle_query
from gads_mcp.schemas.common import ErrorDetail, ToolErrorResponse

logger = logging.getLogger("mcp.server")

# ---------------------------------------------------------------------------
# Tool registry
# ---------------------------------------------------------------------------

TOOL_DEFINITIONS: list[Tool] = [
    Tool(
        name="list_accounts",
        description=(
            "List all accessible Google Ads accounts under the authenticated user or MCC. "
            "Use this first to find account IDs before running other tools."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "include_manager_accounts": {
                    "type": "boolean",
                    "description": "Include manager (MCC) accounts in results",
                    "default": False,
                },
            },
            "required": [],
        },
    ),
    Tool(
        name="query",
        description=(
            "Execute any GAQL SELECT query. Returns clean JSON results. "
            "Mutations are blocked - use mutate tool for write operations."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "customer_id": {
                    "type": "string",
                    "description": "Google Ads account ID (optional, uses default if not specified)",
                },
                "query": {
                    "type": "string",
                    "description": "Full GAQL query string (SELECT only)",
                },
                "limit": {
                    "type": "integer",
                    "description": "Maximum rows to return (default: 100, max: 10000)",
                    "default": 100,
                    "minimum": 1,
                    "maximum": 10000,
                },
            },
            "required": ["query"],
        },
    ),
    Tool(
        name="mutate",
        description=(
            "Execute write operations using GoogleAdsService.Mutate. "
            "Supports all operation types. Default dry_run=true for safety."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "customer_id": {
                    "type": "string",
                    "description": "Google Ads customer ID (optional, uses default if not specified)",
                },
                "operations": {
                    "type": "array",
                    "description": "Array of mutation operation objects",
                    "items": {"type": "object"},
                },
                "partial_failure": {
                    "type": "boolean",
                    "description": "Enable partial failure mode (default: true)",
                    "default": True,
                },
                "dry_run": {
                    "type": "boolean",
                    "description": "Validate only, do not execute (default: true)",
                    "default": True,
                },
            },
            "required": ["operations"],
        },
    ),
]

TOOL_HANDLERS = {
    "list_accounts": handle_list_accounts,
    "query": handle_query,
    "mutate": handle_mutate,
}

# ---------------------------------------------------------------------------
# Request handlers (shared by the stdio and SSE transports)
# ---------------------------------------------------------------------------


def _text(payload: dict) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(payload, default=str))]


async def call_tool(context: ToolContext, name: str, arguments: dict | None) -> list[TextContent]:
    """Dispatch a tool call and serialize its envelope as JSON text."""
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        error_payload = ToolErrorResponse(
            tool=name,
            error=ErrorDetail(
                error_code="UNKNOWN_TOOL",
                message=f"Tool '{name}' is not registered",
                hint=f"Available tools: {list(TOOL_HANDLERS.keys())}",
            ),
        )
        return _text(error_payload.model_dump())

    try:
        result = await handler(context, arguments or {})
    except ToolCallError as exc:
        logger.warning("Tool %s failed [%s]: %s", name, exc.kind.value, exc.message)
        error_payload = ToolErrorResponse(
            tool=name,
            error=ErrorDetail(error_code=exc.kind.value, message=exc.message),
        )
        return _text(error_payload.model_dump())

    return _text(result)


async def list_tools() -> list[Tool]:
    return TOOL_DEFINITIONS


async def list_resources() -> list[Resource]:
    return resources.list_resources()


async def read_resource(uri: str) -> str:
    return resources.read_resource(str(uri))


async def list_prompts() -> list[Prompt]:
    return prompts.list_prompts()


async def get_prompt(name: str, arguments: dict | None = None) -> GetPromptResult:
    spec = prompts.PROMPTS.get(name)
    return GetPromptResult(
        description=spec.description if spec else None,
        messages=prompts.render_prompt(name, arguments),
    )


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_mcp_server(context: ToolContext) -> Server:
    """Create and configure the MCP server instance."""
    server = Server(context.settings.mcp_server_name, version=context.settings.mcp_server_version)

    @server.list_tools()
    async def _list_tools() -> list[Tool]:
        return await list_tools()

    @server.call_tool()
    async def _call_tool(name: str, arguments: dict | None) -> list[TextContent]:
        return await call_tool(context, name, arguments)

    @server.list_resources()
    async def _list_resources() -> list[Resource]:
        return await list_resources()

    @server.read_resource()
    async def _read_resource(uri) -> str:
        return await read_resource(uri)

    @server.list_prompts()
    async def _list_prompts() -> list[Prompt]:
        return await list_prompts()

    @server.get_prompt()
    async def _get_prompt(name: str, arguments: dict | None = None) -> GetPromptResult:
        return await get_prompt(name, arguments)

    return server


# ---------------------------------------------------------------------------
# Entry-point: run MCP server over stdio
# ---------------------------------------------------------------------------


async def run_mcp_server(context: ToolContext) -> None:
    """Start the MCP server using stdio transport."""
    server = create_mcp_server(context)
    logger.info(
        "Starting MCP server '%s' v%s (stdio)",
        context.settings.mcp_server_name,
        context.settings.mcp_server_version,
    )

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def check_credentials() -> None:
    """Exit with status 1 when any Google Ads credential is missing."""
    missing = settings.missing_credentials()
    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)


def main() -> None:
    """CLI entry-point."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    check_credentials()
    asyncio.run(run_mcp_server(ToolContext.from_settings(settings)))


if __name__ == "__main__":
    main()
