"""MCP tools to inspect and change the Kroki endpoint used for rendering."""

from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP

from core.endpoint import EndpointConfig


def register(mcp: FastMCP, *, endpoint: EndpointConfig) -> None:
    config = endpoint

    @mcp.tool(name="get_endpoint")
    async def get_endpoint() -> str:
        """Return the Kroki endpoint currently used for rendering."""
        return config.current

    @mcp.tool(name="set_endpoint")
    async def set_endpoint(endpoint: Optional[str] = None) -> str:
        """Point rendering at `endpoint`.

        Without an endpoint, falls back to KROKI_ENDPOINT and then the public
        https://kroki.io service. Returns the endpoint now in use.
        """
        value = None if endpoint is None else endpoint.strip() or None
        return config.set(value)
