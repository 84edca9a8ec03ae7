"""MCP tools to manage a local Kroki service (requires Docker Compose).

Compose commands block, so they run in a worker thread to keep the event
loop responsive.
"""

from __future__ import annotations

import asyncio
from typing import Dict, Optional

from mcp.server.fastmcp import FastMCP

from service.compose import ComposeService


def register(mcp: FastMCP, *, service: ComposeService) -> None:
    @mcp.tool(name="service_start")
    async def service_start(update_endpoint: bool = True) -> Optional[str]:
        """Start the local Kroki containers; optionally point rendering at them."""
        return await asyncio.to_thread(service.start, update_endpoint)

    @mcp.tool(name="service_stop")
    async def service_stop(perform_cleanup: bool = True) -> str:
        """Stop the local Kroki containers and return the fallback endpoint."""
        return await asyncio.to_thread(service.stop, perform_cleanup)

    @mcp.tool(name="service_status")
    async def service_status() -> Dict[str, bool]:
        """Report which local Kroki components are running."""
        return await asyncio.to_thread(service.status)

    @mcp.tool(name="service_update")
    async def service_update() -> str:
        """Pull the latest Kroki images."""
        await asyncio.to_thread(service.update)
        return "updated"
