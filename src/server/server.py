"""Server bootstrap for the Kroki MCP service.

Creates the FastMCP instance, wires one shared endpoint configuration into
the Kroki client and the local-service manager, registers tools, resources
and prompts, and starts the MCP server (stdio transport).
"""

from mcp.server.fastmcp import FastMCP

from clients.kroki_client import KrokiClient
from config import HTTP_VERIFY, KROKI_COMPOSE_FILE, KROKI_TIMEOUT, LOG_LEVEL
from core.endpoint import EndpointConfig
from core.log import setup_logging
from service.compose import ComposeService

from tools.endpoint import register as register_endpoint
from tools.render_diagram import register as register_render_diagram
from tools.service import register as register_service

from resources.diagram_types import register_resources
from prompts.diagram_prompt import register_prompts

mcp = FastMCP("kroki-mcp")


def register_tools() -> None:
    endpoint = EndpointConfig()
    kroki_client = KrokiClient(endpoint=endpoint, timeout=KROKI_TIMEOUT, verify=HTTP_VERIFY)
    service = ComposeService(endpoint=endpoint, compose_file=KROKI_COMPOSE_FILE)

    register_render_diagram(mcp, kroki_client=kroki_client)
    register_endpoint(mcp, endpoint=endpoint)
    register_service(mcp, service=service)


def register_all() -> None:
    register_tools()
    register_resources(mcp)
    register_prompts(mcp)


register_all()


def main() -> None:
    setup_logging(LOG_LEVEL)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
