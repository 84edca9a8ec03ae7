"""MCP resources describing what Kroki can render."""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from core.models import DIAGRAM_TYPES, LIMITED_DIAGRAM_SUPPORT, MIME_TYPES


def diagram_types_json() -> str:
    return json.dumps(list(DIAGRAM_TYPES), indent=2)


def output_formats_json() -> str:
    payload = {
        "universal": ["svg"],
        "limited": {fmt: sorted(types) for fmt, types in LIMITED_DIAGRAM_SUPPORT.items()},
        "mime_types": dict(MIME_TYPES),
    }
    return json.dumps(payload, indent=2)


def register_resources(mcp: FastMCP) -> None:
    """
    Register Kroki catalogue resources for the MCP server.
    """

    @mcp.resource(
        "kroki://diagram-types",
        mime_type="application/json",
        description="Diagram types with first-class Kroki support",
    )
    def diagram_types() -> str:
        return diagram_types_json()

    @mcp.resource(
        "kroki://output-formats",
        mime_type="application/json",
        description="Output formats whose support varies per diagram type, plus MIME types",
    )
    def output_formats() -> str:
        return output_formats_json()
