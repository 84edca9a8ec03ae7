"""MCP tool to render any Kroki-supported diagram.

Registers 'render_diagram' which builds a Diagram (inline or from a file under
PROJECT_ROOT), renders it through Kroki, saves the output to disk and returns
an MCP content payload (ImageContent for images, TextContent for text).
"""

from __future__ import annotations

import base64
import re
from pathlib import Path
from typing import Optional, Union

from mcp.server.fastmcp import FastMCP
from mcp.types import ImageContent, TextContent

from clients.kroki_client import KrokiClient
from config import DIAGRAM_OUT_DIR, HTTP_VERIFY, KROKI_TIMEOUT, PROJECT_ROOT
from core.errors import AccessDeniedError, ValidationError
from core.log import get_logger
from core.models import (
    best_output_format,
    mime_type_for,
    new_diagram,
    supports_output_format,
    validate_output_format,
)

logger = get_logger("tools.render_diagram")


def _sanitize_filename_stem(title: str) -> str:
    # Safe filename: trim, remove unsafe chars, replace spaces, limit length
    s = (title or "").strip()
    if not s:
        return "diagram"
    s = re.sub(r"[^\w\s-]", "", s, flags=re.UNICODE)
    s = s.strip().replace(" ", "_")
    return s[:80] if s else "diagram"


def _under_project_root(raw: str, *, what: str) -> Path:
    p = Path(raw)
    resolved = (p if p.is_absolute() else (PROJECT_ROOT / p)).resolve()

    try:
        resolved.relative_to(PROJECT_ROOT)
    except ValueError as e:
        raise AccessDeniedError(f"{what} must be within PROJECT_ROOT") from e

    return resolved


def _safe_out_dir() -> Path:
    return _under_project_root((DIAGRAM_OUT_DIR or "").strip() or "diagrams", what="DIAGRAM_OUT_DIR")


def _safe_input_path(path: str) -> Path:
    raw = (path or "").strip()
    if not raw:
        raise ValidationError("Path is empty")
    return _under_project_root(raw, what="Diagram path")


def register(mcp: FastMCP, *, kroki_client: Optional[KrokiClient] = None) -> None:
    client = kroki_client or KrokiClient(timeout=KROKI_TIMEOUT, verify=HTTP_VERIFY)

    @mcp.tool(name="render_diagram")
    async def render_diagram(
        diagram_type: str,
        specification: Optional[str] = None,
        path: Optional[str] = None,
        output_format: Optional[str] = None,
        title: Optional[str] = None,
    ) -> Union[ImageContent, TextContent]:
        """Render a diagram through Kroki and return it as MCP content.

        Params:
          - diagram_type: Kroki diagram type (plantuml, mermaid, graphviz, ...).
          - specification: diagram source text; mutually exclusive with `path`.
          - path: file under the project root holding the diagram source.
          - output_format: svg, png, jpeg, pdf, txt, ... sent verbatim; when
            omitted, png if the diagram type supports it, otherwise svg.
          - title: optional title used for the output filename (sanitized).

        Raises:
          DiagramPathOrSpecificationError if both or neither of specification
          and path are given; AccessDeniedError for paths outside the project
          root; InvalidDiagramSpecificationError / InvalidOutputFormatError
          when Kroki rejects the request; network errors on render.
        """
        source = None if path is None else _safe_input_path(path)
        diagram = new_diagram(diagram_type, specification, path=source)

        if output_format is None:
            fmt = best_output_format(diagram)
        else:
            fmt = validate_output_format(output_format)
        if not supports_output_format(diagram, fmt):
            # The service has the final word; just leave a trace.
            logger.info("%s is not known to support %s output", diagram.kroki_type, fmt)

        data = await client.render(diagram, fmt)

        stem = _sanitize_filename_stem(title or diagram.kroki_type)
        out_dir = _safe_out_dir()
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / f"{stem}.{fmt}").write_bytes(data)

        mime = mime_type_for(fmt)
        if mime.startswith("text/"):
            return TextContent(type="text", text=data.decode("utf-8", errors="replace"))
        return ImageContent(
            type="image",
            mimeType=mime,
            data=base64.b64encode(data).decode("ascii"),
        )
