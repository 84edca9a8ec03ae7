"""Diagram value and the diagram/output-format catalogue.

A Diagram pairs a case-insensitive diagram type with its textual
specification. `new_diagram` is the public constructor: it accepts the
specification inline or loads it from a file, never both.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Sequence, Union

from core.errors import DiagramPathOrSpecificationError, ValidationError


# Diagram types with first-class support in Kroki. Informational only: any
# other type is still sent to the service, which is the source of truth.
DIAGRAM_TYPES: tuple[str, ...] = (
    "actdiag",
    "blockdiag",
    "bpmn",
    "bytefield",
    "c4plantuml",
    "ditaa",
    "erd",
    "excalidraw",
    "graphviz",
    "mermaid",
    "nomnoml",
    "nwdiag",
    "packetdiag",
    "pikchr",
    "plantuml",
    "rackdiag",
    "seqdiag",
    "structurizr",
    "svgbob",
    "umlet",
    "vega",
    "vegalite",
    "wavedrom",
)

# Output formats that only some diagram types support. SVG is universal and
# therefore absent; the union of all values covers every supported type.
LIMITED_DIAGRAM_SUPPORT: Dict[str, FrozenSet[str]] = {
    "pdf": frozenset(
        {"actdiag", "blockdiag", "erd", "graphviz", "nwdiag", "packetdiag", "rackdiag", "seqdiag", "vega", "vegalite"}
    ),
    "jpeg": frozenset({"c4plantuml", "erd", "graphviz", "plantuml", "umlet"}),
    "png": frozenset(
        {
            "actdiag",
            "blockdiag",
            "c4plantuml",
            "ditaa",
            "erd",
            "graphviz",
            "mermaid",
            "nwdiag",
            "packetdiag",
            "plantuml",
            "rackdiag",
            "seqdiag",
            "structurizr",
            "umlet",
            "vega",
            "vegalite",
        }
    ),
    "txt": frozenset({"c4plantuml", "plantuml", "structurizr"}),
    "utxt": frozenset({"c4plantuml", "plantuml", "structurizr"}),
}

# Output formats are spliced into the request path and output filenames.
_OUTPUT_FORMAT_RE = re.compile(r"^[A-Za-z0-9_-]+$")

MIME_TYPES: Dict[str, str] = {
    "svg": "image/svg+xml",
    "png": "image/png",
    "jpeg": "image/jpeg",
    "pdf": "application/pdf",
    "txt": "text/plain",
    "utxt": "text/plain",
    "base64": "text/plain",
}


@dataclass(frozen=True, eq=False)
class Diagram:
    """A diagram that can be rendered by a Kroki service.

    Fields:
    - type: the diagram language (e.g. "PlantUML", "mermaid"); case-insensitive,
      kept as given for display.
    - specification: the textual source of the diagram, stored verbatim.

    Prefer `new_diagram` to load the specification from a file.
    """

    type: str
    specification: str

    def __post_init__(self) -> None:
        if not (self.type or "").strip():
            raise ValidationError("Diagram type is empty")
        if not self.specification:
            raise ValidationError("Diagram specification is empty")

    @property
    def kroki_type(self) -> str:
        # Kroki paths are lower-case
        return self.type.strip().lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Diagram):
            return NotImplemented
        return self.kroki_type == other.kroki_type and self.specification == other.specification

    def __hash__(self) -> int:
        return hash((self.kroki_type, self.specification))


def new_diagram(
    type: str,
    specification: Optional[str] = None,
    *,
    path: Union[str, Path, None] = None,
) -> Diagram:
    """Construct a Diagram from an inline specification or a file.

    Exactly one of `specification` and `path` must be given, otherwise
    DiagramPathOrSpecificationError is raised. Filesystem errors while
    reading `path` propagate unchanged.
    """
    if (specification is None) == (path is None):
        raise DiagramPathOrSpecificationError(
            None if path is None else str(path),
            specification,
        )

    if path is not None:
        specification = Path(path).read_text(encoding="utf-8")

    return Diagram(type=type, specification=specification)


def supports_output_format(diagram: Union[Diagram, str], output_format: str) -> bool:
    """Best-effort local check of whether a diagram type supports a format.

    Formats outside LIMITED_DIAGRAM_SUPPORT are assumed supported; only the
    service can give a definitive answer.
    """
    kroki_type = diagram.kroki_type if isinstance(diagram, Diagram) else (diagram or "").strip().lower()
    supported = LIMITED_DIAGRAM_SUPPORT.get((output_format or "").strip().lower())
    if supported is None:
        return True
    return kroki_type in supported


def mime_type_for(output_format: str) -> str:
    return MIME_TYPES.get((output_format or "").strip().lower(), "application/octet-stream")


def validate_output_format(output_format: str) -> str:
    """Return the stripped output format, or raise ValidationError.

    The format must be a single identifier (letters, digits, '-' or '_') so
    it can only ever occupy its own segment of the request path.
    """
    fmt = (output_format or "").strip()
    if not fmt:
        raise ValidationError("Output format is empty")
    if not _OUTPUT_FORMAT_RE.fullmatch(fmt):
        raise ValidationError(f"Output format must be an identifier, got {fmt!r}")
    return fmt


def best_output_format(diagram: Union[Diagram, str], preferences: Sequence[str] = ("png", "svg")) -> str:
    """Pick the first preferred format the diagram type is known to support.

    Falls back to svg, which every diagram type supports.
    """
    for fmt in preferences:
        if supports_output_format(diagram, fmt):
            return fmt
    return "svg"
