from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

import httpx

if TYPE_CHECKING:
    from core.models import Diagram


# Transport failures are not wrapped; the alias only names them.
TransportError = httpx.HTTPError


class KrokiError(Exception):
    """Base error for the Kroki client."""


class ValidationError(KrokiError):
    """Raised when user input is invalid."""


class AccessDeniedError(KrokiError):
    """Raised when an operation tries to access data outside allowed scope."""


class ConstructionError(ValidationError):
    """Raised when a Diagram receives an invalid combination of arguments."""


class DiagramPathOrSpecificationError(ConstructionError):
    """Raised when `path` and `specification` are not given mutually exclusive."""

    def __init__(self, path: Optional[str], specification: Optional[str]) -> None:
        self.path = path
        self.specification = specification
        if path is None and specification is None:
            reason = "neither `path` nor `specification` was given"
        else:
            reason = "both `path` and `specification` were given"
        super().__init__(f"Exactly one of `path` or `specification` must be given, but {reason}")


class _DiagramServiceError(KrokiError):
    def __init__(self, message: str, diagram: "Diagram") -> None:
        self.message = message
        self.diagram = diagram
        super().__init__(message)


class InvalidDiagramSpecificationError(_DiagramServiceError):
    """Raised when Kroki rejects a diagram's specification as malformed."""

    def __str__(self) -> str:
        return f"The {self.diagram.type} diagram specification is invalid: {self.message}"


class InvalidOutputFormatError(_DiagramServiceError):
    """Raised when Kroki rejects the requested output format for a diagram."""

    def __str__(self) -> str:
        return f"Invalid output format for {self.diagram.type} diagram: {self.message}"


class ServiceManagementError(KrokiError):
    """Raised when Docker and/or Docker Compose are not available."""


class DockerComposeExecutionError(ServiceManagementError):
    """Raised when a `docker compose` command exits with a non-zero status."""

    def __init__(self, message: str, *, command: Sequence[str] = (), returncode: Optional[int] = None) -> None:
        self.message = message
        self.command = tuple(command)
        self.returncode = returncode
        super().__init__(message)

    def __str__(self) -> str:
        cmd = " ".join(self.command) or "docker compose"
        return (
            f"`{cmd}` failed (exit code {self.returncode}): {self.message}\n"
            "If the Docker daemon is running and this persists, please report it "
            "together with the output of `docker compose version`."
        )
