"""Kroki render client.

Renders a Diagram by GETting `{endpoint}/{type}/{format}/{payload}` where the
payload is the deflated, URL-safe Base64 specification. Kroki's known error
responses are decoded into typed errors; everything else propagates as the
original httpx exception.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import httpx

from core.encoding import encode
from core.endpoint import EndpointConfig
from core.errors import InvalidDiagramSpecificationError, InvalidOutputFormatError
from core.log import get_logger
from core.models import Diagram, validate_output_format

logger = get_logger("kroki")

_UNSUPPORTED_FORMAT_RE = re.compile(r"^\s*unsupported output format\b", re.IGNORECASE)


class ServiceErrorKind(Enum):
    SPECIFICATION = "specification"
    OUTPUT_FORMAT = "output_format"


@dataclass(frozen=True, slots=True)
class ServiceError:
    kind: ServiceErrorKind
    message: str


def _error_message(response: httpx.Response) -> str:
    # Kroki answers JSON ({"error": ...}) when asked for it, plain text otherwise
    if "application/json" in response.headers.get("Content-Type", ""):
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            return body["error"].strip()

    return (response.text or "").strip()


def decode_service_error(response: httpx.Response) -> Optional[ServiceError]:
    """Match a failed response against the error shapes Kroki is known to send.

    Returns None when the response is not one of them.
    """
    if response.status_code != 400:
        return None

    message = _error_message(response)
    if not message:
        return None

    if _UNSUPPORTED_FORMAT_RE.match(message):
        return ServiceError(ServiceErrorKind.OUTPUT_FORMAT, message)
    return ServiceError(ServiceErrorKind.SPECIFICATION, message)


class KrokiClient:
    """Async client for a Kroki service.

    `endpoint` is either an EndpointConfig shared with other components, or
    a base URL (None resolves KROKI_ENDPOINT, then the public service).
    Every render makes exactly one request; retries are up to the caller.
    """

    def __init__(
        self,
        *,
        endpoint: Union[EndpointConfig, str, None] = None,
        timeout: float = 20.0,
        verify: bool = True,
    ) -> None:
        self._endpoint = endpoint if isinstance(endpoint, EndpointConfig) else EndpointConfig(endpoint)
        self._timeout = float(timeout)
        self._verify = bool(verify)

    @property
    def endpoint(self) -> EndpointConfig:
        return self._endpoint

    def build_url(self, diagram: Diagram, output_format: str) -> str:
        fmt = validate_output_format(output_format)
        base = self._endpoint.current.rstrip("/")
        return f"{base}/{diagram.kroki_type}/{fmt}/{encode(diagram.specification)}"

    async def render(self, diagram: Diagram, output_format: str) -> bytes:
        """Render `diagram` to `output_format` and return the raw response body.

        Raises:
          ValidationError if output_format is not a non-empty identifier
          (before any network IO).
          InvalidDiagramSpecificationError / InvalidOutputFormatError when
          Kroki rejects the diagram or the format.
          httpx.HTTPError for anything else (connection errors, timeouts,
          unrecognized error responses), unwrapped.
        """
        url = self.build_url(diagram, output_format)
        logger.debug("GET %s", url)

        async with self._create_client() as c:
            r = await c.get(url)
            try:
                r.raise_for_status()
            except httpx.HTTPStatusError as e:
                self._raise_service_error(r, diagram, e)
                raise
            return r.content

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, verify=self._verify, follow_redirects=True)

    def _raise_service_error(self, response: httpx.Response, diagram: Diagram, cause: httpx.HTTPStatusError) -> None:
        error = decode_service_error(response)
        if error is None:
            return

        logger.warning("Kroki rejected %s diagram (%s): %s", diagram.type, error.kind.value, error.message)
        if error.kind is ServiceErrorKind.OUTPUT_FORMAT:
            raise InvalidOutputFormatError(error.message, diagram) from cause
        raise InvalidDiagramSpecificationError(error.message, diagram) from cause
