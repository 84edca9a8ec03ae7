"""Kroki endpoint resolution.

Resolution order, first match wins:
1. an explicit endpoint passed by the caller (returned verbatim),
2. the KROKI_ENDPOINT environment variable, if set and non-blank,
3. DEFAULT_ENDPOINT, the publicly hosted service.

EndpointConfig holds the current endpoint for one client instance.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

DEFAULT_ENDPOINT = "https://kroki.io"
LOCAL_ENDPOINT = "http://localhost:8000"
ENDPOINT_ENV_VAR = "KROKI_ENDPOINT"


def resolve_endpoint(explicit: Optional[str] = None, *, environ: Optional[Mapping[str, str]] = None) -> str:
    if explicit is not None:
        return explicit

    env = os.environ if environ is None else environ
    from_env = (env.get(ENDPOINT_ENV_VAR) or "").strip()
    if from_env:
        return from_env

    return DEFAULT_ENDPOINT


class EndpointConfig:
    # Last writer wins; callers needing ordering must serialize set() and render().
    def __init__(self, endpoint: Optional[str] = None, *, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ
        self._current = resolve_endpoint(endpoint, environ=environ)

    @property
    def current(self) -> str:
        return self._current

    def set(self, endpoint: Optional[str] = None) -> str:
        """Re-resolve the endpoint and return the value it got set to."""
        self._current = resolve_endpoint(endpoint, environ=self._environ)
        return self._current

    def reset(self) -> str:
        return self.set(None)

    def __repr__(self) -> str:
        return f"EndpointConfig({self._current!r})"
