"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (e.g.
PROJECT_ROOT, HTTP_VERIFY, KROKI_TIMEOUT, output and logging settings).

The Kroki endpoint itself is resolved lazily by core.endpoint so that a
KROKI_ENDPOINT set after import is still honored.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_path(name: str) -> Optional[Path]:
    raw = (os.environ.get(name) or "").strip()
    return Path(raw).resolve() if raw else None


# Project root for file-path diagrams and rendered output
PROJECT_ROOT = Path(os.environ.get("PROJECT_ROOT", ".")).resolve()

# Network / HTTP
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)

# Kroki
KROKI_TIMEOUT = _env_float("KROKI_TIMEOUT", 20.0)

# Local service (docker compose); None means the bundled definition
KROKI_COMPOSE_FILE = _env_path("KROKI_COMPOSE_FILE")

# Output / logging
DIAGRAM_OUT_DIR = os.environ.get("DIAGRAM_OUT_DIR", "diagrams").strip()
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
