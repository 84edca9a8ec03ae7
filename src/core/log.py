"""Logging helpers.

All output goes to stderr; stdout belongs to the MCP stdio transport.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO, Union

LOGGER_NAME = "kroki-mcp"


def setup_logging(level: Union[int, str] = logging.INFO, stream: TextIO = sys.stderr) -> None:
    """Configure basic logging for the process."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a child of the project logger (or the project logger itself)."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)
