"""Local Kroki service management through `docker compose`.

Starts, stops, inspects and updates the Kroki containers defined in
docker-compose.yml (or KROKI_COMPOSE_FILE). Orchestration itself is left to
Docker; this module only runs commands and keeps an EndpointConfig pointed at
the right service.
"""

from __future__ import annotations

import functools
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from core.endpoint import LOCAL_ENDPOINT, EndpointConfig
from core.errors import DockerComposeExecutionError, ServiceManagementError
from core.log import get_logger

logger = get_logger("service")

SERVICE_DEFINITION_FILE = Path(__file__).parent / "docker-compose.yml"
PROJECT_NAME = "kroki"

ComposeRunner = Callable[[List[str]], str]


def execute_docker_compose(args: Sequence[str], *, compose_file: Optional[Path] = None) -> str:
    """Run a docker compose command against the service definition.

    Returns captured stdout. Raises ServiceManagementError when docker is
    not installed and DockerComposeExecutionError on a non-zero exit.
    """
    definition = compose_file or SERVICE_DEFINITION_FILE
    cmd = [
        "docker",
        "compose",
        "--file",
        str(definition),
        "--project-name",
        PROJECT_NAME,
        *args,
    ]
    logger.info("Running: %s", " ".join(cmd))

    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except FileNotFoundError as e:
        raise ServiceManagementError("Docker and/or Docker Compose are not available on this system") from e
    except subprocess.CalledProcessError as e:
        message = (e.stderr or e.stdout or "").strip() or "no output"
        raise DockerComposeExecutionError(message, command=cmd, returncode=e.returncode) from e

    return proc.stdout


def _lines(output: str) -> List[str]:
    return [line.strip() for line in (output or "").splitlines() if line.strip()]


class ComposeService:
    # Manages the local Kroki stack and keeps `endpoint` in sync with it.

    def __init__(
        self,
        *,
        endpoint: EndpointConfig,
        runner: Optional[ComposeRunner] = None,
        compose_file: Optional[Path] = None,
    ) -> None:
        self._endpoint = endpoint
        self._run = runner or functools.partial(execute_docker_compose, compose_file=compose_file)

    def start(self, update_endpoint: bool = True) -> Optional[str]:
        """Start the service components; returns the new endpoint if updated."""
        self._run(["up", "--detach"])
        if update_endpoint:
            return self._endpoint.set(LOCAL_ENDPOINT)
        return None

    def stop(self, perform_cleanup: bool = True) -> str:
        """Stop running components and move the endpoint off the local service."""
        self._run(["kill"])
        if perform_cleanup:
            self._run(["rm", "--force"])
        return self._endpoint.reset()

    def status(self) -> Dict[str, bool]:
        """Map each service component to whether it is currently running."""
        services = _lines(self._run(["config", "--services"]))
        running = set(_lines(self._run(["ps", "--services", "--filter", "status=running"])))
        return {name: name in running for name in services}

    def update(self) -> None:
        """Pull the latest images for all service components."""
        self._run(["pull"])
