"""Docker pull and run helpers."""

import logging
import shutil
import subprocess  # nosec B404
import sys
from collections.abc import Iterable
from typing import Any, TextIO

import docker
from docker.errors import APIError, DockerException
from docker.utils import parse_repository_tag

from ecs_local.core.interfaces import ContainerRuntime
from ecs_local.core.models import LaunchPlan, RegistryAuth
from ecs_local.errors import ContainerRuntimeError

logger = logging.getLogger(__name__)


class DockerRuntime(ContainerRuntime):
    """Pull with the Docker SDK and run through the docker CLI."""

    def __init__(self, client: Any | None = None, docker_binary: str = "docker") -> None:
        self._client = client
        self._docker_binary = docker_binary

    @property
    def client(self) -> Any:
        """Return the Docker SDK client, connecting on first use."""
        if self._client is None:
            try:
                self._client = docker.from_env()
            except DockerException as exc:
                raise ContainerRuntimeError(f"Could not connect to Docker: {exc}") from exc
        return self._client

    def pull_image(
        self, reference: str, auth: RegistryAuth, progress: TextIO | None = None
    ) -> None:
        """Pull an image from the registry.

        Args:
            reference: Image reference from the task definition.
            auth: Registry credentials for this pull.
            progress: Stream that receives pull progress, if any.
        """
        repository, tag = parse_repository_tag(reference)
        logger.debug("Pulling %s (tag %s) from %s", repository, tag or "latest", auth.registry)
        try:
            stream = self.client.api.pull(
                repository,
                tag=tag or "latest",
                auth_config=auth.as_docker_auth_config(),
                stream=True,
                decode=True,
            )
            _consume_pull_log(stream, progress)
        except APIError as exc:
            detail = exc.explanation or exc
            raise ContainerRuntimeError(f"Failed to pull {reference}: {detail}") from exc
        except DockerException as exc:
            raise ContainerRuntimeError(f"Failed to pull {reference}: {exc}") from exc

    def run(self, plan: LaunchPlan) -> int:
        """Run the container in the foreground with the terminal attached.

        Args:
            plan: The launch plan to execute.

        Returns:
            The exit status of the docker process.
        """
        executable = shutil.which(self._docker_binary)
        if not executable:
            raise ContainerRuntimeError(f"Executable not found: {self._docker_binary}")

        command = [executable, *docker_run_args(plan, tty=sys.stdin.isatty())]
        logger.debug("Running: %s", " ".join(command))
        try:
            process = subprocess.Popen(command)  # nosec B603
        except OSError as exc:
            raise ContainerRuntimeError(f"Failed to start {self._docker_binary}: {exc}") from exc
        return exit_status(_wait(process))


def docker_run_args(plan: LaunchPlan, tty: bool = True) -> list[str]:
    """Build the ``docker run`` arguments for a launch plan.

    Args:
        plan: The launch plan to render.
        tty: Whether to allocate a pseudo-terminal.

    Returns:
        Arguments following the docker executable.
    """
    args = ["run"]
    if plan.interactive:
        args.append("-it" if tty else "-i")
    if plan.remove:
        args.append("--rm")
    for entry in plan.environment:
        args.extend(["-e", entry])
    args.append(plan.image)
    args.extend(plan.command)
    return args


def exit_status(returncode: int) -> int:
    """Map a child return code onto a shell exit status.

    A child killed by signal N reports ``-N``, which becomes ``128 + N``.
    """
    return 128 - returncode if returncode < 0 else returncode


def _wait(process: subprocess.Popen) -> int:
    """Wait for the child, leaving Ctrl-C for it to handle."""
    while True:
        try:
            return process.wait()
        except KeyboardInterrupt:
            # The terminal already sent SIGINT to the child's process group.
            logger.debug("Interrupted, waiting for %s to exit", process.args[0])


def _consume_pull_log(stream: Iterable[dict[str, Any]], progress: TextIO | None) -> None:
    """Drain the pull stream, failing on error entries."""
    for line in stream:
        if "error" in line:
            detail = line.get("errorDetail", {}).get("message") or line["error"]
            raise ContainerRuntimeError(f"Docker pull failed: {detail}")
        if progress is None:
            continue
        status = line.get("status")
        if not status:
            continue
        layer = f"{line['id']}: " if "id" in line else ""
        suffix = f" {line['progress']}" if line.get("progress") else ""
        progress.write(f"{layer}{status}{suffix}\n")
        progress.flush()
