"""Launch pipeline: task lookup, registry auth, image pull and local run."""

import logging
import sys
from collections.abc import Callable
from enum import StrEnum
from typing import TextIO

from ecs_local.config.settings import EcsLocalSettings, LaunchConfig
from ecs_local.core.aws.ecr import EcrRegistryAuth, decode_authorization_token
from ecs_local.core.aws.ecs import EcsControlPlane
from ecs_local.core.aws.errors import describe_error
from ecs_local.core.credentials.session import build_cache_provider, create_session
from ecs_local.core.interfaces import ContainerRuntime, ControlPlaneClient, RegistryAuthClient
from ecs_local.core.models import ContainerSpec, LaunchPlan, TaskDefinition
from ecs_local.core.runtime.docker import DockerRuntime
from ecs_local.errors import ConfigurationError, EcsLocalError, ExitCode

logger = logging.getLogger(__name__)


class Stage(StrEnum):
    """Pipeline stages, in execution order."""

    INIT = "init"
    RESOLVING_CREDENTIALS = "resolving-credentials"
    DESCRIBING_TASK = "describing-task"
    AUTHENTICATING_REGISTRY = "authenticating-registry"
    PULLING_IMAGE = "pulling-image"
    RUNNING_CONTAINER = "running-container"
    DONE = "done"


def _noop(_: str) -> None:
    return None


class LaunchPipeline:
    """Run the first container of a task definition locally.

    Each stage runs once, in order. Any failure stops the pipeline and leaves
    ``stage`` pointing at the stage that failed.
    """

    def __init__(
        self,
        config: LaunchConfig,
        control_plane: ControlPlaneClient,
        registry: RegistryAuthClient,
        runtime: ContainerRuntime,
        reporter: Callable[[str], None] = _noop,
        progress: TextIO | None = None,
    ) -> None:
        self.config = config
        self.control_plane = control_plane
        self.registry = registry
        self.runtime = runtime
        self.reporter = reporter
        self.progress = progress
        self.stage = Stage.INIT

    def run(self) -> int:
        """Run every stage and return the container's exit status."""
        self.stage = Stage.DESCRIBING_TASK
        task = self.control_plane.describe_task_definition(self.config.task_definition)
        container = select_container(task)
        logger.debug("Using container %s from %s", container.name, task.arn or task.family)

        self.stage = Stage.AUTHENTICATING_REGISTRY
        auth = decode_authorization_token(self.registry.get_authorization_token())

        self.stage = Stage.PULLING_IMAGE
        self.reporter(f"==> Pulling {container.image}")
        progress = (self.progress or sys.stdout) if self.config.verbose else None
        self.runtime.pull_image(container.image, auth, progress)

        self.stage = Stage.RUNNING_CONTAINER
        plan = build_launch_plan(container, self.config.command)
        exit_status = self.runtime.run(plan)

        self.stage = Stage.DONE
        return exit_status


def select_container(task: TaskDefinition) -> ContainerSpec:
    """Return the container to run from a task definition."""
    if not task.containers:
        raise ConfigurationError(
            f"Task definition {task.arn or task.family} has no container definitions."
        )
    return task.containers[0]


def build_launch_plan(
    container: ContainerSpec, command_override: tuple[str, ...] = ()
) -> LaunchPlan:
    """Build the local launch request for a container.

    Args:
        container: Container spec from the task definition.
        command_override: Command given on the command line, if any.

    Returns:
        The launch plan. A non-empty override replaces the default command.
    """
    return LaunchPlan(
        image=container.image,
        environment=tuple(entry.render() for entry in container.environment),
        command=tuple(command_override) if command_override else container.command,
        interactive=True,
        remove=True,
    )


def launch(
    config: LaunchConfig,
    settings: EcsLocalSettings,
    reporter: Callable[[str], None] = _noop,
    error_reporter: Callable[[str], None] = _noop,
) -> int:
    """Wire the AWS and Docker collaborators and run the pipeline.

    Args:
        config: The launch configuration.
        settings: Settings for the cache directory and docker binary.
        reporter: Receives progress messages.
        error_reporter: Receives the one-line failure message.

    Returns:
        The process exit code.
    """
    stage = Stage.RESOLVING_CREDENTIALS
    try:
        cache_provider = build_cache_provider(config, settings)
        session = create_session(config, cache_provider)
        pipeline = LaunchPipeline(
            config,
            control_plane=EcsControlPlane(session),
            registry=EcrRegistryAuth(session),
            runtime=DockerRuntime(docker_binary=settings.docker_binary),
            reporter=reporter,
        )
        try:
            return pipeline.run()
        finally:
            stage = pipeline.stage
    except EcsLocalError as exc:
        logger.debug("Launch failed during %s", stage, exc_info=True)
        error_reporter(describe_error(exc))
        return int(exc.exit_code)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Launch failed during %s", stage, exc_info=True)
        error_reporter(describe_error(exc))
        return int(ExitCode.ERROR)
