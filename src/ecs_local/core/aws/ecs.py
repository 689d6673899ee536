"""ECS task definition lookup."""

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ecs_local.core.interfaces import ControlPlaneClient
from ecs_local.core.models import ContainerSpec, EnvironmentVariable, TaskDefinition
from ecs_local.errors import ControlPlaneError

logger = logging.getLogger(__name__)


class EcsControlPlane(ControlPlaneClient):
    """Describe task definitions through the ECS API."""

    def __init__(self, session: Any) -> None:
        self._session = session

    def describe_task_definition(self, name: str) -> TaskDefinition:
        """Fetch a task definition.

        Args:
            name: Family, family:revision or full ARN.

        Returns:
            The task definition snapshot.
        """
        ecs = self._session.client("ecs")
        logger.debug("Describing task definition %s", name)
        try:
            response = ecs.describe_task_definition(taskDefinition=name)
        except (ClientError, BotoCoreError) as exc:
            raise ControlPlaneError(f"Failed to describe task definition {name}: {exc}") from exc

        return parse_task_definition(response["taskDefinition"])


def parse_task_definition(data: dict[str, Any]) -> TaskDefinition:
    """Convert an ECS ``taskDefinition`` payload into a TaskDefinition."""
    return TaskDefinition(
        arn=str(data.get("taskDefinitionArn", "")),
        family=str(data.get("family", "")),
        revision=int(data.get("revision", 0)),
        containers=tuple(_parse_container(item) for item in data.get("containerDefinitions", [])),
    )


def _parse_container(data: dict[str, Any]) -> ContainerSpec:
    """Convert one container definition."""
    environment = tuple(
        EnvironmentVariable(name=str(item["name"]), value=str(item.get("value", "")))
        for item in data.get("environment", [])
    )
    return ContainerSpec(
        name=str(data.get("name", "")),
        image=str(data.get("image", "")),
        environment=environment,
        command=tuple(str(part) for part in data.get("command", [])),
    )
