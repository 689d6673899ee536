"""Tests for ECS task definition lookup."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from ecs_local.core.aws.ecs import EcsControlPlane, parse_task_definition
from ecs_local.core.models import EnvironmentVariable
from ecs_local.errors import ControlPlaneError, ExitCode

TASK_DEFINITION = {
    "taskDefinitionArn": "arn:aws:ecs:us-east-1:123456789012:task-definition/web:7",
    "family": "web",
    "revision": 7,
    "containerDefinitions": [
        {
            "name": "web",
            "image": "123456789012.dkr.ecr.us-east-1.amazonaws.com/web:1.2.3",
            "environment": [
                {"name": "DEBUG", "value": "false"},
                {"name": "PORT", "value": "8080"},
            ],
            "command": ["gunicorn", "app:main"],
        },
        {"name": "sidecar", "image": "envoyproxy/envoy:v1.29"},
    ],
}


def test_parse_task_definition() -> None:
    task = parse_task_definition(TASK_DEFINITION)

    assert task.family == "web"
    assert task.revision == 7
    assert [container.name for container in task.containers] == ["web", "sidecar"]
    web = task.containers[0]
    assert web.environment == (
        EnvironmentVariable("DEBUG", "false"),
        EnvironmentVariable("PORT", "8080"),
    )
    assert web.command == ("gunicorn", "app:main")
    assert task.containers[1].environment == ()
    assert task.containers[1].command == ()


def test_parse_task_definition_without_containers() -> None:
    task = parse_task_definition({"family": "empty", "revision": 1})

    assert task.containers == ()


def test_describe_task_definition() -> None:
    session = MagicMock()
    session.client.return_value.describe_task_definition.return_value = {
        "taskDefinition": TASK_DEFINITION
    }

    task = EcsControlPlane(session).describe_task_definition("web:7")

    session.client.assert_called_once_with("ecs")
    session.client.return_value.describe_task_definition.assert_called_once_with(
        taskDefinition="web:7"
    )
    assert task.arn.endswith("task-definition/web:7")


@pytest.mark.parametrize(
    "error",
    [
        ClientError(
            {"Error": {"Code": "ClientException", "Message": "Unable to describe."}},
            "DescribeTaskDefinition",
        ),
        EndpointConnectionError(endpoint_url="https://ecs.us-east-1.amazonaws.com"),
    ],
)
def test_describe_errors_become_control_plane_errors(error: Exception) -> None:
    session = MagicMock()
    session.client.return_value.describe_task_definition.side_effect = error

    with pytest.raises(ControlPlaneError, match="describe task definition web") as excinfo:
        EcsControlPlane(session).describe_task_definition("web")

    assert excinfo.value.__cause__ is error
    assert excinfo.value.exit_code is ExitCode.AWS_ERROR
