"""AWS collaborators for the launch pipeline."""

from ecs_local.core.aws.ecr import EcrRegistryAuth, decode_authorization_token
from ecs_local.core.aws.ecs import EcsControlPlane, parse_task_definition
from ecs_local.core.aws.errors import describe_error, is_credential_failure

__all__ = [
    "EcrRegistryAuth",
    "EcsControlPlane",
    "decode_authorization_token",
    "describe_error",
    "is_credential_failure",
    "parse_task_definition",
]
