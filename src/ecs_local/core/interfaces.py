"""Abstract interfaces for the collaborators of the launch pipeline.

Currently used by:
- ECS (ControlPlaneClient)
- ECR (RegistryAuthClient)
- Docker (ContainerRuntime)
"""

from abc import ABC, abstractmethod
from typing import TextIO

from ecs_local.core.models import AuthorizationToken, LaunchPlan, RegistryAuth, TaskDefinition


class ControlPlaneClient(ABC):
    """Interface for looking up task definitions."""

    @abstractmethod
    def describe_task_definition(self, name: str) -> TaskDefinition:
        """Fetch a task definition by family, family:revision or ARN."""
        raise NotImplementedError


class RegistryAuthClient(ABC):
    """Interface for issuing short-lived registry tokens."""

    @abstractmethod
    def get_authorization_token(self) -> AuthorizationToken:
        """Return a fresh registry authorization token."""
        raise NotImplementedError


class ContainerRuntime(ABC):
    """Interface for the local container engine."""

    @abstractmethod
    def pull_image(
        self, reference: str, auth: RegistryAuth, progress: TextIO | None = None
    ) -> None:
        """Pull an image, optionally writing progress to a stream."""
        raise NotImplementedError

    @abstractmethod
    def run(self, plan: LaunchPlan) -> int:
        """Run a container in the foreground and return its exit status."""
        raise NotImplementedError
