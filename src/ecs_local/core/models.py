"""Data models for task definitions, registry auth and launch plans."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EnvironmentVariable:
    """A single container environment entry."""

    name: str
    value: str

    def render(self) -> str:
        """Return the entry as ``NAME=VALUE``."""
        return f"{self.name}={self.value}"


@dataclass(frozen=True)
class ContainerSpec:
    """The parts of an ECS container definition needed to run it locally."""

    name: str
    image: str
    environment: tuple[EnvironmentVariable, ...] = ()
    command: tuple[str, ...] = ()


@dataclass(frozen=True)
class TaskDefinition:
    """Read-only snapshot of an ECS task definition."""

    arn: str
    family: str
    revision: int
    containers: tuple[ContainerSpec, ...] = ()


@dataclass(frozen=True)
class AuthorizationToken:
    """Raw ECR authorization data."""

    token: str
    proxy_endpoint: str


@dataclass(frozen=True)
class RegistryAuth:
    """Decoded registry credentials, valid for one pull."""

    username: str
    password: str
    registry: str

    def as_docker_auth_config(self) -> dict[str, str]:
        """Return the auth config in the shape the Docker SDK expects."""
        return {
            "username": self.username,
            "password": self.password,
            "serveraddress": self.registry,
        }


@dataclass(frozen=True)
class LaunchPlan:
    """Materialised request to run a container locally."""

    image: str
    environment: tuple[str, ...] = ()
    command: tuple[str, ...] = ()
    interactive: bool = True
    remove: bool = True
