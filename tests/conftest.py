"""Shared fakes for the ecs-local tests."""

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TextIO

import pytest

from ecs_local.config.settings import EcsLocalSettings, LaunchConfig
from ecs_local.core.credentials.cache import CachedCredential
from ecs_local.core.credentials.resolver import CredentialResolver, ResolvedCredential
from ecs_local.core.interfaces import ContainerRuntime, ControlPlaneClient, RegistryAuthClient
from ecs_local.core.models import (
    AuthorizationToken,
    ContainerSpec,
    EnvironmentVariable,
    LaunchPlan,
    RegistryAuth,
    TaskDefinition,
)

SESSION_CREDENTIAL = ResolvedCredential(
    access_key_id="ASIASESSION",
    secret_access_key="session-secret",
    session_token="session-token",
    provider="assume-role",
)
STATIC_CREDENTIAL = ResolvedCredential(
    access_key_id="AKIASTATIC",
    secret_access_key="static-secret",
    session_token=None,
    provider="shared-credentials-file",
)
# base64("alice:s3cret")
ALICE_TOKEN = AuthorizationToken(
    token="YWxpY2U6czNjcmV0",
    proxy_endpoint="https://123456789012.dkr.ecr.us-east-1.amazonaws.com",
)


class FakeResolver(CredentialResolver):
    """Resolver returning a fixed credential and counting calls."""

    def __init__(
        self,
        credential: ResolvedCredential = SESSION_CREDENTIAL,
        error: Exception | None = None,
        expired: bool = False,
    ) -> None:
        self.credential = credential
        self.error = error
        self.expired = expired
        self.calls = 0

    def resolve(self) -> ResolvedCredential:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.credential

    def is_expired(self) -> bool:
        return self.expired


class FakeControlPlane(ControlPlaneClient):
    def __init__(self, task: TaskDefinition | None = None, error: Exception | None = None) -> None:
        self.task = task
        self.error = error
        self.requested: list[str] = []

    def describe_task_definition(self, name: str) -> TaskDefinition:
        self.requested.append(name)
        if self.error is not None:
            raise self.error
        assert self.task is not None
        return self.task


class FakeRegistry(RegistryAuthClient):
    def __init__(self, token: AuthorizationToken = ALICE_TOKEN, error: Exception | None = None):
        self.token = token
        self.error = error
        self.calls = 0

    def get_authorization_token(self) -> AuthorizationToken:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.token


class FakeRuntime(ContainerRuntime):
    def __init__(
        self,
        exit_status: int = 0,
        pull_error: Exception | None = None,
        run_error: Exception | None = None,
    ) -> None:
        self.exit_status = exit_status
        self.pull_error = pull_error
        self.run_error = run_error
        self.pulls: list[tuple[str, RegistryAuth, TextIO | None]] = []
        self.plans: list[LaunchPlan] = []

    def pull_image(
        self, reference: str, auth: RegistryAuth, progress: TextIO | None = None
    ) -> None:
        self.pulls.append((reference, auth, progress))
        if self.pull_error is not None:
            raise self.pull_error

    def run(self, plan: LaunchPlan) -> int:
        self.plans.append(plan)
        if self.run_error is not None:
            raise self.run_error
        return self.exit_status


def write_cache_entry(path: Path, expires_in: timedelta, credential=SESSION_CREDENTIAL) -> None:
    """Write a cache file expiring relative to now."""
    path.parent.mkdir(parents=True, exist_ok=True)
    entry = CachedCredential(
        access_key_id=credential.access_key_id,
        secret_access_key=credential.secret_access_key,
        session_token=credential.session_token,
        provider=credential.provider,
        expiration=datetime.now(UTC) + expires_in,
    )
    path.write_text(entry.model_dump_json(), encoding="utf-8")


@pytest.fixture
def web_task() -> TaskDefinition:
    return TaskDefinition(
        arn="arn:aws:ecs:us-east-1:123456789012:task-definition/web:7",
        family="web",
        revision=7,
        containers=(
            ContainerSpec(
                name="web",
                image="123456789012.dkr.ecr.us-east-1.amazonaws.com/web:1.2.3",
                environment=(
                    EnvironmentVariable("DATABASE_URL", "postgres://db/web"),
                    EnvironmentVariable("DEBUG", "false"),
                ),
                command=("gunicorn", "app:main"),
            ),
            ContainerSpec(name="sidecar", image="envoyproxy/envoy:v1.29"),
        ),
    )


@pytest.fixture
def launch_config() -> LaunchConfig:
    return LaunchConfig(task_definition="web", region="us-east-1", profile="dev")


@pytest.fixture
def aws_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Isolate AWS and ecs-local environment variables."""
    for name in (
        "AWS_PROFILE",
        "AWS_DEFAULT_PROFILE",
        "AWS_REGION",
        "AWS_DEFAULT_REGION",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
        "ECS_LOCAL_CACHE_DIR",
        "ECS_LOCAL_DOCKER_BINARY",
    ):
        monkeypatch.delenv(name, raising=False)
    aws_dir = tmp_path / "aws"
    monkeypatch.setenv("AWS_CONFIG_FILE", str(aws_dir / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(aws_dir / "credentials"))
    return aws_dir


@pytest.fixture
def settings(aws_env: Path, tmp_path: Path) -> EcsLocalSettings:
    return EcsLocalSettings(cache_dir=tmp_path / "cache")
