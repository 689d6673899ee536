"""Runtime settings for ecs-local."""

from dataclasses import dataclass
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ecs_local.config.paths import credential_cache_dir, env_path

ENV_FILE_PATH = str(env_path())
DEFAULT_REGION = "us-east-1"
DEFAULT_PROFILE = "default"


class AwsSettings(BaseSettings):
    """AWS defaults used when no flag is given."""

    model_config = SettingsConfigDict(env_file=ENV_FILE_PATH, extra="ignore")

    region: str = Field(
        default=DEFAULT_REGION,
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION"),
        description="AWS region",
    )
    profile: str | None = Field(
        default=None,
        validation_alias=AliasChoices("AWS_PROFILE", "AWS_DEFAULT_PROFILE"),
        description="AWS profile, unset for the default credential chain",
    )


class EcsLocalSettings(BaseSettings):
    """Main ecs-local configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ECS_LOCAL_",
        env_file=ENV_FILE_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cache_dir: Path = Field(
        default_factory=credential_cache_dir,
        description="Directory holding cached assumed-role credentials",
    )
    docker_binary: str = Field(default="docker", description="Docker CLI used to run containers")

    aws: AwsSettings = Field(default_factory=AwsSettings)


@dataclass(frozen=True)
class LaunchConfig:
    """Immutable configuration for one ecs-local invocation."""

    task_definition: str
    region: str
    profile: str | None = None
    command: tuple[str, ...] = ()
    verbose: bool = False

    @property
    def profile_name(self) -> str:
        """Return the profile that keys the credential cache."""
        return self.profile or DEFAULT_PROFILE


def get_settings() -> EcsLocalSettings:
    """Load and return the ecs-local settings."""
    return EcsLocalSettings()


def resolve_launch_config(
    settings: EcsLocalSettings,
    task_definition: str,
    command: tuple[str, ...] = (),
    region: str | None = None,
    profile: str | None = None,
    verbose: bool = False,
) -> LaunchConfig:
    """Combine command line values with settings.

    Explicit values win over the environment, which wins over built-in defaults.

    Args:
        settings: Settings loaded from the environment.
        task_definition: Task definition family, family:revision or ARN.
        command: Command overriding the container default.
        region: Region given on the command line, if any.
        profile: Profile given on the command line, if any.
        verbose: Whether verbose output was requested.

    Returns:
        The resolved launch configuration.
    """
    return LaunchConfig(
        task_definition=task_definition,
        region=region or settings.aws.region,
        profile=profile or settings.aws.profile,
        command=tuple(command),
        verbose=verbose,
    )
