"""Configuration for ecs-local."""

from ecs_local.config.settings import (
    AwsSettings,
    EcsLocalSettings,
    LaunchConfig,
    get_settings,
    resolve_launch_config,
)

__all__ = [
    "AwsSettings",
    "EcsLocalSettings",
    "LaunchConfig",
    "get_settings",
    "resolve_launch_config",
]
