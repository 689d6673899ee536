"""ecs-local - run ECS task definitions on your machine."""

from ecs_local.config import LaunchConfig, get_settings
from ecs_local.core import LaunchPipeline, build_launch_plan, launch
from ecs_local.core.credentials import CredentialCacheProvider

__version__ = "0.1.0"

__all__ = [
    "CredentialCacheProvider",
    "LaunchConfig",
    "LaunchPipeline",
    "build_launch_plan",
    "get_settings",
    "launch",
]
