"""ecs-local core modules."""

from ecs_local.core.models import (
    ContainerSpec,
    EnvironmentVariable,
    LaunchPlan,
    RegistryAuth,
    TaskDefinition,
)
from ecs_local.core.pipeline import LaunchPipeline, Stage, build_launch_plan, launch

__all__ = [
    "ContainerSpec",
    "EnvironmentVariable",
    "LaunchPipeline",
    "LaunchPlan",
    "RegistryAuth",
    "Stage",
    "TaskDefinition",
    "build_launch_plan",
    "launch",
]
