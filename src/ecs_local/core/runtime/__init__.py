"""Local container runtime."""

from ecs_local.core.runtime.docker import DockerRuntime, docker_run_args

__all__ = ["DockerRuntime", "docker_run_args"]
