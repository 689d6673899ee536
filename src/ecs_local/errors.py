"""Error taxonomy and exit codes for ecs-local."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes, stable for scripting."""

    OK = 0
    ERROR = 1
    RUNTIME_ERROR = 2
    USAGE_ERROR = 10
    AWS_ERROR = 11


class EcsLocalError(RuntimeError):
    """Base class for classified ecs-local failures."""

    exit_code: ExitCode = ExitCode.ERROR


class UsageError(EcsLocalError):
    """Bad command line flags or arguments."""

    exit_code = ExitCode.USAGE_ERROR


class ConfigurationError(EcsLocalError):
    """The task definition cannot be run by this tool."""

    exit_code = ExitCode.USAGE_ERROR


class CredentialError(EcsLocalError):
    """AWS credentials could not be resolved or cached."""

    exit_code = ExitCode.AWS_ERROR


class CredentialCacheWriteError(CredentialError):
    """Credentials resolved but could not be written to the cache.

    The resolved credential is kept on the exception so callers can still use it.
    """

    def __init__(self, message: str, credential: object) -> None:
        super().__init__(message)
        self.credential = credential


class ControlPlaneError(EcsLocalError):
    """The ECS task definition lookup failed."""

    exit_code = ExitCode.AWS_ERROR


class RegistryAuthError(EcsLocalError):
    """The ECR authorization token was rejected or malformed."""

    exit_code = ExitCode.RUNTIME_ERROR


class ContainerRuntimeError(EcsLocalError):
    """The local container engine failed to pull or run the image."""

    exit_code = ExitCode.RUNTIME_ERROR
