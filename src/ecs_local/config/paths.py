"""Shared filesystem paths for user configuration and the credential cache."""

import os
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "ecs-local"
ENV_FILENAME = ".env"
AWS_CONFIG_FILE_ENV = "AWS_CONFIG_FILE"
DEFAULT_AWS_CONFIG_FILE = "~/.aws/config"


def config_dir() -> Path:
    """Return the user configuration directory.

    Returns:
        The user configuration directory path.
    """
    return Path(user_config_dir(APP_NAME))


def env_path() -> Path:
    """Return the user env file path.

    Returns:
        The user env file path.
    """
    return config_dir() / ENV_FILENAME


def aws_config_dir() -> Path:
    """Return the directory holding the AWS shared config file.

    Returns:
        The parent directory of ``AWS_CONFIG_FILE``, or ``~/.aws``.
    """
    config_file = os.environ.get(AWS_CONFIG_FILE_ENV) or DEFAULT_AWS_CONFIG_FILE
    return Path(config_file).expanduser().parent


def credential_cache_dir() -> Path:
    """Return the default credential cache directory.

    Returns:
        The ``ecs-local/cache`` directory next to the AWS shared config file.
    """
    return aws_config_dir() / APP_NAME / "cache"
