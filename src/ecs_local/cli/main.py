"""CLI entrypoint for ecs-local."""

import logging
import sys

import click
from pydantic import ValidationError

from ecs_local import __version__
from ecs_local.cli.ui import report, report_error
from ecs_local.config.settings import get_settings, resolve_launch_config
from ecs_local.core.credentials.cache import forget_profile
from ecs_local.core.pipeline import launch
from ecs_local.errors import EcsLocalError, ExitCode

PROG_NAME = "ecs-local"
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    # Everything after the task definition is the container command.
    "allow_interspersed_args": False,
}


def configure_logging(verbose: bool) -> None:
    """Configure process-wide logging once."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    for noisy in ("botocore", "boto3", "urllib3", "docker"):
        logging.getLogger(noisy).setLevel(logging.INFO if verbose else logging.WARNING)
    # Failed refreshes are logged with a traceback before the error is raised.
    logging.getLogger("botocore.credentials").setLevel(
        logging.INFO if verbose else logging.ERROR
    )


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("-p", "--profile", default=None, help="The AWS profile to use.")
@click.option("-r", "--region", default=None, help="The AWS region the task definition is in.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging and pull progress.")
@click.option("--forget", is_flag=True, help="Delete cached credentials for the profile and exit.")
@click.version_option(__version__, "--version", prog_name=PROG_NAME)
@click.argument("task_definition", required=False)
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(
    ctx: click.Context,
    profile: str | None,
    region: str | None,
    verbose: bool,
    forget: bool,
    task_definition: str | None,
    command: tuple[str, ...],
) -> int:
    """Run the first container of an ECS TASK_DEFINITION locally.

    Any COMMAND given after the task definition replaces the container's
    default command.
    """
    configure_logging(verbose)
    try:
        settings = get_settings()
    except ValidationError as exc:
        report_error(f"Invalid ecs-local settings: {exc}")
        return int(ExitCode.USAGE_ERROR)

    if forget:
        config = resolve_launch_config(
            settings, task_definition or "", region=region, profile=profile
        )
        try:
            removed = forget_profile(settings.cache_dir, config.profile_name)
        except EcsLocalError as exc:
            report_error(str(exc))
            return int(exc.exit_code)
        state = "Removed" if removed else "No"
        report(f"{state} cached credentials for profile {config.profile_name}")
        return int(ExitCode.OK)

    if not task_definition:
        click.echo(ctx.get_help())
        return int(ExitCode.OK)

    if command[:1] == ("--",):
        command = command[1:]
    config = resolve_launch_config(
        settings,
        task_definition,
        command=command,
        region=region,
        profile=profile,
        verbose=verbose,
    )
    return launch(config, settings, reporter=report, error_reporter=report_error)


def run(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code.

    Args:
        argv: Arguments without the program name. Defaults to ``sys.argv[1:]``.

    Returns:
        The exit code.
    """
    try:
        result = cli.main(args=argv, prog_name=PROG_NAME, standalone_mode=False)
    except click.UsageError as exc:
        exc.show()
        return int(ExitCode.USAGE_ERROR)
    except click.ClickException as exc:
        exc.show()
        return int(ExitCode.ERROR)
    except click.Abort:
        report_error("Aborted!")
        return int(ExitCode.ERROR)
    return int(result or 0)


def main() -> None:
    """Run the CLI."""
    sys.exit(run())
