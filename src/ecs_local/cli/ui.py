"""Shared Rich consoles for the CLI."""

from rich.console import Console

console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)


def report(message: str) -> None:
    """Print a progress message."""
    console.print(message, markup=False)


def report_error(message: str) -> None:
    """Print a one-line failure message to stderr."""
    error_console.print(message, style="red", markup=False, soft_wrap=True)
