"""
CLI Utilities - Shared helpers for the xgomod commands.

Formatted printing and module loading with user-facing error reporting.
"""

import sys
from pathlib import Path

import click

from ..core.errors import ModuleRootNotFoundError, XgoModError
from ..core.module import Module, load


def echo_success(message: str) -> None:
    """Print a success message with a green checkmark."""
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """Print an error message with a red cross to stderr."""
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """Print a warning message with a yellow alert symbol."""
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def load_module_or_exit(project_dir: str) -> Module:
    """
    Load the module containing `project_dir`, exiting with status 1 on
    failure.
    """
    try:
        return load(Path(project_dir))
    except ModuleRootNotFoundError as e:
        echo_error(str(e))
        click.echo("   Run the command inside a module, or pass --project-dir.")
        sys.exit(1)
    except XgoModError as e:
        echo_error(str(e))
        sys.exit(1)
