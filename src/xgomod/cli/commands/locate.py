"""
Locate Command - Resolve import paths to directories.

Usage:
    xgomod locate fmt github.com/goplus/spx
    xgomod locate --offline github.com/qiniu/x/gsh
"""

import sys

import click

from ...core.errors import XgoModError
from ..utils import echo_error, load_module_or_exit


@click.command()
@click.argument("packages", nargs=-1, required=True)
@click.option(
    "--project-dir",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Directory inside the module",
)
@click.option("--offline", is_flag=True, help="Never fetch missing modules")
def locate(packages: tuple, project_dir: str, offline: bool):
    """
    Print the type and directory of each package in PACKAGES.
    """
    mod = load_module_or_exit(project_dir)
    locator = mod.locator()
    if offline:
        locator.fetch = None

    failed = 0
    for pkg_path in packages:
        try:
            pkg = locator.resolve(pkg_path)
        except XgoModError as e:
            echo_error(str(e))
            failed += 1
            continue
        origin = f" ({pkg.real})" if pkg.real is not None else ""
        click.echo(f"{pkg_path}\t{pkg.type.value}\t{pkg.dir}{origin}")

    if failed:
        sys.exit(1)
