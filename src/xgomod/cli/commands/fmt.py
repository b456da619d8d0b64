"""
Fmt Command - Edit and rewrite gox.mod.

Applies the requested edits and writes the manifest back. Statements that
were not edited keep their exact text.

Usage:
    xgomod fmt --xgo 1.5                          # Set the language version
    xgomod fmt --import github.com/goplus/yap     # Import a classfile module
    xgomod fmt --check                            # Exit 1 if edits are pending
"""

import sys
from typing import Optional

import click

from ...core.errors import XgoModError
from ...core.manifest import Manifest
from ...core.module import find_ext_mod_file, find_mod_file
from ...parsing.directives import parse_manifest
from ...parsing.editor import add_import_if_absent, add_or_update_version, format_manifest
from ..utils import echo_error, echo_success


@click.command()
@click.option(
    "--project-dir",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Directory inside the module",
)
@click.option("--xgo", "xgo_version", help="Set the xgo language version")
@click.option("--import", "imports", multiple=True, help="Import a classfile module")
@click.option("--check", is_flag=True, help="Report pending changes without writing")
def fmt(project_dir: str, xgo_version: Optional[str], imports: tuple, check: bool):
    """
    Apply edits to gox.mod and rewrite it.
    """
    try:
        root, _ = find_mod_file(project_dir)
        path = find_ext_mod_file(root)
        original = path.read_bytes() if path.exists() else b""
        manifest = parse_manifest(str(path), original) if original else Manifest()

        if xgo_version:
            add_or_update_version(manifest, xgo_version)
        for module_path in imports:
            add_import_if_absent(manifest, module_path)
        data = format_manifest(manifest)
    except XgoModError as e:
        echo_error(str(e))
        sys.exit(1)

    if data == original:
        echo_success(f"{path.name} is up to date")
        return

    if check:
        click.echo(f"📝 {path.name} would change")
        sys.exit(1)

    path.write_bytes(data)
    echo_success(f"Wrote {path}")
