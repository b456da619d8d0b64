"""
Classfiles Command - Show the classfile bindings of a module.

Builds the ext -> project registry (built-in projects, the module's own
gox.mod, and imported classfile modules) and prints it as a table.

Usage:
    xgomod classfiles                  # Show all bindings
    xgomod classfiles main.spx a.spx   # Classify file names
"""

import sys
from typing import Dict, List

import click
from rich.console import Console
from rich.table import Table

from ...core.errors import XgoModError
from ...core.manifest import Project
from ..utils import echo_error, load_module_or_exit

console = Console()


@click.command()
@click.argument("files", nargs=-1)
@click.option(
    "--project-dir",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Directory inside the module",
)
def classfiles(files: tuple, project_dir: str):
    """
    Show classfile ext bindings, or classify FILES.

    \b
    Examples:
        xgomod classfiles
        xgomod classfiles main.spx Hero.spx foo_yap.gox
    """
    mod = load_module_or_exit(project_dir)

    imported: List[Project] = []
    try:
        registry = mod.import_classes(on_import=imported.append)
    except XgoModError as e:
        echo_error(f"Failed to import classfiles: {e}")
        sys.exit(1)

    if files:
        for fname in files:
            is_proj, found = registry.class_kind(fname)
            if not found:
                click.echo(f"   {fname}: not a classfile")
            elif is_proj:
                click.echo(f"🎮 {fname}: project file")
            else:
                click.echo(f"🧩 {fname}: work file")
        return

    order: Dict[int, int] = {id(p): i for i, p in enumerate(imported)}
    table = Table(show_header=True, header_style="bold")
    table.add_column("Ext", style="cyan")
    table.add_column("Project")
    table.add_column("Work Class")
    table.add_column("Package", style="dim")

    for ext in sorted(registry, key=lambda e: (order.get(id(registry.lookup(e)), -1), e)):
        project = registry.lookup(ext)
        work = next((w for w in project.works if w.ext == ext), None)
        table.add_row(
            ext,
            project.class_name or "-",
            work.class_name if work else "",
            project.pkg_path,
        )

    console.print(table)
    console.print(f"\n[green]✓ {len(registry)} ext(s) from {len(imported)} project(s)[/green]")
