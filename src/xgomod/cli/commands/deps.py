"""
Deps Command - Show the dependency version map.

Usage:
    xgomod deps                 # Show dependency tree
    xgomod deps --show-paths    # Include module cache directories
"""

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from ..utils import load_module_or_exit

console = Console()


@click.command()
@click.option(
    "--project-dir",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Directory inside the module",
)
@click.option("--show-paths", is_flag=True, help="Show module directories")
def deps(project_dir: str, show_paths: bool):
    """
    Show the effective version of every dependency.

    Replace rules are applied; local replacements show their directory.
    """
    mod = load_module_or_exit(project_dir)
    dep_mods = mod.dep_mods
    class_mods = set(mod.class_mods)
    replaced = {r.old.path for r in mod.gomod.replaces}

    tree = Tree(f"📦 [bold]{mod.path or 'std'}[/bold]")
    if not dep_mods:
        tree.add("[dim]No dependencies declared[/dim]")
        console.print(tree)
        return

    for path in sorted(dep_mods):
        real = dep_mods[path]
        if real.is_local:
            label = f"📁 [cyan]{path}[/cyan] => {escape(real.path)}"
        elif real.path != path:
            label = f"🔄 [cyan]{path}[/cyan] => {real}"
        else:
            icon = "🔄" if path in replaced else "🌐"
            label = f"{icon} [cyan]{path}[/cyan] {real.version}"
        if path in class_mods:
            label += " [magenta](classfile)[/magenta]"
        branch = tree.add(label)
        if show_paths and not real.is_local:
            directory = mod.cache.path(real)
            status = "[green]✓[/green]" if directory.is_dir() else "[yellow]⚠ not cached[/yellow]"
            branch.add(f"{status} [dim]{escape(str(directory))}[/dim]")

    console.print(tree)
