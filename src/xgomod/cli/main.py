"""
xgomod CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import classfiles, deps, fmt, locate


@click.group()
@click.version_option(package_name="xgomod")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """xgomod: Extended module manifests for XGo.

    Inspects go.mod and gox.mod: classfile bindings, dependency
    versions and package locations.

    \b
    Quick Start:
      xgomod classfiles
      xgomod deps
      xgomod locate github.com/goplus/spx
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


# Register commands
main.add_command(classfiles.classfiles)
main.add_command(deps.deps)
main.add_command(locate.locate)
main.add_command(fmt.fmt)

if __name__ == "__main__":
    main()
