"""
CLI Commands Package.

Each command is implemented in its own module.
"""

from . import classfiles, deps, fmt, locate

__all__ = [
    "classfiles",
    "deps",
    "fmt",
    "locate",
]
