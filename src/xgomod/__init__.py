"""
xgomod - Extended module manifests for XGo.

Reads and edits go.mod together with the secondary gox.mod manifest that
declares classfile projects, and answers the questions a compiler asks of
a module: which version of each dependency is in effect, where a package
lives, and which project a classfile ext belongs to.

Usage:
    from xgomod import load

    mod = load(".")
    is_proj, found = mod.class_kind("main.spx")
    pkg = mod.lookup("github.com/goplus/spx")
"""

__version__ = "0.1.0"

from .core import (
    ClassfileRegistry,
    Manifest,
    ManifestParseError,
    ModuleVersion,
    Package,
    PackageLocator,
    PkgType,
    Project,
    XgoModError,
    build_registry,
    build_version_map,
)
from .core.module import Module, load, load_from, load_mod
from .parsing.directives import parse, parse_lax, parse_manifest
from .parsing.editor import add_import_if_absent, add_or_update_version, format_manifest

__all__ = [
    "__version__",
    "Module",
    "load",
    "load_from",
    "load_mod",
    "Manifest",
    "Project",
    "ModuleVersion",
    "Package",
    "PkgType",
    "PackageLocator",
    "ClassfileRegistry",
    "build_registry",
    "build_version_map",
    "parse",
    "parse_lax",
    "parse_manifest",
    "add_or_update_version",
    "add_import_if_absent",
    "format_manifest",
    "XgoModError",
    "ManifestParseError",
]
