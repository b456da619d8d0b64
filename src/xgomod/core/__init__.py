"""
xgomod Core Module.

Data types and resolution logic for extended module manifests:

Manifests:
    - Manifest, Project, WorkClass: Structured form of gox.mod
    - ModuleVersion, Package, PkgType: Shared value types

Resolution:
    - build_version_map: Effective version of every dependency
    - PackageLocator: Classify and locate import paths
    - ClassfileRegistry: ext -> Project bindings of a module

Module Cache:
    - ModCache: Cache directory layout
    - ModuleFetcher: Download modules with the go command
    - SumFile: go.sum bookkeeping

Loading a whole module (go.mod plus gox.mod) lives in `core.module`.
"""

from .classfile import ClassfileRegistry, build_registry, default_projects
from .errors import (
    DependencyNotFoundError,
    DirectiveError,
    FetchError,
    InvalidExtError,
    InvalidPackagePathError,
    InvalidSymbolError,
    InvalidVersionError,
    ManifestError,
    ManifestParseError,
    ManifestSyntaxError,
    MissingPackageError,
    ModuleNotCachedError,
    NotClassfileModuleError,
    ResolutionError,
    ValidationError,
    XgoModError,
)
from .fetcher import DownloadInfo, ModuleFetcher
from .locator import PackageLocator
from .manifest import (
    ClassfileImport,
    Import,
    Manifest,
    Project,
    Runner,
    VersionDirective,
    WorkClass,
)
from .modcache import ModCache, escape_path, unescape_path
from .result import Err, Ok, Result
from .sumfile import SumFile
from .types import ModuleVersion, Package, PkgType
from .versions import build_version_map

__all__ = [
    # Manifests
    "ClassfileImport",
    "Import",
    "Manifest",
    "Project",
    "Runner",
    "VersionDirective",
    "WorkClass",
    "ModuleVersion",
    "Package",
    "PkgType",
    # Resolution
    "build_version_map",
    "PackageLocator",
    "ClassfileRegistry",
    "build_registry",
    "default_projects",
    # Module cache
    "ModCache",
    "escape_path",
    "unescape_path",
    "ModuleFetcher",
    "DownloadInfo",
    "SumFile",
    # Results
    "Ok",
    "Err",
    "Result",
    # Errors
    "XgoModError",
    "ManifestError",
    "ManifestSyntaxError",
    "DirectiveError",
    "ManifestParseError",
    "ValidationError",
    "InvalidExtError",
    "InvalidSymbolError",
    "InvalidVersionError",
    "ResolutionError",
    "DependencyNotFoundError",
    "ModuleNotCachedError",
    "NotClassfileModuleError",
    "MissingPackageError",
    "InvalidPackagePathError",
    "FetchError",
]
