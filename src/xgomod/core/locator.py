"""
Package Locator.

Classifies import paths and resolves them to directories.

Classification:
    ""                       invalid
    <module>, <module>/...   module   (the current module)
    ./foo, ../foo            local    (callers resolve these first)
    first element has a dot  extern   (provided by a dependency)
    anything else            standard (GOROOT/src)

Extern packages belong to the dependency with the longest module path that
prefixes the import path at a `/` boundary. A known dependency missing from
the module cache is fetched once and looked up again.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from .. import config
from .errors import (
    InvalidPackagePathError,
    MissingPackageError,
    ModuleNotCachedError,
    ResolutionError,
)
from .modcache import ModCache
from .types import ModuleVersion, Package, PkgType

logger = logging.getLogger(__name__)

Fetch = Callable[[ModuleVersion], ModuleVersion]


def is_pkg_in_mod(pkg_path: str, mod_path: str) -> bool:
    """Check whether `pkg_path` is `mod_path` or a package below it."""
    if not mod_path or not pkg_path.startswith(mod_path):
        return False
    suffix = pkg_path[len(mod_path) :]
    return suffix == "" or suffix[0] == "/"


class PackageLocator:
    """
    Resolves import paths against a module and its dependencies.

    Attributes:
        module_path: Path of the current module ("" for none or std).
        module_root: Root directory of the current module.
        dep_mods: Dependency version map (see `build_version_map`).
        cache: Module cache the dependencies live in.
        fetch: Downloads a module version; None disables fetching.
    """

    def __init__(
        self,
        module_path: str,
        module_root: Path,
        dep_mods: Dict[str, ModuleVersion],
        cache: Optional[ModCache] = None,
        fetch: Optional[Fetch] = None,
        goroot: Optional[Path] = None,
    ):
        self.module_path = module_path
        self.module_root = Path(module_root)
        self.dep_mods = dep_mods
        self.cache = cache or ModCache()
        self.fetch = fetch
        self._goroot = goroot

    @property
    def goroot(self) -> Path:
        root = self._goroot or config.get_goroot()
        if root is None:
            raise ResolutionError("cannot locate the standard library: GOROOT is not set")
        return root

    def classify(self, pkg_path: str) -> PkgType:
        """Classify an import path (see the module docstring)."""
        if not pkg_path:
            return PkgType.INVALID
        if is_pkg_in_mod(pkg_path, self.module_path):
            return PkgType.MODULE
        if pkg_path[0] == ".":
            return PkgType.LOCAL
        first = pkg_path.split("/", 1)[0]
        if "." in first:
            return PkgType.EXTERN
        return PkgType.STANDARD

    def is_standard(self, pkg_path: str) -> bool:
        return self.classify(pkg_path) == PkgType.STANDARD

    def lookup_dep_mod(self, module_path: str) -> Optional[ModuleVersion]:
        """Effective version of a dependency module, or None."""
        return self.dep_mods.get(module_path)

    def owning_module(self, pkg_path: str) -> Optional[Tuple[str, ModuleVersion]]:
        """The dependency providing `pkg_path` (longest module path wins)."""
        best: Optional[str] = None
        for mod_path in self.dep_mods:
            if is_pkg_in_mod(pkg_path, mod_path) and (best is None or len(mod_path) > len(best)):
                best = mod_path
        if best is None:
            return None
        return best, self.dep_mods[best]

    def resolve(self, pkg_path: str) -> Package:
        """
        Resolve an import path to its directory.

        Raises:
            InvalidPackagePathError: For empty or relative paths.
            MissingPackageError: No dependency provides an extern package.
            ModuleNotCachedError: The owning module is not cached and
                fetching is disabled.
            FetchError: Fetching the owning module failed.
        """
        kind = self.classify(pkg_path)
        if kind == PkgType.STANDARD:
            mod_dir = self.goroot / "src"
            return Package(type=kind, dir=mod_dir / pkg_path, mod_dir=mod_dir)
        if kind == PkgType.MODULE:
            suffix = pkg_path[len(self.module_path) :]
            return Package(
                type=kind,
                dir=Path(str(self.module_root) + suffix),
                mod_dir=self.module_root,
                mod_path=self.module_path,
            )
        if kind == PkgType.EXTERN:
            return self._resolve_extern(pkg_path)
        raise InvalidPackagePathError(pkg_path)

    def _resolve_extern(self, pkg_path: str) -> Package:
        owner = self.owning_module(pkg_path)
        if owner is None:
            raise MissingPackageError(pkg_path)
        mod_path, real = owner

        mod_dir = self.cache.path(real)
        if real.version and not mod_dir.is_dir():
            if self.fetch is None:
                raise ModuleNotCachedError(mod_path, real.version)
            logger.info(f"📦 {real} not in module cache, fetching...")
            self.fetch(real)
            if not mod_dir.is_dir():
                raise MissingPackageError(pkg_path)

        suffix = pkg_path[len(mod_path) :]
        return Package(
            type=PkgType.EXTERN,
            dir=Path(str(mod_dir) + suffix),
            mod_dir=mod_dir,
            mod_path=mod_path,
            real=real,
        )

    def pkg_id(self, pkg_path: str) -> str:
        """
        A unique id for a package: the import path of a standard package,
        the directory of any other.

        Raises:
            InvalidPackagePathError: For empty or relative paths.
        """
        kind = self.classify(pkg_path)
        if kind == PkgType.STANDARD:
            return pkg_path
        if kind == PkgType.MODULE:
            return str(self.module_root) + pkg_path[len(self.module_path) :]
        if kind == PkgType.EXTERN:
            return str(self._resolve_extern(pkg_path).dir)
        raise InvalidPackagePathError(pkg_path)
