"""
Module Loading.

A Module pairs a parsed go.mod with its secondary manifest (gox.mod, or the
legacy gop.mod) and exposes what the compiler needs from both: the
dependency version map, package lookups and the classfile registry.

Loading:
    load(dir)                   nearest go.mod at or above `dir`
    load_from(gomod, goxmod)    explicit files
    load_from_ex(..., read)     explicit files through a custom reader
    load_mod(ModuleVersion)     a dependency from the module cache,
                                fetched when it is not there yet

A missing secondary manifest is not an error: the module gets a default
manifest holding just the language version.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .. import config
from ..parsing.directives import parse_manifest
from ..parsing.editor import add_or_update_version
from ..parsing.gomod import GoModFile, new_gomod, parse_gomod
from ..parsing.syntax import FileSyntax
from .classfile import ClassfileRegistry, ImportHook, build_registry
from .errors import (
    DefaultModuleError,
    ModuleNotCachedError,
    ModuleRootNotFoundError,
    NoModuleDeclError,
)
from .fetcher import ModuleFetcher
from .locator import PackageLocator
from .manifest import ClassfileImport, Manifest, Project, VersionDirective
from .modcache import ModCache
from .sumfile import SumFile
from .types import ModuleVersion, Package
from .versions import build_version_map

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
ReadFile = Callable[[PathLike], bytes]


def _read_file(path: PathLike) -> bytes:
    return Path(path).read_bytes()


def default_manifest(name: str = "") -> Manifest:
    """A manifest declaring only the default language version."""
    return Manifest(
        version=VersionDirective(version=config.DEFAULT_XGO_VERSION),
        syntax=FileSyntax(name=name),
    )


class Module:
    """
    A module: go.mod plus its secondary manifest.

    Attributes:
        gomod: The parsed go.mod, or None for the default module.
        manifest: The parsed secondary manifest.
        cache: Module cache used for dependencies.
        fetcher: Fetcher used for modules missing from the cache.
    """

    def __init__(
        self,
        gomod: Optional[GoModFile],
        manifest: Manifest,
        cache: Optional[ModCache] = None,
        fetcher: Optional[ModuleFetcher] = None,
    ):
        self.gomod = gomod
        self.manifest = manifest
        self._cache = cache
        self._fetcher = fetcher
        self._dep_mods: Optional[Dict[str, ModuleVersion]] = None
        self._registry: Optional[ClassfileRegistry] = None

    @classmethod
    def default(cls) -> "Module":
        """The file-less module used outside of any module."""
        return cls(None, default_manifest())

    # --- collaborators ---

    @property
    def cache(self) -> ModCache:
        if self._cache is None:
            self._cache = ModCache()
        return self._cache

    @property
    def fetcher(self) -> ModuleFetcher:
        if self._fetcher is None:
            self._fetcher = ModuleFetcher(cwd=self.root)
        return self._fetcher

    # --- identity ---

    @property
    def has_modfile(self) -> bool:
        return self.gomod is not None and bool(self.gomod.name)

    @property
    def modfile(self) -> str:
        """Absolute path of the go.mod, or "" for the default module."""
        return self.gomod.name if self.has_modfile else ""

    @property
    def root(self) -> Optional[Path]:
        """Root directory of the module, or None for the default module."""
        return Path(self.modfile).parent if self.has_modfile else None

    @property
    def path(self) -> str:
        """Module path; "" for the standard library and the default module."""
        if self.gomod is None or self.gomod.module_path is None:
            return ""
        return self.gomod.module_path

    @property
    def sum_file(self) -> Optional[Path]:
        return self.root / config.GO_SUM if self.root is not None else None

    # --- dependencies ---

    @property
    def dep_mods(self) -> Dict[str, ModuleVersion]:
        """Dependency version map, with local replacements made absolute."""
        if self._dep_mods is None:
            if self.gomod is None:
                self._dep_mods = {}
            else:
                self._dep_mods = build_version_map(
                    (r.mod for r in self.gomod.requires),
                    ((r.old, r.new) for r in self.gomod.replaces),
                    self.root or Path("."),
                )
        return self._dep_mods

    def lookup_dep_mod(self, module_path: str) -> Optional[ModuleVersion]:
        return self.dep_mods.get(module_path)

    def locator(self) -> PackageLocator:
        """A PackageLocator over this module and its dependencies."""
        return PackageLocator(
            module_path=self.path,
            module_root=self.root or Path("."),
            dep_mods=self.dep_mods,
            cache=self.cache,
            fetch=self.fetcher.fetch,
        )

    def lookup(self, pkg_path: str) -> Package:
        """Resolve an import path to its directory."""
        return self.locator().resolve(pkg_path)

    # --- classfiles ---

    @property
    def projects(self) -> List[Project]:
        return self.manifest.projects

    @property
    def has_project(self) -> bool:
        return len(self.manifest.projects) > 0

    @property
    def class_mods(self) -> List[str]:
        return self.manifest.class_mods

    def import_classes(self, on_import: Optional[ImportHook] = None) -> ClassfileRegistry:
        """
        Build the classfile registry of this module.

        Imported classfile modules are loaded from the module cache and
        fetched when missing.
        """

        def load_manifest(mod: ModuleVersion) -> Manifest:
            return load_mod(mod, cache=self.cache).manifest

        def fetch_manifest(mod: ModuleVersion) -> Manifest:
            return load_manifest(self.fetcher.fetch(mod))

        self._registry = build_registry(
            self.manifest,
            self.lookup_dep_mod,
            load_manifest,
            fetch_manifest,
            on_import=on_import,
        )
        return self._registry

    @property
    def classes(self) -> ClassfileRegistry:
        """The classfile registry, built on first use."""
        if self._registry is None:
            self.import_classes()
        return self._registry

    def class_kind(self, fname: str) -> Tuple[bool, bool]:
        return self.classes.class_kind(fname)

    def is_class(self, ext: str) -> bool:
        return self.classes.is_class(ext)

    def lookup_class(self, ext: str) -> Optional[Project]:
        return self.classes.lookup(ext)

    # --- edits ---

    def add_require(
        self,
        path: str,
        version: str,
        has_proj: bool = False,
        sums: Sequence[str] = (),
    ) -> None:
        """
        Require a module, optionally as a classfile module.

        Args:
            path: Module path.
            version: Required version.
            has_proj: Mark the require line with `//xgo:class`.
            sums: go.sum lines to append when they are missing.

        Raises:
            DefaultModuleError: On the default module.
        """
        if self.gomod is None:
            raise DefaultModuleError("attempt to modify the default module")
        req = self.gomod.add_require(path, version)
        if has_proj and not req.is_class:
            self.gomod.mark_class(req)
            if not self.manifest.has_class_mod(path):
                self.manifest.imports.append(ClassfileImport(module_path=path))
        if sums and self.sum_file is not None:
            sumf = SumFile.load(self.sum_file)
            missing = [line for line in sums if line not in sumf.lines]
            if missing:
                sumf.add(missing)
                sumf.save()
        self._dep_mods = None
        self._registry = None

    def save(self) -> None:
        """
        Write go.mod, and the secondary manifest when it declares
        projects or already exists on disk.

        Raises:
            DefaultModuleError: On the default module.
        """
        if not self.has_modfile:
            raise DefaultModuleError("attempt to save default module")
        Path(self.modfile).write_bytes(self.gomod.format())
        logger.debug(f"Saved {self.modfile}")

        name = self.manifest.syntax.name
        if name and (self.has_project or Path(name).exists()):
            Path(name).write_bytes(self.manifest.format())
            logger.debug(f"Saved {name}")


# =============================================================================
# Loaders
# =============================================================================


def find_mod_file(start: PathLike = ".") -> Tuple[Path, Path]:
    """
    Find the nearest go.mod at or above `start`.

    Returns:
        (root directory, go.mod path)

    Raises:
        ModuleRootNotFoundError: If no go.mod is found.
    """
    start_dir = Path(os.path.abspath(start))
    for d in (start_dir, *start_dir.parents):
        candidate = d / config.GO_MOD
        if candidate.is_file():
            return d, candidate
    raise ModuleRootNotFoundError(str(start_dir))


def find_ext_mod_file(root: PathLike) -> Path:
    """The secondary manifest of a module root: the first that exists, else gox.mod."""
    root = Path(root)
    for name in config.EXT_MOD_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return root / config.EXT_MOD_NAMES[0]


def load(
    start: PathLike = ".",
    strict: bool = True,
    cache: Optional[ModCache] = None,
    fetcher: Optional[ModuleFetcher] = None,
) -> Module:
    """Load the module whose go.mod is nearest to `start`."""
    root, gomod = find_mod_file(start)
    return load_from(gomod, find_ext_mod_file(root), strict=strict, cache=cache, fetcher=fetcher)


def load_from(
    gomod: PathLike,
    goxmod: Optional[PathLike] = None,
    strict: bool = True,
    cache: Optional[ModCache] = None,
    fetcher: Optional[ModuleFetcher] = None,
) -> Module:
    """Load a module from a go.mod and an optional secondary manifest."""
    return load_from_ex(gomod, goxmod, _read_file, strict=strict, cache=cache, fetcher=fetcher)


def load_from_ex(
    gomod: PathLike,
    goxmod: Optional[PathLike],
    read_file: ReadFile,
    strict: bool = True,
    cache: Optional[ModCache] = None,
    fetcher: Optional[ModuleFetcher] = None,
) -> Module:
    """
    Load a module, reading files through `read_file`.

    Args:
        gomod: Path of the go.mod.
        goxmod: Path of the secondary manifest; it may not exist.
        read_file: Returns a file's bytes; raises FileNotFoundError for
            missing files.
        strict: Reject unknown directives in the secondary manifest.

    Raises:
        NoModuleDeclError: If go.mod has no module statement.
        ManifestParseError: If either file contains errors.
    """
    gomod_name = os.path.abspath(gomod)
    f = parse_gomod(gomod_name, read_file(gomod))
    if f.module_path is None:
        raise NoModuleDeclError(gomod_name)
    if f.module_path == "std":
        f.module_path = ""

    manifest: Optional[Manifest] = None
    goxmod_name = os.path.abspath(goxmod) if goxmod else ""
    if goxmod:
        try:
            data = read_file(goxmod)
        except FileNotFoundError:
            logger.debug(f"No {goxmod}, using defaults")
        else:
            manifest = parse_manifest(goxmod_name, data, strict=strict)
    if manifest is None:
        manifest = default_manifest(goxmod_name)

    for module_path in f.class_mods:
        if not manifest.has_class_mod(module_path):
            manifest.imports.append(ClassfileImport(module_path=module_path))

    logger.debug(f"Loaded module {f.module_path or 'std'} from {gomod_name}")
    return Module(f, manifest, cache=cache, fetcher=fetcher)


def load_mod(
    mod: ModuleVersion,
    cache: Optional[ModCache] = None,
    fetcher: Optional[ModuleFetcher] = None,
) -> Module:
    """
    Load a dependency module from the module cache.

    Its secondary manifest is parsed leniently. When the module is not in
    the cache and a fetcher is given, it is fetched and loaded again.

    Raises:
        ModuleNotCachedError: The module is not cached (and could not be
            fetched).
    """
    cache = cache or ModCache()
    try:
        return _load_cached(mod, cache, fetcher)
    except ModuleNotCachedError:
        if fetcher is None:
            raise
    logger.info(f"📦 {mod} not in module cache, fetching...")
    return _load_cached(fetcher.fetch(mod), cache, fetcher)


def _load_cached(mod: ModuleVersion, cache: ModCache, fetcher: Optional[ModuleFetcher]) -> Module:
    root = cache.path(mod)
    gomod = root / config.GO_MOD
    if not gomod.is_file():
        raise ModuleNotCachedError(mod.path, mod.version)
    return load_from(gomod, find_ext_mod_file(root), strict=False, cache=cache, fetcher=fetcher)


def create(
    directory: PathLike,
    module_path: str,
    go_version: str = "",
    xgo_version: str = "",
) -> Module:
    """
    Create a new module in `directory`. Call `save` to write it.

    Raises:
        FileExistsError: If the directory already holds a go.mod or a
            secondary manifest.
    """
    root = Path(os.path.abspath(directory))
    for name in (config.GO_MOD, *config.EXT_MOD_NAMES):
        if (root / name).exists():
            raise FileExistsError(f"{root / name} already exists")

    gomod = new_gomod(str(root / config.GO_MOD), module_path, go_version or config.DEFAULT_GO_VERSION)
    manifest = Manifest(syntax=FileSyntax(name=str(root / config.EXT_MOD_NAMES[0])))
    add_or_update_version(manifest, xgo_version or config.DEFAULT_XGO_VERSION)
    return Module(gomod, manifest)
