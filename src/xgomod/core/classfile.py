"""
Classfile Registry.

Builds the ext -> Project table of a module from three sources, in order:

    1. Built-in projects (spx, gsh, test), plus the legacy `.gmx` binding.
    2. Projects declared by the module's own gox.mod.
    3. Projects declared by each imported classfile module, in declaration
       order. A module missing from the cache is fetched once.

A project is bound under its own ext and the ext of each work class. Later
bindings overwrite earlier ones. Classfile modules imported by imported
modules are not followed.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from ..parsing.ext import class_ext
from .errors import DependencyNotFoundError, ModuleNotCachedError, NotClassfileModuleError
from .manifest import Manifest, Project, WorkClass
from .types import ModuleVersion

logger = logging.getLogger(__name__)

LookupDepVersion = Callable[[str], Optional[ModuleVersion]]
LoadManifest = Callable[[ModuleVersion], Manifest]
ImportHook = Callable[[Project], None]


def spx_project() -> Project:
    return Project(
        ext=".spx",
        full_ext=".spx",
        class_name="Game",
        pkg_paths=["github.com/goplus/spx", "math"],
        works=[WorkClass(ext=".spx", full_ext=".spx", class_name="Sprite")],
    )


def gsh_project() -> Project:
    return Project(
        ext=".gsh",
        full_ext=".gsh",
        class_name="App",
        pkg_paths=["github.com/qiniu/x/gsh", "math"],
    )


def gotest_project() -> Project:
    return Project(
        ext="_test.gox",
        full_ext="_test.gox",
        class_name="App",
        pkg_paths=["github.com/goplus/xgo/test", "testing"],
        works=[WorkClass(ext="_test.gox", full_ext="_test.gox", class_name="Case")],
    )


# Old extensions still bound to the project of the new one
LEGACY_EXTS: Dict[str, str] = {".gmx": ".spx"}


def default_projects() -> List[Project]:
    """Fresh copies of the built-in projects, in registration order."""
    return [gotest_project(), gsh_project(), spx_project()]


class ClassfileRegistry:
    """
    Maps class exts to the projects that own them.

    Example:
        ```python
        registry = build_registry(manifest, deps.get, load, fetch)
        is_proj, found = registry.class_kind("main.spx")
        ```
    """

    def __init__(self, bindings: Optional[Dict[str, Project]] = None):
        self._projects: Dict[str, Project] = dict(bindings or {})

    def bind(self, ext: str, project: Project) -> None:
        self._projects[ext] = project

    def register(self, project: Project) -> None:
        """Bind the project under its own ext and each work class ext."""
        for ext in project.exts():
            previous = self._projects.get(ext)
            if previous is not None and previous is not project:
                logger.debug(f"{ext}: {previous.class_name} replaced by {project.class_name}")
            self._projects[ext] = project

    def lookup(self, ext: str) -> Optional[Project]:
        return self._projects.get(ext)

    def is_class(self, ext: str) -> bool:
        """Check whether `ext` is a known classfile ext."""
        return ext in self._projects

    def class_kind(self, fname: str) -> Tuple[bool, bool]:
        """
        Classify a file name.

        Returns:
            (is_proj, found): whether the file is a project file, and
            whether its ext is a known classfile ext at all.
        """
        ext = class_ext(fname)
        project = self._projects.get(ext)
        if project is None:
            return False, False
        return project.is_proj(ext, fname), True

    def bindings(self) -> Dict[str, Project]:
        return dict(self._projects)

    def __iter__(self) -> Iterator[str]:
        return iter(self._projects)

    def __len__(self) -> int:
        return len(self._projects)

    def __contains__(self, ext: object) -> bool:
        return ext in self._projects


def build_registry(
    manifest: Manifest,
    lookup_dep_version: LookupDepVersion,
    load_manifest: LoadManifest,
    fetch_manifest: LoadManifest,
    defaults: Optional[Sequence[Project]] = None,
    on_import: Optional[ImportHook] = None,
) -> ClassfileRegistry:
    """
    Build the classfile registry of a module.

    Args:
        manifest: The module's own gox.mod.
        lookup_dep_version: Effective version of a dependency, or None.
        load_manifest: Loads a module's gox.mod from the cache; raises
            ModuleNotCachedError when the module is not there.
        fetch_manifest: Fetches a module, then loads its gox.mod.
        defaults: Built-in projects; `default_projects()` when omitted.
            The legacy exts are bound to whichever project owns their
            replacement ext.
        on_import: Called with every project as it is registered.

    Returns:
        The populated registry.

    Raises:
        DependencyNotFoundError: A classfile module is not a dependency.
        NotClassfileModuleError: A classfile module declares no project.
        FetchError: Fetching a missing module failed.
    """
    registry = ClassfileRegistry()

    def import_project(project: Project) -> None:
        registry.register(project)
        if on_import is not None:
            on_import(project)

    for project in default_projects() if defaults is None else defaults:
        import_project(project)
    for old, new in LEGACY_EXTS.items():
        target = registry.lookup(new)
        if target is not None:
            registry.bind(old, target)

    for project in manifest.projects:
        import_project(project)

    for module_path in manifest.class_mods:
        version = lookup_dep_version(module_path)
        if version is None:
            raise DependencyNotFoundError(module_path)
        try:
            dep = load_manifest(version)
        except ModuleNotCachedError:
            logger.info(f"📦 {version} not in module cache, fetching...")
            dep = fetch_manifest(version)
        if not dep.projects:
            raise NotClassfileModuleError(module_path)
        logger.debug(f"Importing {len(dep.projects)} project(s) from {version}")
        for project in dep.projects:
            import_project(project)

    return registry
