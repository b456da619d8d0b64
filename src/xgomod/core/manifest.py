"""
Manifest definition for gox.mod.

Defines the structured form of the secondary manifest: the language version
directive, the classfile projects with their work classes, auto-imports and
runners, and the classfile modules the module imports.

Example:
    xgo 1.5

    project .gmx Game github.com/goplus/spx math
    class -embed .spx Sprite
    import gop github.com/goplus/gop
    runner github.com/goplus/spx/cmd/spxrun v1.0.0

    import github.com/goplus/yap
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ..parsing.syntax import FileSyntax, Line


@dataclass
class VersionDirective:
    """
    The `xgo` (or legacy `gop`) language version statement.

    Attributes:
        version: Version string such as "1.2".
        verb: The verb as written ("xgo" or "gop").
        syntax: The statement's syntax line.
    """

    version: str
    verb: str = "xgo"
    syntax: Optional[Line] = None


@dataclass
class WorkClass:
    """
    A work class of a project (`class` directive).

    Attributes:
        ext: Canonical extension, e.g. ".spx" or "_yap.gox".
        full_ext: Extension as written, with any `*` marker.
        class_name: Class symbol, e.g. "Sprite" or "*Sprite".
        proto: Prototype class shared by work classes of one extension.
        prefix: Identifier prefix applied to generated code.
        embedded: Whether instances are embedded into the project class.
    """

    ext: str
    full_ext: str
    class_name: str
    proto: str = ""
    prefix: str = ""
    embedded: bool = False
    syntax: Optional[Line] = None


@dataclass
class Import:
    """A package auto-imported by a project, with an optional alias."""

    path: str
    name: str = ""
    syntax: Optional[Line] = None


@dataclass
class Runner:
    """A project's custom runner package, optionally pinned to a version."""

    path: str
    version: str = ""
    syntax: Optional[Line] = None


@dataclass
class Project:
    """
    A classfile project (`project` directive).

    The bare form (`project pkgA pkgB`) has an empty ext and class name.

    Attributes:
        ext: Canonical project extension.
        full_ext: Extension as written (`*.gmx`, `main.spx`, ...).
        class_name: Project class symbol, e.g. "Game".
        works: Work classes declared under the project.
        pkg_paths: Classfile package path followed by extra packages.
        imports: Auto-imported packages.
        runner: Custom runner, if declared.
    """

    ext: str = ""
    full_ext: str = ""
    class_name: str = ""
    works: List[WorkClass] = field(default_factory=list)
    pkg_paths: List[str] = field(default_factory=list)
    imports: List[Import] = field(default_factory=list)
    runner: Optional[Runner] = None
    syntax: Optional[Line] = None

    @property
    def pkg_path(self) -> str:
        """The classfile package path (first package path)."""
        return self.pkg_paths[0] if self.pkg_paths else ""

    def exts(self) -> List[str]:
        """Every extension bound to this project: its own, then its works'."""
        result = [self.ext] if self.ext else []
        for w in self.works:
            if w.ext not in result:
                result.append(w.ext)
        return result

    def is_proj(self, ext: str, fname: str) -> bool:
        """
        Check whether the file `fname` with class ext `ext` is a project file.

        When `ext` belongs to a work class, only `main<ext>` with the
        project's own ext is a project file. Any other ext of the project
        marks a project file.
        """
        for w in self.works:
            if w.ext == ext:
                base = fname.rsplit("/", 1)[-1]
                return ext == self.ext and base == "main" + ext
        return True


@dataclass
class ClassfileImport:
    """A classfile module imported by the manifest (`import`/`register`)."""

    module_path: str
    syntax: Optional[Line] = None


@dataclass
class Manifest:
    """
    The parsed form of one gox.mod file.

    Attributes:
        version: The language version directive, if any.
        projects: Projects in declaration order.
        imports: Classfile-module imports in declaration order.
        syntax: Statement tree used for formatting and positions.
    """

    version: Optional[VersionDirective] = None
    projects: List[Project] = field(default_factory=list)
    imports: List[ClassfileImport] = field(default_factory=list)
    syntax: FileSyntax = field(default_factory=FileSyntax)

    @property
    def class_mods(self) -> List[str]:
        """Imported classfile-module paths in declaration order."""
        return [imp.module_path for imp in self.imports]

    def has_class_mod(self, module_path: str) -> bool:
        return any(imp.module_path == module_path for imp in self.imports)

    @classmethod
    def load(cls, path: Union[str, Path], strict: bool = True) -> "Manifest":
        """
        Load and parse a manifest file.

        Args:
            path: Path to the gox.mod file.
            strict: Reject unknown directives (main module) or ignore
                them (dependencies).

        Returns:
            The parsed Manifest.

        Raises:
            FileNotFoundError: If the file does not exist.
            ManifestParseError: If the file contains errors.
        """
        from ..parsing.directives import parse_manifest

        path = Path(path)
        return parse_manifest(str(path), path.read_bytes(), strict=strict)

    def format(self) -> bytes:
        """Serialize the manifest, keeping untouched text byte for byte."""
        from ..parsing.editor import format_manifest

        return format_manifest(self)
