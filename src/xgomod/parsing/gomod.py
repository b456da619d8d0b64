"""
go.mod Reader and Writer.

Parses the primary module manifest into a GoModFile: the module path, the
go and toolchain versions, and the require, replace and exclude lists.
A require line whose end-of-line comment starts with `xgo:class` (or the
legacy `gop:class`) declares a classfile module:

    require github.com/goplus/spx/v2 v2.0.0 //xgo:class

The statement tree is kept, so edits (`add_require`, `mark_class`) are
written back without disturbing the rest of the file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .. import config
from ..core.errors import DirectiveError, ManifestError, ManifestParseError, ValidationError
from ..core.types import ModuleVersion
from .directives import GO_VERSION_RE
from .ext import parse_string
from .syntax import FileSyntax, Line, LineBlock, auto_quote, format_syntax, parse_syntax

logger = logging.getLogger(__name__)

REQUIRE_USAGE = "usage: require module/path v1.2.3"
EXCLUDE_USAGE = "usage: exclude module/path v1.2.3"
REPLACE_USAGE = (
    "usage: replace module/path [v1.2.3] => other/module v1.4\n"
    "\t or replace module/path [v1.2.3] => ../local/directory"
)

# Verbs read elsewhere or not at all
_IGNORED_VERBS = {"retract", "godebug", "tool", "ignore"}


@dataclass
class Require:
    """
    A `require` entry.

    Attributes:
        path: Module path.
        version: Required version.
        indirect: Marked `// indirect`.
        syntax: The statement's line.
    """

    path: str
    version: str
    indirect: bool = False
    syntax: Optional[Line] = None

    @property
    def mod(self) -> ModuleVersion:
        return ModuleVersion(path=self.path, version=self.version)

    @property
    def is_class(self) -> bool:
        """True when the line carries a classfile-module marker comment."""
        if self.syntax is None:
            return False
        return any(
            c.text.startswith(marker)
            for c in self.syntax.suffix
            for marker in config.CLASS_MARKERS
        )


@dataclass
class Replace:
    """A `replace old [v] => new [v]` entry."""

    old: ModuleVersion
    new: ModuleVersion
    syntax: Optional[Line] = None


@dataclass
class GoModFile:
    """
    The parsed form of a go.mod file.

    Attributes:
        module_path: Declared module path, or None without a module line.
        go_version: The `go` directive's version.
        toolchain: The `toolchain` directive's value.
        requires: Require entries in source order.
        replaces: Replace entries in source order.
        excludes: Excluded module versions.
        syntax: Statement tree used for formatting.
    """

    module_path: Optional[str] = None
    go_version: str = ""
    toolchain: str = ""
    requires: List[Require] = field(default_factory=list)
    replaces: List[Replace] = field(default_factory=list)
    excludes: List[ModuleVersion] = field(default_factory=list)
    syntax: FileSyntax = field(default_factory=FileSyntax)

    @property
    def name(self) -> str:
        return self.syntax.name

    @property
    def class_mods(self) -> List[str]:
        """Modules whose require line carries a classfile marker."""
        return [r.path for r in self.requires if r.is_class]

    def find_require(self, path: str) -> Optional[Require]:
        return next((r for r in self.requires if r.path == path), None)

    def add_require(self, path: str, version: str) -> Require:
        """
        Require `path` at `version`, updating an existing entry in place.

        New entries go to the end of the last require block, else after
        the last single require line, else to the end of the file.
        """
        existing = self.find_require(path)
        if existing is not None:
            if existing.version != version:
                existing.version = version
                line = existing.syntax
                tokens = [auto_quote(path), auto_quote(version)]
                line.set_tokens(tokens if line.in_block else ["require", *tokens])
            return existing

        tokens = [auto_quote(path), auto_quote(version)]
        stmts = self.syntax.stmts
        blocks = [s for s in stmts if isinstance(s, LineBlock) and s.verb == "require"]
        if blocks:
            line = blocks[-1].add_line(tokens)
        else:
            singles = [i for i, s in enumerate(stmts) if isinstance(s, Line) and s.verb == "require"]
            index = singles[-1] + 1 if singles else None
            line = self.syntax.new_line(["require", *tokens], index)
        req = Require(path=path, version=version, syntax=line)
        self.requires.append(req)
        logger.debug(f"Added require {path} {version}")
        return req

    def mark_class(self, req: Require) -> None:
        """Tag a require line as declaring a classfile module."""
        if req.syntax is not None and not req.is_class:
            req.syntax.add_suffix_comment(config.CLASS_MARKER_COMMENT)

    def format(self) -> bytes:
        return format_syntax(self.syntax)


def _is_directory_path(s: str) -> bool:
    return (
        s in (".", "..")
        or s.startswith(("./", "../", "/", ".\\", "..\\"))
        or (len(s) >= 3 and s[1] == ":" and s[2] in "/\\")
    )


def _is_indirect(line: Line) -> bool:
    for c in line.suffix:
        text = c.text.strip()
        if text == "indirect" or text.startswith("indirect;"):
            return True
    return False


def parse_gomod(name: str, data: Union[bytes, str]) -> GoModFile:
    """
    Parse go.mod content.

    Raises:
        ManifestParseError: With every syntax and directive error found.
    """
    fs, syntax_errors = parse_syntax(name, data)
    f = GoModFile(syntax=fs)
    errors: List[ManifestError] = list(syntax_errors)

    def fail(line: Line, message: str) -> None:
        errors.append(DirectiveError(name, line.start.line, ValidationError(message)))

    for verb, line, args in fs.iter_lines():
        try:
            if verb == "module":
                if f.module_path is not None:
                    fail(line, "repeated module statement")
                elif len(args) != 1:
                    fail(line, "usage: module module/path")
                else:
                    f.module_path = parse_string(args[0])
            elif verb == "go":
                if f.go_version:
                    fail(line, "repeated go statement")
                elif len(args) != 1:
                    fail(line, "go directive expects exactly one argument")
                elif not GO_VERSION_RE.match(args[0]):
                    fail(line, f"invalid go version '{args[0]}': must match format 1.23")
                else:
                    f.go_version = args[0]
            elif verb == "toolchain":
                if len(args) != 1:
                    fail(line, "toolchain directive expects exactly one argument")
                else:
                    f.toolchain = args[0]
            elif verb in ("require", "exclude"):
                if len(args) != 2:
                    fail(line, REQUIRE_USAGE if verb == "require" else EXCLUDE_USAGE)
                    continue
                path, version = parse_string(args[0]), parse_string(args[1])
                if verb == "require":
                    f.requires.append(Require(path, version, _is_indirect(line), line))
                else:
                    f.excludes.append(ModuleVersion(path=path, version=version))
            elif verb == "replace":
                replace = _parse_replace(args, line)
                if replace is None:
                    fail(line, REPLACE_USAGE)
                elif not replace.new.version and not _is_directory_path(replace.new.path):
                    fail(
                        line,
                        "replacement module without version must be directory path "
                        "(rooted or starting with ./ or ../)",
                    )
                else:
                    f.replaces.append(replace)
            elif verb not in _IGNORED_VERBS:
                logger.debug(f"{name}:{line.start.line}: ignoring {verb} directive")
        except ValidationError as e:
            errors.append(DirectiveError(name, line.start.line, e))

    if errors:
        raise ManifestParseError(sorted(errors, key=lambda e: e.line))
    return f


def _parse_replace(args: List[str], line: Line) -> Optional[Replace]:
    if "=>" not in args:
        return None
    arrow = args.index("=>")
    old, new = args[:arrow], args[arrow + 1 :]
    if len(old) not in (1, 2) or len(new) not in (1, 2):
        return None
    old_mod = ModuleVersion(
        path=parse_string(old[0]), version=parse_string(old[1]) if len(old) == 2 else ""
    )
    new_mod = ModuleVersion(
        path=parse_string(new[0]), version=parse_string(new[1]) if len(new) == 2 else ""
    )
    return Replace(old=old_mod, new=new_mod, syntax=line)


def new_gomod(name: str, module_path: str, go_version: str = config.DEFAULT_GO_VERSION) -> GoModFile:
    """Create a go.mod holding only the module and go statements."""
    return parse_gomod(name, f"module {auto_quote(module_path)}\n\ngo {go_version}\n")
