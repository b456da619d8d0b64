"""
Directive Parser for gox.mod.

Interprets each statement of the syntax tree as a directive and builds the
structured Manifest.

Every verb has a handler in `DIRECTIVES`. A handler inspects the parser
state and returns a Result: `Ok` with a tagged statement that is then
applied to the state, or `Err` with a positioned DirectiveError. Errors do
not stop the pass; all of them (syntax errors included) are raised together
as a ManifestParseError.

Directives:
    xgo 1.2 / gop 1.2              language version (at most one)
    project [.ext Class] pkg...    starts a new current project
    class [-embed] [-prefix=P] .ext Class [Proto]
    import [name] pkg              auto-import of the current project
    runner pkg [version]           runner of the current project
    import mod / register mod      classfile-module import (top level)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from ..core.errors import DirectiveError, ManifestError, ManifestParseError, ValidationError
from ..core.manifest import (
    ClassfileImport,
    Import,
    Manifest,
    Project,
    Runner,
    VersionDirective,
    WorkClass,
)
from ..core.result import Err, Ok, Result, partition
from .ext import (
    check_module_path,
    is_ext,
    parse_ext,
    parse_pkg_path,
    parse_pkg_paths,
    parse_string,
    parse_symbol,
)
from .syntax import Line, parse_syntax

logger = logging.getLogger(__name__)

GO_VERSION_RE = re.compile(r"^([1-9][0-9]*)\.(0|[1-9][0-9]*)(\.(0|[1-9][0-9]*))?([a-z]+[0-9]+)?$")

PROJECT_USAGE = "usage: project [.projExt ProjClass] classFilePkgPath ..."
CLASS_USAGE = "usage: class [-embed -prefix=Prefix] .workExt WorkClass [WorkPrototype]"
IMPORT_USAGE = "usage: import [name] pkgPath"
RUNNER_USAGE = "usage: runner runnerPkgPath [version]"


# =============================================================================
# Statements
# =============================================================================


@dataclass(frozen=True)
class VersionStmt:
    directive: VersionDirective


@dataclass(frozen=True)
class ProjectStmt:
    project: Project


@dataclass(frozen=True)
class ClassStmt:
    work: WorkClass


@dataclass(frozen=True)
class ImportStmt:
    imp: Import


@dataclass(frozen=True)
class ClassModStmt:
    imp: ClassfileImport


@dataclass(frozen=True)
class RunnerStmt:
    runner: Runner


@dataclass(frozen=True)
class UnknownStmt:
    verb: str


DirectiveStmt = Union[
    VersionStmt, ProjectStmt, ClassStmt, ImportStmt, ClassModStmt, RunnerStmt, UnknownStmt
]


@dataclass
class ParserState:
    """
    Mutable state of one parse pass.

    Attributes:
        filename: Manifest name used in errors.
        strict: Reject unknown directives when True.
        manifest: The manifest being built.
        current: The project that `class`, `import` and `runner` attach to.
    """

    filename: str
    strict: bool
    manifest: Manifest
    current: Optional[Project] = None

    def fail(self, line: Line, cause: Union[str, Exception]) -> Err:
        if isinstance(cause, str):
            cause = ValidationError(cause)
        return Err(DirectiveError(self.filename, line.start.line, cause))


Handler = Callable[[ParserState, str, Line, List[str]], Result]


# =============================================================================
# Handlers
# =============================================================================


def _parse_version(state: ParserState, verb: str, line: Line, args: List[str]) -> Result:
    if state.manifest.version is not None:
        return state.fail(line, f"repeated {verb} statement")
    if len(args) != 1:
        return state.fail(line, f"{verb} directive expects exactly one argument")
    if not GO_VERSION_RE.match(args[0]):
        return state.fail(line, f"invalid {verb} version '{args[0]}': must match format 1.23")
    return Ok(VersionStmt(VersionDirective(version=args[0], verb=verb, syntax=line)))


def _parse_project(state: ParserState, verb: str, line: Line, args: List[str]) -> Result:
    if not args:
        return state.fail(line, PROJECT_USAGE)
    try:
        if is_ext(args[0], True):
            if len(args) < 3 or "/" in args[1]:
                return state.fail(line, PROJECT_USAGE)
            ext, full_ext = parse_ext(args[0], True)
            class_name = parse_symbol(args[1])
            pkg_paths = parse_pkg_paths(args[2:])
            project = Project(
                ext=ext,
                full_ext=full_ext,
                class_name=class_name,
                pkg_paths=pkg_paths,
                syntax=line,
            )
        else:
            project = Project(pkg_paths=parse_pkg_paths(args), syntax=line)
    except ValidationError as e:
        return state.fail(line, e)
    return Ok(ProjectStmt(project))


def _parse_class(state: ParserState, verb: str, line: Line, args: List[str]) -> Result:
    if state.current is None:
        return state.fail(line, "work class must declare after a project definition")

    embedded, prefix = False, ""
    i = 0
    while i < len(args) and args[i].startswith("-"):
        flag = args[i]
        if flag == "-embed":
            embedded = True
        elif flag.startswith("-prefix="):
            prefix = flag[len("-prefix=") :]
        else:
            return state.fail(line, CLASS_USAGE)
        i += 1

    rest = args[i:]
    if len(rest) < 2 or len(rest) > 3:
        return state.fail(line, CLASS_USAGE)
    try:
        ext, full_ext = parse_ext(rest[0], False)
        class_name = parse_symbol(rest[1])
        proto = parse_symbol(rest[2]) if len(rest) == 3 else ""
    except ValidationError as e:
        return state.fail(line, e)
    return Ok(
        ClassStmt(
            WorkClass(
                ext=ext,
                full_ext=full_ext,
                class_name=class_name,
                proto=proto,
                prefix=prefix,
                embedded=embedded,
                syntax=line,
            )
        )
    )


def _parse_class_mod(state: ParserState, verb: str, line: Line, args: List[str]) -> Result:
    if len(args) != 1:
        return state.fail(line, f"{verb} directive expects exactly one argument")
    try:
        module_path = parse_string(args[0])
    except ValidationError as e:
        return state.fail(line, f"invalid quoted string: {e}")
    try:
        check_module_path(module_path)
    except ValidationError as e:
        return state.fail(line, e)
    return Ok(ClassModStmt(ClassfileImport(module_path=module_path, syntax=line)))


def _parse_import(state: ParserState, verb: str, line: Line, args: List[str]) -> Result:
    if state.current is None:
        # a top-level import names a classfile module
        if len(args) == 1:
            result = _parse_class_mod(state, verb, line, args)
            if isinstance(result, Ok):
                return result
        return state.fail(line, "import must declare after a project definition")
    try:
        if len(args) == 1:
            imp = Import(path=parse_pkg_path(args[0]), syntax=line)
        elif len(args) == 2:
            imp = Import(path=parse_pkg_path(args[1]), name=parse_string(args[0]), syntax=line)
        else:
            return state.fail(line, IMPORT_USAGE)
    except ValidationError as e:
        return state.fail(line, e)
    return Ok(ImportStmt(imp))


def _parse_runner(state: ParserState, verb: str, line: Line, args: List[str]) -> Result:
    if state.current is None:
        return state.fail(line, "runner must declare after a project definition")
    if state.current.runner is not None:
        return state.fail(line, "repeated runner statement")
    if len(args) not in (1, 2):
        return state.fail(line, RUNNER_USAGE)
    try:
        path = parse_pkg_path(args[0])
        version = parse_string(args[1]) if len(args) == 2 else ""
    except ValidationError as e:
        return state.fail(line, e)
    return Ok(RunnerStmt(Runner(path=path, version=version, syntax=line)))


def _parse_unknown(state: ParserState, verb: str, line: Line, args: List[str]) -> Result:
    if state.strict:
        return state.fail(line, f"unknown directive: {verb}")
    return Ok(UnknownStmt(verb))


DIRECTIVES: Dict[str, Handler] = {
    "xgo": _parse_version,
    "gop": _parse_version,
    "project": _parse_project,
    "class": _parse_class,
    "import": _parse_import,
    "register": _parse_class_mod,
    "runner": _parse_runner,
}


def _apply(state: ParserState, stmt: DirectiveStmt) -> None:
    """Fold one successfully parsed statement into the parser state."""
    manifest = state.manifest
    if isinstance(stmt, VersionStmt):
        manifest.version = stmt.directive
    elif isinstance(stmt, ProjectStmt):
        manifest.projects.append(stmt.project)
        state.current = stmt.project
    elif isinstance(stmt, ClassStmt):
        state.current.works.append(stmt.work)
    elif isinstance(stmt, ImportStmt):
        state.current.imports.append(stmt.imp)
    elif isinstance(stmt, ClassModStmt):
        manifest.imports.append(stmt.imp)
    elif isinstance(stmt, RunnerStmt):
        state.current.runner = stmt.runner


# =============================================================================
# Entry points
# =============================================================================


def parse_manifest(name: str, data: Union[bytes, str], strict: bool = True) -> Manifest:
    """
    Parse gox.mod content into a Manifest.

    Args:
        name: File name used in positions and errors.
        data: File content.
        strict: Reject unknown directives (main module) when True; ignore
            them (dependency manifests) when False.

    Returns:
        The parsed Manifest.

    Raises:
        ManifestParseError: With every syntax and directive error found.
    """
    fs, syntax_errors = parse_syntax(name, data)
    state = ParserState(filename=name, strict=strict, manifest=Manifest(syntax=fs))

    results: List[Result] = []
    for verb, line, args in fs.iter_lines():
        handler = DIRECTIVES.get(verb, _parse_unknown)
        result = handler(state, verb, line, args)
        if isinstance(result, Ok):
            _apply(state, result.value)
        results.append(result)

    _, directive_errors = partition(results)
    errors: List[ManifestError] = sorted(
        [*syntax_errors, *directive_errors], key=lambda e: e.line
    )
    if errors:
        logger.debug(f"{name}: {len(errors)} error(s)")
        raise ManifestParseError(errors)

    manifest = state.manifest
    logger.debug(
        f"Parsed {name}: {len(manifest.projects)} project(s), "
        f"{len(manifest.imports)} classfile module(s)"
    )
    return manifest


def parse(name: str, data: Union[bytes, str]) -> Manifest:
    """Parse a main-module manifest; unknown directives are errors."""
    return parse_manifest(name, data, strict=True)


def parse_lax(name: str, data: Union[bytes, str]) -> Manifest:
    """Parse a dependency manifest; unknown directives are ignored."""
    return parse_manifest(name, data, strict=False)
