"""
Manifest Editor and Formatter.

In-place edits of a parsed Manifest that keep its statement tree in sync,
and serialization back to bytes.

New statements are placed by directive weight: before the first existing
statement of strictly greater weight, so they land after any statements of
equal weight. Existing statements are never reordered, and an untouched
manifest formats back to its exact input.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from ..core.errors import InvalidVersionError
from ..core.manifest import ClassfileImport, Manifest, VersionDirective
from .directives import GO_VERSION_RE
from .syntax import FileSyntax, Line, Stmt, auto_quote, format_syntax, go_quote

logger = logging.getLogger(__name__)

DIRECTIVE_WEIGHTS: Dict[str, int] = {
    "module": 1,
    "xgo": 2,
    "gop": 2,
    "project": 3,
    "class": 4,
    "runner": 4,
    "import": 0x81,
    "register": 0x81,
}

# Weight of a block whose verb has no entry above
LINE_BLOCK_WEIGHT = 0x80


def stmt_weight(stmt: Stmt) -> int:
    """Weight of an existing statement (unknown lines weigh 0)."""
    if isinstance(stmt, Line):
        return DIRECTIVE_WEIGHTS.get(stmt.verb, 0)
    return DIRECTIVE_WEIGHTS.get(stmt.verb, LINE_BLOCK_WEIGHT)


def insert_line(fs: FileSyntax, tokens: List[str]) -> Line:
    """Insert a new top-level line at the position its weight dictates."""
    weight = DIRECTIVE_WEIGHTS.get(tokens[0], 0)
    for i, stmt in enumerate(fs.stmts):
        if weight < stmt_weight(stmt):
            return fs.new_line(tokens, i)
    return fs.new_line(tokens)


def add_or_update_version(manifest: Manifest, version: str) -> None:
    """
    Set the language version, adding an `xgo` statement if there is none.

    An existing statement is updated in place and keeps its verb.

    Raises:
        InvalidVersionError: If `version` is not of the form 1.23.
    """
    if not GO_VERSION_RE.match(version):
        raise InvalidVersionError(f"invalid language version string {go_quote(version)}")

    directive = manifest.version
    if directive is None:
        line = insert_line(manifest.syntax, ["xgo", version])
        manifest.version = VersionDirective(version=version, verb="xgo", syntax=line)
        logger.debug(f"Added xgo {version}")
        return

    directive.version = version
    line = directive.syntax
    if line is None:
        directive.syntax = insert_line(manifest.syntax, [directive.verb, version])
    elif line.tokens[-1:] != [version]:
        line.set_tokens([version] if line.in_block else [directive.verb, version])
        logger.debug(f"Updated {directive.verb} to {version}")


def add_import_if_absent(manifest: Manifest, module_path: str) -> None:
    """
    Declare `module_path` as a classfile module unless it already is.

    The new statement uses `register` once the manifest declares a
    project, since a top-level `import` there would read back as an
    auto-import of the last project.
    """
    if manifest.has_class_mod(module_path):
        return
    verb = "register" if manifest.projects else "import"
    line = insert_line(manifest.syntax, [verb, auto_quote(module_path)])
    manifest.imports.append(ClassfileImport(module_path=module_path, syntax=line))
    logger.debug(f"Added {verb} {module_path}")


def format_manifest(manifest: Manifest) -> bytes:
    """Serialize the manifest's statement tree."""
    return format_syntax(manifest.syntax)
