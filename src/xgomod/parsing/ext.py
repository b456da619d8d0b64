"""
Extension Token Matching.

Recognizes and decomposes the classfile extension tokens used by the
`project` and `class` directives, and validates the other token shapes the
directives accept (class symbols, package paths, quoted strings).

Ext token forms:
    .spx          plain extension
    _yap.gox      compound extension (file `foo_yap.gox`)
    *.spx         `*` marker: the file name is not used as the class name
    main.spx      project-only form: the project file is `main.spx`
"""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from .. import config
from ..core.errors import InvalidExtError, InvalidSymbolError, ValidationError
from .syntax import auto_quote, go_quote, must_quote, unquote

__all__ = [
    "auto_quote",
    "check_module_path",
    "class_ext",
    "get_ext",
    "go_quote",
    "is_ext",
    "must_quote",
    "parse_ext",
    "parse_pkg_path",
    "parse_pkg_paths",
    "parse_string",
    "parse_symbol",
    "split_fname",
    "unquote",
]

SYMBOL_RE = re.compile(r"^\*?[A-Z]\w*$")

# Characters Go's module.CheckPath allows in a path element
_MODULE_ELEM_RE = re.compile(r"^[A-Za-z0-9.\-_~]+$")


def is_ext(s: str, is_proj: bool) -> bool:
    """Check whether `s` has the shape of an ext token."""
    if len(s) > 1 and s[0] in "*_.":
        return True
    return is_proj and len(s) > 4 and s.startswith("main") and s[4] in "_."


def get_ext(s: str) -> str:
    """Strip the `*` or `main` marker from an ext token."""
    if len(s) > 1 and s[0] == "*":
        return s[1:]
    if len(s) > 4 and s.startswith("main"):
        return s[4:]
    return s


def parse_string(s: str) -> str:
    """
    Interpret a directive argument as a string.

    A token starting with `"` is a Go string literal. Any other token
    containing a quote character is rejected; plain tokens pass through.

    Raises:
        ValidationError: If the token is malformed.
    """
    if s.startswith('"'):
        try:
            return unquote(s)
        except ValueError as e:
            raise ValidationError(str(e)) from e
    if any(c in s for c in "\"'`"):
        raise ValidationError("unquoted string cannot contain quote")
    return s


def parse_ext(s: str, is_proj: bool) -> Tuple[str, str]:
    """
    Parse an ext token.

    Returns:
        (ext, full_ext): the canonical extension and the token as written
        (unquoted) with its marker.

    Raises:
        InvalidExtError: If the token is malformed or not an ext.
    """
    try:
        t = parse_string(s)
    except ValidationError as e:
        raise InvalidExtError(s, e) from e
    if not is_ext(t, is_proj):
        raise InvalidExtError(s, ValidationError("invalid ext format"))
    return get_ext(t), t


def parse_symbol(s: str) -> str:
    """
    Parse a class symbol: an exported identifier, optionally `*`-prefixed.

    Raises:
        InvalidSymbolError: If the token is malformed or not exported.
    """
    try:
        t = parse_string(s)
    except ValidationError as e:
        raise InvalidSymbolError(s, e) from e
    if not SYMBOL_RE.match(t):
        raise InvalidSymbolError(s, ValidationError("invalid Go export symbol format"))
    return t


def parse_pkg_path(s: str) -> str:
    """
    Parse a package path token.

    Raises:
        ValidationError: If the token is malformed, empty, or starts
            with `.` or `_`.
    """
    try:
        t = parse_string(s)
    except ValidationError as e:
        raise ValidationError(f"invalid quoted string: {e}") from e
    if not t or t[0] in "._":
        raise ValidationError(f'"{t}" is not a valid package path')
    return t


def parse_pkg_paths(tokens: Sequence[str]) -> List[str]:
    """Parse every token with `parse_pkg_path`, stopping at the first error."""
    return [parse_pkg_path(tok) for tok in tokens]


def check_module_path(path: str) -> None:
    """
    Validate a module path as declared by a classfile-module import.

    Raises:
        ValidationError: If the path is not a well-formed module path.
    """
    if not path:
        raise ValidationError("malformed module path \"\": empty string")
    if path[0] in "-/" or path.endswith("/"):
        raise ValidationError(f'malformed module path "{path}": leading or trailing slash or dash')
    first, *_ = path.split("/")
    if "." not in first:
        raise ValidationError(
            f'malformed module path "{path}": missing dot in first path element'
        )
    for elem in path.split("/"):
        if not elem:
            raise ValidationError(f'malformed module path "{path}": double slash')
        if elem[0] == "." or elem[-1] == ".":
            raise ValidationError(
                f'malformed module path "{path}": leading or trailing dot in path element'
            )
        if not _MODULE_ELEM_RE.match(elem):
            raise ValidationError(f'malformed module path "{path}": invalid char in path element')


def split_fname(fname: str) -> Tuple[str, str]:
    """
    Split a file name into (class name, class ext).

    Files ending in `.gox` may carry a compound ext introduced by the last
    `_` of the stem: `foo_yap.gox` splits into ("foo", "_yap.gox").
    """
    ext = _path_ext(fname)
    stem = fname[: len(fname) - len(ext)]
    if ext == config.COMPOUND_EXT_SUFFIX:
        n = stem.rfind("_")
        if n > 0:
            return fname[:n], fname[n:]
    return stem, ext


def _path_ext(fname: str) -> str:
    """Slash-separated path extension: `.spx` for both `a.spx` and `.spx`."""
    dot = fname.rfind(".")
    if dot < 0 or "/" in fname[dot:]:
        return ""
    return fname[dot:]


def class_ext(fname: str) -> str:
    """Return the class ext of a file name (see `split_fname`)."""
    return split_fname(fname)[1]
