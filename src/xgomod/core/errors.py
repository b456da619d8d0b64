"""
Error types for xgomod.

Parse-time errors (syntax and directive errors) are collected for a whole
manifest and raised together as a `ManifestParseError`. Resolution-time
errors (classfile registry, package lookup, fetching) are raised as soon
as they occur.

Hierarchy:
    XgoModError
    ├── ManifestError
    │   ├── ManifestSyntaxError
    │   ├── DirectiveError
    │   └── ManifestParseError
    ├── ValidationError
    │   ├── InvalidExtError
    │   ├── InvalidSymbolError
    │   └── InvalidVersionError
    ├── ResolutionError
    │   ├── DependencyNotFoundError
    │   │   └── ModuleNotCachedError
    │   ├── NotClassfileModuleError
    │   ├── MissingPackageError
    │   ├── InvalidPackagePathError
    │   └── FetchError
    ├── ModuleRootNotFoundError
    ├── NoModuleDeclError
    └── DefaultModuleError
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class XgoModError(Exception):
    """Base class for every error raised by xgomod."""


# =============================================================================
# Parse-time errors
# =============================================================================


class ManifestError(XgoModError):
    """An error tied to a position inside a manifest file."""

    def __init__(self, filename: str, line: int, message: str):
        self.filename = filename
        self.line = line
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}: {self.message}"


class ManifestSyntaxError(ManifestError):
    """
    Malformed token or quoting, reported with a column.

    Attributes:
        filename: Manifest file name.
        line: 1-based line number.
        col: 1-based column (rune offset) of the offending character.
        message: Human-readable description.
    """

    def __init__(self, filename: str, line: int, col: int, message: str):
        self.col = col
        super().__init__(filename, line, message)

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.col}: {self.message}"


class DirectiveError(ManifestError):
    """
    A directive that parsed but failed validation.

    Wraps the underlying cause, which stays reachable via `cause`
    and `__cause__`.
    """

    def __init__(self, filename: str, line: int, cause: Exception):
        self.cause = cause
        super().__init__(filename, line, str(cause))
        self.__cause__ = cause


class ManifestParseError(ManifestError):
    """
    Aggregate of every error found in one parse pass.

    Attributes:
        errors: The individual errors, in source order.
    """

    def __init__(self, errors: Sequence[ManifestError]):
        self.errors: List[ManifestError] = list(errors)
        first = self.errors[0] if self.errors else None
        self.filename = first.filename if first else ""
        self.line = first.line if first else 0
        self.message = "\n".join(str(e) for e in self.errors)
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message

    def __len__(self) -> int:
        return len(self.errors)


# =============================================================================
# Validation errors
# =============================================================================


class ValidationError(XgoModError):
    """A token that does not match the pattern its position requires."""


class InvalidExtError(ValidationError):
    """
    A classfile extension token failed to parse.

    Attributes:
        ext: The token as written in the manifest.
        cause: Underlying reason.
    """

    def __init__(self, ext: str, cause: Exception):
        self.ext = ext
        self.cause = cause
        super().__init__(f"ext {ext} invalid: {cause}")
        self.__cause__ = cause


class InvalidSymbolError(ValidationError):
    """
    A class name token is not an exported identifier.

    Attributes:
        sym: The token as written in the manifest.
        cause: Underlying reason.
    """

    def __init__(self, sym: str, cause: Exception):
        self.sym = sym
        self.cause = cause
        super().__init__(f"symbol {sym} invalid: {cause}")
        self.__cause__ = cause


class InvalidVersionError(ValidationError):
    """A language version string that is not of the form 1.23."""


# =============================================================================
# Resolution errors
# =============================================================================


class ResolutionError(XgoModError):
    """Base class for failures while resolving modules or packages."""


class DependencyNotFoundError(ResolutionError):
    """
    A module is not a known dependency, or is absent where it was looked up.

    Attributes:
        module_path: The module that could not be found.
    """

    def __init__(self, module_path: str, message: str = "not found"):
        self.module_path = module_path
        super().__init__(f"{module_path}: {message}" if module_path else message)


class ModuleNotCachedError(DependencyNotFoundError):
    """A known dependency whose directory is not in the module cache yet."""

    def __init__(self, module_path: str, version: str = ""):
        self.version = version
        where = f"{module_path}@{version}" if version else module_path
        super().__init__(module_path, f"not found in module cache ({where})")


class NotClassfileModuleError(ResolutionError):
    """A module imported for its classfiles declares no project."""

    def __init__(self, module_path: str):
        self.module_path = module_path
        super().__init__(f"{module_path}: not a classfile module")


class MissingPackageError(ResolutionError):
    """
    No dependency module provides the package.

    The message suggests the command that adds it.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"no required module provides package {path}; to add it:\n\txgo get {path}"
        )


class InvalidPackagePathError(ResolutionError):
    """An empty or relative package path reached the locator."""

    def __init__(self, path: str = ""):
        self.path = path
        super().__init__(f"invalid package path: {path!r}" if path else "invalid package path")


class FetchError(ResolutionError):
    """
    Raised when fetching a module into the cache fails.

    Attributes:
        message: Human-readable error message.
        stderr: Raw stderr output from the go command.
    """

    def __init__(self, message: str, stderr: Optional[str] = ""):
        self.message = message
        self.stderr = stderr or ""
        super().__init__(f"{message}: {self.stderr}" if self.stderr else message)


# =============================================================================
# Module errors
# =============================================================================


class ModuleRootNotFoundError(XgoModError):
    """No go.mod in a directory or any of its parents."""

    def __init__(self, start_dir: str = ""):
        self.start_dir = start_dir
        super().__init__("go.mod file not found in current directory or any parent directory")


class NoModuleDeclError(XgoModError):
    """A go.mod without a module statement."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"{filename}: no module declaration in a .mod file")


class DefaultModuleError(XgoModError):
    """An edit or save attempted on the default (file-less) module."""
