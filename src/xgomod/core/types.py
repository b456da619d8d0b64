"""
Shared value types: module versions and located packages.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ModuleVersion(BaseModel):
    """
    A module path at a version.

    A version-less entry whose path is an absolute directory denotes a
    local replacement.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    version: str = ""

    @property
    def is_local(self) -> bool:
        """True for a directory replacement (no version)."""
        return self.version == ""

    def __str__(self) -> str:
        return f"{self.path}@{self.version}" if self.version else self.path


class PkgType(StrEnum):
    """
    Classification of an import path.

    Attributes:
        STANDARD: Standard library package (first element has no dot).
        MODULE: Package inside the current module.
        LOCAL: Relative path such as `./foo`.
        EXTERN: Package provided by a dependency module.
        INVALID: Empty path.
    """

    STANDARD = "standard"
    MODULE = "module"
    LOCAL = "local"
    EXTERN = "extern"
    INVALID = "invalid"


class Package(BaseModel):
    """
    A package resolved to a directory.

    Attributes:
        type: How the import path was classified.
        dir: Directory holding the package sources.
        mod_dir: Root directory of the owning module.
        mod_path: Path of the owning module ("" for the standard library).
        real: Module version the directory was taken from, if any.
    """

    type: PkgType
    dir: Path
    mod_dir: Path
    mod_path: str = ""
    real: Optional[ModuleVersion] = None
