"""
Module Cache Paths.

Maps module versions to their directories in the Go module cache.

Cache Structure:
    $GOMODCACHE/
    ├── github.com/!burnt!sushi/toml@v1.2.0/   # extracted module
    └── cache/download/
        └── github.com/!burnt!sushi/toml/@v/
            └── v1.2.0.zip                      # downloaded archive

Upper-case letters in module paths are escaped as `!` followed by the
lower-case letter, so paths stay unique on case-insensitive file systems.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .. import config
from .errors import ValidationError
from .types import ModuleVersion

logger = logging.getLogger(__name__)


def escape_path(path: str) -> str:
    """
    Escape a module path for use as a cache directory name.

    Raises:
        ValidationError: If the path contains `!`.
    """
    out = []
    for c in path:
        if c == "!":
            raise ValidationError(f'malformed module path "{path}": invalid char \'!\'')
        if "A" <= c <= "Z":
            out.append("!" + c.lower())
        else:
            out.append(c)
    return "".join(out)


def unescape_path(escaped: str) -> str:
    """
    Reverse `escape_path`.

    Raises:
        ValidationError: On a dangling `!` or an escaped non-letter.
    """
    out = []
    bang = False
    for c in escaped:
        if bang:
            if not "a" <= c <= "z":
                raise ValidationError(f"invalid escaped module path {escaped!r}")
            out.append(c.upper())
            bang = False
        elif c == "!":
            bang = True
        elif "A" <= c <= "Z":
            raise ValidationError(f"invalid escaped module path {escaped!r}")
        else:
            out.append(c)
    if bang:
        raise ValidationError(f"invalid escaped module path {escaped!r}")
    return "".join(out)


class ModCache:
    """
    Lookups in one module cache directory.

    Attributes:
        root: The cache root (GOMODCACHE).
    """

    def __init__(self, root: Optional[Path] = None):
        """
        Initialize the cache view.

        Args:
            root: Override the cache root; defaults to GOMODCACHE.
        """
        self.root = Path(root) if root is not None else config.get_gomodcache()

    def path(self, mod: ModuleVersion) -> Path:
        """
        Directory of a module version.

        A version-less module is a local directory and maps to itself.
        """
        if not mod.version:
            return Path(mod.path)
        return self.root / f"{escape_path(mod.path)}@{mod.version}"

    def download_path(self, mod: ModuleVersion) -> Optional[Path]:
        """Archive path of a module version, or None for local directories."""
        if not mod.version:
            return None
        return self.root / "cache" / "download" / escape_path(mod.path) / "@v" / f"{mod.version}.zip"

    def has(self, mod: ModuleVersion) -> bool:
        """Check whether the module's directory exists."""
        return self.path(mod).is_dir()

    def contains(self, path: Path) -> bool:
        """Check whether `path` lies inside the cache root."""
        try:
            Path(path).relative_to(self.root)
        except ValueError:
            return False
        return True
