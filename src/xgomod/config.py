"""
Global Configuration and Environment Lookups.

This module centralizes file names, marker strings and defaults shared by
the parser and the resolvers, plus the environment lookups for the Go
toolchain locations (GOROOT and the module cache).
"""

import logging
import os
import shutil
import subprocess
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# --- Manifest files ---
GO_MOD = "go.mod"
GO_SUM = "go.sum"

# Secondary manifest names, in lookup order ("gop.mod" is the legacy name)
EXT_MOD_NAMES: Tuple[str, ...] = ("gox.mod", "gop.mod")

# A require line carrying one of these comments declares a classfile module
CLASS_MARKERS: Tuple[str, ...] = ("xgo:class", "gop:class")
CLASS_MARKER_COMMENT = "//xgo:class"

# Files ending in this suffix carry a compound ext such as "_spx.gox"
COMPOUND_EXT_SUFFIX = ".gox"

# --- Defaults ---
DEFAULT_GO_VERSION = "1.18"
DEFAULT_XGO_VERSION = "1.2"

# Seconds before a `go mod download` is abandoned
FETCH_TIMEOUT = int(os.getenv("XGOMOD_FETCH_TIMEOUT", "300"))

# Name of the go command used by the fetcher and the env lookups
GO_COMMAND = os.getenv("XGOMOD_GO", "go")


def _go_env(name: str) -> Optional[str]:
    """Ask the go command for an environment value, or None if unavailable."""
    if shutil.which(GO_COMMAND) is None:
        return None
    try:
        result = subprocess.run(
            [GO_COMMAND, "env", name],
            capture_output=True,
            text=True,
            check=True,
            timeout=30,
        )
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
        logger.debug(f"go env {name} failed: {e}")
        return None
    value = result.stdout.strip()
    return value or None


@lru_cache(maxsize=None)
def get_gomodcache() -> Path:
    """
    Locate the module cache directory.

    Priority: $GOMODCACHE > `go env GOMODCACHE` > $GOPATH/pkg/mod > ~/go/pkg/mod
    """
    env = os.getenv("GOMODCACHE")
    if env:
        return Path(env)
    value = _go_env("GOMODCACHE")
    if value:
        return Path(value)
    gopath = os.getenv("GOPATH")
    if gopath:
        first = gopath.split(os.pathsep)[0]
        return Path(first) / "pkg" / "mod"
    return Path.home() / "go" / "pkg" / "mod"


@lru_cache(maxsize=None)
def get_goroot() -> Optional[Path]:
    """Locate the Go installation root, or None if no toolchain is around."""
    env = os.getenv("GOROOT")
    if env:
        return Path(env)
    value = _go_env("GOROOT")
    return Path(value) if value else None
