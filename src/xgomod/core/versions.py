"""
Dependency Version Map.

Merges the require and replace lists of a go.mod into the effective
module version of every dependency.

Resolution:
    1. Every require entry seeds the map under its module path.
    2. Every replace entry overwrites the entry of its old path. A
       version-less target is a local directory: a target starting with
       `.` is anchored at the manifest directory, and the result is made
       absolute.

Replace always wins over require, whatever the statement order.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Tuple, Union

from .types import ModuleVersion

logger = logging.getLogger(__name__)

ReplaceRule = Tuple[ModuleVersion, ModuleVersion]


def build_version_map(
    requires: Iterable[ModuleVersion],
    replaces: Iterable[ReplaceRule],
    manifest_dir: Union[str, Path],
) -> Dict[str, ModuleVersion]:
    """
    Compute module path -> effective ModuleVersion.

    Args:
        requires: Required module versions.
        replaces: (old, new) pairs; only the old path is used as key.
        manifest_dir: Directory of the go.mod, anchoring relative targets.

    Returns:
        The version map. Local replacements have an empty version and an
        absolute directory as path.
    """
    versions: Dict[str, ModuleVersion] = {}
    for req in requires:
        if req.path:
            versions[req.path] = req

    for old, new in replaces:
        if not old.path:
            continue
        real = new
        if not new.version:
            target = new.path
            if target.startswith("."):
                target = os.path.join(str(manifest_dir), target)
            real = ModuleVersion(path=os.path.abspath(target), version="")
            logger.debug(f"Replacing {old.path} with local directory {real.path}")
        versions[old.path] = real
    return versions
