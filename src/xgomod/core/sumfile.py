"""
Checksum File (go.sum).

Reads the `module version hash` lines of a go.sum, looks up the lines of a
module and appends new ones. Lines are kept sorted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Union

logger = logging.getLogger(__name__)


class SumFile:
    """
    An in-memory go.sum.

    Attributes:
        path: File the lines are saved to.
        lines: Checksum lines without trailing newlines.
    """

    def __init__(self, path: Union[str, Path], lines: Iterable[str] = ()):
        self.path = Path(path)
        self.lines: List[str] = list(lines)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "SumFile":
        """Load a go.sum; a missing file loads as empty."""
        path = Path(path)
        if not path.exists():
            return cls(path)
        text = path.read_text()
        lines = text.rstrip("\n").split("\n") if text.strip() else []
        return cls(path, lines)

    def lookup(self, module_path: str) -> List[str]:
        """All lines of `module_path`, in file order."""
        prefix = module_path + " "
        return [line for line in self.lines if line.startswith(prefix)]

    def add(self, lines: Iterable[str]) -> None:
        """Append lines and restore the sort order."""
        self.lines.extend(lines)
        self.lines.sort()

    def save(self) -> None:
        self.path.write_text("".join(line + "\n" for line in self.lines))
        logger.debug(f"Saved {len(self.lines)} checksum line(s) to {self.path}")
