"""
Module Fetcher.

Downloads modules into the module cache with `go mod download -json` and
reports the version that was resolved.

The command prints one JSON object per module:

    {"Path": "github.com/goplus/yap", "Version": "v0.8.1",
     "Dir": "/home/me/go/pkg/mod/github.com/goplus/yap@v0.8.1", ...}

and sets "Error" instead when the download fails.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError

from .. import config
from .errors import FetchError
from .types import ModuleVersion

logger = logging.getLogger(__name__)


class DownloadInfo(BaseModel):
    """One module entry printed by `go mod download -json`."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(alias="Path")
    version: str = Field(default="", alias="Version")
    dir: str = Field(default="", alias="Dir")
    go_mod: str = Field(default="", alias="GoMod")
    error: str = Field(default="", alias="Error")


class ModuleFetcher:
    """
    Fetches modules into the module cache through the go command.

    Attributes:
        go_command: Name or path of the go executable.
        timeout: Seconds before a download is abandoned.
        cwd: Working directory for the command.
    """

    def __init__(
        self,
        go_command: Optional[str] = None,
        timeout: Optional[int] = None,
        cwd: Optional[Path] = None,
    ):
        self.go_command = go_command or config.GO_COMMAND
        self.timeout = timeout or config.FETCH_TIMEOUT
        self.cwd = cwd

    def _run_go(self, *args: str) -> subprocess.CompletedProcess:
        """
        Run a go command without raising on a non-zero exit.

        Raises:
            FetchError: If the command cannot be started or times out.
        """
        cmd = [self.go_command] + list(args)
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            return subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise FetchError(f"go command timed out: {' '.join(args)}")
        except OSError as e:
            raise FetchError(f"go command failed to start: {' '.join(args)}", str(e))

    def fetch(self, target: Union[str, ModuleVersion]) -> ModuleVersion:
        """
        Download a module into the cache.

        Args:
            target: `path@version`, a bare path (fetches `@latest`), or a
                ModuleVersion.

        Returns:
            The module at the version actually downloaded.

        Raises:
            FetchError: If the download fails.
        """
        spec = str(target)
        if "@" not in spec:
            spec += "@latest"
        logger.info(f"🌐 Fetching {spec}...")

        result = self._run_go("mod", "download", "-json", spec)
        info: Optional[DownloadInfo] = None
        if result.stdout.strip():
            try:
                info = DownloadInfo.model_validate_json(result.stdout)
            except SchemaError as e:
                if result.returncode == 0:
                    raise FetchError(f"unexpected output from go mod download {spec}", str(e))

        if info is not None and info.error:
            raise FetchError(f"go mod download {spec} failed", info.error)
        if result.returncode != 0 or info is None:
            raise FetchError(f"go mod download {spec} failed", result.stderr.strip())

        logger.info(f"✅ Fetched {info.path}@{info.version}")
        return ModuleVersion(path=info.path, version=info.version)
