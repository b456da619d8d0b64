"""Unit tests for the module fetcher."""

import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from xgomod.core.errors import FetchError
from xgomod.core.fetcher import DownloadInfo, ModuleFetcher
from xgomod.core.types import ModuleVersion


def _completed(stdout="", stderr="", returncode=0):
    result = MagicMock()
    result.stdout = stdout
    result.stderr = stderr
    result.returncode = returncode
    return result


class TestModuleFetcher:
    @pytest.fixture
    def fetcher(self):
        return ModuleFetcher(go_command="go", timeout=10)

    @patch("xgomod.core.fetcher.subprocess.run")
    def test_fetch_version(self, mock_run, fetcher):
        mock_run.return_value = _completed(
            json.dumps({"Path": "github.com/goplus/yap", "Version": "v0.8.1", "Dir": "/cache/yap"})
        )

        mod = fetcher.fetch(ModuleVersion(path="github.com/goplus/yap", version="v0.8.1"))

        assert mod == ModuleVersion(path="github.com/goplus/yap", version="v0.8.1")
        args = mock_run.call_args[0][0]
        assert args == ["go", "mod", "download", "-json", "github.com/goplus/yap@v0.8.1"]
        assert mock_run.call_args[1]["timeout"] == 10

    @patch("xgomod.core.fetcher.subprocess.run")
    def test_fetch_latest(self, mock_run, fetcher):
        mock_run.return_value = _completed(json.dumps({"Path": "github.com/goplus/yap", "Version": "v0.9.0"}))

        mod = fetcher.fetch("github.com/goplus/yap")

        assert mock_run.call_args[0][0][-1] == "github.com/goplus/yap@latest"
        assert mod.version == "v0.9.0"

    @patch("xgomod.core.fetcher.subprocess.run")
    def test_error_field(self, mock_run, fetcher):
        mock_run.return_value = _completed(
            json.dumps({"Path": "github.com/x/y", "Error": "unknown revision v9"}), returncode=1
        )
        with pytest.raises(FetchError) as exc:
            fetcher.fetch("github.com/x/y@v9")
        assert exc.value.stderr == "unknown revision v9"

    @patch("xgomod.core.fetcher.subprocess.run")
    def test_nonzero_exit_without_json(self, mock_run, fetcher):
        mock_run.return_value = _completed(stderr="go: network down\n", returncode=1)
        with pytest.raises(FetchError, match="network down"):
            fetcher.fetch("github.com/x/y@v1")

    @patch("xgomod.core.fetcher.subprocess.run")
    def test_unexpected_output(self, mock_run, fetcher):
        mock_run.return_value = _completed("not json")
        with pytest.raises(FetchError, match="unexpected output"):
            fetcher.fetch("github.com/x/y@v1")

    @patch("xgomod.core.fetcher.subprocess.run")
    def test_timeout(self, mock_run, fetcher):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="go", timeout=10)
        with pytest.raises(FetchError, match="timed out"):
            fetcher.fetch("github.com/x/y@v1")

    @patch("xgomod.core.fetcher.subprocess.run")
    def test_missing_go_command(self, mock_run, fetcher):
        mock_run.side_effect = FileNotFoundError("go")
        with pytest.raises(FetchError, match="failed to start"):
            fetcher.fetch("github.com/x/y@v1")


class TestDownloadInfo:
    def test_aliases(self):
        info = DownloadInfo.model_validate({"Path": "a.com/x", "Version": "v1", "GoMod": "/c/x.mod"})
        assert info.path == "a.com/x"
        assert info.go_mod == "/c/x.mod"
        assert info.error == ""
