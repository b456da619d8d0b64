"""Unit tests for module cache paths."""

from pathlib import Path

import pytest

from xgomod import config
from xgomod.core.errors import ValidationError
from xgomod.core.modcache import ModCache, escape_path, unescape_path
from xgomod.core.types import ModuleVersion


class TestEscaping:
    def test_escape(self):
        assert escape_path("github.com/BurntSushi/toml") == "github.com/!burnt!sushi/toml"
        assert escape_path("golang.org/x/mod") == "golang.org/x/mod"

    def test_escape_rejects_bang(self):
        with pytest.raises(ValidationError):
            escape_path("github.com/a!b")

    def test_unescape(self):
        assert unescape_path("github.com/!burnt!sushi/toml") == "github.com/BurntSushi/toml"

    @pytest.mark.parametrize("escaped", ["a!", "a!B", "aB", "a!1"])
    def test_unescape_rejects(self, escaped):
        with pytest.raises(ValidationError):
            unescape_path(escaped)


class TestModCache:
    def test_path(self, tmp_path):
        cache = ModCache(tmp_path)
        mod = ModuleVersion(path="github.com/Foo/bar", version="v1.0.0")
        assert cache.path(mod) == tmp_path / "github.com/!foo/bar@v1.0.0"

    def test_local_path(self, tmp_path):
        cache = ModCache(tmp_path)
        assert cache.path(ModuleVersion(path="/src/x")) == Path("/src/x")
        assert cache.download_path(ModuleVersion(path="/src/x")) is None

    def test_download_path(self, tmp_path):
        cache = ModCache(tmp_path)
        mod = ModuleVersion(path="github.com/Foo/bar", version="v1.0.0")
        assert cache.download_path(mod) == tmp_path / "cache/download/github.com/!foo/bar/@v/v1.0.0.zip"

    def test_has_and_contains(self, tmp_path):
        cache = ModCache(tmp_path)
        mod = ModuleVersion(path="a.com/x", version="v1")
        assert not cache.has(mod)
        (tmp_path / "a.com/x@v1").mkdir(parents=True)
        assert cache.has(mod)
        assert cache.contains(tmp_path / "a.com/x@v1")
        assert not cache.contains(Path("/elsewhere"))

    def test_default_root(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GOMODCACHE", str(tmp_path))
        config.get_gomodcache.cache_clear()
        try:
            assert ModCache().root == tmp_path
        finally:
            config.get_gomodcache.cache_clear()
