"""Unit tests for the dependency version map."""

import os

from xgomod.core.types import ModuleVersion
from xgomod.core.versions import build_version_map


def mv(path, version=""):
    return ModuleVersion(path=path, version=version)


class TestBuildVersionMap:
    def test_requires(self):
        versions = build_version_map([mv("a.com/x", "v1.0.0"), mv("b.com/y", "v0.1.0")], [], "/w")
        assert versions == {"a.com/x": mv("a.com/x", "v1.0.0"), "b.com/y": mv("b.com/y", "v0.1.0")}

    def test_replace_wins_over_require(self):
        versions = build_version_map(
            [mv("a.com/x", "v1.0.0")],
            [(mv("a.com/x"), mv("a.com/fork", "v1.1.0"))],
            "/w",
        )
        assert versions["a.com/x"] == mv("a.com/fork", "v1.1.0")

    def test_replace_without_require_adds_entry(self):
        versions = build_version_map([], [(mv("a.com/x", "v1.0.0"), mv("a.com/x", "v1.0.1"))], "/w")
        assert versions["a.com/x"].version == "v1.0.1"

    def test_relative_local_replacement(self, tmp_path):
        proj = tmp_path / "proj"
        versions = build_version_map(
            [mv("a.com/x", "v1.0.0")],
            [(mv("a.com/x"), mv("../local"))],
            proj,
        )
        real = versions["a.com/x"]
        assert real.is_local
        assert real.path == str(tmp_path / "local")

    def test_absolute_local_replacement(self):
        versions = build_version_map([], [(mv("a.com/x"), mv("/src/x"))], "/w")
        assert versions["a.com/x"] == mv(os.path.abspath("/src/x"))

    def test_last_replace_wins(self):
        versions = build_version_map(
            [],
            [(mv("a.com/x"), mv("b.com/x", "v1")), (mv("a.com/x"), mv("c.com/x", "v2"))],
            "/w",
        )
        assert versions["a.com/x"] == mv("c.com/x", "v2")
