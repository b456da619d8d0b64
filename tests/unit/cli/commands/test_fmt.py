"""
Unit tests for the 'fmt' command.
"""

import pytest
from click.testing import CliRunner

from xgomod.cli.commands.fmt import fmt


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def module_dir(tmp_path):
    (tmp_path / "go.mod").write_text("module example.com/game\n")
    (tmp_path / "gox.mod").write_text("// game\nxgo 1.2\n\nproject .gmx Game github.com/goplus/spx\n")
    return tmp_path


class TestFmtCommand:
    def test_up_to_date(self, runner, module_dir):
        result = runner.invoke(fmt, ["-p", str(module_dir)])

        assert result.exit_code == 0
        assert "up to date" in result.output

    def test_set_version_and_import(self, runner, module_dir):
        result = runner.invoke(
            fmt, ["-p", str(module_dir), "--xgo", "1.5", "--import", "github.com/goplus/yap"]
        )

        assert result.exit_code == 0
        assert (module_dir / "gox.mod").read_text() == (
            "// game\nxgo 1.5\n\nproject .gmx Game github.com/goplus/spx\nregister github.com/goplus/yap\n"
        )

    def test_check_does_not_write(self, runner, module_dir):
        before = (module_dir / "gox.mod").read_text()

        result = runner.invoke(fmt, ["-p", str(module_dir), "--check", "--xgo", "1.5"])

        assert result.exit_code == 1
        assert "would change" in result.output
        assert (module_dir / "gox.mod").read_text() == before

    def test_creates_manifest(self, runner, tmp_path):
        (tmp_path / "go.mod").write_text("module example.com/game\n")

        result = runner.invoke(fmt, ["-p", str(tmp_path), "--xgo", "1.5"])

        assert result.exit_code == 0
        assert (tmp_path / "gox.mod").read_text() == "xgo 1.5\n"

    def test_invalid_version(self, runner, module_dir):
        result = runner.invoke(fmt, ["-p", str(module_dir), "--xgo", "1.x"])

        assert result.exit_code == 1
        assert "invalid language version string" in result.output

    def test_invalid_utf8_manifest(self, runner, module_dir):
        (module_dir / "gox.mod").write_bytes(b"xgo 1.5\nproject .gmx Game pk\xffA\n")

        result = runner.invoke(fmt, ["-p", str(module_dir)])

        assert result.exit_code == 1
        assert "gox.mod:2:21: invalid UTF-8 encoding" in result.output
