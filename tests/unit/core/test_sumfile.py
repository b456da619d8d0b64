"""Unit tests for go.sum handling."""

from xgomod.core.sumfile import SumFile


class TestSumFile:
    def test_missing_file_is_empty(self, tmp_path):
        sumf = SumFile.load(tmp_path / "go.sum")
        assert sumf.lines == []
        assert sumf.lookup("a.com/x") == []

    def test_lookup(self, tmp_path):
        path = tmp_path / "go.sum"
        path.write_text(
            "a.com/x v1.0.0 h1:abc=\n"
            "a.com/x v1.0.0/go.mod h1:def=\n"
            "a.com/xy v1.0.0 h1:ghi=\n"
        )
        sumf = SumFile.load(path)
        assert sumf.lookup("a.com/x") == ["a.com/x v1.0.0 h1:abc=", "a.com/x v1.0.0/go.mod h1:def="]

    def test_add_sorts_and_saves(self, tmp_path):
        path = tmp_path / "go.sum"
        path.write_text("b.com/y v1 h1:b=\n")
        sumf = SumFile.load(path)
        sumf.add(["a.com/x v1 h1:a="])
        sumf.save()

        assert path.read_text() == "a.com/x v1 h1:a=\nb.com/y v1 h1:b=\n"
