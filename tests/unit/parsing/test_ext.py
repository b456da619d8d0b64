"""Unit tests for ext tokens, symbols and package paths."""

import pytest

from xgomod.core.errors import InvalidExtError, InvalidSymbolError, ValidationError
from xgomod.parsing.ext import (
    check_module_path,
    class_ext,
    get_ext,
    is_ext,
    parse_ext,
    parse_pkg_path,
    parse_string,
    parse_symbol,
    split_fname,
)


class TestExtTokens:
    @pytest.mark.parametrize(
        "token, is_proj, expected",
        [
            (".spx", False, True),
            ("_yap.gox", False, True),
            ("*.spx", False, True),
            ("main.spx", True, True),
            ("main_spx.gox", True, True),
            ("main.spx", False, False),
            (".", False, False),
            ("main", True, False),
            ("math", True, False),
        ],
    )
    def test_is_ext(self, token, is_proj, expected):
        assert is_ext(token, is_proj) is expected

    def test_get_ext(self):
        assert get_ext("*.spx") == ".spx"
        assert get_ext("main_spx.gox") == "_spx.gox"
        assert get_ext(".gmx") == ".gmx"

    def test_get_ext_keeps_bare_markers(self):
        assert get_ext("main") == "main"
        assert get_ext("*") == "*"

    def test_parse_ext(self):
        assert parse_ext("*.spx", False) == (".spx", "*.spx")
        assert parse_ext('"_yap.gox"', False) == ("_yap.gox", "_yap.gox")

    def test_parse_ext_invalid_format(self):
        with pytest.raises(InvalidExtError) as exc:
            parse_ext(".", False)
        assert str(exc.value) == "ext . invalid: invalid ext format"

    def test_parse_ext_quote_in_token(self):
        with pytest.raises(InvalidExtError) as exc:
            parse_ext('."spx', False)
        assert str(exc.value) == 'ext ."spx invalid: unquoted string cannot contain quote'


class TestSymbols:
    @pytest.mark.parametrize("sym", ["Game", "*Sprite2", "App_1"])
    def test_valid(self, sym):
        assert parse_symbol(sym) == sym

    @pytest.mark.parametrize("sym", ["game", ".", "*", "_Game", "Ga-me"])
    def test_invalid(self, sym):
        with pytest.raises(InvalidSymbolError) as exc:
            parse_symbol(sym)
        assert str(exc.value) == f"symbol {sym} invalid: invalid Go export symbol format"


class TestStringsAndPaths:
    def test_parse_string(self):
        assert parse_string("math") == "math"
        assert parse_string('"my pkg"') == "my pkg"
        with pytest.raises(ValidationError, match="unquoted string cannot contain quote"):
            parse_string("a'b")

    def test_parse_pkg_path(self):
        assert parse_pkg_path("github.com/goplus/spx") == "github.com/goplus/spx"
        with pytest.raises(ValidationError) as exc:
            parse_pkg_path(".")
        assert str(exc.value) == '"." is not a valid package path'
        with pytest.raises(ValidationError) as exc:
            parse_pkg_path('"\\?"')
        assert str(exc.value) == "invalid quoted string: invalid syntax"

    @pytest.mark.parametrize("path", ["github.com/goplus/yap", "example.com/a-b/c_d~e"])
    def test_check_module_path_valid(self, path):
        check_module_path(path)

    @pytest.mark.parametrize(
        "path, reason",
        [
            ("", "empty string"),
            ("math", "missing dot in first path element"),
            ("/github.com/x", "leading or trailing slash or dash"),
            ("github.com//x", "double slash"),
            ("github.com/.x", "leading or trailing dot"),
            ("github.com/a b", "invalid char"),
        ],
    )
    def test_check_module_path_invalid(self, path, reason):
        with pytest.raises(ValidationError, match=reason):
            check_module_path(path)


class TestFileNames:
    @pytest.mark.parametrize(
        "fname, expected",
        [
            ("foo.spx", ("foo", ".spx")),
            ("foo_yap.gox", ("foo", "_yap.gox")),
            ("main_spx.gox", ("main", "_spx.gox")),
            ("foo.gox", ("foo", ".gox")),
            ("_yap.gox", ("_yap", ".gox")),
            ("Makefile", ("Makefile", "")),
            ("a.b/foo", ("a.b/foo", "")),
        ],
    )
    def test_split_fname(self, fname, expected):
        assert split_fname(fname) == expected

    def test_class_ext(self):
        assert class_ext("hero.spx") == ".spx"
        assert class_ext("get_p_#id_yap.gox") == "_yap.gox"
