"""Unit tests for the gox.mod directive parser."""

import pytest

from xgomod.core.errors import DirectiveError, ManifestParseError
from xgomod.parsing.directives import parse, parse_lax, parse_manifest

SPX_WITH_PROJECT_EXT = """
module spx

go 1.17
gop 1.1

project .gmx Game github.com/goplus/spx math
class .spx Sprite
class .spx2 *Sprite2

require (
	github.com/ajstarks/svgo v0.0.0-20210927141636-6d70534b1098
)
"""

SPX_BARE_PROJECT = """
module spx

go 1.17
gop 1.1

project github.com/goplus/spx math
class .spx Sprite

require (
	github.com/ajstarks/svgo v0.0.0-20210927141636-6d70534b1098
)
"""


class TestParseLax:
    """Lenient parsing of dependency manifests."""

    def test_project_with_ext(self):
        m = parse_lax("github.com/goplus/gop/gop.mod", SPX_WITH_PROJECT_EXT)

        assert m.version.version == "1.1"
        assert m.version.verb == "gop"
        proj = m.projects[0]
        assert proj.ext == ".gmx"
        assert proj.class_name == "Game"
        assert proj.pkg_paths == ["github.com/goplus/spx", "math"]
        assert [(w.ext, w.class_name) for w in proj.works] == [
            (".spx", "Sprite"),
            (".spx2", "*Sprite2"),
        ]

    def test_bare_project(self):
        m = parse_lax("github.com/goplus/gop/gop.mod", SPX_BARE_PROJECT)

        proj = m.projects[0]
        assert proj.ext == ""
        assert proj.class_name == ""
        assert proj.pkg_paths == ["github.com/goplus/spx", "math"]
        assert [(w.ext, w.class_name) for w in proj.works] == [(".spx", "Sprite")]

    def test_unknown_directives_are_kept_in_tree(self):
        m = parse_lax("gop.mod", SPX_WITH_PROJECT_EXT)
        assert [s.verb for s in m.syntax.stmts] == [
            "module", "go", "gop", "project", "class", "class", "require",
        ]


class TestParse:
    def test_full_manifest(self):
        data = (
            "xgo 1.5\n"
            "\n"
            "project main_yap.gox App github.com/goplus/yap\n"
            "class -embed -prefix=Get _yap.gox Handler *Proto\n"
            "import yap github.com/goplus/yap/ytest\n"
            "import math\n"
            "runner github.com/goplus/yap/cmd/yaprun v0.8.0\n"
            "\n"
            "project .gsh App github.com/qiniu/x/gsh\n"
            "register github.com/goplus/spx\n"
        )
        m = parse("gox.mod", data)

        assert m.version.version == "1.5"
        assert m.version.verb == "xgo"
        yap, gsh = m.projects
        assert (yap.ext, yap.full_ext, yap.class_name) == ("_yap.gox", "main_yap.gox", "App")
        work = yap.works[0]
        assert work.embedded is True
        assert work.prefix == "Get"
        assert work.proto == "*Proto"
        assert [(i.name, i.path) for i in yap.imports] == [
            ("yap", "github.com/goplus/yap/ytest"),
            ("", "math"),
        ]
        assert yap.pkg_paths == ["github.com/goplus/yap"]
        assert yap.runner.path == "github.com/goplus/yap/cmd/yaprun"
        assert yap.runner.version == "v0.8.0"
        assert gsh.imports == []
        assert m.class_mods == ["github.com/goplus/spx"]

    def test_end_to_end_project(self):
        m = parse("gox.mod", "xgo 1.5\nproject .gmx Game pkgA\nclass .spx Sprite\n")

        assert m.version.version == "1.5"
        assert len(m.projects) == 1
        proj = m.projects[0]
        assert (proj.ext, proj.class_name, proj.pkg_paths) == (".gmx", "Game", ["pkgA"])
        assert [(w.ext, w.class_name) for w in proj.works] == [(".spx", "Sprite")]
        assert proj.exts() == [".gmx", ".spx"]

    def test_top_level_import_is_classfile_module(self):
        m = parse("gox.mod", "import github.com/goplus/yap\nimport (\n\tgithub.com/goplus/spx\n)\n")
        assert m.class_mods == ["github.com/goplus/yap", "github.com/goplus/spx"]
        assert m.projects == []

    def test_quoted_tokens(self):
        m = parse("gox.mod", 'project .gmx "Game" "github.com/goplus/spx"\n')
        assert m.projects[0].ext == ".gmx"
        assert m.projects[0].class_name == "Game"

    def test_statement_syntax_is_linked(self):
        m = parse("gox.mod", "\nxgo 1.2\nproject math\n")
        assert m.version.syntax.start.line == 2
        assert m.projects[0].syntax.start.line == 3

    def test_empty_manifest(self):
        m = parse("gox.mod", b"")
        assert m.version is None
        assert m.projects == []
        assert m.imports == []


PARSE_ERRORS = [
    ("gop.mod:2: unknown directive: module", "\nmodule foo\n"),
    ("gop.mod:2:9: unexpected newline in string", '\nfoo "foo\n'),
    ("gop.mod:3: repeated gop statement", "\ngop 1.1\ngop 1.2\n"),
    ("gop.mod:2: gop directive expects exactly one argument", "\ngop 1.1 1.2\n"),
    ("gop.mod:2: invalid gop version '1.x': must match format 1.23", "\ngop 1.x\n"),
    ("gop.mod:2: usage: project [.projExt ProjClass] classFilePkgPath ...", "\nproject\n"),
    ("gop.mod:2: usage: project [.projExt ProjClass] classFilePkgPath ...", "\nproject .gmx Game\n"),
    ('gop.mod:2: ext ." invalid: unquoted string cannot contain quote', '\nproject ." Game math\n'),
    ('gop.mod:2: "." is not a valid package path', "\nproject . Game math\n"),
    ("gop.mod:2: symbol game invalid: invalid Go export symbol format", "\nproject .gmx game math\n"),
    ("gop.mod:2: symbol . invalid: invalid Go export symbol format", "\nproject .gmx . math\n"),
    ("gop.mod:2: invalid quoted string: invalid syntax", '\nproject .123 Game "\\?"\n'),
    ("gop.mod:2: invalid quoted string: invalid syntax", '\nproject "\\?"\n'),
    ("gop.mod:2: work class must declare after a project definition", "\nclass .spx Sprite\n"),
    (
        "gop.mod:3: usage: class [-embed -prefix=Prefix] .workExt WorkClass [WorkPrototype]",
        "\nproject github.com/goplus/spx math\nclass .spx\n",
    ),
    ("gop.mod:3: ext . invalid: invalid ext format", "\nproject github.com/goplus/spx math\nclass . Sprite\n"),
    (
        'gop.mod:3: symbol S"prite invalid: unquoted string cannot contain quote',
        '\nproject github.com/goplus/spx math\nclass .spx S"prite\n',
    ),
    (
        'gop.mod:3: ext ."spx invalid: unquoted string cannot contain quote',
        '\nproject github.com/goplus/spx math\nclass ."spx Sprite\n',
    ),
    (
        "gop.mod:3: symbol sprite invalid: invalid Go export symbol format",
        "\nproject github.com/goplus/spx math\nclass .spx sprite\n",
    ),
    ("gop.mod:3: usage: import [name] pkgPath", "\nproject github.com/goplus/spx math\nimport\n"),
    (
        "gop.mod:3: invalid quoted string: invalid syntax",
        '\nproject github.com/goplus/spx math\nimport "\\?"\n',
    ),
    ("gop.mod:3: invalid syntax", '\nproject github.com/goplus/spx math\nimport "\\?" math\n'),
    ("gop.mod:2: import must declare after a project definition", "\nimport math\n"),
    ("gop.mod:2: unknown directive: unknown", "\nunknown .spx\n"),
]


class TestParseErrors:
    @pytest.mark.parametrize("message, data", PARSE_ERRORS)
    def test_error_message(self, message, data):
        with pytest.raises(ManifestParseError) as exc:
            parse("gop.mod", data)
        assert str(exc.value) == message

    def test_errors_are_accumulated_in_line_order(self):
        data = "class .spx Sprite\nxgo 1.x\nfoo \"bar\nunknown\n"
        with pytest.raises(ManifestParseError) as exc:
            parse("gox.mod", data)

        err = exc.value
        assert len(err) == 4
        assert [e.line for e in err.errors] == [1, 2, 3, 4]
        assert str(err).splitlines()[2] == "gox.mod:3:9: unexpected newline in string"

    def test_invalid_utf8_reports_position(self):
        with pytest.raises(ManifestParseError) as exc:
            parse_manifest("gox.mod", b"xgo 1.5\nproject .gmx Game pk\xffA\n")
        assert str(exc.value) == "gox.mod:2:21: invalid UTF-8 encoding"

    def test_form_feed_in_comment_stays_in_comment(self):
        m = parse_manifest("gox.mod", b"xgo 1.5 // see\x0cnotes\nproject .gmx Game pkgA\n")
        assert m.version.version == "1.5"
        assert m.projects[0].syntax.start.line == 2

    def test_directive_error_keeps_cause(self):
        with pytest.raises(ManifestParseError) as exc:
            parse("gox.mod", "project .gmx game math\n")
        err = exc.value.errors[0]
        assert isinstance(err, DirectiveError)
        assert err.cause.sym == "game"

    def test_lax_ignores_unknown_only(self):
        m = parse_lax("gox.mod", "unknown .spx\nxgo 1.2\n")
        assert m.version.version == "1.2"
        with pytest.raises(ManifestParseError):
            parse_lax("gox.mod", "xgo 1.x\n")

    def test_repeated_runner(self):
        data = "project math\nrunner a.com/r\nrunner a.com/s\n"
        with pytest.raises(ManifestParseError, match="gox.mod:3: repeated runner statement"):
            parse_manifest("gox.mod", data)

    def test_register_expects_one_argument(self):
        with pytest.raises(ManifestParseError, match="register directive expects exactly one argument"):
            parse("gox.mod", "register a.com/x a.com/y\n")

    def test_register_rejects_malformed_module_path(self):
        with pytest.raises(ManifestParseError, match="missing dot in first path element"):
            parse("gox.mod", "register math\n")
