"""
Mod-file Syntax Tree.

Tokenizer, statement tree and formatter for the line-oriented `.mod` file
syntax shared by `go.mod` and `gox.mod`:

    verb arg arg ...          // a Line
    verb (                    // a LineBlock
        arg arg ...
    )

Tokens are separated by whitespace; `( ) [ ] { } ,` are punctuation; `"..."`
and backquoted strings are single tokens; `//` starts a comment that runs to
the end of the line.

The tree is lossless. Every statement keeps the exact source text around
and between its tokens, so formatting an unmodified tree reproduces the
input byte for byte. Statements that were edited or added are rendered
from their tokens, with each token written the way it is stored.

Syntax errors do not stop the scan: the offending line is skipped and the
error recorded, so one pass reports every malformed line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from ..core.errors import ManifestSyntaxError

# =============================================================================
# Quoting
# =============================================================================

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}

_QUOTE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}

_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")


def unquote(s: str) -> str:
    """
    Interpret a double-quoted or backquoted string literal with Go rules.

    Raises:
        ValueError: "invalid syntax" for malformed literals or escapes.
    """
    if len(s) < 2 or s[0] != s[-1] or s[0] not in "\"`":
        raise ValueError("invalid syntax")
    body = s[1:-1]
    if s[0] == "`":
        if "`" in body:
            raise ValueError("invalid syntax")
        return body.replace("\r", "")

    out: List[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c in "\"\n":
            raise ValueError("invalid syntax")
        if c != "\\":
            out.append(c)
            i += 1
            continue
        i += 1
        if i >= len(body):
            raise ValueError("invalid syntax")
        e = body[i]
        if e in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[e])
            i += 1
        elif e in "xuU":
            width = {"x": 2, "u": 4, "U": 8}[e]
            digits = body[i + 1 : i + 1 + width]
            if len(digits) != width or not _HEX_DIGITS.match(digits):
                raise ValueError("invalid syntax")
            value = int(digits, 16)
            if e != "x" and (value > 0x10FFFF or 0xD800 <= value <= 0xDFFF):
                raise ValueError("invalid syntax")
            out.append(chr(value))
            i += 1 + width
        elif e in "01234567":
            digits = body[i : i + 3]
            if len(digits) != 3 or any(d not in "01234567" for d in digits):
                raise ValueError("invalid syntax")
            value = int(digits, 8)
            if value > 255:
                raise ValueError("invalid syntax")
            out.append(chr(value))
            i += 3
        else:
            raise ValueError("invalid syntax")
    return "".join(out)


def go_quote(s: str) -> str:
    """Quote `s` as a Go double-quoted string literal."""
    out = ['"']
    for c in s:
        if c in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[c])
        elif c.isprintable():
            out.append(c)
        elif ord(c) < 0x80:
            out.append(f"\\x{ord(c):02x}")
        elif ord(c) <= 0xFFFF:
            out.append(f"\\u{ord(c):04x}")
        else:
            out.append(f"\\U{ord(c):08x}")
    out.append('"')
    return "".join(out)


def must_quote(s: str) -> bool:
    """Report whether `s` must be quoted to appear as a single token."""
    for c in s:
        if c in " \"'`":
            return True
        if c in "()[]{},":
            if len(s) > 1:
                return True
        elif not c.isprintable():
            return True
    return s == "" or "//" in s or "/*" in s


def auto_quote(s: str) -> str:
    """Return `s`, quoted only when it could not be read back as one token."""
    return go_quote(s) if must_quote(s) else s


# =============================================================================
# Tree
# =============================================================================


@dataclass
class Position:
    """A 1-based line/column position (columns count characters)."""

    line: int
    col: int = 1


@dataclass
class Comment:
    """A `//` comment; `suffix` marks an end-of-line comment."""

    token: str
    suffix: bool = False

    @property
    def text(self) -> str:
        """The comment body without the leading `//` and spaces."""
        return self.token[2:].lstrip(" \t")


@dataclass
class Line:
    """
    A single statement, either top level or inside a LineBlock.

    For a line inside a block, `tokens` excludes the block's verb.

    Attributes:
        tokens: Tokens as written (quoted tokens keep their quotes).
        start: Position of the first token.
        before: Whole-line comments directly above the statement.
        suffix: End-of-line comment, if any.
        in_block: True for lines inside a LineBlock.
        lead: Source text before the first token (blank lines,
            comments, indentation).
        text: Source text from the first to the last token.
        trail: Source text after the last token, through the newline.
        dirty: True once tokens were changed or the line is new.
    """

    tokens: List[str]
    start: Position = field(default_factory=lambda: Position(0))
    before: List[Comment] = field(default_factory=list)
    suffix: List[Comment] = field(default_factory=list)
    in_block: bool = False
    lead: str = ""
    text: str = ""
    trail: str = "\n"
    dirty: bool = False

    @property
    def verb(self) -> str:
        return self.tokens[0] if self.tokens else ""

    def set_tokens(self, tokens: Sequence[str]) -> None:
        """Replace the tokens; the line is re-rendered when formatted."""
        self.tokens = list(tokens)
        self.dirty = True

    def add_suffix_comment(self, token: str) -> None:
        """Append an end-of-line comment such as `//xgo:class`."""
        self.suffix.append(Comment(token, suffix=True))
        if self.trail.endswith("\n"):
            self.trail = self.trail[:-1] + " " + token + "\n"
        else:
            self.trail = self.trail + " " + token

    def render(self) -> str:
        if not self.dirty:
            return self.lead + self.text + self.trail
        return self.lead + " ".join(self.tokens) + self.trail


@dataclass
class LineBlock:
    """
    A parenthesized group of lines sharing the verb tokens in `tokens`.

    `lead`, `text` and `trail` cover the opening line up to and after the
    `(`; `rparen_lead` and `rparen_trail` surround the closing `)`.
    """

    tokens: List[str]
    lines: List[Line] = field(default_factory=list)
    start: Position = field(default_factory=lambda: Position(0))
    before: List[Comment] = field(default_factory=list)
    lead: str = ""
    text: str = ""
    trail: str = "\n"
    rparen_lead: str = ""
    rparen_trail: str = "\n"

    @property
    def verb(self) -> str:
        return self.tokens[0] if self.tokens else ""

    def add_line(self, tokens: Sequence[str]) -> Line:
        """Append a new line (tokens exclude the verb) to the block."""
        line = Line(
            tokens=list(tokens),
            start=Position(0),
            in_block=True,
            lead="\t",
            trail="\n",
            dirty=True,
        )
        self.lines.append(line)
        return line

    def render(self) -> str:
        parts = [self.lead, self.text, self.trail]
        for line in self.lines:
            parts.append(_with_newline(parts, line.render()))
        parts.append(self.rparen_lead)
        parts.append(")")
        parts.append(self.rparen_trail)
        return "".join(parts)


Stmt = Union[Line, LineBlock]


@dataclass
class FileSyntax:
    """
    The statement tree of one mod file.

    Attributes:
        name: File name used in positions and errors.
        stmts: Top-level statements in source order.
        trailer: Source text after the last statement.
    """

    name: str = ""
    stmts: List[Stmt] = field(default_factory=list)
    trailer: str = ""

    def new_line(self, tokens: Sequence[str], index: Optional[int] = None) -> Line:
        """Insert a new top-level line at `index` (default: the end)."""
        line = Line(tokens=list(tokens), lead="", trail="\n", dirty=True)
        if index is None:
            self.stmts.append(line)
        else:
            self.stmts.insert(index, line)
        return line

    def iter_lines(self):
        """Yield (verb, line, args) for every line, flattening blocks."""
        for stmt in self.stmts:
            if isinstance(stmt, Line):
                yield stmt.verb, stmt, stmt.tokens[1:]
            else:
                for line in stmt.lines:
                    yield stmt.verb, line, line.tokens


def _with_newline(parts: List[str], text: str) -> str:
    """Make sure `text` starts on a fresh line given what precedes it."""
    for prev in reversed(parts):
        if prev:
            if not prev.endswith("\n") and not text.startswith("\n"):
                return "\n" + text
            break
    return text


def format_syntax(fs: FileSyntax) -> bytes:
    """Serialize a statement tree back to mod-file bytes."""
    parts: List[str] = []
    for stmt in fs.stmts:
        parts.append(_with_newline(parts, stmt.render()))
    parts.append(fs.trailer)
    return "".join(parts).encode("utf-8")


# =============================================================================
# Tokenizer
# =============================================================================


@dataclass
class _Token:
    text: str
    col: int
    begin: int
    end: int


_NOT_IDENT = set(" ()[]{},")


def _is_ident(c: str) -> bool:
    return c not in _NOT_IDENT and not c.isspace() and c.isprintable()


def _scan_line(
    raw: str, lineno: int, filename: str
) -> Tuple[List[_Token], Optional[Comment], Optional[ManifestSyntaxError]]:
    """Split one physical line into tokens and an optional trailing comment."""
    tokens: List[_Token] = []
    body = raw[:-1] if raw.endswith("\n") else raw
    n = len(body)
    i = 0

    def fail(at: int, message: str) -> ManifestSyntaxError:
        return ManifestSyntaxError(filename, lineno, at + 1, message)

    while i < n:
        c = body[i]
        if c.isspace():
            i += 1
            continue
        if body.startswith("//", i):
            return tokens, Comment(body[i:].rstrip("\r")), None
        if body.startswith("/*", i):
            return tokens, None, fail(i, "mod files must use // comments (not /* */ comments)")
        if c in "()[]{},":
            tokens.append(_Token(c, i + 1, i, i + 1))
            i += 1
            continue
        if c in "\"`":
            j = i + 1
            while True:
                if j >= n:
                    if raw.endswith("\n"):
                        return tokens, None, fail(n, "unexpected newline in string")
                    return tokens, None, fail(i, "unexpected EOF in string")
                d = body[j]
                j += 1
                if d == c:
                    break
                if d == "\\" and c != "`" and j < n:
                    j += 1
            tokens.append(_Token(body[i:j], i + 1, i, j))
            i = j
            continue
        if not _is_ident(c):
            return tokens, None, fail(i, f"unexpected input character {c!r}")
        j = i
        while j < n and _is_ident(body[j]):
            if body.startswith("//", j):
                break
            if body.startswith("/*", j):
                return tokens, None, fail(j, "mod files must use // comments (not /* */ comments)")
            j += 1
        tokens.append(_Token(body[i:j], i + 1, i, j))
        i = j
    return tokens, None, None


# Only "\n" ends a line; every other character belongs to the line it is on
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+\Z")


def _decode_error(filename: str, data: bytes, e: UnicodeDecodeError) -> ManifestSyntaxError:
    line_start = data.rfind(b"\n", 0, e.start) + 1
    lineno = data.count(b"\n", 0, e.start) + 1
    col = len(data[line_start : e.start].decode("utf-8", errors="replace")) + 1
    return ManifestSyntaxError(filename, lineno, col, "invalid UTF-8 encoding")


def parse_syntax(
    filename: str, data: Union[bytes, str]
) -> Tuple[FileSyntax, List[ManifestSyntaxError]]:
    """
    Tokenize `data` into a statement tree.

    Returns:
        The tree and the list of syntax errors (empty on success). Lines
        with errors are left out of the tree.
    """
    fs = FileSyntax(name=filename)
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            return fs, [_decode_error(filename, data, e)]
    else:
        text = data
    errors: List[ManifestSyntaxError] = []

    pending = ""
    comments: List[Comment] = []
    block: Optional[LineBlock] = None

    for lineno, raw in enumerate(_LINE_RE.findall(text), start=1):
        tokens, comment, err = _scan_line(raw, lineno, filename)
        if err is not None:
            errors.append(err)
            pending += raw
            continue
        if not tokens:
            pending += raw
            if comment is not None:
                comments.append(comment)
            else:
                comments = []
            continue

        first, last = tokens[0], tokens[-1]
        lead = pending + raw[: first.begin]
        span = raw[first.begin : last.end]
        trail = raw[last.end :]
        words = [t.text for t in tokens]
        start = Position(lineno, first.col)
        suffix = [Comment(comment.token, suffix=True)] if comment else []
        before, pending, comments = comments, "", []

        if block is not None:
            if words == [")"]:
                block.rparen_lead = lead
                block.rparen_trail = trail
                fs.stmts.append(block)
                block = None
                continue
            paren = next((t for t in tokens if t.text in ("(", ")")), None)
            if paren is not None:
                errors.append(ManifestSyntaxError(filename, lineno, paren.col, f"unexpected {paren.text!r}"))
                continue
            block.lines.append(
                Line(words, start, before, suffix, True, lead, span, trail)
            )
            continue

        parens = [k for k, t in enumerate(tokens) if t.text in ("(", ")")]
        if parens and parens[0] == len(tokens) - 1 and words[-1] == "(" and len(tokens) > 1:
            block = LineBlock(
                tokens=words[:-1],
                start=start,
                before=before,
                lead=lead,
                text=span,
                trail=trail,
            )
            continue
        if (
            len(parens) == 2
            and parens == [len(tokens) - 2, len(tokens) - 1]
            and words[-2:] == ["(", ")"]
            and len(tokens) > 2
        ):
            lparen, rparen = tokens[-2], tokens[-1]
            fs.stmts.append(
                LineBlock(
                    tokens=words[:-2],
                    start=start,
                    before=before,
                    lead=lead,
                    text=raw[first.begin : lparen.end],
                    trail=raw[lparen.end : rparen.begin],
                    rparen_lead="",
                    rparen_trail=trail,
                )
            )
            continue
        if parens:
            bad = tokens[parens[0]]
            errors.append(ManifestSyntaxError(filename, lineno, bad.col, f"unexpected {bad.text!r}"))
            continue
        fs.stmts.append(Line(words, start, before, suffix, False, lead, span, trail))

    if block is not None:
        lineno = text.count("\n") + 1
        errors.append(ManifestSyntaxError(filename, lineno, 1, "unexpected EOF: missing ')'"))
    fs.trailer = pending
    return fs, errors
