"""
Split a SQL script into individual statements **safely**: aware of quoted
literals, backslash escapes, block and line comments and of the
``DELIMITER`` directive understood by the ``mysql`` command‑line client.

The scanner is a lexical splitter, not a validator: malformed SQL is passed
through untouched and left for the server to reject.  The only hard error is
a ``DELIMITER`` directive that cannot be read (see :class:`DelimiterError`).
"""
from __future__ import annotations

import re

from sqlrunner.errors import DelimiterError

DEFAULT_DELIMITER = ";"

_QUOTES = ("'", '"', "`")
_LINE_BREAKS = ("\r", "\n")
_LINE_COMMENTS = ("-- ", "# ")
_DIRECTIVE = "delimiter"
_BOM = "\ufeff"
_LINE_BREAK_RE = re.compile(r"[\r\n]")


class ScanState:
    """Transient lexical state of one :func:`scan` call."""

    def __init__(self) -> None:
        self.quote: str | None = None       # active quote character
        self.comment_depth: int = 0         # nested /* ... */ blocks

    @property
    def in_string(self) -> bool:
        return self.quote is not None

    @property
    def suppressed(self) -> bool:
        """Delimiters, directives and line comments are not recognised."""
        return self.in_string or self.comment_depth > 0


class _Cursor:
    """Forward‑only position in the script that knows where its line starts."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self.line_start = 0

    @property
    def done(self) -> bool:
        return self.pos >= len(self.text)

    @property
    def char(self) -> str:
        return self.text[self.pos]

    def startswith(self, token: str) -> bool:
        return self.text.startswith(token, self.pos)

    def at_line_start(self) -> bool:
        """Only blanks precede the cursor on the current line."""
        return not self.text[self.line_start:self.pos].strip()

    def take(self, n: int = 1) -> str:
        """Consume *n* characters (fewer at end of input) and return them."""
        chunk = self.text[self.pos:self.pos + n]
        for i in range(self.pos, self.pos + len(chunk)):
            ch = self.text[i]
            # "\r\n" counts once, on its "\n"
            if ch == "\n" or (ch == "\r" and not self.text.startswith("\n", i + 1)):
                self.line += 1
                self.line_start = i + 1
        self.pos += len(chunk)
        return chunk

    def find_line_break(self) -> int:
        """Offset of the next line break, or ``-1`` when the script ends first."""
        m = _LINE_BREAK_RE.search(self.text, self.pos)
        return m.start() if m else -1

    def skip_to_line_break(self) -> None:
        end = self.find_line_break()
        self.take((len(self.text) if end < 0 else end) - self.pos)

    def take_line(self) -> str | None:
        """
        Consume the rest of the current line **including** its line break and
        return the text before the break.  ``None`` (nothing consumed) when no
        line break follows.
        """
        end = self.find_line_break()
        if end < 0:
            return None
        rest = self.take(end - self.pos)
        self.take(2 if self.startswith("\r\n") else 1)
        return rest


def _at_directive(cur: _Cursor) -> bool:
    end = cur.pos + len(_DIRECTIVE)
    if cur.text[cur.pos:end].lower() != _DIRECTIVE or not cur.at_line_start():
        return False
    follower = cur.text[end:end + 1]
    # `DELIMITER` alone on its line is a directive without a token
    return follower in ("", " ", "\t") or follower in _LINE_BREAKS


def _read_delimiter(cur: _Cursor) -> str:
    line = cur.line
    cur.take(len(_DIRECTIVE))
    token = cur.take_line()
    if token is None:
        raise DelimiterError("DELIMITER directive is not terminated by a line break", line)
    token = token.strip()
    if not token:
        raise DelimiterError("DELIMITER directive must be followed by a delimiter", line)
    return token


def scan(script: str) -> list[str]:
    """
    Return the statements of *script* in order, without their delimiters.

    Statement text is kept verbatim (block comments included); only
    ``-- ``/``# `` line comments and ``DELIMITER`` lines are dropped.  A
    trailing statement made of whitespace only is discarded, a final
    statement without a delimiter is kept.
    """
    statements: list[str] = []
    buf: list[str] = []
    delimiter = DEFAULT_DELIMITER
    state = ScanState()
    # a byte order mark is not part of the first statement
    cur = _Cursor(script[len(_BOM):] if script.startswith(_BOM) else script)

    while not cur.done:
        if not state.suppressed and cur.startswith(delimiter):
            statements.append("".join(buf))
            buf = []
            cur.take(len(delimiter))
            continue

        ch = cur.char

        if ch == "\\":
            # the escaped character is never a quote, delimiter or marker
            buf.append(cur.take(2))
            continue

        if state.in_string:
            if ch == state.quote:
                state.quote = None
            buf.append(cur.take())
            continue

        if cur.startswith("/*"):
            state.comment_depth += 1
            buf.append(cur.take(2))
            continue

        if cur.startswith("*/"):
            state.comment_depth = max(state.comment_depth - 1, 0)
            buf.append(cur.take(2))
            continue

        if state.comment_depth:
            buf.append(cur.take())
            continue

        if _at_directive(cur):
            delimiter = _read_delimiter(cur)
            continue

        if any(cur.startswith(marker) for marker in _LINE_COMMENTS):
            cur.skip_to_line_break()
            continue

        if ch in _QUOTES:
            state.quote = ch
        buf.append(cur.take())

    tail = "".join(buf)
    if tail.strip():
        statements.append(tail)
    return statements
