"""Query tokenizer.

Splits raw query text into one token per clause. Tokens break on ASCII
whitespace, except inside double-quoted spans and ``/regex/`` spans.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ..exceptions import ParseErrorKind, QueryParseError
from .models import match_operator

WHITESPACE = " \t\n\r\x0b\x0c"
QUOTE = '"'
REGEX_DELIMITER = "/"
ESCAPE = "\\"


@dataclass(frozen=True, slots=True)
class Token:
    """A raw clause token and its offset in the query text."""

    text: str
    position: int


def skip_quoted(text: str, start: int) -> int:
    """Return the index just past the quoted span opening at ``text[start]``."""
    assert text[start] == QUOTE
    pos = start + 1
    while pos < len(text):
        ch = text[pos]
        if ch == ESCAPE:
            pos += 2
        elif ch == QUOTE:
            return pos + 1
        else:
            pos += 1
    raise QueryParseError(
        ParseErrorKind.UNTERMINATED_LITERAL,
        f"Unterminated quoted string starting at position {start}",
        token=text[start:],
        position=start,
    )


def skip_regex(text: str, start: int) -> int:
    """Return the index just past the ``/.../`` span opening at ``text[start]``."""
    assert text[start] == REGEX_DELIMITER
    pos = start + 1
    while pos < len(text):
        ch = text[pos]
        if ch == ESCAPE:
            pos += 2
        elif ch == REGEX_DELIMITER:
            return pos + 1
        else:
            pos += 1
    raise QueryParseError(
        ParseErrorKind.UNTERMINATED_LITERAL,
        f"Unterminated regular expression starting at position {start}",
        token=text[start:],
        position=start,
    )


class _Tokenizer:
    """Single-pass tokenizer over one query string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    def _read_token(self) -> Token:
        start = self.pos
        # A regex span may only open where a value starts: at the start of the
        # token or right after the first operator. "D/D/D" stays a plain word.
        at_value_start = True
        seen_operator = False

        while self.pos < self.length:
            ch = self.text[self.pos]
            if ch in WHITESPACE:
                break
            if ch == QUOTE:
                self.pos = skip_quoted(self.text, self.pos)
                at_value_start = False
            elif ch == REGEX_DELIMITER and at_value_start:
                self.pos = skip_regex(self.text, self.pos)
                at_value_start = False
            else:
                lexeme = None
                if not seen_operator or at_value_start:
                    lexeme = match_operator(self.text, self.pos)
                if lexeme:
                    self.pos += len(lexeme)
                    seen_operator = True
                    at_value_start = True
                else:
                    self.pos += 1
                    at_value_start = False

        return Token(self.text[start : self.pos], start)

    def __iter__(self) -> Iterator[Token]:
        while True:
            self._skip_whitespace()
            if self.pos >= self.length:
                return
            yield self._read_token()


def tokenize(text: str) -> Iterator[Token]:
    """Lazily split ``text`` into clause tokens.

    Raises:
        QueryParseError: UNTERMINATED_LITERAL for an unclosed quote or regex
    """
    return iter(_Tokenizer(text))
