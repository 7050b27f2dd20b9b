"""
Nested List Lexer (Tokenizer)
=============================

This module implements the lexer for the nested name list language.
It converts input text into a lazy stream of tokens for the parsers.

Token Categories
----------------
| Kind    | Text    | Notes                              |
|---------|---------|------------------------------------|
| LBRACK  | [       |                                    |
| RBRACK  | ]       |                                    |
| COMMA   | ,       |                                    |
| EQUALS  | =       |                                    |
| NAME    | abc     | longest run of ASCII letters       |
| EOF     | (empty) | repeated forever once input is out |

Space, tab, carriage return and newline separate tokens and are discarded.
Any other character is a LexicalError.

The input is handled as a sequence of Unicode code points, so positions
and columns count characters, never bytes.

Example Usage
-------------
>>> from nestlist.lexer import Lexer
>>> lexer = Lexer("[a, [b]]")
>>> for token in lexer.tokenize():
...     print(token)
Token(LBRACK, '[', 1:1)
Token(NAME, 'a', 1:2)
Token(COMMA, ',', 1:3)
Token(LBRACK, '[', 1:5)
Token(NAME, 'b', 1:6)
Token(RBRACK, ']', 1:7)
Token(RBRACK, ']', 1:8)
Token(EOF, 1:9)
"""

import logging
import string
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional

from nestlist.errors import LexicalError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Token kinds for the nested name list language.

    INVALID is never produced by the lexer. It exists as a guard value
    for code that needs a kind no real token can have.
    """

    EOF = auto()        # End of input
    LBRACK = auto()     # [
    RBRACK = auto()     # ]
    NAME = auto()       # [a-zA-Z]+
    COMMA = auto()      # ,
    EQUALS = auto()     # =
    INVALID = auto()


# Single character tokens
PUNCTUATION: dict[str, TokenKind] = {
    "[": TokenKind.LBRACK,
    "]": TokenKind.RBRACK,
    ",": TokenKind.COMMA,
    "=": TokenKind.EQUALS,
}

WHITESPACE = " \t\n\r"

# Only ASCII letters, string.ascii_letters rather than str.isalpha
LETTERS = string.ascii_letters


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of the input.

    Two tokens are equal when their kind and text are equal; the position
    fields are diagnostic metadata and take no part in comparisons.

    Attributes:
        kind: The TokenKind classification
        text: The matched text (empty only for EOF)
        line: Line number in the input (1-indexed)
        column: Column number in code points (1-indexed)
        offset: Code point offset of the first character (0-indexed)
        filename: Name of the input, for error reporting
    """
    kind: TokenKind
    text: str
    line: int = field(default=1, compare=False)
    column: int = field(default=1, compare=False)
    offset: int = field(default=0, compare=False)
    filename: str = field(default="<input>", compare=False)

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.text:
            return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def describe(self) -> str:
        """Short human description used in error messages."""
        if self.kind is TokenKind.EOF:
            return "end of input"
        return f"{self.kind.name} {self.text!r}"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes nested name list input one token at a time.

    The lexer is pull-based: each call to next_token() scans just far
    enough to produce one token. Once the input is exhausted every further
    call returns an EOF token. A LexicalError is kept in `error` and raised
    again by every later call, so a rejected input never looks complete.

    Usage:
        lexer = Lexer(text)
        while lexer.has_more():
            token = lexer.next_token()

    Attributes:
        source: The input being tokenized
        filename: Name of the input (for error reporting)
        error: The LexicalError that stopped the lexer, or None
    """

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with input text.

        Args:
            source: The text to tokenize
            filename: Name of the input (for error messages)
        """
        self.source = source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

        # Set once EOF has been produced or a character was rejected
        self._stopped = False
        self.error: Optional[LexicalError] = None

        # Tokens produced so far, not counting EOF
        self.token_count = 0

    def has_more(self) -> bool:
        """
        Return True until the lexer has produced EOF or failed.

        Polling this is optional: next_token() behaves the same either way.
        """
        return not self._stopped

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Returns:
            The next Token, or an EOF token once the input is exhausted

        Raises:
            LexicalError: If a character outside the token alphabet is found,
                or was found by an earlier call
        """
        if self.error is not None:
            raise self.error
        if self._stopped:
            return self._make_token(TokenKind.EOF, "", self._line, self._column, self._pos)

        while not self._at_end():
            char = self._peek()

            if char in WHITESPACE:
                self._advance()
                continue

            start_line, start_column, start_pos = self._line, self._column, self._pos

            if char in PUNCTUATION:
                self._advance()
                return self._make_token(PUNCTUATION[char], char, start_line, start_column, start_pos)

            if char in LETTERS:
                return self._scan_name(start_line, start_column, start_pos)

            self._stopped = True
            self.error = LexicalError(
                char,
                SourceLocation(self.filename, start_line, start_column),
                self._get_current_line(),
            )
            raise self.error

        self._stopped = True
        return self._make_token(TokenKind.EOF, "", self._line, self._column, self._pos)

    def tokenize(self) -> Iterator[Token]:
        """
        Generate every remaining token, ending with a single EOF token.

        Raises:
            LexicalError: If invalid input is encountered
        """
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Current character, or empty string past the end of source."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        """
        Consume and return the current character, advancing position.

        Updates line and column tracking for error reporting.
        """
        if self._at_end():
            return ""
        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_name(self, start_line: int, start_column: int, start_pos: int) -> Token:
        """Scan the longest run of ASCII letters."""
        chars = []
        while self._peek() and self._peek() in LETTERS:
            chars.append(self._advance())

        return self._make_token(TokenKind.NAME, "".join(chars), start_line, start_column, start_pos)

    def _make_token(
        self,
        kind: TokenKind,
        text: str,
        line: int,
        column: int,
        offset: int,
    ) -> Token:
        token = Token(
            kind=kind,
            text=text,
            line=line,
            column=column,
            offset=offset,
            filename=self.filename,
        )
        if kind is not TokenKind.EOF:
            self.token_count += 1
        logger.debug(f"lexed {token!r}")
        return token

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]

    def source_line(self, line: int) -> Optional[str]:
        """Return the text of a 1-indexed input line, or None if out of range."""
        lines = self.source.split("\n")
        if 0 < line <= len(lines):
            return lines[line - 1]
        return None


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize a whole input string.

    Args:
        source: The text to tokenize
        filename: Name of the input (for error messages)

    Returns:
        All tokens, ending with exactly one EOF token

    Raises:
        LexicalError: If invalid input is encountered
    """
    return list(Lexer(source, filename).tokenize())
