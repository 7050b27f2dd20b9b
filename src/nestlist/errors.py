"""
Nestlist Error Hierarchy
========================

This module defines the exception hierarchy for the nestlist recognizers.
All exceptions inherit from NestListError, allowing callers to catch all
recognizer errors with a single except clause if desired.

Exception Hierarchy
-------------------
NestListError (base)
└── RecognitionError (input could not be recognized)
    ├── LexicalError - character outside every token's alphabet
    └── ListSyntaxError - token of unexpected kind at a decision point
        ├── NestingDepthError - lists nested past the parser's limit
        └── NoViableAlternativeError - every ordered alternative failed

The set is closed: a failed recognition is always either a LexicalError or
a ListSyntaxError. Errors are built at the failure site and carry their
details as plain attributes (the offending character, or the expected
kinds and the token actually found), so callers never need to parse the
message text.

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from nestlist.lexer import Token, TokenKind


# =============================================================================
# Base Exception Class
# =============================================================================

class NestListError(Exception):
    """
    Base exception for all nestlist errors.

        try:
            parser.parse_statement()
        except NestListError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in the input for error reporting.

    Attributes:
        filename: Name of the source (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number in code points (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Recognition Errors
# =============================================================================

class RecognitionError(NestListError):
    """
    Base exception for input that cannot be recognized.

    Attributes:
        message: The error description
        location: Where in the input the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The input line containing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            <input>:1:5: error: expected NAME or LBRACK, found RBRACK ']'
                [a, ]
                    ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(RecognitionError):
    """
    Input character does not belong to any token's alphabet.

    Always fatal to the current parse attempt: the character stream itself
    is at fault, so no other grammar alternative could succeed.
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character {char!r} (U+{ord(char):04X})",
            location=location,
            hint="names may only contain the letters a-z and A-Z",
            source_line=source_line,
        )


class ListSyntaxError(RecognitionError):
    """
    A token of unexpected kind appeared at a decision point.

    Attributes:
        expected: The token kinds that would have been accepted
        found: The token actually present
    """

    def __init__(
        self,
        expected: "tuple[TokenKind, ...]",
        found: "Token",
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.expected = tuple(expected)
        self.found = found
        super().__init__(
            message or f"expected {describe_kinds(self.expected)}, found {found.describe()}",
            location=found.location,
            hint=hint,
            source_line=source_line,
        )


class NestingDepthError(ListSyntaxError):
    """
    A list opened deeper than the parser's nesting limit.

    Reported at the '[' that would have exceeded `limit`.
    """

    def __init__(
        self,
        found: "Token",
        limit: int,
        source_line: Optional[str] = None,
    ):
        self.limit = limit
        super().__init__(
            (),
            found,
            hint=f"the parser accepts at most {limit} levels of nested lists",
            source_line=source_line,
            message=f"list nested deeper than {limit} levels",
        )


class NoViableAlternativeError(ListSyntaxError):
    """
    No alternative of an ordered choice recognized the input.

    Raised by the backtracking parser once every statement alternative has
    been tried. `found` is the lookahead token at the decision point, and
    `failures` holds the failure of each attempted alternative in order.
    """

    def __init__(
        self,
        expected: "tuple[TokenKind, ...]",
        found: "Token",
        failures: Optional[list[ListSyntaxError]] = None,
        source_line: Optional[str] = None,
    ):
        self.failures = failures or []

        hint = None
        if self.failures:
            # Report the failure that got furthest into the input
            deepest = max(self.failures, key=lambda f: f.found.offset)
            hint = f"closest alternative failed at {deepest.location}: {deepest.message}"

        super().__init__(
            expected,
            found,
            hint=hint,
            source_line=source_line,
            message=f"no viable alternative for statement at {found.describe()}",
        )


def describe_kinds(kinds: "tuple[TokenKind, ...]") -> str:
    """Join token kind names for an error message: 'A', 'A or B', 'A, B or C'."""
    names = [kind.name for kind in kinds]
    if not names:
        return "nothing"
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} or {names[-1]}"
