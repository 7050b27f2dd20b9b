"""
Nested List Recursive Descent Parsers
=====================================

This module implements the recognizers for the nested name list grammar.
Each grammar rule maps to one method that calls the methods of the rules
it references, so the call graph mirrors the grammar.

Grammar (EBNF)
--------------
statement   ::= list EOF | assign EOF
assign      ::= list '=' list
list        ::= '[' elements ']'
elements    ::= element (',' element)*
element     ::= NAME '=' NAME | NAME | list

Parsers
-------
PredictiveParser
    LL(1) or LL(k) over a LookaheadBuffer. Chooses every alternative from
    the next k tokens and never backs up. With k=1 the element rule is
    reduced to NAME | list: one token cannot tell `b=c` from `b`, so
    assignment elements are rejected. A mismatch is recorded in `error`
    and parsing carries on; only the most recent failure is kept.

BacktrackingParser
    Ordered choice over a MarkingBuffer. parse_statement() tries
    `list EOF`, and only if that fails, `assign EOF`. Each attempt runs
    under speculate(), which rewinds the buffer exactly when the attempt
    fails. Rule methods return None on success or the ListSyntaxError
    describing the mismatch, and every caller stops at the first failure.
    LexicalError is raised, not returned: a bad character is fatal
    whichever alternative is being tried.

Both parsers share ListParser, which owns token access and the nesting
limit. Every level of list nesting costs a few Python stack frames, so
lists nested deeper than `max_depth` (default MAX_NESTING_DEPTH) are
rejected with a NestingDepthError at the offending '['.

Example Usage
-------------
>>> from nestlist.lexer import Lexer
>>> from nestlist.parser import BacktrackingParser
>>> BacktrackingParser(Lexer("[a,b]=[c,d]")).parse_statement()
<Statement.ASSIGN: 'assign'>
"""

import logging
from enum import Enum
from typing import Callable, Optional

from nestlist.buffer import LookaheadBuffer, MarkingBuffer, TokenSource
from nestlist.errors import (
    LexicalError,
    ListSyntaxError,
    NestingDepthError,
    NoViableAlternativeError,
    RecognitionError,
)
from nestlist.lexer import Lexer, Token, TokenKind

logger = logging.getLogger(__name__)

# A rule routine: None when it matched, otherwise why it did not
Rule = Callable[[], Optional[ListSyntaxError]]

# Deepest list nesting either parser accepts
MAX_NESTING_DEPTH = 200


class Statement(Enum):
    """Which statement alternative recognized the input."""

    LIST = "list"
    ASSIGN = "assign"


# =============================================================================
# Shared Base
# =============================================================================

class ListParser:
    """
    Base class for the nested list recognizers.

    Subclasses set `input` to the buffer they read from and implement the
    grammar rules on top of peek() and the error helpers here.

    Attributes:
        lexer: Token producer
        max_depth: Deepest list nesting accepted
    """

    input: TokenSource

    def __init__(self, lexer: Lexer, max_depth: int = MAX_NESTING_DEPTH):
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.lexer = lexer
        self.max_depth = max_depth
        # Lists currently open
        self._depth = 0

    def peek(self, n: int = 1) -> Token:
        """Return the token n positions ahead without consuming it."""
        return self.input.peek(n)

    def _nesting_error(self) -> Optional[NestingDepthError]:
        """The error for opening one more list, or None while under the limit."""
        if self._depth < self.max_depth:
            return None
        found = self.peek(1)
        return NestingDepthError(found, self.max_depth, source_line=self.lexer.source_line(found.line))

    def _syntax_error(self, expected: tuple[TokenKind, ...], found: Token) -> ListSyntaxError:
        return ListSyntaxError(expected, found, source_line=self.lexer.source_line(found.line))


# =============================================================================
# Predictive Parser (LL(1) / LL(k))
# =============================================================================

class PredictiveParser(ListParser):
    """
    LL(k) recursive descent recognizer for `list`.

    Usage:
        parser = PredictiveParser(Lexer("[a,b=c]"), k=2)
        if not parser.parse():
            print(parser.error)

    Attributes:
        k: Lookahead depth
        error: Most recently recorded failure, or None
    """

    def __init__(self, lexer: Lexer, k: int = 1, max_depth: int = MAX_NESTING_DEPTH):
        super().__init__(lexer, max_depth)
        self.k = k
        self.input: LookaheadBuffer = LookaheadBuffer(lexer, k)
        self.error: Optional[RecognitionError] = None
        for _ in range(k):
            self._consume()

    def parse(self) -> bool:
        """
        Recognize `list EOF`; True when no failure was recorded.

        parse_list() on its own stops after the closing bracket and leaves
        any trailing input unread. Passing the nesting limit ends the parse
        with that error recorded.
        """
        try:
            self.parse_list()
            self.match(TokenKind.EOF)
        except NestingDepthError as e:
            self._record(e)
        return self.error is None

    # =========================================================================
    # Grammar Rules
    # =========================================================================

    def parse_list(self) -> None:
        """
        list ::= '[' elements ']'

        Raises:
            NestingDepthError: If this list would be nested deeper than max_depth
        """
        too_deep = self._nesting_error()
        if too_deep is not None:
            raise too_deep
        self._depth += 1
        try:
            self.match(TokenKind.LBRACK)
            self.elements()
            self.match(TokenKind.RBRACK)
        finally:
            self._depth -= 1

    def elements(self) -> None:
        """elements ::= element (',' element)*"""
        self.element()
        while self.input.lookahead.kind is TokenKind.COMMA:
            self.match(TokenKind.COMMA)
            self.element()

    def element(self) -> None:
        """element ::= NAME '=' NAME | NAME | list   (assignment needs k >= 2)"""
        first = self.peek(1)

        if (
            self.k >= 2
            and first.kind is TokenKind.NAME
            and self.peek(2).kind is TokenKind.EQUALS
        ):
            self.match(TokenKind.NAME)
            self.match(TokenKind.EQUALS)
            self.match(TokenKind.NAME)
        elif first.kind is TokenKind.NAME:
            self.match(TokenKind.NAME)
        elif first.kind is TokenKind.LBRACK:
            self.parse_list()
        else:
            self._record(self._syntax_error((TokenKind.NAME, TokenKind.LBRACK), first))

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def match(self, kind: TokenKind) -> None:
        """Consume the lookahead if it is of `kind`, otherwise record a failure."""
        token = self.input.lookahead
        if token.kind is kind:
            self._consume()
        else:
            self._record(self._syntax_error((kind,), token))

    def _consume(self) -> None:
        if self.lexer.error is not None:
            # Already recorded; the lexer only repeats it from here on
            self._fill_eof(self.lexer.error)
            return
        try:
            self.input.consume()
        except LexicalError as e:
            self._record(e)
            self._fill_eof(e)

    def _fill_eof(self, error: LexicalError) -> None:
        """Stand in an EOF at the bad character so parsing can wind down."""
        location = error.location
        self.input.fill(Token(
            TokenKind.EOF,
            "",
            line=location.line,
            column=location.column,
            filename=location.filename,
        ))

    def _record(self, error: RecognitionError) -> None:
        if self.error is not None:
            logger.debug(f"discarding earlier failure: {self.error.message}")
        logger.debug(f"recorded failure: {error.message}")
        self.error = error


# =============================================================================
# Backtracking Parser
# =============================================================================

class BacktrackingParser(ListParser):
    """
    Speculative recursive descent recognizer for `statement`.

    Usage:
        parser = BacktrackingParser(Lexer("[a]=[b]"))
        statement = parser.parse_statement()   # Statement.ASSIGN

    Attributes:
        input: Unbounded marking buffer over the lexer
        last_failure: Failure of the most recent rejected speculation
    """

    def __init__(self, lexer: Lexer, max_depth: int = MAX_NESTING_DEPTH):
        super().__init__(lexer, max_depth)
        self.input: MarkingBuffer = MarkingBuffer(lexer)
        self.last_failure: Optional[ListSyntaxError] = None

    def parse_statement(self) -> Statement:
        """
        statement ::= list EOF | assign EOF

        Returns:
            The alternative that recognized the whole input

        Raises:
            NoViableAlternativeError: If neither alternative matches
            NestingDepthError: If lists are nested deeper than max_depth
            LexicalError: If the input contains an invalid character
        """
        start = self.peek(1)
        alternatives: list[tuple[Statement, Rule]] = [
            (Statement.LIST, self._list_statement),
            (Statement.ASSIGN, self._assign_statement),
        ]

        failures = []
        for statement, alternative in alternatives:
            if self.speculate(alternative):
                logger.debug(f"recognized {statement.value} statement")
                return statement
            if isinstance(self.last_failure, NestingDepthError):
                # Every alternative opens the same lists
                raise self.last_failure
            failures.append(self.last_failure)

        raise NoViableAlternativeError(
            (TokenKind.LBRACK,),
            start,
            failures,
            source_line=self.lexer.source_line(start.line),
        )

    # =========================================================================
    # Grammar Rules
    # =========================================================================

    def _list_statement(self) -> Optional[ListSyntaxError]:
        """list EOF"""
        failure = self.parse_list()
        if failure is not None:
            return failure
        return self.match(TokenKind.EOF)

    def _assign_statement(self) -> Optional[ListSyntaxError]:
        """assign EOF"""
        failure = self.parse_assign()
        if failure is not None:
            return failure
        return self.match(TokenKind.EOF)

    def parse_assign(self) -> Optional[ListSyntaxError]:
        """assign ::= list '=' list"""
        for step in (
            self.parse_list,
            lambda: self.match(TokenKind.EQUALS),
            self.parse_list,
        ):
            failure = step()
            if failure is not None:
                return failure
        return None

    def parse_list(self) -> Optional[ListSyntaxError]:
        """list ::= '[' elements ']'"""
        too_deep = self._nesting_error()
        if too_deep is not None:
            return too_deep
        self._depth += 1
        try:
            failure = self.match(TokenKind.LBRACK)
            if failure is not None:
                return failure
            failure = self.elements()
            if failure is not None:
                return failure
            return self.match(TokenKind.RBRACK)
        finally:
            self._depth -= 1

    def elements(self) -> Optional[ListSyntaxError]:
        """elements ::= element (',' element)*"""
        failure = self.element()
        if failure is not None:
            return failure
        while self.peek(1).kind is TokenKind.COMMA:
            failure = self.match(TokenKind.COMMA) or self.element()
            if failure is not None:
                return failure
        return None

    def element(self) -> Optional[ListSyntaxError]:
        """
        element ::= NAME '=' NAME | NAME | list

        Two tokens decide between an assignment and a bare name. A '['
        directly followed by end of input cannot start a sublist.
        """
        first, second = self.peek(1), self.peek(2)

        if first.kind is TokenKind.NAME and second.kind is TokenKind.EQUALS:
            return (
                self.match(TokenKind.NAME)
                or self.match(TokenKind.EQUALS)
                or self.match(TokenKind.NAME)
            )
        if first.kind is TokenKind.NAME:
            return self.match(TokenKind.NAME)
        if first.kind is TokenKind.LBRACK and second.kind is not TokenKind.EOF:
            return self.parse_list()
        return self._syntax_error((TokenKind.NAME, TokenKind.LBRACK), first)

    # =========================================================================
    # Speculation
    # =========================================================================

    def speculate(self, alternative: Rule) -> bool:
        """
        Try `alternative` and report whether it matched.

        On failure the cursor is rewound to where it was before the call.
        On success the cursor stays after the recognized tokens. A
        LexicalError raised by the attempt propagates once the marker is
        released.
        """
        self.mark()
        failure = None
        succeeded = False
        try:
            failure = alternative()
            succeeded = failure is None
        finally:
            if succeeded:
                self.input.commit()
            else:
                self.release()

        if failure is not None:
            logger.debug(f"speculative attempt failed: {failure.message}")
            self.last_failure = failure
        return succeeded

    def mark(self) -> int:
        """Push a checkpoint of the current cursor."""
        return self.input.mark()

    def release(self) -> None:
        """Pop the innermost checkpoint and rewind the cursor to it."""
        self.input.release()

    def is_speculating(self) -> bool:
        return self.input.is_speculating()

    def match(self, kind: TokenKind) -> Optional[ListSyntaxError]:
        """Consume the lookahead if it is of `kind`, otherwise return the mismatch."""
        token = self.peek(1)
        if token.kind is kind:
            self.input.consume()
            return None
        return self._syntax_error((kind,), token)
