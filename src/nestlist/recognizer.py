"""
Recognizer Front End
====================

This module ties the lexer and the parsers together behind a single
configuration object, so callers pick a parsing strategy by setting
options rather than by choosing classes.

    Source → Lexer → Token buffer → Parser → RecognitionResult

Usage
-----
Command line:
    $ nestlist check "[a,b=c]"

Programmatic:
    >>> from nestlist import recognize
    >>> recognize("[a]=[b]").statement
    <Statement.ASSIGN: 'assign'>

Configuration
-------------
ParserOptions can be built directly or from the environment:

    NESTLIST_MODE       predictive | backtracking
    NESTLIST_LOOKAHEAD  lookahead depth k for the predictive parser
"""

import logging
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from nestlist.errors import RecognitionError
from nestlist.lexer import Lexer
from nestlist.parser import MAX_NESTING_DEPTH, BacktrackingParser, PredictiveParser, Statement

logger = logging.getLogger(__name__)


class ParserMode(Enum):
    """Parsing strategy."""

    PREDICTIVE = "predictive"
    BACKTRACKING = "backtracking"


@dataclass
class ParserOptions:
    """
    Recognizer configuration options.

    Attributes:
        mode: Parsing strategy (default: backtracking)
        lookahead: Lookahead depth k for the predictive parser (default: 2).
                   k=1 gives the LL(1) grammar without assignment elements.
                   Ignored by the backtracking parser, whose lookahead is
                   unbounded.
        filename: Name used in error locations
        max_depth: Deepest list nesting accepted by either parser
    """
    mode: ParserMode = ParserMode.BACKTRACKING
    lookahead: int = 2
    filename: str = "<input>"
    max_depth: int = MAX_NESTING_DEPTH

    def __post_init__(self):
        if isinstance(self.mode, str):
            self.mode = ParserMode(self.mode.lower())
        if self.lookahead < 1:
            raise ValueError(f"lookahead must be at least 1, got {self.lookahead}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")

    @classmethod
    def from_env(cls) -> "ParserOptions":
        """
        Create ParserOptions from environment variables.

        Environment variables (all optional):
            NESTLIST_MODE: "predictive" or "backtracking"
            NESTLIST_LOOKAHEAD: Lookahead depth (integer >= 1)

        Invalid values are logged and the default is kept.
        """
        options = cls()

        if mode := os.environ.get("NESTLIST_MODE"):
            try:
                options.mode = ParserMode(mode.lower())
            except ValueError:
                logger.warning(f"ignoring NESTLIST_MODE={mode!r}")

        if lookahead := os.environ.get("NESTLIST_LOOKAHEAD"):
            try:
                k = int(lookahead)
            except ValueError:
                k = 0
            if k >= 1:
                options.lookahead = k
            else:
                logger.warning(f"ignoring NESTLIST_LOOKAHEAD={lookahead!r}")

        return options


@dataclass
class RecognitionResult:
    """
    Outcome of recognizing one input.

    Attributes:
        accepted: True when the whole input was recognized
        statement: Alternative that matched (LIST for the predictive parser)
        error: The failure when not accepted
        token_count: Tokens lexed, not counting EOF
        mode: Strategy that produced this result
    """
    accepted: bool = False
    statement: Optional[Statement] = None
    error: Optional[RecognitionError] = None
    token_count: int = 0
    mode: ParserMode = field(default=ParserMode.BACKTRACKING)


Parser = Union[PredictiveParser, BacktrackingParser]


def create_parser(source: str, options: Optional[ParserOptions] = None) -> Parser:
    """
    Build the parser selected by `options` over a fresh lexer.

    A parser instance recognizes exactly one input; build a new one per
    input.
    """
    options = options or ParserOptions()
    lexer = Lexer(source, options.filename)
    if options.mode is ParserMode.PREDICTIVE:
        return PredictiveParser(lexer, options.lookahead, options.max_depth)
    return BacktrackingParser(lexer, options.max_depth)


def recognize(source: str, options: Optional[ParserOptions] = None) -> RecognitionResult:
    """
    Recognize `source`, reporting failure in the result instead of raising.

    Args:
        source: Input text
        options: Parser configuration (defaults if None)

    Returns:
        RecognitionResult describing the outcome
    """
    options = options or ParserOptions()
    result = RecognitionResult(mode=options.mode)
    parser = create_parser(source, options)

    if isinstance(parser, PredictiveParser):
        result.accepted = parser.parse()
        result.error = parser.error
        if result.accepted:
            result.statement = Statement.LIST
    else:
        try:
            result.statement = parser.parse_statement()
            result.accepted = True
        except RecognitionError as e:
            result.error = e

    result.token_count = parser.lexer.token_count
    logger.debug(
        f"{options.mode.value} parser {'accepted' if result.accepted else 'rejected'} "
        f"{options.filename} ({result.token_count} tokens)"
    )
    return result


def recognize_file(path: Union[str, Path], options: Optional[ParserOptions] = None) -> RecognitionResult:
    """
    Recognize the contents of a file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    options = options or ParserOptions()
    if options.filename == "<input>":
        options = replace(options, filename=str(path))

    return recognize(path.read_text(encoding="utf-8"), options)
