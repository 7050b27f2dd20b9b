"""
Nestlist - Recursive Descent Recognizers for Nested Name Lists
==============================================================

This package recognizes a small bracketed list language:

    [a, b, [c, d]]          nested lists of names
    [a, b=c, [d, e]]        elements may be name=name assignments
    [a, b] = [c, d]         a statement may assign one list to another

It provides the same grammar at three levels of parsing power:

- **PredictiveParser(k=1)**: LL(1), one token of lookahead; no assignment
  elements, since one token cannot tell `b=c` from `b`
- **PredictiveParser(k=2)**: LL(k) over a circular lookahead buffer
- **BacktrackingParser**: speculative parsing with mark/release over an
  unbounded token buffer, able to tell `[a]` from `[a]=[b]` whatever the
  length of the left-hand list

Quick Start
-----------
    >>> from nestlist import recognize, ParserOptions, ParserMode
    >>> recognize("[a,[b,c],d]").accepted
    True
    >>> recognize("[a,b=c]", ParserOptions(ParserMode.PREDICTIVE, lookahead=1)).accepted
    False

Or use the command-line tool:
    $ nestlist tokens "[a,b,c]"
    $ nestlist check "[a]=[b]"
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from nestlist.errors import (
    NestListError,
    SourceLocation,
    RecognitionError,
    LexicalError,
    ListSyntaxError,
    NestingDepthError,
    NoViableAlternativeError,
)
from nestlist.lexer import Lexer, Token, TokenKind, tokenize
from nestlist.buffer import LookaheadBuffer, MarkingBuffer, TokenSource
from nestlist.parser import MAX_NESTING_DEPTH, PredictiveParser, BacktrackingParser, Statement
from nestlist.recognizer import (
    ParserMode,
    ParserOptions,
    RecognitionResult,
    create_parser,
    recognize,
    recognize_file,
)

__all__ = [
    "__version__",
    # Errors
    "NestListError",
    "SourceLocation",
    "RecognitionError",
    "LexicalError",
    "ListSyntaxError",
    "NestingDepthError",
    "NoViableAlternativeError",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    # Buffers
    "TokenSource",
    "LookaheadBuffer",
    "MarkingBuffer",
    # Parsers
    "MAX_NESTING_DEPTH",
    "PredictiveParser",
    "BacktrackingParser",
    "Statement",
    # Front end
    "ParserMode",
    "ParserOptions",
    "RecognitionResult",
    "create_parser",
    "recognize",
    "recognize_file",
]
