"""
Token Source Buffers
====================

Every parser reads tokens through the same small protocol: peek(n) looks
n tokens ahead without consuming anything, consume() moves past the
current token. Two buffers implement it on top of a Lexer.

LookaheadBuffer
---------------
A fixed ring of k slots used by the predictive LL(1)/LL(k) parsers. The
slots start out as INVALID placeholders and the owner fills them with k
consume() calls. Each consume() overwrites the slot of the token just
consumed with a freshly lexed one.

    slots:  [ t3 | t4 | t2 ]      k = 3, pos = 2
                          ^ peek(1) = t2, peek(2) = t3, peek(3) = t4

MarkingBuffer
-------------
An unbounded, lazily filled list with a cursor and a stack of markers,
used by the backtracking parser. mark() saves the cursor, release()
rewinds to the saved value and commit() forgets it while keeping the
progress. While any marker is outstanding the list only grows, because a
release() may need to rewind to any token after the oldest marker. With
no markers left and every buffered token consumed, the list is emptied so
memory stays bounded by the longest speculation. index() counts tokens
consumed since the start of input, so the reset is invisible to callers.
"""

import logging
from typing import Protocol

from nestlist.lexer import Lexer, Token, TokenKind

logger = logging.getLogger(__name__)


class TokenSource(Protocol):
    """Read interface shared by every token buffer."""

    def peek(self, n: int = 1) -> Token:
        ...

    @property
    def lookahead(self) -> Token:
        ...

    def consume(self) -> None:
        ...


# =============================================================================
# Bounded Circular Buffer (LL(1) / LL(k))
# =============================================================================

class LookaheadBuffer:
    """
    Fixed-size circular lookahead buffer of k tokens.

    Errors raised by the lexer while filling a slot propagate to the
    caller; the predictive parser decides how to record them.
    """

    def __init__(self, lexer: Lexer, k: int = 1):
        if k < 1:
            raise ValueError(f"lookahead depth must be at least 1, got {k}")
        self.lexer = lexer
        self.k = k
        self._slots: list[Token] = [Token(TokenKind.INVALID, "")] * k
        # Index of the slot holding peek(1), also the next slot to refill
        self._pos = 0

    def peek(self, n: int = 1) -> Token:
        """
        Return the nth token ahead (1-based) without consuming it.

        Raises:
            ValueError: If n is outside 1..k
        """
        if not 1 <= n <= self.k:
            raise ValueError(f"peek({n}) outside lookahead depth {self.k}")
        return self._slots[(self._pos + n - 1) % self.k]

    @property
    def lookahead(self) -> Token:
        return self.peek(1)

    def consume(self) -> None:
        """Drop peek(1) and lex one token into the freed slot."""
        token = self.lexer.next_token()
        self.fill(token)

    def fill(self, token: Token) -> None:
        """Store a token in the freed slot and advance the ring."""
        self._slots[self._pos] = token
        self._pos = (self._pos + 1) % self.k

    def __repr__(self) -> str:
        ahead = [self.peek(n) for n in range(1, self.k + 1)]
        return f"LookaheadBuffer(k={self.k}, ahead={ahead})"


# =============================================================================
# Unbounded Marking Buffer (backtracking)
# =============================================================================

class MarkingBuffer:
    """
    Unbounded lookahead buffer with checkpoint/rollback markers.

    Attributes:
        lexer: Token producer
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self._tokens: list[Token] = []
        self._p = 0
        # Tokens discarded by earlier truncations
        self._base = 0
        self._markers: list[int] = []

    # =========================================================================
    # Lookahead
    # =========================================================================

    def peek(self, n: int = 1) -> Token:
        """
        Return the nth token ahead (1-based), lexing more input if needed.

        Raises:
            ValueError: If n is less than 1
            LexicalError: If the lexer rejects the input while filling
        """
        if n < 1:
            raise ValueError(f"peek({n}) must look at least one token ahead")
        self.sync(n)
        return self._tokens[self._p + n - 1]

    @property
    def lookahead(self) -> Token:
        return self.peek(1)

    def sync(self, n: int) -> None:
        """Make sure tokens p through p+n-1 are buffered."""
        missing = self._p + n - len(self._tokens)
        if missing > 0:
            self.fill(missing)

    def fill(self, n: int) -> None:
        """Append n freshly lexed tokens."""
        for _ in range(n):
            self._tokens.append(self.lexer.next_token())
        logger.debug(f"buffer grew to {len(self._tokens)} tokens")

    def consume(self) -> None:
        """Move past peek(1), truncating the buffer once it is safe to."""
        self.sync(1)
        self._p += 1
        if self._p == len(self._tokens) and not self.is_speculating():
            logger.debug(f"buffer drained, discarding {len(self._tokens)} tokens")
            self._base += self._p
            self._p = 0
            self._tokens.clear()

    # =========================================================================
    # Markers
    # =========================================================================

    def mark(self) -> int:
        """Push the current index and return it."""
        marker = self.index()
        self._markers.append(marker)
        logger.debug(f"mark at {marker} (depth {len(self._markers)})")
        return marker

    def release(self) -> None:
        """
        Pop the innermost marker and rewind the cursor to it.

        Raises:
            RuntimeError: If no marker is outstanding
        """
        if not self._markers:
            raise RuntimeError("release() without a matching mark()")
        marker = self._markers.pop()
        logger.debug(f"release to {marker} from {self.index()} (depth {len(self._markers)})")
        self.seek(marker)

    def commit(self) -> None:
        """
        Pop the innermost marker, keeping the cursor where it is.

        Raises:
            RuntimeError: If no marker is outstanding
        """
        if not self._markers:
            raise RuntimeError("commit() without a matching mark()")
        marker = self._markers.pop()
        logger.debug(f"commit {marker}..{self.index()} (depth {len(self._markers)})")

    def seek(self, index: int) -> None:
        """
        Move the cursor to an index previously returned by index() or mark().

        Raises:
            ValueError: If the token at `index` is no longer buffered
        """
        p = index - self._base
        if not 0 <= p <= len(self._tokens):
            raise ValueError(
                f"cannot seek to {index}, buffer holds "
                f"{self._base}..{self._base + len(self._tokens)}"
            )
        self._p = p

    def index(self) -> int:
        """Number of tokens consumed since the start of input."""
        return self._base + self._p

    def is_speculating(self) -> bool:
        return bool(self._markers)

    @property
    def depth(self) -> int:
        """Number of outstanding markers."""
        return len(self._markers)

    @property
    def buffered(self) -> int:
        """Number of tokens currently held."""
        return len(self._tokens)

    def __repr__(self) -> str:
        return (
            f"MarkingBuffer(index={self.index()}, buffered={len(self._tokens)}, "
            f"markers={self._markers})"
        )
