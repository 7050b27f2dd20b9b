"""
Backtracking Parser Test Suite
==============================

Tests for the speculative parser: ordered choice between the list and
assign statements, exact rollback of failed attempts, marker discipline
and the error policy.

Test Organization
-----------------
- TestGoodInput / TestBadInput: accept/reject over input grids
- TestOrderedChoice: which alternative recognizes what
- TestSpeculation: speculate(), mark() and release() directly
- TestElementDecision: the two-token element decision
- TestErrors: error kinds, fields and messages
"""

import pytest
from nestlist.errors import (
    LexicalError,
    ListSyntaxError,
    NestingDepthError,
    NoViableAlternativeError,
    RecognitionError,
)
from nestlist.lexer import Lexer, TokenKind
from nestlist.parser import MAX_NESTING_DEPTH, BacktrackingParser, Statement


GOOD_INPUTS = [
    "[a]",
    "[a,b,c]",
    "[a,[b,c],d]",
    "[a,b=c,[d,e]]",
    "[[[[a]]]]",
    "[a]=[b]",
    "[a,b]=[c,d]",
    "[a,[b=c]]=[[d],e]",
    "  [ a , b ]\n=\t[ c ]  ",
    "[" + ",".join("abcdefghijklmnopqrstuvwxyz") + "]=[z]",
]

BAD_INPUTS = [
    "",
    "a",
    "[]",
    "[a, ]",
    "[[a, ]",
    "[a",
    "[",
    "[[",
    "[a]]",
    "[a]=",
    "[a]=b",
    "[a]=[b]=[c]",
    "a=[b]",
    "[a=]",
    "[a b]",
    "[a][b]",
]


@pytest.fixture
def make_parser():
    def factory(source: str) -> BacktrackingParser:
        return BacktrackingParser(Lexer(source, "<test>"))
    return factory


# =============================================================================
# Accept / Reject Grids
# =============================================================================

class TestGoodInput:
    """Every grammatical statement is recognized."""

    @pytest.mark.parametrize("source", GOOD_INPUTS)
    def test_accepted(self, make_parser, source):
        parser = make_parser(source)
        parser.parse_statement()
        assert parser.peek(1).kind == TokenKind.EOF
        assert parser.input.depth == 0


class TestBadInput:
    """Every non-grammatical input fails with no leaked markers."""

    @pytest.mark.parametrize("source", BAD_INPUTS)
    def test_rejected(self, make_parser, source):
        parser = make_parser(source)
        with pytest.raises(ListSyntaxError):
            parser.parse_statement()
        assert parser.input.depth == 0
        assert not parser.is_speculating()

    @pytest.mark.parametrize("source", ["[a,1]", "[a]=[b,#]", "%", "[a]=[b]!"])
    def test_lexical_errors(self, make_parser, source):
        parser = make_parser(source)
        with pytest.raises(LexicalError):
            parser.parse_statement()
        assert parser.input.depth == 0


# =============================================================================
# Ordered Choice Tests
# =============================================================================

class TestOrderedChoice:
    """Tests for list-then-assign ordered choice."""

    @pytest.mark.parametrize("source", ["[a,b,c]", "[a,[b,c],d]", "[a,b=c,[d,e]]"])
    def test_list_statements(self, make_parser, source):
        assert make_parser(source).parse_statement() is Statement.LIST

    def test_assign_statement(self, make_parser):
        assert make_parser("[a]=[b]").parse_statement() is Statement.ASSIGN

    def test_assign_not_recognized_as_list(self, make_parser):
        """The list alternative alone rejects [a]=[b]."""
        parser = make_parser("[a]=[b]")
        assert not parser.speculate(lambda: parser.parse_list() or parser.match(TokenKind.EOF))
        assert parser.peek(1).kind == TokenKind.LBRACK

    def test_long_left_hand_side(self, make_parser):
        """The decision needs more lookahead than any fixed k would give."""
        names = ",".join("x" + "a" * i for i in range(40))
        parser = make_parser(f"[{names}]=[y]")
        assert parser.parse_statement() is Statement.ASSIGN

    def test_no_tokens_relexed(self, make_parser):
        """Rolling back reuses buffered tokens."""
        parser = make_parser("[a,b]=[c]")
        parser.parse_statement()
        assert parser.lexer.token_count == 9


# =============================================================================
# Speculation Tests
# =============================================================================

class TestSpeculation:
    """Tests for speculate(), mark() and release()."""

    def test_failed_speculation_restores_position(self, make_parser):
        parser = make_parser("[a,b,c]=[d]")
        before = parser.peek(1)
        before_index = parser.input.index()
        assert not parser.speculate(lambda: parser.parse_list() or parser.match(TokenKind.EOF))
        assert parser.peek(1) == before
        assert parser.peek(1).offset == before.offset
        assert parser.input.index() == before_index

    def test_successful_speculation_keeps_progress(self, make_parser):
        parser = make_parser("[a]=[b]")
        assert parser.speculate(parser.parse_list)
        assert parser.peek(1).kind == TokenKind.EQUALS
        assert parser.input.depth == 0

    def test_failure_recorded(self, make_parser):
        parser = make_parser("[a,]")
        assert not parser.speculate(parser.parse_list)
        assert parser.last_failure.found.kind == TokenKind.RBRACK

    def test_nested_speculation(self, make_parser):
        """An inner failed attempt rewinds only to its own marker."""
        parser = make_parser("[a]=[b]")

        def alternative():
            failure = parser.parse_list()
            assert parser.input.depth == 1
            assert not parser.speculate(lambda: parser.match(TokenKind.COMMA))
            assert parser.input.depth == 1
            assert parser.peek(1).kind == TokenKind.EQUALS
            return failure

        assert parser.speculate(alternative)
        assert parser.peek(1).kind == TokenKind.EQUALS
        assert parser.input.depth == 0

    def test_lexical_error_releases_marker(self, make_parser):
        """A lexical error escapes speculate() with the marker popped."""
        parser = make_parser("[a,&]")
        with pytest.raises(LexicalError):
            parser.speculate(parser.parse_list)
        assert parser.input.depth == 0
        assert parser.input.index() == 0

    def test_mark_and_release(self, make_parser):
        parser = make_parser("[a,b]")
        parser.mark()
        parser.match(TokenKind.LBRACK)
        parser.match(TokenKind.NAME)
        assert parser.peek(1).kind == TokenKind.COMMA
        parser.release()
        assert parser.peek(1).kind == TokenKind.LBRACK

    def test_match_failure_does_not_consume(self, make_parser):
        parser = make_parser("[a]")
        failure = parser.match(TokenKind.NAME)
        assert isinstance(failure, ListSyntaxError)
        assert failure.expected == (TokenKind.NAME,)
        assert parser.peek(1).kind == TokenKind.LBRACK

    def test_speculation_logged(self, make_parser, caplog):
        import logging
        parser = make_parser("[a]=[b]")
        with caplog.at_level(logging.DEBUG, logger="nestlist"):
            parser.parse_statement()
        messages = [r.getMessage() for r in caplog.records]
        assert any("speculative attempt failed" in m for m in messages)
        assert any("recognized assign statement" in m for m in messages)


# =============================================================================
# Element Decision Tests
# =============================================================================

class TestElementDecision:
    """Tests for the two-token decision inside element."""

    def test_assignment_element(self, make_parser):
        parser = make_parser("b=c]")
        assert parser.element() is None
        assert parser.peek(1).kind == TokenKind.RBRACK

    def test_bare_name(self, make_parser):
        parser = make_parser("b,c")
        assert parser.element() is None
        assert parser.peek(1).kind == TokenKind.COMMA

    def test_sublist(self, make_parser):
        parser = make_parser("[b],c")
        assert parser.element() is None
        assert parser.peek(1).kind == TokenKind.COMMA

    def test_dangling_bracket_is_not_a_sublist(self, make_parser):
        """A '[' right before end of input cannot start a sublist."""
        parser = make_parser("[")
        failure = parser.element()
        assert failure.expected == (TokenKind.NAME, TokenKind.LBRACK)
        assert failure.found.kind == TokenKind.LBRACK
        assert parser.peek(1).kind == TokenKind.LBRACK

    def test_neither(self, make_parser):
        failure = make_parser(",").element()
        assert failure.found.kind == TokenKind.COMMA


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Tests for the errors raised by parse_statement()."""

    def test_no_viable_alternative_cites_decision_point(self, make_parser):
        with pytest.raises(NoViableAlternativeError) as exc_info:
            make_parser("[a, ]").parse_statement()
        error = exc_info.value
        assert error.found.kind == TokenKind.LBRACK
        assert error.location.column == 1
        assert error.expected == (TokenKind.LBRACK,)

    def test_failures_of_each_alternative(self, make_parser):
        with pytest.raises(NoViableAlternativeError) as exc_info:
            make_parser("[a]=[b,]").parse_statement()
        list_failure, assign_failure = exc_info.value.failures
        assert list_failure.expected == (TokenKind.EOF,)
        assert list_failure.found.kind == TokenKind.EQUALS
        assert assign_failure.found.kind == TokenKind.RBRACK

    def test_hint_points_at_deepest_failure(self, make_parser):
        with pytest.raises(NoViableAlternativeError) as exc_info:
            make_parser("[a]=[b,]").parse_statement()
        message = str(exc_info.value)
        assert "<test>:1:1: error: no viable alternative for statement at LBRACK '['" in message
        assert "hint: closest alternative failed at <test>:1:8" in message

    def test_empty_input(self, make_parser):
        with pytest.raises(NoViableAlternativeError) as exc_info:
            make_parser("").parse_statement()
        assert exc_info.value.found.kind == TokenKind.EOF

    def test_errors_share_base(self, make_parser):
        for source in ("[a,]", "[a,*]"):
            with pytest.raises(RecognitionError):
                make_parser(source).parse_statement()

    def test_lexical_error_repeats_on_second_parse(self):
        """A parser that hit a bad character keeps rejecting the input."""
        parser = BacktrackingParser(Lexer("[a]$"))
        with pytest.raises(LexicalError) as first:
            parser.parse_statement()
        with pytest.raises(LexicalError) as second:
            parser.parse_statement()
        assert second.value is first.value
        assert parser.input.depth == 0


# =============================================================================
# Nesting Limit Tests
# =============================================================================

def nested(depth: int) -> str:
    return "[" * depth + "a" + "]" * depth


class TestNestingLimit:
    """Tests for the list nesting limit."""

    def test_default_limit_accepted(self, make_parser):
        assert make_parser(nested(MAX_NESTING_DEPTH)).parse_statement() is Statement.LIST

    def test_too_deep_is_a_syntax_error(self, make_parser):
        """Very deep input is rejected with a located error, not a crash."""
        with pytest.raises(NestingDepthError) as exc_info:
            make_parser(nested(400)).parse_statement()
        error = exc_info.value
        assert isinstance(error, ListSyntaxError)
        assert error.limit == MAX_NESTING_DEPTH
        assert error.found.kind == TokenKind.LBRACK
        assert error.location.column == MAX_NESTING_DEPTH + 1

    def test_custom_limit(self):
        parser = BacktrackingParser(Lexer(nested(3)), max_depth=3)
        assert parser.parse_statement() is Statement.LIST
        parser = BacktrackingParser(Lexer(nested(4)), max_depth=3)
        with pytest.raises(NestingDepthError):
            parser.parse_statement()
        assert parser.input.depth == 0

    def test_limit_counts_open_lists_only(self):
        """Sibling lists do not add up."""
        source = "[" + ",".join([nested(2)] * 5) + "]=[" + nested(2) + "]"
        parser = BacktrackingParser(Lexer(source), max_depth=3)
        assert parser.parse_statement() is Statement.ASSIGN

    def test_deep_right_hand_side(self):
        parser = BacktrackingParser(Lexer("[a]=" + nested(5)), max_depth=4)
        with pytest.raises(NestingDepthError) as exc_info:
            parser.parse_statement()
        assert exc_info.value.location.column == 9

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            BacktrackingParser(Lexer("[a]"), max_depth=0)
