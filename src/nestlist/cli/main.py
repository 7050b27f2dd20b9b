"""
nestlist - Nested List Recognizer Command-Line Interface
========================================================

Usage Examples
--------------
Print the token stream:
    $ nestlist tokens "[a, [b, c], d]"

Recognize a statement with the backtracking parser:
    $ nestlist check "[a,b]=[c,d]"

Recognize a list with an LL(1) or LL(2) parser:
    $ nestlist check --mode predictive -k 1 "[a,b,c]"
    $ nestlist check --mode predictive -k 2 "[a,b=c]"

Read the input from a file, with debug logging:
    $ nestlist check -v -f input.txt
"""

import logging
from pathlib import Path
from typing import Optional

import click

from nestlist import __version__
from nestlist.cli.errors import handle_cli_exception
from nestlist.lexer import Lexer, TokenKind
from nestlist.recognizer import ParserMode, ParserOptions, recognize


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _read_input(text: Optional[str], file: Optional[Path]) -> tuple[str, str]:
    """Return (source, filename) from exactly one of INPUT or --file."""
    if (text is None) == (file is None):
        raise click.BadParameter("give either INPUT or --file, not both or neither")
    if file is not None:
        return file.read_text(encoding="utf-8"), str(file)
    return text, "<input>"


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="nestlist")
def main() -> None:
    """
    Recognizers for nested, comma-separated name lists.

    \b
    Commands:
      tokens  Print the token stream of an input
      check   Recognize an input

    \b
    Grammar:
      statement := list EOF | assign EOF
      assign    := list '=' list
      list      := '[' elements ']'
      elements  := element (',' element)*
      element   := NAME '=' NAME | NAME | list
    """
    pass


# =============================================================================
# Tokens Command
# =============================================================================

@main.command("tokens")
@click.argument("text", metavar="INPUT", required=False)
@click.option(
    "-f", "--file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the input from a file",
)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def tokens(text: Optional[str], file: Optional[Path], verbose: bool) -> None:
    """
    Print one line per token: KIND and text.

    The terminating EOF token is not printed.
    """
    _configure_logging(verbose)
    try:
        source, filename = _read_input(text, file)
        lexer = Lexer(source, filename)
        while lexer.has_more():
            token = lexer.next_token()
            if token.kind is TokenKind.EOF:
                break
            click.echo(f"{token.kind.name} {token.text}")
    except Exception as e:
        handle_cli_exception(e, verbose)


# =============================================================================
# Check Command
# =============================================================================

@main.command("check")
@click.argument("text", metavar="INPUT", required=False)
@click.option(
    "-f", "--file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the input from a file",
)
@click.option(
    "-m", "--mode",
    type=click.Choice([m.value for m in ParserMode], case_sensitive=False),
    default=None,
    help="Parsing strategy (default: backtracking, or $NESTLIST_MODE)",
)
@click.option(
    "-k", "--lookahead",
    type=click.IntRange(min=1),
    default=None,
    help="Lookahead depth for the predictive parser (default: 2, or $NESTLIST_LOOKAHEAD)",
)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def check(
    text: Optional[str],
    file: Optional[Path],
    mode: Optional[str],
    lookahead: Optional[int],
    verbose: bool,
) -> None:
    """
    Recognize INPUT (or the contents of --file).

    Prints "ok: <statement>" and exits 0 when the input is recognized,
    otherwise prints the error and exits 1.

    \b
    Examples:
        nestlist check "[a,[b,c],d]"
        nestlist check "[a]=[b]"
        nestlist check -m predictive -k 1 "[a,b=c]"    # rejected, needs k=2
    """
    _configure_logging(verbose)
    try:
        source, filename = _read_input(text, file)

        options = ParserOptions.from_env()
        options.filename = filename
        if mode is not None:
            options.mode = ParserMode(mode.lower())
        if lookahead is not None:
            options.lookahead = lookahead

        if verbose:
            click.echo(f"Mode: {options.mode.value}, lookahead: {options.lookahead}")

        result = recognize(source, options)
        if not result.accepted:
            handle_cli_exception(result.error, verbose)

        if verbose:
            click.echo(f"Tokens: {result.token_count}")
        click.echo(f"ok: {result.statement.value}")
    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
