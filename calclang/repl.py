import argparse
import logging
from typing import Callable, Optional

from calclang.lexer import LexerError
from calclang.parser import ParserError
from calclang.runtime import QuitRequested, interpret
from calclang.store import VariableStore

PROMPT = "> "
CONTINUATION_PROMPT = "... "


def is_statement_complete(line: str) -> bool:
    """True if the line has a ';' that is not inside a trailing // comment"""
    semicolon_idx = line.find(";")
    if semicolon_idx == -1:
        return False
    comment_idx = line.find("//")
    return comment_idx == -1 or semicolon_idx < comment_idx


def run(
    read_line: Optional[Callable[[str], str]] = None,
    write: Callable[[str], None] = print,
    store: Optional[VariableStore] = None,
) -> VariableStore:
    if read_line is None:
        read_line = input
    if store is None:
        store = VariableStore()

    lines: list[str] = []
    while True:
        try:
            line = read_line(CONTINUATION_PROMPT if lines else PROMPT)
        except EOFError:
            break

        lines.append(line)
        source = "\n".join(lines)
        if not (is_statement_complete(line) or source.strip().lower() == "quit"):
            continue
        lines = []

        try:
            result = interpret(source, store)
        except (LexerError, ParserError) as e:
            write(str(e))
            continue
        except QuitRequested:
            break

        write(str(result))

    return store


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Interactive calculator language")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="trace the lexer and parser, same as --log-level DEBUG")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else args.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    run()
