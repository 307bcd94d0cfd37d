import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from calclang.utils import PrintableEnum

logger = logging.getLogger(__name__)


@dataclass
class LexerError(Exception):
    errmsg: str
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        print_start_idx = max(0, self.error_char_idx - 10)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(self.code), self.error_char_idx + 10)
        print_ellipsis_post = print_end_idx < len(self.code)
        return "\n".join(
            [
                f"[Lexer error] {self.errmsg}",
                (
                    ("..." if print_ellipsis_pre else "")
                    + f"{self.code[print_start_idx:print_end_idx]}"
                    + ("..." if print_ellipsis_post else "")
                ),
                " " * (self.error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


class InvalidTokenError(LexerError):
    pass


class InvalidNumberFormatError(LexerError):
    pass


class TokenKind(PrintableEnum):
    QUIT = enum.auto()
    ID = enum.auto()
    ASSIGN = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    MULTIPLY = enum.auto()
    DIVIDE = enum.auto()
    EQ = enum.auto()
    NEQ = enum.auto()
    GE = enum.auto()
    LE = enum.auto()
    LT = enum.auto()
    GT = enum.auto()
    NUM = enum.auto()
    SEMI = enum.auto()
    COMMENT = enum.auto()
    LPAREN = enum.auto()
    RPAREN = enum.auto()
    BOOL = enum.auto()


TokenValue = Union[int, float, str, bool]


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: Optional[TokenValue] = None
    lexeme: str = field(default="", compare=False)

    def __str__(self) -> str:
        if self.value is None:
            return f"<{self.kind}>"
        return f"<{self.kind}>{self.value!r}"


# first match wins, so keywords come before identifiers and two-char operators before their prefixes
RULES: list[tuple[TokenKind, re.Pattern[str]]] = [
    (TokenKind.QUIT, re.compile(r"quit\b", re.IGNORECASE)),
    (TokenKind.BOOL, re.compile(r"(?:true|false)\b")),
    (TokenKind.ID, re.compile(r"[a-zA-Z][a-zA-Z0-9_]*")),
    (TokenKind.COMMENT, re.compile(r"//([^\r\n]*)")),
    (TokenKind.ASSIGN, re.compile(r":=")),
    (TokenKind.SEMI, re.compile(r";")),
    (TokenKind.PLUS, re.compile(r"\+")),
    (TokenKind.MINUS, re.compile(r"-")),
    (TokenKind.MULTIPLY, re.compile(r"\*")),
    (TokenKind.DIVIDE, re.compile(r"/")),
    (TokenKind.EQ, re.compile(r"=")),
    (TokenKind.NEQ, re.compile(r"<>")),
    (TokenKind.GE, re.compile(r">=")),
    (TokenKind.LE, re.compile(r"<=")),
    (TokenKind.LT, re.compile(r"<")),
    (TokenKind.GT, re.compile(r">")),
    (TokenKind.LPAREN, re.compile(r"\(")),
    (TokenKind.RPAREN, re.compile(r"\)")),
    (TokenKind.NUM, re.compile(r"([0-9]*[.])?[0-9]+")),
]

_WHITESPACE = re.compile(r"\s+")


def scan(source: str) -> list[Token]:
    offset = 0
    tokens: list[Token] = []
    while offset < len(source):
        whitespace = _WHITESPACE.match(source, offset)
        if whitespace is not None:
            offset = whitespace.end()
            if offset >= len(source):
                break

        for kind, pattern in RULES:
            match = pattern.match(source, offset)
            if match is not None:
                break
        else:
            raise InvalidTokenError(f"Unexpected character: {source[offset]!r}", code=source, error_char_idx=offset)

        lexeme = match.group()
        value: Optional[TokenValue] = None
        if kind is TokenKind.NUM:
            if "." in lexeme:
                # a float literal must be followed by whitespace or end of input
                if match.end() < len(source) and not source[match.end()].isspace():
                    raise InvalidNumberFormatError(
                        f"Invalid number format: {lexeme + source[match.end()]!r}...",
                        code=source,
                        error_char_idx=match.end(),
                    )
                value = float(lexeme)
            else:
                try:
                    value = int(lexeme)
                except ValueError:
                    raise InvalidNumberFormatError(
                        f"Integer literal is too long ({len(lexeme)} digits)", code=source, error_char_idx=offset
                    )
        elif kind is TokenKind.ID:
            value = lexeme
        elif kind is TokenKind.COMMENT:
            value = match.group(1).strip()
        elif kind is TokenKind.BOOL:
            value = lexeme == "true"

        tokens.append(Token(kind=kind, value=value, lexeme=lexeme))
        offset = match.end()

    logger.debug("Scanned %d tokens from %r", len(tokens), source)
    return tokens


def untokenize(tokens: list[Token]) -> str:
    result = " ".join(t.lexeme for t in tokens)

    result = re.sub(r"\s+;", ";", result)

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"\(\s+", "(", result)
    result = re.sub(r"\s+\)", ")", result)
    return result
