import dataclasses
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from calclang.lexer import Token, TokenKind, untokenize
from calclang.utils import PrintableEnum

logger = logging.getLogger(__name__)


@dataclass
class ParserError(Exception):
    errmsg: str
    tokens: list[Token]
    error_token_idx: int

    @property
    def token(self) -> Optional[Token]:
        """Offending token, None if the statement ended early"""
        if self.error_token_idx < len(self.tokens):
            return self.tokens[self.error_token_idx]
        return None

    def __str__(self) -> str:
        if self.token is not None:
            rendered_up_to_error = untokenize(self.tokens[: self.error_token_idx + 1])
            caret_idx = len(rendered_up_to_error) - len(self.token.lexeme)
        else:
            caret_idx = len(untokenize(self.tokens))
        return "\n".join([f"Parser error: {self.errmsg}", untokenize(self.tokens), " " * caret_idx + "^"])


class NodeKind(PrintableEnum):
    ID = enum.auto()
    ASSIGN = enum.auto()
    INTEGER = enum.auto()
    FLOAT = enum.auto()
    BOOL = enum.auto()
    NEGATE = enum.auto()
    MULTIPLY = enum.auto()
    DIVIDE = enum.auto()
    ADD = enum.auto()
    SUB = enum.auto()
    LT = enum.auto()
    LE = enum.auto()
    GT = enum.auto()
    GE = enum.auto()
    NEQ = enum.auto()
    EQ = enum.auto()
    COMMAND = enum.auto()


ARITHMETIC_KINDS = frozenset([NodeKind.ADD, NodeKind.SUB, NodeKind.MULTIPLY, NodeKind.DIVIDE])
COMPARISON_KINDS = frozenset([NodeKind.EQ, NodeKind.NEQ, NodeKind.GT, NodeKind.GE, NodeKind.LT, NodeKind.LE])


@dataclass(frozen=True)
class Variable:
    token: Token
    kind = NodeKind.ID

    @property
    def name(self) -> str:
        return str(self.token.value)

    def __str__(self) -> str:
        return f"Id({self.name})"


@dataclass(frozen=True)
class IntegerLiteral:
    token: Token
    kind = NodeKind.INTEGER

    @property
    def value(self) -> int:
        return int(self.token.value)  # type: ignore

    def __str__(self) -> str:
        return f"Integer({self.value})"


@dataclass(frozen=True)
class FloatLiteral:
    token: Token
    kind = NodeKind.FLOAT

    @property
    def value(self) -> float:
        return float(self.token.value)  # type: ignore

    def __str__(self) -> str:
        return f"Float({self.value})"


@dataclass(frozen=True)
class BoolLiteral:
    token: Token
    kind = NodeKind.BOOL

    @property
    def value(self) -> bool:
        return bool(self.token.value)

    def __str__(self) -> str:
        return f"Bool({str(self.value).lower()})"


@dataclass(frozen=True)
class Command:
    token: Token
    kind = NodeKind.COMMAND

    def __str__(self) -> str:
        return f"Command({self.token.kind})"


@dataclass(frozen=True)
class UnaryOperation:
    operand: "Node"
    kind = NodeKind.NEGATE

    def __str__(self) -> str:
        return f"Negate({self.operand})"


@dataclass(frozen=True)
class BinaryOperation:
    kind: NodeKind
    left: "Node"
    right: "Node"

    def __post_init__(self) -> None:
        if self.kind not in ARITHMETIC_KINDS and self.kind not in COMPARISON_KINDS:
            raise ValueError(f"{self.kind} is not a binary operation")

    def __str__(self) -> str:
        return f"{self.kind.title}({self.left}, {self.right})"


@dataclass(frozen=True)
class Assignment:
    target: Variable
    value: "Node"
    kind = NodeKind.ASSIGN

    def __str__(self) -> str:
        return f"Assign({self.target}, {self.value})"


Node = Union[
    Variable, IntegerLiteral, FloatLiteral, BoolLiteral, Command, UnaryOperation, BinaryOperation, Assignment
]

ADDITIVE_OPERATORS = {
    TokenKind.PLUS: NodeKind.ADD,
    TokenKind.MINUS: NodeKind.SUB,
}
MULTIPLICATIVE_OPERATORS = {
    TokenKind.MULTIPLY: NodeKind.MULTIPLY,
    TokenKind.DIVIDE: NodeKind.DIVIDE,
}
COMPARISON_OPERATORS = {
    TokenKind.EQ: NodeKind.EQ,
    TokenKind.NEQ: NodeKind.NEQ,
    TokenKind.GT: NodeKind.GT,
    TokenKind.GE: NodeKind.GE,
    TokenKind.LT: NodeKind.LT,
    TokenKind.LE: NodeKind.LE,
}


def parse(tokens: list[Token]) -> Node:
    """Parses exactly one statement; trailing comments are allowed, anything else is an error"""
    statement, i = _consume_command(tokens, 0)
    i = _skip_comments(tokens, i)
    if i < len(tokens):
        raise ParserError("Only one statement is allowed", tokens=tokens, error_token_idx=i)
    return statement


def _skip_comments(tokens: list[Token], i: int) -> int:
    while i < len(tokens) and tokens[i].kind is TokenKind.COMMENT:
        i += 1
    return i


def _match(tokens: list[Token], i: int, *kinds: TokenKind) -> tuple[Optional[Token], int]:
    """Returns the next significant token and the index after it if it has one of the kinds,
    otherwise None and the index of that token"""
    i = _skip_comments(tokens, i)
    if i < len(tokens) and tokens[i].kind in kinds:
        return tokens[i], i + 1
    return None, i


def _expect(tokens: list[Token], i: int, kind: TokenKind, errmsg: str) -> tuple[Token, int]:
    token, i = _match(tokens, i, kind)
    if token is None:
        raise ParserError(errmsg, tokens=tokens, error_token_idx=i)
    return token, i


def _consume_command(tokens: list[Token], i: int) -> tuple[Node, int]:
    logger.debug("Command at %d", i)
    quit_token, j = _match(tokens, i, TokenKind.QUIT)
    if quit_token is not None:
        _, j = _match(tokens, j, TokenKind.SEMI)
        return Command(quit_token), j

    id_token, j = _match(tokens, i, TokenKind.ID)
    expression: Node
    if id_token is not None:
        target = Variable(id_token)
        assign_token, j = _match(tokens, j, TokenKind.ASSIGN)
        if assign_token is not None:
            value, j = _consume_arith_exp(tokens, j)
            expression = Assignment(target=target, value=value)
        else:
            expression, j = _consume_idless_tail(tokens, j, target)
    else:
        expression, j = _consume_arith_exp(tokens, i, allow_identifier=False)
        expression, j = _consume_comparison(tokens, j, expression)

    _, j = _expect(tokens, j, TokenKind.SEMI, "Semicolon required")
    return expression, j


def _consume_idless_tail(tokens: list[Token], i: int, leading: Node) -> tuple[Node, int]:
    """Rest of a statement whose first operand (an identifier) is already consumed"""
    logger.debug("IdlessTail at %d", i)
    expression = leading
    while True:
        operator_token, i = _match(tokens, i, *ADDITIVE_OPERATORS, *MULTIPLICATIVE_OPERATORS)
        if operator_token is None:
            break
        right: Node
        if operator_token.kind in ADDITIVE_OPERATORS:
            right, i = _consume_term(tokens, i)
            expression = BinaryOperation(ADDITIVE_OPERATORS[operator_token.kind], expression, right)
        else:
            right, i = _consume_factor(tokens, i)
            expression = BinaryOperation(MULTIPLICATIVE_OPERATORS[operator_token.kind], expression, right)
    return _consume_comparison(tokens, i, expression)


def _consume_comparison(tokens: list[Token], i: int, left: Node) -> tuple[Node, int]:
    operator_token, i = _match(tokens, i, *COMPARISON_OPERATORS)
    if operator_token is None:
        return left, i
    right, i = _consume_arith_exp(tokens, i)
    chained, _ = _match(tokens, i, *COMPARISON_OPERATORS)
    if chained is not None:
        raise ParserError("Comparisons cannot be chained", tokens=tokens, error_token_idx=_skip_comments(tokens, i))
    return BinaryOperation(COMPARISON_OPERATORS[operator_token.kind], left, right), i


def _consume_arith_exp(tokens: list[Token], i: int, allow_identifier: bool = True) -> tuple[Node, int]:
    logger.debug("ArithExp at %d", i)
    expression, i = _consume_term(tokens, i, allow_identifier=allow_identifier)
    while True:
        operator_token, i = _match(tokens, i, *ADDITIVE_OPERATORS)
        if operator_token is None:
            return expression, i
        right, i = _consume_term(tokens, i)
        expression = BinaryOperation(ADDITIVE_OPERATORS[operator_token.kind], expression, right)


def _consume_term(tokens: list[Token], i: int, allow_identifier: bool = True) -> tuple[Node, int]:
    logger.debug("Term at %d", i)
    expression, i = _consume_factor(tokens, i, allow_identifier=allow_identifier)
    while True:
        operator_token, i = _match(tokens, i, *MULTIPLICATIVE_OPERATORS)
        if operator_token is None:
            return expression, i
        right, i = _consume_factor(tokens, i)
        expression = BinaryOperation(MULTIPLICATIVE_OPERATORS[operator_token.kind], expression, right)


def _consume_factor(tokens: list[Token], i: int, allow_identifier: bool = True) -> tuple[Node, int]:
    logger.debug("Factor at %d", i)
    if allow_identifier:
        id_token, i = _match(tokens, i, TokenKind.ID)
        if id_token is not None:
            return Variable(id_token), i

    sign_token, i = _match(tokens, i, TokenKind.PLUS, TokenKind.MINUS)
    if sign_token is not None:
        number_token, i = _expect(tokens, i, TokenKind.NUM, "Number expected after sign")
        return _number_leaf(number_token, negate=sign_token.kind is TokenKind.MINUS), i

    number_token, i = _match(tokens, i, TokenKind.NUM)
    if number_token is not None:
        return _number_leaf(number_token, negate=False), i

    paren_token, j = _match(tokens, i, TokenKind.LPAREN)
    if paren_token is not None:
        expression, j = _consume_arith_exp(tokens, j)
        _, j = _expect(tokens, j, TokenKind.RPAREN, "Missing right parenthesis")
        return expression, j

    expected = "Identifier, number or '('" if allow_identifier else "Number or '('"
    raise ParserError(f"{expected} expected", tokens=tokens, error_token_idx=i)


def _number_leaf(token: Token, negate: bool) -> Node:
    if negate:
        token = dataclasses.replace(token, value=-token.value)  # type: ignore
    value = token.value
    if isinstance(value, int) or (isinstance(value, float) and value.is_integer()):
        return IntegerLiteral(token)
    return FloatLiteral(token)
