import math

import pytest

from calclang.lexer import LexerError, Token, TokenKind
from calclang.parser import (
    Assignment,
    BinaryOperation,
    BoolLiteral,
    IntegerLiteral,
    NodeKind,
    ParserError,
    UnaryOperation,
    Variable,
)
from calclang.runtime import InternalInconsistencyError, QuitRequested, evaluate, interpret
from calclang.store import VariableStore
from calclang.value import UNDEFINED, Bool, Float, Integer, Value


def run_statements(*statements: str) -> Value:
    store = VariableStore()
    results = [interpret(statement, store) for statement in statements]
    return results[-1]


@pytest.mark.parametrize(
    "code, expected_ret_val",
    [
        pytest.param("1;", Integer(1)),
        pytest.param("-1;", Integer(-1)),
        pytest.param("1+2;", Integer(3)),
        pytest.param("(1+2);", Integer(3)),
        pytest.param("(((1)));", Integer(1)),
        pytest.param("1 * 4 + 5;", Integer(9)),
        pytest.param("1 + 4 * 5;", Integer(21)),
        pytest.param("10 - 4 - 3;", Integer(3)),
        pytest.param("10 / 5 / 2 / 2;", Float(0.5)),
        pytest.param("6 / 3;", Float(2.0)),
        pytest.param("10 + 2 * (5 + 3 - 1);", Integer(24)),
        pytest.param("-5 + 1;", Integer(-4)),
        pytest.param("2.5 * 2;", Float(5.0)),
        pytest.param("7 - 2.5 ;", Float(4.5)),
        pytest.param("2.0 + 1;", Integer(3)),
        # comparisons
        pytest.param("1 < 2;", Bool(True)),
        pytest.param("2 <= 2;", Bool(True)),
        pytest.param("3 >= 4;", Bool(False)),
        pytest.param("3 > 4 - 2;", Bool(True)),
        pytest.param("1 = 1.0 ;", Bool(True)),
        pytest.param("1 <> 1;", Bool(False)),
        pytest.param("0.5 <> 1 / 2;", Bool(False)),
        pytest.param("(3-500/10)>100;", Bool(False)),
    ],
)
def test_eval_arithmetic(code: str, expected_ret_val: Value) -> None:
    assert interpret(code, VariableStore()) == expected_ret_val


@pytest.mark.parametrize(
    "statements, expected_ret_val",
    [
        pytest.param(["a := 1 + 3;", "a * 2;"], Integer(8)),
        pytest.param(["a := 1;", "a;"], Integer(1)),
        pytest.param(["a := 1;", "b := 2;", "a + b;"], Integer(3)),
        pytest.param(["a := 1;", "b := 2;", "c := a + b;"], Integer(3)),
        pytest.param(["a := 2;", "a := a * a;", "a;"], Integer(4)),
        pytest.param(["e := 10;", "bcd := 4.5 ;", "e > bcd;"], Bool(True)),
        pytest.param(["e := 1;", "bcd := 4.5 ;", "e > bcd;"], Bool(False)),
        pytest.param(["a := 5; // five", "a = 5;"], Bool(True)),
        pytest.param(["x := -2;", "1 - x;"], Integer(3)),
    ],
)
def test_eval_with_variables(statements: list[str], expected_ret_val: Value) -> None:
    assert run_statements(*statements) == expected_ret_val


def test_store_persists_between_statements() -> None:
    store = VariableStore()
    assert interpret("a := 1 + 3;", store) == Integer(4)
    assert store.lookup("a") == Integer(4)
    assert interpret("a*2;", store) == Integer(8)
    assert "a" in store
    assert len(store) == 1


def test_variable_read_is_repeatable() -> None:
    store = VariableStore({"a": Float(2.5)})
    node = Variable(Token(TokenKind.ID, "a"))
    assert [evaluate(node, store) for _ in range(3)] == [Float(2.5)] * 3


@pytest.mark.parametrize(
    "code, expected_ret_val",
    [
        pytest.param("x;", UNDEFINED),
        pytest.param("x = y;", Bool(True)),
        pytest.param("x = 1;", Bool(False)),
        pytest.param("x <> 1;", Bool(True)),
        pytest.param("x < 1;", Bool(False)),
        pytest.param("x >= 1;", Bool(False)),
    ],
)
def test_undefined_variable(code: str, expected_ret_val: Value) -> None:
    assert interpret(code, VariableStore()) == expected_ret_val


def test_undefined_in_arithmetic_is_nan() -> None:
    result = interpret("x + 1;", VariableStore())
    assert isinstance(result, Float)
    assert math.isnan(result.v)


def test_assigning_undefined() -> None:
    store = VariableStore()
    assert interpret("a := b;", store) == UNDEFINED
    assert "a" in store


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("1 / 0;", math.inf),
        pytest.param("-1 / 0;", -math.inf),
        pytest.param("2.5 / 0.0 ;", math.inf),
        pytest.param("1 / 0 > 1000000;", True),
    ],
)
def test_division_by_zero(code: str, expected: float) -> None:
    assert interpret(code, VariableStore()).v == expected  # type: ignore


@pytest.mark.parametrize("code", ["0 / 0;", "0.0 / 0;", "x / 0;"])
def test_zero_by_zero_is_nan(code: str) -> None:
    result = interpret(code, VariableStore())
    assert isinstance(result, Float)
    assert math.isnan(result.v)


def test_leaf_nodes() -> None:
    store = VariableStore()
    assert evaluate(BoolLiteral(Token(TokenKind.BOOL, True)), store) == Bool(True)
    assert evaluate(UnaryOperation(IntegerLiteral(Token(TokenKind.NUM, 3))), store) == Integer(-3)


def test_quit_command() -> None:
    with pytest.raises(QuitRequested):
        interpret("quit", VariableStore())


def test_failed_assignment_is_not_committed() -> None:
    store = VariableStore()
    bad_value = BinaryOperation(
        NodeKind.ADD, BoolLiteral(Token(TokenKind.BOOL, True)), IntegerLiteral(Token(TokenKind.NUM, 1))
    )
    with pytest.raises(InternalInconsistencyError):
        evaluate(Assignment(Variable(Token(TokenKind.ID, "a")), bad_value), store)
    assert "a" not in store


def test_unknown_node_is_internal_error() -> None:
    with pytest.raises(InternalInconsistencyError):
        evaluate("not a node", VariableStore())  # type: ignore


@pytest.mark.parametrize(
    "code, error_type",
    [
        pytest.param("1 +", ParserError),
        pytest.param("1 $ 2;", LexerError),
        pytest.param("345.3435.345;", LexerError),
    ],
)
def test_interpret_propagates_errors(code: str, error_type: type) -> None:
    store = VariableStore()
    with pytest.raises(error_type):
        interpret(code, store)
    assert len(store) == 0


BIG = "1" + "0" * 400


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param(f"{BIG};", math.inf),
        pytest.param(f"-{BIG};", -math.inf),
        pytest.param(f"{BIG} / 3;", math.inf),
        pytest.param(f"{BIG} * 1.5 ;", math.inf),
        pytest.param(f"-{BIG} * 1.5 ;", -math.inf),
        pytest.param(f"1.5 / {BIG};", 0.0),
        pytest.param("1" + "0" * 200 + " * 1" + "0" * 200 + ";", math.inf),
        pytest.param("1" + "0" * 300 + " < " + BIG + ";", True),
    ],
)
def test_integers_beyond_float_range_saturate(code: str, expected: float) -> None:
    assert interpret(code, VariableStore()).v == expected  # type: ignore


def test_assigning_big_integer() -> None:
    store = VariableStore()
    assert interpret(f"a := {BIG};", store) == Float(math.inf)
    assert interpret("a / 2;", store) == Float(math.inf)
