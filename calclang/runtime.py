import logging
import math
import operator
import sys
from dataclasses import dataclass
from typing import Callable, Type

from calclang.lexer import scan
from calclang.parser import (
    Assignment,
    BinaryOperation,
    BoolLiteral,
    Command,
    FloatLiteral,
    IntegerLiteral,
    Node,
    NodeKind,
    UnaryOperation,
    Variable,
    parse,
)
from calclang.store import VariableStore
from calclang.value import BinaryOperationImpl, Bool, Float, Integer, Number, UnaryOperationImpl, Undefined, Value

logger = logging.getLogger(__name__)


@dataclass
class InternalInconsistencyError(Exception):
    """Evaluator met a node or operand the parser can never produce"""

    errmsg: str


class QuitRequested(Exception):
    """Raised when a quit command is evaluated; the session driver stops on it"""


def interpret(source: str, store: VariableStore) -> Value:
    return evaluate(parse(scan(source)), store)


def evaluate(node: Node, store: VariableStore) -> Value:
    if isinstance(node, IntegerLiteral):
        return _integer(node.value)
    elif isinstance(node, FloatLiteral):
        return Float(node.value)
    elif isinstance(node, BoolLiteral):
        return Bool(node.value)
    elif isinstance(node, Variable):
        return store.lookup(node.name)
    elif isinstance(node, Assignment):
        value = evaluate(node.value, store)
        logger.debug("Assigning %s = %s", node.target.name, value)
        return store.assign(node.target.name, value)
    elif isinstance(node, BinaryOperation):
        left = evaluate(node.left, store)
        right = evaluate(node.right, store)
        if node.kind not in BINARY_OPERATIONS:
            raise InternalInconsistencyError(f"Unexpected binary operator: {node.kind}")
        table, op_name = BINARY_OPERATIONS[node.kind]
        return eval_binary_operation(table=table, a=left, b=right, op_name=op_name)
    elif isinstance(node, UnaryOperation):
        operand = evaluate(node.operand, store)
        return eval_unary_operation(table=neg_impls, operand=operand, op_name="Negation")
    elif isinstance(node, Command):
        raise QuitRequested()
    else:
        raise InternalInconsistencyError(f"Unexpected node: {node!r}")


BinaryOperationImplTable = list[tuple[tuple[Type[Value], Type[Value]], BinaryOperationImpl]]


def eval_binary_operation(table: BinaryOperationImplTable, a: Value, b: Value, op_name: str) -> Value:
    for (type_a, type_b), impl in table:
        if isinstance(a, type_a) and isinstance(b, type_b):
            return impl(a, b)
    else:
        raise InternalInconsistencyError(f"{op_name} is not defined for {a.type_name()} and {b.type_name()}")


_MAX_FLOAT_INT = int(sys.float_info.max)


def _integer(v: int) -> Value:
    """Integers beyond the float range saturate to a signed infinity"""
    if abs(v) > _MAX_FLOAT_INT:
        return Float(math.inf if v > 0 else -math.inf)
    return Integer(v)


def _nan(a: Value, b: Value) -> Value:
    return Float(math.nan)


def _divide(a: Number, b: Number) -> Value:
    if b.v == 0:
        # IEEE-754: x/0 is a signed infinity, 0/0 is NaN
        if a.v == 0 or math.isnan(a.v):
            return Float(math.nan)
        return Float(math.copysign(math.inf, a.v) * math.copysign(1.0, b.v))
    return Float(a.v / b.v)


def _arithmetic_impls(fn: Callable[[float, float], float]) -> BinaryOperationImplTable:
    return [
        ((Integer, Integer), lambda a, b: _integer(fn(a.v, b.v))),  # type: ignore
        ((Number, Number), lambda a, b: Float(fn(a.v, b.v))),  # type: ignore
        ((Undefined, Value), _nan),
        ((Value, Undefined), _nan),
    ]


def _ordering_impls(fn: Callable[[float, float], bool]) -> BinaryOperationImplTable:
    return [
        ((Number, Number), lambda a, b: Bool(fn(a.v, b.v))),  # type: ignore
        ((Undefined, Value), lambda a, b: Bool(False)),
        ((Value, Undefined), lambda a, b: Bool(False)),
    ]


add_impls = _arithmetic_impls(operator.add)
sub_impls = _arithmetic_impls(operator.sub)
mul_impls = _arithmetic_impls(operator.mul)
div_impls: BinaryOperationImplTable = [
    ((Number, Number), _divide),  # type: ignore
    ((Undefined, Value), _nan),
    ((Value, Undefined), _nan),
]

eq_impls: BinaryOperationImplTable = [
    ((Number, Number), lambda a, b: Bool(a.v == b.v)),  # type: ignore
    ((Bool, Bool), lambda a, b: Bool(a.v == b.v)),  # type: ignore
    ((Undefined, Undefined), lambda a, b: Bool(True)),
    ((Value, Value), lambda a, b: Bool(False)),
]
neq_impls: BinaryOperationImplTable = [
    (types, lambda a, b, impl=impl: Bool(not impl(a, b).v)) for types, impl in eq_impls  # type: ignore
]
lt_impls = _ordering_impls(operator.lt)
le_impls = _ordering_impls(operator.le)
gt_impls = _ordering_impls(operator.gt)
ge_impls = _ordering_impls(operator.ge)

BINARY_OPERATIONS: dict[NodeKind, tuple[BinaryOperationImplTable, str]] = {
    NodeKind.ADD: (add_impls, "Addition"),
    NodeKind.SUB: (sub_impls, "Subtraction"),
    NodeKind.MULTIPLY: (mul_impls, "Multiplication"),
    NodeKind.DIVIDE: (div_impls, "Division"),
    NodeKind.EQ: (eq_impls, "Equality"),
    NodeKind.NEQ: (neq_impls, "Inequality"),
    NodeKind.LT: (lt_impls, "Less-than comparison"),
    NodeKind.LE: (le_impls, "Less-or-equal comparison"),
    NodeKind.GT: (gt_impls, "Greater-than comparison"),
    NodeKind.GE: (ge_impls, "Greater-or-equal comparison"),
}

UnaryOperationImplTable = list[tuple[Type[Value], UnaryOperationImpl]]


def eval_unary_operation(table: UnaryOperationImplTable, operand: Value, op_name: str) -> Value:
    for operand_type, impl in table:
        if isinstance(operand, operand_type):
            return impl(operand)
    else:
        raise InternalInconsistencyError(f"{op_name} is not defined for {operand.type_name()}")


neg_impls: UnaryOperationImplTable = [
    (Integer, lambda a: _integer(-a.v)),  # type: ignore
    (Float, lambda a: Float(-a.v)),  # type: ignore
    (Undefined, lambda a: Float(math.nan)),
]
