import abc
import math
from dataclasses import dataclass
from typing import Callable


class Value(abc.ABC):
    @classmethod
    @abc.abstractmethod
    def type_name(cls) -> str:
        ...


UnaryOperationImpl = Callable[[Value], Value]
BinaryOperationImpl = Callable[[Value, Value], Value]


class Number(Value):
    v: float


@dataclass
class Integer(Number):
    v: int

    @classmethod
    def type_name(cls) -> str:
        return "Integer"

    def __str__(self) -> str:
        return str(self.v)


@dataclass
class Float(Number):
    v: float

    @classmethod
    def type_name(cls) -> str:
        return "Float"

    def __str__(self) -> str:
        if math.isnan(self.v):
            return "NaN"
        if math.isinf(self.v):
            return "Infinity" if self.v > 0 else "-Infinity"
        return repr(self.v)


@dataclass
class Bool(Value):
    v: bool

    @classmethod
    def type_name(cls) -> str:
        return "Bool"

    def __str__(self) -> str:
        return "true" if self.v else "false"


@dataclass
class Undefined(Value):
    """Result of reading a variable that was never assigned"""

    @classmethod
    def type_name(cls) -> str:
        return "Undefined"

    def __str__(self) -> str:
        return "undefined"


UNDEFINED = Undefined()
