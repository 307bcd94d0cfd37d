from typing import Mapping, Optional

from calclang.value import UNDEFINED, Value


class VariableStore:
    """Identifier to value mapping that lives for a whole session.

    Owned by whoever drives the session (the REPL loop or a test) and passed
    explicitly to every evaluation. Not thread-safe: statements are expected to
    be evaluated one at a time.
    """

    def __init__(self, initial: Optional[Mapping[str, Value]] = None) -> None:
        self._variables: dict[str, Value] = dict(initial or {})

    def lookup(self, name: str) -> Value:
        return self._variables.get(name, UNDEFINED)

    def assign(self, name: str, value: Value) -> Value:
        self._variables[name] = value
        return value

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def items(self) -> list[tuple[str, Value]]:
        return list(self._variables.items())

    def __repr__(self) -> str:
        variables = ", ".join(f"{name}={value}" for name, value in self._variables.items())
        return f"VariableStore({variables})"
