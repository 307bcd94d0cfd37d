import math
import random
import re
import string
import warnings

from calclang.runtime import interpret
from calclang.store import VariableStore
from calclang.value import Number

warnings.filterwarnings("ignore")


def eval_py(code: str) -> float | str:
    try:
        return eval(code)
    except Exception as e:
        return str(e)


def eval_my(code: str) -> float | str:
    try:
        result = interpret(code + " ;", VariableStore())
    except Exception as e:
        return str(e)
    if isinstance(result, Number):
        return result.v
    return str(result)


if __name__ == "__main__":
    # signs are only allowed right before numbers, so mismatching syntax errors are expected;
    # only numeric disagreements are reported
    alphabet = string.digits + ".()+-*/ "

    def generate(length: int) -> str:
        return "".join(random.choices(alphabet, k=length))

    while True:
        code = generate(10)

        if re.findall(r"\*\s*\*", code):
            continue  # avoid generating powers (10**4)

        if re.findall(r"/\s*/", code):
            continue  # avoid generating comments and int devision (10 // 3)

        res_py = eval_py(code)
        res_my = eval_my(code)
        if isinstance(res_py, str) or isinstance(res_my, str):
            continue
        if math.isclose(float(res_py), float(res_my)):
            continue
        print(f"{code!r}\npy: {res_py}\nmy: {res_my}\n\n")
