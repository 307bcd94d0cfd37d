from calclang.lexer import LexerError, scan
from calclang.parser import ParserError, parse
from calclang.runtime import QuitRequested, evaluate
from calclang.store import VariableStore

store = VariableStore()

for code in [
    "5;",
    "-1;",
    "1 + 1;",
    "-1 + 1;",
    "1 + -1;",
    "4 + 6 * 3;",
    "(4 + 6);",
    "(4+6) * 3;",
    "80225/+2;",
    "7/6/2000;",
    "1 / 0;",
    "a := 1 + 3;",
    "a * 2;",
    "bcd := a * 2.5 ; // ten",
    "half := 0.5;",
    "a > bcd;",
    "(3-500/10)>100;",
    "undefinedvar;",
    "1 < 2 < 3;",
    "345.3435.345;",
    "quit",
]:
    print("=" * 10)
    print(f"code: {code!r}")
    try:
        tokens = scan(code)
    except LexerError as e:
        print(e)
        continue

    print(f"tokens: {' '.join(str(t) for t in tokens)}")

    try:
        ast = parse(tokens)
    except ParserError as e:
        print(e)
        continue
    print(f"ast: {ast}")

    try:
        result = evaluate(ast, store)
    except QuitRequested:
        print("quit requested")
        continue
    print(f"result: {result}")
    print(f"variables: {store}")
