import math
from typing import Any

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from llcalc.llcalc_errors import (
    ARITHMETIC,
    SYNTAX,
    ArithmeticDegenerateError,
    CalcSyntaxError,
    LexicalError,
    NestingTooDeepError,
    UnknownFunctionError,
    UnknownIdentifierError,
)
from llcalc.llcalc_numeric import IntegerDomain
from llcalc.llcalc_parser import Parser
from llcalc.llcalc_symbols import SymbolTable


def make_parser(max_depth: int = 100) -> Parser:
    return Parser(SymbolTable({"pi": math.pi}), max_depth=max_depth)


def evaluate(source: str) -> float:
    return make_parser().parse(source)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("123 + 500*2", 1123.0),
        ("2^3^2", 64.0),
        ("sqrt(16)", 4.0),
        ("pow(2,10)", 1024.0),
        ("10 % 3", 1.0),
        ("1 + 2 * 3", 7.0),
        ("(1 + 2) * 3", 9.0),
        ("2 * 3 ^ 2", 18.0),
        ("10 - 4 - 3", 3.0),
        ("64 / 4 / 2", 8.0),
        ("7 % 4 * 2", 6.0),
        ("+3", 3.0),
        ("-3 + 5", 2.0),
        ("-2^2", -4.0),
        ("-7 % 3", -1.0),
        ("(-7) % 3", -1.0),
        ("((((2))))", 2.0),
        ("atan2(0, 1)", 0.0),
        ("pow(2, 1 + 2)", 8.0),
        ("sqrt(sqrt(16))", 2.0),
        ("1.5 * 2", 3.0),
        ("  4\t* 2 ", 8.0),
    ],
)  # type: ignore[misc]
def test_evaluation(source: str, expected: float) -> None:
    assert evaluate(source) == expected


def test_pi_is_available() -> None:
    assert evaluate("pi") == pytest.approx(3.14159265)


def test_empty_line_is_zero() -> None:
    parser = make_parser()
    assert parser.parse("") == 0.0
    assert parser.parse("   ") == 0.0
    assert parser.diagnostics == []


def test_assignment_returns_and_stores_value() -> None:
    parser = make_parser()
    assert parser.parse("x = 3 + 4") == 7.0
    assert parser.symbols.find("x").value == 7.0  # type: ignore[union-attr]
    assert parser.parse("x * 2") == 14.0


def test_chained_assignment() -> None:
    parser = make_parser()
    assert parser.parse("a = b = 2") == 2.0
    assert parser.symbols.find("a").value == 2.0  # type: ignore[union-attr]
    assert parser.symbols.find("b").value == 2.0  # type: ignore[union-attr]


def test_assignment_inside_expression() -> None:
    parser = make_parser()
    assert parser.parse("2 + x = 3") == 5.0
    assert parser.symbols.find("x").value == 3.0  # type: ignore[union-attr]


def test_pi_can_be_overwritten() -> None:
    parser = make_parser()
    parser.parse("pi = 3")
    assert parser.parse("pi") == 3.0


def test_unknown_identifier() -> None:
    parser = make_parser()
    with pytest.raises(UnknownIdentifierError, match='Unknown identifier: "zzz"'):
        parser.parse("zzz")
    assert parser.symbols.names() == ["pi"]


def test_failed_assignment_does_not_bind() -> None:
    parser = make_parser()
    with pytest.raises(UnknownIdentifierError):
        parser.parse("y = zzz + 1")
    assert parser.symbols.find("y") is None


@pytest.mark.parametrize("source", ["foo()", "sqrt()", "foo(1)", "sqrt(1, 2)", "Sqrt(4)"])  # type: ignore[misc]
def test_unknown_function(source: str) -> None:
    with pytest.raises(UnknownFunctionError, match="Unknown function"):
        evaluate(source)


def test_unary_sign_only_at_expression_start() -> None:
    with pytest.raises(CalcSyntaxError, match="Invalid lookahead in pow_term"):
        evaluate("2 * -3")
    assert evaluate("2 * (-3)") == -6.0


def test_missing_operator() -> None:
    with pytest.raises(CalcSyntaxError, match="Invalid lookahead in pow_rest"):
        evaluate("1 2")


def test_unexpected_operator_in_factor() -> None:
    with pytest.raises(CalcSyntaxError):
        evaluate("*3")


def test_trailing_input_is_rejected() -> None:
    with pytest.raises(CalcSyntaxError, match="Unexpected trailing input"):
        evaluate("1 )")


def test_assignment_without_value() -> None:
    with pytest.raises(CalcSyntaxError, match="Unexpected end of input"):
        evaluate("x =")


def test_assignment_to_literal() -> None:
    with pytest.raises(CalcSyntaxError, match="Invalid lookahead in pow_rest"):
        evaluate("3 = 4")


def test_invalid_character_is_lexical_error() -> None:
    with pytest.raises(LexicalError, match="Invalid input in lexer"):
        evaluate("$")
    with pytest.raises(LexicalError):
        evaluate("1 + $")


def test_unterminated_call() -> None:
    with pytest.raises(CalcSyntaxError, match='Invalid function call to "sqrt"'):
        evaluate("sqrt(4")


def test_missing_close_paren_is_reported_not_fatal() -> None:
    parser = make_parser()
    assert parser.parse("(1 + 2") == 3.0
    assert len(parser.diagnostics) == 1
    assert parser.diagnostics[0].kind == SYNTAX
    assert "Could not match" in parser.diagnostics[0].message


def test_missing_close_paren_in_binary_call() -> None:
    parser = make_parser()
    assert parser.parse("pow(2, 3") == 8.0
    assert [d.kind for d in parser.diagnostics] == [SYNTAX]


def test_division_by_zero_is_ieee() -> None:
    parser = make_parser()
    assert parser.parse("1 / 0") == math.inf
    assert [d.kind for d in parser.diagnostics] == [ARITHMETIC]
    assert math.isnan(parser.parse("0 / 0"))


def test_degenerate_function_result_is_reported() -> None:
    parser = make_parser()
    assert math.isnan(parser.parse("sqrt(0 - 1)"))
    assert [d.kind for d in parser.diagnostics] == [ARITHMETIC]


def test_diagnostics_reset_per_line() -> None:
    parser = make_parser()
    parser.parse("1 / 0")
    parser.parse("1")
    assert parser.diagnostics == []


def test_nesting_limit() -> None:
    parser = make_parser(max_depth=5)
    assert parser.parse("((((1))))") == 1.0
    with pytest.raises(NestingTooDeepError):
        parser.parse("((((((1))))))")


def test_default_nesting_limit_rejects_deep_input() -> None:
    source = "(" * 500 + "1" + ")" * 500
    with pytest.raises(NestingTooDeepError):
        evaluate(source)


def test_long_operator_chains_do_not_recurse() -> None:
    assert evaluate(" + ".join(["1"] * 2000)) == 2000.0


def test_integer_domain() -> None:
    parser = Parser(SymbolTable({"pi": 3}), IntegerDomain())
    assert parser.parse("7 / 2") == 3
    assert parser.parse("-7 / 2") == -3
    assert parser.parse("2^10") == 1024
    assert parser.parse("sqrt(17)") == 4
    assert parser.parse("pow(2, 3)") == 8
    assert parser.parse("pi * 2") == 6
    with pytest.raises(ArithmeticDegenerateError):
        parser.parse("1 / 0")
    with pytest.raises(ArithmeticDegenerateError):
        parser.parse("sqrt(0 - 1)")
    with pytest.raises(LexicalError):
        parser.parse("1.5")


numbers = st.integers(min_value=0, max_value=99)
divisors = st.integers(min_value=1, max_value=99)


@given(
    first=numbers,
    rest=st.lists(
        st.tuples(st.sampled_from(["+", "-", "*", "/", "%"]), divisors),
        max_size=5,
    ),
)  # type: ignore[misc]
def test_flat_expressions_match_python(first: int, rest: list[tuple[str, int]]) -> None:
    source = str(first) + "".join(f" {op} {num}" for op, num in rest)
    expected = eval(source)  # nosec B307
    assert evaluate(source) == pytest.approx(float(expected))


@st.composite  # type: ignore[misc]
def nested(draw: Any, depth: int = 3) -> tuple[str, float]:
    if depth == 0 or draw(st.booleans()):
        value = draw(numbers)
        return str(value), float(value)
    lhs_src, lhs = draw(nested(depth - 1))
    rhs_src, rhs = draw(nested(depth - 1))
    op = draw(st.sampled_from(["+", "-", "*", "/"]))
    if op == "/":
        assume(rhs != 0)
    value = {"+": lhs + rhs, "-": lhs - rhs, "*": lhs * rhs, "/": lhs / rhs if rhs else 0.0}[op]
    return f"({lhs_src} {op} {rhs_src})", value


@given(nested())  # type: ignore[misc]
def test_parenthesized_expressions(case: tuple[str, float]) -> None:
    source, expected = case
    assert evaluate(source) == expected


@given(base=st.integers(min_value=1, max_value=4), exps=st.lists(st.integers(0, 3), min_size=1, max_size=3))  # type: ignore[misc]
def test_power_chains_left_to_right(base: int, exps: list[int]) -> None:
    source = str(base) + "".join(f"^{e}" for e in exps)
    expected = float(base)
    for e in exps:
        expected = expected**e
    assert evaluate(source) == expected


def test_operations_bound_to_domain() -> None:
    domain = IntegerDomain()
    parser = Parser(SymbolTable(), domain)
    assert sorted(parser.operations) == sorted("+-*/%^")
    assert parser.operations["/"] == domain.div


def test_long_literal_after_operator() -> None:
    with pytest.raises(LexicalError, match="Token longer than 256 characters") as e:
        evaluate("1 + " + "9" * 300)
    assert e.value.position == 4
