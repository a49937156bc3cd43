import pytest

from errors import EvalError
from evaluator import evaluate, run
from models import Assignment, BinaryOp, IdentifierRef, NumberLiteral
from pipeline import run as run_source


@pytest.mark.parametrize("src, value", [
    ("return 42;", 42),
    ("return 2 + 3 * 4;", 14),
    ("return (2 + 3) * 4;", 20),
    ("return 10 - 2 - 3;", 5),
    ("return 7 / 2;", 3),
    ("return 100 / 10 / 5;", 2),
    ("return ((1));", 1),
    ("return 1 + 2 * 3 - 4 / 2;", 5),
])
def test_arithmetic(src, value):
    assert run_source(src) == value


def test_division_truncates_toward_zero():
    assert run_source("return (0 - 7) / 2;") == -3
    assert run_source("return 7 / (0 - 2);") == -3
    assert run_source("return (0 - 7) / (0 - 2);") == 3


@pytest.mark.parametrize("name", ["x", "foo", "_", "counter1"])
def test_identifiers_read_as_zero(name):
    assert run_source(f"return {name};") == 0


def test_assignment_yields_value_without_binding():
    assert run_source("return x = 5;") == 5
    assert run_source("return (x = 5) + x;") == 5


def test_division_by_zero_is_reported():
    with pytest.raises(EvalError) as exc:
        run_source("return 1 / 0;")
    assert exc.value.code == "E_EVAL_DIV_ZERO"
    assert exc.value.phase == "eval"
    assert isinstance(exc.value, ArithmeticError)


def test_division_by_identifier_is_division_by_zero():
    with pytest.raises(EvalError):
        run_source("return 5 / y;")


@pytest.mark.parametrize("src, value", [
    ("return 2147483647 + 1;", -2147483648),
    ("return 0 - 2147483647 - 2;", 2147483647),
    ("return 65536 * 65536;", 0),
    ("return (0 - 2147483647 - 1) / (0 - 1);", -2147483648),
])
def test_arithmetic_wraps_at_32_bits(src, value):
    assert run_source(src) == value


def test_evaluate_subtree_directly():
    tree = BinaryOp(op="-", left=Assignment(name="a", value=NumberLiteral(value=9)), right=IdentifierRef(name="a"))
    assert evaluate(tree) == 9


def test_run_requires_return_statement():
    with pytest.raises(EvalError) as exc:
        run(NumberLiteral(value=1))
    assert exc.value.code == "E_EVAL_ENTRY"


def test_long_operator_chain():
    assert run_source("return " + " + ".join(["1"] * 1500) + ";") == 1500


def test_long_mixed_chain_keeps_left_to_right_order():
    src = "return 5000" + " - 2 * 1" * 2000 + ";"
    assert run_source(src) == 1000


def test_deep_right_nesting_evaluates():
    src = "return " + "1 + (" * 100 + "1" + ")" * 100 + ";"
    assert run_source(src) == 101
