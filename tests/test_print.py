import pytest

from rdcalc.rdcalc_ast import ASTNode
from rdcalc.rdcalc_env import Environment
from rdcalc.rdcalc_eval import Function
from rdcalc.rdcalc_parser import parse_line
from rdcalc.rdcalc_print import format_tree, format_value


@pytest.mark.parametrize(
    "source,expected",
    [
        ("1", "1"),
        ("abc", "abc"),
        ("1 + 2 * 3", "(1 + (2 * 3))"),
        ("f(x)", "f(x)"),
        ("func (n) { n * 2 }", "func (n) { (n * 2) }"),
        ("if x < 0 then 0 else x", "if x < 0 then 0 else x"),
        (":define x = 10", "(x = 10)"),
        (":load", ":load"),
    ],
)  # type: ignore[misc]
def test_format_tree(source: str, expected: str) -> None:
    assert format_tree(parse_line(source)) == expected


def test_format_tree_rejects_unknown_kind() -> None:
    with pytest.raises(TypeError, match="mystery"):
        format_tree(ASTNode("mystery"))


def test_format_value_integer() -> None:
    assert format_value(42) == "42"
    assert format_value(-3) == "-3"


def test_format_value_function() -> None:
    func = Function("n", parse_line("n + 1"), Environment())
    assert format_value(func) == "<func (n) { (n + 1) }>"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(if a < b then 1 else 2) + 3", "((if a < b then 1 else 2) + 3)"),
        ("1 + (if a < b then 1 else 2)", "(1 + (if a < b then 1 else 2))"),
        ("(if a < b then f else g)(1)", "(if a < b then f else g)(1)"),
        ("func (x) { x } * 2", "((func (x) { x }) * 2)"),
        (
            "if (if a < b then 1 else 2) < 3 then 4 else 5",
            "if (if a < b then 1 else 2) < 3 then 4 else 5",
        ),
    ],
)  # type: ignore[misc]
def test_nested_if_and_func_are_parenthesised(source: str, expected: str) -> None:
    tree = parse_line(source)
    rendered = format_tree(tree)
    assert rendered == expected
    assert parse_line(rendered).same_shape(tree)
