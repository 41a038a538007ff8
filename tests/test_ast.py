from rdcalc.rdcalc_ast import (
    ASTNode,
    new_binary,
    new_call,
    new_func,
    new_identifier,
    new_if,
    new_integer,
)
from rdcalc.rdcalc_lexer import Token


def test_astnode_repr() -> None:
    node = ASTNode("identifier", "x")
    assert repr(node) == "ASTNode(identifier, value='x')"


def test_astnode_eq_equal() -> None:
    assert ASTNode("number", 1) == ASTNode("number", 1)


def test_astnode_eq_not_equal_kind() -> None:
    assert ASTNode("number", 1) != ASTNode("identifier", 1)


def test_astnode_eq_not_equal_children() -> None:
    n1 = ASTNode("binop", "+", [ASTNode("identifier", "x"), ASTNode("number", 1)])
    n2 = ASTNode("binop", "+", [ASTNode("identifier", "y"), ASTNode("number", 1)])
    assert n1 != n2


def test_astnode_eq_considers_position_same_shape_does_not() -> None:
    n1 = ASTNode("number", 1, line=1, col=1)
    n2 = ASTNode("number", 1, line=1, col=9)
    assert n1 != n2
    assert n1.same_shape(n2)
    assert not n1.same_shape("1")


def test_astnode_to_dict_basic() -> None:
    node = new_binary("+", new_integer(1), new_identifier("x"), Token("PLUS", "+", 1, 3))
    d = node.to_dict()
    assert d["kind"] == "binop"
    assert d["value"] == "+"
    assert (d["line"], d["col"]) == (1, 3)
    assert [c["kind"] for c in d["children"]] == ["number", "identifier"]


def test_factories_take_position_from_token() -> None:
    node = new_identifier("x", Token("IDENT", "x", 2, 5))
    assert (node.line, node.col) == (2, 5)
    assert new_integer(3).line == 0


def test_new_integer_converts_value() -> None:
    assert new_integer("12").value == 12  # type: ignore[arg-type]


def test_new_call_defaults_to_callee_position() -> None:
    callee = new_identifier("f", Token("IDENT", "f", 1, 4))
    call = new_call(callee, new_integer(1))
    assert call.value is callee
    assert (call.line, call.col) == (1, 4)
    assert call.children == [new_integer(1)]


def test_new_func_shape() -> None:
    body = new_binary("*", new_identifier("n"), new_integer(2))
    node = new_func("n", body)
    assert node.kind == "func"
    assert node.value == "n"
    assert node.children == [body]


def test_new_if_shape_and_dict() -> None:
    node = new_if(
        new_identifier("x"),
        "<",
        new_integer(0),
        new_integer(0),
        new_identifier("x"),
    )
    assert node.kind == "if"
    assert isinstance(node.value, ASTNode)
    assert node.value.kind == "compare"
    assert node.value.value == "<"
    assert node.children == [new_integer(0)]
    assert node.else_children == [new_identifier("x")]

    d = node.to_dict()
    assert d["value"]["kind"] == "compare"
    assert d["else_children"][0]["value"] == "x"
    assert "else_children=" in repr(node)
