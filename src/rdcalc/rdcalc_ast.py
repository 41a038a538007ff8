"""
Defines the expression tree produced by the rdcalc parser.

Classes:
    ASTNode:
        A node in the expression tree. One class covers every variant; `kind`
        says which one it is.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python dictionaries.

Node variants:

    ============  ============  ==========================  ================  =============
    variant       kind          value                       children          else_children
    ============  ============  ==========================  ================  =============
    Integer       "number"      int                         []                []
    Identifier    "identifier"  name                        []                []
    BinaryOp      "binop"       operator text               [left, right]     []
    Call          "call"        callee ASTNode              [argument]        []
    FuncLiteral   "func"        parameter name              [body]            []
    Conditional   "if"          "compare" ASTNode           [then]            [else]
    ============  ============  ==========================  ================  =============

The `compare` node of a conditional holds the relational operator text as its
value and the two operands as its children.

The `new_*` factories build each variant from already-built children. They are
the only way the parser constructs nodes.
"""

from typing import Any, TypedDict, Union


class ASTDict(TypedDict, total=False):
    """Serialized shape of an ASTNode (see `ASTNode.to_dict`)."""

    kind: str
    value: Any
    line: int
    col: int
    children: list["ASTDict"]
    else_children: list["ASTDict"]


class ASTNode:
    """
    A node in the rdcalc expression tree.

    Args:
        kind (str): The variant of node ("number", "identifier", "binop", "call", "func", "if", "compare").
        value (Union[str, int, ASTNode], optional): Literal value, operator, name or nested node.
        children (list[ASTNode], optional): Child nodes in evaluation order.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).

    Attributes:
        else_children (list[ASTNode]): The else-branch of a conditional.
    """

    def __init__(
        self,
        kind: str,
        value: Union[str, int, "ASTNode"] | None = None,
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.line = line
        self.col = col
        self.else_children: list["ASTNode"] = []

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        if self.else_children:
            preview = ", ".join(repr(c) for c in self.else_children)
            parts.append(f"else_children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.children == other.children
            and self.else_children == other.else_children
        )

    def same_shape(self, other: Any) -> bool:
        """Structural equality ignoring source positions."""
        if not isinstance(other, ASTNode):
            return False
        if isinstance(self.value, ASTNode):
            values_equal = self.value.same_shape(other.value)
        else:
            values_equal = self.value == other.value
        return (
            self.kind == other.kind
            and values_equal
            and len(self.children) == len(other.children)
            and all(a.same_shape(b) for a, b in zip(self.children, other.children))
            and len(self.else_children) == len(other.else_children)
            and all(
                a.same_shape(b) for a, b in zip(self.else_children, other.else_children)
            )
        )

    def to_dict(self) -> ASTDict:
        val: Any = self.value
        if isinstance(val, ASTNode):
            val = val.to_dict()

        return {
            "kind": self.kind,
            "value": val,
            "line": self.line,
            "col": self.col,
            "children": [c.to_dict() for c in self.children],
            "else_children": [c.to_dict() for c in self.else_children],
        }


def _pos(token: Any) -> tuple[int, int]:
    return getattr(token, "line", 0), getattr(token, "col", 0)


def new_integer(value: int, token: Any = None) -> ASTNode:
    line, col = _pos(token)
    return ASTNode("number", int(value), line=line, col=col)


def new_identifier(name: str, token: Any = None) -> ASTNode:
    line, col = _pos(token)
    return ASTNode("identifier", name, line=line, col=col)


def new_binary(op: str, left: ASTNode, right: ASTNode, token: Any = None) -> ASTNode:
    line, col = _pos(token)
    return ASTNode("binop", op, [left, right], line=line, col=col)


def new_call(callee: ASTNode, argument: ASTNode, token: Any = None) -> ASTNode:
    line, col = _pos(token) if token is not None else (callee.line, callee.col)
    return ASTNode("call", callee, [argument], line=line, col=col)


def new_func(param: str, body: ASTNode, token: Any = None) -> ASTNode:
    line, col = _pos(token)
    return ASTNode("func", param, [body], line=line, col=col)


def new_if(
    left: ASTNode,
    relop: str,
    right: ASTNode,
    then_branch: ASTNode,
    else_branch: ASTNode,
    token: Any = None,
) -> ASTNode:
    line, col = _pos(token)
    cond = ASTNode("compare", relop, [left, right], line=left.line, col=left.col)
    node = ASTNode("if", cond, [then_branch], line=line, col=col)
    node.else_children = [else_branch]
    return node
