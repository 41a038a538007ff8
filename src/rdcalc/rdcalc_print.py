"""Text rendering of rdcalc trees and values.

Binary operations are always parenthesised so that the grouping the parser
chose is visible: `2 * 3 + 4` renders as `((2 * 3) + 4)`. An `if` or `func`
used as an operand or callee is parenthesised too, so the rendering reads
back as the same tree.
"""

from typing import Any

from rdcalc.rdcalc_ast import ASTNode
from rdcalc.rdcalc_eval import Function

# parenthesised when nested in an operator, comparison or call
_WRAPPED_KINDS = ("if", "func")


def _operand(node: ASTNode) -> str:
    text = format_tree(node)
    return f"({text})" if node.kind in _WRAPPED_KINDS else text


def format_tree(node: ASTNode) -> str:
    if node.kind in ("number", "identifier"):
        return str(node.value)
    if node.kind == "binop":
        left, right = node.children
        return f"({_operand(left)} {node.value} {_operand(right)})"
    if node.kind == "call":
        assert isinstance(node.value, ASTNode)  # for mypy
        return f"{_operand(node.value)}({format_tree(node.children[0])})"
    if node.kind == "func":
        return f"func ({node.value}) {{ {format_tree(node.children[0])} }}"
    if node.kind == "compare":
        left, right = node.children
        return f"{_operand(left)} {node.value} {_operand(right)}"
    if node.kind == "if":
        assert isinstance(node.value, ASTNode)  # for mypy
        return (
            f"if {format_tree(node.value)} "
            f"then {format_tree(node.children[0])} "
            f"else {format_tree(node.else_children[0])}"
        )
    raise TypeError(f"Cannot format node kind '{node.kind}'")


def format_value(value: Any) -> str:
    if isinstance(value, Function):
        return f"<func ({value.param}) {{ {format_tree(value.body)} }}>"
    return str(value)
