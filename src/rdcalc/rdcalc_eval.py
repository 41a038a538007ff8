"""
Evaluates rdcalc expression trees.

`Evaluator.evaluate` dispatches each node to an `eval_<kind>` method. Values are
Python ints and `Function` closures.

Semantics:
    - `binop` with operator `=` binds its identifier operand (`:define`).
    - `+ - * /` work on integers; `/` truncates toward zero.
    - `func` captures the environment it is evaluated in. Because the global
      frame is shared, a function defined with `:define` can call itself.
    - `if` compares two integers and evaluates only the selected branch.

Raises:
    EvalError: For undefined names, type mismatches, division by zero, unknown
        operators and command identifiers that reach evaluation.
"""

from typing import Any, Callable

from rdcalc.rdcalc_ast import ASTNode
from rdcalc.rdcalc_constants import COMMAND_MARKER, relational_ops
from rdcalc.rdcalc_env import Environment
from rdcalc.rdcalc_error import EvalError


class Function:
    """A function value: one parameter, a body and the environment it closes over."""

    def __init__(self, param: str, body: ASTNode, env: Environment) -> None:
        self.param = param
        self.body = body
        self.env = env

    def __repr__(self) -> str:
        return f"Function(param={self.param!r}, body={self.body!r})"


def _divide(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


ARITHMETIC: dict[str, Callable[[int, int], int]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
}

RELATIONAL: dict[str, Callable[[int, int], bool]] = {
    "<": lambda a, b: a < b,
    ">": lambda a, b: a > b,
    "=": lambda a, b: a == b,
    "<=": lambda a, b: a <= b,
    ">=": lambda a, b: a >= b,
    "!=": lambda a, b: a != b,
}


class Evaluator:
    """Walks expression trees against a variable table.

    Attributes:
        env (Environment): The global frame. `:define` binds here.
    """

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env if env is not None else Environment()

    def evaluate(self, node: ASTNode, env: Environment | None = None) -> Any:
        env = env if env is not None else self.env
        method = getattr(self, f"eval_{node.kind}", None)
        if method is None:
            raise EvalError(
                f"No evaluation rule for node kind '{node.kind}'", node
            )
        return method(node, env)

    def eval_number(self, node: ASTNode, env: Environment) -> int:
        return int(node.value)  # type: ignore[arg-type]

    def eval_identifier(self, node: ASTNode, env: Environment) -> Any:
        name = str(node.value)
        if name.startswith(COMMAND_MARKER):
            raise EvalError(f"Command '{name}' cannot be used as a value", node)
        try:
            return env.lookup(name)
        except EvalError as e:
            e.node, e.line, e.col = node, node.line, node.col
            raise

    def eval_binop(self, node: ASTNode, env: Environment) -> Any:
        op = str(node.value)
        left, right = node.children

        if op == "=":
            if left.kind != "identifier":
                raise EvalError("Left side of '=' must be an identifier", left)
            return env.define(str(left.value), self.evaluate(right, env))

        if op not in ARITHMETIC:
            raise EvalError(f"Unknown operator '{op}'", node)

        a = self.expect_int(self.evaluate(left, env), left)
        b = self.expect_int(self.evaluate(right, env), right)
        if op == "/" and b == 0:
            raise EvalError("Division by zero", node)
        return ARITHMETIC[op](a, b)

    def eval_func(self, node: ASTNode, env: Environment) -> Function:
        return Function(str(node.value), node.children[0], env)

    def eval_call(self, node: ASTNode, env: Environment) -> Any:
        callee = node.value
        assert isinstance(callee, ASTNode)  # for mypy
        func = self.evaluate(callee, env)
        if not isinstance(func, Function):
            raise EvalError(f"{format_kind(func)} is not a function", callee)

        argument = self.evaluate(node.children[0], env)
        frame = func.env.child()
        frame.define(func.param, argument)
        return self.evaluate(func.body, frame)

    def eval_if(self, node: ASTNode, env: Environment) -> Any:
        cond = node.value
        assert isinstance(cond, ASTNode)  # for mypy
        relop = str(cond.value)
        if relop not in relational_ops:
            raise EvalError(f"Unknown relational operator '{relop}'", cond)

        left, right = cond.children
        a = self.expect_int(self.evaluate(left, env), left)
        b = self.expect_int(self.evaluate(right, env), right)

        branch = node.children[0] if RELATIONAL[relop](a, b) else node.else_children[0]
        return self.evaluate(branch, env)

    @staticmethod
    def expect_int(value: Any, node: ASTNode) -> int:
        if isinstance(value, Function):
            raise EvalError("Expected an integer, got a function", node)
        return int(value)


def format_kind(value: Any) -> str:
    return "function" if isinstance(value, Function) else f"'{value}'"


def evaluate(node: ASTNode, env: Environment | None = None) -> Any:
    return Evaluator(env).evaluate(node)
