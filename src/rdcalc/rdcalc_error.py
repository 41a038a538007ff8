"""Error types and error reporting for rdcalc.

Parse errors subclass the built-in `SyntaxError` and carry the offending token's
position. Evaluation errors subclass `EvalError`. Anything else reaching the
`ErrorHandler` is assumed to be an internal issue.
"""

import io
import traceback
from typing import Any

from termcolor import colored


class ParseError(SyntaxError):
    """Raised when a line cannot be parsed.

    Attributes:
        token: The token at which parsing failed, if known.
        line (int): 1-based line of the offending token (0 when unknown).
        col (int): 1-based column of the offending token (0 when unknown).
    """

    def __init__(self, message: str, token: Any = None) -> None:
        super().__init__(message)
        self.token = token
        self.line: int = getattr(token, "line", 0)
        self.col: int = getattr(token, "col", 0)

    @property
    def width(self) -> int:
        value = getattr(self.token, "value", "")
        return max(len(value), 1)


class IllegalTermError(ParseError):
    """No term alternative matches the current token."""


class MissingDelimiterError(IllegalTermError):
    """A required `)`, `(`, `{` or `}` was not where the grammar expects it."""


class MalformedConditionalError(ParseError):
    """An `if` expression is missing `then`, `else` or one of its parts."""


class MalformedCommandError(ParseError):
    """A `:` command is missing its name or required arguments."""


class PushbackError(RuntimeError):
    """Raised when a second token is pushed back before the first is re-read."""


class EvalError(Exception):
    """Raised when a parsed tree cannot be evaluated.

    Attributes:
        node: The tree node being evaluated when the error occurred, if known.
    """

    def __init__(self, message: str, node: Any = None) -> None:
        super().__init__(message)
        self.node = node
        self.line: int = getattr(node, "line", 0)
        self.col: int = getattr(node, "col", 0)


class UndefinedVariableError(EvalError):
    """A name was looked up that no enclosing frame defines."""


class ErrorHandler:
    """Context manager that reports rdcalc errors instead of letting them escape.

    Handled errors (parse, evaluation, recursion depth and internal errors) are
    printed and suppressed so that the read loop can prompt again.
    `KeyboardInterrupt` and `SystemExit` always propagate.
    """

    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, color: bool = True, verbose: bool = False) -> None:
        self.color = color
        self.verbose = verbose
        self.line: str | None = None
        self.errors = 0

    def register_line(self, line: str) -> None:
        """Remembers the source line so diagnostics can point into it."""
        self.line = line

    def remove_line(self) -> None:
        self.line = None

    def paint(self, text: str, color: str | None = None, bold: bool = True) -> str:
        if not self.color:
            return text
        return colored(text, color, attrs=["bold"] if bold else None)

    def diagnose(self, col: int, width: int = 1, warning: bool = False) -> str:
        """Returns the registered line with the span starting at `col` highlighted."""
        assert self.line is not None
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        start = max(col - 1, 0)
        end = min(start + max(width, 1), max(len(self.line), start + 1))

        diagnosis = "  " + self.line[:start]
        diagnosis += self.paint(self.line[start:end], color)
        diagnosis += self.line[end:] + "\n"
        diagnosis += "  " + " " * start
        diagnosis += self.paint("^" + "~" * (end - start - 1), color)
        return diagnosis

    def warn(self, message: str) -> None:
        print(self.paint("warning: ", ErrorHandler.WARNING) + message)

    def throw(self, error: BaseException, internal: bool = False) -> None:
        """Prints `error`, with a caret diagnosis when its position is known."""
        self.errors += 1
        error_msg = ""
        if internal:
            error_msg += self.paint("[internal] ", ErrorHandler.ERROR)
        error_msg += self.paint("error: ", ErrorHandler.ERROR) + str(error)
        print(error_msg)

        col = getattr(error, "col", 0)
        if not internal and self.line and col:
            width = error.width if isinstance(error, ParseError) else 1
            print(self.diagnose(col, width))

        if internal and self.verbose:
            buf = io.StringIO()
            traceback.print_exception(type(error), error, error.__traceback__, file=buf)
            print("[error] >>>")
            print(buf.getvalue())

    def __enter__(self) -> "ErrorHandler":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        if exc_type is None:
            return False
        if issubclass(exc_type, (KeyboardInterrupt, SystemExit)):
            return False
        if issubclass(exc_type, (ParseError, EvalError)):
            self.throw(exc_val)
        elif issubclass(exc_type, RecursionError):
            self.throw(EvalError("maximum recursion depth exceeded"))
        elif issubclass(exc_type, Exception):
            self.throw(exc_val, internal=True)
        else:
            return False
        return True
