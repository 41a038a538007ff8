from typing import Any

from rdcalc.rdcalc_ast import ASTNode
from rdcalc.rdcalc_constants import COMMAND_MARKER, LOAD_COMMAND
from rdcalc.rdcalc_env import Environment
from rdcalc.rdcalc_error import ErrorHandler, EvalError
from rdcalc.rdcalc_eval import Evaluator
from rdcalc.rdcalc_parser import try_parse_line
from rdcalc.rdcalc_print import format_tree, format_value

PROMPT = "=> "

HELP_TEXT = (
    "Enter an expression to evaluate it, for example '2 * 3 + 4'.\n\n"
    "  :define NAME = EXPR     bind NAME to the value of EXPR\n"
    "  func (x) { EXPR }       a one-parameter function; call it as f(EXPR)\n"
    "  if A < B then X else Y  relational operators: < > = <= >= !=\n\n"
    "Commands: :help :vars :verbose :load :quit"
)


class ReplSession:
    """State of one interactive session: the global frame and display options."""

    def __init__(
        self, verbose: bool = False, right_assoc: bool = False, color: bool = True
    ) -> None:
        self.env = Environment()
        self.evaluator = Evaluator(self.env)
        self.verbose = verbose
        self.right_assoc = right_assoc
        self.error_handler = ErrorHandler(color=color, verbose=verbose)
        self.done = False

    def is_command(self, node: ASTNode) -> bool:
        return node.kind == "identifier" and str(node.value).startswith(COMMAND_MARKER)

    def handle_command(self, command: str) -> None:
        if command in (":quit", ":exit"):
            self.done = True
        elif command == ":help":
            print(HELP_TEXT)
        elif command == ":verbose":
            self.verbose = not self.verbose
            self.error_handler.verbose = self.verbose
            print(f"[mode] >>> Verbose mode {'ON' if self.verbose else 'OFF'}")
        elif command == ":vars":
            bindings = list(self.env.items())
            if not bindings:
                print("[vars] >>> No variables defined.")
            for name, value in bindings:
                print(f"{name:>12} = {format_value(value)}")
        elif command == LOAD_COMMAND:
            self.error_handler.warn(f"{LOAD_COMMAND} is not supported")
        else:
            raise EvalError(f"Unknown command '{command}'")

    def run_line(self, line: str) -> Any:
        """Parse and evaluate one line, reporting any error. Returns the value or None."""
        src = line.strip()
        if not src or src.startswith("#"):
            return None

        self.error_handler.register_line(src)
        try:
            result = try_parse_line(src, right_assoc=self.right_assoc)
            if not result.ok:
                assert result.error is not None  # for mypy
                self.error_handler.throw(result.error)
                return None

            tree = result.unwrap()
            if self.is_command(tree):
                with self.error_handler:
                    self.handle_command(str(tree.value))
                return None

            with self.error_handler:
                if self.verbose:
                    print(f"[tree] >>> {format_tree(tree)}")
                value = self.evaluator.evaluate(tree)
                print(format_value(value))
                return value
            return None
        finally:
            self.error_handler.remove_line()


def start_repl(verbose: bool = False, right_assoc: bool = False, color: bool = True) -> None:
    print("rdcalc expression interpreter. Type ':help' for help, ':quit' to leave.")
    session = ReplSession(verbose=verbose, right_assoc=right_assoc, color=color)

    while not session.done:
        try:
            line = input(PROMPT)
            session.run_line(line)
        except (KeyboardInterrupt, EOFError):
            print()
            break

    print("Exiting rdcalc.")


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
