"""
rdcalc CLI Entrypoint.

Evaluates expressions given on the command line, or starts the interactive
REPL when none are given.

Example usage:
    rdcalc
    rdcalc -s "2 * 3 + 4"
    rdcalc -s ":define sq = func (n) { n * n }" -s "sq(7)"
    rdcalc --tree -s "1 - 2 - 3"
    rdcalc --tree --right-assoc -s "1 - 2 - 3"

Functions:
    run_rdcalc(lines: list[str], tree: bool = False, right_assoc: bool = False,
               color: bool = True) -> int:
        Parses (and unless `tree` is set, evaluates) each line in one shared environment.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and dispatches to `run_rdcalc` or the REPL.
"""

import argparse
import sys

from rdcalc.rdcalc_error import ErrorHandler
from rdcalc.rdcalc_eval import Evaluator
from rdcalc.rdcalc_parser import parse_line
from rdcalc.rdcalc_print import format_tree, format_value


def run_rdcalc(
    lines: list[str],
    tree: bool = False,
    right_assoc: bool = False,
    color: bool = True,
) -> int:
    """
    Parse and evaluate `lines` in order, printing one result per line.

    Args:
        lines (list[str]): Source lines. Commands such as `:define` are allowed.
        tree (bool): If True, print each parse tree instead of evaluating it.
        right_assoc (bool): If True, operator chains group right-to-left.
        color (bool): If False, error messages are printed without colour.

    Returns:
        int: 0 on success, 1 if any line failed to parse or evaluate.
    """
    evaluator = Evaluator()
    handler = ErrorHandler(color=color)

    for line in lines:
        handler.register_line(line)
        with handler:
            node = parse_line(line, right_assoc=right_assoc)
            if tree:
                print(format_tree(node))
            else:
                print(format_value(evaluator.evaluate(node)))
        if handler.errors:
            return 1
        handler.remove_line()
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the rdcalc CLI.

    Supported flags:
        - `-s`, `--string`: A line to evaluate (repeatable).
        - `-t`, `--tree`: Print parse trees instead of values.
        - `--right-assoc`: Group operator chains right-to-left.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Verbose REPL mode (prints each parse tree).
        - `--no-color`: Disable coloured error output.
    """
    parser = argparse.ArgumentParser(prog="rdcalc")
    parser.add_argument(
        "-s",
        "--string",
        dest="lines",
        action="append",
        default=[],
        metavar="EXPR",
        help="Line to evaluate; may be given more than once",
    )
    parser.add_argument(
        "-t", "--tree", action="store_true", help="Print parse trees instead of values"
    )
    parser.add_argument(
        "--right-assoc",
        action="store_true",
        help="Group chains like 1 - 2 - 3 right-to-left",
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Disable coloured error output"
    )

    args = parser.parse_args(argv)

    if args.repl or not args.lines:
        from rdcalc.rdcalc_repl import start_repl

        start_repl(
            verbose=args.verbose,
            right_assoc=args.right_assoc,
            color=not args.no_color,
        )
        return 0

    return run_rdcalc(
        args.lines,
        tree=args.tree,
        right_assoc=args.right_assoc,
        color=not args.no_color,
    )


if __name__ == "__main__":
    sys.exit(main())
