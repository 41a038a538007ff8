"""
rdcalc Parser

Turns one line of tokens into one expression tree.

The grammar is ambiguous as written (`E -> E op E`), so precedence is resolved
by giving each binding level its own routine. Each routine parses the next
tighter level for its operands and stops at the first operator it does not own,
pushing that token back for an enclosing routine to read:

    line      -> ':' word ...                          (command)
               | expr
    expr      -> term (('+' | '-') term)*               parse_expression
    term      -> call (('*' | '/') call)*               parse_term
    call      -> atom ('(' expr ')')?                   parse_call
    atom      -> integer | identifier | '(' expr ')'    parse_atom
               | 'func' '(' param ')' '{' expr '}'      parse_function
               | 'if' expr relop expr
                   'then' expr 'else' expr              parse_conditional

Commands:
    :define <identifier> <operator> <expr>   assignment-shaped binop
    :load ...                                placeholder identifier ":load"
    :<word>                                  identifier ":<word>", interpreted by the caller

Associativity
-------------
Chains of `+ -` and `* /` group left-to-right: `1 - 2 - 3` is `((1 - 2) - 3)`.
With `right_assoc=True` the right operand of each operator is parsed by
recursing into the same level instead, which reproduces the historical
right-grouping `(1 - (2 - 3))`.

Entry Points
------------
- `Parser.parse_line()`: Parse a full line (command or expression), requiring end of input.
- `Parser.parse_expression()`: Parse one expression at the additive level.
- `parse_line(source)`: Lex and parse a string, raising on error.
- `try_parse_line(source)`: Lex and parse a string, returning a `ParseResult`.

Raises
------
ParseError
    `IllegalTermError`, `MissingDelimiterError`, `MalformedConditionalError`
    or `MalformedCommandError`, raised where the problem is detected. Nothing
    is recovered; the partial tree is discarded.
"""

from __future__ import annotations

from rdcalc.rdcalc_ast import (
    ASTNode,
    new_binary,
    new_call,
    new_func,
    new_identifier,
    new_if,
    new_integer,
)
from rdcalc.rdcalc_constants import (
    COMMAND_MARKER,
    DEFINE_COMMAND,
    LOAD_COMMAND,
    additive_ops,
    multiplicative_ops,
)
from rdcalc.rdcalc_error import (
    IllegalTermError,
    MalformedCommandError,
    MalformedConditionalError,
    MissingDelimiterError,
    ParseError,
)
from rdcalc.rdcalc_lexer import Token, TokenStream


def describe(tok: Token) -> str:
    return "end of input" if tok.type == "EOF" else repr(tok.value)


class Parser:
    """
    Recursive-descent parser for a single rdcalc line.

    Attributes
    ----------
    stream : TokenStream
        Token source. The parser reads from it and pushes back at most one token at a time.
    right_assoc : bool
        When True, operator chains group right-to-left.
    """

    def __init__(self, stream: TokenStream, right_assoc: bool = False) -> None:
        self.stream: TokenStream = stream
        self.right_assoc: bool = right_assoc

    @classmethod
    def from_source(cls, source: str, right_assoc: bool = False) -> Parser:
        return cls(TokenStream.from_source(source), right_assoc=right_assoc)

    def expect(
        self, type_: str, error: type[ParseError], message: str
    ) -> Token:
        tok = self.stream.read()
        if tok.type != type_:
            raise error(f"{message}, got {describe(tok)}", tok)
        return tok

    def parse_line(self) -> ASTNode:
        """Parse a whole line: a command or an expression, followed by end of input."""
        first = self.stream.read()
        if first.type == "COLON":
            node = self.parse_command(first)
        else:
            self.stream.unread(first)
            node = self.parse_expression()

        tok = self.stream.read()
        if tok.type != "EOF":
            raise ParseError(f"Unexpected {describe(tok)} after expression", tok)
        return node

    def parse_command(self, marker: Token) -> ASTNode:
        """Parse the rest of a `:` command. `marker` is the already-consumed colon."""
        name_tok = self.stream.read()
        if name_tok.category not in ("identifier", "keyword"):
            raise MalformedCommandError(
                f"Expected command name after '{COMMAND_MARKER}', got {describe(name_tok)}",
                name_tok,
            )
        command = marker.value + name_tok.value

        if command == DEFINE_COMMAND:
            ident_tok = self.stream.read()
            if ident_tok.type != "IDENT":
                raise MalformedCommandError(
                    f"Expected identifier after {DEFINE_COMMAND}, got {describe(ident_tok)}",
                    ident_tok,
                )
            op_tok = self.stream.read()
            if op_tok.category != "operator":
                raise MalformedCommandError(
                    f"Expected operator after '{ident_tok.value}', got {describe(op_tok)}",
                    op_tok,
                )
            next_tok = self.stream.peek()
            if next_tok.type == "EOF":
                raise MalformedCommandError(
                    f"Expected expression after '{op_tok.value}'", next_tok
                )
            value = self.parse_expression()
            return new_binary(
                op_tok.value, new_identifier(ident_tok.value, ident_tok), value, op_tok
            )

        if command == LOAD_COMMAND:
            # file loading is not supported; the arguments are dropped
            while self.stream.read().type != "EOF":
                pass
            return new_identifier(LOAD_COMMAND, marker)

        return new_identifier(command, marker)

    def parse_expression(self) -> ASTNode:
        """Additive level: `term (('+' | '-') term)*`."""
        left = self.parse_term()
        while True:
            op_tok = self.stream.read()
            if op_tok.type not in additive_ops:
                self.stream.unread(op_tok)
                return left
            if self.right_assoc:
                return new_binary(op_tok.value, left, self.parse_expression(), op_tok)
            left = new_binary(op_tok.value, left, self.parse_term(), op_tok)

    def parse_term(self) -> ASTNode:
        """Multiplicative level: `call (('*' | '/') call)*`."""
        left = self.parse_call()
        while True:
            op_tok = self.stream.read()
            if op_tok.type not in multiplicative_ops:
                self.stream.unread(op_tok)
                return left
            if self.right_assoc:
                return new_binary(op_tok.value, left, self.parse_term(), op_tok)
            left = new_binary(op_tok.value, left, self.parse_call(), op_tok)

    def parse_call(self) -> ASTNode:
        """An atom optionally applied to one parenthesized argument."""
        callee = self.parse_atom()
        tok = self.stream.read()
        if tok.type != "LPAREN":
            self.stream.unread(tok)
            return callee

        argument = self.parse_expression()
        self.expect("RPAREN", MissingDelimiterError, "Expected ')' to close call")
        return new_call(callee, argument, tok)

    def parse_atom(self) -> ASTNode:
        tok = self.stream.read()

        if tok.type == "NUMBER":
            return new_integer(int(tok.value), tok)
        if tok.type == "IDENT":
            return new_identifier(tok.value, tok)
        if tok.type == "LPAREN":
            inner = self.parse_expression()
            self.expect("RPAREN", MissingDelimiterError, "Expected ')'")
            return inner
        if tok.type == "FUNC":
            return self.parse_function(tok)
        if tok.type == "IF":
            return self.parse_conditional(tok)

        raise IllegalTermError(
            f"Illegal term in expression: {describe(tok)}", tok
        )

    def parse_function(self, func_tok: Token) -> ASTNode:
        """`func (param) { body }`, entered after the `func` keyword."""
        self.expect("LPAREN", MissingDelimiterError, "Expected '(' after 'func'")
        param_tok = self.stream.read()
        if param_tok.type != "IDENT":
            raise IllegalTermError(
                f"Expected parameter name, got {describe(param_tok)}", param_tok
            )
        self.expect(
            "RPAREN", MissingDelimiterError, "Expected ')' after parameter"
        )
        self.expect("LBRACE", MissingDelimiterError, "Expected '{' before function body")
        body = self.parse_expression()
        self.expect("RBRACE", MissingDelimiterError, "Expected '}' after function body")
        return new_func(param_tok.value, body, func_tok)

    def parse_conditional(self, if_tok: Token) -> ASTNode:
        """`if left relop right then expr else expr`, entered after the `if` keyword."""
        left = self.parse_branch("condition")

        relop_tok = self.stream.read()
        if relop_tok.type == "EOF":
            raise MalformedConditionalError(
                "Expected relational operator in 'if'", relop_tok
            )
        right = self.parse_branch("right operand")

        self.expect_keyword("THEN", "then")
        then_branch = self.parse_branch("'then' branch")
        self.expect_keyword("ELSE", "else")
        else_branch = self.parse_branch("'else' branch")

        return new_if(left, relop_tok.value, right, then_branch, else_branch, if_tok)

    def parse_branch(self, what: str) -> ASTNode:
        tok = self.stream.peek()
        if tok.type == "EOF":
            raise MalformedConditionalError(f"Missing {what} in 'if'", tok)
        return self.parse_expression()

    def expect_keyword(self, type_: str, word: str) -> None:
        tok = self.stream.read()
        if tok.type != type_:
            raise MalformedConditionalError(
                f"Expected '{word}' in 'if', got {describe(tok)}", tok
            )


class ParseResult:
    """Outcome of parsing one line: either a tree or the error that stopped it.

    Attributes:
        tree (ASTNode | None): The parsed tree on success.
        error (ParseError | None): The parse error on failure.
    """

    def __init__(
        self, tree: ASTNode | None = None, error: ParseError | None = None
    ) -> None:
        self.tree = tree
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ASTNode:
        """Returns the tree, re-raising the parse error on failure."""
        if self.error is not None:
            raise self.error
        assert self.tree is not None  # for mypy
        return self.tree

    def __repr__(self) -> str:
        if self.ok:
            return f"ParseResult(tree={self.tree!r})"
        return f"ParseResult(error={self.error!r})"


def parse_line(source: str, right_assoc: bool = False) -> ASTNode:
    return Parser.from_source(source, right_assoc=right_assoc).parse_line()


def try_parse_line(source: str, right_assoc: bool = False) -> ParseResult:
    """Parses `source`, returning the tree or the error instead of raising.

    Nesting deeper than the interpreter's recursion limit is reported as a
    `ParseError` like any other malformed line.
    """
    try:
        return ParseResult(tree=parse_line(source, right_assoc=right_assoc))
    except ParseError as e:
        return ParseResult(error=e)
    except RecursionError:
        return ParseResult(error=ParseError("Expression is nested too deeply"))
