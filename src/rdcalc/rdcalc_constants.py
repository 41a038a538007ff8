"""
Token tables shared by the rdcalc lexer, parser and evaluator.

`token_hashmap` maps every reserved lexeme (keywords, operators, punctuation)
to its canonical token type. Anything not listed here is lexed as `IDENT`,
`NUMBER` or `ERROR`.
"""

token_hashmap: dict[str, str] = {
    # Keywords
    "func": "FUNC",
    "if": "IF",
    "then": "THEN",
    "else": "ELSE",
    # Operators
    "+": "PLUS",
    "-": "SUB",
    "*": "MULT",
    "/": "DIV",
    "=": "ASSIGN",
    "<": "LT",
    ">": "GT",
    "<=": "LE",
    ">=": "GE",
    "!=": "NE",
    # Punctuation
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    ":": "COLON",
}

keyword_tokens: frozenset[str] = frozenset({"FUNC", "IF", "THEN", "ELSE"})

operator_tokens: frozenset[str] = frozenset(
    {"PLUS", "SUB", "MULT", "DIV", "ASSIGN", "LT", "GT", "LE", "GE", "NE"}
)

punctuation_tokens: frozenset[str] = frozenset(
    {"LPAREN", "RPAREN", "LBRACE", "RBRACE", "COLON"}
)

additive_ops: frozenset[str] = frozenset({"PLUS", "SUB"})
multiplicative_ops: frozenset[str] = frozenset({"MULT", "DIV"})

relational_ops: frozenset[str] = frozenset({"<", ">", "=", "<=", ">=", "!="})

COMMAND_MARKER = ":"
DEFINE_COMMAND = ":define"
LOAD_COMMAND = ":load"
