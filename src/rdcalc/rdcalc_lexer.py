"""
Lexical analyzer and token source for the rdcalc expression language.

This module converts one line of raw text into tokens and hands them to the
parser one at a time:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: A single token with a canonical type, its literal text and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.
    TokenStream: The parser's token source, with a single pushback slot.

Features:
    - Skips whitespace and single-line comments (`#`)
    - Longest-match recognition of operators (`<=` before `<`)
    - Recognizes integers, identifiers, keywords, operators and punctuation
    - Unknown characters become `ERROR` tokens; lexing never raises

Example:
    >>> stream = TokenStream.from_source("2 * 3")
    >>> stream.read()
    Token(NUMBER, 2)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - TokenStream
    - tokenize
"""

from typing import Any

from rdcalc.rdcalc_constants import (
    keyword_tokens,
    operator_tokens,
    punctuation_tokens,
    token_hashmap,
)
from rdcalc.rdcalc_error import PushbackError

DIGITS = "0123456789"


class CharacterStream:
    """
    Reads one line of rdcalc source a character at a time.

    Positions are tracked so that every token, and therefore every parse
    error, can point back at the column it came from.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        """
        Initializes the character stream.

        Args:
            source (str): The text to read, usually a single REPL line.
            position (int, optional): Starting index. Defaults to 0.
            line (int, optional): Starting line number. Defaults to 1.
            column (int, optional): Starting column number. Defaults to 1.
        """
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character, advancing line/column.

        Returns:
            str: The consumed character.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Looks ahead without consuming anything.

        Args:
            offset (int, optional): How far past the current position to look. Defaults to 0.

        Returns:
            str: The character found there, or "" outside the source.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def current(self) -> str | None:
        """Returns the character under the cursor.

        Returns:
            str | None: That character, or None once the source is exhausted.
        """
        return self.source[self.position] if self.position < len(self.source) else None

    def end_of_file(self) -> bool:
        """Returns True once every character of the line has been consumed."""
        return self.position >= len(self.source)


class Token:
    """One lexeme of an rdcalc line.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'NUMBER', 'PLUS', 'EOF').
        value (str): The literal text of the token; "" for EOF.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        """Initializes a Token.

        Args:
            type_ (str): A token type from `token_hashmap`, or IDENT, NUMBER, ERROR or EOF.
            value (str): The matched text.
            line (int, optional): Line of the first character (default is 0).
            col (int, optional): Column of the first character (default is 0).
        """
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    @property
    def category(self) -> str:
        """Classifies the token for the parser and for error messages.

        Returns:
            str: One of integer, identifier, keyword, operator, punctuation, eof or error.
        """
        if self.type == "NUMBER":
            return "integer"
        if self.type == "IDENT":
            return "identifier"
        if self.type in keyword_tokens:
            return "keyword"
        if self.type in operator_tokens:
            return "operator"
        if self.type in punctuation_tokens:
            return "punctuation"
        if self.type == "EOF":
            return "eof"
        return "error"

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        """Tokens are equal when type, text and position all match.

        Args:
            other (Any): The object to compare against.

        Returns:
            bool: True if equal, False otherwise.
        """
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


class Lexer:
    """Turns a CharacterStream into rdcalc tokens, one per `next_token` call.

    The lexer never raises on bad input: characters it cannot classify become
    `ERROR` tokens and the parser decides what to do with them.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        """Initializes the Lexer.

        Args:
            stream (CharacterStream): The line to tokenize.
        """
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips blanks, tabs, newlines and `#` comments."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest operator or punctuation mark at the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(2):  # longest symbol in the table
            ch = self.stream.peek(i)
            if ch == "" or ch.isalnum():
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns an `EOF` token, repeatedly, once the source is exhausted.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token("EOF", "", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isalpha() or ch == "_":
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            if ident in token_hashmap:
                return Token(token_hashmap[ident], ident, line, col)
            return Token("IDENT", ident, line, col)

        # 2. Integer
        if ch in DIGITS:
            num = ""
            while not self.stream.end_of_file() and self.peek() in DIGITS:
                num += self.advance()
            return Token("NUMBER", num, line, col)

        # 3. Operator or punctuation
        token = self.match_operator()
        if token:
            return token

        # 4. Unknown character
        return Token("ERROR", self.advance(), line, col)


def tokenize(source: str) -> list[Token]:
    """Lexes `source` completely, returning every token except the trailing EOF."""
    lexer = Lexer(CharacterStream(source))
    tokens = []
    while True:
        tok = lexer.next_token()
        if tok.type == "EOF":
            break
        tokens.append(tok)
    return tokens


class TokenStream:
    """Token source consumed by the parser.

    Tokens are pulled from the lexer on demand. A single pushback slot lets a
    parse routine return the token it just read so that an enclosing routine
    reads it again.

    Attributes:
        lexer (Lexer): Supplies fresh tokens.
        pending (Token | None): The pushed-back token, if any.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.pending: Token | None = None

    @classmethod
    def from_source(cls, source: str) -> "TokenStream":
        return cls(Lexer(CharacterStream(source)))

    def read(self) -> Token:
        if self.pending is not None:
            tok, self.pending = self.pending, None
            return tok
        return self.lexer.next_token()

    def unread(self, token: Token) -> None:
        """Pushes `token` back so the next `read()` returns it.

        Raises:
            PushbackError: If a token is already waiting in the slot.
        """
        if self.pending is not None:
            raise PushbackError(
                f"Cannot push back {token!r}: {self.pending!r} is already pending"
            )
        self.pending = token

    def peek(self) -> Token:
        tok = self.read()
        self.unread(tok)
        return tok


__all__ = ["CharacterStream", "Lexer", "Token", "TokenStream", "tokenize"]
