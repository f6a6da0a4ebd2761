"""Lexical analysis for cmdlang. Converts source text into a flat list of Tokens terminated by an END token.

Tokens can be loosely defined as follows:

```
<identifier> ::= <letter> (<letter> | <digit>)*   ; reclassified if it spells a keyword
<keyword>    ::= "print" | "input" | "if" | "then" | "endif"
<number>     ::= <digit> (<digit> | ".")*         ; kept verbatim: "3.14" is one token
<assign>     ::= "="
<compare>    ::= "==" | "!=" | ">=" | "<=" | ">" | "<"
<arithmetic> ::= "+" | "-" | "*"
<punct>      ::= ";" | "(" | ")"
```

Letters and digits are ASCII only. Whitespace separates tokens and is otherwise ignored.
"""

import string
from dataclasses import dataclass, field
from enum import Enum

from cmdlang.lang.error import MalformedComparison, UnrecognizedCharacter


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    NUMBER = "number"
    ASSIGN = "'='"
    COMPARE_OP = "comparison operator"
    ARITH_OP = "arithmetic operator"
    PRINT = "'print'"
    INPUT = "'input'"
    IF = "'if'"
    THEN = "'then'"
    ENDIF = "'endif'"
    SEMICOLON = "';'"
    LPAREN = "'('"
    RPAREN = "')'"
    END = "end of input"

    def __str__(self):
        return self.value


KEYWORDS = {
    "print": TokenKind.PRINT,
    "input": TokenKind.INPUT,
    "if": TokenKind.IF,
    "then": TokenKind.THEN,
    "endif": TokenKind.ENDIF,
}

PUNCTUATION = {
    ";": TokenKind.SEMICOLON,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
WHITESPACE = frozenset(string.whitespace)


@dataclass(frozen=True)
class Token:
    """A lexical token. Position (line/column are 1-based, offset is 0-based) is only used for diagnostics."""
    kind: TokenKind
    text: str
    line: int = field(default=1, compare=False)
    column: int = field(default=1, compare=False)
    offset: int = field(default=0, compare=False)

    def __repr__(self):
        if self.text:
            return f"{self.kind.name}({self.text})"
        return self.kind.name


class Lexer:
    """Single left-to-right scan over source. One-shot: call tokenize once per Lexer."""

    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    @property
    def current_char(self):
        return self.peek(0)

    def peek(self, n=1):
        idx = self.pos + n
        if idx >= len(self.source):
            return None
        return self.source[idx]

    def advance(self):
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1

    def tokenize(self):
        """Returns list of Tokens in source order, always terminated by an END token."""
        tokens = []
        while self.current_char is not None:
            char = self.current_char
            if char in WHITESPACE:
                self.advance()
            elif char in LETTERS:
                tokens.append(self.read_identifier())
            elif char in DIGITS:
                tokens.append(self.read_number())
            else:
                tokens.append(self.read_operator())

        tokens.append(Token(TokenKind.END, "", self.line, self.column, self.pos))
        return tokens

    def read_run(self, allowed):
        """Consumes characters while they are in allowed, returns (text, line, column, offset) of the run."""
        start, line, column = self.pos, self.line, self.column
        while self.current_char is not None and self.current_char in allowed:
            self.advance()
        return self.source[start:self.pos], line, column, start

    def read_identifier(self):
        text, *position = self.read_run(LETTERS | DIGITS)
        return Token(KEYWORDS.get(text, TokenKind.IDENTIFIER), text, *position)

    def read_number(self):
        # verbatim: the interpreter decides what the literal is worth
        text, *position = self.read_run(DIGITS | {"."})
        return Token(TokenKind.NUMBER, text, *position)

    def read_operator(self):
        char = self.current_char
        position = (self.line, self.column, self.pos)

        if char == "=":
            if self.peek() == "=":
                return self.emit(TokenKind.COMPARE_OP, "==", position)
            return self.emit(TokenKind.ASSIGN, "=", position)

        if char in "<>!":
            if self.peek() == "=":
                return self.emit(TokenKind.COMPARE_OP, char + "=", position)
            if char == "!":
                raise MalformedComparison(self.pos, self.line, self.column)
            return self.emit(TokenKind.COMPARE_OP, char, position)

        if char in "+-*":
            return self.emit(TokenKind.ARITH_OP, char, position)

        if char in PUNCTUATION:
            return self.emit(PUNCTUATION[char], char, position)

        raise UnrecognizedCharacter(char, self.pos, self.line, self.column)

    def emit(self, kind, text, position):
        for _ in text:
            self.advance()
        return Token(kind, text, *position)


def tokenize(source):
    """Returns the tokens of source, terminated by an END token. Raises a LexError on the first bad character."""
    return Lexer(source).tokenize()
