"""Recursive-descent parser for cmdlang. One token of lookahead, no backtracking.

```
<program>    ::= <statement>* END
<statement>  ::= <if_stmt> | <simple> ";"
<if_stmt>    ::= "if" <expression> "then" <statement>* "endif" ";"
<simple>     ::= <identifier> "=" <expression>
               | "print" "(" <expression> ")"
               | "input" "(" <identifier> ")"
<expression> ::= <primary> ((<compare> | <arithmetic>) <primary>)*
<primary>    ::= <identifier> | <number> | "(" <expression> ")"
```

Note that expressions have no operator precedence: every binary operator, comparison or arithmetic, folds left to
right as it is read. `a + b == c * d` is `((a + b) == c) * d`. This is how the language is defined, use parentheses
to group differently.
"""

from cmdlang.lang.error import UnexpectedEndOfInput, UnexpectedToken
from cmdlang.lang.lexical import TokenKind, tokenize
from cmdlang.lang.nodes import Assign, BinaryOp, Identifier, If, Input, NumberLiteral, Print, Program

OPERATORS = (TokenKind.COMPARE_OP, TokenKind.ARITH_OP)


class Parser:
    """Builds a Program from a list of Tokens terminated by an END token."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    @property
    def current_token(self):
        return self.tokens[self.pos]

    def fail(self, expected):
        """Raises the error for current_token not being what was expected."""
        if self.current_token.kind is TokenKind.END:
            raise UnexpectedEndOfInput(self.current_token, expected)
        raise UnexpectedToken(self.current_token, expected)

    def consume(self, kind):
        """Returns current token and moves past it, but only if it is of the expected kind."""
        token = self.current_token
        if token.kind is not kind:
            self.fail(kind)
        if kind is not TokenKind.END:
            self.pos += 1
        return token

    # ---------- STATEMENTS ----------
    def parse(self):
        statements = []
        while self.current_token.kind is not TokenKind.END:
            statements.append(self.statement())
        self.consume(TokenKind.END)
        return Program(tuple(statements), line=1, column=1)

    def statement(self):
        if self.current_token.kind is TokenKind.IF:
            return self.if_statement()

        stmt = self.simple_statement()
        self.consume(TokenKind.SEMICOLON)
        return stmt

    def if_statement(self):
        tok = self.consume(TokenKind.IF)
        condition = self.expression()
        self.consume(TokenKind.THEN)

        body = []
        while self.current_token.kind is not TokenKind.ENDIF:
            if self.current_token.kind is TokenKind.END:
                self.fail(TokenKind.ENDIF)
            body.append(self.statement())

        self.consume(TokenKind.ENDIF)
        self.consume(TokenKind.SEMICOLON)
        return If(condition, tuple(body), line=tok.line, column=tok.column)

    def simple_statement(self):
        kind = self.current_token.kind
        if kind is TokenKind.IDENTIFIER:
            return self.assign_statement()
        if kind is TokenKind.PRINT:
            return self.print_statement()
        if kind is TokenKind.INPUT:
            return self.input_statement()
        self.fail("statement")

    def assign_statement(self):
        tok = self.consume(TokenKind.IDENTIFIER)
        self.consume(TokenKind.ASSIGN)
        expr = self.expression()
        return Assign(tok.text, expr, line=tok.line, column=tok.column)

    def print_statement(self):
        tok = self.consume(TokenKind.PRINT)
        self.consume(TokenKind.LPAREN)
        expr = self.expression()
        self.consume(TokenKind.RPAREN)
        return Print(expr, line=tok.line, column=tok.column)

    def input_statement(self):
        tok = self.consume(TokenKind.INPUT)
        self.consume(TokenKind.LPAREN)
        name = self.consume(TokenKind.IDENTIFIER).text
        self.consume(TokenKind.RPAREN)
        return Input(name, line=tok.line, column=tok.column)

    # ---------- EXPRESSIONS ----------
    def expression(self):
        # flat chain: no precedence between operators
        left = self.primary()
        while self.current_token.kind in OPERATORS:
            op = self.consume(self.current_token.kind)
            right = self.primary()
            left = BinaryOp(op.text, left, right, line=op.line, column=op.column)
        return left

    def primary(self):
        tok = self.current_token
        if tok.kind is TokenKind.IDENTIFIER:
            self.consume(TokenKind.IDENTIFIER)
            return Identifier(tok.text, line=tok.line, column=tok.column)
        if tok.kind is TokenKind.NUMBER:
            self.consume(TokenKind.NUMBER)
            return NumberLiteral(tok.text, line=tok.line, column=tok.column)
        if tok.kind is TokenKind.LPAREN:
            self.consume(TokenKind.LPAREN)
            expr = self.expression()
            self.consume(TokenKind.RPAREN)
            return expr
        self.fail("expression")


def parse(tokens):
    """Returns the Program for tokens. Raises a ParseError on the first token that doesn't fit the grammar."""
    return Parser(tokens).parse()


def parse_source(source):
    """Tokenizes and parses source."""
    return parse(tokenize(source))
