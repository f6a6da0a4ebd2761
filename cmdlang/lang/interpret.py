"""Tree-walking interpreter for cmdlang.

Execution is a depth-first walk in declaration order. State is one global variable mapping (if bodies do not open a
scope) and a cursor into the supplied inputs, which only moves forward.
"""

import operator

from cmdlang.lang.error import InputExhausted, NumberFormat, UndefinedVariable, UnknownOperator
from cmdlang.lang.nodes import Assign, BinaryOp, Identifier, If, Input, NumberLiteral, Print

# comparisons yield 1/0
OPERATORS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    ">": lambda a, b: int(a > b),
    "<": lambda a, b: int(a < b),
    "==": lambda a, b: int(a == b),
    "!=": lambda a, b: int(a != b),
    ">=": lambda a, b: int(a >= b),
    "<=": lambda a, b: int(a <= b),
}


def print_value(value):
    print(value)


class Interpreter:
    """Executes Programs against one variable mapping and input cursor. Calling interpret several times on one
    Interpreter keeps that state (used by the shell); use a fresh Interpreter for an independent run.
    """

    def __init__(self, inputs=(), output=None):
        self.inputs = tuple(inputs)
        self.cursor = 0
        self.variables = {}
        self.output = output if output is not None else print_value
        self.results = []  # every value printed so far

    def interpret(self, program):
        """Runs program's statements in order and returns the values they printed."""
        start = len(self.results)
        for statement in program.statements:
            self.execute(statement)
        return self.results[start:]

    def execute(self, statement):
        match statement:
            case Assign(identifier=name, expr=expr):
                self.variables[name] = self.evaluate(expr)
            case Print(expr=expr):
                self.emit(self.evaluate(expr))
            case Input(identifier=name):
                self.variables[name] = self.read_input(statement)
            case If(condition=condition, body=body):
                if self.evaluate(condition):
                    for stmt in body:
                        self.execute(stmt)
            case _:
                raise TypeError(f"not a statement: {statement!r}")

    def evaluate(self, expression):
        """Returns the integer value of expression."""
        match expression:
            case BinaryOp(operator=op, left=left, right=right):
                lhs = self.evaluate(left)
                rhs = self.evaluate(right)
                if op not in OPERATORS:
                    raise UnknownOperator(expression)
                return OPERATORS[op](lhs, rhs)
            case Identifier(name=name):
                if name not in self.variables:
                    raise UndefinedVariable(expression)
                return self.variables[name]
            case NumberLiteral(text=text):
                return self.integer(expression, text)
            case _:
                raise TypeError(f"not an expression: {expression!r}")

    @staticmethod
    def integer(node, text):
        """Parses the leading digit run of text, so "3.14" is 3. There is no floating point."""
        digits = ""
        for char in text:
            if not char.isascii() or not char.isdigit():
                break
            digits += char
        try:
            return int(digits)
        except ValueError:  # empty, or past the interpreter's digit limit
            raise NumberFormat(node)

    def read_input(self, statement):
        if self.cursor >= len(self.inputs):
            raise InputExhausted(statement, len(self.inputs))
        value = self.inputs[self.cursor]
        self.cursor += 1
        return value

    def emit(self, value):
        self.results.append(value)
        self.output(value)


def interpret(program, inputs=(), output=None):
    """Runs program on a fresh Interpreter. Each printed value is passed to output (default: printed on its own line).
    Returns the printed values in order.
    """
    return Interpreter(inputs, output).interpret(program)
