"""Error handling for cmdlang. Only LangErrors should be encountered during running: if another type of error is raised
and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every stage fails fast: the first LangError stops the run and is reported by ErrorHandler.
"""

import sys

from termcolor import colored


class LangError(Exception):
    """Templates an error message so that it can be reported with a source diagnosis. Message snippets are passed
    separately from msg so that they can be highlighted.
    """

    def __init__(self, msg, snippets=None, line=None, column=None, length=1, diagnosis=True, internal=False):
        if snippets is None:
            snippets = []
        if not isinstance(snippets, (list, tuple)):
            snippets = [snippets]
        snippets = [str(snippet) for snippet in snippets]

        self.plain = msg.format(*snippets)
        self.msg = msg.format(*(colored(snippet, attrs=["bold"]) for snippet in snippets))  # bold snippets
        super().__init__(self.plain)

        self.line = line      # 1-based, None if the error has no source position
        self.column = column  # 1-based
        self.length = max(length, 1)

        self.diagnosis = diagnosis
        self.internal = internal


class LexError(LangError):
    """Raised by the lexer."""


class UnrecognizedCharacter(LexError):

    def __init__(self, char, position, line, column):
        super().__init__("unrecognized character '{}'", char, line=line, column=column)
        self.char = char
        self.position = position  # 0-based offset into the source


class MalformedComparison(LexError):

    def __init__(self, position, line, column):
        super().__init__("'{}' must be followed by '='", "!", line=line, column=column)
        self.position = position


class ParseError(LangError):
    """Raised by the parser."""


class UnexpectedToken(ParseError):

    def __init__(self, found, expected):
        super().__init__("expected {}, got '{}'", (expected, found.text), line=found.line, column=found.column,
                         length=len(found.text))
        self.found = found
        self.expected = expected


class UnexpectedEndOfInput(ParseError):

    def __init__(self, end, expected):
        super().__init__("unexpected end of input, expected {}", (expected,), line=end.line, column=end.column)
        self.expected = expected


class ExecutionError(LangError):
    """Raised by the interpreter. Carries the position of the offending node."""

    def __init__(self, msg, snippets, node, length=1):
        super().__init__(msg, snippets, line=node.line, column=node.column, length=length)
        self.node = node


class UndefinedVariable(ExecutionError):

    def __init__(self, node):
        super().__init__("'{}' is used before it is assigned", node.name, node, length=len(node.name))
        self.name = node.name


class InputExhausted(ExecutionError):

    def __init__(self, node, available):
        msg = "input({}) has no value left ({} supplied)"
        super().__init__(msg, (node.identifier, str(available)), node, length=len("input"))
        self.available = available


class UnknownOperator(ExecutionError):

    def __init__(self, node):
        super().__init__("unknown operator '{}'", node.operator, node)
        self.operator = node.operator


class NumberFormat(ExecutionError):

    def __init__(self, node):
        super().__init__("'{}' is not an integer", node.text, node, length=len(node.text))
        self.text = node.text


class ErrorHandler:
    """Context manager that reports LangErrors with a diagnosis of the offending source line. If fatal, the first
    error exits with status 1; otherwise the error is reported and suppressed.
    """
    ERROR = "red"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.path = None
        self.lines = []

    def register_source(self, path, source):
        """Registers the source that subsequent errors refer to. Should be called before parsing/running it."""
        self.path = path
        self.lines = source.splitlines()

    def source_line(self, line):
        """Returns source line (1-based) or None if it isn't registered."""
        if line is None or not 0 < line <= len(self.lines):
            return None
        return self.lines[line - 1]

    def diagnose(self, error):
        """Returns offending source line with the offending span highlighted and marked."""
        text = self.source_line(error.line)
        start = error.column - 1
        end = min(start + error.length, max(len(text), start + 1))

        diagnosis = "  " + text[:start]
        diagnosis += colored(text[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += text[end:] + "\n"

        diagnosis += "  " + "".join(char if char == "\t" else " " for char in text[:start])
        diagnosis += colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def throw(self, error):
        """Reports error, a LangError, and exits if fatal."""
        location = self.path or "<in>"
        if error.line is not None:
            location += f":{error.line}:{error.column}"

        error_msg = colored(f"{location}: ", attrs=["bold"])
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.diagnosis and self.source_line(error.line) is not None:
            print(self.diagnose(error))

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LangError("keyboard interrupt", diagnosis=False))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is not None and issubclass(exc_type, LangError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LangError("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
