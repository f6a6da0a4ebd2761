"""Session control for cmdlang. Loads a program file (and its inputs) and runs it through the lexer, parser and
interpreter, either in file mode or command-line mode.
"""

import os

from cmdlang.lang.error import LangError
from cmdlang.lang.interpret import Interpreter
from cmdlang.lang.lexical import tokenize
from cmdlang.lang.parser import parse


class Session:
    """Governs a cmdlang session: one variable mapping and input cursor shared by everything added to it."""
    SH_FILE = "<in>"         # command-line interpreter filename
    INPUT_SUFFIX = ".input"  # inputs for prog.code default to prog.input

    def __init__(self, error_handler, path, input_path=None, cmd_line=False, output=None):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.tokens = []   # tokens of the last source added
        self.to_run = []   # Programs added but not run yet

        if self.cmd_line:
            self.error_handler.fatal = False

        if input_path is None and path != Session.SH_FILE:
            input_path = Session.default_input_path(path)
        self.input_path = input_path

        inputs = Session.read_inputs(input_path) if input_path else []
        self.interpreter = Interpreter(inputs, output)

        if path != Session.SH_FILE:
            self.add(Session.read_file(path))

        elif not cmd_line:
            raise LangError("'<in>' is a reserved filename")

    @staticmethod
    def read_file(path):
        try:
            with open(path, "r", encoding="utf-8") as file:
                return file.read()
        except (OSError, UnicodeDecodeError):
            raise LangError("'{}' could not be opened", path, diagnosis=False)

    @staticmethod
    def default_input_path(path):
        """Returns path with its suffix swapped for INPUT_SUFFIX if that file exists, else None."""
        input_path = os.path.splitext(path)[0] + Session.INPUT_SUFFIX
        return input_path if os.path.isfile(input_path) else None

    @staticmethod
    def read_inputs(path):
        """Returns the whitespace-separated integers in file path, in order."""
        inputs = []
        for line_num, line in enumerate(Session.read_file(path).splitlines(), 1):
            for word in line.split():
                try:
                    inputs.append(int(word))
                except ValueError:
                    raise LangError("{}, line {}: '{}' is not an integer", (path, str(line_num), word),
                                    diagnosis=False)
        return inputs

    @property
    def variables(self):
        return self.interpreter.variables

    def add(self, source):
        """Tokenizes and parses source, queueing it to be run. Raises any LexError/ParseError encountered."""
        self.error_handler.register_source(self.path, source)  # in case error is raised

        self.tokens = tokenize(source)
        program = parse(self.tokens)
        self.to_run.append(program)
        return program

    def run(self):
        """Runs every queued Program in order and returns the values printed. Will raise any errors encountered; the
        queue is emptied either way.
        """
        printed = []
        try:
            while self.to_run:
                printed += self.interpreter.interpret(self.to_run.pop(0))
        finally:
            self.to_run.clear()
        return printed
