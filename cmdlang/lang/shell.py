"""Handles interactive/command-line mode for cmdlang interpreter. Uses cmd as backend."""

import cmd

from cmdlang.lang.error import LexError
from cmdlang.lang.lexical import TokenKind, tokenize


class Shell(cmd.Cmd):
    """cmdlang interpreter shell."""
    intro = "cmdlang interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""

    @staticmethod
    def is_incomplete(source):
        """Whether source needs more lines: it doesn't end with ';' or has an if without its endif. Lexing errors are
        left for the session to report.
        """
        try:
            tokens = tokenize(source)
        except LexError:
            return False

        kinds = [token.kind for token in tokens[:-1]]
        if not kinds:
            return False

        depth = kinds.count(TokenKind.IF) - kinds.count(TokenKind.ENDIF)
        return depth > 0 or kinds[-1] is not TokenKind.SEMICOLON

    def default(self, line):
        """Executes arbitrary cmdlang statements."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source = self._tmp_line + line + "\n"

            if Shell.is_incomplete(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if source.isspace():
                return

            self.sess.add(source)
            self.sess.run()

    def onecmd(self, line):
        # inside a continuation every line is program text
        if self._tmp_line:
            return self.default(line)
        return super().onecmd(line)

    def do_help(self, arg):
        """Prints a short intro to the language instead of the command list."""
        if arg:
            return self.default(f"help {arg}")
        print("Welcome to the cmdlang interpreter!\n\n"
              "Statements end with ';'. Try 'x = 2;' then 'print(x * 3);'.\n"
              "Read the next supplied input with 'input(y);'. Conditionals are written\n"
              "'if x > 1 then print(x); endif;' and may span several lines.\n\n"
              "Operators have no precedence: '1 + 2 * 3' is '(1 + 2) * 3'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        if arg:
            return self.default(f"EOF {arg}")
        print()
        return self.do_exit("")

    def do_exit(self, arg):
        """Exits interpreter. Anything after 'exit' means it is a variable, e.g. 'exit = 1;'."""
        if arg:
            return self.default(f"exit {arg}")
        return True
