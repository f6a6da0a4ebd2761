import os
import unittest
from contextlib import redirect_stdout
from io import StringIO
from unittest import mock

from cmdlang.lang.error import ErrorHandler, LangError, UnexpectedEndOfInput, UnexpectedToken, UndefinedVariable
from cmdlang.lang.interpret import interpret
from cmdlang.lang.lexical import TokenKind
from cmdlang.lang.parser import parse_source


@mock.patch.dict(os.environ, {"NO_COLOR": "1"})
class ErrorHandlerTestCase(unittest.TestCase):

    def report(self, source, fatal=False, run=False):
        """Returns what the handler prints for the first error in source."""
        out = StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=fatal) as handler:
                handler.register_source("prog.code", source)
                program = parse_source(source)
                if run:
                    interpret(program, output=lambda value: None)
        return out.getvalue()

    def test_parse_error_diagnosis(self):
        report = self.report("x = 1;\nprint 2;")
        lines = report.splitlines()
        self.assertEqual("prog.code:2:7: error: expected '(', got '2'", lines[0])
        self.assertEqual("  print 2;", lines[1])
        self.assertEqual("        ^", lines[2])

    def test_runtime_error_diagnosis(self):
        report = self.report("x = 1;\nprint(x + total);", run=True)
        lines = report.splitlines()
        self.assertEqual("prog.code:2:11: error: 'total' is used before it is assigned", lines[0])
        self.assertEqual("  print(x + total);", lines[1])
        self.assertEqual("            ^~~~~", lines[2])

    def test_lex_error(self):
        report = self.report("x = 1 % 2;")
        self.assertTrue(report.startswith("prog.code:1:7: error: unrecognized character '%'"), report)

    def test_end_of_input(self):
        report = self.report("print(1)")
        self.assertTrue(report.startswith("prog.code:1:9: error: unexpected end of input, expected ';'"), report)

    def test_fatal(self):
        out = StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as context:
            with ErrorHandler() as handler:
                handler.register_source("prog.code", "print(x);")
                interpret(parse_source("print(x);"), output=lambda value: None)
        self.assertEqual(1, context.exception.code)
        self.assertIn("'x' is used before it is assigned", out.getvalue())

    def test_no_diagnosis(self):
        out = StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False):
                raise LangError("'{}' could not be opened", "nope.code", diagnosis=False)
        self.assertEqual("<in>: error: 'nope.code' could not be opened\n", out.getvalue())

    def test_internal_error_propagates(self):
        out = StringIO()
        with redirect_stdout(out), self.assertRaises(ZeroDivisionError):
            with ErrorHandler(fatal=False):
                1 // 0
        self.assertIn("[internal] error: unknown error: 'ZeroDivisionError", out.getvalue())

    def test_keyboard_interrupt(self):
        out = StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False):
                raise KeyboardInterrupt()
        self.assertIn("error: keyboard interrupt", out.getvalue())


class LangErrorTestCase(unittest.TestCase):

    def test_plain_message(self):
        with self.assertRaises(UnexpectedToken) as context:
            parse_source("x 1;")
        self.assertEqual("expected '=', got '1'", str(context.exception))

        with self.assertRaises(UndefinedVariable) as context:
            interpret(parse_source("print(nope);"), output=lambda value: None)
        self.assertEqual("'nope' is used before it is assigned", str(context.exception))
        self.assertEqual(4, context.exception.length)

    def test_snippet_types(self):
        cases = {
            TokenKind.SEMICOLON: "expected ';'",
            "expression": "expected expression",
            7: "expected 7",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(LangError("expected {}", case)), case)

    def test_end_of_input_message(self):
        cases = {"x = 1": "';'", "if x then print(x);": "'endif'", "input(": "identifier"}
        for case, expected in cases.items():
            with self.assertRaises(UnexpectedEndOfInput, msg=case) as context:
                parse_source(case)
            self.assertEqual(f"unexpected end of input, expected {expected}", str(context.exception), case)


if __name__ == '__main__':
    unittest.main()
