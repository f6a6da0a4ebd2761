import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from unittest import mock

from cmdlang.main import main


@mock.patch.dict(os.environ, {"NO_COLOR": "1"})
class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, text):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as file:
            file.write(text)
        return path

    def run_main(self, *argv):
        """Returns (exit code, stdout) of main(argv)."""
        out = StringIO()
        code = 0
        with redirect_stdout(out), redirect_stderr(StringIO()):
            try:
                main(list(argv))
            except SystemExit as exc:
                code = exc.code
        return code, out.getvalue()

    def test_run(self):
        path = self.write("test.code", "input(n);\nif n > 1 then\n    print(n * n);\nendif;\nprint(n);\n")
        self.write("test.input", "3\n")
        self.assertEqual((0, "9\n3\n"), self.run_main(path))

    def test_input_option(self):
        path = self.write("test.code", "input(a); input(b); print(a * b);")
        input_path = self.write("numbers.txt", "6\n7\n")
        self.assertEqual((0, "42\n"), self.run_main(path, "-i", input_path))

    def test_error_exit_status(self):
        cases = {
            "print(1);\nprint(x);": "error: 'x' is used before it is assigned",
            "input(a);": "error: input(a) has no value left (0 supplied)",
            "x = 1 & 2;": "error: unrecognized character '&'",
            "if x then": "error: unexpected end of input, expected 'endif'",
            "x ! 2;": "error: '!' must be followed by '='",
        }
        for case, expected in cases.items():
            code, out = self.run_main(self.write("prog.code", case))
            self.assertEqual(1, code, case)
            self.assertIn(expected, out, case)

        code, out = self.run_main(os.path.join(self.tmp.name, "missing.code"))
        self.assertEqual(1, code)
        self.assertIn("could not be opened", out)

    def test_output_before_error(self):
        code, out = self.run_main(self.write("prog.code", "print(1);\nprint(x);"))
        self.assertEqual(1, code)
        self.assertTrue(out.startswith("1\n"), out)

    def test_tokens(self):
        code, out = self.run_main(self.write("prog.code", "x = 3.5;"), "--tokens")
        self.assertEqual(0, code)
        self.assertEqual(["IDENTIFIER(x)", "ASSIGN(=)", "NUMBER(3.5)", "SEMICOLON(;)", "END"], out.splitlines())

    def test_tokens_of_unparsable_program(self):
        path = self.write("prog.code", "print(1\nx = ;")
        self.write("prog.input", "not a number\n")
        code, out = self.run_main(path, "--tokens")
        self.assertEqual(0, code)
        self.assertEqual(
            ["PRINT(print)", "LPAREN(()", "NUMBER(1)", "IDENTIFIER(x)", "ASSIGN(=)", "SEMICOLON(;)", "END"],
            out.splitlines(),
        )

        code, out = self.run_main(self.write("bad.code", "x = 1 $ 2;"), "--tokens")
        self.assertEqual(1, code)
        self.assertIn("error: unrecognized character '$'", out)

    def test_ast(self):
        code, out = self.run_main(self.write("prog.code", "if x then print(1 + x); endif;"), "--ast")
        self.assertEqual(0, code)
        expected = [
            "Program(statements=[",
            "    If(condition=",
            "        Identifier(name='x'), body=[",
            "        Print(expr=",
            "            BinaryOp(operator='+', left=",
            "                NumberLiteral(text='1'), right=",
            "                Identifier(name='x')))",
            "    ])",
            "])",
        ]
        self.assertEqual(expected, out.splitlines())

    def test_dump_needs_file(self):
        code, __ = self.run_main("--ast")
        self.assertEqual(2, code)

    def test_shell(self):
        out = StringIO()
        with mock.patch("sys.stdin", StringIO("x = 5;\nprint(x);\nexit\n")), redirect_stdout(out):
            main([])
        self.assertIn("5\n", out.getvalue())


if __name__ == '__main__':
    unittest.main()
