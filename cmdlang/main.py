"""Uses the cmdlang lexer, parser and interpreter to run program files or to run in command-line mode. Also uses error
handling context manager. Called from the cmdlang console script.
"""

import argparse
import os
import sys

from cmdlang.lang.error import ErrorHandler
from cmdlang.lang.lexical import tokenize
from cmdlang.lang.session import Session
from cmdlang.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="cmdlang", description="Runs cmdlang programs.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-i", "--input", help="file of integers read by input() (default: FILE with suffix .input)")

    dump = parser.add_mutually_exclusive_group()
    dump.add_argument("--tokens", action="store_true", help="print the tokens of FILE instead of running it")
    dump.add_argument("--ast", action="store_true", help="print the syntax tree of FILE instead of running it")

    parser.add_argument("--no-color", action="store_true", help="do not color error messages")
    return parser


def main(argv=None):
    """Runs cmdlang interpreter. Called from cmdlang console script."""
    args = build_parser().parse_args(argv)

    if args.no_color:
        os.environ["NO_COLOR"] = "1"

    with ErrorHandler() as error_handler:
        if args.file is None:
            if args.tokens or args.ast:
                build_parser().error("--tokens and --ast need a FILE")
            Shell(Session(error_handler, Session.SH_FILE, args.input, cmd_line=True)).cmdloop()
            return

        if args.tokens:
            # lexing only: dump even when the program would not parse or its inputs would not load
            source = Session.read_file(args.file)
            error_handler.register_source(args.file, source)
            for token in tokenize(source):
                print(repr(token))
            return

        sess = Session(error_handler, args.file, args.input)

        if args.ast:
            for program in sess.to_run:
                print(program.display())
        else:
            sess.run()


if __name__ == "__main__":
    sys.exit(main())
