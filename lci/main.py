"""Uses the lci language implementation to parse or evaluate .lc files, or to run in command-line mode. Also uses error
handling context manager. Called from the lci console script.
"""

import argparse
import sys

from termcolor import colored

from lci.lang.error import ErrorHandler, GenericException
from lci.lang.session import Session
from lci.lang.shell import Shell
from lci.pure.parser import parse


def read_source(path):
    """Returns (text, name) of file path, or of stdin if path is None or '-'."""
    if path is None or path == "-":
        return sys.stdin.read(), Session.SH_FILE

    try:
        with open(path, "r", encoding="utf-8") as file:
            return file.read(), path
    except OSError as error:
        raise GenericException("'{}' could not be opened", path, diagnosis=False) from error


def load_common(sess, error_handler):
    """Loads the bundled library into sess, without tracing its statements in verbose mode."""
    verbose, error_handler.verbose = error_handler.verbose, False
    try:
        sess.load_common()
    finally:
        error_handler.verbose = verbose


def cmd_parse(args, error_handler):
    """Parses a module and prints its syntax tree (or only the shape of it, with --short)."""
    text, name = read_source(args.file)
    module = parse(text, name)
    print(colored(module.short_repr() if args.short else module.display(), "green"))


def cmd_eval(args, error_handler):
    """Evaluates a module and prints the result of its last statement."""
    sess = Session(error_handler)
    if not args.no_common:
        load_common(sess, error_handler)

    text, name = read_source(args.file)
    print(colored(sess.run_source(text, name).render(), "green"))


def cmd_repl(args, error_handler):
    """Runs the interactive shell. Errors are reported but do not end the session."""
    error_handler.fatal = False
    sess = Session(error_handler)

    if not args.no_common:
        with error_handler:
            load_common(sess, error_handler)

    Shell(sess).cmdloop()


def build_parser():
    parser = argparse.ArgumentParser(prog="lci", description="Untyped lambda calculus interpreter.")
    parser.add_argument("--no-common", action="store_true", help="do not load the bundled library")
    parser.add_argument("--verbose", action="store_true", help="print every statement's value as it is evaluated")
    parser.add_argument("--recursion-limit", type=int, default=None,
                        help="Python recursion limit, raise it for deeply recursive evaluations")

    commands = parser.add_subparsers(dest="command")

    parse_cmd = commands.add_parser("parse", help="parse a module and print its syntax tree")
    parse_cmd.add_argument("file", help="file to parse (stdin if empty)", nargs="?")
    parse_cmd.add_argument("--short", action="store_true",
                           help="print the shape of each statement, e.g. call(def(id), id)")
    parse_cmd.set_defaults(func=cmd_parse)

    eval_cmd = commands.add_parser("eval", help="evaluate a module and print the last result")
    eval_cmd.add_argument("file", help="file to evaluate (stdin if empty)", nargs="?")
    eval_cmd.set_defaults(func=cmd_eval)

    repl_cmd = commands.add_parser("repl", help="run the interactive shell (default)")
    repl_cmd.set_defaults(func=cmd_repl)

    return parser


def main(argv=None):
    """Runs lci interpreter. Called from lci console script."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)

        error_handler.verbose = args.verbose
        if args.recursion_limit is not None:
            sys.setrecursionlimit(args.recursion_limit)

        func = getattr(args, "func", cmd_repl)
        func(args, error_handler)


if __name__ == "__main__":
    main()
