import io
import unittest
from contextlib import redirect_stdout

from lci.lang.error import (ErrorHandler, EvaluationFailure, GenericException, LoadError, ParseError, UnboundVariable,
                            UndefinedGlobal)


class GenericExceptionTestCase(unittest.TestCase):

    def test_message(self):
        error = GenericException("'{}' contains illegal character '{}'", ("a $ b", "$"), start=2, end=3)
        self.assertEqual("'a $ b' contains illegal character '$'", error.plain)
        self.assertEqual("'a $ b' contains illegal character '$'", str(error))
        self.assertEqual("a $ b", error.expr)
        self.assertEqual((2, 3), (error.start, error.end))

    def test_exit_codes(self):
        cases = {
            ParseError("bad"): 3,
            UnboundVariable("x"): 2,
            UndefinedGlobal("x"): 2,
            EvaluationFailure.calling(UnboundVariable("x")): 2,
            LoadError("a.lc", UndefinedGlobal("x")): 1,
            GenericException("generic"): 1,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, case.exit_code, case)

    def test_chain(self):
        root = UnboundVariable("z")
        error = LoadError("a.lc", EvaluationFailure.calling(EvaluationFailure.executing("f", root)))

        expected = ["failed to load module `a.lc`", "failure calling a function", "failure executing `f`",
                    "unbound variable `z`"]
        self.assertEqual(expected, error.chain())
        self.assertIs(root, error.root)
        self.assertIs(root, root.root)
        self.assertEqual(["unbound variable `z`"], root.chain())


class ErrorHandlerTestCase(unittest.TestCase):

    def run_handler(self, error, **kwargs):
        """Raises error inside a (non-fatal by default) ErrorHandler, returns what got printed."""
        kwargs.setdefault("fatal", False)
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(**kwargs):
                raise error
        return out.getvalue()

    def test_non_fatal(self):
        output = self.run_handler(UndefinedGlobal("zz"))
        self.assertIn("error: ", output)
        self.assertIn("zz", output)

    def test_fatal_exit_code(self):
        cases = {ParseError("bad"): 3, UndefinedGlobal("x"): 2, LoadError("a.lc", UndefinedGlobal("x")): 1}
        for case, expected in cases.items():
            with self.assertRaises(SystemExit) as cm:
                self.run_handler(case, fatal=True)
            self.assertEqual(expected, cm.exception.code, case)

    def test_chain_printed(self):
        output = self.run_handler(EvaluationFailure.executing("f", UnboundVariable("zz")))
        self.assertIn("caused by: ", output)
        self.assertIn("unbound variable", output)

    def test_diagnosis(self):
        output = self.run_handler(ParseError("'{}' has unexpected '{}'", ("a b) c", ")"), start=3, end=4))
        lines = output.splitlines()
        self.assertIn("a b", lines[-2])
        self.assertIn("^", lines[-1])

        error = ParseError("'{}' has unexpected '{}'", ("a b) c", ")"), start=3, end=4)
        diagnosis = ErrorHandler.diagnose(error).splitlines()
        self.assertEqual(2, len(diagnosis))
        self.assertTrue(diagnosis[1].startswith(" " * (2 + 3)))
        self.assertIn("^", diagnosis[1])

    def test_traceback(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with ErrorHandler(fatal=False) as handler:
                handler.register_file("ok.lc")
                handler.register_file("lib.lc")
                handler.register_line("lib.lc", "x = y z", 3)
                raise UnboundVariable("z")

        self.assertIn("File 'lib.lc', line 3:", out.getvalue())
        self.assertIn("x = y z", out.getvalue())
        self.assertNotIn("ok.lc", out.getvalue())
        self.assertEqual({"ok.lc": (None, None), "lib.lc": (None, None)}, handler.traceback)

    def test_remove_line(self):
        handler = ErrorHandler()
        handler.register_line("lib.lc", "x", 1)
        handler.remove_line("lib.lc")
        self.assertEqual({"lib.lc": (None, None)}, handler.traceback)

    def test_recursion_error(self):
        output = self.run_handler(RecursionError("maximum recursion depth exceeded"))
        self.assertIn("maximum recursion depth exceeded", output)

    def test_internal_error_propagates(self):
        out = io.StringIO()
        with self.assertRaises(ValueError):
            with redirect_stdout(out):
                with ErrorHandler(fatal=False):
                    raise ValueError("{oops}")
        self.assertIn("[internal]", out.getvalue())
        self.assertIn("ValueError: {oops}", out.getvalue())

    def test_register_step(self):
        for verbose, expected in ((False, ""), (True, "eval")):
            out = io.StringIO()
            with redirect_stdout(out):
                ErrorHandler(verbose=verbose).register_step("eval", "λx x")
            self.assertIn(expected, out.getvalue())
            self.assertEqual(verbose, "λx x" in out.getvalue())

    def test_warn(self):
        out = io.StringIO()
        with redirect_stdout(out):
            handler = ErrorHandler()
            handler.register_line("<in>", "a = b", 4)
            handler.warn("'{}' looks odd", "a = b", diagnosis=False)
        self.assertIn("<in>:4: ", out.getvalue())
        self.assertIn("warning: ", out.getvalue())


if __name__ == '__main__':
    unittest.main()
