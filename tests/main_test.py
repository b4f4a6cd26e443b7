import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from lci.main import build_parser, main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def source(self, text):
        path = os.path.join(self.tmp.name, "module.lc")
        with open(path, "w", encoding="utf-8") as file:
            file.write(text)
        return path

    def run_main(self, *argv):
        """Runs main with argv, returns (exit code, output)."""
        out = io.StringIO()
        code = 0
        with redirect_stdout(out):
            try:
                main(list(argv))
            except SystemExit as error:
                code = error.code
        return code, out.getvalue()

    def test_eval(self):
        code, output = self.run_main("eval", self.source("# booleans come from the bundled library\nnot true"))
        self.assertEqual(0, code)
        self.assertIn("λa λb b", output)

    def test_eval_without_common(self):
        path = self.source("id = \\x x\nid (\\y y)")
        self.assertIn("λy y", self.run_main("--no-common", "eval", path)[1])

        code, output = self.run_main("--no-common", "eval", self.source("not true"))
        self.assertEqual(2, code)
        self.assertIn("not", output)

    def test_exit_codes(self):
        cases = {
            "missing": 2,
            "id z": 2,
            "id (": 3,
            "λx.x": 3,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.run_main("eval", self.source(case))[0], case)

        self.assertEqual(1, self.run_main("eval", os.path.join(self.tmp.name, "nope.lc"))[0])

    def test_traceback(self):
        code, output = self.run_main("--no-common", "eval", self.source("a = \\x x\n\nb z"))
        self.assertEqual(2, code)
        self.assertIn("line 3", output)
        self.assertIn("b z", output)

    def test_parse(self):
        code, output = self.run_main("parse", self.source("id = \\x x"))
        self.assertEqual(0, code)
        self.assertIn("Assignment(target='id'", output)
        self.assertIn("Definition(parameter='x'", output)

        self.assertEqual(3, self.run_main("parse", self.source("(a"))[0])

    def test_parse_short(self):
        code, output = self.run_main("parse", "--short", self.source("id = \\x x\n(\\x x) y"))
        self.assertEqual(0, code)
        self.assertIn("let(def(id)); call(def(id), id)", output)
        self.assertNotIn("Assignment", output)

    def test_verbose(self):
        code, output = self.run_main("--verbose", "eval", self.source("k = \\a \\b a\nk true"))
        self.assertEqual(0, code)
        self.assertIn("k: ", output)
        self.assertIn("eval: ", output)
        self.assertNotIn("xnor: ", output)  # library statements are not traced

    def test_arguments(self):
        args = build_parser().parse_args(["--no-common", "--recursion-limit", "5000", "eval", "f.lc"])
        self.assertTrue(args.no_common)
        self.assertEqual(5000, args.recursion_limit)
        self.assertEqual("f.lc", args.file)

        self.assertIsNone(build_parser().parse_args([]).command)


if __name__ == '__main__':
    unittest.main()
