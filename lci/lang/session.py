"""Session control for lci language. Runs parsed modules statement by statement against a single global scope, either
in command line mode or file interpretation mode.
"""

import os

from lci.lang.error import ErrorHandler, GenericException, LoadError, UndefinedGlobal
from lci.pure import syntax
from lci.pure.parser import parse
from lci.pure.scope import GlobalScope
from lci.pure.value import Value


COMMON = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "common")  # bundled .lc library


def read_common(common_path=COMMON):
    """Parses every .lc file in common_path, in file name order. Returns the list of modules."""
    modules = []
    for file in sorted(os.listdir(common_path)):
        if not file.endswith(".lc"):
            continue

        path = os.path.join(common_path, file)
        try:
            with open(path, "r", encoding="utf-8") as lc_file:
                modules.append(parse(lc_file.read(), file))
        except OSError as error:
            raise LoadError(file, GenericException("'{}' could not be opened", path, diagnosis=False)) from error
        except GenericException as error:
            raise LoadError(file, error) from error

    return modules


class Session:
    """Governs a lci session, with control over the global scope. Statements are run eagerly as they are given."""
    SH_FILE = "<in>"     # name used in tracebacks for modules without a name
    LAST_RESULT = "_"    # global name the result of the last evaluated expression is stored under

    def __init__(self, error_handler=None, common_path=COMMON):
        if error_handler is None:
            error_handler = ErrorHandler(fatal=False)

        self.error_handler = error_handler
        self.common_path = common_path  # path to common lc lib
        self.scope = GlobalScope()

    def run(self, module):
        """Runs module's statements in order and returns the result of the last one. A failing statement raises right
        away; whatever earlier statements assigned stays assigned.
        """
        path = module.name or Session.SH_FILE
        self.error_handler.register_file(path)

        result = None
        for stmt in module.statements:
            self.error_handler.register_line(path, stmt.source, stmt.line)  # in case error is raised
            result = self.run_statement(stmt)
            self.error_handler.remove_line(path)  # error was not raised

        return result

    def run_source(self, text, name=None):
        """Parses text and runs it. See run."""
        return self.run(parse(text, name))

    def run_statement(self, stmt):
        """Runs a single statement:
            - assignments are bound to the current globals and stored without being evaluated, so they can't fail
              (redefining a name only warns)
            - a bare name shows the value stored under it, as is
            - any other expression is bound, evaluated and stored under LAST_RESULT
        """
        if isinstance(stmt, syntax.Assignment):
            if stmt.target in self.scope:
                self.error_handler.warn("'{}' is redefined, names already using it keep their previous value",
                                        stmt.target, diagnosis=False)
            value = Value.from_ast(stmt.expr).bind_global(self.scope)
            self.error_handler.register_step(stmt.target, value)
            return self.scope.set(stmt.target, value)

        if isinstance(stmt.expr, syntax.Identifier):
            value = self.scope.get(stmt.expr.name)
            if value is None:
                raise UndefinedGlobal(stmt.expr.name)
            return value

        value = Value.from_ast(stmt.expr).bind_global(self.scope)
        self.error_handler.register_step("bind", value)
        result = value.eval()
        self.error_handler.register_step("eval", result)

        return self.scope.set(Session.LAST_RESULT, result)

    def load(self, modules):
        """Runs modules one after the other into this session. Stops at the first failing module with a LoadError."""
        for idx, module in enumerate(modules):
            try:
                self.run(module)
            except GenericException as error:
                raise LoadError(module.name or f"#{idx}", error) from error

    def load_common(self):
        """Loads the bundled library (see common/)."""
        self.load(read_common(self.common_path))

    def names(self):
        """Names currently defined in the global scope."""
        return list(self.scope)
