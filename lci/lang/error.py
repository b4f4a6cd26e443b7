"""Error handling for the lci language. Only GenericExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a lci error/warning. `exprs` are the snippets
    formatted into msg; exprs[0] should be the offending expr that caused the error, and start/end delimit the part of
    it that gets highlighted. `cause` is the error this one wraps, if any.
    """
    exit_code = 1

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False, cause=None):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.plain = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal
        self.cause = cause

        super().__init__(self.plain)

    def chain(self):
        """Messages of this error and of every error it wraps, outermost first."""
        messages = []
        error = self
        while error is not None:
            messages.append(error.plain if isinstance(error, GenericException) else str(error))
            error = getattr(error, "cause", None)
        return messages

    @property
    def root(self):
        """Innermost wrapped error (self if nothing is wrapped)."""
        error = self
        while getattr(error, "cause", None) is not None:
            error = error.cause
        return error


class ParseError(GenericException):
    """Raised by the parser. exprs[0] is the offending source line, start/end the offending columns."""
    exit_code = 3


class UnboundVariable(GenericException):
    """An identifier that no binding could be found for was evaluated or called."""
    exit_code = 2

    def __init__(self, name):
        super().__init__("unbound variable `{}`", name, diagnosis=False)
        self.name = name


class UndefinedGlobal(GenericException):
    """A bare name statement referenced a name that is not in the global scope."""
    exit_code = 2

    def __init__(self, name):
        super().__init__("variable `{}` is not defined", name, diagnosis=False)
        self.name = name


class EvaluationFailure(GenericException):
    """Adds one frame of context ("while executing `x`", "while calling a function") around a failure, so that a chain
    of them reads as a blame trail down to the root cause.
    """
    exit_code = 2

    @classmethod
    def executing(cls, name, cause):
        return cls("failure executing `{}`", name, diagnosis=False, cause=cause)

    @classmethod
    def calling(cls, cause):
        return cls("failure calling a function", diagnosis=False, cause=cause)


class LoadError(GenericException):
    """A library module failed to parse or run while loading a list of modules."""

    def __init__(self, module, cause):
        super().__init__("failed to load module `{}`", module, diagnosis=False, cause=cause)
        self.module = module


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom lci errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to running a statement."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after a statement ran successfully."""
        self.traceback[path] = (None, None)

    def register_step(self, step, expr):
        """Prints an evaluation step (only in verbose mode). expr is only turned into a string if printed."""
        if self.verbose:
            print(colored(f"{step}: ", ErrorHandler.STEP, attrs=["bold"]) + str(expr))

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        """file:line of the innermost registered line, if any."""
        for file, (line, line_num) in reversed(list(self.traceback.items())):
            if line is not None:
                return f"{file}:{line_num}: "
        return ""

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = colored(self._location(), attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        for cause in error.chain()[1:]:
            error_msg += "\n" + colored("  caused by: ", ErrorHandler.ERROR) + cause
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(error.exit_code)
        self.traceback = {path: (None, None) for path in self.traceback}  # keep files, forget lines

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("normal form might exist, but maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
