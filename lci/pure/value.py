"""Runtime values of the lci language and the operations that reduce them.

A Value mirrors the syntax tree it was built from, except that identifiers additionally carry how they were resolved:

```
<value> ::= Definition(parameter, body)          ; a function, body is not evaluated
          | UnresolvedIdentifier(name)           ; free name, nothing bound to it (yet)
          | ResolvedIdentifier(name, value, origin)
                                                 ; name bound to value by a global or a local (call) binding
          | Application(target, argument)        ; pending call
```

Values are never mutated: every operation below builds new nodes, sharing the subtrees it does not touch.

Evaluation is call-by-name: an argument is substituted into the function body as-is, and each use of the parameter
reduces it again. Global names are resolved once, when a statement is accepted, so reassigning a global never changes
the meaning of a value built before the reassignment.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from lci.lang.error import EvaluationFailure, GenericException, UnboundVariable
from lci.pure import syntax
from lci.pure.scope import LocalScope


class Origin(Enum):
    """Which kind of binding a ResolvedIdentifier was resolved by."""
    GLOBAL = "global"
    LOCAL = "local"


class Value(ABC):
    """Superclass of all runtime values."""

    @staticmethod
    def from_ast(expr):
        """Structural copy of a syntax tree expression. Identifiers start out unresolved."""
        if isinstance(expr, syntax.Definition):
            return Definition(expr.parameter, Value.from_ast(expr.body))
        elif isinstance(expr, syntax.Application):
            return Application(Value.from_ast(expr.target), Value.from_ast(expr.argument))
        elif isinstance(expr, syntax.Identifier):
            return UnresolvedIdentifier(expr.name)
        raise TypeError(f"{expr!r} is not an expression")

    @abstractmethod
    def bind_global(self, scope):
        """Resolves every unresolved identifier found in the GlobalScope scope. Names missing from scope are left
        unresolved, and identifiers that are already resolved are left untouched, so binding twice is the same as
        binding once.
        """

    @abstractmethod
    def bind_local(self, scope):
        """Substitutes the arguments of the LocalScope chain scope for their parameters. Any identifier named after a
        parameter is (re)bound locally, but definitions that bind the same name again are not entered: inside them,
        their own parameter wins.
        """

    @abstractmethod
    def eval(self):
        """Reduces self until it is no longer a pending call. Raises UnboundVariable (possibly wrapped in
        EvaluationFailures) if an unresolved identifier is reached.
        """

    @abstractmethod
    def call(self, argument):
        """Applies self as a function to argument, which is not evaluated first. Returns the evaluated result."""

    @abstractmethod
    def render(self):
        """Canonical text form. Globals render by name, locals by the value substituted for them."""

    def __str__(self):
        return self.render()


@dataclass(frozen=True)
class Definition(Value):
    parameter: str
    body: Value

    def bind_global(self, scope):
        return Definition(self.parameter, self.body.bind_global(scope))

    def bind_local(self, scope):
        inner = scope.without(self.parameter)
        if inner is None:
            return self  # shadowed: every binding of the chain refers to our own parameter in here
        return Definition(self.parameter, self.body.bind_local(inner))

    def eval(self):
        return self

    def call(self, argument):
        return self.body.bind_local(LocalScope(self.parameter, argument)).eval()

    def render(self):
        return f"λ{self.parameter} {self.body.render()}"


@dataclass(frozen=True)
class UnresolvedIdentifier(Value):
    name: str

    def bind_global(self, scope):
        value = scope.get(self.name)
        if value is None:
            return self
        return ResolvedIdentifier(self.name, value, Origin.GLOBAL)

    def bind_local(self, scope):
        value = scope.get(self.name)
        if value is None:
            return self
        return ResolvedIdentifier(self.name, value, Origin.LOCAL)

    def eval(self):
        raise UnboundVariable(self.name)

    def call(self, argument):
        raise UnboundVariable(self.name)

    def render(self):
        return self.name


@dataclass(frozen=True)
class ResolvedIdentifier(Value):
    name: str
    value: Value
    origin: Origin

    def bind_global(self, scope):
        return self

    def bind_local(self, scope):
        value = scope.get(self.name)
        if value is None:
            return self
        return ResolvedIdentifier(self.name, value, Origin.LOCAL)

    def eval(self):
        try:
            return self.value.eval()
        except GenericException as error:
            raise EvaluationFailure.executing(self.name, error) from error

    def call(self, argument):
        return self.value.call(argument)

    def render(self):
        if self.origin is Origin.GLOBAL:
            return self.name
        # by value, or (λa λb a) true would show as λb a instead of λb true
        return self.value.render()


@dataclass(frozen=True)
class Application(Value):
    target: Value
    argument: Value

    def bind_global(self, scope):
        return Application(self.target.bind_global(scope), self.argument.bind_global(scope))

    def bind_local(self, scope):
        return Application(self.target.bind_local(scope), self.argument.bind_local(scope))

    def eval(self):
        try:
            return self.target.call(self.argument)
        except GenericException as error:
            raise EvaluationFailure.calling(error) from error

    def call(self, argument):
        return self.target.call(self.argument).call(argument)

    def render(self):
        target = self.target.render()
        argument = self.argument.render()

        if "λ" in target:
            target = f"({target})"
        if " " in argument:
            argument = f"({argument})"
        return f"{target} {argument}"
