"""Syntax tree for the lci language, as produced by `lci.pure.parser`.

The tree is read-only once built: every node is a frozen dataclass. Formally,

```
<module>     ::= <statement>+
<statement>  ::= <name> "=" <expression>   ; "assignment"
               | <expression>              ; "bare expression", evaluated eagerly by a Session
<expression> ::= "λ" <name> <expression>   ; "definition"
               | <expression> <expression> ; "application", associating by left
               | <name>                    ; "identifier"
```

Statements remember the line they were parsed from so that errors can point back at the source.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class Node(ABC):
    """Superclass of every syntax tree node."""

    @property
    def nodes(self):
        """Child nodes, in source order."""
        return []

    @abstractmethod
    def short_repr(self):
        """S-tree-like string reflecting the shape of the tree but not its names, e.g. `call(def(id), id)`.
        Handy for checking how ambiguous input was grouped.
        """

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(<label>, nodes=[
            <Node>(<label>, nodes=[
                ...
                <Node>(<label>)  # <-- if nodes is empty
            ])
        ])
        """
        label = self.label()
        result = f"{'    ' * indents}{type(self).__name__}({label}"
        if self.nodes:
            result += ", nodes=[" if label else "nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def label(self):
        return ""


# expressions


@dataclass(frozen=True)
class Definition(Node):
    """Definition of a lambda: `λparameter body`."""
    parameter: str
    body: Node

    @property
    def nodes(self):
        return [self.body]

    def short_repr(self):
        return f"def({self.body.short_repr()})"

    def label(self):
        return f"parameter='{self.parameter}'"


@dataclass(frozen=True)
class Application(Node):
    """Application: calling `target` with `argument`."""
    target: Node
    argument: Node

    @property
    def nodes(self):
        return [self.target, self.argument]

    def short_repr(self):
        return f"call({self.target.short_repr()}, {self.argument.short_repr()})"


@dataclass(frozen=True)
class Identifier(Node):
    """Identifier, a name of a lambda."""
    name: str

    def short_repr(self):
        return "id"

    def label(self):
        return f"name='{self.name}'"


# statements


@dataclass(frozen=True)
class Statement(Node):
    """Superclass for module-level statements. `line` and `source` are only used for error messages."""

    @property
    def nodes(self):
        return [self.expr]


@dataclass(frozen=True)
class Assignment(Statement):
    """Binds an expression to a global name: `id = λx x`."""
    target: str
    expr: Node
    line: int = field(default=0, compare=False)
    source: str = field(default="", compare=False)

    def short_repr(self):
        return f"let({self.expr.short_repr()})"

    def label(self):
        return f"target='{self.target}'"


@dataclass(frozen=True)
class BareExpression(Statement):
    """A single module-level expression. Pointless in a library file, but essential for the shell."""
    expr: Node
    line: int = field(default=0, compare=False)
    source: str = field(default="", compare=False)

    def short_repr(self):
        return self.expr.short_repr()


@dataclass(frozen=True)
class Module(Node):
    """Root of the syntax tree for a single file or shell input."""
    statements: tuple
    name: str = field(default=None, compare=False)

    def __post_init__(self):
        if not self.statements:
            raise ValueError("a module needs at least one statement")

    @property
    def nodes(self):
        return list(self.statements)

    def short_repr(self):
        return "; ".join(stmt.short_repr() for stmt in self.statements)

    def label(self):
        return f"name='{self.name}'" if self.name else ""
