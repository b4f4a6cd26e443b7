"""Tokenizer and parser for lci source text. Produces the syntax tree defined in `lci.pure.syntax`.

All grammar can be loosely defined as follows:

```
<module>      ::= (<statement>? <comment>? <newline>)*   ; at least one statement
<statement>   ::= <name> "=" <expression>                ; only evaluated when used later on
                | <expression>                           ; evaluated right away
<expression>  ::= <atom>+                                ; associating by left: a b c d = (((a b) c) d)
<atom>        ::= <name>
                | "(" <expression> ")"
                | ("λ" | "\") <name> <expression>        ; bodies are greedy: λx x y = λx (x y)
<name>        ::= [A-Za-z0-9_]+
<comment>     ::= "#" <char>*
```

Newlines inside parentheses do not end a statement, so long definitions can be wrapped in ( ... ).
"""

from dataclasses import dataclass

from lci.lang.error import ParseError
from lci.pure import syntax


LAMBDAS = ("λ", "\\")

NAME = "name"
LAMBDA = "lambda"
OPEN = "("
CLOSE = ")"
EQUALS = "="
NEWLINE = "newline"


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int  # 1-based
    col: int   # 0-based


def is_name_char(char):
    return char.isascii() and (char.isalnum() or char == "_")


def tokenize(lines):
    """Splits source lines into Tokens. NEWLINE tokens are only emitted outside of parentheses."""
    tokens = []
    depth = 0

    for line_num, line in enumerate(lines, start=1):
        col = 0
        while col < len(line):
            char = line[col]

            if char == "#":
                break  # comment runs until end of line
            elif char.isspace():
                col += 1
                continue

            if char in LAMBDAS:
                token = Token(LAMBDA, char, line_num, col)
            elif char in (OPEN, CLOSE, EQUALS):
                depth += {OPEN: 1, CLOSE: -1}.get(char, 0)
                token = Token(char, char, line_num, col)
            elif is_name_char(char):
                end = col
                while end < len(line) and is_name_char(line[end]):
                    end += 1
                token = Token(NAME, line[col:end], line_num, col)
            else:
                raise ParseError("'{}' contains illegal character '{}'", (line, char), start=col, end=col + 1)

            tokens.append(token)
            col += len(token.text)

        if depth <= 0:
            depth = 0  # a stray ")" is reported by the parser, not here
            tokens.append(Token(NEWLINE, "", line_num, len(line)))

    return tokens


class Parser:
    """Recursive descent parser over the tokens of one source text."""

    def __init__(self, text, name=None):
        self.name = name
        self.lines = text.splitlines()
        self.tokens = tokenize(self.lines)
        self.pos = 0

    def parse(self):
        """Parses the whole text into a syntax.Module."""
        statements = []
        while self._skip_newlines():
            statements.append(self.statement())

        if not statements:
            raise ParseError("module cannot be empty")
        return syntax.Module(tuple(statements), self.name)

    def statement(self):
        first = self._peek()

        if first.kind == NAME and self._kind(1) == EQUALS:
            self.pos += 2
            expr = self.expression()
            self._end_of_statement()
            return syntax.Assignment(first.text, expr, first.line, self._source(first))

        expr = self.expression()
        self._end_of_statement()
        return syntax.BareExpression(expr, first.line, self._source(first))

    def expression(self):
        """One or more atoms, applied left to right. A lambda swallows everything after it."""
        expr = None
        while self._kind() in (NAME, OPEN, LAMBDA):
            if self._kind() == LAMBDA:
                atom = self.definition()
            else:
                atom = self.atom()
            expr = atom if expr is None else syntax.Application(expr, atom)

        if expr is None:
            self._unexpected("expected an expression")
        return expr

    def definition(self):
        self._expect(LAMBDA)
        parameter = self._expect(NAME, "expected a parameter name after λ")
        return syntax.Definition(parameter.text, self.expression())

    def atom(self):
        token = self._peek()
        if token.kind == NAME:
            self.pos += 1
            return syntax.Identifier(token.text)

        self._expect(OPEN)
        expr = self.expression()
        self._expect(CLOSE, "expected ')'")
        return expr

    def _peek(self, ahead=0):
        """Token ahead of the current one, or None past the end."""
        idx = self.pos + ahead
        return self.tokens[idx] if idx < len(self.tokens) else None

    def _kind(self, ahead=0):
        token = self._peek(ahead)
        return token.kind if token is not None else None

    def _skip_newlines(self):
        """Skips empty lines. Returns whether there are tokens left."""
        while self._kind() == NEWLINE:
            self.pos += 1
        return self._peek() is not None

    def _expect(self, kind, msg=None):
        token = self._peek()
        if token is None or token.kind != kind:
            self._unexpected(msg or f"expected '{kind}'")
        self.pos += 1
        return token

    def _end_of_statement(self):
        if self._kind() not in (None, NEWLINE):
            self._unexpected("expected end of statement")

    def _unexpected(self, reason):
        token = self._peek()
        if token is None:
            line = self.lines[-1] if self.lines else ""
            raise ParseError("'{}' ends unexpectedly: " + reason, line, start=len(line), end=len(line) + 1)
        if token.kind == NEWLINE:
            line = self.lines[token.line - 1]
            raise ParseError("'{}' ends unexpectedly: " + reason, line, start=token.col, end=token.col + 1)

        line = self.lines[token.line - 1]
        msg = "'{}' has unexpected '{}': " + reason
        raise ParseError(msg, (line, token.text), start=token.col, end=token.col + len(token.text))

    def _source(self, first):
        """Source text of the statement that started with token first and ended right before the current token."""
        last = self.tokens[self.pos - 1]
        return "\n".join(self.lines[first.line - 1:last.line]).strip()


def parse(text, name=None):
    """Parses text into a syntax.Module. name (usually a file name) is kept for error messages."""
    return Parser(text, name).parse()
