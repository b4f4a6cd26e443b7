"""Scopes a name can be resolved in: the session-wide GlobalScope, and the LocalScope chain built for a single call."""

from dataclasses import dataclass


class GlobalScope:
    """Mapping of global names to Values, owned by one Session. Only mutated between statements."""

    def __init__(self):
        self._values = {}

    def get(self, name):
        """Value stored under name, or None."""
        return self._values.get(name)

    def set(self, name, value):
        """Stores value under name, silently overwriting any previous value. Returns the stored value."""
        self._values[name] = value
        return value

    def __contains__(self, name):
        return name in self._values

    def __iter__(self):
        return iter(self._values)


@dataclass(frozen=True)
class LocalScope:
    """One frame of local bindings: parameter `name` bound to argument `value`, chained to the enclosing frame."""
    name: str
    value: object
    parent: "LocalScope" = None

    def get(self, name):
        """Value bound to name by the innermost frame binding it, or None."""
        scope = self
        while scope is not None:
            if scope.name == name:
                return scope.value
            scope = scope.parent
        return None

    def without(self, name):
        """The chain as seen from inside a definition whose parameter is name: every frame binding name is dropped.
        Returns None if no frame is left.
        """
        parent = self.parent.without(name) if self.parent is not None else None
        if self.name == name:
            return parent
        if parent is self.parent:
            return self
        return LocalScope(self.name, self.value, parent)
