"""Lexically nested binding tables backing variables and closures."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quokka.objects import Object


class Environment:
    """A mutable name → value table with an optional enclosing environment.

    Environments are shared by reference: every closure created in a scope
    and every call frame nested inside it hold the same table, so a later
    ``let`` in that scope is visible to all of them.
    """

    def __init__(self, outer: Environment | None = None) -> None:
        self._store: dict[str, Object] = {}
        self.outer = outer

    def get(self, name: str) -> Object | None:
        """Look *name* up here, then outward; None when unbound everywhere."""
        env: Environment | None = self
        while env is not None:
            if name in env._store:
                return env._store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Object) -> Object:
        """Bind *name* in this scope only, shadowing any outer binding."""
        self._store[name] = value
        return value


def new_enclosed_environment(outer: Environment) -> Environment:
    return Environment(outer)
