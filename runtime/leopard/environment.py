"""
Leopard environments

An environment is one scope: a name -> object store plus an optional outer
scope. Lookups walk outward; bindings always land in the current scope, so an
inner `let` shadows an outer name instead of changing it.

Environments are shared, not owned. A function keeps a reference to the scope
it was defined in, and every call to it creates a fresh scope enclosed by that
one, so the chain forms a graph kept alive by whoever still refers to it.
"""

from typing import Dict, List, Optional

from .objects import LeopardObject


class Environment:
    """A single lexical scope"""

    def __init__(self, outer: Optional['Environment'] = None):
        self.store: Dict[str, LeopardObject] = {}
        self.outer = outer

    @classmethod
    def enclosed(cls, outer: 'Environment') -> 'Environment':
        """Create a child scope of outer (used for function calls)"""
        return cls(outer=outer)

    def get(self, name: str) -> Optional[LeopardObject]:
        """Look name up here, then in each outer scope; None if unbound"""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: LeopardObject) -> LeopardObject:
        """Bind name in this scope"""
        self.store[name] = value
        return value

    def names(self) -> List[str]:
        """Names bound directly in this scope"""
        return list(self.store)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self):
        depth = 0
        env = self.outer
        while env is not None:
            depth += 1
            env = env.outer
        return f"Environment(names={self.names()!r}, depth={depth})"


def new_environment() -> Environment:
    """Create an empty top-level environment"""
    return Environment()


__all__ = ['Environment', 'new_environment']
