from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from mochascript.errors import (
    DuplicateDeclarationError, ImmutableAssignmentError, PopGlobalScopeError,
    UndefinedFunctionError, UndefinedVariableError,
)


@dataclass
class Binding:
    value: Any
    mutable: bool = False


class Environment:
    """Stack of variable scopes (innermost last) plus a flat function table.

    The global scope is created with the environment and can never be
    popped. Lookups and assignments walk from the innermost scope outwards,
    so a declaration in a nested scope shadows outer ones.
    """
    def __init__(self):
        self.scopes: List[Dict[str, Binding]] = [{}]
        self.functions: Dict[str, Any] = {}

    @property
    def depth(self) -> int:
        return len(self.scopes)

    @property
    def current_scope(self) -> Dict[str, Binding]:
        return self.scopes[-1]

    def push_scope(self):
        self.scopes.append({})

    def pop_scope(self):
        if len(self.scopes) == 1:
            raise PopGlobalScopeError()
        self.scopes.pop()

    @contextmanager
    def scope(self) -> Iterator['Environment']:
        self.push_scope()
        try:
            yield self
        finally:
            self.pop_scope()

    def find_scope(self, name: str) -> Optional[Dict[str, Binding]]:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope
        return None

    def declare_var(self, name: str, value: Any, mutable: bool = False):
        if name in self.current_scope:
            raise DuplicateDeclarationError(name)
        self.current_scope[name] = Binding(value, mutable)

    def assign_var(self, name: str, value: Any):
        binding = self.lookup(name)
        if not binding.mutable:
            raise ImmutableAssignmentError(name)
        binding.value = value

    def lookup(self, name: str) -> Binding:
        scope = self.find_scope(name)
        if scope is None:
            raise UndefinedVariableError(name)
        return scope[name]

    def get_var(self, name: str) -> Any:
        return self.lookup(name).value

    def has_var(self, name: str) -> bool:
        return self.find_scope(name) is not None

    def all_variables(self) -> Iterator[Tuple[str, Binding]]:
        # inner scopes first; shadowed outer bindings are skipped
        seen = set()
        for scope in reversed(self.scopes):
            for name, binding in scope.items():
                if name not in seen:
                    seen.add(name)
                    yield name, binding

    def declare_function(self, name: str, body: Any):
        if name in self.functions:
            raise DuplicateDeclarationError(name, 'function')
        self.functions[name] = body

    def get_function(self, name: str) -> Any:
        if name not in self.functions:
            raise UndefinedFunctionError(name)
        return self.functions[name]
