from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from capsule.resolvers.base import ParamResolver
from capsule.resolvers.namespace import FromNamespace
from capsule.resolvers.strategies import Default, MockName, MockType, Name, Type


class UnknownResolverError(KeyError):
    # Raised when a configured resolver name has no registration.
    pass


DEFAULT_RESOLVER_NAMES: tuple[str, ...] = ("mock_name", "mock_type", "name", "type", "namespace", "default")


@dataclass
class ResolverRegistry:
    # Maps configuration names to resolver classes.
    _resolvers: dict[str, type[ParamResolver]] = field(default_factory=dict)

    def register(self, name: str, resolver: type[ParamResolver]) -> None:
        # Later registrations override earlier ones.
        if not name:
            raise ValueError("resolver name must be a non-empty string")
        self._resolvers[name] = resolver

    def get(self, name: str) -> type[ParamResolver]:
        if name not in self._resolvers:
            raise UnknownResolverError(name)
        return self._resolvers[name]

    def build(self, names: Iterable[str]) -> list[type[ParamResolver]]:
        return [self.get(name) for name in names]

    def names(self) -> list[str]:
        return list(self._resolvers)

    def __contains__(self, name: object) -> bool:
        return name in self._resolvers


def default_registry() -> ResolverRegistry:
    registry = ResolverRegistry()
    for resolver in (MockName, MockType, Name, Type, FromNamespace, Default):
        registry.register(resolver.name, resolver)
    return registry


DEFAULT_RESOLVERS: tuple[type[ParamResolver], ...] = tuple(default_registry().build(DEFAULT_RESOLVER_NAMES))
