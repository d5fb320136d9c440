from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from capsule.kernel.params import ParamDescriptor
from capsule.resolvers.base import ParamResolver

if TYPE_CHECKING:
    from capsule.kernel.capsule import Capsule


class UnresolvedParameterError(LookupError):
    # Raised when every resolver in the chain delegated past the parameter.
    def __init__(self, param: ParamDescriptor) -> None:
        super().__init__(f"Unable to resolve parameter '{param.name}' of {param.owner}")
        self.param = param


class ResolverChain:
    # Ordered resolvers; each gets the parameter and a continuation to the rest.
    def __init__(self, capsule: Capsule, resolvers: Sequence[type[ParamResolver]]) -> None:
        self.capsule = capsule
        self.resolver_types: tuple[type[ParamResolver], ...] = tuple(resolvers)
        self._resolvers = [resolver_type(capsule) for resolver_type in self.resolver_types]

    def resolve(self, param: ParamDescriptor) -> object:
        return self._resolve_from(0, param)

    def resolve_all(self, params: Sequence[ParamDescriptor]) -> tuple[list[object], dict[str, object]]:
        args: list[object] = []
        kwargs: dict[str, object] = {}
        for param in params:
            value = self.resolve(param)
            if param.keyword_only:
                kwargs[param.name] = value
            else:
                args.append(value)
        return args, kwargs

    def _resolve_from(self, index: int, param: ParamDescriptor) -> object:
        if index >= len(self._resolvers):
            raise UnresolvedParameterError(param)
        resolver = self._resolvers[index]
        return resolver.handle(param, lambda p: self._resolve_from(index + 1, p))
