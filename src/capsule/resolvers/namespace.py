from __future__ import annotations

from capsule.kernel.params import ParamDescriptor
from capsule.resolvers.base import Next, ParamResolver
from capsule.resolvers.chain import UnresolvedParameterError
from capsule.resolvers.strategies import Default


class FromNamespace(ParamResolver):
    # Consults enclosing capsules, nearest first, each through its own lookup resolvers.
    name = "namespace"

    def handle(self, param: ParamDescriptor, next_: Next) -> object:
        capsule = self.capsule
        if not capsule.has_namespace():
            return next_(param)
        for parent in capsule.namespace_chain():
            # Namespace and declared-default resolvers are left out to keep the walk flat.
            chain = parent.resolver_chain(exclude=(FromNamespace, Default))
            try:
                return chain.resolve(param)
            except UnresolvedParameterError:
                continue
        return next_(param)
