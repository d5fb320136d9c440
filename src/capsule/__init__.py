from capsule.kernel import (
    Callback,
    Capsule,
    Catch,
    Halt,
    NamespaceError,
    OnBlank,
    Setter,
    catch,
    on_blank,
    setter,
)
from capsule.resolvers import ParamResolver, ResolverChain, UnresolvedParameterError
from capsule.support import blank, data_get, filled

__all__ = [
    "Callback",
    "Capsule",
    "Catch",
    "Halt",
    "NamespaceError",
    "OnBlank",
    "ParamResolver",
    "ResolverChain",
    "Setter",
    "UnresolvedParameterError",
    "blank",
    "catch",
    "data_get",
    "filled",
    "on_blank",
    "setter",
]
