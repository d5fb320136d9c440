from .base import Next, ParamResolver
from .chain import ResolverChain, UnresolvedParameterError
from .namespace import FromNamespace
from .registry import (
    DEFAULT_RESOLVER_NAMES,
    DEFAULT_RESOLVERS,
    ResolverRegistry,
    UnknownResolverError,
    default_registry,
)
from .strategies import Default, MockName, MockType, Name, Type

__all__ = [
    "DEFAULT_RESOLVER_NAMES",
    "DEFAULT_RESOLVERS",
    "Default",
    "FromNamespace",
    "MockName",
    "MockType",
    "Name",
    "Next",
    "ParamResolver",
    "ResolverChain",
    "ResolverRegistry",
    "Type",
    "UnknownResolverError",
    "UnresolvedParameterError",
    "default_registry",
]
