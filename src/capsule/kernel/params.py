from __future__ import annotations

import inspect
import types
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

EMPTY = inspect.Parameter.empty

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParamDescriptor:
    # One declared parameter as seen by the resolver chain.
    name: str
    annotation: Any = EMPTY
    default: Any = EMPTY
    kind: inspect._ParameterKind = inspect.Parameter.POSITIONAL_OR_KEYWORD
    owner: str = "<callable>"

    @property
    def has_default(self) -> bool:
        return self.default is not EMPTY

    @property
    def annotated_type(self) -> type | None:
        # Concrete class annotations only; unannotated, string and `object` give None.
        annotation = self.annotation
        if annotation is EMPTY or annotation is object or isinstance(annotation, types.GenericAlias):
            return None
        if not isinstance(annotation, type):
            return None
        return annotation

    @property
    def keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY


def describe(target: Callable[..., object]) -> tuple[ParamDescriptor, ...]:
    try:
        return _describe_cached(target)
    except TypeError:
        # Unhashable callables are described on every call.
        return _describe(target)


@lru_cache(maxsize=512)
def _describe_cached(target: Callable[..., object]) -> tuple[ParamDescriptor, ...]:
    return _describe(target)


def _describe(target: Callable[..., object]) -> tuple[ParamDescriptor, ...]:
    signature = _signature(target)
    if signature is None:
        return ()
    owner = callable_label(target)
    return tuple(
        ParamDescriptor(
            name=param.name,
            annotation=param.annotation,
            default=param.default,
            kind=param.kind,
            owner=owner,
        )
        for param in signature.parameters.values()
        if param.kind not in _SKIPPED_KINDS
    )


def _signature(target: Callable[..., object]) -> inspect.Signature | None:
    try:
        return inspect.signature(target, eval_str=True)
    except (NameError, SyntaxError, TypeError):
        # Annotations referring to names that are not importable stay as strings.
        pass
    except ValueError:
        return None
    try:
        return inspect.signature(target)
    except (TypeError, ValueError):
        return None


def callable_label(target: object) -> str:
    module = getattr(target, "__module__", None) or "<unknown_module>"
    qualname = getattr(target, "__qualname__", None) or getattr(target, "__name__", None) or type(target).__name__
    return f"{module}.{qualname}"
