from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Self, TypeVar

from capsule.support.blank import blank

if TYPE_CHECKING:
    from capsule.kernel.capsule import Capsule

T = TypeVar("T")

MARKERS_ATTR = "__capsule_markers__"


class MarkerBindingError(RuntimeError):
    # Raised when a marker that reads capsule state is used before bind().
    pass


@dataclass(frozen=True, slots=True)
class Marker:
    # Base for metadata attached to step callables; bind() returns a copy tied to a capsule.
    capsule: Capsule | None = field(default=None, kw_only=True, compare=False, repr=False)

    def bind(self, capsule: Capsule) -> Self:
        return replace(self, capsule=capsule)

    def _require_capsule(self) -> Capsule:
        if self.capsule is None:
            raise MarkerBindingError(f"{type(self).__name__} is not bound to a capsule")
        return self.capsule


@dataclass(frozen=True, slots=True)
class Setter(Marker):
    # The step's result is written into the store under `key`.
    key: str

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key:
            raise ValueError("Setter.key must be a non-empty string")

    def get_key(self) -> str:
        return self.key


@dataclass(frozen=True, slots=True)
class Catch(Marker):
    # The step handles failures matching `types` (any Exception when empty) and `when`.
    types: tuple[type[BaseException], ...] = ()
    when: Callable[[BaseException], bool] | None = None

    def __post_init__(self) -> None:
        for item in self.types:
            if not isinstance(item, type) or not issubclass(item, BaseException):
                raise TypeError(f"Catch.types entries must be exception classes: {item!r}")

    def is_catch(self, failure: BaseException) -> bool:
        types = self.types or (Exception,)
        if not isinstance(failure, types):
            return False
        if self.when is not None:
            return bool(self.when(failure))
        return True


@dataclass(frozen=True, slots=True)
class OnBlank(Marker):
    # The step runs only while `key` is absent or its evaluated value is blank.
    key: str

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key:
            raise ValueError("OnBlank.key must be a non-empty string")

    def is_blank(self) -> bool:
        capsule = self._require_capsule()
        if not capsule.has(self.key):
            return True
        return blank(capsule.evaluate(capsule.get(self.key)))

    def is_filled(self) -> bool:
        return not self.is_blank()


def attach(marker: Marker) -> Callable[[T], T]:
    # Decorators apply bottom-up, so prepending keeps the top-down declaration order.
    def _decorate(target: T) -> T:
        existing = getattr(target, MARKERS_ATTR, ())
        try:
            setattr(target, MARKERS_ATTR, (marker, *existing))
        except (AttributeError, TypeError) as exc:
            raise TypeError(f"cannot attach {type(marker).__name__} to {target!r}") from exc
        return target

    return _decorate


def setter(key: str) -> Callable[[T], T]:
    return attach(Setter(key=key))


def catch(*types: type[BaseException], when: Callable[[BaseException], bool] | None = None) -> Callable[[T], T]:
    return attach(Catch(types=tuple(types), when=when))


def on_blank(key: str) -> Callable[[T], T]:
    return attach(OnBlank(key=key))
