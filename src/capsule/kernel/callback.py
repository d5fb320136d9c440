from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from capsule.kernel.discovery import markers_of, select_marker
from capsule.kernel.markers import Catch, Marker, OnBlank, Setter
from capsule.kernel.params import callable_label

if TYPE_CHECKING:
    from capsule.kernel.capsule import Capsule

_UNSET = object()

M = TypeVar("M", bound=Marker)


class Callback:
    # One registered step: the callable, its owning capsule and its markers.
    # Markers are read once at registration; should-run and the result are memoized.
    def __init__(self, callable_: Callable[..., object], capsule: Capsule) -> None:
        if not callable(callable_):
            raise TypeError(f"Callback target must be callable (type={type(callable_).__name__})")
        self.callable = callable_
        self.capsule = capsule
        self.markers: tuple[Marker, ...] = markers_of(callable_)
        self._should_run: bool | None = None
        self._evaluated: object = _UNSET

    def __repr__(self) -> str:
        return f"Callback({self.label})"

    @property
    def label(self) -> str:
        return callable_label(self.callable)

    @property
    def evaluated(self) -> bool:
        return self._evaluated is not _UNSET

    def find_marker(self, kind: type[M]) -> M | None:
        return select_marker(self.markers, kind, self.capsule)

    def should_run(self) -> bool:
        if self._should_run is None:
            self._should_run = self._evaluate_should_run()
        return self._should_run

    def _evaluate_should_run(self) -> bool:
        if self.find_marker(Catch) is not None:
            return False
        on_blank = self.find_marker(OnBlank)
        if on_blank is not None:
            return on_blank.is_blank()
        return True

    def is_catch(self, failure: BaseException) -> bool:
        marker = self.find_marker(Catch)
        if marker is None:
            return False
        return marker.is_catch(failure)

    def is_setter(self) -> bool:
        return self.find_marker(Setter) is not None

    def setter_key(self) -> str | None:
        marker = self.find_marker(Setter)
        return None if marker is None else marker.get_key()

    def handle(self, failure: BaseException) -> object:
        return self.capsule.evaluate(self.callable, {"message": str(failure)})

    def evaluate(self) -> object:
        if self._evaluated is not _UNSET:
            return self._evaluated
        key = self.setter_key()
        if key is None:
            self._evaluated = self.capsule.invoke(self.callable)
        else:
            value = self.capsule.invoke(self.callable)
            self.capsule.set(key, value)
            self._evaluated = value
        return self._evaluated
