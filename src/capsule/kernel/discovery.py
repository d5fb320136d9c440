from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from capsule.kernel.markers import MARKERS_ATTR, Marker

if TYPE_CHECKING:
    from capsule.kernel.capsule import Capsule

M = TypeVar("M", bound=Marker)


def markers_of(target: object) -> tuple[Marker, ...]:
    # Markers attached by decorators; bound methods expose their function's attributes.
    found = getattr(target, MARKERS_ATTR, ())
    if not isinstance(found, tuple):
        return ()
    return tuple(item for item in found if isinstance(item, Marker))


def find_marker(target: object, kind: type[M], capsule: Capsule | None = None) -> M | None:
    return select_marker(markers_of(target), kind, capsule)


def select_marker(markers: tuple[Marker, ...], kind: type[M], capsule: Capsule | None = None) -> M | None:
    # First marker of the requested kind, bound to the capsule when one is given.
    for marker in markers:
        if isinstance(marker, kind):
            if capsule is None:
                return marker
            return marker.bind(capsule)
    return None
