from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from capsule.kernel.params import ParamDescriptor

if TYPE_CHECKING:
    from capsule.kernel.capsule import Capsule

Next = Callable[[ParamDescriptor], object]


class ParamResolver:
    # One link of the resolver chain: return a value or delegate to next_(param).
    name: str = ""

    def __init__(self, capsule: Capsule) -> None:
        self.capsule = capsule

    def handle(self, param: ParamDescriptor, next_: Next) -> object:
        raise NotImplementedError("ParamResolver.handle must be implemented")
