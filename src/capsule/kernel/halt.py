from __future__ import annotations

from typing import NoReturn


class Halt(Exception):
    # Short-circuit signal raised by a step; run() swallows it and records the value.
    def __init__(self, value: object = None) -> None:
        super().__init__("capsule halted")
        self.value = value


class WithHalt:
    # Halt bookkeeping mixed into Capsule; state describes the most recent run() pass.
    _halted: bool = False
    _halt_value: object = None

    def halt(self, value: object = None) -> NoReturn:
        self._halted = True
        self._halt_value = value
        raise Halt(value)

    def has_halt(self) -> bool:
        return self._halted

    def get_halt(self) -> object:
        return self._halt_value

    def _reset_halt(self) -> None:
        self._halted = False
        self._halt_value = None
