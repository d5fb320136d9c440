from __future__ import annotations

from collections.abc import Sized


def blank(value: object) -> bool:
    # None, whitespace-only strings and empty collections are blank.
    # Booleans and numbers are never blank, including False and 0.
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (bool, int, float, complex)):
        return False
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def filled(value: object) -> bool:
    return not blank(value)
