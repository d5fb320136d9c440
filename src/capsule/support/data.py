from __future__ import annotations

from collections.abc import Mapping, Sequence

_MISSING = object()


def data_get(target: object, path: str | int | None, default: object = None) -> object:
    # Dotted lookup through mappings, sequences (numeric segments) and attributes.
    if path is None:
        return target
    if isinstance(target, Mapping) and path in target:
        # Exact keys win over dotted traversal, so "a.b" can be a literal key.
        return target[path]
    cur: object = target
    for part in str(path).split("."):
        cur = _step(cur, part)
        if cur is _MISSING:
            return default
    return cur


def _step(cur: object, part: str) -> object:
    if isinstance(cur, Mapping):
        return cur.get(part, _MISSING)
    if isinstance(cur, Sequence) and not isinstance(cur, (str, bytes)):
        if not part.lstrip("-").isdigit():
            return _MISSING
        index = int(part)
        if -len(cur) <= index < len(cur):
            return cur[index]
        return _MISSING
    if part.startswith("_"):
        return _MISSING
    return getattr(cur, part, _MISSING)
