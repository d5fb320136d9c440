from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import IO, Protocol

LEVELS: tuple[str, ...] = ("debug", "info", "warning", "error")


@dataclass(frozen=True, slots=True)
class LogMessage:
    # One run event (step.skipped, failure.captured, ...) with its context fields.
    level: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    fields: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.level or not self.message:
            raise ValueError("LogMessage requires non-empty level/message")
        if self.level not in LEVELS:
            raise ValueError(f"LogMessage.level must be one of {LEVELS}: {self.level!r}")

    def record(self) -> dict[str, object]:
        # Event fields are flattened; the fixed keys win on collision.
        return {
            **self.fields,
            "event": self.message,
            "level": self.level,
            "at": self.timestamp.isoformat().replace("+00:00", "Z"),
        }


class LogSink(Protocol):
    def emit(self, message: LogMessage) -> None:
        raise NotImplementedError("LogSink.emit must be implemented")


def render_line(message: LogMessage) -> str:
    # Step labels and halt values may not be JSON types; repr keeps the line valid.
    return json.dumps(message.record(), separators=(",", ":"), ensure_ascii=False, default=repr)


class StdoutLogSink:
    # Writes to the stream current at emit time so pytest capture sees it.
    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream

    def emit(self, message: LogMessage) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(render_line(message) + "\n")


class JsonlLogSink:
    # Appends to path; the file is opened on the first event and held until close().
    def __init__(self, path: Path) -> None:
        self.path = path
        self._file: IO[str] | None = None

    @property
    def closed(self) -> bool:
        return self._file is None or self._file.closed

    def emit(self, message: LogMessage) -> None:
        if self._file is None or self._file.closed:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = self.path.open("a", encoding="utf-8")
        self._file.write(render_line(message) + "\n")
        self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class CapsuleLog:
    # Level-filtered front for an optional sink; silent without a sink.
    def __init__(self, sink: LogSink | None = None, *, level: str = "info") -> None:
        if level not in LEVELS:
            raise ValueError(f"log level must be one of {LEVELS}: {level!r}")
        self.sink = sink
        self.level = level

    def enabled_for(self, level: str) -> bool:
        return self.sink is not None and LEVELS.index(level) >= LEVELS.index(self.level)

    def emit(self, level: str, message: str, **fields: object) -> None:
        sink = self.sink
        if sink is None or not self.enabled_for(level):
            return
        sink.emit(LogMessage(level=level, message=message, fields=fields))

    def debug(self, message: str, **fields: object) -> None:
        self.emit("debug", message, **fields)

    def info(self, message: str, **fields: object) -> None:
        self.emit("info", message, **fields)

    def warning(self, message: str, **fields: object) -> None:
        self.emit("warning", message, **fields)

    def error(self, message: str, **fields: object) -> None:
        self.emit("error", message, **fields)

    def close(self) -> None:
        # Sinks without close() (stdout, test doubles) hold nothing to release.
        close = getattr(self.sink, "close", None)
        if close is not None:
            close()
