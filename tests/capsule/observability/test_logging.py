from __future__ import annotations

import io
import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from capsule.kernel.capsule import Capsule
from capsule.kernel.markers import catch
from capsule.observability.logging import CapsuleLog, JsonlLogSink, LogMessage, StdoutLogSink


class _ListSink:
    def __init__(self) -> None:
        self.messages: list[LogMessage] = []

    def emit(self, message: LogMessage) -> None:
        self.messages.append(message)


def test_log_message_requires_level_and_message() -> None:
    with pytest.raises(ValueError):
        LogMessage(level="", message="x")
    with pytest.raises(ValueError):
        LogMessage(level="info", message="")
    with pytest.raises(ValueError):
        LogMessage(level="verbose", message="x")


def test_stdout_sink_prints_json_line(capsys: pytest.CaptureFixture[str]) -> None:
    ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    StdoutLogSink().emit(LogMessage(level="info", message="run.halted", timestamp=ts, fields={"index": 1}))
    payload = json.loads(capsys.readouterr().out.strip())
    assert payload == {"index": 1, "event": "run.halted", "level": "info", "at": "2024-01-02T03:04:05Z"}


def test_record_keeps_fixed_keys_over_event_fields() -> None:
    message = LogMessage(level="warning", message="failure.captured", fields={"level": "x", "type": "KeyError"})
    record = message.record()
    assert record["level"] == "warning"
    assert record["event"] == "failure.captured"
    assert record["type"] == "KeyError"


def test_stdout_sink_writes_to_given_stream() -> None:
    stream = io.StringIO()
    StdoutLogSink(stream).emit(LogMessage(level="debug", message="step.evaluated", fields={"step": object}))
    payload = json.loads(stream.getvalue())
    assert payload["event"] == "step.evaluated"
    assert payload["step"] == repr(object)


def test_jsonl_sink_appends_lines(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "capsule.jsonl"
    sink = JsonlLogSink(path)
    sink.emit(LogMessage(level="info", message="a"))
    sink.emit(LogMessage(level="error", message="b"))
    assert sink.closed is False
    sink.close()
    assert sink.closed is True
    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [line["event"] for line in lines] == ["a", "b"]


def test_jsonl_sink_opens_file_on_first_event(tmp_path: Path) -> None:
    path = tmp_path / "capsule.jsonl"
    sink = JsonlLogSink(path)
    assert path.exists() is False
    sink.close()
    sink.emit(LogMessage(level="info", message="run.halted"))
    sink.close()
    assert path.exists() is True


def test_capsule_log_close_releases_sink(tmp_path: Path) -> None:
    sink = JsonlLogSink(tmp_path / "run.jsonl")
    log = CapsuleLog(sink)
    log.info("run.halted")
    log.close()
    assert sink.closed is True
    CapsuleLog(_ListSink()).close()
    CapsuleLog().close()


def test_capsule_log_filters_by_level() -> None:
    sink = _ListSink()
    log = CapsuleLog(sink, level="warning")
    log.debug("d")
    log.info("i")
    log.warning("w", key=1)
    log.error("e")
    assert [(m.level, m.message) for m in sink.messages] == [("warning", "w"), ("error", "e")]
    assert sink.messages[0].fields == {"key": 1}


def test_capsule_log_without_sink_is_silent() -> None:
    log = CapsuleLog()
    assert log.enabled_for("error") is False
    log.error("ignored")


def test_capsule_log_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        CapsuleLog(level="loud")


def test_run_emits_skip_and_halt_events() -> None:
    sink = _ListSink()
    capsule = Capsule(log=CapsuleLog(sink, level="debug"))

    @catch()
    def handler() -> None:
        return None

    capsule.through(handler, lambda halt: halt("x"), lambda: None).run()
    assert [m.message for m in sink.messages] == ["step.skipped", "run.halted"]
    assert sink.messages[1].fields["index"] == 1


def test_run_emits_failure_events() -> None:
    sink = _ListSink()
    capsule = Capsule(log=CapsuleLog(sink, level="info"))

    def bad() -> None:
        raise TypeError("bad")

    @catch(TypeError)
    def handler() -> None:
        return None

    capsule.through(bad, handler).run()
    assert [(m.level, m.message) for m in sink.messages] == [
        ("warning", "failure.captured"),
        ("info", "failure.handled"),
    ]
    assert sink.messages[0].fields["type"] == "TypeError"
    assert sink.messages[1].fields["handlers"] == 1


def test_run_emits_unhandled_event() -> None:
    sink = _ListSink()
    capsule = Capsule(log=CapsuleLog(sink, level="error"))

    def bad() -> None:
        raise KeyError("k")

    with pytest.raises(KeyError):
        capsule.through(bad).run()
    assert [m.message for m in sink.messages] == ["failure.unhandled"]
