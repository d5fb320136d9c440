from .logging import LEVELS, CapsuleLog, JsonlLogSink, LogMessage, LogSink, StdoutLogSink, render_line

__all__ = ["LEVELS", "CapsuleLog", "JsonlLogSink", "LogMessage", "LogSink", "StdoutLogSink", "render_line"]
