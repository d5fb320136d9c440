from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from capsule.observability.logging import CapsuleLog, JsonlLogSink, LogSink, StdoutLogSink
from capsule.resolvers.registry import DEFAULT_RESOLVER_NAMES, default_registry

# Config models map the YAML file to typed settings for Capsule.from_config.


class LoggingConfig(BaseModel):
    # Structured log output for run events; disabled unless requested.
    model_config = ConfigDict(extra="forbid")
    enabled: bool = False
    level: Literal["debug", "info", "warning", "error"] = "info"
    sink: Literal["stdout", "jsonl"] = "stdout"
    path: str | None = None

    @model_validator(mode="after")
    def jsonl_needs_path(self) -> LoggingConfig:
        if self.enabled and self.sink == "jsonl" and not self.path:
            raise ValueError("logging.path is required when logging.sink is 'jsonl'")
        return self

    def build_log(self, *, sink: LogSink | None = None) -> CapsuleLog:
        # An explicit sink wins over the configured one.
        if not self.enabled:
            return CapsuleLog()
        if sink is None:
            sink = JsonlLogSink(Path(self.path or "")) if self.sink == "jsonl" else StdoutLogSink()
        return CapsuleLog(sink, level=self.level)


class CapsuleConfig(BaseModel):
    # Resolver chain order, namespace depth guard and logging.
    model_config = ConfigDict(extra="forbid")
    resolvers: list[str] = Field(default_factory=lambda: list(DEFAULT_RESOLVER_NAMES))
    namespace_max_depth: int = Field(default=32, ge=1)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("resolvers")
    @classmethod
    def known_unique_resolvers(cls, value: list[str]) -> list[str]:
        registry = default_registry()
        unknown = [name for name in value if name not in registry]
        if unknown:
            raise ValueError(f"unknown resolvers: {unknown}")
        if len(value) != len(set(value)):
            raise ValueError("resolvers must not contain duplicates")
        return value
