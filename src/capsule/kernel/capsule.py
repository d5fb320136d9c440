from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING

from capsule.kernel.callback import Callback
from capsule.kernel.discovery import find_marker
from capsule.kernel.halt import Halt, WithHalt
from capsule.kernel.markers import OnBlank, Setter
from capsule.kernel.params import describe
from capsule.observability.logging import CapsuleLog, LogSink
from capsule.resolvers.base import ParamResolver
from capsule.resolvers.chain import ResolverChain
from capsule.resolvers.registry import DEFAULT_RESOLVERS, ResolverRegistry, default_registry
from capsule.support.data import data_get

if TYPE_CHECKING:
    from capsule.config.models import CapsuleConfig

# Ambient keys synthesized on every read; stored values under these names are shadowed.
RESERVED_KEYS: tuple[str, ...] = ("capsule", "set", "halt")


class NamespaceError(RuntimeError):
    # Raised when the parent chain of nested capsules is cyclic or deeper than allowed.
    pass


class Capsule(WithHalt):
    # Ordered steps over a shared key/value store; markers on each step drive setter, blank-gate and catch behaviour.
    def __init__(
        self,
        *,
        parent: Capsule | None = None,
        resolvers: Iterable[type[ParamResolver]] | None = None,
        log: CapsuleLog | None = None,
        namespace_max_depth: int = 32,
    ) -> None:
        if namespace_max_depth < 1:
            raise ValueError("namespace_max_depth must be >= 1")
        self._data: dict[str, object] = {}
        self._callbacks: list[Callback] = []
        self._cached_values: dict[str, object] = {}
        self._failures: list[Exception] = []
        self._name_mocks: dict[str, object] = {}
        self._type_mocks: dict[type, object] = {}
        self._resolvers: tuple[type[ParamResolver], ...] = tuple(DEFAULT_RESOLVERS if resolvers is None else resolvers)
        self.log = log if log is not None else CapsuleLog()
        self.namespace_max_depth = namespace_max_depth
        self.parent = parent
        self._owns_log = True

    @classmethod
    def from_config(
        cls,
        config: CapsuleConfig,
        *,
        parent: Capsule | None = None,
        log_sink: LogSink | None = None,
        registry: ResolverRegistry | None = None,
    ) -> Capsule:
        registry = registry if registry is not None else default_registry()
        return cls(
            parent=parent,
            resolvers=registry.build(config.resolvers),
            log=config.logging.build_log(sink=log_sink),
            namespace_max_depth=config.namespace_max_depth,
        )

    # -----------------------------
    # Registration
    # -----------------------------
    def capsule(self, *items: object) -> Capsule:
        return self.through(*items)

    def through(self, *items: object) -> Capsule:
        for item in items:
            target = item if callable(item) else _constant(item)
            self._callbacks.append(Callback(target, self))
        return self

    @property
    def steps(self) -> tuple[Callback, ...]:
        return tuple(self._callbacks)

    # -----------------------------
    # Store
    # -----------------------------
    def set(self, key: str | Mapping[str, object], value: object = None) -> Capsule:
        if isinstance(key, Mapping):
            for k, v in key.items():
                self.set(k, v)
            return self
        if not isinstance(key, str):
            raise TypeError(f"Capsule keys must be strings (type={type(key).__name__})")
        self._data[key] = value
        self._cached_values.pop(key, None)
        return self

    def get(self, key: str, default: object = None) -> object:
        return data_get(self._snapshot(), key, default)

    def has(self, key: str) -> bool:
        return key in RESERVED_KEYS or key in self._data

    def is_reserved(self, key: str) -> bool:
        return key in RESERVED_KEYS

    def stored_items(self) -> list[tuple[str, object]]:
        return list(self._data.items())

    def _snapshot(self) -> dict[str, object]:
        return {**self._data, "capsule": self, "set": self.set, "halt": self.halt}

    def evaluate_key(self, key: str) -> object:
        if not self.has(key):
            return None
        raw = self.get(key)
        if isinstance(raw, str) or self.is_reserved(key):
            return raw
        if key not in self._cached_values:
            self._cached_values[key] = self.evaluate(raw)
        return self._cached_values[key]

    # -----------------------------
    # Evaluation
    # -----------------------------
    def evaluate(self, something: object, params: Mapping[str, object] | None = None) -> object:
        if not callable(something):
            return something
        if params:
            self.set(params)
        value = self.invoke(something)
        setter = find_marker(something, Setter)
        if setter is not None:
            self.set(setter.get_key(), value)
        return value

    def call(self, something: object) -> object:
        return self.evaluate(something)

    def invoke(self, target: Callable[..., object]) -> object:
        # Resolve and call without setter handling.
        args, kwargs = self.resolve_params(target)
        return target(*args, **kwargs)

    def resolve_params(self, target: Callable[..., object]) -> tuple[list[object], dict[str, object]]:
        return self.resolver_chain().resolve_all(describe(target))

    def resolver_chain(self, *, exclude: tuple[type[ParamResolver], ...] = ()) -> ResolverChain:
        resolvers = [resolver for resolver in self._resolvers if not issubclass(resolver, exclude)]
        return ResolverChain(self, resolvers)

    @property
    def resolvers(self) -> tuple[type[ParamResolver], ...]:
        return self._resolvers

    # -----------------------------
    # Execution
    # -----------------------------
    def run(self) -> Capsule:
        self._reset_halt()
        self._failures = []
        index = -1
        try:
            for index, callback in enumerate(list(self._callbacks)):
                if not callback.should_run():
                    self.log.debug("step.skipped", step=callback.label, index=index)
                    continue
                callback.evaluate()
                self.log.debug("step.evaluated", step=callback.label, index=index)
        except Halt:
            self.log.info("run.halted", index=index, value=repr(self.get_halt()))
        except Exception as exc:  # noqa: BLE001 - routed to catch steps below
            self._failures.append(exc)
            self.log.warning("failure.captured", type=type(exc).__name__, error=str(exc), index=index)

        failures, self._failures = self._failures, []
        unhandled: list[Exception] = []
        offered = 0
        try:
            for failure in failures:
                offered += 1
                handlers = [callback for callback in self._callbacks if callback.is_catch(failure)]
                if not handlers:
                    self.log.error("failure.unhandled", type=type(failure).__name__, error=str(failure))
                    unhandled.append(failure)
                    continue
                for handler in handlers:
                    handler.handle(failure)
                self.log.info("failure.handled", type=type(failure).__name__, handlers=len(handlers))
        except Halt:
            # A handler halting ends the replay; failures not yet offered stay unhandled.
            self.log.info("run.halted", index=index, value=repr(self.get_halt()), during="failure.handled")
            unhandled.extend(failures[offered:])

        if len(unhandled) == 1:
            raise unhandled[0]
        if unhandled:
            raise ExceptionGroup("unhandled capsule failures", unhandled)
        return self

    def close(self) -> None:
        if self._owns_log:
            self.log.close()

    def __enter__(self) -> Capsule:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def then_return(self, callback: Callable[..., object] | str) -> object:
        self.run()
        if self.has_halt():
            return self.get_halt()
        if isinstance(callback, str):
            return self.evaluate_key(callback)
        return self.evaluate(callback)

    # -----------------------------
    # Blank gates
    # -----------------------------
    def on_blank(self, key: str, value: object = None) -> OnBlank | Capsule:
        on_blank = OnBlank(key=key).bind(self)
        if value is None:
            return on_blank
        if on_blank.is_blank():
            self.through(value)
        return self

    def on_null(self, key: str, value: object = None) -> OnBlank | Capsule:
        return self.on_blank(key, value)

    def set_on_blank(self, key: str, value: object) -> Capsule:
        if OnBlank(key=key).bind(self).is_blank():
            self.set(key, value)
        return self

    def when_empty(self) -> WhenEmpty:
        return WhenEmpty(self)

    # -----------------------------
    # Mocks
    # -----------------------------
    def mock(self, target: str | type, value: object) -> Capsule:
        if isinstance(target, str):
            self._name_mocks[target] = value
        elif isinstance(target, type):
            self._type_mocks[target] = value
        else:
            raise TypeError(f"mock target must be a parameter name or a type (type={type(target).__name__})")
        return self

    def name_mocks(self) -> dict[str, object]:
        return dict(self._name_mocks)

    def type_mocks(self) -> dict[type, object]:
        return dict(self._type_mocks)

    # -----------------------------
    # Namespaces
    # -----------------------------
    def nest(self, *, resolvers: Iterable[type[ParamResolver]] | None = None) -> Capsule:
        child = type(self)(
            parent=self,
            resolvers=self._resolvers if resolvers is None else resolvers,
            log=self.log,
            namespace_max_depth=self.namespace_max_depth,
        )
        # The parent keeps ownership of the shared log.
        child._owns_log = False
        return child

    def set_namespace(self, parent: Capsule | None) -> Capsule:
        self.parent = parent
        return self

    def has_namespace(self) -> bool:
        return self.parent is not None

    def namespace_chain(self) -> list[Capsule]:
        # Nearest parent first; a revisited capsule or an over-deep chain fails fast.
        chain: list[Capsule] = []
        seen = {id(self)}
        current = self.parent
        while current is not None:
            if id(current) in seen:
                raise NamespaceError("Capsule namespace chain is cyclic")
            if len(chain) >= self.namespace_max_depth:
                raise NamespaceError(f"Capsule namespace chain exceeds max depth {self.namespace_max_depth}")
            seen.add(id(current))
            chain.append(current)
            current = current.parent
        return chain


class WhenEmpty:
    # Fluent helper applying the blank gate per key.
    def __init__(self, capsule: Capsule) -> None:
        self.capsule = capsule

    def set(self, key: str, value: object) -> WhenEmpty:
        self.capsule.set_on_blank(key, value)
        return self

    def through(self, key: str, *items: object) -> WhenEmpty:
        for item in items:
            self.capsule.on_blank(key, item)
        return self


def _constant(value: object) -> Callable[[], object]:
    def _value() -> object:
        return value

    return _value
