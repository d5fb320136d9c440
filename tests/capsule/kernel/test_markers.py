from __future__ import annotations

import pytest

from capsule.kernel.capsule import Capsule
from capsule.kernel.discovery import find_marker, markers_of
from capsule.kernel.markers import (
    MARKERS_ATTR,
    Catch,
    MarkerBindingError,
    OnBlank,
    Setter,
    catch,
    on_blank,
    setter,
)


def test_setter_decorator_attaches_marker() -> None:
    # @setter stores a Setter marker on the function.
    @setter("total")
    def total() -> int:
        return 5

    markers = getattr(total, MARKERS_ATTR)
    assert markers == (Setter(key="total"),)
    assert total() == 5


def test_markers_keep_declaration_order() -> None:
    # Stacked decorators are listed top-down.
    @setter("result")
    @on_blank("result")
    def step() -> int:
        return 1

    assert [type(marker) for marker in markers_of(step)] == [Setter, OnBlank]


def test_setter_rejects_empty_key() -> None:
    with pytest.raises(ValueError):
        setter("")


def test_on_blank_rejects_empty_key() -> None:
    with pytest.raises(ValueError):
        on_blank("")


def test_catch_rejects_non_exception_types() -> None:
    with pytest.raises(TypeError):
        catch(int)  # type: ignore[arg-type]


def test_catch_matches_by_type() -> None:
    marker = Catch(types=(TypeError,))
    assert marker.is_catch(TypeError("bad")) is True
    assert marker.is_catch(ValueError("bad")) is False


def test_catch_without_types_matches_any_exception() -> None:
    assert Catch().is_catch(RuntimeError("x")) is True


def test_catch_applies_predicate() -> None:
    # The predicate narrows an already matching type.
    marker = Catch(types=(ValueError,), when=lambda exc: "retry" in str(exc))
    assert marker.is_catch(ValueError("please retry")) is True
    assert marker.is_catch(ValueError("fatal")) is False
    assert marker.is_catch(TypeError("retry")) is False


def test_find_marker_returns_none_when_absent() -> None:
    # Missing markers are a normal outcome.
    def plain() -> None:
        return None

    assert find_marker(plain, Setter) is None
    assert markers_of(plain) == ()


def test_find_marker_binds_capsule() -> None:
    capsule = Capsule()

    @on_blank("name")
    def step() -> None:
        return None

    marker = find_marker(step, OnBlank, capsule)
    assert marker is not None
    assert marker.capsule is capsule
    # The attached marker stays unbound.
    assert markers_of(step)[0].capsule is None


def test_unbound_on_blank_raises() -> None:
    with pytest.raises(MarkerBindingError):
        OnBlank(key="name").is_blank()


def test_on_blank_checks_capsule_state() -> None:
    capsule = Capsule()
    marker = OnBlank(key="name").bind(capsule)
    assert marker.is_blank() is True
    capsule.set("name", "  ")
    assert marker.is_blank() is True
    capsule.set("name", "ann")
    assert marker.is_blank() is False
    assert marker.is_filled() is True


def test_on_blank_evaluates_lazy_values() -> None:
    # Callables in the store are evaluated before the blank check.
    capsule = Capsule().set("items", lambda: [])
    assert OnBlank(key="items").bind(capsule).is_blank() is True


def test_attach_rejects_targets_without_attributes() -> None:
    class _Target:
        def method(self) -> None:
            return None

    with pytest.raises(TypeError):
        setter("x")(_Target().method)


def test_bound_method_exposes_function_markers() -> None:
    class _Steps:
        @setter("value")
        def compute(self) -> int:
            return 3

    assert find_marker(_Steps().compute, Setter) == Setter(key="value")
