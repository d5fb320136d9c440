from __future__ import annotations

from capsule.kernel.params import ParamDescriptor
from capsule.resolvers.base import Next, ParamResolver


class MockName(ParamResolver):
    # Test overrides registered with capsule.mock("name", value).
    name = "mock_name"

    def handle(self, param: ParamDescriptor, next_: Next) -> object:
        mocks = self.capsule.name_mocks()
        if param.name in mocks:
            return mocks[param.name]
        return next_(param)


class MockType(ParamResolver):
    # Test overrides registered with capsule.mock(SomeType, value).
    name = "mock_type"

    def handle(self, param: ParamDescriptor, next_: Next) -> object:
        annotation = param.annotated_type
        if annotation is None:
            return next_(param)
        mocks = self.capsule.type_mocks()
        if annotation in mocks:
            return mocks[annotation]
        for mocked_type, value in mocks.items():
            if issubclass(mocked_type, annotation):
                return value
        return next_(param)


class Name(ParamResolver):
    # Store lookup by parameter name; reserved keys come back raw from evaluate_key.
    name = "name"

    def handle(self, param: ParamDescriptor, next_: Next) -> object:
        capsule = self.capsule
        if not capsule.has(param.name):
            return next_(param)
        return capsule.evaluate_key(param.name)


class Type(ParamResolver):
    # The capsule itself or the first stored raw value of the annotated class.
    # Builtin annotations (str, int, list...) are left to name lookup.
    name = "type"

    def handle(self, param: ParamDescriptor, next_: Next) -> object:
        annotation = param.annotated_type
        if annotation is None:
            return next_(param)
        if isinstance(self.capsule, annotation):
            return self.capsule
        if annotation.__module__ == "builtins":
            return next_(param)
        for _key, value in self.capsule.stored_items():
            if isinstance(value, annotation):
                return value
        return next_(param)


class Default(ParamResolver):
    # Falls back to the default declared in the signature.
    name = "default"

    def handle(self, param: ParamDescriptor, next_: Next) -> object:
        if param.has_default:
            return param.default
        return next_(param)
