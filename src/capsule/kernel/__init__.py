from .callback import Callback
from .capsule import RESERVED_KEYS, Capsule, NamespaceError, WhenEmpty
from .discovery import find_marker, markers_of, select_marker
from .halt import Halt, WithHalt
from .markers import Catch, Marker, MarkerBindingError, OnBlank, Setter, attach, catch, on_blank, setter
from .params import ParamDescriptor, describe

# Kernel exports cover the container, the step wrapper and the marker vocabulary.
__all__ = [
    "RESERVED_KEYS",
    "Callback",
    "Capsule",
    "Catch",
    "Halt",
    "Marker",
    "MarkerBindingError",
    "NamespaceError",
    "OnBlank",
    "ParamDescriptor",
    "Setter",
    "WhenEmpty",
    "WithHalt",
    "attach",
    "catch",
    "describe",
    "find_marker",
    "markers_of",
    "on_blank",
    "select_marker",
    "setter",
]
