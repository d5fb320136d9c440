from .blank import blank, filled
from .data import data_get

__all__ = ["blank", "filled", "data_get"]
