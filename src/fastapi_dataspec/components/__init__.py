"""Built-in flow components."""

from fastapi_dataspec.components.body import JSONBody
from fastapi_dataspec.components.cast import BodyCast, value

__all__ = [
    "BodyCast",
    "JSONBody",
    "value",
]
