"""Type declarations carried from route definition into the request context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi_dataspec.exceptions import TypeRefError

DEFAULT_TYPE_NAME = "Model"


@dataclass(frozen=True)
class TypeIdentifier:
    """Names a type inside a scope (a module, class or other namespace).

    With ``name=None`` the scope itself is the type.
    """

    scope: Any
    name: str | None = DEFAULT_TYPE_NAME

    def resolve(self) -> Any:
        if self.name is None:
            return self.scope
        try:
            return getattr(self.scope, self.name)
        except AttributeError:
            raise TypeRefError(
                f"{self.scope_name} has no type named {self.name!r}"
            ) from None

    @property
    def scope_name(self) -> str:
        return getattr(self.scope, "__qualname__", None) or getattr(
            self.scope, "__name__", repr(self.scope)
        )

    def __str__(self) -> str:
        if self.name is None:
            return self.scope_name
        return f"{self.scope_name}.{self.name}"


@dataclass
class TypeAnnotation:
    """Per-request dataspec slot: the declared type and, once cast, its value."""

    type: TypeIdentifier
    value: Any = None
    casted: bool = False

    @classmethod
    def from_ref(cls, ref: TypeRef) -> TypeAnnotation:
        return cls(type=ref.type)

    def set_value(self, value: Any) -> None:
        self.value = value
        self.casted = True


@dataclass(frozen=True)
class TypeRef:
    """Route configuration fragment declaring the expected body type.

    Placed in a ``Flow``, it seeds ``ctx.dataspec`` before any component runs.
    """

    type: TypeIdentifier


def typeref(scope: Any, name: str | None = DEFAULT_TYPE_NAME) -> TypeRef:
    """Declare the type the body of a route should conform to.

    ``typeref(models, "Foo")`` casts into ``models.Foo``; ``typeref(Foo, None)``
    casts into ``Foo`` itself. Without a name the scope's ``Model`` is used.
    """
    return TypeRef(type=TypeIdentifier(scope=scope, name=name))
