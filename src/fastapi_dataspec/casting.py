"""Cast engine contract and the default pydantic-backed engine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from fastapi_dataspec.annotation import TypeIdentifier

Location = tuple[str | int, ...]


@dataclass(frozen=True)
class CastError:
    """Structured mismatch between a body and its declared type."""

    errors: tuple[tuple[Location, str], ...]

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> CastError:
        return cls(
            errors=tuple((tuple(err["loc"]), err["msg"]) for err in exc.errors())
        )

    @staticmethod
    def format_location(loc: Sequence[str | int]) -> str:
        return ".".join(str(part) for part in loc) or "<root>"

    def __str__(self) -> str:
        return "\n".join(
            f"{self.format_location(loc)}: {msg}" for loc, msg in self.errors
        )


@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class Failure:
    reason: CastError


CastResult = Success | Failure


@runtime_checkable
class CastEngine(Protocol):
    """Casts untyped data into the type named by a TypeIdentifier."""

    def cast(self, data: Any, type_id: TypeIdentifier) -> CastResult: ...


class PydanticCastEngine:
    """Default cast engine validating through ``pydantic.TypeAdapter``.

    ``strict=None`` keeps the strictness configured on the type itself.
    """

    def __init__(self, *, strict: bool | None = None) -> None:
        self._strict = strict
        self._adapters: dict[TypeIdentifier, TypeAdapter[Any]] = {}

    def adapter(self, type_id: TypeIdentifier) -> TypeAdapter[Any]:
        try:
            return self._adapters[type_id]
        except KeyError:
            pass
        except TypeError:
            # unhashable scope, build a fresh adapter every time
            return TypeAdapter(type_id.resolve())
        adapter: TypeAdapter[Any] = TypeAdapter(type_id.resolve())
        self._adapters[type_id] = adapter
        return adapter

    def cast(self, data: Any, type_id: TypeIdentifier) -> CastResult:
        adapter = self.adapter(type_id)
        try:
            value = adapter.validate_python(data, strict=self._strict)
        except ValidationError as exc:
            return Failure(CastError.from_validation_error(exc))
        return Success(value)
