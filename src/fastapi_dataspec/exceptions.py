"""FlowException hierarchy for authoring and engine errors."""

from __future__ import annotations


class FlowException(Exception):
    """Base for all flow exceptions."""


class TypeRefError(FlowException):
    """A declared type could not be resolved from its scope."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class MissingTypeRef(FlowException):
    """A body cast ran on a route that never declared its body type."""

    def __init__(self, detail: str, *, route: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.route = route


class FlowInternalError(FlowException):
    """Engine-level error wrapping unexpected exceptions."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause


class SchemaConflict(FlowException):
    """Two different OpenAPI component schemas were registered under one name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Conflicting OpenAPI component schema {name!r}")
        self.name = name
