"""RequestContext — per-request state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlette.requests import Request

from fastapi_dataspec.annotation import TypeAnnotation


@dataclass
class RequestContext:
    """Lightweight per-request state container mutated by flow components.

    ``body`` holds the parsed request body, ``dataspec`` the route's declared
    type and, after a successful cast, the casted value.
    """

    request: Request
    body: Any = None
    dataspec: TypeAnnotation | None = None
    state: dict[str, Any] = field(default_factory=dict)
