"""Shared pytest fixtures for fastapi-dataspec tests."""

from __future__ import annotations

import json
from typing import Any

import pytest
from starlette.requests import Request

from fastapi_dataspec.annotation import TypeAnnotation, typeref
from fastapi_dataspec.context import RequestContext

import sample_models as models


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects with an optional body."""

    def _make(
        method: str = "POST",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        body: bytes = b"",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
        }

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def make_json_request(make_request: Any) -> Any:
    """Factory for POST requests carrying a JSON-encoded payload."""

    def _make(payload: Any, path: str = "/foo") -> Request:
        return make_request(
            path=path,
            headers={"Content-Type": "application/json"},
            body=json.dumps(payload).encode(),
        )

    return _make


@pytest.fixture
def foo_ctx(make_request: Any) -> Any:
    """Factory for a context annotated with models.Foo and a given parsed body."""

    def _make(body: Any) -> RequestContext:
        ctx = RequestContext(request=make_request(path="/foo"), body=body)
        ctx.dataspec = TypeAnnotation.from_ref(typeref(models, "Foo"))
        return ctx

    return _make


@pytest.fixture
def valid_foo() -> dict[str, Any]:
    return {"a": 3, "bars": [{"b1": 1.5, "b2": None}]}


@pytest.fixture
def invalid_foo() -> dict[str, Any]:
    return {"a": -1, "bars": []}
