"""End-to-end body casting through a FastAPI app."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

import sample_models as models
from fastapi_dataspec import (
    BodyCast,
    Flow,
    JSONBody,
    MissingTypeRef,
    RequestContext,
    flow_dependency,
    merge_flows,
    typeref,
    value,
)


def _make_app(flow: Flow, handled: list[Any] | None = None) -> FastAPI:
    app = FastAPI()

    @app.post("/foo")
    async def create_foo(
        ctx: RequestContext = Depends(flow_dependency(flow)),  # noqa: B008
    ) -> dict[str, Any]:
        foo = value(ctx)
        if handled is not None:
            handled.append(foo)
        return {"a": foo.a, "bars": [bar.model_dump() for bar in foo.bars]}

    return app


async def _post(app: FastAPI, path: str = "/foo", **kwargs: Any) -> Any:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post(path, **kwargs)


FOO_FLOW = Flow(JSONBody(), BodyCast(), typeref(models, "Foo"))


class TestConformingBody:
    async def test_handler_sees_casted_value(self, valid_foo: dict[str, Any]) -> None:
        handled: list[Any] = []
        resp = await _post(_make_app(FOO_FLOW, handled), json=valid_foo)
        assert resp.status_code == 200
        assert resp.json() == {"a": 3, "bars": [{"b1": 1.5, "b2": None}]}
        assert handled == [models.Foo(a=3, bars=[models.Bar(b1=1.5)])]

    async def test_optional_field_is_cast(self) -> None:
        resp = await _post(
            _make_app(FOO_FLOW), json={"a": 0, "bars": [{"b1": 2, "b2": "x"}]}
        )
        assert resp.status_code == 200
        assert resp.json()["bars"] == [{"b1": 2.0, "b2": "x"}]


class TestNonConformingBody:
    async def test_halts_with_bad_request(self, invalid_foo: dict[str, Any]) -> None:
        handled: list[Any] = []
        resp = await _post(_make_app(FOO_FLOW, handled), json=invalid_foo)
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail
        assert detail.startswith("a: ")
        assert handled == []

    async def test_missing_fields_are_reported(self) -> None:
        resp = await _post(_make_app(FOO_FLOW), json={})
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert "a: " in detail
        assert "bars: " in detail

    async def test_empty_body_is_checked_like_an_empty_object(self) -> None:
        resp = await _post(_make_app(FOO_FLOW))
        assert resp.status_code == 400
        assert "bars: " in resp.json()["detail"]

    async def test_body_without_content_type_is_not_decoded(self) -> None:
        resp = await _post(_make_app(FOO_FLOW), content=b'{"a": 3, "bars": []}')
        assert resp.status_code == 400
        assert "a: " in resp.json()["detail"]

    async def test_invalid_json_halts_before_cast(self) -> None:
        handled: list[Any] = []
        resp = await _post(
            _make_app(FOO_FLOW, handled),
            content=b"{oops",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid JSON body"
        assert handled == []

    async def test_wrong_media_type_is_415(self) -> None:
        resp = await _post(
            _make_app(FOO_FLOW),
            content=b"a=1",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert resp.status_code == 415


class TestMissingTypeRef:
    async def test_raises_and_handler_never_runs(
        self, valid_foo: dict[str, Any]
    ) -> None:
        handled: list[Any] = []
        app = _make_app(Flow(JSONBody(), BodyCast()), handled)
        with pytest.raises(MissingTypeRef) as exc_info:
            await _post(app, json=valid_foo)
        assert exc_info.value.route == "POST /foo"
        assert handled == []

    async def test_raises_regardless_of_body(self) -> None:
        app = _make_app(Flow(JSONBody(), BodyCast()))
        with pytest.raises(MissingTypeRef):
            await _post(app, json={"anything": ["goes"]})

    async def test_surfaces_as_500_when_not_raised_to_client(self) -> None:
        app = _make_app(Flow(JSONBody(), BodyCast()))
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post("/foo", json={"a": 1, "bars": []})
        assert resp.status_code == 500


class TestComposition:
    async def test_base_flow_with_route_typeref(
        self, valid_foo: dict[str, Any]
    ) -> None:
        base = Flow(JSONBody(), BodyCast())
        flow = merge_flows(base, Flow(typeref(models, "Foo")))
        resp = await _post(_make_app(flow), json=valid_foo)
        assert resp.status_code == 200
        assert resp.json()["a"] == 3

    async def test_declaring_twice_behaves_like_once(
        self, valid_foo: dict[str, Any]
    ) -> None:
        flow = Flow(JSONBody(), BodyCast(), typeref(models, "Foo"))
        flow.declare(models, "Foo")
        resp = await _post(_make_app(flow), json=valid_foo)
        assert resp.status_code == 200

    async def test_default_type_name(self, valid_foo: dict[str, Any]) -> None:
        flow = Flow(JSONBody(), BodyCast(), typeref(models))
        resp = await _post(_make_app(flow), json=valid_foo)
        assert resp.status_code == 200


class TestIsolation:
    async def test_concurrent_requests_do_not_share_dataspec(
        self, valid_foo: dict[str, Any], invalid_foo: dict[str, Any]
    ) -> None:
        handled: list[Any] = []
        app = _make_app(FOO_FLOW, handled)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            responses = await asyncio.gather(
                *(
                    client.post("/foo", json=valid_foo if i % 2 == 0 else invalid_foo)
                    for i in range(10)
                )
            )
        statuses = [resp.status_code for resp in responses]
        assert statuses == [200, 400] * 5
        assert len(handled) == 5
        assert all(foo.a == 3 for foo in handled)

    async def test_each_request_gets_fresh_annotation(self, make_request: Any) -> None:
        dep = flow_dependency(Flow(typeref(models, "Foo")))
        ctx1 = await dep(make_request())
        ctx2 = await dep(make_request())
        assert ctx1.dataspec is not ctx2.dataspec
        assert ctx1.dataspec == ctx2.dataspec
