"""flow_dependency() — factory producing FastAPI-compatible dependency callables."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Literal

from fastapi import HTTPException
from starlette.requests import Request

from fastapi_dataspec.annotation import TypeAnnotation
from fastapi_dataspec.context import RequestContext
from fastapi_dataspec.exceptions import (
    FlowException,
    FlowInternalError,
    SchemaConflict,
)
from fastapi_dataspec.flow import Flow, ResolvedFlow
from fastapi_dataspec.openapi import build_request_bodies, collect_openapi_metadata
from fastapi_dataspec.outcome import Halt
from fastapi_dataspec.trace import FlowTrace, TraceEntry

logger = logging.getLogger(__name__)


def flow_dependency(flow: Flow) -> Callable[..., Awaitable[RequestContext]]:
    """Return a FastAPI-compatible dependency that executes the flow."""
    resolved = flow.resolve()
    if resolved.typeref is not None:
        # unknown type names fail at route registration, not on first request
        resolved.typeref.type.resolve()
    metadata = collect_openapi_metadata(resolved)

    dep = _make_dependency(resolved)

    # Attach metadata for OpenAPI enrichment
    dep._flow_openapi_metadata = metadata  # type: ignore[attr-defined]
    dep._flow_resolved = resolved  # type: ignore[attr-defined]

    return dep


def _new_context(request: Request, resolved: ResolvedFlow) -> RequestContext:
    ctx = RequestContext(request=request)
    if resolved.typeref is not None:
        ctx.dataspec = TypeAnnotation.from_ref(resolved.typeref)
    return ctx


def _make_dependency(
    resolved: ResolvedFlow,
) -> Callable[..., Awaitable[RequestContext]]:
    async def dependency(request: Request) -> RequestContext:
        ctx = _new_context(request, resolved)
        trace = FlowTrace() if resolved.debug else None
        flow_start = time.perf_counter()

        for hook in resolved.hooks:
            await hook.on_flow_start(ctx)

        try:
            halt = await _run_components(ctx, resolved, trace)
        except FlowException as exc:
            _finish_trace(ctx, trace, flow_start, "ERROR", error=exc)
            for hook in resolved.hooks:
                await hook.on_flow_end(ctx)
            raise
        except Exception as exc:
            logger.error("Unexpected error in flow", exc_info=exc)
            wrapped = FlowInternalError("Internal flow error", cause=exc)
            _finish_trace(ctx, trace, flow_start, "ERROR", error=wrapped)
            for hook in resolved.hooks:
                await hook.on_flow_end(ctx)
            raise HTTPException(status_code=500, detail=wrapped.detail) from wrapped

        _finish_trace(
            ctx, trace, flow_start, "OK" if halt is None else "HALTED", halt=halt
        )
        for hook in resolved.hooks:
            await hook.on_flow_end(ctx)

        if halt is not None:
            logger.debug("Flow halted with %s: %s", halt.status_code, halt.detail)
            raise HTTPException(
                status_code=halt.status_code, detail=halt.detail, headers=halt.headers
            )
        return ctx

    return dependency


async def _run_components(
    ctx: RequestContext,
    resolved: ResolvedFlow,
    trace: FlowTrace | None,
) -> Halt | None:
    """Run components in order, stopping at the first Halt."""
    for component in resolved.components:
        comp_start = time.perf_counter()
        try:
            result = await component.resolve(ctx)
        except Exception as exc:
            if trace is not None:
                trace.entries.append(
                    TraceEntry(
                        component_name=type(component).__name__,
                        category=component.category,
                        duration_ms=(time.perf_counter() - comp_start) * 1000,
                        outcome="FAILED",
                        reason=str(exc),
                    )
                )
            raise

        halt = result if isinstance(result, Halt) else None
        if trace is not None:
            trace.entries.append(
                TraceEntry(
                    component_name=type(component).__name__,
                    category=component.category,
                    duration_ms=(time.perf_counter() - comp_start) * 1000,
                    outcome="OK" if halt is None else "HALTED",
                    reason=None if halt is None else halt.detail,
                )
            )
        for hook in resolved.hooks:
            await hook.on_component(ctx, component, halt)
        if halt is not None:
            return halt
    return None


def _finish_trace(
    ctx: RequestContext,
    trace: FlowTrace | None,
    flow_start: float,
    outcome: Literal["OK", "HALTED", "ERROR"],
    *,
    halt: Halt | None = None,
    error: FlowException | None = None,
) -> None:
    if trace is None:
        return
    trace.total_duration_ms = (time.perf_counter() - flow_start) * 1000
    trace.outcome = outcome
    trace.halt = halt
    trace.error = error
    ctx.state["trace"] = trace


def enrich_openapi(app: Any) -> None:
    """Enrich FastAPI app's OpenAPI schema with flow metadata.

    Call this after all routes are registered to inject flow responses and
    the JSON schema of each route's declared body type.
    """
    from fastapi import FastAPI
    from fastapi.routing import APIRoute

    if not isinstance(app, FastAPI):
        return

    body_routes: list[tuple[APIRoute, tuple[Any, Any]]] = []

    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue

        metadata = _find_flow_metadata(route)
        if not metadata:
            continue

        if "responses" in metadata:
            existing = route.responses or {}
            for code, resp in metadata["responses"].items():
                existing[int(code)] = resp
            route.responses = existing

        if "body_schema" in metadata:
            body_routes.append((route, metadata["body_schema"]))

    if not body_routes:
        return

    request_bodies, defs = build_request_bodies([src for _, src in body_routes])
    for (route, _), request_body in zip(body_routes, request_bodies):
        route.openapi_extra = route.openapi_extra or {}
        route.openapi_extra["requestBody"] = request_body

    _register_schemas(app, defs)


def _find_flow_metadata(route: Any) -> dict[str, Any] | None:
    """Find flow OpenAPI metadata attached to route dependencies."""
    for dep in route.dependant.dependencies:
        call = dep.call
        if hasattr(call, "_flow_openapi_metadata"):
            result: dict[str, Any] = call._flow_openapi_metadata
            return result
    return None


def _register_schemas(app: Any, schemas: dict[str, Any]) -> None:
    """Register body type schemas in the app's OpenAPI components."""
    if not schemas:
        return

    original_schema = app.openapi

    def custom_openapi() -> dict[str, Any]:
        schema: dict[str, Any] = original_schema()
        components = schema.setdefault("components", {})
        registered = components.setdefault("schemas", {})
        for name, definition in schemas.items():
            if registered.setdefault(name, definition) != definition:
                raise SchemaConflict(name)
        return schema

    app.openapi = custom_openapi
