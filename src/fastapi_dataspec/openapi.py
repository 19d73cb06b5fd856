"""OpenAPI schema enrichment — collects metadata from flow components."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import TypeAdapter

from fastapi_dataspec.annotation import TypeIdentifier
from fastapi_dataspec.flow import ResolvedFlow

REF_TEMPLATE = "#/components/schemas/{model}"


def collect_openapi_metadata(resolved: ResolvedFlow) -> dict[str, Any]:
    """Collect and merge OpenAPI metadata from all resolved components."""
    responses: dict[str, Any] = {}

    for component in resolved.components:
        spec = component.openapi_spec()
        if spec is None:
            continue
        if "responses" in spec:
            responses.update(spec["responses"])

    result: dict[str, Any] = {}
    if responses:
        result["responses"] = responses

    engine = _schema_engine(resolved)
    if resolved.typeref is not None and engine is not None:
        result["body_schema"] = (engine, resolved.typeref.type)

    return result


def build_request_bodies(
    sources: Sequence[tuple[Any, TypeIdentifier]],
) -> tuple[list[dict[str, Any]], dict[str, Any]]:
    """Return one requestBody object per source and the component schemas they share.

    All body types go through a single schema generation so that distinct
    types sharing a class name get distinct component names.
    """
    inputs = [
        (index, "validation", engine.adapter(type_id))
        for index, (engine, type_id) in enumerate(sources)
    ]
    schemas, top_level = TypeAdapter.json_schemas(inputs, ref_template=REF_TEMPLATE)
    request_bodies = [
        {
            "required": True,
            "content": {"application/json": {"schema": schemas[(index, "validation")]}},
        }
        for index in range(len(sources))
    ]
    defs: dict[str, Any] = top_level.get("$defs", {})
    return request_bodies, defs


def _schema_engine(resolved: ResolvedFlow) -> Any | None:
    for component in resolved.components:
        engine = getattr(component, "engine", None)
        if engine is not None and hasattr(engine, "adapter"):
            return engine
    return None
