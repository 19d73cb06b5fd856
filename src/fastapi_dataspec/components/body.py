"""Body parsing components — JSONBody."""

from __future__ import annotations

from typing import Any

from fastapi_dataspec.component import ComponentCategory, FlowComponent
from fastapi_dataspec.context import RequestContext
from fastapi_dataspec.outcome import CONTINUE, Halt, StageResult


def _is_json(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


class JSONBody(FlowComponent):
    """Decodes a JSON request body into ctx.body.

    A request without a body or without a Content-Type yields an empty object.
    """

    category = ComponentCategory.PARSING

    async def resolve(self, ctx: RequestContext) -> StageResult:
        content_type = ctx.request.headers.get("content-type")
        if content_type is None:
            ctx.body = {}
            return CONTINUE
        if not _is_json(content_type):
            return Halt(f"Unsupported media type {content_type!r}", status_code=415)

        if not await ctx.request.body():
            ctx.body = {}
            return CONTINUE

        try:
            ctx.body = await ctx.request.json()
        except ValueError:
            return Halt("Invalid JSON body", status_code=400)
        return CONTINUE

    def openapi_spec(self) -> dict[str, Any] | None:
        return {
            "responses": {
                "415": {"description": "Unsupported media type"},
            },
        }
