"""Casting components — BodyCast, plus the value() accessor."""

from __future__ import annotations

import logging
from typing import Any, NoReturn

from fastapi_dataspec.casting import CastEngine, PydanticCastEngine, Success
from fastapi_dataspec.component import ComponentCategory, FlowComponent
from fastapi_dataspec.context import RequestContext
from fastapi_dataspec.exceptions import MissingTypeRef
from fastapi_dataspec.outcome import CONTINUE, Halt, StageResult

logger = logging.getLogger(__name__)


class BodyCast(FlowComponent):
    """Casts ctx.body into the route's declared type.

    On success the value lands in ``ctx.dataspec.value``. On mismatch the flow
    halts with ``status_code`` and the rendered mismatch as detail.
    """

    category = ComponentCategory.CASTING

    def __init__(
        self,
        engine: CastEngine | None = None,
        *,
        status_code: int = 400,
    ) -> None:
        self._engine: CastEngine = engine or PydanticCastEngine()
        self._status_code = status_code

    @property
    def engine(self) -> CastEngine:
        return self._engine

    async def resolve(self, ctx: RequestContext) -> StageResult:
        dataspec = ctx.dataspec
        if dataspec is None:
            _raise_missing_typeref(ctx)

        result = self._engine.cast(ctx.body, dataspec.type)
        if isinstance(result, Success):
            dataspec.set_value(result.value)
            return CONTINUE

        detail = str(result.reason)
        logger.debug("Body does not conform to %s: %s", dataspec.type, detail)
        return Halt(detail, status_code=self._status_code)

    def openapi_spec(self) -> dict[str, Any] | None:
        return {
            "responses": {
                str(self._status_code): {
                    "description": "Request body does not conform to its type",
                },
            },
        }


def value(ctx: RequestContext) -> Any:
    """Get the casted value.

    Only meaningful inside a handler reached after a successful ``BodyCast``.
    """
    dataspec: Any = ctx.dataspec
    return dataspec.value


def _raise_missing_typeref(ctx: RequestContext) -> NoReturn:
    route = f"{ctx.request.method} {ctx.request.url.path}"
    logger.error("BodyCast ran without a typeref on %s", route)
    raise MissingTypeRef(
        f"Probably you missed a typeref on this route ({route}).\n\n"
        "    flow = Flow(JSONBody(), BodyCast(), typeref(models, \"Foo\"))\n",
        route=route,
    )
