"""FlowHook base and convenience hook classes."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi_dataspec.component import FlowComponent
from fastapi_dataspec.context import RequestContext
from fastapi_dataspec.outcome import Halt


class FlowHook:
    """Base abstraction for lifecycle hooks. All methods are no-op by default."""

    async def on_flow_start(self, ctx: RequestContext) -> None:
        pass

    async def on_flow_end(self, ctx: RequestContext) -> None:
        pass

    async def on_component(
        self,
        ctx: RequestContext,
        component: FlowComponent,
        halt: Halt | None,
    ) -> None:
        pass


class BeforeFlow(FlowHook):
    """Convenience hook that only fires on flow start."""

    def __init__(self, callback: Callable[[RequestContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_flow_start(self, ctx: RequestContext) -> None:
        await self._callback(ctx)


class AfterFlow(FlowHook):
    """Convenience hook that only fires on flow end, halted flows included."""

    def __init__(self, callback: Callable[[RequestContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_flow_end(self, ctx: RequestContext) -> None:
        await self._callback(ctx)


class AfterComponent(FlowHook):
    """Convenience hook that fires after each component with its Halt, if any."""

    def __init__(
        self,
        callback: Callable[
            [RequestContext, FlowComponent, Halt | None], Awaitable[None]
        ],
    ) -> None:
        self._callback = callback

    async def on_component(
        self,
        ctx: RequestContext,
        component: FlowComponent,
        halt: Halt | None,
    ) -> None:
        await self._callback(ctx, component, halt)
