"""Flow class — ordered container and execution plan for FlowComponents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fastapi_dataspec.annotation import DEFAULT_TYPE_NAME, TypeRef, typeref
from fastapi_dataspec.component import FlowComponent

if TYPE_CHECKING:
    from fastapi_dataspec.composition import OverrideFlow
    from fastapi_dataspec.hooks import FlowHook


@dataclass(frozen=True)
class ResolvedFlow:
    """Immutable, pre-computed execution plan."""

    components: tuple[FlowComponent, ...]
    typeref: TypeRef | None = None
    hooks: tuple[FlowHook, ...] = ()
    debug: bool = False


class Flow:
    """Ordered container of FlowComponent instances and a body type declaration."""

    def __init__(
        self,
        *items: FlowComponent | Flow | TypeRef | OverrideFlow,
        debug: bool = False,
    ) -> None:
        self._items: list[FlowComponent | Flow | TypeRef | OverrideFlow] = list(items)
        self._hooks: list[FlowHook] = []
        self._debug = debug
        self._resolved: ResolvedFlow | None = None

    def add(self, *items: FlowComponent | Flow | TypeRef | OverrideFlow) -> Flow:
        self._items.extend(items)
        self._resolved = None
        return self

    def declare(self, scope: Any, name: str | None = DEFAULT_TYPE_NAME) -> Flow:
        return self.add(typeref(scope, name))

    def add_hook(self, hook: FlowHook) -> Flow:
        self._hooks.append(hook)
        self._resolved = None
        return self

    def resolve(self) -> ResolvedFlow:
        if self._resolved is not None:
            return self._resolved

        flat: list[FlowComponent] = []
        self._flatten(self._items, flat)

        sorted_components = sorted(flat, key=lambda c: c.category.order)

        self._resolved = ResolvedFlow(
            components=tuple(sorted_components),
            typeref=self._find_typeref(self._items),
            hooks=tuple(self._hooks),
            debug=self._debug,
        )
        return self._resolved

    @staticmethod
    def _flatten(
        items: list[FlowComponent | Flow | TypeRef | OverrideFlow],
        out: list[FlowComponent],
    ) -> None:
        for item in items:
            if isinstance(item, Flow):
                Flow._flatten(item._items, out)
            elif isinstance(item, FlowComponent):
                out.append(item)
            # TypeRef is picked by _find_typeref, OverrideFlow by merge_flows

    @staticmethod
    def _find_typeref(
        items: list[FlowComponent | Flow | TypeRef | OverrideFlow],
    ) -> TypeRef | None:
        """Return the last declared TypeRef, nested flows included."""
        found: TypeRef | None = None
        for item in items:
            if isinstance(item, TypeRef):
                found = item
            elif isinstance(item, Flow):
                nested = Flow._find_typeref(item._items)
                if nested is not None:
                    found = nested
        return found
