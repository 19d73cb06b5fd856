"""Flow composition — merge_flows(), OverrideFlow."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi_dataspec.annotation import TypeRef
from fastapi_dataspec.component import ComponentCategory, FlowComponent

if TYPE_CHECKING:
    from fastapi_dataspec.flow import Flow


class OverrideFlow:
    """Composition directive that replaces all components of a given category."""

    def __init__(self, component: FlowComponent) -> None:
        self.component = component
        self.category = component.category


def merge_flows(*flows: Flow) -> Flow:
    """Merge multiple flows with last-writer-wins by category.

    Later flows' component groups replace earlier flows' groups for the same
    ComponentCategory, and the last flow declaring a TypeRef supplies the
    merged body type. OverrideFlow directives are processed during merge.
    """
    from fastapi_dataspec.flow import Flow

    category_groups: dict[ComponentCategory, list[FlowComponent]] = {}
    declared: TypeRef | None = None
    debug = False

    for flow in flows:
        debug = debug or flow._debug

        flow_categories: dict[ComponentCategory, list[FlowComponent]] = {}
        overrides: list[OverrideFlow] = []

        for item in flow._items:
            if isinstance(item, OverrideFlow):
                overrides.append(item)
            elif isinstance(item, Flow):
                flat: list[FlowComponent] = []
                Flow._flatten([item], flat)
                for comp in flat:
                    flow_categories.setdefault(comp.category, []).append(comp)
            elif isinstance(item, FlowComponent):
                flow_categories.setdefault(item.category, []).append(item)

        for cat, comps in flow_categories.items():
            category_groups[cat] = comps

        for override in overrides:
            category_groups[override.category] = [override.component]

        ref = Flow._find_typeref(flow._items)
        if ref is not None:
            declared = ref

    all_components: list[FlowComponent] = []
    for cat in sorted(category_groups.keys(), key=lambda c: c.order):
        all_components.extend(category_groups[cat])

    merged = Flow(*all_components, debug=debug)
    if declared is not None:
        merged.add(declared)
    return merged
