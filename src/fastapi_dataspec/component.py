"""FlowComponent abstract base class and ComponentCategory enum."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar

from fastapi_dataspec.context import RequestContext
from fastapi_dataspec.outcome import StageResult


class ComponentCategory(Enum):
    """Processing component categories, defining strict execution order."""

    PARSING = "parsing"
    CASTING = "casting"
    CUSTOM = "custom"

    @property
    def order(self) -> int:
        _ORDER = {
            "parsing": 1,
            "casting": 2,
            "custom": 3,
        }
        return _ORDER[self.value]


class FlowComponent(ABC):
    """Base abstraction for all processing units in a flow.

    ``resolve`` returns ``None`` or ``CONTINUE`` to let the flow go on, or a
    ``Halt`` to stop it before the route handler.
    """

    category: ClassVar[ComponentCategory]

    @abstractmethod
    async def resolve(self, ctx: RequestContext) -> StageResult: ...

    def openapi_spec(self) -> dict[str, Any] | None:
        return None
