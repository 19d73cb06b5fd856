"""FlowTrace and TraceEntry — debug execution recording."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from fastapi_dataspec.component import ComponentCategory
from fastapi_dataspec.exceptions import FlowException
from fastapi_dataspec.outcome import Halt


@dataclass(frozen=True)
class TraceEntry:
    """Single component execution record."""

    component_name: str
    category: ComponentCategory
    duration_ms: float
    outcome: Literal["OK", "HALTED", "FAILED"]
    reason: str | None = None


@dataclass
class FlowTrace:
    """Structured record of a single flow execution."""

    entries: list[TraceEntry] = field(default_factory=list)
    total_duration_ms: float = 0.0
    outcome: Literal["OK", "HALTED", "ERROR"] = "OK"
    halt: Halt | None = None
    error: FlowException | None = None
