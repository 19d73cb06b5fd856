"""Stage results returned by flow components: Continue or Halt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class Continue:
    """The stage finished; run the next one."""


@dataclass(frozen=True)
class Halt:
    """Stop the flow and answer with ``status_code`` and ``detail``."""

    detail: str
    status_code: int = 400
    headers: dict[str, str] | None = None


CONTINUE: Final = Continue()

StageResult = Continue | Halt | None
