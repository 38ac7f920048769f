from __future__ import annotations

from dataclasses import dataclass

from timesheets.db.models import DEFAULT_HOUR_THRESHOLD


@dataclass(frozen=True)
class PhaseSeed:
    code: str
    description: str
    category: str
    hour_threshold: int = DEFAULT_HOUR_THRESHOLD


PREDEFINED_PHASES: tuple[PhaseSeed, ...] = (
    PhaseSeed("BOR0101", "FORATURA PASSAGGI CAVI SU SOLETTA", "BOR01"),
    PhaseSeed("BOR0102", "FORATURA PASSAGGI CAVI SU TRAMEZZATURE", "BOR01"),
)
