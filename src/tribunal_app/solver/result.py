from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

SOLVED_STATUSES = ("OPTIMAL", "FEASIBLE")


@dataclass(frozen=True)
class ScheduleEntry:
    defense_id: int
    tutor_id:   int
    examiner_a: int
    examiner_b: int
    slot:       int

    @property
    def examiners(self) -> Tuple[int, int]:
        return (self.examiner_a, self.examiner_b)


@dataclass
class SolveResult:
    status:        str                       # OPTIMAL/FEASIBLE/INFEASIBLE/UNKNOWN/MODEL_INVALID
    mode:          str                       # feasibility/optimize
    total_penalty: Optional[int]             = None
    entries:       List[ScheduleEntry]       = field(default_factory=list)
    loads:         Dict[int, int]            = field(default_factory=dict)
    slot_counts:   Dict[int, int]            = field(default_factory=dict)
    judges:        List[Tuple[int, int]]     = field(default_factory=list)
    penalties:     List[Tuple[int, int]]     = field(default_factory=list)
    diagnostics:   List[str]                 = field(default_factory=list)
    stats:         Dict[str, Any]            = field(default_factory=dict)

    @property
    def solved(self) -> bool:
        return self.status in SOLVED_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
