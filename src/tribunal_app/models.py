"""
Domain model for the TFG examining-committee scheduler.

Every domain object is a frozen dataclass: the instance is loaded once and is
read-only for the rest of the run.

Reference: Python Software Foundation. "dataclasses — Data Classes."
https://docs.python.org/3/library/dataclasses.html

Identity conventions:
  Professors are numbered 1..P and slots 1..S, because those numbers are the
  values the solver variables take. Defenses are numbered 0..T-1 and only
  index the per-defense variables.

OR-Tools worker parameter note:
  SolverParams.num_workers = 0 lets CP-SAT use every available core.
  Reference: OR-Tools sat_parameters.proto,
  https://github.com/google/or-tools
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Professor:
    id:              int
    name:            str
    available_slots: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Defense:
    """One thesis defense (TFG) and the professor who tutors it."""
    id:       int
    tutor_id: int
    title:    str = ""


@dataclass(frozen=True)
class Limits:
    max_tribunals_per_professor: int = 2
    max_defenses_per_slot:       int = 2


@dataclass(frozen=True)
class SolverParams:
    max_time_in_seconds: float = 10.0
    # 0 = use all available cores (OR-Tools default).
    # Only the first pass of optimize mode runs in parallel.
    num_workers: int = 0
    random_seed: int = 0


@dataclass(frozen=True)
class Instance:
    slots_count: int
    professors:  Tuple[Professor, ...] = ()
    defenses:    Tuple[Defense, ...]   = ()
    limits:      Limits                = field(default_factory=Limits)
    solver:      SolverParams          = field(default_factory=SolverParams)
    meta:        Mapping[str, Any]     = field(default_factory=dict)

    @property
    def num_professors(self) -> int:
        return len(self.professors)

    @property
    def num_defenses(self) -> int:
        return len(self.defenses)

    @property
    def professor_ids(self) -> range:
        return range(1, self.num_professors + 1)

    @property
    def slot_ids(self) -> range:
        return range(1, self.slots_count + 1)

    def professor(self, prof_id: int) -> Professor:
        if not 1 <= prof_id <= self.num_professors:
            raise IndexError(f"professor id {prof_id} outside 1..{self.num_professors}")
        return self.professors[prof_id - 1]

    def professor_name(self, prof_id: int) -> str:
        return self.professor(prof_id).name

    def available(self, prof_id: int, slot_id: int) -> bool:
        if not 1 <= slot_id <= self.slots_count:
            raise IndexError(f"slot id {slot_id} outside 1..{self.slots_count}")
        return slot_id in self.professor(prof_id).available_slots

    def tutor_of(self, defense_id: int) -> int:
        if not 0 <= defense_id < self.num_defenses:
            raise IndexError(f"defense id {defense_id} outside 0..{self.num_defenses - 1}")
        return self.defenses[defense_id].tutor_id

    def tutored_by(self, prof_id: int) -> Tuple[int, ...]:
        return tuple(d.id for d in self.defenses if d.tutor_id == prof_id)

    def validate(self) -> None:
        if self.slots_count < 1:
            raise ValueError("slots must be >= 1")
        if self.limits.max_tribunals_per_professor < 0:
            raise ValueError("limits.max_tribunals_per_professor must be >= 0")
        if self.limits.max_defenses_per_slot < 0:
            raise ValueError("limits.max_defenses_per_slot must be >= 0")
        if self.solver.max_time_in_seconds <= 0:
            raise ValueError("solver.max_time_in_seconds must be > 0")
        if self.solver.num_workers < 0:
            raise ValueError("solver.num_workers must be >= 0")


def build_instance(
    names:        Sequence[str],
    availability: Mapping[int, Iterable[int]],
    tutors:       Sequence[int],
    slots_count:  int,
    limits:       Optional[Limits]       = None,
    solver:       Optional[SolverParams] = None,
) -> Instance:
    """Build an Instance from a name list, a prof_id -> slots map and a tutor list.

    Professor ids follow the order of ``names`` starting at 1; defense ids
    follow the order of ``tutors`` starting at 0.
    """
    professors = tuple(
        Professor(
            id              = i,
            name            = name,
            available_slots = tuple(sorted(set(availability.get(i, ())))),
        )
        for i, name in enumerate(names, start=1)
    )
    defenses = tuple(Defense(id=t, tutor_id=tutor) for t, tutor in enumerate(tutors))
    return Instance(
        slots_count = slots_count,
        professors  = professors,
        defenses    = defenses,
        limits      = limits or Limits(),
        solver      = solver or SolverParams(),
    )
