"""
Post-solve audit: recompute every derived quantity from the examiner, slot
and tutor bindings alone, and compare it with what the solver reported.

judges, penalty and total_penalty are pure functions of the schedule, so a
disagreement here means the model is wrong, not the data.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .result import ScheduleEntry, SolveResult
from ..models import Instance, Limits


def derive_judges(inst: Instance, entries: Iterable[ScheduleEntry]) -> Set[Tuple[int, int]]:
    """(a, b) such that a examines at least one defense tutored by b."""
    return {
        (examiner, inst.tutor_of(e.defense_id))
        for e in entries
        for examiner in e.examiners
    }


def derive_penalties(inst: Instance, judges: Set[Tuple[int, int]]) -> List[Tuple[int, int]]:
    return [
        (a, b)
        for a in inst.professor_ids
        for b in inst.professor_ids
        if a < b and (a, b) in judges and (b, a) not in judges
    ]


def derive_loads(inst: Instance, entries: Iterable[ScheduleEntry]) -> Dict[int, int]:
    c = Counter(x for e in entries for x in e.examiners)
    return {p: c.get(p, 0) for p in inst.professor_ids}


def derive_slot_counts(inst: Instance, entries: Iterable[ScheduleEntry]) -> Dict[int, int]:
    c = Counter(e.slot for e in entries)
    return {s: c.get(s, 0) for s in inst.slot_ids}


def schedule_penalty(inst: Instance, entries: Iterable[ScheduleEntry]) -> int:
    entries = list(entries)
    return len(derive_penalties(inst, derive_judges(inst, entries)))


def check_schedule(
    inst:    Instance,
    entries: List[ScheduleEntry],
    limits:  Optional[Limits] = None,
) -> List[str]:
    """Hard-constraint violations of a schedule, empty when it is valid."""
    limits = limits or inst.limits
    problems: List[str] = []

    ids = sorted(e.defense_id for e in entries)
    if ids != list(range(inst.num_defenses)):
        problems.append(f"Expected one entry per defense 0..{inst.num_defenses - 1}, got {ids}")
        return problems

    for e in entries:
        tutor = inst.tutor_of(e.defense_id)
        if e.tutor_id != tutor:
            problems.append(f"Defense {e.defense_id}: tutor {e.tutor_id}, expected {tutor}")
        if not 1 <= e.slot <= inst.slots_count:
            problems.append(f"Defense {e.defense_id}: slot {e.slot} out of range")
            continue
        for x in e.examiners:
            if not 1 <= x <= inst.num_professors:
                problems.append(f"Defense {e.defense_id}: examiner {x} out of range")
                continue
            if x == tutor:
                problems.append(f"Defense {e.defense_id}: tutor {x} sits on own committee")
            if not inst.available(x, e.slot):
                problems.append(f"Defense {e.defense_id}: examiner {x} unavailable at slot {e.slot}")
        if e.examiner_a == e.examiner_b:
            problems.append(f"Defense {e.defense_id}: both examiners are {e.examiner_a}")

    for p, n in derive_loads(inst, entries).items():
        if n > limits.max_tribunals_per_professor:
            problems.append(
                f"Professor {p} sits on {n} committees "
                f"(max {limits.max_tribunals_per_professor})"
            )
    for s, n in derive_slot_counts(inst, entries).items():
        if n > limits.max_defenses_per_slot:
            problems.append(f"Slot {s} holds {n} defenses (max {limits.max_defenses_per_slot})")
    return problems


def check_solution(inst: Instance, result: SolveResult, limits: Optional[Limits] = None) -> List[str]:
    """All invariant violations of a solved result, empty when consistent."""
    problems = check_schedule(inst, result.entries, limits)
    if problems:
        return problems

    loads = derive_loads(inst, result.entries)
    if result.loads != loads:
        problems.append(f"Reported loads {result.loads} != derived {loads}")

    counts = derive_slot_counts(inst, result.entries)
    if result.slot_counts != counts:
        problems.append(f"Reported slot counts {result.slot_counts} != derived {counts}")

    judges = derive_judges(inst, result.entries)
    if set(result.judges) != judges:
        problems.append(
            f"Reported judges {sorted(result.judges)} != derived {sorted(judges)}"
        )

    penalties = derive_penalties(inst, judges)
    if sorted(result.penalties) != penalties:
        problems.append(f"Reported penalties {sorted(result.penalties)} != derived {penalties}")
    if result.total_penalty != len(penalties):
        problems.append(f"Reported total penalty {result.total_penalty} != derived {len(penalties)}")
    return problems
