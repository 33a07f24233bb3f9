"""
Reference instance: 7 professors, 7 defenses, 4 slots (morning 1, morning 2,
afternoon, evening). Tutors are chosen so that reciprocal judging is possible,
and the load cap of 2 leaves no slack: 7 x 2 examiner seats = 7 x 2 capacity.
"""

from __future__ import annotations

from typing import Optional

from tribunal_app.models import Instance, Limits, SolverParams, build_instance

PROFESSOR_NAMES = [
    "Anna Serra",
    "Marc Vidal",
    "Jordi Puig",
    "Laura Soler",
    "Pere Costa",
    "Marta Roca",
    "Joan Ferrer",
]

AVAILABILITY = {
    1: [1, 2, 3, 4],
    2: [1, 2, 3],
    3: [2, 3, 4],
    4: [1, 3, 4],
    5: [1, 2, 4],
    6: [2, 3],
    7: [1, 4],
}

TUTORS = [1, 2, 3, 1, 4, 2, 5]

SLOTS_COUNT = 4


def reference_instance(
    limits: Optional[Limits]       = None,
    solver: Optional[SolverParams] = None,
) -> Instance:
    return build_instance(
        names        = PROFESSOR_NAMES,
        availability = AVAILABILITY,
        tutors       = TUTORS,
        slots_count  = SLOTS_COUNT,
        limits       = limits,
        solver       = solver,
    )
