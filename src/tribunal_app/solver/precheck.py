"""
Pre-solve checks that run before any variable or constraint is created.

Errors are malformed input (bad ids, tutors outside the professor range,
availability naming slots that do not exist). They raise PrecheckError so a
caller can tell "bad input" apart from "infeasible model".

Warnings flag data that will very likely make the model infeasible. They never
stop the solve: infeasibility is a normal solver outcome, reported as such.
"""

from __future__ import annotations

from typing import Dict, List, Set, Tuple

from ..models import Instance

# Above this many professors the judges matrix (P*P booleans plus the
# per-defense judge literals) dominates model size.
LARGE_POOL_WARNING = 150


class PrecheckError(ValueError):
    """Raised by ensure_ok() when hard errors are present."""


def eligible_pairs(inst: Instance) -> Set[Tuple[int, int]]:
    """All (professor, slot) pairs where the professor is available."""
    return {
        (p.id, s)
        for p in inst.professors
        for s in p.available_slots
        if 1 <= s <= inst.slots_count
    }


def eligible_examiners(inst: Instance, pairs: Set[Tuple[int, int]]) -> Dict[int, Set[int]]:
    """defense id -> professors available somewhere and not tutoring it."""
    available_somewhere = {p for p, _ in pairs}
    return {
        d.id: {p for p in available_somewhere if p != d.tutor_id}
        for d in inst.defenses
    }


def precheck(inst: Instance) -> Tuple[List[str], List[str]]:
    """Return (errors, warnings). errors = malformed input."""
    errors:   List[str] = []
    warnings: List[str] = []

    try:
        inst.validate()
    except ValueError as e:
        errors.append(str(e))

    P = inst.num_professors
    T = inst.num_defenses
    S = inst.slots_count

    if P < 1:
        errors.append("At least one professor is required.")

    prof_ids = [p.id for p in inst.professors]
    if prof_ids != list(range(1, P + 1)):
        errors.append(f"Professor ids must be exactly 1..{P} in order, got {prof_ids}.")

    defense_ids = [d.id for d in inst.defenses]
    if defense_ids != list(range(T)):
        errors.append(f"Defense ids must be exactly 0..{T - 1} in order, got {defense_ids}.")

    for d in inst.defenses:
        if not 1 <= d.tutor_id <= P:
            errors.append(
                f"Defense {d.id} references unknown tutor {d.tutor_id} "
                f"(professors are 1..{P})."
            )

    for p in inst.professors:
        bad = [s for s in p.available_slots if not 1 <= s <= S]
        if bad:
            errors.append(f"Professor {p.id} lists unknown slot id(s): {bad}")

    if errors:
        return errors, warnings

    # ── likely-infeasible data, reported but not blocking ────────────────────
    limits = inst.limits

    if T > S * limits.max_defenses_per_slot:
        warnings.append(
            f"Not enough slot capacity: {S} slot(s) x {limits.max_defenses_per_slot} "
            f"defense(s) per slot = {S * limits.max_defenses_per_slot}, "
            f"but {T} defense(s) need scheduling."
        )

    if 2 * T > P * limits.max_tribunals_per_professor:
        warnings.append(
            f"Not enough examiner capacity: {P} professor(s) x "
            f"{limits.max_tribunals_per_professor} committee(s) = "
            f"{P * limits.max_tribunals_per_professor}, but {T} defense(s) "
            f"need {2 * T} examiner seats."
        )

    for p in inst.professors:
        if not p.available_slots:
            warnings.append(
                f"Professor {p.id} ({p.name}) has no available slots and "
                f"cannot examine any defense."
            )

    pairs = eligible_pairs(inst)
    for defense_id, examiners in eligible_examiners(inst, pairs).items():
        if len(examiners) < 2:
            warnings.append(
                f"Defense {defense_id} has {len(examiners)} eligible examiner(s); "
                f"a committee needs 2."
            )

    if P > LARGE_POOL_WARNING:
        warnings.append(
            f"{P} professors create {P * P} judge-relation variables; "
            f"expect a large model and slow search."
        )

    return errors, warnings


def ensure_ok(inst: Instance) -> List[str]:
    """Raise PrecheckError on errors, otherwise return the warnings."""
    errors, warnings = precheck(inst)
    if errors:
        raise PrecheckError("\n".join(errors))
    return warnings
