"""
Hard and soft constraints of the committee model, posted on a CpModel.

Hard:
  1. tutor exclusion       examiner_x[t] != tutor(t)
  2. distinct examiners    examiner_a[t] != examiner_b[t]
  3. availability          (examiner_x[t], slot[t]) in allowed pairs (table)
  4. load cap              global cardinality of examiners into load[p]
  5. slot cap              global cardinality of slots into slot_count[s]

Soft (objective terms):
  6. judge relation        judges[a, b] <=> a sits on a defense tutored by b
  7. reciprocity penalty   penalty[a, b] <=> judges[a, b] AND NOT judges[b, a]
  8. total                 total_penalty == sum(penalty)

Every derived boolean is reified in both directions: judges[a, b] is 0
exactly when professor a sits on no defense tutored by b.

CP-SAT has no global-cardinality constraint, so add_global_cardinality
channels each variable into one equality literal per value and counts the
literals. The same literals are reused for the judge relation.

Reference: OR-Tools CP-SAT Python API — add_allowed_assignments,
add_bool_or, add_bool_and, add_implication, only_enforce_if
https://developers.google.com/optimization/reference/python/sat/python/cp_model
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ortools.sat.python import cp_model

from .precheck import eligible_pairs
from .variables import TribunalVars
from ..models import Instance

Literal = cp_model.IntVar


def reify_equals(model: cp_model.CpModel, var: cp_model.IntVar, value: int, name: str) -> Literal:
    """Return b with b <=> (var == value)."""
    b = model.new_bool_var(name)
    model.add(var == value).only_enforce_if(b)
    model.add(var != value).only_enforce_if(~b)
    return b


def reify_or(model: cp_model.CpModel, target: Literal, literals: Sequence[Literal]) -> None:
    """target <=> OR(literals). An empty disjunction is false."""
    if not literals:
        model.add(target == 0)
        return
    model.add_bool_or(literals).only_enforce_if(target)
    for lit in literals:
        model.add_implication(lit, target)


def reify_and(model: cp_model.CpModel, target: Literal, literals: Sequence[Literal]) -> None:
    """target <=> AND(literals)."""
    model.add_bool_and(literals).only_enforce_if(target)
    model.add_bool_or([~lit for lit in literals] + [target])


def add_global_cardinality(
    model:     cp_model.CpModel,
    variables: Sequence[cp_model.IntVar],
    values:    Sequence[int],
    counts:    Sequence[cp_model.IntVar],
    closed:    bool = False,
    name:      str  = "gcc",
) -> List[Dict[int, Literal]]:
    """counts[k] == number of variables equal to values[k].

    closed=True additionally requires every variable to take one of values.
    Returns, per variable, the value -> literal map (literal <=> var == value).
    """
    if len(values) != len(counts):
        raise ValueError("values and counts must have the same length")

    literals: List[Dict[int, Literal]] = []
    for i, var in enumerate(variables):
        lits = {v: reify_equals(model, var, v, f"{name}_{i}_eq{v}") for v in values}
        if closed:
            model.add_exactly_one(list(lits.values()))
        else:
            model.add_at_most_one(list(lits.values()))
        literals.append(lits)

    for v, count in zip(values, counts):
        model.add(count == sum(lits[v] for lits in literals))
    return literals


# ── hard constraints ──────────────────────────────────────────────────────────

def add_tutor_exclusion(model: cp_model.CpModel, inst: Instance, v: TribunalVars) -> None:
    for d in inst.defenses:
        model.add(v.examiner_a[d.id] != d.tutor_id)
        model.add(v.examiner_b[d.id] != d.tutor_id)


def add_distinct_examiners(model: cp_model.CpModel, inst: Instance, v: TribunalVars) -> None:
    for d in inst.defenses:
        model.add(v.examiner_a[d.id] != v.examiner_b[d.id])


def add_availability(model: cp_model.CpModel, inst: Instance, v: TribunalVars) -> None:
    """Table constraint over (examiner, slot) for both examiners of each defense.

    The availability relation does not depend on the defense, so it is built
    once; tutor exclusion narrows it per tutor, and defenses sharing a tutor
    share the narrowed table.
    """
    pairs = sorted(eligible_pairs(inst))
    by_tutor: Dict[int, List[Tuple[int, int]]] = {}

    for d in inst.defenses:
        allowed = by_tutor.get(d.tutor_id)
        if allowed is None:
            allowed = [(p, s) for p, s in pairs if p != d.tutor_id]
            by_tutor[d.tutor_id] = allowed

        for examiner in (v.examiner_a[d.id], v.examiner_b[d.id]):
            if allowed:
                model.add_allowed_assignments([examiner, v.slot[d.id]], allowed)
            else:
                # No valid (professor, slot) pair: make the model infeasible.
                model.add(examiner == 0)


def add_load_cap(model: cp_model.CpModel, inst: Instance, v: TribunalVars) -> List[Dict[int, Literal]]:
    """load[p] counts p over all 2T examiner variables; the domain of load[p] is the cap."""
    values = list(inst.professor_ids)
    return add_global_cardinality(
        model,
        v.examiners(),
        values,
        [v.load[p] for p in values],
        closed=True,  # every examiner variable takes a professor id
        name="sits",
    )


def add_slot_cap(model: cp_model.CpModel, inst: Instance, v: TribunalVars) -> List[Dict[int, Literal]]:
    values = list(inst.slot_ids)
    return add_global_cardinality(
        model,
        v.slot,
        values,
        [v.slot_count[s] for s in values],
        closed=True,
        name="in_slot",
    )


# ── soft constraints ──────────────────────────────────────────────────────────

def add_judge_relations(
    model:             cp_model.CpModel,
    inst:              Instance,
    v:                 TribunalVars,
    examiner_literals: List[Dict[int, Literal]],
) -> None:
    """is_judge[t, p] <=> p sits on t;  judges[a, b] <=> OR_t(tutor(t) = b) is_judge[t, a].

    examiner_literals is the output of add_load_cap: entry 2t belongs to
    examiner_a[t] and entry 2t+1 to examiner_b[t].
    """
    for d in inst.defenses:
        eq_a = examiner_literals[2 * d.id]
        eq_b = examiner_literals[2 * d.id + 1]
        for p in inst.professor_ids:
            is_judge = model.new_bool_var(f"isJudge_p{p}_tfg{d.id}")
            reify_or(model, is_judge, [eq_a[p], eq_b[p]])
            v.is_judge[d.id, p] = is_judge

    for b in inst.professor_ids:
        tutored = inst.tutored_by(b)
        for a in inst.professor_ids:
            reify_or(model, v.judges[a, b], [v.is_judge[t, a] for t in tutored])


def add_reciprocity_penalties(model: cp_model.CpModel, inst: Instance, v: TribunalVars) -> None:
    for (a, b), pen in v.penalty.items():
        reify_and(model, pen, [v.judges[a, b], ~v.judges[b, a]])


def add_total_penalty(model: cp_model.CpModel, v: TribunalVars) -> None:
    model.add(v.total_penalty == sum(v.penalty.values()))


def post_all(model: cp_model.CpModel, inst: Instance, v: TribunalVars) -> None:
    add_tutor_exclusion(model, inst, v)
    add_distinct_examiners(model, inst, v)
    add_availability(model, inst, v)
    examiner_literals = add_load_cap(model, inst, v)
    add_slot_cap(model, inst, v)
    add_judge_relations(model, inst, v, examiner_literals)
    add_reciprocity_penalties(model, inst, v)
    add_total_penalty(model, v)
