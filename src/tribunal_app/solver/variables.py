"""
Decision and auxiliary variables of the committee model.

Per defense t:
  examiner_a[t], examiner_b[t]  in [1, P]   the two committee members
  slot[t]                       in [1, S]   the time slot

Aggregates and indicators:
  load[p]         in [0, max_tribunals_per_professor]
  slot_count[s]   in [0, max_defenses_per_slot]
  judges[a, b]    bool, every ordered pair: a examines a defense tutored by b
  penalty[a, b]   bool, a < b: a judges b but b does not judge a
  total_penalty   in [0, max(100, P*(P-1)/2)]

The judges matrix is P*P booleans, so the model grows quadratically in the
number of professors.

Reference: OR-Tools CP-SAT Python API — new_int_var / new_bool_var
https://developers.google.com/optimization/reference/python/sat/python/cp_model
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ortools.sat.python import cp_model

from ..models import Instance

TOTAL_PENALTY_CAP = 100


@dataclass
class TribunalVars:
    examiner_a:    List[cp_model.IntVar]
    examiner_b:    List[cp_model.IntVar]
    slot:          List[cp_model.IntVar]
    load:          Dict[int, cp_model.IntVar]
    slot_count:    Dict[int, cp_model.IntVar]
    judges:        Dict[Tuple[int, int], cp_model.IntVar]
    penalty:       Dict[Tuple[int, int], cp_model.IntVar]
    total_penalty: cp_model.IntVar
    # filled in by the constraints: (defense, prof) -> "prof sits on defense"
    is_judge:      Dict[Tuple[int, int], cp_model.IntVar] = field(default_factory=dict)

    def examiners(self) -> List[cp_model.IntVar]:
        """All 2T examiner variables, flattened as A0, B0, A1, B1, ..."""
        flat: List[cp_model.IntVar] = []
        for a, b in zip(self.examiner_a, self.examiner_b):
            flat.extend((a, b))
        return flat

    def decision_order(self) -> List[cp_model.IntVar]:
        """Branching order of fixed search: A0, B0, slot0, A1, B1, slot1, ..."""
        order: List[cp_model.IntVar] = []
        for a, b, s in zip(self.examiner_a, self.examiner_b, self.slot):
            order.extend((a, b, s))
        return order


def penalty_upper_bound(num_professors: int) -> int:
    pairs = num_professors * (num_professors - 1) // 2
    return max(TOTAL_PENALTY_CAP, pairs)


def build_variables(model: cp_model.CpModel, inst: Instance) -> TribunalVars:
    P = inst.num_professors
    T = inst.num_defenses
    S = inst.slots_count
    max_load = inst.limits.max_tribunals_per_professor
    max_slot = inst.limits.max_defenses_per_slot

    examiner_a = [model.new_int_var(1, P, f"examinerA_{t}") for t in range(T)]
    examiner_b = [model.new_int_var(1, P, f"examinerB_{t}") for t in range(T)]
    slot       = [model.new_int_var(1, S, f"slot_{t}")      for t in range(T)]

    load       = {p: model.new_int_var(0, max_load, f"load_p{p}") for p in inst.professor_ids}
    slot_count = {s: model.new_int_var(0, max_slot, f"count_s{s}") for s in inst.slot_ids}

    judges = {
        (a, b): model.new_bool_var(f"judges_{a}_tutor_{b}")
        for a in inst.professor_ids for b in inst.professor_ids
    }
    penalty = {
        (a, b): model.new_bool_var(f"penalty_{a}_{b}")
        for a in inst.professor_ids for b in inst.professor_ids if a < b
    }
    total_penalty = model.new_int_var(0, penalty_upper_bound(P), "total_penalty")

    return TribunalVars(
        examiner_a    = examiner_a,
        examiner_b    = examiner_b,
        slot          = slot,
        load          = load,
        slot_count    = slot_count,
        judges        = judges,
        penalty       = penalty,
        total_penalty = total_penalty,
    )
