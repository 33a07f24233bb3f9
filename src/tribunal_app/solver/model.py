"""
Assemble a complete committee model: variables, then every constraint.

The model is built fresh for each search pass; a CpModel carries its
objective and search strategy with it, and the two passes of optimize mode
need different ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ortools.sat.python import cp_model

from .constraints import post_all
from .variables import TribunalVars, build_variables
from ..models import Instance

logger = logging.getLogger(__name__)


@dataclass
class TribunalModel:
    model: cp_model.CpModel
    vars:  TribunalVars

    def use_fixed_search(self) -> None:
        """Branch on A0, B0, slot0, A1, ... in order, smallest value first."""
        order = self.vars.decision_order()
        if not order:
            return
        self.model.add_decision_strategy(
            order,
            cp_model.CHOOSE_FIRST,
            cp_model.SELECT_MIN_VALUE,
        )

    def minimize_penalty(self) -> None:
        self.model.minimize(self.vars.total_penalty)

    def fix_penalty(self, value: int) -> None:
        self.model.add(self.vars.total_penalty == value)


def build_model(inst: Instance) -> TribunalModel:
    model = cp_model.CpModel()
    tribunal_vars = build_variables(model, inst)
    post_all(model, inst, tribunal_vars)

    proto = model.proto
    logger.debug(
        "Built model: %d variables, %d constraints (P=%d, T=%d, S=%d)",
        len(proto.variables), len(proto.constraints),
        inst.num_professors, inst.num_defenses, inst.slots_count,
    )
    return TribunalModel(model=model, vars=tribunal_vars)
