"""
Solve driver — runs CP-SAT on the committee model in one of two modes.

feasibility
  No objective is posted. One worker, fixed search over
  A0, B0, slot0, A1, B1, slot1, ... taking the smallest value first, so the
  same instance always yields the same schedule. total_penalty is whatever
  that first schedule happens to score; it is not minimised. CP-SAT reports
  OPTIMAL for objective-less models, so the status is rewritten to FEASIBLE.

optimize
  Pass 1 minimises total_penalty with SolverParams.num_workers workers.
  Parallel workers may stop at different schedules of equal penalty, so when
  the optimum is proven a second, single-worker fixed-search pass with
  total_penalty pinned to that optimum returns the lexicographically smallest
  optimal schedule. Pass 2 shares the time budget; if it does not finish,
  the pass-1 schedule is kept.

UNKNOWN (budget exhausted) is never folded into INFEASIBLE.

Reference: OR-Tools CP-SAT Python API — CpSolver, add_decision_strategy
https://developers.google.com/optimization/reference/python/sat/python/cp_model
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ortools.sat.python import cp_model

from .audit import check_solution
from .model import TribunalModel, build_model
from .precheck import ensure_ok
from .result import SOLVED_STATUSES, ScheduleEntry, SolveResult
from ..models import Instance, SolverParams

logger = logging.getLogger(__name__)


def _status_str(s: object) -> str:
    """Convert a CP-SAT solver status value to a readable string."""
    mapping = {
        int(cp_model.OPTIMAL):       "OPTIMAL",
        int(cp_model.FEASIBLE):      "FEASIBLE",
        int(cp_model.INFEASIBLE):    "INFEASIBLE",
        int(cp_model.MODEL_INVALID): "MODEL_INVALID",
    }
    return mapping.get(int(s), "UNKNOWN")  # type: ignore[call-overload]


def _make_solver(params: SolverParams, time_limit: float, fixed_search: bool) -> cp_model.CpSolver:
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = time_limit
    solver.parameters.random_seed         = params.random_seed
    if fixed_search:
        solver.parameters.search_branching = cp_model.FIXED_SEARCH
        solver.parameters.num_workers      = 1
        # Presolve may drop feasible solutions; the fixed order must see them all.
        solver.parameters.keep_all_feasible_solutions_in_presolve = True
    else:
        solver.parameters.num_workers      = params.num_workers
    return solver


def _stats(solver: cp_model.CpSolver) -> Dict[str, Any]:
    return {
        "num_conflicts": solver.num_conflicts,
        "num_branches":  solver.num_branches,
        "wall_time_s":   round(solver.wall_time, 3),
    }


def _unsolved(
    inst:     Instance,
    name:     str,
    mode:     str,
    warnings: List[str],
    stats:    Dict[str, Any],
) -> SolveResult:
    if name == "INFEASIBLE":
        message = "No schedule satisfies all hard constraints."
    elif name == "UNKNOWN":
        message = (
            f"No schedule found within {inst.solver.max_time_in_seconds}s; "
            f"infeasibility was not proven."
        )
    else:
        message = "CP-SAT rejected the model as invalid."
    logger.info("Solve (%s) ended with %s", mode, name)
    return SolveResult(status=name, mode=mode, diagnostics=[message, *warnings], stats=stats)


def _collect(
    inst:        Instance,
    tm:          TribunalModel,
    solver:      cp_model.CpSolver,
    status:      str,
    mode:        str,
    diagnostics: List[str],
    stats:       Dict[str, Any],
) -> SolveResult:
    v = tm.vars

    entries = [
        ScheduleEntry(
            defense_id = d.id,
            tutor_id   = d.tutor_id,
            examiner_a = int(solver.value(v.examiner_a[d.id])),
            examiner_b = int(solver.value(v.examiner_b[d.id])),
            slot       = int(solver.value(v.slot[d.id])),
        )
        for d in inst.defenses
    ]
    result = SolveResult(
        status        = status,
        mode          = mode,
        total_penalty = int(solver.value(v.total_penalty)),
        entries       = entries,
        loads         = {p: int(solver.value(x)) for p, x in v.load.items()},
        slot_counts   = {s: int(solver.value(x)) for s, x in v.slot_count.items()},
        judges        = [k for k, b in v.judges.items() if solver.value(b) == 1],
        penalties     = [k for k, b in v.penalty.items() if solver.value(b) == 1],
        diagnostics   = diagnostics,
        stats         = stats,
    )

    problems = check_solution(inst, result)
    for problem in problems:
        logger.error("Audit: %s", problem)
    result.diagnostics.extend(f"Audit: {p}" for p in problems)

    logger.info(
        "Solve (%s) ended with %s, total penalty %d",
        mode, status, result.total_penalty,
    )
    return result


def solve_feasibility(inst: Instance, warnings: Optional[List[str]] = None) -> SolveResult:
    if warnings is None:
        warnings = ensure_ok(inst)
    params = inst.solver

    tm = build_model(inst)
    tm.use_fixed_search()
    solver = _make_solver(params, params.max_time_in_seconds, fixed_search=True)
    name   = _status_str(solver.solve(tm.model))

    if name not in SOLVED_STATUSES:
        return _unsolved(inst, name, "feasibility", warnings, _stats(solver))

    return _collect(
        inst, tm, solver,
        status      = "FEASIBLE",
        mode        = "feasibility",
        diagnostics = list(warnings),
        stats       = _stats(solver),
    )


def solve_optimize(inst: Instance, warnings: Optional[List[str]] = None) -> SolveResult:
    if warnings is None:
        warnings = ensure_ok(inst)
    params = inst.solver

    tm = build_model(inst)
    tm.minimize_penalty()
    solver = _make_solver(params, params.max_time_in_seconds, fixed_search=False)
    name   = _status_str(solver.solve(tm.model))
    stats  = _stats(solver)

    if name not in SOLVED_STATUSES:
        return _unsolved(inst, name, "optimize", warnings, stats)

    diagnostics = list(warnings)
    stats["best_bound"] = int(solver.best_objective_bound)

    if name == "FEASIBLE":
        diagnostics.append("Penalty is not proven minimal: search budget ran out.")
        return _collect(inst, tm, solver, name, "optimize", diagnostics, stats)

    best      = int(solver.objective_value)
    remaining = params.max_time_in_seconds - solver.wall_time
    if remaining <= 0:
        diagnostics.append("Tie-break pass skipped: search budget used up.")
        return _collect(inst, tm, solver, name, "optimize", diagnostics, stats)

    tie = build_model(inst)
    tie.fix_penalty(best)
    tie.use_fixed_search()
    tie_solver = _make_solver(params, remaining, fixed_search=True)
    tie_name   = _status_str(tie_solver.solve(tie.model))

    stats["tie_break_wall_time_s"] = round(tie_solver.wall_time, 3)
    if tie_name in SOLVED_STATUSES:
        return _collect(inst, tie, tie_solver, "OPTIMAL", "optimize", diagnostics, stats)

    logger.warning("Tie-break pass ended with %s; keeping the first optimal schedule", tie_name)
    diagnostics.append(f"Tie-break pass ended with {tie_name}; schedule may vary between runs.")
    return _collect(inst, tm, solver, name, "optimize", diagnostics, stats)
