# tests for optimize mode - minimal reciprocity penalty, deterministic winner -
# and for the fixed search order both modes rely on

import itertools

from tribunal_app.models import Limits, SolverParams, build_instance
from tribunal_app.reference_data import reference_instance
from tribunal_app.solver.api import solve
from tribunal_app.solver.audit import check_schedule, check_solution, schedule_penalty
from tribunal_app.solver.driver import _make_solver
from tribunal_app.solver.result import ScheduleEntry


def _small_inst(workers=1):
    # 4 professors, 3 defenses, 2 slots: small enough to enumerate every schedule
    return build_instance(
        names        = ["A", "B", "C", "D"],
        availability = {1: [1, 2], 2: [1], 3: [2], 4: [1, 2]},
        tutors       = [1, 2, 3],
        slots_count  = 2,
        limits       = Limits(max_tribunals_per_professor=2, max_defenses_per_slot=2),
        solver       = SolverParams(max_time_in_seconds=30.0, num_workers=workers),
    )


def _all_schedules(inst):
    per_defense = []
    for d in inst.defenses:
        options = [
            ScheduleEntry(d.id, d.tutor_id, a, b, s)
            for a in inst.professor_ids
            for b in inst.professor_ids
            for s in inst.slot_ids
            if a != b and d.tutor_id not in (a, b)
            and inst.available(a, s) and inst.available(b, s)
        ]
        per_defense.append(options)
    for combo in itertools.product(*per_defense):
        entries = list(combo)
        if not check_schedule(inst, entries):
            yield entries


def test_small_instance_matches_brute_force_minimum():
    inst   = _small_inst()
    best   = min(schedule_penalty(inst, s) for s in _all_schedules(inst))
    result = solve(inst, "optimize")
    assert result.status == "OPTIMAL"
    assert result.total_penalty == best
    assert check_solution(inst, result) == []


def test_tie_break_picks_lexicographically_smallest_optimum():
    inst    = _small_inst()
    best    = min(schedule_penalty(inst, s) for s in _all_schedules(inst))
    optimal = [
        s for s in _all_schedules(inst) if schedule_penalty(inst, s) == best
    ]

    def key(entries):
        return [x for e in entries for x in (e.examiner_a, e.examiner_b, e.slot)]

    expected = min(optimal, key=key)
    result   = solve(inst, "optimize")
    assert result.entries == expected


def test_reference_optimum_no_worse_than_first_solution():
    inst  = reference_instance(solver=SolverParams(max_time_in_seconds=30.0))
    first = solve(inst, "feasibility")
    best  = solve(inst, "optimize")
    assert best.status == "OPTIMAL"
    assert best.mode == "optimize"
    assert best.total_penalty <= first.total_penalty
    assert check_solution(inst, best) == []
    assert best.stats["best_bound"] == best.total_penalty


def test_parallel_search_still_deterministic():
    inst = reference_instance(solver=SolverParams(max_time_in_seconds=30.0, num_workers=4))
    runs = [solve(inst, "optimize") for _ in range(3)]
    assert all(r.status == "OPTIMAL" for r in runs)
    assert runs[0].entries == runs[1].entries == runs[2].entries


def test_optimize_reports_infeasible():
    inst = reference_instance(
        limits=Limits(max_tribunals_per_professor=2, max_defenses_per_slot=1),
        solver=SolverParams(max_time_in_seconds=30.0),
    )
    result = solve(inst, "optimize")
    assert result.status == "INFEASIBLE"
    assert result.entries == []


def test_feasibility_returns_lexicographically_smallest_schedule():
    inst     = _small_inst()
    expected = min(
        _all_schedules(inst),
        key=lambda entries: [x for e in entries for x in (e.examiner_a, e.examiner_b, e.slot)],
    )
    result = solve(inst, "feasibility")
    assert result.entries == expected


def test_fixed_search_solver_keeps_every_feasible_solution():
    params = SolverParams(max_time_in_seconds=5.0, num_workers=8)
    fixed  = _make_solver(params, 5.0, fixed_search=True)
    assert fixed.parameters.num_workers == 1
    assert fixed.parameters.keep_all_feasible_solutions_in_presolve
    free = _make_solver(params, 5.0, fixed_search=False)
    assert free.parameters.num_workers == 8
