# tests for the constraint-construction helpers, each on a tiny standalone model
# so a failure points at one helper rather than at the whole committee model

import itertools

import pytest
from ortools.sat.python import cp_model

from tribunal_app.models import build_instance
from tribunal_app.solver.constraints import (
    add_availability, add_global_cardinality, reify_and, reify_or,
)
from tribunal_app.solver.variables import build_variables, penalty_upper_bound


def _solve(model):
    solver = cp_model.CpSolver()
    solver.parameters.num_workers = 1
    status = solver.solve(model)
    return status, solver


def test_gcc_counts_each_value():
    model  = cp_model.CpModel()
    xs     = [model.new_int_var(1, 3, f"x{i}") for i in range(4)]
    counts = [model.new_int_var(0, 4, f"c{v}") for v in (1, 2, 3)]
    add_global_cardinality(model, xs, [1, 2, 3], counts, closed=True)
    for x, value in zip(xs, [2, 3, 2, 2]):
        model.add(x == value)
    status, solver = _solve(model)
    assert status in (cp_model.OPTIMAL, cp_model.FEASIBLE)
    assert [solver.value(c) for c in counts] == [0, 3, 1]


def test_gcc_count_domain_acts_as_cap():
    # three variables, two values, each value at most once -> impossible
    model  = cp_model.CpModel()
    xs     = [model.new_int_var(1, 2, f"x{i}") for i in range(3)]
    counts = [model.new_int_var(0, 1, f"c{v}") for v in (1, 2)]
    add_global_cardinality(model, xs, [1, 2], counts, closed=True)
    status, _ = _solve(model)
    assert status == cp_model.INFEASIBLE


def test_gcc_open_allows_values_outside_the_list():
    model  = cp_model.CpModel()
    x      = model.new_int_var(1, 4, "x")
    counts = [model.new_int_var(0, 1, f"c{v}") for v in (1, 2, 3)]
    add_global_cardinality(model, [x], [1, 2, 3], counts, closed=False)
    model.add(x == 4)
    status, solver = _solve(model)
    assert status in (cp_model.OPTIMAL, cp_model.FEASIBLE)
    assert [solver.value(c) for c in counts] == [0, 0, 0]


def test_gcc_closed_rejects_values_outside_the_list():
    model  = cp_model.CpModel()
    x      = model.new_int_var(1, 4, "x")
    counts = [model.new_int_var(0, 1, f"c{v}") for v in (1, 2, 3)]
    add_global_cardinality(model, [x], [1, 2, 3], counts, closed=True)
    model.add(x == 4)
    status, _ = _solve(model)
    assert status == cp_model.INFEASIBLE


def test_gcc_length_mismatch_raises():
    model = cp_model.CpModel()
    x = model.new_int_var(1, 2, "x")
    with pytest.raises(ValueError):
        add_global_cardinality(model, [x], [1, 2], [model.new_int_var(0, 1, "c")])


@pytest.mark.parametrize("a_val,b_val", list(itertools.product([0, 1], repeat=2)))
def test_reify_or_and_both_directions(a_val, b_val):
    model = cp_model.CpModel()
    a, b  = model.new_bool_var("a"), model.new_bool_var("b")
    t_or, t_and = model.new_bool_var("or"), model.new_bool_var("and")
    reify_or(model, t_or, [a, b])
    reify_and(model, t_and, [a, ~b])
    model.add(a == a_val)
    model.add(b == b_val)
    status, solver = _solve(model)
    assert status in (cp_model.OPTIMAL, cp_model.FEASIBLE)
    assert solver.value(t_or) == int(a_val or b_val)
    assert solver.value(t_and) == int(a_val and not b_val)


def test_reify_or_empty_is_false():
    model = cp_model.CpModel()
    t = model.new_bool_var("t")
    reify_or(model, t, [])
    model.add(t == 1)
    status, _ = _solve(model)
    assert status == cp_model.INFEASIBLE


def test_availability_table_excludes_tutor_and_unavailable_pairs():
    # professor 1 tutors the only defense; 2 is free at slot 1 only, 3 at slot 2 only
    inst  = build_instance(["A", "B", "C"], {1: [1, 2], 2: [1], 3: [2]}, tutors=[1], slots_count=2)
    model = cp_model.CpModel()
    v     = build_variables(model, inst)
    add_availability(model, inst, v)
    model.add(v.slot[0] == 1)
    status, solver = _solve(model)
    assert status in (cp_model.OPTIMAL, cp_model.FEASIBLE)
    assert solver.value(v.examiner_a[0]) == 2
    assert solver.value(v.examiner_b[0]) == 2


def test_empty_availability_table_is_infeasible_not_an_error():
    inst  = build_instance(["A", "B", "C"], {}, tutors=[1], slots_count=2)
    model = cp_model.CpModel()
    v     = build_variables(model, inst)
    add_availability(model, inst, v)
    status, _ = _solve(model)
    assert status == cp_model.INFEASIBLE


def test_variable_domains():
    inst  = build_instance(["A", "B", "C"], {1: [1]}, tutors=[1, 2], slots_count=3)
    model = cp_model.CpModel()
    v     = build_variables(model, inst)
    assert len(v.examiner_a) == len(v.examiner_b) == len(v.slot) == 2
    assert set(v.load) == {1, 2, 3}
    assert set(v.slot_count) == {1, 2, 3}
    assert len(v.judges) == 9
    assert set(v.penalty) == {(1, 2), (1, 3), (2, 3)}
    assert len(v.examiners()) == 4
    assert len(v.decision_order()) == 6


def test_penalty_bound_never_below_pair_count():
    assert penalty_upper_bound(7) == 100
    assert penalty_upper_bound(20) == 190
