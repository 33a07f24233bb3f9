"""
JSON serialisation / deserialisation for Instance objects.

Uses only the Python standard-library json module. Basic structural
validation is applied before domain objects are built; range and
cross-reference checks (tutor ids, slot ids) belong to solver.precheck.

Reference: Python docs — json
https://docs.python.org/3/library/json.html

Document layout:
    {
      "meta":       {...},                      optional
      "slots":      4,
      "professors": [{"id": 1, "name": "...", "available_slots": [1, 2]}],
      "defenses":   [{"id": 0, "tutor": 1, "title": "..."}],
      "limits":     {"max_tribunals_per_professor": 2,
                     "max_defenses_per_slot": 2},   optional
      "solver":     {"max_time_in_seconds": 10.0,
                     "num_workers": 0, "random_seed": 0}  optional
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from tribunal_app.models import Defense, Instance, Limits, Professor, SolverParams


class ConfigError(ValueError):
    """Raised when the instance JSON is structurally invalid."""


def _require(obj: Dict[str, Any], key: str, ctx: str) -> Any:
    if key not in obj:
        raise ConfigError(f"Missing required key '{key}' in {ctx}")
    return obj[key]


def _as_list(obj: Any, ctx: str) -> List[Any]:
    if not isinstance(obj, list):
        raise ConfigError(f"Expected a JSON array in {ctx}, got {type(obj).__name__}")
    return obj


def _as_dict(obj: Any, ctx: str) -> Dict[str, Any]:
    if not isinstance(obj, dict):
        raise ConfigError(
            f"Expected a JSON object in {ctx}, got {type(obj).__name__}"
        )
    return obj


def _as_int(obj: Any, ctx: str) -> int:
    # bool is an int subclass; "true" is never a valid id or count
    if isinstance(obj, bool) or not isinstance(obj, int):
        raise ConfigError(f"Expected an integer in {ctx}, got {obj!r}")
    return obj


def _as_float(obj: Any, ctx: str) -> float:
    if isinstance(obj, bool) or not isinstance(obj, (int, float)):
        raise ConfigError(f"Expected a number in {ctx}, got {obj!r}")
    return float(obj)


def _check_unique_ids(items: list, ctx: str) -> None:
    seen: set = set()
    dupes: set = set()
    for item in items:
        if item.id in seen:
            dupes.add(item.id)
        seen.add(item.id)
    if dupes:
        raise ConfigError(f"Duplicate ids in {ctx}: {sorted(dupes)}")


def instance_from_dict(raw: Any) -> Instance:
    raw  = _as_dict(raw, "root")
    meta = _as_dict(raw.get("meta") or {}, "meta")

    slots_count    = _as_int(_require(raw, "slots", "root"), "slots")
    professors_raw = _as_list(_require(raw, "professors", "root"), "professors")
    defenses_raw   = _as_list(_require(raw, "defenses",   "root"), "defenses")
    limits_raw     = _as_dict(raw.get("limits") or {}, "limits")
    solver_raw     = _as_dict(raw.get("solver") or {}, "solver")

    professors = []
    for i, p in enumerate(professors_raw):
        ctx = f"professors[{i}]"
        p = _as_dict(p, ctx)
        slots = _as_list(p.get("available_slots", []), f"{ctx}.available_slots")
        professors.append(Professor(
            id              = _as_int(_require(p, "id", ctx), f"{ctx}.id"),
            name            = str(_require(p, "name", ctx)),
            available_slots = tuple(sorted({_as_int(s, f"{ctx}.available_slots") for s in slots})),
        ))

    defenses = []
    for i, d in enumerate(defenses_raw):
        ctx = f"defenses[{i}]"
        d = _as_dict(d, ctx)
        defenses.append(Defense(
            id       = _as_int(d.get("id", i), f"{ctx}.id"),
            tutor_id = _as_int(_require(d, "tutor", ctx), f"{ctx}.tutor"),
            title    = str(d.get("title", "")),
        ))

    _check_unique_ids(professors, "professors")
    _check_unique_ids(defenses,   "defenses")

    defaults = Limits()
    limits = Limits(
        max_tribunals_per_professor = _as_int(
            limits_raw.get("max_tribunals_per_professor", defaults.max_tribunals_per_professor),
            "limits.max_tribunals_per_professor",
        ),
        max_defenses_per_slot = _as_int(
            limits_raw.get("max_defenses_per_slot", defaults.max_defenses_per_slot),
            "limits.max_defenses_per_slot",
        ),
    )
    solver = SolverParams(
        max_time_in_seconds = _as_float(solver_raw.get("max_time_in_seconds", 10.0), "solver.max_time_in_seconds"),
        num_workers         = _as_int(solver_raw.get("num_workers", 0), "solver.num_workers"),
        random_seed         = _as_int(solver_raw.get("random_seed", 0), "solver.random_seed"),
    )

    # Sorted by id so that id k sits at position k-1 whatever the file order.
    inst = Instance(
        slots_count = slots_count,
        professors  = tuple(sorted(professors, key=lambda p: p.id)),
        defenses    = tuple(sorted(defenses,   key=lambda d: d.id)),
        limits      = limits,
        solver      = solver,
        meta        = meta,
    )
    try:
        inst.validate()
    except ValueError as e:
        raise ConfigError(str(e)) from e
    return inst


def instance_to_dict(inst: Instance) -> Dict[str, Any]:
    return {
        "meta":  dict(inst.meta),
        "slots": inst.slots_count,
        "professors": [
            {"id": p.id, "name": p.name, "available_slots": list(p.available_slots)}
            for p in inst.professors
        ],
        "defenses": [
            {"id": d.id, "tutor": d.tutor_id, "title": d.title}
            for d in inst.defenses
        ],
        "limits": {
            "max_tribunals_per_professor": inst.limits.max_tribunals_per_professor,
            "max_defenses_per_slot":       inst.limits.max_defenses_per_slot,
        },
        "solver": {
            "max_time_in_seconds": inst.solver.max_time_in_seconds,
            "num_workers":         inst.solver.num_workers,
            "random_seed":         inst.solver.random_seed,
        },
    }


def load_instance(path: str | Path) -> Instance:
    """Load and structurally validate an Instance from a JSON file."""
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise ConfigError(f"{path} is not UTF-8 text: {e}") from e
    return instance_from_dict(raw)


def save_instance(inst: Instance, path: str | Path) -> None:
    """Serialise an Instance to JSON, creating parent directories if needed."""
    inst.validate()
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        # ensure_ascii=False preserves accented names.
        json.dump(instance_to_dict(inst), f, ensure_ascii=False, indent=2)
