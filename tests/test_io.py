"""Tests for JSON load/save roundtrip and structural validation."""
import json
from pathlib import Path

import pytest

from tribunal_app.io_json import ConfigError, instance_to_dict, load_instance, save_instance
from tribunal_app.models import Limits
from tribunal_app.reference_data import reference_instance

DATA_DIR = Path(__file__).parent.parent / "data"


def test_reference_json_matches_builtin() -> None:
    loaded  = load_instance(DATA_DIR / "reference.json")
    builtin = reference_instance()
    assert loaded.professors == builtin.professors
    assert loaded.defenses == builtin.defenses
    assert loaded.slots_count == builtin.slots_count
    assert loaded.limits == builtin.limits


def test_roundtrip(tmp_path: Path) -> None:
    inst = reference_instance(limits=Limits(max_tribunals_per_professor=3, max_defenses_per_slot=1))
    path = tmp_path / "nested" / "inst.json"
    save_instance(inst, path)
    inst2 = load_instance(path)
    assert inst2.professors[0].name == "Anna Serra"
    assert inst2.tutor_of(6) == 5
    assert inst2.limits.max_tribunals_per_professor == 3
    assert inst2.limits.max_defenses_per_slot == 1


def test_missing_key_raises(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"slots": 2, "professors": []}))
    with pytest.raises(ConfigError, match="defenses"):
        load_instance(path)


def test_null_sections_allowed(tmp_path: Path) -> None:
    raw = instance_to_dict(reference_instance())
    raw["meta"] = None
    raw["limits"] = None
    raw["solver"] = None
    path = tmp_path / "nulls.json"
    path.write_text(json.dumps(raw))
    inst = load_instance(path)
    assert isinstance(inst.meta, dict)
    assert inst.limits == Limits()


def test_professors_out_of_order_are_indexed_by_id(tmp_path: Path) -> None:
    raw = instance_to_dict(reference_instance())
    raw["professors"].reverse()
    path = tmp_path / "reversed.json"
    path.write_text(json.dumps(raw))
    inst = load_instance(path)
    assert inst.professor_name(1) == "Anna Serra"
    assert inst.professor_name(7) == "Joan Ferrer"


def test_duplicate_ids_raise(tmp_path: Path) -> None:
    raw = instance_to_dict(reference_instance())
    raw["professors"].append({"id": 1, "name": "Duplicate", "available_slots": []})
    path = tmp_path / "dup.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError, match="Duplicate"):
        load_instance(path)


def test_non_integer_tutor_raises(tmp_path: Path) -> None:
    raw = instance_to_dict(reference_instance())
    raw["defenses"][0]["tutor"] = "1"
    path = tmp_path / "str_tutor.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError, match="tutor"):
        load_instance(path)


def test_negative_limit_raises(tmp_path: Path) -> None:
    raw = instance_to_dict(reference_instance())
    raw["limits"]["max_defenses_per_slot"] = -1
    path = tmp_path / "neg.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError):
        load_instance(path)


def test_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        load_instance(path)


def test_string_solver_setting_raises(tmp_path: Path) -> None:
    raw = instance_to_dict(reference_instance())
    raw["solver"]["num_workers"] = "many"
    path = tmp_path / "workers.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError, match="solver.num_workers"):
        load_instance(path)


def test_non_utf8_file_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"slots": 1, "meta": {"name": "\xff"}}')
    with pytest.raises(ConfigError, match="UTF-8"):
        load_instance(path)
