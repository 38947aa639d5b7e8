from datetime import date

import pytest
import yaml
from pydantic import ValidationError

from exitwindow.cli.evaluate_once import load_constraints
from exitwindow.models.constraints import Constraints, HousingConstraint
from exitwindow.models.types import (
    HousingStatus,
    LegalBlocker,
    RunwayStatus,
    Ternary,
)


def test_defaults_are_unknown():
    c = Constraints()
    assert c.housing.status == HousingStatus.UNKNOWN
    assert c.housing.lease_end_date is None
    assert c.housing.notice_days is None
    assert c.cash_runway.months is None
    assert c.legal.blocker == LegalBlocker.UNKNOWN
    assert c.income.employer_notified == Ternary.UNKNOWN
    assert c.dependents.note == ""


def test_unrecognized_values_become_unknown():
    c = Constraints.model_validate(
        {
            "housing": {"status": "maybe"},
            "cash_runway": {"status": 42},
            "legal": {"blocker": None, "ids_valid": "perhaps"},
        }
    )
    assert c.housing.status == HousingStatus.UNKNOWN
    assert c.cash_runway.status == RunwayStatus.UNKNOWN
    assert c.legal.blocker == LegalBlocker.UNKNOWN
    assert c.legal.ids_valid == Ternary.UNKNOWN


def test_yaml_booleans_map_to_ternary():
    c = Constraints.model_validate(yaml.safe_load("legal:\n  ids_valid: yes\n  mail_forwarding_set: no\n"))
    assert c.legal.ids_valid == Ternary.YES
    assert c.legal.mail_forwarding_set == Ternary.NO


def test_lease_date_from_yaml_date():
    h = HousingConstraint.model_validate({"lease_end_date": date(2025, 6, 30)})
    assert h.lease_end_date == "2025-06-30"
    assert HousingConstraint(lease_end_date="").lease_end_date is None


def test_months_zero_is_not_absent():
    c = Constraints.model_validate({"cash_runway": {"months": 0}})
    assert c.cash_runway.months == 0
    assert c.cash_runway.months is not None


def test_negative_numbers_are_rejected():
    with pytest.raises(ValidationError):
        Constraints.model_validate({"cash_runway": {"months": -1}})
    with pytest.raises(ValidationError):
        Constraints.model_validate({"housing": {"notice_days": -5}})


def test_empty_sections_in_yaml(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text("housing:\nlegal:\n  blocker: clear\n")
    c = load_constraints(str(p))
    assert c.housing.status == HousingStatus.UNKNOWN
    assert c.legal.blocker == LegalBlocker.CLEAR


def test_empty_file_is_all_unknown(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text("")
    assert load_constraints(str(p)) == Constraints()


def test_non_mapping_file_is_rejected(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text("- housing\n- legal\n")
    with pytest.raises(ValueError):
        load_constraints(str(p))


def test_shipped_example_loads():
    from pathlib import Path

    import exitwindow.engine.evaluator as ev

    example = Path(ev.__file__).parents[1] / "config" / "constraints.yaml"
    c = load_constraints(str(example))
    assert c.housing.status == HousingStatus.NOTICE_REQUIRED
    assert c.housing.lease_end_date == "2025-06-30"
    assert c.housing.move_out_notice_sent == Ternary.NO


def test_field_edits_are_coerced_like_construction():
    from exitwindow.engine.evaluator import evaluate

    c = Constraints()
    c.housing.status = "maybe"
    assert c.housing.status == HousingStatus.UNKNOWN
    assert "Housing end date is unknown." in evaluate(c).soft_blockers

    c.legal.ids_valid = True
    assert c.legal.ids_valid == Ternary.YES
    c.housing.lease_end_date = date(2025, 6, 30)
    assert c.housing.lease_end_date == "2025-06-30"


def test_field_edits_respect_bounds():
    c = Constraints()
    with pytest.raises(ValidationError):
        c.cash_runway.months = -1
    with pytest.raises(ValidationError):
        c.housing.notice_days = -3
    assert c.cash_runway.months is None


def test_replacing_a_section_is_validated():
    c = Constraints()
    c.legal = {"blocker": "present"}
    assert c.legal.blocker == LegalBlocker.PRESENT


def test_default_config_path_does_not_depend_on_cwd(tmp_path, monkeypatch):
    from pathlib import Path

    from exitwindow.cli.evaluate_once import DEFAULT_CONFIG

    monkeypatch.chdir(tmp_path)
    assert Path(DEFAULT_CONFIG).is_absolute()
    assert load_constraints(DEFAULT_CONFIG).housing.status == HousingStatus.NOTICE_REQUIRED
