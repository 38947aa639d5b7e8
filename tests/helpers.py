from datetime import datetime, timezone

from exitwindow.models.constraints import Constraints

FIXED = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED


def mk(**sections):
    return Constraints.model_validate(sections)


def favorable(**overrides):
    base = {
        "legal": {"blocker": "clear"},
        "healthcare": {"continuity": "secured"},
        "dependents": {"coverage": "supported"},
        "income": {"stability": "stable"},
        "cash_runway": {"status": "secure", "months": 6},
        "housing": {"status": "aligned", "lease_end_date": "2025-06-30"},
    }
    for k, v in overrides.items():
        base[k] = {**base[k], **v}
    return mk(**base)
