import pytest

from exitwindow.features.blockers import hard_blockers, soft_blockers
from exitwindow.features.steps import ordered_steps
from exitwindow.features.window import earliest_window, housing_notice_reason
from exitwindow.models.constraints import HousingConstraint

from helpers import favorable, mk


@pytest.mark.parametrize(
    "sections,expected",
    [
        ({"legal": {"blocker": "present"}}, "Legal or administrative blocker present."),
        ({"healthcare": {"continuity": "at-risk"}}, "Healthcare continuity is at risk."),
        ({"dependents": {"coverage": "unsupported"}}, "Dependents do not have confirmed support."),
        ({"cash_runway": {"months": 0.99}}, "Cash runway is under 1 month."),
    ],
)
def test_each_hard_rule(sections, expected):
    assert hard_blockers(favorable(**sections)) == [expected]


@pytest.mark.parametrize(
    "sections,expected",
    [
        ({"income": {"stability": "unstable"}}, "Income is currently unstable."),
        ({"cash_runway": {"status": "tight"}}, "Cash runway is tight (<3 months)."),
        ({"cash_runway": {"months": 1}}, "Cash runway is tight (<3 months)."),
        ({"cash_runway": {"months": 2.99}}, "Cash runway is tight (<3 months)."),
        ({"housing": {"status": "notice-required"}}, "Housing requires notice before exit."),
        ({"housing": {"status": "locked-in"}}, "Lease is locked beyond the desired exit window."),
        ({"housing": {"status": "unknown"}}, "Housing end date is unknown."),
        ({"legal": {"blocker": "unknown"}}, "Legal/administrative status is unknown."),
        ({"healthcare": {"continuity": "unknown"}}, "Healthcare continuity needs confirmation."),
        ({"dependents": {"coverage": "unknown"}}, "Dependents support plan is unknown."),
    ],
)
def test_each_soft_rule(sections, expected):
    c = favorable(**sections)
    assert soft_blockers(c) == [expected]
    assert hard_blockers(c) == []


def test_runway_boundaries():
    assert hard_blockers(favorable(cash_runway={"months": 1})) == []
    assert soft_blockers(favorable(cash_runway={"months": 3})) == []
    assert hard_blockers(favorable(cash_runway={"months": 0})) == ["Cash runway is under 1 month."]
    assert soft_blockers(favorable(cash_runway={"months": 0})) == []


def test_unknown_income_and_runway_status_are_not_blockers():
    c = favorable(income={"stability": "unknown"}, cash_runway={"status": "unknown", "months": None})
    assert hard_blockers(c) == []
    assert soft_blockers(c) == []
    assert ordered_steps(c) == ["Stabilize income source.", "Extend cash runway to 3+ months."]


def test_soft_blocker_order():
    c = mk(
        income={"stability": "unstable"},
        cash_runway={"status": "tight"},
        housing={"status": "locked-in"},
    )
    assert soft_blockers(c) == [
        "Income is currently unstable.",
        "Cash runway is tight (<3 months).",
        "Lease is locked beyond the desired exit window.",
        "Legal/administrative status is unknown.",
        "Healthcare continuity needs confirmation.",
        "Dependents support plan is unknown.",
    ]


def test_full_step_order():
    c = mk(housing={"status": "notice-required"})
    assert ordered_steps(c) == [
        "Resolve legal or administrative blockers.",
        "Secure healthcare continuity.",
        "Confirm support plan for dependents.",
        "Serve required housing notice.",
        "Confirm lease end date.",
        "Stabilize income source.",
        "Extend cash runway to 3+ months.",
    ]


def test_window_phrases():
    h = HousingConstraint(lease_end_date="2026-01-31", notice_days=60)
    assert earliest_window(h, ["x"], []) == ("Not available until hard blockers are removed", [])
    assert earliest_window(h, [], ["y"]) == (
        "Earliest after lease end on 2026-01-31",
        ["Send housing notice 60 days before 2026-01-31."],
    )
    assert earliest_window(h, [], [])[0] == "After 2026-01-31"

    bare = HousingConstraint()
    assert earliest_window(bare, [], ["y"]) == ("Earliest after confirming housing exit timing", [])
    assert earliest_window(bare, [], []) == ("Window opens now", [])


def test_notice_reason_needs_a_lease_date():
    assert housing_notice_reason(HousingConstraint(notice_days=30)) is None
    assert housing_notice_reason(HousingConstraint(lease_end_date="2026-01-31")) is None


def test_notice_reason_with_unset_or_zero_days():
    assert housing_notice_reason(HousingConstraint(lease_end_date="2026-01-31", notice_days=None)) is None
    assert housing_notice_reason(HousingConstraint(lease_end_date="2026-01-31", notice_days=0)) is None
    assert housing_notice_reason(HousingConstraint(lease_end_date="2026-01-31", notice_days=1)) == (
        "Send housing notice 1 days before 2026-01-31."
    )
