from __future__ import annotations

from typing import List

from exitwindow.features.blockers import Rule
from exitwindow.models.constraints import Constraints
from exitwindow.models.types import (
    DependentsCoverage,
    HealthcareContinuity,
    HousingStatus,
    IncomeStability,
    LegalBlocker,
    RunwayStatus,
)

# Checked against field values, not against which blockers fired.
STEP_RULES: List[Rule] = [
    (lambda c: c.legal.blocker != LegalBlocker.CLEAR, "Resolve legal or administrative blockers."),
    (lambda c: c.healthcare.continuity != HealthcareContinuity.SECURED, "Secure healthcare continuity."),
    (lambda c: c.dependents.coverage != DependentsCoverage.SUPPORTED, "Confirm support plan for dependents."),
    (lambda c: c.housing.status == HousingStatus.NOTICE_REQUIRED, "Serve required housing notice."),
    (lambda c: not c.housing.lease_end_date, "Confirm lease end date."),
    (lambda c: c.income.stability != IncomeStability.STABLE, "Stabilize income source."),
    (lambda c: c.cash_runway.status != RunwayStatus.SECURE, "Extend cash runway to 3+ months."),
]


def ordered_steps(constraints: Constraints) -> List[str]:
    return [step for check, step in STEP_RULES if check(constraints)]
