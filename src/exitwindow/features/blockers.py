from __future__ import annotations

from typing import Callable, List, Tuple

from exitwindow.models.constraints import Constraints
from exitwindow.models.types import (
    DependentsCoverage,
    HealthcareContinuity,
    HousingStatus,
    IncomeStability,
    LegalBlocker,
    RunwayStatus,
)

Rule = Tuple[Callable[[Constraints], bool], str]


def _runway_under_one_month(c: Constraints) -> bool:
    months = c.cash_runway.months
    return months is not None and months < 1


def _runway_tight(c: Constraints) -> bool:
    # status and months are checked independently; a "secure" status with
    # months=2 still counts as tight
    if c.cash_runway.status == RunwayStatus.TIGHT:
        return True
    months = c.cash_runway.months
    return months is not None and 1 <= months < 3


# Categorical: any one of these makes leaving impossible for now.
HARD_RULES: List[Rule] = [
    (lambda c: c.legal.blocker == LegalBlocker.PRESENT, "Legal or administrative blocker present."),
    (lambda c: c.healthcare.continuity == HealthcareContinuity.AT_RISK, "Healthcare continuity is at risk."),
    (lambda c: c.dependents.coverage == DependentsCoverage.UNSUPPORTED, "Dependents do not have confirmed support."),
    (_runway_under_one_month, "Cash runway is under 1 month."),
]

SOFT_RULES: List[Rule] = [
    (lambda c: c.income.stability == IncomeStability.UNSTABLE, "Income is currently unstable."),
    (_runway_tight, "Cash runway is tight (<3 months)."),
    (lambda c: c.housing.status == HousingStatus.NOTICE_REQUIRED, "Housing requires notice before exit."),
    (lambda c: c.housing.status == HousingStatus.LOCKED_IN, "Lease is locked beyond the desired exit window."),
    (lambda c: c.housing.status == HousingStatus.UNKNOWN, "Housing end date is unknown."),
    # unknowns are never promoted to hard blockers
    (lambda c: c.legal.blocker == LegalBlocker.UNKNOWN, "Legal/administrative status is unknown."),
    (lambda c: c.healthcare.continuity == HealthcareContinuity.UNKNOWN, "Healthcare continuity needs confirmation."),
    (lambda c: c.dependents.coverage == DependentsCoverage.UNKNOWN, "Dependents support plan is unknown."),
]


def _apply(rules: List[Rule], constraints: Constraints) -> List[str]:
    return [message for check, message in rules if check(constraints)]


def hard_blockers(constraints: Constraints) -> List[str]:
    return _apply(HARD_RULES, constraints)


def soft_blockers(constraints: Constraints) -> List[str]:
    return _apply(SOFT_RULES, constraints)
