from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from exitwindow.models.constraints import HousingConstraint

BLOCKED = "Not available until hard blockers are removed"
UNCONFIRMED = "Earliest after confirming housing exit timing"
OPEN_NOW = "Window opens now"


def housing_notice_reason(housing: HousingConstraint) -> Optional[str]:
    if not housing.lease_end_date:
        return None
    if housing.notice_days is not None and housing.notice_days > 0:
        return f"Send housing notice {housing.notice_days} days before {housing.lease_end_date}."
    return None


def earliest_window(
    housing: HousingConstraint,
    hard: Sequence[str],
    soft: Sequence[str],
) -> Tuple[str, List[str]]:
    """
    Returns (window, timing_reasons).

    The window is a human-readable phrase, never a parsed date. The timing
    reasons hold the housing notice line, which is only produced when there
    are no hard blockers, whatever the soft blocker count.
    """
    if hard:
        return BLOCKED, []

    reasons: List[str] = []
    lease_end = housing.lease_end_date

    if lease_end:
        window = f"Earliest after lease end on {lease_end}"
        notice = housing_notice_reason(housing)
        if notice:
            reasons.append(notice)
        if not soft:
            window = f"After {lease_end}"
    else:
        window = UNCONFIRMED
        if not soft:
            window = OPEN_NOW

    return window, reasons
