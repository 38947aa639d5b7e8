from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from exitwindow.features.blockers import hard_blockers, soft_blockers
from exitwindow.features.steps import ordered_steps
from exitwindow.features.window import earliest_window
from exitwindow.models.constraints import Constraints
from exitwindow.models.evaluation import EvaluationResult
from exitwindow.models.types import ExitStatus

Clock = Callable[[], datetime]

SUMMARIES = {
    ExitStatus.READY: "Constraints allow an exit window once soft blockers are addressed.",
    ExitStatus.NOT_YET: "Relocation is not yet possible due to hard blockers.",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def evaluate(constraints: Constraints, clock: Optional[Clock] = None) -> EvaluationResult:
    """
    Single pass over the constraints. Nothing is stored and nothing is
    inferred; the clock is the only thing read besides the input.
    """
    hard = hard_blockers(constraints)
    soft = soft_blockers(constraints)

    window, reasons = earliest_window(constraints.housing, hard, soft)

    status = ExitStatus.NOT_YET if hard else ExitStatus.READY

    # Reasons never mix hard and soft blockers
    if status == ExitStatus.NOT_YET:
        reasons.extend(hard)
    else:
        reasons.extend(soft)

    now = (clock or utc_now)()

    return EvaluationResult(
        status=status,
        hard_blockers=tuple(hard),
        soft_blockers=tuple(soft),
        earliest_window=window,
        reasons=tuple(reasons),
        summary=SUMMARIES[status],
        ordered_steps=tuple(ordered_steps(constraints)),
        generated_at=now.isoformat(),
    )
