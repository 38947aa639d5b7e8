from typing import Tuple

from pydantic import BaseModel, ConfigDict

from exitwindow.models.types import ExitStatus


class EvaluationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: ExitStatus
    hard_blockers: Tuple[str, ...]
    soft_blockers: Tuple[str, ...]
    earliest_window: str
    reasons: Tuple[str, ...]
    summary: str
    ordered_steps: Tuple[str, ...]
    generated_at: str
