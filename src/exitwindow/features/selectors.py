from __future__ import annotations

from typing import List, Optional, Sequence

from exitwindow.models.records import ConstraintChange, Snapshot, StabilityFrame
from exitwindow.models.types import FocusStatus


def latest_snapshots(snapshots: Sequence[Snapshot], n: int = 2) -> List[Snapshot]:
    # ISO timestamps sort lexically
    ordered = sorted(snapshots, key=lambda s: s.created_at, reverse=True)
    return ordered[:n]


def changes_since_last_review(
    changes: Sequence[ConstraintChange],
    last_reviewed_at: Optional[str],
) -> List[ConstraintChange]:
    if not last_reviewed_at:
        return list(changes)
    return [c for c in changes if c.recorded_at > last_reviewed_at]


def stability_warnings(frame: StabilityFrame) -> List[str]:
    out = []
    for focus in frame.focuses:
        if focus.status != FocusStatus.DEGRADING:
            continue
        detail = f": {focus.note}" if focus.note else ""
        out.append(f"Stability is degrading for {focus.label}{detail}.")
    return out
