from __future__ import annotations

from typing import List, Optional, Sequence

from pydantic import BaseModel

from exitwindow.models.constraints import SECTIONS
from exitwindow.models.types import ChangeKind, FocusStatus, NoteContext, RiskBoundaryCategory

DEFAULT_STABILITY_STATEMENT = "Waiting is correct right now. Keep the essentials steady."


class Snapshot(BaseModel):
    id: str
    created_at: str
    summary: str
    known_blockers: List[str] = []
    unknowns: List[str] = []
    notes: str = ""
    label: Optional[str] = None


class ScopedNote(BaseModel):
    id: str
    context: NoteContext
    context_id: str
    text: str
    created_at: str


class RiskBoundary(BaseModel):
    id: str
    category: RiskBoundaryCategory
    description: str
    added_at: str


class ConstraintChange(BaseModel):
    id: str
    recorded_at: str
    title: str
    description: str
    kind: ChangeKind
    related_constraint: Optional[str] = None  # one of constraints.SECTIONS


class StabilityFocus(BaseModel):
    id: str
    label: str
    must_remain_stable: str
    status: FocusStatus = FocusStatus.STABLE
    note: Optional[str] = None
    flagged_at: Optional[str] = None


class StabilityFrame(BaseModel):
    active: bool = False
    statement: str = DEFAULT_STABILITY_STATEMENT
    focuses: List[StabilityFocus] = []


def _clean_items(items: Sequence[str]) -> List[str]:
    out = []
    for item in items:
        s = (item or "").strip()
        if s:
            out.append(s)
    return out


def _required(value: Optional[str], what: str) -> str:
    s = (value or "").strip()
    if not s:
        raise ValueError(f"{what} must not be empty")
    return s


def new_snapshot(
    summary: str,
    created_at: str,
    known_blockers: Sequence[str] = (),
    unknowns: Sequence[str] = (),
    notes: str = "",
    label: Optional[str] = None,
) -> Snapshot:
    summary = _required(summary, "snapshot summary")
    label = label.strip() if label else None
    return Snapshot(
        id=f"{created_at}-{summary}",
        created_at=created_at,
        summary=summary,
        known_blockers=_clean_items(known_blockers),
        unknowns=_clean_items(unknowns),
        notes=notes,
        label=label or None,
    )


def new_note(context: NoteContext, context_id: str, text: str, created_at: str) -> ScopedNote:
    context_id = _required(context_id, "note context id")
    text = _required(text, "note text")
    return ScopedNote(
        id=f"{created_at}-{context_id}",
        context=NoteContext(context),
        context_id=context_id,
        text=text,
        created_at=created_at,
    )


def new_boundary(category: RiskBoundaryCategory, description: str, added_at: str) -> RiskBoundary:
    category = RiskBoundaryCategory(category)
    return RiskBoundary(
        id=f"{added_at}-{category.value}",
        category=category,
        description=_required(description, "risk boundary description"),
        added_at=added_at,
    )


def new_change(
    title: str,
    description: str,
    kind: ChangeKind,
    recorded_at: str,
    related_constraint: Optional[str] = None,
) -> ConstraintChange:
    title = _required(title, "change title")
    description = _required(description, "change description")
    if related_constraint is not None and related_constraint not in SECTIONS:
        raise ValueError(f"unknown constraint section: {related_constraint}")
    return ConstraintChange(
        id=f"{recorded_at}-{title}",
        recorded_at=recorded_at,
        title=title,
        description=description,
        kind=ChangeKind(kind),
        related_constraint=related_constraint,
    )


def new_focus(
    focus_id: str,
    label: str,
    must_remain_stable: str,
    status: FocusStatus = FocusStatus.STABLE,
    note: Optional[str] = None,
) -> StabilityFocus:
    return StabilityFocus(
        id=focus_id,
        label=_required(label, "focus label"),
        must_remain_stable=_required(must_remain_stable, "focus must-remain-stable"),
        status=FocusStatus(status),
        note=note,
    )


def update_focus(
    focus: StabilityFocus,
    now: str,
    status: Optional[FocusStatus] = None,
    note: Optional[str] = None,
    label: Optional[str] = None,
    must_remain_stable: Optional[str] = None,
) -> StabilityFocus:
    """Moving a focus to degrading stamps flagged_at; anything else keeps it."""
    patch = {}
    if status is not None:
        patch["status"] = FocusStatus(status)
    if note is not None:
        patch["note"] = note
    if label is not None:
        patch["label"] = _required(label, "focus label")
    if must_remain_stable is not None:
        patch["must_remain_stable"] = _required(must_remain_stable, "focus must-remain-stable")
    patch["flagged_at"] = now if status == FocusStatus.DEGRADING else focus.flagged_at
    return focus.model_copy(update=patch)
