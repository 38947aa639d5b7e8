from __future__ import annotations

import argparse
import time
from pathlib import Path

from exitwindow.features.selectors import (
    changes_since_last_review,
    latest_snapshots,
    stability_warnings,
)
from exitwindow.models.records import (
    new_boundary,
    new_change,
    new_focus,
    new_note,
    new_snapshot,
    update_focus,
)
from exitwindow.storage import db


def _conn(args: argparse.Namespace):
    conn = db.connect(Path(args.data_dir))
    db.init_schema(conn)
    return conn


def _split(value: str) -> list:
    # multi-item arguments are ';'-separated
    return (value or "").split(";")


# --- snapshots -----------------------------------------------------------

def snapshot_add(args: argparse.Namespace) -> None:
    conn = _conn(args)
    known = _split(args.known_blockers)
    unknowns = _split(args.unknowns)
    if args.from_last:
        result = db.get_last_result(conn)
        if result is None:
            raise ValueError("no stored evaluation to snapshot; run `evaluate` first")
        known = list(result.hard_blockers) + list(result.soft_blockers) + known
    snap = new_snapshot(
        summary=args.summary,
        created_at=db.now_iso(),
        known_blockers=known,
        unknowns=unknowns,
        notes=args.notes or "",
        label=args.label,
    )
    db.add_snapshot(conn, snap)
    print(f"Snapshot saved: {snap.id}")


def _print_snapshot(s) -> None:
    title = s.label or s.summary
    print(f"[{s.created_at}] {title}")
    if s.label:
        print(f"  summary: {s.summary}")
    for b in s.known_blockers:
        print(f"  blocker: {b}")
    for u in s.unknowns:
        print(f"  unknown: {u}")
    if s.notes:
        print(f"  notes: {s.notes}")


def snapshot_list(args: argparse.Namespace) -> None:
    snaps = db.list_snapshots(_conn(args))
    if not snaps:
        print("No snapshots yet.")
    for s in snaps:
        _print_snapshot(s)


def snapshot_latest(args: argparse.Namespace) -> None:
    for s in latest_snapshots(db.list_snapshots(_conn(args))):
        _print_snapshot(s)


# --- notes ---------------------------------------------------------------

def note_add(args: argparse.Namespace) -> None:
    note = new_note(args.context, args.context_id, args.text, db.now_iso())
    db.add_note(_conn(args), note)
    print(f"Note saved: {note.id}")


def note_list(args: argparse.Namespace) -> None:
    for n in db.list_notes(_conn(args), context=args.context, context_id=args.context_id):
        print(f"{n.id}  [{n.context.value}:{n.context_id}] {n.text}")


def note_remove(args: argparse.Namespace) -> None:
    if db.remove_note(_conn(args), args.id):
        print(f"Removed note {args.id}")
    else:
        print(f"No note with id {args.id}")


# --- risk boundaries -----------------------------------------------------

def boundary_add(args: argparse.Namespace) -> None:
    b = new_boundary(args.category, args.description, db.now_iso())
    db.add_boundary(_conn(args), b)
    print(f"Boundary saved: {b.id}")


def boundary_list(args: argparse.Namespace) -> None:
    for b in db.list_boundaries(_conn(args)):
        print(f"{b.id}  [{b.category.value}] {b.description}")


def boundary_remove(args: argparse.Namespace) -> None:
    if db.remove_boundary(_conn(args), args.id):
        print(f"Removed boundary {args.id}")
    else:
        print(f"No boundary with id {args.id}")


# --- change log ----------------------------------------------------------

def change_add(args: argparse.Namespace) -> None:
    change = new_change(
        title=args.title,
        description=args.description,
        kind=args.kind,
        recorded_at=db.now_iso(),
        related_constraint=args.related,
    )
    db.add_change(_conn(args), change)
    print(f"Change recorded: {change.id}")


def change_list(args: argparse.Namespace) -> None:
    conn = _conn(args)
    changes = db.list_changes(conn)
    if args.unreviewed:
        changes = changes_since_last_review(changes, db.get_last_reviewed_at(conn))
    for c in changes:
        related = f" ({c.related_constraint})" if c.related_constraint else ""
        print(f"[{c.recorded_at}] {c.kind.value}{related}: {c.title} - {c.description}")


def change_review(args: argparse.Namespace) -> None:
    ts = db.mark_reviewed(_conn(args), args.at)
    print(f"Changes reviewed at {ts}")


# --- stability -----------------------------------------------------------

def stability_on(args: argparse.Namespace) -> None:
    db.set_stability_active(_conn(args), True)
    print("Stability mode on")


def stability_off(args: argparse.Namespace) -> None:
    db.set_stability_active(_conn(args), False)
    print("Stability mode off")


def stability_statement(args: argparse.Namespace) -> None:
    db.set_stability_statement(_conn(args), args.text)
    print("Statement updated")


def stability_add(args: argparse.Namespace) -> None:
    conn = _conn(args)
    focus = new_focus(
        focus_id=db.unused_focus_id(conn, str(int(time.time() * 1000))),
        label=args.label,
        must_remain_stable=args.must_remain_stable,
        status=args.status,
        note=args.note,
    )
    db.add_focus(conn, focus)
    print(f"Focus saved: {focus.id}")


def stability_update(args: argparse.Namespace) -> None:
    conn = _conn(args)
    focus = db.get_focus(conn, args.id)
    if focus is None:
        raise ValueError(f"no focus with id {args.id}")
    focus = update_focus(
        focus,
        now=db.now_iso(),
        status=args.status,
        note=args.note,
        label=args.label,
        must_remain_stable=args.must_remain_stable,
    )
    db.save_focus(conn, focus)
    print(f"Focus updated: {focus.id} ({focus.status.value})")


def stability_remove(args: argparse.Namespace) -> None:
    if db.remove_focus(_conn(args), args.id):
        print(f"Removed focus {args.id}")
    else:
        print(f"No focus with id {args.id}")


def stability_list(args: argparse.Namespace) -> None:
    frame = db.get_stability_frame(_conn(args))
    print(f"Stability mode: {'on' if frame.active else 'off'}")
    print(frame.statement)
    for f in frame.focuses:
        note = f" - {f.note}" if f.note else ""
        print(f"{f.id}  [{f.status.value}] {f.label}: {f.must_remain_stable}{note}")
    for w in stability_warnings(frame):
        print(f"WARNING: {w}")
