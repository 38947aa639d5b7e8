from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError

from exitwindow.engine.evaluator import Clock, evaluate, utc_now
from exitwindow.models.constraints import Constraints
from exitwindow.models.evaluation import EvaluationResult
from exitwindow.models.records import (
    ConstraintChange,
    RiskBoundary,
    ScopedNote,
    Snapshot,
    StabilityFocus,
    StabilityFrame,
)

DB_NAME = "exitwindow.sqlite3"

# Bump a key's version when its payload shape changes; old payloads then
# read back as the default.
DOC_VERSIONS = {
    "constraints": 1,
    "evaluation": 1,
    "stability": 1,
    "change-log-review": 1,
}

T = TypeVar("T")


def db_path(data_dir: Path) -> Path:
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / DB_NAME


def connect(data_dir: Path) -> sqlite3.Connection:
    path = db_path(data_dir)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS documents (
            key TEXT PRIMARY KEY,
            version INTEGER NOT NULL,
            payload_json TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """
    )

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS snapshots (
            id TEXT PRIMARY KEY,
            created_at TEXT NOT NULL,
            label TEXT,
            summary TEXT NOT NULL,
            known_blockers_json TEXT NOT NULL,
            unknowns_json TEXT NOT NULL,
            notes TEXT NOT NULL DEFAULT ''
        );
        """
    )

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS notes (
            id TEXT PRIMARY KEY,
            context TEXT NOT NULL,
            context_id TEXT NOT NULL,
            text TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
        """
    )

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS risk_boundaries (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            category TEXT NOT NULL,
            description TEXT NOT NULL,
            added_at TEXT NOT NULL
        );
        """
    )

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS constraint_changes (
            id TEXT PRIMARY KEY,
            recorded_at TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            kind TEXT NOT NULL,
            related_constraint TEXT
        );
        """
    )

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS stability_focuses (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            label TEXT NOT NULL,
            must_remain_stable TEXT NOT NULL,
            status TEXT NOT NULL,
            note TEXT,
            flagged_at TEXT
        );
        """
    )

    conn.commit()


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# --- versioned documents -------------------------------------------------

def _read_doc(conn: sqlite3.Connection, key: str, parse: Callable[[Any], T], default: Callable[[], T]) -> T:
    row = conn.execute(
        "SELECT version, payload_json FROM documents WHERE key = ?",
        (key,),
    ).fetchone()
    if row is None or row["version"] != DOC_VERSIONS[key]:
        return default()
    try:
        return parse(json.loads(row["payload_json"]))
    except (ValueError, KeyError, TypeError, AttributeError, ValidationError):
        # Corrupt payloads are dropped rather than breaking every read.
        conn.execute("DELETE FROM documents WHERE key = ?", (key,))
        conn.commit()
        return default()


def _write_doc(conn: sqlite3.Connection, key: str, payload: Any) -> None:
    conn.execute(
        """
        INSERT OR REPLACE INTO documents(key, version, payload_json, updated_at)
        VALUES (?, ?, ?, ?)
        """,
        (key, DOC_VERSIONS[key], json.dumps(payload), now_iso()),
    )
    conn.commit()


def get_constraints(conn: sqlite3.Connection) -> Constraints:
    return _read_doc(conn, "constraints", Constraints.model_validate, Constraints)


def save_constraints(conn: sqlite3.Connection, constraints: Constraints) -> None:
    _write_doc(conn, "constraints", constraints.model_dump(mode="json"))


def reset_constraints(conn: sqlite3.Connection) -> None:
    save_constraints(conn, Constraints())


def get_last_result(conn: sqlite3.Connection) -> Optional[EvaluationResult]:
    return _read_doc(conn, "evaluation", EvaluationResult.model_validate, lambda: None)


def save_last_result(conn: sqlite3.Connection, result: EvaluationResult) -> None:
    _write_doc(conn, "evaluation", result.model_dump(mode="json"))


def clear_last_result(conn: sqlite3.Connection) -> None:
    conn.execute("DELETE FROM documents WHERE key = 'evaluation'")
    conn.commit()


def evaluate_and_store(conn: sqlite3.Connection, clock: Optional[Clock] = None) -> EvaluationResult:
    """Evaluate the stored constraints and replace the last result wholesale."""
    result = evaluate(get_constraints(conn), clock=clock or utc_now)
    save_last_result(conn, result)
    return result


def get_last_reviewed_at(conn: sqlite3.Connection) -> Optional[str]:
    return _read_doc(conn, "change-log-review", lambda d: d.get("last_reviewed_at"), lambda: None)


def mark_reviewed(conn: sqlite3.Connection, timestamp: Optional[str] = None) -> str:
    ts = timestamp or now_iso()
    _write_doc(conn, "change-log-review", {"last_reviewed_at": ts})
    return ts


def _stability_meta(conn: sqlite3.Connection) -> Dict[str, Any]:
    default = StabilityFrame()
    return _read_doc(
        conn,
        "stability",
        lambda d: {"active": bool(d["active"]), "statement": str(d["statement"])},
        lambda: {"active": default.active, "statement": default.statement},
    )


def set_stability_active(conn: sqlite3.Connection, active: bool) -> None:
    meta = _stability_meta(conn)
    meta["active"] = active
    _write_doc(conn, "stability", meta)


def set_stability_statement(conn: sqlite3.Connection, statement: str) -> None:
    meta = _stability_meta(conn)
    meta["statement"] = statement
    _write_doc(conn, "stability", meta)


def get_stability_frame(conn: sqlite3.Connection) -> StabilityFrame:
    meta = _stability_meta(conn)
    return StabilityFrame(active=meta["active"], statement=meta["statement"], focuses=list_focuses(conn))


# --- snapshots -----------------------------------------------------------

def add_snapshot(conn: sqlite3.Connection, snap: Snapshot) -> None:
    conn.execute(
        """
        INSERT OR REPLACE INTO snapshots(id, created_at, label, summary, known_blockers_json, unknowns_json, notes)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            snap.id,
            snap.created_at,
            snap.label,
            snap.summary,
            json.dumps(snap.known_blockers),
            json.dumps(snap.unknowns),
            snap.notes,
        ),
    )
    conn.commit()


def list_snapshots(conn: sqlite3.Connection) -> List[Snapshot]:
    rows = conn.execute(
        """
        SELECT id, created_at, label, summary, known_blockers_json, unknowns_json, notes
        FROM snapshots
        ORDER BY created_at DESC, rowid DESC
        """
    ).fetchall()
    return [
        Snapshot(
            id=r["id"],
            created_at=r["created_at"],
            label=r["label"],
            summary=r["summary"],
            known_blockers=json.loads(r["known_blockers_json"]),
            unknowns=json.loads(r["unknowns_json"]),
            notes=r["notes"],
        )
        for r in rows
    ]


def reset_snapshots(conn: sqlite3.Connection) -> None:
    conn.execute("DELETE FROM snapshots")
    conn.commit()


# --- scoped notes --------------------------------------------------------

def add_note(conn: sqlite3.Connection, note: ScopedNote) -> None:
    conn.execute(
        """
        INSERT OR REPLACE INTO notes(id, context, context_id, text, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (note.id, note.context.value, note.context_id, note.text, note.created_at),
    )
    conn.commit()


def list_notes(
    conn: sqlite3.Connection,
    context: Optional[str] = None,
    context_id: Optional[str] = None,
) -> List[ScopedNote]:
    sql = "SELECT id, context, context_id, text, created_at FROM notes WHERE 1 = 1"
    params: List[Any] = []
    if context is not None:
        sql += " AND context = ?"
        params.append(str(getattr(context, "value", context)))
    if context_id is not None:
        sql += " AND context_id = ?"
        params.append(context_id)
    sql += " ORDER BY created_at DESC, rowid DESC"
    return [ScopedNote(**dict(r)) for r in conn.execute(sql, tuple(params)).fetchall()]


def remove_note(conn: sqlite3.Connection, note_id: str) -> bool:
    cur = conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
    conn.commit()
    return cur.rowcount > 0


# --- risk boundaries -----------------------------------------------------

def add_boundary(conn: sqlite3.Connection, boundary: RiskBoundary) -> None:
    conn.execute(
        """
        INSERT INTO risk_boundaries(id, category, description, added_at)
        VALUES (?, ?, ?, ?)
        """,
        (boundary.id, boundary.category.value, boundary.description, boundary.added_at),
    )
    conn.commit()


def list_boundaries(conn: sqlite3.Connection) -> List[RiskBoundary]:
    rows = conn.execute(
        "SELECT id, category, description, added_at FROM risk_boundaries ORDER BY seq ASC"
    ).fetchall()
    return [RiskBoundary(**dict(r)) for r in rows]


def remove_boundary(conn: sqlite3.Connection, boundary_id: str) -> bool:
    cur = conn.execute("DELETE FROM risk_boundaries WHERE id = ?", (boundary_id,))
    conn.commit()
    return cur.rowcount > 0


# --- change log ----------------------------------------------------------

def add_change(conn: sqlite3.Connection, change: ConstraintChange) -> None:
    conn.execute(
        """
        INSERT OR REPLACE INTO constraint_changes(id, recorded_at, title, description, kind, related_constraint)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            change.id,
            change.recorded_at,
            change.title,
            change.description,
            change.kind.value,
            change.related_constraint,
        ),
    )
    conn.commit()


def list_changes(conn: sqlite3.Connection) -> List[ConstraintChange]:
    rows = conn.execute(
        """
        SELECT id, recorded_at, title, description, kind, related_constraint
        FROM constraint_changes
        ORDER BY recorded_at DESC, rowid DESC
        """
    ).fetchall()
    return [ConstraintChange(**dict(r)) for r in rows]


# --- stability focuses ---------------------------------------------------

def unused_focus_id(conn: sqlite3.Connection, base: str) -> str:
    """`base` if no focus has it yet, else `base-2`, `base-3`, ..."""
    candidate = base
    n = 1
    while conn.execute("SELECT 1 FROM stability_focuses WHERE id = ?", (candidate,)).fetchone():
        n += 1
        candidate = f"{base}-{n}"
    return candidate


def add_focus(conn: sqlite3.Connection, focus: StabilityFocus) -> None:
    conn.execute(
        """
        INSERT INTO stability_focuses(id, label, must_remain_stable, status, note, flagged_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (focus.id, focus.label, focus.must_remain_stable, focus.status.value, focus.note, focus.flagged_at),
    )
    conn.commit()


def get_focus(conn: sqlite3.Connection, focus_id: str) -> Optional[StabilityFocus]:
    row = conn.execute(
        """
        SELECT id, label, must_remain_stable, status, note, flagged_at
        FROM stability_focuses WHERE id = ?
        """,
        (focus_id,),
    ).fetchone()
    return StabilityFocus(**dict(row)) if row else None


def save_focus(conn: sqlite3.Connection, focus: StabilityFocus) -> None:
    conn.execute(
        """
        UPDATE stability_focuses
        SET label = ?, must_remain_stable = ?, status = ?, note = ?, flagged_at = ?
        WHERE id = ?
        """,
        (focus.label, focus.must_remain_stable, focus.status.value, focus.note, focus.flagged_at, focus.id),
    )
    conn.commit()


def list_focuses(conn: sqlite3.Connection) -> List[StabilityFocus]:
    rows = conn.execute(
        """
        SELECT id, label, must_remain_stable, status, note, flagged_at
        FROM stability_focuses
        ORDER BY seq ASC
        """
    ).fetchall()
    return [StabilityFocus(**dict(r)) for r in rows]


def remove_focus(conn: sqlite3.Connection, focus_id: str) -> bool:
    cur = conn.execute("DELETE FROM stability_focuses WHERE id = ?", (focus_id,))
    conn.commit()
    return cur.rowcount > 0


def wipe(conn: sqlite3.Connection) -> None:
    for table in ("documents", "snapshots", "notes", "risk_boundaries", "constraint_changes", "stability_focuses"):
        conn.execute(f"DELETE FROM {table}")
    conn.commit()
