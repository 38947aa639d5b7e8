from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from exitwindow.features.selectors import changes_since_last_review, stability_warnings
from exitwindow.models.evaluation import EvaluationResult
from exitwindow.storage.db import (
    connect,
    get_constraints,
    get_last_result,
    get_last_reviewed_at,
    get_stability_frame,
    init_schema,
    list_boundaries,
    list_changes,
    list_notes,
    list_snapshots,
)

TEXT_FILENAME = "exit-window-summary.txt"
JSON_FILENAME = "exit-window.json"
NO_RESULT = "No evaluation available."


def _section(title: str, items: Sequence[str]) -> str:
    if not items:
        return f"{title}: none"
    return f"{title}:\n- " + "\n- ".join(items)


def build_plain_text(result: Optional[EvaluationResult]) -> str:
    if result is None:
        return NO_RESULT
    return "\n\n".join(
        [
            f"Status: {result.status.value}",
            f"Earliest window: {result.earliest_window}",
            _section("Hard blockers", result.hard_blockers),
            _section("Soft blockers", result.soft_blockers),
            f"Summary: {result.summary}",
            _section("Step order", result.ordered_steps),
        ]
    )


def build_payload(conn) -> Dict[str, Any]:
    result = get_last_result(conn)
    frame = get_stability_frame(conn)
    changes = list_changes(conn)
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "constraints": get_constraints(conn).model_dump(mode="json"),
        "evaluation": result.model_dump(mode="json") if result else None,
        "snapshots": [s.model_dump(mode="json") for s in list_snapshots(conn)],
        "notes": [n.model_dump(mode="json") for n in list_notes(conn)],
        "risk_boundaries": [b.model_dump(mode="json") for b in list_boundaries(conn)],
        "changes": [c.model_dump(mode="json") for c in changes],
        "unreviewed_changes": len(changes_since_last_review(changes, get_last_reviewed_at(conn))),
        "stability": frame.model_dump(mode="json"),
        "stability_warnings": stability_warnings(frame),
    }


def run(data_dir: str = "data", out_dir: str = "exports", fmt: str = "text") -> Path:
    conn = connect(Path(data_dir))
    init_schema(conn)

    outp = Path(out_dir)
    outp.mkdir(parents=True, exist_ok=True)

    if fmt == "json":
        target = outp / JSON_FILENAME
        target.write_text(json.dumps(build_payload(conn), indent=2))
    else:
        target = outp / TEXT_FILENAME
        target.write_text(build_plain_text(get_last_result(conn)))

    print(f"Wrote {target.resolve()}")
    return target
