from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

import yaml

from exitwindow.models.constraints import Constraints
from exitwindow.models.evaluation import EvaluationResult
from exitwindow.storage.db import (
    connect,
    evaluate_and_store,
    init_schema,
    save_constraints,
)

DEFAULT_CONFIG = str(Path(__file__).resolve().parents[1] / "config" / "constraints.yaml")


def default_data_dir() -> str:
    return os.getenv("EXITWINDOW_DATA_DIR", "data")


def load_constraints(config_path: str) -> Constraints:
    cfg = yaml.safe_load(Path(config_path).read_text()) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{config_path}: expected a mapping of constraint sections")
    return Constraints.model_validate(cfg)


def _bullets(title: str, items) -> List[str]:
    if not items:
        return [f"{title}: none"]
    return [f"{title}:"] + [f"  - {i}" for i in items]


def format_report(result: EvaluationResult) -> str:
    lines = [
        f"Status: {result.status.value}",
        f"Earliest window: {result.earliest_window}",
        f"Summary: {result.summary}",
    ]
    lines += _bullets("Hard blockers", result.hard_blockers)
    lines += _bullets("Soft blockers", result.soft_blockers)
    lines += _bullets("Reasons", result.reasons)
    lines += _bullets("Next steps", result.ordered_steps)
    lines.append(f"Generated at: {result.generated_at}")
    return "\n".join(lines)


def run(data_dir: Optional[str] = None, config_path: Optional[str] = None) -> EvaluationResult:
    conn = connect(Path(data_dir or default_data_dir()))
    init_schema(conn)

    if config_path:
        save_constraints(conn, load_constraints(config_path))
        print(f"Loaded constraints from {config_path}")

    result = evaluate_and_store(conn)
    print(format_report(result))
    return result
