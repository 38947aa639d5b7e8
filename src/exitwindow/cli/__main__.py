from __future__ import annotations

import argparse
from pathlib import Path

from pydantic import ValidationError

from exitwindow.cli import evaluate_once
from exitwindow.cli import export_summary
from exitwindow.cli import records
from exitwindow.models.types import ChangeKind, FocusStatus, NoteContext, RiskBoundaryCategory
from exitwindow.storage.db import connect, get_last_result, init_schema, save_constraints, wipe


def _cmd_init_db(args: argparse.Namespace) -> None:
    conn = connect(Path(args.data_dir))
    init_schema(conn)
    print(f"Initialized sqlite db in {Path(args.data_dir).resolve()}")


def _cmd_load_constraints(args: argparse.Namespace) -> None:
    constraints = evaluate_once.load_constraints(args.config)
    conn = connect(Path(args.data_dir))
    init_schema(conn)
    save_constraints(conn, constraints)
    print(f"Stored constraints from {args.config}")


def _cmd_evaluate(args: argparse.Namespace) -> None:
    evaluate_once.run(data_dir=args.data_dir, config_path=args.config)


def _cmd_show(args: argparse.Namespace) -> None:
    conn = connect(Path(args.data_dir))
    init_schema(conn)
    result = get_last_result(conn)
    if result is None:
        print(export_summary.NO_RESULT)
        return
    print(evaluate_once.format_report(result))


def _cmd_export(args: argparse.Namespace) -> None:
    export_summary.run(data_dir=args.data_dir, out_dir=args.out_dir, fmt=args.format)


def _cmd_wipe(args: argparse.Namespace) -> None:
    conn = connect(Path(args.data_dir))
    init_schema(conn)
    wipe(conn)
    print("Cleared all local exit window data")


def _values(enum_cls) -> list:
    return [e.value for e in enum_cls]


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(prog="exitwindow")
    p.add_argument("--data-dir", default=evaluate_once.default_data_dir())
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init-db", help="Initialize local sqlite database")
    p_init.set_defaults(func=_cmd_init_db)

    p_load = sub.add_parser("load-constraints", help="Validate a constraints yaml file and store it")
    p_load.add_argument("--config", default=evaluate_once.DEFAULT_CONFIG)
    p_load.set_defaults(func=_cmd_load_constraints)

    p_eval = sub.add_parser("evaluate", help="Evaluate stored constraints and keep the result")
    p_eval.add_argument("--config", default=None, help="Load and store this yaml file first")
    p_eval.set_defaults(func=_cmd_evaluate)

    p_show = sub.add_parser("show", help="Print the last stored evaluation")
    p_show.set_defaults(func=_cmd_show)

    p_exp = sub.add_parser("export", help="Write a plain-text summary or a JSON dump")
    p_exp.add_argument("--out-dir", default="exports")
    p_exp.add_argument("--format", choices=["text", "json"], default="text")
    p_exp.set_defaults(func=_cmd_export)

    p_wipe = sub.add_parser("wipe", help="Delete every stored record")
    p_wipe.set_defaults(func=_cmd_wipe)

    # snapshots
    p_snap = sub.add_parser("snapshot", help="Readiness snapshots")
    snap = p_snap.add_subparsers(dest="action", required=True)
    s_add = snap.add_parser("add")
    s_add.add_argument("summary")
    s_add.add_argument("--label")
    s_add.add_argument("--known-blockers", default="", help="';'-separated")
    s_add.add_argument("--unknowns", default="", help="';'-separated")
    s_add.add_argument("--notes", default="")
    s_add.add_argument("--from-last", action="store_true", help="Include blockers from the last evaluation")
    s_add.set_defaults(func=records.snapshot_add)
    snap.add_parser("list").set_defaults(func=records.snapshot_list)
    snap.add_parser("latest").set_defaults(func=records.snapshot_latest)

    # notes
    p_note = sub.add_parser("note", help="Notes scoped to a constraint, snapshot or blocker")
    note = p_note.add_subparsers(dest="action", required=True)
    n_add = note.add_parser("add")
    n_add.add_argument("context", choices=_values(NoteContext))
    n_add.add_argument("context_id")
    n_add.add_argument("text")
    n_add.set_defaults(func=records.note_add)
    n_list = note.add_parser("list")
    n_list.add_argument("--context", choices=_values(NoteContext))
    n_list.add_argument("--context-id")
    n_list.set_defaults(func=records.note_list)
    n_rm = note.add_parser("remove")
    n_rm.add_argument("id")
    n_rm.set_defaults(func=records.note_remove)

    # risk boundaries
    p_bound = sub.add_parser("boundary", help="Risk boundaries")
    bound = p_bound.add_subparsers(dest="action", required=True)
    b_add = bound.add_parser("add")
    b_add.add_argument("category", choices=_values(RiskBoundaryCategory))
    b_add.add_argument("description")
    b_add.set_defaults(func=records.boundary_add)
    bound.add_parser("list").set_defaults(func=records.boundary_list)
    b_rm = bound.add_parser("remove")
    b_rm.add_argument("id")
    b_rm.set_defaults(func=records.boundary_remove)

    # change log
    p_chg = sub.add_parser("change", help="Constraint change log")
    chg = p_chg.add_subparsers(dest="action", required=True)
    c_add = chg.add_parser("add")
    c_add.add_argument("kind", choices=_values(ChangeKind))
    c_add.add_argument("title")
    c_add.add_argument("description")
    c_add.add_argument("--related")
    c_add.set_defaults(func=records.change_add)
    c_list = chg.add_parser("list")
    c_list.add_argument("--unreviewed", action="store_true")
    c_list.set_defaults(func=records.change_list)
    c_rev = chg.add_parser("review")
    c_rev.add_argument("--at", default=None)
    c_rev.set_defaults(func=records.change_review)

    # stability
    p_stab = sub.add_parser("stability", help="Stability mode and focuses")
    stab = p_stab.add_subparsers(dest="action", required=True)
    stab.add_parser("on").set_defaults(func=records.stability_on)
    stab.add_parser("off").set_defaults(func=records.stability_off)
    st_stmt = stab.add_parser("statement")
    st_stmt.add_argument("text")
    st_stmt.set_defaults(func=records.stability_statement)
    st_add = stab.add_parser("add")
    st_add.add_argument("label")
    st_add.add_argument("must_remain_stable")
    st_add.add_argument("--status", choices=_values(FocusStatus), default=FocusStatus.STABLE.value)
    st_add.add_argument("--note")
    st_add.set_defaults(func=records.stability_add)
    st_upd = stab.add_parser("update")
    st_upd.add_argument("id")
    st_upd.add_argument("--status", choices=_values(FocusStatus))
    st_upd.add_argument("--note")
    st_upd.add_argument("--label")
    st_upd.add_argument("--must-remain-stable")
    st_upd.set_defaults(func=records.stability_update)
    st_rm = stab.add_parser("remove")
    st_rm.add_argument("id")
    st_rm.set_defaults(func=records.stability_remove)
    stab.add_parser("list").set_defaults(func=records.stability_list)

    args = p.parse_args(argv)
    try:
        args.func(args)
    except ValidationError as e:
        print(f"Invalid constraints: {e.error_count()} error(s)")
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            print(f"  {loc}: {err['msg']}")
        raise SystemExit(1)
    except (ValueError, FileNotFoundError) as e:
        print(f"error: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
