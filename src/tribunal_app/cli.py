"""
Command-line interface for the TFG committee scheduler.

Usage examples:
    python -m tribunal_app.cli --reference --mode optimize
    python -m tribunal_app.cli --config data/reference.json --mode feasibility
    python -m tribunal_app.cli --config data/reference.json --mode optimize \
        --max-per-slot 1 --out result.json

Exit codes:
    0  schedule produced (OPTIMAL or FEASIBLE)
    1  bad arguments, unreadable instance, or precheck found blocking errors
    2  solver proved the instance INFEASIBLE (or rejected the model)
    3  no schedule found within the search budget (UNKNOWN)
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from typing import List, Optional

from tribunal_app.io_json import ConfigError, load_instance
from tribunal_app.models import Instance
from tribunal_app.reference_data import reference_instance
from tribunal_app.report import render_report
from tribunal_app.solver.api import MODES, solve
from tribunal_app.solver.precheck import precheck

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tribunal-cli",
        description="TFG examining-committee scheduler — command-line mode",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  tribunal-cli --reference --mode optimize\n"
            "  tribunal-cli --config data/reference.json --mode feasibility --out result.json\n"
        ),
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--config", metavar="FILE",
                        help="path to the instance JSON")
    source.add_argument("--reference", action="store_true",
                        help="use the built-in 7-professor reference instance")
    parser.add_argument(
        "--mode",
        required=True,
        choices=list(MODES),
        help=(
            "feasibility = first schedule found by a fixed search order, "
            "penalty not minimised; "
            "optimize = minimise the reciprocity penalty"
        ),
    )
    parser.add_argument("--time-limit",   type=float, default=None, metavar="SECONDS",
                        help="search budget (overrides solver.max_time_in_seconds)")
    parser.add_argument("--workers",      type=int,   default=None,
                        help="CP-SAT workers for optimize mode (0 = all cores)")
    parser.add_argument("--seed",         type=int,   default=None,
                        help="CP-SAT random seed")
    parser.add_argument("--max-tribunals", type=int,  default=None,
                        help="override limits.max_tribunals_per_professor")
    parser.add_argument("--max-per-slot",  type=int,  default=None,
                        help="override limits.max_defenses_per_slot")
    parser.add_argument("--out", default=None, metavar="FILE",
                        help="write result JSON to this path (optional)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log solver progress (-vv for debug output)")
    return parser


def apply_overrides(inst: Instance, args: argparse.Namespace) -> Instance:
    limits = inst.limits
    if args.max_tribunals is not None:
        limits = dataclasses.replace(limits, max_tribunals_per_professor=args.max_tribunals)
    if args.max_per_slot is not None:
        limits = dataclasses.replace(limits, max_defenses_per_slot=args.max_per_slot)

    params = inst.solver
    if args.time_limit is not None:
        params = dataclasses.replace(params, max_time_in_seconds=args.time_limit)
    if args.workers is not None:
        params = dataclasses.replace(params, num_workers=args.workers)
    if args.seed is not None:
        params = dataclasses.replace(params, random_seed=args.seed)

    return dataclasses.replace(inst, limits=limits, solver=params)


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # ── 1. load instance ─────────────────────────────────────────────────────
    if args.reference:
        inst = reference_instance()
    else:
        try:
            inst = load_instance(args.config)
        except FileNotFoundError:
            print(f"[ERROR] File not found: {args.config}", file=sys.stderr)
            sys.exit(1)
        except (ConfigError, ValueError) as e:
            print(f"[ERROR] Could not load instance: {e}", file=sys.stderr)
            sys.exit(1)
    inst = apply_overrides(inst, args)

    # ── 2. precheck: malformed input stops here ──────────────────────────────
    errors, warnings = precheck(inst)
    for w in warnings:
        print(f"[WARNING] {w}")

    if errors:
        print(
            f"\n[ERROR] {len(errors)} precheck error(s) found — "
            "the instance is malformed:\n",
            file=sys.stderr,
        )
        for i, err in enumerate(errors, 1):
            print(f"  {i}. {err}", file=sys.stderr)
        sys.exit(1)

    # ── 3. solve ─────────────────────────────────────────────────────────────
    print(f"Running solver ({args.mode})…")
    result = solve(inst, args.mode, warnings)

    # ── 4. report ────────────────────────────────────────────────────────────
    print()
    print(render_report(inst, result))
    if result.stats:
        print()
        for k, v in result.stats.items():
            print(f"  {k}: {v}")
    for d in result.diagnostics:
        print(f"[DIAG] {d}")

    # ── 5. write output file (optional) ──────────────────────────────────────
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
        print(f"\nResult written to: {args.out}")

    if result.solved:
        sys.exit(0)
    sys.exit(3 if result.status == "UNKNOWN" else 2)


if __name__ == "__main__":
    main()
