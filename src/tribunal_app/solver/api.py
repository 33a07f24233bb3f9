from __future__ import annotations

import logging
from typing import List, Optional

from tribunal_app.models import Instance
from tribunal_app.solver.driver import solve_feasibility, solve_optimize
from tribunal_app.solver.precheck import ensure_ok
from tribunal_app.solver.result import SolveResult

logger = logging.getLogger(__name__)

MODES = ("feasibility", "optimize")


def solve(inst: Instance, mode: str, warnings: Optional[List[str]] = None) -> SolveResult:
    """Solve in the given mode. There is no default: the caller must choose.

    Pass the warnings of an earlier precheck(inst) with no errors to skip
    running it again.
    """
    mode = (mode or "").lower()
    if mode in ("feasibility", "first", "feasible"):
        runner = solve_feasibility
    elif mode in ("optimize", "optimise", "min"):
        runner = solve_optimize
    else:
        raise ValueError(f"Unknown solve mode: {mode!r} (expected one of {MODES})")

    if warnings is None:
        warnings = ensure_ok(inst)
    # Warnings travel in result.diagnostics; callers decide how loudly to show them.
    for w in warnings:
        logger.info("Precheck warning: %s", w)
    return runner(inst, warnings)
