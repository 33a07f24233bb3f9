"""
Plain-text rendering of a SolveResult: schedule, load per professor,
defenses per slot and the reciprocity penalty. Reads the result only.
"""

from __future__ import annotations

from typing import List

from tribunal_app.models import Instance
from tribunal_app.solver.result import SolveResult


def render_report(inst: Instance, result: SolveResult) -> str:
    if result.status == "INFEASIBLE":
        return "No schedule satisfies all the constraints."
    if result.status == "UNKNOWN":
        return (
            "No schedule found within the search budget "
            "(the instance was not proven infeasible)."
        )
    if not result.solved:
        return f"No schedule produced (status {result.status})."

    name  = inst.professor_name
    width = max((len(p.name) for p in inst.professors), default=0)
    lines: List[str] = [f"Schedule found ({result.status}, {result.mode} search):", ""]

    for e in sorted(result.entries, key=lambda e: e.defense_id):
        lines.append(
            f"TFG {e.defense_id}: Tutor = {name(e.tutor_id):<{width}} | "
            f"Tribunal = ({name(e.examiner_a):<{width}}, {name(e.examiner_b):<{width}}) | "
            f"Slot = {e.slot}"
        )

    lines += ["", "Load per professor:"]
    for p in inst.professor_ids:
        lines.append(f"  {name(p):<{width}} -> {result.loads.get(p, 0)} tribunals")

    lines += ["", "Defenses per slot:"]
    for s in inst.slot_ids:
        lines.append(f"  Slot {s} -> {result.slot_counts.get(s, 0)} defenses")

    lines += ["", f"Reciprocity penalty: {result.total_penalty}"]
    for a, b in result.penalties:
        lines.append(f"  {name(a)} judges {name(b)}'s students, not the other way round")
    return "\n".join(lines)
