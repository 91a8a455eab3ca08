# signature_checker/report.py
from __future__ import annotations
from typing import Sequence

from .console import Console
from .reconcile import ReconcileResult
from .signature import Signature, sort_signatures

SECTIONS = (
    ("matching", "Matching Files"),
    ("changed", "Changed Files"),
    ("missing", "Missing Files"),
    ("extra", "Extra Files"),
)


def format_columns(sigs: Sequence[Signature], heading: str) -> list[str]:
    """Render one section: centered heading, column titles, rule, rows."""
    name_w = max([len("Name")] + [len(s.name) for s in sigs])
    size_w = max([len("Size")] + [len(str(s.length)) for s in sigs])
    hash_w = max([len("Hash")] + [len(s.digest) for s in sigs])

    line_w = name_w + size_w + hash_w + 2
    lines = ["", heading.rjust((line_w + len(heading)) // 2)]
    lines.append(f"{'Name'.ljust(name_w)} {'Size'.ljust(size_w)} Hash")
    lines.append(f"{'=' * name_w} {'=' * size_w} {'=' * hash_w}")
    for s in sigs:
        lines.append(f"{s.name.ljust(name_w)} {str(s.length).rjust(size_w)} {s.digest}")
    return lines


def format_summary(result: ReconcileResult) -> str:
    c = result.counts()
    return (f"File summary - Matching: {c['matching']} Changed: {c['changed']} "
            f"Extra: {c['extra']} Missing: {c['missing']}")


def render(result: ReconcileResult, sort: bool = False) -> list[str]:
    """Sections keep reconciliation order unless ``sort`` asks for name/size/hash order."""
    lines: list[str] = []
    for attr, heading in SECTIONS:
        sigs = getattr(result, attr)
        if sigs:
            if sort:
                sigs = sort_signatures(sigs)
            lines.extend(format_columns(sigs, heading))
    lines.append("")
    lines.append(format_summary(result))
    return lines


def report(result: ReconcileResult, console: Console, sort: bool = False) -> None:
    for line in render(result, sort=sort):
        console.message(line)
    console.info(f"Status: {result.status.value}")
