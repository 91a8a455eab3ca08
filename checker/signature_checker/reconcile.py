# signature_checker/reconcile.py
"""
Four-way reconciliation of a manifest against a folder scan.

matching / changed / missing are decided per manifest entry and keep manifest
order; extra is decided per folder entry and keeps folder order. Names are the
join key except for matching, which needs all three fields equal.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .signature import Signature, same_content


class Status(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"


@dataclass(frozen=True)
class ReconcileResult:
    matching: tuple[Signature, ...]
    changed: tuple[Signature, ...]
    missing: tuple[Signature, ...]
    extra: tuple[Signature, ...]

    @property
    def status(self) -> Status:
        if self.changed or self.missing or self.extra:
            return Status.FAIL
        return Status.PASS

    @property
    def passed(self) -> bool:
        return self.status is Status.PASS

    def counts(self) -> dict[str, int]:
        return {
            "matching": len(self.matching),
            "changed": len(self.changed),
            "missing": len(self.missing),
            "extra": len(self.extra),
        }


def _by_name(sigs: Sequence[Signature]) -> dict[str, list[Signature]]:
    index: dict[str, list[Signature]] = {}
    for s in sigs:
        index.setdefault(s.name, []).append(s)
    return index


def reconcile(manifest: Sequence[Signature], folder: Sequence[Signature]) -> ReconcileResult:
    if manifest is None or folder is None:
        raise TypeError("reconcile() needs both signature sequences")

    folder_by_name = _by_name(folder)
    manifest_names = {s.name for s in manifest}

    matching: list[Signature] = []
    changed: list[Signature] = []
    missing: list[Signature] = []
    matched_by_name: dict[str, list[Signature]] = {}

    for m in manifest:
        same_named = folder_by_name.get(m.name)
        if not same_named:
            missing.append(m)
            continue
        already = matched_by_name.setdefault(m.name, [])
        if any(same_content(f, m) for f in same_named) and not any(same_content(s, m) for s in already):
            already.append(m)
            matching.append(m)
        # any differing same-named entry counts, even if another one matches
        if any(not same_content(f, m) for f in same_named):
            changed.append(m)

    extra = [f for f in folder if f.name not in manifest_names]

    return ReconcileResult(tuple(matching), tuple(changed), tuple(missing), tuple(extra))
