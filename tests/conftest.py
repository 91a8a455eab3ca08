from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from signature_checker.signature import Signature


@pytest.fixture(autouse=True)
def _quiet_progress(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIGCHECK_TQDM", "1")
    monkeypatch.delenv("SIGCHECK_THREADS", raising=False)


@pytest.fixture
def make_files(tmp_path: Path):
    """Write ``{name: bytes}`` into a fresh folder and return (folder, signatures)."""

    def _make(files: dict[str, bytes], folder: str = "site") -> tuple[Path, list[Signature]]:
        root = tmp_path / folder
        root.mkdir(parents=True, exist_ok=True)
        sigs = []
        for name in sorted(files):
            data = files[name]
            (root / name).write_bytes(data)
            sigs.append(Signature(name, len(data), hashlib.sha256(data).hexdigest()))
        return root, sigs

    return _make
