# signature_checker/hashing.py
from __future__ import annotations
import hashlib
from pathlib import Path

from .errors import HashError

CHUNK_SIZE = 1024 * 1024
ALGORITHM = "sha256"


def hash_file(p: str | Path, chunk_size: int = CHUNK_SIZE) -> str:
    """Stream a file through SHA-256 and return the lowercase hex digest."""
    p = Path(p)
    h = hashlib.sha256()
    try:
        with p.open("rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                h.update(chunk)
    except OSError as e:
        raise HashError(p, e.strerror or str(e)) from e
    return h.hexdigest()
