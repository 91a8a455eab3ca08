# signature_checker/signature.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Iterable, Mapping
from typing import Any

from .errors import HashError
from .hashing import hash_file

RECORD_FIELDS = ("name", "length", "digest")


@dataclass(frozen=True)
class Signature:
    """Identity of one file by content: base name, byte count, hex digest.

    Equality (and hashing) covers all three fields. Ordering is
    not defined on the type; use ``signature_sort_key`` for presentation.
    """
    name: str
    length: int
    digest: str

    @staticmethod
    def from_file(path: str | Path) -> "Signature":
        p = Path(path)
        try:
            length = p.stat().st_size
        except OSError as e:
            raise HashError(p, e.strerror or str(e)) from e
        return Signature(p.name, length, hash_file(p))

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> "Signature":
        """Build a signature verbatim from a persisted record.

        Raises ValueError when a field is absent or has the wrong shape. The
        digest is only required to be non-empty.
        """
        if not isinstance(record, Mapping):
            raise ValueError(f"record must be a mapping, got {type(record).__name__}")
        missing = [k for k in RECORD_FIELDS if k not in record or record[k] is None]
        if missing:
            raise ValueError(f"record missing field(s): {', '.join(missing)}")

        name, length, digest = record["name"], record["length"], record["digest"]
        if not isinstance(name, str) or not name:
            raise ValueError("record 'name' must be a non-empty string")
        if not isinstance(digest, str) or not digest:
            raise ValueError(f"record {name!r}: 'digest' must be a non-empty string")
        if isinstance(length, bool):
            raise ValueError(f"record {name!r}: 'length' must be an integer")
        if isinstance(length, str):
            if not length.strip().isdigit():
                raise ValueError(f"record {name!r}: 'length' is not a number: {length!r}")
            length = int(length.strip())
        if not isinstance(length, int) or length < 0:
            raise ValueError(f"record {name!r}: 'length' must be a non-negative integer")
        return Signature(name, length, digest)

    def to_record(self) -> dict[str, Any]:
        return {"name": self.name, "length": self.length, "digest": self.digest}

    def __str__(self) -> str:
        return f"Name: {self.name}, Length: {self.length}, Hash: {self.digest}"


def same_content(a: Signature, b: Signature) -> bool:
    return a.name == b.name and a.length == b.length and a.digest == b.digest


def signature_sort_key(sig: Signature) -> tuple[str, int, str]:
    """name, then length, then digest."""
    return (sig.name, sig.length, sig.digest)


def sort_signatures(sigs: Iterable[Signature]) -> list[Signature]:
    return sorted(sigs, key=signature_sort_key)
