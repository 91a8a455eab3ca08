# signature_checker/errors.py
from __future__ import annotations
from enum import Enum
from pathlib import Path


class Reason(str, Enum):
    NOT_FOUND = "not found"
    MALFORMED = "malformed"
    IO_ERROR = "I/O error"


class SignatureCheckError(Exception):
    """Base for every error that aborts a comparison run."""

    def __init__(self, path: str | Path, detail: str = ""):
        self.path = str(path)
        self.detail = detail
        super().__init__(self._message())

    def _message(self) -> str:
        return f"{self.path}: {self.detail}" if self.detail else self.path


class LoadError(SignatureCheckError):
    """Manifest could not be loaded."""

    def __init__(self, path: str | Path, reason: Reason, detail: str = ""):
        self.reason = reason
        super().__init__(path, detail)

    def _message(self) -> str:
        msg = f"Manifest {self.path} {self.reason.value}"
        return f"{msg}: {self.detail}" if self.detail else msg


class ScanError(SignatureCheckError):
    """Folder could not be listed."""

    def __init__(self, path: str | Path, reason: Reason, detail: str = ""):
        self.reason = reason
        super().__init__(path, detail)

    def _message(self) -> str:
        msg = f"Folder {self.path} {self.reason.value}"
        return f"{msg}: {self.detail}" if self.detail else msg


class HashError(SignatureCheckError):
    """A file could not be read while computing its digest."""

    def _message(self) -> str:
        msg = f"Cannot hash {self.path}"
        return f"{msg}: {self.detail}" if self.detail else msg


class SaveError(SignatureCheckError):
    """Manifest could not be written."""

    def _message(self) -> str:
        msg = f"Cannot write manifest {self.path}"
        return f"{msg}: {self.detail}" if self.detail else msg


class ConfigError(SignatureCheckError):
    """A setting (command-line option or environment variable) is invalid."""
