# signature_checker/console.py
from __future__ import annotations
import io, os, sys
from enum import IntEnum

from tqdm import tqdm


class DebugLevel(IntEnum):
    """Verbosity levels, from quiet to chatty."""
    NONE = 0
    WARNING = 1
    INFORMATION = 2
    DEBUG = 3
    VERBOSE = 4

    @classmethod
    def parse(cls, text: str) -> "DebugLevel":
        key = text.strip().upper()
        aliases = {"INFO": "INFORMATION", "WARN": "WARNING", "OFF": "NONE"}
        key = aliases.get(key, key)
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(m.name.lower() for m in cls)
            raise ValueError(f"unknown debug level {text!r} (choose from {choices})") from None


def _write(msg: str, stream) -> None:
    """Write through tqdm so an active progress bar is not torn."""
    if stream is None:
        return
    try:
        tqdm.write(msg, file=stream)
    except UnicodeEncodeError:
        # names that are not valid UTF-8 arrive surrogate-escaped from os.scandir
        enc = getattr(stream, "encoding", None) or "utf-8"
        tqdm.write(msg.encode(enc, "backslashreplace").decode(enc), file=stream)


class Console:
    """Console output with its own verbosity level.

    ``message`` and ``error`` always print; the rest are filtered by level.
    """

    def __init__(self, level: DebugLevel = DebugLevel.NONE, out=None, err=None):
        self.level = level
        self._out = out
        self._err = err

    @property
    def out(self):
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self):
        return self._err if self._err is not None else getattr(sys, "stderr", None)

    def enabled(self, level: DebugLevel) -> bool:
        return level != DebugLevel.NONE and self.level >= level

    def message(self, msg: str = "") -> None:
        _write(msg, self.out)

    def error(self, msg: str) -> None:
        _write(f"ERROR: {msg}", self.err)

    def warning(self, msg: str) -> None:
        if self.enabled(DebugLevel.WARNING):
            _write(f"[WRN] {msg}", self.err)

    def info(self, msg: str) -> None:
        if self.enabled(DebugLevel.INFORMATION):
            _write(f"[INF] {msg}", self.err)

    def debug(self, msg: str) -> None:
        if self.enabled(DebugLevel.DEBUG):
            _write(f"[DBG] {msg}", self.err)

    def verbose(self, msg: str) -> None:
        if self.enabled(DebugLevel.VERBOSE):
            _write(f"[VRB] {msg}", self.err)


def progress_settings(requested: bool = True):
    """
    Where the hashing progress bar writes, and whether it stays hidden.

    The bar goes to stderr and shows only when stderr is a terminal and the
    caller asked for it. Without a usable stderr it writes to a sink.
    Env override: SIGCHECK_TQDM=0 forces enable, =1 forces disable.
    """
    f = getattr(sys, "stderr", None)
    usable = f is not None and hasattr(f, "write")
    stream = f if usable else io.StringIO()

    env = os.environ.get("SIGCHECK_TQDM")
    if env == "0":
        return stream, False
    if env == "1":
        return stream, True
    isatty = getattr(f, "isatty", None) if usable else None
    return stream, not (requested and isatty and isatty())
