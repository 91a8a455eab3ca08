# signature_checker/system.py
from __future__ import annotations
import os
import psutil

from .errors import ConfigError


def optimal_threads(cap: int = 8) -> int:
    # hashing is I/O bound: one worker per physical core, 256 MB of RAM each
    cores = max(psutil.cpu_count(logical=False) or psutil.cpu_count() or 1, 1)
    ram_mb = psutil.virtual_memory().available / (1024**2)
    by_ram = max(1, int(ram_mb / 256))
    return max(1, min(by_ram, cores, cap))


def threads_from_env(default: int | None = None) -> int | None:
    raw = os.environ.get("SIGCHECK_THREADS")
    if not raw:
        return default
    try:
        n = int(raw)
    except ValueError:
        raise ConfigError("SIGCHECK_THREADS", f"must be an integer, got {raw!r}") from None
    if n < 1:
        raise ConfigError("SIGCHECK_THREADS", f"must be >= 1, got {n}")
    return n
