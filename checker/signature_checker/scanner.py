# signature_checker/scanner.py
from __future__ import annotations
import os, re
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor, as_completed
from tqdm import tqdm

from .console import Console, progress_settings
from .errors import ConfigError, Reason, ScanError
from .signature import Signature
from .system import optimal_threads


def list_files(folder: str | Path, match: str | re.Pattern[str] | None = None) -> list[Path]:
    """Regular files directly inside ``folder``, in name order.

    ``match`` keeps only names where the regex matches (re.search).
    """
    root = Path(folder)
    if not root.is_dir():
        raise ScanError(root, Reason.NOT_FOUND)
    pattern = re.compile(match) if isinstance(match, str) else match
    try:
        with os.scandir(root) as it:
            names = [e.name for e in it if e.is_file()]
    except OSError as e:
        raise ScanError(root, Reason.IO_ERROR, e.strerror or str(e)) from e
    names.sort()
    if pattern is not None:
        names = [n for n in names if pattern.search(n)]
    return [root / n for n in names]


def hash_files(files: list[Path], workers: int = 1, progress: bool = True) -> list[Signature]:
    """Compute signatures for ``files``; the result keeps the input order.

    The first HashError stops the run and propagates.
    """
    total = len(files)
    results: list[Signature | None] = [None] * total
    stream, disable = progress_settings(progress)

    with tqdm(total=total, desc="Hashing files", unit="file", file=stream, disable=disable) as bar:
        if workers <= 1 or total <= 1:
            for i, f in enumerate(files):
                results[i] = Signature.from_file(f)
                bar.update(1)
        else:
            with ThreadPoolExecutor(max_workers=workers) as ex:
                futs = {ex.submit(Signature.from_file, f): i for i, f in enumerate(files)}
                try:
                    for fut in as_completed(futs):
                        results[futs[fut]] = fut.result()
                        bar.update(1)
                except BaseException:
                    for fut in futs:
                        fut.cancel()
                    raise
    return [s for s in results if s is not None]


def scan_folder(folder: str | Path, console: Console | None = None, workers: int | None = None,
                match: str | None = None, progress: bool = True) -> list[Signature]:
    """List a folder (non-recursive) and return one Signature per regular file.

    Raises ScanError when the folder is absent or unreadable, HashError when
    a file cannot be read.
    """
    console = console or Console()
    root = Path(folder)
    console.debug(f"Getting file signatures from folder {root}")
    if match is not None:
        try:
            pattern = re.compile(match)
        except re.error as e:
            raise ConfigError("--match", f"invalid pattern {match!r}: {e}") from e
    else:
        pattern = None

    files = list_files(root, pattern)
    threads = workers or optimal_threads()
    console.debug(f"Hashing {len(files)} file(s) with {threads} worker(s)")
    sigs = hash_files(files, workers=threads, progress=progress)

    console.verbose(f"File signatures read from folder {root}")
    for s in sigs:
        console.verbose(f"  {s}")
    console.debug(f"Returning {len(sigs)} signatures from folder {root}")
    return sigs
