# signature_checker/options.py
from __future__ import annotations
import argparse

from .console import DebugLevel
from .system import threads_from_env


class CheckOptions:
    def __init__(
        self,
        manifest: str,
        folder: str,
        debug_level: DebugLevel = DebugLevel.NONE,
        threads: int | None = None,
        match: str | None = None,
        progress: bool = True,
        sort: bool = False,
    ):
        self.manifest = manifest
        self.folder = folder
        self.debug_level = debug_level
        self.threads = threads
        self.match = match
        self.progress = progress
        self.sort = sort

    @staticmethod
    def from_args(args: argparse.Namespace) -> "CheckOptions":
        """Build options from parsed arguments; SIGCHECK_THREADS fills in --threads."""
        return CheckOptions(
            manifest=getattr(args, "file", "") or "",
            folder=args.path,
            debug_level=args.debug,
            threads=args.threads or threads_from_env(),
            match=args.match,
            progress=not args.no_progress,
            sort=getattr(args, "sort", False),
        )

    def __str__(self) -> str:
        return (f"SignatureFile: {self.manifest} FolderPath: {self.folder} "
                f"DebugLevel: {self.debug_level.name.title()} Threads: {self.threads or 'auto'} "
                f"Match: {self.match or '*'}")
