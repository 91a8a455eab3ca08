# signature_checker/cli.py
from __future__ import annotations
import argparse, sys
from datetime import datetime

from .console import Console, DebugLevel
from .errors import SignatureCheckError
from .manifest import FORMATS, load_manifest, save_manifest
from .options import CheckOptions
from .reconcile import reconcile
from .report import report
from .scanner import scan_folder

EXIT_SUCCESS = 0
EXIT_ERROR = 1


def _debug_level(text: str) -> DebugLevel:
    try:
        return DebugLevel.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _positive_int(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n


def compare(opts: CheckOptions, console: Console) -> int:
    """Load, scan, reconcile and report. Returns the process exit code."""
    console.message(f"Starting comparison at {datetime.now():%Y-%m-%d %H:%M:%S}")
    if opts.debug_level != DebugLevel.NONE:
        console.info(f"Debug level set to {opts.debug_level.name.title()}")
    console.verbose(f"Options: {opts}")

    try:
        manifest = load_manifest(opts.manifest, console)
        folder = scan_folder(opts.folder, console, workers=opts.threads,
                             match=opts.match, progress=opts.progress)
    except SignatureCheckError as e:
        console.error(str(e))
        rc = EXIT_ERROR
    else:
        result = reconcile(manifest, folder)
        report(result, console, sort=opts.sort)
        rc = EXIT_SUCCESS if result.passed else EXIT_ERROR

    console.message(f"Comparison completed at {datetime.now():%Y-%m-%d %H:%M:%S}")
    return rc


def _cmd_check(args: argparse.Namespace) -> int:
    opts = CheckOptions.from_args(args)
    return compare(opts, Console(opts.debug_level))


def _cmd_generate(args: argparse.Namespace) -> int:
    opts = CheckOptions.from_args(args)
    # keep stdout clean for the manifest itself
    console = Console(opts.debug_level, out=sys.stderr)
    console.verbose(f"Options: {opts}")
    try:
        sigs = scan_folder(opts.folder, console, workers=opts.threads,
                           match=opts.match, progress=opts.progress)
    except SignatureCheckError as e:
        console.error(str(e))
        return EXIT_ERROR

    try:
        save_manifest(sigs, args.output or None, fmt=args.format)
    except SignatureCheckError as e:
        console.error(str(e))
        return EXIT_ERROR
    if args.output:
        console.message(f"Wrote {len(sigs)} signature(s) to {args.output}")
    return EXIT_SUCCESS


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("-p", "--path", required=True,
                   help="Folder whose files are hashed (non-recursive)")
    p.add_argument("-d", "--debug", type=_debug_level, default=DebugLevel.NONE,
                   metavar="LEVEL",
                   help="Logging level: none, warning, information, debug, verbose")
    p.add_argument("--threads", type=_positive_int,
                   help="Hashing worker threads (default: auto, or $SIGCHECK_THREADS)")
    p.add_argument("--match", type=str,
                   help="Only consider files whose name matches this regex")
    p.add_argument("--no-progress", action="store_true", help="Hide the hashing progress bar")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="signature-checker",
        description="Compare a list of file signatures to the contents of a folder "
                    "to identify any changed, missing, or extra files.",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("check", help="Verify a folder against a manifest")
    c.add_argument("-f", "--file", required=True,
                   help="Manifest of file signatures (JSON, or XML list of FileSignature)")
    _add_common(c)
    c.add_argument("--sort", action="store_true",
                   help="List each section by name, size and hash instead of manifest/folder order")
    c.set_defaults(func=_cmd_check)

    g = sub.add_parser("generate", help="Write a manifest for the files in a folder")
    _add_common(g)
    g.add_argument("-o", "--output", type=str, help="Manifest file to write (default: stdout)")
    g.add_argument("--format", choices=FORMATS, default="json", help="Manifest format")
    g.set_defaults(func=_cmd_generate)

    return p


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except SignatureCheckError as e:
        # settings read before a command reports its own errors
        Console().error(str(e))
        return EXIT_ERROR
