# signature_checker/manifest.py
from __future__ import annotations
import json, os, sys
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable

from .console import Console
from .errors import LoadError, Reason, SaveError
from .hashing import ALGORITHM
from .signature import Signature

MANIFEST_VERSION = 1
FORMATS = ("json", "xml")

# element names used by the original XML-serialized List<FileSignature>
_XML_ROOT = "ArrayOfFileSignature"
_XML_ITEM = "FileSignature"
_XML_FIELDS = {"FileName": "name", "Length": "length", "Hash": "digest"}


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_json(raw: str) -> list[Signature]:
    data = json.loads(raw)
    if isinstance(data, dict):
        algo = data.get("algorithm", ALGORITHM)
        if algo != ALGORITHM:
            raise ValueError(f"unsupported digest algorithm {algo!r}")
        if "files" not in data:
            raise ValueError("manifest object has no 'files' list")
        data = data["files"]
    if not isinstance(data, list):
        raise ValueError("manifest must be a list of signature records")
    return [Signature.from_record(rec) for rec in data]


def parse_xml(raw: str) -> list[Signature]:
    root = ET.fromstring(raw)
    if _local(root.tag) != _XML_ROOT:
        raise ValueError(f"unexpected XML root <{_local(root.tag)}>")
    sigs: list[Signature] = []
    for item in root:
        if _local(item.tag) != _XML_ITEM:
            raise ValueError(f"unexpected XML element <{_local(item.tag)}>")
        rec: dict[str, str] = {}
        for field in item:
            key = _XML_FIELDS.get(_local(field.tag))
            if key:
                rec[key] = field.text or ""
        sigs.append(Signature.from_record(rec))
    return sigs


def parse_manifest(raw: str) -> list[Signature]:
    """Parse manifest text; the format is sniffed from the first character."""
    text = raw.lstrip("\ufeff \t\r\n")
    if text.startswith(("{", "[")):
        return parse_json(text)
    if text.startswith("<"):
        return parse_xml(text)
    raise ValueError("unrecognized manifest format (expected JSON or XML)")


def load_manifest(path: str | Path, console: Console | None = None) -> list[Signature]:
    """Read a manifest file into an ordered list of signatures.

    Raises LoadError with NOT_FOUND, MALFORMED or IO_ERROR.
    """
    console = console or Console()
    p = Path(path)
    console.debug(f"Getting manifest file {p}")
    if not p.is_file():
        raise LoadError(p, Reason.NOT_FOUND)
    try:
        raw = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise LoadError(p, Reason.MALFORMED, str(e)) from e
    except OSError as e:
        raise LoadError(p, Reason.IO_ERROR, e.strerror or str(e)) from e

    try:
        sigs = parse_manifest(raw)
    except (ValueError, RecursionError, ET.ParseError) as e:
        # RecursionError: nesting deeper than the JSON decoder can follow
        raise LoadError(p, Reason.MALFORMED, str(e)) from e

    console.verbose(f"Signatures read from file {p}")
    for s in sigs:
        console.verbose(f"  {s}")
    console.debug(f"Returning {len(sigs)} signatures from manifest file")
    return sigs


def dump_json(sigs: Iterable[Signature]) -> str:
    data = {
        "version": MANIFEST_VERSION,
        "algorithm": ALGORITHM,
        "files": [s.to_record() for s in sigs],
    }
    return json.dumps(data, indent=2) + "\n"


def dump_xml(sigs: Iterable[Signature]) -> str:
    """XML text in the original ArrayOfFileSignature layout.

    Raises ValueError for a name that is not valid UTF-8 (a surrogate-escaped
    name from the filesystem); JSON escapes those names and keeps them.
    """
    root = ET.Element(_XML_ROOT)
    for s in sigs:
        try:
            s.name.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError(f"file name {s.name!r} is not valid UTF-8 and cannot be stored in XML "
                             "(use the json format)") from None
        item = ET.SubElement(root, _XML_ITEM)
        ET.SubElement(item, "FileName").text = s.name
        ET.SubElement(item, "Length").text = str(s.length)
        ET.SubElement(item, "Hash").text = s.digest
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="utf-8"?>\n' + body + "\n"


def dump_manifest(sigs: Iterable[Signature], fmt: str = "json") -> str:
    if fmt == "json":
        return dump_json(sigs)
    if fmt == "xml":
        return dump_xml(sigs)
    raise ValueError(f"unknown manifest format {fmt!r}")


def save_manifest(sigs: Iterable[Signature], out_path: str | Path | None, fmt: str = "json") -> None:
    """Write a manifest to ``out_path``, or to stdout when it is None.

    The file is written to a temporary sibling and moved into place, so a
    failed write never leaves a truncated manifest. Raises SaveError.
    """
    where = "<stdout>" if out_path is None else out_path
    try:
        text = dump_manifest(sigs, fmt)
    except ValueError as e:
        raise SaveError(where, str(e)) from e

    if out_path is None:
        sys.stdout.write(text)
        return

    p = Path(out_path)
    tmp = p.with_name(p.name + ".tmp")
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, p)
    except OSError as e:
        if tmp.exists():
            tmp.unlink()
        raise SaveError(p, e.strerror or str(e)) from e
