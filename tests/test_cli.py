from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest

from signature_checker.cli import EXIT_ERROR, EXIT_SUCCESS, build_parser
from signature_checker.console import DebugLevel
from signature_checker.main import main
from signature_checker.manifest import load_manifest, save_manifest
from signature_checker.signature import Signature


def _check(manifest: Path, folder: Path, *extra: str) -> int:
    return main(["check", "-f", str(manifest), "-p", str(folder), "--no-progress", *extra])


def test_matching_folder_exits_zero(make_files, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root, sigs = make_files({"a.txt": b"alpha", "b.txt": b"beta"})
    manifest = tmp_path / "manifest.json"
    save_manifest(sigs, manifest)

    rc = _check(manifest, root)

    out = capsys.readouterr().out
    assert rc == EXIT_SUCCESS
    assert "Starting comparison at" in out
    assert "Matching Files" in out
    assert "File summary - Matching: 2 Changed: 0 Extra: 0 Missing: 0" in out
    assert "Comparison completed at" in out


def test_drift_exits_one_and_lists_each_category(make_files, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root, sigs = make_files({"keep.txt": b"same", "edit.txt": b"before", "gone.txt": b"bye"})
    manifest = tmp_path / "manifest.json"
    save_manifest(sigs, manifest)
    (root / "edit.txt").write_bytes(b"after!")
    (root / "gone.txt").unlink()
    (root / "new.txt").write_bytes(b"hello")

    rc = _check(manifest, root, "--threads", "2")

    out = capsys.readouterr().out
    assert rc == EXIT_ERROR
    for heading in ("Matching Files", "Changed Files", "Missing Files", "Extra Files"):
        assert heading in out
    assert "File summary - Matching: 1 Changed: 1 Extra: 1 Missing: 1" in out


def test_missing_manifest_exits_one_without_comparing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    folder = tmp_path / "site"
    folder.mkdir()

    rc = _check(tmp_path / "absent.json", folder)

    captured = capsys.readouterr()
    assert rc == EXIT_ERROR
    assert "absent.json" in captured.err
    assert "not found" in captured.err
    assert "File summary" not in captured.out


def test_malformed_manifest_exits_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    manifest = tmp_path / "bad.json"
    manifest.write_text('[{"name": "a"}]', encoding="utf-8")
    folder = tmp_path / "site"
    folder.mkdir()

    rc = _check(manifest, folder)

    captured = capsys.readouterr()
    assert rc == EXIT_ERROR
    assert "malformed" in captured.err
    assert "File summary" not in captured.out


def test_missing_folder_exits_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    manifest = tmp_path / "manifest.json"
    save_manifest([], manifest)

    rc = _check(manifest, tmp_path / "nowhere")

    captured = capsys.readouterr()
    assert rc == EXIT_ERROR
    assert "nowhere" in captured.err
    assert "File summary" not in captured.out


def test_empty_manifest_and_empty_folder_pass(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    manifest = tmp_path / "manifest.json"
    save_manifest([], manifest)
    folder = tmp_path / "site"
    folder.mkdir()

    assert _check(manifest, folder) == EXIT_SUCCESS
    assert "Matching: 0 Changed: 0 Extra: 0 Missing: 0" in capsys.readouterr().out


def test_verbose_debug_level_logs_options_and_signatures(make_files, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root, sigs = make_files({"a.txt": b"alpha"})
    manifest = tmp_path / "manifest.json"
    save_manifest(sigs, manifest)

    rc = _check(manifest, root, "-d", "verbose")

    err = capsys.readouterr().err
    assert rc == EXIT_SUCCESS
    assert "Debug level set to Verbose" in err
    assert "Options: SignatureFile:" in err
    assert f"Name: a.txt, Length: 5, Hash: {sigs[0].digest}" in err


def test_invalid_match_pattern_exits_one(make_files, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root, sigs = make_files({"a.txt": b"alpha"})
    manifest = tmp_path / "manifest.json"
    save_manifest(sigs, manifest)

    assert _check(manifest, root, "--match", "[") == EXIT_ERROR
    assert "--match" in capsys.readouterr().err


def test_threads_from_environment(make_files, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root, sigs = make_files({"a.txt": b"alpha"})
    manifest = tmp_path / "manifest.json"
    save_manifest(sigs, manifest)

    monkeypatch.setenv("SIGCHECK_THREADS", "3")
    assert _check(manifest, root) == EXIT_SUCCESS

    monkeypatch.setenv("SIGCHECK_THREADS", "zero")
    assert _check(manifest, root) == EXIT_ERROR


def test_unknown_debug_level_is_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as info:
        main(["check", "-f", "m.json", "-p", str(tmp_path), "-d", "loud"])
    assert info.value.code == 2


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["check", "-f", "m.json", "-p", "site"])
    assert args.debug is DebugLevel.NONE
    assert args.threads is None
    assert args.match is None
    assert args.no_progress is False


def test_generate_to_file_then_check_passes(make_files, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root, sigs = make_files({"a.txt": b"alpha", "b.txt": b"beta"})
    manifest = tmp_path / "snap" / "manifest.xml"

    rc = main(["generate", "-p", str(root), "-o", str(manifest), "--format", "xml", "--no-progress"])

    assert rc == EXIT_SUCCESS
    assert load_manifest(manifest) == sigs
    assert "Wrote 2 signature(s)" in capsys.readouterr().err
    assert _check(manifest, root) == EXIT_SUCCESS


def test_generate_to_stdout_is_json(make_files, capsys: pytest.CaptureFixture[str]) -> None:
    root, sigs = make_files({"a.txt": b"alpha"})

    rc = main(["generate", "-p", str(root), "--no-progress"])

    data = json.loads(capsys.readouterr().out)
    assert rc == EXIT_SUCCESS
    assert [Signature.from_record(r) for r in data["files"]] == sigs


def test_generate_missing_folder_exits_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["generate", "-p", str(tmp_path / "missing"), "--no-progress"])
    assert rc == EXIT_ERROR
    assert "missing" in capsys.readouterr().err


non_utf8_names = pytest.mark.skipif(
    not sys.platform.startswith("linux"), reason="needs a filesystem that accepts arbitrary name bytes"
)


@non_utf8_names
def test_non_utf8_file_name_round_trips_through_json(make_files, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root, _ = make_files({"plain.txt": b"plain"})
    (root / os.fsdecode(b"\xff.txt")).write_bytes(b"odd")
    manifest = tmp_path / "manifest.json"

    assert main(["generate", "-p", str(root), "-o", str(manifest), "--no-progress"]) == EXIT_SUCCESS
    assert _check(manifest, root) == EXIT_SUCCESS
    assert "Matching: 2 Changed: 0 Extra: 0 Missing: 0" in capsys.readouterr().out


@non_utf8_names
def test_non_utf8_file_name_is_rejected_for_xml(make_files, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root, _ = make_files({"plain.txt": b"plain"})
    (root / os.fsdecode(b"\xff.txt")).write_bytes(b"odd")
    manifest = tmp_path / "manifest.xml"

    rc = main(["generate", "-p", str(root), "-o", str(manifest), "--format", "xml", "--no-progress"])

    err = capsys.readouterr().err
    assert rc == EXIT_ERROR
    assert "Cannot write manifest" in err
    assert "not valid UTF-8" in err
    assert not manifest.exists()


def test_bad_thread_setting_is_reported_by_name(make_files, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                                capsys: pytest.CaptureFixture[str]) -> None:
    root, sigs = make_files({"a.txt": b"alpha"})
    manifest = tmp_path / "manifest.json"
    save_manifest(sigs, manifest)
    monkeypatch.setenv("SIGCHECK_THREADS", "-2")

    assert _check(manifest, root) == EXIT_ERROR
    assert "SIGCHECK_THREADS" in capsys.readouterr().err


def test_deeply_nested_manifest_is_reported_not_raised(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    manifest = tmp_path / "deep.json"
    manifest.write_text("[" * 200000, encoding="utf-8")
    folder = tmp_path / "site"
    folder.mkdir()

    rc = _check(manifest, folder)

    captured = capsys.readouterr()
    assert rc == EXIT_ERROR
    assert "malformed" in captured.err
    assert "File summary" not in captured.out


def test_sort_lists_sections_by_name(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    folder = tmp_path / "site"
    folder.mkdir()
    manifest = tmp_path / "manifest.json"
    save_manifest([Signature("zeta", 1, "z"), Signature("alpha", 1, "a")], manifest)

    rc = _check(manifest, folder, "--sort")

    out = capsys.readouterr().out
    assert rc == EXIT_ERROR
    assert out.index("alpha") < out.index("zeta")
