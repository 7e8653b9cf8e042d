"""Tests for SongExporter, batch conversion and the CLI."""

import json
import logging
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from scoreflat import __version__
from scoreflat.batch import (
    STATUS_CONVERTED,
    STATUS_FAILED,
    STATUS_SKIPPED,
    BatchConverter,
    convert_document,
    iter_documents,
    load_document,
)
from scoreflat.cli import main
from scoreflat.faults import MalformedDocumentError
from scoreflat.song_exporter import SongExporter
from scoreflat.song_models import Song


def _document(tempo: str | None = "120") -> dict[str, Any]:
    measure: dict[str, Any] = {
        "note": {
            "pitch": {"step": "A", "octave": "2"},
            "duration": "4",
            "notations": {"technical": {"string": "5", "fret": "0"}},
        }
    }
    if tempo is not None:
        measure["direction"] = {"sound": {"tempo": tempo}}
    return {"movement-title": "Drone", "part": {"measure": [measure]}}


def _write(path: Path, content: Any) -> Path:
    path.write_text(json.dumps(content), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# SongExporter
# ---------------------------------------------------------------------------

def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported output format"):
        SongExporter("midi")


def test_format_is_normalized() -> None:
    assert SongExporter(" JSON ").output_format == "json"


def test_output_path_follows_format(tmp_path: Path) -> None:
    assert SongExporter("json").output_path_for(tmp_path, "song.json") == tmp_path / "song.json"
    assert SongExporter("chords").output_path_for(tmp_path, "song.json") == tmp_path / "song.txt"


def test_export_writes_file_and_creates_directories(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "song.json"
    SongExporter().export(Song(title="Drone"), out)
    assert json.loads(out.read_text(encoding="utf-8"))["title"] == "Drone"


# ---------------------------------------------------------------------------
# Batch conversion
# ---------------------------------------------------------------------------

def test_iter_documents_lists_json_files_in_order(tmp_path: Path) -> None:
    _write(tmp_path / "b.json", _document())
    _write(tmp_path / "a.json", _document())
    (tmp_path / "notes.txt").write_text("ignore me", encoding="utf-8")
    assert [path.name for path in iter_documents(tmp_path)] == ["a.json", "b.json"]


def test_load_document_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(MalformedDocumentError):
        load_document(path)


def test_load_document_rejects_non_utf8_bytes(tmp_path: Path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"movement-title": "\xff\xfe"}')
    with pytest.raises(MalformedDocumentError) as excinfo:
        load_document(path)
    assert excinfo.value.document == "latin1.json"


def test_load_document_rejects_non_object(tmp_path: Path) -> None:
    with pytest.raises(MalformedDocumentError):
        load_document(_write(tmp_path / "list.json", [1, 2]))


def test_convert_document_writes_record(tmp_path: Path) -> None:
    source = _write(tmp_path / "drone.json", _document(tempo=None))

    result = convert_document(source, tmp_path / "out")

    assert result.status == STATUS_CONVERTED
    assert len(result.faults) == 1
    data = json.loads((tmp_path / "out" / "drone.json").read_text(encoding="utf-8"))
    assert data["measures"][0]["bpm"] is None
    assert data["measures"][0]["beats"][0]["chordName"] == "A"


def test_convert_document_skips_existing_output(tmp_path: Path) -> None:
    source = _write(tmp_path / "drone.json", _document())
    out_dir = tmp_path / "out"
    convert_document(source, out_dir)

    assert convert_document(source, out_dir).status == STATUS_SKIPPED
    assert convert_document(source, out_dir, overwrite=True).status == STATUS_CONVERTED


def test_malformed_document_does_not_stop_the_batch(tmp_path: Path) -> None:
    source_dir = tmp_path / "songs"
    source_dir.mkdir()
    _write(source_dir / "a.json", _document())
    _write(source_dir / "b.json", {"movement-title": "No part"})
    _write(source_dir / "c.json", _document())

    summary = BatchConverter().run(source_dir, tmp_path / "out")

    assert [result.status for result in summary.results] == [
        STATUS_CONVERTED,
        STATUS_FAILED,
        STATUS_CONVERTED,
    ]
    assert "no part" in (summary.results[1].error or "")
    assert (summary.converted, summary.skipped, summary.failed) == (2, 0, 1)


def test_non_utf8_document_does_not_stop_the_batch(tmp_path: Path) -> None:
    source_dir = tmp_path / "songs"
    source_dir.mkdir()
    _write(source_dir / "a.json", _document())
    (source_dir / "b.json").write_bytes(b'{"movement-title": "\xff\xfe"}')
    _write(source_dir / "c.json", _document())

    summary = BatchConverter().run(source_dir, tmp_path / "out")

    assert [result.status for result in summary.results] == [
        STATUS_CONVERTED,
        STATUS_FAILED,
        STATUS_CONVERTED,
    ]
    assert "not UTF-8" in (summary.results[1].error or "")
    assert (tmp_path / "out" / "c.json").exists()


def test_parallel_batch_matches_sequential(tmp_path: Path) -> None:
    source_dir = tmp_path / "songs"
    source_dir.mkdir()
    for index, tempo in enumerate(["60", None, "90"]):
        _write(source_dir / f"song{index}.json", _document(tempo=tempo))

    sequential = BatchConverter().run(source_dir, tmp_path / "seq")
    parallel = BatchConverter(jobs=2).run(source_dir, tmp_path / "par")

    assert [r.name for r in parallel.results] == [r.name for r in sequential.results]
    for result in sequential.results:
        seq_text = (tmp_path / "seq" / result.name).read_text(encoding="utf-8")
        par_text = (tmp_path / "par" / result.name).read_text(encoding="utf-8")
        assert seq_text == par_text


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def test_cli_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_convert_defaults_to_parsed_directory(tmp_path: Path) -> None:
    _write(tmp_path / "drone.json", _document())

    result = CliRunner().invoke(main, ["convert", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "parsed" / "drone.json").exists()
    assert "Converted: 1  Skipped: 0  Failed: 0" in result.output


def test_cli_convert_chord_chart(tmp_path: Path) -> None:
    _write(tmp_path / "drone.json", _document())
    out_dir = tmp_path / "charts"

    result = CliRunner().invoke(main, ["convert", str(tmp_path), "-o", str(out_dir), "--format", "chords"])

    assert result.exit_code == 0, result.output
    chart = (out_dir / "drone.txt").read_text(encoding="utf-8")
    assert chart.splitlines()[0] == "Drone"


def test_cli_convert_exits_nonzero_on_failure(tmp_path: Path) -> None:
    _write(tmp_path / "broken.json", {"part": {}})

    result = CliRunner().invoke(main, ["convert", str(tmp_path)])

    assert result.exit_code == 1
    assert "FAILED" in result.output
    assert "Failed: 1" in result.output


def test_cli_show_prints_chart(tmp_path: Path) -> None:
    source = _write(tmp_path / "drone.json", _document())

    result = CliRunner().invoke(main, ["show", str(source)])

    assert result.exit_code == 0
    assert "|   1 | 120 bpm | 4/4 | A" in result.output


def test_cli_show_reports_each_fault_once(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    source = _write(tmp_path / "drone.json", _document(tempo=None))

    with caplog.at_level(logging.WARNING, logger="scoreflat"):
        result = CliRunner().invoke(main, ["show", str(source)])

    assert result.exit_code == 0
    assert "|   1 |   ? bpm | 4/4 | A" in result.output
    logged = [record for record in caplog.records if "drone.json measure 0" in record.getMessage()]
    assert len(logged) == 1
    assert logged[0].levelno == logging.WARNING
    assert "drone.json measure 0" not in result.output


def test_cli_convert_reports_each_fault_once(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write(tmp_path / "drone.json", _document(tempo=None))

    with caplog.at_level(logging.WARNING, logger="scoreflat"):
        result = CliRunner().invoke(main, ["convert", str(tmp_path)])

    assert result.exit_code == 0, result.output
    logged = [record for record in caplog.records if "drone.json measure 0" in record.getMessage()]
    assert len(logged) == 1
    assert "drone.json measure 0" not in result.output


def test_cli_show_rejects_non_utf8_document(tmp_path: Path) -> None:
    source = tmp_path / "latin1.json"
    source.write_bytes(b'{"movement-title": "\xff\xfe"}')

    result = CliRunner().invoke(main, ["show", str(source)])

    assert result.exit_code == 1
    assert "ERROR: Could not transcode" in result.output
    assert "latin1.json" in result.output


def test_cli_show_json(tmp_path: Path) -> None:
    source = _write(tmp_path / "drone.json", _document())

    result = CliRunner().invoke(main, ["show", str(source), "--format", "json"])

    assert result.exit_code == 0
    assert '"bpm": 120' in result.output
