"""NoteNormalizer: converts one raw note event into a Note record."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from scoreflat.document import first, get_path, has_path, parse_int
from scoreflat.faults import FaultKind, FaultReporter
from scoreflat.song_models import Note, Pitch


def is_rest_event(event: Mapping[str, Any]) -> bool:
    return has_path(event, "rest")


def _technical_notation(event: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """
    Locate the string/fret holder of a note.

    ``notations`` may repeat; the first entry is used, and its ``technical``
    sub-node is preferred when present.
    """
    notations = first(get_path(event, "notations"))
    if not isinstance(notations, Mapping):
        return None
    if "technical" in notations:
        technical = first(notations["technical"])
        return technical if isinstance(technical, Mapping) else None
    return notations


def _parse_pitch(raw: Any) -> Pitch:
    if not isinstance(raw, Mapping):
        return Pitch()
    step = raw.get("step")
    return Pitch(
        step=step if isinstance(step, str) else None,
        octave=parse_int(raw.get("octave")),
        alter=parse_int(raw.get("alter")),
    )


def normalize_note(event: Mapping[str, Any], report: FaultReporter | None = None) -> Note:
    """
    Build a Note from a raw note event without mutating the event.

    A pitched note missing its string or fret keeps None in those fields and
    reports a MISSING_NOTATION fault.
    """
    duration = parse_int(event.get("duration"))

    if is_rest_event(event):
        return Note(duration=duration, is_rest=True)

    technical = _technical_notation(event)
    string = parse_int(technical.get("string")) if technical is not None else None
    fret = parse_int(technical.get("fret")) if technical is not None else None

    if report is not None and (string is None or fret is None):
        if technical is None:
            report(FaultKind.MISSING_NOTATION, "note has no string/fret notation")
        else:
            report(FaultKind.MISSING_NOTATION, "note notation lacks a string or fret value")

    pitch = _parse_pitch(event["pitch"]) if "pitch" in event else None
    return Note(duration=duration, string=string, fret=fret, pitch=pitch)
