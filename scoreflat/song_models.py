"""Data models for the flattened song record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_TIME_SIGNATURE: tuple[int, int] = (4, 4)


@dataclass(frozen=True)
class Pitch:
    """Pitch as written in the score. Absent fields stay None."""

    step: str | None = None
    octave: int | None = None
    alter: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.step is not None:
            data["step"] = self.step
        if self.octave is not None:
            data["octave"] = self.octave
        if self.alter is not None:
            data["alter"] = self.alter
        return data


@dataclass(frozen=True)
class Note:
    """A single normalized note or rest."""

    duration: int | None
    string: int | None = None
    fret: int | None = None
    pitch: Pitch | None = None
    is_rest: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "duration": self.duration,
            "fret": self.fret,
            "string": self.string,
        }
        if not self.is_rest:
            data["pitch"] = self.pitch.to_dict() if self.pitch is not None else {}
        return data


@dataclass
class Beat:
    """
    One rhythmic onset.

    ``notes`` grows while chord continuations are merged and is ordered by
    ascending string index. ``chord_name`` is filled in once the measure's
    beats are complete.
    """

    is_rest: bool = False
    is_chord: bool = False
    is_tie: bool = False
    chord_name: str = ""
    notes: list[Note] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isRest": self.is_rest,
            "isChord": self.is_chord,
            "chordName": self.chord_name,
            "isTie": self.is_tie,
            "notes": [note.to_dict() for note in self.notes],
        }


@dataclass(frozen=True)
class Measure:
    """A measure with its resolved tempo and time signature."""

    bpm: int | None
    beats_in_measure: int
    time_signature: tuple[int, int] = DEFAULT_TIME_SIGNATURE
    beats: list[Beat] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        numerator, denominator = self.time_signature
        return {
            "bpm": self.bpm,
            "beatsInMeasure": self.beats_in_measure,
            "timeSignatureNumerator": numerator,
            "timeSignatureDenominator": denominator,
            "beats": [beat.to_dict() for beat in self.beats],
        }


@dataclass(frozen=True)
class Song:
    """Flattened song record produced from one document."""

    title: str = ""
    artist: str = ""
    instrument: str = ""
    measures: list[Measure] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "artist": self.artist,
            "instrument": self.instrument,
            "measures": [measure.to_dict() for measure in self.measures],
        }
