"""Renderer implementations for song record output formats."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod

from scoreflat.song_models import Beat, Measure, Song

REST_LABEL = "-"
EMPTY_LABEL = "."


class SongRenderer(ABC):
    """Abstract song renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, song: Song) -> str:
        """Render a song into a file content string."""


class JsonSongRenderer(SongRenderer):
    """Serialize the song record as JSON with a fixed key order."""

    def __init__(self, indent: str | int | None = "\t") -> None:
        self.indent = indent

    @property
    def default_extension(self) -> str:
        return ".json"

    def render(self, song: Song) -> str:
        return json.dumps(song.to_dict(), indent=self.indent, ensure_ascii=False) + "\n"


class ChordChartRenderer(SongRenderer):
    """
    Render a plain-text chord chart.

    One line per measure::

        |   1 | 120 bpm | 4/4 | Epower  -  G
    """

    @property
    def default_extension(self) -> str:
        return ".txt"

    def _beat_label(self, beat: Beat) -> str:
        if beat.is_rest:
            return REST_LABEL
        return beat.chord_name or EMPTY_LABEL

    def _measure_line(self, number: int, measure: Measure) -> str:
        bpm = f"{measure.bpm} bpm" if measure.bpm is not None else "? bpm"
        numerator, denominator = measure.time_signature
        labels = "  ".join(self._beat_label(beat) for beat in measure.beats)
        return f"| {number:3d} | {bpm:>7} | {numerator}/{denominator} | {labels}".rstrip()

    def render(self, song: Song) -> str:
        header = song.title or "Untitled"
        if song.artist:
            header = f"{header} - {song.artist}"

        lines = [header]
        if song.instrument:
            lines.append(f"Instrument: {song.instrument}")
        lines.append("")
        lines.extend(
            self._measure_line(number, measure)
            for number, measure in enumerate(song.measures, start=1)
        )
        return "\n".join(lines) + "\n"
