"""BeatBuilder: groups a measure's note events into beats."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from scoreflat.chord_namer import ChordNamer
from scoreflat.document import has_path
from scoreflat.faults import FaultReporter
from scoreflat.note_normalizer import is_rest_event, normalize_note
from scoreflat.song_models import Beat, Note


def _insert_by_string(notes: list[Note], note: Note) -> None:
    """
    Insert ``note`` after every note whose string is <= its own.

    Equal strings keep input order. Notes without a string sort last.
    """
    index = len(notes)
    if note.string is not None:
        for position, existing in enumerate(notes):
            if existing.string is None or note.string < existing.string:
                index = position
                break
    notes.insert(index, note)


class BeatBuilder:
    """
    Builds the ordered beats of one measure.

    An event marked ``chord`` sounds together with the previous event and is
    merged into the most recently opened beat. Rests always open their own
    beat.
    """

    def __init__(self, chord_namer: ChordNamer | None = None) -> None:
        self.chord_namer = chord_namer if chord_namer is not None else ChordNamer()

    @staticmethod
    def opens_beat(event: Mapping[str, Any], has_open_beat: bool) -> bool:
        """True when ``event`` starts a new beat instead of joining the current one."""
        if not has_open_beat or is_rest_event(event):
            return True
        return not has_path(event, "chord")

    def _open_beat(self, event: Mapping[str, Any], report: FaultReporter | None) -> Beat:
        return Beat(
            is_rest=is_rest_event(event),
            is_tie=has_path(event, "tie"),
            notes=[normalize_note(event, report)],
        )

    def build(
        self,
        events: Sequence[Mapping[str, Any]],
        report: FaultReporter | None = None,
    ) -> list[Beat]:
        beats: list[Beat] = []

        for event in events:
            if self.opens_beat(event, bool(beats)):
                beats.append(self._open_beat(event, report))
                continue

            current = beats[-1]
            current.is_chord = True
            _insert_by_string(current.notes, normalize_note(event, report))

        for beat in beats:
            beat.chord_name = self.chord_namer.name(beat, report)

        return beats
