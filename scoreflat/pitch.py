"""PitchClassifier: maps step letters and alterations to pitch classes."""

from __future__ import annotations

from typing import Any, Final

from scoreflat.document import parse_int
from scoreflat.song_models import Note

SEMITONES_PER_OCTAVE = 12

#: Returned for rests, missing pitches and unknown step letters.
UNCLASSIFIED: Final[int] = -1

STEP_PITCH_CLASSES: Final[dict[str, int]] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

# Spelling used for chord roots (index 0 = C)
CHORD_ROOT_NAMES: Final[list[str]] = [
    "C", "C#", "D", "Eb", "E", "F", "F#", "G", "G#", "A", "Bb", "B",
]


def pitch_class(step: str | None, alter: Any = None) -> int:
    """
    Convert a diatonic step letter plus alteration into a pitch class.

    Args:
        step:  One of C, D, E, F, G, A, B.
        alter: Semitone offset (-1 flat, +1 sharp). Unparsable values are
               ignored.

    Returns:
        Pitch class in [0, 11], or UNCLASSIFIED (-1) for an unknown step.
    """
    if step is None or step not in STEP_PITCH_CLASSES:
        return UNCLASSIFIED

    value = STEP_PITCH_CLASSES[step]
    offset = parse_int(alter)
    if offset is not None:
        value += offset
    return value % SEMITONES_PER_OCTAVE


def note_pitch_class(note: Note) -> int:
    """Pitch class of a normalized note; UNCLASSIFIED for rests."""
    if note.is_rest or note.pitch is None:
        return UNCLASSIFIED
    return pitch_class(note.pitch.step, note.pitch.alter)


def root_name(value: int) -> str:
    """Chord-root spelling for a pitch class."""
    return CHORD_ROOT_NAMES[value % SEMITONES_PER_OCTAVE]
