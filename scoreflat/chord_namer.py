"""ChordNamer: infers a display label for the notes of one beat."""

from __future__ import annotations

from scoreflat.faults import FaultKind, FaultReporter
from scoreflat.pitch import UNCLASSIFIED, note_pitch_class, root_name
from scoreflat.song_models import Beat, Note

NOT_AVAILABLE = "n/a"


class ChordNamer:
    """
    Names a beat from the pitch classes of its notes.

    Algorithm overview
    ------------------
    1. **Anchor search** – Scan note pairs (i, j), i < j, outer index first.
       The first pair whose absolute pitch-class difference is a perfect
       fourth (5) or fifth (7) becomes the anchor (n1, n2).

    2. **Root** – ``n1`` when ``n2 - n1 == 5``, otherwise ``n1 + 5``.

    3. **Note count** – Two notes make a power chord, four notes a dominant
       seventh. The count alone decides; the other intervals are not checked.

    4. **Third** – For any other count, the first note that is not an anchor
       decides between major, minor and the three suspended-4th spellings.
       Anything else is ``"n/a"``.

    This is a heuristic. It does not resolve inversions, extended chords or
    enharmonic spelling, and the branch tests below mix directional and
    absolute differences on purpose.
    """

    ANCHOR_INTERVALS = (5, 7)  # perfect fourth, perfect fifth
    POWER_CHORD_SIZE = 2
    SEVENTH_CHORD_SIZE = 4

    MAJOR_DOWN = (3, 8)  # n2 - n3
    MAJOR_UP = 4         # n3 - n2
    MINOR_DOWN = (4, 9)
    MINOR_UP = 3

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _classify(self, notes: list[Note], report: FaultReporter | None) -> list[int]:
        classes = [note_pitch_class(note) for note in notes]
        if report is not None:
            for note, value in zip(notes, classes):
                if value == UNCLASSIFIED:
                    step = note.pitch.step if note.pitch is not None else None
                    report(
                        FaultKind.UNCLASSIFIABLE_PITCH,
                        f"cannot classify pitch step {step!r} in chord",
                    )
        return classes

    def _find_anchor(self, classes: list[int]) -> tuple[int, int] | None:
        """Indices of the first fourth/fifth pair, or None."""
        for i, first in enumerate(classes):
            if first == UNCLASSIFIED:
                continue
            for j in range(i + 1, len(classes)):
                second = classes[j]
                if second == UNCLASSIFIED:
                    continue
                if abs(second - first) in self.ANCHOR_INTERVALS:
                    return i, j
        return None

    def _find_third(self, classes: list[int], anchor: tuple[int, int]) -> int | None:
        for index, value in enumerate(classes):
            if index in anchor or value == UNCLASSIFIED:
                continue
            return value
        return None

    def _name_triad(self, n1: int, n2: int, n3: int, root: str) -> str:
        if n2 - n3 in self.MAJOR_DOWN or n3 - n2 == self.MAJOR_UP:
            return root
        if n2 - n3 in self.MINOR_DOWN or n3 - n2 == self.MINOR_UP:
            return f"{root}m"

        # Suspended chords take their root from whichever note is the 1
        if n3 - n1 == 2:
            return f"{root_name(n3)}sus4"
        if n3 - n1 == 7:
            return f"{root_name(n1)}sus4"
        if n3 - n1 == 10:
            return f"{root_name(n2)}sus4"
        return NOT_AVAILABLE

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def name_notes(self, notes: list[Note], report: FaultReporter | None = None) -> str:
        """
        Name a cluster of two or more simultaneous notes.

        Returns:
            e.g. ``"Epower"``, ``"A7"``, ``"C"``, ``"Dm"``, ``"Gsus4"`` or
            ``"n/a"`` when no rule matches.
        """
        classes = self._classify(notes, report)
        anchor = self._find_anchor(classes)
        if anchor is None:
            return NOT_AVAILABLE

        n1, n2 = classes[anchor[0]], classes[anchor[1]]
        root = root_name(n1) if n2 - n1 == 5 else root_name(n1 + 5)

        if len(notes) == self.POWER_CHORD_SIZE:
            return f"{root}power"
        if len(notes) == self.SEVENTH_CHORD_SIZE:
            return f"{root}7"

        n3 = self._find_third(classes, anchor)
        if n3 is None:
            return NOT_AVAILABLE
        return self._name_triad(n1, n2, n3, root)

    def name(self, beat: Beat, report: FaultReporter | None = None) -> str:
        """Label for a beat: empty for rests, the step for a single note."""
        if beat.is_rest or not beat.notes:
            return ""
        if len(beat.notes) == 1:
            pitch = beat.notes[0].pitch
            if pitch is None or pitch.step is None:
                return ""
            return pitch.step
        return self.name_notes(beat.notes, report)
