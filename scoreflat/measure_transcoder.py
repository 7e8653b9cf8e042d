"""MeasureTranscoder: one raw measure plus carried-forward state -> Measure."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from scoreflat.beat_builder import BeatBuilder
from scoreflat.document import as_sequence, get_path, parse_int
from scoreflat.faults import FaultKind, FaultReporter
from scoreflat.song_models import DEFAULT_TIME_SIGNATURE, Measure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CarryState:
    """
    Values that persist across measures until redeclared.

    A fresh instance is used for every song.
    """

    bpm: int | None = None
    numerator: int | None = None
    denominator: int | None = None

    @property
    def time_signature(self) -> tuple[int, int]:
        default_numerator, default_denominator = DEFAULT_TIME_SIGNATURE
        return (
            self.numerator if self.numerator is not None else default_numerator,
            self.denominator if self.denominator is not None else default_denominator,
        )


def declared_tempo(measure: Mapping[str, Any]) -> int | None:
    """Tempo of the first direction carrying ``sound.tempo``."""
    for direction in as_sequence(measure.get("direction")):
        tempo = parse_int(get_path(direction, "sound", "tempo"))
        if tempo is not None:
            return tempo
    return None


def declared_time(measure: Mapping[str, Any]) -> tuple[int | None, int | None]:
    """(beats, beat-type) from the first attributes entry holding ``time``."""
    for attributes in as_sequence(measure.get("attributes")):
        for time in as_sequence(get_path(attributes, "time")):
            if isinstance(time, Mapping):
                return parse_int(time.get("beats")), parse_int(time.get("beat-type"))
    return None, None


class MeasureTranscoder:
    """Assembles Measure records, applying tempo and time-signature carry-over."""

    def __init__(self, beat_builder: BeatBuilder | None = None) -> None:
        self.beat_builder = beat_builder if beat_builder is not None else BeatBuilder()

    def beats_in_measure(self, events: list[Mapping[str, Any]]) -> int:
        """Sum of the durations of the events that open a beat."""
        total = 0
        has_open_beat = False
        for event in events:
            if BeatBuilder.opens_beat(event, has_open_beat):
                total += parse_int(event.get("duration")) or 0
            has_open_beat = True
        return total

    def _resolve_carry(
        self,
        measure: Mapping[str, Any],
        index: int,
        carry: CarryState,
        report: FaultReporter | None,
    ) -> CarryState:
        tempo = declared_tempo(measure)
        if tempo is not None:
            carry = replace(carry, bpm=tempo)
        elif index == 0:
            carry = replace(carry, bpm=None)
            if report is not None:
                report(FaultKind.MISSING_TEMPO, "no tempo declared for the first measure")

        numerator, denominator = declared_time(measure)
        if numerator is not None:
            carry = replace(carry, numerator=numerator)
        if denominator is not None:
            carry = replace(carry, denominator=denominator)
        return carry

    def transcode(
        self,
        measure: Mapping[str, Any],
        index: int,
        carry: CarryState,
        report: FaultReporter | None = None,
    ) -> tuple[Measure, CarryState]:
        """
        Transcode one measure.

        Args:
            measure: Raw measure node.
            index:   Position of the measure within the song.
            carry:   State carried forward from the previous measure.
            report:  Fault reporter bound to this measure, or None.

        Returns:
            The Measure and the state to carry into the next measure.
        """
        events = as_sequence(measure.get("note"))
        carry = self._resolve_carry(measure, index, carry, report)
        beats = self.beat_builder.build(events, report)

        logger.debug("measure %d: %d beat(s), bpm=%s", index, len(beats), carry.bpm)

        result = Measure(
            bpm=carry.bpm,
            beats_in_measure=self.beats_in_measure(events),
            time_signature=carry.time_signature,
            beats=beats,
        )
        return result, carry
