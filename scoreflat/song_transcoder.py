"""SongTranscoder: folds a document's measures into a Song record."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from scoreflat.document import as_sequence, first, get_path
from scoreflat.faults import FaultLog, MalformedDocumentError, TranscodeFault
from scoreflat.measure_transcoder import CarryState, MeasureTranscoder
from scoreflat.song_models import Measure, Song

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscodeResult:
    """A transcoded song and the recoverable faults found on the way."""

    song: Song
    faults: list[TranscodeFault] = field(default_factory=list)


def _text(value: Any) -> str:
    value = first(value)
    return value if isinstance(value, str) else ""


def _instrument(document: Mapping[str, Any]) -> str:
    part_list = first(document.get("part-list"))
    score_part = first(get_path(part_list, "score-part"))
    name = _text(get_path(score_part, "part-name"))
    return name or _text(get_path(part_list, "part-name"))


class SongTranscoder:
    """
    Transcodes whole documents.

    The carried-forward tempo and time signature start empty on every call,
    so one instance can be reused and results do not depend on earlier songs.
    """

    def __init__(self, measure_transcoder: MeasureTranscoder | None = None) -> None:
        self.measure_transcoder = (
            measure_transcoder if measure_transcoder is not None else MeasureTranscoder()
        )

    def _measures(self, document: Any, name: str) -> list[Mapping[str, Any]]:
        if not isinstance(document, Mapping):
            raise MalformedDocumentError(name, "document root is not an object")

        part = first(document.get("part"))
        if not isinstance(part, Mapping):
            raise MalformedDocumentError(name, "document has no part")

        measures = as_sequence(part.get("measure"))
        if not measures:
            raise MalformedDocumentError(name, "part has no measures")

        for index, measure in enumerate(measures):
            if not isinstance(measure, Mapping):
                raise MalformedDocumentError(name, f"measure {index} is not an object")
            for note in as_sequence(measure.get("note")):
                if not isinstance(note, Mapping):
                    raise MalformedDocumentError(name, f"measure {index} has a note that is not an object")
        return measures

    def transcode(self, document: Any, name: str = "<document>") -> TranscodeResult:
        """
        Transcode one parsed document.

        Raises:
            MalformedDocumentError: If the document has no part or no measures.
        """
        raw_measures = self._measures(document, name)
        fault_log = FaultLog(name)
        carry = CarryState()

        measures: list[Measure] = []
        for index, raw_measure in enumerate(raw_measures):
            measure, carry = self.measure_transcoder.transcode(
                raw_measure,
                index,
                carry,
                fault_log.for_measure(index),
            )
            measures.append(measure)

        song = Song(
            title=_text(document.get("movement-title")),
            artist=_text(get_path(document, "identification", "rights")),
            instrument=_instrument(document),
            measures=measures,
        )
        logger.info("%s: transcoded %d measure(s), %d fault(s)", name, len(measures), len(fault_log.faults))
        return TranscodeResult(song=song, faults=fault_log.faults)
