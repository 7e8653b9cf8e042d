"""Fault taxonomy for transcoding.

Per-note and per-measure problems are recorded as ``TranscodeFault`` values
and never stop a document. Only ``MalformedDocumentError`` aborts a document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class FaultKind(Enum):
    MISSING_TEMPO = "missing-tempo"
    MISSING_NOTATION = "missing-notation"
    UNCLASSIFIABLE_PITCH = "unclassifiable-pitch"


@dataclass(frozen=True)
class TranscodeFault:
    """A recoverable problem found while transcoding one document."""

    kind: FaultKind
    document: str
    measure_index: int | None
    message: str

    def __str__(self) -> str:
        if self.measure_index is None:
            return f"{self.document}: {self.message}"
        return f"{self.document} measure {self.measure_index}: {self.message}"


class FaultReporter(Protocol):
    def __call__(self, kind: FaultKind, message: str) -> None: ...


class MalformedDocumentError(ValueError):
    """The document lacks the structure needed to transcode it."""

    def __init__(self, document: str, reason: str) -> None:
        super().__init__(f"{document}: {reason}")
        self.document = document
        self.reason = reason


class FaultLog:
    """Collects the faults of one document and logs each one once."""

    def __init__(self, document: str) -> None:
        self.document = document
        self.faults: list[TranscodeFault] = []

    def report(self, kind: FaultKind, message: str, measure_index: int | None = None) -> None:
        fault = TranscodeFault(
            kind=kind,
            document=self.document,
            measure_index=measure_index,
            message=message,
        )
        self.faults.append(fault)
        logger.warning("%s", fault)

    def for_measure(self, measure_index: int) -> FaultReporter:
        """Return a reporter bound to ``measure_index``."""

        def report(kind: FaultKind, message: str) -> None:
            self.report(kind, message, measure_index=measure_index)

        return report
