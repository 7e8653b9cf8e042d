"""Batch conversion of a directory of JSON score documents."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from scoreflat.faults import MalformedDocumentError, TranscodeFault
from scoreflat.song_exporter import SongExporter
from scoreflat.song_transcoder import SongTranscoder

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".json"

STATUS_CONVERTED = "converted"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting one source document."""

    name: str
    status: str
    output_path: str | None = None
    faults: list[TranscodeFault] = field(default_factory=list)
    error: str | None = None


@dataclass
class BatchSummary:
    results: list[ConversionResult] = field(default_factory=list)

    def _count(self, status: str) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def converted(self) -> int:
        return self._count(STATUS_CONVERTED)

    @property
    def skipped(self) -> int:
        return self._count(STATUS_SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(STATUS_FAILED)


def iter_documents(directory: str | Path) -> Iterator[Path]:
    """Yield the JSON documents of ``directory`` in file name order."""
    for path in sorted(Path(directory).iterdir()):
        if path.is_file() and path.suffix.lower() == DOCUMENT_SUFFIX:
            yield path


def load_document(path: str | Path) -> dict[str, Any]:
    """
    Read and parse one document.

    Raises:
        MalformedDocumentError: If the file is not UTF-8 JSON holding an object.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as fh:
            document = json.load(fh)
    except json.JSONDecodeError as exc:
        raise MalformedDocumentError(path.name, f"invalid JSON ({exc})") from exc
    except UnicodeDecodeError as exc:
        raise MalformedDocumentError(path.name, f"not UTF-8 text ({exc.reason})") from exc

    if not isinstance(document, dict):
        raise MalformedDocumentError(path.name, "document root is not an object")
    return document


def convert_document(
    source_path: str | Path,
    output_dir: str | Path,
    output_format: str = "json",
    overwrite: bool = False,
) -> ConversionResult:
    """
    Convert one document file. Each call builds its own transcoder.

    Malformed documents and I/O failures are returned as failed results so
    that other documents keep going.
    """
    source_path = Path(source_path)
    name = source_path.name
    exporter = SongExporter(output_format)
    output_path = exporter.output_path_for(output_dir, name)

    if output_path.exists() and not overwrite:
        return ConversionResult(name=name, status=STATUS_SKIPPED, output_path=str(output_path))

    try:
        document = load_document(source_path)
        result = SongTranscoder().transcode(document, name)
        exporter.export(result.song, output_path)
    except (MalformedDocumentError, OSError) as exc:
        logger.error("%s: %s", name, exc)
        return ConversionResult(name=name, status=STATUS_FAILED, error=str(exc))

    return ConversionResult(
        name=name,
        status=STATUS_CONVERTED,
        output_path=str(output_path),
        faults=result.faults,
    )


class BatchConverter:
    """Converts every document in a directory, optionally in worker processes."""

    def __init__(
        self,
        output_format: str = "json",
        jobs: int = 1,
        overwrite: bool = False,
    ) -> None:
        # Fail fast on a bad format before any worker starts
        SongExporter(output_format)
        self.output_format = output_format
        self.jobs = max(1, jobs)
        self.overwrite = overwrite

    def run(
        self,
        source_dir: str | Path,
        output_dir: str | Path,
        on_result: Callable[[ConversionResult], None] | None = None,
    ) -> BatchSummary:
        """
        Convert all documents of ``source_dir`` into ``output_dir``.

        With ``jobs > 1`` results arrive in completion order; the summary is
        sorted by document name either way.
        """
        sources = list(iter_documents(source_dir))
        logger.info("found %d document(s) in %s", len(sources), source_dir)
        summary = BatchSummary()

        def record(result: ConversionResult) -> None:
            summary.results.append(result)
            if on_result is not None:
                on_result(result)

        if self.jobs == 1 or len(sources) <= 1:
            for source in sources:
                record(convert_document(source, output_dir, self.output_format, self.overwrite))
        else:
            with ProcessPoolExecutor(max_workers=self.jobs) as executor:
                futures = {
                    executor.submit(
                        convert_document, source, output_dir, self.output_format, self.overwrite
                    ): source
                    for source in sources
                }
                for future in as_completed(futures):
                    try:
                        result = future.result()
                    except Exception as exc:
                        logger.error("%s: worker failed: %s", futures[future].name, exc)
                        result = ConversionResult(
                            name=futures[future].name,
                            status=STATUS_FAILED,
                            error=str(exc),
                        )
                    record(result)

        summary.results.sort(key=lambda result: result.name)
        return summary
