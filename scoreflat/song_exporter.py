"""SongExporter: writes song records to disk through a pluggable renderer."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from scoreflat.song_models import Song
from scoreflat.song_renderers import ChordChartRenderer, JsonSongRenderer, SongRenderer

SUPPORTED_FORMATS: Final[set[str]] = {"json", "chords"}


class SongExporter:
    """
    Render a Song and write it to a file.

    Supported formats:
    - ``json``: the flattened record, tab-indented, stable key order.
    - ``chords``: a plain-text chord chart, one line per measure.
    """

    def __init__(self, output_format: str = "json") -> None:
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.renderer = self._build_renderer(normalized)

    def _build_renderer(self, output_format: str) -> SongRenderer:
        if output_format == "json":
            return JsonSongRenderer()
        return ChordChartRenderer()

    @property
    def default_extension(self) -> str:
        return self.renderer.default_extension

    def output_path_for(self, output_dir: str | Path, document_name: str) -> Path:
        """Output file for a source document, e.g. ``song.json`` -> ``out/song.txt``."""
        return Path(output_dir) / Path(document_name).with_suffix(self.default_extension).name

    def render(self, song: Song) -> str:
        return self.renderer.render(song)

    def export(self, song: Song, output_path: str | Path) -> None:
        """
        Render ``song`` and write it to ``output_path``.

        Raises:
            OSError: If the output file cannot be written.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(self.render(song))
