"""scoreflat CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from scoreflat import __version__
from scoreflat.batch import (
    STATUS_FAILED,
    STATUS_SKIPPED,
    BatchConverter,
    ConversionResult,
    load_document,
)
from scoreflat.faults import MalformedDocumentError
from scoreflat.song_exporter import SUPPORTED_FORMATS, SongExporter
from scoreflat.song_transcoder import SongTranscoder

DEFAULT_OUTPUT_DIRNAME = "parsed"


def _configure_logging(verbose: bool) -> None:
    """Send log lines to stderr; DEBUG with --verbose, INFO otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _echo_result(result: ConversionResult) -> None:
    if result.status == STATUS_FAILED:
        click.echo(f"  FAILED  {result.name}: {result.error}", err=True)
        return
    if result.status == STATUS_SKIPPED:
        click.echo(f"  skip    {result.name} (output exists)")
        return
    click.echo(f"  ok      {result.name} → {result.output_path}")


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="scoreflat")
@click.option("--verbose", "-v", is_flag=True, help="Log debug detail to stderr.")
def main(verbose: bool) -> None:
    """scoreflat — flatten MusicXML-as-JSON tablature scores into song records."""
    _configure_logging(verbose)


# ── convert subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.argument("source_dir", type=click.Path(exists=True, file_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="DIR",
    help=f"Destination directory. Defaults to SOURCE_DIR/{DEFAULT_OUTPUT_DIRNAME}.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
    default="json",
    show_default=True,
    help="Output format: flattened JSON record or plain-text chord chart.",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(1, 64),
    default=1,
    show_default=True,
    help="Number of documents converted in parallel.",
)
@click.option("--overwrite", is_flag=True, help="Replace existing output files.")
def convert(source_dir: str, output: str | None, output_format: str, jobs: int, overwrite: bool) -> None:
    """
    Convert every .json score document in SOURCE_DIR.

    \b
    Examples:
      scoreflat convert songs/
      scoreflat convert songs/ -o parsed/ --jobs 4
      scoreflat convert songs/ --format chords --overwrite
    """
    resolved_output = output if output is not None else str(Path(source_dir) / DEFAULT_OUTPUT_DIRNAME)

    click.echo(f"scoreflat v{__version__}")
    click.echo(f"  Source : {source_dir}")
    click.echo(f"  Output : {resolved_output}")
    click.echo(f"  Format : {output_format.lower()}  |  Jobs: {jobs}")
    click.echo()

    converter = BatchConverter(output_format=output_format, jobs=jobs, overwrite=overwrite)
    try:
        summary = converter.run(source_dir, resolved_output, on_result=_echo_result)
    except OSError as exc:
        click.echo(f"  ERROR: Could not read source directory — {exc}", err=True)
        sys.exit(1)

    click.echo()
    click.echo(
        f"Converted: {summary.converted}  Skipped: {summary.skipped}  Failed: {summary.failed}"
    )
    if summary.failed:
        sys.exit(1)


# ── show subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
    default="chords",
    show_default=True,
    help="How to print the transcoded song.",
)
def show(document: str, output_format: str) -> None:
    """
    Transcode a single DOCUMENT and print it to stdout.

    \b
    Examples:
      scoreflat show songs/riff.json
      scoreflat show songs/riff.json --format json
    """
    name = Path(document).name
    try:
        result = SongTranscoder().transcode(load_document(document), name)
    except MalformedDocumentError as exc:
        click.echo(f"  ERROR: Could not transcode — {exc}", err=True)
        sys.exit(1)

    click.echo(SongExporter(output_format).render(result.song), nl=False)
