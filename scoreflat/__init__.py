"""scoreflat: flattens MusicXML-as-JSON tablature scores into song records."""

__version__ = "0.1.0"

from scoreflat.faults import FaultKind, MalformedDocumentError, TranscodeFault
from scoreflat.song_models import Beat, Measure, Note, Pitch, Song
from scoreflat.song_transcoder import SongTranscoder, TranscodeResult

__all__ = [
    "__version__",
    "Beat",
    "FaultKind",
    "MalformedDocumentError",
    "Measure",
    "Note",
    "Pitch",
    "Song",
    "SongTranscoder",
    "TranscodeFault",
    "TranscodeResult",
]
