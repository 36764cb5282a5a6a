"""Speech-to-text boundary."""

from .transcription import (
    Transcriber, StaticTranscriber, TranscriptionJob,
    TranscriptionError, TranscriptionCancelled,
)

__all__ = [
    "Transcriber", "StaticTranscriber", "TranscriptionJob",
    "TranscriptionError", "TranscriptionCancelled",
]
