"""
Speech-to-text boundary.

Recognition itself is an external collaborator. This module defines the
interface the scoring engine consumes and a cancellable job wrapper that
never lets a partial transcript reach scoring.
"""
import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ....scoring.models import TranscriptionResult

logger = logging.getLogger("speech_transcription")


class TranscriptionError(Exception):
    """Raised by a transcriber when recognition is unavailable or fails."""


class TranscriptionCancelled(TranscriptionError):
    """Raised inside a transcriber that notices its job was cancelled."""


class Transcriber(ABC):
    """Turns an opaque audio handle into a TranscriptionResult."""

    @abstractmethod
    def transcribe(self, audio: Any,
                   cancel_event: Optional[threading.Event] = None) -> 'TranscriptionResult':
        """
        Transcribe audio.

        Implementations that stream should check `cancel_event` between
        chunks and raise TranscriptionCancelled once it is set.

        Raises:
            TranscriptionError: If recognition is unavailable or fails
        """


class StaticTranscriber(Transcriber):
    """Returns a transcript supplied up front (collaborator payload or JSON file)."""

    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload

    @classmethod
    def from_json_file(cls, path: str) -> 'StaticTranscriber':
        try:
            with open(path, "r", encoding="utf-8") as f:
                return cls(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            raise TranscriptionError(f"Could not read transcript {path}: {e}") from e

    def transcribe(self, audio: Any,
                   cancel_event: Optional[threading.Event] = None) -> 'TranscriptionResult':
        from ....scoring.models import TranscriptionResult

        if cancel_event is not None and cancel_event.is_set():
            raise TranscriptionCancelled("Transcription cancelled")
        if not isinstance(self.payload, dict):
            raise TranscriptionError("Transcript payload must be an object")
        return TranscriptionResult.from_dict(self.payload)


class TranscriptionJob:
    """
    Runs one transcription on a worker thread.

    Cancelling discards whatever the transcriber produced: `result()` returns
    None for a cancelled job even if the worker finished afterwards.
    """

    def __init__(self, transcriber: Transcriber, audio: Any):
        self.transcriber = transcriber
        self.audio = audio
        self._cancel_event = threading.Event()
        self._done = threading.Event()
        self._result: Optional['TranscriptionResult'] = None
        self._error: Optional[TranscriptionError] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def _run(self):
        try:
            result = self.transcriber.transcribe(self.audio, self._cancel_event)
            if not self._cancel_event.is_set():
                self._result = result
        except TranscriptionCancelled:
            logger.info("Transcription cancelled, partial output discarded")
        except TranscriptionError as e:
            logger.warning("Transcription failed: %s", e)
            self._error = e
        finally:
            self._done.set()

    def start(self) -> 'TranscriptionJob':
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name="transcription", daemon=True)
            self._thread.start()
        return self

    def run(self) -> Optional['TranscriptionResult']:
        """Run on the calling thread and return the result."""
        if self._thread is None and not self._done.is_set():
            self._run()
        return self.result()

    def cancel(self):
        if not self._cancel_event.is_set():
            logger.debug("Cancelling transcription job")
        self._cancel_event.set()

    def result(self, timeout: Optional[float] = None) -> Optional['TranscriptionResult']:
        """
        Wait for the job.

        Returns:
            The transcript, or None if cancelled or still running at timeout

        Raises:
            TranscriptionError: If the transcriber failed
        """
        if self._thread is not None:
            self._thread.join(timeout)
        if self._cancel_event.is_set() or not self._done.is_set():
            return None
        if self._error is not None:
            raise self._error
        return self._result
