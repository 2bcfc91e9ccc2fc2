"""
Session State Machine

Sequences recording, transcription, refinement and clipboard output into a
strict Stopped -> Recording -> Processing -> Stopped cycle.

All methods are meant to be called from the UI event context. Blocking work
goes through a task runner whose completions come back on that same context,
so the session needs no locking.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional

from whisperpad.audio_recorder import AudioRecorder
from whisperpad.config import DEFAULT_RECORDING_PATH
from whisperpad.exceptions import AudioRecordingError, OutputError, RefinementError
from whisperpad.output_handler import OutputHandler
from whisperpad.refiner import Refiner
from whisperpad.tasks import InlineTaskRunner
from whisperpad.transcriber import Transcriber, TranscriptionResult


logger = logging.getLogger(__name__)


STATUS_IDLE = "Idle"
STATUS_RECORDING = "Recording..."
STATUS_PROCESSING = "Processing..."
STATUS_REFINING = "Refining..."

TRANSCRIPTION_FAILED = "[Transcription failed]"


class Phase(Enum):
    """Position in the record/transcribe cycle."""
    STOPPED = auto()
    RECORDING = auto()
    PROCESSING = auto()


@dataclass
class Session:
    """Mutable state of the single recording session."""

    api_key: str
    phase: Phase = Phase.STOPPED
    transcript_text: str = ""
    status_text: str = STATUS_IDLE
    refining: bool = False
    last_error: Optional[str] = None


Listener = Callable[[Session], None]


class SessionController:
    """Drives a Session in response to UI actions."""

    def __init__(
        self,
        session: Session,
        recorder: AudioRecorder,
        transcriber: Transcriber,
        output: OutputHandler,
        refiner: Optional[Refiner] = None,
        recording_path: str = DEFAULT_RECORDING_PATH,
        auto_copy: bool = True,
        runner=None,
    ):
        """
        Initialize the controller.

        Args:
            session: Session to drive.
            recorder: Capture process controller.
            transcriber: Speech-to-text client.
            output: Clipboard sink.
            refiner: Refinement invoker, or None when the command is unavailable.
            recording_path: Fixed path every recording is written to.
            auto_copy: Copy transcripts to the clipboard when they arrive.
            runner: Task runner for blocking work (default: run inline).
        """
        self.session = session
        self.recorder = recorder
        self.transcriber = transcriber
        self.output = output
        self.refiner = refiner
        self.recording_path = recording_path
        self.auto_copy = auto_copy
        self.runner = runner or InlineTaskRunner()
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        """Register a callback invoked after every session change."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self.session)

    # ------------------------------------------------------------------
    # Record / stop
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.session.phase

    def toggle_recording(self) -> None:
        """Handle the record/stop action."""
        if self.session.refining:
            logger.debug("Record action ignored while refining")
            return

        handlers = {
            Phase.STOPPED: self._start_recording,
            Phase.RECORDING: self._stop_recording,
            Phase.PROCESSING: self._ignore_while_processing,
        }
        handlers[self.session.phase]()

    def _start_recording(self) -> None:
        try:
            self.recorder.start(self.recording_path)
        except AudioRecordingError as e:
            logger.error(f"Could not start recording: {e}")
            self._report_error(e)
            return

        self.session.phase = Phase.RECORDING
        self.session.status_text = STATUS_RECORDING
        self.session.last_error = None
        self._notify()

    def _stop_recording(self) -> None:
        try:
            self.recorder.stop()
        except AudioRecordingError as e:
            # The file may still be usable; transcribe whatever was written
            logger.error(f"Could not stop recording cleanly: {e}")

        duration = self.recorder.get_duration(self.recording_path)
        logger.info(f"Recording finished, duration: {duration:.1f}s")

        self.session.phase = Phase.PROCESSING
        self.session.status_text = STATUS_PROCESSING
        self._notify()

        path = self.recording_path
        api_key = self.session.api_key
        self.runner.submit(
            lambda: self.transcriber.transcribe(path, api_key),
            self._finish_processing,
        )

    def _ignore_while_processing(self) -> None:
        logger.debug("Record action ignored while processing")

    def _finish_processing(
        self, result: Optional[TranscriptionResult], error: Optional[Exception]
    ) -> None:
        if error is not None:
            logger.error(f"Unexpected error during transcription: {error!r}")
            result = TranscriptionResult.failure(str(error))

        if result.ok:
            self.session.transcript_text = result.text
            if self.auto_copy:
                self._copy(result.text)
        else:
            self.session.transcript_text = TRANSCRIPTION_FAILED
            self.session.last_error = result.error

        self.session.status_text = STATUS_IDLE
        self.session.phase = Phase.STOPPED
        self._notify()

    # ------------------------------------------------------------------
    # Refine / copy
    # ------------------------------------------------------------------

    @property
    def refine_available(self) -> bool:
        """Whether the refine action is offered."""
        return self.refiner is not None

    def refine(self) -> None:
        """Handle the refine action."""
        if not self.refine_available:
            logger.debug("Refine action ignored: no refinement command")
            return
        if self.session.phase != Phase.STOPPED or self.session.refining:
            logger.debug("Refine action ignored: session busy")
            return

        transcript = self.session.transcript_text
        if not transcript.strip():
            logger.debug("Refine action ignored: transcript is empty")
            return

        self.session.refining = True
        self.session.status_text = STATUS_REFINING
        self.session.last_error = None
        self._notify()

        self.runner.submit(lambda: self.refiner.refine(transcript), self._finish_refining)

    def _finish_refining(self, refined: Optional[str], error: Optional[Exception]) -> None:
        self.session.refining = False

        if error is not None:
            if not isinstance(error, RefinementError):
                logger.error(f"Unexpected error during refinement: {error!r}")
            else:
                logger.error(f"Refinement failed: {error}")
            self._report_error(error)
            return

        if not refined.strip():
            logger.warning("Refinement returned no text")

        # The command's output replaces the transcript as-is, even when empty
        self.session.transcript_text = refined
        if self.auto_copy:
            self._copy(refined)

        self.session.status_text = STATUS_IDLE
        self._notify()

    def copy(self) -> bool:
        """Handle the copy action. Returns True if the clipboard was written."""
        copied = self._copy(self.session.transcript_text)
        self._notify()
        return copied

    def _copy(self, text: str) -> bool:
        if not text:
            return False
        try:
            self.output.copy_to_clipboard(text)
        except OutputError as e:
            logger.warning(f"Clipboard unavailable, transcript only shown in window: {e}")
            self.session.last_error = str(e)
            return False
        logger.debug("Transcript copied to clipboard")
        return True

    def set_transcript(self, text: str) -> None:
        """Record an edit of the transcript made in the UI."""
        self.session.transcript_text = text

    # ------------------------------------------------------------------
    # Shutdown / errors
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        """Stop an active capture. In-flight background work is abandoned."""
        if self.session.phase == Phase.RECORDING:
            try:
                self.recorder.stop()
            except AudioRecordingError as e:
                logger.error(f"Could not stop recording on shutdown: {e}")
        self.session.phase = Phase.STOPPED

    def _report_error(self, error: Exception) -> None:
        self.session.last_error = str(error)
        self.session.status_text = f"Error: {error}"
        self.session.phase = Phase.STOPPED
        self._notify()
