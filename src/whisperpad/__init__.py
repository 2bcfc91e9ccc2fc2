"""
WhisperPad - Speech-to-Text

A small desktop window that records microphone audio, transcribes it with
the Whisper API, copies the transcript to the clipboard and optionally
refines it with an external command-line assistant.
"""

from whisperpad.audio_recorder import AudioRecorder
from whisperpad.config import Config
from whisperpad.exceptions import (
    WhisperPadError,
    ConfigurationError,
    AudioRecordingError,
    TranscriptionError,
    RefinementError,
    OutputError,
    UIInitializationError,
)
from whisperpad.output_handler import OutputHandler
from whisperpad.refiner import Refiner
from whisperpad.session import Phase, Session, SessionController, TRANSCRIPTION_FAILED
from whisperpad.transcriber import Transcriber, TranscriptionResult

__version__ = "0.1.0"

__all__ = [
    "AudioRecorder",
    "Config",
    "WhisperPadError",
    "ConfigurationError",
    "AudioRecordingError",
    "TranscriptionError",
    "RefinementError",
    "OutputError",
    "UIInitializationError",
    "OutputHandler",
    "Refiner",
    "Phase",
    "Session",
    "SessionController",
    "TRANSCRIPTION_FAILED",
    "Transcriber",
    "TranscriptionResult",
]
