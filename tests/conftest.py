"""
Pytest configuration and fixtures for whisperpad tests.

IMPORTANT: This file replaces tkinter with mocks BEFORE any test imports
happen, so the suite runs on headless systems without opening windows.
"""

import sys
from unittest.mock import MagicMock

import numpy as np
from scipy.io import wavfile


def _setup_global_mocks():
    """
    Set up mocks for modules that may not be available during testing.

    This must run before any test modules are imported to prevent
    tkinter import failures or hangs on headless systems.
    """
    if '_tkinter' not in sys.modules:
        mock_tk = MagicMock()
        mock_tk.Tk = MagicMock(return_value=MagicMock())
        mock_tk.Frame = MagicMock(return_value=MagicMock())
        mock_tk.Label = MagicMock(return_value=MagicMock())
        mock_tk.Button = MagicMock(return_value=MagicMock())
        mock_tk.Text = MagicMock(return_value=MagicMock())
        mock_tk.Scrollbar = MagicMock(return_value=MagicMock())
        mock_tk.TclError = Exception
        mock_tk.TkVersion = 8.6
        mock_tk.TclVersion = 8.6
        # String constants
        mock_tk.X = 'x'
        mock_tk.Y = 'y'
        mock_tk.BOTH = 'both'
        mock_tk.LEFT = 'left'
        mock_tk.RIGHT = 'right'
        mock_tk.VERTICAL = 'vertical'
        mock_tk.END = 'end'
        mock_tk.NORMAL = 'normal'
        mock_tk.DISABLED = 'disabled'
        mock_tk.WORD = 'word'
        sys.modules['_tkinter'] = MagicMock()
        sys.modules['tkinter'] = mock_tk
        sys.modules['tkinter.ttk'] = MagicMock()


# Run mocks setup immediately when conftest is loaded
_setup_global_mocks()


import logging

import pytest

from whisperpad.audio_recorder import AudioRecorder
from whisperpad.output_handler import OutputHandler
from whisperpad.refiner import Refiner
from whisperpad.session import Session, SessionController
from whisperpad.transcriber import Transcriber, TranscriptionResult


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that run real external commands"
    )


# =============================================================================
# LOGGING PROTECTION
# =============================================================================

@pytest.fixture(autouse=True)
def _protect_logging_handlers():
    """
    Protect logging handlers from being corrupted by mocks.

    MagicMock can replace handler attributes such as 'level' with mocks,
    which makes logging raise TypeError when it compares levels.
    """
    def _fix_handler_levels():
        for handler in logging.root.handlers[:]:
            if not isinstance(handler.level, int):
                handler.level = logging.NOTSET

    _fix_handler_levels()
    yield
    _fix_handler_levels()


# =============================================================================
# AUDIO FIXTURES
# =============================================================================

CD_SAMPLE_RATE = 44100


def write_test_wav(path, duration_sec: float = 1.0, sample_rate: int = CD_SAMPLE_RATE,
                   channels: int = 2) -> str:
    """
    Write a 440 Hz tone as 16-bit PCM WAV, the format arecord -f cd produces.

    Returns:
        The path as a string.
    """
    samples = int(sample_rate * duration_sec)
    t = np.linspace(0, duration_sec, samples, endpoint=False)
    tone = (np.sin(2 * np.pi * 440 * t) * 16000).astype(np.int16)
    audio = np.column_stack([tone] * channels) if channels > 1 else tone
    wavfile.write(str(path), sample_rate, audio)
    return str(path)


@pytest.fixture
def wav_factory():
    """Factory writing test WAV files: wav_factory(path, duration_sec, ...)."""
    return write_test_wav


@pytest.fixture
def recording_path(tmp_path):
    """Fixed recording path inside the test's temp directory."""
    return str(tmp_path / "whisper_record.wav")


@pytest.fixture
def test_wav(tmp_path):
    """A one second CD-quality WAV file."""
    return write_test_wav(tmp_path / "recording.wav")


# =============================================================================
# SESSION FIXTURES
# =============================================================================

@pytest.fixture
def mock_recorder():
    """Recorder double that never launches a process."""
    recorder = MagicMock(spec=AudioRecorder)
    recorder.stop.return_value = True
    recorder.get_duration.return_value = 1.0
    return recorder


@pytest.fixture
def mock_transcriber():
    """Transcriber double returning a fixed transcript."""
    transcriber = MagicMock(spec=Transcriber)
    transcriber.transcribe.return_value = TranscriptionResult(text="hello world")
    return transcriber


@pytest.fixture
def mock_output():
    """Clipboard double."""
    return MagicMock(spec=OutputHandler)


@pytest.fixture
def mock_refiner():
    """Refiner double returning a fixed refinement."""
    refiner = MagicMock(spec=Refiner)
    refiner.refine.return_value = "Hello, world.\n"
    return refiner


@pytest.fixture
def session():
    return Session(api_key="test-api-key")


@pytest.fixture
def controller(session, mock_recorder, mock_transcriber, mock_output, mock_refiner,
               recording_path):
    """SessionController with all collaborators mocked and inline task execution."""
    return SessionController(
        session=session,
        recorder=mock_recorder,
        transcriber=mock_transcriber,
        output=mock_output,
        refiner=mock_refiner,
        recording_path=recording_path,
    )
