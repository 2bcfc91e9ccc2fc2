"""
Configuration Module
Loads and validates settings from environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from whisperpad.exceptions import ConfigurationError


DEFAULT_RECORDING_PATH = "/tmp/whisper_record.wav"
DEFAULT_TRANSCRIPTION_URL = "https://api.openai.com/v1/audio/transcriptions"
DEFAULT_MODEL = "whisper-1"


@dataclass
class Config:
    """Application configuration from environment variables."""

    # Required
    api_key: str

    # Transcription
    transcription_url: str = DEFAULT_TRANSCRIPTION_URL
    model: str = DEFAULT_MODEL
    request_timeout: Optional[float] = None  # None = transport default, no timeout

    # Recording
    recording_path: str = DEFAULT_RECORDING_PATH
    capture_command: str = "arecord"
    stop_timeout: float = 1.0

    # Refinement
    refine_command: str = "ask"
    refine_reset_flag: str = "-c"

    # Behaviour
    auto_copy: bool = True
    background_tasks: bool = True
    debug: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load configuration from environment variables.

        Environment Variables:
            OPENAI_API_KEY: Required. Bearer token for the transcription API.
            WHISPERPAD_RECORDING_PATH: Optional. Fixed path of the recording (default: /tmp/whisper_record.wav).
            WHISPERPAD_TRANSCRIPTION_URL: Optional. Speech-to-text endpoint (default: OpenAI transcriptions).
            WHISPERPAD_MODEL: Optional. Transcription model (default: whisper-1).
            WHISPERPAD_REQUEST_TIMEOUT: Optional. HTTP timeout in seconds (default: no timeout).
            WHISPERPAD_CAPTURE_COMMAND: Optional. Audio capture binary (default: arecord).
            WHISPERPAD_STOP_TIMEOUT: Optional. Seconds to wait for the capture process to exit (default: 1.0).
            WHISPERPAD_REFINE_COMMAND: Optional. External refinement command (default: ask).
            WHISPERPAD_REFINE_RESET_FLAG: Optional. Flag that clears the refinement context (default: -c).
            WHISPERPAD_AUTO_COPY: Optional. Copy transcripts to the clipboard automatically (default: true).
            WHISPERPAD_BACKGROUND_TASKS: Optional. Run transcription off the UI thread (default: true).
            WHISPERPAD_DEBUG: Optional. Enable debug logging (default: false).

        Returns:
            Config instance with loaded values.

        Raises:
            ConfigurationError: If required configuration is missing or malformed.
        """
        load_dotenv()

        # Parse boolean environment variables
        def parse_bool(value: str, default: bool) -> bool:
            if not value:
                return default
            return value.lower() in ("true", "1", "yes")

        def parse_float(name: str, default: Optional[float]) -> Optional[float]:
            value = os.environ.get(name)
            if not value:
                return default
            try:
                return float(value)
            except ValueError:
                raise ConfigurationError(f"{name} must be a number. Got: {value}") from None

        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY environment variable is required.\n"
                "Set it in your .env file or export it:\n"
                "  export OPENAI_API_KEY=your_key_here"
            )

        return cls(
            api_key=api_key,
            transcription_url=os.environ.get("WHISPERPAD_TRANSCRIPTION_URL", DEFAULT_TRANSCRIPTION_URL),
            model=os.environ.get("WHISPERPAD_MODEL", DEFAULT_MODEL),
            request_timeout=parse_float("WHISPERPAD_REQUEST_TIMEOUT", None),
            recording_path=os.environ.get("WHISPERPAD_RECORDING_PATH", DEFAULT_RECORDING_PATH),
            capture_command=os.environ.get("WHISPERPAD_CAPTURE_COMMAND", "arecord"),
            stop_timeout=parse_float("WHISPERPAD_STOP_TIMEOUT", 1.0),
            refine_command=os.environ.get("WHISPERPAD_REFINE_COMMAND", "ask"),
            refine_reset_flag=os.environ.get("WHISPERPAD_REFINE_RESET_FLAG", "-c"),
            auto_copy=parse_bool(os.environ.get("WHISPERPAD_AUTO_COPY", ""), True),
            background_tasks=parse_bool(os.environ.get("WHISPERPAD_BACKGROUND_TASKS", ""), True),
            debug=parse_bool(os.environ.get("WHISPERPAD_DEBUG", ""), False),
        )

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of warning messages (empty if no warnings).

        Raises:
            ConfigurationError: If configuration values are invalid.
        """
        warnings = []

        if not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY must not be empty")

        if not self.transcription_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"WHISPERPAD_TRANSCRIPTION_URL must be an http(s) URL. Got: {self.transcription_url}"
            )

        if self.transcription_url.startswith("http://"):
            warnings.append(
                "WHISPERPAD_TRANSCRIPTION_URL uses plain http; the API key is sent unencrypted"
            )

        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigurationError("WHISPERPAD_REQUEST_TIMEOUT must be positive")

        if self.stop_timeout < 0:
            raise ConfigurationError("WHISPERPAD_STOP_TIMEOUT must be non-negative")

        if not self.capture_command.strip():
            raise ConfigurationError("WHISPERPAD_CAPTURE_COMMAND must not be empty")

        if not self.refine_command.strip():
            raise ConfigurationError("WHISPERPAD_REFINE_COMMAND must not be empty")

        path = Path(self.recording_path)
        if not path.is_absolute():
            raise ConfigurationError(
                f"WHISPERPAD_RECORDING_PATH must be an absolute path. Got: {self.recording_path}"
            )
        if path.is_dir():
            raise ConfigurationError(
                f"WHISPERPAD_RECORDING_PATH points to a directory: {self.recording_path}"
            )
        if path.suffix.lower() != ".wav":
            warnings.append(
                f"Recording path {self.recording_path} does not end in .wav; "
                "the capture process always writes WAV data"
            )

        return warnings
