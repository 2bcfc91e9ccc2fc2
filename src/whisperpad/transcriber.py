"""
Transcriber Module
Uploads a recorded WAV file to a Whisper speech-to-text API.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import requests

from whisperpad.config import DEFAULT_MODEL, DEFAULT_TRANSCRIPTION_URL
from whisperpad.exceptions import TranscriptionError


logger = logging.getLogger(__name__)


@dataclass
class TranscriptionResult:
    """Outcome of a transcription request."""

    text: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> "TranscriptionResult":
        return cls(text="", error=error)


class Transcriber:
    """Transcribes audio files using the OpenAI Whisper API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: str = DEFAULT_TRANSCRIPTION_URL,
        model: str = DEFAULT_MODEL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize transcriber.

        Args:
            api_key: API key. If None, reads from OPENAI_API_KEY env var.
            url: Transcription endpoint.
            model: Model name sent with each request.
            timeout: Request timeout in seconds. None waits indefinitely.
            session: Optional requests session (for connection reuse and testing).
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self.url = url
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    def transcribe(self, file_path: str, api_key: Optional[str] = None) -> TranscriptionResult:
        """
        Transcribe a WAV file to text.

        Never raises: every failure is reported through the returned result.

        Args:
            file_path: Path of the recorded WAV file.
            api_key: Overrides the key given at construction.

        Returns:
            TranscriptionResult with the transcript, or with ``error`` set.
        """
        try:
            text = self._request(file_path, api_key or self.api_key)
        except TranscriptionError as e:
            logger.error(f"Transcription failed: {e}")
            return TranscriptionResult.failure(str(e))

        logger.info(f"Transcription received ({len(text)} chars)")
        return TranscriptionResult(text=text)

    def _request(self, file_path: str, api_key: str) -> str:
        """
        Send the multipart request and return the response body.

        Raises:
            TranscriptionError: On a missing file, transport error, non-2xx
                                status or undecodable body.
        """
        headers = {"Authorization": f"Bearer {api_key}"}
        data = {"response_format": "text", "model": self.model}

        try:
            with open(file_path, "rb") as audio_file:
                files = {"file": (os.path.basename(file_path), audio_file, "audio/wav")}
                logger.debug(f"POST {self.url} ({file_path})")
                response = self.session.post(
                    self.url,
                    headers=headers,
                    data=data,
                    files=files,
                    timeout=self.timeout,
                )
        # RequestException derives from OSError, so it must be caught first
        except requests.RequestException as e:
            raise TranscriptionError(f"Request to {self.url} failed: {e}") from e
        except OSError as e:
            raise TranscriptionError(f"Could not read recording {file_path}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TranscriptionError(
                f"API returned {response.status_code}: {response.text[:200]}"
            )

        try:
            body = response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TranscriptionError(f"Could not decode transcription response: {e}") from e

        # Whisper ends text responses with a newline; the rest is the transcript
        return body.rstrip("\n")
