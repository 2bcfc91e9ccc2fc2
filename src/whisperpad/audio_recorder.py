"""
Audio Recorder Module
Runs an external capture process that writes microphone audio to a WAV file.
"""

import logging
import subprocess
from typing import List, Optional

from scipy.io import wavfile

from whisperpad.exceptions import AudioRecordingError


logger = logging.getLogger(__name__)


class AudioRecorder:
    """
    Starts and stops a background ``arecord`` process.

    The recorder owns no audio data, only the process lifecycle. The handle
    of the process launched by ``start()`` is retained so ``stop()`` only
    ever terminates the capture this recorder started.
    """

    # CD quality (16-bit stereo, 44.1 kHz), WAV container, quiet
    CAPTURE_ARGS = ["-f", "cd", "-t", "wav", "-q"]

    def __init__(self, command: str = "arecord", stop_timeout: float = 1.0):
        """
        Initialize audio recorder.

        Args:
            command: Capture binary to launch.
            stop_timeout: Seconds to wait for the process to exit after it
                          is asked to terminate, before it is killed.
        """
        self.command = command
        self.stop_timeout = stop_timeout
        self.process: Optional[subprocess.Popen] = None
        self.path: Optional[str] = None

    def build_command(self, path: str) -> List[str]:
        """Return the argv used to record into ``path``."""
        return [self.command, *self.CAPTURE_ARGS, path]

    def start(self, path: str) -> None:
        """
        Begin capturing audio into ``path``, overwriting any previous file.

        Args:
            path: Output WAV file.

        Raises:
            AudioRecordingError: If the capture process cannot be launched.
        """
        if self.is_recording:
            logger.warning("Capture already running, stopping it before restarting")
            self.stop()

        argv = self.build_command(path)
        try:
            self.process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            self.process = None
            raise AudioRecordingError(f"Failed to start recording with {self.command}: {e}") from e

        self.path = path
        logger.info(f"Recording started (pid={self.process.pid}) -> {path}")

    def stop(self) -> bool:
        """
        Terminate the capture process started by ``start()``.

        Returns:
            True if a capture process was signalled, False if none was running.

        Raises:
            AudioRecordingError: If the termination request fails.
        """
        process = self.process
        if process is None:
            return False

        self.process = None

        if process.poll() is not None:
            stderr = self._read_stderr(process)
            logger.warning(
                f"Capture process exited early with code {process.returncode}"
                + (f": {stderr}" if stderr else "")
            )
            return False

        try:
            process.terminate()
        except OSError as e:
            raise AudioRecordingError(f"Failed to stop recording: {e}") from e

        try:
            process.wait(timeout=self.stop_timeout)
        except subprocess.TimeoutExpired:
            logger.warning(
                f"Capture process {process.pid} did not exit within {self.stop_timeout}s, killing it"
            )
            process.kill()
            process.wait()
        finally:
            if process.stderr:
                process.stderr.close()

        logger.info(f"Recording stopped (pid={process.pid})")
        return True

    @staticmethod
    def _read_stderr(process: subprocess.Popen) -> str:
        if not process.stderr:
            return ""
        try:
            return process.stderr.read().decode("utf-8", errors="replace").strip()
        except (OSError, ValueError):
            return ""
        finally:
            process.stderr.close()

    @staticmethod
    def get_duration(path: str) -> float:
        """
        Return the duration of a finished recording in seconds.

        Returns 0.0 if the file is missing or not a readable WAV file.
        """
        try:
            # Memory-mapped so only the header is actually read
            sample_rate, data = wavfile.read(path, mmap=True)
        except (OSError, ValueError) as e:
            logger.debug(f"Could not read recording {path}: {e}")
            return 0.0
        if sample_rate <= 0:
            return 0.0
        return data.shape[0] / sample_rate

    @property
    def is_recording(self) -> bool:
        """Whether the capture process is currently running."""
        return self.process is not None and self.process.poll() is None
