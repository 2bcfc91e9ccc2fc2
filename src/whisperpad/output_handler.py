"""
Output Handler Module
Copies transcripts to the system clipboard.
"""

import logging
import os
import shutil
import subprocess

import pyperclip

from whisperpad.exceptions import OutputError


logger = logging.getLogger(__name__)


def is_wayland_session() -> bool:
    """
    Check if the current session is running on Wayland.

    Returns:
        True if running on Wayland, False otherwise (X11 or unknown).
    """
    session_type = os.environ.get("XDG_SESSION_TYPE", "").lower()
    return session_type == "wayland" or (
        not session_type and bool(os.environ.get("WAYLAND_DISPLAY"))
    )


class OutputHandler:
    """Handles output of transcribed text to the clipboard."""

    def __init__(self):
        self._use_wl_copy = is_wayland_session() and shutil.which("wl-copy") is not None
        logger.debug(f"OutputHandler initialized: wl-copy={self._use_wl_copy}")

    def copy_to_clipboard(self, text: str) -> None:
        """
        Copy text to system clipboard.

        Uses wl-copy on Wayland if available, otherwise pyperclip.

        Args:
            text: Text to copy to clipboard

        Raises:
            OutputError: If clipboard operation fails
        """
        if not text:
            return

        if self._use_wl_copy:
            try:
                self._copy_with_wl_copy(text)
                return
            except OutputError as e:
                logger.warning(f"wl-copy failed, falling back to pyperclip: {e}")

        try:
            pyperclip.copy(text)
        except Exception as e:
            raise OutputError(f"Failed to copy to clipboard: {e}") from e

    def _copy_with_wl_copy(self, text: str) -> None:
        try:
            subprocess.run(
                ["wl-copy", "--"],
                input=text.encode("utf-8"),
                check=True,
                capture_output=True,
                timeout=5,
            )
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode(errors="replace") if e.stderr else str(e)
            raise OutputError(f"wl-copy failed: {stderr}") from e
        except subprocess.TimeoutExpired as e:
            raise OutputError("wl-copy timed out") from e
        except OSError as e:
            raise OutputError(f"wl-copy could not be run: {e}") from e
