"""WhisperPad UI components."""

from whisperpad.ui.app import WhisperPadUI

__all__ = ["WhisperPadUI"]
