"""
Custom Exceptions for WhisperPad application.

This module defines the exception hierarchy used throughout the application.
"""


class WhisperPadError(Exception):
    """Base exception for all WhisperPad errors."""
    pass


class ConfigurationError(WhisperPadError, ValueError):
    """Error in application configuration."""
    pass


class AudioRecordingError(WhisperPadError):
    """Error starting or stopping the audio capture process."""
    pass


class TranscriptionError(WhisperPadError):
    """Error transcribing audio via API."""
    pass


class RefinementError(WhisperPadError):
    """Error launching the external refinement command."""
    pass


class OutputError(WhisperPadError):
    """Error copying text to the clipboard."""
    pass


class UIInitializationError(WhisperPadError):
    """Error when UI fails to initialize."""
    pass
