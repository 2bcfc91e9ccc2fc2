"""
WhisperPad - Speech-to-Text

Run from a source checkout with ``python main.py``.
"""

from whisperpad.cli import main


if __name__ == "__main__":
    main()
