"""Allow running as ``python -m whisperpad``."""

from whisperpad.cli import main

if __name__ == "__main__":
    main()
