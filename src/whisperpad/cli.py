"""
WhisperPad - Speech-to-Text

Application entry point.
Wires the recorder, transcriber, refiner and clipboard into the session
state machine and runs the window.
"""

import logging
import signal
import sys
from typing import Optional

from whisperpad.audio_recorder import AudioRecorder
from whisperpad.config import Config
from whisperpad.exceptions import UIInitializationError
from whisperpad.output_handler import OutputHandler
from whisperpad.refiner import Refiner
from whisperpad.session import Session, SessionController
from whisperpad.tasks import ThreadedTaskRunner
from whisperpad.transcriber import Transcriber
from whisperpad.ui import WhisperPadUI


logger = logging.getLogger(__name__)


def get_refiner(config: Config) -> Optional[Refiner]:
    """Return a Refiner if the refinement command is installed, else None."""
    refiner = Refiner(command=config.refine_command, reset_flag=config.refine_reset_flag)
    if refiner.is_available():
        logger.info(f"Refinement command found: {config.refine_command}")
        return refiner
    logger.info(f"Refinement command '{config.refine_command}' not found, refine disabled")
    return None


def build_app(config: Config) -> WhisperPadUI:
    """
    Create all components for a validated configuration.

    Args:
        config: Application configuration.

    Returns:
        The (not yet started) window controller.
    """
    session = Session(api_key=config.api_key)
    runner = ThreadedTaskRunner() if config.background_tasks else None

    controller = SessionController(
        session=session,
        recorder=AudioRecorder(command=config.capture_command, stop_timeout=config.stop_timeout),
        transcriber=Transcriber(
            api_key=config.api_key,
            url=config.transcription_url,
            model=config.model,
            timeout=config.request_timeout,
        ),
        output=OutputHandler(),
        refiner=get_refiner(config),
        recording_path=config.recording_path,
        auto_copy=config.auto_copy,
        runner=runner,
    )
    logger.debug(
        f"Session controller ready (recording_path={config.recording_path}, "
        f"background_tasks={config.background_tasks}, auto_copy={config.auto_copy})"
    )

    return WhisperPadUI(controller, runner=runner)


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        debug: If True, enable debug-level logging
    """
    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=format_str,
        datefmt=date_format
    )

    # Also log to file if in debug mode
    if debug:
        file_handler = logging.FileHandler("whisperpad.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(format_str, datefmt=date_format))
        logging.getLogger().addHandler(file_handler)


def main() -> None:
    """Main entry point."""
    # Load and validate configuration
    try:
        config = Config.from_env()
        setup_logging(debug=config.debug)
        warnings = config.validate()
        for warning in warnings:
            print(f"Warning: {warning}")
            logger.warning(warning)
    except ValueError as e:
        setup_logging()
        print(f"Error: {e}")
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    logger.info("WhisperPad starting...")

    try:
        app = build_app(config)
        app.start()
    except UIInitializationError as e:
        print(f"Error: {e}")
        logger.error(f"UI initialization error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: Failed to initialize application: {e}")
        logger.exception(f"Unexpected initialization error: {e}")
        sys.exit(1)

    # Set up signal handlers for graceful shutdown
    def signal_handler(sig, frame):
        logger.info("Received shutdown signal")
        app.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        logger.info("WhisperPad running")
        app.run_mainloop()
    except Exception as e:
        print(f"Fatal error: {e}")
        logger.exception(f"Fatal error during execution: {e}")
        app.stop()
        sys.exit(1)

    app.stop()
    logger.info("WhisperPad stopped")


if __name__ == "__main__":
    main()
