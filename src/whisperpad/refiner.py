"""
Refiner Module
Rewrites a transcript with an external command-line assistant.

The command is optional: its presence is probed once at startup and the
refine action is only offered when it resolves on PATH.
"""

import logging
import shutil
import subprocess

from whisperpad.exceptions import RefinementError


logger = logging.getLogger(__name__)


class Refiner:
    """Pipes a transcript through an external rewriting command."""

    PROMPT = (
        "refine the following transcript, keeping the original style of the message. "
        "Remove redundant information and clean up the text: {text}. "
        "Return only the refined text"
    )

    def __init__(self, command: str = "ask", reset_flag: str = "-c"):
        """
        Initialize refiner.

        Args:
            command: External command that takes a single instruction argument
                     and prints the rewritten text.
            reset_flag: Flag that makes the command clear its conversation context.
        """
        self.command = command
        self.reset_flag = reset_flag

    def is_available(self) -> bool:
        """Whether the refinement command is resolvable on PATH."""
        return shutil.which(self.command) is not None

    def build_prompt(self, transcript: str) -> str:
        """Embed the transcript verbatim in the refinement instruction."""
        return self.PROMPT.format(text=transcript)

    def refine(self, transcript: str) -> str:
        """
        Refine a transcript.

        Exactly one cleanup invocation follows, whether or not the
        refinement itself succeeded.

        Args:
            transcript: Text to rewrite.

        Returns:
            The command's standard output, invalid bytes replaced. May be
            empty if the command failed.

        Raises:
            RefinementError: If the command cannot be launched.
        """
        try:
            result = subprocess.run(
                [self.command, self.build_prompt(transcript)],
                stdin=subprocess.DEVNULL,
                capture_output=True,
            )
        except OSError as e:
            raise RefinementError(f"Failed to execute {self.command}: {e}") from e
        finally:
            self.reset_context()

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            logger.warning(
                f"{self.command} exited with code {result.returncode}"
                + (f": {stderr}" if stderr else "")
            )

        refined = result.stdout.decode("utf-8", errors="replace")
        logger.info(f"Refinement produced {len(refined)} chars")
        return refined

    def reset_context(self) -> None:
        """Ask the command to drop its conversation context (fire-and-forget)."""
        try:
            subprocess.Popen(
                [self.command, self.reset_flag],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning(f"{self.command} context cleanup failed: {e}")
