"""
Task Runners

Blocking work (HTTP upload, external commands) is handed to a runner together
with a completion callback. The completion callback is always invoked on the
thread that owns the session, so session state never needs locking.
"""

import logging
import queue
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Work = Callable[[], Any]
Completion = Callable[[Any, Optional[Exception]], None]


class InlineTaskRunner:
    """Runs work synchronously in the calling thread."""

    def submit(self, work: Work, on_done: Completion) -> None:
        try:
            result = work()
        except Exception as e:
            on_done(None, e)
        else:
            on_done(result, None)


class ThreadedTaskRunner:
    """
    Runs work on daemon threads and queues completions for the owner thread.

    The owner thread must call ``poll()`` regularly (the UI does so from a
    tkinter ``after`` loop). Work still running at shutdown is abandoned.
    """

    def __init__(self):
        self._completions: "queue.Queue[tuple]" = queue.Queue()
        self._pending = 0

    def submit(self, work: Work, on_done: Completion) -> None:
        self._pending += 1
        thread = threading.Thread(
            target=self._run,
            args=(work, on_done),
            name="whisperpad-task",
            daemon=True,
        )
        thread.start()

    def _run(self, work: Work, on_done: Completion) -> None:
        try:
            result = work()
        except Exception as e:
            logger.debug(f"Background task raised: {e!r}")
            self._completions.put((on_done, None, e))
        else:
            self._completions.put((on_done, result, None))

    def poll(self) -> int:
        """
        Deliver finished completions on the calling thread.

        Returns:
            Number of completions delivered.
        """
        delivered = 0
        while True:
            try:
                on_done, result, error = self._completions.get_nowait()
            except queue.Empty:
                return delivered
            self._pending -= 1
            delivered += 1
            on_done(result, error)

    @property
    def pending(self) -> int:
        """Number of submitted tasks whose completion has not been delivered."""
        return self._pending
