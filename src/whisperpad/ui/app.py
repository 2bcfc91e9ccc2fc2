"""
WhisperPad UI

A single tkinter window: status label, editable transcript area and the
Record/Stop, Copy and (when the refinement command exists) Refine buttons.
"""

import logging
import tkinter as tk
from typing import Optional

from whisperpad.exceptions import UIInitializationError
from whisperpad.session import Phase, Session, SessionController
from whisperpad.tasks import ThreadedTaskRunner


logger = logging.getLogger(__name__)


class WhisperPadUI:
    """
    Main window controller.

    Button presses are forwarded to the SessionController; the window is
    re-rendered from the Session whenever the controller reports a change.
    """

    WINDOW_TITLE = "WhisperPad"
    MIN_WIDTH = 640
    MIN_HEIGHT = 480
    POLL_INTERVAL_MS = 50
    PADDING = 8

    def __init__(
        self,
        controller: SessionController,
        runner: Optional[ThreadedTaskRunner] = None,
        root: Optional[tk.Tk] = None,
    ):
        """
        Initialize UI controller.

        Args:
            controller: Session state machine the buttons drive.
            runner: Threaded task runner whose completions this window
                    delivers. None when blocking work runs inline.
            root: Optional tkinter root window (for testing).
        """
        self.controller = controller
        self.runner = runner
        self._root = root
        self._status_label = None
        self._transcript = None
        self._record_button = None
        self._copy_button = None
        self._refine_button = None
        self._poll_id: Optional[str] = None
        self._running = False

    def start(self) -> None:
        """
        Create the window and its widgets.

        Raises:
            UIInitializationError: If tkinter cannot open a window.
        """
        if self._running:
            return

        try:
            if self._root is None:
                self._root = tk.Tk()
            self._build_widgets()
        except tk.TclError as e:
            raise UIInitializationError(f"Cannot open window: {e}") from e

        self._running = True
        self.controller.add_listener(self.render)
        self.render(self.controller.session)

        if self.runner is not None:
            self._poll_id = self._root.after(self.POLL_INTERVAL_MS, self._poll)

    def _build_widgets(self) -> None:
        root = self._root
        root.title(self.WINDOW_TITLE)
        root.minsize(self.MIN_WIDTH, self.MIN_HEIGHT)
        root.protocol("WM_DELETE_WINDOW", self.stop)

        top = tk.Frame(root)
        top.pack(fill=tk.X, padx=self.PADDING, pady=self.PADDING)
        self._status_label = tk.Label(top, text="", anchor="w")
        self._status_label.pack(side=tk.LEFT, fill=tk.X, expand=True)

        body = tk.Frame(root)
        body.pack(fill=tk.BOTH, expand=True, padx=self.PADDING)
        scrollbar = tk.Scrollbar(body, orient=tk.VERTICAL)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        self._transcript = tk.Text(body, wrap=tk.WORD, yscrollcommand=scrollbar.set)
        self._transcript.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        scrollbar.config(command=self._transcript.yview)

        buttons = tk.Frame(root)
        buttons.pack(fill=tk.X, padx=self.PADDING, pady=self.PADDING)
        self._record_button = tk.Button(buttons, text="Record", command=self._on_record)
        self._record_button.pack(side=tk.LEFT)
        self._copy_button = tk.Button(buttons, text="Copy", command=self._on_copy)
        self._copy_button.pack(side=tk.LEFT, padx=self.PADDING)

        # Refine is only offered when the command resolved at startup
        if self.controller.refine_available:
            self._refine_button = tk.Button(buttons, text="Refine", command=self._on_refine)
            self._refine_button.pack(side=tk.LEFT)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, session: Session) -> None:
        """Update all widgets from the session state."""
        if not self._running:
            return

        self._status_label.config(text=session.status_text)

        if self._read_transcript() != session.transcript_text:
            self._transcript.delete("1.0", tk.END)
            self._transcript.insert("1.0", session.transcript_text)

        busy = session.phase == Phase.PROCESSING or session.refining
        self._record_button.config(
            text="Stop" if session.phase == Phase.RECORDING else "Record",
            state=tk.DISABLED if busy else tk.NORMAL,
        )
        if self._refine_button is not None:
            idle = session.phase == Phase.STOPPED and not session.refining
            self._refine_button.config(state=tk.NORMAL if idle else tk.DISABLED)

        # Flush so the status is visible before inline work blocks the loop
        self._root.update_idletasks()

    def _read_transcript(self) -> str:
        return self._transcript.get("1.0", "end-1c")

    # ------------------------------------------------------------------
    # Button handlers
    # ------------------------------------------------------------------

    def _sync_transcript(self) -> None:
        """Hand user edits of the transcript area to the session."""
        if self.controller.phase == Phase.STOPPED:
            self.controller.set_transcript(self._read_transcript())

    def _on_record(self) -> None:
        self._sync_transcript()
        self.controller.toggle_recording()

    def _on_copy(self) -> None:
        self._sync_transcript()
        self.controller.copy()

    def _on_refine(self) -> None:
        self._sync_transcript()
        self.controller.refine()

    def _poll(self) -> None:
        if not self._running:
            return
        self.runner.poll()
        self._poll_id = self._root.after(self.POLL_INTERVAL_MS, self._poll)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run_mainloop(self) -> None:
        """
        Run the tkinter mainloop on the current (main) thread.

        This blocks until stop() is called.
        """
        if not self._root:
            return
        self._root.mainloop()

    def stop(self) -> None:
        """Stop any recording and close the window."""
        if not self._running:
            return

        self._running = False
        self.controller.shutdown()

        if self._poll_id is not None:
            try:
                self._root.after_cancel(self._poll_id)
            except tk.TclError:
                pass
            self._poll_id = None

        try:
            self._root.destroy()
        except tk.TclError as e:
            logger.debug(f"Window already destroyed: {e}")

    @property
    def is_running(self) -> bool:
        """Whether the window is open."""
        return self._running
