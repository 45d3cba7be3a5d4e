"""Main editor controller: the read-decode-mutate-render cycle."""

import errno
import logging
import time
from enum import Enum
from typing import Optional

from .commands import CommandRegistry
from .compositor import Compositor, StatusMessage
from .config import EditorSettings
from .constants import EditorConstants
from .keyboard import KeyEvent, create_key_decoder
from .model import CursorPosition, Document
from .terminal import TerminalError, TerminalInterface
from .view import ScrollView

logger = logging.getLogger(__name__)


class SessionState(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


class EditSession:
    """Owns the document, cursor, viewport and status message.

    Args:
        terminal: Byte source, output sink and geometry provider.
            Defaults to a TerminalInterface on stdin/stdout.
        settings: Editor settings (defaults if omitted)
        screen_size: (rows, cols) of the terminal; queried from the
            terminal on ``run()`` when omitted
    """

    def __init__(self, terminal=None, settings: Optional[EditorSettings] = None,
                 screen_size: Optional[tuple[int, int]] = None):
        self.terminal = terminal if terminal is not None else TerminalInterface()
        self.settings = settings or EditorSettings()
        self.decoder = create_key_decoder(self.terminal, self.settings.escape_timeout)
        self.command_registry = CommandRegistry()
        self.document = Document(tab_stop=self.settings.tab_stop)
        self.cursor = CursorPosition()
        self.view = ScrollView()
        self.filename: Optional[str] = None
        self.status = StatusMessage("", 0.0)
        self.state = SessionState.RUNNING
        self.screen_rows = 0
        self.screen_cols = 0
        self.compositor: Optional[Compositor] = None
        if screen_size is not None:
            self.set_screen_size(*screen_size)

    @property
    def running(self) -> bool:
        return self.state == SessionState.RUNNING

    def set_screen_size(self, rows: int, cols: int) -> None:
        """Size the text area; the bottom two rows hold the status and message bars.

        Terminals shorter than the two bars leave an empty text area.
        """
        self.screen_rows = max(rows - EditorConstants.STATUS_BAR_ROWS, 0)
        self.screen_cols = max(cols, 1)
        self.compositor = Compositor(
            self.screen_rows, self.screen_cols,
            message_timeout=self.settings.message_timeout,
        )

    def load_file(self, filename: str) -> None:
        """Load a file into the editor.

        A file that does not exist yet starts an empty document that will be
        created on save. Other I/O errors propagate.
        """
        self.filename = filename
        try:
            self.document = Document.load(filename, tab_stop=self.settings.tab_stop)
        except FileNotFoundError:
            logger.info(f"{filename} does not exist, starting empty document")
            self.document = Document(tab_stop=self.settings.tab_stop)
        self.cursor = CursorPosition()
        self.view = ScrollView()

    def save_file(self) -> bool:
        """Handle Ctrl-S. Failures are reported on the message bar only.

        Returns:
            True if save succeeded, False otherwise
        """
        if not self.filename:
            self.set_status_message(EditorConstants.NO_FILENAME_MESSAGE)
            return False
        try:
            written = self.document.save(self.filename)
        except PermissionError as e:
            logger.error(f"Saving {self.filename} failed: {e}")
            self.set_status_message(EditorConstants.SAVE_ERROR_MESSAGE.format("Permission denied"))
            return False
        except OSError as e:
            logger.error(f"Saving {self.filename} failed: {e}")
            if e.errno == errno.ENOSPC:
                reason = "No space left on device"
            else:
                reason = e.strerror or str(e)
            self.set_status_message(EditorConstants.SAVE_ERROR_MESSAGE.format(reason))
            return False
        self.set_status_message(EditorConstants.SAVED_MESSAGE.format(written))
        return True

    def set_status_message(self, text: str, now: Optional[float] = None) -> None:
        self.status = StatusMessage(text, time.time() if now is None else now)

    def quit(self) -> None:
        self.state = SessionState.TERMINATED

    def handle_key(self, key_event: KeyEvent) -> None:
        """Dispatch one key event to its command."""
        if not self.running:
            return
        self.command_registry.execute(self, key_event)

    def process_keypress(self) -> None:
        """Read one key from the terminal and apply it."""
        self.handle_key(self.decoder.next_key())

    def compose_frame(self, now: Optional[float] = None) -> bytes:
        """Scroll the cursor into view, then compose the frame."""
        assert self.compositor is not None, "screen size not set"
        self.view.recompute(self.cursor, self.document, self.screen_rows, self.screen_cols)
        return self.compositor.render(
            self.document, self.cursor, self.view,
            filename=self.filename, status=self.status, now=now,
        )

    def refresh_screen(self, now: Optional[float] = None) -> None:
        self.terminal.write(self.compose_frame(now))

    def run(self):
        """Run the main editor loop until Ctrl-Q."""
        self.terminal.setup()
        try:
            if self.compositor is None:
                self.set_screen_size(*self.terminal.get_window_size())
            self.set_status_message(EditorConstants.HELP_MESSAGE)
            while self.running:
                self.refresh_screen()
                self.process_keypress()
        except TerminalError:
            self.state = SessionState.TERMINATED
            raise
        finally:
            self.terminal.cleanup()
