"""Terminal interface using Blessed for raw mode and cursor probing."""

import errno
import logging
import os
import select
import sys
import termios
from typing import Optional

import blessed

from .constants import Escape

logger = logging.getLogger(__name__)


class TerminalError(Exception):
    """Unrecoverable terminal failure; the editor cannot keep running."""


class TerminalInterface:
    """Raw byte I/O on the controlling terminal.

    Acts as the decoder's byte source (``read``) and the compositor's output
    sink (``write``).
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 input_fd: Optional[int] = None, output_fd: Optional[int] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.input_fd = sys.stdin.fileno() if input_fd is None else input_fd
        self.output_fd = sys.stdout.fileno() if output_fd is None else output_fd
        self._raw_context = None
        self.is_raw = False

    def setup(self):
        """Enter raw mode."""
        try:
            self._raw_context = self.term.raw()
            self._raw_context.__enter__()
        except (termios.error, OSError) as e:
            self._raw_context = None
            raise TerminalError(f"tcsetattr: {e}") from e
        self.is_raw = True

    def cleanup(self):
        """Clear the screen and leave raw mode."""
        try:
            self.clear_screen()
        except TerminalError as e:
            logger.warning(f"Could not clear screen on exit: {e}")
        if self._raw_context is not None:
            try:
                self._raw_context.__exit__(None, None, None)
            except (termios.error, OSError) as e:
                raise TerminalError(f"tcsetattr: {e}") from e
            finally:
                self._raw_context = None
                self.is_raw = False

    def clear_screen(self):
        """Clear the entire screen and home the cursor."""
        self.write(Escape.CLEAR_SCREEN + Escape.CURSOR_HOME)

    def read(self, timeout: Optional[float] = None) -> bytes:
        """Read a single byte.

        Args:
            timeout: Seconds to wait (None blocks until input arrives)

        Returns:
            One byte, or b'' if the timeout expired first
        """
        try:
            ready, _, _ = select.select([self.input_fd], [], [], timeout)
            if not ready:
                return b""
            data = os.read(self.input_fd, 1)
        except InterruptedError:
            return b""
        except OSError as e:
            if e.errno == errno.EAGAIN:
                return b""
            raise TerminalError(f"read: {e}") from e
        if not data:
            raise TerminalError("read: end of input")
        return data

    def write(self, data: bytes) -> None:
        """Write a whole buffer to the terminal."""
        view = memoryview(data)
        try:
            while view:
                written = os.write(self.output_fd, view)
                view = view[written:]
        except OSError as e:
            raise TerminalError(f"write: {e}") from e

    def get_window_size(self) -> tuple[int, int]:
        """Return terminal (rows, cols).

        Falls back to moving the cursor to the bottom-right corner and asking
        the terminal where it ended up when the size cannot be queried.
        """
        try:
            size = os.get_terminal_size(self.output_fd)
            if size.columns > 0 and size.lines > 0:
                logger.debug(f"Terminal size {size.lines}x{size.columns}")
                return size.lines, size.columns
        except OSError as e:
            logger.debug(f"Terminal size query failed: {e}")
        return self._probe_window_size()

    def _probe_window_size(self) -> tuple[int, int]:
        self.write(Escape.CURSOR_FORWARD_MAX + Escape.CURSOR_DOWN_MAX)
        row, col = self.term.get_location(timeout=1)
        if row < 0 or col < 0:
            raise TerminalError("getWindowSize: no cursor position report")
        # get_location is 0-based
        logger.debug(f"Probed terminal size {row + 1}x{col + 1}")
        return row + 1, col + 1
