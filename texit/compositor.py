"""Frame composition: one escape-sequence buffer per screen refresh."""

import time
from dataclasses import dataclass, field
from typing import Optional

from .constants import EditorConstants, Escape
from .model import CursorPosition, Document
from .view import ScrollView


@dataclass
class StatusMessage:
    """Text for the message bar and the wall-clock time it was issued."""
    text: str = ""
    time: float = field(default_factory=time.time)

    def is_visible(self, now: float, timeout: float = EditorConstants.MESSAGE_TIMEOUT) -> bool:
        return bool(self.text) and now - self.time < timeout


class Compositor:
    """Builds a complete frame for the output sink.

    Args:
        screen_rows: Rows available for text (terminal rows minus the bars)
        screen_cols: Terminal width
        message_timeout: Seconds before a status message disappears
    """

    def __init__(self, screen_rows: int, screen_cols: int,
                 message_timeout: float = EditorConstants.MESSAGE_TIMEOUT,
                 version: str = EditorConstants.VERSION):
        self.screen_rows = screen_rows
        self.screen_cols = screen_cols
        self.message_timeout = message_timeout
        self.version = version

    def render(self, document: Document, cursor: CursorPosition, view: ScrollView,
               filename: Optional[str] = None, status: Optional[StatusMessage] = None,
               now: Optional[float] = None) -> bytes:
        """Compose a frame. ``view`` must already be recomputed for ``cursor``."""
        if now is None:
            now = time.time()
        buf = bytearray()
        buf += Escape.HIDE_CURSOR
        buf += Escape.CURSOR_HOME
        self.draw_rows(buf, document, view)
        self.draw_status_bar(buf, document, cursor, filename)
        self.draw_message_bar(buf, status, now)
        screen_y, screen_x = view.screen_cursor(cursor)
        # With no text rows the cursor sits on the status bar
        screen_y = min(max(screen_y, 0), max(self.screen_rows - 1, 0))
        screen_x = min(max(screen_x, 0), self.screen_cols - 1)
        buf += Escape.cursor_position(screen_y + 1, screen_x + 1)
        buf += Escape.SHOW_CURSOR
        return bytes(buf)

    def welcome_line(self) -> bytes:
        welcome = EditorConstants.WELCOME_MESSAGE.format(self.version).encode()
        welcome = welcome[:self.screen_cols]
        padding = (self.screen_cols - len(welcome)) // 2
        line = bytearray()
        if padding:
            line += b"~"
            padding -= 1
        line += b" " * padding
        line += welcome
        return bytes(line)

    def draw_rows(self, buf: bytearray, document: Document, view: ScrollView) -> None:
        for y in range(self.screen_rows):
            filerow = y + view.row_offset
            if filerow >= document.row_count:
                if document.row_count == 0 and y == self.screen_rows // 3:
                    buf += self.welcome_line()
                else:
                    buf += b"~"
            else:
                render = document.rows[filerow].render
                start = min(view.col_offset, len(render))
                buf += render[start:start + self.screen_cols]
            buf += Escape.CLEAR_LINE
            buf += Escape.CRLF

    def draw_status_bar(self, buf: bytearray, document: Document,
                        cursor: CursorPosition, filename: Optional[str]) -> None:
        name = (filename or EditorConstants.NO_NAME)[:EditorConstants.FILENAME_DISPLAY_WIDTH]
        left = f"{name} - {document.row_count} lines".encode()
        right = f"{cursor.cy + 1}/{document.row_count}".encode()
        left = left[:self.screen_cols]

        buf += Escape.INVERSE
        buf += left
        length = len(left)
        while length < self.screen_cols:
            if self.screen_cols - length == len(right):
                buf += right
                break
            buf += b" "
            length += 1
        buf += Escape.NORMAL
        buf += Escape.CRLF

    def draw_message_bar(self, buf: bytearray, status: Optional[StatusMessage], now: float) -> None:
        buf += Escape.CLEAR_LINE
        if status is not None and status.is_visible(now, self.message_timeout):
            buf += status.text.encode()[:self.screen_cols]
