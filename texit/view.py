"""Viewport tracking: keeps the cursor inside the visible window."""

from .model import CursorPosition, Document


class ScrollView:
    """Document-space origin of the screen's top-left cell.

    ``recompute`` only scrolls as far as needed to bring the cursor back on
    screen. Call it once per frame, after the cursor has moved and before
    the frame is composed.
    """

    def __init__(self):
        self.row_offset = 0
        self.col_offset = 0
        self.rx = 0

    def recompute(self, cursor: CursorPosition, document: Document,
                  screen_rows: int, screen_cols: int) -> None:
        self.rx = document.cx_to_rx(cursor)

        # An empty text area has nothing to scroll into view
        if screen_rows > 0:
            if cursor.cy < self.row_offset:
                self.row_offset = cursor.cy
            if cursor.cy >= self.row_offset + screen_rows:
                self.row_offset = cursor.cy - screen_rows + 1
        if screen_cols > 0:
            if self.rx < self.col_offset:
                self.col_offset = self.rx
            if self.rx >= self.col_offset + screen_cols:
                self.col_offset = self.rx - screen_cols + 1

    def screen_cursor(self, cursor: CursorPosition) -> tuple[int, int]:
        """Return the cursor's 0-based (row, col) on screen."""
        return (cursor.cy - self.row_offset, self.rx - self.col_offset)
