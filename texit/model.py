"""Document model: logical rows with their rendered form."""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Union

from .constants import EditorConstants, TAB

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray]


@dataclass
class CursorPosition:
    """Cursor in document space: column and row indices into ``chars``."""
    cx: int = 0
    cy: int = 0


def render_row(chars: BytesLike, tab_stop: int = EditorConstants.TAB_STOP) -> bytearray:
    """Expand tabs so that each tab ends on a multiple of ``tab_stop``."""
    render = bytearray()
    for byte in chars:
        if byte == TAB:
            render.append(ord(' '))
            while len(render) % tab_stop != 0:
                render.append(ord(' '))
        else:
            render.append(byte)
    return render


def row_cx_to_rx(chars: BytesLike, cx: int, tab_stop: int = EditorConstants.TAB_STOP) -> int:
    """Map a column in ``chars`` to the matching column in the rendered row."""
    rx = 0
    for byte in chars[:cx]:
        if byte == TAB:
            rx += (tab_stop - 1) - (rx % tab_stop)
        rx += 1
    return rx


class Row:
    """One logical line of the document.

    ``render`` is rebuilt from ``chars`` by ``update()`` after every change.
    """

    def __init__(self, chars: BytesLike = b"", tab_stop: int = EditorConstants.TAB_STOP):
        self.chars = bytearray(chars)
        self.tab_stop = tab_stop
        self.render = bytearray()
        self.update()

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def rsize(self) -> int:
        return len(self.render)

    def update(self) -> None:
        self.render = render_row(self.chars, self.tab_stop)

    def insert_char(self, at: int, c: int) -> None:
        """Insert byte ``c`` before column ``at``; out of range means append."""
        if at < 0 or at > self.size:
            at = self.size
        self.chars.insert(at, c)
        self.update()

    def cx_to_rx(self, cx: int) -> int:
        return row_cx_to_rx(self.chars, cx, self.tab_stop)

    def __repr__(self) -> str:
        return f"Row({bytes(self.chars)!r})"


class Document:
    """Ordered rows of text; row index is the 0-based line number."""

    def __init__(self, lines: Iterable[BytesLike] = (), tab_stop: int = EditorConstants.TAB_STOP):
        self.tab_stop = tab_stop
        self.rows: List[Row] = []
        for line in lines:
            self.append_row(line)

    @classmethod
    def from_lines(cls, lines: Iterable[BytesLike],
                   tab_stop: int = EditorConstants.TAB_STOP) -> "Document":
        return cls(lines, tab_stop=tab_stop)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def row_length(self, cy: int) -> int:
        """Length of row ``cy``; 0 for the one-past-last position."""
        if 0 <= cy < len(self.rows):
            return self.rows[cy].size
        return 0

    def append_row(self, data: BytesLike = b"") -> Row:
        row = Row(data, self.tab_stop)
        self.rows.append(row)
        return row

    def insert_char(self, cursor: CursorPosition, c: int) -> None:
        """Insert byte ``c`` at the cursor and advance the cursor by one.

        On the line just past the last row a new empty row is appended first.
        """
        if cursor.cy == self.row_count:
            self.append_row()
        row = self.rows[cursor.cy]
        at = cursor.cx if 0 <= cursor.cx <= row.size else row.size
        row.insert_char(at, c)
        cursor.cx = at + 1

    def cx_to_rx(self, cursor: CursorPosition) -> int:
        if cursor.cy >= self.row_count:
            return 0
        return self.rows[cursor.cy].cx_to_rx(cursor.cx)

    def to_bytes(self) -> bytes:
        """Serialize: every row followed by a single newline."""
        return b"".join(bytes(row.chars) + b"\n" for row in self.rows)

    @classmethod
    def load(cls, filename: str, tab_stop: int = EditorConstants.TAB_STOP) -> "Document":
        """Load a document from a file; raises OSError on failure."""
        doc = cls(read_lines(filename), tab_stop=tab_stop)
        logger.info(f"Loaded {doc.row_count} lines from {filename}")
        return doc

    def save(self, filename: str) -> int:
        """Write the document to ``filename``; raises OSError on failure.

        Returns:
            Number of bytes written
        """
        return write_file(filename, self.to_bytes())


def read_lines(filename: str) -> List[bytes]:
    """Read a file as lines with trailing newline and carriage return stripped."""
    lines = []
    with open(filename, 'rb') as f:
        for line in f:
            lines.append(line.rstrip(b"\r\n"))
    return lines


def write_file(filename: str, data: bytes) -> int:
    """Truncate ``filename`` and write ``data`` to it.

    Returns:
        Number of bytes written
    """
    fd = os.open(filename, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        os.ftruncate(fd, len(data))
        view = memoryview(data)
        written = 0
        while written < len(data):
            written += os.write(fd, view[written:])
    finally:
        os.close(fd)
    logger.info(f"Wrote {written} bytes to {filename}")
    return written
