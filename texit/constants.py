"""Constants and configuration defaults for the texit editor."""


class EditorConstants:
    """Central configuration constants for the editor."""

    VERSION = "0.0.1"

    # Document layout
    TAB_STOP = 4  # Tabs expand to the next multiple of this column

    # Keyboard timing
    ESCAPE_SEQUENCE_TIMEOUT = 0.1  # Wait for the rest of an escape sequence (seconds)

    # Status/message bars
    MESSAGE_TIMEOUT = 5.0  # Seconds a status message stays on the message bar
    FILENAME_DISPLAY_WIDTH = 20
    NO_NAME = "[No Name]"
    STATUS_BAR_ROWS = 2  # Status bar + message bar

    # Messages
    WELCOME_MESSAGE = "Texit editor -- version {}"
    HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"
    SAVED_MESSAGE = "{} bytes written to disk"
    SAVE_ERROR_MESSAGE = "Can't save! I/O error: {}"
    NO_FILENAME_MESSAGE = "No filename; start texit with a file path to save"


class Escape:
    """VT100 output sequences used when composing a frame."""

    CLEAR_SCREEN = b"\x1b[2J"
    CURSOR_HOME = b"\x1b[H"
    CLEAR_LINE = b"\x1b[K"
    HIDE_CURSOR = b"\x1b[?25l"
    SHOW_CURSOR = b"\x1b[?25h"
    INVERSE = b"\x1b[7m"
    NORMAL = b"\x1b[m"
    CURSOR_FORWARD_MAX = b"\x1b[999C"
    CURSOR_DOWN_MAX = b"\x1b[999B"
    REQUEST_CURSOR_POSITION = b"\x1b[6n"
    CRLF = b"\r\n"

    @staticmethod
    def cursor_position(row: int, col: int) -> bytes:
        """Move the cursor to a 1-based screen position."""
        return b"\x1b[%d;%dH" % (row, col)


ESC = 0x1B
DEL = 127
TAB = 9
ENTER = 13


def ctrl_key(ch: str) -> int:
    """Return the byte a terminal sends for Ctrl plus ``ch``."""
    return ord(ch) & 0x1F
