"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .keyboard import KeyType

if TYPE_CHECKING:
    from .editor import EditSession
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'EditSession', key_event: 'KeyEvent') -> None:
        """Execute the command.

        Args:
            editor: EditSession instance
            key_event: The key event that triggered this command
        """
        pass


class MovementCommand(EditorCommand):
    """Single-step cursor movement, clamped to the document."""

    direction: str = ''

    def execute(self, editor: 'EditSession', key_event: 'KeyEvent') -> None:
        move_cursor(editor, self.direction)


class LeftCharCommand(MovementCommand):
    direction = 'left'


class RightCharCommand(MovementCommand):
    direction = 'right'


class UpLineCommand(MovementCommand):
    direction = 'up'


class DownLineCommand(MovementCommand):
    direction = 'down'


class BeginningOfLineCommand(EditorCommand):
    def execute(self, editor, key_event):
        editor.cursor.cx = 0


class EndOfLineCommand(EditorCommand):
    def execute(self, editor, key_event):
        if editor.cursor.cy < editor.document.row_count:
            editor.cursor.cx = editor.document.row_length(editor.cursor.cy)


class PageUpCommand(EditorCommand):
    def execute(self, editor, key_event):
        editor.cursor.cy = editor.view.row_offset
        for _ in range(editor.screen_rows):
            move_cursor(editor, 'up')


class PageDownCommand(EditorCommand):
    def execute(self, editor, key_event):
        cy = editor.view.row_offset + editor.screen_rows - 1
        editor.cursor.cy = max(min(cy, editor.document.row_count), 0)
        for _ in range(editor.screen_rows):
            move_cursor(editor, 'down')


class InsertTextCommand(EditorCommand):
    def execute(self, editor, key_event):
        if key_event.code is not None:
            editor.document.insert_char(editor.cursor, key_event.code)


class NoOpCommand(EditorCommand):
    """Keys that are recognised but do nothing (yet)."""

    def execute(self, editor, key_event):
        pass


class QuitCommand(EditorCommand):
    def execute(self, editor, key_event):
        editor.quit()


class SaveCommand(EditorCommand):
    def execute(self, editor, key_event):
        editor.save_file()


def move_cursor(editor: 'EditSession', direction: str) -> None:
    """Move one step and snap the column back inside the (new) row."""
    cursor = editor.cursor
    document = editor.document
    row_count = document.row_count

    if direction == 'left':
        if cursor.cx > 0:
            cursor.cx -= 1
        elif cursor.cy > 0:
            cursor.cy -= 1
            cursor.cx = document.row_length(cursor.cy)
    elif direction == 'right':
        if cursor.cy < row_count:
            if cursor.cx < document.row_length(cursor.cy):
                cursor.cx += 1
            elif cursor.cy + 1 < row_count:
                cursor.cy += 1
                cursor.cx = 0
    elif direction == 'up':
        if cursor.cy > 0:
            cursor.cy -= 1
    elif direction == 'down':
        if cursor.cy < row_count:
            cursor.cy += 1

    cursor.cx = min(cursor.cx, document.row_length(cursor.cy))


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._insert = InsertTextCommand()
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        self.register((KeyType.SPECIAL, 'left'), LeftCharCommand())
        self.register((KeyType.SPECIAL, 'right'), RightCharCommand())
        self.register((KeyType.SPECIAL, 'up'), UpLineCommand())
        self.register((KeyType.SPECIAL, 'down'), DownLineCommand())
        self.register((KeyType.SPECIAL, 'home'), BeginningOfLineCommand())
        self.register((KeyType.SPECIAL, 'end'), EndOfLineCommand())
        self.register((KeyType.SPECIAL, 'page_up'), PageUpCommand())
        self.register((KeyType.SPECIAL, 'page_down'), PageDownCommand())

        # Row splitting and joining are not supported
        no_op = NoOpCommand()
        self.register((KeyType.SPECIAL, 'enter'), no_op)
        self.register((KeyType.SPECIAL, 'backspace'), no_op)
        self.register((KeyType.SPECIAL, 'delete'), no_op)
        self.register((KeyType.SPECIAL, 'escape'), no_op)
        self.register((KeyType.CTRL, 'h'), no_op)
        self.register((KeyType.CTRL, 'l'), no_op)

        # System commands
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.CTRL, 's'), SaveCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, editor: 'EditSession', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if a command handled the key
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command is None and key_event.key_type == KeyType.REGULAR:
            command = self._insert
        if command is None:
            # Unbound control chords are ignored
            return False
        command.execute(editor, key_event)
        return True
