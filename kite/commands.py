"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .keyboard import KeyType

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent'):
        self._move(editor, key_event)

    @abstractmethod
    def _move(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the movement."""
        pass


class ArrowCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.move_cursor(key_event.value)


class HomeCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.cursor.col = 0


class EndCommand(MovementCommand):
    def _move(self, editor, key_event):
        row = editor.document.row_at(editor.cursor.row)
        if row is not None:
            editor.cursor.col = row.size


class PageUpCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.page('up')


class PageDownCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.page('down')


class EditCommand(EditorCommand):
    """Base class for editing commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent'):
        self._edit(editor, key_event)

    @abstractmethod
    def _edit(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the edit."""
        pass


class InsertTextCommand(EditCommand):
    def _edit(self, editor, key_event):
        char = key_event.value
        # Filter out control characters other than tab
        if char == '\t' or (ord(char) >= 32 and ord(char) != 127):
            editor.insert_char(char)


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.insert_newline()


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.delete_char()


class DeleteCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.move_cursor('right')
        editor.delete_char()


class SystemCommand(EditorCommand):
    """Base class for system commands like save, find, quit."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent'):
        self._execute_system(editor, key_event)

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.request_quit()


class SaveCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.save()


class FindCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.find()


class NoopCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        pass


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._insert_text = InsertTextCommand()
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        arrow = ArrowCommand()
        for direction in ('left', 'right', 'up', 'down'):
            self.register((KeyType.SPECIAL, direction), arrow)
        self.register((KeyType.SPECIAL, 'home'), HomeCommand())
        self.register((KeyType.SPECIAL, 'end'), EndCommand())
        self.register((KeyType.CTRL, 'a'), HomeCommand())
        self.register((KeyType.CTRL, 'e'), EndCommand())

        # Paging
        self.register((KeyType.SPECIAL, 'page_up'), PageUpCommand())
        self.register((KeyType.SPECIAL, 'page_down'), PageDownCommand())

        # Editing commands
        self.register((KeyType.SPECIAL, 'enter'), InsertNewlineCommand())
        self.register((KeyType.SPECIAL, 'backspace'), BackspaceCommand())
        self.register((KeyType.CTRL, 'h'), BackspaceCommand())
        self.register((KeyType.SPECIAL, 'delete'), DeleteCommand())

        # System commands
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.CTRL, 's'), SaveCommand())
        self.register((KeyType.CTRL, 'f'), FindCommand())
        self.register((KeyType.CTRL, 'l'), NoopCommand())
        self.register((KeyType.SPECIAL, 'escape'), NoopCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_event: 'KeyEvent') -> Optional[EditorCommand]:
        """Get the command for a key event; plain bytes fall back to insertion."""
        command = self._commands.get((key_event.key_type, key_event.value))
        if command is None and key_event.key_type == KeyType.REGULAR:
            return self._insert_text
        return command
