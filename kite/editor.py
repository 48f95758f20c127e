"""Main editor controller: the edit session."""

import errno
import logging
import signal
import time
from typing import Optional

from .terminal import TerminalInterface
from .keyboard import KeyboardHandler, KeyEvent
from .model import CursorPosition, Document
from .view import TerminalView
from .commands import CommandRegistry, QuitCommand
from .constants import EditorConstants
from .fileio import FileError, load_file, save_file
from .prompt import LinePrompt
from .search import SearchController
from .settings import Settings

logger = logging.getLogger(__name__)


class Editor:
    """Owns all session state: document, cursor, viewport and messages.

    Collaborators (view, commands, prompts, search) receive the editor by
    reference; there is no module-level state.
    """

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[Settings] = None):
        """Initialize the editor components."""
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal, on_idle=self.handle_pending_resize)
        self.view = TerminalView(self.terminal.term)
        self.settings = settings or Settings()
        self.command_registry = CommandRegistry()  # Command pattern for key handling
        self.document = Document()
        self.cursor = CursorPosition()
        # Viewport: index of the top-left visible cell
        self.row_offset = 0
        self.col_offset = 0
        # Text area size; the last two screen lines hold the status and message bars
        self.screen_rows = 22
        self.screen_cols = 80
        self.status_message = ""
        self.status_time = 0.0
        self.quit_times = self.settings.quit_times
        self.running = False
        self._resize_pending = False

    # --- Screen ---

    def update_window_size(self):
        rows, cols = self.terminal.get_window_size()
        self.screen_rows = max(1, rows - 2)
        self.screen_cols = max(1, cols)
        logger.debug("Window size %dx%d", cols, rows)

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal: only record it for the main loop."""
        del signum, frame  # Unused
        self._resize_pending = True

    def handle_pending_resize(self):
        """Re-query the window size and redraw if a resize was signalled."""
        if not self._resize_pending:
            return
        self._resize_pending = False
        self.update_window_size()
        self.refresh_screen()

    def set_status_message(self, fmt: str, *args):
        """Set the message bar text from a %-style template."""
        self.status_message = fmt % args if args else fmt
        self.status_time = time.time()

    def refresh_screen(self):
        self.view.refresh(self)

    # --- Cursor movement ---

    def move_cursor(self, direction: str):
        """Move one cell; left/right wrap across rows, up/down stop at the ends."""
        cursor = self.cursor
        row = self.document.row_at(cursor.row)

        if direction == 'left':
            if cursor.col > 0:
                cursor.col -= 1
            elif cursor.row > 0:
                cursor.row -= 1
                cursor.col = self.document.rows[cursor.row].size
        elif direction == 'right':
            if row is not None and cursor.col < row.size:
                cursor.col += 1
            elif row is not None and cursor.col == row.size:
                cursor.row += 1
                cursor.col = 0
        elif direction == 'up':
            if cursor.row > 0:
                cursor.row -= 1
        elif direction == 'down':
            if cursor.row < self.document.num_rows:
                cursor.row += 1

        row = self.document.row_at(cursor.row)
        row_len = row.size if row is not None else 0
        if cursor.col > row_len:
            cursor.col = row_len

    def page(self, direction: str):
        """Jump to the top/bottom of the viewport, then scroll a screenful."""
        if direction == 'up':
            self.cursor.row = self.row_offset
        else:
            self.cursor.row = min(self.row_offset + self.screen_rows - 1, self.document.num_rows)
        for _ in range(self.screen_rows):
            self.move_cursor(direction)

    # --- Editing ---

    def insert_char(self, ch: str):
        if self.cursor.row == self.document.num_rows:
            self.document.insert_row(self.document.num_rows, "")
        self.document.insert_char(self.cursor.row, self.cursor.col, ch)
        self.cursor.col += 1

    def insert_newline(self):
        if self.cursor.col == 0:
            self.document.insert_row(self.cursor.row, "")
        else:
            self.document.split_row(self.cursor.row, self.cursor.col)
        self.cursor.row += 1
        self.cursor.col = 0

    def delete_char(self):
        """Backspace: remove the byte left of the cursor or join with the row above."""
        cursor = self.cursor
        if cursor.row == self.document.num_rows:
            return
        if cursor.col == 0 and cursor.row == 0:
            return

        if cursor.col > 0:
            self.document.delete_char(cursor.row, cursor.col - 1)
            cursor.col -= 1
        else:
            join_col = self.document.join_with_previous(cursor.row)
            cursor.row -= 1
            cursor.col = join_col

    # --- Files ---

    def load_file(self, filename: str):
        """Load a file into the editor.

        A missing file starts a new, empty document under that name. Any
        other failure is reported in the message bar and leaves an empty,
        unnamed document.
        """
        self.document.filename = filename
        self.document.select_syntax(filename)
        try:
            lines = load_file(filename)
        except FileError as e:
            if e.errno == errno.ENOENT:
                logger.info("New file %s", filename)
                return
            logger.warning(f"Could not open {filename}: {e}")
            self.document.filename = None
            self.document.select_syntax(None)
            self.set_status_message("Can't open %s: %s", filename, e.strerror)
            return
        self.document.load_lines(lines)

    def save(self) -> bool:
        """Save the document, prompting for a filename if it has none.

        Returns:
            True if the file was written
        """
        document = self.document
        prompted = False
        if document.filename is None:
            filename = LinePrompt(self, EditorConstants.SAVE_PROMPT).run()
            if filename is None:
                self.set_status_message("Save aborted")
                return False
            document.filename = filename
            document.select_syntax(filename)
            prompted = True

        try:
            written = save_file(document.filename, document.rows_to_text())
        except FileError as e:
            logger.warning(f"Could not save {document.filename}: {e}")
            self.set_status_message("Can't save! I/O error: %s", e.strerror)
            if prompted:
                document.filename = None
                document.select_syntax(None)
            return False

        document.dirty = 0
        self.set_status_message("%d bytes written to disk", written)
        return True

    def find(self) -> Optional[str]:
        return SearchController(self).run()

    def request_quit(self):
        """Quit, or count down when there are unsaved changes."""
        if self.document.dirty:
            self.quit_times -= 1
            if self.quit_times > 0:
                self.set_status_message(EditorConstants.QUIT_WARNING_MESSAGE, self.quit_times)
                return
        self.running = False

    # --- Main loop ---

    def process_keypress(self, key_event: KeyEvent):
        """Dispatch one key; any key other than quit re-arms the quit countdown."""
        command = self.command_registry.get_command(key_event)
        if command is not None:
            command.execute(self, key_event)
        if not isinstance(command, QuitCommand):
            self.quit_times = self.settings.quit_times

    def run(self):
        """Run the main editor loop until quit.

        Raw mode is restored and the screen cleared on every way out,
        including fatal terminal errors, which propagate to the caller.
        """
        self.terminal.setup()
        self.running = True
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        try:
            self.update_window_size()
            while self.running:
                self.refresh_screen()
                self.process_keypress(self.keyboard.read_key())
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            try:
                self.terminal.clear_screen()
            finally:
                self.terminal.cleanup()
