"""Full-screen compositor: turns editor state into one escape-coded frame."""

import time
from typing import Optional, TYPE_CHECKING

import blessed

from .constants import EditorConstants
from .syntax import Highlight

if TYPE_CHECKING:
    from .editor import Editor


def to_wire(text: str) -> str:
    """Re-express arbitrary text as one character per UTF-8 byte.

    Row text is already one character per byte; names coming from the OS
    (filenames, error strings) are converted so the frame can be written
    byte for byte.
    """
    return text.encode('utf-8', errors='surrogateescape').decode('latin-1')


def is_control(ch: str) -> bool:
    return ord(ch) < 32 or ord(ch) == 127


def control_glyph(ch: str) -> str:
    """Visible stand-in for a control byte: ^A shows as 'A', others as '?'."""
    code = ord(ch)
    if code <= 26:
        return chr(ord('@') + code)
    return '?'


class TerminalView:
    """Renders the viewport of a document plus status and message bars."""

    def __init__(self, terminal: blessed.Terminal):
        self.term = terminal
        self._colors = {
            Highlight.COMMENT: terminal.cyan,
            Highlight.MLCOMMENT: terminal.cyan,
            Highlight.KEYWORD1: terminal.yellow,
            Highlight.KEYWORD2: terminal.green,
            Highlight.STRING: terminal.magenta,
            Highlight.NUMBER: terminal.red,
            Highlight.MATCH: terminal.blue,
        }

    def color_for(self, hl: Highlight) -> str:
        return self._colors.get(hl, self.term.normal)

    def scroll(self, editor: 'Editor') -> int:
        """Move the viewport so the cursor is visible; returns the render column."""
        cursor = editor.cursor
        row = editor.document.row_at(cursor.row)
        render_x = row.col_to_render_col(cursor.col) if row is not None else 0

        if cursor.row < editor.row_offset:
            editor.row_offset = cursor.row
        if cursor.row >= editor.row_offset + editor.screen_rows:
            editor.row_offset = cursor.row - editor.screen_rows + 1
        if render_x < editor.col_offset:
            editor.col_offset = render_x
        if render_x >= editor.col_offset + editor.screen_cols:
            editor.col_offset = render_x - editor.screen_cols + 1
        return render_x

    def compose_frame(self, editor: 'Editor', now: Optional[float] = None) -> str:
        """Build the complete frame for the current editor state."""
        render_x = self.scroll(editor)
        out: list[str] = [self.term.hide_cursor, self.term.home]
        self._draw_rows(editor, out)
        self._draw_status_bar(editor, out)
        self._draw_message_bar(editor, out, time.time() if now is None else now)
        out.append(self.term.move(editor.cursor.row - editor.row_offset,
                                  render_x - editor.col_offset))
        out.append(self.term.normal_cursor)
        return ''.join(out)

    def refresh(self, editor: 'Editor'):
        """Compose and flush a frame in a single write."""
        editor.terminal.write(self.compose_frame(editor))

    def _draw_rows(self, editor: 'Editor', out: list[str]):
        document = editor.document
        for y in range(editor.screen_rows):
            filerow = y + editor.row_offset
            row = document.row_at(filerow)
            if row is None:
                if document.num_rows == 0 and document.filename is None and y == editor.screen_rows // 3:
                    out.append(self._welcome_line(editor.screen_cols))
                else:
                    out.append(EditorConstants.FILLER_GLYPH)
            else:
                out.append(self.render_row_slice(row.render, row.highlight,
                                                 editor.col_offset, editor.screen_cols))
            out.append(self.term.clear_eol)
            out.append("\r\n")

    def _welcome_line(self, screen_cols: int) -> str:
        welcome = EditorConstants.WELCOME_MESSAGE.format(EditorConstants.VERSION)[:screen_cols]
        padding = (screen_cols - len(welcome)) // 2
        line = ""
        if padding:
            line += EditorConstants.FILLER_GLYPH
            padding -= 1
        return line + " " * padding + welcome

    def render_row_slice(self, render: str, highlight: list[Highlight],
                         col_offset: int, width: int) -> str:
        """Render the visible window of one row, coalescing color changes.

        A color sequence is emitted only when the class changes, and the
        default is restored before returning to normal text.
        """
        text = render[col_offset:col_offset + width]
        classes = highlight[col_offset:col_offset + width]
        out: list[str] = []
        current: Optional[str] = None
        for ch, hl in zip(text, classes):
            if is_control(ch):
                out.append(self.term.reverse + control_glyph(ch) + self.term.normal)
                if current is not None:
                    out.append(current)
            elif hl == Highlight.NORMAL:
                if current is not None:
                    out.append(self.term.normal)
                    current = None
                out.append(ch)
            else:
                color = self.color_for(hl)
                if color != current:
                    out.append(color)
                    current = color
                out.append(ch)
        if current is not None:
            out.append(self.term.normal)
        return ''.join(out)

    def _draw_status_bar(self, editor: 'Editor', out: list[str]):
        document = editor.document
        cols = editor.screen_cols
        name = to_wire(document.filename) if document.filename else EditorConstants.NO_NAME
        name = name[:EditorConstants.FILENAME_STATUS_WIDTH]
        modified = "(modified)" if document.dirty else ""
        status = f"{name} - {document.num_rows} lines {modified}"[:cols]
        language = document.syntax.name if document.syntax else EditorConstants.NO_FILETYPE
        rstatus = f"{language} | {editor.cursor.row + 1}/{document.num_rows}"

        if len(status) + len(rstatus) <= cols:
            line = status + " " * (cols - len(status) - len(rstatus)) + rstatus
        else:
            line = status.ljust(cols)
        out.append(self.term.reverse + line + self.term.normal)
        out.append("\r\n")

    def _draw_message_bar(self, editor: 'Editor', out: list[str], now: float):
        out.append(self.term.clear_eol)
        message = editor.status_message
        if message and now - editor.status_time < EditorConstants.STATUS_MESSAGE_TIMEOUT:
            out.append(to_wire(message)[:editor.screen_cols])
