"""Row-based document model with derived render and highlight caches."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .constants import EditorConstants
from .syntax import Highlight, LanguageProfile, highlight_row, select_profile

logger = logging.getLogger(__name__)


@dataclass
class CursorPosition:
    """Cursor in raw-content coordinates; row == num_rows is the append point."""
    col: int = 0
    row: int = 0


def expand_tabs(raw: str, tab_stop: int = EditorConstants.TAB_STOP) -> str:
    """Expand every tab to spaces up to the next multiple of tab_stop."""
    out = []
    width = 0
    for ch in raw:
        if ch == '\t':
            pad = tab_stop - (width % tab_stop)
            out.append(' ' * pad)
            width += pad
        else:
            out.append(ch)
            width += 1
    return ''.join(out)


def col_to_render_col(raw: str, col: int, tab_stop: int = EditorConstants.TAB_STOP) -> int:
    """Map a raw column to the column it occupies in the render string."""
    rx = 0
    for ch in raw[:col]:
        if ch == '\t':
            rx += (tab_stop - 1) - (rx % tab_stop)
        rx += 1
    return rx


def render_col_to_col(raw: str, render_col: int, tab_stop: int = EditorConstants.TAB_STOP) -> int:
    """Inverse of col_to_render_col.

    Returns the first raw column whose expansion reaches past render_col,
    so columns inside a tab's expansion resolve to the tab itself.
    """
    cur_rx = 0
    for cx, ch in enumerate(raw):
        if ch == '\t':
            cur_rx += (tab_stop - 1) - (cur_rx % tab_stop)
        cur_rx += 1
        if cur_rx > render_col:
            return cx
    return len(raw)


@dataclass
class Row:
    """One line of the document. Only Document creates or mutates rows."""
    index: int
    raw: str = ""
    render: str = ""
    highlight: list[Highlight] = field(default_factory=list)
    continuation: bool = False
    # Block-comment state inherited from the previous row at last highlight
    open_in: bool = False

    @property
    def size(self) -> int:
        return len(self.raw)

    def col_to_render_col(self, col: int) -> int:
        return col_to_render_col(self.raw, col)

    def render_col_to_col(self, render_col: int) -> int:
        return render_col_to_col(self.raw, render_col)


class Document:
    """Ordered sequence of rows plus the dirty counter and file metadata."""

    def __init__(self, lines: Optional[list[str]] = None, filename: Optional[str] = None,
                 syntax: Optional[LanguageProfile] = None):
        self.rows: list[Row] = []
        self.dirty = 0
        self.filename = filename
        self.syntax = syntax
        if lines:
            self.load_lines(lines)

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def row_at(self, at: int) -> Optional[Row]:
        """Return the row at index at, or None past the end."""
        if 0 <= at < len(self.rows):
            return self.rows[at]
        return None

    def load_lines(self, lines: list[str]):
        """Replace the whole document with lines and mark it clean."""
        self.rows = []
        for line in lines:
            self.insert_row(self.num_rows, line)
        self.dirty = 0

    def select_syntax(self, filename: Optional[str]):
        """Pick the language profile for filename and re-highlight every row."""
        self.syntax = select_profile(filename)
        logger.debug("Syntax for %r: %s", filename, self.syntax.name if self.syntax else None)
        for row in self.rows:
            self._highlight(row)

    # --- Derived caches ---

    def _highlight(self, row: Row):
        """Recompute one row's highlight from its predecessor's continuation."""
        prev = self.rows[row.index - 1] if row.index > 0 else None
        row.open_in = prev.continuation if prev is not None else False
        row.highlight, row.continuation = highlight_row(row.render, self.syntax, row.open_in)

    def update_syntax(self, at: int) -> int:
        """Re-highlight row at and cascade while block-comment state changes.

        A following row is revisited only when the state it was highlighted
        with differs from the continuation just computed above it, so the
        walk stops at the first row that is already consistent.

        Returns:
            Number of rows highlighted
        """
        touched = 0
        idx = at
        while 0 <= idx < self.num_rows:
            row = self.rows[idx]
            self._highlight(row)
            touched += 1
            nxt = self.row_at(idx + 1)
            if nxt is None or nxt.open_in == row.continuation:
                break
            idx += 1
        return touched

    def update_row(self, row: Row):
        """Rebuild render from raw, then highlight (cascading as needed)."""
        row.render = expand_tabs(row.raw)
        self.update_syntax(row.index)

    # --- Row primitives ---

    def insert_row(self, at: int, text: str):
        if at < 0 or at > self.num_rows:
            return
        self.rows.insert(at, Row(index=at, raw=text))
        for j in range(at + 1, self.num_rows):
            self.rows[j].index = j
        self.update_row(self.rows[at])
        self.dirty += 1

    def delete_row(self, at: int):
        if at < 0 or at >= self.num_rows:
            return
        del self.rows[at]
        for j in range(at, self.num_rows):
            self.rows[j].index = j
        # The row that moved up now follows a different predecessor
        if at < self.num_rows:
            self.update_syntax(at)
        self.dirty += 1

    def insert_char(self, at: int, col: int, ch: str):
        """Insert ch into row at, clamping col to the row's bounds."""
        row = self.row_at(at)
        if row is None:
            return
        col = max(0, min(col, row.size))
        row.raw = row.raw[:col] + ch + row.raw[col:]
        self.update_row(row)
        self.dirty += 1

    def delete_char(self, at: int, col: int):
        row = self.row_at(at)
        if row is None or col < 0 or col >= row.size:
            return
        row.raw = row.raw[:col] + row.raw[col + 1:]
        self.update_row(row)
        self.dirty += 1

    def append_string(self, at: int, text: str):
        row = self.row_at(at)
        if row is None:
            return
        row.raw += text
        self.update_row(row)
        self.dirty += 1

    def split_row(self, at: int, col: int):
        """Break row at at col: the suffix becomes a new row below it."""
        row = self.row_at(at)
        if row is None:
            return
        col = max(0, min(col, row.size))
        if col == 0:
            self.insert_row(at, "")
            return
        self.insert_row(at + 1, row.raw[col:])
        row.raw = row.raw[:col]
        self.update_row(row)

    def join_with_previous(self, at: int) -> Optional[int]:
        """Append row at to its predecessor and delete it.

        Returns:
            The column in the previous row where the joined text starts, or
            None when there is nothing to join
        """
        row = self.row_at(at)
        if row is None or at == 0:
            return None
        prev = self.rows[at - 1]
        join_col = prev.size
        self.append_string(at - 1, row.raw)
        self.delete_row(at)
        return join_col

    def rows_to_text(self) -> str:
        """Serialize for saving: every row followed by one newline."""
        return ''.join(row.raw + '\n' for row in self.rows)
