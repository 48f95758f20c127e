"""Incremental find-as-you-type built on LinePrompt."""

import logging
from typing import Optional, TYPE_CHECKING

from .constants import EditorConstants
from .keyboard import KeyEvent, KeyType
from .prompt import LinePrompt
from .syntax import Highlight

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)

FORWARD = 1
BACKWARD = -1


class SearchController:
    """Drives one find session: scan state plus the temporary match overlay."""

    def __init__(self, editor: 'Editor'):
        self.editor = editor
        self.last_match = -1
        self.direction = FORWARD
        self._saved_row: Optional[int] = None
        self._saved_highlight: Optional[list[Highlight]] = None

    def run(self) -> Optional[str]:
        """Prompt for a query, moving to matches as it is typed.

        Escape puts the cursor and viewport back where they were.

        Returns:
            The final query, or None if the search was aborted
        """
        editor = self.editor
        saved_cursor = (editor.cursor.col, editor.cursor.row)
        saved_offsets = (editor.row_offset, editor.col_offset)

        query = LinePrompt(editor, EditorConstants.SEARCH_PROMPT, self.on_key).run()

        if query is None:
            editor.cursor.col, editor.cursor.row = saved_cursor
            editor.row_offset, editor.col_offset = saved_offsets
        return query

    def restore_highlight(self):
        """Put back the highlight of the row the last match overlaid."""
        if self._saved_highlight is not None and self._saved_row is not None:
            row = self.editor.document.row_at(self._saved_row)
            if row is not None:
                row.highlight = self._saved_highlight
        self._saved_row = None
        self._saved_highlight = None

    def on_key(self, query: str, key: KeyEvent):
        """Per-key prompt callback."""
        self.restore_highlight()

        if key.key_type == KeyType.SPECIAL and key.value in ('enter', 'escape'):
            self.last_match = -1
            self.direction = FORWARD
            return
        if key.key_type == KeyType.SPECIAL and key.value in ('right', 'down'):
            self.direction = FORWARD
        elif key.key_type == KeyType.SPECIAL and key.value in ('left', 'up'):
            self.direction = BACKWARD
        else:
            self.last_match = -1
            self.direction = FORWARD

        if self.last_match == -1:
            self.direction = FORWARD
        if query:
            self.find_next(query)

    def find_next(self, query: str) -> Optional[tuple[int, int]]:
        """Scan rows circularly from the last match for query.

        Returns:
            (row index, render offset) of the hit, or None
        """
        editor = self.editor
        document = editor.document
        current = self.last_match
        for _ in range(document.num_rows):
            current += self.direction
            if current == -1:
                current = document.num_rows - 1
            elif current == document.num_rows:
                current = 0

            row = document.rows[current]
            offset = row.render.find(query)
            if offset == -1:
                continue

            self.last_match = current
            editor.cursor.row = current
            editor.cursor.col = row.render_col_to_col(offset)
            # Past-the-end offset makes the next scroll put the match on top
            editor.row_offset = document.num_rows

            self._saved_row = current
            self._saved_highlight = list(row.highlight)
            for j in range(offset, offset + len(query)):
                row.highlight[j] = Highlight.MATCH
            return current, offset

        logger.debug("No match for %r", query)
        return None
