"""Reusable single-line input prompt shown in the message bar."""

from typing import Callable, Optional, TYPE_CHECKING

from .constants import EditorConstants
from .keyboard import KeyEvent, KeyType

if TYPE_CHECKING:
    from .editor import Editor

# Called after every key with the current buffer and the key that was read
PromptCallback = Callable[[str, KeyEvent], None]


def is_delete_key(key: KeyEvent) -> bool:
    return (key.key_type == KeyType.SPECIAL and key.value in ('backspace', 'delete')) or \
           (key.key_type == KeyType.CTRL and key.value == 'h')


def is_special(key: KeyEvent, value: str) -> bool:
    return key.key_type == KeyType.SPECIAL and key.value == value


class LinePrompt:
    """Reads a line of text while echoing it live through the status message.

    The template is a %-style format with one placeholder for the buffer.
    """

    def __init__(self, editor: 'Editor', template: str,
                 callback: Optional[PromptCallback] = None):
        self.editor = editor
        self.template = template
        self.callback = callback

    def _notify(self, buf: str, key: KeyEvent):
        if self.callback is not None:
            self.callback(buf, key)

    def run(self) -> Optional[str]:
        """Run the prompt loop.

        Returns:
            The entered text, or None if the user pressed Escape
        """
        buf = ""
        while True:
            self.editor.set_status_message(self.template, buf)
            self.editor.refresh_screen()
            key = self.editor.keyboard.read_key()

            if is_delete_key(key):
                buf = buf[:-1]
            elif is_special(key, 'escape'):
                self.editor.set_status_message("")
                self._notify(buf, key)
                return None
            elif is_special(key, 'enter'):
                if buf:
                    self.editor.set_status_message("")
                    self._notify(buf, key)
                    return buf
            elif key.is_printable and len(buf) < EditorConstants.QUERY_MAX_LEN:
                buf += key.value

            self._notify(buf, key)
