"""Keyboard input handling: decodes raw terminal bytes into key events."""

from dataclasses import dataclass
from enum import Enum

ESC = 0x1b
ENTER = 0x0d
LINE_FEED = 0x0a
BACKSPACE = 0x7f


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"  # A byte to be inserted (printable or tab)
    CTRL = "ctrl"
    SPECIAL = "special"  # Arrows, paging, enter, backspace, escape, ...


@dataclass
class KeyEvent:
    """Represents a decoded keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: bytes = b''  # The bytes consumed to produce this event

    @property
    def is_printable(self) -> bool:
        return self.key_type == KeyType.REGULAR and 32 <= ord(self.value) < 127


# ESC [ <digit> ~
_TILDE_SEQUENCES = {
    ord('1'): 'home',
    ord('3'): 'delete',
    ord('4'): 'end',
    ord('5'): 'page_up',
    ord('6'): 'page_down',
    ord('7'): 'home',
    ord('8'): 'end',
}

# ESC [ <letter>
_CSI_LETTERS = {
    ord('A'): 'up',
    ord('B'): 'down',
    ord('C'): 'right',
    ord('D'): 'left',
    ord('H'): 'home',
    ord('F'): 'end',
}

# ESC O <letter>
_SS3_LETTERS = {
    ord('H'): 'home',
    ord('F'): 'end',
}


def escape_event(raw: bytes = b'\x1b') -> KeyEvent:
    return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=raw)


class KeyboardHandler:
    """Turns the byte stream of a TerminalInterface into KeyEvents."""

    def __init__(self, terminal_interface, on_idle=None):
        """Initialize with a terminal interface providing read_byte().

        on_idle, if given, is called after every read that timed out while
        waiting for the first byte of a key.
        """
        self.terminal = terminal_interface
        self.on_idle = on_idle

    def read_key(self) -> KeyEvent:
        """Block until one logical key is available and return it.

        Each underlying read waits at most the raw-mode timeout; timeouts
        run the idle hook and loop.
        """
        c = self.terminal.read_byte()
        while c is None:
            if self.on_idle is not None:
                self.on_idle()
            c = self.terminal.read_byte()
        if c == ESC:
            return self._read_escape_sequence()
        return self.parse_byte(c)

    def _read_escape_sequence(self) -> KeyEvent:
        """Decode the bytes following ESC; anything unexpected is a bare ESC."""
        first = self.terminal.read_byte()
        if first is None:
            return escape_event()
        second = self.terminal.read_byte()
        if second is None:
            return escape_event(bytes([ESC, first]))
        raw = bytes([ESC, first, second])

        if first == ord('['):
            if ord('0') <= second <= ord('9'):
                third = self.terminal.read_byte()
                if third is None:
                    return escape_event(raw)
                raw += bytes([third])
                if third == ord('~') and second in _TILDE_SEQUENCES:
                    return KeyEvent(key_type=KeyType.SPECIAL, value=_TILDE_SEQUENCES[second], raw=raw)
            elif second in _CSI_LETTERS:
                return KeyEvent(key_type=KeyType.SPECIAL, value=_CSI_LETTERS[second], raw=raw)
        elif first == ord('O'):
            if second in _SS3_LETTERS:
                return KeyEvent(key_type=KeyType.SPECIAL, value=_SS3_LETTERS[second], raw=raw)
        return escape_event(raw)

    def parse_byte(self, c: int) -> KeyEvent:
        """Classify a single byte that is not the start of an escape sequence."""
        raw = bytes([c])
        if c in (ENTER, LINE_FEED):
            return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=raw)
        if c == BACKSPACE:
            return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=raw)
        if c == ESC:
            return escape_event(raw)
        if c == ord('\t'):
            return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=raw)
        if 1 <= c <= 26:  # Ctrl-A .. Ctrl-Z
            return KeyEvent(key_type=KeyType.CTRL, value=chr(ord('a') + c - 1), raw=raw)
        # Every other byte, printable or not, is passed through as one character
        return KeyEvent(key_type=KeyType.REGULAR, value=chr(c), raw=raw)
