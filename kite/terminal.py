"""Terminal interface: raw mode via termios, escape strings via Blessed."""

import errno
import logging
import os
import re
import sys
import termios
from typing import Optional

import blessed

from .constants import EditorConstants

logger = logging.getLogger(__name__)

CURSOR_POSITION_REQUEST = "\x1b[6n"
_CURSOR_POSITION_REPORT = re.compile(rb"\x1b\[(\d+);(\d+)R")


class TerminalError(OSError):
    """Unrecoverable terminal failure (attribute, size or read errors)."""


class TerminalInterface:
    """Handles raw-mode terminal I/O for the editor."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 input_fd: Optional[int] = None, output_fd: Optional[int] = None):
        """Initialize with a terminal instance (or create one).

        Nothing touches the tty until setup() is called.
        """
        self.term = terminal or blessed.Terminal()
        self.input_fd = sys.stdin.fileno() if input_fd is None else input_fd
        self.output_fd = sys.stdout.fileno() if output_fd is None else output_fd
        self.is_raw = False
        self._original_attributes: Optional[list] = None

    def setup(self):
        """Switch the input tty into raw mode, remembering the original mode."""
        try:
            self._original_attributes = termios.tcgetattr(self.input_fd)
        except termios.error as e:
            raise TerminalError(errno.ENOTTY, f"tcgetattr: {e}") from e

        raw = termios.tcgetattr(self.input_fd)
        # Input flags: no break signal, no CR->NL, no parity, no stripping, no flow control
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        # Output flags: no post-processing
        raw[1] &= ~termios.OPOST
        # Control flags: 8-bit characters
        raw[2] |= termios.CS8
        # Local flags: no echo, no canonical mode, no extended input, no signals
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        # Return from read() after at most 100 ms even with no input
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = EditorConstants.READ_TIMEOUT_DECISECONDS
        try:
            termios.tcsetattr(self.input_fd, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise TerminalError(errno.ENOTTY, f"tcsetattr: {e}") from e
        self.is_raw = True
        logger.debug("Raw mode enabled on fd %d", self.input_fd)

    def cleanup(self):
        """Restore the original terminal mode. Safe to call more than once."""
        if not self.is_raw:
            return
        self.is_raw = False
        try:
            termios.tcsetattr(self.input_fd, termios.TCSAFLUSH, self._original_attributes)
        except termios.error as e:
            raise TerminalError(errno.ENOTTY, f"tcsetattr: {e}") from e
        logger.debug("Raw mode disabled on fd %d", self.input_fd)

    def read_byte(self) -> Optional[int]:
        """Read one byte, or return None when the read timed out."""
        try:
            data = os.read(self.input_fd, 1)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                return None
            raise TerminalError(e.errno, f"read: {e.strerror}") from e
        if not data:
            return None
        return data[0]

    def write(self, text: str):
        """Write text in one call; every character is one byte on the wire."""
        data = text.encode('latin-1', errors='replace')
        while data:
            written = os.write(self.output_fd, data)
            data = data[written:]

    def clear_screen(self):
        """Clear the entire screen, then home and show the cursor."""
        self.write(self.term.normal + self.term.clear + self.term.home + self.term.normal_cursor)

    def get_cursor_position(self) -> tuple[int, int]:
        """Ask the terminal where the cursor is; returns 1-based (row, col)."""
        self.write(CURSOR_POSITION_REQUEST)
        buf = bytearray()
        while len(buf) < 31:
            c = self.read_byte()
            if c is None:
                break
            buf.append(c)
            if c == ord('R'):
                break
        match = _CURSOR_POSITION_REPORT.match(bytes(buf))
        if not match:
            raise TerminalError(errno.EIO, "invalid cursor position report")
        return int(match.group(1)), int(match.group(2))

    def get_window_size(self) -> tuple[int, int]:
        """Return (rows, cols) of the terminal window.

        Falls back to parking the cursor at the bottom-right corner and
        reading its reported position when the size query is unavailable.
        """
        try:
            size = os.get_terminal_size(self.output_fd)
            if size.columns:
                return size.lines, size.columns
        except OSError:
            logger.debug("Window size query failed, probing cursor position")
        self.write(self.term.move_right(999) + self.term.move_down(999))
        return self.get_cursor_position()
