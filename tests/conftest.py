"""Shared fakes for editor tests."""

import io

import blessed
import pytest

from kite.editor import Editor
from kite.terminal import TerminalInterface


def make_blessed_terminal():
    """A styling xterm that writes nowhere, so capability strings are real."""
    return blessed.Terminal(kind='xterm-256color', force_styling=True, stream=io.StringIO())


class FakeTerminal(TerminalInterface):
    """TerminalInterface fed from a scripted byte queue.

    Items in the queue are byte values or None (a read timeout). Once the
    queue is empty every read times out; a long run of those means a test
    forgot to finish its key script.
    """

    MAX_IDLE_READS = 100

    def __init__(self, keys=b'', rows=24, cols=80):
        super().__init__(terminal=make_blessed_terminal(), input_fd=0, output_fd=1)
        self.queue = list(keys)
        self.output: list[str] = []
        self.size = (rows, cols)
        self._idle_reads = 0
        self.setup_calls = 0
        self.cleanup_calls = 0

    def feed(self, keys):
        self.queue.extend(keys)

    def setup(self):
        self.setup_calls += 1
        self.is_raw = True

    def cleanup(self):
        if self.is_raw:
            self.cleanup_calls += 1
        self.is_raw = False

    def read_byte(self):
        if self.queue:
            self._idle_reads = 0
            return self.queue.pop(0)
        self._idle_reads += 1
        if self._idle_reads > self.MAX_IDLE_READS:
            raise RuntimeError("key script exhausted")
        return None

    def write(self, text):
        self.output.append(text)

    def get_window_size(self):
        return self.size


@pytest.fixture
def fake_terminal():
    return FakeTerminal()


@pytest.fixture
def make_editor():
    """Factory: an editor over lines with a scripted keyboard."""
    def _make(lines=None, keys=b'', rows=10, cols=40, filename=None):
        terminal = FakeTerminal(keys)
        editor = Editor(terminal=terminal)
        editor.screen_rows = rows
        editor.screen_cols = cols
        if lines is not None:
            editor.document.load_lines(lines)
        editor.document.filename = filename
        return editor
    return _make
