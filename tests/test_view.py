"""Test the screen compositor."""

import pytest
from kite.constants import EditorConstants
from kite.syntax import Highlight

H = Highlight


def frame_lines(editor, now=None):
    """Split a frame into its text-area, status and message lines."""
    frame = editor.view.compose_frame(editor, now=now)
    return frame.split("\r\n")


def test_welcome_banner_on_empty_unnamed_document(make_editor):
    """Test the centered welcome line appears a third of the way down."""
    editor = make_editor(rows=9, cols=40)
    lines = frame_lines(editor)
    welcome = EditorConstants.WELCOME_MESSAGE.format(EditorConstants.VERSION)
    assert lines[3] == "~" + " " * 5 + welcome + editor.view.term.clear_eol
    assert sum(welcome in line for line in lines) == 1


def test_welcome_banner_truncated_on_narrow_screen(make_editor):
    """Test the welcome line never exceeds the screen width."""
    editor = make_editor(rows=9, cols=10)
    lines = frame_lines(editor)
    assert "Kite edito" in lines[3]
    assert "Kite editor" not in lines[3]


def test_no_banner_when_file_named(make_editor):
    """Test a named empty document shows only filler rows."""
    editor = make_editor(rows=5, cols=40, filename="new.txt")
    term = editor.view.term
    lines = frame_lines(editor)
    assert "Kite editor" not in "".join(lines)
    for line in lines[1:5]:
        assert line == "~" + term.clear_eol


def test_frame_starts_hidden_and_ends_with_cursor(make_editor):
    """Test the frame hides the cursor, homes, and repositions at the end."""
    editor = make_editor(lines=["abc", "\tx"], rows=5, cols=40)
    editor.cursor.row = 1
    editor.cursor.col = 1
    term = editor.view.term
    frame = editor.view.compose_frame(editor)
    assert frame.startswith(term.hide_cursor + term.home)
    assert frame.endswith(term.move(1, 8) + term.normal_cursor)


def test_rows_and_filler(make_editor):
    """Test document rows are drawn followed by filler below the end."""
    editor = make_editor(lines=["one", "two"], rows=4, cols=40)
    term = editor.view.term
    lines = frame_lines(editor)
    assert lines[0].endswith("one" + term.clear_eol)
    assert lines[1] == "two" + term.clear_eol
    assert lines[2] == "~" + term.clear_eol
    assert lines[3] == "~" + term.clear_eol


def test_scroll_keeps_cursor_visible(make_editor):
    """Test the viewport follows the cursor vertically and horizontally."""
    editor = make_editor(lines=["x" * 100] * 30, rows=10, cols=40)
    editor.cursor.row = 15
    editor.view.scroll(editor)
    assert editor.row_offset == 6
    editor.cursor.row = 2
    editor.view.scroll(editor)
    assert editor.row_offset == 2

    editor.cursor.col = 50
    render_x = editor.view.scroll(editor)
    assert render_x == 50
    assert editor.col_offset == 11
    editor.cursor.col = 5
    editor.view.scroll(editor)
    assert editor.col_offset == 5


def test_scroll_uses_render_column(make_editor):
    """Test horizontal scrolling is measured in rendered columns."""
    editor = make_editor(lines=["\t\t\t\t\tx"], rows=5, cols=20)
    editor.cursor.col = 5
    render_x = editor.view.scroll(editor)
    assert render_x == 40
    assert editor.col_offset == 21


@pytest.mark.parametrize("cursor_row", [0, 3, 9, 10])
def test_cursor_always_inside_viewport(make_editor, cursor_row):
    """Test after scrolling the cursor lies within the text area."""
    editor = make_editor(lines=["row"] * 10, rows=4, cols=40)
    editor.cursor.row = cursor_row
    editor.view.scroll(editor)
    assert editor.row_offset <= cursor_row < editor.row_offset + editor.screen_rows


def test_status_bar(make_editor):
    """Test the status bar shows name, size, modified flag, type and position."""
    editor = make_editor(lines=["int x;", "y"], rows=5, cols=60)
    editor.document.filename = "hello.c"
    editor.document.select_syntax("hello.c")
    editor.document.dirty = 1
    editor.cursor.row = 1
    term = editor.view.term
    status = frame_lines(editor)[5]
    left = "hello.c - 2 lines (modified)"
    right = "c | 2/2"
    assert status == term.reverse + left + " " * (60 - len(left) - len(right)) + right + term.normal


def test_status_bar_defaults_and_truncation(make_editor):
    """Test unnamed files and long names in the status bar."""
    editor = make_editor(lines=["a"], rows=3, cols=80)
    status = frame_lines(editor)[3]
    assert "[No Name] - 1 lines " in status
    assert "no ft | 1/1" in status

    editor.document.filename = "a_very_long_file_name_indeed.txt"
    status = frame_lines(editor)[3]
    assert "a_very_long_file_nam - 1 lines" in status


def test_status_bar_narrow_screen_drops_right_side(make_editor):
    """Test the right-hand status is omitted when it does not fit."""
    editor = make_editor(lines=["a"], rows=3, cols=12)
    term = editor.view.term
    status = frame_lines(editor)[3]
    assert status == term.reverse + "[No Name] - " + term.normal


def test_message_expires(make_editor):
    """Test messages show for five seconds only."""
    editor = make_editor(rows=3, cols=40)
    editor.status_message = "hello there"
    editor.status_time = 100.0
    term = editor.view.term
    assert frame_lines(editor, now=104.0)[4].startswith(term.clear_eol + "hello there")
    assert "hello there" not in frame_lines(editor, now=105.5)[4]


def test_message_truncated_to_width(make_editor):
    """Test long messages are cut at the screen width."""
    editor = make_editor(rows=3, cols=10)
    editor.set_status_message("0123456789abcdef")
    assert "0123456789" in frame_lines(editor)[4]
    assert "0123456789a" not in frame_lines(editor)[4]


def test_control_bytes_render_as_reverse_glyphs(make_editor):
    """Test control bytes show as reverse-video letters or '?'."""
    view = make_editor().view
    term = view.term
    out = view.render_row_slice("a\x01b\x7f", [H.NORMAL] * 4, 0, 10)
    assert out == ("a" + term.reverse + "A" + term.normal + "b"
                   + term.reverse + "?" + term.normal)


def test_control_glyph_restores_current_color(make_editor):
    """Test the active color is re-emitted after a control glyph."""
    view = make_editor().view
    term = view.term
    out = view.render_row_slice("1\x002", [H.NUMBER] * 3, 0, 10)
    assert out == (term.red + "1" + term.reverse + "@" + term.normal + term.red
                   + "2" + term.normal)


def test_color_changes_are_coalesced(make_editor):
    """Test a color is emitted once per run and reset before normal text."""
    view = make_editor().view
    term = view.term
    out = view.render_row_slice("if 12", [H.KEYWORD1, H.KEYWORD1, H.NORMAL, H.NUMBER, H.NUMBER], 0, 10)
    assert out == term.yellow + "if" + term.normal + " " + term.red + "12" + term.normal


def test_comment_kinds_share_color(make_editor):
    """Test line and block comments use the same color without a reset between."""
    view = make_editor().view
    term = view.term
    out = view.render_row_slice("ab", [H.MLCOMMENT, H.COMMENT], 0, 10)
    assert out == term.cyan + "ab" + term.normal


def test_row_slice_respects_offset_and_width(make_editor):
    """Test only the visible window of a row is drawn."""
    view = make_editor().view
    out = view.render_row_slice("abcdefgh", [H.NORMAL] * 8, 2, 3)
    assert out == "cde"
    assert view.render_row_slice("abc", [H.NORMAL] * 3, 5, 3) == ""


def test_refresh_writes_one_frame(make_editor):
    """Test refresh sends the whole frame in a single write."""
    editor = make_editor(lines=["hi"], rows=3, cols=20)
    editor.refresh_screen()
    assert len(editor.terminal.output) == 1
    assert "hi" in editor.terminal.output[0]
