"""Tests for the editing session: key dispatch, saving and rendering."""

import os
import tempfile
from unittest.mock import MagicMock, patch

import pytest

from linepad.constants import EditorConstants
from linepad.document import Document
from linepad.editor import Editor
from linepad.errors import FatalTerminalError
from linepad.keyboard import Intent, KeyEvent
from linepad.settings import EditorSettings
from linepad.viewport import CursorPosition, ViewportSize


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def make_terminal(width=20, height=5):
    terminal = MagicMock()
    terminal.size.return_value = ViewportSize(width=width, height=height)
    terminal.status_style.return_value = ""
    terminal.__exit__.return_value = False
    return terminal


def make_editor(lines=None, width=20, height=5, **settings):
    clock = FakeClock()
    editor = Editor(terminal=make_terminal(width, height),
                    settings=EditorSettings(**settings), clock=clock)
    if lines is not None:
        editor.document = Document.from_lines(lines)
    return editor


def char(c):
    return KeyEvent(Intent.CHARACTER, c, char=c)


def key(intent):
    return KeyEvent(intent, intent.value)


def type_text(editor, text):
    for c in text:
        editor.process_keypress(char(c))


def texts(editor):
    return [row.text for row in editor.document]


def test_typing_into_empty_document():
    editor = make_editor()
    type_text(editor, "ab")
    assert texts(editor) == ["ab"]
    assert editor.cursor_position == CursorPosition(2, 0)


def test_enter_splits_and_moves_to_next_line():
    editor = make_editor()
    type_text(editor, "ab\n")
    assert texts(editor) == ["ab", ""]
    assert editor.cursor_position == CursorPosition(0, 1)
    type_text(editor, "c")
    assert texts(editor) == ["ab", "c"]


def test_enter_in_middle_of_line():
    editor = make_editor(["hello world"])
    editor.cursor_position = CursorPosition(5, 0)
    editor.process_keypress(char("\n"))
    assert texts(editor) == ["hello", " world"]
    assert editor.cursor_position == CursorPosition(0, 1)


def test_combining_mark_keeps_cursor():
    editor = make_editor()
    type_text(editor, "e\u0301x")
    assert texts(editor) == ["e\u0301x"]
    assert editor.cursor_position == CursorPosition(2, 0)


def test_delete_joins_lines():
    editor = make_editor(["hello", "world"])
    editor.cursor_position = CursorPosition(5, 0)
    editor.process_keypress(key(Intent.DELETE))
    assert texts(editor) == ["helloworld"]
    assert editor.cursor_position == CursorPosition(5, 0)


def test_backspace_deletes_previous_character():
    editor = make_editor(["abc"])
    editor.cursor_position = CursorPosition(2, 0)
    editor.process_keypress(key(Intent.BACKSPACE))
    assert texts(editor) == ["ac"]
    assert editor.cursor_position == CursorPosition(1, 0)


def test_backspace_at_line_start_joins_with_previous():
    editor = make_editor(["hello", "world"])
    editor.cursor_position = CursorPosition(0, 1)
    editor.process_keypress(key(Intent.BACKSPACE))
    assert texts(editor) == ["helloworld"]
    assert editor.cursor_position == CursorPosition(5, 0)


def test_backspace_at_origin_does_nothing():
    editor = make_editor(["abc"])
    editor.process_keypress(key(Intent.BACKSPACE))
    assert texts(editor) == ["abc"]
    assert editor.cursor_position == CursorPosition(0, 0)


def test_navigation_keys_move_cursor():
    editor = make_editor(["abc", "de"])
    editor.process_keypress(key(Intent.END))
    assert editor.cursor_position == CursorPosition(3, 0)
    editor.process_keypress(key(Intent.DOWN))
    assert editor.cursor_position == CursorPosition(2, 1)
    editor.process_keypress(key(Intent.HOME))
    assert editor.cursor_position == CursorPosition(0, 1)
    editor.process_keypress(key(Intent.LEFT))
    assert editor.cursor_position == CursorPosition(3, 0)


def test_page_down_uses_viewport_height():
    editor = make_editor([f"Line {i}" for i in range(20)], height=5)
    editor.process_keypress(key(Intent.PAGE_DOWN))
    assert editor.cursor_position == CursorPosition(0, 5)
    assert editor.offset == CursorPosition(0, 1)


def test_scroll_follows_cursor_down_and_back():
    editor = make_editor([f"Line {i}" for i in range(10)], height=5)
    for _ in range(7):
        editor.process_keypress(key(Intent.DOWN))
    assert editor.offset == CursorPosition(0, 3)
    for _ in range(5):
        editor.process_keypress(key(Intent.UP))
    assert editor.cursor_position.y == 2
    assert editor.offset == CursorPosition(0, 2)


def test_horizontal_scroll():
    editor = make_editor(["x" * 50], width=20)
    editor.process_keypress(key(Intent.END))
    assert editor.offset == CursorPosition(31, 0)
    editor.process_keypress(key(Intent.HOME))
    assert editor.offset == CursorPosition(0, 0)


def test_quit_stops_running():
    editor = make_editor()
    editor.running = True
    editor.process_keypress(key(Intent.QUIT))
    assert editor.running is False


def test_ignored_keys_do_nothing():
    editor = make_editor(["abc"])
    editor.process_keypress(key(Intent.IGNORED))
    editor.process_keypress(key(Intent.CANCEL))
    assert texts(editor) == ["abc"]
    assert editor.cursor_position == CursorPosition(0, 0)


class TestLoadFile:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_load_existing_file(self):
        path = os.path.join(self.temp_dir, "a.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write("Line 1\nLine 2\n")
        editor = make_editor()
        editor.load_file(path)
        assert texts(editor) == ["Line 1", "Line 2"]
        assert editor.document.source_name == path

    def test_load_missing_file_keeps_name(self):
        path = os.path.join(self.temp_dir, "new.txt")
        editor = make_editor()
        editor.load_file(path)
        assert editor.document.is_empty()
        assert editor.document.source_name == path
        assert editor.status_message.text == f"New file: {path}"

    def test_load_unreadable_file_starts_unnamed(self):
        editor = make_editor()
        editor.load_file(self.temp_dir)  # a directory cannot be read as text
        assert editor.document.is_empty()
        assert editor.document.source_name is None
        assert editor.status_message.text == f"Could not load the file: {self.temp_dir}"


class TestSaving:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_save_named_document(self):
        path = os.path.join(self.temp_dir, "out.txt")
        editor = make_editor()
        editor.document = Document.from_lines(["one", "two"], source_name=path)
        editor.process_keypress(key(Intent.SAVE))
        with open(path, "rb") as f:
            assert f.read() == b"one\ntwo\n"
        assert editor.status_message.text == f"2 lines written to {path}"

    def test_save_failure_is_reported(self):
        path = os.path.join(self.temp_dir, "missing", "out.txt")
        editor = make_editor()
        editor.document = Document.from_lines(["one"], source_name=path)
        editor.process_keypress(key(Intent.SAVE))
        assert editor.status_message.text.startswith(f"Error: could not save {path}")
        # Editing continues
        type_text(editor, "x")
        assert texts(editor) == ["xone"]

    def test_save_unnamed_prompts_for_name(self):
        path = os.path.join(self.temp_dir, "named.txt")
        editor = make_editor(["hello"])
        editor.process_keypress(key(Intent.SAVE))
        assert editor.prompt_mode == 'save_as'

        type_text(editor, path)
        assert texts(editor) == ["hello"]  # Prompt input does not edit the buffer
        assert editor.message_text(200) == f"{EditorConstants.SAVE_AS_PROMPT}{path}"

        editor.process_keypress(char("\n"))
        assert editor.prompt_mode is None
        assert editor.document.source_name == path
        with open(path, "rb") as f:
            assert f.read() == b"hello\n"

    def test_prompt_backspace(self):
        editor = make_editor(["hello"])
        editor.process_keypress(key(Intent.SAVE))
        type_text(editor, "abc")
        editor.process_keypress(key(Intent.BACKSPACE))
        assert editor.prompt_input == "ab"

    def test_prompt_enter_with_empty_name_keeps_prompting(self):
        editor = make_editor(["hello"])
        editor.process_keypress(key(Intent.SAVE))
        editor.process_keypress(char("\n"))
        assert editor.prompt_mode == 'save_as'

    def test_prompt_cancel(self):
        editor = make_editor(["hello"])
        editor.process_keypress(key(Intent.SAVE))
        type_text(editor, "abc")
        editor.process_keypress(key(Intent.CANCEL))
        assert editor.prompt_mode is None
        assert editor.prompt_input == ""
        assert editor.document.source_name is None
        assert editor.status_message.text == "Save cancelled"

    def test_prompt_quit_cancels_instead_of_quitting(self):
        editor = make_editor(["hello"])
        editor.running = True
        editor.process_keypress(key(Intent.SAVE))
        editor.process_keypress(key(Intent.QUIT))
        assert editor.prompt_mode is None
        assert editor.running is True

    def test_save_as_failure_leaves_document_unnamed(self):
        path = os.path.join(self.temp_dir, "missing", "out.txt")
        editor = make_editor(["hello"])
        editor.process_keypress(key(Intent.SAVE))
        type_text(editor, path)
        editor.process_keypress(char("\n"))
        assert editor.document.source_name is None
        assert editor.status_message.text.startswith("Error: could not save")


def test_render_rows_with_offset():
    editor = make_editor(["hello world", "\tx"], width=5, height=4)
    editor.offset = CursorPosition(1, 0)
    assert editor.render_rows(ViewportSize(5, 4)) == ["ello ", "x", "~", "~"]


def test_render_rows_vertical_offset():
    editor = make_editor([f"Line {i}" for i in range(10)], height=3)
    editor.offset = CursorPosition(0, 8)
    assert editor.render_rows(ViewportSize(20, 3)) == ["Line 8", "Line 9", "~"]


def test_render_empty_document_shows_welcome():
    editor = make_editor(width=40, height=6)
    lines = editor.render_rows(ViewportSize(40, 6))
    assert len(lines) == 6
    assert lines[2].startswith("~")
    assert "LINEPAD -- version" in lines[2]
    assert all(line == "~" for i, line in enumerate(lines) if i != 2)


def test_welcome_can_be_disabled():
    editor = make_editor(show_welcome=False)
    assert editor.render_rows(ViewportSize(20, 5)) == ["~"] * 5


def test_welcome_truncated_to_width():
    editor = make_editor()
    assert len(editor.welcome_message(10)) == 10


def test_status_text():
    editor = make_editor(["a", "b", "c"])
    editor.document.source_name = "a_rather_long_file_name.txt"
    editor.cursor_position = CursorPosition(0, 1)
    status = editor.status_text(80)
    assert status.startswith("a_rather_long_file_n - 3 Lines.  Current line - Ln 2, Col 1")
    assert len(status) == 80


def test_status_text_truncated_and_configurable():
    editor = make_editor(["a"], file_name_width=4)
    editor.document.source_name = "abcdefgh"
    assert editor.status_text(200).startswith("abcd - 1 Lines.")
    assert len(editor.status_text(10)) == 10


def test_status_message_expires():
    editor = make_editor(status_message_seconds=5)
    editor.set_status("Saved")
    assert editor.message_text(80) == "Saved"
    editor._clock.now += 4.9
    assert editor.message_text(80) == "Saved"
    editor._clock.now += 0.2
    assert editor.message_text(80) == ""


def test_initial_help_message():
    editor = make_editor()
    assert editor.message_text(80) == EditorConstants.HELP_MESSAGE


def test_refresh_screen_sends_frame():
    editor = make_editor(["hello", "world"], width=20, height=3)
    editor.cursor_position = CursorPosition(2, 1)
    editor.refresh_screen()

    lines, cursor_y, cursor_x = editor.terminal.update_frame.call_args[0]
    assert lines[:3] == ["hello", "world", "~"]
    assert "2 Lines." in lines[3]
    assert lines[4] == EditorConstants.HELP_MESSAGE[:20]
    assert (cursor_y, cursor_x) == (1, 2)


def test_refresh_screen_cursor_relative_to_offset():
    editor = make_editor([f"Line {i}" for i in range(10)], height=3)
    editor.cursor_position = CursorPosition(3, 7)
    editor.offset = CursorPosition(1, 5)
    editor.refresh_screen()
    _, cursor_y, cursor_x = editor.terminal.update_frame.call_args[0]
    assert (cursor_y, cursor_x) == (2, 2)


def test_refresh_screen_puts_cursor_on_prompt():
    editor = make_editor(["hello"], width=30, height=3)
    editor.process_keypress(key(Intent.SAVE))
    type_text(editor, "ab")
    editor.refresh_screen()
    lines, cursor_y, cursor_x = editor.terminal.update_frame.call_args[0]
    assert lines[4] == "Save as: ab"
    assert (cursor_y, cursor_x) == (4, 11)


def test_run_processes_keys_until_quit():
    editor = make_editor()
    events = [char("h"), char("i"), key(Intent.QUIT)]
    with patch.object(editor.keyboard, 'get_key_event', side_effect=events):
        editor.run()
    assert texts(editor) == ["hi"]
    assert editor.running is False
    editor.terminal.__enter__.assert_called_once()
    editor.terminal.__exit__.assert_called_once()


def test_run_restores_terminal_on_fatal_error():
    editor = make_editor()
    with patch.object(editor.keyboard, 'get_key_event',
                      side_effect=FatalTerminalError("input failed")):
        with pytest.raises(FatalTerminalError):
            editor.run()
    editor.terminal.__exit__.assert_called_once()


def test_run_ends_on_keyboard_interrupt():
    editor = make_editor()
    with patch.object(editor.keyboard, 'get_key_event', side_effect=KeyboardInterrupt):
        editor.run()
    assert editor.running is False
    editor.terminal.__exit__.assert_called_once()


def test_resize_repaints_and_scrolls_cursor_into_view():
    editor = make_editor([f"Line {i}" for i in range(20)], height=10)
    editor.cursor_position = CursorPosition(0, 9)
    editor.refresh_screen()
    assert editor.offset == CursorPosition(0, 0)
    assert editor.terminal.invalidate_frame.call_count == 1

    editor.terminal.size.return_value = ViewportSize(width=20, height=4)
    editor.refresh_screen()
    assert editor.terminal.invalidate_frame.call_count == 2
    assert editor.offset == CursorPosition(0, 6)
    _, cursor_y, _ = editor.terminal.update_frame.call_args[0]
    assert cursor_y == 3

    editor.refresh_screen()
    assert editor.terminal.invalidate_frame.call_count == 2
