"""Main editor controller."""

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .constants import EditorConstants
from .document import Document
from .errors import LoadError, SaveError
from .keyboard import Intent, KeyboardHandler, KeyEvent
from .settings import EditorSettings, get_settings
from .terminal import TerminalInterface
from .version import get_version_string
from .viewport import (
    CursorPosition,
    Motion,
    ViewportSize,
    move_cursor,
    screen_position,
    scroll,
)

_MOTIONS = {
    Intent.UP: Motion.UP,
    Intent.DOWN: Motion.DOWN,
    Intent.LEFT: Motion.LEFT,
    Intent.RIGHT: Motion.RIGHT,
    Intent.PAGE_UP: Motion.PAGE_UP,
    Intent.PAGE_DOWN: Motion.PAGE_DOWN,
    Intent.HOME: Motion.HOME,
    Intent.END: Motion.END,
}


@dataclass
class StatusMessage:
    text: str
    timestamp: float = field(default_factory=time.monotonic)


class Editor:
    """An editing session: one document, a cursor and a viewport."""

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[EditorSettings] = None,
                 clock: Callable[[], float] = time.monotonic):
        """Initialize the editor components."""
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.settings = settings or get_settings()
        self._clock = clock
        self.document = Document()
        self.cursor_position = CursorPosition()
        self.offset = CursorPosition()
        self.running = False
        self.status_message = StatusMessage(EditorConstants.HELP_MESSAGE, clock())
        self.prompt_mode: Optional[str] = None  # None or 'save_as'
        self.prompt_input = ""
        self._last_size: Optional[ViewportSize] = None

    def set_status(self, text: str):
        self.status_message = StatusMessage(text, self._clock())

    def load_file(self, filename: str):
        """Open a file, falling back to an empty document if it can't be read.

        A missing file keeps its name so that saving creates it.

        Args:
            filename: Path to file to load
        """
        try:
            self.document = Document.open(filename)
        except LoadError as e:
            if isinstance(e.__cause__, FileNotFoundError):
                self.document = Document(source_name=filename)
                self.set_status(f"New file: {filename}")
            else:
                self.document = Document()
                self.set_status(f"Could not load the file: {filename}")
        self.cursor_position = CursorPosition()
        self.offset = CursorPosition()

    def run(self):
        """Run the main editor loop.

        FatalTerminalError propagates to the caller once the terminal has
        been restored.
        """
        self.running = True
        try:
            with self.terminal:
                while self.running:
                    self.refresh_screen()
                    key_event = self.keyboard.get_key_event()
                    if key_event:
                        self.process_keypress(key_event)
        except KeyboardInterrupt:
            self.running = False

    def process_keypress(self, key_event: KeyEvent):
        """Apply one key event, then scroll the cursor into view."""
        if self.prompt_mode:
            self._handle_prompt(key_event)
            return

        intent = key_event.intent
        if intent is Intent.QUIT:
            self.running = False
        elif intent is Intent.CHARACTER and key_event.char:
            self._insert_character(key_event.char)
        elif intent is Intent.DELETE:
            self.document.delete(self.cursor_position)
        elif intent is Intent.BACKSPACE:
            if self.cursor_position.x > 0 or self.cursor_position.y > 0:
                self.move_cursor(Motion.LEFT)
                self.document.delete(self.cursor_position)
        elif intent in _MOTIONS:
            self.move_cursor(_MOTIONS[intent])
        elif intent is Intent.SAVE:
            self.save()

        self.scroll()

    def _row_length(self, y: int) -> int:
        row = self.document.row(y)
        return row.length() if row is not None else 0

    def _insert_character(self, char: str):
        y = self.cursor_position.y
        before = self._row_length(y)
        self.document.insert(self.cursor_position, char)
        # A combining mark merges into the previous cluster; the cursor stays put
        if char == "\n" or self._row_length(y) > before:
            self.move_cursor(Motion.RIGHT)

    def move_cursor(self, motion: Motion):
        height = self.terminal.size().height
        self.cursor_position = move_cursor(motion, self.document, self.cursor_position, height)

    def scroll(self):
        self.offset = scroll(self.cursor_position, self.terminal.size(), self.offset)

    # Saving

    def save(self):
        """Save to the document's file, or ask for a name if it has none."""
        if not self.document.source_name:
            self.prompt_mode = 'save_as'
            self.prompt_input = ""
            return
        try:
            self.document.save()
        except SaveError as e:
            self.set_status(f"Error: could not save {e.path}: {e.reason}")
            return
        self.set_status(f"{self.document.length()} lines written to {self.document.source_name}")

    def _handle_prompt(self, key_event: KeyEvent):
        """Handle keypress during the save-as prompt."""
        intent = key_event.intent
        if intent in (Intent.CANCEL, Intent.QUIT):
            self.prompt_mode = None
            self.prompt_input = ""
            self.set_status("Save cancelled")
        elif intent is Intent.BACKSPACE:
            self.prompt_input = self.prompt_input[:-1]
        elif intent is Intent.CHARACTER and key_event.char == "\n":
            filename = self.prompt_input
            if not filename:
                return
            self.prompt_mode = None
            self.prompt_input = ""
            try:
                self.document.save_as(filename)
            except SaveError as e:
                self.document.source_name = None
                self.set_status(f"Error: could not save {e.path}: {e.reason}")
                return
            self.set_status(f"{self.document.length()} lines written to {filename}")
        elif intent is Intent.CHARACTER and key_event.char and key_event.char.isprintable():
            self.prompt_input += key_event.char

    # Rendering

    def render_rows(self, size: ViewportSize) -> list[str]:
        """Text shown in each row of the viewport, top to bottom."""
        lines = []
        start = self.offset.x
        end = self.offset.x + size.width
        for screen_row in range(size.height):
            row = self.document.row(screen_row + self.offset.y)
            if row is not None:
                lines.append(row.render(start, end))
            elif (self.document.is_empty() and self.settings.show_welcome
                  and screen_row == size.height // 3):
                lines.append(self.welcome_message(size.width))
            else:
                lines.append(EditorConstants.EMPTY_ROW_MARKER)
        return lines

    def welcome_message(self, width: int) -> str:
        message = EditorConstants.WELCOME_MESSAGE.format(get_version_string())
        padding = max(width - len(message), 0) // 2
        spaces = " " * max(padding - 1, 0)
        return f"{EditorConstants.EMPTY_ROW_MARKER}{spaces}{message}"[:width]

    def status_text(self, width: int) -> str:
        """Status bar contents, padded or truncated to the screen width."""
        name = (self.document.source_name or " ")[:self.settings.file_name_width]
        status = EditorConstants.STATUS_TEMPLATE.format(
            name=name,
            lines=self.document.length(),
            line=self.cursor_position.y + 1,
            column=self.cursor_position.x + 1,
        )
        return status.ljust(width)[:width]

    def message_text(self, width: int) -> str:
        """Message bar contents: the prompt, or a recent status message."""
        if self.prompt_mode == 'save_as':
            return f"{EditorConstants.SAVE_AS_PROMPT}{self.prompt_input}"[:width]
        message = self.status_message
        if self._clock() - message.timestamp < self.settings.status_message_seconds:
            return message.text[:width]
        return ""

    def refresh_screen(self):
        """Draw the current editor state to terminal."""
        size = self.terminal.size()
        if size != self._last_size:
            # Resized: repaint everything and bring the cursor back into view
            self.terminal.invalidate_frame()
            self.offset = scroll(self.cursor_position, size, self.offset)
            self._last_size = size
        style = self.terminal.status_style(self.settings.status_fg, self.settings.status_bg)
        lines = self.render_rows(size)
        lines.append(style + self.status_text(size.width))
        message = self.message_text(size.width)
        lines.append(message)

        if self.prompt_mode:
            cursor_y, cursor_x = size.height + 1, min(len(message), size.width - 1)
        else:
            cursor_y, cursor_x = screen_position(self.cursor_position, self.offset)
        self.terminal.update_frame(lines, cursor_y, cursor_x)
