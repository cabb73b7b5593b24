"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
from collections import deque
from typing import Optional

import blessed

from .constants import EditorConstants
from .errors import FatalTerminalError
from .viewport import ViewportSize

logger = logging.getLogger(__name__)

_LINE_BREAK_KEYS = ('\r', '<Ctrl-m>', '<Ctrl-M>')
_NEWLINE_KEYS = ('\n', '<Ctrl-j>', '<Ctrl-J>')


def _paste_keys(keys: list[str]) -> list[str]:
    """Pasted keys with each CR-LF pair collapsed into the LF."""
    result = []
    for i, key in enumerate(keys):
        if key in _LINE_BREAK_KEYS and i + 1 < len(keys) and keys[i + 1] in _NEWLINE_KEYS:
            continue
        result.append(key)
    return result


class TerminalInterface:
    """Handles terminal I/O using Blessed.

    Use it as a context manager: entering switches to the alternate screen
    and raw input mode, leaving always restores the previous state.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._input = None
        self._pending_keys: deque[str] = deque()
        # Virtual screen state for minimal updates
        self._last_lines: Optional[list[str]] = None

    def __enter__(self) -> "TerminalInterface":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False

    def setup(self):
        """Enter fullscreen mode and raw keyboard input."""
        try:
            from curtsies import Input
            self._input = Input(keynames='curtsies', disable_terminal_start_stop=True)
            self._input.__enter__()
        except Exception as e:
            self._input = None
            raise FatalTerminalError(f"Could not enter raw mode: {e}") from e
        print(self.term.enter_fullscreen + self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        self._last_lines = None

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen + self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._input is not None:
            try:
                self._input.__exit__(None, None, None)
            except Exception as e:
                # Teardown must not mask the error that got us here
                logger.warning(f"Could not restore terminal mode: {e}")
            finally:
                self._input = None

    def size(self) -> ViewportSize:
        """Size of the text area: the screen minus the status and message bars.

        Raises:
            FatalTerminalError: If the geometry cannot be queried or leaves
                no room for text.
        """
        try:
            width, height = self.term.width, self.term.height
        except (OSError, ValueError) as e:
            raise FatalTerminalError(f"Could not query terminal size: {e}") from e
        text_height = height - EditorConstants.RESERVED_BOTTOM_LINES
        if width < 1 or text_height < 1:
            raise FatalTerminalError(f"Terminal too small: {width}x{height}")
        return ViewportSize(width=width, height=text_height)

    def get_key(self) -> Optional[str]:
        """Block until the next key token arrives.

        Pasted text arrives from curtsies as one event; it is handed out one
        key at a time.
        """
        if self._pending_keys:
            return self._pending_keys.popleft()
        if self._input is None:
            raise FatalTerminalError("Keyboard input is not active")
        try:
            event = next(self._input)
        except OSError as e:
            raise FatalTerminalError(f"Could not read from terminal: {e}") from e
        if event is None:
            return None
        events = getattr(event, 'events', None)
        if events is not None:
            self._pending_keys.extend(_paste_keys([str(e) for e in events]))
            return self._pending_keys.popleft() if self._pending_keys else None
        return str(event)

    def status_style(self, fg: tuple[int, int, int], bg: tuple[int, int, int]) -> str:
        return self.term.color_rgb(*fg) + self.term.on_color_rgb(*bg)

    def invalidate_frame(self) -> None:
        """Force the next update to repaint every line."""
        self._last_lines = None

    def update_frame(self, lines: list[str], cursor_y: int, cursor_x: int) -> None:
        """Diff against last frame and write only changed lines.

        Args:
            lines: Every screen line, top to bottom, already styled and
                fitted to the width.
            cursor_y: Cursor screen row
            cursor_x: Cursor screen column
        """
        out = [self.term.hide_cursor]
        if self._last_lines is None or len(self._last_lines) != len(lines):
            out.append(self.term.home + self.term.clear)
            self._last_lines = [None] * len(lines)
        for y, line in enumerate(lines):
            if line != self._last_lines[y]:
                out.append(self.term.move_yx(y, 0) + line + self.term.normal + self.term.clear_eol)
                self._last_lines[y] = line
        out.append(self.term.move_yx(cursor_y, cursor_x) + self.term.normal_cursor)
        print(''.join(out), end='', flush=True)
