"""Keyboard input handling using curtsies-style tokens."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Intent(Enum):
    """What a key press asks the editor to do."""
    CHARACTER = "character"
    DELETE = "delete"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    SAVE = "save"
    QUIT = "quit"
    CANCEL = "cancel"
    IGNORED = "ignored"


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    intent: Intent
    raw: str  # The raw token from the terminal
    char: Optional[str] = None  # Set for CHARACTER events


_SPECIAL_KEYS = {
    'up': Intent.UP,
    'down': Intent.DOWN,
    'left': Intent.LEFT,
    'right': Intent.RIGHT,
    'page_up': Intent.PAGE_UP,
    'page_down': Intent.PAGE_DOWN,
    'home': Intent.HOME,
    'end': Intent.END,
    'delete': Intent.DELETE,
    'backspace': Intent.BACKSPACE,
}

_CTRL_KEYS = {
    'q': Intent.QUIT,
    's': Intent.SAVE,
    'g': Intent.CANCEL,
}


class KeyboardHandler:
    """Turns terminal key tokens into KeyEvents."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self) -> Optional[KeyEvent]:
        """Block for the next key and parse it."""
        key = self.terminal.get_key()
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key token into a KeyEvent.

        Args:
            key: Token such as 'a', '<LEFT>', '<Ctrl-q>' or a raw control char

        Returns:
            Parsed KeyEvent
        """
        key_str = str(key)

        # Curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Esc+u>'
        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            return self._parse_token(key_str)

        if len(key_str) == 1:
            o = ord(key_str)
            if key_str in ('\n', '\r'):
                return KeyEvent(Intent.CHARACTER, key_str, char='\n')
            if key_str == '\t':
                return KeyEvent(Intent.CHARACTER, key_str, char='\t')
            if key_str in ('\x7f', '\x08'):
                return KeyEvent(Intent.BACKSPACE, key_str)
            if key_str == '\x1b':
                return KeyEvent(Intent.CANCEL, key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z
                return self._ctrl_event(chr(ord('a') + o - 1), key_str)
            if o < 32:
                return KeyEvent(Intent.IGNORED, key_str)

        # Multi-character tokens that are not names are escape sequences
        # curtsies could not decode
        if len(key_str) != 1 and key_str.startswith('\x1b'):
            return KeyEvent(Intent.IGNORED, key_str)

        return KeyEvent(Intent.CHARACTER, key_str, char=key_str)

    def _parse_token(self, key_str: str) -> KeyEvent:
        name = key_str[1:-1].lower().replace('+', '-')
        parts = name.split('-')
        base = parts[-1]
        mods = set(parts[:-1])
        if base in ('pageup', 'page_up'):
            base = 'page_up'
        elif base in ('pagedown', 'page_down'):
            base = 'page_down'

        if not mods:
            if base in ('space', 'spacebar', 'spc'):
                return KeyEvent(Intent.CHARACTER, key_str, char=' ')
            if base == 'tab':
                return KeyEvent(Intent.CHARACTER, key_str, char='\t')
            if base in ('enter', 'return'):
                return KeyEvent(Intent.CHARACTER, key_str, char='\n')
            if base in ('esc', 'escape'):
                return KeyEvent(Intent.CANCEL, key_str)
            if base in _SPECIAL_KEYS:
                return KeyEvent(_SPECIAL_KEYS[base], key_str)

        if mods == {'ctrl'} and len(base) == 1:
            return self._ctrl_event(base, key_str)

        return KeyEvent(Intent.IGNORED, key_str)

    def _ctrl_event(self, letter: str, raw: str) -> KeyEvent:
        # Terminals send Ctrl-J / Ctrl-M for Enter and Ctrl-I for Tab
        if letter in ('j', 'm'):
            return KeyEvent(Intent.CHARACTER, raw, char='\n')
        if letter == 'i':
            return KeyEvent(Intent.CHARACTER, raw, char='\t')
        if letter == 'h':
            return KeyEvent(Intent.BACKSPACE, raw)
        return KeyEvent(_CTRL_KEYS.get(letter, Intent.IGNORED), raw)
