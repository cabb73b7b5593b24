"""linepad - a small terminal line editor."""

from .row import Row
from .document import Document
from .viewport import CursorPosition, ViewportSize, Motion, move_cursor, scroll
from .errors import LinepadError, LoadError, SaveError, FatalTerminalError

__all__ = [
    'Row',
    'Document',
    'CursorPosition',
    'ViewportSize',
    'Motion',
    'move_cursor',
    'scroll',
    'LinepadError',
    'LoadError',
    'SaveError',
    'FatalTerminalError',
]
