"""Cursor motion and scroll-offset arithmetic.

Everything here is a pure function of the cursor, the document's shape and
the viewport size. The editor owns the resulting positions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .document import Document


@dataclass
class CursorPosition:
    """A (column, line) pair, both zero-based.

    Columns count grapheme clusters. The same type doubles as the viewport
    offset, i.e. the document coordinate of the top-left visible cell.
    """
    x: int = 0
    y: int = 0


@dataclass
class ViewportSize:
    width: int
    height: int


class Motion(Enum):
    """Cursor navigation keys."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"


def _row_length(document: "Document", y: int) -> int:
    row = document.row(y)
    return row.length() if row is not None else 0


def move_cursor(motion: Motion, document: "Document", cursor: CursorPosition,
                viewport_height: int) -> CursorPosition:
    """Compute the cursor position after a navigation key.

    The cursor may rest one line past the last row, where a new line would
    be appended. After every motion the column is clamped to the length of
    the row the cursor ends up on; the clamp is not remembered, so moving
    back onto a longer row does not restore the old column.

    Args:
        motion: The navigation key.
        document: Document the cursor moves in.
        cursor: Current position.
        viewport_height: Number of visible text rows, used by page keys.

    Returns:
        A new CursorPosition; the input is not modified.
    """
    x, y = cursor.x, cursor.y
    height = document.length()
    width = _row_length(document, y)

    if motion is Motion.UP:
        y = max(y - 1, 0)
    elif motion is Motion.DOWN:
        if y < height:
            y += 1
    elif motion is Motion.LEFT:
        if x > 0:
            x -= 1
        elif y > 0:
            y -= 1
            x = _row_length(document, y)
    elif motion is Motion.RIGHT:
        if x < width:
            x += 1
        elif y < height:
            y += 1
            x = 0
    elif motion is Motion.PAGE_UP:
        y = y - viewport_height if y > viewport_height else 0
    elif motion is Motion.PAGE_DOWN:
        y = y + viewport_height if y + viewport_height < height else height
    elif motion is Motion.HOME:
        x = 0
    elif motion is Motion.END:
        x = width

    x = min(x, _row_length(document, y))
    return CursorPosition(x, y)


def scroll(cursor: CursorPosition, size: ViewportSize,
           offset: CursorPosition) -> CursorPosition:
    """Return the offset that keeps the cursor visible with minimal scrolling."""
    x_offset, y_offset = offset.x, offset.y

    if cursor.y < y_offset:
        y_offset = cursor.y
    elif cursor.y >= y_offset + size.height:
        y_offset = max(cursor.y - size.height + 1, 0)

    if cursor.x < x_offset:
        x_offset = cursor.x
    elif cursor.x >= x_offset + size.width:
        x_offset = max(cursor.x - size.width + 1, 0)

    return CursorPosition(x_offset, y_offset)


def screen_position(cursor: CursorPosition, offset: CursorPosition) -> tuple[int, int]:
    """Cursor location relative to the viewport, as (row, column)."""
    return (max(cursor.y - offset.y, 0), max(cursor.x - offset.x, 0))
