"""The document: an ordered list of rows plus its file name."""

import logging
from typing import Iterator, Optional

from .constants import EditorConstants
from .errors import LoadError, SaveError
from .row import Row
from .viewport import CursorPosition

logger = logging.getLogger(__name__)


class Document:
    """Text buffer made of rows, one per line.

    An empty document has no rows at all, not one empty row. Positions past
    the end of the buffer are never an error: edits there either append or
    do nothing.
    """

    def __init__(self, rows: Optional[list[Row]] = None, source_name: Optional[str] = None):
        self.rows: list[Row] = list(rows) if rows is not None else []
        self.source_name = source_name

    @classmethod
    def from_lines(cls, lines: list[str], source_name: Optional[str] = None) -> "Document":
        return cls([Row(line) for line in lines], source_name=source_name)

    @classmethod
    def open(cls, path: str) -> "Document":
        """Load a file, one row per line.

        Line terminators (\\n, \\r\\n, \\r) are stripped.

        Args:
            path: File to read.

        Returns:
            A Document whose source_name is `path`.

        Raises:
            LoadError: If the file cannot be read or decoded.
        """
        try:
            with open(path, "r", encoding=EditorConstants.ENCODING) as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not load {path}: {e}")
            raise LoadError(path, str(e)) from e

        lines = content.split("\n")
        # A trailing terminator does not start another line
        if lines[-1] == "":
            lines.pop()
        return cls.from_lines(lines, source_name=path)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def row(self, index: int) -> Optional[Row]:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    def length(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.rows

    def insert(self, position: CursorPosition, character: str):
        """Insert a character at a position.

        A newline splits the row at the cursor. Inserting on the line just
        past the last row appends a new row; further out, nothing happens.
        """
        if position.y < 0:
            return
        if character == "\n":
            self._insert_newline(position)
            return
        if position.y == len(self.rows):
            self.rows.append(Row(character))
        elif position.y < len(self.rows):
            self.rows[position.y].insert(position.x, character)

    def _insert_newline(self, position: CursorPosition):
        if position.y > len(self.rows):
            return
        if position.y == len(self.rows):
            self.rows.append(Row())
            return
        remainder = self.rows[position.y].split(position.x)
        self.rows.insert(position.y + 1, remainder)

    def delete(self, position: CursorPosition):
        """Delete the character at a position.

        At the end of any row but the last, the next row is joined onto this
        one. At the end of the buffer this is a no-op.
        """
        if position.y < 0 or position.y >= len(self.rows):
            return
        row = self.rows[position.y]
        if position.x == row.length() and position.y < len(self.rows) - 1:
            next_row = self.rows.pop(position.y + 1)
            row.append(next_row)
        else:
            row.delete(position.x)

    def save(self):
        """Write every row, each followed by a newline, to source_name.

        The file is truncated and rewritten in place. Does nothing when the
        document has no file name.

        Raises:
            SaveError: If the file cannot be written.
        """
        if not self.source_name:
            return
        try:
            with open(self.source_name, "wb") as f:
                for row in self.rows:
                    f.write(row.as_bytes())
                    f.write(EditorConstants.LINE_TERMINATOR)
        except OSError as e:
            logger.warning(f"Could not save {self.source_name}: {e}")
            raise SaveError(self.source_name, e.strerror or str(e)) from e

    def save_as(self, path: str):
        """Give the document a file name and save it there."""
        self.source_name = path
        self.save()
