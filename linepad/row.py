"""A single line of text, indexed by grapheme cluster."""

from typing import Optional

import grapheme


class Row:
    """One line of the document.

    All indices taken by the methods below count user-perceived characters
    (extended grapheme clusters), never code points or bytes. The cluster
    count is cached and recomputed after every mutation.
    """

    def __init__(self, text: str = ""):
        self.text = text
        self._length = 0
        self._update_length()

    @classmethod
    def from_text(cls, text: str) -> "Row":
        return cls(text)

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Row({self.text!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self.text == other.text

    def _update_length(self):
        self._length = grapheme.length(self.text)

    def _graphemes(self) -> list[str]:
        return list(grapheme.graphemes(self.text))

    def length(self) -> int:
        """Number of grapheme clusters in the row."""
        return self._length

    def is_empty(self) -> bool:
        return self._length == 0

    def insert(self, at: int, character: str):
        """Insert a character before the cluster at index `at`.

        Appends when `at` is at or past the end of the row; a negative `at`
        inserts at the start.
        """
        at = max(at, 0)
        if at >= self._length:
            self.text += character
        else:
            clusters = self._graphemes()
            self.text = "".join(clusters[:at]) + character + "".join(clusters[at:])
        self._update_length()

    def delete(self, at: int):
        """Remove the cluster at index `at`. Does nothing out of range."""
        if at < 0 or at >= self._length:
            return
        clusters = self._graphemes()
        del clusters[at]
        self.text = "".join(clusters)
        self._update_length()

    def split(self, at: int) -> "Row":
        """Truncate this row to `at` clusters and return the rest as a new row."""
        at = max(at, 0)
        clusters = self._graphemes()
        self.text = "".join(clusters[:at])
        self._update_length()
        return Row("".join(clusters[at:]))

    def append(self, other: "Row"):
        """Concatenate another row onto the end of this one."""
        self.text += other.text
        self._update_length()

    def render(self, start: int, end: Optional[int] = None) -> str:
        """Return the visible slice of the row between two cluster indices.

        Args:
            start: First cluster to show.
            end: One past the last cluster to show (defaults to the row end).

        Returns:
            The clusters in [start, end), clamped to the row. Tabs are shown
            as a single space; no tab-stop expansion is done.
        """
        end = self._length if end is None else min(end, self._length)
        start = max(0, min(start, end))
        if start == end:
            return ""
        visible = grapheme.slice(self.text, start, end)
        return "".join(
            " " if cluster == "\t" else cluster
            for cluster in grapheme.graphemes(visible)
        )

    def as_bytes(self) -> bytes:
        """UTF-8 encoded text, as written to disk."""
        return self.text.encode("utf-8")
