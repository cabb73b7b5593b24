"""Exception types raised by the editor.

Buffer operations never raise; only the boundaries (file I/O and the
terminal device) do.
"""


class LinepadError(Exception):
    """Base class for editor errors."""


class LoadError(LinepadError):
    """A document could not be read from disk."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not load {path}: {reason}")
        self.path = path
        self.reason = reason


class SaveError(LinepadError):
    """A document could not be written to disk."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not save {path}: {reason}")
        self.path = path
        self.reason = reason


class FatalTerminalError(LinepadError):
    """The terminal itself failed; the session cannot continue."""
