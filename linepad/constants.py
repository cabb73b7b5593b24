"""Constants and configuration defaults for the linepad editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Screen layout
    RESERVED_BOTTOM_LINES = 2  # Status bar + message bar
    EMPTY_ROW_MARKER = "~"
    WELCOME_MESSAGE = "LINEPAD -- version {}"

    # Status bar
    FILE_NAME_WIDTH = 20  # File name is truncated to this many characters
    STATUS_FG_COLOR = (63, 63, 63)
    STATUS_BG_COLOR = (239, 239, 239)
    STATUS_TEMPLATE = "{name} - {lines} Lines.  Current line - Ln {line}, Col {column}"

    # Message bar
    STATUS_MESSAGE_SECONDS = 5.0  # How long a message stays visible
    HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"
    SAVE_AS_PROMPT = "Save as: "

    # Files
    ENCODING = "utf-8"
    LINE_TERMINATOR = b"\n"

    # Exit
    GOODBYE_MESSAGE = "Good bye!"
