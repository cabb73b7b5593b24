"""linepad CLI entry point.

Allows running via `python -m linepad [path]` and provides the console
script defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import platformdirs

from .constants import EditorConstants
from .errors import FatalTerminalError

logger = logging.getLogger("linepad")


def configure_logging(log_dir: Path | None = None) -> logging.Handler:
    """Send log records to a file, never to the screen the editor draws on.

    The level comes from LINEPAD_LOG_LEVEL (default WARNING).
    """
    level_name = os.environ.get("LINEPAD_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logger.setLevel(level)
    logger.propagate = False

    log_dir = log_dir or Path(platformdirs.user_log_dir("linepad"))
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_dir / "linepad.log", encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    return handler


def main() -> None:
    args = sys.argv[1:]
    configure_logging()

    # Lazy import so logging is set up before the terminal is touched
    from .editor import Editor
    try:
        editor = Editor()
        if args:
            editor.load_file(args[0])
        editor.run()
    except FatalTerminalError as e:
        logger.error(f"Terminal failure: {e}")
        print(f"linepad: {e}", file=sys.stderr)
        sys.exit(1)

    print(EditorConstants.GOODBYE_MESSAGE)


if __name__ == "__main__":  # pragma: no cover
    main()
