#!/usr/bin/env python3
"""linepad - a small terminal line editor.

Usage:
    python main.py [filename]

Controls:
    Arrow keys, Home/End, PageUp/PageDown: Navigate
    Ctrl-S: Save file (asks for a name if the document has none)
    Ctrl-Q: Quit
    Type to insert text
    Backspace / Delete: Delete character
    Enter: Split line
"""

from linepad.__main__ import main


if __name__ == "__main__":
    main()
