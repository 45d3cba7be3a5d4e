#!/usr/bin/env python3
"""Texit - a small terminal text editor.

Usage:
    python main.py [filename]

Controls:
    Arrow keys, Home/End, PageUp/PageDown: Navigate
    Ctrl-S: Save file
    Ctrl-Q: Quit
    Type to insert text
"""

import sys
from texit.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
