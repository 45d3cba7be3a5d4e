"""Texit CLI entry point.

Allows running via `python -m texit` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from .version import get_version_string

logger = logging.getLogger(__name__)

USAGE = "usage: texit [--version] [--keytest] [--log-file PATH] [FILE]"


def describe_key(ev) -> str:
    """Return a one-line description of a key event and its bytes."""
    codes = ' '.join(str(b) for b in ev.raw)
    if ev.code is not None and 0x20 <= ev.code < 0x7f:
        return f"{codes} ('{ev.value}')"
    return f"{codes} [{ev.key_type.value} {ev.value}]"


def run_keyboard_test() -> None:
    """Echo decoded key events in raw mode. Quit with 'q'."""
    from .config import load_settings
    from .keyboard import KeyType, create_key_decoder
    from .terminal import TerminalInterface

    settings = load_settings()
    term = TerminalInterface()
    term.setup()
    try:
        term.write(b"Keyboard test mode -- press keys to see decoded events. Quit with q.\r\n")
        decoder = create_key_decoder(term, settings.escape_timeout)
        while True:
            ev = decoder.next_key()
            # Raw mode disables output processing, so lines need \r\n
            term.write(describe_key(ev).encode('latin-1') + b"\r\n")
            if ev.key_type == KeyType.REGULAR and ev.value == 'q':
                break
    finally:
        term.cleanup()


def configure_logging(log_file: Optional[str]) -> Optional[logging.Handler]:
    """Send texit's log records to a file; never to the raw-mode terminal."""
    log_file = log_file or os.environ.get("TEXIT_LOG")
    if not log_file:
        return None
    handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    package_logger = logging.getLogger("texit")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    return handler


def parse_args(argv: list[str]) -> dict:
    """Very small arg parsing: flags first, then an optional filename."""
    opts = {'version': False, 'keytest': False, 'log_file': None, 'filename': None}
    args = list(argv)
    while args:
        arg = args.pop(0)
        if arg in ("--version", "-V"):
            opts['version'] = True
        elif arg in ("--keytest", "--keyboard-test"):
            opts['keytest'] = True
        elif arg == "--log-file":
            if not args:
                raise ValueError("--log-file needs a path")
            opts['log_file'] = args.pop(0)
        elif arg.startswith("-") and arg != "-":
            raise ValueError(f"unknown option {arg}")
        elif opts['filename'] is None:
            opts['filename'] = arg
        else:
            raise ValueError("only one file can be edited at a time")
    return opts


def main(argv: Optional[list[str]] = None) -> int:
    try:
        opts = parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        print(f"texit: {e}\n{USAGE}", file=sys.stderr)
        return 2
    if opts['version']:
        print(get_version_string())
        return 0

    configure_logging(opts['log_file'])

    # Lazy import to avoid importing terminal deps for --version
    from .config import load_settings
    from .editor import EditSession
    from .terminal import TerminalError

    try:
        if opts['keytest']:
            run_keyboard_test()
            return 0

        session = EditSession(settings=load_settings())
        if opts['filename']:
            try:
                session.load_file(opts['filename'])
            except OSError as e:
                print(f"texit: {opts['filename']}: {e.strerror or e}", file=sys.stderr)
                return 1
        session.run()
    except TerminalError as e:
        logger.error(f"Fatal terminal error: {e}")
        print(f"texit: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
