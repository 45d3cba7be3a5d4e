"""Keyboard input decoding from raw terminal bytes."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from .constants import EditorConstants, ESC, DEL, TAB, ENTER

logger = logging.getLogger(__name__)


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a decoded keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'q' for Ctrl-Q, 'left', 'escape')
    raw: bytes  # The bytes that produced this event
    code: Optional[int] = None  # Byte value for single-byte keys


class ByteSource(Protocol):
    """Anything the decoder can pull bytes from."""

    def read(self, timeout: Optional[float] = None) -> bytes:
        """Return one byte, or b'' if nothing arrived before the timeout."""


class BufferSource:
    """In-memory byte source.

    Reads with a timeout return b'' once the buffer is exhausted; a blocking
    read on an exhausted buffer raises EOFError since no more input can ever
    arrive.
    """

    def __init__(self, data: bytes = b""):
        self._data = bytearray(data)

    def feed(self, data: bytes) -> None:
        self._data.extend(data)

    def read(self, timeout: Optional[float] = None) -> bytes:
        if not self._data:
            if timeout is None:
                raise EOFError("input exhausted")
            return b""
        byte = bytes(self._data[:1])
        del self._data[:1]
        return byte

    def __len__(self) -> int:
        return len(self._data)


class DecoderState(Enum):
    START = "start"
    GOT_ESC = "got_esc"
    GOT_BRACKET = "got_bracket"
    GOT_DIGIT = "got_digit"
    GOT_O = "got_o"


# ESC [ <letter>
BRACKET_LETTERS = {
    ord('A'): 'up',
    ord('B'): 'down',
    ord('C'): 'right',
    ord('D'): 'left',
    ord('H'): 'home',
    ord('F'): 'end',
}

# ESC [ <digit> ~
BRACKET_DIGITS = {
    ord('1'): 'home',
    ord('7'): 'home',
    ord('3'): 'delete',
    ord('4'): 'end',
    ord('8'): 'end',
    ord('5'): 'page_up',
    ord('6'): 'page_down',
}

# ESC O <letter>
SS3_LETTERS = {
    ord('H'): 'home',
    ord('F'): 'end',
}


def special(value: str, raw: bytes) -> KeyEvent:
    return KeyEvent(key_type=KeyType.SPECIAL, value=value, raw=raw)


def escape_event(raw: bytes = b"\x1b") -> KeyEvent:
    return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=raw, code=ESC)


def parse_byte(code: int) -> KeyEvent:
    """Classify a single byte that is not the start of an escape sequence."""
    raw = bytes([code])
    if code == DEL:
        # Backspace key sends DEL in raw mode
        return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=raw, code=code)
    if code == ENTER:
        return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=raw, code=code)
    if code == TAB:
        return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=raw, code=code)
    if code < 0x20:
        # Ctrl-@ .. Ctrl-_ ; 17 is Ctrl-Q
        return KeyEvent(key_type=KeyType.CTRL, value=chr(code | 0x40).lower(), raw=raw, code=code)
    return KeyEvent(key_type=KeyType.REGULAR, value=raw.decode('latin-1'), raw=raw, code=code)


class KeyDecoder:
    """Turns a byte stream into one KeyEvent per call.

    Escape sequences are recognised with a small state machine. Once an ESC
    byte has been read, every further read is bounded by ``escape_timeout``;
    a sequence that stops short or does not match a known key decodes to a
    bare ESCAPE rather than blocking or raising.
    """

    def __init__(self, source: ByteSource,
                 escape_timeout: float = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT):
        self.source = source
        self.escape_timeout = escape_timeout
        self.state = DecoderState.START

    def _read_first(self) -> int:
        byte = b""
        while not byte:
            byte = self.source.read(None)
        return byte[0]

    def _read_next(self) -> Optional[int]:
        byte = self.source.read(self.escape_timeout)
        if not byte:
            return None
        return byte[0]

    def next_key(self) -> KeyEvent:
        """Block until a key is available and return it."""
        try:
            return self._decode()
        finally:
            self.state = DecoderState.START

    def _decode(self) -> KeyEvent:
        code = self._read_first()
        if code != ESC:
            return parse_byte(code)

        self.state = DecoderState.GOT_ESC
        raw = bytearray([code])
        while True:
            nxt = self._read_next()
            if nxt is None:
                return escape_event(bytes(raw))
            raw.append(nxt)

            if self.state == DecoderState.GOT_ESC:
                if nxt == ord('['):
                    self.state = DecoderState.GOT_BRACKET
                elif nxt == ord('O'):
                    self.state = DecoderState.GOT_O
                else:
                    break
            elif self.state == DecoderState.GOT_BRACKET:
                if ord('0') <= nxt <= ord('9'):
                    self.state = DecoderState.GOT_DIGIT
                elif nxt in BRACKET_LETTERS:
                    return special(BRACKET_LETTERS[nxt], bytes(raw))
                else:
                    break
            elif self.state == DecoderState.GOT_DIGIT:
                digit = raw[-2]
                if nxt == ord('~') and digit in BRACKET_DIGITS:
                    return special(BRACKET_DIGITS[digit], bytes(raw))
                break
            elif self.state == DecoderState.GOT_O:
                if nxt in SS3_LETTERS:
                    return special(SS3_LETTERS[nxt], bytes(raw))
                break

        logger.debug(f"Unrecognised escape sequence {bytes(raw)!r}")
        return escape_event(bytes(raw))


def create_key_decoder(source: ByteSource, escape_timeout: Optional[float] = None) -> KeyDecoder:
    """Factory function to create a key decoder.

    Args:
        source: ByteSource to decode from (usually a TerminalInterface)
        escape_timeout: Lookahead budget inside escape sequences

    Returns:
        KeyDecoder instance
    """
    if escape_timeout is None:
        escape_timeout = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT
    return KeyDecoder(source, escape_timeout)
