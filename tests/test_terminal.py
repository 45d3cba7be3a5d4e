"""Tests for the terminal interface (no real TTY needed)."""

import errno
import os
from unittest.mock import MagicMock, patch

import pytest
from texit.terminal import TerminalError, TerminalInterface


@pytest.fixture
def pipe_terminal():
    """TerminalInterface reading from and writing to OS pipes."""
    in_r, in_w = os.pipe()
    out_r, out_w = os.pipe()
    term = TerminalInterface(terminal=MagicMock(), input_fd=in_r, output_fd=out_w)
    yield term, in_w, out_r
    for fd in (in_r, in_w, out_r, out_w):
        try:
            os.close(fd)
        except OSError:
            pass


def test_read_single_bytes(pipe_terminal):
    term, in_w, _ = pipe_terminal
    os.write(in_w, b"ab")
    assert term.read(0.5) == b"a"
    assert term.read(0.5) == b"b"


def test_read_timeout_returns_empty(pipe_terminal):
    term, _, _ = pipe_terminal
    assert term.read(0) == b""


def test_read_end_of_input_is_fatal(pipe_terminal):
    term, in_w, _ = pipe_terminal
    os.close(in_w)
    with pytest.raises(TerminalError):
        term.read(0.5)


def test_read_eagain_is_timeout(pipe_terminal):
    term, in_w, _ = pipe_terminal
    os.write(in_w, b"x")
    with patch('texit.terminal.os.read', side_effect=OSError(errno.EAGAIN, "again")):
        assert term.read(0.5) == b""


def test_read_error_is_fatal(pipe_terminal):
    term, in_w, _ = pipe_terminal
    os.write(in_w, b"x")
    with patch('texit.terminal.os.read', side_effect=OSError(errno.EIO, "io")):
        with pytest.raises(TerminalError):
            term.read(0.5)


def test_write_whole_buffer(pipe_terminal):
    term, _, out_r = pipe_terminal
    term.write(b"\x1b[H" + b"x" * 100)
    assert os.read(out_r, 200) == b"\x1b[H" + b"x" * 100


def test_write_handles_partial_writes(pipe_terminal):
    term, _, _ = pipe_terminal
    chunks = []

    def fake_write(fd, data):
        chunks.append(bytes(data[:3]))
        return min(3, len(data))

    with patch('texit.terminal.os.write', side_effect=fake_write):
        term.write(b"abcdefgh")
    assert b"".join(chunks) == b"abcdefgh"


def test_write_error_is_fatal(pipe_terminal):
    term, _, _ = pipe_terminal
    with patch('texit.terminal.os.write', side_effect=OSError(errno.EPIPE, "pipe")):
        with pytest.raises(TerminalError):
            term.write(b"x")


def test_window_size_from_ioctl(pipe_terminal):
    term, _, _ = pipe_terminal
    size = os.terminal_size((100, 30))
    with patch('texit.terminal.os.get_terminal_size', return_value=size):
        assert term.get_window_size() == (30, 100)
    term.term.get_location.assert_not_called()


def test_window_size_probe_fallback(pipe_terminal):
    term, _, out_r = pipe_terminal
    term.term.get_location.return_value = (23, 79)
    with patch('texit.terminal.os.get_terminal_size', side_effect=OSError("not a tty")):
        assert term.get_window_size() == (24, 80)
    assert os.read(out_r, 100) == b"\x1b[999C\x1b[999B"


def test_window_size_probe_on_zero_columns(pipe_terminal):
    term, _, _ = pipe_terminal
    term.term.get_location.return_value = (39, 119)
    with patch('texit.terminal.os.get_terminal_size', return_value=os.terminal_size((0, 0))):
        assert term.get_window_size() == (40, 120)


def test_window_size_probe_failure_is_fatal(pipe_terminal):
    term, _, _ = pipe_terminal
    term.term.get_location.return_value = (-1, -1)
    with patch('texit.terminal.os.get_terminal_size', side_effect=OSError("not a tty")):
        with pytest.raises(TerminalError):
            term.get_window_size()


def test_setup_and_cleanup_use_raw_mode(pipe_terminal):
    term, _, out_r = pipe_terminal
    raw_context = term.term.raw.return_value
    term.setup()
    assert term.is_raw
    raw_context.__enter__.assert_called_once()

    term.cleanup()
    assert not term.is_raw
    raw_context.__exit__.assert_called_once_with(None, None, None)
    assert os.read(out_r, 100) == b"\x1b[2J\x1b[H"


def test_setup_failure_is_fatal(pipe_terminal):
    term, _, _ = pipe_terminal
    term.term.raw.return_value.__enter__.side_effect = OSError("tcsetattr")
    with pytest.raises(TerminalError):
        term.setup()
    assert not term.is_raw
