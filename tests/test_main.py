"""Tests for the command line entry point."""

import logging
import os
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest
from texit.__main__ import configure_logging, describe_key, main, parse_args, run_keyboard_test
from texit.keyboard import BufferSource, KeyEvent, KeyType, parse_byte
from texit.terminal import TerminalError
from texit.version import get_version_string


def test_parse_args_filename_and_flags():
    opts = parse_args(["--log-file", "/tmp/texit.log", "notes.txt"])
    assert opts['filename'] == "notes.txt"
    assert opts['log_file'] == "/tmp/texit.log"
    assert not opts['version']


def test_parse_args_rejects_unknown_option():
    with pytest.raises(ValueError):
        parse_args(["--frobnicate"])


def test_parse_args_rejects_two_files():
    with pytest.raises(ValueError):
        parse_args(["a.txt", "b.txt"])


def test_parse_args_log_file_needs_value():
    with pytest.raises(ValueError):
        parse_args(["--log-file"])


def test_version(capsys):
    assert main(["--version"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("0.0.1")


def test_version_string_without_build_info():
    with patch('texit.version._from_git_repo', return_value=None), \
            patch('texit.version._from_embedded_file', return_value=None):
        assert get_version_string() == "0.0.1"


def test_bad_usage_exit_code(capsys):
    assert main(["-x"]) == 2
    assert "usage: texit" in capsys.readouterr().err


def test_runs_session_with_file(tmp_path):
    path = tmp_path / "doc.txt"
    session = MagicMock()
    with patch('texit.editor.EditSession', return_value=session):
        assert main([str(path)]) == 0
    session.load_file.assert_called_once_with(str(path))
    session.run.assert_called_once()


def test_load_error_exits_before_raw_mode(capsys):
    session = MagicMock()
    session.load_file.side_effect = IsADirectoryError(21, "Is a directory")
    with patch('texit.editor.EditSession', return_value=session):
        assert main(["somedir"]) == 1
    session.run.assert_not_called()
    assert "Is a directory" in capsys.readouterr().err


def test_fatal_terminal_error_exit_code(capsys):
    session = MagicMock()
    session.run.side_effect = TerminalError("getWindowSize: no cursor position report")
    with patch('texit.editor.EditSession', return_value=session):
        assert main([]) == 1
    assert "getWindowSize" in capsys.readouterr().err


def test_describe_key():
    assert describe_key(parse_byte(ord('a'))) == "97 ('a')"
    assert describe_key(parse_byte(17)) == "17 [ctrl q]"
    arrow = KeyEvent(key_type=KeyType.SPECIAL, value='up', raw=b"\x1b[A")
    assert describe_key(arrow) == "27 91 65 [special up]"


class KeytestTerminal(BufferSource):
    """Scripted keyboard that records what the key test writes."""

    def __init__(self, keys):
        super().__init__(keys)
        self.output = bytearray()
        self.setup_called = False
        self.cleanup_called = False

    def setup(self):
        self.setup_called = True

    def cleanup(self):
        self.cleanup_called = True

    def write(self, data):
        self.output.extend(data)


def test_keyboard_test_echoes_keys_until_q(tmp_path):
    term = KeytestTerminal(b"\x1b[Aq")
    with patch.dict(os.environ, {"TEXIT_CONFIG": str(tmp_path / "none.json")}), \
            patch('texit.terminal.TerminalInterface', return_value=term):
        run_keyboard_test()

    lines = bytes(term.output).split(b"\r\n")
    assert lines[0].startswith(b"Keyboard test mode")
    assert lines[1] == b"27 91 65 [special up]"
    assert lines[2] == b"113 ('q')"
    assert lines[3] == b""
    assert term.setup_called
    assert term.cleanup_called


def test_keyboard_test_cleans_up_when_input_ends(tmp_path):
    term = KeytestTerminal(b"a")
    with patch.dict(os.environ, {"TEXIT_CONFIG": str(tmp_path / "none.json")}), \
            patch('texit.terminal.TerminalInterface', return_value=term):
        with pytest.raises(EOFError):
            run_keyboard_test()
    assert b"97 ('a')\r\n" in term.output
    assert term.cleanup_called


def test_configure_logging_writes_to_file(tmp_path):
    log_path = tmp_path / "texit.log"
    handler = configure_logging(str(log_path))
    try:
        logging.getLogger("texit.model").info("loaded 3 rows")
        handler.flush()
    finally:
        logging.getLogger("texit").removeHandler(handler)
        logging.getLogger("texit").setLevel(logging.NOTSET)
        handler.close()
    text = log_path.read_text()
    assert "texit.model INFO loaded 3 rows" in text


def test_configure_logging_from_environment(tmp_path):
    log_path = tmp_path / "env.log"
    with patch.dict(os.environ, {"TEXIT_LOG": str(log_path)}):
        handler = configure_logging(None)
    try:
        logging.getLogger("texit.editor").debug("refresh")
        handler.flush()
    finally:
        logging.getLogger("texit").removeHandler(handler)
        logging.getLogger("texit").setLevel(logging.NOTSET)
        handler.close()
    assert "texit.editor DEBUG refresh" in log_path.read_text()


def test_configure_logging_without_destination():
    with patch.dict(os.environ, {}, clear=True):
        assert configure_logging(None) is None


def test_entry_point_import_does_not_load_terminal_stack():
    result = subprocess.run(
        [sys.executable, "-c", "import sys, texit.__main__; print('blessed' in sys.modules)"],
        capture_output=True,
        text=True,
        cwd=os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "False"
