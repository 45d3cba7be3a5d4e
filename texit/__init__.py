"""Texit - a small terminal text editor."""

import logging

from .constants import EditorConstants
from .keyboard import KeyDecoder, KeyEvent, KeyType
from .model import CursorPosition, Document, Row
from .view import ScrollView

__version__ = EditorConstants.VERSION

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'KeyDecoder',
    'KeyEvent',
    'KeyType',
    'CursorPosition',
    'Document',
    'Row',
    'ScrollView',
]
