"""Kite - A small terminal text editor."""

from .model import Document, Row, CursorPosition
from .syntax import Highlight, LanguageProfile
from .editor import Editor

__all__ = [
    'Document',
    'Row',
    'CursorPosition',
    'Highlight',
    'LanguageProfile',
    'Editor',
]
