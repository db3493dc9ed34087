"""Core functionality for html2md."""

from html2md.core.buffer import MarkdownBuffer
from html2md.core.cleanup import clean_up
from html2md.core.config import Html2MdSettings, get_settings
from html2md.core.converter import Converter, convert
from html2md.core.scanner import Scanner, TagToken
from html2md.core.tags import TAG_HANDLERS, TagHandler, get_handler

__all__ = [
    "Converter",
    "convert",
    "clean_up",
    "Html2MdSettings",
    "get_settings",
    "MarkdownBuffer",
    "Scanner",
    "TagToken",
    "TagHandler",
    "TAG_HANDLERS",
    "get_handler",
]
