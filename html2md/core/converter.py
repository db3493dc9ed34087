"""
HTML to Markdown converter.

A ``Converter`` owns one document and everything needed to render it: the
scanner walks the input once, tags are routed to the handlers in
``html2md.core.tags`` and text is appended according to the enclosing
elements. The result is passed through ``clean_up`` before it is returned.
"""

import time
from typing import Optional, Union

from .buffer import MarkdownBuffer
from .cleanup import clean_up
from .config import Html2MdSettings, get_settings
from .context import RenderState
from .errors import unsupported_input_error
from .logging import get_logger, log_context, log_conversion, performance_context
from .scanner import WHITESPACE, Scanner, TagToken
from .tags import (
    OVERRIDE_TAGS,
    VOID_TAGS,
    get_handler,
    is_hidden,
    is_ignored_tag,
)

HtmlInput = Union[str, bytes]


def _prepare_html(html: HtmlInput) -> str:
    if isinstance(html, (bytes, bytearray)):
        html = bytes(html).decode("utf-8", errors="replace")
    elif not isinstance(html, str):
        raise unsupported_input_error(html)

    return html.replace("\r\n", "\n").replace("\r", "\n")


class Converter:
    """Convert one HTML document to Markdown."""

    def __init__(self, html: HtmlInput, settings: Optional[Html2MdSettings] = None):
        """
        Initialize the converter with a document.

        Args:
            html: HTML text, or UTF-8 encoded bytes
            settings: Optional settings. Uses the global settings if not provided.

        Raises:
            ConversionError: If ``html`` is neither text nor bytes
        """
        self.settings = settings or get_settings()
        self.html = _prepare_html(html)

        self._scanner = Scanner(self.html)
        self._state = RenderState(settings=self.settings)
        self._converted = False

    def convert(self) -> str:
        """
        Render the document.

        The conversion runs once; later calls return the current Markdown,
        including anything appended since.
        """
        if self._converted:
            return str(self._state.buffer)

        start_time = time.perf_counter()
        with log_context(html_size=len(self.html)):
            with performance_context("html_conversion"):
                for item in self._scanner:
                    if isinstance(item, TagToken):
                        self._on_tag(item)
                    else:
                        self._on_text(item)

                markdown = clean_up(
                    str(self._state.buffer), self.settings.max_blank_lines
                )

            self._state.buffer = MarkdownBuffer(markdown)
            self._converted = True

            logger = get_logger(__name__)
            if not self._well_formed():
                logger.debug(
                    "Document is not well formed",
                    open_tags=list(self._state.ancestry),
                )
            if self._scanner.truncated:
                logger.debug("Input ended inside markup")

        log_conversion(
            html_size=len(self.html),
            markdown_size=len(markdown),
            well_formed=self._well_formed(),
            duration=time.perf_counter() - start_time,
        )
        return markdown

    def ok(self) -> bool:
        """Whether every opened element was closed by a matching end tag."""
        if not self._converted:
            self.convert()
        return self._well_formed()

    def truncated(self) -> bool:
        """Whether the input ended inside a tag or comment."""
        if not self._converted:
            self.convert()
        return self._scanner.truncated

    def append_to_md(self, text: str) -> "Converter":
        self._state.buffer.append(text)
        return self

    def append_blank(self) -> "Converter":
        buffer = self._state.buffer
        if buffer and buffer.prev_ch not in "\n \t[" and not buffer.endswith("**"):
            buffer.append(" ")
        return self

    def _well_formed(self) -> bool:
        return not self._state.ancestry

    def _on_tag(self, token: TagToken) -> None:
        self._state.tag.enter(token)
        self._dispatch(token)
        self._state.text_since_tag = 0

    def _dispatch(self, token: TagToken) -> None:
        state = self._state
        handler = get_handler(token.name)

        if token.closing:
            entry = state.ancestry.pop(token.name)
            state.closing_suppressed = entry is not None and entry.suppressed is True
            handler.on_close(state)
            state.closing_suppressed = False
            return

        hidden = is_hidden(token)

        if token.name in VOID_TAGS or token.self_closing:
            if hidden:
                return
            handler.on_open(state)
            handler.on_close(state)
            return

        ignored = (
            hidden
            or is_ignored_tag(token.name)
            or (token.name == "title" and not self.settings.include_title)
        )
        state.ancestry.push(
            token.name, ignored=ignored, overrides=token.name in OVERRIDE_TAGS
        )
        handler.on_open(state)

    def _on_text(self, text: str) -> None:
        if self._state.suppressed:
            return

        for ch in text:
            self._on_char(ch)

    def _on_char(self, ch: str) -> None:
        state = self._state

        if state.in_pre:
            if state.skip_leading_newline:
                state.skip_leading_newline = False
                if ch == "\n":
                    return
            state.append("\n" + state.pre_indent if ch == "\n" else ch)
        elif state.in_code:
            state.append(" " if ch == "\n" else ch)
        elif ch in WHITESPACE:
            if not state.buffer or state.prev_ch in "\n \t[":
                return
            state.append(" ")
        else:
            if state.blockquote_depth and state.prev_ch in ("", "\n"):
                state.append(state.blockquote_prefix)
            state.append(ch)

        state.text_since_tag += 1


def convert(html: HtmlInput, settings: Optional[Html2MdSettings] = None) -> str:
    """
    Convert an HTML document to Markdown.

    Args:
        html: HTML text, or UTF-8 encoded bytes
        settings: Optional settings. Uses the global settings if not provided.

    Returns:
        The Markdown rendering of ``html``
    """
    return Converter(html, settings).convert()
