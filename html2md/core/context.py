"""
Render-time state shared by the converter and the tag handlers.

A single ``RenderState`` exists per conversion. The converter passes it to
whichever handler is active; handlers read and mutate it and keep no
reference to it after returning.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .buffer import MarkdownBuffer
from .config import Html2MdSettings
from .scanner import TagToken


@dataclass
class TagContext:
    """The tag being dispatched, the one before it, and its attributes."""

    name: str = ""
    prev_name: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    href: str = ""
    title: str = ""

    def enter(self, token: TagToken) -> None:
        self.prev_name = self.name
        self.name = token.name
        self.attributes = token.attributes

    def attribute(self, name: str) -> str:
        """Attribute of the current tag; missing attributes read as ``""``."""
        return self.attributes.get(name, "")


@dataclass
class OpenTag:
    name: str
    # None: no ignored or overriding ancestor yet, True: text is dropped,
    # False: a pre/title ancestor keeps text visible.
    suppressed: Optional[bool]
    ignored: bool = False
    overrides: bool = False


class AncestryStack:
    """Currently open elements, outermost first."""

    def __init__(self):
        self._entries: List[OpenTag] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, name: str) -> bool:
        return any(entry.name == name for entry in self._entries)

    def __iter__(self):
        return (entry.name for entry in self._entries)

    @property
    def top(self) -> str:
        return self._entries[-1].name if self._entries else ""

    @property
    def suppressed(self) -> bool:
        """Whether text at the current position is dropped."""
        return bool(self._entries) and self._entries[-1].suppressed is True

    def count(self, name: str) -> int:
        return sum(1 for entry in self._entries if entry.name == name)

    def push(self, name: str, ignored: bool = False, overrides: bool = False) -> None:
        """
        Open an element.

        The outermost ignored or overriding ancestor decides for the whole
        subtree, so the verdict is inherited once one has been seen.
        """
        entry = OpenTag(name, None, ignored=ignored, overrides=overrides)
        entry.suppressed = self._verdict(entry, len(self._entries))
        self._entries.append(entry)

    def pop(self, name: str) -> Optional[OpenTag]:
        """
        Close the innermost open element called ``name``.

        Entries opened inside it and never closed stay on the stack, but no
        longer inherit its verdict. Returns the removed entry, or None for an
        end tag without a matching open element.
        """
        for index in range(len(self._entries) - 1, -1, -1):
            if self._entries[index].name == name:
                removed = self._entries.pop(index)
                for position in range(index, len(self._entries)):
                    entry = self._entries[position]
                    entry.suppressed = self._verdict(entry, position)
                return removed
        return None

    def _verdict(self, entry: OpenTag, position: int) -> Optional[bool]:
        inherited = self._entries[position - 1].suppressed if position else None
        if inherited is None:
            if entry.ignored:
                return True
            if entry.overrides:
                return False
        return inherited


@dataclass
class RenderState:
    """Mutable render context handed to the tag handlers."""

    settings: Html2MdSettings
    buffer: MarkdownBuffer = field(default_factory=MarkdownBuffer)
    ancestry: AncestryStack = field(default_factory=AncestryStack)
    tag: TagContext = field(default_factory=TagContext)

    in_list: bool = False
    in_ordered_list: bool = False
    list_index: int = 0
    in_table: bool = False
    blockquote_depth: int = 0
    pre_depth: int = 0
    pre_fenced: bool = False
    pre_indent: str = ""
    skip_leading_newline: bool = False
    in_code: bool = False
    text_since_tag: int = 0
    table_line: List[str] = field(default_factory=list)
    # Set while the end tag of a suppressed element is dispatched.
    closing_suppressed: bool = False

    @property
    def suppressed(self) -> bool:
        return self.closing_suppressed or self.ancestry.suppressed

    @property
    def in_pre(self) -> bool:
        return self.pre_depth > 0

    @property
    def prev_ch(self) -> str:
        return self.buffer.prev_ch

    @property
    def prev_prev_ch(self) -> str:
        return self.buffer.prev_prev_ch

    @property
    def blockquote_prefix(self) -> str:
        return "> " * self.blockquote_depth

    def append(self, text: str) -> "RenderState":
        if text and not self.suppressed:
            self.buffer.append(text)
        return self

    def shorten(self, count: int = 1) -> "RenderState":
        if not self.suppressed:
            self.buffer.shorten(count)
        return self

    def rtrim_blanks(self) -> "RenderState":
        if not self.suppressed:
            self.buffer.rtrim_blanks()
        return self

    def append_blank(self) -> "RenderState":
        """Append a blank unless at the start of a line or after an opener."""
        buffer = self.buffer
        if not buffer or buffer.prev_ch in "\n \t[" or buffer.endswith("**"):
            return self
        return self.append(" ")

    def ensure_newline(self) -> "RenderState":
        if self.buffer and self.prev_ch != "\n":
            self.append("\n")
        return self

    def ensure_blank_line(self) -> "RenderState":
        if self.buffer:
            self.ensure_newline()
            if not self.buffer.endswith("\n\n"):
                self.append("\n")
        return self
