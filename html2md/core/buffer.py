"""
Append-only Markdown accumulator.

Every handler decides what to emit by looking at the last one or two
characters already written, so the buffer only grows at the end and only
shrinks from the end.
"""

from typing import List

BLANKS = " \t"


class MarkdownBuffer:
    """Character buffer holding the Markdown produced so far."""

    __slots__ = ("_chars",)

    def __init__(self, text: str = ""):
        self._chars: List[str] = list(text)

    def __len__(self) -> int:
        return len(self._chars)

    def __bool__(self) -> bool:
        return bool(self._chars)

    def __str__(self) -> str:
        return "".join(self._chars)

    def __repr__(self) -> str:
        return f"MarkdownBuffer({str(self)!r})"

    @property
    def prev_ch(self) -> str:
        """Last character written, or an empty string."""
        return self._chars[-1] if self._chars else ""

    @property
    def prev_prev_ch(self) -> str:
        """Second-to-last character written, or an empty string."""
        return self._chars[-2] if len(self._chars) > 1 else ""

    def append(self, text: str) -> None:
        self._chars.extend(text)

    def shorten(self, count: int = 1) -> None:
        """Drop ``count`` characters from the end."""
        if count > 0:
            del self._chars[-count:]

    def rtrim_blanks(self) -> None:
        """Drop trailing spaces and tabs, never newlines."""
        chars = self._chars
        while chars and chars[-1] in BLANKS:
            chars.pop()

    def endswith(self, suffix: str) -> bool:
        size = len(suffix)
        if not size:
            return True
        if size > len(self._chars):
            return False
        return "".join(self._chars[-size:]) == suffix

    def current_line(self) -> str:
        """Text written after the last newline."""
        chars = self._chars
        index = len(chars)
        while index > 0 and chars[index - 1] != "\n":
            index -= 1
        return "".join(chars[index:])

    def getvalue(self) -> str:
        return str(self)
