"""
Single pass HTML scanner.

The scanner walks the document once and yields two kinds of items in document
order: runs of text (``str``) and ``TagToken`` objects for every start or end
tag. Comments, doctypes and processing instructions are consumed silently.
Attribute values are collected while the tag is consumed, so consumers never
look back into the source text.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple, Union

WHITESPACE = " \t\n\r\f"
_TAG_NAME_TERMINATORS = WHITESPACE + "/>"
_ATTR_NAME_TERMINATORS = WHITESPACE + "/>="

# Elements whose content is text up to the matching end tag.
RAWTEXT_TAGS = frozenset({"script", "style", "textarea", "title", "xmp"})


@dataclass
class TagToken:
    """One start or end tag as it appeared in the source."""

    name: str
    closing: bool = False
    self_closing: bool = False
    attributes: Dict[str, str] = field(default_factory=dict)
    start: int = 0
    end: int = 0
    raw: str = ""

    def attribute(self, name: str) -> str:
        return self.attributes.get(name, "")


ScanItem = Union[str, TagToken]


class Scanner:
    """
    Character-level tokenizer over an in-memory HTML document.

    Iterating a scanner consumes it; ``truncated`` reports afterwards whether
    the input ended inside a tag, comment or declaration.
    """

    def __init__(self, html: str):
        self.html = html
        self.pos = 0
        self.truncated = False
        self._rawtext_end: Optional[str] = None

    def __iter__(self) -> Iterator[ScanItem]:
        return self.scan()

    def scan(self) -> Iterator[ScanItem]:
        html = self.html
        length = len(html)
        text_start = self.pos

        while self.pos < length:
            pos = html.find("<", self.pos)
            if pos == -1:
                break
            self.pos = pos

            if not self._starts_markup(pos):
                self.pos = pos + 1
                continue

            if pos > text_start:
                yield html[text_start:pos]

            if html.startswith("<!--", pos):
                token = None
                self._skip_past("-->", pos + 4)
            elif html[pos + 1] in "!?":
                token = None
                self._skip_past(">", pos + 2)
            else:
                token = self._read_tag(pos)

            text_start = self.pos
            if self.truncated:
                return

            if token is not None:
                self._track_rawtext(token)
                yield token

        self.pos = length
        if text_start < length:
            yield html[text_start:]

    def _starts_markup(self, pos: int) -> bool:
        """Whether the ``<`` at ``pos`` opens markup rather than being text."""
        html = self.html
        nxt = html[pos + 1 : pos + 2]

        if self._rawtext_end is not None:
            end_tag = self._rawtext_end
            candidate = html[pos : pos + len(end_tag)].lower()
            after = html[pos + len(end_tag) : pos + len(end_tag) + 1]
            return candidate == end_tag and (not after or after in _TAG_NAME_TERMINATORS)

        if nxt.isalpha() or (nxt and nxt in "!?"):
            return True
        return nxt == "/" and html[pos + 2 : pos + 3].isalpha()

    def _skip_past(self, terminator: str, start: int) -> None:
        end = self.html.find(terminator, start)
        if end == -1:
            self.truncated = True
            self.pos = len(self.html)
        else:
            self.pos = end + len(terminator)

    def _track_rawtext(self, token: TagToken) -> None:
        if token.closing:
            if self._rawtext_end == f"</{token.name}":
                self._rawtext_end = None
        elif token.name in RAWTEXT_TAGS and not token.self_closing:
            self._rawtext_end = f"</{token.name}"

    def _read_tag(self, start: int) -> Optional[TagToken]:
        """Consume ``<...>`` beginning at ``start``; the cursor ends after ``>``."""
        html = self.html
        length = len(html)

        pos = start + 1
        closing = html[pos] == "/"
        if closing:
            pos += 1

        name_start = pos
        while pos < length and html[pos] not in _TAG_NAME_TERMINATORS:
            pos += 1
        name = html[name_start:pos].lower()

        attributes: Dict[str, str] = {}
        self_closing = False

        while pos < length:
            ch = html[pos]

            if ch == ">":
                self.pos = pos + 1
                return TagToken(
                    name=name,
                    closing=closing,
                    self_closing=self_closing,
                    attributes=attributes,
                    start=start,
                    end=pos + 1,
                    raw=html[start : pos + 1],
                )

            if ch in WHITESPACE:
                pos += 1
                continue

            if ch == "/":
                self_closing = True
                pos += 1
                continue

            self_closing = False
            attr_name, value, pos = self._read_attribute(pos)
            if pos is None:
                break
            if attr_name and attr_name not in attributes:
                attributes[attr_name] = value

        self.truncated = True
        self.pos = length
        return None

    def _read_attribute(self, pos: int) -> Tuple[str, str, Optional[int]]:
        """Read ``name[=value]`` at ``pos``; position is None at end of input."""
        html = self.html
        length = len(html)

        name_start = pos
        while pos < length and html[pos] not in _ATTR_NAME_TERMINATORS:
            pos += 1
        name = html[name_start:pos].lower()

        while pos < length and html[pos] in WHITESPACE:
            pos += 1

        if pos >= length or html[pos] != "=":
            return name, "", pos

        pos += 1
        while pos < length and html[pos] in WHITESPACE:
            pos += 1

        if pos < length and html[pos] in "\"'":
            quote = html[pos]
            end = html.find(quote, pos + 1)
            if end == -1:
                return name, "", None
            return name, html[pos + 1 : end], end + 1

        value_start = pos
        while pos < length and html[pos] not in WHITESPACE and html[pos] != ">":
            pos += 1
        return name, html[value_start:pos], pos
