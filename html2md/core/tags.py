"""
Tag dispatch table.

Each supported tag family has one handler with two hooks: ``on_open`` runs
once the ``>`` of a start tag has been consumed, ``on_close`` once the ``>``
of an end tag has been consumed (void elements get both, back to back).
Handlers only read and write the ``RenderState`` they are given.
"""

import re
from abc import ABC
from typing import Dict

from .context import RenderState
from .scanner import TagToken

VOID_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Subtrees whose text never reaches the output.
IGNORED_TAGS = frozenset({"script", "style", "template", "noscript", "nav"})

# Ancestors that keep text visible even inside an ignored subtree.
OVERRIDE_TAGS = frozenset({"pre", "title"})

_HIDDEN_CLASS = "Details-content--hidden-not-important"
_HIDDEN_STYLE = re.compile(
    r"display:none|visibility:hidden|opacity:0(?:\.0*)?(?:;|!|$)"
)

LIST_PUNCTUATION = "*-+.)"


def is_ignored_tag(name: str) -> bool:
    # Comments and declarations are consumed by the scanner and never dispatched.
    return name in IGNORED_TAGS


def is_hidden(token: TagToken) -> bool:
    """Whether a start tag marks its element as invisible."""
    attributes = token.attributes
    if "hidden" in attributes:
        return True
    if attributes.get("aria-hidden", "").lower() == "true":
        return True
    if attributes.get("aria", "").lower() == "hidden":
        return True
    if _HIDDEN_CLASS in attributes.get("class", ""):
        return True
    style = "".join(attributes.get("style", "").split()).lower()
    return bool(style and _HIDDEN_STYLE.search(style))


class TagHandler(ABC):
    """Base class for tag handlers; both hooks default to doing nothing."""

    def on_open(self, state: RenderState) -> None:
        pass

    def on_close(self, state: RenderState) -> None:
        pass


class IgnoredHandler(TagHandler):
    """Tags that contribute no markup (unknown tags, script, nav, ...)."""


class HeadingHandler(TagHandler):
    def __init__(self, level: int):
        self.level = level

    def on_open(self, state: RenderState) -> None:
        state.append("\n" + "#" * self.level + " ")

    def on_close(self, state: RenderState) -> None:
        state.rtrim_blanks()
        if state.prev_ch != "\n":
            state.append("\n")


class EmphasisHandler(TagHandler):
    """Bold, italic and strikethrough share the same spacing rules."""

    def __init__(self, marker: str):
        self.marker = marker

    def on_open(self, state: RenderState) -> None:
        if state.prev_ch != " ":
            state.append_blank()
        state.append(self.marker)

    def on_close(self, state: RenderState) -> None:
        if state.prev_ch == " ":
            state.shorten()
        state.append(self.marker + " ")


class UnderlineHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if state.prev_prev_ch == " " and state.prev_ch == " ":
            state.shorten()
        state.append("<u>")

    def on_close(self, state: RenderState) -> None:
        if state.prev_ch == " ":
            state.shorten()
        state.append("</u>")


class AnchorHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if state.tag.prev_name == "img":
            state.append("\n")

        state.tag.title = state.tag.attribute("title")
        state.tag.href = state.tag.attribute("href")
        state.rtrim_blanks().append_blank().append("[")

    def on_close(self, state: RenderState) -> None:
        if state.prev_ch == " ":
            state.shorten()

        if state.prev_ch == "[":
            state.shorten()
            return

        state.append("](").append(state.tag.href)
        if state.tag.title:
            state.append(' "').append(state.tag.title).append('"')
        state.append(") ")

        if state.tag.prev_name == "img":
            state.append("\n")


class ImageHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if state.tag.prev_name != "a" and state.prev_ch not in ("", "\n"):
            state.append("\n")

    def on_close(self, state: RenderState) -> None:
        state.append("![").append(state.tag.attribute("alt")).append("](")
        state.append(state.tag.attribute("src"))
        title = state.tag.attribute("title")
        if title:
            state.append(' "').append(title).append('"')
        state.append(")")


class BreakHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if state.in_pre:
            state.append("\n" + state.pre_indent)
            return

        if state.in_table:
            if state.prev_ch == " ":
                state.shorten()
            state.append("<br>")
        elif state.buffer:
            state.append("  \n")

        state.append(state.blockquote_prefix)


class DivHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if not state.in_table:
            state.ensure_blank_line()


class SeparatorHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        state.append("\n---\n")


class UnorderedListHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if state.in_list or state.in_table:
            return

        state.in_list = True
        state.append("\n")

    def on_close(self, state: RenderState) -> None:
        if state.in_table:
            return

        state.in_list = (
            state.prev_prev_ch != ""
            and state.prev_prev_ch in LIST_PUNCTUATION
            and state.tag.prev_name != "p"
        )

        if state.prev_prev_ch == "\n" and state.prev_ch == "\n":
            state.shorten()
        elif state.prev_ch != "\n":
            state.append("\n")


class OrderedListHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if state.in_table:
            return

        state.in_list = True
        state.in_ordered_list = True
        state.list_index = 0

        if state.prev_ch == " ":
            state.shorten().append("\n")
        state.append("\n")

    def on_close(self, state: RenderState) -> None:
        if state.in_table:
            return

        state.in_list = False
        state.in_ordered_list = False
        state.append("\n")


class ListItemHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if state.in_table:
            return

        state.ensure_newline()

        if not state.in_ordered_list:
            state.append(state.settings.bullet + " ")
            return

        state.list_index += 1
        state.append(f"{state.list_index}{state.settings.delimiter} ")

    def on_close(self, state: RenderState) -> None:
        if state.in_table:
            return

        if state.prev_ch != "\n":
            state.append("\n")


class OptionHandler(TagHandler):
    def on_close(self, state: RenderState) -> None:
        if state.buffer:
            state.append("  \n")


class ParagraphHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if state.in_list and state.tag.prev_name == "p":
            state.append("\n\t")
        elif not state.in_list and state.blockquote_depth == 0:
            state.append("\n")

        if state.blockquote_depth > 0:
            state.ensure_newline()
            prefix = state.blockquote_prefix
            if state.tag.prev_name == "p":
                state.append(prefix.rstrip() + "\n")
            state.append(prefix)

    def on_close(self, state: RenderState) -> None:
        if state.buffer:
            state.append("\n")


class PreHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        state.pre_depth += 1
        if state.pre_depth > 1:
            return

        state.skip_leading_newline = True
        if state.in_list or state.blockquote_depth:
            state.pre_fenced = False
            state.pre_indent = state.blockquote_prefix + "\t\t"
            state.ensure_newline()
            state.append(state.pre_indent)
        else:
            state.pre_fenced = True
            state.pre_indent = ""
            state.ensure_blank_line()
            state.append("```\n")

    def on_close(self, state: RenderState) -> None:
        if not state.in_pre:
            return

        state.pre_depth -= 1
        if state.pre_depth:
            return

        state.skip_leading_newline = False
        if state.pre_fenced:
            state.ensure_newline()
            state.append("```\n")
        else:
            state.append("\n")
        state.pre_fenced = False
        state.pre_indent = ""


class CodeHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        state.in_code = True

        if not state.in_pre:
            state.append("`")
            return

        if not state.pre_fenced or not state.buffer.endswith("```\n"):
            return

        language = _language_from_class(state.tag.attribute("class"))
        if language:
            state.shorten().append(language + "\n")

    def on_close(self, state: RenderState) -> None:
        state.in_code = False

        if state.in_pre:
            return

        if state.prev_ch == " ":
            state.shorten()
        state.append("` ")


def _language_from_class(class_attr: str) -> str:
    for name in class_attr.split():
        if name.startswith("language-"):
            return name[len("language-") :]
    return ""


class SpanHandler(TagHandler):
    def on_close(self, state: RenderState) -> None:
        if state.prev_ch != " " and state.text_since_tag > 0:
            state.append_blank()


class TitleHandler(TagHandler):
    def on_close(self, state: RenderState) -> None:
        if not state.settings.include_title:
            return

        line = state.buffer.current_line()
        text = line.strip()
        if not text:
            return

        state.shorten(len(line)).append(f"# {text}\n\n")


class BlockquoteHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        state.blockquote_depth += 1

        if state.blockquote_depth == 1:
            state.append("\n")

    def on_close(self, state: RenderState) -> None:
        if state.blockquote_depth == 0:
            return

        state.blockquote_depth -= 1

        if state.blockquote_depth == 0:
            state.append("\n")


class TableHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        state.in_table = True
        state.append("\n")

    def on_close(self, state: RenderState) -> None:
        state.in_table = "table" in state.ancestry
        state.append("\n")


class TableRowHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        state.append("\n")

    def on_close(self, state: RenderState) -> None:
        prev = state.prev_ch

        # A row closing right after a pipe gets a newline instead of a second
        # pipe; the separator check below still sees the old last character.
        if prev == "|":
            state.append("\n")
        else:
            state.append("|")

        if state.table_line:
            if prev != "\n":
                state.append("\n")

            state.append("".join(state.table_line) + "|\n")
            state.table_line.clear()


class TableHeaderHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        align = state.tag.attribute("align").lower()

        cell = "| "
        if align in ("left", "center"):
            cell += ":"
        cell += "---"
        if align in ("right", "center"):
            cell += ":"
        cell += " "

        if not state.suppressed:
            state.table_line.append(cell)
        state.append("| ")


class TableDataHandler(TagHandler):
    def on_open(self, state: RenderState) -> None:
        if state.prev_prev_ch != "|":
            state.append("| ")


_IGNORED = IgnoredHandler()
_BOLD = EmphasisHandler("**")
_ITALIC = EmphasisHandler("*")
_STRIKETHROUGH = EmphasisHandler("~")

TAG_HANDLERS: Dict[str, TagHandler] = {
    # non-printing tags
    "head": _IGNORED,
    "meta": _IGNORED,
    "link": _IGNORED,
    "nav": _IGNORED,
    "noscript": _IGNORED,
    "script": _IGNORED,
    "style": _IGNORED,
    "template": _IGNORED,
    # printing tags
    "a": AnchorHandler(),
    "br": BreakHandler(),
    "div": DivHandler(),
    "h1": HeadingHandler(1),
    "h2": HeadingHandler(2),
    "h3": HeadingHandler(3),
    "h4": HeadingHandler(4),
    "h5": HeadingHandler(5),
    "h6": HeadingHandler(6),
    "li": ListItemHandler(),
    "option": OptionHandler(),
    "ol": OrderedListHandler(),
    "pre": PreHandler(),
    "code": CodeHandler(),
    "p": ParagraphHandler(),
    "span": SpanHandler(),
    "ul": UnorderedListHandler(),
    "title": TitleHandler(),
    "img": ImageHandler(),
    "hr": SeparatorHandler(),
    # text formatting
    "b": _BOLD,
    "strong": _BOLD,
    "em": _ITALIC,
    "i": _ITALIC,
    "cite": _ITALIC,
    "dfn": _ITALIC,
    "u": UnderlineHandler(),
    "del": _STRIKETHROUGH,
    "s": _STRIKETHROUGH,
    "blockquote": BlockquoteHandler(),
    # tables
    "table": TableHandler(),
    "tr": TableRowHandler(),
    "th": TableHeaderHandler(),
    "td": TableDataHandler(),
}


def get_handler(name: str) -> TagHandler:
    """Handler for a lower-cased tag name; unknown tags get the no-op handler."""
    return TAG_HANDLERS.get(name, _IGNORED)
