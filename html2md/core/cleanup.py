"""Line-level cleanup applied to the rendered Markdown."""

from typing import Iterable, Iterator

FENCE_MARKERS = ("```", "~~~")
HARD_BREAK = "  "


def _is_fence(line: str) -> bool:
    return line.strip().startswith(FENCE_MARKERS)


def tidy_lines(lines: Iterable[str]) -> Iterator[str]:
    """
    Trim surrounding whitespace from each line outside fenced code.

    Lines indented with a tab are indented code and keep their leading
    whitespace. A line that ended with two or more blanks keeps exactly two,
    since that is a Markdown hard line break.
    """
    in_fence = False

    for line in lines:
        if _is_fence(line):
            in_fence = not in_fence
            yield line.strip()
            continue

        if in_fence:
            yield line
            continue

        if not line.startswith("\t"):
            line = line.lstrip()

        stripped = line.rstrip()
        if stripped and line[len(stripped) :].endswith(HARD_BREAK):
            stripped += HARD_BREAK
        yield stripped


def _collapse_blank_runs(lines: Iterable[str], max_blank_lines: int) -> Iterator[str]:
    in_fence = False
    blank_run = 0

    for line in lines:
        if _is_fence(line):
            in_fence = not in_fence

        if in_fence or line:
            blank_run = 0
            yield line
            continue

        blank_run += 1
        if blank_run <= max_blank_lines:
            yield line


def clean_up(markdown: str, max_blank_lines: int = 2) -> str:
    """
    Normalize rendered Markdown.

    Args:
        markdown: Markdown produced by the converter
        max_blank_lines: Longest run of blank lines to keep

    Returns:
        The trimmed document, terminated by a single newline unless empty
    """
    lines = _collapse_blank_runs(tidy_lines(markdown.split("\n")), max_blank_lines)
    text = "\n".join(lines).strip()
    return text + "\n" if text else ""
