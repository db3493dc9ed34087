"""
Whole-document conversion tests using realistic pages.
"""

import pytest

from html2md import convert
from html2md.core.converter import Converter
from tests.fixtures.html_samples import (
    BENCHMARK_TABLE,
    MALFORMED_FORUM_POST,
    PORTAL_WITH_UNCLOSED_NAV,
    QUOTED_REVIEW,
    RECIPE_WITH_IMAGES,
    RELEASE_NOTES,
    RELEASE_NOTES_MARKDOWN,
)


@pytest.mark.integration
class TestReleaseNotes:
    """Test a page mixing every common block element."""

    def test_full_document(self):
        assert convert(RELEASE_NOTES) == RELEASE_NOTES_MARKDOWN

    def test_document_is_well_formed(self):
        assert Converter(RELEASE_NOTES).ok()

    def test_non_content_is_dropped(self):
        markdown = convert(RELEASE_NOTES)

        for fragment in ("color: red", "window.track", "Home", "Docs", "Internal build"):
            assert fragment not in markdown

    def test_conversion_is_deterministic(self):
        assert convert(RELEASE_NOTES) == convert(RELEASE_NOTES.encode("utf-8"))


@pytest.mark.integration
class TestTables:
    """Test a table with a header row."""

    def test_table_rows(self):
        lines = convert(BENCHMARK_TABLE).splitlines()

        assert lines[0] == "### Benchmarks"
        assert "| Document| Time (ms)|" in lines
        assert "| Parse 1MB HTML| 12.5|" in lines
        assert "| Convert to Markdown| 3.8|" in lines

    def test_single_separator_line(self):
        lines = convert(BENCHMARK_TABLE).splitlines()
        separator = lines.index("| :--- | ---: |")

        assert lines[separator - 1] == "| Document| Time (ms)|"
        assert sum(1 for line in lines if "---" in line) == 1


@pytest.mark.integration
class TestBlockquotes:
    """Test quoted paragraphs with a line break."""

    def test_quote_lines(self):
        markdown = convert(QUOTED_REVIEW)

        assert markdown.startswith("From the review thread:\n\n> The scanner")
        assert "> The scanner never looks back.\n>\n> That keeps memory flat  \n" in markdown
        assert "> even for large pages.\n" in markdown
        assert markdown.endswith("\nAgreed.\n")


@pytest.mark.integration
class TestImagesAndLists:
    """Test images, ordered lists and hidden elements."""

    def test_title_and_heading(self):
        lines = convert(RECIPE_WITH_IMAGES).splitlines()

        assert lines[0] == "# Sourdough"
        assert "# Sourdough Loaf" in lines

    def test_images(self):
        markdown = convert(RECIPE_WITH_IMAGES)

        assert "[![Bakery](/static/logo.png)](/)" in markdown
        assert '![Finished loaf](/img/loaf.jpg "Day two")' in markdown

    def test_ordered_steps(self):
        lines = convert(RECIPE_WITH_IMAGES).splitlines()

        assert "1. Mix flour and water" in lines
        assert "2. Add the starter" in lines
        assert "3. Bake at **250 °C**" in lines

    def test_hidden_content_is_dropped(self):
        markdown = convert(RECIPE_WITH_IMAGES)

        assert "tracking pixel" not in markdown
        assert "decorative" not in markdown

    def test_inline_formatting(self):
        assert "Notes: ~rye~ <u>spelt</u> works too." in convert(RECIPE_WITH_IMAGES)


@pytest.mark.integration
class TestMalformedDocuments:
    """Test that broken markup still converts."""

    def test_content_survives(self):
        markdown = convert(MALFORMED_FORUM_POST)

        assert "First paragraph" in markdown
        assert "Second paragraph with **bold text" in markdown

    def test_verdict(self):
        assert not Converter(MALFORMED_FORUM_POST).ok()

    def test_deeply_nested_markup(self):
        html = "<div>" * 500 + "Content" + "</div>" * 500
        converter = Converter(html)

        assert converter.convert() == "Content\n"
        assert converter.ok()

    def test_unclosed_navigation_items_do_not_hide_the_page(self):
        converter = Converter(PORTAL_WITH_UNCLOSED_NAV)
        markdown = converter.convert()

        assert "## Getting started" in markdown
        assert "Install the package." in markdown
        assert "Home" not in markdown
        assert "Docs" not in markdown
        assert "Beta banner" not in markdown
        assert not converter.ok()
