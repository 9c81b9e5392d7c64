"""
Unit Tests for the Markdown Renderer

Covers parsing configuration, the empty state, math typesetting and link
enhancement.
"""

# Standard library
from unittest.mock import patch

# Third-party
import pytest

# Local application
from markdown_render.links import find_heading
from markdown_render.math_typeset import split_at_delimiters
from markdown_render.renderer import render_markdown
from markdown_render.schemas import EMPTY_STATE_HTML


class TestRenderBasics:
    """Tests for render_markdown structure and purity."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t\n"])
    def test_empty_input_yields_placeholder(self, text):
        """Empty or whitespace-only input renders the empty-state fragment."""
        fragment = render_markdown(text)

        assert fragment.is_empty is True
        assert fragment.html == EMPTY_STATE_HTML
        assert fragment.soup().find("p", class_="empty-state") is not None

    def test_render_is_idempotent(self, sample_markdown):
        """Rendering the same text twice gives equal fragments."""
        assert render_markdown(sample_markdown) == render_markdown(sample_markdown)

    def test_heading_and_inline_math(self):
        """'# Hello' plus '$x^2$' gives an h1 and a typeset inline math node."""
        fragment = render_markdown("# Hello\n\n$x^2$")
        soup = fragment.soup()

        assert soup.find("h1").get_text() == "Hello"
        math = soup.find("span", class_="math-inline")
        assert math is not None
        assert math["data-tex"] == "x^2"
        assert math.find("math") is not None
        assert fragment.math_count == 1
        assert fragment.math_errors == 0

    def test_soft_line_breaks_become_br(self):
        """Single newlines inside a paragraph become <br>."""
        soup = render_markdown("line one\nline two").soup()

        assert soup.find("p").find("br") is not None

    def test_tables_and_fenced_code(self, sample_markdown):
        """The extended dialect parses tables and fenced code blocks."""
        soup = render_markdown(sample_markdown).soup()

        assert soup.find("table") is not None
        assert soup.find("pre").find("code").get_text().strip() == 'print("hi")'

    def test_raw_html_is_escaped(self):
        """Raw HTML in the source is not passed through."""
        soup = render_markdown("<script>alert(1)</script>\n\ntext").soup()

        assert soup.find("script") is None
        assert "alert(1)" in soup.get_text()

    def test_bare_url_is_autolinked(self):
        """Bare URLs become anchors."""
        soup = render_markdown("Visit https://example.com today").soup()

        assert soup.find("a")["href"] == "https://example.com"


class TestMathTypesetting:
    """Tests for the math pass."""

    def test_display_math(self):
        """$$...$$ produces display math."""
        soup = render_markdown("$$\\frac{a}{b}$$").soup()

        display = soup.find("span", class_="math-display")
        assert display is not None
        assert display["data-tex"] == "\\frac{a}{b}"

    def test_math_inside_code_is_left_alone(self):
        """Code spans are never typeset."""
        soup = render_markdown("`$x$` and $y$").soup()

        assert soup.find("code").get_text() == "$x$"
        assert [m["data-tex"] for m in soup.find_all("span", class_="math")] == ["y"]

    def test_bracket_delimiters_survive_markdown_escapes(self):
        """\\( \\) and \\[ \\] in Markdown source reach the math pass intact."""
        fragment = render_markdown("inline \\(x^2\\) and display \\[y\\]")
        soup = fragment.soup()

        assert fragment.math_count == 2
        assert soup.find("span", class_="math-inline")["data-tex"] == "x^2"
        assert soup.find("span", class_="math-display")["data-tex"] == "y"

    def test_other_backslash_escapes_still_apply(self):
        fragment = render_markdown("\\*not emphasis\\* and `\\(code\\)`")
        soup = fragment.soup()

        assert soup.find("em") is None
        assert "*not emphasis*" in soup.get_text()
        assert soup.find("code").get_text() == "\\(code\\)"
        assert fragment.math_count == 0

    def test_unterminated_delimiter_stays_literal(self):
        """An opening $ without a close is plain text."""
        fragment = render_markdown("costs $5 only")

        assert fragment.math_count == 0
        assert "costs $5 only" in fragment.soup().get_text()

    def test_malformed_expression_does_not_abort_rendering(self):
        """A failing expression stays literal while the others are typeset."""
        from latex2mathml.converter import convert as real_convert

        def flaky_convert(latex, display="inline"):
            if latex == "bad":
                raise ValueError("cannot parse")
            return real_convert(latex, display=display)

        with patch("markdown_render.math_typeset.latex_to_mathml", side_effect=flaky_convert):
            fragment = render_markdown("first $bad$ then $y$")

        assert fragment.math_count == 1
        assert fragment.math_errors == 1
        text = fragment.soup().get_text()
        assert "$bad$" in text
        assert fragment.soup().find("span", class_="math-inline")["data-tex"] == "y"


class TestSplitAtDelimiters:
    """Tests for the delimiter scanner."""

    def test_plain_text(self):
        segments = split_at_delimiters("no math here")

        assert len(segments) == 1
        assert segments[0].is_math is False

    def test_inline_and_text_segments(self):
        segments = split_at_delimiters("a $x$ b")

        assert [s.is_math for s in segments] == [False, True, False]
        assert segments[1].text == "x"
        assert segments[1].raw == "$x$"

    def test_double_dollar_wins_over_single(self):
        segments = split_at_delimiters("$$x$$")

        assert len(segments) == 1
        assert segments[0].display is True
        assert segments[0].text == "x"

    def test_closing_delimiter_inside_braces_is_skipped(self):
        segments = split_at_delimiters("$\\text{a$b}$")

        assert segments[0].text == "\\text{a$b}"

    def test_bracket_delimiters(self):
        segments = split_at_delimiters("\\(a\\) and \\[b\\]")

        math = [s for s in segments if s.is_math]
        assert [(s.text, s.display) for s in math] == [("a", False), ("b", True)]


class TestLinkEnhancement:
    """Tests for anchor rewriting."""

    def test_external_links_open_in_new_context(self):
        soup = render_markdown("[site](https://example.com)").soup()
        anchor = soup.find("a")

        assert anchor["target"] == "_blank"
        assert anchor["rel"] == ["noopener", "noreferrer"]

    def test_fragment_link_points_at_heading(self):
        markdown = "[Jump](#getting-started)\n\n## Getting Started\n\ntext"
        soup = render_markdown(markdown).soup()
        anchor = soup.find("a")
        heading = soup.find("h2")

        assert heading["id"] == "getting-started"
        assert anchor["href"] == "#getting-started"
        assert anchor["data-scroll"] == "heading"
        assert anchor.get("target") is None

    def test_fragment_link_matches_heading_prefix(self):
        soup = render_markdown("## Install   Guide (v2)\n\n[go](#install-guide)").soup()

        assert find_heading(soup, "#install-guide").name == "h2"

    def test_unmatched_fragment_link_is_unchanged(self):
        soup = render_markdown("[nowhere](#missing)\n\n# Title").soup()
        anchor = soup.find("a")

        assert anchor["href"] == "#missing"
        assert anchor.get("data-scroll") is None
