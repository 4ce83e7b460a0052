"""Tests for keyword highlighting."""

from seo_wizard.analysis import highlight_keywords, render_highlight_html
from seo_wizard.models import HighlightSegment


class TestHighlightKeywords:
    """Tests for highlight_keywords."""

    def test_disabled_returns_text_unchanged(self):
        """Disabled highlighting yields one plain segment."""
        text = "solar panels and battery storage"
        segments = highlight_keywords(text, "solar panels", ["battery storage"], enabled=False)
        assert segments == [HighlightSegment(text)]

    def test_empty_text(self):
        assert highlight_keywords("", "solar") == [HighlightSegment("")]

    def test_longest_keyword_wins(self):
        """A phrase is matched once rather than as its shorter keyword."""
        segments = highlight_keywords(
            "machine learning is powerful", "machine", ["machine learning"]
        )
        marked = [s for s in segments if s.is_marked]
        assert len(marked) == 1
        assert marked[0].text == "machine learning"
        assert marked[0].kind == "lsi"

    def test_primary_and_lsi_are_tagged(self):
        """Primary and LSI matches are tagged separately, case-insensitively."""
        text = "Solar panels need battery storage. SOLAR PANELS again."
        segments = highlight_keywords(text, "solar panels", ["battery storage"])

        assert [(s.text, s.kind) for s in segments if s.is_marked] == [
            ("Solar panels", "primary"),
            ("battery storage", "lsi"),
            ("SOLAR PANELS", "primary"),
        ]

    def test_segments_reassemble_input(self):
        """Segment texts concatenate back to the original text."""
        text = "Battery storage, solar panels; and more battery storage!"
        segments = highlight_keywords(text, "solar panels", ["battery storage"])
        assert "".join(s.text for s in segments) == text

    def test_partial_words_not_highlighted(self):
        segments = highlight_keywords("Cats and catastrophe", "cat")
        assert segments == [HighlightSegment("Cats and catastrophe")]

    def test_style_class_differs_by_kind(self):
        """Primary and LSI segments render with different style classes."""
        segments = highlight_keywords("solar and wind", "solar", ["wind"])
        classes = {s.kind: s.css_class for s in segments if s.is_marked}
        assert classes["primary"] != classes["lsi"]
        assert "keyword-primary" in classes["primary"]
        assert "keyword-lsi" in classes["lsi"]


class TestRenderHighlightHtml:
    """Tests for HTML rendering of highlight segments."""

    def test_marks_and_escapes(self):
        segments = highlight_keywords("<b>solar</b> & wind", "solar", ["wind"])
        html = render_highlight_html(segments)

        assert html == (
            '&lt;b&gt;<mark class="keyword-highlight keyword-primary">solar</mark>'
            '&lt;/b&gt; &amp; <mark class="keyword-highlight keyword-lsi">wind</mark>'
        )

    def test_plain_text(self):
        assert render_highlight_html([HighlightSegment("a < b")]) == "a &lt; b"
