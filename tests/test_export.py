"""Tests for plain-text and Markdown export."""

from seo_wizard.export import normalize_line_breaks, to_markdown, to_plain_text
from seo_wizard.models import Article, FAQItem, Section


class TestPlainText:
    """Tests for to_plain_text."""

    def test_layout(self, sample_article: Article):
        """Plain text follows the documented layout exactly."""
        expected = (
            "Title: Solar Panels for Beginners\n\n"
            "Meta Description: Learn how solar panels work and what they cost.\n\n"
            "---\n\n"
            "## How Solar Panels Work\n\n"
            "Solar panels turn sunlight into electricity.\nBattery storage keeps power for the night.\n\n"
            "## Costs\n\n"
            "Installation costs vary. Solar panels pay off over time.\n\n"
            "---\n\n"
            "## Frequently Asked Questions\n\n"
            "### Do solar panels work in winter?\n\n"
            "Yes, at reduced output.\n\n"
        )
        assert to_plain_text(sample_article) == expected

    def test_no_faq_block_without_faq(self):
        article = Article(
            title="T",
            meta_description="M",
            sections=[Section(heading="H", content="C")],
        )
        assert to_plain_text(article) == "Title: T\n\nMeta Description: M\n\n---\n\n## H\n\nC\n\n"


class TestMarkdown:
    """Tests for to_markdown."""

    def test_layout(self, sample_article: Article):
        markdown = to_markdown(sample_article)

        assert markdown.startswith(
            "# Solar Panels for Beginners\n\n"
            "> Learn how solar panels work and what they cost.\n\n"
            "---\n\n"
        )
        assert (
            "## How Solar Panels Work\n\n"
            "Solar panels turn sunlight into electricity.\n\nBattery storage keeps power for the night.\n\n"
        ) in markdown
        assert markdown.endswith(
            "---\n\n## Frequently Asked Questions\n\n"
            "### Do solar panels work in winter?\n\nYes, at reduced output.\n\n"
        )

    def test_faq_omitted_when_empty(self):
        article = Article(title="T", meta_description="M", sections=[Section("H", "C")])
        assert "Frequently Asked Questions" not in to_markdown(article)

    def test_faq_answers_not_normalized(self):
        article = Article(
            title="T",
            meta_description="M",
            sections=[Section("H", "C")],
            faq=[FAQItem("Q?", "line one\nline two")],
        )
        assert "line one\nline two\n\n" in to_markdown(article)


class TestNormalizeLineBreaks:
    """Tests for line-break normalization."""

    def test_all_break_styles(self):
        assert normalize_line_breaks("a\r\nb\rc\nd") == "a\n\nb\n\nc\n\nd"

    def test_runs_collapse_to_paragraph_break(self):
        assert normalize_line_breaks("a\n\n\nb\r\n\r\nc") == "a\n\nb\n\nc"

    def test_idempotent(self):
        """Normalizing twice equals normalizing once."""
        for text in ["a\nb", "a\r\n\r\nb\rc", "no breaks", "\n\nedge\n", ""]:
            once = normalize_line_breaks(text)
            assert normalize_line_breaks(once) == once

    def test_markdown_idempotent_on_normalized_content(self, sample_article: Article):
        """Exporting already-normalized content does not change it again."""
        first = to_markdown(sample_article)
        for section in sample_article.sections:
            section.content = normalize_line_breaks(section.content)
        assert to_markdown(sample_article) == first
