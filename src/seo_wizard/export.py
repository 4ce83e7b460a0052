"""
Plain-text and Markdown rendering of articles.

Both formats share one layout: title, meta description, a rule, the
sections as level-2 headings, then an optional FAQ block.
"""

import re

from .models import Article

FAQ_HEADING = "Frequently Asked Questions"

_LINE_BREAKS_RE = re.compile(r"(?:\r\n|\r|\n)+")


def normalize_line_breaks(content: str) -> str:
    """
    Turn every run of line breaks into a paragraph break.

    ``\\r\\n``, ``\\r`` and ``\\n`` are all accepted. Applying the function
    twice gives the same result as applying it once.
    """
    return _LINE_BREAKS_RE.sub("\n\n", content)


def to_plain_text(article: Article) -> str:
    """
    Render an article as plain text.

    Args:
        article: Article to render.

    Returns:
        Text with "Title:" and "Meta Description:" lines, the sections as
        ``## heading`` blocks and the FAQ (if any) as ``### question`` blocks.
    """
    text = f"Title: {article.title}\n\n"
    text += f"Meta Description: {article.meta_description}\n\n"
    text += "---\n\n"

    for section in article.sections:
        text += f"## {section.heading}\n\n{section.content}\n\n"

    if article.has_faq:
        text += f"---\n\n## {FAQ_HEADING}\n\n"
        for item in article.faq:
            text += f"### {item.question}\n\n{item.answer}\n\n"

    return text


def to_markdown(article: Article) -> str:
    """
    Render an article as Markdown.

    Section content has its line breaks normalized to paragraph breaks;
    headings, the meta description and FAQ entries are emitted as-is.
    """
    markdown = f"# {article.title}\n\n"
    markdown += f"> {article.meta_description}\n\n"
    markdown += "---\n\n"

    for section in article.sections:
        markdown += f"## {section.heading}\n\n"
        markdown += f"{normalize_line_breaks(section.content)}\n\n"

    if article.has_faq:
        markdown += f"---\n\n## {FAQ_HEADING}\n\n"
        for item in article.faq:
            markdown += f"### {item.question}\n\n{item.answer}\n\n"

    return markdown
