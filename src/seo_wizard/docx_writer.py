"""
Word document writer for generated articles.

Produces a .docx with the same layout as the text exports:
- Title and meta description
- One Heading 2 per section, body split into paragraphs
- Optional FAQ section
- Optional keyword highlighting (primary and LSI keywords in different colors)
"""

import logging
import re
from pathlib import Path
from typing import Optional, Sequence, Union

from docx import Document
from docx.enum.text import WD_COLOR_INDEX
from docx.oxml.ns import qn
from docx.shared import Pt
from docx.text.paragraph import Paragraph

from .analysis import highlight_keywords
from .export import FAQ_HEADING
from .models import Article

logger = logging.getLogger(__name__)


FONT_NAME = "Poppins"

PRIMARY_HIGHLIGHT = WD_COLOR_INDEX.YELLOW
LSI_HIGHLIGHT = WD_COLOR_INDEX.BRIGHT_GREEN

# Style name -> (point size, bold)
STYLE_SIZES: dict[str, tuple[int, bool]] = {
    "Normal": (11, False),
    "Title": (26, True),
    "Heading 2": (16, True),
    "Heading 3": (13, True),
}

# C0 controls other than tab/LF/CR, plus DEL and C1 controls
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_PARAGRAPH_SPLIT_RE = re.compile(r"(?:\r\n|\r|\n)+")


def sanitize_for_xml(text: str) -> str:
    """
    Remove characters XML 1.0 does not allow.

    Provider output occasionally carries control characters; Word refuses
    to open a document containing them without a repair dialog.
    """
    if not text:
        return text
    return _CONTROL_CHARS_RE.sub("", text)


def add_highlighted_text(
    paragraph: Paragraph,
    text: str,
    primary_keyword: Optional[str] = None,
    lsi_keywords: Sequence[str] = (),
    highlight: bool = False,
) -> None:
    """
    Write text into a paragraph, shading keyword matches when asked.

    Args:
        paragraph: Paragraph to add runs to.
        text: Text to write.
        primary_keyword: Keyword shaded with PRIMARY_HIGHLIGHT.
        lsi_keywords: Keywords shaded with LSI_HIGHLIGHT.
        highlight: When False the text is written as one plain run.
    """
    text = sanitize_for_xml(text)
    segments = highlight_keywords(
        text,
        primary_keyword or "",
        lsi_keywords,
        enabled=highlight and bool(primary_keyword or lsi_keywords),
    )

    for segment in segments:
        if not segment.text:
            continue
        run = paragraph.add_run(segment.text)
        run.font.name = FONT_NAME
        if segment.kind == "primary":
            run.font.highlight_color = PRIMARY_HIGHLIGHT
        elif segment.kind == "lsi":
            run.font.highlight_color = LSI_HIGHLIGHT


class ArticleDocxWriter:
    """Writes one article to a Word document."""

    def __init__(self):
        self.doc = Document()
        self._apply_styles()

    def _apply_styles(self) -> None:
        """Set the article font, sizes and paragraph spacing on the built-in styles."""
        for name, (size, bold) in STYLE_SIZES.items():
            font = self.doc.styles[name].font
            font.name = FONT_NAME
            font.size = Pt(size)
            if bold:
                font.bold = True

        body = self.doc.styles["Normal"]
        body.paragraph_format.space_before = body.paragraph_format.space_after = Pt(6)
        body.paragraph_format.line_spacing = 1.15
        # eastAsia font slot, used when rendering ja-JP text
        body.element.rPr.rFonts.set(qn("w:eastAsia"), FONT_NAME)

    def write(
        self,
        article: Article,
        output_path: Union[str, Path],
        primary_keyword: Optional[str] = None,
        highlight: bool = False,
    ) -> Path:
        """
        Write the article to a .docx file.

        Args:
            article: Article to write.
            output_path: Target path; the suffix is forced to .docx.
            primary_keyword: Primary keyword, used for highlighting.
            highlight: Shade primary and LSI keyword matches in the body.

        Returns:
            Path to the created document.
        """
        output_path = Path(output_path)
        if output_path.suffix.lower() != ".docx":
            output_path = output_path.with_suffix(".docx")

        title_para = self.doc.add_paragraph(style="Title")
        title_para.add_run(sanitize_for_xml(article.title))

        meta_para = self.doc.add_paragraph()
        meta_run = meta_para.add_run(sanitize_for_xml(article.meta_description))
        meta_run.font.italic = True

        for section in article.sections:
            self.doc.add_heading(sanitize_for_xml(section.heading), level=2)
            for block in _PARAGRAPH_SPLIT_RE.split(section.content):
                if not block.strip():
                    continue
                para = self.doc.add_paragraph()
                add_highlighted_text(
                    para,
                    block,
                    primary_keyword=primary_keyword,
                    lsi_keywords=article.lsi_keywords,
                    highlight=highlight,
                )

        if article.has_faq:
            self.doc.add_heading(FAQ_HEADING, level=2)
            for item in article.faq:
                self.doc.add_heading(sanitize_for_xml(item.question), level=3)
                self.doc.add_paragraph(sanitize_for_xml(item.answer))

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.doc.save(str(output_path))
        logger.info(f"Wrote {output_path}")
        return output_path


def write_article_docx(
    article: Article,
    output_path: Union[str, Path],
    primary_keyword: Optional[str] = None,
    highlight: bool = False,
) -> Path:
    """
    Convenience function to write an article to docx.

    Args:
        article: Article to write.
        output_path: Output file path.
        primary_keyword: Primary keyword, used for highlighting.
        highlight: Shade keyword matches.

    Returns:
        Path to created document.
    """
    writer = ArticleDocxWriter()
    return writer.write(article, output_path, primary_keyword=primary_keyword, highlight=highlight)
