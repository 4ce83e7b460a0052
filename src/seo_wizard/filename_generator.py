"""
Filename generation for exported articles.

Downloads are named after the article title:
"10 Tips for Electric Cars!" -> "10-tips-for-electric-cars.md"
"""

import re
from pathlib import Path
from typing import Optional

from .models import Article

FALLBACK_BASENAME = "untitled-article"


def slugify(text: str) -> str:
    """
    Convert text to a filename-safe slug.

    Args:
        text: Text to convert.

    Returns:
        Slugified text (possibly empty).
    """
    # Convert to lowercase
    text = text.lower().strip()

    # Replace whitespace runs with hyphens
    text = re.sub(r"\s+", "-", text)

    # Remove anything that isn't an ASCII word character or hyphen
    text = re.sub(r"[^\w-]+", "", text, flags=re.ASCII)

    # Remove multiple consecutive hyphens
    text = re.sub(r"-{2,}", "-", text)

    return text


def article_filename(article: Article, extension: str = "md") -> str:
    """
    Build the download filename for an article.

    Args:
        article: Article whose title names the file.
        extension: File extension, with or without a leading dot.

    Returns:
        Filename like "my-article-title.md". Falls back to
        "untitled-article" when the title slugifies to nothing.

    Examples:
        >>> article_filename(Article("Hello World", "meta"), "txt")
        'hello-world.txt'
    """
    base = slugify(article.title or "") or FALLBACK_BASENAME
    return f"{base}.{extension.lstrip('.')}"


def article_output_path(
    article: Article,
    extension: str = "md",
    output_dir: Optional[Path] = None,
    locale: Optional[str] = None,
) -> Path:
    """
    Build the output path for an exported article.

    When a locale is given it is appended to the base name so exports of
    the same article in several languages do not overwrite each other.

    Args:
        article: Article to export.
        extension: File extension.
        output_dir: Target directory. Defaults to the current directory.
        locale: Optional locale suffix.

    Returns:
        Path of the output file.
    """
    output_dir = output_dir or Path.cwd()
    filename = article_filename(article, extension)
    if locale:
        stem, _, ext = filename.rpartition(".")
        filename = f"{stem}-{slugify(locale)}.{ext}"
    return output_dir / filename
