"""
SEO analysis module.

This module measures how an article uses its keywords:
- Word count of the article body
- Frequency and density of the primary and LSI keywords
- Keyword highlighting for display, with primary and LSI matches tagged
  separately

Matching is whole-word and case-insensitive. Keywords are matched
literally, so regex metacharacters in a keyword ("c++", "node.js") carry
no special meaning.
"""

import html
import logging
import re
from typing import Optional, Sequence

from .models import Article, HighlightSegment, KeywordStat, SeoAnalysisData

logger = logging.getLogger(__name__)


def _keyword_regex(keyword: str) -> str:
    # Lookarounds rather than \b: keywords may start or end with a
    # non-word character ("c++")
    return rf"(?<!\w){re.escape(keyword)}(?!\w)"


def build_keyword_pattern(keywords: Sequence[str]) -> Optional[re.Pattern]:
    """
    Compile one whole-word alternation over a set of keywords.

    Blank keywords are dropped and duplicates are removed case-insensitively.
    Alternatives are ordered longest-first so a phrase wins over any
    keyword it contains ("machine learning" before "machine").

    Args:
        keywords: Keywords to match.

    Returns:
        Compiled case-insensitive pattern, or None if no keyword remains.
    """
    seen: set[str] = set()
    unique: list[str] = []
    for keyword in keywords:
        cleaned = (keyword or "").strip()
        if not cleaned or cleaned.lower() in seen:
            continue
        seen.add(cleaned.lower())
        unique.append(cleaned)

    if not unique:
        return None

    unique.sort(key=len, reverse=True)
    alternation = "|".join(re.escape(keyword) for keyword in unique)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(text.split())


def count_keyword_occurrences(text: str, keyword: str) -> int:
    """
    Count whole-word, case-insensitive occurrences of a keyword.

    Args:
        text: Text to search.
        keyword: Keyword phrase, matched literally.

    Returns:
        Number of non-overlapping matches (0 for a blank keyword).
    """
    keyword = (keyword or "").strip()
    if not keyword or not text:
        return 0
    return len(re.findall(_keyword_regex(keyword), text, re.IGNORECASE))


def calculate_keyword_density(frequency: int, word_count: int) -> float:
    """
    Calculate keyword density as a percentage of the word count.

    The value is not rounded; front-ends format it for display.
    """
    if word_count == 0:
        return 0.0
    return frequency / word_count * 100


def analyze_article(
    article: Article,
    primary_keyword: str,
    user_lsi_keywords: Sequence[str] = (),
) -> SeoAnalysisData:
    """
    Compute word count and keyword statistics for one article.

    The analysed text is the section contents joined with single spaces;
    the title, meta description and FAQ are not counted.

    Args:
        article: Article to analyse.
        primary_keyword: The primary keyword / topic.
        user_lsi_keywords: Keywords the user asked for. Used to flag which
            of the article's LSI keywords came from the user.

    Returns:
        SeoAnalysisData with the primary keyword first, followed by the
        article's LSI keywords (minus any duplicate of the primary).
    """
    text = article.body_text
    word_count = count_words(text)

    if word_count == 0:
        logger.debug("Article body is empty; returning empty analysis")
        return SeoAnalysisData(word_count=0, keyword_stats=[])

    primary = primary_keyword.strip()
    user_keywords = {kw.strip().lower() for kw in user_lsi_keywords if kw}

    stats: list[KeywordStat] = []
    if primary:
        frequency = count_keyword_occurrences(text, primary)
        stats.append(KeywordStat(
            keyword=primary,
            frequency=frequency,
            density=calculate_keyword_density(frequency, word_count),
            is_primary=True,
            is_user_provided=True,
        ))

    for keyword in article.lsi_keywords:
        if keyword.strip().lower() == primary.lower():
            continue
        frequency = count_keyword_occurrences(text, keyword)
        stats.append(KeywordStat(
            keyword=keyword,
            frequency=frequency,
            density=calculate_keyword_density(frequency, word_count),
            is_primary=False,
            is_user_provided=keyword.strip().lower() in user_keywords,
        ))

    return SeoAnalysisData(word_count=word_count, keyword_stats=stats)


def highlight_keywords(
    text: str,
    primary_keyword: str,
    lsi_keywords: Sequence[str] = (),
    enabled: bool = True,
) -> list[HighlightSegment]:
    """
    Split text into plain and keyword-marked segments.

    Args:
        text: Text to highlight.
        primary_keyword: Keyword tagged as "primary".
        lsi_keywords: Keywords tagged as "lsi".
        enabled: When False the text comes back as one plain segment.

    Returns:
        Segments whose texts concatenate back to the input.
    """
    if not enabled or not text:
        return [HighlightSegment(text)]

    primary = (primary_keyword or "").strip()
    pattern = build_keyword_pattern([primary, *lsi_keywords])
    if pattern is None:
        return [HighlightSegment(text)]

    primary_lower = primary.lower()
    segments: list[HighlightSegment] = []
    position = 0

    for match in pattern.finditer(text):
        if match.start() > position:
            segments.append(HighlightSegment(text[position:match.start()]))
        kind = "primary" if match.group(0).lower() == primary_lower else "lsi"
        segments.append(HighlightSegment(match.group(0), kind))
        position = match.end()

    if position < len(text):
        segments.append(HighlightSegment(text[position:]))

    return segments


def render_highlight_html(segments: Sequence[HighlightSegment]) -> str:
    """
    Render highlight segments as HTML.

    Marked segments are wrapped in ``<mark class="...">``; all text is
    HTML-escaped.
    """
    parts = []
    for segment in segments:
        escaped = html.escape(segment.text)
        if segment.is_marked:
            parts.append(f'<mark class="{segment.css_class}">{escaped}</mark>')
        else:
            parts.append(escaped)
    return "".join(parts)
