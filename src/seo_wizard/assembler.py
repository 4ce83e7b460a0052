"""
Assembly of the record handed to storage when an article is saved.
"""

import logging
from typing import Optional, Sequence

from .errors import NoContentError
from .models import (
    ArticleSet,
    GenerationSettings,
    KeywordSuggestion,
    SavedArticlePayload,
    SearchIntent,
    SeoAnalysisData,
)

logger = logging.getLogger(__name__)


def assemble(
    primary_keyword: str,
    user_lsi_keywords: Sequence[str],
    articles: ArticleSet,
    markdown_content: str,
    thumbnail_url: Optional[str],
    generation_settings: GenerationSettings,
    search_intent: Optional[SearchIntent],
    seo_analysis: SeoAnalysisData,
    keyword_research_data: Sequence[KeywordSuggestion] = (),
) -> SavedArticlePayload:
    """
    Combine a generation's outputs into a save payload.

    Nothing is sent anywhere; the caller passes the payload to a
    StorageClient.

    Args:
        primary_keyword: Primary keyword the articles were generated for.
        user_lsi_keywords: Keywords the user supplied.
        articles: Locale-keyed article set.
        markdown_content: Markdown rendering of the article being saved.
        thumbnail_url: Header image URL or data URL, if one was generated.
        generation_settings: Options the articles were generated with.
        search_intent: Intent of the primary keyword, when known from research.
        seo_analysis: Analysis of the article being saved.
        keyword_research_data: Research results the keywords were picked from.

    Returns:
        SavedArticlePayload ready for storage.

    Raises:
        NoContentError: If the article set is empty.
    """
    if not articles:
        raise NoContentError("There is no generated article to save")

    payload = SavedArticlePayload(
        primary_keyword=primary_keyword,
        user_lsi_keywords=list(user_lsi_keywords),
        articles=dict(articles),
        markdown_content=markdown_content,
        generation_settings=generation_settings,
        seo_analysis=seo_analysis,
        thumbnail_url=thumbnail_url,
        search_intent=search_intent,
        keyword_research_data=list(keyword_research_data),
    )
    logger.debug(
        f"Assembled save payload for '{primary_keyword}' with {len(articles)} locale(s)"
    )
    return payload
