"""
Pydantic schemas for AI provider payloads.

Provider responses are untrusted JSON. These schemas enforce the
Article and KeywordSuggestion shapes before anything reaches the core
dataclasses in ``models``.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .models import Article, KeywordSuggestion


class SectionPayload(BaseModel):
    """One article section as returned by the text provider."""
    heading: str
    content: str


class FAQPayload(BaseModel):
    """One FAQ entry as returned by the text provider."""
    question: str
    answer: str


class ArticlePayload(BaseModel):
    """Article shape the text provider must return."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    meta_description: str = Field(..., alias="metaDescription")
    sections: list[SectionPayload] = Field(..., min_length=1)
    faq: list[FAQPayload]
    lsi_keywords: list[str] = Field(..., alias="lsiKeywords")

    def to_model(self) -> Article:
        """Convert the validated payload to the core Article dataclass."""
        return Article.from_dict(self.model_dump(by_alias=True))


class KeywordSuggestionPayload(BaseModel):
    """One keyword candidate as returned by the research provider."""
    keyword: str = Field(..., min_length=1)
    type: Literal["Related", "LSI", "Long-tail"]
    intent: Literal["Informational", "Commercial", "Transactional", "Navigational"]
    relevance: int = Field(..., ge=1, le=100)

    def to_model(self) -> KeywordSuggestion:
        return KeywordSuggestion.from_dict(self.model_dump())


class KeywordResearchPayload(BaseModel):
    """Envelope returned by the keyword research provider."""
    keywords: list[KeywordSuggestionPayload]


# JSON shapes described to the provider in prompts
ARTICLE_JSON_SHAPE: dict[str, Any] = {
    "title": "An engaging, SEO-friendly title that contains the primary keyword.",
    "metaDescription": "A 150-160 character summary for search results that includes the primary keyword.",
    "sections": [
        {
            "heading": "A descriptive, keyword-rich heading (H2 or H3).",
            "content": "Two or three paragraphs that naturally use the primary and LSI keywords.",
        }
    ],
    "faq": [
        {
            "question": "A relevant 'People Also Ask' question (3-5 items).",
            "answer": "A clear and concise answer.",
        }
    ],
    "lsiKeywords": ["The 5-7 most relevant LSI keywords used in the article."],
}

KEYWORD_RESEARCH_JSON_SHAPE: dict[str, Any] = {
    "keywords": [
        {
            "keyword": "The keyword phrase.",
            "type": "One of: Related, LSI, Long-tail.",
            "intent": "One of: Informational, Commercial, Transactional, Navigational.",
            "relevance": "Integer from 1 to 100 for how closely it relates to the topic.",
        }
    ]
}
