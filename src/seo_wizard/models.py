"""
Data models for SEO Wizard.

This module defines the core data structures shared by keyword research,
article generation, SEO analysis, export and persistence. Every model can
render itself to the camelCase dictionary shape used on the wire by
the AI providers and the storage backend.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, Optional


# Wire values used by the keyword research provider
KeywordType = Literal["Related", "LSI", "Long-tail"]
SearchIntent = Literal["Informational", "Commercial", "Transactional", "Navigational"]
ArticleLength = Literal["very short", "short", "medium", "long", "very long", "epic"]

KEYWORD_TYPES: tuple[str, ...] = ("Related", "LSI", "Long-tail")
SEARCH_INTENTS: tuple[str, ...] = ("Informational", "Commercial", "Transactional", "Navigational")
ARTICLE_LENGTHS: tuple[str, ...] = ("very short", "short", "medium", "long", "very long", "epic")


@dataclass(frozen=True)
class KeywordSuggestion:
    """A keyword candidate returned by the research provider."""
    keyword: str
    type: KeywordType
    intent: SearchIntent
    relevance: int  # 1-100, assigned by the provider

    def to_dict(self) -> dict[str, Any]:
        return {
            "keyword": self.keyword,
            "type": self.type,
            "intent": self.intent,
            "relevance": self.relevance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KeywordSuggestion":
        return cls(
            keyword=data["keyword"],
            type=data["type"],
            intent=data["intent"],
            relevance=int(data["relevance"]),
        )


@dataclass
class Section:
    """One headed section of an article body."""
    heading: str
    content: str

    @property
    def word_count(self) -> int:
        """Get word count of the section content."""
        return len(self.content.split()) if self.content else 0


@dataclass
class FAQItem:
    """A single FAQ question/answer pair."""
    question: str
    answer: str


@dataclass
class Article:
    """A generated article for one locale."""
    title: str
    meta_description: str
    sections: list[Section] = field(default_factory=list)
    faq: list[FAQItem] = field(default_factory=list)
    lsi_keywords: list[str] = field(default_factory=list)

    @property
    def body_text(self) -> str:
        """Section contents joined with single spaces (FAQ excluded)."""
        return " ".join(section.content for section in self.sections)

    @property
    def has_faq(self) -> bool:
        return bool(self.faq)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "metaDescription": self.meta_description,
            "sections": [
                {"heading": s.heading, "content": s.content} for s in self.sections
            ],
            "faq": [
                {"question": f.question, "answer": f.answer} for f in self.faq
            ],
            "lsiKeywords": list(self.lsi_keywords),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        return cls(
            title=data["title"],
            meta_description=data["metaDescription"],
            sections=[
                Section(heading=s["heading"], content=s["content"])
                for s in data.get("sections", [])
            ],
            faq=[
                FAQItem(question=f["question"], answer=f["answer"])
                for f in data.get("faq", [])
            ],
            lsi_keywords=list(data.get("lsiKeywords", [])),
        )


# Locale code -> Article, insertion order = request order
ArticleSet = dict[str, Article]


def article_set_to_dict(articles: ArticleSet) -> dict[str, dict[str, Any]]:
    """Render an article set to its wire shape, keeping locale order."""
    return {locale: article.to_dict() for locale, article in articles.items()}


def article_set_from_dict(data: dict[str, Any]) -> ArticleSet:
    """Build an article set from its wire shape, keeping locale order."""
    return {locale: Article.from_dict(item) for locale, item in data.items()}


@dataclass
class KeywordStat:
    """Frequency and density of one keyword within one article."""
    keyword: str
    frequency: int
    density: float  # percentage of total word count
    is_primary: bool = False
    is_user_provided: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "keyword": self.keyword,
            "frequency": self.frequency,
            "density": self.density,
            "isPrimary": self.is_primary,
            "isUserProvided": self.is_user_provided,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KeywordStat":
        return cls(
            keyword=data["keyword"],
            frequency=int(data["frequency"]),
            density=float(data["density"]),
            is_primary=bool(data.get("isPrimary", False)),
            is_user_provided=bool(data.get("isUserProvided", False)),
        )


@dataclass
class SeoAnalysisData:
    """Word count and keyword statistics for one article snapshot."""
    word_count: int = 0
    keyword_stats: list[KeywordStat] = field(default_factory=list)

    @property
    def primary_stat(self) -> Optional[KeywordStat]:
        """Get the stat for the primary keyword, if any."""
        for stat in self.keyword_stats:
            if stat.is_primary:
                return stat
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "wordCount": self.word_count,
            "keywordStats": [stat.to_dict() for stat in self.keyword_stats],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SeoAnalysisData":
        return cls(
            word_count=int(data.get("wordCount", 0)),
            keyword_stats=[
                KeywordStat.from_dict(item) for item in data.get("keywordStats", [])
            ],
        )


@dataclass
class GenerationSettings:
    """Options captured at generation time so a generation can be replayed."""
    length: ArticleLength = "medium"
    include_table: bool = False
    include_in_article_images: bool = False
    locales: list[str] = field(default_factory=lambda: ["en-US"])

    def to_dict(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "includeTable": self.include_table,
            "includeInArticleImages": self.include_in_article_images,
            "locales": list(self.locales),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenerationSettings":
        return cls(
            length=data.get("length", "medium"),
            include_table=bool(data.get("includeTable", False)),
            include_in_article_images=bool(data.get("includeInArticleImages", False)),
            locales=list(data.get("locales", ["en-US"])),
        )


@dataclass
class SavedArticlePayload:
    """
    An assembled article record ready to be handed to storage.

    The storage backend assigns ``id`` and ``savedAt`` when it accepts
    the payload, turning it into a SavedArticle.
    """
    primary_keyword: str
    user_lsi_keywords: list[str]
    articles: ArticleSet
    markdown_content: str
    generation_settings: GenerationSettings
    seo_analysis: SeoAnalysisData
    thumbnail_url: Optional[str] = None
    search_intent: Optional[SearchIntent] = None
    keyword_research_data: list[KeywordSuggestion] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "primaryKeyword": self.primary_keyword,
            "userLsiKeywords": list(self.user_lsi_keywords),
            "articles": article_set_to_dict(self.articles),
            "markdownContent": self.markdown_content,
            "thumbnailUrl": self.thumbnail_url,
            "generationSettings": self.generation_settings.to_dict(),
            "searchIntent": self.search_intent,
            "seoAnalysis": self.seo_analysis.to_dict(),
            "keywordResearchData": [kw.to_dict() for kw in self.keyword_research_data],
        }


@dataclass
class SavedArticle(SavedArticlePayload):
    """A persisted article record as returned by the storage backend."""
    id: str = ""
    saved_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = {"id": self.id, "savedAt": self.saved_at}
        data.update(super().to_dict())
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavedArticle":
        return cls(
            id=str(data["id"]),
            saved_at=str(data.get("savedAt", "")),
            primary_keyword=data["primaryKeyword"],
            user_lsi_keywords=list(data.get("userLsiKeywords", [])),
            articles=article_set_from_dict(data.get("articles", {})),
            markdown_content=data.get("markdownContent", ""),
            thumbnail_url=data.get("thumbnailUrl"),
            generation_settings=GenerationSettings.from_dict(data.get("generationSettings") or {}),
            search_intent=data.get("searchIntent"),
            seo_analysis=SeoAnalysisData.from_dict(data.get("seoAnalysis") or {}),
            keyword_research_data=[
                KeywordSuggestion.from_dict(item)
                for item in data.get("keywordResearchData") or []
            ],
        )


@dataclass(frozen=True)
class HighlightSegment:
    """
    A piece of article text produced by keyword highlighting.

    ``kind`` is None for plain text, "primary" for the primary keyword
    and "lsi" for a secondary keyword.
    """
    text: str
    kind: Optional[Literal["primary", "lsi"]] = None

    @property
    def is_marked(self) -> bool:
        return self.kind is not None

    @property
    def css_class(self) -> Optional[str]:
        """Style class used when rendering the segment as an inline mark."""
        if self.kind == "primary":
            return "keyword-highlight keyword-primary"
        if self.kind == "lsi":
            return "keyword-highlight keyword-lsi"
        return None
