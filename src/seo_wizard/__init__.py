"""
SEO Wizard

An AI-assisted SEO article generator that:
- Researches related, LSI and long-tail keywords for a topic
- Generates the same article in several locales at once
- Reports keyword frequency and density, and highlights keywords
- Exports to Markdown, plain text and Word, and saves articles to a backend
"""

__version__ = "1.0.0"
__author__ = "SEO Wizard Team"

from .config import SUPPORTED_LOCALES, WizardConfig

from .errors import (
    GenerationError,
    NoContentError,
    PartialLocaleFailure,
    PersistenceError,
    SeoWizardError,
    ValidationError,
)

from .models import (
    Article,
    ArticleSet,
    FAQItem,
    GenerationSettings,
    HighlightSegment,
    KeywordStat,
    KeywordSuggestion,
    SavedArticle,
    SavedArticlePayload,
    Section,
    SeoAnalysisData,
)

from .analysis import (
    analyze_article,
    build_keyword_pattern,
    highlight_keywords,
    render_highlight_html,
)

from .export import to_markdown, to_plain_text
from .assembler import assemble
from .generator import ArticleGenerator, generate_articles
from .keyword_research import KeywordResearcher, filter_and_sort, research_keywords, select_keywords
from .storage_client import StorageClient
from .wizard import SeoWizard

__all__ = [
    # Configuration
    "SUPPORTED_LOCALES",
    "WizardConfig",
    # Errors
    "SeoWizardError",
    "ValidationError",
    "GenerationError",
    "PartialLocaleFailure",
    "PersistenceError",
    "NoContentError",
    # Models
    "Article",
    "ArticleSet",
    "Section",
    "FAQItem",
    "GenerationSettings",
    "HighlightSegment",
    "KeywordStat",
    "KeywordSuggestion",
    "SavedArticle",
    "SavedArticlePayload",
    "SeoAnalysisData",
    # Analysis
    "analyze_article",
    "build_keyword_pattern",
    "highlight_keywords",
    "render_highlight_html",
    # Export
    "to_markdown",
    "to_plain_text",
    # Assembly
    "assemble",
    # Generation and research
    "ArticleGenerator",
    "generate_articles",
    "KeywordResearcher",
    "filter_and_sort",
    "research_keywords",
    "select_keywords",
    # Storage
    "StorageClient",
    # Facade
    "SeoWizard",
]
