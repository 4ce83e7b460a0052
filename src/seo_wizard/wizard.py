"""
SEO Wizard orchestration.

Ties the pieces together for the front-ends:
- Keyword research and keyword selection
- Multi-locale article generation
- SEO analysis and highlighting
- Header image generation and upload
- Saving, listing and deleting articles in the storage backend

Clients are created lazily from WizardConfig, so the pure operations
(analysis, export, assembly) work without any API key.
"""

import logging
from typing import Optional, Sequence

from .analysis import analyze_article, highlight_keywords
from .assembler import assemble
from .config import WizardConfig
from .errors import NoContentError
from .export import to_markdown
from .generator import ArticleGenerator
from .image_client import ImageClient, build_thumbnail_prompt
from .keyword_research import RESEARCH_MAX_TOKENS, KeywordResearcher
from .llm_client import JSONGenerator, create_llm_client
from .models import (
    Article,
    ArticleSet,
    GenerationSettings,
    HighlightSegment,
    KeywordSuggestion,
    SavedArticle,
    SavedArticlePayload,
    SearchIntent,
    SeoAnalysisData,
)
from .storage_client import StorageClient

logger = logging.getLogger(__name__)


def first_article(articles: ArticleSet) -> tuple[str, Article]:
    """
    Return the first locale of a set and its article.

    Raises:
        NoContentError: If the set is empty.
    """
    for locale, article in articles.items():
        return locale, article
    raise NoContentError("No article content available")


class SeoWizard:
    """
    Facade over research, generation, analysis and storage.

    Example:
        wizard = SeoWizard(WizardConfig.from_env())
        articles = await wizard.generate("solar panels", "short", ["battery storage"])
    """

    def __init__(
        self,
        config: Optional[WizardConfig] = None,
        llm_client: Optional[JSONGenerator] = None,
        image_client: Optional[ImageClient] = None,
        storage: Optional[StorageClient] = None,
    ):
        """
        Initialize the wizard.

        Args:
            config: Configuration. Defaults to WizardConfig.from_env().
            llm_client: Pre-configured text client. If None, one is created on first use.
            image_client: Pre-configured image client. If None, one is created on first use.
            storage: Pre-configured storage client. If None, one is created on first use.
        """
        self.config = config or WizardConfig.from_env()
        self._llm = llm_client
        self._images = image_client
        self._storage = storage

    @property
    def llm(self) -> JSONGenerator:
        if self._llm is None:
            self._llm = create_llm_client(
                api_key=self.config.anthropic_api_key,
                model=self.config.text_model,
                timeout=self.config.request_timeout,
            )
        return self._llm

    @property
    def images(self) -> ImageClient:
        if self._images is None:
            self._images = ImageClient(
                api_key=self.config.gemini_api_key,
                model=self.config.image_model,
            )
        return self._images

    @property
    def storage(self) -> StorageClient:
        if self._storage is None:
            self._storage = StorageClient(
                base_url=self.config.api_url,
                timeout=self.config.request_timeout,
            )
        return self._storage

    async def aclose(self) -> None:
        """Close any HTTP clients the wizard opened."""
        if self._storage is not None:
            await self._storage.aclose()
        for client in (self._llm, self._images):
            aclose = getattr(client, "aclose", None)
            if aclose is not None:
                await aclose()

    # Research

    async def research(self, topic: str) -> list[KeywordSuggestion]:
        """Research keyword candidates for a topic."""
        researcher = KeywordResearcher(self.llm, max_tokens=min(RESEARCH_MAX_TOKENS, self.config.max_tokens))
        return await researcher.research(topic)

    # Generation

    async def generate(
        self,
        topic: str,
        length: str = "medium",
        user_lsi_keywords: Sequence[str] = (),
        locales: Optional[Sequence[str]] = None,
        include_table: bool = False,
        include_in_article_images: bool = False,
    ) -> ArticleSet:
        """
        Generate the article in every target locale.

        Args:
            topic: Primary keyword / topic.
            length: One of ARTICLE_LENGTHS.
            user_lsi_keywords: Keywords to incorporate verbatim.
            locales: Target locales. Defaults to the configured article locales.
            include_table: Ask for a markdown table.
            include_in_article_images: Ask for [IMAGE: ...] placeholders.

        Returns:
            Locale-keyed article set in locale order.
        """
        target_locales = list(self.config.article_locales) if locales is None else list(locales)
        generator = ArticleGenerator(self.llm, max_tokens=self.config.max_tokens)
        return await generator.generate(
            topic,
            length,
            user_lsi_keywords,
            target_locales,
            include_table=include_table,
            include_in_article_images=include_in_article_images,
        )

    # Analysis

    def analyze(
        self,
        article: Article,
        primary_keyword: str,
        user_lsi_keywords: Sequence[str] = (),
    ) -> SeoAnalysisData:
        """Compute word count and keyword statistics for one article."""
        return analyze_article(article, primary_keyword, user_lsi_keywords)

    def highlight(
        self,
        text: str,
        primary_keyword: str,
        lsi_keywords: Sequence[str] = (),
        enabled: bool = True,
    ) -> list[HighlightSegment]:
        """Split text into plain and keyword-marked segments."""
        return highlight_keywords(text, primary_keyword, lsi_keywords, enabled=enabled)

    # Images

    async def create_thumbnail(
        self,
        articles: ArticleSet,
        primary_keyword: str,
        upload: bool = True,
    ) -> str:
        """
        Generate a header image for the first locale's article.

        Args:
            articles: Generated article set.
            primary_keyword: Primary keyword / topic.
            upload: Upload the image and return the hosted URL. When False,
                the base64 data URL is returned.

        Returns:
            Image URL or data URL.
        """
        _, article = first_article(articles)
        data_url = await self.images.generate_image(
            build_thumbnail_prompt(article, primary_keyword)
        )
        if not upload:
            return data_url

        url = await self.storage.upload_image(data_url)
        logger.info(f"Uploaded header image for '{primary_keyword}'")
        return url

    # Storage

    def prepare_save(
        self,
        primary_keyword: str,
        user_lsi_keywords: Sequence[str],
        articles: ArticleSet,
        generation_settings: GenerationSettings,
        thumbnail_url: Optional[str] = None,
        search_intent: Optional[SearchIntent] = None,
        keyword_research_data: Sequence[KeywordSuggestion] = (),
    ) -> SavedArticlePayload:
        """
        Build a save payload for a generated article set.

        The Markdown content and SEO analysis stored with the record come
        from the first locale of the set.

        Raises:
            NoContentError: If the set is empty.
        """
        _, article = first_article(articles)
        return assemble(
            primary_keyword=primary_keyword,
            user_lsi_keywords=user_lsi_keywords,
            articles=articles,
            markdown_content=to_markdown(article),
            thumbnail_url=thumbnail_url,
            generation_settings=generation_settings,
            search_intent=search_intent,
            seo_analysis=analyze_article(article, primary_keyword, user_lsi_keywords),
            keyword_research_data=keyword_research_data,
        )

    async def save(self, payload: SavedArticlePayload) -> SavedArticle:
        """Persist an assembled payload."""
        return await self.storage.save_article(payload)

    async def list_saved(self) -> list[SavedArticle]:
        """List saved articles."""
        return await self.storage.list_articles()

    async def delete_saved(self, article_id: str) -> None:
        """Delete a saved article."""
        await self.storage.delete_article(article_id)
