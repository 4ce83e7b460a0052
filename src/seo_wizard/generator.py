"""
Multi-locale article generation.

Builds one generation prompt per target locale, runs every request
concurrently, validates each reply against the Article shape, and
assembles a locale-keyed article set. A failure in any locale fails the
whole generation: callers either get every requested locale or an error.
"""

import asyncio
import json
import logging
import re
from typing import Any, Optional, Sequence

import pydantic

from .errors import GenerationError, PartialLocaleFailure, ValidationError
from .llm_client import ARTICLE_SYSTEM_PROMPT, JSONGenerator
from .models import ARTICLE_LENGTHS, Article, ArticleSet
from .schemas import ARTICLE_JSON_SHAPE, ArticlePayload

logger = logging.getLogger(__name__)


# Approximate word count and section count per length option
LENGTH_INSTRUCTIONS: dict[str, str] = {
    "very short": "The article should be a brief summary, around 250 words, with 1-2 main sections.",
    "short": "The article should be concise, around 500 words, with 2-3 main sections.",
    "medium": "The article should be detailed, around 1000 words, with 4-5 main sections.",
    "long": "The article should be comprehensive and in-depth, around 1500 words, with 6-8 main sections.",
    "very long": (
        "The article should be extremely comprehensive and exhaustive, over 2000 words, "
        "with 8-10 main sections."
    ),
    "epic": (
        "The article must be an ultimate guide, extremely comprehensive and exhaustive, "
        "over 3000 words, with at least 10-12 detailed sections."
    ),
}

TABLE_INSTRUCTION = (
    "If the topic is suitable (e.g., for comparisons, data, specifications), include one "
    "relevant, well-structured markdown table within the article content."
)

IMAGE_PLACEHOLDER_INSTRUCTION = (
    "Strategically place 2-3 image placeholders throughout the article where visuals would "
    "be most impactful. Use the exact format `[IMAGE: A descriptive prompt for a relevant image]`. "
    "Example: `[IMAGE: A diagram showing the process of photosynthesis]`."
)

_IMAGE_PLACEHOLDER_RE = re.compile(r"\[IMAGE:\s*([^\]]+?)\s*\]")

# Output token budget per length option
MAX_TOKENS_BY_LENGTH: dict[str, int] = {
    "very short": 2048,
    "short": 4096,
    "medium": 6144,
    "long": 8192,
    "very long": 12000,
    "epic": 16000,
}


def find_image_placeholders(text: str) -> list[str]:
    """
    Find the descriptions of all ``[IMAGE: ...]`` placeholders in text.

    Args:
        text: Article section content.

    Returns:
        Descriptions in order of appearance.
    """
    return _IMAGE_PLACEHOLDER_RE.findall(text or "")


def build_article_prompt(
    topic: str,
    length: str,
    locale: str,
    user_lsi_keywords: Sequence[str] = (),
    include_table: bool = False,
    include_in_article_images: bool = False,
) -> str:
    """
    Build the generation prompt for one locale.

    Args:
        topic: Primary keyword / topic of the article.
        length: One of ARTICLE_LENGTHS.
        locale: Locale code the article must be written in.
        user_lsi_keywords: Keywords that must appear verbatim.
        include_table: Ask for one markdown table where suitable.
        include_in_article_images: Ask for [IMAGE: ...] placeholders.

    Returns:
        Prompt text.
    """
    parts = [
        f'Generate a comprehensive, high-quality, and SEO-optimized article about "{topic}".',
        f'The article MUST be written in the language with locale code: "{locale}".',
        LENGTH_INSTRUCTIONS[length],
        "The article must be unique, engaging, and provide genuine value to the reader.",
        f'Ensure the primary keyword "{topic}" is used appropriately in the title, meta '
        "description, headings, and throughout the content.",
        "Also include semantically related keywords (LSI keywords) to enhance context and relevance.",
    ]

    if user_lsi_keywords:
        parts.append(
            "In addition to the keywords you identify, you MUST naturally incorporate the "
            f"following user-provided keywords into the article: {', '.join(user_lsi_keywords)}."
        )

    if include_table:
        parts.append(TABLE_INSTRUCTION)

    if include_in_article_images:
        parts.append(IMAGE_PLACEHOLDER_INSTRUCTION)

    parts.append(
        "Identify and list the top 5-7 LSI keywords you used (this list can include some of "
        "the user-provided ones if you used them)."
    )
    parts.append(
        "Return a JSON object that strictly follows this shape:\n"
        + json.dumps(ARTICLE_JSON_SHAPE, indent=2)
    )

    return " ".join(parts[:-1]) + "\n\n" + parts[-1]


def parse_article_payload(data: Any) -> Article:
    """
    Validate a provider payload against the Article shape.

    Args:
        data: Parsed JSON returned by the provider.

    Returns:
        Article dataclass.

    Raises:
        GenerationError: If the payload does not match the shape.
    """
    try:
        return ArticlePayload.model_validate(data).to_model()
    except pydantic.ValidationError as e:
        raise GenerationError(f"Article payload failed validation: {e}") from e


def _validate_request(
    topic: str,
    length: str,
    locales: Sequence[str],
) -> None:
    if not topic or not topic.strip():
        raise ValidationError("Topic must not be empty")
    if length not in LENGTH_INSTRUCTIONS:
        raise ValidationError(
            f"Unknown article length '{length}'. Expected one of: {', '.join(ARTICLE_LENGTHS)}"
        )
    if not locales:
        raise ValidationError("At least one target locale is required")
    if len(set(locales)) != len(locales):
        raise ValidationError(f"Duplicate locales requested: {list(locales)}")


class ArticleGenerator:
    """
    Generates one article per locale with concurrent provider requests.

    Example:
        generator = ArticleGenerator(llm_client)
        articles = await generator.generate("electric vehicles", "short", [], ["en-US"])
    """

    def __init__(self, llm_client: JSONGenerator, max_tokens: Optional[int] = None):
        """
        Initialize the generator.

        Args:
            llm_client: Provider client exposing ``generate_json``.
            max_tokens: Upper bound on the per-length output budget.
        """
        self.llm_client = llm_client
        self.max_tokens = max_tokens

    def token_budget(self, length: str) -> int:
        """Output token limit for one request of the given length."""
        budget = MAX_TOKENS_BY_LENGTH[length]
        if self.max_tokens is not None:
            budget = min(budget, self.max_tokens)
        return budget

    async def generate(
        self,
        topic: str,
        length: str,
        user_lsi_keywords: Sequence[str],
        locales: Sequence[str],
        include_table: bool = False,
        include_in_article_images: bool = False,
    ) -> ArticleSet:
        """
        Generate the article for every locale.

        Requests run concurrently; the call returns once all succeed or
        raises as soon as one fails. Requests still in flight after a
        failure are not cancelled, their results are discarded.

        Args:
            topic: Primary keyword / topic.
            length: One of ARTICLE_LENGTHS.
            user_lsi_keywords: Keywords to incorporate verbatim.
            locales: Target locale codes, in the order the result should keep.
            include_table: Ask for a markdown table.
            include_in_article_images: Ask for [IMAGE: ...] placeholders.

        Returns:
            Mapping of locale code to Article, in request order.

        Raises:
            ValidationError: For empty topic, unknown length or no locales.
            PartialLocaleFailure: If any locale request fails.
        """
        _validate_request(topic, length, locales)
        topic = topic.strip()
        keywords = [kw.strip() for kw in user_lsi_keywords if kw and kw.strip()]

        logger.info(
            f"Generating '{topic}' ({length}) for {len(locales)} locale(s): {', '.join(locales)}"
        )

        tasks = [
            asyncio.ensure_future(
                self._generate_locale(
                    topic,
                    length,
                    locale,
                    keywords,
                    include_table,
                    include_in_article_images,
                )
            )
            for locale in locales
        ]

        try:
            results = await asyncio.gather(*tasks)
        except PartialLocaleFailure:
            for task in tasks:
                if not task.done():
                    task.add_done_callback(_discard_result)
            raise

        articles: ArticleSet = {}
        for locale, article in zip(locales, results):
            articles[locale] = article

        logger.info(f"Generated {len(articles)} locale(s) for '{topic}'")
        return articles

    async def generate_one(
        self,
        topic: str,
        length: str,
        locale: str,
        user_lsi_keywords: Optional[Sequence[str]] = None,
        include_table: bool = False,
        include_in_article_images: bool = False,
    ) -> Article:
        """Generate the article for a single locale."""
        articles = await self.generate(
            topic,
            length,
            user_lsi_keywords or [],
            [locale],
            include_table=include_table,
            include_in_article_images=include_in_article_images,
        )
        return articles[locale]

    async def _generate_locale(
        self,
        topic: str,
        length: str,
        locale: str,
        user_lsi_keywords: list[str],
        include_table: bool,
        include_in_article_images: bool,
    ) -> Article:
        prompt = build_article_prompt(
            topic,
            length,
            locale,
            user_lsi_keywords=user_lsi_keywords,
            include_table=include_table,
            include_in_article_images=include_in_article_images,
        )

        try:
            data = await self.llm_client.generate_json(
                prompt,
                system=ARTICLE_SYSTEM_PROMPT,
                max_tokens=self.token_budget(length),
            )
            article = parse_article_payload(data)
        except Exception as e:
            logger.error(f"Generation failed for locale {locale}: {e}")
            raise PartialLocaleFailure(
                locale, f"Failed to generate article for {locale}: {e}"
            ) from e

        logger.debug(f"Locale {locale} done: {len(article.sections)} sections")
        return article


def _discard_result(task: "asyncio.Future[Article]") -> None:
    # Retrieve the outcome so abandoned failures are not reported as never retrieved
    if not task.cancelled():
        task.exception()


async def generate_articles(
    llm_client: JSONGenerator,
    topic: str,
    length: str,
    user_lsi_keywords: Sequence[str],
    locales: Sequence[str],
    include_table: bool = False,
    include_in_article_images: bool = False,
) -> ArticleSet:
    """
    Convenience function to generate a multi-locale article set.

    Args:
        llm_client: Provider client exposing ``generate_json``.
        topic: Primary keyword / topic.
        length: One of ARTICLE_LENGTHS.
        user_lsi_keywords: Keywords to incorporate verbatim.
        locales: Target locale codes.
        include_table: Ask for a markdown table.
        include_in_article_images: Ask for [IMAGE: ...] placeholders.

    Returns:
        Mapping of locale code to Article.
    """
    generator = ArticleGenerator(llm_client)
    return await generator.generate(
        topic,
        length,
        user_lsi_keywords,
        locales,
        include_table=include_table,
        include_in_article_images=include_in_article_images,
    )
