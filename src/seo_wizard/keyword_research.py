"""
Keyword research via the AI provider.

Asks the provider for 20-30 related, LSI and long-tail keywords for a
topic, with a search intent and relevance score for each. Scores are
taken as returned; nothing is re-ranked locally apart from the
optional filter/sort helpers used by the front-ends.
"""

import json
import logging
from typing import Optional, Sequence

from .errors import GenerationError, ValidationError
from .llm_client import RESEARCH_SYSTEM_PROMPT, JSONGenerator
from .models import KeywordSuggestion
from .schemas import KEYWORD_RESEARCH_JSON_SHAPE, KeywordResearchPayload

logger = logging.getLogger(__name__)


SORTABLE_FIELDS = ("keyword", "type", "intent", "relevance")


def build_research_prompt(topic: str) -> str:
    """Build the keyword research prompt for a topic."""
    return (
        f'For the primary topic "{topic}", generate a comprehensive list of 20-30 related '
        "keywords, LSI keywords, and long-tail variations. For each keyword, determine the "
        "likely user search intent (Informational, Commercial, Transactional, or Navigational) "
        "and a relevance score from 1-100 indicating how closely it relates to the primary topic."
        "\n\nReturn a JSON object that strictly follows this shape:\n"
        + json.dumps(KEYWORD_RESEARCH_JSON_SHAPE, indent=2)
    )


RESEARCH_MAX_TOKENS = 4096


class KeywordResearcher:
    """Queries the AI provider for scored keyword candidates."""

    def __init__(self, llm_client: JSONGenerator, max_tokens: int = RESEARCH_MAX_TOKENS):
        self.llm_client = llm_client
        self.max_tokens = max_tokens

    async def research(self, topic: str) -> list[KeywordSuggestion]:
        """
        Research keywords for a topic.

        Args:
            topic: Non-empty topic.

        Returns:
            Keyword suggestions in provider order.

        Raises:
            ValidationError: If the topic is blank.
            GenerationError: If the provider call fails or the reply
                does not match the KeywordSuggestion shape.
        """
        if not topic or not topic.strip():
            raise ValidationError("Topic must not be empty")
        topic = topic.strip()

        logger.info(f"Researching keywords for '{topic}'")

        try:
            data = await self.llm_client.generate_json(
                build_research_prompt(topic),
                system=RESEARCH_SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
            )
            payload = KeywordResearchPayload.model_validate(data)
        except Exception as e:
            logger.error(f"Keyword research failed for '{topic}': {e}")
            raise GenerationError(f"Failed to research keywords: {e}") from e

        suggestions = [item.to_model() for item in payload.keywords]
        logger.info(f"Received {len(suggestions)} keyword suggestions for '{topic}'")
        return suggestions


def filter_and_sort(
    suggestions: Sequence[KeywordSuggestion],
    filter_text: str = "",
    sort_key: Optional[str] = "relevance",
    descending: bool = True,
) -> list[KeywordSuggestion]:
    """
    Filter suggestions by keyword substring and sort them by a field.

    Args:
        suggestions: Suggestions to filter.
        filter_text: Case-insensitive substring the keyword must contain.
        sort_key: Field to sort by (keyword, type, intent, relevance) or None.
        descending: Sort direction.

    Returns:
        New filtered and sorted list.

    Raises:
        ValidationError: For an unknown sort key.
    """
    needle = filter_text.lower()
    result = [s for s in suggestions if needle in s.keyword.lower()]

    if sort_key:
        if sort_key not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Cannot sort by '{sort_key}'. Expected one of: {', '.join(SORTABLE_FIELDS)}"
            )
        result.sort(key=lambda s: getattr(s, sort_key), reverse=descending)

    return result


def select_keywords(
    suggestions: Sequence[KeywordSuggestion],
    selected: Sequence[str],
) -> tuple[KeywordSuggestion, list[str]]:
    """
    Turn a keyword selection into a primary keyword and LSI keywords.

    The first selected keyword becomes the primary keyword (its full
    suggestion is returned so its search intent travels with it); the
    rest become user-provided LSI keywords.

    Args:
        suggestions: The research results the selection was made from.
        selected: Selected keyword strings, primary first.

    Returns:
        Tuple of (primary suggestion, LSI keyword list).

    Raises:
        ValidationError: If nothing is selected or the primary is unknown.
    """
    if not selected:
        raise ValidationError("Select at least one keyword")

    primary_text = selected[0]
    primary = next((s for s in suggestions if s.keyword == primary_text), None)
    if primary is None:
        raise ValidationError(f"Selected keyword '{primary_text}' is not in the research results")

    return primary, list(selected[1:])


async def research_keywords(llm_client: JSONGenerator, topic: str) -> list[KeywordSuggestion]:
    """Convenience function to research keywords for a topic."""
    return await KeywordResearcher(llm_client).research(topic)
