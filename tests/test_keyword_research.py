"""Tests for keyword research and keyword selection."""

import asyncio

import pytest

from seo_wizard.errors import GenerationError, ValidationError
from seo_wizard.keyword_research import (
    KeywordResearcher,
    build_research_prompt,
    filter_and_sort,
    research_keywords,
    select_keywords,
)
from seo_wizard.llm_client import RESEARCH_SYSTEM_PROMPT
from seo_wizard.models import KeywordSuggestion


@pytest.fixture
def suggestions(research_payload: dict) -> list[KeywordSuggestion]:
    return [KeywordSuggestion.from_dict(item) for item in research_payload["keywords"]]


class TestKeywordResearcher:
    """Tests for KeywordResearcher.research."""

    def test_returns_suggestions_in_provider_order(self, fake_llm_factory, research_payload):
        llm = fake_llm_factory(response=research_payload)

        result = asyncio.run(KeywordResearcher(llm).research("  solar panels "))

        assert [s.keyword for s in result] == [
            "solar panels", "solar panel cost", "photovoltaic cells", "battery storage",
        ]
        assert result[1].type == "Long-tail"
        assert result[1].intent == "Transactional"
        assert result[1].relevance == 85
        assert llm.calls[0]["system"] == RESEARCH_SYSTEM_PROMPT
        assert '"solar panels"' in llm.calls[0]["prompt"]

    def test_blank_topic(self, fake_llm_factory):
        llm = fake_llm_factory(response={"keywords": []})
        with pytest.raises(ValidationError):
            asyncio.run(KeywordResearcher(llm).research("   "))
        assert llm.calls == []

    @pytest.mark.parametrize(
        "bad_item",
        [
            {"keyword": "x", "type": "Broad", "intent": "Commercial", "relevance": 50},
            {"keyword": "x", "type": "LSI", "intent": "Curious", "relevance": 50},
            {"keyword": "x", "type": "LSI", "intent": "Commercial", "relevance": 0},
            {"keyword": "x", "type": "LSI", "intent": "Commercial", "relevance": 101},
            {"keyword": "x", "type": "LSI", "intent": "Commercial"},
        ],
    )
    def test_invalid_suggestion_rejected(self, fake_llm_factory, bad_item):
        """Payloads outside the KeywordSuggestion shape are generation errors."""
        llm = fake_llm_factory(response={"keywords": [bad_item]})
        with pytest.raises(GenerationError, match="Failed to research keywords"):
            asyncio.run(KeywordResearcher(llm).research("solar"))

    def test_provider_failure_wrapped(self, fake_llm_factory):
        async def failing(prompt, system, max_tokens=4096):
            raise RuntimeError("connection reset")

        llm = fake_llm_factory()
        llm.generate_json = failing
        with pytest.raises(GenerationError, match="connection reset"):
            asyncio.run(research_keywords(llm, "solar"))

    def test_prompt_mentions_intents(self):
        prompt = build_research_prompt("solar")
        for intent in ("Informational", "Commercial", "Transactional", "Navigational"):
            assert intent in prompt


class TestFilterAndSort:
    """Tests for filter_and_sort."""

    def test_filter_case_insensitive(self, suggestions):
        result = filter_and_sort(suggestions, "SOLAR")
        assert [s.keyword for s in result] == ["solar panels", "solar panel cost"]

    def test_sort_by_relevance_ascending(self, suggestions):
        result = filter_and_sort(suggestions, sort_key="relevance", descending=False)
        assert [s.relevance for s in result] == [60, 70, 85, 100]

    def test_sort_by_keyword(self, suggestions):
        result = filter_and_sort(suggestions, sort_key="keyword", descending=False)
        assert result[0].keyword == "battery storage"

    def test_no_sort_keeps_order(self, suggestions):
        assert filter_and_sort(suggestions, sort_key=None) == suggestions

    def test_unknown_sort_key(self, suggestions):
        with pytest.raises(ValidationError):
            filter_and_sort(suggestions, sort_key="volume")

    def test_input_not_mutated(self, suggestions):
        before = list(suggestions)
        filter_and_sort(suggestions, sort_key="keyword")
        assert suggestions == before


class TestSelectKeywords:
    """Tests for select_keywords."""

    def test_first_selection_is_primary(self, suggestions):
        primary, lsi = select_keywords(suggestions, ["solar panel cost", "battery storage", "photovoltaic cells"])
        assert primary.keyword == "solar panel cost"
        assert primary.intent == "Transactional"
        assert lsi == ["battery storage", "photovoltaic cells"]

    def test_single_selection(self, suggestions):
        primary, lsi = select_keywords(suggestions, ["solar panels"])
        assert primary.keyword == "solar panels"
        assert lsi == []

    def test_empty_selection(self, suggestions):
        with pytest.raises(ValidationError):
            select_keywords(suggestions, [])

    def test_unknown_primary(self, suggestions):
        with pytest.raises(ValidationError):
            select_keywords(suggestions, ["wind turbines"])
