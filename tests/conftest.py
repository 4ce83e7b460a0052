"""
Pytest fixtures and configuration for SEO Wizard tests.
"""

import asyncio
import copy
import json
import re
from pathlib import Path
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from seo_wizard.llm_client import LLMClientError
from seo_wizard.models import Article, FAQItem, Section
from seo_wizard.storage_client import StorageClient

STORAGE_URL = "https://storage.example.com/api"
SAVED_AT = "2026-03-01T12:00:00Z"


_LOCALE_RE = re.compile(r'locale code: "([^"]+)"')


def prompt_locale(prompt: str) -> Optional[str]:
    """Extract the target locale from an article generation prompt."""
    match = _LOCALE_RE.search(prompt)
    return match.group(1) if match else None


class FakeLLMClient:
    """
    In-memory stand-in for LLMClient.

    Returns a fixed payload (or the result of a callable taking the
    prompt), raises for prompts targeting a failing locale, and records
    every call.
    """

    def __init__(
        self,
        response: Union[dict, Callable[[str], Any], None] = None,
        failing_locales: tuple[str, ...] = (),
        delays: Optional[dict[str, float]] = None,
    ):
        self.response = response
        self.failing_locales = set(failing_locales)
        self.delays = delays or {}
        self.calls: list[dict] = []

    async def generate_json(self, prompt: str, system: str, max_tokens: int = 4096) -> Any:
        self.calls.append({"prompt": prompt, "system": system, "max_tokens": max_tokens})
        locale = prompt_locale(prompt)

        if locale in self.delays:
            await asyncio.sleep(self.delays[locale])
        if locale in self.failing_locales:
            raise LLMClientError(f"provider unavailable for {locale}")

        if callable(self.response):
            return self.response(prompt)
        return copy.deepcopy(self.response)


def make_article_payload(title: str = "Solar Panels for Beginners") -> dict:
    """Article JSON as the text provider returns it."""
    return {
        "title": title,
        "metaDescription": "Learn how solar panels work and what they cost.",
        "sections": [
            {
                "heading": "How Solar Panels Work",
                "content": "Solar panels turn sunlight into electricity.\nBattery storage keeps power for the night.",
            },
            {
                "heading": "Costs",
                "content": "Installation costs vary. Solar panels pay off over time.",
            },
        ],
        "faq": [
            {"question": "Do solar panels work in winter?", "answer": "Yes, at reduced output."},
        ],
        "lsiKeywords": ["battery storage", "installation costs", "Solar Panels"],
    }


def localized_payload(prompt: str) -> dict:
    """Article payload whose title names the locale it was requested for."""
    return make_article_payload(title=f"Solar Panels ({prompt_locale(prompt)})")


@pytest.fixture
def article_payload() -> dict:
    """Raw article payload."""
    return make_article_payload()


@pytest.fixture
def sample_article() -> Article:
    """A small two-section article with one FAQ item."""
    return Article(
        title="Solar Panels for Beginners",
        meta_description="Learn how solar panels work and what they cost.",
        sections=[
            Section(
                heading="How Solar Panels Work",
                content="Solar panels turn sunlight into electricity.\nBattery storage keeps power for the night.",
            ),
            Section(
                heading="Costs",
                content="Installation costs vary. Solar panels pay off over time.",
            ),
        ],
        faq=[FAQItem(question="Do solar panels work in winter?", answer="Yes, at reduced output.")],
        lsi_keywords=["battery storage", "installation costs", "Solar Panels"],
    )


@pytest.fixture
def research_payload() -> dict:
    """Keyword research JSON as the text provider returns it."""
    return {
        "keywords": [
            {"keyword": "solar panels", "type": "Related", "intent": "Commercial", "relevance": 100},
            {"keyword": "solar panel cost", "type": "Long-tail", "intent": "Transactional", "relevance": 85},
            {"keyword": "photovoltaic cells", "type": "LSI", "intent": "Informational", "relevance": 70},
            {"keyword": "battery storage", "type": "Related", "intent": "Informational", "relevance": 60},
        ]
    }


@pytest.fixture
def fake_llm_factory() -> Callable[..., FakeLLMClient]:
    """Build a FakeLLMClient; answers with locale-tagged articles unless told otherwise."""

    def make(response=localized_payload, **kwargs) -> FakeLLMClient:
        return FakeLLMClient(response=response, **kwargs)

    return make


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    """Fake client answering every article prompt with a locale-tagged article."""
    return FakeLLMClient(response=localized_payload)


@pytest.fixture
def sample_keywords_csv(tmp_path: Path) -> Path:
    """Create a sample keywords CSV file."""
    csv_path = tmp_path / "keywords.csv"
    csv_path.write_text(
        "keyword,search_volume\n"
        "battery storage,1200\n"
        "solar inverter,800\n"
        "Battery Storage,300\n"
        ",50\n"
    )
    return csv_path


@pytest.fixture
def sample_keywords_excel(tmp_path: Path) -> Path:
    """Create a sample keywords Excel file."""
    import pandas as pd

    xlsx_path = tmp_path / "keywords.xlsx"
    df = pd.DataFrame({"Term": ["net metering", "solar inverter"], "volume": [500, 300]})
    df.to_excel(xlsx_path, index=False)
    return xlsx_path


class FakeStorageBackend:
    """
    In-memory storage backend served through httpx.MockTransport.

    Implements the article and image upload routes; ids are assigned
    sequentially.
    """

    def __init__(self):
        self.records: dict[str, dict] = {}
        self.uploads: list[str] = []
        self.requests: list[httpx.Request] = []
        self._next_id = 1

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")

        if path == "/articles" and request.method == "GET":
            return httpx.Response(200, json=list(self.records.values()))

        if path == "/articles" and request.method == "POST":
            article_id = f"article-{self._next_id}"
            self._next_id += 1
            record = {"id": article_id, "savedAt": SAVED_AT, **json.loads(request.content)}
            self.records[article_id] = record
            return httpx.Response(201, json=record)

        if path.startswith("/articles/") and request.method == "DELETE":
            article_id = path.rsplit("/", 1)[-1]
            if self.records.pop(article_id, None) is None:
                return httpx.Response(404, json={"error": "Article not found"})
            return httpx.Response(204)

        if path == "/images/upload" and request.method == "POST":
            self.uploads.append(json.loads(request.content)["imageData"])
            return httpx.Response(200, json={"url": f"https://cdn.example.com/images/{len(self.uploads)}.jpg"})

        return httpx.Response(404, text="Not Found")

    def client(self) -> StorageClient:
        return StorageClient(STORAGE_URL, transport=httpx.MockTransport(self.handler))


class FakeImageClient:
    """Stand-in for ImageClient returning a fixed data URL."""

    def __init__(self, data_url: str = "data:image/jpeg;base64,AAAA"):
        self.data_url = data_url
        self.prompts: list[str] = []

    async def generate_image(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.data_url


@pytest.fixture
def storage_backend() -> FakeStorageBackend:
    """Empty in-memory storage backend."""
    return FakeStorageBackend()


@pytest.fixture
def fake_images() -> FakeImageClient:
    return FakeImageClient()
