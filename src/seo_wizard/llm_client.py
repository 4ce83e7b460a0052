"""
LLM client abstraction for article generation and keyword research.

This module provides an async interface for calling Claude (Anthropic)
and getting structured JSON back. Callers describe the JSON shape in
the prompt; the client extracts and parses the JSON from the reply.
"""

import json
import logging
import os
import re
from typing import Any, Optional, Protocol

import anthropic
import httpx

from .config import DEFAULT_TEXT_MODEL
from .errors import GenerationError

logger = logging.getLogger(__name__)


class LLMClientError(GenerationError):
    """Raised when LLM operations fail."""
    pass


class JSONGenerator(Protocol):
    """Anything that can turn a prompt into parsed JSON (see LLMClient)."""

    async def generate_json(self, prompt: str, system: str, max_tokens: int = 4096) -> Any:
        ...


# System prompt for article generation
ARTICLE_SYSTEM_PROMPT = """You are an expert SEO content writer.

You write unique, engaging articles that provide genuine value to the reader.
The tone is authoritative yet accessible.

CRITICAL RULES - MUST FOLLOW:
1. Write the entire article in the language you are told to use
2. Use the primary keyword in the title, meta description, headings and body
3. Include semantically related (LSI) keywords naturally - avoid keyword stuffing
4. When user-provided keywords are given, use them verbatim

OUTPUT FORMAT:
- Return ONLY a single JSON object that follows the requested shape
- Do NOT wrap it in commentary or explanations"""


# System prompt for keyword research
RESEARCH_SYSTEM_PROMPT = """You are a senior SEO strategist.

You suggest related keywords, LSI keywords and long-tail variations, and you
judge the likely search intent of each one.

OUTPUT FORMAT:
- Return ONLY a single JSON object that follows the requested shape
- Do NOT wrap it in commentary or explanations"""


# A reply that is one fenced block from start to end
_FENCED_REPLY_RE = re.compile(r"\A```(?:json)?\s*(.*)\s*```\Z", re.DOTALL | re.IGNORECASE)


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except json.JSONDecodeError:
        return False
    return True


def extract_json_text(response: str) -> str:
    """
    Extract the JSON document from an LLM reply.

    Candidates are tried in order: the whole reply, the body of a reply
    that is a single ```json fence, and the span from the first "{" to the
    last "}". The first candidate that parses wins, so code fences inside
    JSON string values are left alone.

    Args:
        response: Raw text returned by the model.

    Returns:
        The JSON text, ready for json.loads.

    Raises:
        LLMClientError: If no JSON object can be found.
    """
    text = response.strip()
    candidates = [text]

    fenced = _FENCED_REPLY_RE.match(text)
    if fenced:
        candidates.append(fenced.group(1).strip())

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        if _is_json(candidate):
            return candidate

    # Nothing parses; hand back the likeliest document so the decode error is reported
    for candidate in candidates:
        if candidate.startswith(("{", "[")):
            return candidate

    raise LLMClientError("LLM response did not contain a JSON object")


def parse_json_response(response: str) -> Any:
    """
    Parse the JSON document out of an LLM reply.

    Args:
        response: Raw text returned by the model.

    Returns:
        Parsed JSON value.

    Raises:
        LLMClientError: If the reply is not valid JSON.
    """
    try:
        return json.loads(extract_json_text(response))
    except json.JSONDecodeError as e:
        raise LLMClientError(f"LLM returned malformed JSON: {e}") from e


class LLMClient:
    """
    Async client for structured LLM generation.

    Supports Anthropic Claude API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_TEXT_MODEL,
        timeout: float = 300.0,
    ):
        """
        Initialize the LLM client.

        Args:
            api_key: API key for the LLM provider. If None, reads from ANTHROPIC_API_KEY env var.
            model: Model identifier to use.
            timeout: Read timeout in seconds for one request.
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.model = model

        if not self.api_key:
            raise LLMClientError(
                "No API key provided. Set ANTHROPIC_API_KEY environment variable "
                "or pass api_key parameter."
            )

        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=30.0),
            follow_redirects=True,
        )
        self.client = anthropic.AsyncAnthropic(
            api_key=self.api_key,
            http_client=http_client,
        )

    async def generate_text(
        self,
        prompt: str,
        system: str,
        max_tokens: int = 4096,
    ) -> str:
        """
        Send a single-turn prompt and return the reply text.

        Args:
            prompt: User prompt.
            system: System prompt.
            max_tokens: Maximum tokens in response.

        Returns:
            Concatenated text blocks of the reply.

        Raises:
            LLMClientError: If the API call fails or returns no text.
        """
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise LLMClientError(f"LLM API call failed: {e}") from e
        except httpx.HTTPError as e:
            raise LLMClientError(f"LLM API call failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            raise LLMClientError("LLM API returned an empty response")

        if response.stop_reason == "max_tokens":
            logger.warning(f"LLM response hit max_tokens={max_tokens}; JSON may be truncated")

        return text

    async def generate_json(
        self,
        prompt: str,
        system: str,
        max_tokens: int = 4096,
    ) -> Any:
        """
        Send a prompt and parse the reply as JSON.

        Args:
            prompt: User prompt that describes the JSON shape to return.
            system: System prompt.
            max_tokens: Maximum tokens in response.

        Returns:
            Parsed JSON value.

        Raises:
            LLMClientError: If the call fails or the reply is not JSON.
        """
        text = await self.generate_text(prompt, system=system, max_tokens=max_tokens)
        return parse_json_response(text)

    async def aclose(self) -> None:
        """Close the underlying HTTP connections."""
        await self.client.close()


def create_llm_client(
    api_key: Optional[str] = None,
    model: str = DEFAULT_TEXT_MODEL,
    timeout: float = 300.0,
) -> LLMClient:
    """
    Factory function to create an LLM client.

    Args:
        api_key: Optional API key. If None, uses environment variable.
        model: Model to use.
        timeout: Read timeout in seconds.

    Returns:
        Configured LLMClient instance.
    """
    return LLMClient(api_key=api_key, model=model, timeout=timeout)
