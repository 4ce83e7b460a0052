# -*- coding: utf-8 -*-
"""
Centralized configuration for SEO Wizard.

This module provides a unified configuration dataclass holding the
provider models, API keys, storage backend URL, and the UI and article
locale settings the rest of the application reads.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


# Locale code -> display name for the locales articles can be written in
SUPPORTED_LOCALES: dict[str, str] = {
    "en-US": "English (US)",
    "id-ID": "Indonesian",
    "es-ES": "Spanish",
    "fr-FR": "French",
    "de-DE": "German",
    "ja-JP": "Japanese",
}

DEFAULT_UI_LOCALE = "en-US"
DEFAULT_ARTICLE_LOCALES = ["en-US"]
DEFAULT_API_URL = "https://seo-wizard-server.vercel.app/api"
DEFAULT_TEXT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"


def parse_locale_list(value: Optional[str]) -> list[str]:
    """
    Parse a comma-separated locale list, dropping blanks and duplicates.

    Args:
        value: String like "en-US, fr-FR".

    Returns:
        Ordered list of locale codes.
    """
    if not value:
        return []
    locales: list[str] = []
    for part in value.split(","):
        code = part.strip()
        if code and code not in locales:
            locales.append(code)
    return locales


@dataclass
class WizardConfig:
    """
    Central configuration for SEO Wizard.

    Attributes:
        anthropic_api_key: Key for the text provider. Falls back to the
            ANTHROPIC_API_KEY environment variable when the client is built.
        gemini_api_key: Key for the image provider (GEMINI_API_KEY).
        text_model: Model identifier used for articles and keyword research.
        image_model: Model identifier used for thumbnail generation.
        api_url: Base URL of the storage backend, including the /api prefix.
        ui_locale: Locale the front-ends render messages in.
        article_locales: Ordered locales every generation targets.
        max_tokens: Cap on the output tokens of any single provider request.
            Article requests use the smaller of this and the budget for
            the requested length.
        request_timeout: HTTP timeout in seconds for provider and
            storage requests.
    """

    anthropic_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL

    api_url: str = DEFAULT_API_URL

    ui_locale: str = DEFAULT_UI_LOCALE
    article_locales: list[str] = field(default_factory=lambda: list(DEFAULT_ARTICLE_LOCALES))

    max_tokens: int = 16000
    request_timeout: float = 300.0

    def __post_init__(self):
        """Validate configuration values."""
        if not self.article_locales:
            raise ValueError("article_locales must contain at least one locale")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be >= 1, got {self.max_tokens}")
        if self.request_timeout <= 0:
            raise ValueError(
                f"request_timeout must be > 0, got {self.request_timeout}"
            )
        self.api_url = self.api_url.rstrip("/")

        unknown = self.unsupported_locales
        if unknown:
            logger.warning(f"Unsupported article locales configured: {unknown}")
        if self.ui_locale not in SUPPORTED_LOCALES:
            logger.warning(f"Unsupported UI locale configured: {self.ui_locale}")

    @property
    def unsupported_locales(self) -> list[str]:
        """Article locales that are not in SUPPORTED_LOCALES."""
        return [code for code in self.article_locales if code not in SUPPORTED_LOCALES]

    def locale_name(self, code: str) -> str:
        """Display name for a locale code, or the code itself if unknown."""
        return SUPPORTED_LOCALES.get(code, code)

    @classmethod
    def from_env(cls, **overrides) -> "WizardConfig":
        """Create config from environment variables.

        Reads ANTHROPIC_API_KEY, GEMINI_API_KEY, SEO_WIZARD_API_URL,
        SEO_WIZARD_UI_LOCALE, SEO_WIZARD_ARTICLE_LOCALES,
        SEO_WIZARD_TEXT_MODEL and SEO_WIZARD_IMAGE_MODEL. Explicit
        overrides win over the environment.

        Args:
            **overrides: Override any config values.

        Returns:
            WizardConfig populated from the environment.
        """
        values: dict = {
            "anthropic_api_key": os.environ.get("ANTHROPIC_API_KEY"),
            "gemini_api_key": os.environ.get("GEMINI_API_KEY"),
            "text_model": os.environ.get("SEO_WIZARD_TEXT_MODEL", DEFAULT_TEXT_MODEL),
            "image_model": os.environ.get("SEO_WIZARD_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            "api_url": os.environ.get("SEO_WIZARD_API_URL", DEFAULT_API_URL),
            "ui_locale": os.environ.get("SEO_WIZARD_UI_LOCALE", DEFAULT_UI_LOCALE),
        }
        env_locales = parse_locale_list(os.environ.get("SEO_WIZARD_ARTICLE_LOCALES"))
        if env_locales:
            values["article_locales"] = env_locales

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
