"""
Error taxonomy for SEO Wizard.

Every error raised by the core derives from SeoWizardError so callers can
catch the whole family in one place and show the message to the user.
"""

from typing import Optional


class SeoWizardError(Exception):
    """Base class for all SEO Wizard errors."""
    pass


class ValidationError(SeoWizardError):
    """Raised when topic or keyword input is empty or invalid.

    Always raised before any external call is made.
    """
    pass


class GenerationError(SeoWizardError):
    """Raised when an AI provider call fails or returns an invalid payload."""
    pass


class PartialLocaleFailure(GenerationError):
    """
    Raised when one locale request of a multi-locale generation fails.

    The whole generation is treated as failed; no partial locale map
    is ever returned.
    """

    def __init__(self, locale: str, message: str):
        self.locale = locale
        super().__init__(message)


class PersistenceError(SeoWizardError):
    """Raised when the storage backend answers with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class NoContentError(SeoWizardError):
    """Raised when saving or exporting an empty article set."""
    pass
