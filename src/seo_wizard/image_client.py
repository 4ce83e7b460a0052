"""
Header image generation through Google's Imagen models.

The image comes back as a base64 JPEG data URL so it can be shown or
uploaded without touching the filesystem.
"""

import base64
import logging
import os
from typing import Optional, Sequence

from google import genai
from google.genai import types

from .config import DEFAULT_IMAGE_MODEL
from .errors import GenerationError
from .models import Article

logger = logging.getLogger(__name__)


IMAGE_MIME_TYPE = "image/jpeg"
IMAGE_ASPECT_RATIO = "16:9"
MAX_THEMES = 5


class ImageGenerationError(GenerationError):
    """Raised when image generation fails."""
    pass


def build_thumbnail_prompt(
    article: Article,
    primary_keyword: str,
    extra_themes: Optional[Sequence[str]] = None,
) -> str:
    """
    Build the header image prompt for an article.

    Themes are the primary keyword followed by the article's LSI keywords,
    capped at MAX_THEMES.

    Args:
        article: Article the image illustrates.
        primary_keyword: Central topic.
        extra_themes: Themes to use instead of the article's LSI keywords.

    Returns:
        Prompt text.
    """
    secondary = list(extra_themes) if extra_themes is not None else list(article.lsi_keywords)
    themes = [primary_keyword, *secondary][:MAX_THEMES]

    return (
        "Create a visually stunning and professional blog header image for an article titled "
        f'"{article.title}". The central topic is "{primary_keyword}". The image should be '
        f"conceptual or abstract, evoking themes like {', '.join(themes)}. It needs to be "
        "high-quality, modern, and suitable for a professional blog. "
        "Absolutely no text in the image."
    )


def to_data_url(image_bytes: bytes, mime_type: str = IMAGE_MIME_TYPE) -> str:
    """Encode raw image bytes as a base64 data URL."""
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


class ImageClient:
    """
    Async client for image generation.

    Example:
        client = ImageClient()
        data_url = await client.generate_image("A sunrise over solar panels")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_IMAGE_MODEL,
    ):
        """
        Initialize the image client.

        Args:
            api_key: Gemini API key. If None, reads from GEMINI_API_KEY env var.
            model: Imagen model identifier.
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        self.model = model

        if not self.api_key:
            raise ImageGenerationError(
                "No API key provided. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )

        self.client = genai.Client(api_key=self.api_key)

    async def aclose(self) -> None:
        """Close the underlying async HTTP session."""
        await self.client.aio.aclose()

    async def generate_image(self, prompt: str) -> str:
        """
        Generate one 16:9 JPEG for a prompt.

        Args:
            prompt: Image description.

        Returns:
            The image as a ``data:image/jpeg;base64,...`` URL.

        Raises:
            ImageGenerationError: If the call fails or returns no image.
        """
        logger.info(f"Generating image with {self.model}")

        try:
            response = await self.client.aio.models.generate_images(
                model=self.model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=IMAGE_MIME_TYPE,
                    aspect_ratio=IMAGE_ASPECT_RATIO,
                ),
            )
        except Exception as e:
            logger.error(f"Image generation failed: {e}")
            raise ImageGenerationError(f"Image generation failed: {e}") from e

        images = response.generated_images or []
        if not images or images[0].image is None or not images[0].image.image_bytes:
            raise ImageGenerationError("Image generation returned no image")

        return to_data_url(images[0].image.image_bytes)
