"""
Client for the saved-article storage backend.

The backend is a small REST service:
- GET    /articles          -> list of saved articles
- POST   /articles          -> save a payload, returns the saved article
- DELETE /articles/{id}     -> 204 No Content
- POST   /images/upload     -> {"imageData": <data URL>} -> {"url": ...}
"""

import logging
from typing import Any, Optional

import httpx

from .config import DEFAULT_API_URL
from .errors import PersistenceError
from .models import SavedArticle, SavedArticlePayload

logger = logging.getLogger(__name__)


class StorageClient:
    """
    Async client for the storage backend.

    Example:
        async with StorageClient("https://example.com/api") as storage:
            articles = await storage.list_articles()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend URL including the /api prefix.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "StorageClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connections."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
    ) -> Optional[Any]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Storage request {method} {path} failed: {e}")
            raise PersistenceError(f"Storage request failed: {e}") from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Optional[Any]:
        """
        Turn a backend response into parsed JSON.

        Returns:
            Parsed JSON body, or None for 204 No Content.

        Raises:
            PersistenceError: For any non-2xx status or a non-JSON body.
        """
        if not response.is_success:
            body = response.text
            raise PersistenceError(
                f"API Error: {response.status_code} {response.reason_phrase} - {body}",
                status_code=response.status_code,
                body=body,
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise PersistenceError(
                f"Storage returned invalid JSON: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    async def list_articles(self) -> list[SavedArticle]:
        """
        Fetch all saved articles.

        Returns:
            Saved articles in backend order.
        """
        data = await self._request("GET", "/articles")
        articles = [SavedArticle.from_dict(item) for item in data or []]
        logger.info(f"Fetched {len(articles)} saved article(s)")
        return articles

    async def save_article(self, payload: SavedArticlePayload) -> SavedArticle:
        """
        Save an assembled payload.

        Args:
            payload: Payload from the assembler.

        Returns:
            The saved article with its backend-assigned id and timestamp.
        """
        data = await self._request("POST", "/articles", json=payload.to_dict())
        if not data:
            raise PersistenceError("Storage returned no content for a saved article")
        saved = SavedArticle.from_dict(data)
        logger.info(f"Saved article '{saved.primary_keyword}' as {saved.id}")
        return saved

    async def delete_article(self, article_id: str) -> None:
        """Delete a saved article by id."""
        await self._request("DELETE", f"/articles/{article_id}")
        logger.info(f"Deleted saved article {article_id}")

    async def upload_image(self, image_data: str) -> str:
        """
        Upload an image and return its hosted URL.

        Args:
            image_data: Image as a base64 data URL.

        Returns:
            URL of the stored image.
        """
        data = await self._request("POST", "/images/upload", json={"imageData": image_data})
        if not data or "url" not in data:
            raise PersistenceError("Image upload response did not contain a url")
        return data["url"]
