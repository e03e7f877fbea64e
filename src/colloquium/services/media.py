"""Media store client for image assets hosted on Cloudinary.

Only deletion is needed by the community services: uploads happen directly
from the browser. Deletions are always best-effort from the caller's point of
view; :meth:`MediaStore.delete_images` never raises.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import re
import time
from collections.abc import Iterable
from dataclasses import dataclass

import httpx

from colloquium.core.settings import settings
from colloquium.services.errors import InvalidInputError

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com"
# Path after /upload/, without the optional version segment and file extension.
_PUBLIC_ID_PATTERN = re.compile(r"/upload/(?:v\d+/)?(.+?)(?:\.[^./]+)?$")
_SUCCESS_RESULTS = frozenset({"ok", "not found"})


class MediaStoreError(RuntimeError):
    """Raised when the media store rejects or fails a request."""


class MediaStoreDisabledError(MediaStoreError):
    """Raised when media operations are attempted without credentials."""


@dataclass(frozen=True)
class MediaConfig:
    """Connection settings for the media store."""

    cloud_name: str | None
    api_key: str | None
    api_secret: str | None
    timeout_seconds: float = 10.0

    @property
    def enabled(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


def load_media_config() -> MediaConfig:
    """Build configuration object from global settings."""
    return MediaConfig(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        timeout_seconds=float(settings.media_http_timeout_seconds),
    )


def extract_public_id(image_url: str) -> str:
    """Return the Cloudinary public id embedded in ``image_url``.

    Pure string parsing; no network call is made.

    Raises:
        InvalidInputError: If the URL is not a Cloudinary upload URL.
    """
    if "cloudinary.com" not in image_url:
        raise InvalidInputError("Invalid Cloudinary URL")
    match = _PUBLIC_ID_PATTERN.search(image_url)
    if not match or not match.group(1):
        raise InvalidInputError("Could not extract public id from URL")
    return match.group(1)


def sign_destroy_request(public_id: str, timestamp: int, api_secret: str) -> str:
    """Return the SHA-1 signature Cloudinary expects for a destroy call."""
    to_sign = f"invalidate=true&public_id={public_id}&timestamp={timestamp}{api_secret}"
    return hashlib.sha1(to_sign.encode("utf-8")).hexdigest()


class MediaStore:
    """HTTP client wrapper for the Cloudinary destroy API."""

    def __init__(self, config: MediaConfig | None = None) -> None:
        self.config = config or load_media_config()
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise MediaStoreDisabledError("Media store credentials are not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=CLOUDINARY_API_BASE,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                )
        return self._client

    async def delete_image(self, image_url: str) -> str:
        """Delete a single image and return the store's result string.

        ``"ok"`` and ``"not found"`` both count as success.

        Raises:
            InvalidInputError: If the URL cannot be parsed.
            MediaStoreError: If the store reports any other outcome.
        """
        public_id = extract_public_id(image_url)
        client = await self._ensure_client()
        timestamp = int(time.time())
        form = {
            "public_id": public_id,
            "timestamp": str(timestamp),
            "api_key": self.config.api_key or "",
            "signature": sign_destroy_request(
                public_id, timestamp, self.config.api_secret or ""
            ),
            "invalidate": "true",
        }
        try:
            response = await client.post(
                f"/v1_1/{self.config.cloud_name}/image/destroy",
                data=form,
            )
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise MediaStoreError(f"Media store request failed: {exc}") from exc

        result = payload.get("result")
        if result in _SUCCESS_RESULTS:
            return result
        message = (payload.get("error") or {}).get("message") or "Unknown media store error"
        raise MediaStoreError(message)

    async def delete_images(self, image_urls: Iterable[str]) -> list[str]:
        """Delete images concurrently and return the URLs that failed.

        Failures are logged and never propagate.
        """
        urls = [url for url in image_urls if url]
        if not urls:
            return []

        results = await asyncio.gather(
            *(self.delete_image(url) for url in urls),
            return_exceptions=True,
        )
        failed: list[str] = []
        for url, outcome in zip(urls, results, strict=True):
            if isinstance(outcome, BaseException):
                logger.warning("Failed to delete image %s (continuing): %s", url, outcome)
                failed.append(url)
            else:
                logger.debug("Deleted image %s (%s)", url, outcome)
        return failed

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _MediaStoreSingleton:
    """Singleton wrapper for MediaStore."""

    _instance: MediaStore | None = None

    @classmethod
    def get_instance(cls) -> MediaStore:
        """Get or create the singleton MediaStore instance."""
        if cls._instance is None:
            cls._instance = MediaStore()
        return cls._instance


def get_media_store() -> MediaStore:
    """Return a singleton media store instance."""
    return _MediaStoreSingleton.get_instance()
