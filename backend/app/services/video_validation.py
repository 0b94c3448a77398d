"""
Video link validation — checks a YouTube link exists and fetches its title.

Uses the public noembed.com oEmbed proxy, so no YouTube API key is needed:
    GET https://noembed.com/embed?url=<video url>
    → {"title": "...", ...}            for a public video
    → {"error": "..."}                 for private / missing videos

Failure policy:
- Video clearly doesn't exist (404 or an "error" payload) → invalid
- Validation service itself is down (timeout, connection error)
  → treat as VALID with the URL as the title. The summarizer may still
    know the video, and we'd rather try than block the user.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

_YOUTUBE_URL_RE = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.?be)/.+$")


def is_valid_youtube_url(url: str) -> bool:
    """Cheap format check, done before any network call."""
    return bool(_YOUTUBE_URL_RE.match(url.strip()))


@dataclass
class ValidationResult:
    is_valid: bool
    title: Optional[str] = None
    error: Optional[str] = None


class VideoValidator:
    """Looks up video metadata through noembed.

    Usage:
        validator = VideoValidator()
        result = await validator.validate("https://youtu.be/dQw4w9WgXcQ")
        if result.is_valid:
            print(result.title)

    Pass a custom httpx transport to test without the network.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint or settings.NOEMBED_URL
        self.timeout = timeout if timeout is not None else settings.VALIDATION_TIMEOUT_SECONDS
        self.transport = transport

    async def validate(self, url: str) -> ValidationResult:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.endpoint, params={"url": url})
        except httpx.HTTPError as e:
            logger.warning("Video validation unavailable for %s, proceeding: %s", url, e)
            return ValidationResult(is_valid=True, title=url)

        if response.status_code == 404:
            return ValidationResult(is_valid=False, error="Video not found. Please check the URL.")

        if not response.is_success:
            return ValidationResult(
                is_valid=False,
                error=f"Validation service failed (HTTP {response.status_code}). "
                      "Please try again later.",
            )

        try:
            data = response.json()
        except ValueError:
            logger.warning("Validation service returned non-JSON for %s, proceeding", url)
            return ValidationResult(is_valid=True, title=url)

        if data.get("error"):
            return ValidationResult(
                is_valid=False,
                error="Video not found. It may be private, unlisted, or the URL is incorrect.",
            )

        # Metadata without a title: the video exists, we just can't name it
        return ValidationResult(is_valid=True, title=data.get("title") or url)
