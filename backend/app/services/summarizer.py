"""
Video summary service — asks Claude for a markdown summary of a video.

This service:
1. Builds the summary prompt (from prompts.py) for the requested length
2. Sends it to Claude via the Anthropic API
3. Cleans the response (stray ``` fences) so it renders as plain markdown
4. Turns the model's "not enough information" answer into an error,
   so it never ends up as the body of a PDF

Key Anthropic API details:
- Model: settings.SUMMARY_MODEL
- Temperature: 0.3 (low = consistent, factual summaries)
- Max tokens: settings.SUMMARY_MAX_TOKENS (enough for a 1000+ word summary)
"""

import re
from typing import Optional

import anthropic

from app.config import settings
from app.services.prompts import (
    INSUFFICIENT_INFORMATION_MARKER,
    INSUFFICIENT_INFORMATION_MESSAGE,
    SYSTEM_PROMPT,
    build_summary_prompt,
)

_OPENING_FENCE_RE = re.compile(r"^```(?:markdown)?\n?")
_CLOSING_FENCE_RE = re.compile(r"\n?```$")


class SummaryError(Exception):
    """The summary could not be generated. The message is user-facing."""


class InsufficientInformationError(SummaryError):
    """The model didn't know enough about the video to summarize it."""


def clean_summary(text: str) -> str:
    """Strip code fences the model sometimes adds despite instructions."""
    text = text.strip()
    text = _OPENING_FENCE_RE.sub("", text)
    text = _CLOSING_FENCE_RE.sub("", text)
    return text.strip()


class SummaryService:
    """Generates video summaries with Claude.

    Usage:
        service = SummaryService()
        markdown = service.summarize(url, "Video Title", "medium")

    This is a BLOCKING call. The pipeline runs it in a thread pool via
    asyncio.to_thread().
    """

    def __init__(self, client: Optional[anthropic.Anthropic] = None):
        self.client = client
        self.model = settings.SUMMARY_MODEL

    def summarize(self, video_url: str, video_title: str, summary_length: str = "medium") -> str:
        """Generate the markdown summary for one video.

        Raises:
            InsufficientInformationError: the model returned the fallback text.
            SummaryError: missing API key, empty response, or API failure.
        """
        client = self._get_client()

        try:
            message = client.messages.create(
                model=self.model,
                max_tokens=settings.SUMMARY_MAX_TOKENS,
                temperature=0.3,
                system=SYSTEM_PROMPT,
                messages=[
                    {"role": "user", "content": build_summary_prompt(video_url, video_title, summary_length)}
                ],
            )
        except anthropic.APIError as e:
            raise SummaryError(f"Failed to analyze video. Details: {e}") from e

        text = "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            raise SummaryError("AI model returned an empty response.")

        if INSUFFICIENT_INFORMATION_MARKER in text:
            raise InsufficientInformationError(INSUFFICIENT_INFORMATION_MESSAGE)

        return clean_summary(text)

    def _get_client(self) -> anthropic.Anthropic:
        if self.client is None:
            if not settings.ANTHROPIC_API_KEY:
                raise SummaryError(
                    "ANTHROPIC_API_KEY is not set. Add it to your .env file."
                )
            self.client = anthropic.Anthropic(api_key=settings.ANTHROPIC_API_KEY)
        return self.client
