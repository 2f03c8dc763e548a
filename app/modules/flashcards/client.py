"""HTTP client for the flashcards generation endpoint.

Maps error responses back onto the pipeline's exception classes so callers
handle local and remote generation the same way.
"""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import ValidationError

from app.apis.deps import CREDENTIAL_HEADER
from app.core.config import settings
from app.modules.flashcards.errors import (
    FlashcardsError,
    InvalidCredential,
    RateLimited,
    UpstreamError,
)
from app.modules.flashcards.models.flashcards import Flashcard


class BadRequest(FlashcardsError):
    status_code = 400


class FlashcardsAPIClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.client.server_url).rstrip("/")
        self.timeout = timeout or settings.client.request_timeout
        self.transport = transport

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/{settings.app.version}/flashcards/generate"

    def _raise_for_error(self, response: httpx.Response) -> None:
        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("error") if isinstance(body, dict) else None
        details = body.get("details") if isinstance(body, dict) else None

        if response.status_code == 400:
            raise BadRequest(message or "Missing required fields")
        if response.status_code == 401:
            raise InvalidCredential(message or "Invalid OpenAI API key")
        if response.status_code == 429:
            raise RateLimited(message or "OpenAI API rate limit exceeded")
        raise UpstreamError(
            message or "Something went wrong. Please check your API key and try again.",
            details=details or f"HTTP {response.status_code}",
        )

    def generate(
        self,
        filename: str,
        data: bytes,
        count: int,
        deck_id: str,
        credential: str,
    ) -> list[Flashcard]:
        files = {"file": (filename, data)}
        form = {"count": str(count), "deckId": deck_id}
        headers = {CREDENTIAL_HEADER: credential}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.generate_url, files=files, data=form, headers=headers
                )
        except httpx.HTTPError as e:
            raise UpstreamError(
                "Could not reach the flashcards server", details=str(e)
            ) from e

        if response.status_code != 200:
            self._raise_for_error(response)

        try:
            payload = response.json()
            return [Flashcard.model_validate(c) for c in payload["flashcards"]]
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            raise UpstreamError(
                "Invalid response format. Please try again.", details=str(e)
            ) from e
