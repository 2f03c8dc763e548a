"""Flashcards service class tying extraction, request building and the gateway.

Provides a high-level class used by the API handler and the CLI. A failure in
any stage propagates immediately; no partial result is returned.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from pydantic_ai.models import Model

from app.core.logging import get_logger
from app.modules.flashcards.extractor import extract_text
from app.modules.flashcards.generator import generate_flashcards
from app.modules.flashcards.models.flashcards import Flashcard
from app.modules.flashcards.request_builder import build_request

logger = get_logger(__name__)


class FlashcardsGenerator:
    """Runs the document-to-flashcards pipeline for one upload."""

    def __init__(self, *, model: Optional[Model] = None) -> None:
        # Only set in tests; production builds a model per caller key
        self.model = model

    async def generate(
        self,
        *,
        filename: str,
        data: bytes,
        count: int,
        deck_id: str,
        credential: str,
    ) -> list[Flashcard]:
        # pdfplumber is blocking
        text = await asyncio.to_thread(extract_text, filename, data)
        logger.info(
            f"Extracted {len(text)} chars from {filename}", extra={"deck_id": deck_id}
        )
        request = build_request(text, count, deck_id)
        return await generate_flashcards(request, credential, model=self.model)

    def generate_sync(
        self,
        *,
        filename: str,
        data: bytes,
        count: int,
        deck_id: str,
        credential: str,
    ) -> list[Flashcard]:
        return asyncio.run(
            self.generate(
                filename=filename,
                data=data,
                count=count,
                deck_id=deck_id,
                credential=credential,
            )
        )

    @staticmethod
    def to_jsonable(cards: list[Flashcard]) -> dict:
        return {"flashcards": [c.model_dump(by_alias=True) for c in cards]}
