from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FlashcardRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    question: str
    answer: str
    deck_id: str = Field(alias="deckId")


class GenerateResponse(BaseModel):
    flashcards: list[FlashcardRead] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
