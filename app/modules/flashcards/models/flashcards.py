"""Pydantic models for flashcards, decks and model output.

``Flashcard`` and ``FlashcardDeck`` serialize with the camelCase ``deckId`` key
used by the stored deck collection and the HTTP API.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GeneratedFlashcard(BaseModel):
    """A single item as returned by the ``create_flashcards`` tool call."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(min_length=1)
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)


class FlashcardBatch(BaseModel):
    """Arguments of the ``create_flashcards`` tool call."""

    flashcards: list[GeneratedFlashcard]


class Flashcard(BaseModel):
    """Question/answer pair owned by exactly one deck."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    deck_id: str = Field(alias="deckId")


class FlashcardDeck(BaseModel):
    """A named, ordered collection of flashcards."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    flashcards: list[Flashcard] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_ownership(self) -> "FlashcardDeck":
        for card in self.flashcards:
            if card.deck_id != self.id:
                raise ValueError(
                    f"Flashcard {card.id} belongs to deck {card.deck_id}, not {self.id}"
                )
        return self
