"""Flip-card study session over a read-only copy of one deck.

Presentation state (current index and visible face) lives only here and is
never written back to the deck store.
"""

from __future__ import annotations

from enum import Enum

from app.modules.flashcards.models.flashcards import Flashcard, FlashcardDeck


class Face(str, Enum):
    QUESTION = "question"
    ANSWER = "answer"


class StudySession:
    """Navigate a deck one card at a time: next, previous, flip, restart."""

    def __init__(self, deck: FlashcardDeck) -> None:
        if not deck.flashcards:
            raise ValueError(f"Deck {deck.id} has no flashcards to study")
        self.deck = deck.model_copy(deep=True)
        self.index = 0
        self.face = Face.QUESTION

    def __len__(self) -> int:
        return len(self.deck.flashcards)

    @property
    def current_card(self) -> Flashcard:
        return self.deck.flashcards[self.index]

    @property
    def current_text(self) -> str:
        card = self.current_card
        return card.question if self.face == Face.QUESTION else card.answer

    @property
    def progress(self) -> float:
        return (self.index + 1) / len(self) * 100

    @property
    def can_go_back(self) -> bool:
        return self.index > 0

    @property
    def can_go_forward(self) -> bool:
        return self.index < len(self) - 1

    def next(self) -> None:
        self.index = min(self.index + 1, len(self) - 1)
        self.face = Face.QUESTION

    def previous(self) -> None:
        self.index = max(self.index - 1, 0)
        self.face = Face.QUESTION

    def flip(self) -> None:
        self.face = Face.ANSWER if self.face == Face.QUESTION else Face.QUESTION

    def restart(self) -> None:
        self.index = 0
        self.face = Face.QUESTION

    def handle_key(self, key: str) -> bool:
        """Apply the keyboard binding for ``key``; return False if unbound."""
        actions = {
            "left": self.previous,
            "right": self.next,
            "space": self.flip,
            " ": self.flip,
        }
        action = actions.get(key.lower() if key != " " else key)
        if action is None:
            return False
        action()
        return True
