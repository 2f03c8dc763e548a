"""Deck creation wizard as an explicit state machine.

Steps: COUNT (name + number of cards) -> UPLOAD (generate from a document)
-> EDIT (review and tweak cards) -> COMPLETE (deck persisted). ``cancel()``
from any step discards everything; nothing reaches the deck store before
``confirm()``.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional
from uuid import uuid4

from app.core.logging import get_logger
from app.modules.decks.preferences import Preferences
from app.modules.decks.store import DeckStore
from app.modules.flashcards.errors import (
    CountMismatch,
    FlashcardsError,
    InvalidCredential,
)
from app.modules.flashcards.models.flashcards import Flashcard, FlashcardDeck

logger = get_logger(__name__)

MIN_COUNT = 1
MAX_COUNT = 20

MISSING_CREDENTIAL = "An OpenAI API key is required"

# (filename, data, count, deck_id, credential) -> cards
GenerateFn = Callable[[str, bytes, int, str, str], list[Flashcard]]


class WizardStep(str, Enum):
    COUNT = "count"
    UPLOAD = "upload"
    EDIT = "edit"
    COMPLETE = "complete"


class WizardError(Exception):
    """Transition not allowed in the current step."""


class CreationWizard:
    def __init__(self, store: DeckStore, preferences: Preferences) -> None:
        self.store = store
        self.preferences = preferences
        self._reset()

    def _reset(self) -> None:
        self.step = WizardStep.COUNT
        self.name = ""
        self.count = self.preferences.last_flashcard_count
        self.deck_id: Optional[str] = None
        self.flashcards: list[Flashcard] = []
        self.busy = False
        self.error: Optional[str] = None
        self.needs_credential = False
        self.deck: Optional[FlashcardDeck] = None

    def _require(self, *steps: WizardStep) -> None:
        if self.step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise WizardError(f"Not allowed in step '{self.step.value}' (expected {allowed})")

    # COUNT

    def set_name(self, name: str) -> None:
        self._require(WizardStep.COUNT)
        self.name = name

    def set_count(self, count: int) -> int:
        self._require(WizardStep.COUNT)
        self.count = max(MIN_COUNT, min(MAX_COUNT, int(count)))
        return self.count

    def proceed(self) -> None:
        self._require(WizardStep.COUNT)
        if not self.name.strip():
            raise WizardError("A deck name is required")
        self.preferences.last_flashcard_count = self.count
        self.step = WizardStep.UPLOAD

    # UPLOAD

    def _missing_credential(self) -> bool:
        if self.preferences.api_key:
            return False
        self.error = MISSING_CREDENTIAL
        self.needs_credential = True
        return True

    def begin_generation(self) -> str:
        self._require(WizardStep.UPLOAD)
        if self.busy:
            raise WizardError("A generation request is already in flight")
        if self._missing_credential():
            raise WizardError(MISSING_CREDENTIAL)
        self.busy = True
        self.error = None
        self.needs_credential = False
        self.flashcards = []
        self.deck_id = str(uuid4())
        return self.deck_id

    def generation_succeeded(self, cards: list[Flashcard]) -> None:
        self._require(WizardStep.UPLOAD)
        if len(cards) != self.count:
            self.generation_failed(CountMismatch(self.count, len(cards)))
            return
        self.busy = False
        self.flashcards = list(cards)
        self.step = WizardStep.EDIT

    def generation_failed(self, error: Exception) -> None:
        self._require(WizardStep.UPLOAD)
        self.busy = False
        self.flashcards = []
        self.deck_id = None
        if isinstance(error, FlashcardsError):
            self.error = error.message
        else:
            self.error = str(error) or "Something went wrong. Please try again."
        self.needs_credential = isinstance(error, InvalidCredential)
        logger.warning(f"Generation failed: {self.error}")

    def run_generation(self, generate: GenerateFn, filename: str, data: bytes) -> bool:
        """Run one generation through ``generate``; return True on success.

        Without a stored API key nothing is sent: the wizard stays in UPLOAD
        with ``needs_credential`` set.
        """
        self._require(WizardStep.UPLOAD)
        if not self.busy and self._missing_credential():
            return False
        deck_id = self.begin_generation()
        try:
            cards = generate(filename, data, self.count, deck_id, self.preferences.api_key)
        except FlashcardsError as e:
            self.generation_failed(e)
            return False
        except Exception as e:
            self.generation_failed(e)
            raise
        self.generation_succeeded(cards)
        return self.step == WizardStep.EDIT

    # EDIT

    def edit_card(self, index: int, field: str, value: str) -> Flashcard:
        self._require(WizardStep.EDIT)
        if field not in ("question", "answer"):
            raise WizardError(f"Unknown flashcard field: {field}")
        if not 0 <= index < len(self.flashcards):
            raise WizardError(f"No flashcard at index {index}")
        card = self.flashcards[index].model_copy(update={field: value or ""})
        self.flashcards[index] = card
        return card

    def delete_card(self, index: int) -> None:
        self._require(WizardStep.EDIT)
        if not 0 <= index < len(self.flashcards):
            raise WizardError(f"No flashcard at index {index}")
        del self.flashcards[index]

    def back(self) -> None:
        self._require(WizardStep.EDIT, WizardStep.UPLOAD)
        if self.step == WizardStep.EDIT:
            self.flashcards = []
            self.deck_id = None
            self.step = WizardStep.UPLOAD
        else:
            self.error = None
            self.step = WizardStep.COUNT

    def confirm(self) -> FlashcardDeck:
        self._require(WizardStep.EDIT)
        name = self.name.strip()
        if not name:
            raise WizardError("A deck name is required")
        if not self.flashcards or self.deck_id is None:
            raise WizardError("A deck needs at least one flashcard")
        for i, card in enumerate(self.flashcards):
            if not card.question.strip() or not card.answer.strip():
                raise WizardError(f"Flashcard {i + 1} needs both a question and an answer")

        deck = FlashcardDeck(
            id=self.deck_id,
            name=name,
            flashcards=[
                Flashcard(
                    id=c.id,
                    question=c.question.strip(),
                    answer=c.answer.strip(),
                    deck_id=self.deck_id,
                )
                for c in self.flashcards
            ],
        )
        self.store.create(deck)
        self.deck = deck
        self.step = WizardStep.COMPLETE
        return deck

    def cancel(self) -> None:
        self._reset()
