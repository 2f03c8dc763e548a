"""Deck collection persisted under a single storage key.

Every mutation reads the whole collection, applies the change and writes the
whole collection back; the last writer wins. Decks are validated one by one:
an entry that no longer validates is skipped when reading but kept verbatim
when writing, so it only disappears through an explicit ``delete``.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import ValidationError

from app.core.logging import get_logger
from app.modules.decks.storage import KeyValueStore
from app.modules.flashcards.errors import DeckNotFound, DeckStorageCorrupt, DuplicateDeck
from app.modules.flashcards.models.flashcards import FlashcardDeck

logger = get_logger(__name__)

DECKS_KEY = "flashcardDecks"


def _entry_id(entry: Any) -> Optional[str]:
    if isinstance(entry, dict) and entry.get("id") is not None:
        return str(entry["id"])
    return None


class DeckStore:
    def __init__(self, storage: KeyValueStore, *, key: str = DECKS_KEY) -> None:
        self.storage = storage
        self.key = key

    def _read_raw(self) -> list[Any]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DeckStorageCorrupt(str(e)) from e
        if not isinstance(entries, list):
            raise DeckStorageCorrupt(f"expected a list, got {type(entries).__name__}")
        return entries

    def _write_raw(self, entries: list[Any]) -> None:
        self.storage.set_item(self.key, json.dumps(entries, ensure_ascii=False))

    def _parse(self, entry: Any) -> Optional[FlashcardDeck]:
        try:
            return FlashcardDeck.model_validate(entry)
        except ValidationError as e:
            logger.warning(
                f"Skipping stored deck that failed validation: {e.error_count()} error(s)",
                extra={"deck_id": _entry_id(entry) or "?"},
            )
            return None

    def _entries_for_reading(self) -> list[Any]:
        try:
            return self._read_raw()
        except DeckStorageCorrupt as e:
            logger.warning(f"Stored deck collection is unreadable; showing no decks: {e.details}")
            return []

    def list(self) -> list[FlashcardDeck]:
        decks = []
        for entry in self._entries_for_reading():
            deck = self._parse(entry)
            if deck is not None:
                decks.append(deck)
        return decks

    def invalid_entries(self) -> list[str]:
        """Ids (or positions) of stored entries that do not validate as decks."""
        bad = []
        for i, entry in enumerate(self._entries_for_reading()):
            try:
                FlashcardDeck.model_validate(entry)
            except ValidationError:
                bad.append(_entry_id(entry) or f"#{i}")
        return bad

    def get(self, deck_id: str) -> FlashcardDeck:
        for deck in self.list():
            if deck.id == deck_id:
                return deck
        raise DeckNotFound(deck_id)

    def create(self, deck: FlashcardDeck) -> FlashcardDeck:
        entries = self._read_raw()
        if any(_entry_id(e) == deck.id for e in entries):
            raise DuplicateDeck(deck.id)
        entries.append(deck.model_dump(mode="json", by_alias=True))
        self._write_raw(entries)
        logger.info(
            f"Saved deck '{deck.name}' with {len(deck.flashcards)} flashcards",
            extra={"deck_id": deck.id},
        )
        return deck

    def delete(self, deck_id: str) -> None:
        entries = self._read_raw()
        remaining = [e for e in entries if _entry_id(e) != deck_id]
        if len(remaining) == len(entries):
            return
        self._write_raw(remaining)
        logger.info("Deleted deck", extra={"deck_id": deck_id})
