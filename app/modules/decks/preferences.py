"""Client preferences kept next to the deck collection."""

from __future__ import annotations

from enum import Enum

from app.modules.decks.storage import KeyValueStore

THEME_KEY = "theme"
LAST_COUNT_KEY = "lastFlashcardCount"
API_KEY_KEY = "openai_api_key"

DEFAULT_FLASHCARD_COUNT = 5


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Preferences:
    def __init__(self, storage: KeyValueStore) -> None:
        self.storage = storage

    @property
    def theme(self) -> Theme:
        raw = self.storage.get_item(THEME_KEY)
        try:
            return Theme(raw) if raw else Theme.LIGHT
        except ValueError:
            return Theme.LIGHT

    @theme.setter
    def theme(self, value: Theme) -> None:
        self.storage.set_item(THEME_KEY, Theme(value).value)

    def toggle_theme(self) -> Theme:
        new = Theme.DARK if self.theme == Theme.LIGHT else Theme.LIGHT
        self.theme = new
        return new

    @property
    def last_flashcard_count(self) -> int:
        raw = self.storage.get_item(LAST_COUNT_KEY)
        try:
            value = int(raw) if raw else DEFAULT_FLASHCARD_COUNT
        except ValueError:
            return DEFAULT_FLASHCARD_COUNT
        return value if value >= 1 else DEFAULT_FLASHCARD_COUNT

    @last_flashcard_count.setter
    def last_flashcard_count(self, value: int) -> None:
        self.storage.set_item(LAST_COUNT_KEY, str(int(value)))

    @property
    def api_key(self) -> str:
        return self.storage.get_item(API_KEY_KEY) or ""

    @api_key.setter
    def api_key(self, value: str) -> None:
        value = (value or "").strip()
        if value:
            self.storage.set_item(API_KEY_KEY, value)
        else:
            self.storage.remove_item(API_KEY_KEY)
