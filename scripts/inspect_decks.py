"""Quick inspector for the local deck storage file.

Summarizes saved decks, card counts and a few sample cards, and lists stored
entries the app skips because they no longer validate (blank fields, cards
that point at another deck).

Usage:
  uv run scripts/inspect_decks.py [path/to/storage.json]
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root is on sys.path so `app` package imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.config import settings
from app.modules.decks.preferences import Preferences
from app.modules.decks.storage import JsonFileStorage
from app.modules.decks.store import DeckStore


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    path = Path(argv[0]) if argv else settings.client.data_file
    storage = JsonFileStorage(path)
    store = DeckStore(storage)
    prefs = Preferences(storage)

    decks = store.list()
    total_cards = sum(len(d.flashcards) for d in decks)

    print(f"Deck storage summary ({storage.path}):")
    print(f"- Decks: {len(decks)}")
    print(f"- Flashcards: {total_cards}")
    print(f"- Theme: {prefs.theme.value}, last count: {prefs.last_flashcard_count}")

    skipped = store.invalid_entries()
    if skipped:
        print(f"- Skipped entries that failed validation: {', '.join(skipped)}")

    if not decks:
        print("- No decks found.")
        return 0

    print("\nDecks:")
    for d in decks:
        print(f"  • ID {d.id} | name={d.name!r} | cards={len(d.flashcards)}")

    print("\nSample cards (latest deck):")
    for c in decks[-1].flashcards[:3]:
        print(f"  - Q: {c.question[:100]!r}")
        print(f"    A: {c.answer[:120]!r}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
