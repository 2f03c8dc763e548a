from .flashcards import Flashcard, FlashcardBatch, FlashcardDeck, GeneratedFlashcard

__all__ = [
    "Flashcard",
    "FlashcardBatch",
    "FlashcardDeck",
    "GeneratedFlashcard",
]
