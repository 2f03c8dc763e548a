"""Flashcards module exports."""

from .models.flashcards import Flashcard, FlashcardDeck
from .extractor import extract_text
from .request_builder import GenerationRequest, build_request
from .generator import generate_flashcards, generate_flashcards_sync, validate_batch
from .main import FlashcardsGenerator

__all__ = [
    "Flashcard",
    "FlashcardDeck",
    "extract_text",
    "GenerationRequest",
    "build_request",
    "generate_flashcards",
    "generate_flashcards_sync",
    "validate_batch",
    "FlashcardsGenerator",
]
