"""Builds the prompts and structured-output schema for one generation run."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field, create_model

from app.modules.flashcards.models.flashcards import FlashcardBatch, GeneratedFlashcard

TOOL_NAME = "create_flashcards"
TOOL_DESCRIPTION = "Create flashcards from the provided text"

SYSTEM_PROMPT = (
    "You are an AI assistant that creates flashcards from text content. "
    "Your task is to create EXACTLY the number of flashcards requested - no more, no less. "
    "Create flashcards with clear questions and concise answers. "
    "Each flashcard must have a non-empty id, question and answer. "
    "Questions and answers should be easy to understand and relevant to the content. "
    "Vary the flashcards: cover different facts, angles and levels of detail "
    "instead of repeating the same idea. "
    "If asked for N flashcards, you MUST create exactly N flashcards. "
    "Returning fewer or more than N is an error. "
    "If the content is limited, still create N distinct flashcards by approaching "
    "it from different angles. "
    f"Return the flashcards by calling the {TOOL_NAME} tool once."
)


@dataclass(frozen=True)
class GenerationRequest:
    source_text: str
    requested_count: int
    deck_id: str
    system_prompt: str
    user_prompt: str
    output_type: type[FlashcardBatch]


def _build_instruction(text: str, count: int) -> str:
    return (
        f"Create EXACTLY {count} flashcards from this content. "
        f"No more, no less than {count} flashcards:\n\n{text}"
    )


def build_output_type(count: int) -> type[FlashcardBatch]:
    """Tool-argument model whose JSON schema pins the array length to ``count``.

    The length is declared in the schema only; the gateway checks it after
    receipt so a mismatch surfaces as ``CountMismatch``.
    """
    return create_model(
        f"FlashcardBatch{count}",
        __base__=FlashcardBatch,
        flashcards=(
            list[GeneratedFlashcard],
            Field(
                ...,
                description=f"Exactly {count} flashcards",
                json_schema_extra={"minItems": count, "maxItems": count},
            ),
        ),
    )


def build_request(text: str, count: int, deck_id: str) -> GenerationRequest:
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValueError(f"count must be a positive integer, got {count!r}")
    return GenerationRequest(
        source_text=text,
        requested_count=count,
        deck_id=deck_id,
        system_prompt=SYSTEM_PROMPT,
        user_prompt=_build_instruction(text, count),
        output_type=build_output_type(count),
    )
