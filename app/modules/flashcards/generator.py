"""Flashcard generator using pydantic-ai and the OpenAI provider.

The caller supplies the OpenAI API key per call; nothing is read from the
environment for credentials. Structured output is declared as a single
``create_flashcards`` tool whose schema pins the number of items. The item
count is checked again after receipt, since models do not always honour the
schema.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Optional
from uuid import uuid4

from pydantic_ai import Agent, ToolOutput
from pydantic_ai.exceptions import AgentRunError, ModelHTTPError
from pydantic_ai.models import Model

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.flashcards.errors import (
    CountMismatch,
    InvalidCredential,
    RateLimited,
    UpstreamError,
)
from app.modules.flashcards.models.flashcards import (
    Flashcard,
    FlashcardBatch,
    GeneratedFlashcard,
)
from app.modules.flashcards.request_builder import (
    TOOL_DESCRIPTION,
    TOOL_NAME,
    GenerationRequest,
)

logger = get_logger(__name__)


def _build_openai_model(credential: str) -> Model:
    """Build the OpenAI chat model for the caller's key (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    provider = OpenAIProvider(api_key=credential, base_url=settings.openai.base_url)
    return OpenAIChatModel(settings.openai.model, provider=provider)


@dataclass
class BatchValidation:
    """Outcome of checking a received batch against the requested count."""

    expected: int
    actual: int
    flashcards: list[GeneratedFlashcard] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def validate_batch(batch: FlashcardBatch, count: int) -> BatchValidation:
    cards = list(batch.flashcards or [])
    if len(cards) != count:
        return BatchValidation(
            expected=count,
            actual=len(cards),
            error=f"Expected exactly {count} flashcards, but got {len(cards)}",
        )
    return BatchValidation(expected=count, actual=len(cards), flashcards=cards)


def stamp_deck_id(cards: list[GeneratedFlashcard], deck_id: str) -> list[Flashcard]:
    """Attach the owning deck id; re-key any id the model repeated."""
    seen: set[str] = set()
    out: list[Flashcard] = []
    for c in cards:
        card_id = c.id
        if card_id in seen:
            card_id = uuid4().hex
        seen.add(card_id)
        out.append(
            Flashcard(id=card_id, question=c.question, answer=c.answer, deck_id=deck_id)
        )
    return out


def _classify(exc: Exception) -> Exception:
    if isinstance(exc, ModelHTTPError):
        if exc.status_code == 401:
            return InvalidCredential()
        if exc.status_code == 429:
            return RateLimited()
        return UpstreamError(details=f"status_code: {exc.status_code}, body: {exc.body}")
    message = str(exc) or exc.__class__.__name__
    if "API key" in message or "api_key" in message:
        return InvalidCredential()
    return UpstreamError(details=message)


def _build_agent(request: GenerationRequest, model: Model) -> Agent[None, FlashcardBatch]:
    return Agent[None, FlashcardBatch](
        model,
        output_type=ToolOutput(
            request.output_type,
            name=TOOL_NAME,
            description=TOOL_DESCRIPTION,
        ),
        system_prompt=request.system_prompt,
        # The caller surfaces failures and lets the user retry
        retries=0,
    )


async def generate_flashcards(
    request: GenerationRequest,
    credential: str,
    *,
    model: Optional[Model] = None,
) -> list[Flashcard]:
    """Call the completion service and return exactly ``requested_count`` cards."""
    extra = {"deck_id": request.deck_id}
    logger.info(
        f"Requesting {request.requested_count} flashcards "
        f"({len(request.source_text)} chars of source text)",
        extra=extra,
    )
    try:
        agent = _build_agent(request, model or _build_openai_model(credential))
        res = await agent.run(
            request.user_prompt,
            model_settings={"timeout": settings.openai.timeout},
        )
    except ModelHTTPError as e:
        logger.error(f"OpenAI API error: status={e.status_code}", extra=extra)
        raise _classify(e) from e
    except AgentRunError as e:
        logger.error(f"OpenAI API error: {e}", extra=extra)
        raise _classify(e) from e
    except Exception as e:  # noqa: BLE001
        # openai client errors raised outside the model request are not wrapped
        logger.error(f"OpenAI client error: {e}", extra=extra)
        raise _classify(e) from e

    checked = validate_batch(res.output, request.requested_count)
    if not checked.ok:
        logger.error(checked.error, extra=extra)
        raise CountMismatch(checked.expected, checked.actual)

    return stamp_deck_id(checked.flashcards, request.deck_id)


def generate_flashcards_sync(
    request: GenerationRequest,
    credential: str,
    *,
    model: Optional[Model] = None,
) -> list[Flashcard]:
    """Synchronous wrapper if an event loop is unavailable."""
    return asyncio.run(generate_flashcards(request, credential, model=model))
