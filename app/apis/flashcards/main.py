from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from app.apis.deps import MissingCredential, openai_credential
from app.core.config import settings
from app.core.logging import get_logger
from app.modules.flashcards.errors import FlashcardsError
from app.modules.flashcards.main import FlashcardsGenerator
from .schemas import ErrorResponse, FlashcardRead, GenerateResponse

logger = get_logger(__name__)

router = APIRouter()


def get_generator() -> FlashcardsGenerator:
    return FlashcardsGenerator()


Generator = Annotated[FlashcardsGenerator, Depends(get_generator)]


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status_code)


def _parse_count(raw: Optional[str]) -> Optional[int]:
    try:
        value = int((raw or "").strip())
    except ValueError:
        return None
    return value if value >= 1 else None


@router.post(
    f"/{settings.app.version}/flashcards/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    tags=["flashcards"],
)
async def generate_from_document(
    generator: Generator,
    file: Optional[UploadFile] = File(default=None),
    count: Optional[str] = Form(default=None),
    deck_id: Optional[str] = Form(default=None, alias="deckId"),
    credential: Optional[str] = Depends(openai_credential),
):
    """Extract text from the upload and generate exactly ``count`` flashcards."""
    parsed_count = _parse_count(count)
    if file is None or not file.filename or parsed_count is None or not (deck_id or "").strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Missing required fields")

    if not credential:
        err = MissingCredential()
        return _error(err.status_code, err.message)

    data = await file.read()
    try:
        cards = await generator.generate(
            filename=file.filename,
            data=data,
            count=parsed_count,
            deck_id=deck_id.strip(),
            credential=credential,
        )
    except FlashcardsError as e:
        logger.error(
            f"Flashcard generation failed ({e.__class__.__name__}): {e.message}",
            extra={"deck_id": deck_id},
        )
        return _error(e.status_code, e.message, e.details)

    return GenerateResponse(
        flashcards=[FlashcardRead(**c.model_dump()) for c in cards]
    )
