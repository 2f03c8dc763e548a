from __future__ import annotations

from typing import Optional

from fastapi import Header

from app.modules.flashcards.errors import FlashcardsError

CREDENTIAL_HEADER = "X-OpenAI-Key"


class MissingCredential(FlashcardsError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("OpenAI API key is required")


async def openai_credential(
    x_openai_key: Optional[str] = Header(default=None, alias=CREDENTIAL_HEADER),
) -> Optional[str]:
    """Resolve the caller's OpenAI API key from the ``X-OpenAI-Key`` header.

    Returns None when the header is missing so the handler can validate form
    fields first. The key is passed straight through to the completion
    service and never stored or logged.
    """
    key = (x_openai_key or "").strip()
    return key or None
