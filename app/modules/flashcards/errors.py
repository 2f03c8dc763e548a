"""Error taxonomy for the document-to-flashcards pipeline.

Every error carries a user-facing ``message`` and the HTTP ``status_code`` the
API boundary should answer with. Extraction errors are recoverable by
uploading a different file; gateway errors by retrying or re-entering the
API key.
"""

from __future__ import annotations

from typing import Optional


class FlashcardsError(Exception):
    """Base class for all pipeline and deck errors."""

    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ExtractionError(FlashcardsError):
    """Text could not be extracted from the uploaded file."""


class UnsupportedFileType(ExtractionError):
    def __init__(self, filename: str = "") -> None:
        super().__init__("Unsupported file type. Please upload a .txt or .pdf file.")
        self.filename = filename


class EmptyContent(ExtractionError):
    def __init__(self) -> None:
        super().__init__("The text file appears to be empty.")


class DecodeError(ExtractionError):
    def __init__(self, details: Optional[str] = None) -> None:
        super().__init__(
            "Failed to read the text file. Please make sure it's a valid UTF-8 encoded text file.",
            details=details,
        )


class ExtractionFailed(ExtractionError):
    def __init__(
        self,
        message: str = "Failed to extract text from the PDF. Please ensure it contains searchable text.",
        *,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details)


class GatewayError(FlashcardsError):
    """The completion service call failed or returned unusable output."""


class InvalidCredential(GatewayError):
    status_code = 401

    def __init__(self, message: str = "Invalid OpenAI API key") -> None:
        super().__init__(message)


class RateLimited(GatewayError):
    status_code = 429

    def __init__(self, message: str = "OpenAI API rate limit exceeded") -> None:
        super().__init__(message)


class UpstreamError(GatewayError):
    def __init__(
        self,
        message: str = "Error communicating with OpenAI API",
        *,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details or "Unknown error")


class CountMismatch(GatewayError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Expected exactly {expected} flashcards, but got {actual}",
        )
        self.expected = expected
        self.actual = actual


class DeckNotFound(FlashcardsError):
    status_code = 404

    def __init__(self, deck_id: str) -> None:
        super().__init__(f"Deck not found: {deck_id}")
        self.deck_id = deck_id


class DuplicateDeck(FlashcardsError):
    status_code = 409

    def __init__(self, deck_id: str) -> None:
        super().__init__(f"Deck already exists: {deck_id}")
        self.deck_id = deck_id


class DeckStorageCorrupt(FlashcardsError):
    """The stored deck collection is not a JSON list; mutations refuse to overwrite it."""

    status_code = 500

    def __init__(self, details: str) -> None:
        super().__init__("Stored deck collection could not be read", details=details)
