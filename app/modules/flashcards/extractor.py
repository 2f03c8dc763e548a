"""Plain-text extraction for uploaded documents.

Only ``.txt`` and ``.pdf`` uploads are accepted, dispatched by file-name
suffix. PDF text is read with pdfplumber (all pages) and normalized to a single
whitespace-collapsed string.
"""

from __future__ import annotations

import io
import re

import pdfplumber

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.flashcards.errors import (
    DecodeError,
    EmptyContent,
    ExtractionFailed,
    UnsupportedFileType,
)

logger = get_logger(__name__)

TEXT_SUFFIX = ".txt"
PDF_SUFFIX = ".pdf"
SUPPORTED_SUFFIXES = (TEXT_SUFFIX, PDF_SUFFIX)

_CRLF_RE = re.compile(r"\r\n")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_pdf_text(raw: str) -> str:
    """Normalize line endings, squeeze blank lines, then collapse whitespace."""
    text = raw.strip()
    text = _CRLF_RE.sub("\n", text)
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def _read_pdf_pages(data: bytes) -> tuple[int, str]:
    """Return (page count, raw text) for every page of the PDF."""
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return len(pages), "\n".join(pages)


def extract_plain_text(data: bytes) -> str:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.error(f"Text file parsing error: {e}")
        raise DecodeError(details=str(e)) from e

    text = text.strip()
    if not text:
        raise EmptyContent()
    return text


def extract_pdf_text(data: bytes) -> str:
    try:
        page_count, raw = _read_pdf_pages(data)
    except Exception as e:  # noqa: BLE001
        # pdfplumber/pdfminer raise a variety of parser errors on malformed files
        logger.error(f"PDF parsing error: {e}")
        raise ExtractionFailed(details=str(e)) from e

    logger.info(f"PDF parsed: pages={page_count} text_length={len(raw)}")

    if not raw.strip():
        raise ExtractionFailed(
            "Could not extract text from PDF. The file might be empty, scanned, "
            "or contain only images."
        )

    text = clean_pdf_text(raw)
    if not text:
        raise ExtractionFailed("The PDF appears to be empty after cleaning the text.")
    return text


def extract_text(filename: str, data: bytes) -> str:
    """Extract normalized plain text from an uploaded ``.txt`` or ``.pdf`` file."""
    name = (filename or "").lower()
    if not name.endswith(SUPPORTED_SUFFIXES):
        raise UnsupportedFileType(filename)

    limit = settings.extraction.max_upload_bytes
    if limit and len(data) > limit:
        raise ExtractionFailed(
            f"File is too large ({len(data)} bytes). The maximum is {limit} bytes."
        )

    if name.endswith(TEXT_SUFFIX):
        return extract_plain_text(data)
    return extract_pdf_text(data)
