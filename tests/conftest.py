"""
Shared pytest fixtures: in-memory storage, sample decks and a scripted
pydantic-ai model that answers with a ``create_flashcards`` tool call.
"""

from typing import Callable, Optional

import pytest
from pydantic_ai.messages import ModelMessage, ModelResponse, ToolCallPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from app.modules.decks.preferences import Preferences
from app.modules.decks.storage import MemoryStorage
from app.modules.decks.store import DeckStore
from app.modules.flashcards.models.flashcards import Flashcard, FlashcardDeck


def make_cards(n: int, prefix: str = "card") -> list[dict]:
    return [
        {"id": f"{prefix}-{i}", "question": f"Question {i}?", "answer": f"Answer {i}."}
        for i in range(1, n + 1)
    ]


def tool_model(
    cards: list[dict],
    *,
    seen: Optional[dict] = None,
) -> FunctionModel:
    """FunctionModel that returns ``cards`` through the output tool.

    When ``seen`` is given it receives the messages and tool definitions the
    agent sent, for assertions on prompts and schema.
    """

    def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        tool = info.output_tools[0]
        if seen is not None:
            seen["messages"] = messages
            seen["tool"] = tool
        return ModelResponse(parts=[ToolCallPart(tool.name, {"flashcards": cards})])

    return FunctionModel(respond)


def raising_model(exc: Exception) -> FunctionModel:
    def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        raise exc

    return FunctionModel(respond)


def make_pdf(*pages: str) -> bytes:
    """Minimal PDF with one line of Helvetica text per page.

    Page text must not contain parentheses or backslashes.
    """
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(len(pages)))
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for i, text in enumerate(pages):
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {5 + 2 * i} 0 R >>"
            ).encode()
        )
        stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
        objects.append(
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
        )

    out = b"%PDF-1.4\n"
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % num + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_at,
    )
    return out


def make_deck(deck_id: str = "deck-1", name: str = "Sky", n: int = 3) -> FlashcardDeck:
    return FlashcardDeck(
        id=deck_id,
        name=name,
        flashcards=[
            Flashcard(id=f"c{i}", question=f"Q{i}", answer=f"A{i}", deck_id=deck_id)
            for i in range(1, n + 1)
        ],
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage) -> DeckStore:
    return DeckStore(storage)


@pytest.fixture
def preferences(storage) -> Preferences:
    return Preferences(storage)


@pytest.fixture
def deck_factory() -> Callable[..., FlashcardDeck]:
    return make_deck
