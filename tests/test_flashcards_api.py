"""
API tests for POST /{version}/flashcards/generate.
Tests field validation, credential handling and error mapping with the
completion service stubbed by FunctionModel.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic_ai.exceptions import ModelHTTPError

from conftest import make_cards, make_pdf, raising_model, tool_model

import app.modules.flashcards.extractor as extractor
from app.apis.flashcards.main import get_generator, router
from app.core.config import settings
from app.modules.flashcards.main import FlashcardsGenerator

URL = f"/{settings.app.version}/flashcards/generate"
KEY = {"X-OpenAI-Key": "sk-test"}


def _client_for(model) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_generator] = lambda: FlashcardsGenerator(model=model)
    return TestClient(app, raise_server_exceptions=False)


def _upload(name="notes.txt", body=b"The sky is blue."):
    return {"file": (name, body, "text/plain")}


@pytest.fixture
def client():
    with _client_for(tool_model(make_cards(1))) as c:
        yield c


# ── Success ──────────────────────────────────────────────────────────────────

class TestGenerateSuccess:

    def test_txt_upload_yields_exact_count(self, client):
        r = client.post(URL, files=_upload(), data={"count": "1", "deckId": "deck-1"}, headers=KEY)
        assert r.status_code == 200
        cards = r.json()["flashcards"]
        assert len(cards) == 1
        assert cards[0]["deckId"] == "deck-1"
        assert set(cards[0]) == {"id", "question", "answer", "deckId"}

    def test_multiple_cards(self):
        with _client_for(tool_model(make_cards(3))) as c:
            r = c.post(URL, files=_upload(), data={"count": "3", "deckId": "d"}, headers=KEY)
        assert r.status_code == 200
        assert len(r.json()["flashcards"]) == 3

    def test_pdf_upload_text_reaches_model(self):
        seen = {}
        with _client_for(tool_model(make_cards(1), seen=seen)) as c:
            r = c.post(
                URL,
                files={"file": ("notes.pdf", make_pdf("The sky is blue."), "application/pdf")},
                data={"count": "1", "deckId": "d"},
                headers=KEY,
            )
        assert r.status_code == 200
        contents = [
            getattr(part, "content", "")
            for message in seen["messages"]
            for part in message.parts
        ]
        assert any(isinstance(c, str) and "The sky is blue." in c for c in contents)


# ── Request validation ───────────────────────────────────────────────────────

class TestRequestValidation:

    def test_missing_file_400(self, client):
        r = client.post(URL, data={"count": "1", "deckId": "d"}, headers=KEY)
        assert r.status_code == 400
        assert r.json() == {"error": "Missing required fields"}

    def test_missing_deck_id_400(self, client):
        r = client.post(URL, files=_upload(), data={"count": "1"}, headers=KEY)
        assert r.status_code == 400

    @pytest.mark.parametrize("count", ["", "0", "-2", "abc", "1.5"])
    def test_bad_count_400(self, client, count):
        r = client.post(URL, files=_upload(), data={"count": count, "deckId": "d"}, headers=KEY)
        assert r.status_code == 400

    def test_fields_checked_before_credential(self, client):
        r = client.post(URL, data={"deckId": "d"})
        assert r.status_code == 400

    def test_missing_credential_401(self, client):
        r = client.post(URL, files=_upload(), data={"count": "1", "deckId": "d"})
        assert r.status_code == 401
        assert r.json()["error"] == "OpenAI API key is required"

    def test_blank_credential_401(self, client):
        r = client.post(
            URL,
            files=_upload(),
            data={"count": "1", "deckId": "d"},
            headers={"X-OpenAI-Key": "  "},
        )
        assert r.status_code == 401


# ── Error mapping ────────────────────────────────────────────────────────────

class TestErrorMapping:

    def test_unsupported_file_500(self, client):
        r = client.post(URL, files=_upload("notes.docx"), data={"count": "1", "deckId": "d"}, headers=KEY)
        assert r.status_code == 500
        assert "Unsupported file type" in r.json()["error"]

    def test_empty_pdf_500(self, client, monkeypatch):
        monkeypatch.setattr(extractor, "_read_pdf_pages", lambda data: (1, "  \n "))
        r = client.post(
            URL,
            files={"file": ("scan.pdf", b"%PDF-1.4", "application/pdf")},
            data={"count": "1", "deckId": "d"},
            headers=KEY,
        )
        assert r.status_code == 500
        assert "Could not extract text from PDF" in r.json()["error"]

    def test_invalid_key_401(self):
        model = raising_model(ModelHTTPError(status_code=401, model_name="gpt", body={}))
        with _client_for(model) as c:
            r = c.post(URL, files=_upload(), data={"count": "1", "deckId": "d"}, headers=KEY)
        assert r.status_code == 401
        assert r.json() == {"error": "Invalid OpenAI API key"}

    def test_rate_limit_429(self):
        model = raising_model(ModelHTTPError(status_code=429, model_name="gpt", body={}))
        with _client_for(model) as c:
            r = c.post(URL, files=_upload(), data={"count": "1", "deckId": "d"}, headers=KEY)
        assert r.status_code == 429
        assert r.json()["error"] == "OpenAI API rate limit exceeded"

    def test_upstream_error_500_with_details(self):
        model = raising_model(ModelHTTPError(status_code=502, model_name="gpt", body="bad gateway"))
        with _client_for(model) as c:
            r = c.post(URL, files=_upload(), data={"count": "1", "deckId": "d"}, headers=KEY)
        assert r.status_code == 500
        body = r.json()
        assert body["error"] == "Error communicating with OpenAI API"
        assert "502" in body["details"]

    def test_count_mismatch_500(self):
        with _client_for(tool_model(make_cards(4))) as c:
            r = c.post(URL, files=_upload(), data={"count": "3", "deckId": "d"}, headers=KEY)
        assert r.status_code == 500
        assert "Expected exactly 3 flashcards, but got 4" in r.json()["error"]
