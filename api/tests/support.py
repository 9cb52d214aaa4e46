"""
Shared fakes for the API tests: an in-memory database, a scripted Gemini
client and a mailer that records what it would have sent.
"""
import base64

from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from chalkboard.main import app
from chalkboard.core.database import get_session
from chalkboard.services.email_service import get_mailer
from chalkboard.services.gemini_client import get_gemini_client

# Large enough to pass the blank-canvas check
CANVAS_PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 2048
CANVAS_BASE64 = base64.b64encode(CANVAS_PNG).decode("ascii")
BLANK_CANVAS_BASE64 = base64.b64encode(b"\x89PNG\r\n\x1a\n" + b"\x00" * 100).decode("ascii")


def gemini_response(text=None, finish_reason="STOP"):
    """generateContent response body carrying `text` in one part."""
    parts = [{"text": text}] if text is not None else []
    return {
        "candidates": [{"content": {"role": "model", "parts": parts}, "finishReason": finish_reason}],
        "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 5},
    }


class FakeGeminiClient:
    """Returns scripted responses in order; an Exception in the script is raised instead."""

    def __init__(self, *results):
        self.results = [gemini_response(r) if isinstance(r, str) else r for r in results]
        self.calls = []

    def generate(self, prompt, operation, image_bytes=None, mime_type=None, generation_config=None):
        self.calls.append({
            "prompt": prompt,
            "operation": operation,
            "image_bytes": image_bytes,
            "mime_type": mime_type,
            "generation_config": generation_config,
        })
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeMailer:
    def __init__(self):
        self.sent = []

    def send_otp(self, to, code, expiry_minutes):
        self.sent.append({"to": to, "code": code, "expiry_minutes": expiry_minutes})


def make_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


def make_client(engine=None, gemini=None, mailer=None):
    """
    TestClient with the database, Gemini client and mailer dependencies replaced.

    Call app.dependency_overrides.clear() in tearDown.
    """
    engine = engine or make_engine()

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    if gemini is not None:
        app.dependency_overrides[get_gemini_client] = lambda: gemini
    if mailer is not None:
        app.dependency_overrides[get_mailer] = lambda: mailer
    return TestClient(app, raise_server_exceptions=False)
