"""Shared fixtures for Form Architect tests."""

import asyncio
import os
import tempfile
import uuid

import pytest
from fastapi.testclient import TestClient

# Ensure we use test settings: throwaway database, no paid services
os.environ["DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), f'form_architect_test_{uuid.uuid4().hex}.db')}"
)
os.environ["OPENAI_API_KEY"] = ""
os.environ["SENDGRID_API_KEY"] = ""
os.environ["AUTO_RESPONSE_ENABLED"] = "false"
os.environ["SPAM_THRESHOLD"] = "60"


@pytest.fixture
def client():
    """Create a FastAPI test client with the lifespan running."""
    from api.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def run_db(tmp_path):
    """Run ``fn(session)`` against a fresh SQLite database."""
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
    from database.models import Base

    def runner(fn):
        async def main():
            engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'repo.db'}")
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            factory = async_sessionmaker(engine, expire_on_commit=False)
            try:
                async with factory() as session:
                    return await fn(session)
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return runner


class FakeClassifier:
    """Spam classifier returning a fixed score or raising."""

    def __init__(self, score=0, error=None):
        self.score = score
        self.error = error
        self.calls = []

    def classify(self, text):
        self.calls.append(text)
        if self.error:
            raise self.error
        return self.score


class FakeProvider:
    """LLM provider returning a canned reply."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate(self, prompt, system=None, max_tokens=None, temperature=None, timeout=None):
        self.calls.append({"prompt": prompt, "system": system, "max_tokens": max_tokens})
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def fake_classifier():
    return FakeClassifier


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def contact_submission():
    """Well-formed business enquiry."""
    return {
        "full_name": "Jane Doe",
        "email": "jane@acmecorp.com",
        "phone": "(555) 123-4567",
        "company": "Acme Corp",
        "message": "We are looking for a partner to rebuild our customer portal and would like a quote.",
        "preferred_contact": "Email",
    }
