"""
Copydesk Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── fake_llm: Scripted LLMService (no generation API calls)
    ├── password_hash: Low-cost bcrypt hash of "correct horse"
    ├── sample_standards: Two active ContentStandard rows
    └── test_client: HTTPX AsyncClient wired to an app using the two fakes above
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import bcrypt
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from copydesk.models.standard import ContentStandard
from copydesk.services.llm_base import LLMService


TEST_PASSWORD = "correct horse"


class FakeLLMService(LLMService):
    """
    LLMService that returns a canned reply (or raises) and records prompts.

    Usage:
        fake_llm.reply = '{"score": 90, ...}'
        fake_llm.error = LLMServiceError("quota exceeded")
    """

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []
        self.healthy = True

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    async def health_check(self) -> bool:
        return self.healthy


def query_result(first=None, scalar=None, scalars=None) -> MagicMock:
    """
    A mock of the object returned by `await session.execute(...)`.

    first:   value of result.first() (token lookup row)
    scalar:  value of result.scalar_one_or_none() (user lookup)
    scalars: list returned by result.scalars().all() (standards)
    """
    result = MagicMock()
    result.first.return_value = first
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value.all.return_value = scalars or []
    return result


def token_row(user_id: int = 7, username: str = "ada", display_name: str = "Ada L.",
              role: str = "writer") -> MagicMock:
    """Row shape of the token → user join."""
    return MagicMock(user_id=user_id, username=username, display_name=display_name, role=role)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    execute() returns a MagicMock result by default; tests replace it with
    `query_result(...)` values (or a side_effect list for multiple queries).

    Usage:
        mock_db_session.execute.return_value = query_result(first=token_row())
    """
    session = AsyncMock()
    session.execute = AsyncMock(return_value=query_result())
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def fake_llm():
    return FakeLLMService()


@pytest.fixture(scope="session")
def password_hash() -> str:
    """bcrypt hash of TEST_PASSWORD at the minimum cost factor."""
    return bcrypt.hashpw(TEST_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest.fixture
def sample_standards() -> List[ContentStandard]:
    return [
        ContentStandard(
            id="CS-001",
            title="Sentence case buttons",
            domain="UI",
            term_definition="Buttons use sentence case",
            guidance="Capitalize only the first word",
            correct_examples="Save changes",
            incorrect_examples="Save Changes",
            status="active",
        ),
        ContentStandard(
            id="CS-002",
            title="Sign in",
            domain="Auth",
            term_definition=None,
            guidance="Use 'Sign in', never 'Login' as a verb",
            correct_examples=None,
            incorrect_examples="Login to continue",
            status="active",
        ),
    ]


@pytest_asyncio.fixture
async def test_client(mock_db_session, fake_llm):
    """
    Provides an async HTTP test client for endpoint testing.

    The app is built with the fake LLM, and get_db_session is overridden to
    yield mock_db_session, so no database or network is touched.

    Usage:
        async def test_verify(test_client, mock_db_session):
            response = await test_client.get("/api/figma/verify")
            assert response.status_code == 401
    """
    from copydesk.database import get_db_session
    from copydesk.main import create_app

    app = create_app(llm_service=fake_llm)

    async def override_db_session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
