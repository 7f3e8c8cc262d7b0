"""Shared fixtures for helpbox tests."""

import os
from pathlib import Path
from typing import List, Union

# Configure an isolated environment before importing the app
TEST_DB_PATH = Path(__file__).resolve().parent / "test_helpbox.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["ENVIRONMENT"] = "testing"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MOCK_LLM"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from helpbox.config import AccessLevel, settings  # noqa: E402
from helpbox.core import LLMException  # noqa: E402
from helpbox.infrastructure.database import (  # noqa: E402
    close_database,
    create_tables,
    drop_tables,
    get_session_context,
    init_database,
)
from helpbox.infrastructure.llm import ChatCompletionResult  # noqa: E402
from helpbox.shared.auth import hash_password  # noqa: E402
from helpbox.triage.application import RetryController, TriageService  # noqa: E402
from helpbox.users.domain import User  # noqa: E402
from helpbox.users.infrastructure import SQLAlchemyUserRepository  # noqa: E402

DEFAULT_PASSWORD = "senha-secreta"


class FakeLLMClient:
    """
    Scripted stand-in for the upstream model.

    Each call pops the next item: a string is returned as the model output,
    an exception is raised. The last item repeats once the script runs out.
    """

    def __init__(self, *script: Union[str, Exception]):
        self.script: List[Union[str, Exception]] = list(script) or ["M|Reinicie o computador."]
        self.calls = 0
        self.prompts: List[str] = []

    async def generate(self, prompt: str, temperature: float = 0.1, max_tokens: int = 1000):
        self.calls += 1
        self.prompts.append(prompt)
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return ChatCompletionResult(
            content=item,
            model="fake-model",
            prompt_tokens=0,
            completion_tokens=0,
            latency_ms=0
        )


class RecordingSleep:
    """Replaces asyncio.sleep in the retry controller; records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def unavailable() -> LLMException:
    return LLMException("Service Unavailable", upstream_status=503)


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient("M|**Olá!** Reinicie o equipamento e tente novamente.")


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def triage_service(fake_llm, recording_sleep) -> TriageService:
    return TriageService(fake_llm, RetryController(sleep=recording_sleep))


@pytest_asyncio.fixture
async def database():
    """Fresh SQLite schema per test."""
    init_database(os.environ["DATABASE_URL"])
    await drop_tables()
    await create_tables()
    yield
    await drop_tables()
    await close_database()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture
def app(database, triage_service):
    from helpbox.main import app as fastapi_app
    from helpbox.tickets.interfaces import get_triage_service

    fastapi_app.dependency_overrides[get_triage_service] = lambda: triage_service
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def make_user(database):
    """Factory storing an account directly through the repository."""
    counter = {"n": 0}

    async def _make_user(
        access_level: AccessLevel = AccessLevel.CLIENT,
        first_name: str = "Ana",
        last_name: str = "Souza",
        email: str = None,
        password: str = DEFAULT_PASSWORD,
        department: str = "Financeiro",
        job_title: str = None,
    ) -> User:
        counter["n"] += 1
        email = email or f"user{counter['n']}@empresa.com.br"
        async with get_session_context() as session:
            user = await SQLAlchemyUserRepository(session).create(User(
                id=None,
                first_name=first_name,
                last_name=last_name,
                email=email,
                department=department,
                job_title=job_title,
                access_level=access_level,
                password_hash=hash_password(password),
            ))
        return user

    return _make_user


@pytest_asyncio.fixture
async def login(app):
    """Factory returning an AsyncClient carrying the session cookie of ``user``."""
    opened: List[AsyncClient] = []

    async def _login(user: User, password: str = DEFAULT_PASSWORD) -> AsyncClient:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as anonymous:
            resp = await anonymous.post("/auth/login", json={"email": user.email, "password": password})
        assert resp.status_code == 200, resp.text
        token = resp.cookies[settings.session_cookie_name]

        authed = AsyncClient(
            transport=transport,
            base_url="http://test",
            cookies={settings.session_cookie_name: token}
        )
        opened.append(authed)
        return authed

    yield _login

    for c in opened:
        await c.aclose()
