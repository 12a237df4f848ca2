from __future__ import annotations

import os

os.environ.setdefault("ENV", "test")

import datetime as dt  # noqa: E402
from collections.abc import Callable  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.db import session as db_session  # noqa: E402
from app.db.base_class import Base  # noqa: E402
from app.db.session import SessionLocal  # noqa: E402
from app.models import models  # noqa: E402
from app.services import token_service  # noqa: E402
from app.services.member_directory import MemberDirectory  # noqa: E402
from app.services.oauth import KakaoClient, KakaoMemberService  # noqa: E402
from app.services.token_service import InMemoryStore, SessionIssuer  # noqa: E402
from tests.fakes import KAKAO_CONFIG, FakeKakao  # noqa: E402

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")


test_engine = create_engine(
    TEST_DATABASE_URL,
    future=True,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Ensure application code uses the test engine
settings.DATABASE_URL = TEST_DATABASE_URL  # type: ignore[attr-defined]
settings.ENV = "test"  # type: ignore[attr-defined]
db_session.engine = test_engine  # type: ignore[assignment]
SessionLocal.configure(bind=test_engine)

@pytest.fixture(scope="session", autouse=True)
def _setup_database_schema():
    """Create all tables once for the test session and drop afterwards."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(autouse=True)
def _reset_database_state():
    """Ensure each test sees a fresh database schema."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield


@pytest.fixture(autouse=True)
def _in_memory_token_store(monkeypatch):
    """Keep refresh tokens out of Redis during tests."""
    store = InMemoryStore()
    monkeypatch.setattr(token_service, "_SHARED_STORE", store)
    return store


@pytest.fixture
def db_session():
    """Provide a transactional database session for tests."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture
def fake_kakao() -> FakeKakao:
    return FakeKakao()


@pytest.fixture
def kakao_client(fake_kakao) -> KakaoClient:
    return KakaoClient(KAKAO_CONFIG, transport=fake_kakao.transport())


@pytest.fixture
def token_store(_in_memory_token_store) -> InMemoryStore:
    return _in_memory_token_store


@pytest.fixture
def kakao_service(kakao_client, db_session, token_store) -> KakaoMemberService:
    return KakaoMemberService(
        client=kakao_client,
        directory=MemberDirectory(db_session),
        issuer=SessionIssuer(token_store),
    )


@pytest.fixture
def make_member(db_session) -> Callable[..., models.Member]:
    def _make(email: str = "new@x.com", is_kakao_email: bool = False, **overrides) -> models.Member:
        fields = {
            "email": email,
            "password": "local-password-hash",
            "name": "Local User",
            "gender": models.Gender.FEMALE,
            "birth": dt.date(1990, 1, 2),
            "phone_number": "01099998888",
            "is_kakao_email": is_kakao_email,
        }
        fields.update(overrides)
        member = models.Member(**fields)
        db_session.add(member)
        db_session.commit()
        db_session.refresh(member)
        return member

    return _make


# FastAPI TestClient fixture
from fastapi.testclient import TestClient  # noqa: E402
from app.api.main import app  # noqa: E402
from app.api.dependencies import DbDep  # noqa: E402
from app.api.routes_kakao import get_kakao_member_service  # noqa: E402


@pytest.fixture
def client(fake_kakao, token_store):
    """TestClient whose Kakao calls go to ``fake_kakao``."""

    def _service_override(db: DbDep) -> KakaoMemberService:
        return KakaoMemberService(
            client=KakaoClient(KAKAO_CONFIG, transport=fake_kakao.transport()),
            directory=MemberDirectory(db),
            issuer=SessionIssuer(token_store),
        )

    app.dependency_overrides[get_kakao_member_service] = _service_override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_kakao_member_service, None)
