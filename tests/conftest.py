"""Shared pytest fixtures: in-memory database, users and an API client."""

import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ['REDIS_URL'] = ''

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.auth import jwt_handler  # noqa: E402
from backend.auth.passwords import hash_password  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.models.appointment import Appointment  # noqa: E402
from backend.models.file import File  # noqa: E402
from backend.models.notification import Notification  # noqa: E402
from backend.models.user import User  # noqa: E402

TABLES = [File.__table__, User.__table__, Appointment.__table__, Notification.__table__]


class FakeMailQueue:
    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.jobs: list[tuple[str, dict]] = []

    def enqueue(self, job_kind: str, payload: dict) -> bool:
        self.jobs.append((job_kind, payload))
        return self.accept


@pytest.fixture
def db():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=TABLES)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine, tables=list(reversed(TABLES)))
        engine.dispose()


@pytest.fixture
def make_user(db):
    def _make_user(name: str, email: str, provider: bool = False, password: str = 'secret123') -> User:
        user = User(name=name, email=email, hashed_password=hash_password(password), provider=provider)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def client_user(make_user) -> User:
    return make_user('Ana Cliente', 'ana@example.com')


@pytest.fixture
def provider_user(make_user) -> User:
    return make_user('Bruno Barbeiro', 'bruno@example.com', provider=True)


@pytest.fixture
def mail_queue() -> FakeMailQueue:
    return FakeMailQueue()


@pytest.fixture
def api_client(db, mail_queue, monkeypatch: pytest.MonkeyPatch):
    from backend.main import app

    monkeypatch.setattr('backend.routes.appointment_routes.ensure_database_ready', lambda: None)
    monkeypatch.setattr('backend.routes.appointment_routes.get_mail_queue', lambda: mail_queue)
    monkeypatch.setattr('backend.routes.availability_routes.ensure_database_ready', lambda: None)

    def _get_test_db():
        yield db

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        return {'Authorization': f'Bearer {jwt_handler.create_access_token(user.id)}'}

    return _auth_headers
