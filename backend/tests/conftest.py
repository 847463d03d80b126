from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from bookswap.auth.providers import StubIdentityProvider
from bookswap.config import Settings
from bookswap.database import enable_sqlite_foreign_keys
from bookswap.main import create_app
from bookswap.models.book import Book
from bookswap.models.user import User

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so ALL sessions share the same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. Foreign keys switched on so dangling references fail like production
# 4. The app is built with this engine, no dependency overrides needed
# 5. Tables are created per test and dropped afterwards
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine)

TEST_SETTINGS = Settings(database_url=TEST_DATABASE_URL, enable_stub_auth=True)


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on a freshly created schema"""
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="app")
def app_fixture():
    return create_app(
        settings=TEST_SETTINGS,
        engine=test_engine,
        identity_providers={StubIdentityProvider.id: StubIdentityProvider()},
    )


@pytest.fixture(name="client")
def client_fixture(session: Session, app):
    """Anonymous test client sharing the test database"""
    with TestClient(app) as client:
        yield client


@pytest.fixture(name="auth_client")
def auth_client_fixture(client: TestClient):
    """Test client signed in through the stub provider (session cookie kept by the client)"""
    response = client.post(
        "/api/auth/signin/stub",
        json={"account_id": "stub-caller", "name": "Caller", "email": "caller@example.com"},
    )
    assert response.status_code == 200, response.text
    return client


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session):
    def _make_user(name: str, user_id: Optional[str] = None) -> User:
        user = User(name=name) if user_id is None else User(id=user_id, name=name)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture(name="make_book")
def make_book_fixture(session: Session):
    def _make_book(owner: User, title: str, book_id: Optional[str] = None) -> Book:
        book = Book(owner_id=owner.id, title=title)
        if book_id is not None:
            book.id = book_id
        session.add(book)
        session.commit()
        session.refresh(book)
        return book

    return _make_book


@pytest.fixture(name="library")
def library_fixture(make_user, make_book):
    """Two users with two books each"""
    alice = make_user("Alice")
    bob = make_user("Bob")
    return {
        "alice": alice,
        "bob": bob,
        "alice_book": make_book(alice, "Dune"),
        "alice_book_2": make_book(alice, "Emma"),
        "bob_book": make_book(bob, "Ulysses"),
        "bob_book_2": make_book(bob, "Beloved"),
    }
