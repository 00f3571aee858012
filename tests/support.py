"""Shared test cases: in-memory SQLite database and an API client bound to it."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_token_service, hash_password
from app.main import app
from app.models import ROLE_ADMIN, ROLE_COLLABORATOR, Base, User
from app.schemas.auth import UserIdentity

DEFAULT_PASSWORD = "correct-horse-battery"


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory database per test, with helpers to create accounts."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite+pysqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db: Session = self.SessionTesting()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def add_user(
        self,
        username: str = "tech1",
        password: str = DEFAULT_PASSWORD,
        role: str = ROLE_COLLABORATOR,
        **fields: object,
    ) -> User:
        values: dict[str, object] = {
            "name": username.title(),
            "email": f"{username}@example.com",
        }
        values.update(fields)
        user = User(
            username=username,
            password_hash=hash_password(password),
            role=role,
            **values,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def add_admin(self, username: str = "admin", **fields: object) -> User:
        return self.add_user(username=username, role=ROLE_ADMIN, **fields)

    def reload(self, user: User) -> User:
        """Re-read user from the database after another session changed it."""
        self.db.refresh(user)
        return user


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db yields sessions on the test database."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()
        super().tearDown()

    def login(self, username: str, password: str = DEFAULT_PASSWORD):
        return self.client.post(
            "/api/auth/login",
            json={"username": username, "password": password},
        )

    def sign_in_as(self, user: User) -> str:
        """Put a valid session cookie for user in the client's jar without calling /login."""
        token = get_token_service().issue(UserIdentity.model_validate(user))
        self.client.cookies.set(settings.SESSION_COOKIE_NAME, token)
        return token
