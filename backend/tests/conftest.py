"""
Shared fixtures. DATABASE_URL points at a throw-away SQLite file before any app module is imported;
the schema is dropped and recreated for every test.
"""
import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="store-ratings-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("ALLOW_ADMIN_SELF_REGISTRATION", None)
os.environ.pop("ENV", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.database import Base, SessionLocal, engine, init_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.auth import create_access_token  # noqa: E402
from app.services.users import create_user  # noqa: E402

PASSWORD = "Secret#Pass1"
USER_NAME = "Regular User With A Long Name"
OWNER_NAME = "Jonathan Micheal Anderson Smith"
ADMIN_NAME = "Site Administrator Account"
ADDRESS = "12 Market Street, Springfield"


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    """Factory: create a user with the given role; email defaults to <role>-<n>@example.com."""
    counter = {"n": 0}

    def _make(role: str = "user", name: str | None = None, email: str | None = None, password: str = PASSWORD) -> User:
        counter["n"] += 1
        default_name = {"admin": ADMIN_NAME, "store_owner": OWNER_NAME}.get(role, USER_NAME)
        return create_user(
            db,
            name=name or default_name,
            email=email or f"{role.replace('_', '-')}-{counter['n']}@example.com",
            address=ADDRESS,
            password=password,
            role=role,
        )

    return _make


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}
