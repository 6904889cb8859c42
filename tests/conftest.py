"""
Shared fixtures: in-memory database, API client and seeded users.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.pop("REDIS_URL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import User, UserTimeInterval  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def pending_user(db) -> User:
    """A user as left by the claim-username step"""
    user = User(name="Diego Fernandes", username="diego")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_interval(db, user: User, week_day: int, start_hour: int, end_hour: int) -> UserTimeInterval:
    interval = UserTimeInterval(
        user_id=user.id,
        week_day=week_day,
        time_start_in_minutes=start_hour * 60,
        time_end_in_minutes=end_hour * 60,
    )
    db.add(interval)
    db.commit()
    return interval
