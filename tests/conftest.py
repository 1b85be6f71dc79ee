import io
import os
import tempfile

# Point the app at a throwaway SQLite database and upload directory before it is imported
TEST_DIR = tempfile.mkdtemp(prefix="crowd-analyzer-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(TEST_DIR, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(TEST_DIR, "uploads")
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from PIL import Image

import models
from database import Base, engine, SessionLocal
from main import app, rate_limiter
from utils.security import hash_password, create_user_token


@pytest.fixture(autouse=True)
def reset_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    rate_limiter.reset()
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
    return TestClient(app)


def create_user(db, email="user@example.com", password="secret123", role="user", name="Test User", is_active=True):
    user = models.User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def user(db):
    return create_user(db)


@pytest.fixture
def admin(db):
    return create_user(db, email="admin@example.com", role="admin", name="Admin")


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (64, 48), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
