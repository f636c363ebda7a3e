import os
import tempfile

# must be set before the app modules read their configuration
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="digiforest-uploads-"))
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import credentials
import models
import schemas
from auth import issue_token
from database import Base, get_db
from main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, email="buyer@example.com", role="user", name="Buyer", password="pw12345"):
    user = credentials.ensure_user(db, name, email, password, role=role)
    return schemas.Identity.model_validate(user)


def make_product(db, title="Template", price=49.0, category_id=None, file_url="https://cdn.example.com/t.zip"):
    product = models.Product(
        title=title,
        price=price,
        category_id=category_id,
        file_url=file_url,
        thumbnail="https://cdn.example.com/t.png",
        author_name="DigiForest",
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def bearer(identity):
    return {"Authorization": f"Bearer {issue_token(identity)}"}


@pytest.fixture
def buyer(db):
    return make_user(db)


@pytest.fixture
def admin(db):
    return make_user(db, email="admin@example.com", role="admin", name="Admin")


@pytest.fixture
def buyer_headers(buyer):
    return bearer(buyer)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)
