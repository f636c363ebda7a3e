import pytest

import credentials
import models
from errors import DuplicateEmail, InvalidCredentials, ValidationError


def test_register_creates_plain_user_with_hashed_password(db):
    identity = credentials.register(db, "Rahim", "rahim@example.com", "s3cret")

    assert identity.role == "user"
    assert identity.email == "rahim@example.com"
    assert "password" not in identity.model_dump()

    row = db.query(models.User).filter_by(email="rahim@example.com").one()
    assert row.password != "s3cret"
    assert row.password.startswith("$2")
    assert row.created_at is not None


def test_register_duplicate_email_fails_and_keeps_one_row(db):
    credentials.register(db, "Rahim", "rahim@example.com", "s3cret")

    with pytest.raises(DuplicateEmail):
        credentials.register(db, "Other", "rahim@example.com", "different")

    assert db.query(models.User).filter_by(email="rahim@example.com").count() == 1


def test_email_uniqueness_is_case_sensitive(db):
    credentials.register(db, "Lower", "case@example.com", "pw")
    upper = credentials.register(db, "Upper", "Case@example.com", "pw")
    assert upper.email == "Case@example.com"


def test_verify_returns_identity_with_role(db):
    credentials.ensure_user(db, "Admin", "admin@example.com", "adminpw", role="admin")

    identity = credentials.verify(db, "admin@example.com", "adminpw")
    assert identity.role == "admin"
    assert identity.name == "Admin"


def test_wrong_password_fails_after_successful_logins(db):
    credentials.register(db, "Rahim", "rahim@example.com", "s3cret")
    for _ in range(3):
        credentials.verify(db, "rahim@example.com", "s3cret")

    for _ in range(3):
        with pytest.raises(InvalidCredentials):
            credentials.verify(db, "rahim@example.com", "wrong")


def test_verify_unknown_email(db):
    with pytest.raises(InvalidCredentials):
        credentials.verify(db, "ghost@example.com", "whatever")


def test_overlong_password_is_rejected(db):
    with pytest.raises(ValidationError):
        credentials.register(db, "Long", "long@example.com", "x" * 100)


def test_check_password_tolerates_garbage_hash():
    assert credentials.check_password("pw", "not-a-bcrypt-hash") is False


def test_register_and_login_over_http(client):
    res = client.post("/auth/register", json={"name": "Karim", "email": "karim@example.com", "password": "pw"})
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["role"] == "user"
    assert body["token"]

    dup = client.post("/auth/register", json={"name": "Karim", "email": "karim@example.com", "password": "pw"})
    assert dup.status_code == 400
    assert dup.json()["detail"] == "Email already exists"

    ok = client.post("/auth/login", json={"email": "karim@example.com", "password": "pw"})
    assert ok.status_code == 200
    assert ok.json()["user"]["email"] == "karim@example.com"

    bad = client.post("/auth/login", json={"email": "karim@example.com", "password": "nope"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid credentials"
