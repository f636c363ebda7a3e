import logging

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
import models
import schemas
from errors import DuplicateEmail, InvalidCredentials, ValidationError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValidationError("Password is too long")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def get_user_by_email(db: Session, email: str) -> models.User | None:
    return db.query(models.User).filter(models.User.email == email).first()


def register(db: Session, name: str, email: str, password: str) -> schemas.Identity:
    if get_user_by_email(db, email):
        raise DuplicateEmail()
    user = models.User(name=name, email=email, password=hash_password(password), role="user")
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against another registration with the same email
        db.rollback()
        raise DuplicateEmail()
    db.refresh(user)
    logger.info("Registered user %s (id=%s)", email, user.id)
    return schemas.Identity.model_validate(user)


def verify(db: Session, email: str, password: str) -> schemas.Identity:
    user = get_user_by_email(db, email)
    if not user or not check_password(password, user.password):
        logger.info("Failed login for %s", email)
        raise InvalidCredentials()
    return schemas.Identity.model_validate(user)


def ensure_user(db: Session, name: str, email: str, password: str, role: str = "user") -> models.User:
    """Create the user unless the email is taken. Used for seeding."""
    user = get_user_by_email(db, email)
    if user:
        return user
    user = models.User(name=name, email=email, password=hash_password(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Seeded %s user %s", role, email)
    return user
