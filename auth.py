from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import ValidationError as SchemaError

import config
import schemas
from errors import Forbidden, InvalidToken, Unauthorized

# --------------------------- Bearer header ---------------------------
# auto_error=False: a missing header must surface as our own Unauthorized
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def issue_token(identity: schemas.Identity, secret: str | None = None) -> str:
    to_encode = {
        "id": identity.id,
        "name": identity.name,
        "email": identity.email,
        "role": identity.role,
    }
    if config.ACCESS_TOKEN_EXPIRE_MINUTES > 0:
        to_encode["exp"] = datetime.utcnow() + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(to_encode, secret or config.SECRET_KEY, algorithm=config.ALGORITHM)


def authenticate(token: str, secret: str | None = None) -> schemas.Identity:
    try:
        payload = jwt.decode(token, secret or config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        raise InvalidToken()
    try:
        return schemas.Identity.model_validate(payload)
    except SchemaError:
        raise InvalidToken()


def require_admin(identity: schemas.Identity) -> None:
    if identity.role != "admin":
        raise Forbidden()


# --------------------------- Dependencies ---------------------------
def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> schemas.Identity:
    if not token:
        raise Unauthorized()
    return authenticate(token)


def get_current_admin(user: schemas.Identity = Depends(get_current_user)) -> schemas.Identity:
    require_admin(user)
    return user
