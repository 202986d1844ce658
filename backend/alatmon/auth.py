from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass
import logging

from .config import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRE_HOURS, PASSWORD_HASH_METHOD
from .errors import MissingToken, InvalidToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Claims:
    username: str
    email: str


def hash_password(password: str) -> str:
    return generate_password_hash(password, method=PASSWORD_HASH_METHOD)

def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def create_token(user, hours: int = JWT_EXPIRE_HOURS):
    now = datetime.now(timezone.utc)
    payload = {
        "username": user.username,
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(hours=hours),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

def decode_token(token: str) -> Claims:
    try:
        data = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        return Claims(username=data["username"], email=data["email"])
    except (JWTError, KeyError) as exc:
        logger.warning("rejected token: %s", exc)
        raise InvalidToken() from exc


# auto_error=False so a missing header maps to MissingToken instead of FastAPI's 403
security = HTTPBearer(auto_error=False)

def require_session(token: HTTPAuthorizationCredentials | None = Depends(security)) -> Claims:
    if token is None or not token.credentials:
        raise MissingToken()
    return decode_token(token.credentials)
