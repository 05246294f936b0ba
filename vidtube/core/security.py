# vidtube/core/security.py
import uuid
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from vidtube.core.config import settings

ALGORITHM = "HS256"

# argon2 para todos los hashes nuevos
pwd_context = CryptContext(
    schemes=["argon2"],
    default="argon2",
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def _encode(claims: dict, secret: str, minutes: int) -> str:
    now = datetime.now(timezone.utc)
    # jti: dos tokens emitidos en el mismo segundo no deben coincidir
    payload = {**claims, "jti": uuid.uuid4().hex, "iat": now, "exp": now + timedelta(minutes=minutes)}
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def create_access_token(sub: str, *, username: str | None = None, email: str | None = None,
                        expires_minutes: int | None = None) -> str:
    claims = {"sub": sub, "type": "access", "username": username, "email": email}
    return _encode(claims, settings.SECRET_KEY, expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MIN)


def create_refresh_token(sub: str, expires_minutes: int | None = None) -> str:
    claims = {"sub": sub, "type": "refresh"}
    return _encode(claims, settings.REFRESH_SECRET_KEY, expires_minutes or settings.REFRESH_TOKEN_EXPIRE_MIN)


def _decode(token: str, secret: str, expected_type: str) -> str:
    payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    if payload.get("type") != expected_type:
        raise JWTError("wrong token type")
    sub = payload.get("sub")
    if not sub:
        raise JWTError("missing sub")
    return sub


def decode_access_token(token: str) -> str:
    return _decode(token, settings.SECRET_KEY, "access")


def decode_refresh_token(token: str) -> str:
    return _decode(token, settings.REFRESH_SECRET_KEY, "refresh")
