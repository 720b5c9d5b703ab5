from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from ticketpro.core.config import settings

# PBKDF2 avoids bcrypt backend/version issues and the 72-byte bcrypt input limit.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
ALGO = "HS256"
TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: str, role: str, expires_minutes: int | None = None) -> str:
    """Bearer token for the API. The role rides along for the client; the server re-reads it from the user row."""
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    issued = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "role": role,
        "type": TOKEN_TYPE,
        "iat": issued,
        "exp": issued + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGO)


def decode_token(token: str) -> dict:
    claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGO])
    if claims.get("type") != TOKEN_TYPE or not claims.get("sub"):
        raise JWTError("Not an access token")
    return claims
