import pytest
from jose import JWTError, jwt

from ticketpro.core.config import settings
from ticketpro.core.security import ALGO, create_access_token, decode_token, hash_password, verify_password


def test_password_hash_round_trip():
    h = hash_password("admin123")
    assert h != "admin123"
    assert verify_password("admin123", h)
    assert not verify_password("admin124", h)


def test_access_token_carries_subject_and_role():
    claims = decode_token(create_access_token("user-1", "manager"))
    assert claims["sub"] == "user-1"
    assert claims["role"] == "manager"


def test_other_token_types_rejected():
    token = jwt.encode({"sub": "user-1", "type": "refresh"}, settings.SECRET_KEY, algorithm=ALGO)
    with pytest.raises(JWTError):
        decode_token(token)


def test_expired_token_is_unauthorized(client, users):
    token = create_access_token(users["admin"].id, "admin", expires_minutes=-1)
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid or expired token"
