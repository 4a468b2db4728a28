from __future__ import annotations
import secrets
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from pwdlib import PasswordHash
from .config import settings

password_hash = PasswordHash.recommended()


def generate_salt(nbytes=16):
    return secrets.token_hex(nbytes)


def get_password_hash(password, salt):
    return password_hash.hash(password, salt=salt.encode())


def verify_password(plain_password, password):
    return password_hash.verify(plain_password, password)


def create_access_token(data: dict, expires_delta: timedelta | None = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> dict | None:
    """Return the token claims, or None when the signature or expiry is invalid."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def generate_signature(customer) -> str:
    return create_access_token(
        data={"id": customer.id, "email": customer.email, "verified": customer.verified}
    )
