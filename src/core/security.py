"""Bearer token issuance and verification.

Tokens are stateless HS256 JWTs; logout is handled client-side by dropping
the token.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

import pytz
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.exceptions import AuthError


def create_access_token(
    data: dict, expires_delta: Optional[timedelta] = None
) -> Tuple[str, datetime]:
    """Create a JWT access token.

    Args:
        data: Claims to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Tuple of the encoded token and its expiration time.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(pytz.utc) + expires_delta
    else:
        expire = datetime.now(pytz.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)
    return encoded_jwt, expire


def decode_access_token(token: str) -> dict:
    """Decode and validate a JWT access token.

    Args:
        token: Encoded token string.

    Returns:
        Decoded token payload.

    Raises:
        AuthError: If the token is invalid, expired or has no subject.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as exc:
        raise AuthError("Invalid authentication credentials") from exc
    if payload.get("sub") is None:
        raise AuthError("Invalid authentication credentials")
    return payload
