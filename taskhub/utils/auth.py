"""
Password hashing and JWT helpers.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from starlette.concurrency import run_in_threadpool

from taskhub.config import settings
from taskhub.exceptions import InvalidTokenError
from taskhub.models.user import TokenData


async def get_password_hash(password: str) -> str:
    """Hash a plaintext password with a fresh bcrypt salt, off the event loop."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = await run_in_threadpool(bcrypt.hashpw, password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


async def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return await run_in_threadpool(
            bcrypt.checkpw,
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to embed; must carry the user id under "sub"
        expires_delta: Token lifetime, defaults to JWT_EXPIRES_IN seconds

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.JWT_EXPIRES_IN)

    to_encode = {
        **data,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp())
    }

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def verify_token(token: str) -> TokenData:
    """
    Decode and validate a JWT access token.

    Args:
        token: Encoded JWT string

    Returns:
        TokenData with the user id and email

    Raises:
        InvalidTokenError: If the token is malformed, forged, expired
            or carries no subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired") from e
    except JWTError as e:
        raise InvalidTokenError(f"Token verification failed: {e}") from e

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise InvalidTokenError("Token has no subject")

    return TokenData(user_id=user_id, email=payload.get("email"))
